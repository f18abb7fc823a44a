"""Admin allow-list: the fixed set of emails granted cross-family access."""

from __future__ import annotations

from collections.abc import Mapping


class AdminAllowList:
    """
    Email → display-name lookup, built once from configuration.

    Emails are compared case-insensitively.
    """

    def __init__(self, accounts: Mapping[str, str]) -> None:
        self._accounts = {
            email.strip().lower(): name for email, name in accounts.items()
        }

    def __contains__(self, email: object) -> bool:
        return isinstance(email, str) and email.strip().lower() in self._accounts

    def __len__(self) -> int:
        return len(self._accounts)

    def is_admin(self, email: str | None) -> bool:
        return bool(email) and email in self

    def display_name(self, email: str) -> str:
        """Name recorded in admin_users for this email."""
        return self._accounts[email.strip().lower()]
