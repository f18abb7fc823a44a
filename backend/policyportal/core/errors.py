"""
Domain exception hierarchy for the portal.

Every exception inherits from PortalError and carries the HTTP status it
maps to, so services can raise without knowing about FastAPI and the
handlers in ``main.py`` render a uniform ``{"error", "details"}`` body.
"""

from __future__ import annotations

from typing import Any


class PortalError(Exception):
    """Base exception for all portal errors."""

    status_code: int = 500

    def __init__(self, message: str, *, details: Any = None) -> None:
        self.message = message
        self.details = details
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class UnauthenticatedError(PortalError):
    """Bearer token missing or rejected by the identity provider."""

    status_code = 401


class ForbiddenError(PortalError):
    """Authenticated, but not allowed to perform this operation."""

    status_code = 403


class BadRequestError(PortalError):
    """A required field is missing or a value is invalid."""

    status_code = 400


class NotFoundError(PortalError):
    """A referenced family, member, policy or request does not exist."""

    status_code = 404


class ConflictError(PortalError):
    """The target is not in a state that allows the operation."""

    status_code = 409


class InternalError(PortalError):
    """Store or configuration failure."""

    status_code = 500


class IdentityProviderError(PortalError):
    """A call to the identity provider failed."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        details: Any = None,
    ) -> None:
        self.upstream_status = status_code
        super().__init__(message, details=details)

    @property
    def is_client_error(self) -> bool:
        """True when the provider rejected the input rather than failing."""
        return self.upstream_status is not None and 400 <= self.upstream_status < 500
