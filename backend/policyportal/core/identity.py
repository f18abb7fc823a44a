"""
HTTP client for the hosted identity provider (Supabase Auth).

Only two primitives are used:
    - resolve the user behind a bearer token   GET  /auth/v1/user
    - create a confirmed account (admin)       POST /auth/v1/admin/users

Both calls authenticate the service itself with the service-role key.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any

import httpx

from policyportal.core.errors import IdentityProviderError
from policyportal.core.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Identity:
    """An account as reported by the identity provider."""

    id: str
    email: str | None = None
    user_metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def user_id(self) -> uuid.UUID:
        """Account id as a UUID. Raises ValueError for a malformed id."""
        return uuid.UUID(self.id)

    def has_uuid_id(self) -> bool:
        try:
            uuid.UUID(self.id)
        except ValueError:
            return False
        return True

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "Identity":
        return cls(
            id=str(payload["id"]),
            email=payload.get("email"),
            user_metadata=payload.get("user_metadata") or {},
        )


class SupabaseAuthClient:
    """Handles authenticated HTTP calls to the Supabase Auth REST API."""

    def __init__(
        self,
        base_url: str,
        service_role_key: str,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.service_role_key = service_role_key
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=f"{self.base_url}/auth/v1",
            headers={"apikey": self.service_role_key},
            timeout=self.timeout,
            transport=self._transport,
        )

    async def get_user(self, token: str) -> Identity | None:
        """Resolve the account behind an access token. None if rejected."""
        try:
            async with self._client() as client:
                response = await client.get(
                    "/user",
                    headers={"Authorization": f"Bearer {token}"},
                )
        except httpx.HTTPError as exc:
            raise IdentityProviderError(
                "Identity provider unreachable", details=str(exc)
            ) from exc

        if response.status_code in (401, 403, 404):
            return None
        if response.is_error:
            raise IdentityProviderError(
                "Identity provider error",
                status_code=response.status_code,
                details=_error_message(response),
            )

        payload = response.json()
        if not payload or not payload.get("id"):
            return None
        return Identity.from_payload(payload)

    async def create_user(
        self,
        *,
        email: str,
        password: str,
        user_metadata: dict[str, Any] | None = None,
    ) -> Identity:
        """Create a pre-confirmed account. Raises IdentityProviderError."""
        body = {
            "email": email,
            "password": password,
            "email_confirm": True,
            "user_metadata": user_metadata or {},
        }
        try:
            async with self._client() as client:
                response = await client.post(
                    "/admin/users",
                    json=body,
                    headers={"Authorization": f"Bearer {self.service_role_key}"},
                )
        except httpx.HTTPError as exc:
            raise IdentityProviderError(
                "Identity provider unreachable", details=str(exc)
            ) from exc

        if response.is_error:
            raise IdentityProviderError(
                "Identity provider rejected account creation",
                status_code=response.status_code,
                details=_error_message(response),
            )

        payload = response.json()
        # Some deployments wrap the account as {"user": {...}}
        if "user" in payload and isinstance(payload["user"], dict):
            payload = payload["user"]
        if not payload.get("id"):
            raise IdentityProviderError("User creation failed", details=payload)

        logger.info("Identity created", user_id=payload["id"])
        return Identity.from_payload(payload)


def _error_message(response: httpx.Response) -> str:
    """Best-effort human-readable error from a provider response."""
    try:
        payload = response.json()
    except ValueError:
        return response.text
    if isinstance(payload, dict):
        for key in ("msg", "message", "error_description", "error"):
            if payload.get(key):
                return str(payload[key])
    return response.text
