"""Current-identity introspection schemas."""

from __future__ import annotations

from policyportal.api.schemas.common import CamelModel, ProfileSummary


class CurrentUserResponse(CamelModel):
    """Who the bearer token belongs to and whether they are an admin."""

    success: bool = True
    user_id: str
    email: str | None
    is_admin: bool
    profile: ProfileSummary | None = None
