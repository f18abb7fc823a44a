"""Shared schema building blocks."""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, ConfigDict, StringConstraints
from pydantic.alias_generators import to_camel

from policyportal.core.constants import UNKNOWN_FIRST_NAME, UNKNOWN_LAST_NAME
from policyportal.db.models.profile import Profile

RequiredStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class CamelModel(BaseModel):
    """Request/response envelope: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProfileSummary(BaseModel):
    """Name and email of a profile, or the "Unknown User" placeholder."""

    id: UUID | None = None
    first_name: str
    last_name: str
    email: str = ""

    @classmethod
    def unknown(cls, profile_id: UUID | None = None) -> ProfileSummary:
        return cls(
            id=profile_id,
            first_name=UNKNOWN_FIRST_NAME,
            last_name=UNKNOWN_LAST_NAME,
            email="",
        )

    @classmethod
    def from_profile(
        cls,
        profile: Profile | None,
        profile_id: UUID | None = None,
    ) -> ProfileSummary:
        """Summarize `profile`, falling back to the placeholder when missing."""
        if profile is None:
            return cls.unknown(profile_id)
        return cls(
            id=profile.id,
            first_name=profile.first_name or "",
            last_name=profile.last_name or "",
            email=profile.email or "",
        )


class SuccessResponse(CamelModel):
    success: bool = True
    message: str
