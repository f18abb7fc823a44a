"""Account provisioning schemas."""

from __future__ import annotations

from pydantic import Field

from policyportal.api.schemas.common import CamelModel, RequiredStr


class CreateUserRequest(CamelModel):
    email: RequiredStr
    password: str = Field(..., min_length=1, max_length=256)
    first_name: RequiredStr
    last_name: RequiredStr


class CreatedUserOut(CamelModel):
    id: str
    email: str | None
    first_name: str
    last_name: str


class CreateUserResponse(CamelModel):
    success: bool = True
    message: str = "User account created successfully"
    user: CreatedUserOut
    profile_synced: bool
