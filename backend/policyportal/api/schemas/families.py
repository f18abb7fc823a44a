"""Family, member and aggregate view schemas."""

from __future__ import annotations

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from policyportal.api.schemas.common import CamelModel, ProfileSummary, RequiredStr


# ─── Row views ────────────────────────────────────────────


class FamilyMemberOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    family_id: UUID
    user_id: UUID
    relationship: str | None = None
    is_primary: bool
    joined_at: datetime
    profile: ProfileSummary


class PolicyOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    family_id: UUID
    policy_holder_id: UUID
    policy_number: str | None = None
    policy_type: str
    insurance_company: str | None = None
    premium_amount: float | None = None
    coverage_amount: float | None = None
    start_date: date | None = None
    end_date: date | None = None
    status: str
    created_at: datetime
    holder: ProfileSummary | None = None


class FamilyOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    family_name: str
    primary_contact_email: str
    created_by: UUID | None = None
    created_at: datetime
    family_members: list[FamilyMemberOut] = Field(default_factory=list)


# ─── create-family ────────────────────────────────────────


class FamilyMemberIn(BaseModel):
    name: str = ""
    email: str = ""
    relationship: str | None = None


class CreateFamilyRequest(CamelModel):
    family_name: RequiredStr
    primary_email: RequiredStr
    members: list[FamilyMemberIn] = Field(default_factory=list)


class MemberReport(BaseModel):
    """One requested member and, when skipped, why."""

    name: str
    email: str
    relationship: str | None = None
    reason: str | None = None


class FamilySummaryOut(CamelModel):
    id: UUID
    name: str
    primary_email: str


class CreateFamilyResponse(CamelModel):
    success: bool = True
    message: str = "Family created successfully"
    family: FamilySummaryOut
    added_members: list[MemberReport]
    skipped_members: list[MemberReport]


# ─── Aggregate reads ──────────────────────────────────────


class FamilyDetailsRequest(CamelModel):
    family_id: UUID


class ClientFamilyDataRequest(CamelModel):
    user_id: RequiredStr


class FamilyDataResponse(CamelModel):
    success: bool = True
    family: FamilyOut | None = None
    policies: list[PolicyOut] = Field(default_factory=list)


class SearchFamiliesRequest(CamelModel):
    search_term: RequiredStr


class SearchFamiliesResponse(CamelModel):
    success: bool = True
    families: list[FamilyOut]


# ─── Member management ────────────────────────────────────


class AddFamilyMemberRequest(CamelModel):
    family_id: UUID
    user_id: UUID
    relationship: str | None = None
    is_primary: bool = False


class FamilyMemberResponse(CamelModel):
    success: bool = True
    message: str
    member: FamilyMemberOut


class RemoveFamilyMemberRequest(CamelModel):
    family_id: UUID
    member_id: UUID


class SearchProfilesRequest(CamelModel):
    search_term: RequiredStr
    family_id: UUID | None = None


class ProfilesResponse(CamelModel):
    success: bool = True
    profiles: list[ProfileSummary]
