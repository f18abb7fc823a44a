"""Policy request workflow schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from policyportal.api.schemas.common import CamelModel, ProfileSummary, RequiredStr
from policyportal.api.schemas.families import PolicyOut
from policyportal.core.constants import RequestStatus, RequestType, ReviewDecision


class PolicyRequestOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    family_id: UUID
    family_name: str | None = None
    requested_by: UUID
    requester: ProfileSummary
    request_type: RequestType
    policy_id: UUID | None = None
    request_data: dict[str, Any]
    status: RequestStatus
    admin_notes: str | None = None
    reviewed_by: UUID | None = None
    reviewed_at: datetime | None = None
    created_at: datetime


class SubmitPolicyRequest(CamelModel):
    request_type: RequestType
    family_id: UUID
    policy_id: UUID | None = None
    request_data: dict[str, Any] = Field(default_factory=dict)


class ReviewPolicyRequest(CamelModel):
    request_id: UUID
    decision: ReviewDecision
    admin_notes: str | None = None


class ListPolicyRequestsRequest(CamelModel):
    status: RequestStatus | None = None


class ClientPolicyRequestsRequest(CamelModel):
    user_id: RequiredStr


class PolicyRequestResponse(CamelModel):
    success: bool = True
    message: str
    request: PolicyRequestOut


class ReviewPolicyRequestResponse(CamelModel):
    success: bool = True
    message: str
    request: PolicyRequestOut
    policy: PolicyOut | None = None
    policy_applied: bool


class PolicyRequestListResponse(CamelModel):
    success: bool = True
    requests: list[PolicyRequestOut]
