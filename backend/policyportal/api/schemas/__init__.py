"""API schema package."""

from policyportal.api.schemas.auth import CurrentUserResponse
from policyportal.api.schemas.common import CamelModel, ProfileSummary, SuccessResponse
from policyportal.api.schemas.families import (
    FamilyDataResponse,
    FamilyMemberOut,
    FamilyOut,
    PolicyOut,
)
from policyportal.api.schemas.policy_requests import PolicyRequestOut

__all__ = [
    "CamelModel",
    "CurrentUserResponse",
    "FamilyDataResponse",
    "FamilyMemberOut",
    "FamilyOut",
    "PolicyOut",
    "PolicyRequestOut",
    "ProfileSummary",
    "SuccessResponse",
]
