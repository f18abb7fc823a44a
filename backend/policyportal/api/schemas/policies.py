"""Policy request/response schemas."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from policyportal.api.schemas.common import CamelModel, RequiredStr
from policyportal.api.schemas.families import PolicyOut
from policyportal.core.constants import PolicyStatus

_OPTIONAL_POLICY_FIELDS = (
    "policy_number",
    "insurance_company",
    "premium_amount",
    "coverage_amount",
    "start_date",
    "end_date",
)


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class PolicyFields(BaseModel):
    """
    Policy attributes as carried in a policy request payload.

    Everything is optional here; which fields are required depends on
    the request type and is checked by the workflow service.
    """

    model_config = ConfigDict(extra="ignore")

    policy_holder_id: UUID | None = None
    policy_type: str | None = None
    policy_number: str | None = None
    insurance_company: str | None = None
    premium_amount: Decimal | None = Field(default=None, ge=0)
    coverage_amount: Decimal | None = Field(default=None, ge=0)
    start_date: date | None = None
    end_date: date | None = None

    @field_validator("*", mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        return _blank_to_none(value)


class CreatePolicyRequest(CamelModel):
    family_id: UUID
    policy_holder_id: UUID
    policy_type: RequiredStr
    policy_number: str | None = None
    insurance_company: str | None = None
    premium_amount: Decimal | None = Field(default=None, ge=0)
    coverage_amount: Decimal | None = Field(default=None, ge=0)
    start_date: date | None = None
    end_date: date | None = None
    status: PolicyStatus | None = None

    @field_validator(*_OPTIONAL_POLICY_FIELDS, "status", mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        return _blank_to_none(value)


class UpdatePolicyRequest(CamelModel):
    """Only fields present in the body are written; explicit null clears."""

    policy_id: UUID
    policy_holder_id: UUID | None = None
    policy_type: str | None = None
    policy_number: str | None = None
    insurance_company: str | None = None
    premium_amount: Decimal | None = Field(default=None, ge=0)
    coverage_amount: Decimal | None = Field(default=None, ge=0)
    start_date: date | None = None
    end_date: date | None = None
    status: PolicyStatus | None = None

    @field_validator(*_OPTIONAL_POLICY_FIELDS, "policy_type", "status", mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        return _blank_to_none(value)

    def changes(self) -> dict[str, Any]:
        return self.model_dump(
            include=self.model_fields_set - {"policy_id"},
        )


class DeletePolicyRequest(CamelModel):
    policy_id: UUID


class PolicyResponse(CamelModel):
    success: bool = True
    message: str
    policy: PolicyOut
