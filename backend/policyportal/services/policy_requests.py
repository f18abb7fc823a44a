"""
Policy request workflow.

States::

    pending ──approve──▶ approved
       │
       └────reject────▶ rejected

Clients submit requests against their own family; admins review them.
Approving a ``new_policy`` request is the only transition that writes a
policy. Approved ``edit_policy`` / ``delete_policy`` requests are recorded
but not applied to the target policy.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from policyportal.api.schemas.common import ProfileSummary
from policyportal.api.schemas.families import PolicyOut
from policyportal.api.schemas.policies import PolicyFields
from policyportal.api.schemas.policy_requests import (
    PolicyRequestOut,
    ReviewPolicyRequest,
    SubmitPolicyRequest,
)
from policyportal.core.constants import (
    PolicyStatus,
    RequestStatus,
    RequestType,
    ReviewDecision,
)
from policyportal.core.errors import (
    BadRequestError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
)
from policyportal.core.identity import Identity
from policyportal.core.logging import get_logger
from policyportal.db.models.policy_request import PolicyRequest
from policyportal.repositories import families as family_repository
from policyportal.repositories import policies as policy_repository
from policyportal.repositories import policy_requests as request_repository
from policyportal.repositories import profiles as profile_repository
from policyportal.services.family_assembly import policy_view

logger = get_logger(__name__)


@dataclass
class ReviewOutcome:
    """Result of an admin decision on a request."""

    request: PolicyRequestOut
    policy: PolicyOut | None = None

    @property
    def policy_applied(self) -> bool:
        return self.policy is not None


def request_view(request: PolicyRequest) -> PolicyRequestOut:
    return PolicyRequestOut(
        id=request.id,
        family_id=request.family_id,
        family_name=request.family.family_name if request.family else None,
        requested_by=request.requested_by,
        requester=ProfileSummary.from_profile(request.requester, request.requested_by),
        request_type=request.request_type,
        policy_id=request.policy_id,
        request_data=request.request_data or {},
        status=request.status,
        admin_notes=request.admin_notes,
        reviewed_by=request.reviewed_by,
        reviewed_at=request.reviewed_at,
        created_at=request.created_at,
    )


def _parse_payload(request_data: dict[str, Any]) -> PolicyFields:
    try:
        return PolicyFields.model_validate(request_data)
    except ValidationError as exc:
        raise BadRequestError(
            "Invalid request data",
            details=exc.errors(include_url=False, include_context=False),
        ) from exc


async def submit_request(
    db: AsyncSession,
    identity: Identity,
    body: SubmitPolicyRequest,
) -> PolicyRequestOut:
    """
    Record a client's change request as pending.

    Required fields by type:
        new_policy     request_data.policy_holder_id, request_data.policy_type
        edit_policy    policy_id, request_data.policy_holder_id
        delete_policy  policy_id (holder defaults to the policy's holder)

    A holder given in the payload must be a member of the family.
    """
    membership = await family_repository.get_membership(db, body.family_id, identity.user_id)
    if membership is None:
        raise ForbiddenError("Not a member of this family")

    fields = _parse_payload(body.request_data)
    request_data = dict(body.request_data)

    missing: list[str] = []
    if body.request_type == RequestType.NEW_POLICY:
        if fields.policy_holder_id is None:
            missing.append("request_data.policy_holder_id")
        if not fields.policy_type:
            missing.append("request_data.policy_type")
    else:
        if body.policy_id is None:
            missing.append("policy_id")
        if body.request_type == RequestType.EDIT_POLICY and fields.policy_holder_id is None:
            missing.append("request_data.policy_holder_id")
    if missing:
        raise BadRequestError("Missing required fields", details=missing)

    if body.policy_id is not None:
        policy = await policy_repository.get_policy(db, body.policy_id)
        if policy is None or policy.family_id != body.family_id:
            raise NotFoundError("Policy not found")
        if fields.policy_holder_id is None:
            request_data["policy_holder_id"] = str(policy.policy_holder_id)

    if fields.policy_holder_id is not None:
        holder = await family_repository.get_membership(db, body.family_id, fields.policy_holder_id)
        if holder is None:
            raise BadRequestError("Policy holder is not a member of this family")

    policy_id = body.policy_id if body.request_type != RequestType.NEW_POLICY else None
    request_data["family_id"] = str(body.family_id)

    request = await request_repository.create_request(
        db,
        family_id=body.family_id,
        requested_by=identity.user_id,
        request_type=body.request_type.value,
        policy_id=policy_id,
        request_data=request_data,
    )
    logger.info(
        "Policy request submitted",
        request_id=str(request.id),
        request_type=request.request_type,
        family_id=str(body.family_id),
        requested_by=identity.id,
    )

    stored = await request_repository.get_request(db, request.id)
    return request_view(stored)


async def review_request(
    db: AsyncSession,
    reviewer: Identity,
    body: ReviewPolicyRequest,
) -> ReviewOutcome:
    """
    Approve or reject a pending request.

    A request that is no longer pending raises ConflictError and is left
    exactly as the first review set it.
    """
    request = await request_repository.get_request(db, body.request_id)
    if request is None:
        raise NotFoundError("Policy request not found")

    log = logger.bind(request_id=str(request.id), request_type=request.request_type)

    if request.status != RequestStatus.PENDING:
        log.info("Review refused, request already decided", status=request.status)
        raise ConflictError(
            "Policy request has already been reviewed",
            details={"status": request.status},
        )

    # Parse before writing so a bad payload rejects the whole review
    fields = None
    if body.decision == ReviewDecision.APPROVED and request.request_type == RequestType.NEW_POLICY:
        fields = _parse_payload(request.request_data or {})
        if fields.policy_holder_id is None or not fields.policy_type:
            raise BadRequestError(
                "Request data is missing policy_holder_id or policy_type",
            )
        if await profile_repository.get_profile(db, fields.policy_holder_id) is None:
            log.warning("Approval refused, policy holder has no profile")
            raise BadRequestError("Failed to create policy", details="Policy holder not found")

    updated = await request_repository.mark_reviewed(
        db,
        request.id,
        status=body.decision.value,
        reviewed_by=reviewer.user_id,
        admin_notes=body.admin_notes,
    )
    if not updated:
        log.warning("Concurrent review detected, request no longer pending")
        raise ConflictError("Policy request has already been reviewed")

    log.info("Policy request reviewed", decision=body.decision.value, reviewer=reviewer.id)

    policy_out = None
    if fields is not None:
        policy = await policy_repository.create_policy(
            db,
            family_id=request.family_id,
            policy_holder_id=fields.policy_holder_id,
            policy_type=fields.policy_type,
            status=PolicyStatus.ACTIVE.value,
            policy_number=fields.policy_number,
            insurance_company=fields.insurance_company,
            premium_amount=fields.premium_amount,
            coverage_amount=fields.coverage_amount,
            start_date=fields.start_date,
            end_date=fields.end_date,
        )
        log.info("Policy created from approved request", policy_id=str(policy.id))
        policy_out = policy_view(await policy_repository.get_policy_with_holder(db, policy.id))
    elif body.decision == ReviewDecision.APPROVED:
        # TODO: apply approved edit_policy/delete_policy requests once the
        # expected semantics are confirmed with the business side.
        log.warning(
            "Approved request not applied to policy",
            policy_id=str(request.policy_id) if request.policy_id else None,
        )

    reviewed = await request_repository.get_request(db, request.id)
    return ReviewOutcome(request=request_view(reviewed), policy=policy_out)


async def list_requests(
    db: AsyncSession,
    *,
    status: RequestStatus | None = None,
) -> list[PolicyRequestOut]:
    """All requests for the admin queue, newest first."""
    requests = await request_repository.list_requests(
        db, status=status.value if status else None
    )
    return [request_view(r) for r in requests]


async def list_family_requests(
    db: AsyncSession,
    identity: Identity,
    user_id: str,
) -> list[PolicyRequestOut]:
    """Requests of the caller's own family, newest first."""
    if user_id.strip().lower() != identity.id.lower():
        raise ForbiddenError("Unauthorized access to user data")

    memberships = await family_repository.list_memberships_for_user(db, identity.user_id)
    if not memberships:
        return []

    requests = await request_repository.list_requests(db, family_id=memberships[0].family_id)
    return [request_view(r) for r in requests]
