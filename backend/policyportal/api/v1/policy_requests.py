"""Policy request workflow endpoints: client submission and admin review."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from policyportal.api.deps import get_current_identity, get_db, require_admin
from policyportal.api.schemas.policy_requests import (
    ClientPolicyRequestsRequest,
    ListPolicyRequestsRequest,
    PolicyRequestListResponse,
    PolicyRequestResponse,
    ReviewPolicyRequest,
    ReviewPolicyRequestResponse,
    SubmitPolicyRequest,
)
from policyportal.core.identity import Identity
from policyportal.services import policy_requests as workflow

router = APIRouter(tags=["Policy Requests"])


@router.post("/submit-policy-request", response_model=PolicyRequestResponse)
async def submit_policy_request(
    payload: SubmitPolicyRequest,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
) -> PolicyRequestResponse:
    """File a new/edit/delete request for the caller's family."""
    request = await workflow.submit_request(db, identity, payload)
    return PolicyRequestResponse(message="Policy request submitted", request=request)


@router.post("/review-policy-request", response_model=ReviewPolicyRequestResponse)
async def review_policy_request(
    payload: ReviewPolicyRequest,
    admin: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> ReviewPolicyRequestResponse:
    """Approve or reject a pending request."""
    outcome = await workflow.review_request(db, admin, payload)
    return ReviewPolicyRequestResponse(
        message=f"Policy request {payload.decision.value}",
        request=outcome.request,
        policy=outcome.policy,
        policy_applied=outcome.policy_applied,
    )


@router.post("/list-policy-requests", response_model=PolicyRequestListResponse)
async def list_policy_requests(
    payload: ListPolicyRequestsRequest,
    admin: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> PolicyRequestListResponse:
    requests = await workflow.list_requests(db, status=payload.status)
    return PolicyRequestListResponse(requests=requests)


@router.post("/get-client-policy-requests", response_model=PolicyRequestListResponse)
async def get_client_policy_requests(
    payload: ClientPolicyRequestsRequest,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
) -> PolicyRequestListResponse:
    requests = await workflow.list_family_requests(db, identity, payload.user_id)
    return PolicyRequestListResponse(requests=requests)
