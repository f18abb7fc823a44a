"""Direct admin policy management endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from policyportal.api.deps import get_db, require_admin
from policyportal.api.schemas.common import SuccessResponse
from policyportal.api.schemas.policies import (
    CreatePolicyRequest,
    DeletePolicyRequest,
    PolicyResponse,
    UpdatePolicyRequest,
)
from policyportal.services import management

router = APIRouter(
    tags=["Policies"],
    dependencies=[Depends(require_admin)],
)


@router.post("/create-policy", response_model=PolicyResponse)
async def create_policy(
    payload: CreatePolicyRequest,
    db: AsyncSession = Depends(get_db),
) -> PolicyResponse:
    policy = await management.create_policy(db, payload)
    return PolicyResponse(message="Policy created successfully", policy=policy)


@router.post("/update-policy", response_model=PolicyResponse)
async def update_policy(
    payload: UpdatePolicyRequest,
    db: AsyncSession = Depends(get_db),
) -> PolicyResponse:
    policy = await management.update_policy(db, payload)
    return PolicyResponse(message="Policy updated successfully", policy=policy)


@router.post("/delete-policy", response_model=SuccessResponse)
async def delete_policy(
    payload: DeletePolicyRequest,
    db: AsyncSession = Depends(get_db),
) -> SuccessResponse:
    await management.delete_policy(db, payload.policy_id)
    return SuccessResponse(message="Policy deleted successfully")
