"""Account provisioning endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from policyportal.api.deps import get_db, get_identity_provider, require_admin
from policyportal.api.schemas.users import CreateUserRequest, CreateUserResponse
from policyportal.core.identity import SupabaseAuthClient
from policyportal.services import provisioning

router = APIRouter(
    tags=["Users"],
    dependencies=[Depends(require_admin)],
)


@router.post("/create-user", response_model=CreateUserResponse)
async def create_user(
    payload: CreateUserRequest,
    db: AsyncSession = Depends(get_db),
    identity_provider: SupabaseAuthClient = Depends(get_identity_provider),
) -> CreateUserResponse:
    """Create a confirmed identity-provider account and its profile."""
    return await provisioning.create_user(db, identity_provider, payload)
