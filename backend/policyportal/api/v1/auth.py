"""Current-identity introspection."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from policyportal.api.deps import get_admin_allow_list, get_current_identity, get_db
from policyportal.api.schemas.auth import CurrentUserResponse
from policyportal.api.schemas.common import ProfileSummary
from policyportal.core.admins import AdminAllowList
from policyportal.core.identity import Identity
from policyportal.repositories import profiles as profile_repository
from policyportal.services import provisioning

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/me", response_model=CurrentUserResponse)
async def read_current_user(
    identity: Identity = Depends(get_current_identity),
    admins: AdminAllowList = Depends(get_admin_allow_list),
    db: AsyncSession = Depends(get_db),
) -> CurrentUserResponse:
    """Return the caller and whether they get the admin dashboard."""
    is_admin = admins.is_admin(identity.email)
    if is_admin:
        await provisioning.register_admin(db, identity, admins.display_name(identity.email))

    profile = await profile_repository.get_profile(db, identity.user_id)
    return CurrentUserResponse(
        user_id=identity.id,
        email=identity.email,
        is_admin=is_admin,
        profile=ProfileSummary.from_profile(profile) if profile else None,
    )
