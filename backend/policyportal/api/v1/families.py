"""Family endpoints: creation, membership, aggregate reads and search."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from policyportal.api.deps import get_current_identity, get_db, require_admin
from policyportal.api.schemas.common import SuccessResponse
from policyportal.api.schemas.families import (
    AddFamilyMemberRequest,
    ClientFamilyDataRequest,
    CreateFamilyRequest,
    CreateFamilyResponse,
    FamilyDataResponse,
    FamilyDetailsRequest,
    FamilyMemberResponse,
    ProfilesResponse,
    RemoveFamilyMemberRequest,
    SearchFamiliesRequest,
    SearchFamiliesResponse,
    SearchProfilesRequest,
)
from policyportal.core.identity import Identity
from policyportal.services import family_assembly, management

router = APIRouter(tags=["Families"])


@router.post("/create-family", response_model=CreateFamilyResponse)
async def create_family(
    payload: CreateFamilyRequest,
    admin: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> CreateFamilyResponse:
    """Create a family and link members by email; unlinkable members are reported."""
    return await management.create_family(db, admin, payload)


@router.post("/get-family-details", response_model=FamilyDataResponse)
async def get_family_details(
    payload: FamilyDetailsRequest,
    admin: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> FamilyDataResponse:
    """Full aggregate of any family."""
    return await family_assembly.get_family_details(db, payload.family_id)


@router.post("/get-client-family-data", response_model=FamilyDataResponse)
async def get_client_family_data(
    payload: ClientFamilyDataRequest,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
) -> FamilyDataResponse:
    """The caller's own family aggregate (empty when not in a family)."""
    return await family_assembly.get_family_by_user(db, identity, payload.user_id)


@router.post("/search-families", response_model=SearchFamiliesResponse)
async def search_families(
    payload: SearchFamiliesRequest,
    admin: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> SearchFamiliesResponse:
    """Search families by name, primary email or member name/email."""
    families = await family_assembly.search_families(db, payload.search_term)
    return SearchFamiliesResponse(families=families)


@router.post("/add-family-member", response_model=FamilyMemberResponse)
async def add_family_member(
    payload: AddFamilyMemberRequest,
    admin: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> FamilyMemberResponse:
    member = await management.add_family_member(
        db,
        family_id=payload.family_id,
        user_id=payload.user_id,
        relationship=payload.relationship,
        is_primary=payload.is_primary,
    )
    return FamilyMemberResponse(message="Family member added successfully", member=member)


@router.post("/remove-family-member", response_model=SuccessResponse)
async def remove_family_member(
    payload: RemoveFamilyMemberRequest,
    admin: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> SuccessResponse:
    await management.remove_family_member(
        db, family_id=payload.family_id, member_id=payload.member_id
    )
    return SuccessResponse(message="Family member removed successfully")


@router.post("/search-profiles", response_model=ProfilesResponse)
async def search_profiles(
    payload: SearchProfilesRequest,
    admin: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> ProfilesResponse:
    """Profiles to offer when adding a member; current members are excluded."""
    profiles = await management.search_profiles(
        db, payload.search_term, family_id=payload.family_id
    )
    return ProfilesResponse(profiles=profiles)
