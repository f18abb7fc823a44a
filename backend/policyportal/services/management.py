"""
Direct admin mutations of families, members and policies, outside the
request workflow.

Family creation links members by email and reports each member as added
or skipped; the family itself is kept even when no member can be linked.
"""

from __future__ import annotations

import uuid

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from policyportal.api.schemas.common import ProfileSummary
from policyportal.api.schemas.families import (
    CreateFamilyRequest,
    CreateFamilyResponse,
    FamilyMemberIn,
    FamilyMemberOut,
    FamilySummaryOut,
    MemberReport,
    PolicyOut,
)
from policyportal.api.schemas.policies import CreatePolicyRequest, UpdatePolicyRequest
from policyportal.core.constants import PROFILE_SEARCH_LIMIT, PolicyStatus
from policyportal.core.errors import BadRequestError, ConflictError, NotFoundError
from policyportal.core.identity import Identity
from policyportal.core.logging import get_logger
from policyportal.repositories import families as family_repository
from policyportal.repositories import policies as policy_repository
from policyportal.repositories import profiles as profile_repository
from policyportal.services.family_assembly import member_view, policy_view

logger = get_logger(__name__)


def _report(member: FamilyMemberIn, reason: str | None = None) -> MemberReport:
    return MemberReport(
        name=member.name,
        email=member.email,
        relationship=member.relationship,
        reason=reason,
    )


# ─── Families ─────────────────────────────────────────────


async def create_family(
    db: AsyncSession,
    creator: Identity,
    body: CreateFamilyRequest,
) -> CreateFamilyResponse:
    """Create a family and link each requested member by email."""
    try:
        async with db.begin_nested():
            family = await family_repository.create_family(
                db,
                family_name=body.family_name,
                primary_contact_email=body.primary_email,
                created_by=creator.user_id,
            )
    except IntegrityError as exc:
        logger.error("Failed to create family", family_name=body.family_name, error=str(exc.orig))
        raise BadRequestError("Failed to create family", details=str(exc.orig)) from exc

    log = logger.bind(family_id=str(family.id))
    log.info("Family created", family_name=family.family_name, created_by=creator.id)

    primary_email = body.primary_email.lower()
    added: list[MemberReport] = []
    skipped: list[MemberReport] = []

    for member in body.members:
        email = member.email.strip()
        if not member.name.strip() and not email:
            continue
        if not email:
            skipped.append(_report(member, "No email provided - cannot link to user account"))
            continue

        profile = await profile_repository.get_profile_by_email(db, email)
        if profile is None:
            log.info("No profile found for email", email=email)
            skipped.append(_report(member, "User account not found"))
            continue

        try:
            async with db.begin_nested():
                await family_repository.add_member(
                    db,
                    family_id=family.id,
                    user_id=profile.id,
                    relationship=member.relationship,
                    is_primary=email.lower() == primary_email,
                )
        except IntegrityError as exc:
            log.warning("Error adding family member", email=email, error=str(exc.orig))
            skipped.append(_report(member, "User is already a member of this family"))
            continue

        log.info("Added family member", email=email)
        added.append(_report(member))

    log.info("Family members linked", added=len(added), skipped=len(skipped))
    return CreateFamilyResponse(
        family=FamilySummaryOut(
            id=family.id,
            name=family.family_name,
            primary_email=family.primary_contact_email,
        ),
        added_members=added,
        skipped_members=skipped,
    )


async def add_family_member(
    db: AsyncSession,
    *,
    family_id: uuid.UUID,
    user_id: uuid.UUID,
    relationship: str | None,
    is_primary: bool,
) -> FamilyMemberOut:
    """Link an existing profile to a family."""
    if await family_repository.get_family(db, family_id) is None:
        raise NotFoundError("Family not found")
    if await profile_repository.get_profile(db, user_id) is None:
        raise NotFoundError("User profile not found")
    if await family_repository.get_membership(db, family_id, user_id) is not None:
        raise ConflictError("User is already a member of this family")

    try:
        async with db.begin_nested():
            member = await family_repository.add_member(
                db,
                family_id=family_id,
                user_id=user_id,
                relationship=relationship,
                is_primary=is_primary,
            )
    except IntegrityError as exc:
        raise ConflictError("User is already a member of this family") from exc

    logger.info(
        "Family member added",
        family_id=str(family_id),
        user_id=str(user_id),
        is_primary=is_primary,
    )
    return member_view(await family_repository.get_member(db, family_id, member.id))


async def remove_family_member(
    db: AsyncSession,
    *,
    family_id: uuid.UUID,
    member_id: uuid.UUID,
) -> None:
    """Unlink a member row from its family."""
    member = await family_repository.get_member(db, family_id, member_id)
    if member is None:
        raise NotFoundError("Family member not found")
    await family_repository.delete_member(db, member)
    logger.info("Family member removed", family_id=str(family_id), member_id=str(member_id))


async def search_profiles(
    db: AsyncSession,
    term: str,
    *,
    family_id: uuid.UUID | None = None,
) -> list[ProfileSummary]:
    """Candidate profiles for adding to a family, excluding current members."""
    exclude: list[uuid.UUID] = []
    if family_id is not None:
        exclude = [m.user_id for m in await family_repository.list_members(db, family_id)]
    profiles = await profile_repository.search_profiles(
        db, term, exclude_ids=exclude, limit=PROFILE_SEARCH_LIMIT
    )
    return [ProfileSummary.from_profile(p) for p in profiles]


# ─── Policies ─────────────────────────────────────────────


async def create_policy(db: AsyncSession, body: CreatePolicyRequest) -> PolicyOut:
    """Create a policy directly. Status defaults to active."""
    if await family_repository.get_family(db, body.family_id) is None:
        raise BadRequestError("Failed to create policy", details="Family not found")
    if await profile_repository.get_profile(db, body.policy_holder_id) is None:
        raise BadRequestError("Failed to create policy", details="Policy holder not found")

    policy = await policy_repository.create_policy(
        db,
        family_id=body.family_id,
        policy_holder_id=body.policy_holder_id,
        policy_type=body.policy_type,
        status=(body.status or PolicyStatus.ACTIVE).value,
        policy_number=body.policy_number,
        insurance_company=body.insurance_company,
        premium_amount=body.premium_amount,
        coverage_amount=body.coverage_amount,
        start_date=body.start_date,
        end_date=body.end_date,
    )
    logger.info("Policy created", policy_id=str(policy.id), family_id=str(body.family_id))
    return policy_view(await policy_repository.get_policy_with_holder(db, policy.id))


async def update_policy(db: AsyncSession, body: UpdatePolicyRequest) -> PolicyOut:
    """Apply an admin edit. Only fields present in the body change."""
    policy = await policy_repository.get_policy(db, body.policy_id)
    if policy is None:
        raise NotFoundError("Policy not found")

    changes = body.changes()
    for required in ("policy_type", "policy_holder_id", "status"):
        if required in changes and changes[required] is None:
            raise BadRequestError(f"{required} cannot be empty")
    if "status" in changes:
        changes["status"] = PolicyStatus(changes["status"]).value
    if "policy_holder_id" in changes:
        if await profile_repository.get_profile(db, changes["policy_holder_id"]) is None:
            raise BadRequestError("Failed to update policy", details="Policy holder not found")

    await policy_repository.update_policy(db, policy, **changes)
    logger.info("Policy updated", policy_id=str(policy.id), fields=sorted(changes))
    return policy_view(await policy_repository.get_policy_with_holder(db, policy.id))


async def delete_policy(db: AsyncSession, policy_id: uuid.UUID) -> None:
    """Hard-delete a policy; requests referencing it keep a null policy_id."""
    policy = await policy_repository.get_policy(db, policy_id)
    if policy is None:
        raise NotFoundError("Policy not found")
    await policy_repository.delete_policy(db, policy)
    logger.info("Policy deleted", policy_id=str(policy_id))
