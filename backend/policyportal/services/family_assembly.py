"""
Family assembly: builds the family → members → profiles → policies →
holder profiles aggregate that both the client dashboard and the admin
family screen render.

Joins run as a handful of ordinary queries inside the service layer.
A foreign key that points at a missing profile yields the "Unknown User"
placeholder instead of failing the whole assembly.
"""

from __future__ import annotations

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from policyportal.api.schemas.common import ProfileSummary
from policyportal.api.schemas.families import (
    FamilyDataResponse,
    FamilyMemberOut,
    FamilyOut,
    PolicyOut,
)
from policyportal.core.errors import ForbiddenError, NotFoundError
from policyportal.core.identity import Identity
from policyportal.core.logging import get_logger
from policyportal.db.models.family import Family
from policyportal.db.models.family_member import FamilyMember
from policyportal.db.models.policy import Policy
from policyportal.repositories import families as family_repository
from policyportal.repositories import policies as policy_repository

logger = get_logger(__name__)


# ─── View builders ────────────────────────────────────────


def member_view(member: FamilyMember) -> FamilyMemberOut:
    return FamilyMemberOut(
        id=member.id,
        family_id=member.family_id,
        user_id=member.user_id,
        relationship=member.relationship_,
        is_primary=member.is_primary,
        joined_at=member.joined_at,
        profile=ProfileSummary.from_profile(member.profile, member.user_id),
    )


def policy_view(policy: Policy) -> PolicyOut:
    return PolicyOut(
        id=policy.id,
        family_id=policy.family_id,
        policy_holder_id=policy.policy_holder_id,
        policy_number=policy.policy_number,
        policy_type=policy.policy_type,
        insurance_company=policy.insurance_company,
        premium_amount=policy.premium_amount,
        coverage_amount=policy.coverage_amount,
        start_date=policy.start_date,
        end_date=policy.end_date,
        status=policy.status,
        created_at=policy.created_at,
        holder=ProfileSummary.from_profile(policy.holder, policy.policy_holder_id),
    )


def family_view(family: Family, members: list[FamilyMember]) -> FamilyOut:
    return FamilyOut(
        id=family.id,
        family_name=family.family_name,
        primary_contact_email=family.primary_contact_email,
        created_by=family.created_by,
        created_at=family.created_at,
        family_members=[member_view(m) for m in members],
    )


# ─── Operations ───────────────────────────────────────────


async def assemble_family(db: AsyncSession, family: Family) -> FamilyDataResponse:
    """Family with members (primary first) and policies (newest first)."""
    members = await family_repository.list_members(db, family.id)
    policies = await policy_repository.list_family_policies(db, family.id)

    logger.debug(
        "Family assembled",
        family_id=str(family.id),
        members=len(members),
        policies=len(policies),
    )
    return FamilyDataResponse(
        family=family_view(family, members),
        policies=[policy_view(p) for p in policies],
    )


async def get_family_by_user(
    db: AsyncSession,
    identity: Identity,
    user_id: str,
) -> FamilyDataResponse:
    """
    The caller's own family aggregate.

    Only the caller's own id is accepted. A user with no membership gets
    an empty result rather than an error.
    """
    if user_id.strip().lower() != identity.id.lower():
        logger.warning(
            "Cross-user family data request refused",
            caller_id=identity.id,
            requested_user_id=user_id,
        )
        raise ForbiddenError("Unauthorized access to user data")

    memberships = await family_repository.list_memberships_for_user(db, identity.user_id)
    if not memberships:
        logger.info("User is not a member of any family", user_id=identity.id)
        return FamilyDataResponse(family=None, policies=[])

    if len(memberships) > 1:
        logger.warning(
            "User belongs to several families, using earliest membership",
            user_id=identity.id,
            family_ids=[str(m.family_id) for m in memberships],
        )

    family = await family_repository.get_family(db, memberships[0].family_id)
    if family is None:
        # Membership row pointing at a deleted family
        logger.warning("Membership references missing family", family_id=str(memberships[0].family_id))
        return FamilyDataResponse(family=None, policies=[])

    return await assemble_family(db, family)


async def get_family_details(db: AsyncSession, family_id: uuid.UUID) -> FamilyDataResponse:
    """Aggregate for any family (admin view)."""
    family = await family_repository.get_family(db, family_id)
    if family is None:
        raise NotFoundError("Family not found")
    return await assemble_family(db, family)


async def search_families(db: AsyncSession, term: str) -> list[FamilyOut]:
    """
    Families matching `term` by name / primary email or by a member's
    name / email, newest first, each with its member list.
    """
    families = await family_repository.search_families(db, term)
    members_by_family = await family_repository.list_members_for_families(
        db, [f.id for f in families]
    )
    logger.info("Family search", term=term, results=len(families))
    return [family_view(f, members_by_family.get(f.id, [])) for f in families]
