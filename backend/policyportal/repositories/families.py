"""
Family repository: families and their member rows.

Repository rules:
- Pure data-access logic only
- Every function receives AsyncSession explicitly
- Functions flush, but never commit
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from policyportal.db.models.family import Family
from policyportal.db.models.family_member import FamilyMember
from policyportal.db.models.profile import Profile


async def create_family(
    db: AsyncSession,
    *,
    family_name: str,
    primary_contact_email: str,
    created_by: uuid.UUID | None,
) -> Family:
    """Create a new family row."""
    family = Family(
        family_name=family_name.strip(),
        primary_contact_email=primary_contact_email.strip(),
        created_by=created_by,
    )
    db.add(family)
    await db.flush()
    return family


async def get_family(db: AsyncSession, family_id: uuid.UUID) -> Family | None:
    """Fetch a family by primary key."""
    return await db.get(Family, family_id)


async def search_families(db: AsyncSession, term: str) -> list[Family]:
    """
    Families matching `term` on name or primary contact email, UNION
    families with a member whose profile name or email matches.

    One statement, so rows are unique by id; newest first.
    """
    term = term.strip()
    member_matches = (
        select(FamilyMember.family_id)
        .join(Profile, Profile.id == FamilyMember.user_id)
        .where(
            or_(
                Profile.first_name.icontains(term, autoescape=True),
                Profile.last_name.icontains(term, autoescape=True),
                Profile.email.icontains(term, autoescape=True),
            )
        )
    )
    stmt = (
        select(Family)
        .where(
            or_(
                Family.family_name.icontains(term, autoescape=True),
                Family.primary_contact_email.icontains(term, autoescape=True),
                Family.id.in_(member_matches),
            )
        )
        .order_by(Family.created_at.desc(), Family.id)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


# ─── Members ──────────────────────────────────────────────


def _members_query():
    return (
        select(FamilyMember)
        .options(selectinload(FamilyMember.profile))
        .order_by(
            FamilyMember.is_primary.desc(),
            FamilyMember.joined_at,
            FamilyMember.id,
        )
    )


async def list_members(db: AsyncSession, family_id: uuid.UUID) -> list[FamilyMember]:
    """All members of a family with profiles loaded, primary members first."""
    result = await db.execute(_members_query().where(FamilyMember.family_id == family_id))
    return list(result.scalars().all())


async def list_members_for_families(
    db: AsyncSession,
    family_ids: Iterable[uuid.UUID],
) -> dict[uuid.UUID, list[FamilyMember]]:
    """Members of several families in one query, grouped by family id."""
    ids = list(family_ids)
    grouped: dict[uuid.UUID, list[FamilyMember]] = {family_id: [] for family_id in ids}
    if not ids:
        return grouped
    result = await db.execute(_members_query().where(FamilyMember.family_id.in_(ids)))
    for member in result.scalars().all():
        grouped[member.family_id].append(member)
    return grouped


async def list_memberships_for_user(
    db: AsyncSession,
    user_id: uuid.UUID,
) -> list[FamilyMember]:
    """Every membership row of a profile, earliest joined first."""
    stmt = (
        select(FamilyMember)
        .where(FamilyMember.user_id == user_id)
        .order_by(FamilyMember.joined_at, FamilyMember.id)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_member(
    db: AsyncSession,
    family_id: uuid.UUID,
    member_id: uuid.UUID,
) -> FamilyMember | None:
    """Fetch one member row with its profile, scoped to its family."""
    stmt = (
        select(FamilyMember)
        .where(
            FamilyMember.id == member_id,
            FamilyMember.family_id == family_id,
        )
        .options(selectinload(FamilyMember.profile))
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def get_membership(
    db: AsyncSession,
    family_id: uuid.UUID,
    user_id: uuid.UUID,
) -> FamilyMember | None:
    """The member row linking `user_id` to `family_id`, if any."""
    stmt = select(FamilyMember).where(
        FamilyMember.family_id == family_id,
        FamilyMember.user_id == user_id,
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def add_member(
    db: AsyncSession,
    *,
    family_id: uuid.UUID,
    user_id: uuid.UUID,
    relationship: str | None = None,
    is_primary: bool = False,
) -> FamilyMember:
    """Link a profile to a family. IntegrityError propagates on duplicates."""
    member = FamilyMember(
        family_id=family_id,
        user_id=user_id,
        relationship_=relationship.strip() if relationship and relationship.strip() else None,
        is_primary=is_primary,
    )
    db.add(member)
    await db.flush()
    return member


async def delete_member(db: AsyncSession, member: FamilyMember) -> None:
    """Hard-delete a member row."""
    await db.delete(member)
    await db.flush()
