"""
Profile repository containing all data-access operations for the profiles table.

Repository rules:
- Pure data-access logic only
- Every function receives AsyncSession explicitly
- Functions flush, but never commit
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from policyportal.db.models.profile import Profile


async def get_profile(db: AsyncSession, profile_id: uuid.UUID) -> Profile | None:
    """Fetch a profile by primary key (the identity-provider account id)."""
    return await db.get(Profile, profile_id)


async def get_profile_by_email(db: AsyncSession, email: str) -> Profile | None:
    """Fetch a profile by email address (case-insensitive)."""
    stmt = (
        select(Profile)
        .where(func.lower(Profile.email) == email.lower().strip())
        .order_by(Profile.created_at)
        .limit(1)
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def upsert_profile(
    db: AsyncSession,
    *,
    profile_id: uuid.UUID,
    email: str,
    first_name: str | None,
    last_name: str | None,
) -> Profile:
    """Insert a profile, or overwrite email and names of an existing one."""
    profile = await get_profile(db, profile_id)
    if profile is None:
        profile = Profile(id=profile_id, email=email.strip())
        db.add(profile)
    else:
        profile.email = email.strip()

    profile.first_name = first_name.strip() if first_name else None
    profile.last_name = last_name.strip() if last_name else None
    await db.flush()
    return profile


async def search_profiles(
    db: AsyncSession,
    term: str,
    *,
    exclude_ids: Iterable[uuid.UUID] = (),
    limit: int = 10,
) -> list[Profile]:
    """Profiles whose first name, last name or email contains `term`."""
    term = term.strip()
    stmt = (
        select(Profile)
        .where(
            or_(
                Profile.first_name.icontains(term, autoescape=True),
                Profile.last_name.icontains(term, autoescape=True),
                Profile.email.icontains(term, autoescape=True),
            )
        )
        .order_by(Profile.last_name, Profile.first_name, Profile.email)
    )
    excluded = set(exclude_ids)
    if excluded:
        stmt = stmt.where(Profile.id.not_in(excluded))
    result = await db.execute(stmt.limit(limit))
    return list(result.scalars().all())
