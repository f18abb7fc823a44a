"""Admin user repository: idempotent registration of allow-listed identities."""

from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from policyportal.db.models.admin_user import AdminUser


async def get_admin_user(db: AsyncSession, user_id: uuid.UUID) -> AdminUser | None:
    """Fetch the admin row for an identity."""
    result = await db.execute(select(AdminUser).where(AdminUser.user_id == user_id))
    return result.scalar_one_or_none()


async def insert_if_absent(
    db: AsyncSession,
    *,
    user_id: uuid.UUID,
    admin_name: str,
) -> bool:
    """
    Insert an admin_users row unless one exists for `user_id`.

    The insert runs in a savepoint. Losing a race to a concurrent insert
    returns False; any other integrity failure (e.g. no profile row for
    `user_id`) propagates. Returns True when a row was created.
    """
    if await get_admin_user(db, user_id) is not None:
        return False

    try:
        async with db.begin_nested():
            db.add(AdminUser(user_id=user_id, admin_name=admin_name))
            await db.flush()
    except IntegrityError:
        if await get_admin_user(db, user_id) is not None:
            return False
        raise
    return True
