"""
Policy request repository.

Repository rules:
- Pure data-access logic only
- Every function receives AsyncSession explicitly
- Functions flush, but never commit
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from policyportal.core.constants import RequestStatus
from policyportal.db.models.policy_request import PolicyRequest


async def create_request(
    db: AsyncSession,
    *,
    family_id: uuid.UUID,
    requested_by: uuid.UUID,
    request_type: str,
    policy_id: uuid.UUID | None,
    request_data: dict[str, Any],
) -> PolicyRequest:
    """Record a new request. Always created as pending."""
    request = PolicyRequest(
        family_id=family_id,
        requested_by=requested_by,
        request_type=request_type,
        policy_id=policy_id,
        request_data=request_data,
        status=RequestStatus.PENDING.value,
    )
    db.add(request)
    await db.flush()
    return request


async def get_request(db: AsyncSession, request_id: uuid.UUID) -> PolicyRequest | None:
    """Fetch a request with family and requester loaded, bypassing stale state."""
    stmt = (
        select(PolicyRequest)
        .where(PolicyRequest.id == request_id)
        .options(
            selectinload(PolicyRequest.family),
            selectinload(PolicyRequest.requester),
        )
        .execution_options(populate_existing=True)
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def mark_reviewed(
    db: AsyncSession,
    request_id: uuid.UUID,
    *,
    status: str,
    reviewed_by: uuid.UUID,
    admin_notes: str | None,
) -> bool:
    """
    Move a pending request to a terminal status.

    The pending check and the write are one conditional UPDATE. Returns
    False when no pending row matched (already reviewed or unknown id).
    """
    stmt = (
        update(PolicyRequest)
        .where(
            PolicyRequest.id == request_id,
            PolicyRequest.status == RequestStatus.PENDING.value,
        )
        .values(
            status=status,
            reviewed_by=reviewed_by,
            reviewed_at=datetime.now(timezone.utc),
            admin_notes=admin_notes,
        )
        .execution_options(synchronize_session=False)
    )
    result = await db.execute(stmt)
    await db.flush()
    return result.rowcount == 1


async def list_requests(
    db: AsyncSession,
    *,
    status: str | None = None,
    family_id: uuid.UUID | None = None,
    offset: int = 0,
    limit: int = 100,
) -> list[PolicyRequest]:
    """List requests newest first, with family and requester loaded."""
    stmt = (
        select(PolicyRequest)
        .options(
            selectinload(PolicyRequest.family),
            selectinload(PolicyRequest.requester),
        )
        .order_by(PolicyRequest.created_at.desc(), PolicyRequest.id)
    )
    if status is not None:
        stmt = stmt.where(PolicyRequest.status == status)
    if family_id is not None:
        stmt = stmt.where(PolicyRequest.family_id == family_id)
    result = await db.execute(stmt.offset(offset).limit(limit))
    return list(result.scalars().all())
