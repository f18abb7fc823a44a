"""
Policy repository containing all data-access operations for the policies table.

Repository rules:
- Pure data-access logic only
- Every function receives AsyncSession explicitly
- Functions flush, but never commit
"""

from __future__ import annotations

import uuid

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from policyportal.db.models.policy import Policy
from policyportal.db.models.policy_request import PolicyRequest

MUTABLE_FIELDS = frozenset(
    {
        "policy_holder_id",
        "policy_number",
        "policy_type",
        "insurance_company",
        "premium_amount",
        "coverage_amount",
        "start_date",
        "end_date",
        "status",
    }
)


async def create_policy(
    db: AsyncSession,
    *,
    family_id: uuid.UUID,
    policy_holder_id: uuid.UUID,
    policy_type: str,
    status: str,
    **fields: object,
) -> Policy:
    """Insert a policy. Unknown keyword fields are ignored."""
    policy = Policy(
        family_id=family_id,
        policy_holder_id=policy_holder_id,
        policy_type=policy_type,
        status=status,
    )
    for key, value in fields.items():
        if key in MUTABLE_FIELDS:
            setattr(policy, key, value)
    db.add(policy)
    await db.flush()
    return policy


async def get_policy(db: AsyncSession, policy_id: uuid.UUID) -> Policy | None:
    """Fetch a policy by primary key."""
    return await db.get(Policy, policy_id)


async def get_policy_with_holder(db: AsyncSession, policy_id: uuid.UUID) -> Policy | None:
    """Fetch a policy with its holder profile loaded."""
    stmt = (
        select(Policy)
        .where(Policy.id == policy_id)
        .options(selectinload(Policy.holder))
        .execution_options(populate_existing=True)
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def list_family_policies(db: AsyncSession, family_id: uuid.UUID) -> list[Policy]:
    """All policies of a family with holder profiles loaded, newest first."""
    stmt = (
        select(Policy)
        .where(Policy.family_id == family_id)
        .options(selectinload(Policy.holder))
        .order_by(Policy.created_at.desc(), Policy.id)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def update_policy(db: AsyncSession, policy: Policy, **fields: object) -> Policy:
    """Apply the given mutable fields. None values are written as-is."""
    for key, value in fields.items():
        if key in MUTABLE_FIELDS:
            setattr(policy, key, value)
    await db.flush()
    return policy


async def delete_policy(db: AsyncSession, policy: Policy) -> None:
    """Detach requests pointing at the policy, then hard-delete it."""
    await db.execute(
        update(PolicyRequest)
        .where(PolicyRequest.policy_id == policy.id)
        .values(policy_id=None)
        .execution_options(synchronize_session=False)
    )
    await db.delete(policy)
    await db.flush()
