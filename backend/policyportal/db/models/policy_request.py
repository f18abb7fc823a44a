"""
PolicyRequest: a client-submitted change awaiting admin review.

Status moves exactly once: pending → approved | rejected.
`request_data` is stored opaquely; it mirrors the policy fields.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional
import uuid

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from policyportal.core.constants import RequestStatus
from policyportal.db.models.base import Base, JSONType, generate_uuid, utcnow


class PolicyRequest(Base):
    __tablename__ = "policy_requests"
    __table_args__ = (
        CheckConstraint(
            "request_type IN ('new_policy', 'edit_policy', 'delete_policy')",
            name="ck_policy_requests_type",
        ),
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')",
            name="ck_policy_requests_status",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=generate_uuid)
    family_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("families.id", ondelete="CASCADE"), nullable=False, index=True
    )
    requested_by: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("profiles.id"), nullable=False
    )
    request_type: Mapped[str] = mapped_column(String(20), nullable=False)
    policy_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("policies.id", ondelete="SET NULL"), nullable=True
    )
    request_data: Mapped[dict[str, Any]] = mapped_column(JSONType, default=dict, nullable=False)

    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=RequestStatus.PENDING.value, index=True
    )
    admin_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    reviewed_by: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("profiles.id"), nullable=True
    )
    reviewed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False, index=True
    )

    family: Mapped["Family"] = relationship()
    requester: Mapped[Optional["Profile"]] = relationship(foreign_keys=[requested_by])

    def __repr__(self) -> str:
        return f"<PolicyRequest id={self.id} type={self.request_type} status={self.status}>"
