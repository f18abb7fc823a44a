"""
Policy model: an insurance policy attributed to one family member.

Status has no enforced transitions; admins edit it freely.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional
import uuid

from sqlalchemy import CheckConstraint, Date, DateTime, ForeignKey, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from policyportal.core.constants import PolicyStatus
from policyportal.db.models.base import Base, generate_uuid, utcnow


class Policy(Base):
    __tablename__ = "policies"
    __table_args__ = (
        CheckConstraint("status IN ('active', 'inactive', 'pending')", name="ck_policies_status"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=generate_uuid)
    family_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("families.id", ondelete="CASCADE"), nullable=False, index=True
    )
    policy_holder_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("profiles.id"), nullable=False, index=True
    )

    policy_number: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    policy_type: Mapped[str] = mapped_column(String(100), nullable=False)
    insurance_company: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    premium_amount: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)
    coverage_amount: Mapped[Optional[Decimal]] = mapped_column(Numeric(14, 2), nullable=True)
    start_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    end_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=PolicyStatus.ACTIVE.value
    )  # active | inactive | pending

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    family: Mapped["Family"] = relationship(back_populates="policies")
    holder: Mapped[Optional["Profile"]] = relationship(foreign_keys=[policy_holder_id])

    def __repr__(self) -> str:
        return f"<Policy id={self.id} type={self.policy_type} status={self.status}>"
