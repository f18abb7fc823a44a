"""
FamilyMember: join entity between a family and a profile.

`is_primary` is an admin-controlled flag and is NOT unique per family.
A profile can appear at most once in the same family.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional
import uuid

from sqlalchemy import Boolean, DateTime, ForeignKey, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from policyportal.db.models.base import Base, generate_uuid, utcnow


class FamilyMember(Base):
    __tablename__ = "family_members"
    __table_args__ = (
        UniqueConstraint("family_id", "user_id", name="uq_family_members_family_user"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=generate_uuid)
    family_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("families.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("profiles.id"), nullable=False, index=True
    )
    relationship_: Mapped[Optional[str]] = mapped_column(
        "relationship", String(64), nullable=True
    )
    is_primary: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    joined_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    family: Mapped["Family"] = relationship(back_populates="members")
    profile: Mapped[Optional["Profile"]] = relationship(foreign_keys=[user_id])

    def __repr__(self) -> str:
        return f"<FamilyMember family={self.family_id} user={self.user_id} primary={self.is_primary}>"
