"""
Family model: an insurance-account grouping of member identities.

A family owns its members and policies; policy requests are scoped to it.
"""

from __future__ import annotations

from datetime import datetime
import uuid

from sqlalchemy import DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from policyportal.db.models.base import Base, generate_uuid, utcnow


class Family(Base):
    __tablename__ = "families"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=generate_uuid)
    family_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    primary_contact_email: Mapped[str] = mapped_column(String(320), nullable=False)

    # Always an admin identity
    created_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("profiles.id"), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    members: Mapped[list["FamilyMember"]] = relationship(
        back_populates="family",
        cascade="all, delete-orphan",
    )
    policies: Mapped[list["Policy"]] = relationship(
        back_populates="family",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Family id={self.id} name={self.family_name!r}>"
