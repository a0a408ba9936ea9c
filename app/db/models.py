"""SQLAlchemy ORM models."""

from __future__ import annotations

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.db.enums import ComplaintStatus, Role


class Enterprise(Base):
    """
    A tenant in the multi-tenant system.

    Users and complaints belong to an enterprise and must be scoped by
    enterprise_id in all queries. Deleting an enterprise is cascaded by the
    database (ON DELETE CASCADE), not by the ORM.
    """

    __tablename__ = "enterprises"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    users: Mapped[list["User"]] = relationship(
        back_populates="enterprise", passive_deletes=True
    )
    complaints: Mapped[list["Complaint"]] = relationship(
        back_populates="enterprise", passive_deletes=True
    )


class User(Base):
    """
    Enterprise member who can sign in to the dashboard.

    Only the bcrypt hash of the password is stored.
    """

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(
            "role IN ('admin', 'superadmin')",
            name="role_valid",
        ),
        Index("ix_users_enterprise_id", "enterprise_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    enterprise_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("enterprises.id", ondelete="CASCADE"),
        nullable=False,
    )
    username: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(
        String(50), nullable=False, default=Role.ADMIN.value, server_default=text("'admin'")
    )

    enterprise: Mapped["Enterprise"] = relationship(back_populates="users")


class Complaint(Base):
    """
    A complaint submitted through the public intake endpoints.

    type=text rows carry the inline ``complaint`` text; type=voice rows carry
    the durable ``filepath`` URL and the ``storage_key`` used to delete the
    blob. The two payload shapes are mutually exclusive.
    """

    __tablename__ = "complaints"
    __table_args__ = (
        CheckConstraint(
            "status IN ('open', 'resolved')",
            name="status_valid",
        ),
        CheckConstraint(
            "(type = 'text' AND complaint IS NOT NULL AND filepath IS NULL AND storage_key IS NULL)"
            " OR (type = 'voice' AND complaint IS NULL AND filepath IS NOT NULL AND storage_key IS NOT NULL)",
            name="payload_matches_type",
        ),
        Index("ix_complaints_enterprise_id", "enterprise_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    enterprise_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("enterprises.id", ondelete="CASCADE"),
        nullable=False,
    )
    complaint: Mapped[str | None] = mapped_column(Text, nullable=True)
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    status: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default=ComplaintStatus.OPEN.value,
        server_default=text("'open'"),
    )
    # Display string in COMPLAINT_TIMEZONE, e.g. "3/14/2025, 9:05:12 AM"
    timestamp: Mapped[str] = mapped_column(String(255), nullable=False)
    filepath: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    storage_key: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    enterprise: Mapped["Enterprise"] = relationship(back_populates="complaints")
