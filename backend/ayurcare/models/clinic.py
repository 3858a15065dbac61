"""
AyurCare Backend — Clinic Models
=================================

What:  ORM models for `practitioners`, `services` and `appointments`.
Who:   Used by ClinicService (public booking flow and admin screens).

Appointment Lifecycle:
    pending → confirmed → completed
        └──────────┴──────→ cancelled

    A slot (practitioner, date, time) counts as taken while an appointment
    holding it is pending or confirmed. The partial unique index
    uq_appointments_active_slot enforces one such holder per slot.
"""

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
    text,
    true,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ayurcare.database import Base, utcnow

APPOINTMENT_PENDING = "pending"
APPOINTMENT_CONFIRMED = "confirmed"
APPOINTMENT_COMPLETED = "completed"
APPOINTMENT_CANCELLED = "cancelled"
APPOINTMENT_STATUSES = (
    APPOINTMENT_PENDING,
    APPOINTMENT_CONFIRMED,
    APPOINTMENT_COMPLETED,
    APPOINTMENT_CANCELLED,
)
# Statuses that keep a slot occupied
ACTIVE_APPOINTMENT_STATUSES = (APPOINTMENT_PENDING, APPOINTMENT_CONFIRMED)
_HOLDS_SLOT = text("status IN ('pending', 'confirmed')")


class Practitioner(Base):
    __tablename__ = "practitioners"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    specialization: Mapped[str] = mapped_column(String(200), nullable=False)
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    image_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=true(),
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    def __repr__(self) -> str:
        return f"<Practitioner(id={self.id}, name='{self.name}')>"


class Service(Base):
    """A bookable treatment or consultation."""

    __tablename__ = "services"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=30)
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=true(),
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    def __repr__(self) -> str:
        return f"<Service(id={self.id}, name='{self.name}')>"


class Appointment(Base):
    """A booking of one service with one practitioner at a fixed slot."""

    __tablename__ = "appointments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    practitioner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("practitioners.id", ondelete="CASCADE"),
        nullable=False,
    )
    service_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("services.id", ondelete="CASCADE"),
        nullable=False,
    )
    appointment_date: Mapped[date] = mapped_column(Date, nullable=False)
    # "HH:MM", one of the configured booking slots
    appointment_time: Mapped[str] = mapped_column(String(5), nullable=False)
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")
    status: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default=APPOINTMENT_PENDING,
        comment="pending, confirmed, completed, cancelled",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    practitioner: Mapped[Optional[Practitioner]] = relationship(lazy="joined")
    service: Mapped[Optional[Service]] = relationship(lazy="joined")

    __table_args__ = (
        Index(
            "idx_appointments_practitioner_slot",
            "practitioner_id",
            "appointment_date",
            "appointment_time",
        ),
        Index("idx_appointments_user_date", "user_id", "appointment_date"),
        # At most one active holder per slot
        Index(
            "uq_appointments_active_slot",
            "practitioner_id",
            "appointment_date",
            "appointment_time",
            unique=True,
            postgresql_where=_HOLDS_SLOT,
            sqlite_where=_HOLDS_SLOT,
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<Appointment(id={self.id}, date={self.appointment_date}, "
            f"time='{self.appointment_time}', status='{self.status}')>"
        )
