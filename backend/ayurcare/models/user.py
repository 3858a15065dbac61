"""
AyurCare Backend — User & Role Models
======================================

What:  ORM models for the `users` and `user_roles` tables.
How:   A user row holds credentials and the profile fields shown at checkout
       (name, phone, address). Roles live in their own table; the admin
       surface is gated by the presence of one `(user_id, 'admin')` row.
Who:   Used by AuthService, the auth dependencies, and the admin user listing.

Table Design:
    - email is stored lower-cased and is unique
    - password_hash holds a passlib hash string, never the password
    - user_roles has a unique (user_id, role) pair so a role is granted once
"""

import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy import DateTime, ForeignKey, Index, String, Text, UniqueConstraint, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ayurcare.database import Base, utcnow

ROLE_ADMIN = "admin"


class User(Base):
    """A storefront customer (and, with a role row, an administrator)."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        comment="Lower-cased login e-mail",
    )
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    # ── Profile ───────────────────────────────────────────────────────────
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    phone: Mapped[str] = mapped_column(String(20), nullable=False, default="")
    address: Mapped[str] = mapped_column(Text, nullable=False, default="")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    roles: Mapped[List["UserRole"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __table_args__ = (
        Index("idx_users_created_at", created_at.desc()),
    )

    @property
    def is_admin(self) -> bool:
        return any(role.role == ROLE_ADMIN for role in self.roles)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"


class UserRole(Base):
    """One granted role. The only role in use is `admin`."""

    __tablename__ = "user_roles"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    role: Mapped[str] = mapped_column(String(50), nullable=False)

    user: Mapped[Optional[User]] = relationship(back_populates="roles")

    __table_args__ = (
        UniqueConstraint("user_id", "role", name="uq_user_roles_user_role"),
    )

    def __repr__(self) -> str:
        return f"<UserRole(user_id={self.user_id}, role='{self.role}')>"
