"""
User Models

Platform accounts for educators, psychologists, families and learners.
"""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from sqlalchemy import CheckConstraint, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, SoftDeleteMixin, TimestampMixin, UUIDPrimaryKeyMixin


class UserRole(StrEnum):
    """Account roles used for route authorisation."""

    ADMIN = "admin"
    TEACHER = "teacher"
    EDUCATIONAL_PSYCHOLOGIST = "educational_psychologist"
    TEACHING_ASSISTANT = "teaching_assistant"
    PARENT = "parent"
    STUDENT = "student"


STAFF_ROLES = (
    UserRole.ADMIN,
    UserRole.TEACHER,
    UserRole.EDUCATIONAL_PSYCHOLOGIST,
    UserRole.TEACHING_ASSISTANT,
)


class User(Base, UUIDPrimaryKeyMixin, TimestampMixin, SoftDeleteMixin):
    """A platform account. Email is the login identifier."""

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(
            "role IN ('admin', 'teacher', 'educational_psychologist', "
            "'teaching_assistant', 'parent', 'student')",
            name="check_user_role",
        ),
        Index("idx_users_role", "role"),
        Index("idx_users_tenant", "tenant_id"),
    )

    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(40), nullable=False, default=UserRole.TEACHER.value)

    tenant_id: Mapped[str | None] = mapped_column(
        String(100), nullable=True, comment="School or trust the account belongs to"
    )
    key_stage: Mapped[str | None] = mapped_column(String(20), nullable=True)

    last_login_at: Mapped[datetime | None] = mapped_column(nullable=True)
    is_active: Mapped[bool] = mapped_column(default=True)

    @property
    def is_admin(self) -> bool:
        """Check if the account has the admin role."""
        return self.role == UserRole.ADMIN

    @property
    def is_staff(self) -> bool:
        """Check if the account belongs to school or psychology staff."""
        return self.role in STAFF_ROLES

    @property
    def effective_tenant(self) -> str:
        """Tenant identifier, defaulting for accounts without one."""
        return self.tenant_id or "default"
