"""Mentoring and portfolio

Revision ID: 8e4b2c91f0a3
Revises: 3c1f9a7d2b60
Create Date: 2026-10-18 12:00:00.000000+00:00

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "8e4b2c91f0a3"  # pragma: allowlist secret
down_revision: str | None = "3c1f9a7d2b60"  # pragma: allowlist secret
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _id() -> sa.Column:
    return sa.Column("id", sa.Uuid(), primary_key=True, comment="UUID primary key")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
            comment="Creation timestamp (UTC)",
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
            comment="Last update timestamp (UTC)",
        ),
    ]


def _user_fk(name: str = "user_id", unique: bool = False) -> sa.Column:
    return sa.Column(name, sa.Uuid(), sa.ForeignKey("users.id"), nullable=False, unique=unique)


def _mentorship_fk() -> sa.Column:
    return sa.Column(
        "mentorship_id",
        sa.Uuid(),
        sa.ForeignKey("mentorships.id", ondelete="CASCADE"),
        nullable=False,
    )


def _activity_fk(name: str) -> sa.Column:
    return sa.Column(
        name, sa.Uuid(), sa.ForeignKey("cpd_activities.id", ondelete="SET NULL"), nullable=True
    )


def _visibility(table: str) -> list[sa.SchemaItem]:
    return [
        sa.Column("visibility", sa.String(10), nullable=False),
        sa.CheckConstraint(
            "visibility IN ('public', 'private')", name=f"check_{table}_visibility"
        ),
    ]


def upgrade() -> None:
    """Create mentor matching and portfolio tables."""
    # Mentoring
    op.create_table(
        "mentor_profiles",
        _id(),
        _user_fk(unique=True),
        sa.Column("role", sa.String(10), nullable=False),
        sa.Column("school", sa.String(100), nullable=False),
        sa.Column("phase", sa.String(50), nullable=False),
        sa.Column("years_experience", sa.Integer(), nullable=False),
        sa.Column("expertise", sa.JSON(), nullable=False),
        sa.Column("subjects", sa.JSON(), nullable=False),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("availability", sa.String(200), nullable=True),
        sa.Column("goals", sa.Text(), nullable=True),
        sa.Column(
            "preferences", sa.JSON(), nullable=False, comment="{frequency, formats, focus_areas}"
        ),
        *_timestamps(),
        sa.CheckConstraint(
            "role IN ('mentor', 'mentee', 'both')", name="check_mentor_profile_role"
        ),
        sa.CheckConstraint("years_experience >= 0", name="check_mentor_years_experience"),
    )

    op.create_table(
        "mentorship_requests",
        _id(),
        _user_fk("mentor_id"),
        _user_fk("mentee_id"),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("focus_areas", sa.JSON(), nullable=False),
        sa.Column("goals", sa.JSON(), nullable=False),
        sa.Column("duration_months", sa.SmallInteger(), nullable=False),
        sa.Column("frequency", sa.String(50), nullable=False),
        sa.Column("status", sa.String(10), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('pending', 'accepted', 'declined')", name="check_mentorship_request_status"
        ),
        sa.CheckConstraint("duration_months > 0", name="check_mentorship_request_duration"),
    )
    op.create_index(
        "idx_mentorship_requests_mentor", "mentorship_requests", ["mentor_id", "status"]
    )

    op.create_table(
        "mentorships",
        _id(),
        sa.Column(
            "request_id", sa.Uuid(), sa.ForeignKey("mentorship_requests.id"), nullable=True
        ),
        _user_fk("mentor_id"),
        _user_fk("mentee_id"),
        _activity_fk("mentor_activity_id"),
        _activity_fk("mentee_activity_id"),
        sa.Column("status", sa.String(10), nullable=False),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("frequency", sa.String(50), nullable=False),
        sa.Column("focus_areas", sa.JSON(), nullable=False),
        sa.Column("goals", sa.JSON(), nullable=False, comment="[{text, status}]"),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("status IN ('active', 'completed')", name="check_mentorship_status"),
    )
    op.create_index("idx_mentorships_mentor", "mentorships", ["mentor_id"])
    op.create_index("idx_mentorships_mentee", "mentorships", ["mentee_id"])

    op.create_table(
        "mentorship_meetings",
        _id(),
        _mentorship_fk(),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=False, comment="Minutes"),
        sa.Column("format", sa.String(50), nullable=False),
        sa.Column("agenda", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("status", sa.String(10), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('scheduled', 'completed', 'cancelled')",
            name="check_mentorship_meeting_status",
        ),
        sa.CheckConstraint("duration > 0", name="check_mentorship_meeting_duration"),
    )
    op.create_index(
        "idx_mentorship_meetings_date", "mentorship_meetings", ["mentorship_id", "date"]
    )

    op.create_table(
        "mentorship_resources",
        _id(),
        _mentorship_fk(),
        _user_fk("shared_by_id"),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("type", sa.String(50), nullable=False),
        sa.Column("url", sa.String(1000), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "mentorship_feedback",
        _id(),
        _mentorship_fk(),
        _user_fk("from_user_id"),
        _user_fk("to_user_id"),
        sa.Column(
            "meeting_id",
            sa.Uuid(),
            sa.ForeignKey("mentorship_meetings.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("rating", sa.SmallInteger(), nullable=False),
        sa.Column("comment", sa.Text(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("rating BETWEEN 1 AND 5", name="check_mentorship_feedback_rating"),
    )

    # Portfolio
    op.create_table(
        "portfolio_profiles",
        _id(),
        _user_fk(unique=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column("school", sa.String(100), nullable=True),
        sa.Column("years_experience", sa.Integer(), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("biography", sa.Text(), nullable=True),
        sa.Column("teaching_philosophy", sa.Text(), nullable=True),
        sa.Column("specialisations", sa.JSON(), nullable=False),
        sa.Column("avatar_url", sa.String(1000), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "portfolio_qualifications",
        _id(),
        _user_fk(),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column("institution", sa.String(100), nullable=False),
        sa.Column("year", sa.String(4), nullable=False),
        sa.Column("verified", sa.Boolean(), nullable=False),
        sa.Column("certificate_url", sa.String(1000), nullable=True),
        *_timestamps(),
    )
    op.create_index(
        "ix_portfolio_qualifications_user_id", "portfolio_qualifications", ["user_id"]
    )

    op.create_table(
        "portfolio_achievements",
        _id(),
        _user_fk(),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("type", sa.String(50), nullable=False),
        *_visibility("portfolio_achievement"),
        *_timestamps(),
    )
    op.create_index(
        "idx_portfolio_achievements_user_date", "portfolio_achievements", ["user_id", "date"]
    )

    op.create_table(
        "portfolio_evidence",
        _id(),
        _user_fk(),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("type", sa.String(50), nullable=False),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("file_url", sa.String(1000), nullable=False),
        sa.Column("file_type", sa.String(50), nullable=False),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("achievement_ids", sa.JSON(), nullable=False),
        *_visibility("portfolio_evidence"),
        *_timestamps(),
    )
    op.create_index(
        "idx_portfolio_evidence_user_date", "portfolio_evidence", ["user_id", "date"]
    )

    op.create_table(
        "portfolio_reflections",
        _id(),
        _user_fk(),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("evidence_ids", sa.JSON(), nullable=False),
        *_visibility("portfolio_reflection"),
        *_timestamps(),
    )
    op.create_index(
        "idx_portfolio_reflections_user_date", "portfolio_reflections", ["user_id", "date"]
    )


def downgrade() -> None:
    """Drop mentor matching and portfolio tables in reverse dependency order."""
    for table in (
        "portfolio_reflections",
        "portfolio_evidence",
        "portfolio_achievements",
        "portfolio_qualifications",
        "portfolio_profiles",
        "mentorship_feedback",
        "mentorship_resources",
        "mentorship_meetings",
        "mentorships",
        "mentorship_requests",
        "mentor_profiles",
    ):
        op.drop_table(table)
