"""Initial schema

Revision ID: 3c1f9a7d2b60
Revises:
Create Date: 2026-10-18 09:00:00.000000+00:00

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3c1f9a7d2b60"  # pragma: allowlist secret
down_revision: str | None = None
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


def _deleted_at() -> sa.Column:
    return sa.Column(
        "deleted_at",
        sa.DateTime(timezone=True),
        nullable=True,
        comment="Soft delete timestamp (NULL = not deleted)",
    )


def _user_fk(name: str = "user_id", nullable: bool = False) -> sa.Column:
    return sa.Column(name, sa.Uuid(), sa.ForeignKey("users.id"), nullable=nullable)


def _plan_fk() -> sa.Column:
    return sa.Column(
        "plan_id",
        sa.Uuid(),
        sa.ForeignKey("curriculum_plans.id", ondelete="CASCADE"),
        nullable=False,
    )


def upgrade() -> None:
    """Create every EdPsych Connect table."""
    # Users
    op.create_table(
        "users",
        _id(),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("role", sa.String(40), nullable=False),
        sa.Column(
            "tenant_id",
            sa.String(100),
            nullable=True,
            comment="School or trust the account belongs to",
        ),
        sa.Column("key_stage", sa.String(20), nullable=True),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
        _deleted_at(),
        sa.CheckConstraint(
            "role IN ('admin', 'teacher', 'educational_psychologist', "
            "'teaching_assistant', 'parent', 'student')",
            name="check_user_role",
        ),
    )
    op.create_index("idx_users_role", "users", ["role"])
    op.create_index("idx_users_tenant", "users", ["tenant_id"])

    # Restorative justice
    op.create_table(
        "restorative_frameworks",
        _id(),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("age_group", sa.String(20), nullable=False),
        sa.Column("scenario", sa.String(100), nullable=False),
        sa.Column(
            "steps", sa.JSON(), nullable=False, comment="[{title, description, questions[]}]"
        ),
        _user_fk("created_by_id", nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "age_group IN ('all', 'primary', 'secondary')", name="check_framework_age_group"
        ),
    )
    op.create_index("idx_frameworks_scenario", "restorative_frameworks", ["scenario"])

    op.create_table(
        "restorative_conversations",
        _id(),
        sa.Column(
            "framework_id",
            sa.Uuid(),
            sa.ForeignKey("restorative_frameworks.id"),
            nullable=False,
        ),
        _user_fk(),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("participants", sa.JSON(), nullable=False, comment="[{name, role}]"),
        sa.Column("key_points", sa.Text(), nullable=True),
        sa.Column("agreements", sa.Text(), nullable=True),
        sa.Column("follow_up_plan", sa.Text(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('draft', 'in_progress', 'completed')", name="check_conversation_status"
        ),
    )
    op.create_index("idx_conversations_user", "restorative_conversations", ["user_id"])

    # CPD
    op.create_table(
        "cpd_activities",
        _id(),
        _user_fk(),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("type", sa.String(50), nullable=False),
        sa.Column("provider", sa.String(200), nullable=True),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("duration", sa.Float(), nullable=False, comment="Hours"),
        sa.Column("points", sa.Float(), nullable=False),
        sa.Column("categories", sa.JSON(), nullable=False),
        sa.Column("standards", sa.JSON(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("evidence", sa.Text(), nullable=True),
        sa.Column("reflection", sa.Text(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('Planned', 'In Progress', 'Completed')", name="check_cpd_activity_status"
        ),
        sa.CheckConstraint("duration >= 0", name="check_cpd_duration"),
        sa.CheckConstraint("points >= 0", name="check_cpd_points"),
    )
    op.create_index("idx_cpd_activities_user_date", "cpd_activities", ["user_id", "date"])

    op.create_table(
        "cpd_goals",
        _id(),
        _user_fk(),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("target_points", sa.Float(), nullable=False),
        sa.Column("categories", sa.JSON(), nullable=False),
        sa.Column("standards", sa.JSON(), nullable=False),
        sa.Column("deadline", sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("target_points >= 0", name="check_cpd_goal_target"),
    )
    op.create_index("idx_cpd_goals_user_deadline", "cpd_goals", ["user_id", "deadline"])

    op.create_table(
        "cpd_reflections",
        _id(),
        sa.Column(
            "activity_id",
            sa.Uuid(),
            sa.ForeignKey("cpd_activities.id", ondelete="CASCADE"),
            nullable=False,
        ),
        _user_fk(),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("impact_rating", sa.SmallInteger(), nullable=True),
        sa.Column("next_steps", sa.Text(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("activity_id", "user_id", name="uq_cpd_reflection_activity_user"),
        sa.CheckConstraint(
            "impact_rating IS NULL OR (impact_rating BETWEEN 1 AND 5)",
            name="check_cpd_impact_rating",
        ),
    )

    op.create_table(
        "cpd_evidence",
        _id(),
        sa.Column(
            "activity_id",
            sa.Uuid(),
            sa.ForeignKey("cpd_activities.id", ondelete="CASCADE"),
            nullable=False,
        ),
        _user_fk(),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("file_url", sa.String(1000), nullable=False),
        sa.Column("file_type", sa.String(50), nullable=False),
        *_timestamps(),
    )

    # Emotional regulation
    op.create_table(
        "emotion_records",
        _id(),
        _user_fk(),
        sa.Column("emotion", sa.String(50), nullable=False),
        sa.Column("intensity", sa.SmallInteger(), nullable=False),
        sa.Column("triggers", sa.String(500), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("intensity BETWEEN 1 AND 10", name="check_emotion_intensity"),
    )
    op.create_index("idx_emotion_records_user_time", "emotion_records", ["user_id", "timestamp"])

    op.create_table(
        "emotion_journals",
        _id(),
        _user_fk(),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("emotions", sa.JSON(), nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
    )
    op.create_index(
        "idx_emotion_journals_user_time", "emotion_journals", ["user_id", "timestamp"]
    )

    op.create_table(
        "emotional_regulation_settings",
        _id(),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False, unique=True),
        sa.Column("pattern_recognition_enabled", sa.Boolean(), nullable=False),
        sa.Column("pattern_recognition_settings", sa.JSON(), nullable=False),
        sa.Column(
            "strategy_preferences",
            sa.JSON(),
            nullable=False,
            comment="{preferred_types, complexity, auto_suggest, favorites}",
        ),
        sa.Column("reminder_frequency", sa.String(10), nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "reminder_frequency IN ('low', 'medium', 'high')", name="check_reminder_frequency"
        ),
    )

    op.create_table(
        "emotional_regulation_logs",
        _id(),
        _user_fk(),
        sa.Column("action", sa.String(50), nullable=False),
        sa.Column("details", sa.JSON(), nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(
        "idx_regulation_logs_user_action", "emotional_regulation_logs", ["user_id", "action"]
    )

    # Curriculum
    op.create_table(
        "curriculum_plans",
        _id(),
        _user_fk(),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("subject", sa.String(50), nullable=True),
        sa.Column("key_stage", sa.String(20), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("objectives", sa.JSON(), nullable=False),
        sa.Column("content", sa.JSON(), nullable=False),
        *_timestamps(),
        _deleted_at(),
    )
    op.create_index("idx_curriculum_plans_user", "curriculum_plans", ["user_id"])

    op.create_table(
        "curriculum_plan_collaborators",
        _id(),
        _plan_fk(),
        _user_fk(),
        sa.Column("role", sa.String(10), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("plan_id", "user_id", name="uq_plan_collaborator"),
        sa.CheckConstraint("role IN ('editor', 'viewer')", name="check_collaborator_role"),
    )

    op.create_table(
        "curriculum_plan_comments",
        _id(),
        _plan_fk(),
        _user_fk(),
        sa.Column("content", sa.Text(), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "curriculum_plan_tasks",
        _id(),
        _plan_fk(),
        _user_fk("creator_id"),
        _user_fk("assigned_to_id", nullable=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("due_date", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('pending', 'in_progress', 'completed')", name="check_plan_task_status"
        ),
    )

    # Assessments
    op.create_table(
        "assessments",
        _id(),
        _user_fk("created_by_id"),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("key_stage", sa.String(20), nullable=False),
        sa.Column("subject", sa.String(40), nullable=False),
        sa.Column("assessment_type", sa.String(30), nullable=False),
        sa.Column("difficulty_level", sa.String(20), nullable=False),
        sa.Column("topics", sa.JSON(), nullable=False),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("estimated_duration", sa.Integer(), nullable=False),
        sa.Column("questions", sa.JSON(), nullable=False),
        sa.Column("sections", sa.JSON(), nullable=False),
        sa.Column("passing_score", sa.Float(), nullable=False),
        sa.Column("max_attempts", sa.Integer(), nullable=False),
        sa.Column("time_limit", sa.Integer(), nullable=True, comment="Minutes"),
        sa.Column("randomize_questions", sa.Boolean(), nullable=False),
        sa.Column("show_feedback", sa.String(10), nullable=False),
        *_timestamps(),
        _deleted_at(),
        sa.CheckConstraint(
            "passing_score BETWEEN 0 AND 100", name="check_assessment_passing_score"
        ),
        sa.CheckConstraint("max_attempts >= 1", name="check_assessment_max_attempts"),
    )
    op.create_index("idx_assessments_stage_subject", "assessments", ["key_stage", "subject"])

    op.create_table(
        "assessment_attempts",
        _id(),
        sa.Column("assessment_id", sa.Uuid(), sa.ForeignKey("assessments.id"), nullable=False),
        _user_fk("student_id"),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_complete", sa.Boolean(), nullable=False),
        sa.Column("score", sa.Float(), nullable=True),
        sa.Column("max_score", sa.Float(), nullable=True),
        sa.Column("percentage", sa.Float(), nullable=True),
        sa.Column("passed", sa.Boolean(), nullable=True),
        sa.Column(
            "result",
            sa.JSON(),
            nullable=True,
            comment="Full result: question results, analytics, feedback",
        ),
        *_timestamps(),
    )
    op.create_index(
        "idx_attempts_assessment_student", "assessment_attempts", ["assessment_id", "student_id"]
    )

    op.create_table(
        "attempt_responses",
        _id(),
        sa.Column(
            "attempt_id",
            sa.Uuid(),
            sa.ForeignKey("assessment_attempts.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("question_id", sa.String(100), nullable=False),
        sa.Column("response", sa.JSON(), nullable=True),
        sa.Column("time_spent", sa.Integer(), nullable=False, comment="Seconds"),
        *_timestamps(),
        sa.UniqueConstraint("attempt_id", "question_id", name="uq_attempt_question_response"),
    )

    # Pacing
    op.create_table(
        "progress_pacings",
        _id(),
        _user_fk(),
        _user_fk("student_id", nullable=True),
        sa.Column(
            "curriculum_id", sa.Uuid(), sa.ForeignKey("curriculum_plans.id"), nullable=True
        ),
        sa.Column("standard_pace", sa.Float(), nullable=False),
        sa.Column("adjusted_pace", sa.Float(), nullable=False),
        sa.Column("adaptation_type", sa.String(20), nullable=False),
        sa.Column("estimated_completion", sa.String(50), nullable=True),
        sa.Column("pacing_data", sa.JSON(), nullable=False),
        sa.Column("settings", sa.JSON(), nullable=False),
        sa.Column("subject", sa.String(50), nullable=True),
        sa.Column("key_stage", sa.String(20), nullable=True),
        sa.Column("progress_metrics_used", sa.Boolean(), nullable=False),
        sa.Column("source", sa.String(10), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("source IN ('ai', 'rules')", name="check_pacing_source"),
    )
    op.create_index(
        "idx_progress_pacings_user_created", "progress_pacings", ["user_id", "created_at"]
    )

    # Developer API
    op.create_table(
        "oauth_clients",
        _id(),
        sa.Column("tenant_id", sa.String(100), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("client_id", sa.String(64), nullable=False, unique=True),
        sa.Column(
            "client_secret_hash",
            sa.String(255),
            nullable=False,
            comment="bcrypt hash; plain secret shown once",
        ),
        sa.Column("redirect_uris", sa.JSON(), nullable=False),
        sa.Column("allowed_scopes", sa.JSON(), nullable=False),
        _user_fk("created_by_id"),
        sa.Column("active", sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index("idx_oauth_clients_tenant", "oauth_clients", ["tenant_id"])

    op.create_table(
        "oauth_authorization_codes",
        _id(),
        sa.Column("code", sa.String(128), nullable=False, unique=True),
        sa.Column("client_id", sa.String(64), nullable=False),
        sa.Column("tenant_id", sa.String(100), nullable=False),
        _user_fk(),
        sa.Column("scopes", sa.JSON(), nullable=False),
        sa.Column("redirect_uri", sa.String(1000), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("used", sa.Boolean(), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "oauth_refresh_tokens",
        _id(),
        sa.Column("token", sa.String(256), nullable=False, unique=True),
        sa.Column("client_id", sa.String(64), nullable=False),
        sa.Column("tenant_id", sa.String(100), nullable=False),
        _user_fk(),
        sa.Column("scopes", sa.JSON(), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("revoked", sa.Boolean(), nullable=False),
        *_timestamps(),
    )


def downgrade() -> None:
    """Drop every table in reverse dependency order."""
    for table in (
        "oauth_refresh_tokens",
        "oauth_authorization_codes",
        "oauth_clients",
        "progress_pacings",
        "attempt_responses",
        "assessment_attempts",
        "assessments",
        "curriculum_plan_tasks",
        "curriculum_plan_comments",
        "curriculum_plan_collaborators",
        "curriculum_plans",
        "emotional_regulation_logs",
        "emotional_regulation_settings",
        "emotion_journals",
        "emotion_records",
        "cpd_evidence",
        "cpd_reflections",
        "cpd_goals",
        "cpd_activities",
        "restorative_conversations",
        "restorative_frameworks",
        "users",
    ):
        op.drop_table(table)
