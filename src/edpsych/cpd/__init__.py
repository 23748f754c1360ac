"""
CPD Module

Continuing professional development analytics and recommendations, mentor
matching and portfolio scoring.
"""

from .analytics import (
    build_recommendations,
    goal_progress,
    related_activities,
    summarize_activities,
)
from .mentoring import (
    EXPERTISE_AREAS,
    MENTORSHIP_ACTIVITY_TYPE,
    add_months,
    credit_activity,
    initial_goals,
    matches_filters,
    mentoring_analytics,
    unknown_expertise,
)
from .portfolio import link_ids, portfolio_completeness, without_link

__all__ = [
    "build_recommendations",
    "goal_progress",
    "related_activities",
    "summarize_activities",
    # Mentoring
    "EXPERTISE_AREAS",
    "MENTORSHIP_ACTIVITY_TYPE",
    "add_months",
    "credit_activity",
    "initial_goals",
    "matches_filters",
    "mentoring_analytics",
    "unknown_expertise",
    # Portfolio
    "link_ids",
    "portfolio_completeness",
    "without_link",
]
