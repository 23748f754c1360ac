"""
Mentor Matching

Expertise catalogue, mentor search filters, meeting credit towards CPD and
mentoring analytics.
"""

from __future__ import annotations

import calendar
from collections import Counter
from datetime import datetime
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from uuid import UUID

    from edpsych.core.models import CPDActivity, MentorProfile, Mentorship, MentorshipMeeting

MENTORSHIP_ACTIVITY_TYPE = "Mentorship"
HISTORY_MONTHS = 12

EXPERTISE_AREAS = (
    {"id": 1, "name": "Special Educational Needs", "category": "Inclusion"},
    {"id": 2, "name": "Behaviour Management", "category": "Classroom Management"},
    {"id": 3, "name": "Curriculum Design", "category": "Teaching & Learning"},
    {"id": 4, "name": "Assessment for Learning", "category": "Assessment"},
    {"id": 5, "name": "Differentiation", "category": "Teaching & Learning"},
    {"id": 6, "name": "Digital Learning", "category": "EdTech"},
    {"id": 7, "name": "Early Years Education", "category": "Phase Specific"},
    {"id": 8, "name": "Secondary Mathematics", "category": "Subject Specific"},
    {"id": 9, "name": "Leadership Development", "category": "Leadership"},
    {"id": 10, "name": "Wellbeing & Mental Health", "category": "Pastoral"},
    {"id": 11, "name": "Restorative Practice", "category": "Behaviour"},
    {"id": 12, "name": "Literacy Across Curriculum", "category": "Literacy"},
    {"id": 13, "name": "STEM Integration", "category": "Cross-Curricular"},
    {"id": 14, "name": "Educational Research", "category": "Professional Learning"},
    {"id": 15, "name": "Parent Engagement", "category": "Community"},
)
EXPERTISE_IDS = frozenset(area["id"] for area in EXPERTISE_AREAS)


def unknown_expertise(ids: Iterable[int]) -> list[int]:
    """Ids not in the catalogue, in the order given."""
    return [i for i in ids if i not in EXPERTISE_IDS]


def add_months(start: datetime, months: int) -> datetime:
    """Same day `months` later, clamped to the end of shorter months."""
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return start.replace(year=year, month=month, day=day)


def initial_goals(texts: Iterable[str]) -> list[dict[str, str]]:
    return [{"text": text, "status": "not_started"} for text in texts]


def meeting_credit(minutes: int) -> float:
    """Hours (and CPD points, one per hour) earned by a completed meeting."""
    return round(minutes / 60, 2)


def credit_activity(activity: CPDActivity, minutes: int) -> None:
    hours = meeting_credit(minutes)
    activity.duration += hours
    activity.points += hours


def matches_filters(
    profile: MentorProfile,
    *,
    expertise: int | None = None,
    phase: str | None = None,
    subject: str | None = None,
) -> bool:
    """Mentor search: every given filter must match; text compares case-insensitively."""
    if not profile.is_mentor:
        return False
    if expertise is not None and expertise not in profile.expertise:
        return False
    if phase and profile.phase.lower() != phase.lower():
        return False
    if subject and subject.lower() not in (s.lower() for s in profile.subjects):
        return False
    return True


def _month_buckets(today: datetime) -> list[tuple[int, int]]:
    buckets = []
    for back in range(HISTORY_MONTHS - 1, -1, -1):
        index = today.year * 12 + today.month - 1 - back
        buckets.append((index // 12, index % 12 + 1))
    return buckets


def mentoring_analytics(
    user_id: UUID,
    mentorships: Sequence[Mentorship],
    meetings: Sequence[MentorshipMeeting],
    mentorship_activities: Sequence[CPDActivity],
    today: datetime,
) -> dict[str, Any]:
    """Overview, focus areas mentored and completed meetings per month.

    Args:
        mentorships: Every mentorship the user takes part in, either side
        meetings: Meetings belonging to those mentorships
        mentorship_activities: The user's "Mentorship" CPD activities
        today: End of the twelve-month window
    """
    completed_meetings = [m for m in meetings if m.status == "completed"]
    goals = [goal for mentorship in mentorships for goal in mentorship.goals]

    expertise = Counter(
        area
        for mentorship in mentorships
        if mentorship.mentor_id == user_id
        for area in mentorship.focus_areas
    )

    per_month = Counter((m.date.year, m.date.month) for m in completed_meetings)
    monthly = [
        {"month": f"{calendar.month_abbr[month]} {year}", "meetings": per_month[(year, month)]}
        for year, month in _month_buckets(today)
    ]

    return {
        "overview": {
            "active_mentorships": sum(1 for m in mentorships if m.status == "active"),
            "completed_mentorships": sum(1 for m in mentorships if m.status == "completed"),
            "completed_meetings": len(completed_meetings),
            "total_meeting_hours": round(sum(m.duration for m in completed_meetings) / 60, 2),
            "completed_goals": sum(1 for g in goals if g.get("status") == "completed"),
            "in_progress_goals": sum(1 for g in goals if g.get("status") == "in_progress"),
            "total_cpd_points": sum(activity.points for activity in mentorship_activities),
        },
        "expertise_distribution": dict(expertise),
        "monthly": monthly,
    }
