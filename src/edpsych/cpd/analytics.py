"""
CPD Analytics

Points/hours summaries, goal progress and recommendations computed from an
educator's CPD activities and goals.
"""

from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from edpsych.core.models import CPDActivity, CPDGoal

RECOMMENDATION_CATALOGUE = (
    {
        "type": "course",
        "title": "Advanced Teaching Strategies",
        "description": "Enhance your teaching skills with this comprehensive course.",
        "points": 10,
        "duration": 8,
        "relevance": "high",
        "source": "focus",
        "tags": 2,
    },
    {
        "type": "webinar",
        "title": "Educational Psychology in Practice",
        "description": "Learn how to apply psychological principles in educational settings.",
        "points": 5,
        "duration": 2,
        "relevance": "medium",
        "source": "goals",
        "tags": 2,
    },
    {
        "type": "reading",
        "title": "Latest Research in Learning Disabilities",
        "description": "Stay up-to-date with the latest research and findings.",
        "points": 3,
        "duration": 1.5,
        "relevance": "high",
        "source": "focus",
        "tags": 1,
    },
)


def _unique(values: Iterable[int]) -> list[int]:
    """De-duplicate preserving first-seen order."""
    return list(dict.fromkeys(values))


def summarize_activities(activities: Sequence[CPDActivity]) -> dict[str, Any]:
    """Totals, status counts and points per category/standard.

    Points and hours only count completed activities.
    """
    completed = [activity for activity in activities if activity.is_completed]
    category_points: dict[int, float] = defaultdict(float)
    standard_points: dict[int, float] = defaultdict(float)
    for activity in completed:
        for category in activity.categories:
            category_points[category] += activity.points
        for standard in activity.standards:
            standard_points[standard] += activity.points

    total = len(activities)
    return {
        "total_points": sum(activity.points for activity in completed),
        "total_hours": sum(activity.duration for activity in completed),
        "total": total,
        "completed": len(completed),
        "planned": sum(1 for activity in activities if activity.status == "Planned"),
        "in_progress": sum(1 for activity in activities if activity.status == "In Progress"),
        "completion_rate": round(len(completed) / total * 100, 2) if total else 0.0,
        "category_points": dict(category_points),
        "standard_points": dict(standard_points),
    }


def related_activities(goal: CPDGoal, activities: Iterable[CPDActivity]) -> list[CPDActivity]:
    """Activities sharing at least one category or standard with the goal."""
    goal_categories = set(goal.categories)
    goal_standards = set(goal.standards)
    return [
        activity
        for activity in activities
        if goal_categories.intersection(activity.categories)
        or goal_standards.intersection(activity.standards)
    ]


def goal_progress(goal: CPDGoal, related: Iterable[CPDActivity]) -> dict[str, float]:
    """Points from completed related activities against the goal target."""
    achieved = sum(activity.points for activity in related if activity.is_completed)
    percentage = min(100.0, achieved / goal.target_points * 100) if goal.target_points > 0 else 0.0
    return {
        "points_achieved": achieved,
        "target_points": goal.target_points,
        "progress_percentage": round(percentage, 2),
    }


def build_recommendations(
    recent_completed: Sequence[CPDActivity], active_goals: Sequence[CPDGoal]
) -> list[dict[str, Any]]:
    """Tag the catalogue with the user's focus areas.

    Args:
        recent_completed: Most recent completed activities (newest first)
        active_goals: Goals whose deadline has not passed
    """
    focus = {
        "categories": _unique(c for activity in recent_completed for c in activity.categories),
        "standards": _unique(s for activity in recent_completed for s in activity.standards),
    }
    goals = {
        "categories": _unique(c for goal in active_goals for c in goal.categories),
        "standards": _unique(s for goal in active_goals for s in goal.standards),
    }

    recommendations = []
    for entry in RECOMMENDATION_CATALOGUE:
        tags = focus if entry["source"] == "focus" else goals
        limit = entry["tags"]
        recommendations.append(
            {
                "type": entry["type"],
                "title": entry["title"],
                "description": entry["description"],
                "points": entry["points"],
                "duration": entry["duration"],
                "relevance": entry["relevance"],
                "categories": tags["categories"][:limit],
                "standards": tags["standards"][:limit],
            }
        )
    return recommendations
