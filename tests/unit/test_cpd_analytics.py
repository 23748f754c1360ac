"""
Unit Tests for CPD Analytics
"""

from datetime import UTC, datetime

from edpsych.core.models import CPDActivity, CPDGoal
from edpsych.cpd import build_recommendations, goal_progress, related_activities, summarize_activities

DATE = datetime(2025, 1, 15, tzinfo=UTC)


def activity(status="Completed", points=5.0, duration=2.0, categories=(1,), standards=(1,)):
    return CPDActivity(
        title="Training",
        type="course",
        date=DATE,
        status=status,
        points=points,
        duration=duration,
        categories=list(categories),
        standards=list(standards),
    )


def goal(target=20.0, categories=(1,), standards=()):
    return CPDGoal(
        title="Reach 20 points",
        target_points=target,
        categories=list(categories),
        standards=list(standards),
        deadline=DATE,
    )


class TestSummarizeActivities:
    def test_only_completed_count_towards_totals(self):
        activities = [
            activity(points=5, duration=2, categories=(1, 2), standards=(3,)),
            activity(points=10, duration=4, categories=(2,), standards=(3,)),
            activity(status="Planned", points=50),
            activity(status="In Progress", points=50),
        ]

        summary = summarize_activities(activities)

        assert summary["total_points"] == 15
        assert summary["total_hours"] == 6
        assert summary["total"] == 4
        assert summary["completed"] == 2
        assert summary["planned"] == 1
        assert summary["in_progress"] == 1
        assert summary["completion_rate"] == 50.0
        assert summary["category_points"] == {1: 5, 2: 15}
        assert summary["standard_points"] == {3: 15}

    def test_empty(self):
        summary = summarize_activities([])

        assert summary["total_points"] == 0
        assert summary["completion_rate"] == 0.0


class TestGoalProgress:
    def test_related_by_category_or_standard(self):
        by_category = activity(categories=(1,), standards=())
        by_standard = activity(categories=(), standards=(4,))
        unrelated = activity(categories=(9,), standards=(9,))

        related = related_activities(goal(categories=(1,), standards=(4,)), [by_category, by_standard, unrelated])

        assert related == [by_category, by_standard]

    def test_progress_caps_at_100(self):
        progress = goal_progress(goal(target=10), [activity(points=8), activity(points=8)])

        assert progress["points_achieved"] == 16
        assert progress["progress_percentage"] == 100.0

    def test_ignores_incomplete_activities(self):
        progress = goal_progress(goal(target=20), [activity(points=5), activity(status="Planned", points=5)])

        assert progress["progress_percentage"] == 25.0

    def test_zero_target(self):
        assert goal_progress(goal(target=0), [activity()])["progress_percentage"] == 0.0


def test_recommendations_tagged_with_focus_and_goals():
    recent = [activity(categories=(3, 1), standards=(2,)), activity(categories=(1, 5), standards=(7,))]
    goals = [goal(categories=(8,), standards=(6,))]

    recommendations = build_recommendations(recent, goals)

    assert [rec["type"] for rec in recommendations] == ["course", "webinar", "reading"]
    assert recommendations[0]["categories"] == [3, 1]
    assert recommendations[1]["categories"] == [8]
    assert recommendations[1]["standards"] == [6]
    assert recommendations[2]["categories"] == [3]
