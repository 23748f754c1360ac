"""
Unit Tests for Mentor Matching and Portfolio Scoring
"""

from datetime import UTC, datetime
from uuid import uuid4

from edpsych.core.models import CPDActivity, MentorProfile, Mentorship, MentorshipMeeting
from edpsych.cpd import (
    EXPERTISE_AREAS,
    add_months,
    credit_activity,
    initial_goals,
    link_ids,
    matches_filters,
    mentoring_analytics,
    portfolio_completeness,
    unknown_expertise,
    without_link,
)

TODAY = datetime(2026, 10, 18, tzinfo=UTC)


def profile(role="mentor", phase="Secondary", expertise=(1, 4), subjects=("Maths",)):
    return MentorProfile(
        role=role,
        school="Hillside Academy",
        phase=phase,
        years_experience=10,
        expertise=list(expertise),
        subjects=list(subjects),
    )


def mentorship(mentor_id, mentee_id, status="active", focus_areas=(), goals=()):
    return Mentorship(
        mentor_id=mentor_id,
        mentee_id=mentee_id,
        status=status,
        start_date=TODAY,
        end_date=TODAY,
        frequency="fortnightly",
        focus_areas=list(focus_areas),
        goals=list(goals),
    )


def meeting(date, duration=60, status="completed"):
    return MentorshipMeeting(
        mentorship_id=uuid4(), date=date, duration=duration, format="video", status=status
    )


class TestCatalogue:
    def test_fifteen_areas_with_unique_ids(self):
        assert len(EXPERTISE_AREAS) == 15
        assert [area["id"] for area in EXPERTISE_AREAS] == list(range(1, 16))
        assert EXPERTISE_AREAS[0] == {
            "id": 1,
            "name": "Special Educational Needs",
            "category": "Inclusion",
        }

    def test_unknown_expertise(self):
        assert unknown_expertise([1, 16, 15, 0]) == [16, 0]


class TestAddMonths:
    def test_simple(self):
        assert add_months(datetime(2026, 1, 10, tzinfo=UTC), 3) == datetime(2026, 4, 10, tzinfo=UTC)

    def test_crosses_year(self):
        assert add_months(datetime(2026, 11, 5, tzinfo=UTC), 6) == datetime(2027, 5, 5, tzinfo=UTC)

    def test_clamps_to_month_end(self):
        assert add_months(datetime(2027, 1, 31, tzinfo=UTC), 1) == datetime(2027, 2, 28, tzinfo=UTC)


class TestMeetingCredit:
    def test_one_point_per_hour(self):
        activity = CPDActivity(
            title="Mentoring",
            type="Mentorship",
            date=TODAY,
            duration=1.0,
            points=1.0,
            status="In Progress",
        )

        credit_activity(activity, 90)

        assert activity.duration == 2.5
        assert activity.points == 2.5

    def test_initial_goals_not_started(self):
        assert initial_goals(["Plan a unit"]) == [{"text": "Plan a unit", "status": "not_started"}]


class TestMatchesFilters:
    def test_mentee_only_profiles_never_match(self):
        assert not matches_filters(profile(role="mentee"))
        assert matches_filters(profile(role="both"))

    def test_expertise_phase_and_subject(self):
        mentor = profile()

        assert matches_filters(mentor, expertise=4, phase="secondary", subject="maths")
        assert not matches_filters(mentor, expertise=9)
        assert not matches_filters(mentor, phase="Primary")
        assert not matches_filters(mentor, subject="History")


class TestMentoringAnalytics:
    def test_overview_and_distribution(self):
        me, other = uuid4(), uuid4()
        mentorships = [
            mentorship(
                me,
                other,
                focus_areas=(1, 4),
                goals=[{"text": "a", "status": "completed"}, {"text": "b", "status": "in_progress"}],
            ),
            mentorship(other, me, status="completed", focus_areas=(9,)),
        ]
        meetings = [
            meeting(datetime(2026, 10, 1, tzinfo=UTC), duration=90),
            meeting(datetime(2026, 9, 1, tzinfo=UTC), duration=30),
            meeting(datetime(2026, 10, 20, tzinfo=UTC), status="scheduled"),
        ]
        activity = CPDActivity(
            title="Mentoring", type="Mentorship", date=TODAY, duration=2, points=2, status="In Progress"
        )

        analytics = mentoring_analytics(me, mentorships, meetings, [activity], TODAY)

        assert analytics["overview"] == {
            "active_mentorships": 1,
            "completed_mentorships": 1,
            "completed_meetings": 2,
            "total_meeting_hours": 2.0,
            "completed_goals": 1,
            "in_progress_goals": 1,
            "total_cpd_points": 2,
        }
        # Only mentorships where the user is the mentor
        assert analytics["expertise_distribution"] == {1: 1, 4: 1}

    def test_twelve_month_window_ends_this_month(self):
        meetings = [
            meeting(datetime(2026, 10, 1, tzinfo=UTC)),
            meeting(datetime(2025, 11, 3, tzinfo=UTC)),
            meeting(datetime(2025, 10, 3, tzinfo=UTC)),
        ]

        monthly = mentoring_analytics(uuid4(), [], meetings, [], TODAY)["monthly"]

        assert len(monthly) == 12
        assert monthly[0] == {"month": "Nov 2025", "meetings": 1}
        assert monthly[-1] == {"month": "Oct 2026", "meetings": 1}
        assert sum(month["meetings"] for month in monthly) == 2


class TestPortfolioScoring:
    def test_empty_portfolio(self):
        assert portfolio_completeness(False, {}) == 0

    def test_sections_capped_at_twenty(self):
        counts = {"achievements": 10, "evidence": 2, "reflections": 1, "qualifications": 4}

        assert portfolio_completeness(True, counts) == 20 + 20 + 8 + 5 + 20

    def test_link_helpers(self):
        first, second = uuid4(), uuid4()

        stored = link_ids([first, second, first])

        assert stored == [str(first), str(second)]
        assert without_link(stored, first) == [str(second)]
