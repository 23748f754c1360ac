"""
Unit Tests for Emotional Pattern Recognition
"""

from datetime import UTC, datetime, timedelta

import pytest

from edpsych.core.models import EmotionRecord
from edpsych.wellbeing.patterns import (
    analyze_patterns,
    generate_emotion_correlations,
    generate_emotion_trends,
    generate_insights,
    generate_time_patterns,
    generate_trigger_patterns,
    time_of_day,
)

# Monday 3 March 2025
MONDAY = datetime(2025, 3, 3, tzinfo=UTC)


def record(emotion: str, intensity: int, at: datetime, triggers: str | None = None):
    return EmotionRecord(emotion=emotion, intensity=intensity, timestamp=at, triggers=triggers)


@pytest.fixture
def records():
    return [
        record("Anxious", 7, MONDAY.replace(hour=9), "Maths test"),
        record("Anxious", 5, MONDAY.replace(hour=10), "Maths test"),
        record("Calm", 3, MONDAY.replace(hour=14)),
        record("Angry", 9, MONDAY + timedelta(days=1, hours=19), "Playground"),
    ]


class TestTimeOfDay:
    @pytest.mark.parametrize(
        "hour,expected",
        [(5, "morning"), (11, "morning"), (12, "afternoon"), (17, "evening"), (22, "night"), (3, "night")],
    )
    def test_buckets(self, hour, expected):
        assert time_of_day(hour) == expected


class TestInsights:
    def test_empty_records_give_no_insights(self):
        assert generate_insights([]) == []

    def test_headline_insights(self, records):
        insights = {insight["id"]: insight for insight in generate_insights(records)}

        assert insights["most-common-emotion"]["emotion"] == "Anxious"
        assert insights["most-common-emotion"]["count"] == 2
        assert insights["highest-intensity-emotion"]["emotion"] == "Angry"
        assert insights["highest-intensity-emotion"]["intensity"] == 9.0
        assert insights["common-time-of-day"]["time_of_day"] == "morning"
        assert insights["common-day-of-week"]["day_of_week"] == "Monday"
        assert insights["common-trigger"]["trigger"] == "Maths test"

    def test_suggestion_for_known_emotion(self, records):
        insights = {insight["id"]: insight for insight in generate_insights(records)}

        assert "mindfulness" in insights["suggestion"]["description"]

    def test_single_trigger_is_not_reported(self):
        insights = generate_insights([record("Happy", 4, MONDAY, "Lunch")])

        assert "common-trigger" not in {insight["id"] for insight in insights}
        assert "suggestion" not in {insight["id"] for insight in insights}


class TestTriggerAndTimePatterns:
    def test_trigger_patterns_sorted_by_total(self, records):
        patterns = generate_trigger_patterns(records)

        assert patterns[0] == {"trigger": "Maths test", "emotions": {"Anxious": 2}, "total": 2}
        assert patterns[1]["trigger"] == "Playground"

    def test_trigger_patterns_keep_top_five(self):
        busy = [
            record("Anxious", 5, MONDAY + timedelta(minutes=n), f"Trigger {t}")
            for t in range(7)
            for n in range(t + 1)
        ]

        patterns = generate_trigger_patterns(busy)

        assert [p["trigger"] for p in patterns] == [f"Trigger {t}" for t in (6, 5, 4, 3, 2)]
        assert patterns[0]["total"] == 7

    def test_time_patterns_use_sunday_first_days(self, records):
        time = generate_time_patterns(records)

        assert len(time["hourly"]) == 24
        assert time["hourly"][9]["count"] == 1
        assert time["daily"][1] == {"day": 1, "name": "Monday", "count": 3}
        assert time["daily"][2]["count"] == 1

    def test_trends_are_ordered_by_date(self, records):
        trends = generate_emotion_trends(records)

        assert [trend["date"] for trend in trends] == ["2025-03-03", "2025-03-04"]
        assert trends[0]["emotions"] == {"Anxious": 2, "Calm": 1}


class TestCorrelations:
    def test_pairs_are_unordered_and_relative(self, records):
        correlations = generate_emotion_correlations(records)
        pairs = {(c["source"], c["target"]): c for c in correlations}

        assert ("Anxious", "Calm") in pairs
        assert pairs[("Anxious", "Calm")]["count"] == 2
        assert pairs[("Anxious", "Calm")]["strength"] == 1.0
        assert all(c["source"] < c["target"] for c in correlations)

    def test_records_more_than_a_day_apart_do_not_pair(self):
        far_apart = [
            record("Sad", 4, MONDAY),
            record("Happy", 6, MONDAY + timedelta(days=2)),
        ]

        assert generate_emotion_correlations(far_apart) == []

    def test_same_emotion_never_pairs(self):
        same = [record("Sad", 4, MONDAY), record("Sad", 5, MONDAY + timedelta(hours=1))]

        assert generate_emotion_correlations(same) == []

    def test_only_next_three_records_pair(self):
        # All within 24h; the 4th record after "Sad" is outside the lookahead
        burst = [
            record("Sad", 4, MONDAY),
            record("Happy", 5, MONDAY + timedelta(hours=1)),
            record("Calm", 5, MONDAY + timedelta(hours=2)),
            record("Tired", 5, MONDAY + timedelta(hours=3)),
            record("Angry", 5, MONDAY + timedelta(hours=4)),
        ]

        pairs = {(c["source"], c["target"]) for c in generate_emotion_correlations(burst)}

        assert ("Happy", "Sad") in pairs
        assert ("Sad", "Tired") in pairs
        assert ("Angry", "Sad") not in pairs
        assert ("Angry", "Happy") in pairs

    def test_top_ten_pairs_only(self):
        emotions = ["A", "B", "C", "D", "E", "F", "G", "H"]
        many = [
            record(emotion, 5, MONDAY + timedelta(hours=i))
            for i, emotion in enumerate(emotions * 2)
        ]

        correlations = generate_emotion_correlations(many)

        assert len(correlations) == 10
        counts = [c["count"] for c in correlations]
        assert counts == sorted(counts, reverse=True)


class TestAnalyzePatterns:
    def test_single_section(self, records):
        analysis = analyze_patterns(records, "triggers")

        assert list(analysis) == ["triggers"]

    def test_all_sections_empty_without_records(self):
        analysis = analyze_patterns([], "all")

        assert analysis == {
            "insights": [],
            "triggers": [],
            "time": {"hourly": [], "daily": []},
            "trends": [],
            "correlations": [],
        }

    def test_unknown_type_raises(self):
        with pytest.raises(ValueError, match="Unknown analysis type"):
            analyze_patterns([], "moods")
