"""
Unit Tests for Regulation Strategy Recommendations
"""

from datetime import UTC, datetime

from edpsych.core.models import EmotionRecord, RegulationLog
from edpsych.wellbeing import STRATEGIES_BY_ID, StrategyRecommender, catalogue_summary
from edpsych.wellbeing.strategies import complexity_allows, strategy_effectiveness

NOW = datetime(2025, 3, 3, 9, tzinfo=UTC)


def records_for(*emotions: str) -> list[EmotionRecord]:
    return [EmotionRecord(emotion=emotion, intensity=5, timestamp=NOW) for emotion in emotions]


def feedback(strategy_id: str, effectiveness: int) -> RegulationLog:
    return RegulationLog(
        action="strategy_feedback",
        details={"strategy_id": strategy_id, "effectiveness": effectiveness},
    )


def recommended_ids(result) -> list[str]:
    return [rec["strategy"]["id"] for rec in result["recommendations"]]


class TestFiltering:
    def test_complexity_rules(self):
        assert complexity_allows("simple", "simple")
        assert not complexity_allows("simple", "moderate")
        assert complexity_allows("moderate", "moderate")
        assert not complexity_allows("moderate", "advanced")
        assert complexity_allows("advanced", "advanced")

    def test_defaults_exclude_reflective_and_advanced(self):
        ids = {strategy.id for strategy in StrategyRecommender().filter_strategies()}

        assert "emotion-journal" not in ids
        assert "thought-challenging" not in ids
        assert len(ids) == 8

    def test_stored_preferences_apply(self):
        recommender = StrategyRecommender(
            preferences={"preferred_types": ["reflective"], "complexity": "moderate"}
        )

        assert [s.id for s in recommender.filter_strategies()] == ["emotion-journal"]

    def test_emotion_filter(self):
        ids = [s.id for s in StrategyRecommender().filter_strategies(emotion="Sad")]

        assert ids == ["visualisation", "talk-to-someone", "zones-check-in"]


class TestRecommend:
    def test_ranks_common_emotions_then_evidence_then_preferences(self):
        result = StrategyRecommender().recommend(
            records_for("Anxious", "Anxious", "Anxious", "Angry"), []
        )

        assert result["common_emotions"] == ["Anxious", "Angry"]
        assert recommended_ids(result) == [
            "deep-breathing",
            "visualisation",
            "counting",
            "grounding-54321",
            "muscle-relaxation",
            "talk-to-someone",
            "movement-break",
            "zones-check-in",
        ]
        reason_types = [rec["reason_type"] for rec in result["recommendations"]]
        assert reason_types == ["emotion"] * 4 + ["evidence"] * 2 + ["preference"] * 2

    def test_effective_strategies_come_first(self):
        logs = [feedback("movement-break", 4), feedback("movement-break", 5)]

        result = StrategyRecommender().recommend(records_for("Sad"), logs)

        first = result["recommendations"][0]
        assert first["strategy"]["id"] == "movement-break"
        assert first["score"] == 90
        assert first["suitability"] == 90
        assert result["effective_strategy_ids"] == ["movement-break"]

    def test_one_rating_is_not_enough(self):
        result = StrategyRecommender().recommend([], [feedback("counting", 5)])

        assert result["effective_strategy_ids"] == []

    def test_limit(self):
        result = StrategyRecommender().recommend(records_for("Anxious"), [], limit=3)

        assert len(result["recommendations"]) == 3

    def test_no_duplicates(self):
        logs = [feedback("deep-breathing", 5), feedback("deep-breathing", 5)]

        ids = recommended_ids(StrategyRecommender().recommend(records_for("Anxious"), logs))

        assert len(ids) == len(set(ids))


def test_strategy_effectiveness_averages():
    stats = strategy_effectiveness([feedback("counting", 2), feedback("counting", 4)])

    assert stats == {"counting": {"average": 3.0, "count": 2}}


def test_strategy_serialisation():
    data = STRATEGIES_BY_ID["deep-breathing"].to_dict()

    assert data["time_required"] == "5 minutes"
    assert data["time_required_minutes"] == 5
    assert isinstance(data["steps"], list)


def test_catalogue_summary():
    summary = catalogue_summary()

    assert summary["strategies"] == len(STRATEGIES_BY_ID)
    assert summary["categories"]["cognitive"] == 4
