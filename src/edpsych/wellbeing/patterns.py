"""
Emotional Pattern Recognition

Rule-based analysis over a user's emotion check-ins: headline insights,
trigger patterns, time-of-day/weekday distribution, daily trends and
emotions that tend to follow one another.

All functions are pure; callers load the records and pass them in.
"""

from __future__ import annotations

from collections import Counter, defaultdict
from datetime import timedelta
from typing import TYPE_CHECKING, Any

from edpsych.core.models.base import as_utc

if TYPE_CHECKING:
    from collections.abc import Sequence

    from edpsych.core.models import EmotionRecord

ANALYSIS_TYPES = ("all", "insights", "triggers", "time", "trends", "correlations")

# Sunday first, matching day indexes 0-6
DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")

EMOTION_SUGGESTIONS = {
    "Anxious": (
        "Consider practising mindfulness or deep breathing exercises "
        "when you notice anxiety building."
    ),
    "Angry": (
        "Taking a short break or using the 5-4-3-2-1 grounding technique "
        "might help when you feel anger rising."
    ),
    "Frustrated": (
        "Taking a short break or using the 5-4-3-2-1 grounding technique "
        "might help when you feel anger rising."
    ),
    "Sad": "Connecting with friends or engaging in activities you enjoy might help improve your mood.",
    "Overwhelmed": (
        "Breaking tasks into smaller steps and focusing on one thing at a time "
        "might help reduce feeling overwhelmed."
    ),
}

CORRELATION_LOOKAHEAD = 3
CORRELATION_WINDOW = timedelta(hours=24)


def time_of_day(hour: int) -> str:
    """Bucket an hour (0-23) into morning/afternoon/evening/night."""
    if 5 <= hour < 12:
        return "morning"
    if 12 <= hour < 17:
        return "afternoon"
    if 17 <= hour < 22:
        return "evening"
    return "night"


def day_index(record: EmotionRecord) -> int:
    """Weekday index with Sunday = 0."""
    return (as_utc(record.timestamp).weekday() + 1) % 7


def _most_common(counter: Counter[str]) -> tuple[str, int] | None:
    common = counter.most_common(1)
    return common[0] if common else None


def generate_insights(records: Sequence[EmotionRecord]) -> list[dict[str, Any]]:
    """Headline observations about the records."""
    insights: list[dict[str, Any]] = []
    if not records:
        return insights

    emotion_counts = Counter(record.emotion for record in records)
    most_common_emotion = _most_common(emotion_counts)
    if most_common_emotion:
        emotion, count = most_common_emotion
        insights.append(
            {
                "id": "most-common-emotion",
                "type": "frequency",
                "title": "Most Common Emotion",
                "description": f"{emotion} is your most frequently recorded emotion ({count} times).",
                "emotion": emotion,
                "count": count,
            }
        )

    intensities: dict[str, list[int]] = defaultdict(list)
    for record in records:
        intensities[record.emotion].append(record.intensity)
    averages = {emotion: sum(values) / len(values) for emotion, values in intensities.items()}
    strongest = max(averages, key=lambda emotion: averages[emotion])
    average = round(averages[strongest], 1)
    insights.append(
        {
            "id": "highest-intensity-emotion",
            "type": "intensity",
            "title": "Highest Intensity Emotion",
            "description": (
                f"{strongest} tends to be your most intense emotion "
                f"(average intensity: {average:.1f})."
            ),
            "emotion": strongest,
            "intensity": average,
        }
    )

    time_counts = Counter(time_of_day(as_utc(record.timestamp).hour) for record in records)
    period, period_count = time_counts.most_common(1)[0]
    insights.append(
        {
            "id": "common-time-of-day",
            "type": "time",
            "title": "Time Pattern",
            "description": (
                f"You tend to record emotions most often during the {period} "
                f"({period_count} entries)."
            ),
            "time_of_day": period,
            "count": period_count,
        }
    )

    day_counts = Counter(DAY_NAMES[day_index(record)] for record in records)
    day, day_count = day_counts.most_common(1)[0]
    insights.append(
        {
            "id": "common-day-of-week",
            "type": "day",
            "title": "Day of Week Pattern",
            "description": (
                f"{day} is when you tend to record emotions most frequently ({day_count} entries)."
            ),
            "day_of_week": day,
            "count": day_count,
        }
    )

    trigger_counts = Counter(record.triggers for record in records if record.triggers)
    common_trigger = _most_common(trigger_counts)
    if common_trigger and common_trigger[1] > 1:
        trigger, trigger_count = common_trigger
        insights.append(
            {
                "id": "common-trigger",
                "type": "trigger",
                "title": "Common Trigger",
                "description": (
                    f'"{trigger}" is a frequent trigger for your emotions ({trigger_count} times).'
                ),
                "trigger": trigger,
                "count": trigger_count,
            }
        )

    if most_common_emotion and most_common_emotion[0] in EMOTION_SUGGESTIONS:
        emotion = most_common_emotion[0]
        insights.append(
            {
                "id": "suggestion",
                "type": "suggestion",
                "title": "Helpful Suggestion",
                "description": EMOTION_SUGGESTIONS[emotion],
                "emotion": emotion,
            }
        )

    return insights


def generate_trigger_patterns(records: Sequence[EmotionRecord]) -> list[dict[str, Any]]:
    """Emotion counts per trigger, top 5 by total."""
    by_trigger: dict[str, Counter[str]] = defaultdict(Counter)
    for record in records:
        if record.triggers:
            by_trigger[record.triggers][record.emotion] += 1

    patterns = [
        {"trigger": trigger, "emotions": dict(counts), "total": sum(counts.values())}
        for trigger, counts in by_trigger.items()
    ]
    patterns.sort(key=lambda pattern: pattern["total"], reverse=True)
    return patterns[:5]


def generate_time_patterns(records: Sequence[EmotionRecord]) -> dict[str, list[dict[str, Any]]]:
    """Hourly (0-23) and daily (Sunday-Saturday) record counts."""
    hourly = [{"hour": hour, "count": 0} for hour in range(24)]
    daily = [{"day": index, "name": name, "count": 0} for index, name in enumerate(DAY_NAMES)]

    for record in records:
        hourly[as_utc(record.timestamp).hour]["count"] += 1
        daily[day_index(record)]["count"] += 1

    return {"hourly": hourly, "daily": daily}


def generate_emotion_trends(records: Sequence[EmotionRecord]) -> list[dict[str, Any]]:
    """Emotion counts per calendar date, oldest first."""
    by_date: dict[str, Counter[str]] = defaultdict(Counter)
    for record in records:
        by_date[as_utc(record.timestamp).date().isoformat()][record.emotion] += 1

    return [{"date": date, "emotions": dict(by_date[date])} for date in sorted(by_date)]


def generate_emotion_correlations(records: Sequence[EmotionRecord]) -> list[dict[str, Any]]:
    """Pairs of different emotions recorded close together.

    Each record is compared with the next three records (in time order);
    a pair counts when the later record falls within 24 hours. Pairs are
    unordered and strength is relative to the most frequent pair.
    """
    ordered = sorted(records, key=lambda record: as_utc(record.timestamp))
    pair_counts: Counter[tuple[str, str]] = Counter()

    for i, current in enumerate(ordered):
        current_time = as_utc(current.timestamp)
        for following in ordered[i + 1 : i + 1 + CORRELATION_LOOKAHEAD]:
            if following.emotion == current.emotion:
                continue
            if as_utc(following.timestamp) - current_time <= CORRELATION_WINDOW:
                source, target = sorted((current.emotion, following.emotion))
                pair_counts[(source, target)] += 1

    if not pair_counts:
        return []

    max_count = max(pair_counts.values())
    return [
        {
            "source": source,
            "target": target,
            "count": count,
            "strength": count / max_count,
        }
        for (source, target), count in pair_counts.most_common(10)
    ]


def analyze_patterns(
    records: Sequence[EmotionRecord], analysis_type: str = "all"
) -> dict[str, Any]:
    """Run the requested analyses.

    Returns a dict with only the requested sections; with no records each
    section is present but empty.

    Raises:
        ValueError: If analysis_type is unknown
    """
    if analysis_type not in ANALYSIS_TYPES:
        raise ValueError(f"Unknown analysis type: {analysis_type}")

    def wanted(section: str) -> bool:
        return analysis_type in ("all", section)

    analysis: dict[str, Any] = {}
    if wanted("insights"):
        analysis["insights"] = generate_insights(records)
    if wanted("triggers"):
        analysis["triggers"] = generate_trigger_patterns(records)
    if wanted("time"):
        analysis["time"] = (
            generate_time_patterns(records) if records else {"hourly": [], "daily": []}
        )
    if wanted("trends"):
        analysis["trends"] = generate_emotion_trends(records)
    if wanted("correlations"):
        analysis["correlations"] = generate_emotion_correlations(records)

    return analysis
