"""
Regulation Strategy Recommendations

Catalogue of evidence-informed emotional regulation strategies and a
deterministic recommender that ranks them for one user from:
- their most frequent recent emotions
- strategies they have rated as effective
- their stored category/complexity preferences
"""

from __future__ import annotations

from collections import Counter, defaultdict
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from edpsych.core.models import EmotionRecord, RegulationLog

DEFAULT_CATEGORIES = ("physical", "cognitive", "social")
DEFAULT_COMPLEXITY = "moderate"
COMPLEXITY_LEVELS = ("simple", "moderate", "advanced")
TIME_REQUIRED_MINUTES = {"short": 5, "medium": 15, "long": 30}
EVIDENCE_MARKERS = ("NICE", "NHS", "research")

EFFECTIVE_MIN_AVERAGE = 3.5
EFFECTIVE_MIN_RATINGS = 2


@dataclass(frozen=True)
class RegulationStrategy:
    """A single regulation strategy in the catalogue."""

    id: str
    name: str
    description: str
    category: str
    complexity: str
    duration: str
    emotions: tuple[str, ...]
    steps: tuple[str, ...]
    evidence_base: str

    @property
    def time_required_minutes(self) -> int:
        return TIME_REQUIRED_MINUTES[self.duration]

    @property
    def has_strong_evidence(self) -> bool:
        return any(marker in self.evidence_base for marker in EVIDENCE_MARKERS)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "complexity": self.complexity,
            "time_required": f"{self.time_required_minutes} minutes",
            "time_required_minutes": self.time_required_minutes,
            "emotions": list(self.emotions),
            "steps": list(self.steps),
            "evidence_base": self.evidence_base,
        }


STRATEGY_CATALOGUE: tuple[RegulationStrategy, ...] = (
    RegulationStrategy(
        id="deep-breathing",
        name="Deep Breathing",
        description="Take slow, deep breaths to calm your body and mind.",
        category="physical",
        complexity="simple",
        duration="short",
        emotions=("Angry", "Anxious", "Overwhelmed", "Nervous"),
        steps=(
            "Find a comfortable position",
            "Breathe in slowly through your nose for 4 counts",
            "Hold your breath for 2 counts",
            "Breathe out slowly through your mouth for 6 counts",
            "Repeat 5 times",
        ),
        evidence_base=(
            "Supported by research from the British Psychological Society "
            "and NHS mental health guidelines."
        ),
    ),
    RegulationStrategy(
        id="counting",
        name="Counting",
        description="Count slowly to help redirect your focus and calm down.",
        category="cognitive",
        complexity="simple",
        duration="short",
        emotions=("Angry", "Frustrated", "Overwhelmed"),
        steps=(
            "Start counting slowly from 1",
            "Focus on each number as you say it",
            "Continue to 10 or 20",
            "If needed, count backwards to 1",
        ),
        evidence_base="Recommended by the Royal College of Psychiatrists as a grounding technique.",
    ),
    RegulationStrategy(
        id="visualisation",
        name="Peaceful Place Visualisation",
        description="Imagine a calm, peaceful place to help you relax.",
        category="cognitive",
        complexity="moderate",
        duration="medium",
        emotions=("Anxious", "Scared", "Overwhelmed", "Sad"),
        steps=(
            "Close your eyes",
            "Think of a place where you feel safe and calm",
            "Imagine what you can see there",
            "Imagine what you can hear there",
            "Imagine what you can feel there",
            "Stay in this place for a few minutes",
        ),
        evidence_base=(
            "Supported by cognitive-behavioural therapy research and NICE guidelines "
            "for anxiety management."
        ),
    ),
    RegulationStrategy(
        id="grounding-54321",
        name="5-4-3-2-1 Grounding",
        description="Use your senses to bring your attention back to the present moment.",
        category="cognitive",
        complexity="simple",
        duration="short",
        emotions=("Anxious", "Angry", "Frustrated", "Scared"),
        steps=(
            "Name 5 things you can see",
            "Name 4 things you can touch",
            "Name 3 things you can hear",
            "Name 2 things you can smell",
            "Name 1 thing you can taste",
        ),
        evidence_base="Widely used grounding technique recommended in NHS self-help guidance.",
    ),
    RegulationStrategy(
        id="muscle-relaxation",
        name="Progressive Muscle Relaxation",
        description="Tense and relax each muscle group to release physical tension.",
        category="physical",
        complexity="moderate",
        duration="medium",
        emotions=("Anxious", "Angry", "Overwhelmed", "Nervous"),
        steps=(
            "Sit or lie down comfortably",
            "Tense the muscles in your feet for 5 seconds",
            "Relax them and notice the difference",
            "Work upwards through legs, tummy, hands, arms and shoulders",
            "Finish by tensing and relaxing your face",
        ),
        evidence_base="Supported by clinical research and included in NICE guidance for anxiety.",
    ),
    RegulationStrategy(
        id="movement-break",
        name="Movement Break",
        description="Use short, active movement to release energy and reset.",
        category="physical",
        complexity="simple",
        duration="short",
        emotions=("Angry", "Frustrated", "Restless"),
        steps=(
            "Ask for or take a short break",
            "Walk, stretch or do ten star jumps",
            "Take three slow breaths",
            "Return when you feel ready",
        ),
        evidence_base="Sensory and movement breaks are common practice in UK schools.",
    ),
    RegulationStrategy(
        id="talk-to-someone",
        name="Talk to a Trusted Person",
        description="Share how you feel with someone you trust.",
        category="social",
        complexity="simple",
        duration="medium",
        emotions=("Sad", "Anxious", "Lonely", "Scared"),
        steps=(
            "Think of someone you trust",
            "Find a quiet moment to talk",
            "Tell them how you are feeling",
            "Ask for help if you need it",
        ),
        evidence_base="Social support is a protective factor identified in NHS wellbeing research.",
    ),
    RegulationStrategy(
        id="emotion-journal",
        name="Emotion Journalling",
        description="Write about what happened and how it made you feel.",
        category="reflective",
        complexity="moderate",
        duration="medium",
        emotions=("Sad", "Frustrated", "Confused", "Overwhelmed"),
        steps=(
            "Write down what happened",
            "Name the emotions you felt",
            "Rate how strong each feeling was",
            "Write one thing that might help next time",
        ),
        evidence_base="Expressive writing is supported by psychological research.",
    ),
    RegulationStrategy(
        id="zones-check-in",
        name="Zones Check-In",
        description="Identify your current zone and choose a tool that helps you move zones.",
        category="social",
        complexity="moderate",
        duration="short",
        emotions=("Angry", "Excited", "Sad", "Tired"),
        steps=(
            "Notice how your body feels",
            "Decide which zone you are in",
            "Pick a tool from your toolkit",
            "Check in again after using it",
        ),
        evidence_base="Widely used framework for emotional literacy in primary settings.",
    ),
    RegulationStrategy(
        id="thought-challenging",
        name="Thought Challenging",
        description="Question unhelpful thoughts and find a more balanced view.",
        category="cognitive",
        complexity="advanced",
        duration="long",
        emotions=("Anxious", "Sad", "Worried"),
        steps=(
            "Write down the worrying thought",
            "List evidence for and against it",
            "Consider what you would tell a friend",
            "Write a more balanced thought",
        ),
        evidence_base="Core technique of CBT, recommended by NICE for anxiety and depression.",
    ),
)

STRATEGIES_BY_ID = {strategy.id: strategy for strategy in STRATEGY_CATALOGUE}


def complexity_allows(preferred: str, strategy_complexity: str) -> bool:
    """simple -> simple only; moderate -> not advanced; advanced -> anything."""
    if preferred == "simple":
        return strategy_complexity == "simple"
    if preferred == "moderate":
        return strategy_complexity != "advanced"
    return True


def common_emotions(records: Iterable[EmotionRecord], top: int = 3) -> list[str]:
    """Most frequent emotions, most common first."""
    counts = Counter(record.emotion for record in records)
    return [emotion for emotion, _ in counts.most_common(top)]


def strategy_effectiveness(feedback_logs: Iterable[RegulationLog]) -> dict[str, dict[str, float]]:
    """Average feedback rating and rating count per strategy id."""
    ratings: dict[str, list[float]] = defaultdict(list)
    for log in feedback_logs:
        details = log.details or {}
        strategy_id = details.get("strategy_id")
        if strategy_id:
            ratings[strategy_id].append(float(details.get("effectiveness") or 0))

    return {
        strategy_id: {"average": sum(values) / len(values), "count": len(values)}
        for strategy_id, values in ratings.items()
    }


@dataclass
class StrategyRecommender:
    """Ranks catalogue strategies for one user.

    Recommendation order before the final score sort:
    1. Strategies the user rated as effective (suitability 90)
    2. Up to two strategies per common emotion (85)
    3. Up to two strategies with strong evidence (80)
    4. Remaining preference matches (75)
    """

    preferences: dict[str, Any] = field(default_factory=dict)
    catalogue: Sequence[RegulationStrategy] = STRATEGY_CATALOGUE

    def filter_strategies(
        self,
        *,
        emotion: str | None = None,
        categories: Sequence[str] | None = None,
        complexity: str | None = None,
    ) -> list[RegulationStrategy]:
        preferred_types = list(
            categories or self.preferences.get("preferred_types") or DEFAULT_CATEGORIES
        )
        preferred_complexity = (
            complexity or self.preferences.get("complexity") or DEFAULT_COMPLEXITY
        )

        return [
            strategy
            for strategy in self.catalogue
            if strategy.category in preferred_types
            and complexity_allows(preferred_complexity, strategy.complexity)
            and (emotion is None or emotion in strategy.emotions)
        ]

    def recommend(
        self,
        records: Sequence[EmotionRecord],
        feedback_logs: Sequence[RegulationLog],
        *,
        emotion: str | None = None,
        categories: Sequence[str] | None = None,
        complexity: str | None = None,
        limit: int = 10,
    ) -> dict[str, Any]:
        """Build ranked recommendations.

        Args:
            records: Emotion records from the look-back window (90 days)
            feedback_logs: `strategy_feedback` log entries
            emotion: Only strategies suitable for this emotion
            categories: Override stored preferred categories
            complexity: Override stored complexity preference
            limit: Maximum recommendations returned
        """
        candidates = self.filter_strategies(
            emotion=emotion, categories=categories, complexity=complexity
        )
        candidate_ids = {strategy.id for strategy in candidates}
        emotions = common_emotions(records)
        effectiveness = strategy_effectiveness(feedback_logs)
        effective_ids = [
            strategy_id
            for strategy_id, stats in effectiveness.items()
            if stats["average"] >= EFFECTIVE_MIN_AVERAGE and stats["count"] >= EFFECTIVE_MIN_RATINGS
        ]

        recommendations: list[dict[str, Any]] = []
        chosen: set[str] = set()

        def add(
            strategy: RegulationStrategy,
            *,
            score: float,
            reason: str,
            reason_type: str,
            suitability: int,
        ) -> None:
            chosen.add(strategy.id)
            recommendations.append(
                {
                    "strategy": strategy.to_dict(),
                    "score": round(score, 2),
                    "reason": reason,
                    "reason_type": reason_type,
                    "suitability": suitability,
                }
            )

        for strategy_id in effective_ids:
            if strategy_id in candidate_ids and strategy_id not in chosen:
                add(
                    STRATEGIES_BY_ID[strategy_id],
                    score=effectiveness[strategy_id]["average"] * 20,
                    reason="This strategy has worked well for you before",
                    reason_type="effectiveness",
                    suitability=90,
                )

        for rank, common in enumerate(emotions):
            suitable = [
                strategy
                for strategy in candidates
                if common in strategy.emotions and strategy.id not in chosen
            ][:2]
            for strategy in suitable:
                add(
                    strategy,
                    score=85 - 5 * rank,
                    reason=f"Good for managing {common.lower()} feelings",
                    reason_type="emotion",
                    suitability=85,
                )

        evidence_based = [
            strategy
            for strategy in candidates
            if strategy.id not in chosen and strategy.has_strong_evidence
        ][:2]
        for strategy in evidence_based:
            add(
                strategy,
                score=75,
                reason="Strong evidence supporting effectiveness",
                reason_type="evidence",
                suitability=80,
            )

        if len(recommendations) < limit:
            remaining = [strategy for strategy in candidates if strategy.id not in chosen]
            for strategy in remaining[: limit - len(recommendations)]:
                add(
                    strategy,
                    score=65,
                    reason="Matches your preferences",
                    reason_type="preference",
                    suitability=75,
                )

        # Stable sort keeps insertion order among equal scores
        recommendations.sort(key=lambda rec: rec["score"], reverse=True)

        return {
            "recommendations": recommendations[:limit],
            "common_emotions": emotions,
            "effective_strategy_ids": effective_ids,
        }


def catalogue_summary() -> dict[str, Any]:
    """Strategy counts per category (used by the health check)."""
    by_category = Counter(strategy.category for strategy in STRATEGY_CATALOGUE)
    return {"strategies": len(STRATEGY_CATALOGUE), "categories": dict(by_category)}

