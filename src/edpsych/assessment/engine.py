"""
Assessment Engine

Structural validation of assessments, result calculation for completed
attempts, per-assessment analytics and per-student progress.
"""

from __future__ import annotations

import logging
from collections import Counter, defaultdict
from typing import TYPE_CHECKING, Any

from edpsych.core.models.base import as_utc

from .scoring import score_question

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime

    from edpsych.core.models import Assessment, AssessmentAttempt

logger = logging.getLogger(__name__)

DIFFICULTY_LEVELS = ("beginner", "foundation", "intermediate", "higher", "advanced", "challenge")
COGNITIVE_DOMAINS = ("remember", "understand", "apply", "analyse", "evaluate", "create")

STRENGTH_THRESHOLD = 80
IMPROVEMENT_THRESHOLD = 60

KEY_STAGE_AGE_RANGES = {
    "early_years": (3, 5),
    "key_stage_1": (5, 7),
    "key_stage_2": (7, 11),
    "key_stage_3": (11, 14),
    "key_stage_4": (14, 16),
    "key_stage_5": (16, 19),
}
DEFAULT_AGE_RANGE = (5, 18)


class AssessmentValidationError(Exception):
    """Raised when an assessment's questions or sections are inconsistent."""

    pass


def key_stage_age_range(key_stage: str) -> dict[str, int]:
    """Typical pupil age range for a UK key stage."""
    minimum, maximum = KEY_STAGE_AGE_RANGES.get(key_stage, DEFAULT_AGE_RANGE)
    return {"min": minimum, "max": maximum}


# ============================================================================
# Validation
# ============================================================================


def validate_assessment(
    questions: Sequence[dict[str, Any]], sections: Sequence[dict[str, Any]] = ()
) -> None:
    """Check an assessment's structural integrity.

    Raises:
        AssessmentValidationError: On the first problem found
    """
    if not questions:
        raise AssessmentValidationError("Assessment must have at least one question")

    question_ids: set[str] = set()
    for question in questions:
        if question["id"] in question_ids:
            raise AssessmentValidationError(f"Duplicate question ID: {question['id']}")
        question_ids.add(question["id"])
        _validate_question(question)

    for section in sections:
        for question_id in section.get("question_ids", []):
            if question_id not in question_ids:
                raise AssessmentValidationError(
                    f"Section {section['id']} references non-existent question ID: {question_id}"
                )


def _validate_question(question: dict[str, Any]) -> None:
    question_type = question["type"]

    if question_type == "multiple_choice":
        option_ids = {option["id"] for option in question["options"]}
        if question["correct_option_id"] not in option_ids:
            raise AssessmentValidationError(
                f"Question {question['id']}: correct option "
                f"{question['correct_option_id']} is not one of its options"
            )

    elif question_type == "multiple_select":
        option_ids = {option["id"] for option in question["options"]}
        missing = [oid for oid in question["correct_option_ids"] if oid not in option_ids]
        if missing:
            raise AssessmentValidationError(
                f"Question {question['id']}: correct options {missing} are not among its options"
            )

    elif question_type == "ordering":
        item_ids = [item["id"] for item in question["items"]]
        if sorted(question["correct_order"]) != sorted(item_ids):
            raise AssessmentValidationError(
                f"Question {question['id']}: correct order must list each item exactly once"
            )


ANSWER_KEY_FIELDS = (
    "correct_option_id",
    "correct_option_ids",
    "accepted_answers",
    "correct_order",
    "feedback",
)


def student_view(question: dict[str, Any]) -> dict[str, Any]:
    """Copy of a question with its answer key removed."""
    view = {key: value for key, value in question.items() if key not in ANSWER_KEY_FIELDS}

    if question["type"] == "fill_in_blank":
        view["blanks"] = [{"id": blank["id"]} for blank in question["blanks"]]
    elif question["type"] == "matching":
        view.pop("pairs", None)
        view["left_items"] = [pair["left"] for pair in question["pairs"]]
        view["right_items"] = sorted(pair["right"] for pair in question["pairs"])
    elif question["type"] == "ordering":
        view["items"] = sorted(question["items"], key=lambda item: item["text"])

    return view


# ============================================================================
# Results
# ============================================================================


def _empty_breakdown(keys: Sequence[str]) -> dict[str, dict[str, float]]:
    return {key: {"count": 0, "correct": 0, "percentage": 0.0} for key in keys}


def _finalise_breakdown(breakdown: dict[str, dict[str, float]]) -> None:
    for data in breakdown.values():
        data["percentage"] = round(data["correct"] / data["count"] * 100, 2) if data["count"] else 0.0


def generate_feedback(
    percentage: float, passing_score: float, areas_for_improvement: Sequence[str]
) -> dict[str, Any]:
    """Overall message banded by score, plus next steps."""
    if percentage >= 90:
        overall = "Excellent work! You have shown a secure understanding of this material."
    elif percentage >= 75:
        overall = "Great job! You have a good grasp of most of the material."
    elif percentage >= passing_score:
        overall = "Well done, you passed. Review the questions you missed to strengthen your understanding."
    else:
        overall = "Keep practising. Review the material and try again when you are ready."

    next_steps = [
        f"Practise more {domain} questions with your teacher's support"
        for domain in areas_for_improvement
    ]
    if not next_steps:
        next_steps.append(
            "Try a more challenging assessment to extend your learning"
            if percentage >= passing_score
            else "Revisit the topics covered and attempt the assessment again"
        )

    return {"overall": overall, "next_steps": next_steps}


def calculate_results(
    assessment: Assessment,
    attempt: AssessmentAttempt,
    responses: dict[str, tuple[Any, int]],
    completed_at: datetime,
) -> dict[str, Any]:
    """Mark every question and build the attempt result.

    Args:
        assessment: The assessment attempted
        attempt: The attempt being completed
        responses: question_id -> (response, time_spent_seconds)
        completed_at: Completion time (becomes attempt.end_time)

    Unanswered questions score zero. Questions that need manual marking do
    not count towards max_score until marked.
    """
    total_score = 0.0
    max_score = 0.0
    question_results: list[dict[str, Any]] = []
    by_difficulty = _empty_breakdown(DIFFICULTY_LEVELS)
    by_domain = _empty_breakdown(COGNITIVE_DOMAINS)

    for question in assessment.questions:
        response, time_spent = responses.get(question["id"], (None, 0))
        outcome = score_question(question, response)

        if not outcome.requires_manual_marking:
            total_score += outcome.points_awarded
            max_score += outcome.max_points

        difficulty = question.get("difficulty_level", "intermediate")
        domain = question.get("cognitive_domain", "understand")
        question_results.append(
            {
                "question_id": question["id"],
                "type": question["type"],
                "answered": question["id"] in responses,
                "correct": outcome.correct,
                "partially_correct": outcome.partially_correct,
                "points_awarded": outcome.points_awarded,
                "max_points": outcome.max_points,
                "requires_manual_marking": outcome.requires_manual_marking,
                "time_spent": time_spent,
                "difficulty_level": difficulty,
                "cognitive_domain": domain,
            }
        )

        if outcome.requires_manual_marking:
            continue
        for breakdown, key in ((by_difficulty, difficulty), (by_domain, domain)):
            breakdown.setdefault(key, {"count": 0, "correct": 0, "percentage": 0.0})
            breakdown[key]["count"] += 1
            if outcome.correct:
                breakdown[key]["correct"] += 1

    _finalise_breakdown(by_difficulty)
    _finalise_breakdown(by_domain)

    percentage = round(total_score / max_score * 100, 2) if max_score > 0 else 0.0
    passed = percentage >= assessment.passing_score

    strengths = [
        domain
        for domain, data in by_domain.items()
        if data["count"] > 0 and data["percentage"] >= STRENGTH_THRESHOLD
    ]
    areas_for_improvement = [
        domain
        for domain, data in by_domain.items()
        if data["count"] > 0 and data["percentage"] < IMPROVEMENT_THRESHOLD
    ]

    time_spent = max(0, round((as_utc(completed_at) - as_utc(attempt.start_time)).total_seconds()))
    logger.info(
        f"Attempt {attempt.id} marked: {total_score:.2f}/{max_score:.2f} "
        f"({percentage}%, passed={passed})"
    )

    return {
        "attempt_id": str(attempt.id),
        "assessment_id": str(assessment.id),
        "student_id": str(attempt.student_id),
        "score": round(total_score, 2),
        "max_score": round(max_score, 2),
        "percentage": percentage,
        "passed": passed,
        "completed_at": as_utc(completed_at).isoformat(),
        "time_spent": time_spent,
        "requires_manual_marking": any(r["requires_manual_marking"] for r in question_results),
        "question_results": question_results,
        "analytics": {
            "by_difficulty": by_difficulty,
            "by_cognitive_domain": by_domain,
            "strengths": [f"Strong performance in {domain} tasks" for domain in strengths],
            "areas_for_improvement": [
                f"Needs improvement in {domain} tasks" for domain in areas_for_improvement
            ],
        },
        "feedback": generate_feedback(percentage, assessment.passing_score, areas_for_improvement),
    }


# ============================================================================
# Analytics
# ============================================================================


def assessment_analytics(
    assessment: Assessment, attempts: Sequence[AssessmentAttempt]
) -> dict[str, Any]:
    """Summary over completed attempts of one assessment."""
    completed = [attempt for attempt in attempts if attempt.is_complete and attempt.result]

    per_question: dict[str, dict[str, Any]] = {
        question["id"]: {"correct": 0, "incorrect": 0, "partially_correct": 0, "times": []}
        for question in assessment.questions
    }
    for attempt in completed:
        for result in attempt.result.get("question_results", []):  # type: ignore[union-attr]
            stats = per_question.get(result["question_id"])
            if stats is None:
                continue
            if result["correct"]:
                stats["correct"] += 1
            elif result["partially_correct"]:
                stats["partially_correct"] += 1
            else:
                stats["incorrect"] += 1
            stats["times"].append(result.get("time_spent", 0))

    attempt_count = len(completed)
    percentages = [attempt.percentage or 0.0 for attempt in completed]

    return {
        "assessment_id": assessment.id,
        "attempt_count": attempt_count,
        "average_score": round(sum(percentages) / attempt_count, 2) if attempt_count else 0.0,
        "pass_rate": (
            round(sum(1 for a in completed if a.passed) / attempt_count * 100, 2)
            if attempt_count
            else 0.0
        ),
        "questions": [
            {
                "question_id": question_id,
                "correct": stats["correct"],
                "incorrect": stats["incorrect"],
                "partially_correct": stats["partially_correct"],
                "average_time_spent": (
                    round(sum(stats["times"]) / len(stats["times"]), 2) if stats["times"] else 0.0
                ),
            }
            for question_id, stats in per_question.items()
        ],
    }


def student_progress(
    student_id: Any, attempts: Sequence[tuple[AssessmentAttempt, Assessment]]
) -> dict[str, Any]:
    """Completed attempts for one student in time order.

    Strengths and areas for improvement are those reported in at least two
    attempts.
    """
    completed = sorted(
        (pair for pair in attempts if pair[0].is_complete and pair[0].end_time),
        key=lambda pair: as_utc(pair[0].end_time),  # type: ignore[arg-type]
    )

    strength_counts: Counter[str] = Counter()
    improvement_counts: Counter[str] = Counter()
    by_subject: dict[str, list[float]] = defaultdict(list)
    points = []
    for attempt, assessment in completed:
        analytics = (attempt.result or {}).get("analytics", {})
        strength_counts.update(analytics.get("strengths", []))
        improvement_counts.update(analytics.get("areas_for_improvement", []))
        by_subject[assessment.subject].append(attempt.percentage or 0.0)
        points.append(
            {
                "attempt_id": attempt.id,
                "assessment_id": assessment.id,
                "assessment_title": assessment.title,
                "subject": assessment.subject,
                "completed_at": attempt.end_time,
                "percentage": attempt.percentage or 0.0,
                "passed": bool(attempt.passed),
            }
        )

    percentages = [point["percentage"] for point in points]
    return {
        "student_id": student_id,
        "assessments_completed": len(points),
        "average_score": round(sum(percentages) / len(percentages), 2) if percentages else 0.0,
        "subject_averages": {
            subject: round(sum(values) / len(values), 2) for subject, values in by_subject.items()
        },
        "strengths": [item for item, count in strength_counts.items() if count >= 2],
        "areas_for_improvement": [item for item, count in improvement_counts.items() if count >= 2],
        "progress_over_time": points,
    }
