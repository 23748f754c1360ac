"""
Question Scoring

Deterministic auto-marking per question type. Questions are the validated
JSON documents stored on `Assessment.questions`; responses are whatever the
student submitted for that question.

Malformed responses (wrong shape for the question type) score zero rather
than raising, since they are student input.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from edpsych.core.validation import normalize_answer

MANUAL_MARKING_TYPES = ("long_answer",)


@dataclass
class QuestionScore:
    """Outcome of marking one question."""

    points_awarded: float
    max_points: float
    requires_manual_marking: bool = False

    @property
    def correct(self) -> bool:
        return not self.requires_manual_marking and self.points_awarded >= self.max_points

    @property
    def partially_correct(self) -> bool:
        return 0 < self.points_awarded < self.max_points


def _fraction_multiple_choice(question: dict[str, Any], response: Any) -> float:
    return 1.0 if isinstance(response, str) and response == question["correct_option_id"] else 0.0


def _fraction_multiple_select(question: dict[str, Any], response: Any) -> float:
    if not isinstance(response, list):
        return 0.0

    correct_ids = set(question["correct_option_ids"])
    selected = {str(option_id) for option_id in response}
    correct_selected = len(selected & correct_ids)
    wrong_selected = len(selected - correct_ids)

    return max(0, correct_selected - wrong_selected) / len(correct_ids)


def _fraction_short_answer(question: dict[str, Any], response: Any) -> float:
    if not isinstance(response, str):
        return 0.0

    case_sensitive = question.get("case_sensitive", False)
    answer = normalize_answer(response, case_sensitive=case_sensitive)
    accepted = {
        normalize_answer(option, case_sensitive=case_sensitive)
        for option in question["accepted_answers"]
    }
    return 1.0 if answer in accepted else 0.0


def _fraction_fill_in_blank(question: dict[str, Any], response: Any) -> float:
    if not isinstance(response, dict):
        return 0.0

    case_sensitive = question.get("case_sensitive", False)
    blanks = question["blanks"]
    correct = 0
    for blank in blanks:
        answer = response.get(blank["id"])
        if not isinstance(answer, str):
            continue
        accepted = {
            normalize_answer(option, case_sensitive=case_sensitive)
            for option in blank["accepted_answers"]
        }
        if normalize_answer(answer, case_sensitive=case_sensitive) in accepted:
            correct += 1

    return correct / len(blanks)


def _fraction_matching(question: dict[str, Any], response: Any) -> float:
    if not isinstance(response, dict):
        return 0.0

    pairs = question["pairs"]
    correct = sum(1 for pair in pairs if response.get(pair["left"]) == pair["right"])
    return correct / len(pairs)


def _fraction_ordering(question: dict[str, Any], response: Any) -> float:
    if not isinstance(response, list):
        return 0.0

    expected = question["correct_order"]
    submitted = [str(item) for item in response]
    if submitted == expected:
        return 1.0

    in_place = sum(
        1
        for position, item_id in enumerate(expected)
        if position < len(submitted) and submitted[position] == item_id
    )
    return in_place / len(expected)


SCORERS: dict[str, Callable[[dict[str, Any], Any], float]] = {
    "multiple_choice": _fraction_multiple_choice,
    "multiple_select": _fraction_multiple_select,
    "short_answer": _fraction_short_answer,
    "fill_in_blank": _fraction_fill_in_blank,
    "matching": _fraction_matching,
    "ordering": _fraction_ordering,
}


def score_question(question: dict[str, Any], response: Any) -> QuestionScore:
    """Mark one response against its question.

    Long-answer questions award nothing and are flagged for manual marking.

    Raises:
        ValueError: If the question type has no scorer
    """
    points = float(question.get("points", 1))
    question_type = question["type"]

    if question_type in MANUAL_MARKING_TYPES:
        return QuestionScore(points_awarded=0.0, max_points=points, requires_manual_marking=True)

    scorer = SCORERS.get(question_type)
    if scorer is None:
        raise ValueError(f"Unsupported question type: {question_type}")

    if response is None:
        return QuestionScore(points_awarded=0.0, max_points=points)

    fraction = scorer(question, response)
    return QuestionScore(points_awarded=round(points * fraction, 2), max_points=points)
