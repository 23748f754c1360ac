"""
Assessment Module

Assessment validation, auto-marking, results and analytics.
"""

from .engine import (
    AssessmentValidationError,
    assessment_analytics,
    calculate_results,
    generate_feedback,
    key_stage_age_range,
    student_progress,
    student_view,
    validate_assessment,
)
from .scoring import QuestionScore, score_question

__all__ = [
    "AssessmentValidationError",
    "assessment_analytics",
    "calculate_results",
    "generate_feedback",
    "key_stage_age_range",
    "student_progress",
    "student_view",
    "validate_assessment",
    "QuestionScore",
    "score_question",
]
