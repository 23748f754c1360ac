"""
Assessment Pydantic Schemas

Assessment metadata and settings, typed question payloads (discriminated on
`type`), attempts, responses and results.
"""

from datetime import datetime
from enum import StrEnum
from typing import Annotated, Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, computed_field

from edpsych.assessment.engine import key_stage_age_range
from edpsych.core.schemas.base import PartialUpdate


class KeyStage(StrEnum):
    EARLY_YEARS = "early_years"
    KEY_STAGE_1 = "key_stage_1"
    KEY_STAGE_2 = "key_stage_2"
    KEY_STAGE_3 = "key_stage_3"
    KEY_STAGE_4 = "key_stage_4"
    KEY_STAGE_5 = "key_stage_5"


class Subject(StrEnum):
    ENGLISH = "english"
    MATHEMATICS = "mathematics"
    SCIENCE = "science"
    ART_AND_DESIGN = "art_and_design"
    CITIZENSHIP = "citizenship"
    COMPUTING = "computing"
    DESIGN_AND_TECHNOLOGY = "design_and_technology"
    GEOGRAPHY = "geography"
    HISTORY = "history"
    LANGUAGES = "languages"
    MUSIC = "music"
    PHYSICAL_EDUCATION = "physical_education"
    RELIGIOUS_EDUCATION = "religious_education"
    PSHE = "pshe"
    RELATIONSHIPS_EDUCATION = "relationships_education"


class AssessmentType(StrEnum):
    DIAGNOSTIC = "diagnostic"
    FORMATIVE = "formative"
    SUMMATIVE = "summative"
    SELF_ASSESSMENT = "self_assessment"
    PEER_ASSESSMENT = "peer_assessment"
    BASELINE = "baseline"
    PROGRESS_CHECK = "progress_check"


class DifficultyLevel(StrEnum):
    BEGINNER = "beginner"
    FOUNDATION = "foundation"
    INTERMEDIATE = "intermediate"
    HIGHER = "higher"
    ADVANCED = "advanced"
    CHALLENGE = "challenge"


class CognitiveDomain(StrEnum):
    """Bloom's taxonomy levels."""

    REMEMBER = "remember"
    UNDERSTAND = "understand"
    APPLY = "apply"
    ANALYSE = "analyse"
    EVALUATE = "evaluate"
    CREATE = "create"


# ============================================================================
# Questions
# ============================================================================


class Option(BaseModel):
    id: str = Field(min_length=1, max_length=100)
    text: str


class Blank(BaseModel):
    id: str = Field(min_length=1, max_length=100)
    accepted_answers: list[str] = Field(min_length=1)


class MatchingPair(BaseModel):
    left: str
    right: str


class OrderingItem(BaseModel):
    id: str = Field(min_length=1, max_length=100)
    text: str


class QuestionBase(BaseModel):
    id: str = Field(min_length=1, max_length=100)
    text: str = Field(min_length=1)
    points: float = Field(default=1, gt=0)
    difficulty_level: DifficultyLevel = DifficultyLevel.INTERMEDIATE
    cognitive_domain: CognitiveDomain = CognitiveDomain.UNDERSTAND
    feedback: str | None = None


class MultipleChoiceQuestion(QuestionBase):
    type: Literal["multiple_choice"]
    options: list[Option] = Field(min_length=2)
    correct_option_id: str


class MultipleSelectQuestion(QuestionBase):
    type: Literal["multiple_select"]
    options: list[Option] = Field(min_length=2)
    correct_option_ids: list[str] = Field(min_length=1)


class ShortAnswerQuestion(QuestionBase):
    type: Literal["short_answer"]
    accepted_answers: list[str] = Field(min_length=1)
    case_sensitive: bool = False


class FillInBlankQuestion(QuestionBase):
    type: Literal["fill_in_blank"]
    blanks: list[Blank] = Field(min_length=1)
    case_sensitive: bool = False


class MatchingQuestion(QuestionBase):
    type: Literal["matching"]
    pairs: list[MatchingPair] = Field(min_length=2)


class OrderingQuestion(QuestionBase):
    type: Literal["ordering"]
    items: list[OrderingItem] = Field(min_length=2)
    correct_order: list[str] = Field(min_length=2)


class LongAnswerQuestion(QuestionBase):
    type: Literal["long_answer"]
    guidance: str | None = None
    max_words: int | None = Field(default=None, gt=0)


Question = Annotated[
    MultipleChoiceQuestion
    | MultipleSelectQuestion
    | ShortAnswerQuestion
    | FillInBlankQuestion
    | MatchingQuestion
    | OrderingQuestion
    | LongAnswerQuestion,
    Field(discriminator="type"),
]


class Section(BaseModel):
    id: str = Field(min_length=1, max_length=100)
    title: str
    description: str | None = None
    question_ids: list[str] = Field(default_factory=list)


# ============================================================================
# Assessments
# ============================================================================


class AssessmentCreate(BaseModel):
    """Request schema for creating an assessment."""

    title: str = Field(min_length=1, max_length=200)
    description: str | None = None
    key_stage: KeyStage
    subject: Subject
    assessment_type: AssessmentType
    difficulty_level: DifficultyLevel = DifficultyLevel.INTERMEDIATE
    topics: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    estimated_duration: int = Field(default=30, gt=0, description="Minutes")

    questions: list[Question]
    sections: list[Section] = Field(default_factory=list)

    passing_score: float = Field(default=60, ge=0, le=100)
    max_attempts: int = Field(default=1, ge=1)
    time_limit: int | None = Field(default=None, gt=0, description="Minutes")
    randomize_questions: bool = False
    show_feedback: Literal["immediate", "end", "never"] = "end"


class AssessmentUpdate(PartialUpdate):
    """Partial update; questions and sections are re-validated together."""

    nullable_fields = frozenset({"description", "time_limit"})

    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    key_stage: KeyStage | None = None
    subject: Subject | None = None
    assessment_type: AssessmentType | None = None
    difficulty_level: DifficultyLevel | None = None
    topics: list[str] | None = None
    tags: list[str] | None = None
    estimated_duration: int | None = Field(default=None, gt=0)

    questions: list[Question] | None = None
    sections: list[Section] | None = None

    passing_score: float | None = Field(default=None, ge=0, le=100)
    max_attempts: int | None = Field(default=None, ge=1)
    time_limit: int | None = Field(default=None, gt=0)
    randomize_questions: bool | None = None
    show_feedback: Literal["immediate", "end", "never"] | None = None


class AssessmentSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    created_by_id: UUID
    title: str
    description: str | None = None
    key_stage: str
    subject: str
    assessment_type: str
    difficulty_level: str
    topics: list[str]
    tags: list[str]
    estimated_duration: int
    questions: list[dict[str, Any]]
    sections: list[dict[str, Any]]
    passing_score: float
    max_attempts: int
    time_limit: int | None = None
    randomize_questions: bool
    show_feedback: str
    created_at: datetime
    updated_at: datetime

    @computed_field
    @property
    def target_age_range(self) -> dict[str, int]:
        return key_stage_age_range(self.key_stage)


class AssessmentSummary(BaseModel):
    """List view without question content."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    key_stage: str
    subject: str
    assessment_type: str
    difficulty_level: str
    estimated_duration: int
    passing_score: float
    max_attempts: int
    created_at: datetime


# ============================================================================
# Attempts
# ============================================================================


class ResponseSubmit(BaseModel):
    """A student's answer to one question.

    Response shapes by question type:
    multiple_choice: option id; multiple_select: list of option ids;
    short_answer/long_answer: text; fill_in_blank: {blank_id: text};
    matching: {left: right}; ordering: list of item ids.
    """

    question_id: str = Field(min_length=1, max_length=100)
    response: Any = None
    time_spent: int = Field(default=0, ge=0, description="Seconds")


class AttemptResponseSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    attempt_id: UUID
    question_id: str
    response: Any = None
    time_spent: int
    updated_at: datetime


class AttemptSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    assessment_id: UUID
    student_id: UUID
    start_time: datetime
    end_time: datetime | None = None
    is_complete: bool
    score: float | None = None
    max_score: float | None = None
    percentage: float | None = None
    passed: bool | None = None
    result: dict[str, Any] | None = None


class AttemptDetail(AttemptSchema):
    responses: list[AttemptResponseSchema] = Field(default_factory=list)


class QuestionAnalytics(BaseModel):
    question_id: str
    correct: int
    incorrect: int
    partially_correct: int
    average_time_spent: float


class AssessmentAnalytics(BaseModel):
    assessment_id: UUID
    attempt_count: int
    average_score: float
    pass_rate: float
    questions: list[QuestionAnalytics]


class ProgressPoint(BaseModel):
    attempt_id: UUID
    assessment_id: UUID
    assessment_title: str
    subject: str
    completed_at: datetime
    percentage: float
    passed: bool


class StudentProgress(BaseModel):
    student_id: UUID
    assessments_completed: int
    average_score: float
    subject_averages: dict[str, float]
    strengths: list[str]
    areas_for_improvement: list[str]
    progress_over_time: list[ProgressPoint]
