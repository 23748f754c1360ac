"""Pydantic schemas for API validation."""

from .assessments import (
    AssessmentAnalytics,
    AssessmentCreate,
    AssessmentSchema,
    AssessmentSummary,
    AssessmentUpdate,
    AttemptDetail,
    AttemptSchema,
    Question,
    ResponseSubmit,
    StudentProgress,
)
from .cpd import (
    CPDActivityCreate,
    CPDActivityDetail,
    CPDActivitySchema,
    CPDActivityUpdate,
    CPDAnalytics,
    CPDEvidenceCreate,
    CPDEvidenceSchema,
    CPDGoalCreate,
    CPDGoalDetail,
    CPDGoalSchema,
    CPDGoalUpdate,
    CPDRecommendation,
    CPDReflectionCreate,
    CPDReflectionSchema,
    CPDReport,
)
from .curriculum import (
    CollaborationView,
    CollaboratorAdd,
    CollaboratorAddResponse,
    CollaboratorSchema,
    CommentCreate,
    CommentSchema,
    CurriculumPlanCreate,
    CurriculumPlanSchema,
    CurriculumPlanUpdate,
    TaskCreate,
    TaskSchema,
    TaskUpdate,
)
from .developer import (
    AuthorizeRequest,
    AuthorizeResponse,
    IntrospectionResponse,
    OAuthClientCreate,
    OAuthClientCreated,
    OAuthClientSchema,
    OAuthClientUpdate,
    OAuthTokenResponse,
    RevokeRequest,
)
from .mentoring import (
    ExpertiseArea,
    FeedbackCreate,
    FeedbackSchema,
    GoalStatusUpdate,
    MeetingCreate,
    MeetingSchema,
    MeetingUpdate,
    MentoringAnalytics,
    MentorProfileSchema,
    MentorProfileUpdate,
    MentorshipCompletion,
    MentorshipDetail,
    MentorshipRequestCreate,
    MentorshipRequestSchema,
    MentorshipSchema,
    RequestDecision,
    RequestDecisionResponse,
    ResourceCreate,
    ResourceSchema,
)
from .pacing import PacingRequest, ProgressPacingSchema
from .portfolio import (
    AchievementCreate,
    AchievementDetail,
    AchievementSchema,
    AchievementUpdate,
    EvidenceCreate,
    EvidenceDetail,
    EvidenceSchema,
    EvidenceUpdate,
    PortfolioAnalytics,
    PortfolioProfileSchema,
    PortfolioProfileUpdate,
    PortfolioView,
    QualificationCreate,
    QualificationSchema,
    QualificationUpdate,
    ReflectionCreate,
    ReflectionDetail,
    ReflectionSchema,
    ReflectionUpdate,
)
from .restorative import (
    ConversationCreate,
    ConversationSchema,
    ConversationUpdate,
    RestorativeFrameworkCreate,
    RestorativeFrameworkSchema,
    RestorativeFrameworkUpdate,
)
from .users import Token, UserCreate, UserSchema, UserUpdate
from .wellbeing import (
    EmotionJournalCreate,
    EmotionJournalSchema,
    EmotionRecordCreate,
    EmotionRecordSchema,
    PatternAnalysis,
    PatternSettingsUpdate,
    RegulationSettingsSchema,
    RegulationSettingsUpdate,
    StrategyFeedbackCreate,
    StrategyPreferencesUpdate,
    StrategyRecommendations,
)

__all__ = [
    # Assessments
    "AssessmentCreate",
    "AssessmentUpdate",
    "AssessmentSchema",
    "AssessmentSummary",
    "AssessmentAnalytics",
    "AttemptSchema",
    "AttemptDetail",
    "Question",
    "ResponseSubmit",
    "StudentProgress",
    # CPD
    "CPDActivityCreate",
    "CPDActivityUpdate",
    "CPDActivitySchema",
    "CPDActivityDetail",
    "CPDAnalytics",
    "CPDEvidenceCreate",
    "CPDEvidenceSchema",
    "CPDGoalCreate",
    "CPDGoalUpdate",
    "CPDGoalSchema",
    "CPDGoalDetail",
    "CPDRecommendation",
    "CPDReflectionCreate",
    "CPDReflectionSchema",
    "CPDReport",
    # Mentoring
    "ExpertiseArea",
    "MentorProfileUpdate",
    "MentorProfileSchema",
    "MentorshipRequestCreate",
    "MentorshipRequestSchema",
    "RequestDecision",
    "RequestDecisionResponse",
    "MentorshipSchema",
    "MentorshipDetail",
    "MentorshipCompletion",
    "GoalStatusUpdate",
    "MeetingCreate",
    "MeetingUpdate",
    "MeetingSchema",
    "ResourceCreate",
    "ResourceSchema",
    "FeedbackCreate",
    "FeedbackSchema",
    "MentoringAnalytics",
    # Portfolio
    "PortfolioProfileUpdate",
    "PortfolioProfileSchema",
    "QualificationCreate",
    "QualificationUpdate",
    "QualificationSchema",
    "AchievementCreate",
    "AchievementUpdate",
    "AchievementSchema",
    "AchievementDetail",
    "EvidenceCreate",
    "EvidenceUpdate",
    "EvidenceSchema",
    "EvidenceDetail",
    "ReflectionCreate",
    "ReflectionUpdate",
    "ReflectionSchema",
    "ReflectionDetail",
    "PortfolioAnalytics",
    "PortfolioView",
    # Curriculum
    "CurriculumPlanCreate",
    "CurriculumPlanUpdate",
    "CurriculumPlanSchema",
    "CollaborationView",
    "CollaboratorAdd",
    "CollaboratorAddResponse",
    "CollaboratorSchema",
    "CommentCreate",
    "CommentSchema",
    "TaskCreate",
    "TaskUpdate",
    "TaskSchema",
    # Developer API
    "OAuthClientCreate",
    "OAuthClientUpdate",
    "OAuthClientSchema",
    "OAuthClientCreated",
    "AuthorizeRequest",
    "AuthorizeResponse",
    "OAuthTokenResponse",
    "RevokeRequest",
    "IntrospectionResponse",
    # Pacing
    "PacingRequest",
    "ProgressPacingSchema",
    # Restorative justice
    "RestorativeFrameworkCreate",
    "RestorativeFrameworkUpdate",
    "RestorativeFrameworkSchema",
    "ConversationCreate",
    "ConversationUpdate",
    "ConversationSchema",
    # Users
    "UserCreate",
    "UserUpdate",
    "UserSchema",
    "Token",
    # Emotional regulation
    "EmotionRecordCreate",
    "EmotionRecordSchema",
    "EmotionJournalCreate",
    "EmotionJournalSchema",
    "PatternAnalysis",
    "PatternSettingsUpdate",
    "RegulationSettingsSchema",
    "RegulationSettingsUpdate",
    "StrategyFeedbackCreate",
    "StrategyPreferencesUpdate",
    "StrategyRecommendations",
]
