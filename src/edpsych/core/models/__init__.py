"""
EdPsych Connect SQLAlchemy Models
"""

from .assessments import Assessment, AssessmentAttempt, AttemptResponse
from .base import Base, SoftDeleteMixin, TimestampMixin, UUIDPrimaryKeyMixin
from .cpd import CPD_STATUSES, CPDActivity, CPDEvidence, CPDGoal, CPDReflection
from .curriculum import (
    CurriculumPlan,
    CurriculumPlanCollaborator,
    CurriculumPlanComment,
    CurriculumPlanTask,
)
from .mentoring import (
    MentorProfile,
    Mentorship,
    MentorshipFeedback,
    MentorshipMeeting,
    MentorshipRequest,
    MentorshipResource,
)
from .oauth import OAuthAuthorizationCode, OAuthClient, OAuthRefreshToken
from .pacing import ProgressPacing
from .portfolio import (
    PortfolioAchievement,
    PortfolioEvidence,
    PortfolioProfile,
    PortfolioQualification,
    PortfolioReflection,
)
from .restorative import RestorativeConversation, RestorativeFramework
from .users import STAFF_ROLES, User, UserRole
from .wellbeing import EmotionalRegulationSettings, EmotionJournal, EmotionRecord, RegulationLog

__all__ = [
    # Base
    "Base",
    "UUIDPrimaryKeyMixin",
    "TimestampMixin",
    "SoftDeleteMixin",
    # Users
    "User",
    "UserRole",
    "STAFF_ROLES",
    # Restorative justice
    "RestorativeFramework",
    "RestorativeConversation",
    # CPD
    "CPD_STATUSES",
    "CPDActivity",
    "CPDGoal",
    "CPDReflection",
    "CPDEvidence",
    # Mentoring
    "MentorProfile",
    "MentorshipRequest",
    "Mentorship",
    "MentorshipMeeting",
    "MentorshipResource",
    "MentorshipFeedback",
    # Portfolio
    "PortfolioProfile",
    "PortfolioQualification",
    "PortfolioAchievement",
    "PortfolioEvidence",
    "PortfolioReflection",
    # Emotional regulation
    "EmotionRecord",
    "EmotionJournal",
    "EmotionalRegulationSettings",
    "RegulationLog",
    # Curriculum
    "CurriculumPlan",
    "CurriculumPlanCollaborator",
    "CurriculumPlanComment",
    "CurriculumPlanTask",
    # Assessments
    "Assessment",
    "AssessmentAttempt",
    "AttemptResponse",
    # Pacing
    "ProgressPacing",
    # Developer API
    "OAuthClient",
    "OAuthAuthorizationCode",
    "OAuthRefreshToken",
]
