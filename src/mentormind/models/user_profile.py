"""Learner profile collected by the onboarding wizard."""

from enum import StrEnum

from pydantic import Field

from mentormind.models.common import CamelModel


class Motivation(StrEnum):
    CAREER = "career"
    HOBBY = "hobby"
    EXAM = "exam"
    CURIOSITY = "curiosity"


class KnowledgeLevel(StrEnum):
    NONE = "none"
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class FormatPreference(StrEnum):
    IMAGES = "images"
    VIDEOS = "videos"
    AUDIO = "audio"
    TEXT = "text"
    INTERACTIVE = "interactive"
    HANDS_ON = "hands-on"


class SessionLength(StrEnum):
    UNDER_5 = "<5min"
    FROM_5_TO_15 = "5-15min"
    FROM_15_TO_30 = "15-30min"
    OVER_30 = "30+min"


class DeviceType(StrEnum):
    MOBILE = "mobile"
    TABLET = "tablet"
    LAPTOP = "laptop"
    DESKTOP = "desktop"


class ExampleType(StrEnum):
    REAL_WORLD = "real-world"
    SIMPLE = "simple"
    TECHNICAL = "technical"
    VISUAL = "visual"


class AssessmentType(StrEnum):
    QUIZZES = "quizzes"
    QUICK_CHECKS = "quick-checks"
    PROJECTS = "projects"
    NONE = "none"


class FeedbackType(StrEnum):
    INSTANT = "instant"
    DELAYED = "delayed"
    BOTH = "both"


class UserProfile(CamelModel):
    # Basic info
    name: str
    topic: str
    motivation: Motivation = Motivation.CURIOSITY

    # Prior knowledge
    prior_knowledge: KnowledgeLevel = KnowledgeLevel.BEGINNER
    confidence: int = Field(default=3, ge=1, le=5)

    # Learning format
    format_preferences: list[FormatPreference] = Field(
        default_factory=lambda: [FormatPreference.TEXT, FormatPreference.IMAGES]
    )
    session_length: SessionLength = SessionLength.FROM_15_TO_30
    study_frequency: int = Field(default=3, ge=0, description="Sessions per week")

    # Device & accessibility
    device: DeviceType = DeviceType.LAPTOP
    accessibility: list[str] = Field(default_factory=list)

    # Examples
    example_types: list[ExampleType] = Field(default_factory=lambda: [ExampleType.REAL_WORLD])
    wants_references: bool = True

    # Assessment & feedback
    assessment_pref: list[AssessmentType] = Field(default_factory=lambda: [AssessmentType.QUIZZES])
    feedback_pref: FeedbackType = FeedbackType.INSTANT

    consent: bool = False

    @property
    def prefers_images(self) -> bool:
        return FormatPreference.IMAGES in self.format_preferences
