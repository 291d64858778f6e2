"""Session, quiz and analytics models."""

import math
from datetime import datetime
from enum import StrEnum

from pydantic import Field

from mentormind.models.common import CamelModel, utcnow
from mentormind.models.user_profile import KnowledgeLevel


class Difficulty(StrEnum):
    """Quiz difficulty levels."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"

    @classmethod
    def from_knowledge(cls, level: KnowledgeLevel | str) -> "Difficulty":
        """Map a profile's prior-knowledge level to a quiz difficulty."""
        try:
            return cls(str(level))
        except ValueError:
            return cls.BEGINNER


class TimeWindow(StrEnum):
    WEEK = "week"
    MONTH = "month"
    ALL = "all"


class LearningPace(StrEnum):
    SLOW = "slow"
    MODERATE = "moderate"
    FAST = "fast"


class PendingSession(CamelModel):
    """The in-progress session marker."""

    start_time: datetime = Field(default_factory=utcnow)
    topic: str
    confidence_before: int = Field(ge=1, le=5)
    messages_count: int = 0


class LearningSession(CamelModel):
    """A completed learning session."""

    start_time: datetime
    end_time: datetime
    duration: int = Field(ge=0, description="Seconds")
    topic: str
    messages_count: int = 0
    confidence_before: int = Field(ge=1, le=5)
    confidence_after: int = Field(ge=1, le=5)

    @classmethod
    def complete(
        cls, pending: PendingSession, end_time: datetime, confidence_after: int
    ) -> "LearningSession":
        """Close a pending session at end_time (duration floored to whole seconds)."""
        elapsed = (end_time - pending.start_time).total_seconds()
        return cls(
            start_time=pending.start_time,
            end_time=end_time,
            duration=max(0, math.floor(elapsed)),
            topic=pending.topic,
            messages_count=pending.messages_count,
            confidence_before=pending.confidence_before,
            confidence_after=confidence_after,
        )


class QuizResult(CamelModel):
    topic: str
    score: int | float = Field(ge=0, le=100)
    total_questions: int = Field(ge=0)
    correct_answers: int = Field(ge=0)
    timestamp: datetime = Field(default_factory=utcnow)
    difficulty: Difficulty = Difficulty.BEGINNER


class ConfidenceSample(CamelModel):
    timestamp: datetime
    level: int = Field(ge=1, le=5)
    topic: str


class AnalyticsBundle(CamelModel):
    """Durable aggregate of everything one learner has done.

    Only ever grown through the ``add_*`` methods; callers work on a copy
    read from the store and write the whole bundle back.
    """

    sessions: list[LearningSession] = Field(default_factory=list)
    quiz_results: list[QuizResult] = Field(default_factory=list)
    topics_studied: list[str] = Field(default_factory=list)
    total_time_spent: int = Field(default=0, description="Seconds")
    confidence_levels: list[ConfidenceSample] = Field(default_factory=list)
    last_active: datetime = Field(default_factory=utcnow)

    def add_session(self, session: LearningSession) -> None:
        """Fold a completed session into the bundle."""
        self.sessions.append(session)
        self.total_time_spent += session.duration
        self.last_active = session.end_time
        if session.topic not in self.topics_studied:
            self.topics_studied.append(session.topic)
        self.confidence_levels.append(
            ConfidenceSample(
                timestamp=session.end_time,
                level=session.confidence_after,
                topic=session.topic,
            )
        )

    def add_quiz_result(self, result: QuizResult, at: datetime) -> None:
        self.quiz_results.append(result)
        self.last_active = at


class ProgressSummary(CamelModel):
    topics_completed: int
    total_time_spent: int = Field(description="Minutes")
    confidence_growth: list[int]
    sessions_completed: int


class PerformanceSummary(CamelModel):
    quiz_scores: list[int | float]
    average_score: int
    weak_areas: list[str]
    learning_pace: LearningPace


class Recommendations(CamelModel):
    next_topics: list[str]
    study_schedule: list[str]
    resources: list[str]
    improvement_areas: list[str]


class AnalyticsReport(CamelModel):
    """Derived dashboard metrics for one time window."""

    progress: ProgressSummary
    performance: PerformanceSummary
    recommendations: Recommendations
