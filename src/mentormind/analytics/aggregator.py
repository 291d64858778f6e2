"""Dashboard metrics derived from the analytics bundle.

Everything here is a pure function of (bundle, profile, window, now): no
store access and no side effects, so repeated calls with the same inputs
give the same report.
"""

import math
from datetime import datetime, timedelta, timezone

from mentormind.models.analytics import (
    AnalyticsBundle,
    AnalyticsReport,
    LearningPace,
    LearningSession,
    PerformanceSummary,
    ProgressSummary,
    QuizResult,
    Recommendations,
    TimeWindow,
)
from mentormind.models.common import utcnow
from mentormind.models.user_profile import UserProfile

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

WINDOW_DAYS: dict[TimeWindow, int] = {
    TimeWindow.WEEK: 7,
    TimeWindow.MONTH: 30,
}

WEAK_SCORE_THRESHOLD = 70
MAX_WEAK_AREAS = 3
RECENT_CONFIDENCE_SAMPLES = 3
RECENT_QUIZ_SCORES = 5
PACE_LOOKBACK = timedelta(days=7)
FAST_PACE_SESSIONS = 5
MODERATE_PACE_SESSIONS = 2
MAX_NEXT_TOPICS = 3

RESOURCES = [
    "AI-generated quizzes",
    "Step-by-step explanations",
    "Interactive chat learning",
    "Progress tracking",
]

ENCOURAGEMENTS = [
    "Keep up the great work!",
    "Try more challenging quizzes",
    "Explore advanced topics",
]


def window_cutoff(window: TimeWindow, now: datetime) -> datetime:
    """Records must be strictly newer than the cutoff to fall in the window."""
    days = WINDOW_DAYS.get(window)
    if days is None:
        return EPOCH
    return now - timedelta(days=days)


def js_round(value: float) -> int:
    """Round half up, as dashboards built on Math.round do."""
    return math.floor(value + 0.5)


def _distinct(values) -> list:
    """Distinct values in first-occurrence order."""
    return list(dict.fromkeys(values))


def learning_pace(sessions: list[LearningSession], now: datetime) -> LearningPace:
    """Pace from all sessions started in the trailing week, whatever the display window."""
    cutoff = now - PACE_LOOKBACK
    recent = sum(1 for s in sessions if s.start_time > cutoff)
    if recent >= FAST_PACE_SESSIONS:
        return LearningPace.FAST
    if recent >= MODERATE_PACE_SESSIONS:
        return LearningPace.MODERATE
    return LearningPace.SLOW


def weak_areas(quiz_results: list[QuizResult]) -> list[str]:
    low = (q.topic for q in quiz_results if q.score < WEAK_SCORE_THRESHOLD)
    return _distinct(low)[:MAX_WEAK_AREAS]


def build_recommendations(
    bundle: AnalyticsBundle,
    profile: UserProfile,
    average_score: int,
    weak: list[str],
) -> Recommendations:
    candidates = [
        f"{profile.topic} - Advanced Concepts",
        "Practical Applications",
        "Real-world Case Studies",
        "Problem Solving Techniques",
    ]
    next_topics = [t for t in candidates if t not in bundle.topics_studied][:MAX_NEXT_TOPICS]

    study_schedule = [
        f"Study {profile.topic} for {profile.session_length} daily",
        f"Practice {profile.study_frequency} times per week",
        (
            "Focus on foundational concepts"
            if average_score < WEAK_SCORE_THRESHOLD
            else "Challenge yourself with harder topics"
        ),
        "Take regular quizzes to track progress",
    ]

    if weak:
        improvement_areas = [f"Review and practice: {area}" for area in weak]
    else:
        improvement_areas = list(ENCOURAGEMENTS)

    return Recommendations(
        next_topics=next_topics,
        study_schedule=study_schedule,
        resources=list(RESOURCES),
        improvement_areas=improvement_areas,
    )


def compute_analytics(
    bundle: AnalyticsBundle,
    profile: UserProfile,
    window: TimeWindow | str = TimeWindow.WEEK,
    now: datetime | None = None,
) -> AnalyticsReport:
    """Derive progress, performance and recommendations for a time window.

    Args:
        bundle: Raw analytics read from the store.
        profile: Learner profile; supplies fallback confidence and schedule text.
        window: "week", "month" or "all".
        now: Reference time; defaults to the current UTC time.

    Returns:
        AnalyticsReport grouped into progress / performance / recommendations.
    """
    window = TimeWindow(window)
    now = now or utcnow()
    cutoff = window_cutoff(window, now)

    sessions = [s for s in bundle.sessions if s.start_time > cutoff]
    quizzes = [q for q in bundle.quiz_results if q.timestamp > cutoff]

    # Windowed counts measure session topic diversity, not cumulative topics
    if window is TimeWindow.ALL:
        topics_completed = len(bundle.topics_studied)
    else:
        topics_completed = len({s.topic for s in sessions})

    total_minutes = sum(s.duration for s in sessions) // 60

    recent_confidence = [c.level for c in bundle.confidence_levels[-RECENT_CONFIDENCE_SAMPLES:]]
    confidence_growth = recent_confidence or [profile.confidence]

    quiz_scores = [q.score for q in quizzes[-RECENT_QUIZ_SCORES:]]
    average_score = js_round(sum(quiz_scores) / len(quiz_scores)) if quiz_scores else 0

    weak = weak_areas(quizzes)

    return AnalyticsReport(
        progress=ProgressSummary(
            topics_completed=topics_completed,
            total_time_spent=total_minutes,
            confidence_growth=confidence_growth,
            sessions_completed=len(sessions),
        ),
        performance=PerformanceSummary(
            quiz_scores=quiz_scores,
            average_score=average_score,
            weak_areas=weak,
            learning_pace=learning_pace(bundle.sessions, now),
        ),
        recommendations=build_recommendations(bundle, profile, average_score, weak),
    )
