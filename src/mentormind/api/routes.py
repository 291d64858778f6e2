"""REST API routes for onboarding, chat, sessions, quizzes and analytics."""

import structlog
from fastapi import APIRouter, Depends, HTTPException
from pydantic import Field

from mentormind.analytics.aggregator import compute_analytics
from mentormind.api.deps import (
    get_diagram_generator,
    get_gateway,
    get_quiz_generator,
    get_store,
    get_tracker,
)
from mentormind.config import get_settings
from mentormind.errors import GatewayError, QuizGenerationError
from mentormind.models.analytics import Difficulty, TimeWindow
from mentormind.models.chat import ChatMessage, Language, Sender
from mentormind.models.common import CamelModel
from mentormind.models.quiz import Quiz
from mentormind.models.user_profile import UserProfile
from mentormind.quiz.generator import QuizGenerator, grade_quiz
from mentormind.storage import records
from mentormind.storage.store import JsonFileStore
from mentormind.tracking.session_tracker import SessionTracker
from mentormind.tutoring.diagrams import DiagramGenerator
from mentormind.tutoring.gateway import TutorGateway
from mentormind.tutoring.prompts import pick_diagram_type, welcome_message

logger = structlog.get_logger()
router = APIRouter(prefix="/api")

CHAT_RETRY_MESSAGE = "Request failed. Please try again!"
QUIZ_RETRY_MESSAGE = "Failed to generate quiz. Please try again."
DIAGRAM_INTRO = "🎨 Here's a visual diagram for your topic:"


class ChatRequest(CamelModel):
    message: str = Field(min_length=1)
    language: Language = Language.ENGLISH


class SessionStartRequest(CamelModel):
    topic: str | None = None
    confidence: int | None = Field(default=None, ge=1, le=5)


class SessionEndRequest(CamelModel):
    confidence: int | None = Field(default=None, ge=1, le=5)


class QuizRequest(CamelModel):
    topic: str | None = None
    difficulty: Difficulty | None = None
    question_count: int | None = Field(default=None, ge=1, le=20)
    language: Language = Language.ENGLISH


class QuizSubmission(CamelModel):
    quiz: Quiz
    answers: dict[int, str] = Field(description="Selected option label by question index")


def require_profile(store: JsonFileStore) -> UserProfile:
    profile = records.load_profile(store)
    if profile is None:
        raise HTTPException(status_code=404, detail="Complete onboarding first")
    return profile


@router.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "ok"}


# Onboarding

@router.get("/profile")
async def get_profile(store: JsonFileStore = Depends(get_store)) -> dict:
    return require_profile(store).to_record()


@router.put("/profile")
async def complete_onboarding(
    profile: UserProfile, store: JsonFileStore = Depends(get_store)
) -> dict:
    """Save the onboarding result, replacing any earlier profile."""
    if not profile.consent:
        raise HTTPException(status_code=422, detail="Consent is required to complete onboarding")
    records.save_profile(store, profile)
    logger.info("onboarding_completed", topic=profile.topic)
    return profile.to_record()


# Chat

@router.get("/chat/history")
async def get_chat_history(store: JsonFileStore = Depends(get_store)) -> list[dict]:
    """Return the transcript, seeding a welcome message for a new learner."""
    history = records.load_chat_history(store)
    if not history:
        profile = records.load_profile(store)
        if profile is not None:
            welcome = ChatMessage(sender=Sender.AI, text=welcome_message(profile))
            history = [welcome]
            records.save_chat_history(store, history)
    return [m.to_record() for m in history]


@router.delete("/chat/history")
async def delete_chat_history(store: JsonFileStore = Depends(get_store)) -> dict:
    records.clear_chat_history(store)
    return {"status": "cleared"}


@router.post("/chat")
async def send_chat_message(
    request: ChatRequest,
    store: JsonFileStore = Depends(get_store),
    tracker: SessionTracker = Depends(get_tracker),
    gateway: TutorGateway = Depends(get_gateway),
) -> dict:
    """Record the learner message, ask the tutor, and record its reply.

    A failed tutor call is answered with a fixed retry message instead of
    an error status.
    """
    profile = records.load_profile(store)
    records.append_chat_messages(store, ChatMessage(sender=Sender.USER, text=request.message))
    tracker.increment_message_count()

    try:
        result = await gateway.send_prompt(request.message, profile, request.language)
        reply = ChatMessage(sender=Sender.AI, text=result.reply, image_url=result.image_url)
    except GatewayError:
        logger.warning("chat_reply_failed")
        reply = ChatMessage(sender=Sender.AI, text=CHAT_RETRY_MESSAGE)

    records.append_chat_messages(store, reply)
    return reply.to_record()


@router.post("/chat/diagram")
async def generate_chat_diagram(
    store: JsonFileStore = Depends(get_store),
    diagrams: DiagramGenerator = Depends(get_diagram_generator),
) -> dict:
    """Draw a diagram for the learner's most recent message."""
    profile = require_profile(store)
    history = records.load_chat_history(store)
    last_user = next((m for m in reversed(history) if m.sender == Sender.USER), None)
    if last_user is None:
        raise HTTPException(status_code=404, detail="No learner message to illustrate")

    image_url = await diagrams.generate(
        last_user.text, profile.topic, pick_diagram_type(last_user.text)
    )
    message = ChatMessage(sender=Sender.AI, text=DIAGRAM_INTRO, image_url=image_url)
    records.append_chat_messages(store, message)
    return message.to_record()


# Sessions

@router.post("/sessions/start")
async def start_session(
    request: SessionStartRequest | None = None,
    store: JsonFileStore = Depends(get_store),
    tracker: SessionTracker = Depends(get_tracker),
) -> dict:
    """Start a learning session; topic and confidence default to the profile's."""
    request = request or SessionStartRequest()
    if request.topic is None or request.confidence is None:
        profile = require_profile(store)
        topic = request.topic or profile.topic
        confidence = request.confidence or profile.confidence
    else:
        topic, confidence = request.topic, request.confidence
    return tracker.start_session(topic, confidence).to_record()


@router.get("/sessions/current")
async def get_current_session(tracker: SessionTracker = Depends(get_tracker)) -> dict:
    pending = tracker.pending
    if pending is None:
        raise HTTPException(status_code=404, detail="No session in progress")
    return pending.to_record()


@router.post("/sessions/end")
async def end_session(
    request: SessionEndRequest | None = None,
    store: JsonFileStore = Depends(get_store),
    tracker: SessionTracker = Depends(get_tracker),
) -> dict:
    if tracker.pending is None:
        return {"session": None}
    request = request or SessionEndRequest()
    confidence = request.confidence
    if confidence is None:
        confidence = require_profile(store).confidence
    session = tracker.end_session(confidence)
    return {"session": session.to_record() if session else None}


# Quizzes

@router.post("/quiz")
async def generate_quiz(
    request: QuizRequest,
    store: JsonFileStore = Depends(get_store),
    generator: QuizGenerator = Depends(get_quiz_generator),
) -> dict:
    profile = records.load_profile(store)
    topic = request.topic or (profile.topic if profile else None)
    if not topic:
        raise HTTPException(status_code=422, detail="A quiz topic is required")
    difficulty = request.difficulty or (
        Difficulty.from_knowledge(profile.prior_knowledge) if profile else Difficulty.BEGINNER
    )

    try:
        quiz = await generator.generate(
            topic,
            difficulty=difficulty,
            count=request.question_count or get_settings().quiz_question_count,
            language=request.language,
            profile=profile,
        )
    except QuizGenerationError as exc:
        logger.warning("quiz_generation_failed", error=str(exc))
        raise HTTPException(status_code=502, detail=QUIZ_RETRY_MESSAGE) from exc
    return quiz.to_record()


@router.post("/quiz/results")
async def submit_quiz(
    submission: QuizSubmission, store: JsonFileStore = Depends(get_store)
) -> dict:
    """Grade a completed quiz and record the result."""
    profile = records.load_profile(store)
    difficulty = (
        Difficulty.from_knowledge(profile.prior_knowledge)
        if profile
        else Difficulty.from_knowledge(submission.quiz.difficulty)
    )
    result = grade_quiz(submission.quiz, submission.answers, difficulty)
    records.save_quiz_result(store, result, now=result.timestamp)
    logger.info("quiz_recorded", topic=result.topic, score=result.score)
    return result.to_record()


# Analytics and data management

@router.get("/analytics")
async def get_analytics(
    window: TimeWindow = TimeWindow.WEEK, store: JsonFileStore = Depends(get_store)
) -> dict:
    profile = require_profile(store)
    bundle = records.load_analytics(store)
    return compute_analytics(bundle, profile, window).to_record()


@router.get("/data/export")
async def export_data(store: JsonFileStore = Depends(get_store)) -> dict:
    return records.export_data(store)


@router.delete("/data")
async def reset_data(store: JsonFileStore = Depends(get_store)) -> dict:
    """Delete profile, transcript, analytics and any pending session."""
    records.clear_all_data(store)
    logger.info("data_reset")
    return {"status": "cleared"}
