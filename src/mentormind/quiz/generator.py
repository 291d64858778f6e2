"""Multiple-choice quiz generation and grading."""

import json
from collections.abc import Mapping
from datetime import datetime

import structlog
from openai import AsyncOpenAI
from pydantic import ValidationError

from mentormind.errors import QuizGenerationError
from mentormind.models.analytics import Difficulty, QuizResult
from mentormind.models.chat import Language
from mentormind.models.common import utcnow
from mentormind.models.quiz import Quiz
from mentormind.models.user_profile import UserProfile
from mentormind.tutoring.prompts import QUIZ_SYSTEM_PROMPT, QUIZ_USER_PROMPT, strip_code_fences

logger = structlog.get_logger()

DEFAULT_QUESTION_COUNT = 5


def parse_quiz(text: str, topic: str, difficulty: Difficulty) -> Quiz:
    """Parse a model response into a Quiz.

    Raises:
        QuizGenerationError: The payload is not JSON, lacks a questions list,
            or a question is malformed.
    """
    try:
        payload = json.loads(strip_code_fences(text, "json"))
    except json.JSONDecodeError as exc:
        raise QuizGenerationError("Quiz response is not valid JSON", {"error": str(exc)}) from exc

    if not isinstance(payload, dict) or not isinstance(payload.get("questions"), list):
        raise QuizGenerationError("Invalid quiz structure")

    payload.setdefault("topic", topic)
    payload.setdefault("difficulty", difficulty.value)
    try:
        return Quiz.model_validate(payload)
    except ValidationError as exc:
        raise QuizGenerationError("Invalid quiz question", {"error": str(exc)}) from exc


class QuizGenerator:
    """Generates quizzes with the configured model.

    Args:
        client: OpenAI-compatible async client.
        model: Model to use for quiz generation.
    """

    def __init__(self, client: AsyncOpenAI, model: str = "gpt-4o-mini"):
        self.client = client
        self.model = model

    async def generate(
        self,
        topic: str,
        difficulty: Difficulty = Difficulty.BEGINNER,
        count: int = DEFAULT_QUESTION_COUNT,
        language: Language = Language.ENGLISH,
        profile: UserProfile | None = None,
    ) -> Quiz:
        """Generate a quiz.

        Raises:
            QuizGenerationError: The model call failed or its payload was unusable.
        """
        prompt = QUIZ_USER_PROMPT.format(
            topic=topic,
            difficulty=difficulty,
            count=count,
            language=language,
            confidence=profile.confidence if profile else 3,
        )
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": QUIZ_SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=0.5,
                response_format={"type": "json_object"},
            )
            text = response.choices[0].message.content or ""
        except Exception as exc:
            logger.exception("quiz_request_failed", topic=topic)
            raise QuizGenerationError("Quiz request failed", {"error": str(exc)}) from exc

        quiz = parse_quiz(text, topic, difficulty)
        logger.info("quiz_generated", topic=quiz.topic, questions=len(quiz.questions))
        return quiz


def grade_quiz(
    quiz: Quiz,
    answers: Mapping[int, str],
    difficulty: Difficulty,
    now: datetime | None = None,
) -> QuizResult:
    """Score answers keyed by question index (0-based) against a quiz."""
    correct = sum(
        1 for index, question in enumerate(quiz.questions)
        if answers.get(index) == question.correct_answer
    )
    total = len(quiz.questions)
    score = correct * 100 / total
    # Whole percentages are stored as integers, e.g. 60 rather than 60.0
    return QuizResult(
        topic=quiz.topic,
        score=int(score) if score.is_integer() else score,
        total_questions=total,
        correct_answers=correct,
        timestamp=now or utcnow(),
        difficulty=difficulty,
    )
