"""FastAPI dependencies wiring settings to store, tracker and model clients."""

import functools

from fastapi import Depends
from openai import AsyncOpenAI

from mentormind.config import get_settings
from mentormind.quiz.generator import QuizGenerator
from mentormind.storage.store import JsonFileStore
from mentormind.tracking.session_tracker import SessionTracker
from mentormind.tutoring.diagrams import DiagramGenerator
from mentormind.tutoring.gateway import TutorGateway


@functools.lru_cache
def _client(api_key: str, base_url: str | None) -> AsyncOpenAI:
    return AsyncOpenAI(api_key=api_key, base_url=base_url)


def get_client() -> AsyncOpenAI:
    settings = get_settings()
    return _client(settings.openai_api_key, settings.openai_base_url)


def get_store() -> JsonFileStore:
    return JsonFileStore(get_settings().store_dir)


def get_tracker(store: JsonFileStore = Depends(get_store)) -> SessionTracker:
    return SessionTracker(store)


def get_diagram_generator(client: AsyncOpenAI = Depends(get_client)) -> DiagramGenerator:
    return DiagramGenerator(client, model=get_settings().diagram_model)


def get_gateway(
    client: AsyncOpenAI = Depends(get_client),
    diagrams: DiagramGenerator = Depends(get_diagram_generator),
) -> TutorGateway:
    return TutorGateway(client, model=get_settings().chat_model, diagrams=diagrams)


def get_quiz_generator(client: AsyncOpenAI = Depends(get_client)) -> QuizGenerator:
    return QuizGenerator(client, model=get_settings().quiz_model)
