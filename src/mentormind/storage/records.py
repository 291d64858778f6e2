"""Typed accessors for the four persisted records."""

from datetime import datetime

from pydantic import BaseModel, TypeAdapter, ValidationError

from mentormind.errors import CorruptRecordError
from mentormind.models.analytics import AnalyticsBundle, PendingSession, QuizResult
from mentormind.models.chat import ChatMessage
from mentormind.models.common import utcnow
from mentormind.models.user_profile import UserProfile
from mentormind.storage.store import JsonFileStore, RecordKind

_chat_adapter = TypeAdapter(list[ChatMessage])


def _load_model(store: JsonFileStore, kind: RecordKind, model: type[BaseModel]):
    data = store.get(kind)
    if data is None:
        return None
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise CorruptRecordError(kind.value, str(exc)) from exc


# Profile

def load_profile(store: JsonFileStore) -> UserProfile | None:
    return _load_model(store, RecordKind.PROFILE, UserProfile)


def save_profile(store: JsonFileStore, profile: UserProfile) -> None:
    store.set(RecordKind.PROFILE, profile.to_record())


# Chat history

def load_chat_history(store: JsonFileStore) -> list[ChatMessage]:
    data = store.get(RecordKind.CHAT_HISTORY)
    if data is None:
        return []
    try:
        return _chat_adapter.validate_python(data)
    except ValidationError as exc:
        raise CorruptRecordError(RecordKind.CHAT_HISTORY.value, str(exc)) from exc


def save_chat_history(store: JsonFileStore, messages: list[ChatMessage]) -> None:
    store.set(RecordKind.CHAT_HISTORY, [m.to_record() for m in messages])


def append_chat_messages(store: JsonFileStore, *messages: ChatMessage) -> list[ChatMessage]:
    """Append to the transcript by rewriting it whole. Returns the new transcript."""
    history = load_chat_history(store)
    history.extend(messages)
    save_chat_history(store, history)
    return history


def clear_chat_history(store: JsonFileStore) -> None:
    store.clear(RecordKind.CHAT_HISTORY)


# Analytics

def load_analytics(store: JsonFileStore) -> AnalyticsBundle:
    """Read the analytics bundle; an absent bundle reads as an empty one."""
    bundle = _load_model(store, RecordKind.ANALYTICS, AnalyticsBundle)
    return bundle if bundle is not None else AnalyticsBundle()


def save_analytics(store: JsonFileStore, bundle: AnalyticsBundle) -> bool:
    return store.set(RecordKind.ANALYTICS, bundle.to_record())


def save_quiz_result(
    store: JsonFileStore, result: QuizResult, now: datetime | None = None
) -> AnalyticsBundle:
    bundle = load_analytics(store)
    bundle.add_quiz_result(result, at=now or utcnow())
    save_analytics(store, bundle)
    return bundle


# Pending session

def load_pending_session(store: JsonFileStore) -> PendingSession | None:
    return _load_model(store, RecordKind.PENDING_SESSION, PendingSession)


def save_pending_session(store: JsonFileStore, pending: PendingSession) -> None:
    store.set(RecordKind.PENDING_SESSION, pending.to_record())


def clear_pending_session(store: JsonFileStore) -> None:
    store.clear(RecordKind.PENDING_SESSION)


# Whole-store operations

def clear_all_data(store: JsonFileStore) -> None:
    store.clear_all()


def export_data(store: JsonFileStore) -> dict:
    """Dump profile, chat history and analytics as plain records."""
    profile = load_profile(store)
    return {
        "profile": profile.to_record() if profile else None,
        "chatHistory": [m.to_record() for m in load_chat_history(store)],
        "analytics": load_analytics(store).to_record(),
    }
