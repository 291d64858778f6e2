"""Tests for typed record accessors."""

from datetime import datetime, timezone

import pytest

from mentormind.errors import CorruptRecordError
from mentormind.models.analytics import AnalyticsBundle, Difficulty, QuizResult
from mentormind.models.chat import ChatMessage, Sender
from mentormind.storage import records
from mentormind.storage.store import RecordKind


class TestProfile:
    def test_absent_profile(self, store):
        assert records.load_profile(store) is None

    def test_save_and_load(self, store, profile):
        records.save_profile(store, profile)
        assert records.load_profile(store) == profile

    def test_persisted_with_camel_case_fields(self, store, profile):
        records.save_profile(store, profile)
        raw = store.get(RecordKind.PROFILE)
        assert raw["priorKnowledge"] == "beginner"
        assert raw["formatPreferences"] == ["text", "images"]
        assert "prior_knowledge" not in raw

    def test_invalid_shape_is_corrupt(self, store):
        store.set(RecordKind.PROFILE, {"name": "Ali", "confidence": 9})
        with pytest.raises(CorruptRecordError):
            records.load_profile(store)


class TestChatHistory:
    def test_empty_when_absent(self, store):
        assert records.load_chat_history(store) == []

    def test_append_replaces_whole_transcript(self, store):
        first = ChatMessage(sender=Sender.USER, text="What is a vector?")
        second = ChatMessage(sender=Sender.AI, text="A quantity with direction.")
        records.append_chat_messages(store, first)
        history = records.append_chat_messages(store, second)
        assert [m.text for m in history] == [first.text, second.text]
        assert records.load_chat_history(store) == history

    def test_image_url_roundtrip(self, store):
        msg = ChatMessage(sender=Sender.AI, text="diagram", image_url="data:image/svg+xml;base64,AA==")
        records.save_chat_history(store, [msg])
        assert records.load_chat_history(store)[0].image_url == msg.image_url

    def test_clear(self, store):
        records.append_chat_messages(store, ChatMessage(sender=Sender.USER, text="hi"))
        records.clear_chat_history(store)
        assert records.load_chat_history(store) == []


class TestAnalytics:
    def test_default_bundle_when_absent(self, store):
        bundle = records.load_analytics(store)
        assert bundle.sessions == []
        assert bundle.quiz_results == []
        assert bundle.topics_studied == []
        assert bundle.total_time_spent == 0
        assert bundle.confidence_levels == []
        assert bundle.last_active.tzinfo is not None

    def test_roundtrip(self, store):
        bundle = AnalyticsBundle(topics_studied=["Physics"], total_time_spent=300)
        records.save_analytics(store, bundle)
        assert records.load_analytics(store) == bundle

    def test_save_quiz_result_appends(self, store):
        at = datetime(2026, 3, 2, 10, 0, tzinfo=timezone.utc)
        result = QuizResult(
            topic="Physics",
            score=80,
            total_questions=5,
            correct_answers=4,
            timestamp=at,
            difficulty=Difficulty.INTERMEDIATE,
        )
        records.save_quiz_result(store, result, now=at)
        records.save_quiz_result(store, result, now=at)
        bundle = records.load_analytics(store)
        assert len(bundle.quiz_results) == 2
        assert bundle.last_active == at


class TestWholeStore:
    def test_clear_all_data(self, store, profile):
        records.save_profile(store, profile)
        records.append_chat_messages(store, ChatMessage(sender=Sender.USER, text="hi"))
        records.save_analytics(store, AnalyticsBundle(topics_studied=["Algebra"]))
        records.clear_all_data(store)
        assert records.load_profile(store) is None
        assert records.load_chat_history(store) == []
        assert records.load_analytics(store).topics_studied == []

    def test_export(self, store, profile):
        records.save_profile(store, profile)
        data = records.export_data(store)
        assert data["profile"]["name"] == "Ayesha"
        assert data["chatHistory"] == []
        assert data["analytics"]["sessions"] == []

    def test_export_without_profile(self, store):
        assert records.export_data(store)["profile"] is None
