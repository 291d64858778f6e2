"""Learning-session lifecycle: pending marker in, completed session out."""

from collections.abc import Callable
from datetime import datetime

import structlog

from mentormind.models.analytics import LearningSession, PendingSession
from mentormind.models.common import utcnow
from mentormind.storage import records
from mentormind.storage.store import JsonFileStore

logger = structlog.get_logger()


class SessionTracker:
    """Tracks the single current learning session.

    At most one pending session exists; starting another replaces it.
    Ending a session folds it into the analytics bundle, and the pending
    marker is cleared only after the bundle has been written. The two
    writes are separate files, so a crash between them leaves the marker
    behind and the next end_session would count that session again.

    Args:
        store: Persistent store holding the marker and the bundle.
        clock: Returns the current aware datetime.
    """

    def __init__(self, store: JsonFileStore, clock: Callable[[], datetime] = utcnow):
        self.store = store
        self.clock = clock

    @property
    def pending(self) -> PendingSession | None:
        return records.load_pending_session(self.store)

    def start_session(self, topic: str, confidence_before: int) -> PendingSession:
        pending = PendingSession(
            start_time=self.clock(),
            topic=topic,
            confidence_before=confidence_before,
            messages_count=0,
        )
        records.save_pending_session(self.store, pending)
        logger.info("session_started", topic=topic, confidence_before=confidence_before)
        return pending

    def increment_message_count(self) -> None:
        pending = records.load_pending_session(self.store)
        if pending is None:
            return
        pending.messages_count += 1
        records.save_pending_session(self.store, pending)

    def end_session(self, confidence_after: int) -> LearningSession | None:
        """Complete the pending session, if any.

        Returns:
            The completed session, or None when nothing was pending or the
            bundle write was dropped (the marker is then kept for a retry).
        """
        pending = records.load_pending_session(self.store)
        if pending is None:
            return None

        session = LearningSession.complete(pending, self.clock(), confidence_after)

        bundle = records.load_analytics(self.store)
        bundle.add_session(session)
        if not records.save_analytics(self.store, bundle):
            logger.warning("session_end_deferred", topic=session.topic)
            return None
        records.clear_pending_session(self.store)

        logger.info(
            "session_ended",
            topic=session.topic,
            duration=session.duration,
            messages=session.messages_count,
        )
        return session
