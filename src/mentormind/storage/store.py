"""Whole-record key-value store (JSON + fcntl.flock + atomic write).

Four fixed record kinds live side by side in one data directory, one JSON
document each. Every document is wrapped in a version envelope::

    {"version": 1, "data": <record>}

Bare documents written before the envelope existed are read as version 0.
"""

import contextlib
import fcntl
import json
import os
import tempfile
from enum import StrEnum
from pathlib import Path
from typing import Any, Iterator

import structlog

from mentormind.errors import CorruptRecordError

logger = structlog.get_logger()

STORE_VERSION = 1
LOCK_FILENAME = ".store.lock"


class RecordKind(StrEnum):
    PROFILE = "profile"
    CHAT_HISTORY = "chat-history"
    ANALYTICS = "analytics"
    PENDING_SESSION = "pending-session"

    @property
    def key(self) -> str:
        return _STORAGE_KEYS[self]


_STORAGE_KEYS = {
    RecordKind.PROFILE: "mentormind_user_profile",
    RecordKind.CHAT_HISTORY: "mentormind_chat_history",
    RecordKind.ANALYTICS: "mentormind_analytics",
    RecordKind.PENDING_SESSION: "mentormind_current_session",
}


def _migrate(kind: RecordKind, document: Any) -> Any:
    """Unwrap a stored document and bring it up to STORE_VERSION."""
    if isinstance(document, dict) and set(document) == {"version", "data"}:
        version, data = document["version"], document["data"]
    else:
        version, data = 0, document

    if not isinstance(version, int) or version < 0:
        raise CorruptRecordError(kind.value, f"invalid version tag {version!r}")
    if version > STORE_VERSION:
        raise CorruptRecordError(
            kind.value, f"written by a newer release (version {version})"
        )
    # 0 -> 1 only added the envelope; record shapes are unchanged.
    return data


class JsonFileStore:
    """File-backed store for the four MentorMind records.

    Reads and writes are synchronous and whole-record. An unreadable or
    unwritable directory degrades to "absent on read, no-op on write";
    unparseable content raises CorruptRecordError.

    Args:
        data_dir: Directory holding the record files.
    """

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)

    def path_for(self, kind: RecordKind) -> Path:
        return self.data_dir / f"{kind.key}.json"

    @contextlib.contextmanager
    def _locked(self) -> Iterator[None]:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        with open(self.data_dir / LOCK_FILENAME, "w") as lock_file:
            fcntl.flock(lock_file, fcntl.LOCK_EX)
            try:
                yield
            finally:
                fcntl.flock(lock_file, fcntl.LOCK_UN)

    def get(self, kind: RecordKind) -> Any | None:
        """Return the stored record for kind, or None when absent."""
        path = self.path_for(kind)
        try:
            if not path.exists():
                return None
            raw = path.read_bytes()
        except OSError as exc:
            logger.warning("store_read_failed", kind=kind.value, error=str(exc))
            return None

        try:
            document = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise CorruptRecordError(kind.value, str(exc)) from exc
        return _migrate(kind, document)

    def set(self, kind: RecordKind, record: Any) -> bool:
        """Replace the stored record for kind. Returns False if the write was dropped."""
        path = self.path_for(kind)
        try:
            with self._locked():
                with tempfile.NamedTemporaryFile(
                    "w", dir=self.data_dir, delete=False, suffix=".tmp", encoding="utf-8"
                ) as tmp:
                    json.dump({"version": STORE_VERSION, "data": record}, tmp)
                os.replace(tmp.name, path)
        except OSError as exc:
            logger.warning("store_write_failed", kind=kind.value, error=str(exc))
            return False
        return True

    def clear(self, kind: RecordKind) -> None:
        try:
            with self._locked():
                self.path_for(kind).unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("store_clear_failed", kind=kind.value, error=str(exc))

    def clear_all(self) -> None:
        """Remove all four records under a single lock."""
        try:
            with self._locked():
                for kind in RecordKind:
                    self.path_for(kind).unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("store_clear_failed", kind="all", error=str(exc))
