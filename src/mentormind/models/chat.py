"""Chat transcript models."""

from datetime import datetime
from enum import StrEnum

from pydantic import Field

from mentormind.models.common import CamelModel, utcnow


class Sender(StrEnum):
    USER = "user"
    AI = "ai"


class Language(StrEnum):
    """Languages the tutor can answer in."""

    ENGLISH = "english"
    URDU = "urdu"


class ChatMessage(CamelModel):
    """A single message in the tutoring transcript."""

    sender: Sender
    text: str
    timestamp: datetime = Field(default_factory=utcnow)
    image_url: str | None = None
