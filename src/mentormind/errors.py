"""Exception hierarchy for MentorMind.

- MentorMindError: base for everything raised by this package
- CorruptRecordError: a persisted record cannot be parsed or validated
- GatewayError: the tutoring model call failed or returned garbage
- QuizGenerationError: the quiz payload is missing or malformed
"""


class MentorMindError(Exception):
    """Base exception for all MentorMind errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional error context.
    """

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class CorruptRecordError(MentorMindError):
    """A stored record failed to parse, validate, or migrate."""

    def __init__(self, kind: str, reason: str):
        self.kind = kind
        super().__init__(f"Stored record '{kind}' is unreadable", {"reason": reason})


class GatewayError(MentorMindError):
    """The tutoring model returned an error or an unusable payload."""


class QuizGenerationError(GatewayError):
    """The quiz model response had no usable questions list."""
