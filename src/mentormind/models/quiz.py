"""Generated quiz models."""

from pydantic import Field, model_validator

from mentormind.models.common import CamelModel

OPTION_LABELS = ("A", "B", "C", "D")


class QuizQuestion(CamelModel):
    """A multiple-choice question with four labeled options."""

    id: int
    question: str
    options: dict[str, str]
    correct_answer: str
    explanation: str = ""

    @model_validator(mode="after")
    def _check_options(self) -> "QuizQuestion":
        if set(self.options) != set(OPTION_LABELS):
            raise ValueError(f"options must be labeled {', '.join(OPTION_LABELS)}")
        if self.correct_answer not in self.options:
            raise ValueError(f"correct answer {self.correct_answer!r} is not an option")
        return self


class Quiz(CamelModel):
    quiz_title: str = ""
    topic: str
    difficulty: str
    questions: list[QuizQuestion] = Field(min_length=1)
