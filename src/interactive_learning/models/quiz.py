"""Quiz question model."""

from pydantic import BaseModel, ConfigDict, Field


class QuizQuestion(BaseModel):
    """A multiple-choice question with its correct answer."""

    model_config = ConfigDict(frozen=True)

    text: str
    correct_answer: str
    options: tuple[str, ...] = Field(min_length=2, max_length=4)
