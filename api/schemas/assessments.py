"""Assessment questionnaire schemas."""

from datetime import datetime
from typing import Any, Literal, Optional, Union
from pydantic import Field, model_validator

from api.schemas.common import CamelModel

QuestionType = Literal[
    "short_text",
    "long_text",
    "single_choice",
    "multi_choice",
    "numeric_range",
    "file_upload",
]

CHOICE_QUESTION_TYPES: tuple[str, ...] = ("single_choice", "multi_choice")


class Question(CamelModel):
    """A single question inside a section."""

    id: str
    type: QuestionType
    title: str = ""
    description: str = ""
    required: bool = False
    options: list[str] = Field(default_factory=list)
    correct_answer: Optional[Union[str, list[str]]] = None
    validation: dict[str, Any] = Field(default_factory=dict)
    conditional_logic: Any = None
    order: int = 0

    @model_validator(mode="after")
    def check_answer_shape(self) -> "Question":
        """Keep `correct_answer` consistent with the question type."""
        if self.type not in CHOICE_QUESTION_TYPES:
            self.correct_answer = None
        elif self.type == "multi_choice" and isinstance(self.correct_answer, str):
            self.correct_answer = [self.correct_answer]
        elif self.type == "single_choice" and isinstance(self.correct_answer, list):
            self.correct_answer = self.correct_answer[0] if self.correct_answer else None
        return self


class Section(CamelModel):
    """An ordered group of questions."""

    id: str
    title: str = ""
    description: str = ""
    questions: list[Question] = Field(default_factory=list)
    order: int = 0


class Assessment(CamelModel):
    """The questionnaire attached to one job."""

    id: str
    job_id: str
    title: str = ""
    description: str = ""
    sections: list[Section] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime
