"""Request payload schemas for the exam API."""

from __future__ import annotations

from pydantic import BaseModel, Field


class OptionPayload(BaseModel):
    """One answer option as authored by a professor."""

    id: str | None = None
    text: str
    is_correct: bool = False


class QuestionPayload(BaseModel):
    id: str | None = None
    text: str
    options: list[OptionPayload] = Field(default_factory=list)


class ExamPayload(BaseModel):
    """Full exam body for create and update; updates replace every field."""

    id: str | None = None
    title: str
    description: str | None = None
    duration_minutes: int
    questions: list[QuestionPayload] = Field(default_factory=list)


class AnswerPayload(BaseModel):
    """Payload schema for a selected option."""

    question_id: str
    option_id: str


class GoToPayload(BaseModel):
    index: int


class FinishPayload(BaseModel):
    """Set ``confirm`` once the student agreed to submit with unanswered questions."""

    confirm: bool = False
