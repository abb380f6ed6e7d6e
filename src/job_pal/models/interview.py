"""Pydantic models for mock interview sessions."""

from __future__ import annotations

import math
import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from job_pal.models.generation import StrList, Text

INTERVIEWER = "interviewer"
CANDIDATE = "candidate"


class InterviewMessage(BaseModel):
    role: Literal["interviewer", "candidate"]
    content: str
    question_type: str | None = None  # behavioral, technical, situational
    tip: str | None = None
    feedback: str | None = None  # interviewer's note on the previous answer


class InterviewAssessment(BaseModel):
    """Holistic assessment produced when a session ends."""

    overall_score: int = Field(alias="overallScore")  # 1-10
    summary: Text = ""
    strengths: StrList = []
    improvements: StrList = []
    tips: StrList = []

    model_config = {"populate_by_name": True}

    @field_validator("overall_score", mode="before")
    @classmethod
    def _clamp_score(cls, value):
        try:
            score = float(value)
        except (TypeError, ValueError):
            raise ValueError("overallScore must be a finite number") from None
        if not math.isfinite(score):
            raise ValueError("overallScore must be a finite number")
        score = round(score)
        return min(10, max(1, score))


class InterviewSession(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    job_id: str
    messages: list[InterviewMessage] = []
    question_count: int = 0
    feedback: InterviewAssessment | None = None
    created_at: datetime = Field(default_factory=datetime.now)
    completed_at: datetime | None = None

    @property
    def is_complete(self) -> bool:
        return self.completed_at is not None

    @property
    def current_question(self) -> InterviewMessage | None:
        """The last interviewer turn, i.e. the question awaiting an answer."""
        for message in reversed(self.messages):
            if message.role == INTERVIEWER:
                return message
        return None


class InterviewerTurn(BaseModel):
    """One interviewer reply as returned by the model."""

    question: str = Field(min_length=1)
    question_type: str | None = Field(default=None, alias="questionType")
    tip: str | None = None
    feedback: str | None = None

    model_config = {"populate_by_name": True}
