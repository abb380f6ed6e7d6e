"""Pydantic models for resume and cover letter generation output."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, Field


class GenerationKind(str, Enum):
    RESUME = "resume"
    COVER_LETTER = "cover-letter"


class GenerationRequest(BaseModel):
    job_id: str
    kind: GenerationKind


def _is_scalar(value: Any) -> bool:
    return isinstance(value, (str, int, float)) and not isinstance(value, bool)


def _as_text(value: Any) -> Any:
    if value is None:
        return ""
    if _is_scalar(value):
        return str(value)
    return value


def _as_str_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if _is_scalar(item)]


def _as_list(value: Any) -> list:
    if value is None:
        return []
    return value if isinstance(value, list) else [value]


def _as_dict(value: Any) -> Any:
    return value if isinstance(value, (dict, BaseModel)) else {}


def _as_dict_list(value: Any) -> list:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, (dict, BaseModel))]


# Model output and hand-edited records often carry nulls, numbers or the wrong
# container where a string or list is expected. Unusable shapes degrade to
# empty values instead of failing the whole record.
Text = Annotated[str, BeforeValidator(_as_text)]
StrList = Annotated[list[str], BeforeValidator(_as_str_list)]
AnyList = Annotated[list[Any], BeforeValidator(_as_list)]


class ExperienceEntry(BaseModel):
    title: Text = ""
    company: Text = ""
    location: Text = ""
    dates: Text = ""
    bullets: StrList = []


class SkillGroups(BaseModel):
    """Skills grouped into the three categories the resume template lays out."""

    management: StrList = []
    design: StrList = []
    tools: StrList = []


class ResumeResult(BaseModel):
    resume: Text = ""  # full plain-text resume
    summary: Text = ""
    skills: Annotated[SkillGroups, BeforeValidator(_as_dict)] = Field(
        default_factory=SkillGroups
    )
    experiences: Annotated[list[ExperienceEntry], BeforeValidator(_as_dict_list)] = []
    changes: StrList = []
    highlights: StrList = []
    ats_keywords: StrList = Field(default=[], alias="atsKeywords")

    model_config = {"populate_by_name": True}

    @property
    def body(self) -> str:
        return self.resume


class CoverLetterResult(BaseModel):
    cover_letter: Text = Field(default="", alias="coverLetter")
    tone_notes: Text = Field(default="", alias="toneNotes")
    key_points: StrList = Field(default=[], alias="keyPoints")

    model_config = {"populate_by_name": True}

    @property
    def body(self) -> str:
        return self.cover_letter


GenerationResult = ResumeResult | CoverLetterResult

RESULT_TYPES: dict[GenerationKind, type[ResumeResult] | type[CoverLetterResult]] = {
    GenerationKind.RESUME: ResumeResult,
    GenerationKind.COVER_LETTER: CoverLetterResult,
}
