"""Records owned by collaborator stores: jobs, profile, writing samples, templates."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, Field

from job_pal.models.generation import AnyList, GenerationKind, Text


class Job(BaseModel):
    id: str
    title: Text = ""
    company: Text = ""
    description: Text = ""
    requirements: Annotated[str | list[str], BeforeValidator(lambda v: "" if v is None else v)] = ""
    url: str | None = None
    match_score: int | None = None
    updated_at: datetime | None = None

    # Job records carry many UI fields (status, notes, ...) that pass through untouched.
    model_config = {"extra": "allow"}


class Profile(BaseModel):
    name: Text = ""
    email: Text = ""
    phone: Text = ""
    location: Text = ""
    title: Text = ""
    summary: Text = ""
    skills: AnyList = []
    experience: AnyList = []
    education: AnyList = []
    certifications: AnyList = []
    links: Annotated[
        dict[str, str | None] | list[Any], BeforeValidator(lambda v: {} if v is None else v)
    ] = Field(default_factory=dict)

    model_config = {"extra": "allow"}

    @property
    def website(self) -> str:
        if isinstance(self.links, dict):
            return self.links.get("portfolio") or self.links.get("linkedin") or ""
        return ""


class WritingSample(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    title: Text = ""
    type: Text = ""  # e.g. "cover letter", "blog post"
    content: Text = ""


class TemplateEntry(BaseModel):
    """An uploaded .docx template; at most one is active per kind."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    kind: GenerationKind
    original_name: str
    filename: str
    placeholders: list[str] = []
    uploaded_at: datetime = Field(default_factory=datetime.now)
