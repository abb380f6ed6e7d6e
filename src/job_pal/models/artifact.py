"""Persisted resume / cover letter artifacts, one per job and kind."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from job_pal.models.generation import CoverLetterResult, GenerationKind, ResumeResult


class _ArtifactBase(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    job_id: str
    job_title: str = ""
    company: str = ""
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)
    document_path: str | None = None  # filename under the generated/ directory

    @property
    def body(self) -> str:
        return self.result.body


class ResumeArtifact(_ArtifactBase):
    kind: GenerationKind = GenerationKind.RESUME
    result: ResumeResult = Field(default_factory=ResumeResult)


class CoverLetterArtifact(_ArtifactBase):
    kind: GenerationKind = GenerationKind.COVER_LETTER
    result: CoverLetterResult = Field(default_factory=CoverLetterResult)


Artifact = ResumeArtifact | CoverLetterArtifact

ARTIFACT_TYPES: dict[GenerationKind, type[ResumeArtifact] | type[CoverLetterArtifact]] = {
    GenerationKind.RESUME: ResumeArtifact,
    GenerationKind.COVER_LETTER: CoverLetterArtifact,
}
