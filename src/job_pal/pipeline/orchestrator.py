"""Service facade: wires stores, renderer and agents behind one object."""

from __future__ import annotations

import re
from pathlib import Path

from job_pal.clients.llm_client import LLMClient
from job_pal.config import AppConfig
from job_pal.exceptions import ReferenceNotFound
from job_pal.models.artifact import Artifact
from job_pal.models.generation import GenerationKind
from job_pal.models.interview import InterviewSession
from job_pal.models.match import MatchAnalysis
from job_pal.models.records import TemplateEntry
from job_pal.pipeline.document_writer import DocumentWriter
from job_pal.pipeline.interviewer import MockInterviewer
from job_pal.pipeline.match_analyst import MatchAnalyst
from job_pal.storage.artifact_store import ArtifactStore
from job_pal.storage.records import JobStore, ProfileStore, WritingSampleStore
from job_pal.storage.session_store import SessionStore
from job_pal.storage.template_registry import TemplateRegistry
from job_pal.templates.docx_renderer import DocxRenderer


class JobPalService:
    """Entry point for every caller-facing operation of the pipeline."""

    def __init__(self, llm: LLMClient, config: AppConfig | None = None):
        config = config or AppConfig()
        data_dir = config.storage.resolved_data_dir

        self.config = config
        self.jobs = JobStore(data_dir)
        self.profiles = ProfileStore(data_dir)
        self.samples = WritingSampleStore(data_dir)
        self.artifacts = ArtifactStore(data_dir)
        self.sessions = SessionStore(data_dir)
        self.templates = TemplateRegistry(data_dir)
        self.generated_dir = data_dir / "generated"
        self.renderer = DocxRenderer(self.templates, self.generated_dir)

        self.writer = DocumentWriter(
            llm,
            self.jobs,
            self.profiles,
            self.samples,
            self.artifacts,
            self.renderer,
            model=config.llm.model,
            max_tokens=config.llm.max_tokens,
        )
        self.interviewer = MockInterviewer(
            llm,
            self.jobs,
            self.profiles,
            self.sessions,
            config.interview,
            model=config.llm.model,
            max_tokens=config.llm.interview_max_tokens,
        )
        self.match_analyst = MatchAnalyst(llm, self.jobs, self.profiles, model=config.llm.model)

    # --- generation ---

    async def generate_resume(self, job_id: str) -> Artifact:
        return await self.writer.write(job_id, GenerationKind.RESUME)

    async def generate_cover_letter(self, job_id: str) -> Artifact:
        return await self.writer.write(job_id, GenerationKind.COVER_LETTER)

    def get_artifact(self, job_id: str, kind: GenerationKind) -> Artifact:
        artifact = self.artifacts.get_for_job(job_id, kind)
        if artifact is None:
            raise ReferenceNotFound(kind.value, job_id, f"No {kind.value} found for job {job_id}")
        return artifact

    def download(self, artifact_id: str) -> tuple[Path, str]:
        """Return the generated document's path and a suggested download name."""
        artifact = self.artifacts.get(artifact_id)
        if not artifact.document_path:
            raise ReferenceNotFound("document", artifact_id, "No generated document found")
        path = self.generated_dir / artifact.document_path
        if not path.exists():
            raise ReferenceNotFound("document", artifact_id, "Document file not found on disk")
        company = re.sub(r"[^a-zA-Z0-9]", "-", artifact.company or "document")
        return path, f"{artifact.kind.value}-{company}.docx"

    # --- templates ---

    def upload_template(self, kind: GenerationKind, source_path: str | Path) -> TemplateEntry:
        return self.templates.register(kind, source_path)

    def list_templates(self) -> list[TemplateEntry]:
        return self.templates.list_templates()

    # --- interview ---

    async def start_interview(self, job_id: str) -> InterviewSession:
        return await self.interviewer.start(job_id)

    async def respond(self, job_id: str, session_id: str, answer: str) -> InterviewSession:
        return await self.interviewer.respond(session_id, answer, job_id=job_id)

    async def end_interview(self, job_id: str, session_id: str) -> InterviewSession:
        return await self.interviewer.end(session_id, job_id=job_id)

    def list_interviews(self, job_id: str) -> list[InterviewSession]:
        return self.interviewer.list_sessions(job_id)

    # --- match ---

    async def analyze_match(self, job_id: str) -> MatchAnalysis:
        return await self.match_analyst.analyze(job_id)
