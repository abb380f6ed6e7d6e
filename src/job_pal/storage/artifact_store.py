"""Per-job artifact storage: one resume and one cover letter per job id."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from job_pal.exceptions import ReferenceNotFound
from job_pal.models.artifact import ARTIFACT_TYPES, Artifact
from job_pal.models.generation import GenerationKind, GenerationResult
from job_pal.models.records import Job
from job_pal.storage.json_store import DEFAULT_DATA_DIR, JsonFile

logger = logging.getLogger(__name__)

COLLECTION_FILES: dict[GenerationKind, str] = {
    GenerationKind.RESUME: "resumes.json",
    GenerationKind.COVER_LETTER: "cover-letters.json",
}


class ArtifactStore:
    """JSON-file backed artifact store keyed naturally by ``(job_id, kind)``."""

    def __init__(
        self,
        data_dir: str | Path = DEFAULT_DATA_DIR,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.data_dir = Path(data_dir)
        self.clock = clock
        self._files = {
            kind: JsonFile(self.data_dir / filename, [])
            for kind, filename in COLLECTION_FILES.items()
        }

    def _load(self, kind: GenerationKind) -> list[Artifact]:
        model = ARTIFACT_TYPES[kind]
        return [model(**row) for row in self._files[kind].load()]

    def _save(self, kind: GenerationKind, artifacts: list[Artifact]) -> None:
        self._files[kind].save([a.model_dump(mode="json") for a in artifacts])

    def list_artifacts(self, kind: GenerationKind) -> list[Artifact]:
        return self._load(kind)

    def get_for_job(self, job_id: str, kind: GenerationKind) -> Artifact | None:
        for artifact in self._load(kind):
            if artifact.job_id == job_id:
                return artifact
        return None

    def get(self, artifact_id: str) -> Artifact:
        """Find an artifact of any kind by id."""
        for kind in COLLECTION_FILES:
            for artifact in self._load(kind):
                if artifact.id == artifact_id:
                    return artifact
        raise ReferenceNotFound("artifact", artifact_id)

    def upsert(
        self,
        job: Job,
        kind: GenerationKind,
        result: GenerationResult,
        document_path: str | None = None,
    ) -> Artifact:
        """Create the artifact for ``(job.id, kind)`` or replace its content in place.

        On replacement the id and created_at survive; content, document_path
        and updated_at are overwritten.
        """
        artifacts = self._load(kind)
        now = self.clock()
        model = ARTIFACT_TYPES[kind]
        fields = {
            "job_id": job.id,
            "job_title": job.title,
            "company": job.company,
            "result": result,
            "document_path": document_path,
            "updated_at": now,
        }

        for i, existing in enumerate(artifacts):
            if existing.job_id == job.id:
                entry = model(id=existing.id, created_at=existing.created_at, **fields)
                artifacts[i] = entry
                logger.info("Replaced %s %s for job %s", kind.value, entry.id, job.id)
                break
        else:
            entry = model(created_at=now, **fields)
            artifacts.append(entry)
            logger.info("Created %s %s for job %s", kind.value, entry.id, job.id)

        self._save(kind, artifacts)
        return entry
