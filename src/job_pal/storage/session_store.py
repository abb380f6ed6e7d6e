"""JSON-file storage for mock interview sessions."""

from __future__ import annotations

from pathlib import Path

from job_pal.exceptions import ReferenceNotFound
from job_pal.models.interview import InterviewSession
from job_pal.storage.json_store import DEFAULT_DATA_DIR, JsonFile


class SessionStore:
    def __init__(self, data_dir: str | Path = DEFAULT_DATA_DIR):
        self._file = JsonFile(Path(data_dir) / "mock-interviews.json", [])

    def _load(self) -> list[InterviewSession]:
        return [InterviewSession(**row) for row in self._file.load()]

    def list_for_job(self, job_id: str) -> list[InterviewSession]:
        return [s for s in self._load() if s.job_id == job_id]

    def get(self, session_id: str, job_id: str | None = None) -> InterviewSession:
        """Look up a session; when ``job_id`` is given it must match too."""
        for session in self._load():
            if session.id == session_id and (job_id is None or session.job_id == job_id):
                return session
        raise ReferenceNotFound("interview session", session_id)

    def save(self, session: InterviewSession) -> InterviewSession:
        """Insert or replace the session with ``session.id``."""
        sessions = self._load()
        for i, existing in enumerate(sessions):
            if existing.id == session.id:
                sessions[i] = session
                break
        else:
            sessions.append(session)
        self._file.save([s.model_dump(mode="json") for s in sessions])
        return session
