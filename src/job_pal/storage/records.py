"""Read access to the job, profile and writing-sample collections.

These records are owned and edited elsewhere; the pipeline only looks them
up, plus writing a job's match score back.
"""

from __future__ import annotations

from pathlib import Path

from job_pal.exceptions import ReferenceNotFound
from job_pal.models.records import Job, Profile, WritingSample
from job_pal.storage.json_store import DEFAULT_DATA_DIR, JsonFile


class JobStore:
    def __init__(self, data_dir: str | Path = DEFAULT_DATA_DIR):
        self._file = JsonFile(Path(data_dir) / "jobs.json", [])

    def list_jobs(self) -> list[Job]:
        return [Job(**row) for row in self._file.load()]

    def get(self, job_id: str) -> Job:
        for job in self.list_jobs():
            if job.id == job_id:
                return job
        raise ReferenceNotFound("job", job_id)

    def save(self, job: Job) -> Job:
        """Insert or replace the record with ``job.id``."""
        rows = self._file.load()
        data = job.model_dump(mode="json", exclude_none=True)
        for i, row in enumerate(rows):
            if row.get("id") == job.id:
                rows[i] = {**row, **data}
                break
        else:
            rows.append(data)
        self._file.save(rows)
        return job


class ProfileStore:
    def __init__(self, data_dir: str | Path = DEFAULT_DATA_DIR):
        self._file = JsonFile(Path(data_dir) / "profile.json", {})

    def get(self) -> Profile:
        return Profile(**self._file.load())

    def save(self, profile: Profile) -> None:
        self._file.save(profile.model_dump(mode="json"))


class WritingSampleStore:
    def __init__(self, data_dir: str | Path = DEFAULT_DATA_DIR):
        self._file = JsonFile(Path(data_dir) / "writing-samples.json", [])

    def list_samples(self) -> list[WritingSample]:
        return [WritingSample(**row) for row in self._file.load()]

    def add(self, sample: WritingSample) -> WritingSample:
        rows = self._file.load()
        rows.append(sample.model_dump(mode="json"))
        self._file.save(rows)
        return sample
