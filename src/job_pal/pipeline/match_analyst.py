"""Match Analyst: scores how well the profile fits a job."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from pydantic import ValidationError

from job_pal.clients.llm_client import LLMClient
from job_pal.exceptions import ExtractionFailed
from job_pal.models.match import MatchAnalysis
from job_pal.storage.records import JobStore, ProfileStore

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """\
You are a career matching analyst. Compare a candidate's profile against a job listing and produce a detailed match analysis.
Return ONLY valid JSON with no markdown fencing.

JSON schema:
{
  "matchScore": number (0-100),
  "matchingSkills": ["skills the candidate has that match the job"],
  "missingSkills": ["skills the job requires that the candidate lacks"],
  "transferableSkills": ["skills the candidate has that could fill the gaps"],
  "relevantExperience": [
    {"role": "string", "company": "string", "relevance": "why this experience is relevant"}
  ],
  "recommendations": ["actionable suggestions for improving candidacy"],
  "summary": "2-3 sentence overall assessment"
}"""


class MatchAnalyst:
    def __init__(
        self,
        llm: LLMClient,
        jobs: JobStore,
        profiles: ProfileStore,
        *,
        model: str | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.llm = llm
        self.jobs = jobs
        self.profiles = profiles
        self.model = model
        self.clock = clock

    async def analyze(self, job_id: str) -> MatchAnalysis:
        """Analyze profile/job fit and store the score on the job record."""
        job = self.jobs.get(job_id)
        profile = self.profiles.get()

        prompt = f"""## Candidate Profile
{profile.model_dump_json(indent=2)}

## Job Listing
{job.model_dump_json(indent=2, exclude_none=True)}"""

        extraction = await self.llm.generate_json(
            prompt=prompt, system=SYSTEM_PROMPT, model=self.model
        )
        if not extraction.ok:
            raise ExtractionFailed(extraction.raw_text, extraction.reason, context="match analysis")
        try:
            analysis = MatchAnalysis.model_validate(extraction.data)
        except ValidationError as e:
            raise ExtractionFailed(
                extraction.raw_text, "unexpected structure", context="match analysis"
            ) from e

        if analysis.match_score is not None:
            job.match_score = analysis.match_score
            job.updated_at = self.clock()
            self.jobs.save(job)
            logger.info("Job %s match score: %d", job_id, analysis.match_score)
        return analysis
