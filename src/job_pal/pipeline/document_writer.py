"""Resume / cover letter writer: prompt, extract, map, render, persist."""

from __future__ import annotations

import logging

from pydantic import ValidationError

from job_pal.clients.llm_client import LLMClient
from job_pal.exceptions import ExtractionFailed
from job_pal.models.artifact import Artifact
from job_pal.models.generation import RESULT_TYPES, GenerationKind, GenerationResult
from job_pal.models.records import Job, Profile, WritingSample
from job_pal.storage.artifact_store import ArtifactStore
from job_pal.storage.records import JobStore, ProfileStore, WritingSampleStore
from job_pal.templates.docx_renderer import DocxRenderer
from job_pal.templates.field_mapper import map_to_slots

logger = logging.getLogger(__name__)

RESUME_SYSTEM_PROMPT = """\
You are an expert resume writer and ATS optimization specialist.
Given a candidate's profile, a target job listing, and writing samples for voice reference, create a tailored resume.

Your goals:
1. Select ONLY the work experience most relevant to this job (2-4 roles).
2. Reword descriptions to naturally incorporate keywords from the job listing.
3. Optimize wording for ATS (Applicant Tracking System) scanning.
4. Stay true to the candidate's real voice; use the writing samples as a style guide.
5. Keep it concise: a strong 1-2 page resume.
6. List ONLY skills the candidate actually has that match the job description.

Return ONLY valid JSON with no markdown fencing:
{
  "resume": "the full formatted resume text (use newlines for formatting)",
  "summary": "2-3 sentence professional summary tailored to the job",
  "skills": {
    "management": ["up to 6 management/leadership skills matching the job"],
    "design": ["up to 6 design/creative skills matching the job"],
    "tools": ["up to 6 tools/software skills matching the job"]
  },
  "experiences": [
    {
      "title": "job title exactly as it should appear",
      "company": "company name",
      "location": "City, State",
      "dates": "Start Year – End Year or Present",
      "bullets": ["2-4 achievement bullets tailored to the job, starting with action verbs"]
    }
  ],
  "changes": ["each tailoring change you made"],
  "highlights": ["key strengths emphasized for this role"],
  "atsKeywords": ["keywords from the job listing that were incorporated"]
}

For the structured fields:
- Include 2-4 experiences, ordered by relevance to the job.
- Give each experience 2-4 bullets.
- Use at most 6 skills per category.
- "resume" must still contain the complete text version."""

COVER_LETTER_SYSTEM_PROMPT = """\
You are an expert cover letter writer.
Given a candidate's profile, a target job, and their writing samples, write a compelling cover letter.

Guidelines:
1. Study the writing samples to capture the candidate's authentic voice and tone.
2. Highlight the experience and skills most relevant to THIS job.
3. Be professional but genuine; avoid generic corporate phrasing.
4. Show specific knowledge of the company and role.
5. Keep it to 3-4 strong paragraphs.
6. Do not open with "I am writing to apply for...".

Return ONLY valid JSON with no markdown fencing:
{
  "coverLetter": "the full cover letter text",
  "toneNotes": "brief description of the voice used and how it matches the candidate's style",
  "keyPoints": ["main selling points highlighted in the letter"]
}"""

SYSTEM_PROMPTS: dict[GenerationKind, str] = {
    GenerationKind.RESUME: RESUME_SYSTEM_PROMPT,
    GenerationKind.COVER_LETTER: COVER_LETTER_SYSTEM_PROMPT,
}

NO_SAMPLES: dict[GenerationKind, str] = {
    GenerationKind.RESUME: "No writing samples provided.",
    GenerationKind.COVER_LETTER: (
        "No writing samples provided. Use a warm, professional, and authentic tone."
    ),
}

LABELS: dict[GenerationKind, str] = {
    GenerationKind.RESUME: "tailored resume",
    GenerationKind.COVER_LETTER: "cover letter",
}


def format_samples(samples: list[WritingSample], fallback: str) -> str:
    if not samples:
        return fallback
    return "\n\n".join(f"### {s.title} ({s.type})\n{s.content}" for s in samples)


def build_prompt(
    profile: Profile,
    job: Job,
    samples: list[WritingSample],
    kind: GenerationKind,
) -> str:
    return f"""## Candidate Profile
{profile.model_dump_json(indent=2)}

## Target Job
{job.model_dump_json(indent=2, exclude_none=True)}

## Writing Samples (for voice/tone reference)
{format_samples(samples, NO_SAMPLES[kind])}"""


class DocumentWriter:
    """Generates the per-job resume or cover letter and its optional .docx."""

    def __init__(
        self,
        llm: LLMClient,
        jobs: JobStore,
        profiles: ProfileStore,
        samples: WritingSampleStore,
        artifacts: ArtifactStore,
        renderer: DocxRenderer,
        *,
        model: str | None = None,
        max_tokens: int = 4096,
    ):
        self.llm = llm
        self.jobs = jobs
        self.profiles = profiles
        self.samples = samples
        self.artifacts = artifacts
        self.renderer = renderer
        self.model = model
        self.max_tokens = max_tokens

    async def write(self, job_id: str, kind: GenerationKind) -> Artifact:
        """Generate (or regenerate) the artifact of ``kind`` for ``job_id``.

        Raises:
            ReferenceNotFound: unknown job; nothing is sent to the model.
            ModelUnavailable: the model call failed.
            ExtractionFailed: the response held no usable result; carries the raw text.
        """
        job = self.jobs.get(job_id)
        profile = self.profiles.get()
        samples = self.samples.list_samples()

        logger.info("Generating %s for job %s", LABELS[kind], job_id)
        extraction = await self.llm.generate_json(
            prompt=build_prompt(profile, job, samples, kind),
            system=SYSTEM_PROMPTS[kind],
            model=self.model,
            max_tokens=self.max_tokens,
        )
        if not extraction.ok:
            logger.warning("Could not parse %s: %s", LABELS[kind], extraction.reason)
            raise ExtractionFailed(extraction.raw_text, extraction.reason, context=LABELS[kind])

        result = self._to_result(kind, extraction.data, extraction.raw_text)

        slots = map_to_slots(profile, job, result)
        document = self.renderer.render(kind, slots)

        return self.artifacts.upsert(
            job,
            kind,
            result,
            document_path=document.name if document else None,
        )

    @staticmethod
    def _to_result(kind: GenerationKind, data: dict, raw_text: str) -> GenerationResult:
        try:
            return RESULT_TYPES[kind].model_validate(data)
        except ValidationError as e:
            raise ExtractionFailed(
                raw_text, f"unexpected structure: {e.error_count()} error(s)", context=LABELS[kind]
            ) from e
