"""Shared test fixtures."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import AsyncMock

import pytest
from docx import Document

from job_pal.clients.llm_client import LLMClient, LLMResponse
from job_pal.models.generation import CoverLetterResult, ResumeResult
from job_pal.models.records import Job, Profile, WritingSample
from job_pal.storage.records import JobStore, ProfileStore, WritingSampleStore
from job_pal.utils.json_parser import extract_json_result


@pytest.fixture
def data_dir(tmp_path) -> Path:
    return tmp_path / "data"


@pytest.fixture
def sample_job() -> Job:
    return Job(
        id="job-1",
        title="Senior Product Designer",
        company="Acme Corp",
        description="Lead design for our analytics platform.",
        requirements=["Figma", "Design systems", "Team leadership"],
    )


@pytest.fixture
def sample_profile() -> Profile:
    return Profile(
        name="Jordan Lee",
        email="jordan@example.com",
        phone="555-0100",
        location="Portland, OR",
        title="Product Designer",
        skills=["Figma", "Sketch", "User research"],
        links={"portfolio": "https://jordan.design", "linkedin": "https://linkedin.com/in/jordan"},
    )


@pytest.fixture
def seeded_stores(data_dir, sample_job, sample_profile):
    """Job, profile and sample stores with one job and a profile on disk."""
    jobs = JobStore(data_dir)
    jobs.save(sample_job)
    profiles = ProfileStore(data_dir)
    profiles.save(sample_profile)
    samples = WritingSampleStore(data_dir)
    samples.add(WritingSample(title="Design blog", type="blog post", content="I like clean grids."))
    return jobs, profiles, samples


@pytest.fixture
def sample_resume_payload() -> dict:
    return {
        "resume": "JORDAN LEE\nProduct Designer\n...",
        "summary": "Designer with 8 years building data-heavy products.",
        "skills": {
            "management": ["Team leadership", "Roadmapping"],
            "design": ["Interaction design", "Prototyping", "Design systems"],
            "tools": ["Figma", "Sketch"],
        },
        "experiences": [
            {
                "title": "Lead Designer",
                "company": "Globex",
                "location": "Portland, OR",
                "dates": "2020 – Present",
                "bullets": ["Led a team of 5", "Shipped a design system"],
            },
            {
                "title": "Product Designer",
                "company": "Initech",
                "location": "Remote",
                "dates": "2016 – 2020",
                "bullets": ["Redesigned onboarding", "Cut churn 12%", "Ran user research"],
            },
        ],
        "changes": ["Reordered experience"],
        "highlights": ["Leadership"],
        "atsKeywords": ["Figma", "design systems"],
    }


@pytest.fixture
def sample_resume_result(sample_resume_payload) -> ResumeResult:
    return ResumeResult.model_validate(sample_resume_payload)


@pytest.fixture
def sample_cover_letter_result() -> CoverLetterResult:
    return CoverLetterResult(
        cover_letter="Dear Acme team,\n\nI build tools people enjoy...",
        tone_notes="Warm and direct",
        key_points=["Design systems", "Leadership"],
    )


@pytest.fixture
def mock_llm_client() -> LLMClient:
    """Create a mock LLM client."""
    client = AsyncMock(spec=LLMClient)
    client.generate = AsyncMock(
        return_value=LLMResponse(text="{}", input_tokens=100, output_tokens=50)
    )
    client.generate_json = AsyncMock(return_value=extract_json_result("{}"))
    client.converse_json = AsyncMock(return_value=extract_json_result("{}"))
    return client


def _fenced(data: dict) -> str:
    return f"Here you go:\n```json\n{json.dumps(data)}\n```\n"


@pytest.fixture
def model_reply():
    """Return the ExtractionResult the client produces for a reply.

    Dicts are wrapped in a fenced block the way the model often answers;
    strings are passed through verbatim.
    """

    def _reply(data: dict | str):
        return extract_json_result(data if isinstance(data, str) else _fenced(data))

    return _reply


@pytest.fixture
def make_docx(tmp_path):
    """Create a simple .docx with one paragraph per given text."""

    def _make(texts: list[str], name: str = "template.docx") -> Path:
        path = tmp_path / name
        doc = Document()
        for text in texts:
            doc.add_paragraph(text)
        doc.save(str(path))
        return path

    return _make
