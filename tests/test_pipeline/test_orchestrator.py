"""Tests for the JobPalService facade."""

from __future__ import annotations

import pytest

from job_pal.config import AppConfig, StorageConfig
from job_pal.exceptions import ReferenceNotFound
from job_pal.models.generation import GenerationKind
from job_pal.pipeline.orchestrator import JobPalService


@pytest.fixture
def service(mock_llm_client, seeded_stores, data_dir):
    config = AppConfig(storage=StorageConfig(data_dir=str(data_dir)))
    return JobPalService(mock_llm_client, config)


class TestGeneration:
    async def test_generate_and_fetch_resume(
        self, service, mock_llm_client, model_reply, sample_resume_payload
    ):
        mock_llm_client.generate_json.return_value = model_reply(sample_resume_payload)
        artifact = await service.generate_resume("job-1")

        assert service.get_artifact("job-1", GenerationKind.RESUME).id == artifact.id

    def test_get_missing_artifact(self, service):
        with pytest.raises(ReferenceNotFound, match="No cover-letter found for job job-1"):
            service.get_artifact("job-1", GenerationKind.COVER_LETTER)


class TestDownload:
    async def test_download_generated_document(
        self, service, mock_llm_client, model_reply, make_docx
    ):
        service.upload_template(GenerationKind.COVER_LETTER, make_docx(["{{cover_letter_content}}"]))
        mock_llm_client.generate_json.return_value = model_reply({"coverLetter": "Dear Acme team,"})

        artifact = await service.generate_cover_letter("job-1")
        path, name = service.download(artifact.id)

        assert path.exists()
        assert name == "cover-letter-Acme-Corp.docx"

    async def test_download_without_document(
        self, service, mock_llm_client, model_reply, sample_resume_payload
    ):
        mock_llm_client.generate_json.return_value = model_reply(sample_resume_payload)
        artifact = await service.generate_resume("job-1")

        with pytest.raises(ReferenceNotFound, match="No generated document"):
            service.download(artifact.id)

    def test_download_unknown_artifact(self, service):
        with pytest.raises(ReferenceNotFound):
            service.download("nope")


class TestTemplates:
    def test_upload_and_list(self, service, make_docx):
        entry = service.upload_template(GenerationKind.RESUME, make_docx(["{{name}}"]))
        assert [t.id for t in service.list_templates()] == [entry.id]


class TestInterview:
    async def test_interview_flow(self, service, mock_llm_client, model_reply):
        mock_llm_client.generate_json.return_value = model_reply({"question": "Why Acme?"})
        session = await service.start_interview("job-1")

        mock_llm_client.converse_json.return_value = model_reply(
            {"question": "Biggest challenge?", "feedback": "Good."}
        )
        session = await service.respond("job-1", session.id, "I love analytics.")
        assert session.question_count == 2

        mock_llm_client.converse_json.return_value = model_reply({"overallScore": 8})
        session = await service.end_interview("job-1", session.id)

        assert session.feedback.overall_score == 8
        assert [s.id for s in service.list_interviews("job-1")] == [session.id]


async def test_analyze_match(service, mock_llm_client, model_reply):
    mock_llm_client.generate_json.return_value = model_reply({"matchScore": 90})
    analysis = await service.analyze_match("job-1")
    assert analysis.match_score == 90
    assert service.jobs.get("job-1").match_score == 90
