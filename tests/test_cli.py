"""Tests for the typer CLI with the service wired to a mocked LLM."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from job_pal.cli import app
from job_pal.config import AppConfig, StorageConfig
from job_pal.pipeline.orchestrator import JobPalService

runner = CliRunner()


@pytest.fixture
def service(mock_llm_client, seeded_stores, data_dir):
    service = JobPalService(mock_llm_client, AppConfig(storage=StorageConfig(data_dir=str(data_dir))))
    with patch("job_pal.cli._service", return_value=service):
        yield service


def test_resume_prints_body(service, mock_llm_client, model_reply, sample_resume_payload):
    mock_llm_client.generate_json.return_value = model_reply(sample_resume_payload)

    result = runner.invoke(app, ["resume", "job-1"])

    assert result.exit_code == 0
    assert "JORDAN LEE" in result.output
    assert "No document template active" in result.output


def test_extraction_failure_shows_raw_output(service, mock_llm_client, model_reply):
    mock_llm_client.generate_json.return_value = model_reply("model went off script")

    result = runner.invoke(app, ["cover-letter", "job-1"])

    assert result.exit_code == 1
    assert "model went off script" in result.output


def test_unknown_job_exits_with_error(service):
    result = runner.invoke(app, ["match", "missing"])
    assert result.exit_code == 1
    assert "Job not found: missing" in result.output


def test_template_upload_and_list(service, make_docx):
    template = make_docx(["{{name}}", "{{summary}}"])

    result = runner.invoke(app, ["template", "upload", "resume", str(template)])
    assert result.exit_code == 0
    assert "name, summary" in result.output

    result = runner.invoke(app, ["template", "list"])
    assert result.exit_code == 0
    assert "resume" in result.output


def test_interview_start(service, mock_llm_client, model_reply):
    mock_llm_client.generate_json.return_value = model_reply(
        {"question": "What drew you to Acme?", "questionType": "behavioral"}
    )

    result = runner.invoke(app, ["interview", "start", "job-1"])

    assert result.exit_code == 0
    assert "What drew you to Acme?" in result.output
    assert len(service.list_interviews("job-1")) == 1
