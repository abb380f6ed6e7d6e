"""Tests for the mock interview state machine with a mocked LLM."""

from __future__ import annotations

from datetime import datetime

import pytest

from job_pal.config import InterviewConfig
from job_pal.exceptions import (
    ExtractionFailed,
    ReferenceNotFound,
    SessionAlreadyComplete,
    ValidationFailed,
)
from job_pal.models.interview import CANDIDATE, INTERVIEWER, InterviewMessage
from job_pal.pipeline.interviewer import (
    END_REQUEST,
    MockInterviewer,
    build_transcript,
    build_turn_history,
)
from job_pal.storage.session_store import SessionStore

FINISHED = datetime(2026, 10, 19, 15, 30)


def _turn(question: str, qtype: str = "behavioral", feedback: str | None = None) -> dict:
    data = {"question": question, "questionType": qtype, "tip": "Use STAR"}
    if feedback:
        data["feedback"] = feedback
    return data


@pytest.fixture
def sessions(data_dir):
    return SessionStore(data_dir)


@pytest.fixture
def interviewer(mock_llm_client, seeded_stores, sessions):
    jobs, profiles, _ = seeded_stores
    return MockInterviewer(
        mock_llm_client,
        jobs,
        profiles,
        sessions,
        InterviewConfig(target_min_questions=5, target_max_questions=7),
        clock=lambda: FINISHED,
    )


@pytest.fixture
async def started(interviewer, mock_llm_client, model_reply):
    mock_llm_client.generate_json.return_value = model_reply(_turn("Tell me about yourself."))
    return await interviewer.start("job-1")


class TestHistoryBuilders:
    def test_turn_history_tags_question_type(self):
        history = build_turn_history(
            [
                InterviewMessage(role=INTERVIEWER, content="Why design?", question_type="behavioral"),
                InterviewMessage(role=CANDIDATE, content="Because."),
                InterviewMessage(role=INTERVIEWER, content="Walk me through a project."),
            ]
        )
        assert history == [
            {"role": "assistant", "content": "[Question - behavioral]: Why design?"},
            {"role": "user", "content": "Because."},
            {"role": "assistant", "content": "[Question - general]: Walk me through a project."},
        ]

    def test_transcript_folds_feedback(self):
        transcript = build_transcript(
            [
                InterviewMessage(role=INTERVIEWER, content="Q1"),
                InterviewMessage(role=CANDIDATE, content="A1"),
                InterviewMessage(role=INTERVIEWER, content="Q2", feedback="Solid answer."),
            ]
        )
        assert transcript[0] == {"role": "assistant", "content": "Q1"}
        assert transcript[2]["content"] == "[Feedback]: Solid answer.\n[Question]: Q2"


class TestStart:
    async def test_start_creates_session(self, started, sessions):
        assert started.question_count == 1
        assert len(started.messages) == 1
        assert started.messages[0].role == INTERVIEWER
        assert started.messages[0].question_type == "behavioral"
        assert started.messages[0].tip == "Use STAR"
        assert not started.is_complete
        assert sessions.get(started.id).job_id == "job-1"

    async def test_start_prompt_names_the_role(self, started, mock_llm_client):
        kwargs = mock_llm_client.generate_json.call_args.kwargs
        assert '"Senior Product Designer" at Acme Corp' in kwargs["system"]
        assert "## Candidate Profile" in kwargs["prompt"]

    async def test_start_unknown_job(self, interviewer, mock_llm_client):
        with pytest.raises(ReferenceNotFound):
            await interviewer.start("missing")
        mock_llm_client.generate_json.assert_not_awaited()

    async def test_start_unparseable_reply_persists_nothing(
        self, interviewer, mock_llm_client, model_reply, sessions
    ):
        mock_llm_client.generate_json.return_value = model_reply("Let's begin!")
        with pytest.raises(ExtractionFailed) as exc_info:
            await interviewer.start("job-1")
        assert exc_info.value.raw_text == "Let's begin!"
        assert sessions.list_for_job("job-1") == []


class TestRespond:
    async def test_respond_appends_answer_and_next_question(
        self, interviewer, started, mock_llm_client, model_reply
    ):
        mock_llm_client.converse_json.return_value = model_reply(
            _turn("Describe a conflict.", "situational", feedback="Good structure.")
        )

        session = await interviewer.respond(started.id, "I lead design at Globex.")

        assert session.question_count == 2
        assert [m.role for m in session.messages] == [INTERVIEWER, CANDIDATE, INTERVIEWER]
        assert session.messages[1].content == "I lead design at Globex."
        assert session.messages[2].feedback == "Good structure."
        assert session.current_question.content == "Describe a conflict."

    async def test_respond_history_alternates_and_ends_with_answer(
        self, interviewer, started, mock_llm_client, model_reply
    ):
        mock_llm_client.converse_json.return_value = model_reply(_turn("Next?"))
        await interviewer.respond(started.id, "My answer")

        kwargs = mock_llm_client.converse_json.call_args.kwargs
        roles = [m["role"] for m in kwargs["messages"]]
        assert roles == ["user", "assistant", "user"]
        assert kwargs["messages"][1]["content"] == "[Question - behavioral]: Tell me about yourself."
        assert kwargs["messages"][-1]["content"] == "My answer"
        assert "asked 1 question(s)" in kwargs["system"]
        assert "5-7 questions" in kwargs["system"]

    @pytest.mark.parametrize("answer", ["", "   \n"])
    async def test_blank_answer_rejected_without_model_call(
        self, interviewer, started, mock_llm_client, answer
    ):
        with pytest.raises(ValidationFailed):
            await interviewer.respond(started.id, answer)
        mock_llm_client.converse_json.assert_not_awaited()

    async def test_unknown_session(self, interviewer, mock_llm_client):
        with pytest.raises(ReferenceNotFound):
            await interviewer.respond("nope", "answer")
        mock_llm_client.converse_json.assert_not_awaited()

    async def test_wrong_job_id(self, interviewer, started):
        with pytest.raises(ReferenceNotFound):
            await interviewer.respond(started.id, "answer", job_id="job-2")

    async def test_failed_reply_leaves_session_unchanged(
        self, interviewer, started, mock_llm_client, model_reply, sessions
    ):
        mock_llm_client.converse_json.return_value = model_reply("no json here")
        with pytest.raises(ExtractionFailed):
            await interviewer.respond(started.id, "My answer")

        stored = sessions.get(started.id)
        assert stored.question_count == 1
        assert len(stored.messages) == 1

    async def test_deleted_job_does_not_strand_session(
        self, interviewer, started, mock_llm_client, model_reply, data_dir
    ):
        (data_dir / "jobs.json").write_text("[]")
        mock_llm_client.converse_json.return_value = model_reply(_turn("Next?"))

        session = await interviewer.respond(started.id, "My answer")

        assert session.question_count == 2
        assert '"this position" at the company' in mock_llm_client.converse_json.call_args.kwargs["system"]


class TestEnd:
    async def test_full_interview(self, interviewer, started, mock_llm_client, model_reply, sessions):
        mock_llm_client.converse_json.return_value = model_reply(_turn("Q2", feedback="Fine."))
        await interviewer.respond(started.id, "A1")
        mock_llm_client.converse_json.return_value = model_reply(_turn("Q3", feedback="Better."))
        await interviewer.respond(started.id, "A2")

        mock_llm_client.converse_json.return_value = model_reply(
            {
                "overallScore": 7,
                "summary": "Clear communicator.",
                "strengths": ["Structure"],
                "improvements": ["Metrics"],
                "tips": ["Quantify impact"],
            }
        )
        session = await interviewer.end(started.id)

        assert session.question_count == 3
        assert len(session.messages) == 5
        assert session.is_complete
        assert session.completed_at == FINISHED
        assert 1 <= session.feedback.overall_score <= 10
        assert session.feedback.strengths == ["Structure"]
        assert sessions.get(started.id).is_complete

        messages = mock_llm_client.converse_json.call_args.kwargs["messages"]
        assert messages[0]["role"] == "user"
        assert messages[-1] == {"role": "user", "content": END_REQUEST}
        assert "[Feedback]: Better.\n[Question]: Q3" in [m["content"] for m in messages]

    async def test_score_out_of_range_is_clamped(
        self, interviewer, started, mock_llm_client, model_reply
    ):
        mock_llm_client.converse_json.return_value = model_reply({"overallScore": 14})
        session = await interviewer.end(started.id)
        assert session.feedback.overall_score == 10

    @pytest.mark.parametrize("score", [None, [8], float("inf")])
    async def test_unusable_score_leaves_session_open(
        self, interviewer, started, mock_llm_client, model_reply, sessions, score
    ):
        mock_llm_client.converse_json.return_value = model_reply(
            {"overallScore": score, "summary": "ok"}
        )

        with pytest.raises(ExtractionFailed):
            await interviewer.end(started.id)

        stored = sessions.get(started.id)
        assert not stored.is_complete
        assert stored.feedback is None

    async def test_respond_after_end_rejected(
        self, interviewer, started, mock_llm_client, model_reply, sessions
    ):
        mock_llm_client.converse_json.return_value = model_reply({"overallScore": 6})
        await interviewer.end(started.id)
        mock_llm_client.converse_json.reset_mock()

        with pytest.raises(SessionAlreadyComplete):
            await interviewer.respond(started.id, "One more thing")

        mock_llm_client.converse_json.assert_not_awaited()
        assert len(sessions.get(started.id).messages) == 1

    async def test_second_end_rejected(self, interviewer, started, mock_llm_client, model_reply, sessions):
        mock_llm_client.converse_json.return_value = model_reply({"overallScore": 6})
        first = await interviewer.end(started.id)

        with pytest.raises(SessionAlreadyComplete):
            await interviewer.end(started.id)
        assert sessions.get(started.id).feedback == first.feedback

    async def test_failed_assessment_keeps_session_open(
        self, interviewer, started, mock_llm_client, model_reply, sessions
    ):
        mock_llm_client.converse_json.return_value = model_reply({"summary": "no score"})
        with pytest.raises(ExtractionFailed):
            await interviewer.end(started.id)
        assert not sessions.get(started.id).is_complete


async def test_list_sessions(interviewer, started):
    assert [s.id for s in interviewer.list_sessions("job-1")] == [started.id]
    assert interviewer.list_sessions("job-2") == []
