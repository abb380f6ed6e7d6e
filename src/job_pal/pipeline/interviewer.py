"""Mock interview state machine: start -> respond* -> end.

A session is InProgress while ``completed_at`` is None and Completed
(terminal) afterwards. Every transition reloads the session, makes one model
call and persists the whole session only after the reply has been parsed,
so a failed call leaves the stored session exactly as it was.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from pydantic import BaseModel, ValidationError

from job_pal.clients.llm_client import LLMClient
from job_pal.config import InterviewConfig
from job_pal.exceptions import (
    ExtractionFailed,
    ReferenceNotFound,
    SessionAlreadyComplete,
    ValidationFailed,
)
from job_pal.models.interview import (
    CANDIDATE,
    INTERVIEWER,
    InterviewAssessment,
    InterviewerTurn,
    InterviewMessage,
    InterviewSession,
)
from job_pal.models.records import Job, Profile
from job_pal.storage.records import JobStore, ProfileStore
from job_pal.storage.session_store import SessionStore
from job_pal.utils.json_parser import ExtractionResult

logger = logging.getLogger(__name__)

TURN_FORMAT = """\
Return ONLY valid JSON with no markdown fencing:
{{
{feedback_line}  "question": "your {which} interview question",
  "questionType": "behavioral, technical, or situational",
  "tip": "a brief tip for answering this type of question"
}}"""

START_SYSTEM_PROMPT = """\
You are a professional interviewer conducting a mock interview for a specific job position. Your role is to help the candidate practice and improve.

INSTRUCTIONS:
- You are interviewing a candidate for the role of "{title}" at {company}.
- Ask ONE question at a time.
- Start with a warm introduction and your first question.
- Mix behavioral, technical, and situational questions based on the job description.
- Base questions on the job requirements and current industry trends.
- Keep a professional but encouraging tone.
- This is your opening question, so make it a good icebreaker.

"""

RESPOND_SYSTEM_PROMPT = """\
You are a professional interviewer conducting a mock interview for "{title}" at {company}.

INSTRUCTIONS:
- The candidate just answered your question. Give brief, constructive feedback on the answer.
- Then ask your next interview question.
- Mix behavioral, technical, and situational questions.
- You have asked {count} question(s) so far. Plan for {target_min}-{target_max} questions in total.
- Be encouraging but honest.

"""

END_SYSTEM_PROMPT = """\
You are a professional interviewer who just finished a mock interview for "{title}" at {company}.

Assess the candidate's performance across all questions. Take the feedback you gave after each answer into account.

Return ONLY valid JSON with no markdown fencing:
{{
  "overallScore": 1-10,
  "summary": "2-3 sentence overall assessment",
  "strengths": ["2-4 specific strengths demonstrated"],
  "improvements": ["2-4 specific areas for improvement"],
  "tips": ["2-3 actionable tips for the actual interview"]
}}"""

END_REQUEST = "The interview is over. Please give your final assessment now."


def _job_labels(job: Job | None) -> dict[str, str]:
    return {
        "title": (job.title if job else "") or "this position",
        "company": (job.company if job else "") or "the company",
    }


def opening_context(job: Job | None, profile: Profile) -> str:
    job_json = job.model_dump_json(indent=2, exclude_none=True) if job else "{}"
    return f"""## Job Description
{job_json}

## Candidate Profile
{profile.model_dump_json(indent=2)}"""


def build_turn_history(messages: list[InterviewMessage]) -> list[dict]:
    """Replay a session for the model, tagging each question with its type."""
    history = []
    for m in messages:
        if m.role == INTERVIEWER:
            content = f"[Question - {m.question_type or 'general'}]: {m.content}"
            history.append({"role": "assistant", "content": content})
        else:
            history.append({"role": "user", "content": m.content})
    return history


def build_transcript(messages: list[InterviewMessage]) -> list[dict]:
    """Replay a session for assessment, folding per-turn feedback into each question."""
    history = []
    for m in messages:
        if m.role == INTERVIEWER:
            if m.feedback:
                content = f"[Feedback]: {m.feedback}\n[Question]: {m.content}"
            else:
                content = m.content
            history.append({"role": "assistant", "content": content})
        else:
            history.append({"role": "user", "content": m.content})
    return history


def _parse(extraction: ExtractionResult, model: type[BaseModel], context: str):
    if not extraction.ok:
        logger.warning("Could not parse %s: %s", context, extraction.reason)
        raise ExtractionFailed(extraction.raw_text, extraction.reason, context=context)
    try:
        return model.model_validate(extraction.data)
    except ValidationError as e:
        raise ExtractionFailed(
            extraction.raw_text, f"unexpected structure: {e.error_count()} error(s)", context=context
        ) from e


class MockInterviewer:
    """Drives interview sessions and persists them through ``SessionStore``."""

    def __init__(
        self,
        llm: LLMClient,
        jobs: JobStore,
        profiles: ProfileStore,
        sessions: SessionStore,
        config: InterviewConfig | None = None,
        *,
        model: str | None = None,
        max_tokens: int = 2048,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.llm = llm
        self.jobs = jobs
        self.profiles = profiles
        self.sessions = sessions
        self.config = config or InterviewConfig()
        self.model = model
        self.max_tokens = max_tokens
        self.clock = clock

    def _find_job(self, job_id: str) -> Job | None:
        # A job deleted mid-interview should not strand its session.
        try:
            return self.jobs.get(job_id)
        except ReferenceNotFound:
            logger.warning("Job %s no longer exists; continuing interview without it", job_id)
            return None

    def list_sessions(self, job_id: str) -> list[InterviewSession]:
        return self.sessions.list_for_job(job_id)

    async def start(self, job_id: str) -> InterviewSession:
        """Open a new session with the interviewer's first question."""
        job = self.jobs.get(job_id)
        profile = self.profiles.get()

        system = START_SYSTEM_PROMPT.format(**_job_labels(job)) + TURN_FORMAT.format(
            feedback_line="", which="opening"
        )
        extraction = await self.llm.generate_json(
            prompt=opening_context(job, profile),
            system=system,
            model=self.model,
            max_tokens=self.max_tokens,
        )
        turn: InterviewerTurn = _parse(extraction, InterviewerTurn, "interviewer response")

        session = InterviewSession(
            job_id=job_id,
            messages=[
                InterviewMessage(
                    role=INTERVIEWER,
                    content=turn.question,
                    question_type=turn.question_type,
                    tip=turn.tip,
                )
            ],
            question_count=1,
            created_at=self.clock(),
        )
        self.sessions.save(session)
        logger.info("Started interview %s for job %s", session.id, job_id)
        return session

    async def respond(
        self, session_id: str, answer: str, job_id: str | None = None
    ) -> InterviewSession:
        """Record the candidate's answer and append feedback plus the next question."""
        if not answer or not answer.strip():
            raise ValidationFailed("Answer is required")

        session = self.sessions.get(session_id, job_id)
        if session.is_complete:
            raise SessionAlreadyComplete(session.id)

        job = self._find_job(session.job_id)
        profile = self.profiles.get()

        history = [{"role": "user", "content": opening_context(job, profile)}]
        history += build_turn_history(session.messages)
        history.append({"role": "user", "content": answer})

        system = RESPOND_SYSTEM_PROMPT.format(
            count=session.question_count,
            target_min=self.config.target_min_questions,
            target_max=self.config.target_max_questions,
            **_job_labels(job),
        ) + TURN_FORMAT.format(
            feedback_line='  "feedback": "brief feedback on the candidate\'s answer (2-3 sentences)",\n',
            which="next",
        )
        extraction = await self.llm.converse_json(
            messages=history,
            system=system,
            model=self.model,
            max_tokens=self.max_tokens,
        )
        turn: InterviewerTurn = _parse(extraction, InterviewerTurn, "interviewer response")

        session.messages.append(InterviewMessage(role=CANDIDATE, content=answer))
        session.messages.append(
            InterviewMessage(
                role=INTERVIEWER,
                content=turn.question,
                question_type=turn.question_type,
                tip=turn.tip,
                feedback=turn.feedback,
            )
        )
        session.question_count += 1
        self.sessions.save(session)
        logger.info("Interview %s: question %d issued", session.id, session.question_count)
        return session

    async def end(self, session_id: str, job_id: str | None = None) -> InterviewSession:
        """Request the holistic assessment and move the session to Completed."""
        session = self.sessions.get(session_id, job_id)
        if session.is_complete:
            raise SessionAlreadyComplete(session.id)

        job = self._find_job(session.job_id)
        profile = self.profiles.get()

        transcript = [{"role": "user", "content": opening_context(job, profile)}]
        transcript += build_transcript(session.messages)
        transcript.append({"role": "user", "content": END_REQUEST})

        extraction = await self.llm.converse_json(
            messages=transcript,
            system=END_SYSTEM_PROMPT.format(**_job_labels(job)),
            model=self.model,
            max_tokens=self.max_tokens,
        )
        assessment: InterviewAssessment = _parse(extraction, InterviewAssessment, "assessment")

        session.feedback = assessment
        session.completed_at = self.clock()
        self.sessions.save(session)
        logger.info(
            "Interview %s completed with score %d", session.id, assessment.overall_score
        )
        return session
