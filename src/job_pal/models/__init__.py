"""Data models for the generation and interview pipeline."""

from job_pal.models.artifact import Artifact, CoverLetterArtifact, ResumeArtifact
from job_pal.models.generation import (
    CoverLetterResult,
    ExperienceEntry,
    GenerationKind,
    GenerationRequest,
    GenerationResult,
    ResumeResult,
    SkillGroups,
)
from job_pal.models.interview import (
    InterviewAssessment,
    InterviewMessage,
    InterviewSession,
    InterviewerTurn,
)
from job_pal.models.match import MatchAnalysis, RelevantExperience
from job_pal.models.records import Job, Profile, TemplateEntry, WritingSample

__all__ = [
    "Artifact",
    "CoverLetterArtifact",
    "CoverLetterResult",
    "ExperienceEntry",
    "GenerationKind",
    "GenerationRequest",
    "GenerationResult",
    "InterviewAssessment",
    "InterviewMessage",
    "InterviewSession",
    "InterviewerTurn",
    "Job",
    "MatchAnalysis",
    "Profile",
    "RelevantExperience",
    "ResumeArtifact",
    "ResumeResult",
    "SkillGroups",
    "TemplateEntry",
    "WritingSample",
]
