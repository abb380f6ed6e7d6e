"""Pydantic models for profile-vs-job match analysis."""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, Field


class RelevantExperience(BaseModel):
    role: str = ""
    company: str = ""
    relevance: str = ""


class MatchAnalysis(BaseModel):
    # Canonical key is "matchScore"; plain "score" is a deprecated alias still
    # accepted on input because older prompts produced it.
    match_score: int | None = Field(
        default=None,
        validation_alias=AliasChoices("matchScore", "match_score", "score"),
        serialization_alias="matchScore",
    )
    matching_skills: list[str] = Field(
        default=[], validation_alias=AliasChoices("matchingSkills", "matching_skills")
    )
    missing_skills: list[str] = Field(
        default=[], validation_alias=AliasChoices("missingSkills", "missing_skills")
    )
    transferable_skills: list[str] = Field(
        default=[], validation_alias=AliasChoices("transferableSkills", "transferable_skills")
    )
    relevant_experience: list[RelevantExperience] = Field(
        default=[], validation_alias=AliasChoices("relevantExperience", "relevant_experience")
    )
    recommendations: list[str] = []
    summary: str = ""
