"""Pydantic models for Match Analyzer output."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RelevantExperience(_CamelModel):
    has: list[str] = []
    missing: list[str] = []


class ImprovementSuggestion(_CamelModel):
    section: str
    current: str = ""
    improved: str = ""


class MatchResult(_CamelModel):
    overall_match: int = Field(ge=0, le=100)
    missing_skills: list[str] = []
    relevant_experience: RelevantExperience = Field(default_factory=RelevantExperience)
    improvement_suggestions: list[ImprovementSuggestion] = []

    @classmethod
    def error(cls, message: str) -> MatchResult:
        """Degraded result returned when analysis fails."""
        return cls(
            overall_match=0,
            missing_skills=[f"Error analyzing resume: {message}"],
            relevant_experience=RelevantExperience(missing=["Error analyzing experience"]),
            improvement_suggestions=[
                ImprovementSuggestion(
                    section="Error",
                    current="An error occurred during analysis",
                    improved=f"Please try again later. Error: {message}",
                )
            ],
        )

    def to_prompt_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)
