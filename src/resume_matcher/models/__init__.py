"""Data models for the resume matcher."""

from resume_matcher.models.improvement import (
    DEFAULT_SECTIONS,
    SectionId,
    SectionImprovement,
    available_sections,
)
from resume_matcher.models.match import (
    ImprovementSuggestion,
    MatchResult,
    RelevantExperience,
)
from resume_matcher.models.resume import (
    PROFICIENCY_LEVELS,
    Award,
    Education,
    Experience,
    Language,
    PersonalInfo,
    ResumeData,
    ResumeLink,
    ResumeStyle,
    Skill,
)

__all__ = [
    "DEFAULT_SECTIONS",
    "PROFICIENCY_LEVELS",
    "Award",
    "Education",
    "Experience",
    "ImprovementSuggestion",
    "Language",
    "MatchResult",
    "PersonalInfo",
    "RelevantExperience",
    "ResumeData",
    "ResumeLink",
    "ResumeStyle",
    "SectionId",
    "SectionImprovement",
    "Skill",
    "available_sections",
]
