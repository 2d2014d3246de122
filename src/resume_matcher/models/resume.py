"""Pydantic models for the structured resume document."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

PROFICIENCY_LEVELS = ("Beginner", "Elementary", "Intermediate", "Advanced", "Fluent", "Native")


class _CamelModel(BaseModel):
    """Snake_case attributes, camelCase JSON keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @field_validator("*", mode="before")
    @classmethod
    def _null_to_default(cls, value, info: ValidationInfo):
        # Saved documents carry null for cleared form fields.
        if value is None:
            field = cls.model_fields[info.field_name]
            if not field.is_required():
                return field.get_default(call_default_factory=True)
        return value


class ResumeLink(_CamelModel):
    id: int
    name: str = ""
    url: str = ""


class PersonalInfo(_CamelModel):
    full_name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    summary: str = ""
    links: list[ResumeLink] = []


class Education(_CamelModel):
    id: int
    institution: str = ""
    degree: str = ""
    field_of_study: str = ""
    start_date: str = ""
    end_date: str = ""
    description: str = ""
    links: list[ResumeLink] = []


class Experience(_CamelModel):
    id: int
    company: str = ""
    position: str = ""
    start_date: str = ""
    end_date: str = ""
    description: str = ""
    links: list[ResumeLink] = []


class Skill(_CamelModel):
    id: int
    skill: str = ""


class Language(_CamelModel):
    id: int
    name: str = ""
    proficiency: str = "Beginner"  # one of PROFICIENCY_LEVELS, not enforced


class Award(_CamelModel):
    id: int
    title: str = ""
    issuer: str = ""
    date: str = ""
    description: str = ""
    links: list[ResumeLink] = []


class ResumeStyle(_CamelModel):
    font: str = "font-sans"
    layout: str = "classic"
    color_scheme: str = "default"


class ResumeData(_CamelModel):
    personal_info: PersonalInfo = Field(default_factory=PersonalInfo)
    education: list[Education] = []
    experience: list[Experience] = []
    skills: list[Skill] = []
    languages: list[Language] = []
    awards: list[Award] = []
    resume_style: ResumeStyle = Field(default_factory=ResumeStyle)

    def clone(self) -> ResumeData:
        """Return a deep copy that shares no mutable state with this document."""
        return self.model_copy(deep=True)

    def next_skill_id(self) -> int:
        return max((s.id for s in self.skills), default=0) + 1

    def find_experience(self, entry_id: int) -> Experience | None:
        return next((e for e in self.experience if e.id == entry_id), None)

    def find_education(self, entry_id: int) -> Education | None:
        return next((e for e in self.education if e.id == entry_id), None)

    def to_json(self, indent: int | None = 2) -> str:
        return self.model_dump_json(by_alias=True, indent=indent)


def load_resume(path: str | Path) -> ResumeData:
    """Load a resume document from a JSON file."""
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    return ResumeData.model_validate(raw or {})


def dump_resume(resume: ResumeData, path: str | Path) -> None:
    """Write a resume document as camelCase JSON."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(resume.to_json(), encoding="utf-8")
