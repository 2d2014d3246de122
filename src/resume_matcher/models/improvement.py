"""Section identifiers and per-section rewrite records."""

from __future__ import annotations

import re
from dataclasses import dataclass

from pydantic import BaseModel

from resume_matcher.models.resume import ResumeData

DEFAULT_SECTIONS: tuple[str, ...] = ("summary", "skills")

_ENTRY_PATTERN = re.compile(r"^(experience|education)-(\d+)$")


class SectionImprovement(BaseModel):
    section: str
    current: str
    improved: str

    @property
    def is_noop(self) -> bool:
        return not self.improved


@dataclass(frozen=True)
class SectionId:
    """A parsed section identifier: summary, skills, experience-<id> or education-<id>."""

    kind: str
    entry_id: int | None = None

    @classmethod
    def parse(cls, text: str) -> SectionId | None:
        if not isinstance(text, str):
            return None
        text = text.strip()
        if text in ("summary", "skills"):
            return cls(kind=text)
        m = _ENTRY_PATTERN.match(text)
        if m is None:
            return None
        return cls(kind=m.group(1), entry_id=int(m.group(2)))

    def __str__(self) -> str:
        if self.entry_id is None:
            return self.kind
        return f"{self.kind}-{self.entry_id}"

    def exists_in(self, resume: ResumeData) -> bool:
        if self.kind == "experience":
            return resume.find_experience(self.entry_id) is not None
        if self.kind == "education":
            return resume.find_education(self.entry_id) is not None
        return True


def available_sections(resume: ResumeData) -> list[tuple[str, str]]:
    """List (identifier, label) pairs for every rewritable unit in the resume."""
    sections = [
        ("summary", "The professional summary"),
        ("skills", "The skills section"),
    ]
    sections += [
        (f"experience-{e.id}", f"{e.position} at {e.company}") for e in resume.experience
    ]
    sections += [
        (f"education-{e.id}", f"{e.degree} from {e.institution}") for e in resume.education
    ]
    return sections
