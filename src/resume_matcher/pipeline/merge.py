"""Merge section rewrites back into a resume document."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from resume_matcher.models.improvement import SectionId, SectionImprovement
from resume_matcher.models.resume import ResumeData, Skill

logger = logging.getLogger(__name__)


@dataclass
class MergeReport:
    applied: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    added_skills: list[Skill] = field(default_factory=list)


def split_skills(text: str) -> list[str]:
    """Split a comma-separated skills answer into trimmed, non-empty tokens."""
    return [token.strip() for token in text.split(",") if token.strip()]


def merge_skills(resume: ResumeData, improved: str, next_id: int) -> tuple[list[Skill], int]:
    """Append skills from ``improved`` not already present (case-insensitive).

    Returns the appended skills and the next free id.
    """
    known = {s.skill.lower() for s in resume.skills}
    added: list[Skill] = []
    for token in split_skills(improved):
        if token.lower() in known:
            continue
        skill = Skill(id=next_id, skill=token)
        resume.skills.append(skill)
        added.append(skill)
        known.add(token.lower())
        next_id += 1
    return added, next_id


def apply_improvements(
    resume: ResumeData, improvements: Iterable[SectionImprovement]
) -> MergeReport:
    """Apply rewrites to ``resume`` in place.

    Each rule touches only its own section, so the outcome does not depend on
    the order of ``improvements``. No-op records, malformed identifiers and
    stale entry ids are skipped.
    """
    report = MergeReport()
    next_id = resume.next_skill_id()

    for improvement in improvements:
        if improvement.is_noop:
            report.skipped.append(improvement.section)
            continue
        section = SectionId.parse(improvement.section)
        if section is None:
            logger.debug("Skipping malformed section identifier %r", improvement.section)
            report.skipped.append(improvement.section)
            continue

        if section.kind == "summary":
            resume.personal_info.summary = improvement.improved
        elif section.kind == "skills":
            added, next_id = merge_skills(resume, improvement.improved, next_id)
            report.added_skills.extend(added)
        else:
            entry = (
                resume.find_experience(section.entry_id)
                if section.kind == "experience"
                else resume.find_education(section.entry_id)
            )
            if entry is None:
                logger.debug("Skipping stale section %s", section)
                report.skipped.append(improvement.section)
                continue
            entry.description = improvement.improved
        report.applied.append(improvement.section)

    return report
