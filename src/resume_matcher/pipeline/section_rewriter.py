"""Section Rewriter - produces improved text for one resume section."""

from __future__ import annotations

import asyncio
import logging

from resume_matcher.clients.llm_client import LLMClient
from resume_matcher.models.improvement import SectionId, SectionImprovement
from resume_matcher.models.match import MatchResult
from resume_matcher.models.resume import ResumeData
from resume_matcher.prompts import IMPROVE_SECTION, SKILLS_INSTRUCTION, PromptLibrary

logger = logging.getLogger(__name__)


def resolve_section(section: SectionId, resume: ResumeData) -> tuple[str, str]:
    """Return (label, current content) for a section; empty content if it does not resolve."""
    if section.kind == "summary":
        return "Professional Summary", resume.personal_info.summary
    if section.kind == "skills":
        return "Skills List", ", ".join(s.skill for s in resume.skills if s.skill)
    if section.kind == "experience":
        exp = resume.find_experience(section.entry_id)
        if exp is not None:
            return f"Experience Description for {exp.position} at {exp.company}", exp.description
    elif section.kind == "education":
        edu = resume.find_education(section.entry_id)
        if edu is not None:
            return f"Education Description for {edu.degree} from {edu.institution}", edu.description
    return "", ""


class SectionRewriter:
    """Rewrite a single section; failures never leave this call.

    Service errors, blank answers and timeouts return ``improved == current``.
    Sections with nothing to rewrite return the empty no-op sentinel.
    """

    def __init__(
        self,
        llm: LLMClient,
        prompts: PromptLibrary | None = None,
        *,
        timeout: float | None = 60.0,
    ):
        self.llm = llm
        self.prompts = prompts or PromptLibrary()
        self.timeout = timeout

    async def rewrite(
        self,
        section: str,
        resume: ResumeData,
        job_description: str,
        match: MatchResult,
    ) -> SectionImprovement:
        try:
            return await self._rewrite(section, resume, job_description, match)
        except Exception:
            logger.exception("Unexpected error improving section %s", section)
            return SectionImprovement(section=section, current="", improved="")

    async def _rewrite(
        self,
        section: str,
        resume: ResumeData,
        job_description: str,
        match: MatchResult,
    ) -> SectionImprovement:
        parsed = SectionId.parse(section)
        label, current = resolve_section(parsed, resume) if parsed else ("", "")
        if not current or not current.strip():
            logger.debug("Nothing to improve for section %s", section)
            return SectionImprovement(section=section, current="", improved="")

        prompt = self.prompts.render(
            IMPROVE_SECTION,
            jobDescription=job_description,
            sectionType=label,
            currentContent=current,
            matchAnalysis=match.to_prompt_json(),
            skillsInstruction=SKILLS_INSTRUCTION if parsed.kind == "skills" else "",
        )
        try:
            async with asyncio.timeout(self.timeout):
                improved = await self.llm.generate_text(prompt)
        except TimeoutError:
            logger.warning("Section %s timed out after %ss, keeping current text", section, self.timeout)
            return SectionImprovement(section=section, current=current, improved=current)
        except Exception:
            logger.warning("Rewrite failed for section %s, keeping current text", section, exc_info=True)
            return SectionImprovement(section=section, current=current, improved=current)

        if not improved:
            logger.warning("Received empty rewrite for section %s", section)
            improved = current
        return SectionImprovement(section=section, current=current, improved=improved)
