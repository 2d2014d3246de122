"""Section Selector - asks the model which resume sections to rewrite."""

from __future__ import annotations

import asyncio
import logging

from resume_matcher.clients.llm_client import LLMClient
from resume_matcher.models.improvement import DEFAULT_SECTIONS, SectionId, available_sections
from resume_matcher.models.match import MatchResult
from resume_matcher.models.resume import ResumeData
from resume_matcher.prompts import IDENTIFY_SECTIONS, PromptLibrary
from resume_matcher.utils.json_parser import extract_json_array

logger = logging.getLogger(__name__)


class SectionSelector:
    """Pick the section identifiers worth rewriting for a job.

    Availability wins over correctness here: a failed call or unparseable
    answer falls back to ``default_sections`` instead of aborting the run.
    """

    def __init__(
        self,
        llm: LLMClient,
        prompts: PromptLibrary | None = None,
        *,
        default_sections: tuple[str, ...] = DEFAULT_SECTIONS,
        timeout: float | None = None,
    ):
        self.llm = llm
        self.prompts = prompts or PromptLibrary()
        self.default_sections = tuple(default_sections)
        self.timeout = timeout

    def build_prompt(self, resume: ResumeData, job_description: str, match: MatchResult) -> str:
        section_list = "\n".join(f"- {sid}: {label}" for sid, label in available_sections(resume))
        return self.prompts.render(
            IDENTIFY_SECTIONS,
            jobDescription=job_description,
            matchAnalysis=match.to_prompt_json(),
            sectionList=section_list,
        )

    async def select(
        self, resume: ResumeData, job_description: str, match: MatchResult
    ) -> list[str]:
        """Return existing section identifiers to improve, in first-seen order."""
        prompt = self.build_prompt(resume, job_description, match)
        try:
            async with asyncio.timeout(self.timeout):
                response = await self.llm.generate_text(prompt)
        except Exception:
            logger.warning("Section selection failed, using defaults", exc_info=True)
            return self._existing(self.default_sections, resume)

        parsed = extract_json_array(response)
        if not parsed.is_ok:
            logger.warning("Could not parse sections to improve (%s), using defaults", parsed.fallback_reason)
            return self._existing(self.default_sections, resume)

        selected = self._existing(parsed.value, resume)
        dropped = len(parsed.value) - len(selected)
        if dropped:
            logger.info("Dropped %d unknown or duplicate section identifiers", dropped)
        return selected

    @staticmethod
    def _existing(candidates, resume: ResumeData) -> list[str]:
        seen: list[str] = []
        for candidate in candidates:
            section = SectionId.parse(candidate)
            if section is None or not section.exists_in(resume):
                continue
            if str(section) not in seen:
                seen.append(str(section))
        return seen
