"""Resume improvement pipeline - select, rewrite in parallel, merge."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Callable

from resume_matcher.clients.llm_client import LLMClient
from resume_matcher.models.improvement import DEFAULT_SECTIONS, SectionImprovement
from resume_matcher.models.match import MatchResult
from resume_matcher.models.resume import ResumeData
from resume_matcher.pipeline.merge import MergeReport, apply_improvements
from resume_matcher.pipeline.section_rewriter import SectionRewriter
from resume_matcher.pipeline.section_selector import SectionSelector
from resume_matcher.prompts import PromptLibrary

logger = logging.getLogger(__name__)


@dataclass
class ImprovementResult:
    """Outcome of one improvement run.

    ``resume`` is always a valid document: either the merged clone or, when
    the run failed, the caller's original.
    """

    resume: ResumeData
    sections: list[str] = field(default_factory=list)
    improvements: list[SectionImprovement] = field(default_factory=list)
    report: MergeReport = field(default_factory=MergeReport)
    elapsed_seconds: float = 0.0
    changed: bool = False
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.error is None


class ResumeImprover:
    """Orchestrates section selection, concurrent rewrites and the merge."""

    def __init__(
        self,
        llm: LLMClient,
        prompts: PromptLibrary | None = None,
        *,
        section_timeout: float | None = 60.0,
        default_sections: tuple[str, ...] = DEFAULT_SECTIONS,
    ):
        prompts = prompts or PromptLibrary()
        self.selector = SectionSelector(
            llm, prompts, default_sections=default_sections, timeout=section_timeout
        )
        self.rewriter = SectionRewriter(llm, prompts, timeout=section_timeout)

    async def improve(
        self, resume: ResumeData, job_description: str, match: MatchResult
    ) -> ResumeData:
        """Return the improved resume, or ``resume`` itself if the run failed."""
        result = await self.run(resume, job_description, match)
        return result.resume

    async def run(
        self,
        resume: ResumeData,
        job_description: str,
        match: MatchResult,
        *,
        on_phase: Callable[[str, str], None] | None = None,
    ) -> ImprovementResult:
        """Run the full pipeline.

        Args:
            resume: Caller's document; never mutated.
            job_description: Target job posting text.
            match: Prior match analysis, used as prompt context only.
            on_phase: Optional callback(phase_name, detail) for progress.
        """
        start = time.monotonic()

        def _notify(phase: str, detail: str = ""):
            if on_phase:
                on_phase(phase, detail)

        if not job_description or not job_description.strip():
            logger.warning("Empty job description, returning original resume")
            _notify("done", "No job description, resume unchanged")
            return ImprovementResult(resume=resume, error="Missing job description")

        try:
            improved = resume.clone()

            _notify("select", "Identifying sections to improve")
            sections = await self.selector.select(resume, job_description, match)

            _notify("rewrite", f"Rewriting {len(sections)} sections")
            improvements = await asyncio.gather(
                *(
                    self.rewriter.rewrite(section, resume, job_description, match)
                    for section in sections
                )
            )

            _notify("merge", "Applying improvements")
            report = apply_improvements(improved, improvements)
        except Exception as e:
            logger.exception("Resume improvement failed, returning original resume")
            _notify("done", "Improvement failed, resume unchanged")
            return ImprovementResult(
                resume=resume,
                elapsed_seconds=time.monotonic() - start,
                error=str(e) or type(e).__name__,
            )

        elapsed = time.monotonic() - start
        logger.info(
            "Improved %d of %d sections in %.1fs (%d skills added)",
            len(report.applied),
            len(sections),
            elapsed,
            len(report.added_skills),
        )
        _notify("done", f"Improved {len(report.applied)} sections")
        return ImprovementResult(
            resume=improved,
            sections=sections,
            improvements=list(improvements),
            report=report,
            elapsed_seconds=elapsed,
            changed=improved != resume,
        )
