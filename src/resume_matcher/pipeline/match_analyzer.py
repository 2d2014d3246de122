"""Match Analyzer - scores a resume against a job description."""

from __future__ import annotations

import logging

from pydantic import ValidationError

from resume_matcher.clients.llm_client import LLMClient
from resume_matcher.models.match import MatchResult
from resume_matcher.models.resume import ResumeData
from resume_matcher.prompts import ANALYZE_JOB_MATCH, PromptLibrary
from resume_matcher.templates.renderer import resume_to_text

logger = logging.getLogger(__name__)


class MatchAnalyzer:
    def __init__(self, llm: LLMClient, prompts: PromptLibrary | None = None):
        self.llm = llm
        self.prompts = prompts or PromptLibrary()

    async def analyze(self, resume: ResumeData, job_description: str) -> MatchResult:
        """Analyze the resume/job fit.

        Never raises: any failure comes back as ``MatchResult.error``.
        """
        if not job_description or not job_description.strip():
            return MatchResult.error("Missing job description")

        prompt = self.prompts.render(
            ANALYZE_JOB_MATCH,
            resumeText=resume_to_text(resume),
            jobDescription=job_description,
        )
        try:
            data = await self.llm.generate_json(prompt=prompt)
        except Exception as e:
            logger.exception("Match analysis LLM call failed")
            return MatchResult.error(str(e) or type(e).__name__)

        if not isinstance(data, dict):
            logger.error("Match analysis returned %s, expected object", type(data).__name__)
            return MatchResult.error("Could not find valid JSON in the API response")
        if isinstance(data.get("overallMatch"), bool) or not isinstance(
            data.get("overallMatch"), (int, float)
        ):
            logger.error("Match analysis missing numeric overallMatch: %r", data.get("overallMatch"))
            return MatchResult.error("Invalid analysis result: missing or invalid overallMatch")

        data["overallMatch"] = max(0, min(100, round(data["overallMatch"])))
        try:
            return MatchResult.model_validate(data)
        except ValidationError as e:
            logger.error("Match analysis failed validation: %s", e)
            return MatchResult.error(f"Failed to parse analysis result: {e.error_count()} invalid fields")
