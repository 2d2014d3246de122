"""Tests for SectionRewriter."""

from __future__ import annotations

import asyncio

import pytest

from resume_matcher.models.improvement import SectionId
from resume_matcher.pipeline.section_rewriter import SectionRewriter, resolve_section


class TestResolveSection:
    def test_summary(self, sample_resume):
        assert resolve_section(SectionId.parse("summary"), sample_resume) == (
            "Professional Summary",
            "Developer.",
        )

    def test_skills_joined(self, sample_resume):
        sample_resume.skills.append(sample_resume.skills[0].model_copy(update={"id": 2, "skill": ""}))
        sample_resume.skills.append(sample_resume.skills[0].model_copy(update={"id": 3, "skill": "Go"}))
        assert resolve_section(SectionId.parse("skills"), sample_resume) == ("Skills List", "Java, Go")

    def test_experience(self, sample_resume):
        label, content = resolve_section(SectionId.parse("experience-3"), sample_resume)
        assert label == "Experience Description for Junior Developer at Globex"
        assert content == "Maintained internal tools."

    def test_education(self, sample_resume):
        label, content = resolve_section(SectionId.parse("education-1"), sample_resume)
        assert label == "Education Description for BSc from State University"
        assert content == "Coursework in databases."

    def test_missing_entry(self, sample_resume):
        assert resolve_section(SectionId.parse("experience-42"), sample_resume) == ("", "")


class TestRewrite:
    async def test_returns_improved_text(self, mock_llm_client, sample_resume, sample_match, sample_jd_text):
        mock_llm_client.generate_text.return_value = "Backend developer with 5 years building APIs."
        result = await SectionRewriter(mock_llm_client).rewrite(
            "summary", sample_resume, sample_jd_text, sample_match
        )
        assert result.section == "summary"
        assert result.current == "Developer."
        assert result.improved == "Backend developer with 5 years building APIs."

        prompt = mock_llm_client.generate_text.call_args.args[0]
        assert "SECTION TO IMPROVE: Professional Summary" in prompt
        assert "CURRENT CONTENT:\nDeveloper." in prompt
        assert sample_jd_text in prompt
        assert "comma-separated" not in prompt

    async def test_skills_prompt_asks_for_comma_list(self, mock_llm_client, sample_resume, sample_match):
        mock_llm_client.generate_text.return_value = "Java, Python"
        await SectionRewriter(mock_llm_client).rewrite("skills", sample_resume, "JD", sample_match)
        prompt = mock_llm_client.generate_text.call_args.args[0]
        assert "Return a comma-separated list of skills" in prompt

    @pytest.mark.parametrize("section", ["experience-999", "awards", "experience-x", ""])
    async def test_unresolvable_section_is_noop(self, mock_llm_client, sample_resume, sample_match, section):
        result = await SectionRewriter(mock_llm_client).rewrite(section, sample_resume, "JD", sample_match)
        assert result.current == ""
        assert result.improved == ""
        assert result.is_noop
        mock_llm_client.generate_text.assert_not_called()

    async def test_empty_content_is_noop(self, mock_llm_client, sample_resume, sample_match):
        sample_resume.personal_info.summary = "   "
        result = await SectionRewriter(mock_llm_client).rewrite("summary", sample_resume, "JD", sample_match)
        assert result.is_noop
        mock_llm_client.generate_text.assert_not_called()

    async def test_service_error_keeps_current(self, mock_llm_client, sample_resume, sample_match):
        mock_llm_client.generate_text.side_effect = RuntimeError("rate limited")
        result = await SectionRewriter(mock_llm_client).rewrite(
            "experience-1", sample_resume, "JD", sample_match
        )
        assert result.current == "Built APIs."
        assert result.improved == "Built APIs."

    async def test_timeout_keeps_current(self, mock_llm_client, sample_resume, sample_match):
        async def _hang(prompt, system=""):
            await asyncio.sleep(10)

        mock_llm_client.generate_text.side_effect = _hang
        rewriter = SectionRewriter(mock_llm_client, timeout=0.01)
        result = await rewriter.rewrite("summary", sample_resume, "JD", sample_match)
        assert result.improved == "Developer."

    async def test_empty_answer_keeps_current(self, mock_llm_client, sample_resume, sample_match):
        mock_llm_client.generate_text.return_value = ""
        result = await SectionRewriter(mock_llm_client).rewrite("summary", sample_resume, "JD", sample_match)
        assert result.improved == "Developer."

    async def test_unexpected_error_returns_sentinel(self, mock_llm_client, sample_resume, sample_match):
        rewriter = SectionRewriter(mock_llm_client)
        rewriter.prompts = None  # breaks prompt rendering
        result = await rewriter.rewrite("summary", sample_resume, "JD", sample_match)
        assert result.is_noop
