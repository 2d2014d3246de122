"""Shared test fixtures."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from resume_matcher.clients.llm_client import LLMClient, LLMResponse
from resume_matcher.models.match import ImprovementSuggestion, MatchResult, RelevantExperience
from resume_matcher.models.resume import (
    Education,
    Experience,
    Language,
    PersonalInfo,
    ResumeData,
    ResumeStyle,
    Skill,
)


@pytest.fixture
def sample_jd_text() -> str:
    return """Senior Backend Engineer - Payments Platform

Responsibilities:
- Design and operate distributed services handling millions of transactions per day
- Build RESTful APIs in Python and Go
- Own PostgreSQL schemas and query performance

Requirements:
- 5+ years of backend development
- Python, Go, SQL
- Experience with Kubernetes and Kafka
"""


@pytest.fixture
def sample_resume() -> ResumeData:
    return ResumeData(
        personal_info=PersonalInfo(
            full_name="Jordan Lee",
            email="jordan@example.com",
            phone="555-0100",
            address="Portland, OR",
            summary="Developer.",
        ),
        experience=[
            Experience(
                id=1,
                company="Acme",
                position="Backend Engineer",
                start_date="2020-01",
                end_date="",
                description="Built APIs.",
            ),
            Experience(
                id=3,
                company="Globex",
                position="Junior Developer",
                start_date="2017-06",
                end_date="2019-12",
                description="Maintained internal tools.",
            ),
        ],
        education=[
            Education(
                id=1,
                institution="State University",
                degree="BSc",
                field_of_study="Computer Science",
                start_date="2013",
                end_date="2017",
                description="Coursework in databases.",
            ),
        ],
        skills=[Skill(id=1, skill="Java")],
        languages=[Language(id=1, name="English", proficiency="Native")],
        resume_style=ResumeStyle(font="font-serif", layout="modern", color_scheme="blue"),
    )


@pytest.fixture
def sample_match() -> MatchResult:
    return MatchResult(
        overall_match=55,
        missing_skills=["Python", "SQL", "Kubernetes"],
        relevant_experience=RelevantExperience(
            has=["Backend API development"],
            missing=["Distributed systems at scale"],
        ),
        improvement_suggestions=[
            ImprovementSuggestion(
                section="summary",
                current="Developer.",
                improved="Backend developer focused on distributed systems.",
            ),
        ],
    )


@pytest.fixture
def mock_llm_client() -> LLMClient:
    """Create a mock LLM client."""
    client = AsyncMock(spec=LLMClient)
    client.generate = AsyncMock(
        return_value=LLMResponse(text="{}", input_tokens=100, output_tokens=50)
    )
    client.generate_text = AsyncMock(return_value="")
    client.generate_json = AsyncMock(return_value={})
    return client


def scripted_responses(selection: str, rewrites: dict[str, str | Exception]):
    """Build a generate_text side effect that answers by prompt type.

    The selection prompt gets ``selection``; a rewrite prompt gets the entry of
    ``rewrites`` whose key (a section label) appears in the prompt. Exceptions
    are raised instead of returned.
    """

    async def _respond(prompt: str, system: str = "") -> str:
        if "identify which sections" in prompt:
            return selection
        for label, answer in rewrites.items():
            if f"SECTION TO IMPROVE: {label}" in prompt:
                if isinstance(answer, Exception):
                    raise answer
                return answer
        raise AssertionError(f"Unexpected prompt: {prompt[:120]}")

    return _respond


@pytest.fixture
def script_llm(mock_llm_client):
    """Configure mock_llm_client.generate_text with scripted_responses."""

    def _script(selection: str, rewrites: dict[str, str | Exception]) -> LLMClient:
        mock_llm_client.generate_text.side_effect = scripted_responses(selection, rewrites)
        return mock_llm_client

    return _script
