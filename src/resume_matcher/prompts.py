"""Prompt templates for match analysis, section selection and section rewriting.

Templates use ``{placeholder}`` fields filled by plain substitution, so the
literal JSON braces in the examples need no escaping. A YAML file of
``prompt_id: content`` pairs can override any default template.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

ANALYZE_JOB_MATCH = "analyze-job-match"
IDENTIFY_SECTIONS = "identify-sections-to-improve"
IMPROVE_SECTION = "improve-section"

_PLACEHOLDER = re.compile(r"\{([a-zA-Z]+)\}")


@dataclass(frozen=True)
class Prompt:
    id: str
    name: str
    description: str
    content: str
    default_content: str

    @property
    def is_overridden(self) -> bool:
        return self.content != self.default_content


DEFAULT_PROMPTS: dict[str, tuple[str, str, str]] = {
    ANALYZE_JOB_MATCH: (
        "Analyze Job Match",
        "Scores how well a resume matches a job description",
        """\
You are an expert resume analyst and career coach. You need to analyze how well a resume matches a job description.

RESUME:
{resumeText}

JOB DESCRIPTION:
{jobDescription}

Analyze the match between the resume and job description. Provide the following:
1. Overall match percentage (0-100)
2. List of skills mentioned in the job description that are missing from the resume
3. Relevant experience the candidate has vs. what's missing
4. Specific suggestions for improving sections of the resume to better match the job

Format your response as a JSON object with the following structure:
{
  "overallMatch": number,
  "missingSkills": string[],
  "relevantExperience": {
    "has": string[],
    "missing": string[]
  },
  "improvementSuggestions": [
    {
      "section": string,
      "current": string,
      "improved": string
    }
  ]
}

IMPORTANT: Your response must be valid JSON. Do not include any text before or after the JSON object.
Do not include markdown formatting or code blocks. Just return the raw JSON object.""",
    ),
    IDENTIFY_SECTIONS: (
        "Identify Sections to Improve",
        "Picks the resume sections worth rewriting for a job",
        """\
You are an expert resume analyst. Based on the job description and match analysis, identify which sections of the resume need improvement.

JOB DESCRIPTION:
{jobDescription}

MATCH ANALYSIS:
{matchAnalysis}

RESUME SECTIONS:
{sectionList}

Return a JSON array of section identifiers that need improvement. For example:
["summary", "skills", "experience-1"]

IMPORTANT: Your response must be valid JSON. Do not include any text before or after the JSON array.""",
    ),
    IMPROVE_SECTION: (
        "Improve Section",
        "Rewrites one resume section against a job description",
        """\
You are an expert resume writer with years of experience helping job seekers optimize their resumes for specific positions.

JOB DESCRIPTION:
{jobDescription}

SECTION TO IMPROVE: {sectionType}

CURRENT CONTENT:
{currentContent}

MATCH ANALYSIS:
{matchAnalysis}

Your task is to improve this section to better match the job description. Make the following improvements:
1. Add relevant keywords from the job description
2. Highlight relevant qualifications and experiences
3. Use action verbs and quantifiable achievements
4. Maintain a professional tone
{skillsInstruction}

Return only the improved content without any additional text or explanation.
Do not use bold or any other text formatting; output plain text, not markdown.""",
    ),
}

SKILLS_INSTRUCTION = "5. Return a comma-separated list of skills"


def render_template(content: str, **fields: str) -> str:
    """Fill ``{name}`` placeholders; unknown placeholders are left as-is."""
    return _PLACEHOLDER.sub(lambda m: str(fields.get(m.group(1), m.group(0))), content)


class PromptLibrary:
    """Default prompt templates plus optional per-id overrides."""

    def __init__(self, overrides: dict[str, str] | None = None):
        self._overrides: dict[str, str] = {}
        for prompt_id, content in (overrides or {}).items():
            self.update(prompt_id, content)

    @classmethod
    def from_file(cls, path: str | Path | None) -> PromptLibrary:
        """Load overrides from a YAML mapping; a missing file means no overrides."""
        if path is None or not Path(path).exists():
            return cls()
        raw = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
        if not isinstance(raw, dict):
            raise ValueError(f"Prompt overrides must be a mapping, got {type(raw).__name__}")
        library = cls()
        for prompt_id, content in raw.items():
            if prompt_id not in DEFAULT_PROMPTS:
                logger.warning("Ignoring override for unknown prompt %r", prompt_id)
                continue
            library.update(prompt_id, str(content))
        return library

    def get(self, prompt_id: str) -> Prompt:
        if prompt_id not in DEFAULT_PROMPTS:
            raise KeyError(f"Unknown prompt: {prompt_id}")
        name, description, default = DEFAULT_PROMPTS[prompt_id]
        return Prompt(
            id=prompt_id,
            name=name,
            description=description,
            content=self._overrides.get(prompt_id, default),
            default_content=default,
        )

    def list_prompts(self) -> list[Prompt]:
        return sorted((self.get(pid) for pid in DEFAULT_PROMPTS), key=lambda p: p.name)

    def update(self, prompt_id: str, content: str) -> None:
        if prompt_id not in DEFAULT_PROMPTS:
            raise KeyError(f"Unknown prompt: {prompt_id}")
        self._overrides[prompt_id] = content

    def reset(self, prompt_id: str) -> None:
        self._overrides.pop(prompt_id, None)

    def render(self, prompt_id: str, **fields: str) -> str:
        return render_template(self.get(prompt_id).content, **fields)
