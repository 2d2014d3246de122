"""Render a structured resume as plain text for analysis prompts."""

from __future__ import annotations

from jinja2 import Environment

from resume_matcher.models.resume import ResumeData

_env = Environment(trim_blocks=True, lstrip_blocks=True, keep_trailing_newline=False)

RESUME_TEXT_TEMPLATE = _env.from_string("""\
# {{ info.full_name }}
{{ [info.email, info.phone, info.address] | join(" | ") }}

## Summary
{{ info.summary }}

## Skills
{{ skills | join(", ") }}

## Experience
{% for exp in resume.experience %}
{{ exp.position }} at {{ exp.company }} ({{ exp.start_date }} - {{ exp.end_date or "Present" }})
{{ exp.description }}

{% endfor %}
## Education
{% for edu in resume.education %}
{{ edu.degree }} in {{ edu.field_of_study }} from {{ edu.institution }} ({{ edu.start_date }} - {{ edu.end_date or "Present" }})
{{ edu.description }}

{% endfor %}
## Languages
{{ languages | join(", ") }}

## Awards & Certifications
{% for award in resume.awards %}
{{ award.title }} from {{ award.issuer }} ({{ award.date }})
{{ award.description }}

{% endfor %}
""")


def resume_to_text(resume: ResumeData) -> str:
    """Render the resume as markdown-flavoured plain text."""
    skills = [s.skill for s in resume.skills if s.skill]
    languages = [f"{lang.name}: {lang.proficiency}" for lang in resume.languages if lang.name]
    return RESUME_TEXT_TEMPLATE.render(
        resume=resume,
        info=resume.personal_info,
        skills=skills,
        languages=languages,
    ).strip()
