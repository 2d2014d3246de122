"""Application configuration loaded from config.yaml."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from resume_matcher.models.improvement import DEFAULT_SECTIONS, SectionId


@dataclass(frozen=True)
class LLMConfig:
    model: str = "claude-haiku-4-5-20251001"
    max_retries: int = 3
    timeout: int = 120
    temperature: float = 0.2
    max_tokens: int = 8192

    def __post_init__(self) -> None:
        if not 1 <= self.max_retries <= 10:
            raise ValueError(f"llm.max_retries must be between 1 and 10, got {self.max_retries}")
        if self.timeout < 1:
            raise ValueError(f"llm.timeout must be at least 1 second, got {self.timeout}")
        if not 0.0 <= self.temperature <= 1.0:
            raise ValueError(f"llm.temperature must be between 0 and 1, got {self.temperature}")
        if self.max_tokens < 1:
            raise ValueError(f"llm.max_tokens must be positive, got {self.max_tokens}")


@dataclass(frozen=True)
class PipelineConfig:
    section_timeout: float = 60.0
    default_sections: tuple[str, ...] = DEFAULT_SECTIONS

    def __post_init__(self) -> None:
        if self.section_timeout <= 0:
            raise ValueError(f"pipeline.section_timeout must be positive, got {self.section_timeout}")
        invalid = [s for s in self.default_sections if SectionId.parse(s) is None]
        if invalid:
            raise ValueError(
                "pipeline.default_sections must name summary, skills, experience-<id> "
                f"or education-<id>, got {invalid}"
            )
        # YAML gives lists; keep the frozen config hashable.
        object.__setattr__(self, "default_sections", tuple(self.default_sections))


@dataclass(frozen=True)
class PromptsConfig:
    overrides_path: str | None = None

    @property
    def resolved_overrides_path(self) -> Path | None:
        if self.overrides_path is None:
            return None
        return Path(self.overrides_path).expanduser()


@dataclass(frozen=True)
class UsageConfig:
    enabled: bool = True
    db_path: str = "~/.resume-matcher/usage.db"

    @property
    def resolved_db_path(self) -> Path:
        return Path(self.db_path).expanduser()


@dataclass(frozen=True)
class AppConfig:
    llm: LLMConfig = field(default_factory=LLMConfig)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    prompts: PromptsConfig = field(default_factory=PromptsConfig)
    usage: UsageConfig = field(default_factory=UsageConfig)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from YAML file, falling back to defaults.

    Raises:
        ValueError: if a value is out of range.
    """
    if path is None:
        candidates = [
            Path.cwd() / "config.yaml",
            Path(__file__).resolve().parent.parent.parent / "config.yaml",
        ]
        for c in candidates:
            if c.exists():
                path = c
                break

    raw: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            raw = yaml.safe_load(p.read_text()) or {}

    return AppConfig(
        llm=LLMConfig(**raw.get("llm", {})),
        pipeline=PipelineConfig(**raw.get("pipeline", {})),
        prompts=PromptsConfig(**raw.get("prompts", {})),
        usage=UsageConfig(**raw.get("usage", {})),
    )
