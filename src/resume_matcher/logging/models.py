"""Usage logging data models."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class UsageLog(BaseModel):
    """One analyze or improve run, as recorded in the usage store."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime = Field(default_factory=datetime.now)
    mode: str  # "analyze" | "improve"
    resume_name: str | None = None
    match_score: int | None = None
    sections_selected: list[str] = []
    sections_improved: list[str] = []
    skills_added: int = 0
    elapsed_seconds: float = 0.0
    total_input_tokens: int = 0
    total_output_tokens: int = 0
    llm_calls: int = 0
    estimated_cost_usd: float = 0.0
    success: bool = True
    error_message: str | None = None
