"""Job description loading and whitespace normalization."""

from __future__ import annotations

import re
from pathlib import Path


def normalize_jd(text: str) -> str:
    """Collapse blank-line runs and repeated spaces, strip each line."""
    text = re.sub(r"\n{3,}", "\n\n", text.replace("\r\n", "\n"))
    text = re.sub(r"[ \t]+", " ", text)
    return "\n".join(line.strip() for line in text.splitlines()).strip()


def load_jd_file(file_path: str | Path) -> str:
    """Load a job description from a text file.

    Raises:
        ValueError: if the file holds no text.
    """
    text = normalize_jd(Path(file_path).read_text(encoding="utf-8"))
    if not text:
        raise ValueError(f"Job description file is empty: {file_path}")
    return text
