"""Utility to extract JSON from LLM responses."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ParseResult:
    """Outcome of parsing untrusted model output: either a value or a fallback reason."""

    value: Any = None
    fallback_reason: str | None = None
    raw: str = field(default="", repr=False)

    @property
    def is_ok(self) -> bool:
        return self.fallback_reason is None

    @classmethod
    def ok(cls, value: Any, raw: str = "") -> ParseResult:
        return cls(value=value, raw=raw)

    @classmethod
    def fallback(cls, reason: str, raw: str = "") -> ParseResult:
        return cls(fallback_reason=reason, raw=raw)

    def value_or(self, default: Any) -> Any:
        return self.value if self.is_ok else default


def extract_json_array(text: str | None) -> ParseResult:
    """Parse the substring between the first '[' and the last ']' as a JSON list.

    Never raises; failures come back as ``ParseResult.fallback``.
    """
    if not text or not text.strip():
        return ParseResult.fallback("empty response")
    text = text.strip()
    start = text.find("[")
    end = text.rfind("]")
    if start == -1 or end == -1 or end < start:
        return ParseResult.fallback("no JSON array found", raw=text)
    try:
        value = json.loads(text[start : end + 1])
    except json.JSONDecodeError as e:
        return ParseResult.fallback(f"invalid JSON: {e.msg}", raw=text)
    if not isinstance(value, list):
        return ParseResult.fallback(f"expected list, got {type(value).__name__}", raw=text)
    return ParseResult.ok(value, raw=text)


def extract_json(text: str) -> dict | list:
    """Extract a JSON value from a model response.

    Tries, in order: the whole text, the text with markdown code fences
    removed, the first '{' to the last '}', the first '[' to the last ']',
    and finally an object truncated by the token limit with its open
    brackets closed.

    Raises:
        ValueError: if none of the candidates parse.
    """
    text = (text or "").strip()
    unfenced = _strip_code_fences(text)

    for candidate in (text, unfenced):
        try:
            return json.loads(candidate)
        except json.JSONDecodeError:
            pass

    for source in (unfenced, text):
        for opener, closer in (("{", "}"), ("[", "]")):
            result = _slice_between(source, opener, closer)
            if result is not None:
                return result

    result = _close_truncated_object(unfenced)
    if result is not None:
        return result

    raise ValueError(f"Could not extract JSON from text: {text[:200]}...")


def _strip_code_fences(text: str) -> str:
    lines = text.split("\n")
    if lines and lines[0].strip().startswith("```"):
        lines = lines[1:]
    while lines and lines[-1].strip() in ("```", ""):
        lines = lines[:-1]
    return "\n".join(lines).strip()


def _slice_between(text: str, opener: str, closer: str) -> dict | list | None:
    start = text.find(opener)
    end = text.rfind(closer)
    if start == -1 or end <= start:
        return None
    try:
        return json.loads(text[start : end + 1])
    except json.JSONDecodeError:
        return None


def _close_truncated_object(text: str) -> dict | None:
    start = text.find("{")
    if start == -1:
        return None
    candidate = text[start:]
    # Cut back to the last complete string so a half-written value is dropped.
    last_quote = candidate.rfind('"')
    for body in (candidate, candidate[: last_quote + 1] if last_quote > 0 else ""):
        open_braces = body.count("{") - body.count("}")
        open_brackets = body.count("[") - body.count("]")
        if open_braces <= 0 and open_brackets <= 0:
            continue
        repaired = body.rstrip().rstrip(",") + "]" * max(0, open_brackets) + "}" * open_braces
        try:
            value = json.loads(repaired)
        except json.JSONDecodeError:
            continue
        if isinstance(value, dict):
            return value
    return None
