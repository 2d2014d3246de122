"""Cost estimate for text-generation calls."""

from __future__ import annotations

# Pricing per 1M tokens (USD)
MODEL_PRICING: dict[str, dict[str, float]] = {
    "claude-haiku-4-5-20251001": {"input": 1.00, "output": 5.00},
    "claude-sonnet-4-5-20250929": {"input": 3.00, "output": 15.00},
}


def calculate_cost(calls: list[tuple[str, int, int]]) -> float:
    """Estimate the USD cost of a list of (model_id, input_tokens, output_tokens) calls.

    Models missing from ``MODEL_PRICING`` count as free.
    """
    total = 0.0
    for model_id, input_tokens, output_tokens in calls:
        pricing = MODEL_PRICING.get(model_id)
        if pricing is None:
            continue
        total += input_tokens * pricing["input"] / 1_000_000
        total += output_tokens * pricing["output"] / 1_000_000
    return total
