"""Weekly spending suggestion backed by the generative endpoint.

The end user never sees a raw failure: missing credentials, upstream errors
and empty model output all produce :data:`FALLBACK_SUGGESTION`.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from .config import ExtractionSettings
from .errors import ConfigurationError, UpstreamError
from .extraction import parse_json_object
from .generative_client import extract_output_text, generate_text
from .logging_setup import get_logger
from .models import ExpenseRecord, Goal, Role, SpendingSuggestion
from .prompting import build_suggestion_prompt

FALLBACK_SUGGESTION = "The AI service is temporarily unavailable. Please try again later."

_logger = get_logger("finmate.suggestions")


def _suggestion_from_output(output: str) -> str | None:
    parsed = parse_json_object(output)
    value = parsed.get("suggestion")
    if isinstance(value, str) and value.strip():
        return value.strip()
    # Plain-text answers are accepted as-is when no JSON was produced.
    if not parsed and output.strip():
        return output.strip()
    return None


def get_spending_suggestion(
    *,
    income: float,
    role: Role | str,
    goals: Iterable[Goal | Mapping[str, Any]] = (),
    expenses: Iterable[ExpenseRecord | Mapping[str, Any]] = (),
    settings: ExtractionSettings | None = None,
) -> SpendingSuggestion:
    """Return one forward-looking suggestion for the coming week."""

    goal_models = [g if isinstance(g, Goal) else Goal.model_validate(g) for g in goals]
    expense_models = [
        e if isinstance(e, ExpenseRecord) else ExpenseRecord.model_validate(e) for e in expenses
    ]
    prompt = build_suggestion_prompt(
        income=income, role=role, goals=goal_models, expenses=expense_models
    )

    settings = settings or ExtractionSettings.from_env()
    try:
        api_key = settings.require_credentials()
        body = generate_text(
            model=settings.primary_model,
            prompt=prompt,
            api_key=api_key,
            base_url=settings.base_url,
        )
    except (ConfigurationError, UpstreamError) as e:
        _logger.error("spending suggestion failed: %s", e)
        return SpendingSuggestion(suggestion=FALLBACK_SUGGESTION)

    suggestion = _suggestion_from_output(extract_output_text(body))
    if suggestion is None:
        _logger.error("spending suggestion: model returned no output")
        return SpendingSuggestion(suggestion=FALLBACK_SUGGESTION)
    return SpendingSuggestion(suggestion=suggestion)
