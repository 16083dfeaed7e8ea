"""Free text → structured form fields, with heuristic fallback.

Public API:
    - :func:`extract_fields`

Flow:

1. Validate input (:class:`~finmate.errors.ClientError` on empty text) and
   credentials (:class:`~finmate.errors.ConfigurationError`).
2. Build the instruction for the target form and call the primary model.
   A "not found" (404) status moves through the fallback model list in
   order, stopping at the first success. Any other failure goes straight to
   step 5; nothing is retried.
3. Pull the first JSON object out of the generated text. Unparseable or
   missing JSON becomes ``{}``.
4. Repair fields: amount (model value, else a number after "total", else
   the largest positive number), description (at most six words, else the
   first six words of the input) and category (always a member of the
   allowed set).
5. When no model call succeeded, synthesize the result from the input text
   alone and attach diagnostics. The caller still gets a usable object.
"""

from __future__ import annotations

import json
import math
import re
from collections.abc import Iterator, MutableMapping
from typing import Any

from .categories import OTHER, normalize_category
from .config import ExtractionSettings
from .errors import ClientError, UpstreamError
from .generative_client import extract_output_text, generate_text
from .logging_setup import get_logger
from .models import AmountSource, ExtractedFields, ExtractionResult, Role, TargetForm
from .prompting import build_extraction_prompt

DESCRIPTION_MAX_WORDS: int = 6
FALLBACK_DESCRIPTION: str = "Expense"

_AMOUNT_KEYS: tuple[str, ...] = ("amount", "total", "Total")
_NUMBER = r"\d{1,3}(?:[\d,]*)(?:\.\d+)?"
_TOTAL_RE = re.compile(rf"\btotal[^\d]*({_NUMBER})", re.IGNORECASE)
_NUMBER_RE = re.compile(_NUMBER)
_NON_WORD_RE = re.compile(r"[^\w\s]")

_logger = get_logger("finmate.extraction")


# ---- JSON scanning -------------------------------------------------------------


def _balanced_end(text: str, start: int) -> int | None:
    """Return the index of the ``}`` closing the ``{`` at ``start``.

    Braces inside JSON string literals are ignored. ``None`` when the object
    never closes.
    """

    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i
    return None


def iter_json_candidates(text: str) -> Iterator[str]:
    """Yield top-level ``{...}`` spans in order of appearance."""

    pos = text.find("{")
    while pos != -1:
        end = _balanced_end(text, pos)
        if end is None:
            pos = text.find("{", pos + 1)
            continue
        yield text[pos : end + 1]
        pos = text.find("{", end + 1)


def parse_json_object(text: str | None) -> dict[str, Any]:
    """Return the first top-level JSON object in ``text``, or ``{}``."""

    if not text:
        return {}
    for candidate in iter_json_candidates(text):
        try:
            value = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(value, dict):
            return value
    return {}


# ---- Field heuristics ----------------------------------------------------------


def _plain_number(v: float) -> int | float:
    return int(v) if v.is_integer() else v


def _to_number(token: str) -> float | None:
    try:
        v = float(token.replace(",", ""))
    except ValueError:
        return None
    return v if math.isfinite(v) else None


def coerce_amount(value: Any) -> int | float | None:
    """Coerce a model-supplied amount to a finite, non-negative number."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        v: float | None = float(value) if math.isfinite(value) else None
    elif isinstance(value, str):
        s = value.strip()
        v = _to_number(s) if s else None
    else:
        return None
    if v is None or v < 0:
        return None
    return _plain_number(v)


def amount_from_text(text: str | None) -> int | float | None:
    """Recover an amount from free text.

    A number following the word "total" wins. Otherwise the largest positive
    number is taken, since the grand total is usually the largest figure on a
    receipt.
    """

    if not text:
        return None
    m = _TOTAL_RE.search(text)
    if m:
        v = _to_number(m.group(1))
        if v is not None:
            return _plain_number(v)
    values = [v for v in (_to_number(tok) for tok in _NUMBER_RE.findall(text)) if v and v > 0]
    if not values:
        return None
    return _plain_number(max(values))


def shorten_description(description: str, max_words: int = DESCRIPTION_MAX_WORDS) -> str:
    return " ".join(description.split()[:max_words])


def fallback_description(text: str | None, max_words: int = DESCRIPTION_MAX_WORDS) -> str:
    """First ``max_words`` words of ``text`` with punctuation stripped."""

    cleaned = _NON_WORD_RE.sub(" ", text or "")
    return shorten_description(cleaned, max_words) or FALLBACK_DESCRIPTION


def _resolve_amount(parsed: MutableMapping[str, Any], *, output: str, text: str) -> AmountSource:
    raw_amount = next((parsed[k] for k in _AMOUNT_KEYS if parsed.get(k) is not None), None)
    amount = coerce_amount(raw_amount)
    if amount is not None:
        parsed["amount"] = amount
        return AmountSource.MODEL

    # Model output first, then the user's original text.
    recovered = amount_from_text(output)
    if recovered is None:
        recovered = amount_from_text(text)
    if recovered is None:
        parsed.pop("amount", None)
        return AmountSource.NONE
    _logger.info("amount recovered heuristically value=%s", recovered)
    parsed["amount"] = recovered
    return AmountSource.FALLBACK


def _normalize_onboarding(parsed: MutableMapping[str, Any]) -> None:
    if "role" in parsed:
        role = Role.coerce(parsed["role"])
        if role is Role.UNSET:
            parsed.pop("role")
        else:
            parsed["role"] = role.value
    if "income" in parsed:
        income = coerce_amount(parsed["income"])
        if income is None:
            parsed.pop("income")
        else:
            parsed["income"] = income
    items = parsed.get("fixedExpenses")
    if items is None:
        return
    if not isinstance(items, list):
        parsed.pop("fixedExpenses")
        return
    cleaned: list[dict[str, Any]] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        item["category"] = normalize_category(item.get("category"))
        item["amount"] = coerce_amount(item.get("amount")) or 0
        cleaned.append(item)
    parsed["fixedExpenses"] = cleaned


def repair_fields(
    parsed: MutableMapping[str, Any],
    *,
    output: str,
    text: str,
    target_form: TargetForm = TargetForm.EXPENSE,
) -> MutableMapping[str, Any]:
    """Normalize model-parsed fields in place and return ``parsed``."""

    description = parsed.get("description")
    if isinstance(description, str) and description.strip():
        parsed["description"] = shorten_description(description)
    else:
        parsed["description"] = fallback_description(text)

    parsed["_amountSource"] = _resolve_amount(parsed, output=output, text=text).value

    if parsed.get("category"):
        category = normalize_category(parsed["category"])
        parsed["categoryNormalized"] = category
        parsed["category"] = category
    elif "category" in parsed:
        parsed.pop("category")

    if target_form == TargetForm.ONBOARDING:
        _normalize_onboarding(parsed)
    return parsed


def heuristic_fields(text: str) -> ExtractedFields:
    """Build expense-shaped fields from ``text`` alone."""

    parsed: ExtractedFields = {}
    amount = amount_from_text(text)
    if amount is not None:
        parsed["amount"] = amount
    parsed["description"] = fallback_description(text)
    parsed["category"] = OTHER
    parsed["categoryNormalized"] = OTHER
    parsed["_amountSource"] = (
        AmountSource.FALLBACK.value if amount is not None else AmountSource.NONE.value
    )
    return parsed


# ---- Model calls ---------------------------------------------------------------


def _attempt(model: str, prompt: str, settings: ExtractionSettings, api_key: str) -> Any:
    try:
        body = generate_text(
            model=model, prompt=prompt, api_key=api_key, base_url=settings.base_url
        )
    except UpstreamError as e:
        _logger.info("model attempt model=%s status=%s", model, e.status or "fetch-error")
        _logger.debug("model error body model=%s body=%r", model, e.body)
        raise
    _logger.info("model attempt model=%s status=ok", model)
    _logger.debug("model response body model=%s body=%r", model, body)
    return body


def generate_with_fallbacks(
    prompt: str, *, settings: ExtractionSettings, api_key: str
) -> tuple[str, Any]:
    """Return ``(model_id, body)`` from the first model that succeeds.

    Fallback models are only tried when the primary answers "not found".
    Raises the primary model's :class:`UpstreamError` when nothing succeeds.
    """

    try:
        return settings.primary_model, _attempt(settings.primary_model, prompt, settings, api_key)
    except UpstreamError as primary_error:
        if not primary_error.is_not_found:
            raise
        error = primary_error

    if not settings.configured_fallbacks:
        _logger.info("no fallback models configured; trying defaults %s", settings.fallback_models)
    _logger.warning(
        "primary model %s returned 404 (not found); trying fallbacks %s",
        settings.primary_model,
        list(settings.fallback_models),
    )
    for alt in settings.fallback_models:
        try:
            body = _attempt(alt, prompt, settings, api_key)
        except UpstreamError:
            continue
        _logger.info("fallback model succeeded model=%s", alt)
        return alt, body
    raise error


# ---- Public entrypoint ---------------------------------------------------------


def _coerce_form(target_form: TargetForm | str | None) -> TargetForm:
    try:
        return TargetForm(target_form)
    except ValueError:
        return TargetForm.ONBOARDING


def extract_fields(
    text: str | None,
    target_form: TargetForm | str | None = TargetForm.ONBOARDING,
    *,
    settings: ExtractionSettings | None = None,
) -> ExtractionResult:
    """Extract form fields from ``text`` for ``target_form``.

    Raises :class:`ClientError` for empty text and
    :class:`~finmate.errors.ConfigurationError` for missing credentials. Every
    upstream failure degrades to a heuristic result instead.
    """

    form = _coerce_form(target_form)
    _logger.info("parse-fields request text_length=%d target_form=%s", len(text or ""), form)
    if not text or not text.strip():
        raise ClientError("Missing text")

    settings = settings or ExtractionSettings.from_env()
    api_key = settings.require_credentials()
    prompt = build_extraction_prompt(text, form)

    try:
        _model, body = generate_with_fallbacks(prompt, settings=settings, api_key=api_key)
    except UpstreamError as e:
        _logger.error(
            "generative API failed model=%s status=%s body=%r",
            e.model,
            e.status or "no-response",
            e.body,
        )
        if e.status is None:
            return ExtractionResult(
                parsed=heuristic_fields(text),
                raw="",
                model_response=None,
                error="Generative API fetch error",
                details=e.body,
            )
        return ExtractionResult(
            parsed=heuristic_fields(text),
            raw="",
            model_response=e.body,
            error="Generative API error",
            status=e.status,
            details=e.body,
        )

    output = extract_output_text(body)
    parsed = parse_json_object(output)
    repair_fields(parsed, output=output, text=text, target_form=form)
    return ExtractionResult(parsed=parsed, raw=output, model_response=body)
