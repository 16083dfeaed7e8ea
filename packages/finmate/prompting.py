"""Prompt construction for field extraction and spending suggestions.

This module builds:
- One instruction per extraction target form (``onboarding``/``expense``),
  each embedding the expected JSON shape and, for expenses, the literal
  allowed category list and the "prefer an explicit Total line" rule.
- The full extraction prompt: instruction followed by the quoted input text.
- The spending-suggestion analyst prompt.
"""

from __future__ import annotations

from collections.abc import Sequence

from .categories import ALLOWED_CATEGORIES
from .models import ExpenseRecord, Goal, Role, TargetForm

_ONBOARDING_INSTRUCTION = (
    "Produce a JSON object with keys: role (Student|Professional|Housewife), income (number), "
    "fixedExpenses (array of {name,category,amount,timelineMonths,startDate?}). "
    "Parse dates as ISO strings. Only output JSON, no explanation. "
    "If a field is missing, omit it."
)


def _expense_instruction(allowed_categories: Sequence[str]) -> str:
    return (
        "Produce a JSON object with keys: description (short string, 2-6 words), "
        "amount (number = total amount on the receipt), "
        f"category (one of {', '.join(allowed_categories)}), "
        "date (ISO date if available). Only output JSON, no explanation. "
        "The category value MUST be exactly one of the allowed values: "
        f"{' | '.join(allowed_categories)}. "
        'If you cannot determine a category, return "Other". '
        'If you see line-item prices, prefer the explicit "Total" line; '
        "otherwise sum item prices to compute the total. "
        "Always return amount as a plain number."
    )


def build_instruction(
    target_form: TargetForm | str,
    *,
    allowed_categories: Sequence[str] = ALLOWED_CATEGORIES,
) -> str:
    """Return the schema instruction for ``target_form`` (onboarding when unknown)."""

    if target_form == TargetForm.EXPENSE:
        return _expense_instruction(allowed_categories)
    return _ONBOARDING_INSTRUCTION


def build_extraction_prompt(text: str, target_form: TargetForm | str) -> str:
    escaped = text.replace('"', '\\"')
    return f'{build_instruction(target_form)}\n\nInput: "{escaped}"'


# ---------------------------------------------------------------------------
# Spending suggestions
# ---------------------------------------------------------------------------

_ROLE_GUIDANCE = (
    "- For **Students**: Suggest free alternatives, student discounts, or budget-friendly "
    "options. Focus on small changes that don't impact lifestyle drastically.\n"
    "- For **Professionals**: Suggest optimization and reallocation strategies. Don't "
    "restrict, but encourage smarter choices (meal prep vs dining out, carpooling vs solo "
    "commute).\n"
    "- For **Housewives**: Suggest bulk buying, seasonal planning, or community resources. "
    "Focus on maximizing household efficiency."
)


def _fmt_money(value: float) -> str:
    return f"₹{value:g}" if float(value).is_integer() else f"₹{value:.2f}"


def build_suggestion_prompt(
    *,
    income: float,
    role: Role | str,
    goals: Sequence[Goal],
    expenses: Sequence[ExpenseRecord],
) -> str:
    """Render the weekly-suggestion prompt for one user.

    The model is asked to return JSON ``{"suggestion": "..."}``.
    """

    role_label = Role.coerce(role).value or Role.PROFESSIONAL.value
    goal_lines = [
        f"  - Save for '{g.name}' (Target: {_fmt_money(g.target_amount)}, "
        f"Monthly Contribution: {_fmt_money(g.monthly_contribution)})"
        for g in goals
    ] or ["  - (none)"]
    expense_lines: list[str] = []
    for e in expenses:
        expense_lines.append(f"- **Date:** {e.date}")
        expense_lines.append(f"  - **Category:** {e.category}")
        expense_lines.append(f"  - **Amount:** {_fmt_money(e.amount)}")
    if not expense_lines:
        expense_lines = ["- (no expenses logged)"]

    return "\n".join(
        [
            "You are FinMate's proactive financial analyst. Your job is to analyze a user's "
            "spending habits and provide a concise, actionable suggestion for the next week.",
            "",
            "## User's Financial Profile:",
            f"- **Role:** {role_label}",
            f"- **Monthly Income:** {_fmt_money(income)}",
            "- **Financial Goals:**",
            *goal_lines,
            "",
            "## User's Recent Spending History:",
            *expense_lines,
            "",
            "## Your Task:",
            "Based on all the information above, generate a single, concise, and actionable "
            "suggestion for the upcoming week.",
            "",
            "1. **Analyze Spending Patterns:** Identify the single category where they spend "
            "the most.",
            "2. **Connect to Goals:** Briefly mention how adjusting this spending can help them "
            "reach a goal faster.",
            "3. **Create Role-Specific Forward-Looking Suggestions:**",
            _ROLE_GUIDANCE,
            "",
            'Respond with JSON only: {"suggestion": "<your suggestion>"}',
        ]
    )
