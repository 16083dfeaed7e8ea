"""Onboarding helpers: fixed-expense totals, profile assembly, goal templates.

:func:`build_profile` produces the document an external store persists. The
budget fields are a mirror of :func:`finmate.budget.allocate`; they are never
authoritative and get recomputed whenever income, role or fixed expenses
change.
"""

from __future__ import annotations

import secrets
from collections.abc import Iterable, Mapping
from typing import Any, NamedTuple

from .budget import allocate, clamp_amount
from .models import EmergencyFund, FixedExpense, Role, UserProfile


def fixed_expenses_total(expenses: Iterable[FixedExpense | Mapping[str, Any]]) -> float:
    """Sum expense amounts; missing or non-numeric amounts count as zero."""

    total = 0.0
    for exp in expenses:
        amount = exp.amount if isinstance(exp, FixedExpense) else exp.get("amount")
        if isinstance(amount, str):
            try:
                amount = float(amount)
            except ValueError:
                amount = 0.0
        total += clamp_amount(amount)
    return total


def _new_expense_id() -> str:
    return f"fe-{secrets.token_hex(4)}"


def build_profile(
    role: Role | str,
    income: float,
    fixed_expenses: Iterable[FixedExpense | Mapping[str, Any]] = (),
    *,
    name: str | None = None,
) -> UserProfile:
    expenses = [
        e if isinstance(e, FixedExpense) else FixedExpense.model_validate(e)
        for e in fixed_expenses
    ]
    expenses = [e if e.id else e.model_copy(update={"id": _new_expense_id()}) for e in expenses]
    resolved_role = Role.coerce(role)
    income = clamp_amount(income)
    allocation = allocate(income, fixed_expenses_total(expenses), resolved_role)
    return UserProfile(
        name=name,
        role=resolved_role,
        income=income,
        fixed_expenses=expenses,
        daily_spending_limit=allocation.daily_limit,
        monthly_needs=allocation.monthly_needs,
        monthly_wants=allocation.monthly_wants,
        monthly_savings=allocation.monthly_savings,
        emergency_fund=EmergencyFund(),
    )


class GoalTemplate(NamedTuple):
    name: str
    suggested_amount: float
    timeline_months: int


_ROLE_GOAL_TEMPLATES: Mapping[Role, tuple[GoalTemplate, ...]] = {
    Role.STUDENT: (
        GoalTemplate("Laptop Fund", 50000, 12),
        GoalTemplate("Semester Fees", 30000, 6),
        GoalTemplate("Emergency Buffer", 10000, 6),
        GoalTemplate("Internship Prep", 15000, 4),
    ),
    Role.PROFESSIONAL: (
        GoalTemplate("Emergency Fund (6 months)", 180000, 24),
        GoalTemplate("Vacation", 80000, 12),
        GoalTemplate("Investment Corpus", 200000, 18),
        GoalTemplate("Car Down Payment", 150000, 24),
    ),
    Role.HOUSEWIFE: (
        GoalTemplate("Kids Education", 100000, 24),
        GoalTemplate("Family Medical Fund", 50000, 12),
        GoalTemplate("Festival Savings", 30000, 10),
        GoalTemplate("Home Improvement", 60000, 18),
    ),
}


def role_goal_templates(role: Role | str | None) -> tuple[GoalTemplate, ...]:
    """Suggested goals for ``role``; unset roles get Professional templates."""

    return _ROLE_GOAL_TEMPLATES.get(Role.coerce(role), _ROLE_GOAL_TEMPLATES[Role.PROFESSIONAL])
