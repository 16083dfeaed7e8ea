"""Role-based needs/wants/savings allocation.

Public API:
    - :data:`ROLE_BUDGET_SPLITS`
    - :func:`get_role_budget_split`
    - :func:`allocate`

Split per role:

- Student: 60% needs, 30% wants, 10% savings
- Professional: 50% needs, 30% wants, 20% savings
- Housewife: 55% needs, 25% wants, 20% savings

:func:`allocate` is a pure function. Bad inputs (negative, ``None``,
non-finite) are clamped to zero instead of rejected, so zero income is a
valid steady state that yields an all-zero result.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from types import MappingProxyType

from .models import AllocationResult, BudgetSplit, Role

DAYS_PER_MONTH: int = 30

ROLE_BUDGET_SPLITS: Mapping[Role, BudgetSplit] = MappingProxyType(
    {
        Role.STUDENT: BudgetSplit(needs_percent=0.60, wants_percent=0.30, savings_percent=0.10),
        Role.PROFESSIONAL: BudgetSplit(
            needs_percent=0.50, wants_percent=0.30, savings_percent=0.20
        ),
        Role.HOUSEWIFE: BudgetSplit(needs_percent=0.55, wants_percent=0.25, savings_percent=0.20),
    }
)

# Every concrete role must have a split; fail at import rather than at runtime.
_missing_roles = set(Role) - {Role.UNSET} - set(ROLE_BUDGET_SPLITS)
if _missing_roles:  # pragma: no cover - guards future edits to ``Role``
    raise RuntimeError(f"ROLE_BUDGET_SPLITS missing roles: {sorted(_missing_roles)}")


def get_role_budget_split(role: Role | str | None) -> BudgetSplit:
    """Return the split for ``role``; unset or unknown roles use Professional's."""

    return ROLE_BUDGET_SPLITS.get(Role.coerce(role), ROLE_BUDGET_SPLITS[Role.PROFESSIONAL])


def clamp_amount(value: object) -> float:
    """Coerce a money-like input to a finite, non-negative float (else ``0.0``)."""

    if isinstance(value, bool) or not isinstance(value, int | float):
        return 0.0
    v = float(value)
    if not math.isfinite(v) or v < 0:
        return 0.0
    return v


def allocate(
    income: float,
    fixed_expenses_total: float,
    role: Role | str | None,
) -> AllocationResult:
    """Split ``income`` into needs, wants and savings for ``role``.

    Fixed expenses always become the needs figure, even when they exceed
    income. When they fit inside the role's needs threshold, wants and
    savings get their role targets and any leftover goes to wants. When they
    exceed it, whatever income remains is divided between wants and savings
    in the role's wants:savings ratio.

    ``daily_limit`` is wants over a fixed 30-day month.
    """

    income = clamp_amount(income)
    if income <= 0:
        return AllocationResult()

    split = get_role_budget_split(role)
    needs = clamp_amount(fixed_expenses_total)
    needs_threshold = income * split.needs_percent

    wants = 0.0
    savings = 0.0
    if needs <= needs_threshold:
        wants_target = income * split.wants_percent
        savings_target = income * split.savings_percent
        remainder = income - (needs + wants_target + savings_target)
        wants = wants_target + (remainder if remainder > 0 else 0.0)
        savings = savings_target
    else:
        disposable = max(income - needs, 0.0)
        if disposable > 0:
            flex = split.wants_percent + split.savings_percent
            wants = disposable * (split.wants_percent / flex)
            savings = disposable * (split.savings_percent / flex)

    daily_limit = wants / DAYS_PER_MONTH if wants > 0 else 0.0

    return AllocationResult(
        monthly_needs=needs,
        monthly_wants=wants,
        monthly_savings=savings,
        daily_limit=daily_limit,
    )
