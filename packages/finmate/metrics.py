"""Role-specific success metrics.

Each role is judged on a different criterion:

- Student: daily discipline, i.e. how far average daily spending overshoots
  the daily limit (lower overspend is better).
- Professional: savings rate against a 20% target.
- Housewife: budget stability, i.e. monthly spending variance relative to
  income against a 90% target.

Unset or unknown roles use the Professional formula under a generic name.
:func:`evaluate` is total: it never raises and ``success_rate`` is always
within ``[0, 100]``.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import NamedTuple

from .models import Role, SuccessMetric

STUDENT_OVERSPEND_TARGET = 0
PROFESSIONAL_SAVINGS_TARGET = 20
HOUSEWIFE_STABILITY_TARGET = 90


class MetricInputs(NamedTuple):
    income: float
    actual_savings: float
    daily_spending_limit: float
    average_daily_spending: float
    monthly_variance: float


def _finite(value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return 0.0
    v = float(value)
    return v if math.isfinite(v) else 0.0


def _round_half_up(value: float) -> int:
    """Round halves toward +inf on both signs; non-finite values become 0."""

    if not math.isfinite(value):
        return 0
    return math.floor(value + 0.5)


def _clamp_rate(value: float) -> int:
    return _round_half_up(min(100.0, max(0.0, value)))


def _student(inputs: MetricInputs) -> SuccessMetric:
    limit = inputs.daily_spending_limit
    overspend = max(0.0, inputs.average_daily_spending - limit)
    rate = 100 - (overspend / limit) * 100 if limit > 0 else 0.0
    rate = min(100.0, max(0.0, rate))
    if rate > 80:
        interpretation = "Excellent! Staying within daily limits."
    elif rate > 50:
        interpretation = "Good progress. Minor overspending detected."
    else:
        interpretation = "Focus on reducing daily overspend for better financial health."
    return SuccessMetric(
        metric_name="Daily Discipline Score",
        metric_value=_round_half_up(overspend),
        metric_target=STUDENT_OVERSPEND_TARGET,
        success_rate=_clamp_rate(rate),
        interpretation=interpretation,
    )


def _savings_rate(inputs: MetricInputs) -> float:
    if inputs.income <= 0:
        return 0.0
    return inputs.actual_savings / inputs.income * 100


def _professional(inputs: MetricInputs) -> SuccessMetric:
    savings_rate = _savings_rate(inputs)
    rate = savings_rate / PROFESSIONAL_SAVINGS_TARGET * 100
    if savings_rate >= PROFESSIONAL_SAVINGS_TARGET:
        interpretation = "Outstanding! You're building wealth effectively."
    elif savings_rate >= 10:
        interpretation = "On track. Consider increasing savings contributions."
    else:
        interpretation = "Room for improvement. Review discretionary spending."
    return SuccessMetric(
        metric_name="Savings Growth Rate",
        metric_value=_round_half_up(savings_rate),
        metric_target=PROFESSIONAL_SAVINGS_TARGET,
        success_rate=_clamp_rate(rate),
        interpretation=interpretation,
    )


def _housewife(inputs: MetricInputs) -> SuccessMetric:
    variance = inputs.monthly_variance
    if variance <= 0:
        stability = 100.0
    elif inputs.income <= 0:
        # Any variance against no income is maximally unstable.
        stability = 0.0
    else:
        stability = max(0.0, 100 - (variance / inputs.income) * 100)
    stability = min(100.0, stability)
    if stability >= HOUSEWIFE_STABILITY_TARGET:
        interpretation = "Excellent! Your household budget is very consistent."
    elif stability >= 70:
        interpretation = "Good stability. Minor fluctuations detected."
    else:
        interpretation = "Consider planning ahead to reduce monthly variance."
    return SuccessMetric(
        metric_name="Budget Consistency Score",
        metric_value=_round_half_up(stability),
        metric_target=HOUSEWIFE_STABILITY_TARGET,
        success_rate=_clamp_rate(stability),
        interpretation=interpretation,
    )


def _unset(inputs: MetricInputs) -> SuccessMetric:
    savings_rate = _savings_rate(inputs)
    return SuccessMetric(
        metric_name="Financial Health Score",
        metric_value=_round_half_up(savings_rate),
        metric_target=PROFESSIONAL_SAVINGS_TARGET,
        success_rate=_clamp_rate(savings_rate / PROFESSIONAL_SAVINGS_TARGET * 100),
        interpretation="Track your progress to improve financial health.",
    )


_EVALUATORS: Mapping[Role, Callable[[MetricInputs], SuccessMetric]] = MappingProxyType(
    {
        Role.STUDENT: _student,
        Role.PROFESSIONAL: _professional,
        Role.HOUSEWIFE: _housewife,
        Role.UNSET: _unset,
    }
)

_missing_roles = set(Role) - set(_EVALUATORS)
if _missing_roles:  # pragma: no cover - guards future edits to ``Role``
    raise RuntimeError(f"metric evaluators missing roles: {sorted(_missing_roles)}")


def evaluate(
    role: Role | str | None,
    income: float,
    actual_savings: float,
    daily_spending_limit: float,
    average_daily_spending: float,
    monthly_variance: float,
) -> SuccessMetric:
    """Compute the success metric for ``role``.

    ``monthly_variance`` is the spread (standard deviation) of monthly
    spending. Non-finite or non-numeric inputs are treated as zero.
    """

    inputs = MetricInputs(
        income=_finite(income),
        actual_savings=_finite(actual_savings),
        daily_spending_limit=_finite(daily_spending_limit),
        average_daily_spending=_finite(average_daily_spending),
        monthly_variance=_finite(monthly_variance),
    )
    return _EVALUATORS[Role.coerce(role)](inputs)
