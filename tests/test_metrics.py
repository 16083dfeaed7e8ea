import pytest

from finmate.metrics import evaluate
from finmate.models import Role

_ROLES = [Role.STUDENT, Role.PROFESSIONAL, Role.HOUSEWIFE, Role.UNSET, "Astronaut"]


def test_student_overspend_reduces_success_rate():
    metric = evaluate(Role.STUDENT, 20000, 0, daily_spending_limit=100,
                      average_daily_spending=120, monthly_variance=0)

    assert metric.metric_name == "Daily Discipline Score"
    assert metric.metric_value == 20
    assert metric.metric_target == 0
    assert metric.success_rate == 80
    # 80 is not strictly above the "excellent" boundary
    assert metric.interpretation.startswith("Good progress")


def test_student_within_limit_is_excellent():
    metric = evaluate(Role.STUDENT, 20000, 0, 100, 0, 0)
    assert metric.success_rate == 100
    assert metric.metric_value == 0
    assert metric.interpretation.startswith("Excellent")


def test_student_without_limit_scores_zero():
    metric = evaluate(Role.STUDENT, 20000, 0, 0, 50, 0)
    assert metric.success_rate == 0
    assert metric.interpretation.startswith("Focus")


def test_student_metric_value_rounds_half_up():
    metric = evaluate(Role.STUDENT, 0, 0, 10, 12.5, 0)
    assert metric.metric_value == 3
    assert metric.success_rate == 75


@pytest.mark.parametrize(
    ("savings", "rate", "value", "prefix"),
    [
        (10000, 100, 20, "Outstanding"),
        (5000, 50, 10, "On track"),
        (2000, 20, 4, "Room for improvement"),
        (-5000, 0, -10, "Room for improvement"),
        (60000, 100, 120, "Outstanding"),
    ],
)
def test_professional_savings_rate(savings, rate, value, prefix):
    metric = evaluate(Role.PROFESSIONAL, 50000, savings, 0, 0, 0)

    assert metric.metric_name == "Savings Growth Rate"
    assert metric.metric_target == 20
    assert metric.metric_value == value
    assert metric.success_rate == rate
    assert metric.interpretation.startswith(prefix)


def test_professional_rounds_display_values():
    metric = evaluate(Role.PROFESSIONAL, 100000, 12345, 0, 0, 0)
    assert metric.metric_value == 12
    assert metric.success_rate == 62


def test_negative_half_rounds_toward_positive_infinity():
    # savings rate is exactly -12.5
    metric = evaluate(Role.PROFESSIONAL, 8, -1, 0, 0, 0)
    assert metric.metric_value == -12
    assert metric.success_rate == 0


@pytest.mark.parametrize(
    ("role", "inputs", "value"),
    [
        (Role.STUDENT, (0, 0, 1, 1e30, 0), int(1e30)),
        (Role.PROFESSIONAL, (1e-300, 1e300, 0, 0, 0), 0),
        (Role.UNSET, (1e-300, 1e300, 0, 0, 0), 0),
    ],
)
def test_huge_intermediate_values_do_not_raise(role, inputs, value):
    metric = evaluate(role, *inputs)
    assert metric.metric_value == value
    assert 0 <= metric.success_rate <= 100


@pytest.mark.parametrize(
    ("variance", "expected", "prefix"),
    [
        (0, 100, "Excellent"),
        (5000, 90, "Excellent"),
        (10000, 80, "Good stability"),
        (25000, 50, "Consider planning"),
        (500000, 0, "Consider planning"),
    ],
)
def test_housewife_stability(variance, expected, prefix):
    metric = evaluate(Role.HOUSEWIFE, 50000, 0, 0, 0, variance)

    assert metric.metric_name == "Budget Consistency Score"
    assert metric.metric_target == 90
    assert metric.metric_value == expected
    assert metric.success_rate == expected
    assert metric.interpretation.startswith(prefix)


def test_housewife_variance_without_income_is_unstable():
    metric = evaluate(Role.HOUSEWIFE, 0, 0, 0, 0, 100)
    assert metric.success_rate == 0


def test_unset_role_uses_savings_formula():
    metric = evaluate("", 50000, 5000, 0, 0, 0)

    assert metric.metric_name == "Financial Health Score"
    assert metric.metric_value == 10
    assert metric.success_rate == 50


@pytest.mark.parametrize("role", _ROLES)
@pytest.mark.parametrize(
    "inputs",
    [
        (50000, 0, 0, 0, 500000),
        (50000, 500000, 1, 1000, 0),
        (0, -100, 0, 0, 0),
        (-1000, -100, -5, 1e12, 1e12),
        (float("inf"), float("nan"), float("-inf"), 1, 1),
        (1, 1e9, 0.0001, 0, -5),
        (0, 0, 1, 1e30, 0),
        (1, 1e30, 0, 0, 0),
        (1e-300, 1e300, 0, 0, 0),
    ],
)
def test_success_rate_always_within_bounds(role, inputs):
    metric = evaluate(role, *inputs)
    assert 0 <= metric.success_rate <= 100
