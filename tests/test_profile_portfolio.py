import pytest

from finmate.budget import allocate
from finmate.models import FixedExpense, Investment, Role
from finmate.portfolio import portfolio_metrics
from finmate.profile import build_profile, fixed_expenses_total, role_goal_templates


def test_fixed_expenses_total_tolerates_bad_amounts():
    expenses = [
        {"name": "Rent", "amount": 8000},
        {"name": "Phone", "amount": "499.5"},
        {"name": "Gym", "amount": "n/a"},
        {"name": "Misc"},
        FixedExpense(name="EMI", amount=2500),
    ]
    assert fixed_expenses_total(expenses) == pytest.approx(10999.5)


def test_build_profile_mirrors_allocation():
    profile = build_profile(
        "professional",
        50000,
        [
            {"name": "Rent", "amount": 15000, "category": "Rent/EMI"},
            {"id": "fe-keep", "name": "Internet", "amount": 5000, "category": "Utilities"},
        ],
        name="Asha",
    )
    expected = allocate(50000, 20000, Role.PROFESSIONAL)

    assert profile.role is Role.PROFESSIONAL
    assert profile.monthly_needs == expected.monthly_needs
    assert profile.monthly_wants == expected.monthly_wants
    assert profile.monthly_savings == expected.monthly_savings
    assert profile.daily_spending_limit == expected.daily_limit
    assert profile.fixed_expenses[0].id.startswith("fe-")
    assert profile.fixed_expenses[1].id == "fe-keep"
    assert profile.emergency_fund.current == 0
    assert profile.emergency_fund.history == []

    payload = profile.model_dump(by_alias=True)
    assert payload["dailySpendingLimit"] == expected.daily_limit
    assert payload["fixedExpenses"][1]["category"] == "Utilities"


def test_role_goal_templates():
    assert role_goal_templates(Role.STUDENT)[0].name == "Laptop Fund"
    assert role_goal_templates("Housewife")[0].name == "Kids Education"
    assert role_goal_templates("") == role_goal_templates(Role.PROFESSIONAL)


def test_portfolio_metrics():
    metrics = portfolio_metrics(
        [
            Investment(name="Index fund", purchase_amount=10000, current_value=12000),
            {"name": "Gold", "purchaseAmount": 5000, "currentValue": 4500},
        ]
    )

    assert metrics.total_invested == 15000
    assert metrics.current_value == 16500
    assert metrics.gain == 1500
    assert metrics.gain_percent == pytest.approx(10.0)


def test_empty_portfolio_has_zero_gain_percent():
    metrics = portfolio_metrics([])
    assert metrics.gain_percent == 0
    assert metrics.model_dump(by_alias=True) == {
        "totalInvested": 0,
        "currentValue": 0,
        "gain": 0,
        "gainPercent": 0,
    }
