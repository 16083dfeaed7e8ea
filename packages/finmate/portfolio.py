"""Investment portfolio totals."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from .budget import clamp_amount
from .models import Investment, PortfolioMetrics


def portfolio_metrics(investments: Iterable[Investment | Mapping[str, Any]]) -> PortfolioMetrics:
    """Sum purchase amounts and current values; gain percent is 0 with nothing invested."""

    items = [i if isinstance(i, Investment) else Investment.model_validate(i) for i in investments]
    total_invested = sum(clamp_amount(i.purchase_amount) for i in items)
    current_value = sum(clamp_amount(i.current_value) for i in items)
    gain = current_value - total_invested
    percent = gain / total_invested * 100 if total_invested > 0 else 0.0
    return PortfolioMetrics(
        total_invested=total_invested,
        current_value=current_value,
        gain=gain,
        gain_percent=percent,
    )
