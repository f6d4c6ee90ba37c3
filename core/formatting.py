"""Formatting helpers for forecast summaries."""

from __future__ import annotations

from typing import Optional

from analytics.scenarios import scenario_multipliers
from config import get_settings
from core.models import ForecastResult, ForecastSummary

__all__ = ["build_forecast_insights", "format_currency", "format_percent"]


def format_currency(value: float, symbol: str = "$") -> str:
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.0f}"


def format_percent(value: float) -> str:
    """Format a percentage expressed in points, e.g. ``12.5`` -> ``+12.5%``."""

    sign = "+" if value >= 0 else ""
    return f"{sign}{value:.1f}%"


def build_forecast_insights(
    result: ForecastResult,
    summary: ForecastSummary,
    *,
    symbol: Optional[str] = None,
) -> list[str]:
    symbol = symbol or get_settings().currency_symbol
    insights: list[str] = []
    last = result.points[-1]
    months = "month" if result.horizon == 1 else "months"

    insights.append(
        (
            f"Projected net worth in {result.horizon} {months}: "
            f"<strong>{format_currency(last.net_worth, symbol)}</strong> "
            f"({format_percent(summary['percent_change'])})."
        )
    )

    if last.confidence_upper != last.confidence_lower:
        conf_pct = int(round(last.confidence * 100))
        insights.append(
            (
                f"Range: <strong>{format_currency(last.confidence_lower, symbol)}–"
                f"{format_currency(last.confidence_upper, symbol)}</strong> ({conf_pct}% confidence)."
            )
        )

    assumptions = result.assumptions
    # Assumptions report income unadjusted and expenses already scaled by the scenario.
    income_multiplier = scenario_multipliers(result.scenario).income
    net_flow = assumptions.avg_monthly_income * income_multiplier - assumptions.avg_monthly_expenses
    if net_flow >= 0:
        insights.append(f"You add about <strong>{format_currency(net_flow, symbol)}</strong> per month.")
    else:
        insights.append(
            f"Spending exceeds income by about <strong>{format_currency(abs(net_flow), symbol)}</strong> per month."
        )

    return insights
