"""Entry points for computing and presenting net worth forecasts."""

from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, Optional, Sequence

import pandas as pd

from analytics.history import analyze_history
from analytics.projection import generate_projection
from analytics.scenarios import SCENARIO_DESCRIPTIONS, Scenario, resolve_horizon, resolve_scenario, scenario_multipliers
from analytics.timeseries import forecast_from_snapshots
from config import get_settings
from core.models import (
    BalanceSheetSnapshot,
    ForecastAssumptions,
    ForecastPayload,
    ForecastResult,
    ForecastSummary,
    NetWorthSnapshot,
    RecurringCashFlow,
    TimeSeriesForecast,
    Transaction,
)

__all__ = [
    "compute_forecast",
    "compare_scenarios",
    "compute_snapshot_forecast",
    "summarize_forecast",
    "build_forecast_frame",
    "forecast_to_payload",
]

logger = logging.getLogger(__name__)

_PERCENT_CHANGE_LIMIT = 999.0
_MIN_BASE_FOR_PERCENT = 100


def compute_forecast(
    transactions: Iterable[Transaction],
    recurring_flows: Iterable[RecurringCashFlow],
    snapshot: BalanceSheetSnapshot,
    scenario: Scenario | str | None = None,
    horizon: Optional[int] = None,
    as_of: Optional[date] = None,
) -> ForecastResult:
    """Project net worth under ``scenario`` for ``horizon`` months.

    Scenario and horizon default to the configured values and are validated
    before any work is done, raising
    :class:`~analytics.scenarios.ForecastRequestError` when unsupported. For a
    fixed ``as_of`` the result depends only on the arguments.
    """

    settings = get_settings()
    resolved = resolve_scenario(settings.default_scenario if scenario is None else scenario)
    horizon = resolve_horizon(settings.default_horizon if horizon is None else horizon)
    as_of = as_of or date.today()

    stats = analyze_history(transactions, recurring_flows, as_of)
    multipliers = scenario_multipliers(resolved)
    points = generate_projection(stats, multipliers, horizon, snapshot, as_of)

    assumptions = ForecastAssumptions(
        avg_monthly_income=stats.avg_monthly_income,
        avg_monthly_expenses=stats.avg_monthly_expenses * multipliers.expenses,
        recurring_income=stats.recurring_income,
        recurring_expenses=stats.recurring_expenses,
        growth_rate=multipliers.growth_rate,
    )

    logger.info(
        "Forecast computed",
        extra={
            "scenario": resolved.value,
            "horizon": horizon,
            "as_of": as_of.isoformat(),
            "transaction_count": stats.transaction_count,
            "final_net_worth": points[-1].net_worth,
        },
    )
    return ForecastResult(
        scenario=resolved.value,
        horizon=horizon,
        points=points,
        assumptions=assumptions,
        stats=stats,
    )


def compare_scenarios(
    transactions: Sequence[Transaction],
    recurring_flows: Sequence[RecurringCashFlow],
    snapshot: BalanceSheetSnapshot,
    horizon: Optional[int] = None,
    as_of: Optional[date] = None,
) -> dict[str, ForecastResult]:
    """Run :func:`compute_forecast` once per scenario on identical inputs."""

    as_of = as_of or date.today()
    return {
        scenario.value: compute_forecast(transactions, recurring_flows, snapshot, scenario, horizon, as_of)
        for scenario in Scenario
    }


def compute_snapshot_forecast(
    snapshots: Sequence[NetWorthSnapshot],
    horizon: Optional[int] = None,
    current: Optional[BalanceSheetSnapshot] = None,
    as_of: Optional[date] = None,
) -> TimeSeriesForecast:
    """Forecast from snapshot history, seeding from ``current`` when history is thin."""

    horizon = resolve_horizon(get_settings().default_horizon if horizon is None else horizon)
    as_of = as_of or date.today()
    history = list(snapshots)
    if len(history) < 3 and current is not None:
        history = [
            NetWorthSnapshot(
                date=as_of,
                net_worth=current.net_worth,
                total_assets=current.total_assets,
                total_liabilities=current.total_liabilities,
            )
        ]
    forecast = forecast_from_snapshots(history, horizon, today=as_of)
    logger.info(
        "Snapshot forecast computed",
        extra={"method": forecast.method, "horizon": horizon, "snapshot_count": len(history)},
    )
    return forecast


def summarize_forecast(result: ForecastResult) -> ForecastSummary:
    first = result.points[0]
    last = result.points[-1]
    change = last.net_worth - first.net_worth

    percent = 0.0
    if abs(first.net_worth) >= _MIN_BASE_FOR_PERCENT:
        percent = change / abs(first.net_worth) * 100
    percent = max(-_PERCENT_CHANGE_LIMIT, min(_PERCENT_CHANGE_LIMIT, percent))

    return {
        "scenario": result.scenario,
        "horizon": result.horizon,
        "first_net_worth": first.net_worth,
        "last_net_worth": last.net_worth,
        "net_worth_change": change,
        "percent_change": percent,
        "final_confidence": last.confidence,
        "description": SCENARIO_DESCRIPTIONS[resolve_scenario(result.scenario)],
    }


def build_forecast_frame(result: ForecastResult) -> pd.DataFrame:
    """Return a chart-ready frame with one row per forecast point."""

    records = [
        {
            "Date": pd.Timestamp(point.date),
            "NetWorth": point.net_worth,
            "Assets": point.assets,
            "Liabilities": point.liabilities,
            "Confidence": point.confidence,
            "Upper": point.confidence_upper,
            "Lower": point.confidence_lower,
            "Series": "Actual" if index == 0 else "Projected",
        }
        for index, point in enumerate(result.points)
    ]
    frame = pd.DataFrame(records)
    frame["Scenario"] = result.scenario
    return frame


def forecast_to_payload(result: ForecastResult) -> ForecastPayload:
    """Serialise ``result`` using the camelCase keys the dashboard expects."""

    assumptions = result.assumptions
    return {
        "scenario": result.scenario,
        "horizon": result.horizon,
        "points": [
            {
                "date": point.date.isoformat(),
                "netWorth": point.net_worth,
                "assets": point.assets,
                "liabilities": point.liabilities,
                "confidence": point.confidence,
                "confidenceUpper": point.confidence_upper,
                "confidenceLower": point.confidence_lower,
            }
            for point in result.points
        ],
        "assumptions": {
            "avgMonthlyIncome": assumptions.avg_monthly_income,
            "avgMonthlyExpenses": assumptions.avg_monthly_expenses,
            "recurringIncome": assumptions.recurring_income,
            "recurringExpenses": assumptions.recurring_expenses,
            "growthRate": assumptions.growth_rate,
        },
    }
