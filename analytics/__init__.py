"""Forecasting analytics: history statistics, scenarios and projections."""

from analytics.history import (
    analyze_history,
    build_transactions_frame,
    compute_category_spending,
    compute_volatility,
    monthly_equivalent,
    summarize_recurring_flows,
)
from analytics.projection import compute_confidence, generate_projection, liability_ratio, round_half_up
from analytics.scenarios import (
    SCENARIO_DESCRIPTIONS,
    SCENARIO_MULTIPLIERS,
    VALID_HORIZONS,
    ForecastRequestError,
    Scenario,
    resolve_horizon,
    resolve_scenario,
    scenario_multipliers,
)
from analytics.timeseries import forecast_from_snapshots

__all__ = [
    "analyze_history",
    "build_transactions_frame",
    "compute_category_spending",
    "compute_volatility",
    "monthly_equivalent",
    "summarize_recurring_flows",
    "compute_confidence",
    "generate_projection",
    "liability_ratio",
    "round_half_up",
    "SCENARIO_DESCRIPTIONS",
    "SCENARIO_MULTIPLIERS",
    "VALID_HORIZONS",
    "ForecastRequestError",
    "Scenario",
    "resolve_horizon",
    "resolve_scenario",
    "scenario_multipliers",
    "forecast_from_snapshots",
]
