"""Core domain package for the forecast engine."""

from .models import (
    BalanceSheetSnapshot,
    ForecastAssumptions,
    ForecastPoint,
    ForecastResult,
    HistoricalStats,
    NetWorthSnapshot,
    RecurringCashFlow,
    ScenarioMultipliers,
    TimeSeriesForecast,
    Transaction,
)

__all__ = [
    "BalanceSheetSnapshot",
    "ForecastAssumptions",
    "ForecastPoint",
    "ForecastResult",
    "HistoricalStats",
    "NetWorthSnapshot",
    "RecurringCashFlow",
    "ScenarioMultipliers",
    "TimeSeriesForecast",
    "Transaction",
]
