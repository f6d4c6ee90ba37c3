"""Shared data model definitions for the forecast engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Mapping, Optional, TypedDict


@dataclass(frozen=True)
class Transaction:
    """Ledger entry supplied by the transaction history provider.

    Amounts may be ``float`` or ``Decimal``; the analytics work in floats.
    """

    date: date
    amount: float
    category_id: Optional[str] = None
    is_recurring: Optional[bool] = None
    is_income: Optional[bool] = None


@dataclass(frozen=True)
class RecurringCashFlow:
    """Confirmed recurring inflow (positive) or obligation (negative)."""

    name: str
    amount: float
    frequency: str  # "daily", "weekly", "monthly" or "yearly"
    next_date: Optional[date] = None


@dataclass(frozen=True)
class BalanceSheetSnapshot:
    net_worth: float
    total_assets: float
    total_liabilities: float


@dataclass(frozen=True)
class NetWorthSnapshot:
    """Dated balance-sheet observation used by the time-series forecaster."""

    date: date
    net_worth: float
    total_assets: Optional[float] = None
    total_liabilities: Optional[float] = None


@dataclass(frozen=True)
class HistoricalStats:
    avg_monthly_income: float
    avg_monthly_expenses: float
    recurring_income: float
    recurring_expenses: float
    volatility: float
    months_in_period: float
    total_income: float = 0.0
    total_expenses: float = 0.0
    transaction_count: int = 0
    category_spending: Mapping[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class ScenarioMultipliers:
    income: float
    expenses: float
    growth_rate: float  # annual

    @property
    def monthly_growth_rate(self) -> float:
        return self.growth_rate / 12


@dataclass(frozen=True)
class ForecastPoint:
    date: date
    net_worth: int
    assets: int
    liabilities: int
    confidence: float
    confidence_upper: int
    confidence_lower: int


@dataclass(frozen=True)
class ForecastAssumptions:
    avg_monthly_income: float
    avg_monthly_expenses: float
    recurring_income: float
    recurring_expenses: float
    growth_rate: float


@dataclass(frozen=True)
class ForecastResult:
    scenario: str
    horizon: int
    points: list[ForecastPoint]
    assumptions: ForecastAssumptions
    stats: Optional[HistoricalStats] = None


@dataclass(frozen=True)
class TimeSeriesPoint:
    date: date
    net_worth: int
    upper_bound: int
    lower_bound: int
    confidence: float


@dataclass(frozen=True)
class TimeSeriesMetrics:
    geometric_mean_growth: float = 0.0
    average_savings: float = 0.0
    market_return: float = 0.0
    savings_trend: float = 0.0
    volatility: float = 0.0
    r2: float = 0.0


@dataclass(frozen=True)
class TimeSeriesForecast:
    method: str  # "timeseries" or "behavioral"
    points: list[TimeSeriesPoint]
    metrics: TimeSeriesMetrics


class ForecastPointPayload(TypedDict):
    date: str
    netWorth: int
    assets: int
    liabilities: int
    confidence: float
    confidenceUpper: int
    confidenceLower: int


class AssumptionsPayload(TypedDict):
    avgMonthlyIncome: float
    avgMonthlyExpenses: float
    recurringIncome: float
    recurringExpenses: float
    growthRate: float


class ForecastPayload(TypedDict):
    scenario: str
    horizon: int
    points: list[ForecastPointPayload]
    assumptions: AssumptionsPayload


class ForecastSummary(TypedDict):
    scenario: str
    horizon: int
    first_net_worth: int
    last_net_worth: int
    net_worth_change: int
    percent_change: float
    final_confidence: float
    description: str


__all__ = [
    "Transaction",
    "RecurringCashFlow",
    "BalanceSheetSnapshot",
    "NetWorthSnapshot",
    "HistoricalStats",
    "ScenarioMultipliers",
    "ForecastPoint",
    "ForecastAssumptions",
    "ForecastResult",
    "TimeSeriesPoint",
    "TimeSeriesMetrics",
    "TimeSeriesForecast",
    "ForecastPointPayload",
    "AssumptionsPayload",
    "ForecastPayload",
    "ForecastSummary",
]
