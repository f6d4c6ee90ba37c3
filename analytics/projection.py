"""Month-by-month net worth projection with a heuristic confidence band."""

from __future__ import annotations

import math
from datetime import date
from typing import Final

from core.dates import add_months
from core.models import BalanceSheetSnapshot, ForecastPoint, HistoricalStats, ScenarioMultipliers

__all__ = [
    "BASE_CONFIDENCE",
    "CONFIDENCE_FLOOR",
    "compute_confidence",
    "generate_projection",
    "liability_ratio",
    "round_half_up",
]

BASE_CONFIDENCE: Final[float] = 0.95
MONTHLY_DECAY: Final[float] = 0.05
CONFIDENCE_FLOOR: Final[float] = 0.5
MAX_VOLATILITY_PENALTY: Final[float] = 0.2
VOLATILITY_SCALE: Final[float] = 1000.0
BAND_WIDTH: Final[float] = 0.5


def round_half_up(value: float) -> int:
    """Round to the nearest whole unit, halves rounding towards positive infinity."""

    return int(math.floor(float(value) + 0.5))


def compute_confidence(months_ahead: int, volatility: float) -> float:
    """Synthetic confidence score, not a statistical confidence level."""

    volatility_penalty = min(volatility / VOLATILITY_SCALE, MAX_VOLATILITY_PENALTY)
    return max(BASE_CONFIDENCE - (months_ahead * MONTHLY_DECAY) - volatility_penalty, CONFIDENCE_FLOOR)


def liability_ratio(snapshot: BalanceSheetSnapshot) -> float:
    return float(snapshot.total_liabilities) / float(snapshot.total_assets or 1)


def _anchor_point(snapshot: BalanceSheetSnapshot, as_of: date) -> ForecastPoint:
    net_worth = round_half_up(snapshot.net_worth)
    return ForecastPoint(
        date=as_of,
        net_worth=net_worth,
        assets=round_half_up(snapshot.total_assets),
        liabilities=round_half_up(snapshot.total_liabilities),
        confidence=1.0,
        confidence_upper=net_worth,
        confidence_lower=net_worth,
    )


def generate_projection(
    stats: HistoricalStats,
    multipliers: ScenarioMultipliers,
    horizon: int,
    snapshot: BalanceSheetSnapshot,
    as_of: date,
) -> list[ForecastPoint]:
    """Project net worth forward ``horizon`` months from ``snapshot``.

    The returned list starts with an anchor point at ``as_of`` followed by one
    point per month. Each month's net cash flow is added before growth is
    applied, so growth compounds on that month's contribution as well.
    Assets and liabilities are re-derived from net worth using the starting
    leverage; they are not modelled independently.
    """

    points = [_anchor_point(snapshot, as_of)]

    monthly_income = stats.avg_monthly_income * multipliers.income
    monthly_expenses = stats.avg_monthly_expenses * multipliers.expenses
    net_cash_flow = monthly_income - monthly_expenses
    growth_factor = 1 + multipliers.monthly_growth_rate

    ratio = liability_ratio(snapshot)
    # Equal assets and liabilities would divide by zero; fall back like the asset guard.
    equity_share = (1 - ratio) or 1

    net_worth = float(snapshot.net_worth)
    for month in range(1, horizon + 1):
        net_worth = (net_worth + net_cash_flow) * growth_factor
        assets = net_worth / equity_share
        liabilities = assets - net_worth

        confidence = compute_confidence(month, stats.volatility)
        spread = (1 - confidence) * abs(net_worth) * BAND_WIDTH

        rounded_net_worth = round_half_up(net_worth)
        rounded_spread = round_half_up(spread)
        points.append(
            ForecastPoint(
                date=add_months(as_of, month),
                net_worth=rounded_net_worth,
                assets=round_half_up(assets),
                liabilities=round_half_up(liabilities),
                confidence=confidence,
                confidence_upper=rounded_net_worth + rounded_spread,
                confidence_lower=rounded_net_worth - rounded_spread,
            )
        )

    return points
