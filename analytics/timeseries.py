"""Net worth forecasting from a history of balance-sheet snapshots."""

from __future__ import annotations

import math
from datetime import date
from typing import Final, NamedTuple, Sequence

import numpy as np

from analytics.projection import round_half_up
from core.dates import add_months, months_between
from core.models import NetWorthSnapshot, TimeSeriesForecast, TimeSeriesMetrics, TimeSeriesPoint

__all__ = [
    "MIN_SNAPSHOTS",
    "Regression",
    "forecast_from_snapshots",
    "growth_series",
    "geometric_mean_growth",
    "linear_regression",
]

MIN_SNAPSHOTS: Final[int] = 3
Z_SCORE: Final[float] = 1.96
FALLBACK_BAND: Final[float] = 0.1


class Regression(NamedTuple):
    slope: float
    intercept: float
    r2: float


def growth_series(snapshots: Sequence[NetWorthSnapshot]) -> np.ndarray:
    """Period-over-period growth rates, skipping periods that start from zero."""

    rates = [
        (current.net_worth - previous.net_worth) / abs(previous.net_worth)
        for previous, current in zip(snapshots, snapshots[1:])
        if previous.net_worth != 0
    ]
    return np.asarray(rates, dtype=float)


def geometric_mean_growth(rates: np.ndarray) -> float:
    if rates.size == 0:
        return 0.0
    product = float(np.prod(1 + rates))
    if product <= 0:
        # Fractional power of a non-positive product is undefined.
        return 0.0
    return product ** (1 / rates.size) - 1


def linear_regression(x: np.ndarray, y: np.ndarray) -> Regression:
    """Ordinary least squares fit of ``y`` on ``x``."""

    n = x.size
    if n == 0:
        return Regression(0.0, 0.0, 0.0)

    sum_x = float(x.sum())
    sum_y = float(y.sum())
    denominator = n * float((x * x).sum()) - sum_x * sum_x
    slope = (n * float((x * y).sum()) - sum_x * sum_y) / denominator if denominator else 0.0
    intercept = (sum_y - slope * sum_x) / n

    total_ss = float(((y - sum_y / n) ** 2).sum())
    residual_ss = float(((y - (intercept + slope * x)) ** 2).sum())
    r2 = 0.0 if total_ss == 0 else 1 - residual_ss / total_ss
    return Regression(slope, intercept, r2)


def _fallback(snapshots: Sequence[NetWorthSnapshot], horizon: int, today: date) -> TimeSeriesForecast:
    last = snapshots[-1] if snapshots else NetWorthSnapshot(date=today, net_worth=0.0)
    net_worth = round_half_up(last.net_worth)
    band = round_half_up(abs(float(last.net_worth)) * FALLBACK_BAND)
    points = [
        TimeSeriesPoint(
            date=add_months(last.date, month),
            net_worth=net_worth,
            upper_bound=net_worth + band,
            lower_bound=net_worth - band,
            confidence=0.5,
        )
        for month in range(1, horizon + 1)
    ]
    return TimeSeriesForecast(method="behavioral", points=points, metrics=TimeSeriesMetrics())


def forecast_from_snapshots(
    snapshots: Sequence[NetWorthSnapshot],
    horizon: int,
    *,
    today: date | None = None,
) -> TimeSeriesForecast:
    """Extrapolate net worth from dated snapshots.

    Change in net worth between snapshots is regressed on the prior net worth:
    the intercept is read as average monthly savings and the slope as the
    market return. A linear trend in per-month savings is layered on top.
    With fewer than three snapshots a flat "behavioral" forecast is returned.
    """

    ordered = sorted(snapshots, key=lambda snap: snap.date)
    if len(ordered) < MIN_SNAPSHOTS:
        return _fallback(ordered, horizon, today or date.today())

    rates = growth_series(ordered)
    previous = np.asarray([snap.net_worth for snap in ordered[:-1]], dtype=float)
    changes = np.asarray([b.net_worth - a.net_worth for a, b in zip(ordered, ordered[1:])], dtype=float)
    gaps = np.asarray([months_between(b.date, a.date) or 1 for a, b in zip(ordered, ordered[1:])], dtype=float)
    savings = changes / gaps

    decomposition = linear_regression(previous, changes)
    savings_trend = linear_regression(np.arange(savings.size, dtype=float), savings).slope if savings.size >= 2 else 0.0
    volatility = float(np.std(rates, ddof=0)) if rates.size >= 2 else 0.0

    last = ordered[-1]
    net_worth = float(last.net_worth)
    points: list[TimeSeriesPoint] = []
    for month in range(1, horizon + 1):
        trend_savings = decomposition.intercept + savings_trend * month
        net_worth += trend_savings + net_worth * decomposition.slope

        std_error = volatility * abs(net_worth) * math.sqrt(month)
        points.append(
            TimeSeriesPoint(
                date=add_months(last.date, month),
                net_worth=round_half_up(net_worth),
                upper_bound=round_half_up(net_worth + Z_SCORE * std_error),
                lower_bound=round_half_up(net_worth - Z_SCORE * std_error),
                confidence=max(0.5, 0.95 - 0.05 * math.sqrt(month)),
            )
        )

    metrics = TimeSeriesMetrics(
        geometric_mean_growth=geometric_mean_growth(rates),
        average_savings=decomposition.intercept,
        market_return=decomposition.slope,
        savings_trend=savings_trend,
        volatility=volatility,
        r2=decomposition.r2,
    )
    return TimeSeriesForecast(method="timeseries", points=points, metrics=metrics)
