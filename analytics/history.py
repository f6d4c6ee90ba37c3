"""Historical cash-flow statistics feeding the net worth projection."""

from __future__ import annotations

import logging
from datetime import date
from typing import Final, Iterable

import numpy as np
import pandas as pd

from core.dates import add_months
from core.models import HistoricalStats, RecurringCashFlow, Transaction

__all__ = [
    "ANALYSIS_WINDOW_MONTHS",
    "DAYS_PER_MONTH",
    "analyze_history",
    "build_transactions_frame",
    "compute_category_spending",
    "compute_volatility",
    "monthly_equivalent",
    "summarize_recurring_flows",
]

logger = logging.getLogger(__name__)

ANALYSIS_WINDOW_MONTHS: Final[int] = 3
DAYS_PER_MONTH: Final[float] = 30.44

_FRAME_COLUMNS: Final[tuple[str, ...]] = ("date", "amount", "category_id", "is_income")


def build_transactions_frame(transactions: Iterable[Transaction]) -> pd.DataFrame:
    """Return a dataframe with one row per transaction and a datetime ``date`` column."""

    records = [
        {
            "date": txn.date,
            "amount": float(txn.amount),
            "category_id": txn.category_id,
            # Only an explicit flag marks income; an unflagged inflow is neither income nor expense.
            "is_income": txn.is_income is True,
        }
        for txn in transactions
    ]
    frame = pd.DataFrame(records, columns=list(_FRAME_COLUMNS))
    frame["date"] = pd.to_datetime(frame["date"]).dt.normalize()
    frame["amount"] = frame["amount"].astype(float)
    frame["is_income"] = frame["is_income"].astype(bool)
    return frame


def monthly_equivalent(amount: float, frequency: str) -> float:
    """Convert a recurring amount to its monthly equivalent.

    Unknown frequencies are treated as already monthly. This keeps partially
    populated recurring data usable, at the cost of silently mis-scaling any
    flow whose cadence was recorded with an unexpected label.
    """

    if frequency == "daily":
        return amount * 30
    if frequency == "weekly":
        return amount * 4.33
    if frequency == "monthly":
        return amount
    if frequency == "yearly":
        return amount / 12
    logger.warning(
        "Unrecognised recurring frequency; treating as monthly",
        extra={"frequency": frequency, "amount": amount},
    )
    return amount


def summarize_recurring_flows(flows: Iterable[RecurringCashFlow]) -> tuple[float, float]:
    """Return ``(recurring_income, recurring_expenses)`` as monthly totals."""

    income = 0.0
    expenses = 0.0
    for flow in flows:
        amount = float(flow.amount)
        if amount > 0:
            income += monthly_equivalent(amount, flow.frequency)
        elif amount < 0:
            expenses += abs(monthly_equivalent(amount, flow.frequency))
    return income, expenses


def compute_category_spending(expenses: pd.DataFrame) -> dict[str, float]:
    """Total absolute spend per category id, ignoring uncategorised rows."""

    if expenses.empty:
        return {}
    categorised = expenses[expenses["category_id"].notna() & (expenses["category_id"] != "")]
    if categorised.empty:
        return {}
    totals = categorised["amount"].abs().groupby(categorised["category_id"]).sum()
    return {str(key): float(value) for key, value in totals.items()}


def compute_volatility(window: pd.DataFrame) -> float:
    """Population standard deviation of signed net flow per calendar month."""

    if window.empty:
        return 0.0
    monthly_net = window.groupby(window["date"].dt.to_period("M"))["amount"].sum()
    if len(monthly_net) < 2:
        return 0.0
    return float(np.std(monthly_net.to_numpy(dtype=float), ddof=0))


def analyze_history(
    transactions: Iterable[Transaction],
    recurring_flows: Iterable[RecurringCashFlow],
    as_of: date,
) -> HistoricalStats:
    """Reduce the trailing transaction window and recurring flows to monthly statistics.

    Parameters
    ----------
    transactions:
        Ledger entries already scoped to the requesting user.
    recurring_flows:
        Confirmed recurring definitions, independent of the ledger window.
    as_of:
        Reference date; the window covers the three months leading up to it.

    Returns
    -------
    HistoricalStats
        Averages, recurring totals, per-category spend and volatility. Sparse or
        empty input yields zero averages rather than an error.
    """

    window_start = pd.Timestamp(add_months(as_of, -ANALYSIS_WINDOW_MONTHS))
    frame = build_transactions_frame(transactions)
    window = frame[frame["date"] >= window_start]

    # Expenses are recognised by sign alone; income also needs the explicit flag.
    income = window[(window["amount"] > 0) & window["is_income"]]
    expenses = window[window["amount"] < 0]

    total_income = float(income["amount"].sum())
    total_expenses = float(expenses["amount"].abs().sum())

    earliest = window["date"].min() if not window.empty else window_start
    day_span = (pd.Timestamp(as_of) - earliest) / pd.Timedelta(days=1)
    months_in_period = max(1.0, day_span / DAYS_PER_MONTH)

    recurring_income, recurring_expenses = summarize_recurring_flows(recurring_flows)

    return HistoricalStats(
        avg_monthly_income=total_income / months_in_period,
        avg_monthly_expenses=total_expenses / months_in_period,
        recurring_income=recurring_income,
        recurring_expenses=recurring_expenses,
        volatility=compute_volatility(window),
        months_in_period=months_in_period,
        total_income=total_income,
        total_expenses=total_expenses,
        transaction_count=int(len(window)),
        category_spending=compute_category_spending(expenses),
    )
