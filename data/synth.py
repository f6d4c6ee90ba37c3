"""Synthetic household ledger generator for forecast development and testing.

Produces a few months of salary, rent, bills and day-to-day spend ending at a
chosen date, plus the matching confirmed recurring flows and a balance sheet.
Output is deterministic for a given ``seed``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from core.dates import add_months
from core.models import BalanceSheetSnapshot, RecurringCashFlow, Transaction


@dataclass(frozen=True)
class SpendProfile:
    """Metadata describing a discretionary spend category."""

    category_id: str
    mean_amount: float
    spread: float
    weekly_count: float


DISCRETIONARY: Sequence[SpendProfile] = (
    SpendProfile("groceries", 62.0, 0.25, 2.0),
    SpendProfile("eating_out", 28.0, 0.4, 1.2),
    SpendProfile("transport", 14.0, 0.3, 3.0),
    SpendProfile("shopping", 55.0, 0.6, 0.6),
)

FIXED_MONTHLY: Sequence[Tuple[str, str, float, int]] = (
    ("Rent", "rent", -1650.0, 1),
    ("Electricity", "utilities", -95.0, 8),
    ("Broadband", "utilities", -45.0, 12),
    ("Streaming", "subscriptions", -15.99, 20),
)

SALARY_NAME = "Salary"
SALARY_DAY = 25


def generate_synthetic_history(
    end_date: date,
    *,
    months: int = 3,
    salary: float = 4200.0,
    seed: Optional[int] = None,
    include_transfers: bool = True,
) -> List[Transaction]:
    """Generate a ledger covering ``months`` calendar months up to ``end_date``.

    Salary is flagged ``is_income=True``. When ``include_transfers`` is set, a
    monthly savings transfer-in without an income flag is added as well; it
    must not count towards income.
    """

    if months <= 0:
        raise ValueError("months must be a positive integer")

    rng = np.random.default_rng(seed)
    start = add_months(end_date, -months)
    ledger: List[Transaction] = []

    anchor = start.replace(day=1)
    while anchor <= end_date:
        ledger.extend(_monthly_fixed(anchor, salary, include_transfers))
        anchor = add_months(anchor, 1)

    for day in pd.date_range(start, end_date, freq="D"):
        for profile in DISCRETIONARY:
            if rng.random() < profile.weekly_count / 7:
                amount = max(1.0, rng.normal(profile.mean_amount, profile.mean_amount * profile.spread))
                ledger.append(
                    Transaction(
                        date=day.date(),
                        amount=-round(float(amount), 2),
                        category_id=profile.category_id,
                        is_recurring=False,
                    )
                )

    ledger = [txn for txn in ledger if start <= txn.date <= end_date]
    ledger.sort(key=lambda txn: (txn.date, txn.amount))
    return ledger


def synthetic_recurring_flows(salary: float = 4200.0) -> List[RecurringCashFlow]:
    flows = [RecurringCashFlow(name=SALARY_NAME, amount=salary, frequency="monthly")]
    flows.extend(
        RecurringCashFlow(name=name, amount=amount, frequency="monthly") for name, _, amount, _ in FIXED_MONTHLY
    )
    flows.append(RecurringCashFlow(name="Car insurance", amount=-780.0, frequency="yearly"))
    return flows


def synthetic_balance_sheet(assets: float = 42_000.0, liabilities: float = 12_500.0) -> BalanceSheetSnapshot:
    return BalanceSheetSnapshot(net_worth=assets - liabilities, total_assets=assets, total_liabilities=liabilities)


def _monthly_fixed(month_start: date, salary: float, include_transfers: bool) -> List[Transaction]:
    entries = [
        Transaction(
            date=_clamp_day(month_start, SALARY_DAY),
            amount=salary,
            category_id="income",
            is_recurring=True,
            is_income=True,
        )
    ]
    for _, category_id, amount, day in FIXED_MONTHLY:
        entries.append(
            Transaction(
                date=_clamp_day(month_start, day),
                amount=amount,
                category_id=category_id,
                is_recurring=True,
            )
        )
    if include_transfers:
        entries.append(Transaction(date=_clamp_day(month_start, 15), amount=250.0))
    return entries


def _clamp_day(month_start: date, day: int) -> date:
    next_month = add_months(month_start, 1)
    return min(month_start.replace(day=1) + timedelta(days=day - 1), next_month - timedelta(days=1))
