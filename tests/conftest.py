"""Shared fixtures for the forecast engine test suite."""

from __future__ import annotations

import sys
from datetime import date
from pathlib import Path

import pytest
import streamlit as st

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config import get_settings
from core.models import BalanceSheetSnapshot, HistoricalStats, Transaction


@pytest.fixture(autouse=True)
def clear_streamlit_secrets(monkeypatch):
    """Provide an empty secrets mapping so tests don't rely on Streamlit runtime."""

    monkeypatch.setattr(st, "secrets", {}, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def as_of() -> date:
    return date(2024, 4, 15)


@pytest.fixture()
def snapshot() -> BalanceSheetSnapshot:
    return BalanceSheetSnapshot(net_worth=10_000.0, total_assets=15_000.0, total_liabilities=5_000.0)


@pytest.fixture()
def example_stats() -> HistoricalStats:
    return HistoricalStats(
        avg_monthly_income=5_000.0,
        avg_monthly_expenses=4_000.0,
        recurring_income=0.0,
        recurring_expenses=0.0,
        volatility=0.0,
        months_in_period=3.0,
    )


@pytest.fixture()
def steady_ledger() -> list[Transaction]:
    """Three months of flagged salary and rent, net positive every month."""

    ledger: list[Transaction] = []
    for month in (2, 3, 4):
        ledger.append(Transaction(date=date(2024, month, 1), amount=5_000.0, category_id="salary", is_income=True))
        ledger.append(Transaction(date=date(2024, month, 3), amount=-3_000.0, category_id="rent"))
    return ledger
