"""Adapters turning collaborator exports into forecast domain records."""

from __future__ import annotations

from datetime import date
from functools import lru_cache
from pathlib import Path
from typing import Any, Final, Optional

import pandas as pd

from core.models import BalanceSheetSnapshot, NetWorthSnapshot, RecurringCashFlow, Transaction

__all__ = [
    "load_transactions",
    "transactions_from_frame",
    "recurring_flows_from_frame",
    "snapshots_from_frame",
    "balance_sheet_from_accounts",
]


_CACHE_SIZE: Final[int] = 8
_TRANSACTION_COLUMNS: Final[tuple[str, ...]] = ("date", "amount")
_RECURRING_COLUMNS: Final[tuple[str, ...]] = ("name", "amount", "frequency")
_SNAPSHOT_COLUMNS: Final[tuple[str, ...]] = ("date", "net_worth")
ASSET_ACCOUNT_TYPES: Final[frozenset[str]] = frozenset({"checking", "savings", "investment"})
LIABILITY_ACCOUNT_TYPES: Final[frozenset[str]] = frozenset({"credit", "loan"})


def _require_columns(df: pd.DataFrame, columns: tuple[str, ...], label: str) -> None:
    missing = [column for column in columns if column not in df.columns]
    if missing:
        raise ValueError(f"{label} data is missing required columns: {', '.join(missing)}")


def _optional(value: Any) -> Any:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return None
    return value


def _optional_bool(value: Any) -> Optional[bool]:
    value = _optional(value)
    if value is None:
        return None
    if isinstance(value, str):
        return value.strip().lower() in {"true", "1", "yes", "y"}
    return bool(value)


def _as_date(value: Any) -> Optional[date]:
    value = _optional(value)
    if value is None:
        return None
    return pd.Timestamp(value).date()


@lru_cache(maxsize=_CACHE_SIZE)
def load_transactions(csv_path: str | Path) -> pd.DataFrame:
    """Return a parsed transactions dataframe for the given CSV path.

    Results are cached so repeated forecasts for the same export do not
    re-read the file.
    """

    path = Path(csv_path)
    if not path.exists():
        raise FileNotFoundError(f"CSV file not found: {path}")

    df = pd.read_csv(path, parse_dates=["date"])
    _require_columns(df, _TRANSACTION_COLUMNS, "Transaction")
    return df


def transactions_from_frame(df: pd.DataFrame) -> list[Transaction]:
    """Convert a transactions dataframe to :class:`Transaction` records.

    Missing ``is_income`` values stay ``None`` rather than being filled with
    ``False``; income recognition depends on an explicit flag.
    """

    _require_columns(df, _TRANSACTION_COLUMNS, "Transaction")
    transactions: list[Transaction] = []
    for row in df.to_dict(orient="records"):
        category = _optional(row.get("category_id"))
        transactions.append(
            Transaction(
                date=pd.Timestamp(row["date"]).date(),
                amount=float(row["amount"]),
                category_id=str(category) if category is not None else None,
                is_recurring=_optional_bool(row.get("is_recurring")),
                is_income=_optional_bool(row.get("is_income")),
            )
        )
    return transactions


def recurring_flows_from_frame(df: pd.DataFrame) -> list[RecurringCashFlow]:
    _require_columns(df, _RECURRING_COLUMNS, "Recurring")
    return [
        RecurringCashFlow(
            name=str(row["name"]),
            amount=float(row["amount"]),
            frequency=str(row["frequency"]).strip().lower(),
            next_date=_as_date(row.get("next_date")),
        )
        for row in df.to_dict(orient="records")
    ]


def snapshots_from_frame(df: pd.DataFrame) -> list[NetWorthSnapshot]:
    _require_columns(df, _SNAPSHOT_COLUMNS, "Snapshot")
    snapshots = []
    for row in df.to_dict(orient="records"):
        assets = _optional(row.get("total_assets"))
        liabilities = _optional(row.get("total_liabilities"))
        snapshots.append(
            NetWorthSnapshot(
                date=pd.Timestamp(row["date"]).date(),
                net_worth=float(row["net_worth"]),
                total_assets=float(assets) if assets is not None else None,
                total_liabilities=float(liabilities) if liabilities is not None else None,
            )
        )
    return snapshots


def balance_sheet_from_accounts(accounts: pd.DataFrame) -> BalanceSheetSnapshot:
    """Aggregate account balances into a balance-sheet snapshot.

    Expects ``balance`` and ``account_type`` columns. Liability balances are
    counted by magnitude regardless of the sign the institution reports.
    """

    _require_columns(accounts, ("balance", "account_type"), "Account")
    balances = accounts["balance"].fillna(0.0).astype(float)
    account_types = accounts["account_type"].astype(str).str.lower()

    assets = float(balances[account_types.isin(ASSET_ACCOUNT_TYPES)].sum())
    liabilities = float(balances[account_types.isin(LIABILITY_ACCOUNT_TYPES)].abs().sum())
    return BalanceSheetSnapshot(net_worth=assets - liabilities, total_assets=assets, total_liabilities=liabilities)
