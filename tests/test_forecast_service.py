"""Tests for the forecast service entry points."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, timedelta
from decimal import Decimal

import pytest

from analytics.scenarios import ForecastRequestError, Scenario
from config import get_settings
from core.forecast_service import (
    build_forecast_frame,
    compare_scenarios,
    compute_forecast,
    compute_snapshot_forecast,
    forecast_to_payload,
    summarize_forecast,
)
from core.formatting import build_forecast_insights, format_currency, format_percent
from core.models import BalanceSheetSnapshot, NetWorthSnapshot, RecurringCashFlow, Transaction
from data.synth import generate_synthetic_history, synthetic_balance_sheet, synthetic_recurring_flows


def test_compute_forecast_is_deterministic(as_of):
    ledger = generate_synthetic_history(as_of, seed=7)
    flows = synthetic_recurring_flows()
    balance = synthetic_balance_sheet()

    first = compute_forecast(ledger, flows, balance, "realistic", 12, as_of=as_of)
    second = compute_forecast(ledger, flows, balance, "realistic", 12, as_of=as_of)

    assert first == second


@pytest.mark.parametrize("horizon", [1, 3, 6, 12])
def test_point_count_matches_horizon(steady_ledger, snapshot, as_of, horizon):
    result = compute_forecast(steady_ledger, [], snapshot, "realistic", horizon, as_of=as_of)

    assert result.horizon == horizon
    assert len(result.points) == horizon + 1
    assert result.points[0].net_worth == round(snapshot.net_worth)
    assert result.points[0].confidence == 1.0


def test_scenario_ordering_with_positive_cash_flow(steady_ledger, snapshot, as_of):
    results = compare_scenarios(steady_ledger, [], snapshot, 12, as_of=as_of)

    optimistic = results["optimistic"].points[-1].net_worth
    realistic = results["realistic"].points[-1].net_worth
    conservative = results["conservative"].points[-1].net_worth
    assert optimistic >= realistic >= conservative
    assert set(results) == {scenario.value for scenario in Scenario}


def test_assumptions_adjust_expenses_only(steady_ledger, snapshot, as_of):
    flows = [RecurringCashFlow(name="Gym", amount=-40.0, frequency="monthly")]

    result = compute_forecast(steady_ledger, flows, snapshot, Scenario.CONSERVATIVE, 3, as_of=as_of)

    stats = result.stats
    assert stats is not None
    assert result.scenario == "conservative"
    assert result.assumptions.avg_monthly_income == pytest.approx(stats.avg_monthly_income)
    assert result.assumptions.avg_monthly_expenses == pytest.approx(stats.avg_monthly_expenses * 1.10)
    assert result.assumptions.recurring_expenses == pytest.approx(40.0)
    assert result.assumptions.growth_rate == pytest.approx(-0.02)
    assert stats.category_spending == pytest.approx({"rent": 9_000.0})


def test_band_symmetry_after_anchor(steady_ledger, snapshot, as_of):
    result = compute_forecast(steady_ledger, [], snapshot, "optimistic", 12, as_of=as_of)

    for point in result.points[1:]:
        assert point.confidence_upper - point.net_worth == point.net_worth - point.confidence_lower
        assert 0.5 <= point.confidence <= 0.95


def test_empty_history_still_applies_growth(snapshot, as_of):
    result = compute_forecast([], [], snapshot, "realistic", 12, as_of=as_of)

    assert result.assumptions.avg_monthly_income == 0.0
    assert result.assumptions.avg_monthly_expenses == 0.0
    assert result.points[-1].net_worth == round(10_000.0 * (1 + 0.01 / 12) ** 12)


def test_volatility_floor_decays_by_month_only(snapshot, as_of):
    single_month = [
        Transaction(date=date(2024, 4, 1), amount=9_000.0, is_income=True),
        Transaction(date=date(2024, 4, 2), amount=-100.0),
    ]

    result = compute_forecast(single_month, [], snapshot, "realistic", 3, as_of=as_of)

    assert [point.confidence for point in result.points[1:]] == pytest.approx([0.90, 0.85, 0.80])


def test_invalid_requests_are_rejected(steady_ledger, snapshot, as_of):
    with pytest.raises(ForecastRequestError):
        compute_forecast(steady_ledger, [], snapshot, "bullish", 3, as_of=as_of)
    with pytest.raises(ForecastRequestError):
        compute_forecast(steady_ledger, [], snapshot, "realistic", 4, as_of=as_of)


def test_compute_forecast_logs_completion(steady_ledger, snapshot, as_of, caplog):
    with caplog.at_level(logging.INFO, logger="core.forecast_service"):
        compute_forecast(steady_ledger, [], snapshot, "realistic", 3, as_of=as_of)

    record = next(r for r in caplog.records if r.getMessage() == "Forecast computed")
    assert record.scenario == "realistic"
    assert record.horizon == 3


def test_summarize_forecast(steady_ledger, snapshot, as_of):
    result = compute_forecast(steady_ledger, [], snapshot, "realistic", 6, as_of=as_of)

    summary = summarize_forecast(result)

    assert summary["first_net_worth"] == 10_000
    assert summary["net_worth_change"] == result.points[-1].net_worth - 10_000
    assert summary["percent_change"] == pytest.approx(summary["net_worth_change"] / 10_000 * 100)
    assert summary["description"].startswith("Based on your current")


def test_summarize_forecast_guards_small_and_extreme_bases(steady_ledger, snapshot, as_of):
    result = compute_forecast(steady_ledger, [], replace(snapshot, net_worth=50.0), "realistic", 12, as_of=as_of)
    assert summarize_forecast(result)["percent_change"] == 0.0

    result = compute_forecast(steady_ledger, [], replace(snapshot, net_worth=100.0), "realistic", 12, as_of=as_of)
    assert summarize_forecast(result)["percent_change"] == 999.0


def test_build_forecast_frame(steady_ledger, snapshot, as_of):
    result = compute_forecast(steady_ledger, [], snapshot, "realistic", 3, as_of=as_of)

    frame = build_forecast_frame(result)

    assert len(frame) == 4
    assert frame["Series"].tolist() == ["Actual", "Projected", "Projected", "Projected"]
    assert frame["NetWorth"].tolist() == [point.net_worth for point in result.points]
    assert (frame["Scenario"] == "realistic").all()


def test_forecast_to_payload_uses_dashboard_keys(steady_ledger, snapshot, as_of):
    result = compute_forecast(steady_ledger, [], snapshot, "realistic", 1, as_of=as_of)

    payload = forecast_to_payload(result)

    assert payload["scenario"] == "realistic"
    assert payload["points"][0]["date"] == "2024-04-15"
    assert payload["points"][1]["date"] == "2024-05-15"
    assert set(payload["points"][1]) == {
        "date",
        "netWorth",
        "assets",
        "liabilities",
        "confidence",
        "confidenceUpper",
        "confidenceLower",
    }
    assert payload["assumptions"]["growthRate"] == pytest.approx(0.01)


def test_forecast_insights_render_currency(steady_ledger, snapshot, as_of):
    result = compute_forecast(steady_ledger, [], snapshot, "realistic", 3, as_of=as_of)

    insights = build_forecast_insights(result, summarize_forecast(result), symbol="£")

    assert insights[0].startswith("Projected net worth in 3 months: <strong>£")
    assert "confidence" in insights[1]
    assert "per month" in insights[-1]


@pytest.mark.parametrize(
    ("scenario", "expense", "expected"),
    [
        ("conservative", -6_000.0, "You add about <strong>$660</strong> per month."),
        ("realistic", -6_000.0, "You add about <strong>$1,015</strong> per month."),
        ("optimistic", -6_000.0, "You add about <strong>$1,268</strong> per month."),
        ("conservative", -8_500.0, "Spending exceeds income by about <strong>$271</strong> per month."),
    ],
)
def test_forecast_insights_report_projected_cash_flow(snapshot, as_of, scenario, expense, expected):
    ledger = [
        Transaction(date=as_of - timedelta(days=90), amount=9_000.0, is_income=True),
        Transaction(date=as_of - timedelta(days=90), amount=expense),
    ]
    result = compute_forecast(ledger, [], snapshot, scenario, 1, as_of=as_of)

    insights = build_forecast_insights(result, summarize_forecast(result), symbol="$")

    assert insights[-1] == expected


def test_format_helpers():
    assert format_currency(-1234.4) == "-$1,234"
    assert format_currency(987654.6, "£") == "£987,655"
    assert format_percent(12.345) == "+12.3%"
    assert format_percent(-4.0) == "-4.0%"


def test_snapshot_forecast_seeds_from_current_balance(snapshot, as_of):
    forecast = compute_snapshot_forecast([], 3, current=snapshot, as_of=as_of)

    assert forecast.method == "behavioral"
    assert [point.net_worth for point in forecast.points] == [10_000, 10_000, 10_000]
    assert forecast.points[0].date == date(2024, 5, 15)


def test_snapshot_forecast_uses_history_when_available(as_of):
    history = [
        NetWorthSnapshot(date=date(2024, 1, 1), net_worth=1_000.0),
        NetWorthSnapshot(date=date(2024, 2, 1), net_worth=1_100.0),
        NetWorthSnapshot(date=date(2024, 3, 1), net_worth=1_200.0),
    ]

    forecast = compute_snapshot_forecast(history, 1, as_of=as_of)

    assert forecast.method == "timeseries"
    assert forecast.points[0].net_worth == 1_300


def test_snapshot_forecast_validates_horizon():
    with pytest.raises(ForecastRequestError):
        compute_snapshot_forecast([], 5)


def test_scenario_and_horizon_default_to_settings(steady_ledger, snapshot, as_of, monkeypatch):
    result = compute_forecast(steady_ledger, [], snapshot, as_of=as_of)
    assert (result.scenario, result.horizon) == ("realistic", 3)

    monkeypatch.setenv("FORECAST_DEFAULT_SCENARIO", "optimistic")
    monkeypatch.setenv("FORECAST_DEFAULT_HORIZON", "12")
    get_settings.cache_clear()

    result = compute_forecast(steady_ledger, [], snapshot, as_of=as_of)
    assert (result.scenario, result.horizon) == ("optimistic", 12)
    assert "$" in build_forecast_insights(result, summarize_forecast(result))[0]


def test_decimal_amounts_are_accepted(as_of):
    ledger = [
        Transaction(date=date(2024, 3, 1), amount=Decimal("5000.00"), is_income=True),
        Transaction(date=date(2024, 3, 3), amount=Decimal("-3000.00")),
    ]
    flows = [RecurringCashFlow(name="Rent", amount=Decimal("-1200.00"), frequency="weekly")]
    balance = BalanceSheetSnapshot(
        net_worth=Decimal("10000.00"),
        total_assets=Decimal("15000.00"),
        total_liabilities=Decimal("5000.00"),
    )

    result = compute_forecast(ledger, flows, balance, "realistic", 3, as_of=as_of)
    expected = compute_forecast(
        [replace(txn, amount=float(txn.amount)) for txn in ledger],
        [replace(flow, amount=float(flow.amount)) for flow in flows],
        BalanceSheetSnapshot(net_worth=10_000.0, total_assets=15_000.0, total_liabilities=5_000.0),
        "realistic",
        3,
        as_of=as_of,
    )

    assert result.points == expected.points
    assert result.assumptions.recurring_expenses == pytest.approx(5_196.0)


def test_snapshot_forecast_fallback_accepts_decimal(as_of):
    history = [NetWorthSnapshot(date=date(2024, 3, 1), net_worth=Decimal("2500.00"))]

    forecast = compute_snapshot_forecast(history, 1, as_of=as_of)

    assert forecast.points[0].upper_bound == 2_750
    assert forecast.points[0].lower_bound == 2_250
