"""Scenario multiplier lookup and forecast request validation."""

from __future__ import annotations

from enum import Enum
from typing import Final, Mapping

from core.models import ScenarioMultipliers

__all__ = [
    "Scenario",
    "ForecastRequestError",
    "SCENARIO_MULTIPLIERS",
    "SCENARIO_DESCRIPTIONS",
    "VALID_HORIZONS",
    "resolve_scenario",
    "resolve_horizon",
    "scenario_multipliers",
]


class ForecastRequestError(ValueError):
    """Raised when a forecast is requested with an unsupported scenario or horizon."""


class Scenario(str, Enum):
    CONSERVATIVE = "conservative"
    REALISTIC = "realistic"
    OPTIMISTIC = "optimistic"


SCENARIO_MULTIPLIERS: Final[Mapping[Scenario, ScenarioMultipliers]] = {
    Scenario.CONSERVATIVE: ScenarioMultipliers(income=0.95, expenses=1.10, growth_rate=-0.02),
    Scenario.REALISTIC: ScenarioMultipliers(income=1.0, expenses=1.0, growth_rate=0.01),
    Scenario.OPTIMISTIC: ScenarioMultipliers(income=1.05, expenses=0.95, growth_rate=0.03),
}

SCENARIO_DESCRIPTIONS: Final[Mapping[Scenario, str]] = {
    Scenario.CONSERVATIVE: "Assumes 5% lower income and 10% higher expenses, with slight market decline",
    Scenario.REALISTIC: "Based on your current spending patterns and income trends",
    Scenario.OPTIMISTIC: "Assumes 5% higher income and 5% lower expenses, with market growth",
}

VALID_HORIZONS: Final[tuple[int, ...]] = (1, 3, 6, 12)


def resolve_scenario(value: Scenario | str) -> Scenario:
    """Return the :class:`Scenario` for ``value`` or raise ``ForecastRequestError``."""

    if isinstance(value, Scenario):
        return value
    if isinstance(value, str):
        try:
            return Scenario(value)
        except ValueError:
            pass
    valid = ", ".join(member.value for member in Scenario)
    raise ForecastRequestError(f"Unsupported scenario {value!r}; expected one of: {valid}")


def resolve_horizon(value: int) -> int:
    """Return ``value`` when it is a supported horizon in months."""

    if isinstance(value, bool) or not isinstance(value, int) or value not in VALID_HORIZONS:
        valid = ", ".join(str(h) for h in VALID_HORIZONS)
        raise ForecastRequestError(f"Unsupported horizon {value!r}; expected one of: {valid}")
    return value


def scenario_multipliers(scenario: Scenario | str) -> ScenarioMultipliers:
    return SCENARIO_MULTIPLIERS[resolve_scenario(scenario)]
