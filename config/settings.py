"""Centralised configuration handling for the forecast engine."""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Mapping

import streamlit as st
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SCENARIO = "realistic"
DEFAULT_HORIZON = 3
DEFAULT_CURRENCY_SYMBOL = "$"


def _streamlit_section(name: str) -> Mapping[str, Any] | None:
    """Return a mapping from Streamlit secrets for the given section."""

    try:
        if hasattr(st, "secrets") and name in st.secrets:
            section = st.secrets[name]
            if isinstance(section, Mapping):
                return section
            return dict(section)
    except Exception:  # pragma: no cover - accessing secrets may fail outside a Streamlit runtime
        return None
    return None


class Settings(BaseSettings):
    """Forecast defaults sourced from env vars and Streamlit secrets."""

    default_scenario: str = DEFAULT_SCENARIO
    default_horizon: int = DEFAULT_HORIZON
    currency_symbol: str = DEFAULT_CURRENCY_SYMBOL
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="FORECAST_", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """Load and cache application settings."""

    overrides: dict[str, Any] = {}
    secrets_section = _streamlit_section("forecast")
    if secrets_section:
        overrides = {
            "default_scenario": secrets_section.get("scenario"),
            "default_horizon": secrets_section.get("horizon"),
            "currency_symbol": secrets_section.get("currency_symbol"),
            "log_level": secrets_section.get("log_level"),
        }

    return Settings(**{k: v for k, v in overrides.items() if v is not None})
