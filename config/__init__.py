"""Application configuration utilities."""

from .settings import DEFAULT_CURRENCY_SYMBOL, DEFAULT_HORIZON, DEFAULT_SCENARIO, Settings, get_settings

__all__ = [
    "DEFAULT_CURRENCY_SYMBOL",
    "DEFAULT_HORIZON",
    "DEFAULT_SCENARIO",
    "Settings",
    "get_settings",
]
