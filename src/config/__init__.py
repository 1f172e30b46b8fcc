"""Configuration module for the end-to-end suite."""

from .settings import (
    BrowserSettings,
    MastodonSettings,
    ResilienceSettings,
    Settings,
    get_settings,
)

__all__ = [
    "BrowserSettings",
    "MastodonSettings",
    "ResilienceSettings",
    "Settings",
    "get_settings",
]
