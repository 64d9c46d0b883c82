"""Service layer for the settings store."""

from .settings_store import SettingsStore

__all__ = ["SettingsStore"]
