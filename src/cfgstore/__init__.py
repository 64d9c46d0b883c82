"""Typed configuration settings store with a command line."""

from __future__ import annotations

from .config import BaseConfig
from .domain.setting_types import SettingType
from .services.settings_store import SettingsStore

__all__ = ["BaseConfig", "SettingType", "SettingsStore"]
