"""Domain types and repository protocols."""

from .setting_types import SettingType

__all__ = ["SettingType"]
