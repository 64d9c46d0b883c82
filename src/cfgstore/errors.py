"""Exception classes raised by the settings store.

Missing keys and strict-mode decode failures are ordinary, recoverable
outcomes; the command layer turns them into user-facing messages and a
non-zero exit code.
"""

from __future__ import annotations


class SettingsError(Exception):
    """Base class for settings store errors."""


class SettingNotFoundError(SettingsError):
    """A key was required to exist but is absent."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Setting not found: {key}")
        self.key = key


class SettingExistsError(SettingsError):
    """A create-only flow hit a key that is already stored."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Setting already exists: {key}")
        self.key = key


class SettingDecodeError(SettingsError, ValueError):
    """Raw input could not be decoded through a setting type (strict mode only)."""

    def __init__(self, setting_type: str, raw: str, reason: str | None = None) -> None:
        message = f"Cannot decode {raw!r} as {setting_type}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.setting_type = setting_type
        self.raw = raw


__all__ = [
    "SettingDecodeError",
    "SettingExistsError",
    "SettingNotFoundError",
    "SettingsError",
]
