"""Settings repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.setting import Setting
from ..setting_types import SettingType


class SettingsRepository(Protocol):
    """Repository for managing setting records."""

    def get(self, key: str) -> Optional[Setting]:
        """Retrieve a setting by key."""
        ...

    def exists(self, key: str) -> bool:
        """Return True when a setting with this key is stored."""
        ...

    def list_all(self) -> list[Setting]:
        """List all settings ordered by key."""
        ...

    def list_by_category(self, category: Optional[str]) -> list[Setting]:
        """List settings in a category; None selects uncategorized settings."""
        ...

    def list_by_type(self, setting_type: SettingType) -> list[Setting]:
        """List settings carrying the given type tag."""
        ...

    def categories(self) -> list[str]:
        """Distinct category names."""
        ...

    def upsert(
        self,
        key: str,
        raw_value: str,
        *,
        setting_type: SettingType,
        category: Optional[str] = None,
        description: Optional[str] = None,
        strict: bool = False,
    ) -> tuple[Setting, bool]:
        """Create or update a setting; returns (setting, created)."""
        ...

    def delete(self, key: str) -> bool:
        """Delete a setting by key; returns False when nothing was deleted."""
        ...
