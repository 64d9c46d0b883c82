"""Typed settings store used by the command handlers.

The store is an explicit instance built around a repository and passed to
whoever needs it; there is no module-level singleton.
"""

from __future__ import annotations

from typing import Any, Optional

from ..domain.repositories import SettingsRepository
from ..domain.setting_types import SettingType, decode
from ..errors import SettingDecodeError, SettingNotFoundError
from ..logging_config import get_logger
from ..models.setting import (
    MAX_CATEGORY_LENGTH,
    MAX_DESCRIPTION_LENGTH,
    MAX_KEY_LENGTH,
    Setting,
)

logger = get_logger("settings_store")

_ANY = object()


def _normalize_key(key: str) -> str:
    normalized = (key or "").strip()
    if not normalized:
        raise ValueError("Setting key must not be empty")
    if len(normalized) > MAX_KEY_LENGTH:
        raise ValueError(f"Setting key must be at most {MAX_KEY_LENGTH} characters")
    return normalized


def _normalize_category(category: Optional[str]) -> Optional[str]:
    """Treat blank category labels as uncategorized."""

    if category is None:
        return None
    stripped = category.strip()
    if len(stripped) > MAX_CATEGORY_LENGTH:
        raise ValueError(f"Category must be at most {MAX_CATEGORY_LENGTH} characters")
    return stripped or None


def _check_description(description: Optional[str]) -> Optional[str]:
    if description is not None and len(description) > MAX_DESCRIPTION_LENGTH:
        raise ValueError(f"Description must be at most {MAX_DESCRIPTION_LENGTH} characters")
    return description


class SettingsStore:
    """Typed key-value store with category tagging and type-aware coercion.

    Examples:
        store = SettingsStore(SQLModelSettingsRepository(session_factory))
        store.set("mail.port", "25", category="mail", setting_type="integer")
        store.get("mail.port")          # 25
        store.set("mail.port", "2525")  # still an integer
    """

    def __init__(self, repository: SettingsRepository, *, strict: bool = False):
        self.repository = repository
        self.strict = strict

    # ---- reads ----
    def get(self, key: str, default: Any = None) -> Any:
        """Return the typed value for ``key`` or ``default`` when it is absent.

        A stored JSON null, False or 0 is returned as-is; use :meth:`has` to
        tell those apart from a missing key.
        """
        setting = self.repository.get(_normalize_key(key))
        if setting is None:
            return default
        return setting.typed_value

    def require(self, key: str) -> Any:
        """Return the typed value for ``key``.

        Raises:
            SettingNotFoundError: If the key is absent
        """
        setting = self.repository.get(_normalize_key(key))
        if setting is None:
            raise SettingNotFoundError(key)
        return setting.typed_value

    def get_setting(self, key: str) -> Optional[Setting]:
        return self.repository.get(_normalize_key(key))

    def display(self, key: str) -> Optional[str]:
        """Return the display text of a stored value, or None when absent."""
        setting = self.repository.get(_normalize_key(key))
        return setting.display_value if setting else None

    def has(self, key: str) -> bool:
        return self.repository.exists(_normalize_key(key))

    def all(self) -> dict[str, Any]:
        """Snapshot of every setting as key -> typed value."""
        return {s.key: s.typed_value for s in self.repository.list_all()}

    def category(self, name: Optional[str]) -> dict[str, Any]:
        """Snapshot restricted to one category; None selects uncategorized settings."""
        rows = self.repository.list_by_category(_normalize_category(name))
        return {s.key: s.typed_value for s in rows}

    def categories(self) -> list[str]:
        return self.repository.categories()

    def settings(
        self,
        category: Any = _ANY,
        setting_type: SettingType | str | None = None,
    ) -> list[Setting]:
        """Full records ordered by key, optionally filtered by category and type.

        Omitting ``category`` lists every category; passing None lists only
        uncategorized settings.
        """
        tag = SettingType.parse(setting_type) if setting_type is not None else None
        if category is _ANY:
            if tag is not None:
                return self.repository.list_by_type(tag)
            return self.repository.list_all()
        rows = self.repository.list_by_category(_normalize_category(category))
        if tag is not None:
            rows = [s for s in rows if s.setting_type is tag]
        return rows

    # ---- writes ----
    def set(
        self,
        key: str,
        raw_value: str,
        category: Optional[str] = None,
        setting_type: SettingType | str | None = None,
        description: Optional[str] = None,
    ) -> Setting:
        """Create or update a setting from a raw string value.

        A new key is created with ``setting_type`` (default string) and
        ``category``. For an existing key the raw value is decoded through the
        stored type; the supplied type and category are ignored.

        Raises:
            SettingDecodeError: In strict mode, when the value cannot be decoded
            ValueError: If the key is empty, a field exceeds its length limit,
                or the type tag is unknown
        """
        key = _normalize_key(key)
        tag = SettingType.parse(setting_type)
        setting, created = self.repository.upsert(
            key,
            raw_value,
            setting_type=tag,
            category=_normalize_category(category),
            description=_check_description(description),
            strict=self.strict,
        )

        if created:
            logger.info(
                "Setting created",
                extra={"key": key, "type": setting.type, "category": setting.category},
            )
        else:
            if setting_type is not None and tag is not setting.setting_type:
                logger.debug(
                    "Ignoring supplied type for existing setting",
                    extra={"key": key, "supplied": tag.value, "stored": setting.type},
                )
            logger.info("Setting updated", extra={"key": key, "type": setting.type})

        self._warn_on_lossy_decode(setting, raw_value)
        return setting

    def forget(self, key: str) -> None:
        """Delete a setting.

        Raises:
            SettingNotFoundError: If the key is absent
        """
        key = _normalize_key(key)
        if not self.repository.delete(key):
            raise SettingNotFoundError(key)
        logger.info("Setting deleted", extra={"key": key})

    def _warn_on_lossy_decode(self, setting: Setting, raw_value: str) -> None:
        """Log when fail-soft decoding substituted a default for the raw input."""

        if self.strict:
            return
        try:
            decode(setting.type, raw_value, strict=True)
        except SettingDecodeError:
            logger.warning(
                "Value coerced by fail-soft decoding",
                extra={
                    "key": setting.key,
                    "type": setting.type,
                    "raw": raw_value,
                    "stored": setting.display_value,
                },
            )


__all__ = ["SettingsStore"]
