"""SQLModel implementation of the settings repository."""

from __future__ import annotations

from typing import Callable, Optional

from sqlmodel import Session, select

from ...domain.setting_types import SettingType, coerce
from ...models.setting import Setting, utcnow


class SQLModelSettingsRepository:
    """SQLModel-based settings repository."""

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get(self, key: str) -> Optional[Setting]:
        """Retrieve a setting by key."""
        with self.session_factory() as session:
            obj = session.exec(select(Setting).where(Setting.key == key)).first()
            if obj:
                session.expunge(obj)
            return obj

    def exists(self, key: str) -> bool:
        """Return True when a setting with this key is stored."""
        with self.session_factory() as session:
            found = session.exec(select(Setting.key).where(Setting.key == key)).first()
            return found is not None

    def list_all(self) -> list[Setting]:
        """List all settings ordered by key."""
        with self.session_factory() as session:
            statement = select(Setting).order_by(Setting.key)  # type: ignore
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def list_by_category(self, category: Optional[str]) -> list[Setting]:
        """List settings in a category; None selects uncategorized settings."""
        with self.session_factory() as session:
            if category is None:
                condition = Setting.category.is_(None)  # type: ignore[union-attr]
            else:
                condition = Setting.category == category
            statement = select(Setting).where(condition).order_by(Setting.key)  # type: ignore
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def list_by_type(self, setting_type: SettingType) -> list[Setting]:
        """List settings carrying the given type tag."""
        with self.session_factory() as session:
            statement = (
                select(Setting)
                .where(Setting.type == SettingType.parse(setting_type).value)
                .order_by(Setting.key)  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def categories(self) -> list[str]:
        """Distinct category names, sorted."""
        with self.session_factory() as session:
            statement = (
                select(Setting.category)
                .where(Setting.category.is_not(None))  # type: ignore[union-attr]
                .distinct()
                .order_by(Setting.category)  # type: ignore
            )
            return [name for name in session.exec(statement).all() if name is not None]

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
        """Insert a setting or re-coerce the value of an existing one.

        An existing setting keeps its stored type and category; the raw value
        is decoded through the stored type and only value, description and
        updated_at change. The read and write share one transaction.
        """
        with self.session_factory() as session:
            existing = session.exec(select(Setting).where(Setting.key == key)).first()

            if existing:
                existing.value = coerce(existing.type, raw_value, strict=strict)
                if description is not None:
                    existing.description = description
                existing.updated_at = utcnow()
                setting = existing
                created = False
            else:
                tag = SettingType.parse(setting_type)
                setting = Setting(
                    key=key,
                    value=coerce(tag, raw_value, strict=strict),
                    type=tag.value,
                    category=category,
                    description=description,
                )
                created = True

            session.add(setting)
            session.commit()
            session.refresh(setting)
            session.expunge(setting)
            return setting, created

    def delete(self, key: str) -> bool:
        """Delete a setting by key; returns False when nothing was deleted."""
        with self.session_factory() as session:
            setting = session.exec(select(Setting).where(Setting.key == key)).first()
            if setting is None:
                return False
            session.delete(setting)
            session.commit()
            return True


__all__ = ["SQLModelSettingsRepository"]
