"""Typed, optionally categorized settings stored in the database."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, ClassVar, Optional

from sqlmodel import Field, SQLModel

from ..domain.setting_types import SettingType, decode, render

MAX_KEY_LENGTH = 255
MAX_CATEGORY_LENGTH = 255
MAX_DESCRIPTION_LENGTH = 500


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Setting(SQLModel, table=True):
    """Key-value record whose value text is interpreted through its type tag."""

    __tablename__: ClassVar[str] = "setting"

    key: str = Field(primary_key=True, max_length=MAX_KEY_LENGTH)
    value: str = Field(default="", nullable=False)
    type: str = Field(default=SettingType.STRING.value, nullable=False, max_length=16)
    category: Optional[str] = Field(default=None, index=True, max_length=MAX_CATEGORY_LENGTH)
    description: Optional[str] = Field(default=None, max_length=MAX_DESCRIPTION_LENGTH)
    created_at: datetime = Field(default_factory=utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=utcnow, nullable=False)

    @property
    def setting_type(self) -> SettingType:
        return SettingType.parse(self.type)

    @property
    def typed_value(self) -> Any:
        """Stored text decoded through the setting's own type."""
        return decode(self.type, self.value)

    @property
    def display_value(self) -> str:
        return render(self.type, self.typed_value)
