"""Setting type tags and the decode/encode/render functions for each tag.

A setting's type is fixed when it is created. Every later write decodes the
incoming raw string through the stored tag, so a setting never changes type.

Decoding is fail-soft by default: a malformed integer becomes 0, an
unrecognized boolean token becomes False and malformed JSON becomes None.
Passing ``strict=True`` raises :class:`SettingDecodeError` instead.
"""

from __future__ import annotations

import json
import math
import re
from enum import Enum
from typing import Any, Callable

from ..errors import SettingDecodeError


class SettingType(str, Enum):
    """Type tag recorded alongside every setting value."""

    STRING = "string"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    JSON = "json"

    @classmethod
    def parse(cls, value: "SettingType | str | None") -> "SettingType":
        """Return the tag for ``value``; ``None`` means the default string tag."""

        if value is None:
            return cls.STRING
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(t.value for t in cls)
            raise ValueError(f"Unknown setting type {value!r} (expected one of: {valid})") from None


TRUTHY_TOKENS = frozenset({"1", "true", "yes", "on"})
FALSY_TOKENS = frozenset({"0", "false", "no", "off", ""})

_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")
_WHOLE_INT = re.compile(r"\s*[+-]?[0-9]+\s*")


def decode_string(raw: str, *, strict: bool = False) -> str:
    return raw


def decode_integer(raw: str, *, strict: bool = False) -> int:
    """Parse the leading base-10 integer of ``raw``; no digits yields 0.

    Numbers beyond the interpreter's integer string conversion limit also
    yield 0.
    """

    if strict and not _WHOLE_INT.fullmatch(raw):
        raise SettingDecodeError(SettingType.INTEGER.value, raw, "not a base-10 integer")
    match = _LEADING_INT.match(raw)
    if not match:
        return 0
    try:
        return int(match.group(1))
    except ValueError as exc:
        if strict:
            raise SettingDecodeError(SettingType.INTEGER.value, raw, str(exc)) from exc
        return 0


def decode_boolean(raw: str, *, strict: bool = False) -> bool:
    """Recognize common truthy tokens; anything else is False."""

    token = raw.strip().lower()
    if token in TRUTHY_TOKENS:
        return True
    if strict and token not in FALSY_TOKENS:
        raise SettingDecodeError(SettingType.BOOLEAN.value, raw, "not a boolean token")
    return False


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def _parse_finite_float(text: str) -> float:
    value = float(text)
    if math.isinf(value):
        raise ValueError(f"{text} overflows a JSON number")
    return value


def decode_json(raw: str, *, strict: bool = False) -> Any:
    """Parse ``raw`` as JSON; malformed input yields None.

    NaN, Infinity and nesting deeper than the recursion limit count as
    malformed.
    """

    try:
        return json.loads(raw, parse_constant=_reject_constant, parse_float=_parse_finite_float)
    except (ValueError, RecursionError) as exc:
        if strict:
            raise SettingDecodeError(SettingType.JSON.value, raw, str(exc)) from exc
        return None


_DECODERS: dict[SettingType, Callable[..., Any]] = {
    SettingType.STRING: decode_string,
    SettingType.INTEGER: decode_integer,
    SettingType.BOOLEAN: decode_boolean,
    SettingType.JSON: decode_json,
}


def decode(setting_type: SettingType | str, raw: str, *, strict: bool = False) -> Any:
    """Decode a raw string through the decoder selected by ``setting_type``."""

    return _DECODERS[SettingType.parse(setting_type)](raw, strict=strict)


def _compact_json(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, allow_nan=False)


def encode(setting_type: SettingType | str, value: Any) -> str:
    """Return the canonical storage text for a typed value."""

    tag = SettingType.parse(setting_type)
    if tag is SettingType.BOOLEAN:
        return "1" if value else "0"
    if tag is SettingType.INTEGER:
        return str(int(value))
    if tag is SettingType.JSON:
        return _compact_json(value)
    return str(value)


def coerce(setting_type: SettingType | str, raw: str, *, strict: bool = False) -> str:
    """Decode ``raw`` and re-encode it as canonical storage text."""

    return encode(setting_type, decode(setting_type, raw, strict=strict))


def render(setting_type: SettingType | str, value: Any) -> str:
    """Return the display text for a typed value."""

    tag = SettingType.parse(setting_type)
    if tag is SettingType.BOOLEAN:
        return "true" if value else "false"
    if tag is SettingType.JSON:
        return _compact_json(value)
    return str(value)


__all__ = [
    "FALSY_TOKENS",
    "SettingType",
    "TRUTHY_TOKENS",
    "coerce",
    "decode",
    "decode_boolean",
    "decode_integer",
    "decode_json",
    "decode_string",
    "encode",
    "render",
]
