"""Application option values as specified by a source, with type conversion."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

_NAME_DELIMITERS = re.compile(r"[:.]")
_INTEGER = re.compile(r"\s*[+-]?\d+")

_CONVERTIBLE_TYPES = (str, int, float, bool)
_NATIVE_TYPES = (str, int, float, bool, bytes, list)


class ConversionError(ValueError):
    """Raised when an option value cannot be converted to the requested type."""


@dataclass(frozen=True)
class OptionSourceInfo:
    """Where an option value came from: the kind of source and, if any, its location."""

    source: str = "unknown"
    location: str = ""


def option_name_elements(name: str) -> list[str]:
    """Split an option name into its tree elements at ':' and '.', dropping empty parts."""
    return [part for part in _NAME_DELIMITERS.split(name) if part]


def names_match(elements_1: list[str], elements_2: list[str]) -> bool:
    """Return True if two element lists name the same option, ignoring case."""
    if len(elements_1) != len(elements_2):
        return False
    return all(a.casefold() == b.casefold() for a, b in zip(elements_1, elements_2))


def _parse_integer(text: str) -> int:
    if not _INTEGER.fullmatch(text):
        raise ConversionError(f"cannot convert {text!r} to an integer")
    return int(text)


def _parse_float(text: str) -> float:
    if not text or text != text.rstrip() or "_" in text:
        raise ConversionError(f"cannot convert {text!r} to a float")
    try:
        return float(text)
    except ValueError as exc:
        raise ConversionError(f"cannot convert {text!r} to a float") from exc


def _to_str(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return f"{value:f}"
    raise ConversionError(f"cannot convert {type(value).__name__} value to str")


def _to_int(value: Any) -> int:
    if isinstance(value, str):
        return _parse_integer(value)
    if isinstance(value, bool):
        return 1 if value else 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        try:
            return int(value)
        except (OverflowError, ValueError) as exc:
            raise ConversionError(f"cannot convert {value!r} to an integer") from exc
    raise ConversionError(f"cannot convert {type(value).__name__} value to int")


def _to_float(value: Any) -> float:
    if isinstance(value, str):
        return _parse_float(value)
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float)):
        return float(value)
    raise ConversionError(f"cannot convert {type(value).__name__} value to float")


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        folded = value.casefold()
        if folded == "true":
            return True
        if folded == "false":
            return False
        return _parse_integer(value) != 0
    if isinstance(value, (bool, int, float)):
        return value != 0
    raise ConversionError(f"cannot convert {type(value).__name__} value to bool")


_CONVERTERS = {str: _to_str, int: _to_int, float: _to_float, bool: _to_bool}


@dataclass(eq=False)
class SpecifiedValue:
    """One value given for an option by some source.

    The value keeps the type it was specified with; it may additionally be
    cached converted to the type the application reads it as.
    """

    source_info: OptionSourceInfo = field(default_factory=OptionSourceInfo)
    name: str = ""
    value: Any = None
    normalized_name: str = ""
    qualifiers: Any = None
    _cached: Any = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        value = self.value
        if isinstance(value, bytearray):
            value = bytes(value)
        elif isinstance(value, list):
            if not all(isinstance(item, str) for item in value):
                raise TypeError("list option values must hold only strings")
            value = list(value)
        elif value is not None and not isinstance(value, _NATIVE_TYPES):
            raise TypeError(f"unsupported option value type: {type(value).__name__}")
        self.value = value

    def matches(self, normalized_name: str) -> bool:
        """Return True if this value's name is the option ``normalized_name``.

        On a match the normalized name is recorded on this value.
        """
        if not names_match(option_name_elements(self.name), option_name_elements(normalized_name)):
            return False
        self.normalized_name = normalized_name
        return True

    def convert_to(self, target_type: type) -> Any:
        """Return the value converted to ``target_type`` (str, int, float or bool).

        Raises ConversionError if the value cannot be converted, and TypeError for
        an unsupported target type.
        """
        try:
            converter = _CONVERTERS[target_type]
        except (KeyError, TypeError):
            raise TypeError(f"unsupported conversion target: {target_type!r}") from None
        return converter(self.value)

    def extract_as(self, target_type: type) -> Any:
        """Return the value itself if it already is ``target_type``, else convert it."""
        if type(self.value) is target_type:
            return self.value
        return self.convert_to(target_type)

    def cache_as(self, target_type: type) -> None:
        """Store the value converted to ``target_type`` for later reads without conversion."""
        if type(self.value) is target_type:
            self._cached = self.value
            return
        self._cached = self.convert_to(target_type)

    def cached_value(self, target_type: type) -> Any:
        """Return the cached value; raises TypeError if it is not of ``target_type``."""
        if type(self._cached) is not target_type:
            raise TypeError(
                f"Cached value for option '{self.normalized_name}' is not the requested type"
            )
        return self._cached