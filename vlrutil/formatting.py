"""printf-style formatting with conversion of the result to a requested type."""

from __future__ import annotations

from typing import Any, TypeVar

T = TypeVar("T")


def _convert(result: str | bytes, result_type: type[T]) -> T:
    if type(result) is result_type:
        return result  # type: ignore[return-value]
    if result_type is str and isinstance(result, bytes):
        return result.decode("utf-8")  # type: ignore[return-value]
    if result_type is bytes and isinstance(result, str):
        return result.encode("utf-8")  # type: ignore[return-value]
    return result_type(result)  # type: ignore[call-arg]


def formatpf(format_string: str | bytes, *args: Any) -> str | bytes:
    """Format ``args`` into ``format_string`` using printf-style directives.

    The result has the type of the format string. Raises TypeError or ValueError
    if the directives and arguments do not agree.
    """
    return format_string % args


def format_to(result_type: type[T], format_string: str | bytes, *args: Any) -> T:
    """Format like ``formatpf`` and return the result as ``result_type``.

    Text and bytes are converted to each other as UTF-8; any other type is
    built from the formatted text.
    """
    return _convert(formatpf(format_string, *args), result_type)