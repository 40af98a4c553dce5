"""A thread-safe store of specified application option values."""

from __future__ import annotations

import threading
from typing import Any

from vlrutil.option_value import (
    ConversionError,
    SpecifiedValue,
    names_match,
    option_name_elements,
)


class AppOptions:
    """Holds option values as sources specified them and resolves them on access.

    Values are stored under the name they were specified with. When the
    application reads an option by its normalized name, the matching specified
    value is chosen, converted to the requested type and remembered as the
    prepared value for that name. A name that was read without any matching
    value is remembered too, as prepared with no value.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._specified: dict[str, SpecifiedValue] = {}
        self._prepared: dict[str, SpecifiedValue | None] = {}
        self._qualifiers: dict[str, Any] = {}

    def _matching(self, normalized_name: str) -> list[SpecifiedValue]:
        return [value for value in self._specified.values() if value.matches(normalized_name)]

    def _clear_prepared_matching(self, specified_name: str) -> None:
        # A newly added value may change what a previously read option resolves to.
        specified_elements = option_name_elements(specified_name)
        stale = [
            name
            for name in self._prepared
            if names_match(specified_elements, option_name_elements(name))
        ]
        for name in stale:
            del self._prepared[name]

    def add(self, value: SpecifiedValue) -> bool:
        """Store ``value`` under its specified name.

        Returns True if it replaced a value previously specified under that name.
        """
        if value is None:
            raise ValueError("specified value must not be None")
        with self._lock:
            replaced = self._specified.get(value.name) is not None
            self._specified[value.name] = value
            self._clear_prepared_matching(value.name)
            return replaced

    def find_by_name(self, name: str) -> SpecifiedValue | None:
        """Return the value specified under exactly ``name``, or None."""
        if not name:
            raise ValueError("option name must not be blank")
        with self._lock:
            return self._specified.get(name)

    def find_matching(self, normalized_name: str) -> list[SpecifiedValue]:
        """Return every specified value whose name is the option ``normalized_name``."""
        with self._lock:
            return self._matching(normalized_name)

    def resolve(self, normalized_name: str, target_type: type) -> SpecifiedValue | None:
        """Return the value in effect for ``normalized_name``, cached as ``target_type``.

        On first access the specified values matching the name are converted to
        ``target_type``; those that cannot be converted are passed over and the
        first remaining one is chosen. Later calls return the prepared result.
        Returns None if no usable value was specified.
        """
        with self._lock:
            if normalized_name in self._prepared:
                return self._prepared[normalized_name]

            candidates = []
            for value in self._matching(normalized_name):
                try:
                    value.cache_as(target_type)
                except (ConversionError, TypeError):
                    continue
                candidates.append(value)

            if not candidates:
                self._prepared[normalized_name] = None
                return None

            chosen = candidates[0]
            self._prepared[normalized_name] = chosen
            if normalized_name in self._qualifiers:
                chosen.qualifiers = self._qualifiers[normalized_name]
            return chosen

    def prepared(self, normalized_name: str) -> SpecifiedValue | None:
        """Return the prepared value for ``normalized_name``.

        The result is None if the option was read but had no usable value.
        Raises KeyError if the option has not been read since it was last cleared.
        """
        with self._lock:
            return self._prepared[normalized_name]

    def clear_prepared(self, normalized_name: str) -> None:
        """Forget the prepared value for ``normalized_name`` so it is resolved again."""
        with self._lock:
            self._prepared.pop(normalized_name, None)

    def set_qualifiers(self, normalized_name: str, qualifiers: Any) -> None:
        """Set the qualifiers for an option, applying them to its prepared value if any."""
        with self._lock:
            self._qualifiers[normalized_name] = qualifiers
            prepared = self._prepared.get(normalized_name)
            if prepared is not None:
                prepared.qualifiers = qualifiers


_shared_app_options = AppOptions()


def shared_app_options() -> AppOptions:
    """Return the process-wide option store."""
    return _shared_app_options