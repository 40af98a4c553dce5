"""A thread-safe cache of compiled regular expressions."""

from __future__ import annotations

import logging
import re
import threading

logger = logging.getLogger(__name__)


class RegexCache:
    """Compiles each pattern once and hands back the shared compiled object.

    A pattern that fails to compile is remembered as a failure too, so it is
    not compiled again on later requests.
    """

    def __init__(self) -> None:
        self._compiled: dict[str, re.Pattern[str] | None] = {}
        self._lock = threading.Lock()

    def get_compiled(self, pattern: str) -> re.Pattern[str] | None:
        """Return the compiled form of ``pattern``, or None if it is invalid."""
        with self._lock:
            try:
                return self._compiled[pattern]
            except KeyError:
                pass

            try:
                compiled: re.Pattern[str] | None = re.compile(pattern)
            except re.error as exc:
                logger.warning("Failed to compile regex '%s'; error: %s", pattern, exc)
                compiled = None

            self._compiled[pattern] = compiled
            return compiled


_shared_cache = RegexCache()


def shared_regex_cache() -> RegexCache:
    """Return the process-wide regex cache."""
    return _shared_cache