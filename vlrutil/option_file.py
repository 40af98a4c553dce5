"""Reads option name/value pairs from simple configuration files."""

from __future__ import annotations

import logging
import os

from vlrutil.app_options import AppOptions, shared_app_options
from vlrutil.option_value import OptionSourceInfo, SpecifiedValue
from vlrutil.regex_cache import shared_regex_cache

logger = logging.getLogger(__name__)

_BLANK_LINE = r"^\s*$"
_COMMENT_LINE = r"^\s*#.*$"
_NAME_VALUE_LINE = r"^\s*(.+?)\s*=\s*(.*?)$"
_QUOTED_VALUE = r'^"((?:[^"\\]|\\.)*)".*$'

_WHITESPACE = " \t\r\n"

SOURCE_CONFIG_FILE = "binary_related_config_file"


def _compiled(pattern: str):
    compiled = shared_regex_cache().get_compiled(pattern)
    if compiled is None:
        raise RuntimeError(f"could not compile pattern {pattern!r}")
    return compiled


class OptionFileReader:
    """Parses ``name = value`` lines into an option store.

    Blank lines and lines starting with ``#`` are skipped. A value may be put in
    double quotes, in which case anything after the closing quote is ignored;
    otherwise a ``#`` starts a trailing comment.
    """

    def __init__(self, app_options: AppOptions | None = None) -> None:
        self._app_options = app_options

    @property
    def app_options(self) -> AppOptions:
        return self._app_options if self._app_options is not None else shared_app_options()

    def read_file(self, path: str | os.PathLike[str]) -> list[SpecifiedValue]:
        """Read every option in the file at ``path`` and return the values added.

        Raises OSError if the file cannot be read.
        """
        path_text = os.fspath(path)
        added: list[SpecifiedValue] = []
        with open(path_text, encoding="utf-8") as stream:
            for line in stream:
                value = self.parse_line(line.rstrip("\n"), path_text)
                if value is not None:
                    added.append(value)
        return added

    def parse_line(self, line: str, path: str = "") -> SpecifiedValue | None:
        """Parse one line; return the value it added, or None if it held none."""
        if _compiled(_BLANK_LINE).fullmatch(line):
            return None
        if _compiled(_COMMENT_LINE).fullmatch(line):
            return None
        match = _compiled(_NAME_VALUE_LINE).fullmatch(line)
        if match is None:
            logger.info("Ignoring presumed invalid line:\n\t%s", line)
            return None
        return self._parse_name_value(match.group(1), match.group(2), line, path)

    def _parse_name_value(
        self, raw_name: str, raw_value: str, line: str, path: str
    ) -> SpecifiedValue | None:
        logger.debug("Parsed line as name/value:\n\t%s", line)

        name = raw_name.strip(_WHITESPACE)
        if not name:
            return None

        value = raw_value.strip(_WHITESPACE)
        if value:
            quoted = _compiled(_QUOTED_VALUE).fullmatch(value)
            if quoted is not None:
                return self._add(path, name, quoted.group(1))
            comment_start = value.find("#")
            if comment_start != -1:
                value = value[:comment_start]
            value = value.strip(_WHITESPACE)

        return self._add(path, name, value)

    def _add(self, path: str, name: str, value: str) -> SpecifiedValue:
        logger.debug("Adding option name/value from file:\n\t%s: %s", name, value)
        specified = SpecifiedValue(OptionSourceInfo(SOURCE_CONFIG_FILE, path), name, value)
        self.app_options.add(specified)
        return specified