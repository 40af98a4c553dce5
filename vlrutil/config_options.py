"""Command-line arguments of the process and mapping of parsed options to values."""

from __future__ import annotations

import argparse
import os
import sys
from collections.abc import Callable, Iterable
from typing import Any


class CommandLine:
    """The argument list of a program, program name first."""

    def __init__(self, args: Iterable[str | bytes] | None = None) -> None:
        self.args: list[str] | None = None
        if args is not None:
            self.set_from_args(args)

    def set_from_args(self, args: Iterable[str | bytes]) -> None:
        """Use ``args`` (as given to a program's main) as the command line."""
        self.args = [os.fsdecode(arg) for arg in args]

    def set_from_os(self) -> None:
        """Use the arguments the running process was started with."""
        self.args = list(sys.argv)

    def has_info(self) -> bool:
        """Return True if a non-empty argument list has been set."""
        return bool(self.args)


def _dest(name: str) -> str:
    return name.split(",")[0].lstrip("-").replace("-", "_")


class ConfigOptions:
    """Parses a command line and records chosen options into ``values``.

    Options registered with ``add_flag`` are recorded as True when present;
    those registered with ``add_string`` are recorded with their text. Options
    that were not given are absent from ``values``. Arguments the parser did
    not recognise are collected in ``unrecognized``.
    """

    def __init__(self) -> None:
        self.unrecognized: list[str] = []
        self.values: dict[str, bool | str] = {}
        self._handlers: list[tuple[str, Callable[[Any], None]]] = []

    def add_flag(self, name: str) -> None:
        """Record ``name`` as True in ``values`` when the option is present."""
        if not name:
            raise ValueError("option name must not be blank")

        def record(_value: Any) -> None:
            self.values[name] = True

        self._handlers.append((name, record))

    def add_string(self, name: str) -> None:
        """Record the text given for option ``name`` in ``values``."""
        if not name:
            raise ValueError("option name must not be blank")

        def record(value: Any) -> None:
            self.values[name] = str(value)

        self._handlers.append((name, record))

    def parse(self, command_line: CommandLine, parser: argparse.ArgumentParser) -> argparse.Namespace:
        """Parse ``command_line`` with ``parser`` and record the registered options.

        The program name is skipped. Raises ValueError if the command line was
        never set.
        """
        if command_line.args is None:
            raise ValueError("command line has not been set")

        namespace, extras = parser.parse_known_args(command_line.args[1:])
        self.unrecognized.extend(str(extra) for extra in extras)
        self._record_parsed(namespace)
        return namespace

    def _record_parsed(self, namespace: argparse.Namespace) -> None:
        for name, record in self._handlers:
            value = getattr(namespace, _dest(name), None)
            if value is None or value is False:
                continue
            record(value)