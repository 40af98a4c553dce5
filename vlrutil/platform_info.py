"""Facts about the platform and runtime the process is running on."""

from __future__ import annotations

import sys


def is_windows() -> bool:
    """Return True when running on Windows."""
    return sys.platform == "win32"


def is_linux() -> bool:
    """Return True when running on Linux."""
    return sys.platform.startswith("linux")


def is_apple() -> bool:
    """Return True when running on macOS."""
    return sys.platform == "darwin"


def is_64bit() -> bool:
    """Return True when the interpreter is a 64-bit build."""
    return sys.maxsize > 2**32


def is_debug_build() -> bool:
    """Return True unless assertions are disabled (the interpreter runs with -O)."""
    return __debug__


def is_debugger_attached() -> bool:
    """Return True when a trace function, as a debugger installs, is active."""
    return sys.gettrace() is not None