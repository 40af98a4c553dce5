"""Capture of data written to the process's standard output and error descriptors."""

from __future__ import annotations

import enum
import os
import sys
import threading
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from typing import IO, Any

_STDOUT_FD = 1
_STDERR_FD = 2
_READ_CHUNK = 4096


class CaptureFlags(enum.IntFlag):
    """Which standard streams to capture."""

    STDOUT = 1 << 0
    STDERR = 1 << 1
    ALL = STDOUT | STDERR


def _flush(stream: IO[Any] | None) -> None:
    if stream is None:
        return
    try:
        stream.flush()
    except (AttributeError, ValueError, OSError):
        pass


class PipeCapture:
    """Redirects one file descriptor into a pipe and collects what is written to it.

    Collected bytes go to ``callback`` if one is set when the capture begins,
    otherwise they are appended to ``data``.
    """

    def __init__(self, callback: Callable[[bytes], Any] | None = None) -> None:
        self.data = bytearray()
        self.callback = callback
        self.stream: IO[Any] | None = None
        self.fd: int | None = None
        self._saved_fd: int | None = None
        self._read_fd: int | None = None
        self._reader: threading.Thread | None = None
        self._error: BaseException | None = None

    @property
    def in_progress(self) -> bool:
        """True while the descriptor is redirected."""
        return self._reader is not None

    def begin(self, stream: IO[Any] | None, fd: int) -> None:
        """Start capturing descriptor ``fd``; ``stream`` is flushed first.

        Raises RuntimeError if a capture is already in progress.
        """
        if self.in_progress:
            raise RuntimeError("capture already in progress")

        _flush(stream)
        read_fd, write_fd = os.pipe()
        saved_fd = os.dup(fd)
        try:
            os.dup2(write_fd, fd)
        except OSError:
            os.close(read_fd)
            os.close(saved_fd)
            raise
        finally:
            os.close(write_fd)

        sink = self.callback if self.callback is not None else self.data.extend
        self.stream = stream
        self.fd = fd
        self._saved_fd = saved_fd
        self._read_fd = read_fd
        self._error = None
        self._reader = threading.Thread(
            target=self._drain, args=(read_fd, sink), daemon=True
        )
        self._reader.start()

    def _drain(self, read_fd: int, sink: Callable[[bytes], Any]) -> None:
        while chunk := os.read(read_fd, _READ_CHUNK):
            if self._error is not None:
                continue
            try:
                sink(chunk)
            except BaseException as exc:  # re-raised from end()
                self._error = exc

    def end(self) -> None:
        """Restore the descriptor and collect everything written to it.

        Raises RuntimeError if no capture is in progress, and re-raises any
        exception the data callback raised during the capture.
        """
        if not self.in_progress:
            raise RuntimeError("no capture in progress")

        _flush(self.stream)
        os.dup2(self._saved_fd, self.fd)
        os.close(self._saved_fd)
        self._reader.join()
        os.close(self._read_fd)

        self._saved_fd = None
        self._read_fd = None
        self._reader = None
        error, self._error = self._error, None
        if error is not None:
            raise error


class CaptureAnalysis:
    """Looks through the text collected by a capture, line by line."""

    def __init__(self, capture: PipeCapture) -> None:
        self._capture = capture
        self._lines: list[str] = []

    def lines(self) -> list[str]:
        """Return the captured text split at newlines, without empty lines."""
        if not self._lines:
            text = bytes(self._capture.data).decode("utf-8", errors="replace")
            self._lines = [line for line in text.split("\n") if line]
        return self._lines

    def find_line(self, text: str, start: int = 0) -> int | None:
        """Return the index of the first line from ``start`` containing ``text``, or None."""
        lines = self.lines()
        for index, line in enumerate(lines[start:], start):
            if text in line:
                return index
        return None

    def contains(self, text: str) -> bool:
        """Return True if any line contains ``text``."""
        return self.find_line(text) is not None

    def contains_sequence(self, lines: Iterable[str]) -> bool:
        """Return True if lines containing each of ``lines`` appear in that order.

        Each search starts at the line the previous one matched.
        """
        index: int | None = 0
        for text in lines:
            index = self.find_line(text, index)
            if index is None:
                return False
        return True


class ConsoleCapture:
    """Captures standard output and/or standard error of the process.

    Used as a context manager it captures both streams for the block.
    """

    def __init__(self) -> None:
        self._stdout = PipeCapture()
        self._stderr = PipeCapture()

    @property
    def is_capturing(self) -> bool:
        """True while either stream is being captured."""
        return self._stdout.in_progress or self._stderr.in_progress

    def begin(self, flags: CaptureFlags = CaptureFlags.ALL) -> None:
        """Start capturing the streams selected by ``flags``."""
        started_stdout = False
        if CaptureFlags.STDOUT in flags:
            self._stdout.begin(sys.stdout, _STDOUT_FD)
            started_stdout = True
        if CaptureFlags.STDERR in flags:
            try:
                self._stderr.begin(sys.stderr, _STDERR_FD)
            except BaseException:
                if started_stdout:
                    self._stdout.end()
                raise

    def end(self) -> None:
        """Stop every capture in progress."""
        try:
            if self._stdout.in_progress:
                self._stdout.end()
        finally:
            if self._stderr.in_progress:
                self._stderr.end()

    def stdout_analysis(self) -> CaptureAnalysis:
        """Return an analysis of the captured standard output."""
        return CaptureAnalysis(self._stdout)

    def stderr_analysis(self) -> CaptureAnalysis:
        """Return an analysis of the captured standard error."""
        return CaptureAnalysis(self._stderr)

    def set_data_callback(
        self,
        callback: Callable[[bytes], Any] | None,
        flags: CaptureFlags = CaptureFlags.ALL,
    ) -> None:
        """Send data of the selected streams to ``callback`` from the next capture on."""
        if CaptureFlags.STDOUT in flags:
            self._stdout.callback = callback
        if CaptureFlags.STDERR in flags:
            self._stderr.callback = callback

    @contextmanager
    def scoped(self, flags: CaptureFlags = CaptureFlags.ALL) -> Iterator[ConsoleCapture]:
        """Capture the selected streams for the duration of a ``with`` block."""
        self.begin(flags)
        try:
            yield self
        finally:
            self.end()

    def __enter__(self) -> ConsoleCapture:
        self.begin(CaptureFlags.ALL)
        return self

    def __exit__(self, *args: object) -> None:
        self.end()