import os

import pytest

from vlrutil.capture import CaptureAnalysis, CaptureFlags, ConsoleCapture, PipeCapture


@pytest.fixture
def target(tmp_path):
    with open(tmp_path / "out.bin", "w+b") as stream:
        yield stream


def _capture_bytes(target, payload):
    pipe = PipeCapture()
    pipe.begin(target, target.fileno())
    os.write(target.fileno(), payload)
    pipe.end()
    return pipe


def test_pipe_capture_collects_written_bytes(target):
    pipe = _capture_bytes(target, b"hello\n")
    assert bytes(pipe.data) == b"hello\n"
    assert pipe.in_progress is False


def test_descriptor_restored_after_end(target):
    _capture_bytes(target, b"captured")
    os.write(target.fileno(), b"after")
    target.seek(0)
    assert target.read() == b"after"


def test_large_output_does_not_block(target):
    payload = b"x" * 300_000
    pipe = _capture_bytes(target, payload)
    assert bytes(pipe.data) == payload


def test_callback_receives_data(target):
    chunks = []
    pipe = PipeCapture(callback=chunks.append)
    pipe.begin(target, target.fileno())
    os.write(target.fileno(), b"one\ntwo\n")
    pipe.end()
    assert b"".join(chunks) == b"one\ntwo\n"
    assert bytes(pipe.data) == b""


def test_callback_error_is_raised_on_end(target):
    def failing(_chunk):
        raise ValueError("bad chunk")

    pipe = PipeCapture(callback=failing)
    pipe.begin(target, target.fileno())
    os.write(target.fileno(), b"data")
    with pytest.raises(ValueError):
        pipe.end()
    assert pipe.in_progress is False


def test_begin_twice_raises(target):
    pipe = PipeCapture()
    pipe.begin(target, target.fileno())
    try:
        with pytest.raises(RuntimeError):
            pipe.begin(target, target.fileno())
    finally:
        pipe.end()
    assert pipe.in_progress is False


def test_end_without_begin_raises():
    with pytest.raises(RuntimeError):
        PipeCapture().end()


def test_analysis_lines_skip_empty(target):
    pipe = _capture_bytes(target, b"alpha\n\nbeta gamma\ndelta\n")
    analysis = CaptureAnalysis(pipe)
    assert analysis.lines() == ["alpha", "beta gamma", "delta"]


def test_analysis_find_line(target):
    analysis = CaptureAnalysis(_capture_bytes(target, b"alpha\nbeta gamma\ndelta\n"))
    assert analysis.find_line("gamma") == 1
    assert analysis.find_line("alpha", 1) is None
    assert analysis.find_line("delta", 2) == 2


def test_analysis_contains(target):
    analysis = CaptureAnalysis(_capture_bytes(target, b"alpha\nbeta gamma\ndelta\n"))
    assert analysis.contains("delt") is True
    assert analysis.contains("zeta") is False


def test_analysis_contains_sequence(target):
    analysis = CaptureAnalysis(_capture_bytes(target, b"alpha\nbeta gamma\ndelta\n"))
    assert analysis.contains_sequence(["alpha", "gamma", "delta"]) is True
    assert analysis.contains_sequence(["delta", "alpha"]) is False
    assert analysis.contains_sequence([]) is True


def test_console_capture_context_manager():
    with ConsoleCapture() as capture:
        assert capture.is_capturing is True
        os.write(1, b"to stdout\n")
        os.write(2, b"to stderr\n")
    assert capture.is_capturing is False
    assert capture.stdout_analysis().lines() == ["to stdout"]
    assert capture.stderr_analysis().lines() == ["to stderr"]


def test_scoped_stdout_only():
    capture = ConsoleCapture()
    with capture.scoped(CaptureFlags.STDOUT):
        os.write(1, b"only out\n")
        os.write(2, b"not captured\n")
    assert capture.stdout_analysis().contains("only out") is True
    assert capture.stderr_analysis().lines() == []


def test_set_data_callback_for_stderr():
    received = []
    capture = ConsoleCapture()
    capture.set_data_callback(received.append, CaptureFlags.STDERR)
    with capture:
        os.write(1, b"out line\n")
        os.write(2, b"err line\n")
    assert b"".join(received) == b"err line\n"
    assert capture.stdout_analysis().lines() == ["out line"]
    assert capture.stderr_analysis().lines() == []


def test_end_stops_all_captures():
    capture = ConsoleCapture()
    capture.begin()
    capture.end()
    assert capture.is_capturing is False
    capture.end()
    assert capture.is_capturing is False