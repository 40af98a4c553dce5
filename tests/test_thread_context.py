import gc
import threading

from vlrutil.thread_context import (
    ContextLifetime,
    GenericContext,
    PerThreadContext,
    ThreadOperationContext,
    add_operation_context,
    shared_thread_context,
)


def test_push_then_current_contexts():
    tracker = ThreadOperationContext()
    context = tracker.push("request", "alpha")
    current = tracker.current_contexts()
    assert current == [context]
    assert current[0].name == "request"
    assert current[0].value == "alpha"


def test_nested_same_name_shows_latest_and_pop_restores():
    tracker = ThreadOperationContext()
    outer = tracker.push("request", "outer")
    inner = tracker.push("request", "inner")
    assert tracker.current_contexts() == [inner]

    assert tracker.pop("request", inner) is False
    assert tracker.current_contexts() == [outer]

    assert tracker.pop("request", outer) is True
    assert tracker.current_contexts() == []


def test_pop_with_mismatched_value_is_ignored():
    tracker = ThreadOperationContext()
    first = tracker.push("op", "1")
    second = tracker.push("op", "2")
    assert tracker.pop("op", first) is False
    assert tracker.current_contexts() == [second]


def test_pop_without_any_context_returns_false():
    tracker = ThreadOperationContext()
    assert tracker.pop("missing") is False


def test_distinct_names_all_reported():
    tracker = ThreadOperationContext()
    user = tracker.push("user", "u1")
    job = tracker.push("job", "j1")
    assert tracker.current_contexts() == [user, job]


def test_dead_context_is_cleaned():
    tracker = ThreadOperationContext()
    kept = tracker.push("kept", "k")
    tracker.push("dropped", "d")
    gc.collect()
    assert tracker.current_contexts() == [kept]


def test_threads_are_isolated():
    tracker = ThreadOperationContext()
    main_context = tracker.push("request", "main")
    seen = []

    def worker():
        own = tracker.push("request", "worker")
        seen.append(tracker.current_contexts())
        tracker.pop("request", own)
        seen.append(tracker.current_contexts())

    thread = threading.Thread(target=worker)
    thread.start()
    thread.join()

    assert [c.value for c in seen[0]] == ["worker"]
    assert seen[1] == []
    assert tracker.current_contexts() == [main_context]


def test_per_thread_context_push_pop():
    per_thread = PerThreadContext()
    context = GenericContext("key", "value")
    per_thread.push(context)
    assert per_thread.active_contexts() == [context]
    assert per_thread.pop("key") is True
    assert per_thread.active_contexts() == []


def test_per_thread_pop_unknown_name():
    per_thread = PerThreadContext()
    assert per_thread.pop("unknown") is False


def test_context_lifetime_closes_once():
    tracker = ThreadOperationContext()
    context = tracker.push("scope", "s")
    lifetime = ContextLifetime(context, tracker)
    assert lifetime.close() is True
    assert lifetime.close() is False
    assert tracker.current_contexts() == []


def test_context_lifetime_as_context_manager():
    tracker = ThreadOperationContext()
    with ContextLifetime(tracker.push("scope", "s"), tracker) as lifetime:
        assert tracker.current_contexts() == [lifetime.context]
    assert tracker.current_contexts() == []


def test_add_operation_context_uses_shared_tracker():
    with add_operation_context("task", "build") as lifetime:
        current = shared_thread_context().current_contexts()
        assert lifetime.context in current
    assert lifetime.context not in shared_thread_context().current_contexts()


def test_shared_thread_context_is_singleton():
    context = shared_thread_context().push("singleton-check", "value")
    try:
        current = shared_thread_context().current_contexts()
        assert context in current
        assert [c.value for c in current if c.name == "singleton-check"] == ["value"]
    finally:
        shared_thread_context().pop("singleton-check", context)
    assert context not in shared_thread_context().current_contexts()