"""Per-thread stacks of named operation contexts."""

from __future__ import annotations

import logging
import threading
import weakref
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class GenericContext:
    """A named value describing the operation a thread is performing."""

    name: str
    value: str


@dataclass
class _ActiveContext:
    key: str
    stack: list[weakref.ReferenceType[GenericContext]] = field(default_factory=list)


class PerThreadContext:
    """The context stacks of one thread, one stack per context name.

    Stacks hold weak references; a context that is no longer referenced
    elsewhere drops out of its stack the next time the stack is examined.
    """

    def __init__(self) -> None:
        self._active: dict[str, _ActiveContext] = {}

    def push(self, context: GenericContext) -> None:
        """Push ``context`` on the stack for its name."""
        active = self._active.get(context.name)
        if active is None:
            active = self._active[context.name] = _ActiveContext(context.name)
        active.stack.append(weakref.ref(context))

    def pop(self, name: str, context: GenericContext | None = None) -> bool:
        """Pop the top context for ``name``.

        If ``context`` is given and its value differs from the top of the stack,
        nothing is popped. Returns True when no contexts remain for ``name``.
        """
        active = self._active.get(name)
        if active is None:
            logger.debug(
                "Attempted to remove operation context, but context stack for "
                "context key was empty."
            )
            return False

        stack = active.stack
        while stack:
            top = stack[-1]()
            if top is None:
                logger.debug(
                    "Operation context invalid, but not properly removed; "
                    "cleaning from context stack."
                )
                stack.pop()
                continue

            if top.name != name:
                logger.error("Unexpected context in stack")
                stack.pop()
                continue

            if context is not None and top.value != context.value:
                logger.warning(
                    "Attempted to remove operation context, but pop context value "
                    "'%s' does not match top of stack value '%s'; ignoring pop.",
                    context.value,
                    top.value,
                )
                break

            stack.pop()
            break

        if not stack:
            return True

        logger.debug(
            "Attempted to remove operation context, but context was not found "
            "on top of stack for key."
        )
        return False

    def active_contexts(self) -> list[GenericContext]:
        """Return the live top context of each name, dropping empty stacks."""
        result: list[GenericContext] = []
        for active in self._active.values():
            stack = active.stack
            while stack:
                top = stack[-1]()
                if top is None:
                    logger.debug(
                        "Operation context invalid, but not properly removed; "
                        "cleaning from context stack."
                    )
                    stack.pop()
                    continue
                result.append(top)
                break

        self._active = {key: active for key, active in self._active.items() if active.stack}
        return result


class ThreadOperationContext:
    """Tracks operation contexts for every thread; thread-safe."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._contexts: dict[int, PerThreadContext] = {}

    def _current(self, create: bool = False) -> PerThreadContext | None:
        thread_id = threading.get_ident()
        with self._lock:
            per_thread = self._contexts.get(thread_id)
            if per_thread is None and create:
                per_thread = self._contexts[thread_id] = PerThreadContext()
            return per_thread

    def _clear_current(self) -> None:
        with self._lock:
            self._contexts.pop(threading.get_ident(), None)

    def push(self, name: str, value: str) -> GenericContext:
        """Push a new context for the current thread and return it.

        The caller must keep the returned object alive for the context to stay active.
        """
        context = GenericContext(name, value)
        per_thread = self._current(create=True)
        per_thread.push(context)
        return context

    def pop(self, name: str, context: GenericContext | None = None) -> bool:
        """Pop the current thread's top context for ``name``; see PerThreadContext.pop."""
        per_thread = self._current()
        if per_thread is None:
            logger.debug(
                "Attempted to remove operation context, but context stack was empty."
            )
            return False
        return per_thread.pop(name, context)

    def current_contexts(self) -> list[GenericContext]:
        """Return the active contexts of the current thread."""
        per_thread = self._current()
        if per_thread is None:
            return []

        contexts = per_thread.active_contexts()
        if not contexts:
            self._clear_current()
        return contexts


class ContextLifetime:
    """Keeps a pushed context alive and pops it when closed."""

    def __init__(
        self,
        context: GenericContext | None,
        owner: ThreadOperationContext | None = None,
    ) -> None:
        self.context = context
        self._owner = owner if owner is not None else _shared_thread_context
        self._closed = False

    def close(self) -> bool:
        """Pop the context; returns False if there was nothing to pop."""
        if self._closed or self.context is None:
            return False
        self._closed = True
        self._owner.pop(self.context.name, self.context)
        return True

    def __enter__(self) -> ContextLifetime:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


_shared_thread_context = ThreadOperationContext()


def shared_thread_context() -> ThreadOperationContext:
    """Return the process-wide operation context tracker."""
    return _shared_thread_context


def add_operation_context(name: str, value: str) -> ContextLifetime:
    """Push a context for the current thread; closing the result pops it."""
    context = _shared_thread_context.push(name, value)
    return ContextLifetime(context, _shared_thread_context)