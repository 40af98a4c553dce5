"""A registry of named shared instances."""

from __future__ import annotations

import threading
from typing import ClassVar, TypeVar

T = TypeVar("T")


class SharedInstance:
    """Base for classes whose instances are shared by name through a registrar."""

    shared_instance_name: ClassVar[str] = ""

    @classmethod
    def _default_shared_name(cls) -> str:
        return cls.shared_instance_name or cls.__qualname__


class SharedInstanceRegistrar:
    """Holds shared instances keyed by name; all methods are thread-safe."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._instances: dict[str, object] = {}

    def get_or_create(self, name: str, cls: type[T]) -> T:
        """Return the instance registered as ``name``, creating it with ``cls()`` if absent.

        Raises TypeError if an instance of another type is registered under the name.
        """
        with self._lock:
            existing = self._instances.get(name)
            if existing is not None:
                if not isinstance(existing, cls):
                    raise TypeError(
                        f"shared instance '{name}' is a {type(existing).__name__}, "
                        f"not a {cls.__name__}"
                    )
                return existing

            instance = cls()
            self._instances[name] = instance
            return instance

    def set(self, name: str, instance: object) -> None:
        """Register ``instance`` under ``name``, replacing any previous one."""
        with self._lock:
            self._instances[name] = instance

    def clear(self, name: str) -> None:
        """Remove the instance registered under ``name``, if any."""
        with self._lock:
            self._instances.pop(name, None)

    def clear_all(self) -> None:
        """Remove every registered instance."""
        with self._lock:
            self._instances.clear()

    def cached(self, name: str) -> object | None:
        """Return the instance registered under ``name`` without creating one."""
        with self._lock:
            return self._instances.get(name)


_shared_registrar = SharedInstanceRegistrar()


def shared_registrar() -> SharedInstanceRegistrar:
    """Return the process-wide registrar."""
    return _shared_registrar


def get_shared_instance(
    cls: type[T],
    name: str | None = None,
    registrar: SharedInstanceRegistrar | None = None,
) -> T:
    """Return the shared instance of ``cls``, creating it on first use.

    The name defaults to ``cls.shared_instance_name`` (or the class name), and the
    registrar to the process-wide one.
    """
    if name is None:
        if isinstance(cls, type) and issubclass(cls, SharedInstance):
            name = cls._default_shared_name()
        else:
            name = cls.__qualname__
    target = registrar if registrar is not None else _shared_registrar
    return target.get_or_create(name, cls)