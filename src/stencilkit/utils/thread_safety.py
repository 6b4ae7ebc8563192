"""Serializing access to a formula engine.

A :class:`~stencilkit.formula_kit.FormulaKit` keeps its last formula in an
unsynchronized slot. Hosts that share one engine between threads wrap it
with :func:`serialize_calls`; hosts that do not share engines need nothing.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any, TypeVar

T = TypeVar("T")

__all__ = [
    "wrap_with_lock",
    "SerializedEngine",
    "serialize_calls",
]


def wrap_with_lock(
    fn: Callable[..., T] | None,
    lock: Any = None,
) -> Callable[..., T] | None:
    """Wraps a function call with a lock."""
    if fn is None:
        return None
    lk = lock if lock is not None else threading.RLock()

    def wrapped(*args: Any, **kwargs: Any) -> T:
        """Wrapped function call."""
        with lk:
            return fn(*args, **kwargs)

    return wrapped


class SerializedEngine:
    """Proxy running every public method of an engine under one lock.

    Attribute reads that are not callables (e.g. ``last_result``) are taken
    under the lock as well. Attribute writes go to the engine under the lock.
    """

    def __init__(self, engine: Any, lock: Any = None) -> None:
        object.__setattr__(self, "_engine", engine)
        object.__setattr__(self, "_lock", lock if lock is not None else threading.RLock())

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        with self._lock:
            attr = getattr(self._engine, name)
        if callable(attr):
            return wrap_with_lock(attr, self._lock)
        return attr

    def __setattr__(self, name: str, value: Any) -> None:
        with self._lock:
            setattr(self._engine, name, value)


def serialize_calls(engine: Any, lock: Any = None) -> SerializedEngine:
    """Returns a proxy that serializes all access to ``engine``.

    Args:
        engine: Typically a :class:`~stencilkit.formula_kit.FormulaKit`.
        lock: Lock to use; a fresh ``threading.RLock`` by default.
    """
    return SerializedEngine(engine, lock)
