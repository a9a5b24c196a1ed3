"""Call-once accessors over a factory and a fixed argument list."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable

from . import reflect

logger = logging.getLogger(__name__)


class ReentrantConstructionError(RuntimeError):
    """Raised when a factory re-enters its own accessor before returning."""


class _Pending:
    __slots__ = ("factory", "args", "kwargs", "construct")

    def __init__(self, factory, args, kwargs, construct: bool) -> None:
        self.factory = factory
        self.args = args
        self.kwargs = kwargs
        self.construct = construct

    def invoke(self):
        if self.construct:
            return reflect.construct(self.factory, self.args, self.kwargs)
        return reflect.apply(self.factory, self.args, self.kwargs)


class _Ready:
    __slots__ = ("value",)

    def __init__(self, value) -> None:
        self.value = value


class Accessor:
    """Zero-argument callable returning the factory's value, built on first call.

    A factory that raises leaves the accessor pending, so the next call tries
    again. Calls racing from other threads wait for the first one to finish.
    """

    __slots__ = ("_state", "_lock", "_running")

    def __init__(self, pending: _Pending) -> None:
        self._state: Any = pending
        self._lock = threading.RLock()
        self._running = False

    @property
    def resolved(self) -> bool:
        return type(self._state) is _Ready

    def __call__(self):
        state = self._state
        if type(state) is _Ready:
            return state.value
        with self._lock:
            state = self._state
            if type(state) is _Ready:
                return state.value
            if self._running:
                raise ReentrantConstructionError(
                    f"factory {state.factory!r} accessed its own value while running"
                )
            self._running = True
            try:
                logger.debug(
                    "%s backing value via %r",
                    "constructing" if state.construct else "calling",
                    state.factory,
                )
                value = state.invoke()
            finally:
                self._running = False
            self._state = _Ready(value)
            return value

    def __repr__(self) -> str:
        status = "resolved" if self.resolved else "pending"
        return f"<Accessor {status}>"


def once(factory: Callable[..., Any], *, construct: bool = False):
    """Return ``bind(*args, **kwargs) -> Accessor`` for ``factory``.

    With ``construct`` the factory is invoked through ``reflect.construct``,
    so it sees itself as ``reflect.new_target()``.
    """
    if not callable(factory):
        raise TypeError(f"factory must be callable, got {type(factory).__name__}")

    def bind(*args, **kwargs) -> Accessor:
        return Accessor(_Pending(factory, args, kwargs, construct))

    return bind
