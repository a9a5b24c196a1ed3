"""Creation functions for lazy proxies, one per backing kind."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from . import kinds
from .runtime import proxy as _proxy
from .runtime import reflect
from .runtime.singleton import once
from .traps import LazyHandle

logger = logging.getLogger(__name__)


class Creator:
    """Creation function for one kind with its modifiers fixed.

    ``creator(factory)`` returns ``make(*args, **kwargs)``; every call of
    ``make`` yields a new proxy whose backing value is
    ``factory(*args, **kwargs)``, built on the first operation performed on
    the proxy. Invoking the creator through ``reflect.construct`` (or passing
    ``construct=True``) makes the factory run as a construction for every
    proxy that ``make`` produces.

    ``.frozen`` freezes each proxy's carrier, so the proxy reports itself
    non-extensible before the backing value exists. ``.revocable`` makes
    ``make`` return ``Revocable(proxy, revoke)``.
    """

    __slots__ = ("kind", "_frozen", "_revocable")

    def __init__(self, kind: str, frozen: bool = False, revocable: bool = False) -> None:
        if kind not in kinds.BACKING_TYPES:
            raise ValueError(f"unknown backing kind: {kind!r}")
        self.kind = kind
        self._frozen = frozen
        self._revocable = revocable

    @property
    def frozen(self) -> "Creator":
        if self._frozen:
            return self
        return Creator(self.kind, True, self._revocable)

    @property
    def revocable(self) -> "Creator":
        if self._revocable:
            return self
        return Creator(self.kind, self._frozen, True)

    def __call__(
        self, factory: Callable[..., Any], *, construct: Optional[bool] = None
    ) -> Callable[..., Any]:
        if construct is None:
            construct = reflect.new_target() is self
        construct = construct or self.kind == kinds.CONSTRUCTIBLE
        bind = once(factory, construct=construct)
        kind = self.kind
        frozen = self._frozen
        revocable = self._revocable
        shim_keys = kinds.UNCONFIGURABLE_PROPS[kind]

        def make(*args, **kwargs):
            handle = LazyHandle(bind(*args, **kwargs), shim_keys, frozen)
            carrier = handle.attach(kinds.empty_carrier(kind))
            if revocable:
                return _proxy.revocable(carrier, handle)
            return _proxy.create(carrier, handle)

        logger.debug("lazy %s creator bound to %r (construct=%s)", kind, factory, construct)
        return make

    def __eq__(self, other):
        if not isinstance(other, Creator):
            return NotImplemented
        return (self.kind, self._frozen, self._revocable) == (
            other.kind,
            other._frozen,
            other._revocable,
        )

    def __hash__(self) -> int:
        return hash((self.kind, self._frozen, self._revocable))

    def __repr__(self) -> str:
        modifiers = ""
        if self._frozen:
            modifiers += ".frozen"
        if self._revocable:
            modifiers += ".revocable"
        return f"<Creator {self.kind}{modifiers}>"


def create(kind: str) -> Creator:
    return Creator(kind)


make = Creator(kinds.CALLABLE)
make_function = Creator(kinds.FUNCTION)
make_object = Creator(kinds.OBJECT)
make_constructible = Creator(kinds.CONSTRUCTIBLE)
