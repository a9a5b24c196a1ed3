"""Trap table forwarding every structural operation to a lazily built value."""

from __future__ import annotations

from .runtime import reflect
from .runtime.proxy import Handler


class LazyTraps(Handler):
    """Traps shared by every lazy handle.

    Each trap resolves the backing value through the handle's accessor and
    repeats the operation on it. Key listing and descriptor lookup also answer
    for the carrier's unconfigurable properties, which the reflection layer
    requires a proxy to report faithfully. Extensibility is not trapped and
    stays a property of the carrier.
    """

    __slots__ = ()

    def get_prototype_of(self, target):
        return reflect.get_prototype_of(self.accessor())

    def set_prototype_of(self, target, prototype):
        return reflect.set_prototype_of(self.accessor(), prototype)

    def has(self, target, name):
        return reflect.has(self.accessor(), name)

    def get(self, target, name):
        return reflect.get(self.accessor(), name)

    def set(self, target, name, value):
        return reflect.set(self.accessor(), name, value)

    def delete_property(self, target, name):
        return reflect.delete_property(self.accessor(), name)

    def define_property(self, target, name, descriptor):
        return reflect.define_property(self.accessor(), name, descriptor)

    def apply(self, target, args, kwargs):
        return reflect.apply(self.accessor(), args, kwargs)

    def construct(self, target, args, kwargs):
        return reflect.construct(self.accessor(), args, kwargs)

    def own_keys(self, target):
        keys = reflect.own_keys(self.accessor())
        missing = [name for name in self.shim_keys if name not in keys]
        return keys + missing

    def get_own_property_descriptor(self, target, name):
        descriptor = reflect.get_own_property_descriptor(self.accessor(), name)
        if name not in self.shim_keys:
            return descriptor
        # Same configurability by construction; the carrier's value is the
        # one the reflection layer checks against.
        return reflect.get_own_property_descriptor(target, name)


class LazyHandle(LazyTraps):
    """Per-proxy state: the accessor, the kind's shim keys and the frozen flag."""

    __slots__ = ("accessor", "shim_keys", "frozen")

    def __init__(self, accessor, shim_keys: tuple[str, ...], frozen: bool = False) -> None:
        self.accessor = accessor
        self.shim_keys = shim_keys
        self.frozen = frozen

    def attach(self, carrier):
        """Take ``carrier`` as the proxy target, freezing it for frozen handles."""
        if self.frozen:
            reflect.freeze(carrier)
        return carrier

    def __repr__(self) -> str:
        return f"<LazyHandle {self.accessor!r} frozen={self.frozen}>"
