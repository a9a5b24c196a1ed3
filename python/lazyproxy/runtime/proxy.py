"""Handler-based proxies and the structural operations that dispatch through them.

Every operation here accepts either an ordinary object, handled by
:mod:`.objects`, or a :class:`Proxy`, whose handler trap of the same name is
called with the proxy's target. A handler that lacks a trap falls through to
the same operation on the target. Results of the structural queries are
checked against the target so that a proxy cannot misreport the target's
non-configurable properties or its extensibility.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, NamedTuple, Optional

from . import objects
from .objects import PropertyDescriptor

logger = logging.getLogger(__name__)


class RevokedProxyError(TypeError):
    """Raised by every operation on a revoked proxy."""


class InvariantError(TypeError):
    """Raised when a trap result contradicts its target's structure."""


class Handler:
    """Base trap table. Traps that are not defined act on the target."""

    __slots__ = ()


class Proxy:
    """Stand-in whose every structural operation goes through a handler."""

    __slots__ = ("__target", "__handler", "__weakref__")

    def __init__(self, target, handler: Handler) -> None:
        if handler is None:
            raise TypeError("proxy handler must not be None")
        object.__setattr__(self, "_Proxy__target", target)
        object.__setattr__(self, "_Proxy__handler", handler)

    def __getattribute__(self, name: str):
        return get(self, name)

    def __setattr__(self, name: str, value) -> None:
        if not set(self, name, value):
            raise AttributeError(f"cannot assign attribute {name!r} through proxy")

    def __delattr__(self, name: str) -> None:
        if not delete_property(self, name):
            raise AttributeError(f"cannot delete attribute {name!r} through proxy")

    def __hash__(self) -> int:
        method = _special(self, "__hash__")
        if method is None:
            raise TypeError(f"unhashable type: {_type_name(self)!r}")
        return method()

    def __bool__(self) -> bool:
        method = _special(self, "__bool__")
        if method is not None:
            return method()
        method = _special(self, "__len__")
        if method is not None:
            return method() != 0
        return True


class CallableProxy(Proxy):
    """Proxy over a callable target."""

    __slots__ = ()

    def __call__(self, *args, **kwargs):
        return apply(self, args, kwargs)


class Revocable(NamedTuple):
    proxy: Proxy
    revoke: Callable[[], None]


def _type_name(proxy: Proxy) -> str:
    return get(proxy, "__class__").__name__


def _special(proxy: Proxy, name: str) -> Optional[Callable[..., Any]]:
    # Special methods are looked up on the class, as Python does.
    if getattr(get(proxy, "__class__"), name, None) is None:
        return None
    return get(proxy, name)


def _forward_protocol(name: str):
    def method(self, *args):
        bound = _special(self, name)
        if bound is None:
            raise TypeError(
                f"{_type_name(self)!r} object does not support {name[2:-2]!r}"
            )
        return bound(*args)

    method.__name__ = name
    method.__qualname__ = f"Proxy.{name}"
    return method


def _forward_operator(name: str):
    def method(self, *args):
        bound = _special(self, name)
        if bound is None:
            return NotImplemented
        return bound(*args)

    method.__name__ = name
    method.__qualname__ = f"Proxy.{name}"
    return method


_PROTOCOL_METHODS = (
    "__repr__",
    "__str__",
    "__bytes__",
    "__format__",
    "__dir__",
    "__len__",
    "__length_hint__",
    "__iter__",
    "__next__",
    "__reversed__",
    "__contains__",
    "__getitem__",
    "__setitem__",
    "__delitem__",
    "__enter__",
    "__exit__",
    "__neg__",
    "__pos__",
    "__abs__",
    "__invert__",
    "__int__",
    "__float__",
    "__complex__",
    "__index__",
    "__round__",
    "__fspath__",
)

_BINARY_OPERATORS = (
    "add",
    "sub",
    "mul",
    "matmul",
    "truediv",
    "floordiv",
    "mod",
    "divmod",
    "pow",
    "lshift",
    "rshift",
    "and",
    "xor",
    "or",
)

_OPERATOR_METHODS = (
    ("__eq__", "__ne__", "__lt__", "__le__", "__gt__", "__ge__")
    + tuple(f"__{op}__" for op in _BINARY_OPERATORS)
    + tuple(f"__r{op}__" for op in _BINARY_OPERATORS)
)

for _name in _PROTOCOL_METHODS:
    setattr(Proxy, _name, _forward_protocol(_name))

for _name in _OPERATOR_METHODS:
    setattr(Proxy, _name, _forward_operator(_name))

del _name


def is_proxy(obj) -> bool:
    # type() rather than isinstance(): a proxy reports its target's __class__.
    return issubclass(type(obj), Proxy)


def create(target, handler: Handler) -> Proxy:
    """Build a proxy, callable when ``target`` is."""
    cls = CallableProxy if callable(target) else Proxy
    return cls(target, handler)


def revocable(target, handler: Handler) -> Revocable:
    proxy = create(target, handler)

    def revoke() -> None:
        if object.__getattribute__(proxy, "_Proxy__handler") is None:
            return
        object.__setattr__(proxy, "_Proxy__target", None)
        object.__setattr__(proxy, "_Proxy__handler", None)
        logger.debug("revoked proxy at %#x", id(proxy))

    return Revocable(proxy, revoke)


def _unwrap(proxy: Proxy, operation: str):
    handler = object.__getattribute__(proxy, "_Proxy__handler")
    if handler is None:
        raise RevokedProxyError(
            f"cannot perform {operation!r} on a proxy that has been revoked"
        )
    return object.__getattribute__(proxy, "_Proxy__target"), handler


def _same_value(left, right) -> bool:
    if left is right:
        return True
    if type(left) is not type(right) or not isinstance(left, (str, bytes, int, float)):
        return False
    return left == right


def _fixed_descriptor(target, name: str) -> Optional[PropertyDescriptor]:
    descriptor = get_own_property_descriptor(target, name)
    if descriptor is not None and not descriptor.configurable:
        return descriptor
    return None


def get_prototype_of(obj) -> type:
    if not is_proxy(obj):
        return objects.get_prototype_of(obj)
    target, handler = _unwrap(obj, "get_prototype_of")
    trap = getattr(handler, "get_prototype_of", None)
    if trap is None:
        return get_prototype_of(target)
    return trap(target)


def set_prototype_of(obj, prototype: type) -> bool:
    if not is_proxy(obj):
        return objects.set_prototype_of(obj, prototype)
    target, handler = _unwrap(obj, "set_prototype_of")
    trap = getattr(handler, "set_prototype_of", None)
    if trap is None:
        return set_prototype_of(target, prototype)
    return bool(trap(target, prototype))


def is_extensible(obj) -> bool:
    if not is_proxy(obj):
        return objects.is_extensible(obj)
    target, handler = _unwrap(obj, "is_extensible")
    trap = getattr(handler, "is_extensible", None)
    if trap is None:
        return is_extensible(target)
    result = bool(trap(target))
    if result != is_extensible(target):
        raise InvariantError(
            "'is_extensible' on proxy: trap result does not reflect extensibility "
            f"of proxy target (which is {not result!r})"
        )
    return result


def prevent_extensions(obj) -> bool:
    if not is_proxy(obj):
        return objects.prevent_extensions(obj)
    target, handler = _unwrap(obj, "prevent_extensions")
    trap = getattr(handler, "prevent_extensions", None)
    if trap is None:
        return prevent_extensions(target)
    result = bool(trap(target))
    if result and is_extensible(target):
        raise InvariantError(
            "'prevent_extensions' on proxy: trap returned truish but the proxy "
            "target is extensible"
        )
    return result


def freeze(obj):
    """Freeze ``obj``; on a proxy this only prevents extensions."""
    if not is_proxy(obj):
        return objects.freeze(obj)
    if not prevent_extensions(obj):
        raise TypeError("cannot prevent extensions of proxy")
    return obj


def is_frozen(obj) -> bool:
    if is_extensible(obj):
        return False
    for key in own_keys(obj):
        descriptor = get_own_property_descriptor(obj, key)
        if descriptor is not None and (descriptor.configurable or descriptor.writable):
            return False
    return True


def own_keys(obj) -> list[str]:
    if not is_proxy(obj):
        return objects.own_keys(obj)
    target, handler = _unwrap(obj, "own_keys")
    trap = getattr(handler, "own_keys", None)
    if trap is None:
        return own_keys(target)
    keys = list(trap(target))
    if len(dict.fromkeys(keys)) != len(keys):
        raise InvariantError("'own_keys' on proxy: trap returned duplicate entries")
    for key in own_keys(target):
        if key not in keys and _fixed_descriptor(target, key) is not None:
            raise InvariantError(
                f"'own_keys' on proxy: trap result did not include {key!r}"
            )
    return keys


def get_own_property_descriptor(obj, name: str) -> Optional[PropertyDescriptor]:
    if not is_proxy(obj):
        return objects.get_own_property_descriptor(obj, name)
    target, handler = _unwrap(obj, "get_own_property_descriptor")
    trap = getattr(handler, "get_own_property_descriptor", None)
    if trap is None:
        return get_own_property_descriptor(target, name)
    result = trap(target, name)
    expected = get_own_property_descriptor(target, name)
    fixed = expected is not None and not expected.configurable
    if result is None:
        if fixed:
            raise InvariantError(
                "'get_own_property_descriptor' on proxy: trap reported "
                f"non-configurable property {name!r} as non-existent"
            )
        return None
    if result.configurable:
        if fixed:
            raise InvariantError(
                "'get_own_property_descriptor' on proxy: trap reported "
                f"non-configurable property {name!r} as configurable"
            )
        return result
    if not fixed:
        raise InvariantError(
            "'get_own_property_descriptor' on proxy: trap reported property "
            f"{name!r} as non-configurable, which it is not on the proxy target"
        )
    if not expected.writable and (
        result.writable or not _same_value(result.value, expected.value)
    ):
        raise InvariantError(
            "'get_own_property_descriptor' on proxy: trap returned a descriptor "
            f"for {name!r} incompatible with the proxy target's non-writable property"
        )
    return result


def define_property(obj, name: str, descriptor: PropertyDescriptor) -> bool:
    if not is_proxy(obj):
        return objects.define_property(obj, name, descriptor)
    target, handler = _unwrap(obj, "define_property")
    trap = getattr(handler, "define_property", None)
    if trap is None:
        return define_property(target, name, descriptor)
    return bool(trap(target, name, descriptor))


def has(obj, name: str) -> bool:
    if not is_proxy(obj):
        return objects.has(obj, name)
    target, handler = _unwrap(obj, "has")
    trap = getattr(handler, "has", None)
    if trap is None:
        return has(target, name)
    result = bool(trap(target, name))
    if not result and _fixed_descriptor(target, name) is not None:
        raise InvariantError(
            f"'has' on proxy: trap returned falsish for property {name!r} which "
            "exists in the proxy target as non-configurable"
        )
    return result


def get(obj, name: str):
    if not is_proxy(obj):
        return objects.get(obj, name)
    target, handler = _unwrap(obj, "get")
    trap = getattr(handler, "get", None)
    if trap is None:
        return get(target, name)
    return trap(target, name)


def set(obj, name: str, value) -> bool:
    if not is_proxy(obj):
        return objects.set(obj, name, value)
    target, handler = _unwrap(obj, "set")
    trap = getattr(handler, "set", None)
    if trap is None:
        return set(target, name, value)
    return bool(trap(target, name, value))


def delete_property(obj, name: str) -> bool:
    if not is_proxy(obj):
        return objects.delete_property(obj, name)
    target, handler = _unwrap(obj, "delete_property")
    trap = getattr(handler, "delete_property", None)
    if trap is None:
        return delete_property(target, name)
    result = bool(trap(target, name))
    if result and _fixed_descriptor(target, name) is not None:
        raise InvariantError(
            f"'delete_property' on proxy: trap returned truish for property {name!r} "
            "which is non-configurable in the proxy target"
        )
    return result


def apply(func, args=(), kwargs=None):
    if not is_proxy(func):
        return objects.apply(func, args, kwargs)
    target, handler = _unwrap(func, "apply")
    if not callable(target):
        raise TypeError("proxy target is not callable")
    trap = getattr(handler, "apply", None)
    if trap is None:
        return apply(target, args, kwargs)
    return trap(target, tuple(args), dict(kwargs or {}))


def construct(target_or_proxy, args=(), kwargs=None):
    if not is_proxy(target_or_proxy):
        return objects.construct(target_or_proxy, args, kwargs)
    target, handler = _unwrap(target_or_proxy, "construct")
    if not callable(target):
        raise TypeError("proxy target is not a constructor")
    trap = getattr(handler, "construct", None)
    if trap is None:
        return construct(target, args, kwargs)
    return trap(target, tuple(args), dict(kwargs or {}))
