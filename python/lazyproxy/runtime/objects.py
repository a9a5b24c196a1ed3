"""Structural operations on ordinary (non-proxy) Python objects.

An object's own properties are the entries of its instance ``__dict__`` plus
its intrinsic attributes: data descriptors supplied by the type layout
(``getset_descriptor``/``member_descriptor``) that currently hold a value.
Intrinsic attributes cannot be removed from an object, so they are always
reported non-configurable.
"""

from __future__ import annotations

import types
import weakref
from contextvars import ContextVar
from typing import Any, Mapping, NamedTuple, Optional

_DATA_DESCRIPTORS = (types.GetSetDescriptorType, types.MemberDescriptorType)
_LAYOUT_SLOTS = frozenset({"__dict__", "__weakref__", "__class__"})

_intrinsic_cache: "weakref.WeakKeyDictionary[type, tuple[str, ...]]" = (
    weakref.WeakKeyDictionary()
)
_writable_cache: "weakref.WeakKeyDictionary[type, dict[str, bool]]" = (
    weakref.WeakKeyDictionary()
)
_new_target: ContextVar[Any] = ContextVar("new_target", default=None)


class PropertyDescriptor(NamedTuple):
    value: Any = None
    writable: bool = True
    enumerable: bool = True
    configurable: bool = True


class _IdentitySet:
    """Weak membership by identity, usable with unhashable objects."""

    __slots__ = ("_refs",)

    def __init__(self) -> None:
        self._refs: dict[int, weakref.ref] = {}

    def add(self, obj) -> None:
        key = id(obj)
        try:
            ref = weakref.ref(obj, lambda _, key=key: self._refs.pop(key, None))
        except TypeError:
            raise TypeError(
                f"cannot prevent extensions of {type(obj).__name__!r} object"
            ) from None
        self._refs[key] = ref

    def __contains__(self, obj) -> bool:
        ref = self._refs.get(id(obj))
        return ref is not None and ref() is obj


_non_extensible = _IdentitySet()
_frozen = _IdentitySet()


def _instance_dict(obj) -> Optional[Mapping[str, Any]]:
    try:
        namespace = object.__getattribute__(obj, "__dict__")
    except (AttributeError, TypeError):
        return None
    return namespace if isinstance(namespace, Mapping) else None


def _intrinsic_candidates(klass: type) -> tuple[str, ...]:
    try:
        return _intrinsic_cache[klass]
    except (KeyError, TypeError):
        pass
    found: list[str] = []
    shadowed: dict[str, None] = {}
    for base in klass.__mro__:
        for name, attr in vars(base).items():
            if name in shadowed:
                continue
            shadowed[name] = None
            if name not in _LAYOUT_SLOTS and isinstance(attr, _DATA_DESCRIPTORS):
                found.append(name)
    names = tuple(found)
    try:
        _intrinsic_cache[klass] = names
    except TypeError:
        pass
    return names


def _intrinsic_names(obj) -> list[str]:
    names = []
    for name in _intrinsic_candidates(type(obj)):
        try:
            getattr(obj, name)
        except AttributeError:
            continue
        names.append(name)
    return names


def _intrinsic_writable(obj, name: str) -> bool:
    try:
        known = _writable_cache.setdefault(type(obj), {})
    except TypeError:
        known = {}
    if name not in known:
        # Writing the current value back tells read-only slots apart.
        try:
            setattr(obj, name, getattr(obj, name))
        except (AttributeError, TypeError):
            known[name] = False
        else:
            known[name] = True
    return known[name]


def _type_defines(obj, name: str) -> bool:
    return any(name in vars(base) for base in type(obj).__mro__)


def has_own(obj, name: str) -> bool:
    namespace = _instance_dict(obj)
    if namespace is not None and name in namespace:
        return True
    return name in _intrinsic_names(obj)


def get_prototype_of(obj) -> type:
    return type(obj)


def set_prototype_of(obj, prototype: type) -> bool:
    if type(obj) is prototype:
        return True
    if not is_extensible(obj):
        return False
    try:
        obj.__class__ = prototype
    except TypeError:
        return False
    return True


def is_extensible(obj) -> bool:
    return _instance_dict(obj) is not None and obj not in _non_extensible


def prevent_extensions(obj) -> bool:
    if _instance_dict(obj) is not None:
        _non_extensible.add(obj)
    return True


def freeze(obj):
    """Make ``obj`` non-extensible with every own property fixed."""
    prevent_extensions(obj)
    if _instance_dict(obj) is not None:
        _frozen.add(obj)
    return obj


def own_keys(obj) -> list[str]:
    namespace = _instance_dict(obj)
    keys = list(namespace) if namespace is not None else []
    keys.extend(name for name in _intrinsic_names(obj) if name not in keys)
    return keys


def get_own_property_descriptor(obj, name: str) -> Optional[PropertyDescriptor]:
    namespace = _instance_dict(obj)
    if namespace is not None and name in namespace:
        fixed = obj in _frozen
        return PropertyDescriptor(
            namespace[name], writable=not fixed, enumerable=True, configurable=not fixed
        )
    if name in _intrinsic_names(obj):
        writable = obj not in _frozen and _intrinsic_writable(obj, name)
        return PropertyDescriptor(
            getattr(obj, name), writable=writable, enumerable=False, configurable=False
        )
    return None


def define_property(obj, name: str, descriptor: PropertyDescriptor) -> bool:
    # Per-attribute restrictions have no Python representation; use freeze().
    if not (descriptor.writable and descriptor.enumerable and descriptor.configurable):
        return False
    current = get_own_property_descriptor(obj, name)
    if current is None:
        if not is_extensible(obj):
            return False
    elif not current.configurable:
        return False
    setattr(obj, name, descriptor.value)
    return True


def has(obj, name: str) -> bool:
    return hasattr(obj, name)


def get(obj, name: str):
    return getattr(obj, name)


def set(obj, name: str, value) -> bool:
    current = get_own_property_descriptor(obj, name)
    if current is not None:
        if not current.writable:
            return False
    elif obj in _non_extensible and not _type_defines(obj, name):
        return False
    setattr(obj, name, value)
    return True


def delete_property(obj, name: str) -> bool:
    if name in _intrinsic_names(obj):
        return False
    if obj in _frozen and has_own(obj, name):
        return False
    try:
        delattr(obj, name)
    except AttributeError:
        return False
    return True


def new_target():
    """Return the callable currently being invoked through :func:`construct`."""
    return _new_target.get()


def apply(func, args=(), kwargs=None):
    token = _new_target.set(None)
    try:
        return func(*args, **(kwargs or {}))
    finally:
        _new_target.reset(token)


def construct(target, args=(), kwargs=None):
    if not callable(target):
        raise TypeError(f"{type(target).__name__!r} object is not a constructor")
    token = _new_target.set(target)
    try:
        return target(*args, **(kwargs or {}))
    finally:
        _new_target.reset(token)
