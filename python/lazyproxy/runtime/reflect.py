"""Structural operations on objects and proxies.

    >>> from lazyproxy.runtime import reflect
    >>> reflect.own_keys(obj)
    >>> reflect.get_own_property_descriptor(obj, "name")
"""

from __future__ import annotations

from .objects import PropertyDescriptor, new_target
from .proxy import (
    apply,
    construct,
    define_property,
    delete_property,
    freeze,
    get,
    get_own_property_descriptor,
    get_prototype_of,
    has,
    is_extensible,
    is_frozen,
    is_proxy,
    own_keys,
    prevent_extensions,
    set,
    set_prototype_of,
)

__all__ = [
    "PropertyDescriptor",
    "apply",
    "construct",
    "define_property",
    "delete_property",
    "freeze",
    "get",
    "get_own_property_descriptor",
    "get_prototype_of",
    "has",
    "is_extensible",
    "is_frozen",
    "is_proxy",
    "new_target",
    "own_keys",
    "prevent_extensions",
    "set",
    "set_prototype_of",
]
