"""Backing-value kinds and the properties each kind can never reconfigure.

Every lazy proxy is built over a throwaway empty value of its kind. Before
the real value exists, the proxy still has to answer for the empty value's
non-configurable properties, so those names are collected once per kind at
import time by probing a fresh instance.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Callable, Mapping

from .runtime import reflect

logger = logging.getLogger(__name__)


class _Object:
    """Empty attribute bag."""


def _empty_callable():
    return lambda *args, **kwargs: None


def _empty_function():
    def function(*args, **kwargs):
        return None

    return function


CALLABLE = "callable"
FUNCTION = "function"
OBJECT = "object"
CONSTRUCTIBLE = "constructible"

# Maps kind -> maker of a fresh empty carrier.
BACKING_TYPES: dict[str, Callable[[], object]] = {
    CALLABLE: _empty_callable,
    FUNCTION: _empty_function,
    OBJECT: _Object,
    CONSTRUCTIBLE: _Object,
}


def _unconfigurable_names(value) -> tuple[str, ...]:
    names = []
    for name in reflect.own_keys(value):
        descriptor = reflect.get_own_property_descriptor(value, name)
        if descriptor is not None and not descriptor.configurable:
            names.append(name)
    return tuple(names)


def _build_unconfigurable_props() -> Mapping[str, tuple[str, ...]]:
    table = {kind: _unconfigurable_names(empty()) for kind, empty in BACKING_TYPES.items()}
    for kind, names in table.items():
        logger.debug("kind %r pins %d unconfigurable properties", kind, len(names))
    return MappingProxyType(table)


UNCONFIGURABLE_PROPS = _build_unconfigurable_props()


def empty_carrier(kind: str):
    try:
        make_empty = BACKING_TYPES[kind]
    except KeyError as exc:
        raise ValueError(f"unknown backing kind: {kind!r}") from exc
    return make_empty()
