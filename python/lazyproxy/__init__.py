from __future__ import annotations

from importlib import metadata as _metadata

from .factory import Creator, create, make, make_constructible, make_function, make_object
from .kinds import UNCONFIGURABLE_PROPS
from .runtime import (
    Handler,
    InvariantError,
    Proxy,
    ReentrantConstructionError,
    Revocable,
    RevokedProxyError,
    reflect,
)


def __getattr__(name: str):
    if name != "__version__":
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    try:
        found = _metadata.version("lazyproxy")
    except _metadata.PackageNotFoundError:
        # Imported from a source checkout.
        found = "0.0.0"
    globals()["__version__"] = found
    return found


def __dir__() -> list[str]:
    return sorted({*globals(), "__version__"})


__all__ = [
    "Creator",
    "Handler",
    "InvariantError",
    "Proxy",
    "ReentrantConstructionError",
    "Revocable",
    "RevokedProxyError",
    "UNCONFIGURABLE_PROPS",
    "create",
    "make",
    "make_constructible",
    "make_function",
    "make_object",
    "reflect",
    "__version__",
]
