"""Proxy runtime: ordinary-object reflection, handler proxies and call-once accessors."""

from __future__ import annotations

from . import reflect
from .proxy import (
    CallableProxy,
    Handler,
    InvariantError,
    Proxy,
    Revocable,
    RevokedProxyError,
    create,
    revocable,
)
from .singleton import Accessor, ReentrantConstructionError, once

__all__ = [
    "Accessor",
    "CallableProxy",
    "Handler",
    "InvariantError",
    "Proxy",
    "ReentrantConstructionError",
    "Revocable",
    "RevokedProxyError",
    "create",
    "once",
    "reflect",
    "revocable",
]
