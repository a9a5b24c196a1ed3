from __future__ import annotations

import importlib
import sys
from pathlib import Path
from typing import Callable

import pytest

ROOT = Path(__file__).resolve().parents[2]
PYTHON_DIR = ROOT / "python"
if str(PYTHON_DIR) not in sys.path:
    sys.path.insert(0, str(PYTHON_DIR))

reflect = importlib.import_module("lazyproxy.runtime.reflect")


@pytest.fixture
def make_stub() -> Callable[[], Callable]:
    """Factory of counting factories.

    Each stub returns a function exposing its arguments, whether it was
    constructed, and how many times the stub has run.
    """

    def build():
        def fn(foo, bar):
            def obj(*args):
                return {"new": reflect.new_target() is obj, "args": list(args)}

            fn.call_count += 1
            obj.new = reflect.new_target() is fn
            obj.call = fn.call_count
            obj.foo = foo
            obj.bar = bar
            obj.m_foo = lambda caps=False: foo.upper() if caps else foo
            return obj

        fn.call_count = 0
        return fn

    return build
