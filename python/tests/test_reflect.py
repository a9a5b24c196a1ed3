from __future__ import annotations

import importlib
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]
PYTHON_DIR = ROOT / "python"
sys.path.insert(0, str(PYTHON_DIR))

runtime = importlib.import_module("lazyproxy.runtime")
reflect = importlib.import_module("lazyproxy.runtime.reflect")
PropertyDescriptor = reflect.PropertyDescriptor


class Bag:
    def __init__(self, **attrs) -> None:
        self.__dict__.update(attrs)


class Slotted:
    __slots__ = ("value",)

    def __init__(self, value) -> None:
        self.value = value


def sample(a, b=1):
    return a


def test_dict_entries_are_configurable_properties() -> None:
    bag = Bag(foo="bar")

    assert reflect.get_own_property_descriptor(bag, "foo") == PropertyDescriptor(
        "bar", writable=True, enumerable=True, configurable=True
    )
    assert reflect.get_own_property_descriptor(bag, "missing") is None


def test_function_intrinsics_are_fixed() -> None:
    descriptor = reflect.get_own_property_descriptor(sample, "__name__")

    assert descriptor == PropertyDescriptor(
        "sample", writable=True, enumerable=False, configurable=False
    )
    assert reflect.delete_property(sample, "__name__") is False
    assert sample.__name__ == "sample"


def test_read_only_intrinsics_reject_writes() -> None:
    def fn():
        return None

    descriptor = reflect.get_own_property_descriptor(fn, "__globals__")

    assert descriptor.writable is False
    assert reflect.set(fn, "__globals__", {}) is False
    assert fn.__globals__ is globals()


def test_writable_intrinsics_accept_writes() -> None:
    def fn():
        return None

    assert reflect.set(fn, "__name__", "renamed") is True
    assert fn.__name__ == "renamed"
    assert reflect.get_own_property_descriptor(fn, "__name__").value == "renamed"


def test_frozen_intrinsics_are_not_writable() -> None:
    def fn():
        return None

    reflect.freeze(fn)

    assert reflect.get_own_property_descriptor(fn, "__name__").writable is False
    assert reflect.set(fn, "__name__", "renamed") is False
    assert fn.__name__ == "fn"
    assert reflect.is_frozen(fn) is True


def test_delete_missing_property_reports_false() -> None:
    bag = Bag(foo=1)

    assert reflect.delete_property(bag, "missing") is False
    assert reflect.delete_property(bag, "foo") is True
    assert reflect.delete_property(bag, "foo") is False


def test_own_keys_list_dict_entries_before_intrinsics() -> None:
    def fn():
        return None

    fn.marker = True
    keys = reflect.own_keys(fn)

    assert keys[0] == "marker"
    assert "__code__" in keys
    assert "__dict__" not in keys
    assert len(keys) == len(set(keys))


def test_slots_are_intrinsic() -> None:
    obj = Slotted(3)

    assert reflect.own_keys(obj) == ["value"]
    assert reflect.get_own_property_descriptor(obj, "value").configurable is False
    assert reflect.is_extensible(obj) is False


def test_freeze_fixes_properties() -> None:
    bag = reflect.freeze(Bag(foo=1))

    assert reflect.is_extensible(bag) is False
    assert reflect.is_frozen(bag) is True
    assert reflect.get_own_property_descriptor(bag, "foo").writable is False
    assert reflect.set(bag, "foo", 2) is False
    assert reflect.set(bag, "bar", 2) is False
    assert reflect.delete_property(bag, "foo") is False
    assert bag.foo == 1


def test_prevent_extensions_keeps_existing_properties_writable() -> None:
    bag = Bag(foo=1)

    assert reflect.prevent_extensions(bag) is True
    assert reflect.is_frozen(bag) is False
    assert reflect.set(bag, "foo", 2) is True
    assert reflect.set(bag, "bar", 2) is False
    assert reflect.define_property(bag, "bar", PropertyDescriptor(2)) is False
    assert bag.foo == 2


def test_builtin_values_are_not_extensible() -> None:
    assert reflect.is_extensible(42) is False
    assert reflect.prevent_extensions(42) is True


def test_unhashable_objects_can_be_frozen() -> None:
    class Unhashable(Bag):
        __hash__ = None

    obj = reflect.freeze(Unhashable(foo=1))

    assert reflect.is_frozen(obj) is True


def test_define_property_rejects_restricted_descriptors() -> None:
    bag = Bag()

    assert reflect.define_property(bag, "foo", PropertyDescriptor(1, writable=False)) is False
    assert reflect.define_property(bag, "foo", PropertyDescriptor(1)) is True
    assert bag.foo == 1


def test_set_prototype_of() -> None:
    class Other:
        pass

    bag = Bag()

    assert reflect.set_prototype_of(bag, Other) is True
    assert reflect.get_prototype_of(bag) is Other
    assert reflect.set_prototype_of(bag, int) is False


def test_new_target_tracks_construction() -> None:
    seen = []

    def factory():
        seen.append(reflect.new_target())

    reflect.construct(factory)
    reflect.apply(factory)

    assert seen == [factory, None]
    assert reflect.new_target() is None


def test_apply_clears_new_target_for_nested_calls() -> None:
    seen = []

    def inner():
        seen.append(reflect.new_target())

    def outer():
        reflect.apply(inner)

    reflect.construct(outer)

    assert seen == [None]


def test_construct_requires_callable() -> None:
    with pytest.raises(TypeError):
        reflect.construct(Bag())


def test_handler_without_traps_forwards_to_target() -> None:
    target = Bag(foo=1)
    proxy = runtime.create(target, runtime.Handler())

    assert proxy.foo == 1
    proxy.bar = 2
    assert target.bar == 2
    assert reflect.own_keys(proxy) == ["foo", "bar"]
    assert reflect.is_extensible(proxy) is True
    assert reflect.is_proxy(proxy) is True
    assert reflect.is_proxy(target) is False
    assert not callable(proxy)


def test_non_callable_proxy_rejects_apply() -> None:
    proxy = runtime.create(Bag(), runtime.Handler())

    with pytest.raises(TypeError):
        reflect.apply(proxy)


def test_callable_target_gives_callable_proxy() -> None:
    proxy = runtime.create(sample, runtime.Handler())

    assert isinstance(proxy, runtime.CallableProxy)
    assert proxy(5) == 5


def test_revocable_pair() -> None:
    pair = runtime.revocable(Bag(foo=1), runtime.Handler())

    assert pair.proxy.foo == 1
    pair.revoke()
    pair.revoke()

    with pytest.raises(runtime.RevokedProxyError, match="revoked"):
        pair.proxy.foo


def test_is_extensible_trap_must_agree_with_target() -> None:
    class Liar(runtime.Handler):
        def is_extensible(self, target):
            return False

    proxy = runtime.create(Bag(), Liar())

    with pytest.raises(runtime.InvariantError):
        reflect.is_extensible(proxy)


def test_prevent_extensions_trap_must_be_truthful() -> None:
    class Liar(runtime.Handler):
        def prevent_extensions(self, target):
            return True

    proxy = runtime.create(Bag(), Liar())

    with pytest.raises(runtime.InvariantError):
        reflect.prevent_extensions(proxy)


def test_own_keys_trap_must_report_fixed_keys() -> None:
    class Empty(runtime.Handler):
        def own_keys(self, target):
            return []

    proxy = runtime.create(sample, Empty())

    with pytest.raises(runtime.InvariantError):
        reflect.own_keys(proxy)


def test_own_keys_trap_must_not_repeat_keys() -> None:
    class Repeating(runtime.Handler):
        def own_keys(self, target):
            return ["a", "a"]

    proxy = runtime.create(Bag(), Repeating())

    with pytest.raises(runtime.InvariantError):
        reflect.own_keys(proxy)


def test_delete_trap_cannot_remove_fixed_property() -> None:
    class Deleting(runtime.Handler):
        def delete_property(self, target, name):
            return True

    proxy = runtime.create(sample, Deleting())

    with pytest.raises(runtime.InvariantError):
        del proxy.__name__


def test_descriptor_trap_cannot_invent_fixed_property() -> None:
    class Inventing(runtime.Handler):
        def get_own_property_descriptor(self, target, name):
            return PropertyDescriptor(1, writable=False, configurable=False)

    proxy = runtime.create(Bag(), Inventing())

    with pytest.raises(runtime.InvariantError):
        reflect.get_own_property_descriptor(proxy, "foo")


def test_freeze_on_proxy_prevents_extensions_of_target() -> None:
    target = Bag(foo=1)
    proxy = runtime.create(target, runtime.Handler())

    assert reflect.freeze(proxy) is proxy
    assert reflect.is_extensible(target) is False
