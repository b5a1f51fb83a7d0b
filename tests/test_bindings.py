"""Unit tests for bindings and the registry."""

from __future__ import annotations

import pytest

from tidyconf.bindings import Binding, BindingRegistry
from tidyconf.core.exceptions import DuplicateBindingError, TypeCoercionError
from tidyconf.document.path import ConfigPath


def test_kind_is_inferred_from_default():
    assert Binding.create(ConfigPath.parse("a"), 1).kind == "scalar"
    assert Binding.create(ConfigPath.parse("a"), {"x": 1}).kind == "mapping"
    assert Binding.create(ConfigPath.parse("a"), ["x"]).kind == "sequence"


def test_preserve_subtree_defaults_from_shape():
    assert not Binding.create(ConfigPath.parse("a"), "text").preserve_subtree
    assert Binding.create(ConfigPath.parse("a"), {"x": 1}).preserve_subtree
    assert Binding.create(ConfigPath.parse("a"), []).preserve_subtree
    assert Binding.create(ConfigPath.parse("a"), {}, preserve_subtree=False).preserve_subtree is False


def test_default_is_copied():
    default = {"x": [1]}
    binding = Binding.create(ConfigPath.parse("a"), default)

    default["x"].append(2)

    assert binding.default == {"x": [1]}


@pytest.mark.parametrize(
    "default, stored, expected",
    [
        (25565, "25565", 25565),
        (25565, 80, 80),
        (1.5, 2, 2.0),
        ("text", 12, "12"),
        (True, "yes", True),
        (None, {"anything": 1}, {"anything": 1}),
        ({"a": 1}, {"b": 2}, {"b": 2}),
        (["a"], ["b", "c"], ["b", "c"]),
    ],
)
def test_coerce_accepts_compatible_values(default, stored, expected):
    binding = Binding.create(ConfigPath.parse("key"), default)

    assert binding.coerce(stored) == expected


@pytest.mark.parametrize(
    "default, stored",
    [
        (25565, "not-a-number"),
        (25565, {"port": 1}),
        (True, "maybe"),
        ({"a": 1}, "flat"),
        (["a"], {"a": 1}),
    ],
)
def test_coerce_rejects_incompatible_values(default, stored):
    binding = Binding.create(ConfigPath.parse("key"), default)

    with pytest.raises(TypeCoercionError):
        binding.coerce(stored)


def test_registry_keeps_declaration_order():
    registry = BindingRegistry()
    for dotted in ["b", "a.c", "a"]:
        registry.declare(ConfigPath.parse(dotted), 0)

    assert [str(p) for p in registry.declared_paths()] == ["b", "a.c", "a"]
    assert len(registry) == 3
    assert ConfigPath.parse("a.c") in registry


def test_registry_rejects_duplicates():
    registry = BindingRegistry()
    registry.declare(ConfigPath.parse("a"), 1)

    with pytest.raises(DuplicateBindingError) as exc_info:
        registry.declare(ConfigPath.parse("a"), {"other": "default"})

    assert exc_info.value.context == {"path": "a"}
    assert registry.get(ConfigPath.parse("a")).default == 1


def test_preserved_paths():
    registry = BindingRegistry()
    registry.declare(ConfigPath.parse("port"), 1)
    registry.declare(ConfigPath.parse("map"), {"a": 1})
    registry.declare(ConfigPath.parse("list"), [])

    assert [str(p) for p in registry.preserved_paths()] == ["map", "list"]
