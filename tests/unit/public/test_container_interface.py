from __future__ import annotations

import inspect

from tagwire import Binding, Container


def test_container_public_methods() -> None:
    public_methods = {
        name
        for name, member in inspect.getmembers(Container, inspect.isfunction)
        if not name.startswith("_")
    }

    assert public_methods == {
        "get_factory",
        "make",
        "make_or_none",
        "register",
        "register_attributes",
        "register_factory",
        "tag_exists",
        "tags",
    }


def test_binding_fluent_methods() -> None:
    public_methods = {
        name
        for name, member in inspect.getmembers(Binding, inspect.isfunction)
        if not name.startswith("_")
    }

    assert public_methods == {
        "as_instance",
        "as_singleton",
        "as_weak",
        "build",
        "get_dependency_names",
        "with_dependencies",
    }


def test_make_accepts_single_positional_argument() -> None:
    parameters = list(inspect.signature(Container.make).parameters)

    assert parameters == ["self", "thing"]
