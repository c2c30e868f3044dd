"""Resolution requests understood by ``Container.make``.

``make`` accepts a tag, a callable, or any other value. The argument is
normalized into one of three request variants before dispatch, so each
resolution path is explicit. Callers that want to force a path, for example
to pass a string through unchanged, can hand a variant to ``make`` directly::

    container.make(ByValue("literal string"))
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeAlias


@dataclass(frozen=True, slots=True)
class ByTag:
    """Resolve the binding registered under ``tag``."""

    tag: str


@dataclass(frozen=True, slots=True)
class ByCallable:
    """Call ``provider`` with its parameters resolved by name, bypassing the registry."""

    provider: Callable[..., Any]


@dataclass(frozen=True, slots=True)
class ByValue:
    """Return ``value`` unchanged."""

    value: Any


Request: TypeAlias = ByTag | ByCallable | ByValue
"""Closed set of resolution requests."""


def as_request(thing: Any) -> Request:
    """Classify an argument of ``Container.make`` into a request variant.

    Strings become tag lookups, other callables (classes included) become
    direct constructions, and everything else passes through as a value.
    Request variants are returned as given.

    Args:
        thing: Tag, callable, value, or an existing request.

    """
    if isinstance(thing, (ByTag, ByCallable, ByValue)):
        return thing
    if isinstance(thing, str):
        return ByTag(thing)
    if callable(thing):
        return ByCallable(thing)
    return ByValue(thing)
