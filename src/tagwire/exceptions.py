from __future__ import annotations

from collections.abc import Sequence
from typing import Any


class TagwireError(Exception):
    """Represent a base class for all tagwire-specific failures.

    Catch this type when you want to handle any tagwire error path without
    matching each concrete exception class individually.
    """


class TagwireRegistrationConflictError(TagwireError):
    """Signal a registration under a tag that is already strongly bound.

    Raised by ``Container.register`` when the tag is occupied by a binding that
    was not marked with ``as_weak()``.

    Typical fixes include registering the earlier binding with ``as_weak()``
    when it is meant as an overridable default, or choosing a different tag.
    """

    def __init__(self, tag: str) -> None:
        self.tag = tag
        super().__init__(f"Tag '{tag}' is already bound and the existing binding is not weak.")


class TagwireUnresolvedDependencyError(TagwireError):
    """Signal that a tag has no binding.

    Raised by ``Container.make`` at any depth of a resolution chain. ``path``
    holds the tags that were being built when the miss happened, outermost
    first, so the failing parameter can be traced back to its consumer.
    """

    def __init__(self, tag: str, path: Sequence[str] = ()) -> None:
        self.tag = tag
        self.path = tuple(path)
        msg = f"Cannot resolve dependency '{tag}'"
        if self.path:
            msg += f" (required by {' -> '.join(self.path)})"
        super().__init__(f"{msg}.")


class TagwireSignatureParseError(TagwireError):
    """Signal that a callable's parameter names cannot be determined.

    Raised when ``inspect`` cannot produce a signature for the callable, or when
    the signature uses parameter kinds that cannot be filled positionally from
    tags (``*args``, ``**kwargs``, keyword-only parameters).

    Typical fix is passing explicit dependencies, for example
    ``container.register("client", make_client, dependencies=["settings"])``.
    """

    def __init__(self, provider: Any, source_text: str, reason: str) -> None:
        self.provider = provider
        self.source_text = source_text
        self.reason = reason
        provider_name = getattr(provider, "__qualname__", repr(provider))
        super().__init__(f"Unable to extract dependency names from '{provider_name}': {reason}")


class TagwireInvalidArgumentError(TagwireError, TypeError):
    """Signal an argument of the wrong type passed to a container operation."""

    def __init__(self, argument: Any, expected: str) -> None:
        self.argument = argument
        self.expected = expected
        super().__init__(f"Expected {expected}, got {type(argument).__name__}: {argument!r}.")


class TagwireCircularDependencyError(TagwireError):
    """Signal a tag that depends on itself, directly or transitively.

    ``path`` is the resolution chain that closed the cycle; its first and last
    elements are both ``tag``.
    """

    def __init__(self, tag: str, path: Sequence[str]) -> None:
        self.tag = tag
        self.path = (*path, tag)
        super().__init__(f"Circular dependency detected: {' -> '.join(self.path)}.")


class TagwireBindingSealedError(TagwireError):
    """Signal reconfiguration of a binding that has already been built.

    Fluent calls such as ``as_singleton()`` are only valid before the first
    resolution of the binding. Configure the binding right after
    ``register`` returns it.
    """

    def __init__(self, tag: str) -> None:
        self.tag = tag
        super().__init__(f"Binding for tag '{tag}' was already built and cannot be reconfigured.")
