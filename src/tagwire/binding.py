from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from contextlib import AbstractContextManager, nullcontext
from typing import TYPE_CHECKING, Any

from tagwire.exceptions import TagwireBindingSealedError, TagwireInvalidArgumentError
from tagwire.signature import SignatureExtractor

if TYPE_CHECKING:
    from typing_extensions import Self

BuildFunction = Callable[["Binding"], Any]
"""Container callback that turns a binding into a fresh instance."""

logger = logging.getLogger(__name__)
_EMPTY: Any = object()


class Binding:
    """Describe how the value registered under one tag is produced and cached.

    A binding is created by ``Container.register`` and handed back for fluent
    configuration::

        container.register("db", Database).as_singleton()
        container.register("settings", settings_dict)
        container.register("clock", time.monotonic).as_instance()

    Non-callable sources are their own value and are never constructed.
    Callable sources are invoked through the container's build function, with
    their dependencies resolved by parameter name. Configuration is only
    allowed until the binding is first built; afterwards it is sealed.
    """

    __slots__ = (
        "_build_function",
        "_cache",
        "_dependency_names",
        "_lock",
        "_sealed",
        "_signature_extractor",
        "_singleton",
        "_source",
        "_tag",
        "_weak",
    )

    def __init__(
        self,
        tag: str,
        source: Any,
        build_function: BuildFunction,
        *,
        signature_extractor: SignatureExtractor | None = None,
        lock: AbstractContextManager[Any] | None = None,
    ) -> None:
        """Initialize a binding for ``source`` under ``tag``.

        Args:
            tag: Tag the binding is registered under.
            source: Class, factory callable, or plain value.
            build_function: Callback invoked with this binding to construct a
                new instance when the cache is empty.
            signature_extractor: Extractor used to derive dependency names.
                Defaults to a plain ``SignatureExtractor``.
            lock: Context manager guarding the first build of a singleton.
                Defaults to no locking.

        """
        self._tag = tag
        self._source = source
        self._build_function = build_function
        self._signature_extractor = signature_extractor or SignatureExtractor()
        self._lock: AbstractContextManager[Any] = lock if lock is not None else nullcontext()

        self._cache: Any = _EMPTY if callable(source) else source
        self._dependency_names: tuple[str, ...] | None = None
        self._weak = False
        self._singleton = False
        self._sealed = False

    @property
    def tag(self) -> str:
        return self._tag

    @property
    def source(self) -> Any:
        return self._source

    @property
    def is_weak(self) -> bool:
        return self._weak

    @property
    def is_singleton(self) -> bool:
        return self._singleton

    @property
    def is_sealed(self) -> bool:
        return self._sealed

    @property
    def is_cached(self) -> bool:
        """Whether ``build`` will return a stored value without constructing."""
        return self._cache is not _EMPTY

    # region Fluent configuration
    def as_weak(self) -> Self:
        """Allow a later registration under the same tag to replace this binding."""
        self._ensure_not_sealed()
        self._weak = True
        return self

    def as_singleton(self) -> Self:
        """Cache the first built instance and return it for every later build."""
        self._ensure_not_sealed()
        self._singleton = True
        return self

    def as_instance(self) -> Self:
        """Use the source itself as the resolved value, even when it is callable."""
        self._ensure_not_sealed()
        self._cache = self._source
        return self

    def with_dependencies(self, *names: str) -> Self:
        """Set the dependency names explicitly instead of extracting them.

        Args:
            *names: Tags resolved and passed positionally to the source, in
                order.

        Raises:
            TagwireInvalidArgumentError: If any name is not a string.
            TagwireBindingSealedError: If the binding was already built.

        """
        self._ensure_not_sealed()
        self._dependency_names = _validated_names(names)
        return self

    # endregion Fluent configuration

    def get_dependency_names(self) -> tuple[str, ...]:
        """Return the tags this binding's source depends on.

        The extractor runs at most once per binding; non-callable sources have
        no dependencies and never reach it.
        """
        if self._dependency_names is not None:
            return self._dependency_names

        if callable(self._source):
            self._dependency_names = self._signature_extractor.extract(self._source)
        else:
            self._dependency_names = ()
        return self._dependency_names

    def build(self) -> Any:
        """Return the cached value or construct a new one.

        Singletons are constructed at most once even when several threads
        build them concurrently. Errors raised while constructing propagate
        unchanged and leave the cache empty.
        """
        self._sealed = True
        if self._cache is not _EMPTY:
            return self._cache

        if not self._singleton:
            return self._build_function(self)

        with self._lock:
            # Another thread may have finished the build while we waited.
            if self._cache is not _EMPTY:
                return self._cache
            instance = self._build_function(self)
            self._cache = instance
            logger.debug("Cached singleton instance for tag '%s'", self._tag)
            return instance

    def _ensure_not_sealed(self) -> None:
        if self._sealed:
            raise TagwireBindingSealedError(self._tag)

    def __repr__(self) -> str:
        flags = [
            name
            for name, enabled in (
                ("weak", self._weak),
                ("singleton", self._singleton),
                ("cached", self.is_cached),
            )
            if enabled
        ]
        return f"Binding(tag={self._tag!r}, source={self._source!r}, flags={flags})"


def _validated_names(names: Iterable[Any]) -> tuple[str, ...]:
    validated: list[str] = []
    for name in names:
        if not isinstance(name, str):
            raise TagwireInvalidArgumentError(name, "a dependency tag string")
        validated.append(name)
    return tuple(validated)
