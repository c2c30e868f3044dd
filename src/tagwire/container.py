from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable, Sequence
from contextlib import AbstractContextManager, nullcontext
from contextvars import ContextVar
from typing import Any, TypeVar, overload

from tagwire.binding import Binding
from tagwire.exceptions import (
    TagwireCircularDependencyError,
    TagwireInvalidArgumentError,
    TagwireRegistrationConflictError,
    TagwireUnresolvedDependencyError,
)
from tagwire.lock_mode import LockMode
from tagwire.requests import ByCallable, ByTag, ByValue, as_request
from tagwire.signature import SignatureExtractor

T = TypeVar("T")

CONTAINER_TAG = "container"
"""Tag under which a container registers itself."""

logger = logging.getLogger(__name__)

# Tags currently being built in this thread / task, as (container id, tag) pairs.
# Keyed by container so nested containers with overlapping tags do not collide.
_resolution_stack: ContextVar[tuple[tuple[int, str], ...]] = ContextVar(
    "tagwire_resolution_stack",
    default=(),
)


class Container:
    """Register tagged recipes and resolve object graphs by parameter name.

    Every recipe is stored under a string tag. When something is built, each
    of its parameter names is looked up as a tag, resolved recursively, and
    passed positionally in declaration order::

        class Repository:
            def __init__(self, db, logger): ...

        container = Container()
        container.register("db", Database).as_singleton()
        container.register("logger", logging.getLogger("app"))
        container.register("repository", Repository)

        repository = container.make("repository")

    Each container owns an isolated registry; there is no default or global
    container. Resolution is synchronous. A tag reached again while it is
    still being built raises ``TagwireCircularDependencyError``.
    """

    __slots__ = (
        "_attributes",
        "_bindings",
        "_factories",
        "_lock_mode",
        "_registry_lock",
        "_signature_extractor",
    )

    def __init__(
        self,
        *,
        lock_mode: LockMode = LockMode.THREAD,
        signature_extractor: SignatureExtractor | None = None,
        register_self: bool = True,
    ) -> None:
        """Initialize an empty container.

        Args:
            lock_mode: ``LockMode.THREAD`` serializes registration and first
                builds of singletons. ``LockMode.NONE`` skips locking for
                containers confined to one thread.
            signature_extractor: Extractor deriving dependency names from
                callables. Defaults to ``SignatureExtractor()``.
            register_self: Register the container under the ``"container"``
                tag as a weak instance binding.

        Raises:
            TagwireInvalidArgumentError: If ``lock_mode`` is not a ``LockMode``.

        """
        if not isinstance(lock_mode, LockMode):
            raise TagwireInvalidArgumentError(lock_mode, "a LockMode")

        self._lock_mode = lock_mode
        self._signature_extractor = signature_extractor or SignatureExtractor()
        self._registry_lock = self._new_lock(reentrant=True)

        self._bindings: dict[str, Binding] = {}
        self._factories: dict[type[Any], Callable[..., Any]] = {}
        self._attributes: dict[type[Any], dict[str, Any]] = {}

        if register_self:
            self.register(CONTAINER_TAG, self).as_instance().as_weak()

    # region Registration Methods
    def register(
        self,
        tag: str,
        source: Any,
        *,
        dependencies: Iterable[str] | None = None,
    ) -> Binding:
        """Bind ``source`` to ``tag`` and return the binding for configuration.

        Classes and factory callables are invoked on resolution with their
        parameters resolved by name. Any other value is returned as-is.

        Args:
            tag: Tag to register under.
            source: Class, factory callable, or plain value.
            dependencies: Explicit dependency tags for ``source``. When given,
                parameter names are not extracted.

        Raises:
            TagwireInvalidArgumentError: If ``tag`` is not a string or
                ``dependencies`` is a bare string.
            TagwireRegistrationConflictError: If ``tag`` is bound by a binding
                that is not weak.

        Examples:
            .. code-block:: python

                container.register("settings", Settings()).as_weak()
                container.register("client", HttpClient).as_singleton()
                container.register("handler", on_event).as_instance()
                container.register("cache", make_cache, dependencies=["settings"])

        """
        if not isinstance(tag, str):
            raise TagwireInvalidArgumentError(tag, "a tag string")
        if isinstance(dependencies, str):
            raise TagwireInvalidArgumentError(dependencies, "an iterable of tag strings")

        binding = Binding(
            tag,
            source,
            self._build_binding,
            signature_extractor=self._signature_extractor,
            lock=self._new_lock(reentrant=False),
        )
        if dependencies is not None:
            binding.with_dependencies(*dependencies)

        with self._registry_lock:
            existing = self._bindings.get(tag)
            if existing is not None and not existing.is_weak:
                raise TagwireRegistrationConflictError(tag)
            self._bindings[tag] = binding

        if existing is not None:
            logger.debug("Replaced weak binding for tag '%s' with %r", tag, source)
        else:
            logger.debug("Registered tag '%s' -> %r", tag, source)
        return binding

    def register_factory(self, cls: type[Any], factory: Callable[..., Any]) -> None:
        """Build ``cls`` through ``factory`` whenever ``make(cls)`` is called.

        The factory's own parameters are resolved by name. Registering a new
        factory for the same class replaces the previous one.

        Args:
            cls: Class whose direct construction should be redirected.
            factory: Callable returning the instance to use.

        Raises:
            TagwireInvalidArgumentError: If ``cls`` is not a class or
                ``factory`` is not callable.

        """
        if not isinstance(cls, type):
            raise TagwireInvalidArgumentError(cls, "a class")
        if not callable(factory):
            raise TagwireInvalidArgumentError(factory, "a callable factory")
        with self._registry_lock:
            self._factories[cls] = factory
        logger.debug("Registered factory %r for %s", factory, cls.__qualname__)

    def register_attributes(self, cls: type[Any], **attributes: Any) -> None:
        """Assign attributes to every instance of ``cls`` the container builds.

        Attributes are set right after construction, whether the instance came
        from a binding, from ``make(cls)``, or from a factory registered with
        ``register_factory``. Repeated calls merge, later values winning.

        Args:
            cls: Class whose built instances receive the attributes.
            **attributes: Attribute names and values to assign.

        Raises:
            TagwireInvalidArgumentError: If ``cls`` is not a class.

        """
        if not isinstance(cls, type):
            raise TagwireInvalidArgumentError(cls, "a class")
        with self._registry_lock:
            self._attributes.setdefault(cls, {}).update(attributes)

    # endregion Registration Methods

    # region Resolution Methods
    @overload
    def make(self, thing: str) -> Any: ...

    @overload
    def make(self, thing: type[T]) -> T: ...

    @overload
    def make(self, thing: Callable[..., T]) -> T: ...

    @overload
    def make(self, thing: Any) -> Any: ...

    def make(self, thing: Any) -> Any:
        """Resolve a tag, construct a callable, or pass a value through.

        - A string is looked up as a tag and its binding is built.
        - A callable is invoked with its parameters resolved as tags. The
          registry is neither consulted for the callable itself nor changed.
        - Anything else is returned unchanged.

        Args:
            thing: Tag, class, factory, plain value, or a request variant from
                ``tagwire.requests``.

        Raises:
            TagwireUnresolvedDependencyError: If a tag at any depth has no
                binding.
            TagwireSignatureParseError: If a callable's parameter names cannot
                be determined.
            TagwireCircularDependencyError: If a tag depends on itself.

        """
        match as_request(thing):
            case ByTag(tag=tag):
                return self._make_from_tag(tag)
            case ByCallable(provider=provider):
                return self._make_from_callable(provider)
            case ByValue(value=value):
                return value

    def make_or_none(self, tag: str) -> Any | None:
        """Resolve ``tag`` or return ``None`` when it is not registered.

        Args:
            tag: Tag to resolve.

        Raises:
            TagwireInvalidArgumentError: If ``tag`` is not a string.

        """
        if not isinstance(tag, str):
            raise TagwireInvalidArgumentError(tag, "a tag string")
        if not self.tag_exists(tag):
            return None
        return self.make(tag)

    def tag_exists(self, tag: str) -> bool:
        """Return whether a binding is registered under ``tag``.

        Args:
            tag: Tag to look up.

        """
        return tag in self._bindings

    def get_factory(self) -> Callable[[Any], Any]:
        """Return a one-argument callable that forwards to ``make``."""

        def factory(thing: Any) -> Any:
            return self.make(thing)

        return factory

    def tags(self) -> tuple[str, ...]:
        """Return the registered tags in sorted order."""
        return tuple(sorted(self._bindings))

    # endregion Resolution Methods

    def _make_from_tag(self, tag: str) -> Any:
        binding = self._bindings.get(tag)
        stack = _resolution_stack.get()
        if binding is None:
            raise TagwireUnresolvedDependencyError(tag, self._current_path(stack))
        if binding.is_cached:
            return binding.build()

        frame = (id(self), tag)
        if frame in stack:
            path = self._current_path(stack)
            raise TagwireCircularDependencyError(tag, path[path.index(tag) :])

        token = _resolution_stack.set((*stack, frame))
        try:
            return binding.build()
        finally:
            _resolution_stack.reset(token)

    def _make_from_callable(self, provider: Callable[..., Any]) -> Any:
        factory = self._factories.get(provider) if isinstance(provider, type) else None
        if factory is not None:
            return self._construct(
                factory,
                self._signature_extractor.extract(factory),
                built_type=provider,
            )
        return self._construct(
            provider,
            self._signature_extractor.extract(provider),
            built_type=provider if isinstance(provider, type) else None,
        )

    def _build_binding(self, binding: Binding) -> Any:
        source = binding.source
        return self._construct(
            source,
            binding.get_dependency_names(),
            built_type=source if isinstance(source, type) else None,
        )

    def _construct(
        self,
        provider: Callable[..., Any],
        dependency_names: Sequence[str],
        *,
        built_type: type[Any] | None,
    ) -> Any:
        arguments = [self.make(name) for name in dependency_names]
        instance = provider(*arguments)
        if built_type is not None and (attributes := self._attributes.get(built_type)):
            for name, value in attributes.items():
                setattr(instance, name, value)
        return instance

    def _current_path(self, stack: tuple[tuple[int, str], ...]) -> list[str]:
        container_id = id(self)
        return [tag for owner_id, tag in stack if owner_id == container_id]

    def _new_lock(self, *, reentrant: bool) -> AbstractContextManager[Any]:
        if self._lock_mode is LockMode.NONE:
            return nullcontext()
        return threading.RLock() if reentrant else threading.Lock()
