from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from solowire._internal.descriptors import Descriptor
from solowire._internal.diagnostics import describe_type
from solowire._internal.engine import ResolutionEngine
from solowire._internal.registry import Registry
from solowire._internal.type_checks import (
    base_type,
    is_instance_of_capability,
    is_runtime_class,
    satisfies_capability,
    supports_instance_checks,
)
from solowire.container import Container
from solowire.exceptions import (
    SoloWireContainerNotBuiltError,
    SoloWireInvalidRegistrationError,
    SoloWireRegistrationFailedError,
)

if TYPE_CHECKING:
    from typing_extensions import Self

logger = logging.getLogger(__name__)
_NO_INSTANCE: Any = object()


class RegistrationHandle:
    """Refine a registration returned by ``ContainerBuilder.register``.

    Handle methods return the handle itself so calls chain.
    """

    __slots__ = ("_descriptor", "_registry")

    def __init__(self, registry: Registry, descriptor: Descriptor) -> None:
        self._registry = registry
        self._descriptor = descriptor

    @property
    def type_key(self) -> Any:
        """The key the component was registered under."""
        return self._descriptor.type_key

    def as_(self, capability: Any) -> Self:
        """Also expose the component under a capability key.

        The component type must be a subclass of the capability. For
        externally owned components the instance itself may satisfy it. A
        previous mapping for the capability is replaced.

        Args:
            capability: Base class, ABC, runtime-checkable protocol, or an
                ``Annotated`` key whose base the component satisfies.

        Raises:
            SoloWireRegistrationFailedError: If the component does not satisfy the capability.
            SoloWireContainerAlreadyBuiltError: If the builder was already built.

        Examples:
            .. code-block:: python

                builder.register(PostgresStorage).as_(Storage).as_(HealthCheck)

        """
        with self._registry.lock:
            self._registry.ensure_not_sealed()
            if not self._satisfies(capability):
                msg = (
                    f"Component '{describe_type(self._descriptor.type_key)}' cannot be "
                    f"registered as '{describe_type(capability)}'."
                )
                raise SoloWireRegistrationFailedError(msg)
            self._registry.alias(capability, self._descriptor)
        return self

    def without_self(self) -> Self:
        """Stop resolving the component by its own key.

        The component stays reachable through its ``as_`` aliases and through
        ``Container.of_capability``.

        Raises:
            SoloWireContainerAlreadyBuiltError: If the builder was already built.

        """
        self._registry.remove_own_key(self._descriptor)
        return self

    def _satisfies(self, capability: Any) -> bool:
        try:
            hash(capability)
        except TypeError:
            return False
        descriptor = self._descriptor
        if satisfies_capability(base_type(descriptor.type_key), capability):
            return True
        return descriptor.externally_owned and is_instance_of_capability(
            descriptor.instance,
            capability,
        )


class ContainerBuilder:
    """Collect component registrations and build them into a ``Container``.

    Every component is a process-wide singleton. ``build`` creates each one
    once, passing other components into its constructor according to the
    constructor's parameter annotations, and may be called only once.

    Registration methods and ``build`` share one lock, so several threads may
    register before the build.
    """

    def __init__(self, *, autoregister_missing: bool = False) -> None:
        """Initialize an empty builder.

        Args:
            autoregister_missing: Default for ``build``: register missing
                concrete dependency classes automatically instead of failing.

        Examples:
            .. code-block:: python

                builder = ContainerBuilder()
                lenient_builder = ContainerBuilder(autoregister_missing=True)

        """
        self._autoregister_missing = autoregister_missing
        self._registry = Registry()
        self._engine = ResolutionEngine(registry=self._registry)
        self._container: Container | None = None

    def register(
        self,
        type_key: Any,
        instance: Any = _NO_INSTANCE,
        *,
        factory: Callable[..., Any] | None = None,
    ) -> RegistrationHandle:
        """Register a component under a type key.

        Without ``instance`` or ``factory`` the key must be a concrete class,
        which the build constructs. With ``instance`` the object is externally
        owned and used as is. With ``factory`` the callable builds the
        component and its annotated parameters are its dependencies.
        Registering the same key again replaces the mapping; the earlier
        component is still built.

        Args:
            type_key: Class, capability, or ``Annotated`` component key.
            instance: Pre-built object to register. Must not be ``None``.
            factory: Callable producing the component.

        Raises:
            SoloWireInvalidRegistrationError: If the arguments cannot describe a component.
            SoloWireRegistrationFailedError: If ``instance`` is not an instance of the key.
            SoloWireContainerAlreadyBuiltError: If the builder was already built.

        Examples:
            .. code-block:: python

                builder.register(Database)
                builder.register(Settings, Settings(url="sqlite://"))
                builder.register(Annotated[Database, Component("replica")], factory=make_replica)

        """
        descriptor = self._new_descriptor(type_key, instance, factory)
        self._registry.add(descriptor)
        return RegistrationHandle(self._registry, descriptor)

    def register_instance(self, instance: Any, *, provides: Any = None) -> RegistrationHandle:
        """Register an externally owned object.

        Args:
            instance: Pre-built object to register.
            provides: Key to register under. Defaults to ``type(instance)``.

        """
        type_key = type(instance) if provides is None else provides
        return self.register(type_key, instance)

    def build(self, *, autoregister_missing: bool | None = None) -> Container:
        """Construct every registered component and return the container.

        Args:
            autoregister_missing: Override the builder default for this call.

        Raises:
            SoloWireContainerAlreadyBuiltError: If ``build`` was called before.
            SoloWireDependencyMissingError: If a dependency is never registered.
            SoloWireDependencyCycleError: If components depend on each other.
            SoloWireConstructorFaultedError: If a constructor raises.

        """
        if autoregister_missing is None:
            autoregister_missing = self._autoregister_missing

        self._registry.ensure_not_sealed()
        with self._registry.lock:
            # Sealing re-checks under the lock; a failed build still counts.
            self._registry.seal()
            self._engine.run(autoregister_missing=autoregister_missing)
            container = Container(
                instances_by_key=self._registry.instances_by_key(),
                components=self._registry.created(),
            )
            self._container = container

        logger.info("Built container with %d component(s)", len(container))
        return container

    @property
    def container(self) -> Container:
        """The container returned by ``build``.

        Raises:
            SoloWireContainerNotBuiltError: If ``build`` has not completed successfully.

        """
        if self._container is None:
            msg = "Container has not been built; call build() first."
            raise SoloWireContainerNotBuiltError(msg)
        return self._container

    def _new_descriptor(
        self,
        type_key: Any,
        instance: Any,
        factory: Callable[..., Any] | None,
    ) -> Descriptor:
        try:
            hash(type_key)
        except TypeError as error:
            msg = f"Type key {type_key!r} is not hashable."
            raise SoloWireInvalidRegistrationError(msg) from error

        component_type = base_type(type_key)
        if instance is not _NO_INSTANCE:
            if instance is None:
                msg = "register() parameter 'instance' must not be None."
                raise SoloWireInvalidRegistrationError(msg)
            if factory is not None:
                msg = "register() accepts either 'instance' or 'factory', not both."
                raise SoloWireInvalidRegistrationError(msg)
            if supports_instance_checks(component_type) and not is_instance_of_capability(
                instance,
                component_type,
            ):
                msg = (
                    f"Instance of '{describe_type(type(instance))}' cannot be registered as "
                    f"'{describe_type(type_key)}'."
                )
                raise SoloWireRegistrationFailedError(msg)
            return Descriptor.external(type_key, instance)

        if factory is not None:
            if not callable(factory):
                msg = f"Factory for '{describe_type(type_key)}' must be callable, got {factory!r}."
                raise SoloWireInvalidRegistrationError(msg)
            return Descriptor(type_key=type_key, factory=factory)

        if not is_runtime_class(component_type):
            msg = f"Component must be a class, got {type_key!r}."
            raise SoloWireInvalidRegistrationError(msg)
        if inspect.isabstract(component_type) or getattr(component_type, "_is_protocol", False):
            msg = (
                f"Component '{component_type.__qualname__}' cannot be an abstract class; "
                "register a concrete class and alias it with as_()."
            )
            raise SoloWireInvalidRegistrationError(msg)
        return Descriptor(type_key=type_key)


__all__ = ["ContainerBuilder", "RegistrationHandle"]
