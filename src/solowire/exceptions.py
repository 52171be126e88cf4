from __future__ import annotations

from collections.abc import Iterable
from typing import Any, NamedTuple

from solowire._internal.diagnostics import (
    describe_signature,
    describe_type,
    format_cycle_report,
    format_missing_report,
    sort_by_description,
)


class IncompleteComponent(NamedTuple):
    """A component left unbuilt by a stalled build, with its full dependency signature."""

    component: Any
    dependencies: tuple[Any, ...]


class SoloWireError(Exception):
    """Represent a base class for all solowire-specific failures.

    Catch this type when you want to handle any solowire error path without
    matching each concrete exception class individually.
    """


class SoloWireUsageError(SoloWireError):
    """Signal that the builder or container API was misused.

    Usage errors are raised synchronously at the offending call and are never
    recoverable there. The calling code has to change.
    """


class SoloWireContainerNotBuiltError(SoloWireUsageError):
    """Signal access to ``ContainerBuilder.container`` before a successful build.

    Typical fix is calling ``builder.build()`` first and keeping the returned
    container.
    """


class SoloWireContainerAlreadyBuiltError(SoloWireUsageError):
    """Signal mutation or a second build after ``build()`` was called.

    Raised by ``register``, ``as_``, ``without_self`` and ``build`` once the
    builder has started building, whether or not that build succeeded.

    Typical fix is finishing every registration before the single ``build()``
    call and creating a new ``ContainerBuilder`` when a fresh graph is needed.
    """


class SoloWireRegistrationFailedError(SoloWireUsageError):
    """Signal an alias or instance that does not satisfy the requested type.

    Raised by ``RegistrationHandle.as_`` when the component type is not a
    subclass of the capability, and by ``register`` when an externally owned
    instance is not an instance of its key. The registry is left unchanged.
    """


class SoloWireInvalidRegistrationError(SoloWireUsageError):
    """Signal invalid registration arguments.

    Common triggers are unhashable keys, ``None`` instances, combining an
    instance with a factory, registering a non-class or abstract key without
    a factory, and marking more than one preferred constructor.
    """


class SoloWireDependencyInferenceError(SoloWireUsageError):
    """Signal that a constructor's dependencies cannot be inferred.

    Common triggers are required parameters without a type annotation and
    annotations that cannot be evaluated.

    Typical fixes include annotating every required constructor parameter or
    registering the component with an explicit ``factory=``.
    """


class SoloWireResolutionFailedError(SoloWireError):
    """Signal that ``Container.resolve`` was asked for an unknown key.

    The key was never registered, or its component was registered with
    ``without_self()`` and the key is only reachable through its aliases.
    """

    def __init__(self, key: Any) -> None:
        self.key = key
        super().__init__(f"Dependency '{describe_type(key)}' is not registered.")


class SoloWireBuildError(SoloWireError):
    """Represent a failed ``build()`` call.

    Build errors carry ``created``: the instances constructed before the
    failure, in construction order. They exist for diagnostics only; no
    container is produced.
    """

    def __init__(self, message: str, *, created: Iterable[Any]) -> None:
        super().__init__(message)
        self.created: tuple[Any, ...] = tuple(created)


class SoloWireDependencyError(SoloWireBuildError):
    """Represent a build that stopped making progress.

    ``incomplete`` lists the keys of every component left unbuilt, and
    ``signatures`` pairs each of them with its dependency keys.
    """

    def __init__(
        self,
        message: str,
        *,
        incomplete: Iterable[IncompleteComponent],
        created: Iterable[Any],
    ) -> None:
        super().__init__(message, created=created)
        self.signatures: tuple[IncompleteComponent, ...] = tuple(incomplete)
        self.incomplete: tuple[Any, ...] = tuple(entry.component for entry in self.signatures)


class SoloWireDependencyMissingError(SoloWireDependencyError):
    """Signal dependencies that no registration provides.

    ``missing`` holds every unregistered key referenced by an unbuilt
    component, sorted by description. ``incomplete`` holds the components
    that needed them directly or transitively.

    Typical fixes include registering the missing types, aliasing an existing
    component to a missing capability with ``as_``, or building with
    ``autoregister_missing=True`` for concrete classes.
    """

    def __init__(
        self,
        *,
        missing: Iterable[Any],
        incomplete: Iterable[IncompleteComponent],
        created: Iterable[Any],
    ) -> None:
        sorted_missing = tuple(sort_by_description(missing))
        signatures = tuple(incomplete)
        super().__init__(
            format_missing_report(sorted_missing, signatures),
            incomplete=signatures,
            created=created,
        )
        self.missing: tuple[Any, ...] = sorted_missing


class SoloWireDependencyCycleError(SoloWireDependencyError):
    """Signal components that depend on each other.

    Every dependency is registered, yet the unbuilt components wait only on
    each other: they form a cycle or depend on one.

    Typical fix is breaking the cycle by moving the shared state into a third
    component both sides depend on.
    """

    def __init__(
        self,
        *,
        incomplete: Iterable[IncompleteComponent],
        created: Iterable[Any],
    ) -> None:
        signatures = tuple(incomplete)
        super().__init__(format_cycle_report(signatures), incomplete=signatures, created=created)


class SoloWireConstructorFaultedError(SoloWireBuildError):
    """Signal that a component constructor raised.

    The build aborts at the first failing constructor. The original exception
    is chained as ``__cause__``. ``component`` and ``signature`` identify the
    constructor that was attempted.
    """

    def __init__(
        self,
        *,
        component: Any,
        dependencies: Iterable[Any],
        created: Iterable[Any],
    ) -> None:
        signature = tuple(dependencies)
        super().__init__(describe_signature(component, signature), created=created)
        self.component = component
        self.signature: tuple[Any, ...] = signature
