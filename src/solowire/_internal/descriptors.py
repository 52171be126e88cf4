from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from inspect import Parameter
from typing import Any

from solowire._internal.diagnostics import describe_type
from solowire.exceptions import SoloWireError

_EMPTY: Any = object()


@dataclass(frozen=True, slots=True)
class ProviderDependency:
    """Represent a dependency key bound to a constructor parameter."""

    provides: Any
    parameter: Parameter


@dataclass(frozen=True, slots=True)
class ComponentFactory:
    """The constructor chosen for a component, with its ordered dependencies."""

    factory: Callable[..., Any]
    dependencies: tuple[ProviderDependency, ...] = ()

    @property
    def dependency_keys(self) -> tuple[Any, ...]:
        return tuple(dependency.provides for dependency in self.dependencies)

    def invoke(self, values: Sequence[Any]) -> Any:
        """Call the factory with resolved values in declared dependency order.

        Positional-only parameters are passed positionally, everything else by
        keyword.

        Args:
            values: One resolved instance per dependency.

        """
        args: list[Any] = []
        kwargs: dict[str, Any] = {}
        for dependency, value in zip(self.dependencies, values, strict=True):
            if dependency.parameter.kind is Parameter.POSITIONAL_ONLY:
                args.append(value)
            else:
                kwargs[dependency.parameter.name] = value
        return self.factory(*args, **kwargs)


@dataclass(eq=False, slots=True)
class Descriptor:
    """Describe one registered component and hold its singleton instance.

    The instance slot is written at most once. Externally owned descriptors
    get their instance at registration and never run a factory.
    """

    type_key: Any
    """The key the component was registered under."""
    factory: Callable[..., Any] | None = None
    """Explicit factory supplied at registration, if any."""
    externally_owned: bool = False
    """True when the instance was supplied by the caller."""
    plan: ComponentFactory | None = None
    """Constructor selected during build."""
    _instance: Any = field(default=_EMPTY, repr=False)

    @classmethod
    def external(cls, type_key: Any, instance: Any) -> Descriptor:
        descriptor = cls(type_key=type_key, externally_owned=True)
        descriptor.set_instance(instance)
        return descriptor

    @property
    def selected_plan(self) -> ComponentFactory:
        if self.plan is None:
            msg = f"Component '{describe_type(self.type_key)}' has no selected constructor."
            raise SoloWireError(msg)
        return self.plan

    @property
    def has_instance(self) -> bool:
        return self._instance is not _EMPTY

    @property
    def instance(self) -> Any:
        if self._instance is _EMPTY:
            msg = f"Component '{describe_type(self.type_key)}' has not been built."
            raise SoloWireError(msg)
        return self._instance

    def set_instance(self, instance: Any) -> None:
        if self._instance is not _EMPTY:
            msg = f"Component '{describe_type(self.type_key)}' already holds an instance."
            raise SoloWireError(msg)
        self._instance = instance


__all__ = ["ComponentFactory", "Descriptor", "ProviderDependency"]
