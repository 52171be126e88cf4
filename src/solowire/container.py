from __future__ import annotations

from collections.abc import Iterable, KeysView, Mapping
from types import MappingProxyType
from typing import Any, TypeVar, overload

from solowire._internal.type_checks import is_instance_of_capability
from solowire.exceptions import SoloWireResolutionFailedError

T = TypeVar("T")


class Container:
    """Expose the singletons produced by ``ContainerBuilder.build``.

    The container is read-only: it holds an immutable key-to-instance mapping
    and the instances in the order they were constructed. It is safe to share
    between threads without locking.
    """

    __slots__ = ("_components", "_instances_by_key")

    def __init__(self, instances_by_key: Mapping[Any, Any], components: Iterable[Any]) -> None:
        self._instances_by_key: Mapping[Any, Any] = MappingProxyType(dict(instances_by_key))
        self._components: tuple[Any, ...] = tuple(components)

    @overload
    def resolve(self, dependency: type[T]) -> T: ...

    @overload
    def resolve(self, dependency: Any) -> Any: ...

    def resolve(self, dependency: Any) -> Any:
        """Return the singleton registered under an exact key.

        Lookups never walk class hierarchies: a component is reachable by its
        own key (unless registered ``without_self``) and by the capabilities
        it was aliased to with ``as_``.

        Args:
            dependency: Type key to look up.

        Raises:
            SoloWireResolutionFailedError: If no component is registered under the key.

        Examples:
            .. code-block:: python

                storage = container.resolve(Storage)

        """
        try:
            return self._instances_by_key[dependency]
        except (KeyError, TypeError) as error:
            raise SoloWireResolutionFailedError(dependency) from error

    def of_capability(self, capability: type[T]) -> list[T]:
        """Return every component that is an instance of a capability.

        The capability does not have to be registered. Results follow
        construction order, so a component always comes after the components
        it depends on. Capabilities that cannot be checked at runtime match
        nothing.

        Args:
            capability: Class, ABC, or runtime-checkable protocol to match.

        Examples:
            .. code-block:: python

                for plugin in container.of_capability(Plugin):
                    plugin.start()

        """
        return [
            component
            for component in self._components
            if is_instance_of_capability(component, capability)
        ]

    def keys(self) -> KeysView[Any]:
        """Return every key that ``resolve`` accepts."""
        return self._instances_by_key.keys()

    def __contains__(self, dependency: object) -> bool:
        try:
            return dependency in self._instances_by_key
        except TypeError:
            return False

    def __len__(self) -> int:
        return len(self._components)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(components={len(self._components)})"


__all__ = ["Container"]
