from __future__ import annotations

import threading
from typing import Any

from solowire._internal.descriptors import Descriptor
from solowire.exceptions import SoloWireContainerAlreadyBuiltError


class Registry:
    """Store descriptors by type key and in registration order.

    Several keys may point at one descriptor. Re-registering a key replaces
    its mapping; the earlier descriptor stays in the unique list. During a
    build the unique list is rewritten so that it ends up in construction
    order.

    Every public mutation checks the build guard under ``lock``. The engine
    holds the same lock for the whole build and uses the ``*_during_build``
    methods, which skip the guard.
    """

    def __init__(self) -> None:
        self.lock = threading.RLock()
        self._descriptors_by_key: dict[Any, Descriptor] = {}
        self._unique: list[Descriptor] = []
        self._is_sealed = False

    def ensure_not_sealed(self) -> None:
        if self._is_sealed:
            msg = "Container was already built; registrations are closed."
            raise SoloWireContainerAlreadyBuiltError(msg)

    def seal(self) -> None:
        """Close the registry to user mutations. Called once, when a build starts."""
        with self.lock:
            self.ensure_not_sealed()
            self._is_sealed = True

    def add(self, descriptor: Descriptor) -> None:
        """Map a descriptor under its own key and append it to the unique list.

        Args:
            descriptor: Newly created descriptor.

        """
        with self.lock:
            self.ensure_not_sealed()
            self._descriptors_by_key[descriptor.type_key] = descriptor
            self._unique.append(descriptor)

    def map_during_build(self, descriptor: Descriptor) -> None:
        self._descriptors_by_key[descriptor.type_key] = descriptor

    def alias(self, key: Any, descriptor: Descriptor) -> None:
        """Map an additional key to an existing descriptor, replacing any prior mapping.

        Args:
            key: Capability key to add.
            descriptor: Descriptor the key should resolve to.

        """
        with self.lock:
            self.ensure_not_sealed()
            self._descriptors_by_key[key] = descriptor

    def remove_own_key(self, descriptor: Descriptor) -> None:
        """Drop the descriptor's own key mapping, if it still points at the descriptor.

        Args:
            descriptor: Descriptor registered with ``without_self``.

        """
        with self.lock:
            self.ensure_not_sealed()
            if self._descriptors_by_key.get(descriptor.type_key) is descriptor:
                del self._descriptors_by_key[descriptor.type_key]

    def find(self, key: Any) -> Descriptor | None:
        return self._descriptors_by_key.get(key)

    def __contains__(self, key: Any) -> bool:
        return key in self._descriptors_by_key

    def descriptors(self) -> list[Descriptor]:
        """Return a copy of the unique list."""
        return list(self._unique)

    def replace_order_during_build(self, descriptors: list[Descriptor]) -> None:
        self._unique = list(descriptors)

    def append_completed_during_build(self, descriptor: Descriptor) -> None:
        self._unique.append(descriptor)

    def created(self) -> tuple[Any, ...]:
        """Return every instance held so far, in unique-list order."""
        return tuple(
            descriptor.instance for descriptor in self._unique if descriptor.has_instance
        )

    def instances_by_key(self) -> dict[Any, Any]:
        return {
            key: descriptor.instance
            for key, descriptor in self._descriptors_by_key.items()
            if descriptor.has_instance
        }


__all__ = ["Registry"]
