from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from solowire._internal.autoregistration import ConcreteTypeAutoregistrationPolicy
from solowire._internal.descriptors import Descriptor
from solowire._internal.diagnostics import describe_type
from solowire._internal.factory_selector import FactorySelector
from solowire._internal.registry import Registry
from solowire.exceptions import (
    IncompleteComponent,
    SoloWireConstructorFaultedError,
    SoloWireDependencyCycleError,
    SoloWireDependencyError,
    SoloWireDependencyMissingError,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ResolutionEngine:
    """Construct every registered component by iterating to a fixed point.

    Planning asks the factory selector for a constructor per descriptor and
    stores it on the descriptor. Descriptors with no dependencies are built
    on the spot and keep their place in the unique list; the rest leave it
    and wait in the pending list. Each pass then builds every pending
    component whose dependencies all hold instances and appends it to the
    unique list, so the list ends in construction order. A pass that builds
    nothing stalls the build: missing keys raise
    ``SoloWireDependencyMissingError``, otherwise the leftovers form a cycle
    and raise ``SoloWireDependencyCycleError``.

    The caller must hold ``registry.lock`` and must have sealed the registry.
    """

    registry: Registry
    factory_selector: FactorySelector = field(default_factory=FactorySelector)
    autoregistration_policy: ConcreteTypeAutoregistrationPolicy = field(
        default_factory=ConcreteTypeAutoregistrationPolicy,
    )

    def run(self, *, autoregister_missing: bool = False) -> None:
        """Build all components or raise a build error.

        Args:
            autoregister_missing: Register eligible missing concrete types
                instead of failing on them.

        Raises:
            SoloWireDependencyMissingError: If a dependency key is never registered.
            SoloWireDependencyCycleError: If the remaining components wait on each other.
            SoloWireConstructorFaultedError: If a constructor raises or returns ``None``.

        """
        pending = self._plan_registered()
        passes = 0

        while pending:
            passes += 1
            still_pending: list[Descriptor] = []
            for descriptor in pending:
                values = self._ready_values(descriptor)
                if values is None:
                    still_pending.append(descriptor)
                    continue
                self._construct(descriptor, values)
                self.registry.append_completed_during_build(descriptor)

            logger.debug(
                "Build pass %d constructed %d component(s), %d pending",
                passes,
                len(pending) - len(still_pending),
                len(still_pending),
            )
            if len(still_pending) == len(pending):
                missing = self._missing_keys(still_pending)
                if not (autoregister_missing and missing):
                    raise self._stall_error(still_pending, missing)
                added = self._autoregister(missing)
                if added is None:
                    raise self._stall_error(still_pending, missing)
                still_pending.extend(added)
            pending = still_pending

    def _plan_registered(self) -> list[Descriptor]:
        kept: list[Descriptor] = []
        pending: list[Descriptor] = []
        for descriptor in self.registry.descriptors():
            if descriptor.has_instance or not self._plan(descriptor):
                kept.append(descriptor)
            else:
                pending.append(descriptor)
        self.registry.replace_order_during_build(kept)
        return pending

    def _plan(self, descriptor: Descriptor) -> bool:
        """Select the descriptor's constructor; return true when it has to wait."""
        descriptor.plan = self.factory_selector.select(descriptor)
        if descriptor.plan.dependencies:
            return True
        self._construct(descriptor, ())
        return False

    def _autoregister(self, missing: list[Any]) -> list[Descriptor] | None:
        eligible = [key for key in missing if self.autoregistration_policy.is_eligible(key)]
        if not eligible:
            return None

        added: list[Descriptor] = []
        for key in eligible:
            logger.debug("Autoregistering missing dependency %s", describe_type(key))
            descriptor = Descriptor(type_key=key)
            self.registry.map_during_build(descriptor)
            if self._plan(descriptor):
                added.append(descriptor)
            else:
                self.registry.append_completed_during_build(descriptor)
        return added

    def _ready_values(self, descriptor: Descriptor) -> list[Any] | None:
        values: list[Any] = []
        for key in descriptor.selected_plan.dependency_keys:
            dependency = self.registry.find(key)
            if dependency is None or not dependency.has_instance:
                return None
            values.append(dependency.instance)
        return values

    def _construct(self, descriptor: Descriptor, values: Any) -> None:
        try:
            instance = descriptor.selected_plan.invoke(values)
        except Exception as error:
            raise self._fault(descriptor) from error
        if instance is None:
            msg = f"Constructor of '{describe_type(descriptor.type_key)}' returned None."
            raise self._fault(descriptor) from TypeError(msg)
        descriptor.set_instance(instance)

    def _fault(self, descriptor: Descriptor) -> SoloWireConstructorFaultedError:
        return SoloWireConstructorFaultedError(
            component=descriptor.type_key,
            dependencies=descriptor.selected_plan.dependency_keys,
            created=self.registry.created(),
        )

    def _missing_keys(self, pending: list[Descriptor]) -> list[Any]:
        missing: list[Any] = []
        for descriptor in pending:
            for key in descriptor.selected_plan.dependency_keys:
                if key not in self.registry and key not in missing:
                    missing.append(key)
        return missing

    def _stall_error(
        self,
        pending: list[Descriptor],
        missing: list[Any],
    ) -> SoloWireDependencyError:
        incomplete = [
            IncompleteComponent(descriptor.type_key, descriptor.selected_plan.dependency_keys)
            for descriptor in pending
        ]
        created = self.registry.created()
        if missing:
            return SoloWireDependencyMissingError(
                missing=missing,
                incomplete=incomplete,
                created=created,
            )
        return SoloWireDependencyCycleError(incomplete=incomplete, created=created)


__all__ = ["ResolutionEngine"]
