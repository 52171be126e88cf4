"""Tests for the built Container: lookups and capability queries."""

from __future__ import annotations

from abc import ABC
from typing import Protocol, runtime_checkable

import pytest

from solowire.builder import ContainerBuilder
from solowire.container import Container
from solowire.exceptions import SoloWireResolutionFailedError


class Plugin(ABC):
    pass


class AuditPlugin(Plugin):
    pass


class MetricsPlugin(Plugin):
    def __init__(self, audit: AuditPlugin) -> None:
        self.audit = audit


class Unrelated:
    pass


@runtime_checkable
class Startable(Protocol):
    def start(self) -> None: ...


class Stoppable(Protocol):
    def stop(self) -> None: ...


class Worker:
    def start(self) -> None:
        return None

    def stop(self) -> None:
        return None


@pytest.fixture()
def container(builder: ContainerBuilder) -> Container:
    builder.register(MetricsPlugin).as_(Plugin)
    builder.register(AuditPlugin)
    builder.register(Unrelated)
    builder.register(Worker)
    return builder.build()


class TestResolve:
    def test_resolve_by_own_key(self, container: Container) -> None:
        assert isinstance(container.resolve(AuditPlugin), AuditPlugin)

    def test_resolve_by_alias(self, container: Container) -> None:
        assert container.resolve(Plugin) is container.resolve(MetricsPlugin)

    def test_resolve_never_walks_class_hierarchy(self, container: Container) -> None:
        with pytest.raises(SoloWireResolutionFailedError):
            container.resolve(Startable)

    def test_resolution_error_carries_key(self, container: Container) -> None:
        class NotRegistered:
            pass

        with pytest.raises(SoloWireResolutionFailedError) as exc_info:
            container.resolve(NotRegistered)

        assert exc_info.value.key is NotRegistered
        assert "is not registered" in str(exc_info.value)

    def test_resolve_unhashable_key_fails_cleanly(self, container: Container) -> None:
        with pytest.raises(SoloWireResolutionFailedError):
            container.resolve([AuditPlugin])


class TestOfCapability:
    def test_matches_subclasses_in_construction_order(self, container: Container) -> None:
        plugins = container.of_capability(Plugin)

        assert [type(plugin) for plugin in plugins] == [AuditPlugin, MetricsPlugin]

    def test_capability_does_not_need_registration(self, container: Container) -> None:
        assert container.of_capability(Startable) == [container.resolve(Worker)]

    def test_non_runtime_protocol_matches_nothing(self, container: Container) -> None:
        assert container.of_capability(Stoppable) == []

    def test_generic_alias_matches_nothing(self, container: Container) -> None:
        assert container.of_capability(list[int]) == []

    def test_object_matches_every_component(self, container: Container) -> None:
        assert len(container.of_capability(object)) == len(container) == 4

    def test_result_is_a_fresh_list(self, container: Container) -> None:
        first = container.of_capability(Plugin)
        first.clear()

        assert len(container.of_capability(Plugin)) == 2


class TestContainerProtocol:
    def test_contains(self, container: Container) -> None:
        assert AuditPlugin in container
        assert Plugin in container
        assert Startable not in container
        assert [AuditPlugin] not in container

    def test_keys(self, container: Container) -> None:
        assert set(container.keys()) == {MetricsPlugin, Plugin, AuditPlugin, Unrelated, Worker}

    def test_len_counts_components_not_keys(self, container: Container) -> None:
        assert len(container) == 4

    def test_repr(self, container: Container) -> None:
        assert repr(container) == "Container(components=4)"

    def test_empty_build(self, builder: ContainerBuilder) -> None:
        container = builder.build()

        assert len(container) == 0
        assert container.of_capability(object) == []
