"""Shared pytest fixtures for solowire tests."""

import pytest

from solowire.builder import ContainerBuilder


@pytest.fixture()
def builder() -> ContainerBuilder:
    """Default builder in strict mode: missing dependencies fail the build."""
    return ContainerBuilder()


@pytest.fixture()
def lenient_builder() -> ContainerBuilder:
    """Builder that autoregisters missing concrete dependencies."""
    return ContainerBuilder(autoregister_missing=True)
