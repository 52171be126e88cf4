"""pytest fixtures for tests that need a solowire container.

Enable the plugin with ``pytest_plugins = ["solowire.integrations.pytest_plugin"]``
and override ``solowire_builder`` to register the components under test.
"""

from __future__ import annotations

import pytest

from solowire.builder import ContainerBuilder
from solowire.container import Container


@pytest.fixture()
def solowire_builder() -> ContainerBuilder:
    """Create a per-test builder with no registrations.

    Override this fixture in a test module or ``conftest.py`` to register the
    components a test needs. The fixture is function-scoped, so registrations
    are isolated between tests.

    Returns:
        A new ``ContainerBuilder``.

    """
    return ContainerBuilder()


@pytest.fixture()
def solowire_container(solowire_builder: ContainerBuilder) -> Container:
    """Build the ``solowire_builder`` fixture and return its container.

    Build errors propagate, so a misconfigured graph fails the test at setup
    with the full missing/incomplete report.

    Args:
        solowire_builder: Builder holding the test's registrations.

    Returns:
        The built ``Container``.

    """
    return solowire_builder.build()
