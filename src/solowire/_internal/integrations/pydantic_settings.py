from __future__ import annotations

import functools
import importlib
import warnings
from typing import Any

from solowire._internal.type_checks import is_runtime_class

_PYDANTIC_V1_WARNING_PATTERN = (
    r"Core Pydantic V1 functionality isn't compatible with Python 3\.14 or greater\."
)
_SETTINGS_MODULES = ("pydantic_settings", "pydantic.v1")


def _load_base_settings(module_name: str) -> type[Any] | None:
    with warnings.catch_warnings():
        warnings.filterwarnings(
            "ignore",
            message=_PYDANTIC_V1_WARNING_PATTERN,
            category=UserWarning,
        )
        try:
            module = importlib.import_module(module_name)
        except ImportError:
            return None
    base_settings = getattr(module, "BaseSettings", None)
    if isinstance(base_settings, type):
        return base_settings
    return None


@functools.cache
def settings_bases() -> tuple[type[Any], ...]:
    """Return the settings base classes importable in this environment.

    Loaded on first use so that importing solowire never imports pydantic.
    """
    bases: list[type[Any]] = []
    for module_name in _SETTINGS_MODULES:
        base = _load_base_settings(module_name)
        if base is not None and base not in bases:
            bases.append(base)
    return tuple(bases)


def is_pydantic_settings_subclass(candidate: object) -> bool:
    """Return whether a class is a supported Pydantic settings model.

    solowire checks ``pydantic_settings.BaseSettings`` and the legacy
    ``pydantic.v1.BaseSettings`` when available. Settings classes read their
    values from the environment, so they are built with a zero-argument call
    and may be autoregistered when missing.

    Args:
        candidate: Object to test.

    Returns:
        ``True`` when ``candidate`` is a runtime class and a strict subclass of
        a discovered settings base; otherwise ``False``.

    """
    if not is_runtime_class(candidate):
        return False
    try:
        return any(
            issubclass(candidate, base) and candidate is not base for base in settings_bases()
        )
    except TypeError:
        return False


__all__ = ["is_pydantic_settings_subclass", "settings_bases"]
