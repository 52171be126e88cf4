"""Render type keys and stalled builds as deterministic text.

Reports are newline-joined blocks. A ``Missing:`` header is followed by one
indented line per missing type and an ``Incomplete:`` header by one indented
``Type(Param, ...)`` line per unbuilt component. Lines inside each block are
sorted by code point so the same graph always yields the same message.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Annotated, Any, TypeVar, get_args, get_origin

_INDENT = "  "


def describe_type(key: Any) -> str:
    """Return a stable, human-readable description of a type key.

    Classes render as ``module.QualName`` (nested classes keep their dotted
    qualified name), parameterized generics as ``module.Name<Arg, ...>``,
    open generic classes with their type parameters, ``TypeVar`` objects by
    name and ``Annotated`` keys with their metadata in brackets.

    Args:
        key: Type key to describe.

    """
    origin = get_origin(key)
    if origin is Annotated:
        base, *metadata = get_args(key)
        return f"{describe_type(base)}[{', '.join(repr(item) for item in metadata)}]"
    if isinstance(key, TypeVar):
        return key.__name__
    if origin is not None:
        arguments = get_args(key)
        if not arguments:
            return _qualified_name(origin)
        return f"{_qualified_name(origin)}<{', '.join(describe_type(arg) for arg in arguments)}>"
    if isinstance(key, type):
        parameters = getattr(key, "__parameters__", ())
        if isinstance(parameters, tuple) and parameters:
            return f"{_qualified_name(key)}<{', '.join(describe_type(p) for p in parameters)}>"
        return _qualified_name(key)
    return repr(key)


def describe_signature(component: Any, dependencies: Sequence[Any]) -> str:
    """Describe a constructor as ``Type(Param, ...)``.

    Args:
        component: Key of the component being constructed.
        dependencies: Dependency keys in declared parameter order.

    """
    parameters = ", ".join(describe_type(dependency) for dependency in dependencies)
    return f"{describe_type(component)}({parameters})"


def sort_by_description(keys: Iterable[Any]) -> list[Any]:
    """Return keys ordered by their description; equal descriptions keep input order."""
    return sorted(keys, key=describe_type)


def format_missing_report(
    missing: Iterable[Any],
    incomplete: Iterable[tuple[Any, Sequence[Any]]],
) -> str:
    """Render the ``Missing:`` block followed by the ``Incomplete:`` block.

    Args:
        missing: Keys that no registration provides.
        incomplete: ``(component, dependencies)`` pairs left unbuilt.

    """
    lines = ["Missing:", *_block(describe_type(key) for key in missing)]
    incomplete_lines = _block(
        describe_signature(component, dependencies) for component, dependencies in incomplete
    )
    if incomplete_lines:
        lines.extend(["Incomplete:", *incomplete_lines])
    return "\n".join(lines)


def format_cycle_report(incomplete: Iterable[tuple[Any, Sequence[Any]]]) -> str:
    """Render the ``Incomplete:`` block for components stuck on each other.

    Args:
        incomplete: ``(component, dependencies)`` pairs left unbuilt.

    """
    lines = _block(
        describe_signature(component, dependencies) for component, dependencies in incomplete
    )
    return "\n".join(["Incomplete:", *lines])


def _block(descriptions: Iterable[str]) -> list[str]:
    return [f"{_INDENT}{description}" for description in sorted(descriptions)]


def _qualified_name(obj: Any) -> str:
    module = getattr(obj, "__module__", None)
    qualname = getattr(obj, "__qualname__", None) or getattr(obj, "__name__", None)
    if qualname is None:
        return repr(obj)
    if module is None:
        return qualname
    return f"{module}.{qualname}"


__all__ = [
    "describe_signature",
    "describe_type",
    "format_cycle_report",
    "format_missing_report",
    "sort_by_description",
]
