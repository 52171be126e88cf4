from __future__ import annotations

import types
from typing import Annotated, Any, TypeGuard, get_args, get_origin


def is_runtime_class(candidate: object) -> TypeGuard[type[Any]]:
    """Return true when candidate is a runtime class safe for class-only operations.

    Args:
        candidate: Value being checked for eligibility or runtime type constraints.

    """
    return isinstance(candidate, type) and not isinstance(candidate, types.GenericAlias)


def base_type(key: Any) -> Any:
    """Strip ``Annotated`` metadata from a type key.

    Args:
        key: Type key as registered or requested.

    """
    if get_origin(key) is Annotated:
        return get_args(key)[0]
    return key


def runtime_check_target(capability: Any) -> type[Any] | None:
    """Return the class used for runtime ``isinstance``/``issubclass`` checks.

    ``Annotated`` metadata is stripped and parameterized generics are reduced
    to their origin, since type arguments are not checkable at runtime.
    Returns ``None`` when nothing checkable remains.

    Args:
        capability: Capability key to reduce.

    """
    target = base_type(capability)
    origin = get_origin(target)
    if origin is not None:
        target = origin
    if is_runtime_class(target):
        return target
    return None


def satisfies_capability(component_type: Any, capability: Any) -> bool:
    """Return true when a component class is assignable to a capability.

    Args:
        component_type: Class of the registered component.
        capability: Capability key the component should satisfy.

    """
    target = runtime_check_target(capability)
    component_class = runtime_check_target(component_type)
    if target is None or component_class is None:
        return False
    try:
        return issubclass(component_class, target)
    except TypeError:
        # Protocols that are not runtime checkable, or carry data members.
        return False


def supports_instance_checks(capability: Any) -> bool:
    """Return true when ``isinstance`` against a capability can run at all.

    Protocols that are not runtime checkable and non-class keys cannot be
    checked, so an instance registered under them is accepted as is.

    Args:
        capability: Capability key to check against.

    """
    target = runtime_check_target(capability)
    if target is None:
        return False
    try:
        isinstance(object(), target)
    except TypeError:
        return False
    return True


def is_instance_of_capability(instance: object, capability: Any) -> bool:
    """Return true when an instance matches a capability at runtime.

    Args:
        instance: Built component instance.
        capability: Capability key to match against.

    """
    target = runtime_check_target(capability)
    if target is None:
        return False
    try:
        return isinstance(instance, target)
    except TypeError:
        return False


__all__ = [
    "base_type",
    "is_instance_of_capability",
    "is_runtime_class",
    "runtime_check_target",
    "satisfies_capability",
    "supports_instance_checks",
]
