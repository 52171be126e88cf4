from collections.abc import Callable
from typing import Any, NamedTuple, TypeVar

F = TypeVar("F", bound=Callable[..., Any])
_CONSTRUCTOR_MARKER_ATTR = "__solowire_constructor__"


class Component(NamedTuple):
    """Differentiate multiple registrations for the same base type.

    Attach ``Component`` metadata to ``typing.Annotated`` so solowire treats
    each annotated key as distinct. Annotate a constructor parameter with the
    same key to depend on that registration.

    Examples:
        .. code-block:: python

            from typing import Annotated, TypeAlias


            class Database: ...


            ReplicaDb: TypeAlias = Annotated[Database, Component("replica")]
            PrimaryDb: TypeAlias = Annotated[Database, Component("primary")]

            builder.register(ReplicaDb, factory=make_replica)

    """

    value: Any


class ConstructorMarker(NamedTuple):
    """Metadata attached to callables decorated with ``constructor``."""

    preferred: bool


def constructor(func: F) -> F:
    """Mark a classmethod or staticmethod as an alternate constructor.

    Alternate constructors compete with ``__init__`` during the build: the
    one with the most dependencies wins and ties go to the first declared,
    with ``__init__`` always first.

    Examples:
        .. code-block:: python

            class Mailer:
                def __init__(self, transport: Transport) -> None: ...

                @classmethod
                @constructor
                def with_audit(cls, transport: Transport, audit: AuditLog) -> Mailer: ...

    """
    return _mark(func, preferred=False)


def preferred_constructor(func: F) -> F:
    """Mark the constructor solowire must use, regardless of its arity.

    Applies to ``__init__`` or to a classmethod/staticmethod factory. At most
    one constructor per class may be preferred.
    """
    return _mark(func, preferred=True)


def constructor_marker(candidate: object) -> ConstructorMarker | None:
    """Return the constructor marker attached to a callable, if any."""
    target = getattr(candidate, "__func__", candidate)
    marker = getattr(target, _CONSTRUCTOR_MARKER_ATTR, None)
    if isinstance(marker, ConstructorMarker):
        return marker
    return None


def _mark(func: F, *, preferred: bool) -> F:
    target = getattr(func, "__func__", func)
    setattr(target, _CONSTRUCTOR_MARKER_ATTR, ConstructorMarker(preferred=preferred))
    return func


__all__ = [
    "Component",
    "ConstructorMarker",
    "constructor",
    "constructor_marker",
    "preferred_constructor",
]
