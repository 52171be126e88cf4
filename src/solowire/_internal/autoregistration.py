from __future__ import annotations

import datetime
import decimal
import inspect
import pathlib
import uuid
from dataclasses import dataclass
from typing import Any, TypeGuard

from solowire._internal.integrations.pydantic_settings import is_pydantic_settings_subclass
from solowire._internal.type_checks import is_runtime_class


@dataclass(frozen=True, slots=True)
class ConcreteTypeAutoregistrationPolicy:
    """Decide which missing dependency keys a build may register on its own.

    Eligible keys are concrete runtime classes outside ``builtins`` and the
    ignored value types, plus Pydantic settings classes. Abstract classes,
    protocols, generic aliases and ``Annotated`` component keys never are.
    """

    ignored_base_types: tuple[type[Any], ...] = (
        pathlib.PurePath,
        datetime.datetime,
        datetime.date,
        datetime.time,
        datetime.timedelta,
        uuid.UUID,
        decimal.Decimal,
    )

    def is_eligible(self, candidate: object) -> TypeGuard[type[Any]]:
        """Return true when a missing key can be registered automatically.

        Args:
            candidate: Missing dependency key.

        """
        if is_pydantic_settings_subclass(candidate):
            return True
        if not is_runtime_class(candidate):
            return False
        if candidate.__module__ == "builtins":
            return False
        if inspect.isabstract(candidate) or getattr(candidate, "_is_protocol", False):
            return False
        if issubclass(candidate, type):
            return False
        return not issubclass(candidate, self.ignored_base_types)


__all__ = ["ConcreteTypeAutoregistrationPolicy"]
