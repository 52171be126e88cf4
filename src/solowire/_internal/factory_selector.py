from __future__ import annotations

import inspect
from collections.abc import Callable
from dataclasses import dataclass, field
from inspect import Parameter
from typing import Any, get_type_hints

from solowire._internal.descriptors import ComponentFactory, Descriptor, ProviderDependency
from solowire._internal.diagnostics import describe_type
from solowire._internal.integrations.pydantic_settings import is_pydantic_settings_subclass
from solowire._internal.type_checks import base_type, is_runtime_class
from solowire.exceptions import (
    SoloWireDependencyInferenceError,
    SoloWireInvalidRegistrationError,
)
from solowire.markers import constructor_marker

_MISSING_ANNOTATION: Any = object()


@dataclass(frozen=True, slots=True)
class _Candidate:
    call: Callable[..., Any]
    name: str
    preferred: bool


@dataclass(slots=True)
class ProviderDependenciesExtractor:
    """Extracts dependencies from constructors and factory callables.

    Every required parameter (no default, not ``*args``/``**kwargs``) is a
    dependency keyed by its resolved annotation. ``Annotated`` metadata is
    kept so that component keys survive.
    """

    def extract(
        self,
        provider: Callable[..., Any],
        *,
        provider_name: str,
    ) -> tuple[ProviderDependency, ...]:
        """Extract the ordered dependencies of a provider callable.

        Args:
            provider: Class, bound classmethod, or factory function to inspect.
            provider_name: Name used in error messages.

        """
        annotations, annotation_error = self._resolved_type_hints(provider)
        dependencies: list[ProviderDependency] = []

        for parameter in self.required_parameters(provider, provider_name=provider_name):
            provides = self._resolve_parameter_annotation(
                parameter=parameter,
                annotations=annotations,
                annotation_error=annotation_error,
                provider_name=provider_name,
            )
            try:
                hash(provides)
            except TypeError as error:
                msg = (
                    f"Dependency annotation for parameter '{parameter.name}' in provider "
                    f"'{provider_name}' is not hashable and cannot be used as a key."
                )
                raise SoloWireDependencyInferenceError(msg) from error
            dependencies.append(ProviderDependency(provides=provides, parameter=parameter))

        return tuple(dependencies)

    def required_parameters(
        self,
        provider: Callable[..., Any],
        *,
        provider_name: str,
    ) -> tuple[Parameter, ...]:
        """Return the parameters the container has to supply.

        Args:
            provider: Callable to inspect.
            provider_name: Name used in error messages.

        """
        try:
            parameters = inspect.signature(provider).parameters.values()
        except (TypeError, ValueError) as error:
            msg = f"Unable to read the signature of provider '{provider_name}'."
            raise SoloWireDependencyInferenceError(msg) from error
        return tuple(parameter for parameter in parameters if self._is_required_parameter(parameter))

    def _resolve_parameter_annotation(
        self,
        *,
        parameter: Parameter,
        annotations: dict[str, Any],
        annotation_error: Exception | None,
        provider_name: str,
    ) -> Any:
        annotation = annotations.get(parameter.name, _MISSING_ANNOTATION)
        if annotation is not _MISSING_ANNOTATION:
            return annotation

        raw_annotation = parameter.annotation
        if raw_annotation is not Parameter.empty and not isinstance(raw_annotation, str):
            return raw_annotation

        error_message = (
            f"Unable to infer dependency for required parameter '{parameter.name}' "
            f"in provider '{provider_name}'. Add a type annotation or register an explicit factory."
        )
        if annotation_error is None:
            raise SoloWireDependencyInferenceError(error_message)
        msg = f"{error_message} Original annotation error: {annotation_error}"
        raise SoloWireDependencyInferenceError(msg) from annotation_error

    def _resolved_type_hints(
        self,
        provider: Callable[..., Any],
    ) -> tuple[dict[str, Any], Exception | None]:
        if inspect.isclass(provider):
            return self._concrete_type_hints(provider)
        return self._callable_hints(getattr(provider, "__func__", provider))

    def _concrete_type_hints(
        self,
        concrete_type: type[Any],
    ) -> tuple[dict[str, Any], Exception | None]:
        merged_annotations: dict[str, Any] = {}
        merged_error: Exception | None = None

        # Constructor hints win over class attribute annotations.
        for member in (concrete_type.__init__, concrete_type.__new__, concrete_type):
            member_annotations, error = self._callable_hints(member)
            if error is not None and merged_error is None:
                merged_error = error
            for parameter_name, parameter_annotation in member_annotations.items():
                merged_annotations.setdefault(parameter_name, parameter_annotation)

        return merged_annotations, merged_error

    def _callable_hints(self, member: Any) -> tuple[dict[str, Any], Exception | None]:
        try:
            return get_type_hints(member, include_extras=True), None
        except (AttributeError, NameError, TypeError) as error:
            return {}, error

    def _is_required_parameter(self, parameter: Parameter) -> bool:
        return (
            parameter.default is Parameter.empty
            and parameter.kind is not Parameter.VAR_POSITIONAL
            and parameter.kind is not Parameter.VAR_KEYWORD
        )


@dataclass(slots=True)
class FactorySelector:
    """Choose the single constructor used to build each component.

    Precedence: an explicit registration factory, then a zero-argument call
    for Pydantic settings classes, then the class's candidates. Candidates are
    the class itself (its ``__init__``) followed by ``constructor``-decorated
    classmethods and staticmethods in declaration order, most derived class
    first. A sole ``preferred_constructor`` candidate always wins; otherwise
    the candidate with the most dependencies wins and ties go to the first
    declared.
    """

    dependencies_extractor: ProviderDependenciesExtractor = field(
        default_factory=ProviderDependenciesExtractor,
    )

    def select(self, descriptor: Descriptor) -> ComponentFactory:
        """Return the factory for a descriptor that has no instance yet.

        Args:
            descriptor: Descriptor awaiting construction.

        """
        if descriptor.factory is not None:
            return self._plan(descriptor.factory, self._provider_name(descriptor.factory))

        component_type = base_type(descriptor.type_key)
        if is_pydantic_settings_subclass(component_type):
            return ComponentFactory(factory=component_type)
        if not is_runtime_class(component_type):
            msg = (
                f"Component '{describe_type(descriptor.type_key)}' is not a class; "
                "register it with an instance or an explicit factory."
            )
            raise SoloWireInvalidRegistrationError(msg)

        candidates = self._candidates(component_type)
        preferred = [candidate for candidate in candidates if candidate.preferred]
        if len(preferred) > 1:
            names = ", ".join(f"'{candidate.name}'" for candidate in preferred)
            msg = f"Component '{component_type.__qualname__}' has several preferred constructors: {names}."
            raise SoloWireInvalidRegistrationError(msg)
        if preferred:
            chosen = preferred[0]
        else:
            chosen = candidates[0]
            chosen_arity = self._arity(chosen)
            for candidate in candidates[1:]:
                arity = self._arity(candidate)
                if arity > chosen_arity:
                    chosen, chosen_arity = candidate, arity
        return self._plan(chosen.call, chosen.name)

    def _candidates(self, component_type: type[Any]) -> list[_Candidate]:
        init_marker = constructor_marker(component_type.__init__)
        candidates = [
            _Candidate(
                call=component_type,
                name=component_type.__qualname__,
                preferred=init_marker is not None and init_marker.preferred,
            ),
        ]
        seen_names: set[str] = {"__init__"}
        for klass in component_type.__mro__:
            for attribute_name, attribute in vars(klass).items():
                if attribute_name in seen_names:
                    continue
                seen_names.add(attribute_name)
                marker = constructor_marker(attribute)
                if marker is None:
                    continue
                candidates.append(
                    _Candidate(
                        call=getattr(component_type, attribute_name),
                        name=f"{component_type.__qualname__}.{attribute_name}",
                        preferred=marker.preferred,
                    ),
                )
        return candidates

    def _arity(self, candidate: _Candidate) -> int:
        return len(
            self.dependencies_extractor.required_parameters(
                candidate.call,
                provider_name=candidate.name,
            ),
        )

    def _plan(self, call: Callable[..., Any], name: str) -> ComponentFactory:
        dependencies = self.dependencies_extractor.extract(call, provider_name=name)
        return ComponentFactory(factory=call, dependencies=dependencies)

    def _provider_name(self, provider: Callable[..., Any]) -> str:
        return getattr(provider, "__qualname__", repr(provider))


__all__ = ["FactorySelector", "ProviderDependenciesExtractor"]
