from solowire.builder import ContainerBuilder, RegistrationHandle
from solowire.container import Container
from solowire.exceptions import (
    IncompleteComponent,
    SoloWireBuildError,
    SoloWireConstructorFaultedError,
    SoloWireContainerAlreadyBuiltError,
    SoloWireContainerNotBuiltError,
    SoloWireDependencyCycleError,
    SoloWireDependencyError,
    SoloWireDependencyInferenceError,
    SoloWireDependencyMissingError,
    SoloWireError,
    SoloWireInvalidRegistrationError,
    SoloWireRegistrationFailedError,
    SoloWireResolutionFailedError,
    SoloWireUsageError,
)
from solowire.markers import Component, constructor, preferred_constructor

__all__ = [
    "Component",
    "Container",
    "ContainerBuilder",
    "IncompleteComponent",
    "RegistrationHandle",
    "SoloWireBuildError",
    "SoloWireConstructorFaultedError",
    "SoloWireContainerAlreadyBuiltError",
    "SoloWireContainerNotBuiltError",
    "SoloWireDependencyCycleError",
    "SoloWireDependencyError",
    "SoloWireDependencyInferenceError",
    "SoloWireDependencyMissingError",
    "SoloWireError",
    "SoloWireInvalidRegistrationError",
    "SoloWireRegistrationFailedError",
    "SoloWireResolutionFailedError",
    "SoloWireUsageError",
    "constructor",
    "preferred_constructor",
]
