"""Function layer for valkit.

Wraps validators into uniformly shaped boolean functions and assembles them
into the catalog a host discovers.
"""

from .adapter import (
    FunctionConstructor,
    FunctionDefinition,
    FunctionResult,
    Parameter,
    ValidationFunction,
    function_constructor,
)
from .registry import DEFAULT_FUNCTIONS, Registry, RegistryBuilder, build_registry

__all__ = [
    "FunctionConstructor",
    "FunctionDefinition",
    "FunctionResult",
    "Parameter",
    "ValidationFunction",
    "function_constructor",
    "DEFAULT_FUNCTIONS",
    "Registry",
    "RegistryBuilder",
    "build_registry",
]
