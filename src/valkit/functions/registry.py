"""Function catalog for valkit.

A ``RegistryBuilder`` collects constructors during startup and builds an
immutable ``Registry`` once. Names are unique; a repeated name fails the
build instead of shadowing an earlier entry.
"""

import logging
import re
from collections.abc import Iterable, Iterator
from types import MappingProxyType

from ..config import ValkitConfig
from ..diagnostics import DiagnosticSink
from ..errors import (
    ConfigurationError,
    DuplicateFunctionError,
    FunctionNotFoundError,
    RegistryFrozenError,
)
from ..validation.framework import Validator
from ..validation.rules import (
    Base64Rule,
    CidrRule,
    IPAddressRule,
    IPv4CidrRule,
    IPv6CidrRule,
    JsonRule,
    LowercaseRule,
    NotBlankRule,
    NumericRule,
    UppercaseRule,
    UrlRule,
    UuidRule,
)
from ..values import Value
from .adapter import (
    FunctionConstructor,
    FunctionResult,
    Parameter,
    ValidationFunction,
    function_constructor,
)

logger = logging.getLogger(__name__)

_NAME_PATTERN = re.compile(r"^[a-z][a-z0-9_]*$")

# Built-in catalog, in publication order
DEFAULT_FUNCTIONS: tuple[FunctionConstructor, ...] = (
    function_constructor("is_base64", Base64Rule),
    function_constructor("is_cidr", CidrRule),
    function_constructor("is_ipv4_cidr", IPv4CidrRule),
    function_constructor("is_ipv6_cidr", IPv6CidrRule),
    function_constructor("is_ip_address", IPAddressRule),
    function_constructor("is_json", JsonRule),
    function_constructor("is_uuid", UuidRule),
    function_constructor("is_url", UrlRule),
    function_constructor("is_lowercase", LowercaseRule),
    function_constructor("is_uppercase", UppercaseRule),
    function_constructor("is_not_blank", NotBlankRule),
    function_constructor("is_numeric", NumericRule),
)


class Registry:
    """Read-only, name-unique catalog of validation functions."""

    def __init__(self, functions: Iterable[ValidationFunction]):
        entries: dict[str, ValidationFunction] = {}
        for function in functions:
            if function.name in entries:
                raise DuplicateFunctionError(function.name)
            entries[function.name] = function
        self._functions = MappingProxyType(entries)

    def get(self, name: str) -> ValidationFunction | None:
        return self._functions.get(name)

    def __getitem__(self, name: str) -> ValidationFunction:
        try:
            return self._functions[name]
        except KeyError:
            raise FunctionNotFoundError(name, self.names()) from None

    def __contains__(self, name: object) -> bool:
        return name in self._functions

    def __len__(self) -> int:
        return len(self._functions)

    def __iter__(self) -> Iterator[str]:
        return iter(self._functions)

    def names(self) -> list[str]:
        """Function names in registration order."""
        return list(self._functions)

    def functions(self) -> list[ValidationFunction]:
        """All functions in registration order."""
        return list(self._functions.values())

    def call(self, name: str, value: Value) -> FunctionResult:
        """Look up ``name`` and call it with ``value``."""
        return self[name].call(value)

    def __repr__(self) -> str:
        return f"Registry({self.names()!r})"


class RegistryBuilder:
    """Collects function constructors and builds a ``Registry`` once."""

    def __init__(self):
        self._constructors: list[FunctionConstructor] = []
        self._built = False

    def add(self, constructor: FunctionConstructor) -> "RegistryBuilder":
        """Add a constructor to the catalog.

        Raises:
            ConfigurationError: If the constructor name is not a valid function name
            RegistryFrozenError: If the builder has already built its registry
        """
        if self._built:
            raise RegistryFrozenError(f"Cannot add '{constructor.name}': registry already built")
        if not _NAME_PATTERN.match(constructor.name):
            raise ConfigurationError(
                f"Invalid function name '{constructor.name}': use lowercase letters, digits and underscores"
            )
        self._constructors.append(constructor)
        return self

    def add_validator(
        self,
        name: str,
        validator: Validator,
        parameter: Parameter | None = None,
    ) -> "RegistryBuilder":
        """Add an already constructed validator under ``name``."""
        return self.add(function_constructor(name, lambda: validator, parameter))

    def extend(self, constructors: Iterable[FunctionConstructor]) -> "RegistryBuilder":
        for constructor in constructors:
            self.add(constructor)
        return self

    def build(self, sink: DiagnosticSink | None = None) -> Registry:
        """Construct every function exactly once and freeze the catalog.

        Args:
            sink: Optional reporting channel passed to every function

        Returns:
            Registry with one entry per constructor

        Raises:
            DuplicateFunctionError: If two constructors share a name
            RegistryFrozenError: If called a second time
        """
        if self._built:
            raise RegistryFrozenError("Registry already built")

        seen: set[str] = set()
        for constructor in self._constructors:
            if constructor.name in seen:
                raise DuplicateFunctionError(constructor.name)
            seen.add(constructor.name)

        registry = Registry(constructor(sink) for constructor in self._constructors)
        self._built = True

        logger.info(f"Built function registry with {len(registry)} functions")
        return registry


def build_registry(config: ValkitConfig | None = None, sink: DiagnosticSink | None = None) -> Registry:
    """Build the default catalog plus rules declared in configuration.

    Args:
        config: Loaded configuration; built-in functions only when None
        sink: Optional reporting channel passed to every function

    Returns:
        Immutable Registry

    Raises:
        ConfigurationError: If a configured rule is invalid, a name repeats,
                            or a disabled name is not in the catalog
    """
    builder = RegistryBuilder()
    disabled = set(config.catalog.disabled) if config else set()

    known_names = {c.name for c in DEFAULT_FUNCTIONS}
    if config:
        known_names.update(rule.name for rule in config.catalog.rules)
    unknown_disabled = sorted(disabled - known_names)
    if unknown_disabled:
        raise ConfigurationError(f"Cannot disable unknown function(s): {', '.join(unknown_disabled)}")

    builder.extend(c for c in DEFAULT_FUNCTIONS if c.name not in disabled)

    if config:
        for rule in config.catalog.rules:
            if rule.name in disabled:
                logger.debug(f"Skipping disabled configured rule: {rule.name}")
                continue
            validator = rule.to_validator()
            builder.add_validator(
                rule.name,
                validator,
                Parameter(type=rule.parameter_type or validator.parameter_type),
            )

    return builder.build(sink)
