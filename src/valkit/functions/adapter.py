"""Generic adapter exposing any validator as a boolean function.

The adapter owns the three-valued calling convention. Null and unknown
inputs come back as unknown without touching the validator; known inputs
come back true or false, and a false result carries the diagnostics that
explain it.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from ..diagnostics import Diagnostic, DiagnosticCollector, DiagnosticSink
from ..errors import FunctionError
from ..validation.framework import DescriptionStyle, Validator
from ..values import ParameterType, Value

logger = logging.getLogger("valkit.functions")

RETURN_TYPE = "bool"


@dataclass(frozen=True)
class Parameter:
    """The single declared parameter of a validation function."""
    name: str = "value"
    type: ParameterType = ParameterType.STRING
    description: str = "The value to validate"
    allow_null: bool = True
    allow_unknown: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type.value,
            "description": self.description,
            "allow_null": self.allow_null,
            "allow_unknown": self.allow_unknown,
        }


@dataclass(frozen=True)
class FunctionDefinition:
    """Static metadata a host uses to publish a function."""
    name: str
    summary: str
    description: str
    markdown_description: str
    parameter: Parameter
    return_type: str = RETURN_TYPE

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "name": self.name,
            "summary": self.summary,
            "description": self.description,
            "markdown_description": self.markdown_description,
            "parameters": [self.parameter.to_dict()],
            "return_type": self.return_type,
        }


@dataclass(frozen=True)
class FunctionResult:
    """Outcome of one function call."""
    value: Value
    diagnostics: tuple[Diagnostic, ...] = field(default_factory=tuple)
    error: FunctionError | None = None

    @property
    def is_unknown(self) -> bool:
        return not self.value.is_known

    @property
    def passed(self) -> bool:
        return self.value.is_known and self.value.payload is True

    @property
    def failed(self) -> bool:
        return self.value.is_known and self.value.payload is False

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "result": self.value.to_json(),
            "diagnostics": [d.to_dict() for d in self.diagnostics],
            "error": str(self.error) if self.error else None,
        }


def log_sink(function: str, diagnostic: Diagnostic) -> None:
    """Default reporting channel: the ``valkit.functions`` logger."""
    logger.info(f"{function}: {diagnostic}")


class ValidationFunction:
    """A validator presented as a named ``one value in, one bool out`` function."""

    def __init__(
        self,
        name: str,
        validator: Validator,
        parameter: Parameter | None = None,
        sink: DiagnosticSink | None = None,
    ):
        """Initialize the function.

        Args:
            name: Function name the host calls it by
            validator: Rule to delegate known values to
            parameter: Declared parameter (default: string ``value``
                       typed after the validator)
            sink: Extra reporting channel for diagnostics of failed calls
        """
        self._name = name
        self._validator = validator
        self._parameter = parameter or Parameter(type=validator.parameter_type)
        self._sink = sink

    @property
    def name(self) -> str:
        return self._name

    @property
    def validator(self) -> Validator:
        return self._validator

    @property
    def parameter(self) -> Parameter:
        return self._parameter

    @property
    def return_type(self) -> str:
        return RETURN_TYPE

    def description(self, style: DescriptionStyle = DescriptionStyle.PLAIN) -> str:
        return self._validator.description(style)

    def definition(self) -> FunctionDefinition:
        return FunctionDefinition(
            name=self._name,
            summary=self._validator.summary,
            description=self._validator.description(DescriptionStyle.PLAIN),
            markdown_description=self._validator.description(DescriptionStyle.MARKDOWN),
            parameter=self._parameter,
        )

    def call(self, value: Value) -> FunctionResult:
        """Evaluate the function for one input.

        Args:
            value: Input value with its presence state

        Returns:
            FunctionResult holding true, false or unknown plus diagnostics
        """
        if value.is_unknown or value.is_null:
            logger.debug(f"{self._name}: {value.presence.value} input, result unknown")
            return FunctionResult(Value.unknown())

        collector = DiagnosticCollector()
        for diagnostic in self._validator.validate(value):
            if diagnostic.attribute_path is None:
                diagnostic = diagnostic.with_attribute_path(self._parameter.name)
            collector.add(diagnostic)

        if not collector:
            logger.debug(f"{self._name}: passed")
            return FunctionResult(Value.known(True))

        diagnostics = collector.diagnostics
        self._report(diagnostics)
        return FunctionResult(
            Value.known(False),
            diagnostics=diagnostics,
            error=FunctionError(self._name, list(diagnostics)),
        )

    def __call__(self, obj: Any) -> FunctionResult:
        return self.call(Value.from_python(obj))

    def _report(self, diagnostics: tuple[Diagnostic, ...]) -> None:
        for diagnostic in diagnostics:
            log_sink(self._name, diagnostic)
            if self._sink is not None:
                self._sink(self._name, diagnostic)

    def __repr__(self) -> str:
        return f"ValidationFunction(name={self._name!r}, validator={self._validator!r})"


class FunctionConstructor:
    """Named zero-argument factory for one ``ValidationFunction``.

    The registry calls each constructor once while building its catalog.
    """

    def __init__(
        self,
        name: str,
        factory: Callable[[], Validator],
        parameter: Parameter | None = None,
    ):
        self.name = name
        self._factory = factory
        self._parameter = parameter

    def __call__(self, sink: DiagnosticSink | None = None) -> ValidationFunction:
        return ValidationFunction(self.name, self._factory(), self._parameter, sink=sink)

    def __repr__(self) -> str:
        return f"FunctionConstructor({self.name!r})"


def function_constructor(
    name: str,
    factory: Callable[[], Validator],
    parameter: Parameter | None = None,
) -> FunctionConstructor:
    """Create a catalog entry for ``factory`` under ``name``."""
    return FunctionConstructor(name, factory, parameter)
