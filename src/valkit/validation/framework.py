"""Core validator contract for valkit rules.

Every rule implements the same two capabilities: describe itself and check
one known value. Null and unknown values are never interpreted by a rule.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any

from ..diagnostics import Diagnostic, DiagnosticCollector
from ..values import ParameterType, Value

logger = logging.getLogger(__name__)

# Longest payload echoed back in a diagnostic detail
MAX_ECHO_LENGTH = 64


class DescriptionStyle(str, Enum):
    """Text style for rule descriptions."""
    PLAIN = "plain"
    MARKDOWN = "markdown"


def echo(payload: Any) -> str:
    """Render an offending value for a diagnostic detail."""
    text = repr(payload)
    if len(text) > MAX_ECHO_LENGTH:
        text = text[:MAX_ECHO_LENGTH - 3] + "..."
    return text


class Validator(ABC):
    """Base class for validation rules.

    Subclasses provide ``name``, ``summary`` and ``check``. Configuration is
    passed to ``__init__``, validated there, and never changes afterwards.
    """

    markdown_summary: str | None = None
    parameter_type: ParameterType = ParameterType.STRING

    @property
    @abstractmethod
    def name(self) -> str:
        """Rule name for identification."""
        pass

    @property
    @abstractmethod
    def summary(self) -> str:
        """Plain-text statement of the rule."""
        pass

    @abstractmethod
    def check(self, payload: Any, collector: DiagnosticCollector) -> None:
        """Check a known payload.

        Args:
            payload: The known input value
            collector: Collector to add at most one error diagnostic to
        """
        pass

    def description(self, style: DescriptionStyle = DescriptionStyle.PLAIN) -> str:
        """Static description of the rule in the requested style."""
        if DescriptionStyle(style) == DescriptionStyle.MARKDOWN:
            return self.markdown_summary or self.summary
        return self.summary

    def markdown_description(self) -> str:
        return self.description(DescriptionStyle.MARKDOWN)

    def validate(self, value: Value) -> list[Diagnostic]:
        """Validate a value and return the diagnostics it produced.

        Null and unknown values yield no diagnostics and are not inspected.
        """
        if not value.is_known:
            return []

        collector = DiagnosticCollector()
        self.check(value.payload, collector)
        return list(collector.diagnostics)

    def fail(self, collector: DiagnosticCollector, summary: str, detail: str) -> None:
        """Record the single error diagnostic for a failed check."""
        logger.debug(f"Rule {self.name} rejected value: {detail}")
        collector.add_error(summary, detail)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
