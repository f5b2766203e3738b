"""Diagnostic collection for a single validation call.

A collector is created fresh for every call, receives the findings a rule
produces and is then read by the adapter to decide the outcome.
"""

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any


class Severity(str, Enum):
    """Diagnostic severity levels."""
    ERROR = "error"      # Value violates the rule
    WARNING = "warning"  # Value passes but is worth a note


@dataclass(frozen=True)
class Diagnostic:
    """One finding produced during validation."""
    severity: Severity
    summary: str                         # Short, stable text
    detail: str                          # Human readable explanation
    attribute_path: str | None = None    # Which input the finding concerns

    @classmethod
    def error(cls, summary: str, detail: str, attribute_path: str | None = None) -> "Diagnostic":
        return cls(Severity.ERROR, summary, detail, attribute_path)

    @classmethod
    def warning(cls, summary: str, detail: str, attribute_path: str | None = None) -> "Diagnostic":
        return cls(Severity.WARNING, summary, detail, attribute_path)

    def with_attribute_path(self, attribute_path: str) -> "Diagnostic":
        """Copy of this diagnostic pointing at ``attribute_path``."""
        return replace(self, attribute_path=attribute_path)

    def __str__(self) -> str:
        location = f" (at {self.attribute_path})" if self.attribute_path else ""
        return f"[{self.severity.value.upper()}] {self.summary}: {self.detail}{location}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "severity": self.severity.value,
            "summary": self.summary,
            "detail": self.detail,
            "attribute_path": self.attribute_path,
        }


# Host reporting channel; receives the function name and one diagnostic
DiagnosticSink = Callable[[str, Diagnostic], None]


class DiagnosticCollector:
    """Append-only list of diagnostics for one validation call."""

    def __init__(self):
        self._diagnostics: list[Diagnostic] = []

    def add(self, diagnostic: Diagnostic) -> None:
        """Append a diagnostic."""
        self._diagnostics.append(diagnostic)

    def add_error(self, summary: str, detail: str, attribute_path: str | None = None) -> None:
        """Append an error-severity diagnostic."""
        self.add(Diagnostic.error(summary, detail, attribute_path))

    def add_warning(self, summary: str, detail: str, attribute_path: str | None = None) -> None:
        """Append a warning-severity diagnostic."""
        self.add(Diagnostic.warning(summary, detail, attribute_path))

    def extend(self, diagnostics: Iterable[Diagnostic]) -> None:
        for diagnostic in diagnostics:
            self.add(diagnostic)

    @property
    def diagnostics(self) -> tuple[Diagnostic, ...]:
        """Snapshot of collected diagnostics in insertion order."""
        return tuple(self._diagnostics)

    def __len__(self) -> int:
        return len(self._diagnostics)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(tuple(self._diagnostics))

    def __bool__(self) -> bool:
        return bool(self._diagnostics)

    def has_errors(self) -> bool:
        """Check if any error-severity diagnostics have been collected."""
        return any(d.severity == Severity.ERROR for d in self._diagnostics)

    def has_warnings(self) -> bool:
        """Check if any warning-severity diagnostics have been collected."""
        return any(d.severity == Severity.WARNING for d in self._diagnostics)

    def get_counts(self) -> dict[str, int]:
        """Get diagnostic counts by severity."""
        counts = {severity.value: 0 for severity in Severity}

        for diagnostic in self._diagnostics:
            counts[diagnostic.severity.value] += 1

        return counts

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "total": len(self._diagnostics),
            "by_severity": self.get_counts(),
            "diagnostics": [d.to_dict() for d in self._diagnostics],
        }
