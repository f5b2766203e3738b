"""Per-call diagnostics for valkit.

Provides the structured finding type and the append-only collector that one
validation call writes into.
"""

from .collector import (
    Diagnostic,
    DiagnosticCollector,
    DiagnosticSink,
    Severity,
)

__all__ = [
    "Diagnostic",
    "DiagnosticCollector",
    "DiagnosticSink",
    "Severity",
]
