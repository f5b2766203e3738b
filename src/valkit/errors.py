"""Exception hierarchy for valkit.

Configuration problems are fatal and raised while rules or the registry are
being built. Validation failures are never raised; they come back as a false
function result carrying diagnostics.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from valkit.diagnostics import Diagnostic


class ValkitError(Exception):
    """Base class for all valkit errors."""


class ConfigurationError(ValkitError, ValueError):
    """Invalid rule configuration or inconsistent catalog."""


class DuplicateFunctionError(ConfigurationError):
    """Two catalog entries declare the same function name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Function '{name}' is registered more than once")


class RegistryFrozenError(ValkitError):
    """Mutation attempted on a registry builder that already built."""


class FunctionNotFoundError(ValkitError, KeyError):
    """Lookup of a function name that is not in the catalog."""

    def __init__(self, name: str, available: list[str]):
        self.name = name
        self.available = available
        super().__init__(name)

    def __str__(self) -> str:
        return f"Unknown function '{self.name}'. Available: {', '.join(self.available) or 'none'}"


class FunctionError(ValkitError):
    """Explains why a function call returned false.

    Attached to a failed result; ``call`` never raises it.
    """

    def __init__(self, function: str, diagnostics: "list[Diagnostic]"):
        self.function = function
        self.diagnostics = list(diagnostics)
        summaries = "; ".join(f"{d.summary}: {d.detail}" for d in self.diagnostics)
        super().__init__(f"{function}: {summaries}")
