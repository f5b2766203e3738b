"""Validation rules shipped with valkit.

Each rule performs exactly one deterministic check on a known value and
records at most one error diagnostic when the value is rejected.
"""

import base64
import ipaddress
import json
import re
from abc import abstractmethod
from decimal import Decimal, InvalidOperation
from typing import Any
from urllib.parse import urlparse

from ..diagnostics import DiagnosticCollector
from ..errors import ConfigurationError
from ..values import ParameterType
from .framework import MAX_ECHO_LENGTH, Validator, echo

_CIDR_SHAPE = re.compile(r"[^/\s]+/\d{1,3}")
_UUID_PATTERN = re.compile(
    r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"
)


def to_number(value: Any) -> Decimal | None:
    """Convert an int, float, Decimal or numeric string to a finite Decimal.

    Returns None when the value is not a number. Booleans are not numbers.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        number = Decimal(str(value)) if isinstance(value, float) else Decimal(value)
    elif isinstance(value, str):
        try:
            number = Decimal(value.strip())
        except InvalidOperation:
            return None
    else:
        return None
    return number if number.is_finite() else None


def _format_number(number: Decimal) -> str:
    # Very large, very small or very precise values are shown in exponent form
    if abs(number.adjusted()) >= MAX_ECHO_LENGTH or len(number.as_tuple().digits) > MAX_ECHO_LENGTH:
        return f"{number:.6e}"
    text = format(number, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _reject_constant(name: str) -> None:
    raise ValueError(f"non-standard constant {name}")


class StringRule(Validator):
    """Rule over string payloads; non-strings are rejected before ``check_string``."""

    def check(self, payload: Any, collector: DiagnosticCollector) -> None:
        if not isinstance(payload, str):
            self.fail(
                collector,
                "Invalid type",
                f"expected a string, got {type(payload).__name__} {echo(payload)}",
            )
            return
        self.check_string(payload, collector)

    @abstractmethod
    def check_string(self, payload: str, collector: DiagnosticCollector) -> None:
        """Check a known string payload."""
        pass


class Base64Rule(StringRule):
    """Standard-alphabet Base64 with correct padding."""

    name = "base64"
    summary = "value must be valid Base64-encoded data"
    markdown_summary = "`value` must be valid **Base64** (standard alphabet, padded)"

    def check_string(self, payload: str, collector: DiagnosticCollector) -> None:
        try:
            base64.b64decode(payload, validate=True)
        except ValueError as e:
            self.fail(collector, "Invalid Base64 encoding", f"{echo(payload)} is not valid Base64: {e}")


class CidrRule(StringRule):
    """IP network in CIDR notation, host bits allowed."""

    name = "cidr"
    summary = "value must be valid CIDR notation"
    markdown_summary = "`value` must be a network in **CIDR notation**, e.g. `10.0.0.0/24`"
    version: int | None = None

    def check_string(self, payload: str, collector: DiagnosticCollector) -> None:
        if not _CIDR_SHAPE.fullmatch(payload):
            self.fail(
                collector,
                "Invalid CIDR notation",
                f"{echo(payload)} must be an address followed by '/' and a prefix length",
            )
            return

        try:
            network = ipaddress.ip_network(payload, strict=False)
        except ValueError as e:
            self.fail(collector, "Invalid CIDR notation", f"{echo(payload)} is not a valid CIDR block: {e}")
            return

        if self.version is not None and network.version != self.version:
            self.fail(
                collector,
                "Invalid CIDR notation",
                f"{echo(payload)} is an IPv{network.version} block, expected IPv{self.version}",
            )


class IPv4CidrRule(CidrRule):
    name = "ipv4_cidr"
    summary = "value must be a valid IPv4 CIDR block"
    markdown_summary = "`value` must be an **IPv4** network in CIDR notation"
    version = 4


class IPv6CidrRule(CidrRule):
    name = "ipv6_cidr"
    summary = "value must be a valid IPv6 CIDR block"
    markdown_summary = "`value` must be an **IPv6** network in CIDR notation"
    version = 6


class IPAddressRule(StringRule):
    name = "ip_address"
    summary = "value must be a valid IPv4 or IPv6 address"

    def check_string(self, payload: str, collector: DiagnosticCollector) -> None:
        try:
            ipaddress.ip_address(payload)
        except ValueError:
            self.fail(collector, "Invalid IP address", f"{echo(payload)} is not a valid IPv4 or IPv6 address")


class JsonRule(StringRule):
    name = "json"
    summary = "value must be a valid JSON document"
    markdown_summary = "`value` must decode as **JSON**"

    def check_string(self, payload: str, collector: DiagnosticCollector) -> None:
        try:
            json.loads(payload, parse_constant=_reject_constant)
        except json.JSONDecodeError as e:
            self.fail(collector, "Invalid JSON", f"{echo(payload)} is not valid JSON: {e.msg} at position {e.pos}")
        except ValueError as e:
            self.fail(collector, "Invalid JSON", f"{echo(payload)} is not valid JSON: {e}")
        except RecursionError:
            self.fail(collector, "Invalid JSON", f"{echo(payload)} is nested too deeply to decode")


class UuidRule(StringRule):
    name = "uuid"
    summary = "value must be a UUID in canonical hyphenated form"

    def check_string(self, payload: str, collector: DiagnosticCollector) -> None:
        if not _UUID_PATTERN.fullmatch(payload):
            self.fail(collector, "Invalid UUID", f"{echo(payload)} is not a hyphenated UUID")


class UrlRule(StringRule):
    """Absolute URL with an allowed scheme and a host."""

    name = "url"

    def __init__(self, schemes: tuple[str, ...] = ("http", "https")):
        if not schemes:
            raise ConfigurationError("url rule requires at least one scheme")
        self._schemes = tuple(s.lower() for s in schemes)

    @property
    def schemes(self) -> tuple[str, ...]:
        return self._schemes

    @property
    def summary(self) -> str:
        return f"value must be an absolute URL using one of: {', '.join(self._schemes)}"

    def check_string(self, payload: str, collector: DiagnosticCollector) -> None:
        try:
            parsed = urlparse(payload)
        except ValueError as e:
            self.fail(collector, "Invalid URL", f"{echo(payload)} cannot be parsed: {e}")
            return

        if parsed.scheme.lower() not in self._schemes:
            self.fail(
                collector,
                "Invalid URL",
                f"{echo(payload)} must use scheme {' or '.join(self._schemes)}",
            )
        elif not parsed.netloc:
            self.fail(collector, "Invalid URL", f"{echo(payload)} has no host")

    def __repr__(self) -> str:
        return f"UrlRule(schemes={self._schemes!r})"


class LowercaseRule(StringRule):
    name = "lowercase"
    summary = "value must not contain uppercase characters"

    def check_string(self, payload: str, collector: DiagnosticCollector) -> None:
        if payload != payload.lower():
            self.fail(collector, "Not lowercase", f"{echo(payload)} contains uppercase characters")


class UppercaseRule(StringRule):
    name = "uppercase"
    summary = "value must not contain lowercase characters"

    def check_string(self, payload: str, collector: DiagnosticCollector) -> None:
        if payload != payload.upper():
            self.fail(collector, "Not uppercase", f"{echo(payload)} contains lowercase characters")


class NotBlankRule(StringRule):
    name = "not_blank"
    summary = "value must contain at least one non-whitespace character"

    def check_string(self, payload: str, collector: DiagnosticCollector) -> None:
        if not payload.strip():
            self.fail(collector, "Blank value", "value is empty or contains only whitespace")


class NumericRule(Validator):
    name = "numeric"
    summary = "value must be a finite number"

    def check(self, payload: Any, collector: DiagnosticCollector) -> None:
        if to_number(payload) is None:
            self.fail(collector, "Not a number", f"{echo(payload)} is not a finite number")


class RangeRule(Validator):
    """Numeric value within an inclusive range.

    Either bound may be omitted, but not both. Numeric strings are accepted
    so that ``"5"`` is checked as 5.
    """

    name = "range"
    parameter_type = ParameterType.NUMBER

    def __init__(self, minimum: Any = None, maximum: Any = None):
        if minimum is None and maximum is None:
            raise ConfigurationError("range rule requires a minimum, a maximum, or both")

        self._minimum = self._bound("minimum", minimum)
        self._maximum = self._bound("maximum", maximum)

        if self._minimum is not None and self._maximum is not None and self._minimum > self._maximum:
            raise ConfigurationError(
                f"range minimum {_format_number(self._minimum)} is greater than "
                f"maximum {_format_number(self._maximum)}"
            )

    @staticmethod
    def _bound(label: str, bound: Any) -> Decimal | None:
        if bound is None:
            return None
        number = to_number(bound)
        if number is None:
            raise ConfigurationError(f"range {label} must be a finite number, got {bound!r}")
        return number

    @property
    def minimum(self) -> Decimal | None:
        return self._minimum

    @property
    def maximum(self) -> Decimal | None:
        return self._maximum

    @property
    def summary(self) -> str:
        if self._minimum is None:
            return f"value must be a number no greater than {_format_number(self._maximum)}"
        if self._maximum is None:
            return f"value must be a number no less than {_format_number(self._minimum)}"
        return (
            f"value must be a number between {_format_number(self._minimum)} "
            f"and {_format_number(self._maximum)} inclusive"
        )

    def check(self, payload: Any, collector: DiagnosticCollector) -> None:
        number = to_number(payload)
        if number is None:
            self.fail(collector, "Not a number", f"{echo(payload)} is not a finite number")
        elif self._minimum is not None and number < self._minimum:
            self.fail(
                collector,
                "Value out of range",
                f"{_format_number(number)} is less than the minimum {_format_number(self._minimum)}",
            )
        elif self._maximum is not None and number > self._maximum:
            self.fail(
                collector,
                "Value out of range",
                f"{_format_number(number)} is greater than the maximum {_format_number(self._maximum)}",
            )

    def __repr__(self) -> str:
        return f"RangeRule(minimum={self._minimum}, maximum={self._maximum})"


class LengthRule(StringRule):
    """String length within an inclusive range."""

    name = "length"

    def __init__(self, minimum: int | None = None, maximum: int | None = None):
        if minimum is None and maximum is None:
            raise ConfigurationError("length rule requires a minimum, a maximum, or both")
        for label, bound in (("minimum", minimum), ("maximum", maximum)):
            if bound is not None and (isinstance(bound, bool) or not isinstance(bound, int) or bound < 0):
                raise ConfigurationError(f"length {label} must be a non-negative integer, got {bound!r}")
        if minimum is not None and maximum is not None and minimum > maximum:
            raise ConfigurationError(f"length minimum {minimum} is greater than maximum {maximum}")
        self._minimum = minimum
        self._maximum = maximum

    @property
    def summary(self) -> str:
        if self._minimum is None:
            return f"value must be at most {self._maximum} characters long"
        if self._maximum is None:
            return f"value must be at least {self._minimum} characters long"
        return f"value must be between {self._minimum} and {self._maximum} characters long"

    def check_string(self, payload: str, collector: DiagnosticCollector) -> None:
        length = len(payload)
        if self._minimum is not None and length < self._minimum:
            self.fail(collector, "Value too short", f"length {length} is less than the minimum {self._minimum}")
        elif self._maximum is not None and length > self._maximum:
            self.fail(collector, "Value too long", f"length {length} is greater than the maximum {self._maximum}")

    def __repr__(self) -> str:
        return f"LengthRule(minimum={self._minimum}, maximum={self._maximum})"


class _FragmentRule(StringRule):
    """Shared configuration handling for substring/prefix/suffix rules."""

    label = "substring"

    def __init__(self, fragment: str):
        if not isinstance(fragment, str) or not fragment:
            raise ConfigurationError(f"{self.name} rule requires a non-empty {self.label}")
        self._fragment = fragment

    @property
    def fragment(self) -> str:
        return self._fragment

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._fragment!r})"


class ContainsRule(_FragmentRule):
    name = "contains"

    @property
    def summary(self) -> str:
        return f"value must contain {self._fragment!r}"

    def check_string(self, payload: str, collector: DiagnosticCollector) -> None:
        if self._fragment not in payload:
            self.fail(collector, "Missing substring", f"{echo(payload)} does not contain {self._fragment!r}")


class StartsWithRule(_FragmentRule):
    name = "starts_with"
    label = "prefix"

    @property
    def summary(self) -> str:
        return f"value must start with {self._fragment!r}"

    def check_string(self, payload: str, collector: DiagnosticCollector) -> None:
        if not payload.startswith(self._fragment):
            self.fail(collector, "Missing prefix", f"{echo(payload)} does not start with {self._fragment!r}")


class EndsWithRule(_FragmentRule):
    name = "ends_with"
    label = "suffix"

    @property
    def summary(self) -> str:
        return f"value must end with {self._fragment!r}"

    def check_string(self, payload: str, collector: DiagnosticCollector) -> None:
        if not payload.endswith(self._fragment):
            self.fail(collector, "Missing suffix", f"{echo(payload)} does not end with {self._fragment!r}")


class RegexRule(StringRule):
    """Whole-value match against a regular expression."""

    name = "regex"

    def __init__(self, pattern: str):
        if not isinstance(pattern, str) or not pattern:
            raise ConfigurationError("regex rule requires a non-empty pattern")
        try:
            self._pattern = re.compile(pattern)
        except re.error as e:
            raise ConfigurationError(f"regex pattern {pattern!r} does not compile: {e}") from e

    @property
    def pattern(self) -> str:
        return self._pattern.pattern

    @property
    def summary(self) -> str:
        return f"value must match the regular expression {self._pattern.pattern!r}"

    def check_string(self, payload: str, collector: DiagnosticCollector) -> None:
        if not self._pattern.fullmatch(payload):
            self.fail(collector, "Pattern mismatch", f"{echo(payload)} does not match {self._pattern.pattern!r}")

    def __repr__(self) -> str:
        return f"RegexRule({self._pattern.pattern!r})"


class OneOfRule(StringRule):
    """Value drawn from a fixed set of strings."""

    name = "one_of"

    def __init__(self, choices):
        choices = tuple(choices or ())
        if not choices:
            raise ConfigurationError("one_of rule requires at least one choice")
        if not all(isinstance(c, str) for c in choices):
            raise ConfigurationError("one_of choices must all be strings")
        self._choices = choices

    @property
    def choices(self) -> tuple[str, ...]:
        return self._choices

    @property
    def summary(self) -> str:
        return f"value must be one of: {', '.join(self._choices)}"

    def check_string(self, payload: str, collector: DiagnosticCollector) -> None:
        if payload not in self._choices:
            self.fail(
                collector,
                "Value not allowed",
                f"{echo(payload)} is not one of: {', '.join(self._choices)}",
            )

    def __repr__(self) -> str:
        return f"OneOfRule({list(self._choices)!r})"
