"""Validation layer for valkit.

Holds the validator contract and the rule library. Rules are plain,
stateless objects; exposing them as callable functions is the job of
``valkit.functions``.
"""

from .framework import DescriptionStyle, Validator
from .rules import (
    Base64Rule,
    CidrRule,
    ContainsRule,
    EndsWithRule,
    IPAddressRule,
    IPv4CidrRule,
    IPv6CidrRule,
    JsonRule,
    LengthRule,
    LowercaseRule,
    NotBlankRule,
    NumericRule,
    OneOfRule,
    RangeRule,
    RegexRule,
    StartsWithRule,
    UppercaseRule,
    UrlRule,
    UuidRule,
)

__all__ = [
    "DescriptionStyle",
    "Validator",
    "Base64Rule",
    "CidrRule",
    "IPv4CidrRule",
    "IPv6CidrRule",
    "IPAddressRule",
    "JsonRule",
    "UuidRule",
    "UrlRule",
    "LowercaseRule",
    "UppercaseRule",
    "NotBlankRule",
    "NumericRule",
    "RangeRule",
    "LengthRule",
    "ContainsRule",
    "StartsWithRule",
    "EndsWithRule",
    "RegexRule",
    "OneOfRule",
]
