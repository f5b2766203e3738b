"""Three-valued input values: known, explicitly null, or not yet known."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Presence(str, Enum):
    """Presence state of a value at call time."""
    KNOWN = "known"
    NULL = "null"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Value:
    """Single input (or output) of a validation function."""
    presence: Presence
    payload: Any = None

    def __post_init__(self):
        if self.presence == Presence.KNOWN and self.payload is None:
            raise ValueError("Known value requires a payload; use Value.null() for absence")
        if self.presence != Presence.KNOWN and self.payload is not None:
            raise ValueError(f"{self.presence.value} value cannot carry a payload")

    @classmethod
    def known(cls, payload: Any) -> "Value":
        return cls(Presence.KNOWN, payload)

    @classmethod
    def null(cls) -> "Value":
        return cls(Presence.NULL)

    @classmethod
    def unknown(cls) -> "Value":
        return cls(Presence.UNKNOWN)

    @classmethod
    def from_python(cls, obj: Any) -> "Value":
        """Wrap a plain Python object; ``None`` becomes null."""
        if isinstance(obj, Value):
            return obj
        if obj is None:
            return cls.null()
        return cls.known(obj)

    @property
    def is_known(self) -> bool:
        return self.presence == Presence.KNOWN

    @property
    def is_null(self) -> bool:
        return self.presence == Presence.NULL

    @property
    def is_unknown(self) -> bool:
        return self.presence == Presence.UNKNOWN

    def to_json(self) -> Any:
        """JSON-friendly form: the payload, ``None`` for null, ``"unknown"`` otherwise."""
        if self.is_known:
            return self.payload
        if self.is_null:
            return None
        return "unknown"

    def __str__(self) -> str:
        if self.is_known:
            if isinstance(self.payload, bool):
                return "true" if self.payload else "false"
            return str(self.payload)
        return self.presence.value


class ParameterType(str, Enum):
    """Declared type of a function's single parameter."""
    STRING = "string"
    NUMBER = "number"
