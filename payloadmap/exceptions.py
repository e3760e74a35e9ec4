"""Exceptions raised by payload containers."""
from typing import Any, Optional


def payload_name(payload: Any) -> str:
    """Return the type name used in diagnostics for a payload."""
    if payload is None:
        return "unknown"
    return type(payload).__name__


def render_value(value: Any) -> str:
    """Render a value for error messages: text as-is, else its type name."""
    if isinstance(value, str):
        return value
    return type(value).__name__


class InvalidDataError(ValueError):
    """Raised when a payload holds (or receives) data it cannot accept."""

    def __init__(self, payload: Any, key: str, value: Any, hint: str = "Fix it"):
        self.key = key
        self.value = render_value(value)
        self.hint = hint
        self.payload_name = payload_name(payload)

        super().__init__(
            f"Unexpected value to argument `{self.key}` as `{self.value}` "
            f"in payload `{self.payload_name}`: {self.hint}."
        )

    @classmethod
    def invalid(
        cls, payload: Any, key: str, value: Any, hint: str = "Fix it"
    ) -> "InvalidDataError":
        return cls(payload, key, value, hint)


class JsonEncodingError(RuntimeError):
    """Raised when the JSON encoder rejects a payload export."""

    def __init__(self, payload: Any, reason: str):
        self.payload_name = payload_name(payload)
        self.reason = reason

        super().__init__(
            f"Error while encoding `{self.payload_name}` data to JSON: {reason}."
        )

    @classmethod
    def for_payload(cls, payload: Any, reason: str) -> "JsonEncodingError":
        return cls(payload, reason)
