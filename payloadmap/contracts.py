"""
Capabilities probed on payload values.

Nothing here has to be inherited: values are checked structurally with
``isinstance`` against these runtime protocols.
"""

from typing import Any, Dict, Protocol, runtime_checkable


@runtime_checkable
class Validatable(Protocol):
    """A value that validates itself (nested payloads)."""

    def validate(self) -> Any: ...

    def is_valid(self) -> bool: ...


@runtime_checkable
class Payload(Protocol):
    """A nested payload: validatable and exportable to a mapping."""

    def validate(self) -> Any: ...

    def is_valid(self) -> bool: ...

    def to_dict(self) -> Dict[str, Any]: ...


@runtime_checkable
class Importable(Protocol):
    """A payload that can be populated from loosely-typed input."""

    def import_data(self, input_: Any) -> Any: ...


@runtime_checkable
class JsonSerializable(Protocol):
    """A value that knows its own JSON-ready representation."""

    def json_serialize(self) -> Any: ...


@runtime_checkable
class DictConvertible(Protocol):
    """A value exposing a ``to_dict()`` conversion."""

    def to_dict(self) -> Any: ...


@runtime_checkable
class Validator(Protocol):
    """Predicate attached to a field: ``validate(value) -> bool``."""

    def validate(self, value: Any) -> bool: ...
