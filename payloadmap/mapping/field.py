"""
Field - A named value slot declared by a PayloadMap schema

A field carries:
- Its key and an optional export alias
- The current value (None until set)
- Validation metadata (required, nullable, validator)
- Presentation metadata (label, accessible/hidden) and custom data

Every property setter returns the field itself, and ``back()`` returns the
owning payload, so schemas are declared as one chained expression.
"""

import logging
import weakref
from dataclasses import dataclass, field as dataclass_field
from typing import TYPE_CHECKING, Any, Callable, Dict, Mapping, Optional, Union

from ..codec import export_value
from ..contracts import Validatable, Validator
from ..exceptions import InvalidDataError

if TYPE_CHECKING:
    from ..payload_map import PayloadMap

logger = logging.getLogger(__name__)

ValidatorLike = Union[Validator, Callable[[Any], bool]]


@dataclass
class FieldProps:
    """Typed property set of a field"""

    export_as: Optional[str] = None  # Key used in exports instead of the field key
    nullable: bool = False
    accessible: bool = True
    required: bool = False
    default: Any = None
    label: Optional[str] = None
    validator: Optional[ValidatorLike] = None
    custom: Dict[str, Any] = dataclass_field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "export_as": self.export_as,
            "nullable": self.nullable,
            "accessible": self.accessible,
            "required": self.required,
            "default": self.default,
            "label": self.label,
            "validator": self.validator,
            "custom": dict(self.custom),
        }

    @classmethod
    def from_dict(cls, props: Mapping[str, Any]) -> "FieldProps":
        """Build props from a mapping, missing entries take their defaults"""
        return cls(
            export_as=props.get("export_as"),
            nullable=bool(props.get("nullable", False)),
            accessible=bool(props.get("accessible", True)),
            required=bool(props.get("required", False)),
            default=props.get("default"),
            label=props.get("label"),
            validator=props.get("validator"),
            custom=dict(props.get("custom") or {}),
        )


class Field:
    """A field object with properties for mapping"""

    def __init__(self, key: str, parent: Optional["PayloadMap"] = None):
        """
        Create a field

        Args:
            key: Field key, unique within the owning payload
            parent: Owning payload, kept as a weak reference
        """
        self._key = key
        self._value = None
        self._parent = None
        self._props = FieldProps()

        if parent is not None:
            self._bind(parent)

    def _bind(self, parent: "PayloadMap") -> "Field":
        self._parent = weakref.ref(parent)
        return self

    @property
    def key(self) -> str:
        return self._key

    def export_key_as(self, alias: Optional[str]) -> "Field":
        self._props.export_as = alias
        return self

    @property
    def key_to_export(self) -> str:
        """Export alias when set, field key otherwise"""
        return self._props.export_as or self._key

    def value(self, new_value: Any) -> "Field":
        """Assign the field value. Nothing is validated here."""
        self._value = new_value
        return self

    def get_value(self, fallback: Any = None) -> Any:
        """
        Resolve the field value

        Returns the assigned value when not None, else the declared default
        when not None, else ``fallback``.
        """
        if self._value is not None:
            return self._value
        if self._props.default is not None:
            return self._props.default
        return fallback

    def export(self) -> Any:
        """Export the resolved value normalized."""
        return export_value(self.get_value())

    def label(self, label: str) -> "Field":
        self._props.label = label
        return self

    def get_label(self) -> Optional[str]:
        return self._props.label

    def defaults(self, default: Any) -> "Field":
        self._props.default = default
        return self

    def get_default(self) -> Any:
        return self._props.default

    def required(self) -> "Field":
        self._props.required = True
        return self

    def optional(self) -> "Field":
        self._props.required = False
        return self

    def is_required(self) -> bool:
        return self._props.required

    def accessible(self) -> "Field":
        self._props.accessible = True
        return self

    def hidden(self) -> "Field":
        self._props.accessible = False
        return self

    def is_accessible(self) -> bool:
        return self._props.accessible

    def allows_null(self) -> "Field":
        self._props.nullable = True
        return self

    def not_allows_null(self) -> "Field":
        self._props.nullable = False
        return self

    def is_allowing_null(self) -> bool:
        return self._props.nullable

    def validator(self, validator: Optional[ValidatorLike]) -> "Field":
        """Attach a validator: an object with ``validate(value)`` or a predicate."""
        if validator is not None and not isinstance(validator, Validator) and not callable(validator):
            raise TypeError(f"Validator for `{self._key}` must expose validate(value) or be callable")

        self._props.validator = validator
        return self

    def get_validator(self) -> Optional[ValidatorLike]:
        return self._props.validator

    def custom(self, key: str, value: Any) -> "Field":
        self._props.custom[key] = value
        return self

    def get_custom(self, key: str, default: Any = None) -> Any:
        return self._props.custom.get(key, default)

    def props(self, props: Mapping[str, Any]) -> "Field":
        """Reset every property from ``props``"""
        self._props = FieldProps.from_dict(props)
        return self

    def get_props(self) -> Dict[str, Any]:
        return self._props.to_dict()

    def back(self) -> Optional["PayloadMap"]:
        """Go back to the owning payload."""
        return self._parent() if self._parent is not None else None

    def validate(self) -> bool:
        """
        Check the resolved value against the field rules

        - required and not nullable: None fails
        - nullable: None passes, the validator is skipped
        - self-validating values (nested payloads) decide for themselves
        - otherwise the attached validator decides; no validator passes
        """
        value = self.get_value()

        if self._props.required and not self._props.nullable:
            if value is None:
                return False
        elif self._props.nullable and value is None:
            return True

        if isinstance(value, Validatable) and not isinstance(value, type):
            return value.is_valid()

        validator = self._props.validator

        if validator is None:
            return True

        if isinstance(validator, Validator):
            return bool(validator.validate(value))

        return bool(validator(value))

    def assert_valid(self) -> "Field":
        """
        Validate and raise on failure

        Nested payload values run their own ``validate()`` so their error
        reaches the caller unchanged.

        Raises:
            InvalidDataError: when the value does not pass ``validate()``
        """
        value = self.get_value()

        if isinstance(value, Validatable) and not isinstance(value, type):
            value.validate()
            return self

        if not self.validate():
            logger.debug(f"Field `{self._key}` rejected its value")
            raise InvalidDataError.invalid(self.back(), self._key, self._value, "You must fix it")

        return self

    def __getstate__(self) -> Dict[str, Any]:
        return {"key": self._key, "value": self._value, "props": self._props.to_dict()}

    def __setstate__(self, state: Dict[str, Any]) -> None:
        self._key = state["key"]
        self._value = state["value"]
        self._parent = None
        self.props(state["props"])

    def __repr__(self) -> str:
        return f"Field(key={self._key!r}, value={self._value!r})"
