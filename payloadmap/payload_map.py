"""
PayloadMap - A payload declared as a map of fields

A concrete payload implements ``_map()`` once to declare its fields:

```python
class AddressMap(PayloadMap):
    def _map(self):
        (
            self.add("address").required().back()
            .add("country").export_key_as("country_id").required().back()
        )

    @setter("country")
    def _set_country(self, country):
        return country.upper()
```

Values are assigned with ``set``/``import_data`` and read with ``get``;
``@setter(key)``/``@getter(key)`` methods mutate values on the way in/out.
"""

import logging
from abc import abstractmethod
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from .base import BasePayload
from .codec import decode_input
from .exceptions import InvalidDataError
from .mapping.field import Field

logger = logging.getLogger(__name__)

_SETTER_MARK = "__payload_setter__"
_GETTER_MARK = "__payload_getter__"


def setter(key: str) -> Callable:
    """Register a method as the setter mutator of field ``key``.

    The method receives the raw value and returns the value to store.
    """

    def decorator(func: Callable) -> Callable:
        setattr(func, _SETTER_MARK, key)
        return func

    return decorator


def getter(key: str) -> Callable:
    """Register a method as the getter mutator of field ``key``.

    The method receives the resolved value and returns the value to expose.
    """

    def decorator(func: Callable) -> Callable:
        setattr(func, _GETTER_MARK, key)
        return func

    return decorator


class PayloadMap(BasePayload):
    """A payload as a smart map: declared fields, ordered as declared."""

    # key -> method name, collected once per class
    _setters: Dict[str, str] = {}
    _getters: Dict[str, str] = {}

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)

        setters: Dict[str, str] = {}
        getters: Dict[str, str] = {}

        for klass in reversed(cls.__mro__):
            for name, attr in vars(klass).items():
                if not callable(attr):
                    continue
                if hasattr(attr, _SETTER_MARK):
                    setters[getattr(attr, _SETTER_MARK)] = name
                if hasattr(attr, _GETTER_MARK):
                    getters[getattr(attr, _GETTER_MARK)] = name

        cls._setters = setters
        cls._getters = getters

    def __init__(self):
        self._fields: Dict[str, Field] = {}
        self._map()

    @abstractmethod
    def _map(self) -> None:
        """Declare the payload fields with ``add``/``add_when``. Called once."""

    def add(self, key: str) -> Field:
        """Declare field ``key`` and return it for configuration."""
        self._fields[key] = Field(key, self)
        return self._fields[key]

    def add_when(self, condition: bool, key: str) -> Union[Field, "PayloadMap"]:
        """
        Declare field ``key`` only when ``condition`` holds

        When skipped, the payload itself is returned so chained calls keep
        working against it.
        """
        if condition:
            return self.add(key)

        logger.debug(f"Field `{key}` not declared on {type(self).__name__}")
        return self

    def set(self, key: str, value: Any) -> "PayloadMap":
        """
        Assign ``value`` to field ``key``, through its setter mutator if any

        Raises:
            InvalidDataError: when ``key`` is not declared, or the mutator rejects the value
        """
        if not self.has(key):
            raise InvalidDataError.invalid(self, key, value, "Key does not exist on payload map")

        mutator = self._setters.get(key)

        if mutator is not None:
            value = getattr(self, mutator)(value)

        self._fields[key].value(value)
        return self

    def set_when(self, condition: bool, key: str, value: Any) -> "PayloadMap":
        if not condition:
            return self

        return self.set(key, value)

    def remove(self, key: str) -> "PayloadMap":
        """Remove field ``key`` from the payload (declaration included)."""
        return self.remove_when(True, key)

    def remove_when(self, condition: bool, key: str) -> "PayloadMap":
        if not condition or not self.has(key):
            return self

        del self._fields[key]
        return self

    def get(self, key: str, default: Any = None) -> Any:
        """
        Read field ``key``

        Undeclared keys return ``default``. Declared keys resolve through
        ``Field.get_value(default)`` and then the getter mutator, if any.
        """
        if not self.has(key):
            return default

        value = self._fields[key].get_value(default)
        mutator = self._getters.get(key)

        if mutator is not None:
            return getattr(self, mutator)(value)

        return value

    def get_field(self, key: str, default: Any = None) -> Union[Field, Any]:
        if not self.has(key):
            return default

        return self._fields[key]

    def get_and_remove(self, key: str, default: Any = None) -> Any:
        value = self.get(key, default)
        self.remove(key)
        return value

    def get_field_and_remove(self, key: str, default: Any = None) -> Union[Field, Any]:
        field = self.get_field(key, default)
        self.remove(key)
        return field

    def has(self, key: str) -> bool:
        return key in self._fields

    def fields(self) -> List[Field]:
        """Declared fields, in declaration order."""
        return list(self._fields.values())

    def import_data(self, input_: Any, ignore_invalid: bool = True) -> "PayloadMap":
        """
        Import fields from a mapping or JSON text

        Args:
            input_: Mapping or JSON object text; undecodable text imports nothing
            ignore_invalid: Skip unknown or rejected keys instead of raising
        """
        return self._import_mapping(decode_input(input_), ignore_invalid)

    def _import_mapping(
        self, input_: Optional[Mapping[str, Any]], ignore_invalid: bool = True
    ) -> "PayloadMap":
        """
        Set every key of ``input_``, in input order

        Raises:
            InvalidDataError: on the first unknown or rejected key, unless ``ignore_invalid``
        """
        for key, value in (input_ or {}).items():
            try:
                self.set(key, value)
            except InvalidDataError as e:
                if not ignore_invalid:
                    raise

                logger.debug(f"Skipping `{key}` on {type(self).__name__}: {e}")

        return self

    def validate(self) -> None:
        """
        Assert every field, in declaration order

        Raises:
            InvalidDataError: for the first invalid field (nested errors unchanged)
        """
        for field in list(self._fields.values()):
            field.assert_valid()

    def to_dict(self, include_hidden: bool = True) -> Dict[str, Any]:
        """
        Export fields as ``{alias or key: exported value}`` in declaration order

        Args:
            include_hidden: When False, fields marked ``hidden()`` are left out
        """
        return {
            field.key_to_export: field.export()
            for field in self._fields.values()
            if include_hidden or field.is_accessible()
        }

    def _storage_state(self) -> Any:
        return list(self._fields.values())

    def _restore_state(self, state: Any) -> None:
        if not isinstance(state, list) or not all(isinstance(f, Field) for f in state):
            raise TypeError(f"Cannot restore {type(self).__name__} from {type(state).__name__}")

        self._fields = {field.key: field._bind(self) for field in state}

    def __setstate__(self, state: Dict[str, Any]) -> None:
        self.__dict__.update(state)

        for field in self._fields.values():
            field._bind(self)

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_"):
            object.__setattr__(self, name, value)
            return
        self.set(name, value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self._fields)!r})"
