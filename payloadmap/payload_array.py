"""
PayloadArray - A freeform payload

There is no declared schema: concrete payloads write their own
``import_data`` and ``validate`` on top of the shared primitives
(``_import_mapping``, ``_validate_required``, ``_validate_depth``).

```python
class Person(PayloadArray):
    def import_data(self, input_):
        return self._import_mapping({"name": "set_name", "email": None}, decode_input(input_))

    def validate(self):
        self._validate_required(["name", "email"])
        self._validate_depth()
```
"""

import logging
from collections.abc import Mapping as MappingABC
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from .base import BasePayload
from .codec import export_value
from .contracts import Validatable
from .exceptions import InvalidDataError

logger = logging.getLogger(__name__)

# Either {key: setter or None} or a sequence of bare keys and (key, setter) pairs
ImportFields = Union[
    Mapping[str, Optional[Union[str, Callable]]],
    Iterable[Union[str, Tuple[str, Union[str, Callable]]]],
]


def _normalize_fields(fields: ImportFields) -> List[Tuple[str, Optional[Union[str, Callable]]]]:
    if isinstance(fields, MappingABC):
        return list(fields.items())

    entries = []
    for entry in fields:
        if isinstance(entry, str):
            entries.append((entry, None))
        else:
            key, method = entry
            entries.append((key, method))
    return entries


class PayloadArray(BasePayload):
    """A payload as an ordered, freeform key/value store."""

    def __init__(self):
        self._payload: Dict[str, Any] = {}

    def add(self, key: str, value: Any) -> "PayloadArray":
        self._payload[key] = value
        return self

    def add_when(self, condition: bool, key: str, value: Any) -> "PayloadArray":
        if condition:
            self._payload[key] = value

        return self

    def remove(self, key: str) -> "PayloadArray":
        """Remove ``key``; missing keys are ignored."""
        return self.remove_when(True, key)

    def remove_when(self, condition: bool, key: str) -> "PayloadArray":
        if condition:
            self._payload.pop(key, None)

        return self

    def get(self, key: str, default: Any = None) -> Any:
        value = self._payload.get(key)
        return default if value is None else value

    def get_and_remove(self, key: str, default: Any = None) -> Any:
        value = self.get(key, default)
        self.remove(key)
        return value

    def has(self, key: str) -> bool:
        """True when ``key`` holds a value other than None."""
        return self._payload.get(key) is not None

    def _validate_required(self, keys: Iterable[str]) -> None:
        """
        Require a non-empty value for every key

        None, empty text, the text "0", empty containers, zero and False all
        count as empty.

        Raises:
            InvalidDataError: for the first empty key
        """
        for key in keys:
            value = self.get(key)

            if _is_empty(value):
                raise InvalidDataError.invalid(self, key, value, "Cannot be empty value")

    def _validate_depth(self) -> None:
        """Run ``validate()`` on every nested payload value; errors propagate unchanged."""
        for value in list(self._payload.values()):
            if isinstance(value, Validatable) and not isinstance(value, type):
                value.validate()

    def _import_mapping(
        self, fields: ImportFields, input_: Optional[Mapping[str, Any]]
    ) -> "PayloadArray":
        """
        Pull declared keys out of ``input_``

        Args:
            fields: Keys to import. A key without setter is stored with ``add``;
                a key with a setter (method name or callable) hands the raw
                value to it.
            input_: Decoded input; keys missing (or None) here are skipped,
                keys not listed in ``fields`` are ignored.
        """
        input_ = input_ or {}

        for key, method in _normalize_fields(fields):
            if input_.get(key) is None:
                continue

            if method is None:
                self.add(key, input_[key])
            elif callable(method):
                method(input_[key])
            else:
                getattr(self, method)(input_[key])

        return self

    def to_dict(self) -> Dict[str, Any]:
        """Export stored values in insertion order."""
        return {key: export_value(value) for key, value in self._payload.items()}

    def _storage_state(self) -> Any:
        return dict(self._payload)

    def _restore_state(self, state: Any) -> None:
        if not isinstance(state, dict):
            raise TypeError(f"Cannot restore {type(self).__name__} from {type(state).__name__}")

        self._payload = state

    def _accessor(self, prefix: str, name: str) -> Optional[Callable]:
        """Bound ``set_<name>``/``get_<name>`` declared by a subclass, if any."""
        method_name = f"{prefix}_{name}"

        if hasattr(PayloadArray, method_name):
            return None

        method = getattr(type(self), method_name, None)
        return getattr(self, method_name) if callable(method) else None

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)

        getter = self._accessor("get", name)
        return getter() if getter is not None else self.get(name)

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_"):
            object.__setattr__(self, name, value)
            return

        setter = self._accessor("set", name)
        if setter is not None:
            setter(value)
        else:
            self.add(name, value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._payload!r})"


def _is_empty(value: Any) -> bool:
    if value is None or (isinstance(value, str) and value == "0"):
        return True
    if isinstance(value, (str, bytes, bool, int, float, list, tuple, dict, set, frozenset)):
        return not value
    return False
