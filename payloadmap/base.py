"""Behaviour shared by schema-declared and freeform payloads."""
import logging
import pickle
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from .codec import encode_json
from .exceptions import InvalidDataError, JsonEncodingError

logger = logging.getLogger(__name__)


class BasePayload(ABC):
    """
    Common payload contract

    Subclasses provide ``validate``, ``import_data`` and ``to_dict`` plus the
    storage hooks used by ``serialize``/``unserialize``. Attribute access on
    public names is sugar over ``get``/``has``/``remove`` (and ``set`` or
    ``add``, defined by each container); names starting with an underscore
    are regular instance attributes.
    """

    @abstractmethod
    def import_data(self, input_: Any, *args, **kwargs) -> "BasePayload":
        """Populate the payload from a mapping or JSON text."""

    @abstractmethod
    def validate(self) -> None:
        """Raise InvalidDataError when the payload holds invalid data."""

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        """Export payload data as an ordered dict."""

    @abstractmethod
    def _storage_state(self) -> Any:
        """Return the data captured by ``serialize``."""

    @abstractmethod
    def _restore_state(self, state: Any) -> None:
        """Replace payload data with a state produced by ``_storage_state``."""

    def is_valid(self) -> bool:
        """Validate without raising: invalid data yields False."""
        try:
            self.validate()
        except InvalidDataError as e:
            logger.debug(f"{type(self).__name__} is invalid: {e}")
            return False

        return True

    def json_serialize(self) -> Dict[str, Any]:
        return self.to_dict()

    def to_json(self, max_depth: Optional[int] = None, **options) -> str:
        """
        Export payload data as JSON text

        Args:
            max_depth: Maximum nesting depth accepted by the encoder
            **options: Options forwarded to ``json.dumps`` (indent, sort_keys...)

        Raises:
            JsonEncodingError: when the data cannot be encoded, including
                payloads that contain themselves
        """
        try:
            data = self.json_serialize()
        except RecursionError as e:
            raise JsonEncodingError.for_payload(self, f"Circular reference detected: {e}") from e

        return encode_json(self, data, max_depth, **options)

    def serialize(self) -> bytes:
        """
        Generate a storable representation of payload data.

        The blob is a pickle; only restore blobs from trusted sources.
        """
        return pickle.dumps((type(self).__qualname__, self._storage_state()))

    def unserialize(self, data: bytes) -> "BasePayload":
        """
        Restore payload data from ``serialize`` output

        Raises:
            pickle.UnpicklingError: when ``data`` is not a readable blob
            TypeError: when the blob belongs to another payload type
        """
        try:
            state = pickle.loads(data)
        except Exception as e:
            raise pickle.UnpicklingError(f"Cannot restore {type(self).__name__}: {e}") from e

        if not isinstance(state, tuple) or len(state) != 2 or state[0] != type(self).__qualname__:
            raise TypeError(f"Blob does not hold {type(self).__name__} data")

        self._restore_state(state[1])
        return self

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return self.get(name)

    def __delattr__(self, name: str) -> None:
        if name.startswith("_"):
            object.__delattr__(self, name)
            return
        self.remove(name)

    def __contains__(self, key: str) -> bool:
        return self.has(key)

    def __str__(self) -> str:
        return self.to_json()
