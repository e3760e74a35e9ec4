"""
Codec helpers shared by every payload container

Covers:
- Capability-probing export of stored values
- Decoding of import input (mappings or JSON text)
- JSON encoding with a nesting depth limit
"""

import json
import logging
from collections.abc import Iterable, Mapping
from typing import Any, Dict, Optional

from .config import app_config
from .contracts import DictConvertible, JsonSerializable, Payload
from .exceptions import JsonEncodingError

logger = logging.getLogger(__name__)


def export_value(value: Any) -> Any:
    """
    Normalize a stored value for export

    Capabilities are probed in a fixed order and the first match wins:
        nested payload   -> value.to_dict()
        JSON-serializable -> value.json_serialize()
        iterable         -> list(value)  (text and mappings excluded)
        dict-convertible -> value.to_dict()
        anything else    -> value
    """
    if isinstance(value, type):
        return value

    if isinstance(value, Payload):
        return value.to_dict()

    if isinstance(value, JsonSerializable):
        return value.json_serialize()

    if isinstance(value, Iterable) and not isinstance(value, (str, bytes, bytearray, Mapping)):
        return list(value)

    if isinstance(value, DictConvertible):
        return value.to_dict()

    return value


def decode_input(input_: Any) -> Optional[Dict[str, Any]]:
    """
    Normalize import input to a mapping

    Mappings pass through. Text is decoded as JSON; when decoding fails, or
    the document is not an object, None is returned so importers treat every
    key as absent. Any other type is a programming error.
    """
    if input_ is None or isinstance(input_, Mapping):
        return input_

    if isinstance(input_, (str, bytes, bytearray)):
        try:
            decoded = json.loads(input_)
        except (ValueError, UnicodeDecodeError) as e:
            logger.warning(f"Could not decode import input as JSON: {e}")
            return None

        if not isinstance(decoded, Mapping):
            logger.warning(f"Import input decoded to {type(decoded).__name__}, expected an object")
            return None

        return decoded

    raise TypeError(f"Cannot import payload from {type(input_).__name__}")


def expand_value(value: Any) -> Any:
    """Apply ``export_value`` at every nesting level so only plain JSON types remain."""
    value = export_value(value)

    if isinstance(value, Mapping):
        return {key: expand_value(item) for key, item in value.items()}

    if isinstance(value, list):
        return [expand_value(item) for item in value]

    return value


def exceeds_depth(data: Any, max_depth: int) -> bool:
    """Check whether arrays/objects in ``data`` nest deeper than ``max_depth``."""

    def walk(node: Any, depth: int) -> bool:
        if isinstance(node, Mapping):
            children = node.values()
        elif isinstance(node, (list, tuple)):
            children = node
        else:
            return False

        if depth + 1 > max_depth:
            return True

        return any(walk(child, depth + 1) for child in children)

    return walk(data, 0)


def encode_json(payload: Any, data: Any, max_depth: Optional[int] = None, **options) -> str:
    """
    Encode exported payload data to JSON text

    Args:
        payload: Container being encoded (used in error messages)
        data: Exported data, normally ``payload.json_serialize()``
        max_depth: Maximum nesting depth, defaults to ``app_config.json.max_depth``
        **options: Keyword options forwarded to ``json.dumps``

    Raises:
        JsonEncodingError: when the encoder reports any failure
    """
    if max_depth is None:
        max_depth = app_config.json.max_depth

    options.setdefault("ensure_ascii", app_config.json.ensure_ascii)
    # NaN and Infinity are not valid JSON
    options.setdefault("allow_nan", False)

    try:
        # Payloads nested in lists or raw dicts are exported too
        data = expand_value(data)

        if exceeds_depth(data, max_depth):
            raise JsonEncodingError.for_payload(payload, "Maximum stack depth exceeded")

        return json.dumps(data, **options)
    except (TypeError, ValueError, RecursionError) as e:
        raise JsonEncodingError.for_payload(payload, str(e)) from e
