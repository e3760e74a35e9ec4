"""
payloadmap - Declare, import, validate and export structured payloads

- PayloadMap: schema declared as fields (required, nullable, defaults, validators, aliases)
- PayloadArray: freeform payload with hand-written import/validate
- Field: a single declared slot of a PayloadMap
"""

from .codec import decode_input, encode_json, export_value
from .contracts import DictConvertible, Importable, JsonSerializable, Payload, Validatable, Validator
from .exceptions import InvalidDataError, JsonEncodingError
from .mapping import Field, FieldProps
from .payload_array import PayloadArray
from .payload_map import PayloadMap, getter, setter

__version__ = "0.1.0"

__all__ = [
    "PayloadMap",
    "PayloadArray",
    "Field",
    "FieldProps",
    "setter",
    "getter",
    "InvalidDataError",
    "JsonEncodingError",
    "Payload",
    "Validatable",
    "Importable",
    "JsonSerializable",
    "DictConvertible",
    "Validator",
    "decode_input",
    "encode_json",
    "export_value",
]
