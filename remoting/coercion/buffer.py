"""
Buffer (binary data) converter.

The canonical value is `bytes`. Accepted shapes:

- bytes / bytearray
- a list of integers in 0..255
- a serialized Node.js-style buffer: {"type": "Buffer", "data": [...]}
- (sloppy only) a base64-encoded string, or JSON text of the shapes above
"""

import base64
import binascii
from typing import Any, Dict, Optional

from remoting.coercion.base import BaseConverter, CoercedValue
from remoting.errors import CoercionError
from remoting.utils.json_utils import looks_like_json, parse_json


def error_invalid_buffer() -> CoercionError:
    return CoercionError("Value is not a valid buffer.")


def _is_byte_list(value: Any) -> bool:
    return isinstance(value, list) and all(
        isinstance(item, int) and not isinstance(item, bool) and 0 <= item <= 255
        for item in value
    )


def _is_serialized_buffer(value: Any) -> bool:
    return isinstance(value, dict) and value.get("type") == "Buffer" and _is_byte_list(value.get("data"))


class BufferConverter(BaseConverter):
    type_tag = "buffer"

    def check(self, value: Any, options: Dict[str, Any]) -> Optional[CoercionError]:
        if isinstance(value, (bytes, bytearray)) or _is_byte_list(value) or _is_serialized_buffer(value):
            return None
        return error_invalid_buffer()

    def canonicalize(self, value: Any, options: Dict[str, Any]) -> Any:
        if isinstance(value, dict):
            value = value["data"]
        return bytes(value)

    def coerce(self, value: Any, options: Dict[str, Any]) -> CoercedValue:
        if looks_like_json(value):
            result = parse_json(value)
            if isinstance(result, CoercionError):
                return CoercedValue.failure(result)
            return self.from_typed_value(result, options)

        if isinstance(value, str):
            try:
                value = base64.b64decode(value, validate=True)
            except (binascii.Error, ValueError):
                return CoercedValue.failure(error_invalid_buffer())

        return self.from_typed_value(value, options)
