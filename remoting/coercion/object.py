"""
Object converter.

Typed values must be JSON objects (dicts). Sloppy values additionally
accept JSON-encoded object text and objects built from bracketed query
keys, whose scalar leaves arrive as strings and are coerced here:

    ?filter[active]=true&filter[limit]=10  ->  {"active": True, "limit": 10}
"""

from typing import Any, Dict, Optional

from remoting.coercion.base import BaseConverter, CoercedValue
from remoting.coercion.number import parse_number_string
from remoting.errors import CoercionError
from remoting.utils.json_utils import looks_like_json_object, parse_json


def coerce_scalar(value: str) -> Any:
    """Interpret a single query-string leaf."""
    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    if value == "null":
        return None
    parsed = parse_number_string(value)
    if parsed is not None:
        return parsed
    return value


def coerce_nested(value: Any) -> Any:
    """Recursively coerce string leaves of dicts and lists."""
    if isinstance(value, dict):
        return {key: coerce_nested(item) for key, item in value.items()}
    if isinstance(value, list):
        return [coerce_nested(item) for item in value]
    if isinstance(value, str):
        return coerce_scalar(value)
    return value


class ObjectConverter(BaseConverter):
    type_tag = "object"

    def check(self, value: Any, options: Dict[str, Any]) -> Optional[CoercionError]:
        if not isinstance(value, dict):
            return CoercionError("Value is not an object.")
        return None

    def coerce(self, value: Any, options: Dict[str, Any]) -> CoercedValue:
        if looks_like_json_object(value):
            result = parse_json(value)
            if isinstance(result, CoercionError):
                return CoercedValue.failure(result)
            return self.from_typed_value(result, options)

        if isinstance(value, dict):
            return self.from_typed_value(coerce_nested(value), options)

        return self.from_typed_value(value, options)
