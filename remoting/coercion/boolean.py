"""
Boolean converter.

Typed values must be real booleans. Sloppy values accept the usual wire
spellings: "true"/"false", "1"/"0" (case-insensitive) and the numbers 1/0.
"""

from typing import Any, Dict, Optional

from remoting.coercion.base import BaseConverter, CoercedValue
from remoting.errors import CoercionError

_TRUE_STRINGS = {"true", "1"}
_FALSE_STRINGS = {"false", "0"}


class BooleanConverter(BaseConverter):
    type_tag = "boolean"

    def check(self, value: Any, options: Dict[str, Any]) -> Optional[CoercionError]:
        if not isinstance(value, bool):
            return CoercionError("Value is not a boolean.")
        return None

    def coerce(self, value: Any, options: Dict[str, Any]) -> CoercedValue:
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in _TRUE_STRINGS:
                value = True
            elif lowered in _FALSE_STRINGS:
                value = False
        elif isinstance(value, (int, float)) and not isinstance(value, bool) and value in (0, 1):
            value = bool(value)
        return self.from_typed_value(value, options)
