"""
String converter.

Query strings cannot distinguish `?name=10` from a number, so the sloppy
path renders numbers and booleans back to their wire text. Objects and
arrays are never strings.
"""

from typing import Any, Dict, Optional

from remoting.coercion.base import BaseConverter, CoercedValue
from remoting.errors import CoercionError


class StringConverter(BaseConverter):
    type_tag = "string"

    def check(self, value: Any, options: Dict[str, Any]) -> Optional[CoercionError]:
        if not isinstance(value, str):
            return CoercionError("Value is not a string.")
        return None

    def coerce(self, value: Any, options: Dict[str, Any]) -> CoercedValue:
        if isinstance(value, bool):
            value = "true" if value else "false"
        elif isinstance(value, (int, float)):
            value = str(value)
        return self.from_typed_value(value, options)
