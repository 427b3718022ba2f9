"""
Converter for arguments declared with type "any".

Typed values are accepted as they are. Sloppy values get a best-effort
interpretation: JSON text is parsed, numeric strings become numbers and
"true"/"false" become booleans. Other strings pass through unchanged.
"""

from typing import Any, Dict, Optional

from remoting.coercion.base import BaseConverter, CoercedValue
from remoting.coercion.object import coerce_nested
from remoting.errors import CoercionError
from remoting.utils.json_utils import looks_like_json, parse_json


class AnyConverter(BaseConverter):
    type_tag = "any"

    def check(self, value: Any, options: Dict[str, Any]) -> Optional[CoercionError]:
        return None

    def coerce(self, value: Any, options: Dict[str, Any]) -> CoercedValue:
        if looks_like_json(value):
            result = parse_json(value)
            if isinstance(result, CoercionError):
                return CoercedValue.failure(result)
            return self.from_typed_value(result, options)
        return self.from_typed_value(coerce_nested(value), options)
