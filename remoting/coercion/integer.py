"""
Integer converter.

Same wire handling as numbers, plus two checks: no fractional part, and a
magnitude within the range a JSON client can represent exactly. Whole
floats such as 2.0 are accepted and returned as ints.
"""

from typing import Any, Dict, Optional

from remoting.coercion.number import NumberConverter, is_number
from remoting.errors import CoercionError
from remoting.utils.constants import MAX_SAFE_INTEGER


class IntegerConverter(NumberConverter):
    type_tag = "integer"

    def check(self, value: Any, options: Dict[str, Any]) -> Optional[CoercionError]:
        if not is_number(value) or abs(value) > MAX_SAFE_INTEGER or not float(value).is_integer():
            return CoercionError("Value is not a safe integer.")
        return None

    def canonicalize(self, value: Any, options: Dict[str, Any]) -> Any:
        return int(value)
