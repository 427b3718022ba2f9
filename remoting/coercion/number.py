"""
Number converter.

Typed values must be real numbers: booleans, NaN and infinities are
rejected. Sloppy values additionally accept numeric strings ("10", "2.5",
"-1.5e3"), which are the only way a query string can carry a number.
"""

import math
import re
from typing import Any, Dict, Optional, Union

from remoting.coercion.base import BaseConverter, CoercedValue
from remoting.errors import CoercionError

_NUMERIC_PATTERN = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")


def parse_number_string(text: str) -> Optional[Union[int, float]]:
    """
    Parse a wire string into an int or float.

    Returns None when the text is not a plain decimal number, including
    integral literals too long for int() and literals that overflow a
    float. Integral literals without a fraction or exponent become ints.
    """
    stripped = text.strip()
    if not _NUMERIC_PATTERN.match(stripped):
        return None
    try:
        if re.fullmatch(r"[+-]?\d+", stripped):
            return int(stripped)
        parsed = float(stripped)
    except ValueError:
        return None
    # "1e999" overflows to inf
    return parsed if math.isfinite(parsed) else None


def is_number(value: Any) -> bool:
    """True for finite ints/floats that are not booleans."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    # math.isfinite overflows on huge ints
    if isinstance(value, int):
        return True
    return math.isfinite(value)


def error_not_a_number() -> CoercionError:
    return CoercionError("Value is not a number.")


class NumberConverter(BaseConverter):
    type_tag = "number"

    def check(self, value: Any, options: Dict[str, Any]) -> Optional[CoercionError]:
        if not is_number(value):
            return error_not_a_number()
        return None

    def coerce(self, value: Any, options: Dict[str, Any]) -> CoercedValue:
        if isinstance(value, str):
            parsed = parse_number_string(value)
            if parsed is None:
                return CoercedValue.failure(error_not_a_number())
            value = parsed
        return self.from_typed_value(value, options)
