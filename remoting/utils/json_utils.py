"""
Detection and parsing of JSON text embedded in wire values.

Query strings and form fields can carry JSON-encoded objects and arrays
(e.g. `?arg={"lat":2.0,"lng":3.0}` or `?arg=[1,2]`). Converters use these
helpers to recognize such values before falling back to other encodings.
"""

import json
import logging
from typing import Any, Union

from remoting.errors import CoercionError

logger = logging.getLogger(__name__)


def looks_like_json_object(value: Any) -> bool:
    """Return True for strings shaped like `{...}`."""
    if not isinstance(value, str):
        return False
    text = value.strip()
    return len(text) >= 2 and text[0] == "{" and text[-1] == "}"


def looks_like_json_array(value: Any) -> bool:
    """Return True for strings shaped like `[...]`."""
    if not isinstance(value, str):
        return False
    text = value.strip()
    return len(text) >= 2 and text[0] == "[" and text[-1] == "]"


def looks_like_json(value: Any) -> bool:
    """Return True for strings that look like a JSON object or array."""
    return looks_like_json_object(value) or looks_like_json_array(value)


def _reject_constant(name: str) -> Any:
    # NaN, Infinity and -Infinity are not valid JSON
    raise ValueError(f"Invalid JSON constant: {name}")


def parse_json(value: str) -> Union[Any, CoercionError]:
    """
    Parse JSON text received from the wire.

    Returns the parsed value, or a CoercionError when the text is not valid
    JSON. Never raises for malformed input.
    """
    try:
        result = json.loads(value, parse_constant=_reject_constant)
    except ValueError as e:
        logger.debug(f"Cannot parse object value {value!r}: {e}")
        return CoercionError("Cannot parse JSON-encoded object value.")

    logger.debug(f"Parsed {value!r} as JSON: {result!r}")
    return result
