"""
Geopoint converter.

A geopoint is a 2-D coordinate: {"lat": <-90..90>, "lng": <-180..180>}.

Accepted wire encodings (from_sloppy_value), detected in this order:
1. JSON text:            arg={"lat":2.0,"lng":3.0}   or   arg=[2.5,3.2]
2. Comma-delimited pair: arg=2.5,3                   (Google location API style)
3. Array:                arg=1&arg=2 or a parsed [lat, lng] list
4. Nested keys:          arg[lat]=2.5&arg[lng]=3
5. Anything else is validated as a typed value.

Typed values may be either the keyed object or a [lat, lng] pair; the
canonical result is always the keyed object. Empty objects/arrays are
present-but-empty values and canonicalize to {}; whether that satisfies
the argument is decided by the binding layer (required arguments reject it).
"""

import logging
import re
from typing import Any, Dict, List, Optional, TypedDict

from remoting.coercion.base import BaseConverter, CoercedValue
from remoting.coercion.number import NumberConverter, parse_number_string
from remoting.errors import CoercionError
from remoting.utils.constants import LAT_MAX, LAT_MIN, LNG_MAX, LNG_MIN
from remoting.utils.json_utils import looks_like_json, parse_json

logger = logging.getLogger(__name__)

COMMA_DELIMITED_PATTERN = re.compile(r",\s*")

_number_converter = NumberConverter()


class GeoPoint(TypedDict):
    """Canonical geopoint value."""
    lat: float
    lng: float


def is_comma_delimited(value: Any) -> bool:
    return isinstance(value, str) and COMMA_DELIMITED_PATTERN.search(value) is not None


def _coerce_numeric_string(value: Any) -> Any:
    """Turn "2.5" into 2.5; leave everything else (incl. "true") untouched."""
    if isinstance(value, str):
        parsed = parse_number_string(value)
        if parsed is not None:
            return parsed
    return value


def _split_pair(value: str) -> List[Any]:
    return [_coerce_numeric_string(token) for token in COMMA_DELIMITED_PATTERN.split(value)]


def error_invalid_string_format() -> CoercionError:
    return CoercionError('Value is not of correct "lat,lng" format')


def error_invalid_array_length() -> CoercionError:
    return CoercionError("Value is not of correct [lat,lng] format")


def error_missing_key(key: str) -> CoercionError:
    return CoercionError(f'Missing "{key}" from geopoint object')


def error_out_of_range(key: str) -> CoercionError:
    if key == "lat":
        return CoercionError(f"Latitude is out of range [{LAT_MIN}, {LAT_MAX}]")
    return CoercionError(f"Longitude is out of range [{LNG_MIN}, {LNG_MAX}]")


def validate_point_value(value: Any, key: str, options: Dict[str, Any]) -> Optional[CoercionError]:
    """Validate a single lat or lng component."""
    # components are mandatory, so None is not an "absent" value here
    error = _number_converter.check(value, options)
    if error is not None:
        return error

    if key == "lat" and not (LAT_MIN <= value <= LAT_MAX):
        return error_out_of_range(key)
    if key == "lng" and not (LNG_MIN <= value <= LNG_MAX):
        return error_out_of_range(key)
    return None


def _validate_pair(lat: Any, lng: Any, options: Dict[str, Any]) -> Optional[CoercionError]:
    # latitude is always reported first
    return validate_point_value(lat, "lat", options) or validate_point_value(lng, "lng", options)


def validate_array(value: List[Any], options: Dict[str, Any]) -> Optional[CoercionError]:
    if len(value) != 2:
        return error_invalid_array_length()
    return _validate_pair(value[0], value[1], options)


def validate_object(value: Dict[str, Any], options: Dict[str, Any]) -> Optional[CoercionError]:
    if "lat" not in value:
        return error_missing_key("lat")
    if "lng" not in value:
        return error_missing_key("lng")
    return _validate_pair(value["lat"], value["lng"], options)


class GeopointConverter(BaseConverter):
    type_tag = "geopoint"

    def check(self, value: Any, options: Dict[str, Any]) -> Optional[CoercionError]:
        # present-but-empty
        if isinstance(value, (dict, list)) and len(value) == 0:
            return None

        # "lat,lng" format
        if isinstance(value, str):
            if not is_comma_delimited(value):
                return error_invalid_string_format()
            tokens = _split_pair(value)
            if len(tokens) != 2:
                return error_invalid_string_format()
            return _validate_pair(tokens[0], tokens[1], options)

        # [lat,lng] format
        if isinstance(value, list):
            return validate_array(value, options)

        # {lat:x.x, lng:x.x} format
        if isinstance(value, dict):
            return validate_object(value, options)

        return CoercionError("Value is not a valid geopoint")

    def canonicalize(self, value: Any, options: Dict[str, Any]) -> Any:
        if isinstance(value, (dict, list)) and len(value) == 0:
            return {}
        if isinstance(value, str):
            value = _split_pair(value)
        if isinstance(value, list):
            return GeoPoint(lat=value[0], lng=value[1])
        return GeoPoint(lat=value["lat"], lng=value["lng"])

    def coerce(self, value: Any, options: Dict[str, Any]) -> CoercedValue:
        if looks_like_json(value):
            result = parse_json(value)
            if isinstance(result, CoercionError):
                return CoercedValue.failure(result)
            return self.from_typed_value(result, options)

        if is_comma_delimited(value):
            return self.from_typed_value(value, options)

        # Arrays built from repeated query keys carry numbers as strings
        if isinstance(value, list):
            return self.from_typed_value([_coerce_numeric_string(item) for item in value], options)

        # Coerce nested values for objects created from a complex
        # query string, e.g. ?arg[lat]=2&arg[lng]=3
        if isinstance(value, dict):
            coerced = {key: _coerce_numeric_string(item) for key, item in value.items()}
            logger.debug(f"Coerced nested geopoint keys {value!r} -> {coerced!r}")
            return self.from_typed_value(coerced, options)

        return self.from_typed_value(value, options)
