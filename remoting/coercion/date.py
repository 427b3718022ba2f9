"""
Date converter.

The canonical value is a timezone-aware `datetime`; naive values are taken
to be UTC.

- Typed values: `datetime` instances or ISO-8601 strings.
- Sloppy values: additionally numeric timestamps, in milliseconds since the
  epoch, given as numbers or numeric strings (`?since=1463664531299`).

ISO-8601 parsing is delegated to pydantic so the accepted formats match
the rest of the API's request models.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import TypeAdapter, ValidationError

from remoting.coercion.base import BaseConverter, CoercedValue
from remoting.coercion.number import is_number, parse_number_string
from remoting.errors import CoercionError

logger = logging.getLogger(__name__)

_datetime_adapter = TypeAdapter(datetime)


def error_invalid_date() -> CoercionError:
    return CoercionError("Value is not a valid date.")


def _ensure_aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def parse_date(value: Any) -> Optional[datetime]:
    """Return a datetime for a typed date value, or None when invalid."""
    if isinstance(value, datetime):
        return _ensure_aware(value)
    if not isinstance(value, str):
        return None
    try:
        return _ensure_aware(_datetime_adapter.validate_python(value, strict=False))
    except ValidationError as e:
        logger.debug(f"Cannot parse date {value!r}: {e.error_count()} error(s)")
        return None


def from_timestamp_ms(value: float) -> Optional[datetime]:
    try:
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


class DateConverter(BaseConverter):
    type_tag = "date"

    def check(self, value: Any, options: Dict[str, Any]) -> Optional[CoercionError]:
        if parse_date(value) is None:
            return error_invalid_date()
        return None

    def canonicalize(self, value: Any, options: Dict[str, Any]) -> Any:
        return parse_date(value)

    def coerce(self, value: Any, options: Dict[str, Any]) -> CoercedValue:
        if isinstance(value, str):
            numeric = parse_number_string(value)
            if numeric is not None:
                value = numeric

        if is_number(value):
            parsed = from_timestamp_ms(value)
            if parsed is None:
                return CoercedValue.failure(error_invalid_date())
            return CoercedValue.success(parsed)

        return self.from_typed_value(value, options)
