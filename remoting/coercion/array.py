"""
Array converter.

Arrays optionally carry an element converter in `options["items"]`; when
present, every item is coerced through it and the first failing item
fails the whole array.

Sloppy encodings:
- JSON text:              ?ids=[1,2,3]
- repeated keys:          ?ids=1&ids=2          (already a list)
- indexed bracket keys:   ?ids[0]=1&ids[1]=2    (a dict with integer keys)
- a single scalar:        ?ids=1                -> [1]

An empty item (?ids=1&ids=) fails the array like any other bad item.
"""

from typing import Any, Dict, List, Optional

from remoting.coercion.base import UNDEFINED, BaseConverter, CoercedValue, TypeConverter
from remoting.errors import CoercionError
from remoting.utils.json_utils import looks_like_json_array, parse_json


def error_not_an_array() -> CoercionError:
    return CoercionError("Value is not an array.")


def error_invalid_item(index: int, error: CoercionError) -> CoercionError:
    return CoercionError(f"Could not convert array item at index {index}: {error.message}")


def error_empty_item() -> CoercionError:
    return CoercionError("Value is empty.")


def _indexed_dict_to_list(value: Dict[str, Any]) -> Optional[List[Any]]:
    """Turn {"0": a, "1": b} into [a, b]; None when keys are not indices."""
    if not all(isinstance(key, str) and key.isdigit() for key in value):
        return None
    return [value[key] for key in sorted(value, key=int)]


class ArrayConverter(BaseConverter):
    type_tag = "array"

    def _items(self, options: Dict[str, Any]) -> Optional[TypeConverter]:
        return options.get("items")

    def check(self, value: Any, options: Dict[str, Any]) -> Optional[CoercionError]:
        if not isinstance(value, list):
            return error_not_an_array()

        items = self._items(options)
        if items is None:
            return None

        for index, item in enumerate(value):
            error = items.validate(item, {})
            if error is not None:
                return error_invalid_item(index, error)
        return None

    def canonicalize(self, value: Any, options: Dict[str, Any]) -> Any:
        items = self._items(options)
        if items is None:
            return list(value)
        return [items.from_typed_value(item, {}).value for item in value]

    def coerce(self, value: Any, options: Dict[str, Any]) -> CoercedValue:
        if looks_like_json_array(value):
            result = parse_json(value)
            if isinstance(result, CoercionError):
                return CoercedValue.failure(result)
            return self.from_typed_value(result, options)

        if isinstance(value, dict):
            as_list = _indexed_dict_to_list(value)
            if as_list is None:
                return CoercedValue.failure(error_not_an_array())
            value = as_list
        elif not isinstance(value, list):
            value = [value]

        items = self._items(options)
        if items is None:
            return self.from_typed_value(value, options)

        coerced: List[Any] = []
        for index, item in enumerate(value):
            result = items.from_sloppy_value(item, {})
            if result.error is not None:
                return CoercedValue.failure(error_invalid_item(index, result.error))
            # ?ids=1&ids= has an empty item, which is not a value
            if result.value is UNDEFINED:
                return CoercedValue.failure(error_invalid_item(index, error_empty_item()))
            coerced.append(result.value)
        return CoercedValue.success(coerced)
