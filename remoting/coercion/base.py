"""
TypeConverter contract shared by every argument type.

Each converter exposes three pure, synchronous operations:

- from_typed_value(value, options): the value is already in the converter's
  native shape (e.g. a JSON body); validate it and return its canonical form.
- from_sloppy_value(value, options): the value came from a loosely-typed wire
  encoding (query string, form field, socket frame); detect the encoding,
  normalize it, then delegate to from_typed_value.
- validate(value, options): return a CoercionError or None.

Converters NEVER raise for malformed input. Every failure is returned as a
CoercedValue carrying a CoercionError (status 400).

Absence rules for from_sloppy_value:
- UNDEFINED and "" mean "value absent"   -> success with UNDEFINED
- None and "null" mean "explicitly null" -> success with None
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol, runtime_checkable

from remoting.errors import CoercionError


class _Undefined:
    """Marker for an argument that was not supplied at all."""

    _instance: Optional["_Undefined"] = None

    def __new__(cls) -> "_Undefined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __copy__(self) -> "_Undefined":
        return self

    def __deepcopy__(self, memo: Dict[int, Any]) -> "_Undefined":
        return self

    def __reduce__(self) -> str:
        return "UNDEFINED"


UNDEFINED = _Undefined()


def is_absent(value: Any) -> bool:
    """True for UNDEFINED and None."""
    return value is UNDEFINED or value is None


def is_empty(value: Any) -> bool:
    """True for values that do not satisfy a required argument."""
    if is_absent(value):
        return True
    if isinstance(value, (dict, list)) and len(value) == 0:
        return True
    return False


@dataclass(frozen=True)
class CoercedValue:
    """
    Outcome of coercing one argument.

    Exactly one of `value` / `error` is meaningful: `error` is set if and only
    if coercion failed. `value=UNDEFINED` is a valid success meaning
    "absent, optional".
    """

    value: Any = UNDEFINED
    error: Optional[CoercionError] = None

    def __post_init__(self) -> None:
        if self.error is not None and self.value is not UNDEFINED:
            raise ValueError("CoercedValue cannot hold both a value and an error")

    @classmethod
    def success(cls, value: Any) -> "CoercedValue":
        return cls(value=value)

    @classmethod
    def failure(cls, error: CoercionError) -> "CoercedValue":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None


@runtime_checkable
class TypeConverter(Protocol):
    """Capability interface implemented by every converter."""

    def from_typed_value(self, value: Any, options: Optional[Dict[str, Any]] = None) -> CoercedValue:
        ...

    def from_sloppy_value(self, value: Any, options: Optional[Dict[str, Any]] = None) -> CoercedValue:
        ...

    def validate(self, value: Any, options: Optional[Dict[str, Any]] = None) -> Optional[CoercionError]:
        ...


class BaseConverter:
    """
    Template implementation of the TypeConverter contract.

    Subclasses implement `check` (validation of a present value) and may
    override `canonicalize` (typed value -> canonical shape) and `coerce`
    (sloppy value -> typed value, after the shared absence handling).
    """

    type_tag: str = ""

    def from_typed_value(self, value: Any, options: Optional[Dict[str, Any]] = None) -> CoercedValue:
        error = self.validate(value, options)
        if error is not None:
            return CoercedValue.failure(error)
        if is_absent(value):
            return CoercedValue.success(value)
        return CoercedValue.success(self.canonicalize(value, options or {}))

    def from_sloppy_value(self, value: Any, options: Optional[Dict[str, Any]] = None) -> CoercedValue:
        if value is UNDEFINED or value == "":
            return CoercedValue.success(UNDEFINED)
        if value is None or value == "null":
            return CoercedValue.success(None)
        return self.coerce(value, options or {})

    def validate(self, value: Any, options: Optional[Dict[str, Any]] = None) -> Optional[CoercionError]:
        if is_absent(value):
            return None
        return self.check(value, options or {})

    def check(self, value: Any, options: Dict[str, Any]) -> Optional[CoercionError]:
        raise NotImplementedError

    def canonicalize(self, value: Any, options: Dict[str, Any]) -> Any:
        return value

    def coerce(self, value: Any, options: Dict[str, Any]) -> CoercedValue:
        return self.from_typed_value(value, options)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} type={self.type_tag!r}>"
