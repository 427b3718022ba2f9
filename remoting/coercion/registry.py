"""
Registry mapping declared type tags to their converters.

Lookup is by exact tag match: no inheritance, no case folding, no fallback
to "any". An unknown tag is a configuration error (not a client error) and
is meant to surface when methods are registered, long before a request
arrives.

The registry is populated at startup and only read while serving, so one
instance can be shared by every concurrent invocation.
"""

import logging
from typing import Dict, List, Mapping, Optional

from remoting.coercion.any import AnyConverter
from remoting.coercion.array import ArrayConverter
from remoting.coercion.base import BaseConverter, TypeConverter
from remoting.coercion.boolean import BooleanConverter
from remoting.coercion.buffer import BufferConverter
from remoting.coercion.date import DateConverter
from remoting.coercion.geopoint import GeopointConverter
from remoting.coercion.integer import IntegerConverter
from remoting.coercion.number import NumberConverter
from remoting.coercion.object import ObjectConverter
from remoting.coercion.string import StringConverter
from remoting.errors import ConfigurationError, UnknownTypeError

logger = logging.getLogger(__name__)


class CoercionRegistry:
    """Type tag -> TypeConverter lookup."""

    def __init__(self, converters: Optional[Mapping[str, TypeConverter]] = None) -> None:
        self._converters: Dict[str, TypeConverter] = {}
        for type_tag, converter in (converters or {}).items():
            self.register(type_tag, converter)

    def register(self, type_tag: str, converter: TypeConverter) -> None:
        """
        Register a converter for a type tag (setup time only).

        Raises:
            ConfigurationError: If the tag is empty, already registered, or the
                converter does not implement the TypeConverter contract
        """
        if not type_tag:
            raise ConfigurationError("Type tag must be a non-empty string")
        if type_tag in self._converters:
            raise ConfigurationError(f"A converter is already registered for type \"{type_tag}\"")
        if not isinstance(converter, TypeConverter):
            raise ConfigurationError(f"{converter!r} does not implement the TypeConverter contract")

        self._converters[type_tag] = converter
        logger.debug(f"Registered converter {converter!r} for type {type_tag!r}")

    def resolve(self, type_tag: str) -> TypeConverter:
        """
        Return the converter registered for `type_tag`.

        Raises:
            UnknownTypeError: If no converter is registered for the tag
        """
        converter = self._converters.get(type_tag)
        if converter is None:
            raise UnknownTypeError(type_tag)
        return converter

    def types(self) -> List[str]:
        """List registered type tags."""
        return sorted(self._converters.keys())

    def __contains__(self, type_tag: object) -> bool:
        return type_tag in self._converters


def create_default_registry() -> CoercionRegistry:
    """Registry with the full built-in converter family."""
    converters: List[BaseConverter] = [
        AnyConverter(),
        ArrayConverter(),
        BooleanConverter(),
        BufferConverter(),
        DateConverter(),
        GeopointConverter(),
        IntegerConverter(),
        NumberConverter(),
        ObjectConverter(),
        StringConverter(),
    ]
    return CoercionRegistry({converter.type_tag: converter for converter in converters})
