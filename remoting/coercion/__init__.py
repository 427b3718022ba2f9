"""
Argument coercion: typed converters over loosely-typed wire values.

Usage:
    >>> from remoting.coercion import create_default_registry
    >>> registry = create_default_registry()
    >>> registry.resolve("geopoint").from_sloppy_value("2.5,3").value
    {'lat': 2.5, 'lng': 3}
"""

from .base import (
    UNDEFINED,
    BaseConverter,
    CoercedValue,
    TypeConverter,
    is_absent,
    is_empty,
)
from .geopoint import GeoPoint, GeopointConverter
from .registry import CoercionRegistry, create_default_registry

__all__ = [
    "UNDEFINED",
    "BaseConverter",
    "CoercedValue",
    "CoercionRegistry",
    "GeoPoint",
    "GeopointConverter",
    "TypeConverter",
    "create_default_registry",
    "is_absent",
    "is_empty",
]
