"""
Constants shared by the coercion layer.

Geographic bounds are closed intervals: both ends are valid values.
"""

LAT_MIN = -90
LAT_MAX = 90
LNG_MIN = -180
LNG_MAX = 180

# Largest integer a JSON client can represent without losing precision
MAX_SAFE_INTEGER = 2**53 - 1

# Type tags understood by the default coercion registry
TYPE_TAGS = {
    'ANY': 'any',
    'ARRAY': 'array',
    'BOOLEAN': 'boolean',
    'BUFFER': 'buffer',
    'DATE': 'date',
    'GEOPOINT': 'geopoint',
    'INTEGER': 'integer',
    'NUMBER': 'number',
    'OBJECT': 'object',
    'STRING': 'string',
}
