"""
Pydantic schemas for remote method metadata and wire messages.

Descriptors are immutable once a method is registered. Wire messages use
strict models so malformed frames fail with a client error.
"""
