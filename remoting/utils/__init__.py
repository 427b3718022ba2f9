"""Shared helpers: logging, constants, JSON detection and query-string parsing."""
