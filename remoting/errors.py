"""
Error hierarchy for the remoting backend.

Three disjoint classes of failure exist:

- Input errors (CoercionError, HTTP 400): malformed, missing, out-of-range or
  wrong-typed argument values. Produced by converters, raised by the binding
  layer, never retried.
- Configuration errors (ConfigurationError, HTTP 500): a method declares an
  argument type with no registered converter, or a class/method is wired up
  incorrectly. These are setup faults and should be caught in testing.
- Invocation errors: whatever the target method reports through its
  completion callback. Exceptions are forwarded unchanged; non-exception
  error values are wrapped in InvocationError.

Transports translate RemotingError subclasses into wire responses using
`status_code` and `message`.
"""

from typing import Any, Dict, Optional

from fastapi import status


class RemotingError(Exception):
    """Base class for every error raised by the remoting layer."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> Dict[str, Any]:
        """Wire representation shared by the REST and socket transports."""
        return {"message": self.message, "statusCode": self.status_code}

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, status_code={self.status_code})"


class CoercionError(RemotingError):
    """
    A client supplied an argument value that cannot be coerced or validated.

    Always a client-input error (HTTP 400); never represents a server fault.
    """

    status_code = status.HTTP_400_BAD_REQUEST


class ConfigurationError(RemotingError):
    """A remote method or class is misconfigured (programming error)."""


class UnknownTypeError(ConfigurationError):
    """A declared argument or return type has no registered converter."""

    def __init__(self, type_tag: str) -> None:
        super().__init__(f"No converter registered for type \"{type_tag}\"")
        self.type_tag = type_tag


class MethodNotFoundError(RemotingError):
    """The requested class or method is not exposed."""

    status_code = status.HTTP_404_NOT_FOUND


class InvocationError(RemotingError):
    """
    Wraps a non-exception error value reported by a target method.

    The original value is kept untouched in `error`.
    """

    def __init__(self, error: Any) -> None:
        message = error if isinstance(error, str) else f"Remote method failed: {error!r}"
        status_code = None
        if isinstance(error, dict):
            message = str(error.get("message", message))
            raw_status = error.get("statusCode", error.get("status_code"))
            if isinstance(raw_status, int):
                status_code = raw_status
        super().__init__(message, status_code)
        self.error = error


def get_status_code(error: BaseException) -> int:
    """
    Resolve the HTTP status code for an error leaving the invocation layer.

    RemotingError subclasses carry their own code. Arbitrary exceptions raised
    by target methods keep an integer `status_code` (or `statusCode`) attribute
    in the 4xx-5xx range when they define one; anything else is a server fault.
    """
    for attr in ("status_code", "statusCode"):
        code = getattr(error, attr, None)
        if isinstance(code, int) and not isinstance(code, bool) and 400 <= code <= 599:
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_to_dict(error: BaseException) -> Dict[str, Any]:
    """Wire representation of any error, remoting or not."""
    if isinstance(error, RemotingError):
        return error.to_dict()
    return {"message": str(error) or type(error).__name__, "statusCode": get_status_code(error)}
