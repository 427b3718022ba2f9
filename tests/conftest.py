"""
Pytest configuration for remoting backend tests.

Sets up test environment and global fixtures.
"""
import os
import pytest

# Disable config validation during tests
# This allows tests to run without requiring real environment variables
os.environ["VALIDATE_CONFIG"] = "false"

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "testing")

from fastapi.testclient import TestClient  # noqa: E402

from remoting.coercion import create_default_registry  # noqa: E402
from remoting.main import create_app  # noqa: E402
from remoting.schemas.descriptors import ArgumentDescriptor  # noqa: E402
from remoting.services import RemoteObjects, remote_method  # noqa: E402
from remoting.services.invocation_context import coerce_argument  # noqa: E402


@pytest.fixture
def registry():
    """Fresh registry with the built-in converters."""
    return create_default_registry()


@pytest.fixture
def coerce(registry):
    """
    Coerce one raw value the way the binding layer does.

    Usage:
        result = coerce("2.5,3", type="geopoint", required=True)
        result = coerce({"lat": 1, "lng": 2}, type="geopoint", typed=True)
    """
    def _coerce(raw_value, type="any", required=False, typed=False, item_type=None):
        descriptor = ArgumentDescriptor(name="arg", type=type, required=required, item_type=item_type)
        return coerce_argument(descriptor, raw_value, registry, typed=typed)

    return _coerce


class EchoError(Exception):
    """Target-method error carrying its own HTTP status."""

    def __init__(self, message, status_code):
        super().__init__(message)
        self.status_code = status_code


def _geopoint_arg(required=False, http_source="auto"):
    return [{"name": "arg", "type": "geopoint", "required": required, "http_source": http_source}]


_GEOPOINT_RESULT = [{"name": "arg", "type": "geopoint"}]


class Echo:
    """Remote class echoing its coerced arguments back to the caller."""

    def __init__(self, id):
        self.id = id

    @remote_method(accepts=_geopoint_arg(), returns=_GEOPOINT_RESULT)
    @staticmethod
    async def optional(arg):
        return arg

    @remote_method(accepts=_geopoint_arg(required=True), returns=_GEOPOINT_RESULT)
    @staticmethod
    async def required(arg):
        return arg

    @remote_method(accepts=_geopoint_arg(http_source="body"), returns=_GEOPOINT_RESULT, name="bodyOptional")
    @staticmethod
    async def body_optional(arg):
        return arg

    @remote_method(
        accepts=_geopoint_arg(required=True, http_source="body"),
        returns=_GEOPOINT_RESULT,
        name="bodyRequired",
    )
    @staticmethod
    async def body_required(arg):
        return arg

    @remote_method(
        accepts=[{"name": "greeting", "type": "string"}],
        returns=[{"name": "id", "type": "string"}, {"name": "message", "type": "string"}],
    )
    def describe(self, greeting, callback):
        callback(None, self.id, f"{greeting or 'Hello'} from {self.id}")

    @remote_method(returns=[{"name": "data", "type": "buffer"}], http_verb="get", name="getOnly")
    @staticmethod
    async def get_only():
        return b"hi"

    @remote_method(accepts=[{"name": "status", "type": "integer"}])
    @staticmethod
    async def fail(status):
        raise EchoError("Rejected by target", status)

    @remote_method()
    @staticmethod
    async def crash():
        raise RuntimeError("kaboom")

    @remote_method()
    @staticmethod
    def forbidden(callback):
        callback({"message": "Forbidden", "statusCode": 403})

    @remote_method(
        accepts=[{"name": "xs", "type": "array", "item_type": "number"}],
        returns=[{"name": "xs", "type": "array"}],
    )
    @staticmethod
    async def numbers(xs):
        return xs

    @remote_method(returns=[{"name": "a", "type": "any"}, {"name": "b", "type": "any"}])
    @staticmethod
    def partial(callback):
        callback(None, 1)


@pytest.fixture
def remotes():
    """RemoteObjects exposing the Echo class."""
    remotes = RemoteObjects()
    remotes.expose(Echo)
    return remotes


@pytest.fixture
def client(remotes):
    """Create test client for a FastAPI app serving the Echo class."""
    return TestClient(create_app(remotes))
