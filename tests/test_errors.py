"""
Tests for the remoting error hierarchy and status code resolution.
"""

import pytest

from remoting.errors import (
    CoercionError,
    ConfigurationError,
    InvocationError,
    MethodNotFoundError,
    RemotingError,
    UnknownTypeError,
    error_to_dict,
    get_status_code,
)


class TestErrorClasses:
    def test_status_codes(self):
        assert CoercionError("bad").status_code == 400
        assert MethodNotFoundError("gone").status_code == 404
        assert ConfigurationError("oops").status_code == 500
        assert UnknownTypeError("point").status_code == 500

    def test_wire_representation(self):
        assert CoercionError("Value is not a number.").to_dict() == {
            "message": "Value is not a number.",
            "statusCode": 400,
        }

    def test_explicit_status_overrides_default(self):
        assert RemotingError("teapot", 418).status_code == 418

    def test_invocation_error_from_string(self):
        error = InvocationError("went wrong")

        assert error.message == "went wrong"
        assert error.status_code == 500
        assert error.error == "went wrong"

    def test_invocation_error_from_object(self):
        error = InvocationError({"message": "Nope", "status_code": 401})

        assert error.message == "Nope"
        assert error.status_code == 401


class TestStatusCodes:
    class Tagged(Exception):
        def __init__(self, code):
            super().__init__("tagged")
            self.statusCode = code

    def test_attribute_is_used(self):
        assert get_status_code(self.Tagged(409)) == 409

    @pytest.mark.parametrize("code", [True, "404", 200, 700, None])
    def test_invalid_codes_fall_back_to_500(self, code):
        assert get_status_code(self.Tagged(code)) == 500

    def test_plain_exception_dict(self):
        assert error_to_dict(ValueError("broken")) == {"message": "broken", "statusCode": 500}

    def test_empty_message_uses_class_name(self):
        assert error_to_dict(KeyError())["message"] == "KeyError"
