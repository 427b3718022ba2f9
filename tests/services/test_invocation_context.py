"""
Tests for InvocationContext binding.

Covers:
- Declaration-order binding with first-error-wins
- Constructor arguments bound before method arguments
- Typed versus sloppy sources per argument
- Read-only argument maps and named results
- Single-use enforcement
"""

import pytest

from remoting.coercion import UNDEFINED
from remoting.errors import CoercionError, UnknownTypeError
from remoting.schemas.descriptors import ArgumentDescriptor
from remoting.services.invocation_context import InvocationContext, bind_arguments


@pytest.fixture
def accepts():
    return (
        ArgumentDescriptor(name="here", type="geopoint", required=True),
        ArgumentDescriptor(name="radius", type="number"),
        ArgumentDescriptor(name="verbose", type="boolean"),
    )


class TestBind:
    """Tests for InvocationContext.bind."""

    def test_binds_every_declared_argument(self, accepts):
        ctx = InvocationContext.bind(accepts, {"here": "2.5,3", "radius": "10", "verbose": "true"})

        assert ctx.args == {"here": {"lat": 2.5, "lng": 3}, "radius": 10, "verbose": True}

    def test_missing_optional_arguments_are_undefined(self, accepts):
        ctx = InvocationContext.bind(accepts, {"here": "1,2"})

        assert ctx.args["radius"] is UNDEFINED
        assert ctx.get_arg_by_name("verbose") is UNDEFINED

    def test_undeclared_arguments_are_dropped(self, accepts):
        ctx = InvocationContext.bind(accepts, {"here": "1,2", "extra": "x"})

        assert "extra" not in ctx.args

    def test_first_error_wins(self, accepts):
        """The earliest declared failing argument is reported."""
        with pytest.raises(CoercionError) as exc_info:
            InvocationContext.bind(accepts, {"here": "95,3", "radius": "far"})

        assert exc_info.value.message == "Latitude is out of range [-90, 90]"
        assert exc_info.value.status_code == 400

    def test_required_argument_missing(self, accepts):
        with pytest.raises(CoercionError) as exc_info:
            InvocationContext.bind(accepts, {"radius": "far"})

        assert exc_info.value.message == "here is a required argument"

    def test_ctor_arguments_bound_first(self, accepts):
        """A bad constructor argument wins over a bad method argument."""
        ctor_accepts = (ArgumentDescriptor(name="id", type="integer", required=True),)

        with pytest.raises(CoercionError) as exc_info:
            InvocationContext.bind(
                accepts,
                {"here": "bad"},
                ctor_accepts=ctor_accepts,
                ctor_args={"id": "1.5"},
            )

        assert exc_info.value.message == "Value is not a safe integer."

    def test_ctor_and_method_arguments_kept_apart(self, accepts):
        ctor_accepts = (ArgumentDescriptor(name="id", type="integer", required=True),)

        ctx = InvocationContext.bind(accepts, {"here": "1,2"}, ctor_accepts=ctor_accepts, ctor_args={"id": "7"})

        assert ctx.ctor_args == {"id": 7}
        assert "id" not in ctx.args

    def test_typed_arguments_skip_sloppy_parsing(self, accepts):
        """A JSON-body string "10" is not a number."""
        with pytest.raises(CoercionError):
            InvocationContext.bind(accepts, {"here": [1, 2], "radius": "10"}, typed_args={"here", "radius"})

    def test_unknown_type_is_configuration_error(self):
        with pytest.raises(UnknownTypeError):
            InvocationContext.bind([ArgumentDescriptor(name="x", type="point")], {"x": "1"})

    def test_request_is_kept(self, accepts):
        request = object()

        ctx = InvocationContext.bind(accepts, {"here": "1,2"}, request=request)

        assert ctx.request is request


class TestContextState:
    """Tests for argument immutability, results and single use."""

    def test_args_are_read_only(self, accepts):
        ctx = InvocationContext.bind(accepts, {"here": "1,2"})

        with pytest.raises(TypeError):
            ctx.args["here"] = {"lat": 0, "lng": 0}

    def test_set_arg_by_name_not_supported(self, accepts):
        ctx = InvocationContext.bind(accepts, {"here": "1,2"})

        with pytest.raises(NotImplementedError):
            ctx.set_arg_by_name("here", "3,4")

    def test_get_coerced(self, accepts):
        ctx = InvocationContext.bind(accepts, {"here": "1,2"})

        assert ctx.get_coerced("here").ok
        assert ctx.get_coerced("missing") is None

    def test_results(self, accepts):
        ctx = InvocationContext.bind(accepts, {"here": "1,2"})

        ctx.set_result_by_name("distance", 12.5)

        assert ctx.get_result_by_name("distance") == 12.5
        assert ctx.get_result_by_name("other") is UNDEFINED
        assert ctx.results == {"distance": 12.5}

    def test_single_use(self, accepts):
        ctx = InvocationContext.bind(accepts, {"here": "1,2"})
        ctx.mark_invoked("ctor")
        ctx.mark_invoked("method")

        with pytest.raises(RuntimeError):
            ctx.mark_invoked("method")


class TestBindArguments:
    def test_returns_coerced_values(self, registry):
        bound = bind_arguments([ArgumentDescriptor(name="n", type="number")], {"n": "3"}, registry)

        assert bound["n"].value == 3
        assert bound["n"].error is None
