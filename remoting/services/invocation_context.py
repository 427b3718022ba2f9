"""
Per-call invocation state.

An InvocationContext is created for exactly one incoming call, by the
transport, and discarded once the response is sent. It owns:

- the coerced method arguments (name -> CoercedValue)
- the coerced shared-constructor arguments, for prototype methods
- the named results, filled in by the MethodInvoker after a successful call

Argument maps are frozen when the context is built. Binding happens in
`InvocationContext.bind`, which coerces every declared argument in
declaration order and stops at the first failure.
"""

import logging
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence, Set

from remoting.coercion.base import UNDEFINED, CoercedValue, is_empty
from remoting.coercion.registry import CoercionRegistry, create_default_registry
from remoting.errors import CoercionError
from remoting.schemas.descriptors import ArgumentDescriptor

logger = logging.getLogger(__name__)

_default_registry: Optional[CoercionRegistry] = None


def get_default_registry() -> CoercionRegistry:
    """Lazily created registry shared by contexts bound without one."""
    global _default_registry

    if _default_registry is None:
        _default_registry = create_default_registry()
    return _default_registry


def converter_options(descriptor: ArgumentDescriptor, registry: CoercionRegistry) -> Dict[str, Any]:
    """Options handed to the converter of `descriptor`."""
    if descriptor.type == "array":
        return {"items": registry.resolve(descriptor.item_type or "any")}
    return {}


def coerce_argument(
    descriptor: ArgumentDescriptor,
    raw_value: Any,
    registry: CoercionRegistry,
    typed: bool = False,
) -> CoercedValue:
    """
    Coerce one raw wire value for `descriptor`.

    Args:
        descriptor: The declared argument
        raw_value: Value delivered by the transport (UNDEFINED when absent)
        registry: Registry used to resolve the converter
        typed: True when the transport delivered a native-shaped value
               (e.g. a JSON body); False for sloppy sources like query strings

    Returns:
        CoercedValue with either the value or the error; a required argument
        that ends up empty yields an error as well

    Raises:
        UnknownTypeError: If the declared type has no converter
    """
    converter = registry.resolve(descriptor.type)
    options = converter_options(descriptor, registry)

    if typed:
        result = converter.from_typed_value(raw_value, options)
    else:
        result = converter.from_sloppy_value(raw_value, options)

    if result.error is None and descriptor.required and is_empty(result.value):
        return CoercedValue.failure(CoercionError(f"{descriptor.name} is a required argument"))
    return result


def bind_arguments(
    accepts: Sequence[ArgumentDescriptor],
    raw_args: Mapping[str, Any],
    registry: CoercionRegistry,
    typed_args: Iterable[str] = (),
) -> Dict[str, CoercedValue]:
    """
    Coerce every declared argument in declaration order.

    Raises:
        CoercionError: The first failing argument's error (first-error-wins)
    """
    typed_names: Set[str] = set(typed_args)
    bound: Dict[str, CoercedValue] = {}

    for descriptor in accepts:
        raw_value = raw_args.get(descriptor.name, UNDEFINED)
        result = coerce_argument(descriptor, raw_value, registry, typed=descriptor.name in typed_names)

        if result.error is not None:
            logger.debug(f"Argument {descriptor.name!r} rejected: {result.error.message}")
            raise result.error

        bound[descriptor.name] = result

    return bound


class InvocationContext:
    """Coerced arguments and named results of a single remote call."""

    def __init__(
        self,
        args: Optional[Mapping[str, CoercedValue]] = None,
        ctor_args: Optional[Mapping[str, CoercedValue]] = None,
        request: Any = None,
    ) -> None:
        self._coerced_args = MappingProxyType(dict(args or {}))
        self._coerced_ctor_args = MappingProxyType(dict(ctor_args or {}))
        self._args = MappingProxyType({name: coerced.value for name, coerced in self._coerced_args.items()})
        self._ctor_args = MappingProxyType(
            {name: coerced.value for name, coerced in self._coerced_ctor_args.items()}
        )
        self._results: Dict[str, Any] = {}
        self._invoked: Set[str] = set()
        self.request = request

    @classmethod
    def bind(
        cls,
        accepts: Sequence[ArgumentDescriptor],
        args: Optional[Mapping[str, Any]] = None,
        *,
        ctor_accepts: Sequence[ArgumentDescriptor] = (),
        ctor_args: Optional[Mapping[str, Any]] = None,
        registry: Optional[CoercionRegistry] = None,
        typed_args: Iterable[str] = (),
        typed_ctor_args: Iterable[str] = (),
        request: Any = None,
    ) -> "InvocationContext":
        """
        Build a context by coercing raw transport values.

        Constructor arguments are bound before method arguments, each in
        declaration order.

        Raises:
            CoercionError: On the first argument that fails coercion
            UnknownTypeError: If a declared type has no converter
        """
        registry = registry or get_default_registry()
        bound_ctor_args = bind_arguments(ctor_accepts, ctor_args or {}, registry, typed_ctor_args)
        bound_args = bind_arguments(accepts, args or {}, registry, typed_args)
        return cls(bound_args, bound_ctor_args, request=request)

    @property
    def args(self) -> Mapping[str, Any]:
        """Read-only map of coerced method argument values."""
        return self._args

    @property
    def ctor_args(self) -> Mapping[str, Any]:
        """Read-only map of coerced shared-constructor argument values."""
        return self._ctor_args

    @property
    def results(self) -> Mapping[str, Any]:
        return MappingProxyType(self._results)

    def get_arg_by_name(self, name: str, options: Optional[Dict[str, Any]] = None) -> Any:
        """Return the coerced value of an argument (UNDEFINED if not bound)."""
        return self._args.get(name, UNDEFINED)

    def get_coerced(self, name: str) -> Optional[CoercedValue]:
        return self._coerced_args.get(name)

    def set_arg_by_name(self, name: str, value: Any, options: Optional[Dict[str, Any]] = None) -> None:
        raise NotImplementedError("Arguments cannot be replaced after binding")

    def get_result_by_name(self, name: str, options: Optional[Dict[str, Any]] = None) -> Any:
        return self._results.get(name, UNDEFINED)

    def set_result_by_name(self, name: str, value: Any, options: Optional[Dict[str, Any]] = None) -> None:
        self._results[name] = value

    def mark_invoked(self, kind: str) -> None:
        """
        Record that the method (or shared constructor) has been invoked.

        Raises:
            RuntimeError: If this context already ran an invocation of `kind`
        """
        if kind in self._invoked:
            raise RuntimeError(f"InvocationContext already invoked ({kind}); contexts are single-use")
        self._invoked.add(kind)

    def __repr__(self) -> str:
        return f"InvocationContext(args={list(self._args)}, ctor_args={list(self._ctor_args)})"
