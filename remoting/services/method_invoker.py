"""
Invocation of a remote method against a bound InvocationContext.

State machine (one MethodInvoker per call):

    IDLE -> BINDING -> INVOKING -> MAPPING -> DONE
               |           |
               +-> FAILED  +-> FAILED

- BINDING: arguments are coerced (see InvocationContext.bind). Any input
  error fails the call before the target runs.
- INVOKING: the target is called with the coerced positional arguments and
  a one-shot completion channel.
- MAPPING: callback results are mapped onto the declared return fields.

Invocation errors are forwarded to the caller unmodified. A method named
"on" on an event-emitting instance is a subscription: the first callback
argument is the (non-error) result.
"""

import asyncio
import logging
import threading
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol, Sequence, Tuple, runtime_checkable

from remoting.coercion.base import UNDEFINED
from remoting.coercion.registry import CoercionRegistry
from remoting.errors import InvocationError
from remoting.schemas.descriptors import ReturnDescriptor
from remoting.services.invocation_context import InvocationContext
from remoting.services.shared_method import SharedMethod, is_coroutine_callable

logger = logging.getLogger(__name__)


class InvocationState(str, Enum):
    IDLE = "idle"
    BINDING = "binding"
    INVOKING = "invoking"
    MAPPING = "mapping"
    DONE = "done"
    FAILED = "failed"


@runtime_checkable
class EventEmitter(Protocol):
    """Any object that registers listeners with `on` and fires them with `emit`."""

    def on(self, event: str, *args: Any, **kwargs: Any) -> Any:
        ...

    def emit(self, event: str, *args: Any, **kwargs: Any) -> Any:
        ...


class CompletionChannel:
    """
    One-shot result channel handed to callback-style targets.

    Calling the channel resolves it with `(error, *results)`. A second call
    is a contract violation by the target and raises RuntimeError. The
    channel may be called from any thread.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop or asyncio.get_running_loop()
        self._future: "asyncio.Future[Tuple[Any, Tuple[Any, ...]]]" = self._loop.create_future()
        self._lock = threading.Lock()
        self._resolved = False

    @property
    def resolved(self) -> bool:
        return self._resolved

    def __call__(self, *callback_args: Any) -> None:
        error = callback_args[0] if callback_args else None
        self.resolve(error, *callback_args[1:])

    def resolve(self, error: Any, *results: Any) -> None:
        with self._lock:
            if self._resolved:
                raise RuntimeError("Completion callback invoked more than once")
            self._resolved = True
        self._set((error, results))

    def _set(self, outcome: Tuple[Any, Tuple[Any, ...]]) -> None:
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        if running is self._loop:
            self._deliver(outcome)
        else:
            self._loop.call_soon_threadsafe(self._deliver, outcome)

    def _deliver(self, outcome: Tuple[Any, Tuple[Any, ...]]) -> None:
        # the waiting call may have been abandoned by a transport timeout
        if not self._future.done():
            self._future.set_result(outcome)

    async def wait(self) -> Tuple[Any, Tuple[Any, ...]]:
        return await self._future


class SubscriptionChannel(CompletionChannel):
    """
    Channel for event subscriptions (`on`).

    The listener's first argument is the result, never an error. Later
    emissions of the same event do not affect the already-resolved call.
    """

    def __call__(self, *callback_args: Any) -> None:
        with self._lock:
            if self._resolved:
                logger.debug("Ignoring repeated event emission for a resolved subscription")
                return
            self._resolved = True
        self._set((None, callback_args[:1]))


def map_results(returns: Sequence[ReturnDescriptor], results: Sequence[Any]) -> Any:
    """
    Map positional callback results onto declared return fields.

    More than one declared field builds a dict keyed by each descriptor's
    name (or positional tag); zero or one returns the first result unwrapped.
    """
    if len(returns) > 1:
        mapped: Dict[str, Any] = {}
        for index, descriptor in enumerate(returns):
            key = descriptor.key or str(index)
            mapped[key] = results[index] if index < len(results) else UNDEFINED
        return mapped

    return results[0] if results else UNDEFINED


class MethodInvoker:
    """
    Runs one remote method call through binding, invocation and mapping.

    Usage:
        >>> invoker = MethodInvoker(method)
        >>> ctx = invoker.bind(args={"here": "2.5,3"})
        >>> result = await invoker.invoke(Locations, ctx)
    """

    def __init__(self, method: SharedMethod, registry: Optional[CoercionRegistry] = None) -> None:
        self.method = method
        self.registry = registry
        self.state = InvocationState.IDLE

    def bind(
        self,
        args: Optional[Mapping[str, Any]] = None,
        *,
        ctor_accepts: Sequence[Any] = (),
        ctor_args: Optional[Mapping[str, Any]] = None,
        typed_args: Iterable[str] = (),
        typed_ctor_args: Iterable[str] = (),
        request: Any = None,
    ) -> InvocationContext:
        """
        Coerce raw transport values into a fresh InvocationContext.

        Raises:
            CoercionError: First failing argument; the target is never called
        """
        self.state = InvocationState.BINDING
        try:
            return InvocationContext.bind(
                self.method.accepts,
                args,
                ctor_accepts=ctor_accepts,
                ctor_args=ctor_args,
                registry=self.registry,
                typed_args=typed_args,
                typed_ctor_args=typed_ctor_args,
                request=request,
            )
        except Exception:
            self.state = InvocationState.FAILED
            raise

    def is_subscription(self, scope: Any) -> bool:
        # a class defining on/emit also matches EventEmitter
        return self.method.name == "on" and not isinstance(scope, type) and isinstance(scope, EventEmitter)

    def positional_args(self, ctx: InvocationContext) -> List[Any]:
        """Arguments in declaration order, taken from ctor or method args."""
        source = ctx.ctor_args if self.method.is_shared_ctor else ctx.args
        return [source.get(descriptor.name, UNDEFINED) for descriptor in self.method.accepts]

    async def invoke(self, scope: Any, ctx: InvocationContext) -> Any:
        """
        Call the method on `scope` and return its mapped result.

        Raises:
            RuntimeError: If `ctx` was already used for this kind of call
            Exception: Whatever error the target reported, unchanged
            InvocationError: When the target reported a non-exception error
        """
        if self.state not in (InvocationState.IDLE, InvocationState.BINDING):
            raise RuntimeError(f"MethodInvoker for {self.method.name!r} already ran (state={self.state.value})")
        ctx.mark_invoked("ctor" if self.method.is_shared_ctor else "method")

        self.state = InvocationState.INVOKING
        args = self.positional_args(ctx)

        try:
            if self.is_subscription(scope):
                error, results = await self._subscribe(scope, args)
            else:
                error, results = await self._call(scope, args)
        except Exception:
            self.state = InvocationState.FAILED
            raise

        if error is not None:
            self.state = InvocationState.FAILED
            logger.debug(f"Remote method {self.method.name!r} reported an error: {error!r}")
            if isinstance(error, BaseException):
                raise error
            raise InvocationError(error)

        self.state = InvocationState.MAPPING
        result = map_results(self.method.returns, results)
        self._store_results(ctx, result)

        self.state = InvocationState.DONE
        return result

    async def _call(self, scope: Any, args: List[Any]) -> Tuple[Any, Tuple[Any, ...]]:
        func = self.method.resolve_callable(scope)

        if is_coroutine_callable(func):
            try:
                value = await func(*args)
            except Exception as e:
                return e, ()
            if isinstance(value, tuple):
                return None, value
            return None, (value,)

        channel = CompletionChannel()
        func(*args, channel)
        return await channel.wait()

    async def _subscribe(self, scope: Any, args: List[Any]) -> Tuple[Any, Tuple[Any, ...]]:
        func = self.method.resolve_callable(scope)
        channel = SubscriptionChannel()
        func(*args, channel)
        return await channel.wait()

    def _store_results(self, ctx: InvocationContext, result: Any) -> None:
        returns = self.method.returns
        if len(returns) > 1:
            for key, value in result.items():
                ctx.set_result_by_name(key, value)
        elif len(returns) == 1 and returns[0].key:
            ctx.set_result_by_name(returns[0].key, result)
