"""
Metadata for exposed classes and methods.

A SharedMethod describes one remote-callable method: its name, declared
arguments and results, whether it runs on the class (static) or on an
instance built by the shared constructor (prototype), and its REST verb.

Calling convention for target functions:
- Coroutine functions are awaited with the positional arguments; the return
  value is the result (a tuple is spread across return fields). Raising an
  exception reports an invocation error.
- Plain functions receive the positional arguments followed by a trailing
  completion callback `callback(err, *results)`.
"""

import inspect
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Optional, Tuple, Union

from remoting.schemas.descriptors import ArgumentDescriptor, ReturnDescriptor

ArgumentSpec = Union[ArgumentDescriptor, Dict[str, Any]]
ReturnSpec = Union[ReturnDescriptor, Dict[str, Any]]

REMOTING_ATTRIBUTE = "__remoting__"


def to_accepts(entries: Optional[Iterable[ArgumentSpec]]) -> Tuple[ArgumentDescriptor, ...]:
    """Normalize argument entries (dicts or descriptors) into descriptors."""
    return tuple(
        entry if isinstance(entry, ArgumentDescriptor) else ArgumentDescriptor.model_validate(entry)
        for entry in (entries or ())
    )


def to_returns(entries: Optional[Iterable[ReturnSpec]]) -> Tuple[ReturnDescriptor, ...]:
    """Normalize return entries (dicts or descriptors) into descriptors."""
    return tuple(
        entry if isinstance(entry, ReturnDescriptor) else ReturnDescriptor.model_validate(entry)
        for entry in (entries or ())
    )


@dataclass(frozen=True)
class SharedMethod:
    """
    A remote-callable method.

    Attributes:
        name: Remote method name
        accepts: Declared arguments, in positional order
        returns: Declared result fields, in callback-result order
        func: Explicit callable (used for shared constructors)
        is_static: True when invoked on the class rather than an instance
        is_shared_ctor: True for the method that builds prototype instances
        http_verb: REST verb ("get", "post", ... or "all")
        description: Free-form documentation
        attribute: Attribute looked up on the scope when `func` is not set
                   (defaults to `name`)
    """
    name: str
    accepts: Tuple[ArgumentDescriptor, ...] = ()
    returns: Tuple[ReturnDescriptor, ...] = ()
    func: Optional[Callable[..., Any]] = None
    is_static: bool = True
    is_shared_ctor: bool = False
    http_verb: str = "all"
    description: Optional[str] = None
    attribute: Optional[str] = None

    def resolve_callable(self, scope: Any) -> Callable[..., Any]:
        """Return the function to call for `scope`."""
        if self.func is not None:
            return self.func
        return getattr(scope, self.attribute or self.name)

    @property
    def string_name(self) -> str:
        return self.name if self.is_static else f"prototype.{self.name}"

    def allows_verb(self, verb: str) -> bool:
        return self.http_verb == "all" or self.http_verb.lower() == verb.lower()


@dataclass(frozen=True)
class SharedClass:
    """An exposed class with its static and prototype methods."""
    name: str
    ctor: type
    shared_ctor: SharedMethod
    methods: Dict[str, SharedMethod] = field(default_factory=dict)

    def find_method(self, name: str, is_static: bool) -> Optional[SharedMethod]:
        method = self.methods.get(name if is_static else f"prototype.{name}")
        if method is None or method.is_static != is_static:
            return None
        return method


def is_coroutine_callable(func: Callable[..., Any]) -> bool:
    return inspect.iscoroutinefunction(func)


def remote_method(
    accepts: Optional[Iterable[ArgumentSpec]] = None,
    returns: Optional[Iterable[ReturnSpec]] = None,
    *,
    name: Optional[str] = None,
    http_verb: str = "all",
    description: Optional[str] = None,
) -> Callable[[Any], Any]:
    """
    Decorator marking a class member as remote-callable.

    Staticmethods and classmethods become static remote methods; plain
    methods become prototype methods invoked on instances.

    Usage:
        class Locations:
            @remote_method(
                accepts=[{"name": "here", "type": "geopoint", "required": True}],
                returns=[{"name": "distance", "type": "number"}],
            )
            @staticmethod
            async def distance_from_origin(here):
                ...
    """
    metadata = {
        "name": name,
        "accepts": to_accepts(accepts),
        "returns": to_returns(returns),
        "http_verb": http_verb,
        "description": description,
    }

    def decorator(member: Any) -> Any:
        target = getattr(member, "__func__", member)
        setattr(target, REMOTING_ATTRIBUTE, metadata)
        return member

    return decorator
