"""
Registry of exposed classes and the entry point transports call into.

Classes are exposed once at startup. Every declared argument and return
type is checked against the coercion registry at that point, so a typo in
a type tag fails fast instead of on the first request.

Invocation flow (`RemoteObjects.invoke`):
1. Look up the class and method (MethodNotFoundError if unknown)
2. Bind arguments into a fresh InvocationContext (CoercionError on bad input)
3. Prototype methods: run the shared constructor to build the instance
4. Invoke the method and return its mapped result
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from remoting.coercion.registry import CoercionRegistry, create_default_registry
from remoting.errors import ConfigurationError, MethodNotFoundError
from remoting.schemas.descriptors import ArgumentDescriptor
from remoting.services.method_invoker import MethodInvoker
from remoting.services.shared_method import (
    REMOTING_ATTRIBUTE,
    ArgumentSpec,
    SharedClass,
    SharedMethod,
    to_accepts,
)

logger = logging.getLogger(__name__)

DEFAULT_CTOR_ACCEPTS = (
    ArgumentDescriptor(name="id", type="any", required=True, http_source="path"),
)


def default_shared_ctor(cls: type, accepts: Iterable[ArgumentDescriptor] = DEFAULT_CTOR_ACCEPTS) -> SharedMethod:
    """Shared constructor building instances as `cls(*ctor_args)`."""

    async def construct(*args: Any) -> Any:
        return cls(*args)

    return SharedMethod(
        name="sharedCtor",
        accepts=tuple(accepts),
        func=construct,
        is_static=True,
        is_shared_ctor=True,
    )


class RemoteObjects:
    """
    Exposed classes, keyed by their remote name.

    Usage:
        >>> remotes = RemoteObjects()
        >>> remotes.expose(Locations)
        >>> await remotes.invoke("Locations", "nearby", args={"here": "2.5,3"})
    """

    def __init__(self, registry: Optional[CoercionRegistry] = None) -> None:
        self.registry = registry or create_default_registry()
        self._classes: Dict[str, SharedClass] = {}

    def expose(
        self,
        cls: type,
        name: Optional[str] = None,
        *,
        ctor_accepts: Optional[Iterable[ArgumentSpec]] = None,
        shared_ctor: Optional[SharedMethod] = None,
    ) -> SharedClass:
        """
        Expose every `@remote_method` member of `cls`.

        Args:
            cls: The class to expose
            name: Remote name (defaults to the class name)
            ctor_accepts: Arguments of the default shared constructor, which
                          calls `cls(*args)`; defaults to a single path `id`
            shared_ctor: Fully custom shared constructor

        Raises:
            ConfigurationError: Duplicate class name, or a method declaring an
                                unregistered type
        """
        remote_name = name or cls.__name__
        if remote_name in self._classes:
            raise ConfigurationError(f"Class {remote_name!r} is already exposed")

        if shared_ctor is None:
            accepts = DEFAULT_CTOR_ACCEPTS if ctor_accepts is None else to_accepts(ctor_accepts)
            shared_ctor = default_shared_ctor(cls, accepts)
        self._check_types(remote_name, shared_ctor)

        methods: Dict[str, SharedMethod] = {}
        members: Dict[str, Any] = {}
        for klass in reversed(cls.__mro__):
            members.update(vars(klass))

        for attr_name, member in members.items():
            target = getattr(member, "__func__", member)
            metadata = getattr(target, REMOTING_ATTRIBUTE, None)
            if metadata is None:
                continue

            method = SharedMethod(
                name=metadata["name"] or attr_name,
                attribute=attr_name,
                accepts=metadata["accepts"],
                returns=metadata["returns"],
                is_static=isinstance(member, (staticmethod, classmethod)),
                http_verb=metadata["http_verb"],
                description=metadata["description"],
            )
            self._check_types(remote_name, method)
            methods[method.string_name] = method

        shared_class = SharedClass(name=remote_name, ctor=cls, shared_ctor=shared_ctor, methods=methods)
        self._classes[remote_name] = shared_class

        logger.info(f"Exposed remote class {remote_name} with {len(methods)} method(s)")
        return shared_class

    def _check_types(self, class_name: str, method: SharedMethod) -> None:
        tags: List[str] = []
        for arg in method.accepts:
            tags.append(arg.type)
            if arg.type == "array":
                tags.append(arg.item_type or "any")
        tags.extend(ret.type for ret in method.returns)

        for tag in tags:
            if tag not in self.registry:
                raise ConfigurationError(
                    f"{class_name}.{method.string_name} declares unknown type \"{tag}\""
                )

    def get_class(self, name: str) -> SharedClass:
        shared_class = self._classes.get(name)
        if shared_class is None:
            raise MethodNotFoundError(f"Shared class \"{name}\" has no method handling the request")
        return shared_class

    def find_method(self, class_name: str, method_name: str, is_static: bool = True) -> SharedMethod:
        shared_class = self.get_class(class_name)
        method = shared_class.find_method(method_name, is_static)
        if method is None:
            kind = method_name if is_static else f"prototype.{method_name}"
            raise MethodNotFoundError(f"Shared class \"{class_name}\" has no method \"{kind}\"")
        return method

    def classes(self) -> List[SharedClass]:
        return list(self._classes.values())

    def list_methods(self) -> List[str]:
        """List all exposed methods as "Class.method" / "Class.prototype.method"."""
        return sorted(
            f"{shared_class.name}.{method.string_name}"
            for shared_class in self._classes.values()
            for method in shared_class.methods.values()
        )

    async def invoke(
        self,
        class_name: str,
        method_name: str,
        *,
        args: Optional[Mapping[str, Any]] = None,
        ctor_args: Optional[Mapping[str, Any]] = None,
        is_static: bool = True,
        typed_args: Iterable[str] = (),
        typed_ctor_args: Iterable[str] = (),
        request: Any = None,
    ) -> Any:
        """
        Bind, invoke and map one remote call.

        Raises:
            MethodNotFoundError: Unknown class or method
            CoercionError: Invalid argument; the method is never called
            Exception: Invocation errors reported by the method, unchanged
        """
        shared_class = self.get_class(class_name)
        method = self.find_method(class_name, method_name, is_static)

        invoker = MethodInvoker(method, self.registry)
        ctx = invoker.bind(
            args,
            ctor_accepts=() if is_static else shared_class.shared_ctor.accepts,
            ctor_args=ctor_args,
            typed_args=typed_args,
            typed_ctor_args=typed_ctor_args,
            request=request,
        )

        if is_static:
            scope: Any = shared_class.ctor
        else:
            ctor_invoker = MethodInvoker(shared_class.shared_ctor, self.registry)
            scope = await ctor_invoker.invoke(shared_class.ctor, ctx)

        logger.debug(f"Invoking {class_name}.{method.string_name}")
        return await invoker.invoke(scope, ctx)


# Default registry of exposed classes used by the application
remote_objects = RemoteObjects()
