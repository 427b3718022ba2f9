"""
Remote method invocation services.

- shared_method: metadata for exposed classes/methods and @remote_method
- invocation_context: argument binding into an immutable call context
- method_invoker: bind -> invoke -> map state machine
- remote_objects: registry of exposed classes used by the transports
"""

from remoting.services.invocation_context import InvocationContext
from remoting.services.method_invoker import (
    CompletionChannel,
    InvocationState,
    MethodInvoker,
    map_results,
)
from remoting.services.remote_objects import RemoteObjects, remote_objects
from remoting.services.shared_method import SharedClass, SharedMethod, remote_method

__all__ = [
    "CompletionChannel",
    "InvocationContext",
    "InvocationState",
    "MethodInvoker",
    "RemoteObjects",
    "SharedClass",
    "SharedMethod",
    "map_results",
    "remote_method",
    "remote_objects",
]
