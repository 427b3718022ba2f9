"""
Remoting backend: expose Python classes as remote methods over REST and
WebSocket transports, with type coercion of incoming arguments.
"""

__version__ = "0.1.0"
