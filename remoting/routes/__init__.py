"""
FastAPI routers for the remoting transports.

- rest: HTTP REST adapter (static and prototype method calls)
- socket: WebSocket event channel adapter
- health: public health check
"""
