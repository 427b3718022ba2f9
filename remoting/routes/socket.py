"""
Event-socket transport for remote methods (WebSocket).

Each text frame is one call (see remoting.schemas.socket for the frame
format). Calls on one connection are handled in order; every request frame
gets exactly one response frame carrying the same id.

Socket payloads are JSON, but clients commonly forward query-string style
values, so arguments are bound as sloppy values (embedded JSON text and
"lat,lng" strings are still detected).
"""

import json
from typing import Any, Dict, Optional, Tuple

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status
from pydantic import ValidationError

from remoting.coercion.base import UNDEFINED
from remoting.config import settings
from remoting.errors import CoercionError, MethodNotFoundError, RemotingError, error_to_dict
from remoting.routes.rest import encode_result
from remoting.schemas.socket import SocketRequest
from remoting.services.remote_objects import RemoteObjects
from remoting.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["remoting"])

PROTOTYPE_SEGMENT = "prototype"


def parse_method_name(method: str) -> Tuple[str, str, bool]:
    """
    Split "Class.method" / "Class.prototype.method".

    Returns:
        (class_name, method_name, is_static)

    Raises:
        MethodNotFoundError: If the name has neither form
    """
    parts = method.split(".")
    if len(parts) == 2 and all(parts):
        return parts[0], parts[1], True
    if len(parts) == 3 and parts[1] == PROTOTYPE_SEGMENT and parts[0] and parts[2]:
        return parts[0], parts[2], False
    raise MethodNotFoundError(f"Invalid remote method name \"{method}\"")


def error_frame(request_id: Any, message: str, status_code: int) -> Dict[str, Any]:
    return {"id": request_id, "error": {"message": message, "statusCode": status_code}}


def result_frame(request_id: Any, result: Any) -> Dict[str, Any]:
    frame: Dict[str, Any] = {"id": request_id}
    if result is not UNDEFINED:
        frame["result"] = encode_result(result)
    return frame


async def handle_frame(remotes: RemoteObjects, text: str) -> Dict[str, Any]:
    """Process one request frame and build its response frame."""
    request_id: Optional[Any] = None
    try:
        payload = json.loads(text)
    except ValueError:
        return error_frame(None, "Cannot parse JSON-encoded message.", status.HTTP_400_BAD_REQUEST)

    if isinstance(payload, dict):
        request_id = payload.get("id")

    try:
        message = SocketRequest.model_validate(payload)
    except ValidationError as e:
        logger.debug(f"Rejected socket frame: {e.errors()}")
        return error_frame(request_id, "Invalid remote call message.", status.HTTP_400_BAD_REQUEST)

    try:
        class_name, method_name, is_static = parse_method_name(message.method)
        result = await remotes.invoke(
            class_name,
            method_name,
            args=message.args,
            ctor_args=message.ctor_args,
            is_static=is_static,
        )
    except CoercionError as e:
        logger.debug(f"Socket call {message.method} rejected: {e.message}")
        return {"id": message.id, "error": e.to_dict()}
    except RemotingError as e:
        logger.warning(f"Socket call {message.method} failed: {e.message}")
        return {"id": message.id, "error": e.to_dict()}
    except Exception as e:
        logger.error(f"Socket call {message.method} raised {type(e).__name__}: {e}", exc_info=True)
        return {"id": message.id, "error": error_to_dict(e)}

    return result_frame(message.id, result)


@router.websocket(settings.SOCKET_PATH)
async def remoting_socket(websocket: WebSocket) -> None:
    """Persistent channel accepting remote calls as JSON frames."""
    await websocket.accept()
    remotes: RemoteObjects = websocket.app.state.remotes
    logger.info("Socket client connected")

    try:
        while True:
            text = await websocket.receive_text()
            reply = await handle_frame(remotes, text)
            await websocket.send_json(reply)
    except WebSocketDisconnect:
        logger.info("Socket client disconnected")
