"""
REST transport for remote methods.

Endpoints (mounted under settings.REST_API_ROOT):
- {GET,POST,PUT,PATCH,DELETE} /{class_name}/{method_name}
    Static method call
- {GET,POST,PUT,PATCH,DELETE} /{class_name}/{instance_id}/{method_name}
    Prototype method call; `instance_id` feeds the shared constructor

Argument lookup per declared argument (http_source="auto"):
1. Path parameters
2. Request body: JSON object keys (typed values) or urlencoded/multipart
   form fields (sloppy values)
3. Query string, with bracketed keys expanded (sloppy values)

With http_source="body" the whole request body is the argument value.

Responses:
- 200 with the JSON-encoded mapped result
- 204 when the method produced no result
- 4xx/5xx with {"error": {"message", "statusCode"}} (see main.py handlers)
"""

import base64
import json
from typing import Any, Dict, Iterable, Set, Tuple

from fastapi import APIRouter, Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from remoting.coercion.base import UNDEFINED
from remoting.errors import CoercionError, MethodNotFoundError, RemotingError, error_to_dict
from remoting.schemas.descriptors import ArgumentDescriptor
from remoting.schemas.errors import ErrorResponse
from remoting.services.remote_objects import RemoteObjects
from remoting.utils.logging import get_logger
from remoting.utils.query import parse_nested_query

logger = get_logger(__name__)

router = APIRouter(tags=["remoting"])

HTTP_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid argument"},
    404: {"model": ErrorResponse, "description": "Unknown class or method"},
    500: {"model": ErrorResponse, "description": "Remote method failed"},
}

_FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def drop_undefined(value: Any) -> Any:
    """
    Remove absent values before encoding.

    Absent dict entries are left out and absent list items become null,
    so a missing result field is never confused with a real value.
    """
    if isinstance(value, dict):
        return {key: drop_undefined(item) for key, item in value.items() if item is not UNDEFINED}
    if isinstance(value, (list, tuple)):
        return [None if item is UNDEFINED else drop_undefined(item) for item in value]
    return value


def encode_result(result: Any) -> Any:
    """Make a mapped result JSON-serializable (bytes become base64)."""
    return jsonable_encoder(
        drop_undefined(result),
        custom_encoder={bytes: lambda value: base64.b64encode(value).decode("ascii")}
    )


async def read_body(request: Request) -> Tuple[Any, bool]:
    """
    Read the request body.

    Returns:
        (body, typed): `body` is UNDEFINED when there is none; `typed` is True
        for JSON bodies (native-shaped values) and False for forms

    Raises:
        CoercionError: If a JSON body cannot be parsed
    """
    content_type = request.headers.get("content-type", "").split(";")[0].strip().lower()

    if content_type.startswith(_FORM_CONTENT_TYPES):
        form = await request.form()
        return parse_nested_query(form.multi_items()), False

    raw = await request.body()
    if not raw.strip():
        return UNDEFINED, False

    if content_type == "application/json" or content_type.endswith("+json"):
        try:
            return json.loads(raw), True
        except ValueError as e:
            logger.debug(f"Cannot parse JSON request body: {e}")
            raise CoercionError("Cannot parse JSON-encoded request body.") from e

    return UNDEFINED, False


def collect_arguments(
    accepts: Iterable[ArgumentDescriptor],
    path_params: Dict[str, Any],
    query: Dict[str, Any],
    body: Any,
    body_typed: bool,
) -> Tuple[Dict[str, Any], Set[str]]:
    """
    Pick the raw value of each declared argument from the request parts.

    Returns:
        (raw_args, typed_names): raw values by argument name, and the names
        whose value came from a JSON body
    """
    raw_args: Dict[str, Any] = {}
    typed_names: Set[str] = set()

    for descriptor in accepts:
        name = descriptor.name
        source = descriptor.http_source

        if source == "body":
            if body is not UNDEFINED:
                raw_args[name] = body
                if body_typed:
                    typed_names.add(name)
            continue

        if source in ("auto", "path") and name in path_params:
            raw_args[name] = path_params[name]
            continue
        if source == "path":
            continue

        if source == "auto" and isinstance(body, dict) and name in body:
            raw_args[name] = body[name]
            if body_typed:
                typed_names.add(name)
            continue

        if name in query:
            raw_args[name] = query[name]

    return raw_args, typed_names


def build_response(result: Any) -> Response:
    if result is UNDEFINED:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return JSONResponse(status_code=status.HTTP_200_OK, content=encode_result(result))


def build_error_response(error: Exception) -> JSONResponse:
    detail = error_to_dict(error)
    if detail["statusCode"] >= 500:
        logger.error(f"Remote method raised {type(error).__name__}: {error}", exc_info=error)
    else:
        logger.info(f"Remote method rejected the call ({detail['statusCode']}): {detail['message']}")
    return JSONResponse(status_code=detail["statusCode"], content={"error": detail})


async def _invoke(
    request: Request,
    class_name: str,
    method_name: str,
    is_static: bool,
    instance_id: Any = UNDEFINED,
) -> Response:
    remotes: RemoteObjects = request.app.state.remotes

    shared_class = remotes.get_class(class_name)
    method = remotes.find_method(class_name, method_name, is_static)
    if not method.allows_verb(request.method):
        raise MethodNotFoundError(
            f"Shared class \"{class_name}\" has no method handling {request.method} {request.url.path}"
        )

    query = parse_nested_query(request.query_params.multi_items())
    body, body_typed = await read_body(request)

    path_params: Dict[str, Any] = {}
    ctor_args: Dict[str, Any] = {}
    typed_ctor_args: Set[str] = set()
    if not is_static:
        path_params["id"] = instance_id
        ctor_args, typed_ctor_args = collect_arguments(
            shared_class.shared_ctor.accepts, path_params, query, body, body_typed
        )

    args, typed_args = collect_arguments(method.accepts, path_params, query, body, body_typed)

    logger.info(f"REST {request.method} {class_name}.{method.string_name}")

    try:
        result = await remotes.invoke(
            class_name,
            method_name,
            args=args,
            ctor_args=ctor_args,
            is_static=is_static,
            typed_args=typed_args,
            typed_ctor_args=typed_ctor_args,
            request=request,
        )
    except RemotingError:
        raise
    except Exception as e:
        # errors reported by the target method itself
        return build_error_response(e)
    return build_response(result)


@router.api_route(
    "/{class_name}/{method_name}",
    methods=HTTP_METHODS,
    responses=ERROR_RESPONSES,
    summary="Invoke a static remote method",
)
async def invoke_static_method(class_name: str, method_name: str, request: Request) -> Response:
    """Invoke `class_name.method_name` with arguments from the request."""
    return await _invoke(request, class_name, method_name, is_static=True)


@router.api_route(
    "/{class_name}/{instance_id}/{method_name}",
    methods=HTTP_METHODS,
    responses=ERROR_RESPONSES,
    summary="Invoke a prototype remote method",
)
async def invoke_prototype_method(
    class_name: str,
    instance_id: str,
    method_name: str,
    request: Request,
) -> Response:
    """Build the instance through the shared constructor, then invoke the method."""
    return await _invoke(request, class_name, method_name, is_static=False, instance_id=instance_id)
