"""
Frames exchanged over the event-socket transport.

Request frame:
    {"id": 1, "method": "Locations.nearby", "args": {"here": "2.5,3"}}
    {"id": 2, "method": "Locations.prototype.describe",
     "ctorArgs": {"id": "home"}, "args": {}}

Response frame (one per request, same id):
    {"id": 1, "result": ...}
    {"id": 2, "error": {"message": "...", "statusCode": 400}}
"""

from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class SocketRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[Union[int, str]] = Field(None, description="Client-chosen correlation id")
    method: str = Field(
        ...,
        min_length=1,
        description="'Class.method' or 'Class.prototype.method'",
        examples=["Locations.nearby", "Locations.prototype.describe"]
    )
    args: Dict[str, Any] = Field(default_factory=dict, description="Method arguments by name")
    ctor_args: Dict[str, Any] = Field(
        default_factory=dict,
        alias="ctorArgs",
        description="Shared constructor arguments for prototype methods"
    )
