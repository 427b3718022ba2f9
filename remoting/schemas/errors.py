"""
Error payload returned by both transports.

Example:
    {"error": {"message": "Value is not a number.", "statusCode": 400}}
"""

from pydantic import BaseModel, ConfigDict, Field


class ErrorDetail(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(..., description="Human-readable error message")
    status_code: int = Field(..., alias="statusCode", description="HTTP-class status code", examples=[400, 404, 500])


class ErrorResponse(BaseModel):
    """Response body for any failed remote call."""
    error: ErrorDetail
