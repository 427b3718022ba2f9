"""
Health check endpoint schemas.

The health endpoint is PUBLIC and returns a simple status indicator plus
the number of remote classes currently exposed.
"""

from pydantic import BaseModel, ConfigDict, Field


class HealthResponse(BaseModel):
    """
    Response model for GET /health endpoint.

    Used by load balancers, monitoring systems, and deployment checks.
    """
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "status": "ok",
                "service": "remoting-backend",
                "classes": 2
            }
        }
    )

    status: str = Field(
        default="ok",
        description="Health status of the API (always 'ok' if responding)",
        examples=["ok"]
    )
    service: str = Field(default="remoting-backend", description="Service identifier")
    classes: int = Field(default=0, ge=0, description="Number of exposed remote classes")
