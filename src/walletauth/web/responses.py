from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class DataResponse(BaseModel, Generic[T]):
    """Success envelope wrapping a payload."""

    success: bool = Field(default=True, description="Always true for successful responses")
    data: T = Field(..., description="Response payload")


class MessageResponse(BaseModel):
    """Success envelope carrying only a human-readable message."""

    success: bool = Field(default=True, description="Always true for successful responses")
    message: str = Field(..., description="Human-readable outcome")


class ErrorResponse(BaseModel):
    """Standard error response format."""

    success: bool = Field(default=False, description="Always false for errors")
    error: str = Field(..., description="Error summary")
    message: str | None = Field(default=None, description="Human-readable error details")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"success": False, "error": "Invalid or expired session", "message": "Invalid or expired session"},
                {
                    "success": False,
                    "error": "Too many requests",
                    "message": "Rate limit exceeded. Please try again in 5 second(s).",
                    "retryAfter": 5,
                },
            ]
        }
    }


class HealthResponse(BaseModel):
    status: str = Field(..., description="Service status")
    timestamp: str = Field(..., description="Current server time (ISO-8601, UTC)")
    uptime: float = Field(..., description="Seconds since startup")
