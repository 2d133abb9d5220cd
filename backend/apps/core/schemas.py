"""
Core schemas - shared Pydantic models for API responses.
"""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response format."""

    detail: str = Field(..., description="Human-readable error message")
    code: str = Field("error", description="Machine-readable error code")
    retryable: bool = Field(
        False,
        description="True when the same request may succeed later (timeouts, DNS propagation)",
    )
    suggestions: list[str] = Field(
        default_factory=list,
        description="Alternative values the caller can try (slug conflicts)",
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "detail": "Organization slug 'acme-inc' is already taken",
                "code": "slug_taken",
                "retryable": False,
                "suggestions": ["acme-inc-2", "acme-inc-3", "acme-inc-4"],
            }
        }
    }


class MessageResponse(BaseModel):
    """Simple acknowledgement response."""

    message: str
