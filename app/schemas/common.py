"""Common schemas: response envelopes shared by every endpoint."""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

# API speaks camelCase (foundedYear, isActive, currentPage); Python code uses snake_case.
CAMEL_CONFIG = {"alias_generator": to_camel, "populate_by_name": True}


class ErrorResponse(BaseModel):
    """Standard error envelope."""

    success: bool = False
    message: str = Field(..., description="Error message")
    errors: Optional[List[str]] = Field(None, description="Per-field validation messages")
    error: Optional[str] = Field(None, description="Underlying error detail (hidden in production)")


class MessageResponse(BaseModel):
    """Success envelope without data."""

    success: bool = True
    message: str = Field(..., description="Message text")


class HealthResponse(BaseModel):
    """Response for GET /api/health."""

    success: bool = True
    message: str
    timestamp: datetime
