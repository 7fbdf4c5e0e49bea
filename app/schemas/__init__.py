"""Pydantic request/response schemas."""
from app.schemas.common import ErrorResponse, HealthResponse, MessageResponse
from app.schemas.company import (
    CompanyBulkResponse,
    CompanyCreate,
    CompanyListResponse,
    CompanyMutationResponse,
    CompanyOut,
    CompanyResponse,
    CompanyStatsOut,
    CompanyStatsResponse,
    CompanyUpdate,
    PaginationOut,
    StatsBucket,
)

__all__ = [
    "ErrorResponse",
    "HealthResponse",
    "MessageResponse",
    "CompanyBulkResponse",
    "CompanyCreate",
    "CompanyListResponse",
    "CompanyMutationResponse",
    "CompanyOut",
    "CompanyResponse",
    "CompanyStatsOut",
    "CompanyStatsResponse",
    "CompanyUpdate",
    "PaginationOut",
    "StatsBucket",
]
