"""API companies: list/filter/paginate, stats, get, create, update, soft delete, bulk create."""
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.config import get_settings
from app.db import get_db, get_session_factory
from app.exceptions import CompanyStoreError, CompanyValidationError, FieldError
from app.schemas.common import ErrorResponse, MessageResponse
from app.schemas.company import (
    COMPANY_EXAMPLE,
    CompanyBulkResponse,
    CompanyCreate,
    CompanyListResponse,
    CompanyMutationResponse,
    CompanyResponse,
    CompanyStatsResponse,
    CompanyUpdate,
)
from app.services.company_query import CompanyListParams
from app.services.company_service import (
    bulk_create_companies,
    company_to_out,
    create_company,
    get_company,
    get_company_stats,
    list_companies,
    soft_delete_company,
    update_company,
)

router = APIRouter(
    prefix="/api/companies",
    tags=["companies"],
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)


@router.get("", response_model=CompanyListResponse)
@router.get("/", response_model=CompanyListResponse, include_in_schema=False)
async def get_companies(
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1, description="Page size (default DEFAULT_PAGE_SIZE)"),
    industry: Optional[str] = Query(None),
    size: Optional[str] = Query(None),
    city: Optional[str] = Query(None, description="Substring, case-insensitive"),
    state: Optional[str] = Query(None, description="Substring, case-insensitive"),
    country: Optional[str] = Query(None, description="Substring, case-insensitive"),
    founded_year: Optional[int] = Query(None, alias="foundedYear"),
    search: Optional[str] = Query(None, description="Matches name, description or any tag"),
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder", description="asc | desc"),
    db: AsyncSession = Depends(get_db),
) -> CompanyListResponse:
    """Active companies, filtered and paginated."""
    params = CompanyListParams(
        page=page,
        limit=limit or get_settings().default_page_size,
        industry=industry,
        size=size,
        city=city,
        state=state,
        country=country,
        founded_year=founded_year,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    try:
        return await list_companies(db, params)
    except SQLAlchemyError as e:
        raise CompanyStoreError("Error fetching companies") from e


@router.get("/stats", response_model=CompanyStatsResponse)
async def get_stats(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> CompanyStatsResponse:
    """Total active companies + distributions by industry, size, country."""
    try:
        stats = await get_company_stats(session_factory)
    except SQLAlchemyError as e:
        raise CompanyStoreError("Error fetching statistics") from e
    return CompanyStatsResponse(data=stats)


@router.post("/bulk", response_model=CompanyBulkResponse, status_code=status.HTTP_201_CREATED)
async def post_companies_bulk(
    payload: Any = Body(None, examples=[{"companies": [COMPANY_EXAMPLE]}]),
    db: AsyncSession = Depends(get_db),
) -> CompanyBulkResponse:
    """Best-effort bulk create from {"companies": [...]}; invalid items are skipped."""
    companies = payload.get("companies") if isinstance(payload, dict) else None
    if not isinstance(companies, list) or not companies:
        raise CompanyValidationError(
            [FieldError("companies", "Please provide an array of companies")],
            message="Please provide an array of companies",
        )
    try:
        created = await bulk_create_companies(db, companies)
    except SQLAlchemyError as e:
        raise CompanyStoreError("Error creating companies") from e
    return CompanyBulkResponse(
        message=f"{len(created)} companies created successfully",
        data=[company_to_out(c) for c in created],
    )


@router.get("/{company_id}", response_model=CompanyResponse)
async def get_company_by_id(
    company_id: str,
    db: AsyncSession = Depends(get_db),
) -> CompanyResponse:
    """Single active company."""
    try:
        company = await get_company(db, company_id)
    except SQLAlchemyError as e:
        raise CompanyStoreError("Error fetching company") from e
    return CompanyResponse(data=company_to_out(company))


@router.post("", response_model=CompanyMutationResponse, status_code=status.HTTP_201_CREATED)
@router.post(
    "/",
    response_model=CompanyMutationResponse,
    status_code=status.HTTP_201_CREATED,
    include_in_schema=False,
)
async def post_company(
    payload: CompanyCreate = Body(..., examples=[COMPANY_EXAMPLE]),
    db: AsyncSession = Depends(get_db),
) -> CompanyMutationResponse:
    """Create a company."""
    try:
        company = await create_company(db, payload)
    except SQLAlchemyError as e:
        raise CompanyStoreError("Error creating company") from e
    return CompanyMutationResponse(
        message="Company created successfully",
        data=company_to_out(company),
    )


@router.put("/{company_id}", response_model=CompanyMutationResponse)
async def put_company(
    company_id: str,
    payload: CompanyUpdate = Body(..., examples=[{"employees": 50}]),
    db: AsyncSession = Depends(get_db),
) -> CompanyMutationResponse:
    """Partial update: fields absent from the body are left untouched."""
    try:
        company = await update_company(db, company_id, payload)
    except SQLAlchemyError as e:
        raise CompanyStoreError("Error updating company") from e
    return CompanyMutationResponse(
        message="Company updated successfully",
        data=company_to_out(company),
    )


@router.delete("/{company_id}", response_model=MessageResponse)
async def delete_company(
    company_id: str,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    """Soft delete (isActive=false)."""
    try:
        await soft_delete_company(db, company_id)
    except SQLAlchemyError as e:
        raise CompanyStoreError("Error deleting company") from e
    return MessageResponse(message="Company deleted successfully")
