"""
Company CRUD service: list/stats/get/create/update/soft-delete/bulk-create.
Writes commit here (one commit per logical operation); reads never see is_active=False rows.
"""
import asyncio
import math
import uuid
from typing import Any, Dict, List, Sequence

from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.exceptions import CompanyNotFoundError, CompanyValidationError, InvalidCompanyIdError
from app.logging_config import get_logger
from app.models import Company
from app.models.company import utcnow
from app.schemas.company import (
    CompanyCreate,
    CompanyListResponse,
    CompanyOut,
    CompanyStatsOut,
    CompanyUpdate,
    LocationOut,
    PaginationOut,
    RevenueOut,
    StatsBucket,
)
from app.services.company_query import (
    AnyOf,
    CompanyListParams,
    ContainsInsensitive,
    Equals,
    Predicate,
    build_company_query,
)
from app.services.company_validation import company_fields, parse_company

logger = get_logger(__name__)

# API field path -> column
FIELD_COLUMNS = {
    "isActive": Company.is_active,
    "name": Company.name,
    "industry": Company.industry,
    "size": Company.size,
    "location.city": Company.location_city,
    "location.state": Company.location_state,
    "location.country": Company.location_country,
    "foundedYear": Company.founded_year,
    "description": Company.description,
    "employees": Company.employees,
    "revenue.amount": Company.revenue_amount,
    "tags": Company.tags,
    "createdAt": Company.created_at,
    "updatedAt": Company.updated_at,
}
# JSON list columns: substring match runs per element.
LIST_FIELDS = frozenset({"tags"})


def _like_pattern(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _json_elements(column, dialect_name: str):
    """Table-valued expansion of a JSON array column (one text row per element)."""
    if dialect_name == "postgresql":
        fn = func.json_array_elements_text(column)
    else:
        fn = func.json_each(column)
    return fn.table_valued("value").alias("element")


def compile_predicate(predicate: Predicate, dialect_name: str = "postgresql"):
    """Predicate -> SQLAlchemy boolean expression for the given dialect."""
    if isinstance(predicate, Equals):
        return FIELD_COLUMNS[predicate.field] == predicate.value
    if isinstance(predicate, ContainsInsensitive):
        pattern = _like_pattern(predicate.value)
        column = FIELD_COLUMNS[predicate.field]
        if predicate.field in LIST_FIELDS:
            element = _json_elements(column, dialect_name)
            return (
                select(1)
                .select_from(element)
                .where(element.c.value.ilike(pattern, escape="\\"))
                .correlate(Company.__table__)
                .exists()
            )
        return column.ilike(pattern, escape="\\")
    if isinstance(predicate, AnyOf):
        return or_(*(compile_predicate(p, dialect_name) for p in predicate.predicates))
    raise TypeError(f"Unsupported predicate: {predicate!r}")


def company_to_out(company: Company) -> CompanyOut:
    """Map ORM Company -> CompanyOut (nested location/revenue + derived fields)."""
    return CompanyOut(
        id=company.id,
        name=company.name,
        industry=company.industry,
        size=company.size,
        location=LocationOut(
            city=company.location_city,
            state=company.location_state,
            country=company.location_country,
        ),
        founded_year=company.founded_year,
        website=company.website,
        email=company.email,
        phone=company.phone,
        description=company.description,
        employees=company.employees,
        revenue=RevenueOut(amount=company.revenue_amount, currency=company.revenue_currency),
        tags=list(company.tags or []),
        is_active=company.is_active,
        created_at=company.created_at,
        updated_at=company.updated_at,
        full_location=company.full_location,
        company_age=company.company_age,
    )


def _apply_fields(company: Company, data: Dict[str, Any]) -> None:
    """Copy cleaned API-shaped fields onto the ORM row (only keys present in data)."""
    simple = {
        "name": "name",
        "industry": "industry",
        "size": "size",
        "foundedYear": "founded_year",
        "website": "website",
        "email": "email",
        "phone": "phone",
        "description": "description",
        "employees": "employees",
        "tags": "tags",
        "isActive": "is_active",
    }
    for key, attr in simple.items():
        if key in data:
            setattr(company, attr, data[key])
    if "location" in data:
        location = data["location"]
        company.location_city = location["city"]
        company.location_state = location["state"]
        company.location_country = location["country"]
    if "revenue" in data:
        revenue = data["revenue"]
        company.revenue_amount = revenue["amount"]
        company.revenue_currency = revenue["currency"]


def _new_company(data: Dict[str, Any]) -> Company:
    now = utcnow()
    company = Company(id=uuid.uuid4(), created_at=now, updated_at=now)
    _apply_fields(company, data)
    return company


def parse_company_id(company_id: str) -> uuid.UUID:
    try:
        return uuid.UUID(str(company_id))
    except ValueError as e:
        raise InvalidCompanyIdError(company_id) from e


async def list_companies(db: AsyncSession, params: CompanyListParams) -> CompanyListResponse:
    """One page of active companies + pagination metadata. Empty page is not an error."""
    query = build_company_query(params)
    dialect_name = db.get_bind().dialect.name
    where = [compile_predicate(p, dialect_name) for p in query.filters]
    sort_column = FIELD_COLUMNS[query.sort.field]
    if query.sort.ascending:
        order_by = (sort_column.asc(), Company.id.asc())
    else:
        order_by = (sort_column.desc(), Company.id.desc())

    r = await db.execute(
        select(Company)
        .where(*where)
        .order_by(*order_by)
        .offset(query.skip)
        .limit(query.limit)
    )
    companies = list(r.scalars().all())
    r = await db.execute(select(func.count(Company.id)).where(*where))
    total = r.scalar_one()

    total_pages = math.ceil(total / query.limit)
    return CompanyListResponse(
        data=[company_to_out(c) for c in companies],
        pagination=PaginationOut(
            current_page=query.page,
            total_pages=total_pages,
            total_items=total,
            items_per_page=query.limit,
            has_next_page=query.page < total_pages,
            has_prev_page=query.page > 1,
        ),
    )


async def _count_active(session_factory: async_sessionmaker[AsyncSession]) -> int:
    async with session_factory() as session:
        r = await session.execute(
            select(func.count(Company.id)).where(Company.is_active.is_(True))
        )
        return r.scalar_one()


async def _group_count(
    session_factory: async_sessionmaker[AsyncSession],
    field_path: str,
) -> List[StatsBucket]:
    """Active companies grouped by field_path, count desc (ties: value asc)."""
    column = FIELD_COLUMNS[field_path]
    count = func.count(Company.id)
    async with session_factory() as session:
        r = await session.execute(
            select(column, count)
            .where(Company.is_active.is_(True))
            .group_by(column)
            .order_by(count.desc(), column.asc())
        )
        rows = r.all()
    return [StatsBucket(id=value, count=n) for value, n in rows]


async def get_company_stats(session_factory: async_sessionmaker[AsyncSession]) -> CompanyStatsOut:
    """Total + industry/size/country distributions, queried concurrently (one session each)."""
    total, by_industry, by_size, by_country = await asyncio.gather(
        _count_active(session_factory),
        _group_count(session_factory, "industry"),
        _group_count(session_factory, "size"),
        _group_count(session_factory, "location.country"),
    )
    return CompanyStatsOut(
        total_companies=total,
        industry_distribution=by_industry,
        size_distribution=by_size,
        location_distribution=by_country,
    )


async def get_company(db: AsyncSession, company_id: str) -> Company:
    """Active company by id. InvalidCompanyIdError / CompanyNotFoundError otherwise."""
    uid = parse_company_id(company_id)
    r = await db.execute(
        select(Company).where(Company.id == uid, Company.is_active.is_(True))
    )
    company = r.scalar_one_or_none()
    if company is None:
        raise CompanyNotFoundError(company_id)
    return company


async def create_company(db: AsyncSession, payload: CompanyCreate) -> Company:
    """Insert a validated, normalized company."""
    company = _new_company(company_fields(payload))
    db.add(company)
    await db.flush()
    await db.commit()
    logger.info("company.created", company_id=str(company.id), name=company.name)
    return company


async def update_company(db: AsyncSession, company_id: str, payload: CompanyUpdate) -> Company:
    """Partial update: only fields sent in payload are overwritten."""
    company = await get_company(db, company_id)
    data = company_fields(payload)
    _apply_fields(company, data)
    company.updated_at = utcnow()
    await db.flush()
    await db.commit()
    logger.info("company.updated", company_id=str(company.id), fields=sorted(data))
    return company


async def soft_delete_company(db: AsyncSession, company_id: str) -> Company:
    """Set is_active=False. The row is kept."""
    company = await get_company(db, company_id)
    company.is_active = False
    company.updated_at = utcnow()
    await db.flush()
    await db.commit()
    logger.info("company.soft_deleted", company_id=str(company.id))
    return company


async def bulk_create_companies(db: AsyncSession, items: Sequence[Any]) -> List[Company]:
    """
    Best effort (ordered=false): every item is validated and inserted on its own savepoint.
    Invalid or failing items are logged and skipped; the rest are still created.
    """
    created: List[Company] = []
    for index, item in enumerate(items):
        try:
            data = company_fields(parse_company(item))
        except CompanyValidationError as e:
            logger.warning("company.bulk_item_invalid", index=index, errors=e.messages)
            continue
        company = _new_company(data)
        try:
            async with db.begin_nested():
                db.add(company)
                await db.flush()
        except SQLAlchemyError as e:
            logger.warning("company.bulk_item_failed", index=index, error=str(e))
            continue
        created.append(company)
    await db.commit()
    logger.info("company.bulk_created", requested=len(items), created=len(created))
    return created
