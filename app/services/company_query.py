"""
List-request parameters -> store-agnostic query (filters, sort, skip/limit).

Pure: no I/O, no clock, no settings. The same CompanyListParams always yields an
equal CompanyQuery, so it can be compared/cached/tested directly.
Field paths use the API names ("location.city", "foundedYear"); company_service
compiles them to columns.
"""
from dataclasses import dataclass, field
from typing import Any, Optional, Tuple, Union

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
DEFAULT_SORT_FIELD = "createdAt"

SORTABLE_FIELDS = frozenset({
    "name",
    "industry",
    "size",
    "location.city",
    "location.state",
    "location.country",
    "foundedYear",
    "employees",
    "revenue.amount",
    "createdAt",
    "updatedAt",
})

# search matches any of these (tags: any entry)
SEARCH_FIELDS = ("name", "description", "tags")


@dataclass(frozen=True)
class Equals:
    """field == value"""

    field: str
    value: Any


@dataclass(frozen=True)
class ContainsInsensitive:
    """Case-insensitive substring match; on a list field, any entry matches."""

    field: str
    value: str


@dataclass(frozen=True)
class AnyOf:
    """OR-group of predicates."""

    predicates: Tuple["Predicate", ...]


Predicate = Union[Equals, ContainsInsensitive, AnyOf]


@dataclass(frozen=True)
class SortSpec:
    field: str
    ascending: bool


@dataclass(frozen=True)
class CompanyListParams:
    """Query string of GET /api/companies."""

    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT
    industry: Optional[str] = None
    size: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    founded_year: Optional[int] = None
    search: Optional[str] = None
    sort_by: str = DEFAULT_SORT_FIELD
    sort_order: str = "desc"


@dataclass(frozen=True)
class CompanyQuery:
    """AND of filters, one sort key, and the page window."""

    filters: Tuple[Predicate, ...]
    sort: SortSpec
    skip: int
    limit: int
    page: int = field(default=DEFAULT_PAGE)


def _present(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def build_company_query(params: CompanyListParams) -> CompanyQuery:
    """Translate list params into filters/sort/pagination. Always active-only."""
    page = max(params.page, 1)
    limit = max(params.limit, 1)

    filters: list[Predicate] = [Equals("isActive", True)]

    industry = _present(params.industry)
    if industry:
        filters.append(Equals("industry", industry))
    size = _present(params.size)
    if size:
        filters.append(Equals("size", size))
    for path, raw in (
        ("location.city", params.city),
        ("location.state", params.state),
        ("location.country", params.country),
    ):
        value = _present(raw)
        if value:
            filters.append(ContainsInsensitive(path, value))
    if params.founded_year is not None:
        filters.append(Equals("foundedYear", params.founded_year))

    search = _present(params.search)
    if search:
        filters.append(AnyOf(tuple(ContainsInsensitive(f, search) for f in SEARCH_FIELDS)))

    sort_field = params.sort_by if params.sort_by in SORTABLE_FIELDS else DEFAULT_SORT_FIELD
    sort = SortSpec(field=sort_field, ascending=params.sort_order == "asc")

    return CompanyQuery(
        filters=tuple(filters),
        sort=sort,
        skip=(page - 1) * limit,
        limit=limit,
        page=page,
    )
