"""
Directory state hook: owns filters + pagination for a company listing and keeps the
current page and stats fresh after every write.

Filtering is server-side only: the fetched page is exactly what GET /companies returned
for the current filters; it is never narrowed again locally.
"""
import asyncio
from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Dict, List, Optional

from app.client.company_api import CompanyApiClient, CompanyApiError
from app.logging_config import get_logger

logger = get_logger(__name__)

FETCH_ERROR = "Failed to fetch companies. Please try again."
CREATE_ERROR = "Failed to create company. Please try again."
UPDATE_ERROR = "Failed to update company. Please try again."
DELETE_ERROR = "Failed to delete company. Please try again."

# dataclass field -> query param
_PARAM_NAMES = {"founded_year": "foundedYear", "sort_by": "sortBy", "sort_order": "sortOrder"}


@dataclass(frozen=True)
class DirectoryFilters:
    search: Optional[str] = None
    industry: Optional[str] = None
    size: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    founded_year: Optional[int] = None
    sort_by: str = "createdAt"
    sort_order: str = "desc"

    def as_params(self) -> Dict[str, Any]:
        return {_PARAM_NAMES.get(k, k): v for k, v in asdict(self).items()}


class CompanyDirectory:
    """
    companies / pagination / stats mirror the last successful responses.
    error holds a single banner message for the last failed action (None when clear).
    """

    def __init__(self, api: CompanyApiClient, items_per_page: int = 10):
        self.api = api
        self.items_per_page = items_per_page
        self.filters = DirectoryFilters()
        self.companies: List[Dict[str, Any]] = []
        self.pagination: Dict[str, Any] = {
            "currentPage": 1,
            "totalPages": 1,
            "totalItems": 0,
            "itemsPerPage": items_per_page,
            "hasNextPage": False,
            "hasPrevPage": False,
        }
        self.stats: Optional[Dict[str, Any]] = None
        self.error: Optional[str] = None
        self.loading = False

    @property
    def current_page(self) -> int:
        return self.pagination.get("currentPage", 1)

    async def load_page(self, page: int = 1) -> None:
        self.loading = True
        try:
            resp = await self.api.list_companies(
                page=page,
                limit=self.items_per_page,
                **self.filters.as_params(),
            )
        except CompanyApiError as e:
            logger.warning("directory.fetch_failed", page=page, error=e.message)
            self.error = FETCH_ERROR
        else:
            self.companies = resp.get("data", [])
            self.pagination = resp.get("pagination", self.pagination)
            self.error = None
        finally:
            self.loading = False

    async def load_stats(self) -> None:
        # Stats failures are logged only; the listing stays usable.
        try:
            resp = await self.api.get_stats()
        except CompanyApiError as e:
            logger.warning("directory.stats_failed", error=e.message)
            return
        self.stats = resp.get("data")

    async def refresh(self) -> None:
        await asyncio.gather(self.load_page(self.current_page), self.load_stats())

    async def go_to_page(self, page: int) -> None:
        await self.load_page(page)

    async def set_filters(self, **changes: Any) -> None:
        """Merge filter changes (unknown names raise TypeError) and reload from page 1."""
        known = {f.name for f in fields(DirectoryFilters)}
        unknown = set(changes) - known
        if unknown:
            raise TypeError(f"Unknown filters: {', '.join(sorted(unknown))}")
        self.filters = replace(self.filters, **changes)
        await self.load_page(1)

    async def clear_filters(self) -> None:
        self.filters = DirectoryFilters()
        await self.load_page(1)

    async def create(self, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        try:
            resp = await self.api.create_company(data)
        except CompanyApiError as e:
            self.error = e.message if e.status_code == 400 else CREATE_ERROR
            return None
        await self.refresh()
        return resp.get("data")

    async def update(self, company_id: str, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        try:
            resp = await self.api.update_company(company_id, data)
        except CompanyApiError as e:
            self.error = e.message if e.status_code == 400 else UPDATE_ERROR
            return None
        await self.refresh()
        return resp.get("data")

    async def delete(self, company_id: str) -> bool:
        try:
            await self.api.delete_company(company_id)
        except CompanyApiError:
            self.error = DELETE_ERROR
            return False
        await self.refresh()
        return True

    def dismiss_error(self) -> None:
        self.error = None
