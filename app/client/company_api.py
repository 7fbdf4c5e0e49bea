"""
HTTP client for /api/companies (httpx.AsyncClient).
Every call returns the decoded JSON envelope; non-2xx raises CompanyApiError carrying the
server "message", transport failures raise CompanyApiError with a network message.
"""
from typing import Any, Dict, List, Optional

import httpx

from app.config import get_settings
from app.logging_config import get_logger

logger = get_logger(__name__)

NETWORK_ERROR_MESSAGE = "Network error. Please check your connection."
DEFAULT_ERROR_MESSAGE = "An error occurred"


class CompanyApiError(Exception):
    """API call failed: server error envelope or transport failure."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        errors: Optional[List[str]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.errors = errors or []


def _drop_empty(params: Dict[str, Any]) -> Dict[str, Any]:
    """Skip None / "" so unset filters are not sent as empty query params."""
    return {k: v for k, v in params.items() if v is not None and v != ""}


class CompanyApiClient:
    """
    Thin async wrapper over the REST API.
    base_url points at the /api root (default API_BASE_URL); pass `client` to reuse an
    existing httpx.AsyncClient (tests use one bound to an ASGITransport).
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        settings = get_settings()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url or settings.api_base_url,
            timeout=timeout or settings.api_timeout_seconds,
            headers={"Content-Type": "application/json"},
        )

    async def __aenter__(self) -> "CompanyApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        logger.debug("company_api.request", method=method, path=path)
        try:
            resp = await self._client.request(method, path, **kwargs)
        except httpx.RequestError as e:
            logger.warning("company_api.network_error", method=method, path=path, error=str(e))
            raise CompanyApiError(NETWORK_ERROR_MESSAGE) from e
        try:
            body = resp.json()
        except ValueError:
            body = {}
        if resp.status_code >= 400:
            message = (body.get("message") if isinstance(body, dict) else None) or DEFAULT_ERROR_MESSAGE
            logger.warning("company_api.error", method=method, path=path, status=resp.status_code, message=message)
            raise CompanyApiError(
                message,
                status_code=resp.status_code,
                errors=body.get("errors") if isinstance(body, dict) else None,
            )
        return body

    async def list_companies(self, **params: Any) -> Dict[str, Any]:
        """GET /companies; params use the API names (page, limit, foundedYear, sortBy, ...)."""
        return await self._request("GET", "/companies", params=_drop_empty(params))

    async def get_company(self, company_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/companies/{company_id}")

    async def create_company(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/companies", json=data)

    async def update_company(self, company_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PUT", f"/companies/{company_id}", json=data)

    async def delete_company(self, company_id: str) -> Dict[str, Any]:
        return await self._request("DELETE", f"/companies/{company_id}")

    async def get_stats(self) -> Dict[str, Any]:
        return await self._request("GET", "/companies/stats")

    async def bulk_create(self, companies: List[Dict[str, Any]]) -> Dict[str, Any]:
        return await self._request("POST", "/companies/bulk", json={"companies": companies})

    async def search_companies(self, term: str, **filters: Any) -> Dict[str, Any]:
        return await self.list_companies(search=term, **filters)

    async def get_companies_by_industry(self, industry: str) -> Dict[str, Any]:
        return await self.list_companies(industry=industry)

    async def get_companies_by_location(self, city: str, state: str) -> Dict[str, Any]:
        return await self.list_companies(city=city, state=state)

    async def get_companies_by_size(self, size: str) -> Dict[str, Any]:
        return await self.list_companies(size=size)

    async def health(self) -> Dict[str, Any]:
        try:
            return await self._request("GET", "/health")
        except CompanyApiError as e:
            raise CompanyApiError("Server is not responding", status_code=e.status_code) from e
