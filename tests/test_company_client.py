"""
CompanyApiClient + CompanyDirectory against the in-process app.
The httpx client is bound to ASGITransport with base_url ".../api", like a real deployment.
"""
import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.client import CompanyApiClient, CompanyApiError
from app.client.company_api import NETWORK_ERROR_MESSAGE
from app.client.directory import CREATE_ERROR, FETCH_ERROR, CompanyDirectory, DirectoryFilters
from app.db import get_session_factory
from app.main import app
from conftest import company_payload


@pytest_asyncio.fixture
async def api(session_factory):
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test/api") as http:
        yield CompanyApiClient(client=http)
    app.dependency_overrides.clear()


def _unreachable_api() -> CompanyApiClient:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    http = AsyncClient(transport=httpx.MockTransport(refuse), base_url="http://down/api")
    return CompanyApiClient(client=http)


# --- CompanyApiClient ---


@pytest.mark.asyncio
async def test_client_crud_round(api) -> None:
    created = (await api.create_company(company_payload()))["data"]
    assert created["name"] == "Acme"

    fetched = await api.get_company(created["id"])
    assert fetched["data"]["id"] == created["id"]

    updated = await api.update_company(created["id"], {"employees": 9})
    assert updated["data"]["employees"] == 9

    deleted = await api.delete_company(created["id"])
    assert deleted["message"] == "Company deleted successfully"

    with pytest.raises(CompanyApiError) as exc:
        await api.get_company(created["id"])
    assert exc.value.status_code == 404
    assert exc.value.message == "Company not found"


@pytest.mark.asyncio
async def test_client_validation_error_carries_messages(api) -> None:
    with pytest.raises(CompanyApiError) as exc:
        await api.create_company(company_payload(industry="Nope"))
    assert exc.value.status_code == 400
    assert exc.value.message == "Validation error"
    assert exc.value.errors == ["Please select a valid industry"]


@pytest.mark.asyncio
async def test_client_list_drops_empty_params(api) -> None:
    await api.create_company(company_payload(name="alpha", industry="Retail"))
    await api.create_company(company_payload(name="beta"))
    resp = await api.list_companies(industry="", city=None, search="alp")
    assert [c["name"] for c in resp["data"]] == ["Alpha"]

    by_industry = await api.get_companies_by_industry("Retail")
    assert by_industry["pagination"]["totalItems"] == 1
    by_location = await api.get_companies_by_location("pune", "maha")
    assert by_location["pagination"]["totalItems"] == 2
    by_size = await api.get_companies_by_size("Small (11-50)")
    assert by_size["data"] == []
    found = await api.search_companies("bet")
    assert [c["name"] for c in found["data"]] == ["Beta"]


@pytest.mark.asyncio
async def test_client_bulk_and_stats(api) -> None:
    resp = await api.bulk_create([company_payload(name="one"), company_payload(size="bad")])
    assert len(resp["data"]) == 1
    stats = (await api.get_stats())["data"]
    assert stats["totalCompanies"] == 1
    assert (await api.health())["success"] is True


@pytest.mark.asyncio
async def test_client_network_error() -> None:
    api = _unreachable_api()
    with pytest.raises(CompanyApiError) as exc:
        await api.list_companies()
    assert exc.value.message == NETWORK_ERROR_MESSAGE
    assert exc.value.status_code is None

    with pytest.raises(CompanyApiError) as exc:
        await api.health()
    assert exc.value.message == "Server is not responding"


@pytest.mark.asyncio
async def test_client_non_json_error_uses_default_message() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(502, text="Bad Gateway"))
    api = CompanyApiClient(client=AsyncClient(transport=transport, base_url="http://proxy/api"))
    with pytest.raises(CompanyApiError) as exc:
        await api.get_stats()
    assert exc.value.status_code == 502
    assert exc.value.message == "An error occurred"


# --- CompanyDirectory ---


def test_filters_as_params_use_api_names() -> None:
    params = DirectoryFilters(search="tech", founded_year=2010, sort_by="name").as_params()
    assert params["search"] == "tech"
    assert params["foundedYear"] == 2010
    assert params["sortBy"] == "name"
    assert params["sortOrder"] == "desc"
    assert "founded_year" not in params


@pytest.mark.asyncio
async def test_directory_create_refreshes_page_and_stats(api) -> None:
    directory = CompanyDirectory(api, items_per_page=2)
    await directory.refresh()
    assert directory.companies == []
    assert directory.stats["totalCompanies"] == 0

    created = await directory.create(company_payload())
    assert created["name"] == "Acme"
    assert [c["id"] for c in directory.companies] == [created["id"]]
    assert directory.stats["totalCompanies"] == 1
    assert directory.error is None
    assert directory.loading is False


@pytest.mark.asyncio
async def test_directory_filters_reset_to_first_page(api) -> None:
    for i in range(3):
        await api.create_company(company_payload(name=f"tech {i}"))
    await api.create_company(company_payload(name="other", industry="Retail"))

    directory = CompanyDirectory(api, items_per_page=2)
    await directory.go_to_page(2)
    assert directory.current_page == 2

    await directory.set_filters(search="tech", sort_by="name", sort_order="asc")
    assert directory.current_page == 1
    assert directory.pagination["totalItems"] == 3
    assert [c["name"] for c in directory.companies] == ["Tech 0", "Tech 1"]

    await directory.go_to_page(2)
    assert [c["name"] for c in directory.companies] == ["Tech 2"]

    await directory.clear_filters()
    assert directory.filters == DirectoryFilters()
    assert directory.pagination["totalItems"] == 4

    with pytest.raises(TypeError):
        await directory.set_filters(colour="red")


@pytest.mark.asyncio
async def test_directory_update_and_delete(api) -> None:
    directory = CompanyDirectory(api)
    created = await directory.create(company_payload())

    updated = await directory.update(created["id"], {"employees": 12})
    assert updated["employees"] == 12
    assert directory.companies[0]["employees"] == 12

    assert await directory.delete(created["id"]) is True
    assert directory.companies == []
    assert directory.stats["totalCompanies"] == 0

    assert await directory.delete(created["id"]) is False
    assert directory.error is not None
    directory.dismiss_error()
    assert directory.error is None


@pytest.mark.asyncio
async def test_directory_validation_error_shows_server_message(api) -> None:
    directory = CompanyDirectory(api)
    assert await directory.create(company_payload(name="")) is None
    assert directory.error == "Validation error"
    assert await directory.update("not-an-id", {"employees": 1}) is None
    assert directory.error == "Invalid company ID"


@pytest.mark.asyncio
async def test_directory_network_failures() -> None:
    directory = CompanyDirectory(_unreachable_api())
    await directory.refresh()
    assert directory.error == FETCH_ERROR
    assert directory.stats is None
    assert directory.loading is False

    assert await directory.create(company_payload()) is None
    assert directory.error == CREATE_ERROR
