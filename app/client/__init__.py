"""Async client for the Company Directory API + directory state hook."""
from app.client.company_api import CompanyApiClient, CompanyApiError
from app.client.directory import CompanyDirectory, DirectoryFilters

__all__ = [
    "CompanyApiClient",
    "CompanyApiError",
    "CompanyDirectory",
    "DirectoryFilters",
]
