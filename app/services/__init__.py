"""Business logic services."""
from app.services.company_service import (
    bulk_create_companies,
    create_company,
    get_company,
    get_company_stats,
    list_companies,
    soft_delete_company,
    update_company,
)

__all__ = [
    "bulk_create_companies",
    "create_company",
    "get_company",
    "get_company_stats",
    "list_companies",
    "soft_delete_company",
    "update_company",
]
