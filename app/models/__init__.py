"""SQLAlchemy models for the company directory."""
from app.models.company import Company

__all__ = [
    "Company",
]
