"""Company model."""
import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import JSON, Boolean, DateTime, Float, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.db import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Company(Base):
    """
    Company directory record.
    location / revenue are stored flattened (location_city, revenue_amount, ...);
    the API exposes them as nested objects.
    is_active=False means soft-deleted: hidden from every read, never removed.
    """

    __tablename__ = "companies"
    __table_args__ = (
        Index("ix_companies_industry", "industry"),
        Index("ix_companies_size", "size"),
        Index("ix_companies_location_city_state", "location_city", "location_state"),
        Index("ix_companies_founded_year", "founded_year"),
        Index("ix_companies_is_active", "is_active"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    industry: Mapped[str] = mapped_column(String(64), nullable=False)
    size: Mapped[str] = mapped_column(String(32), nullable=False)
    location_city: Mapped[str] = mapped_column(String(255), nullable=False)
    location_state: Mapped[str] = mapped_column(String(255), nullable=False)
    location_country: Mapped[str] = mapped_column(String(255), nullable=False, default="India")
    founded_year: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    website: Mapped[Optional[str]] = mapped_column(String(2048), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(320), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    employees: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    revenue_amount: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    revenue_currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")
    tags: Mapped[list] = mapped_column(JSON, nullable=False, default=list)  # ["saas", "b2b"]
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    @property
    def full_location(self) -> str:
        return f"{self.location_city}, {self.location_state}, {self.location_country}"

    @property
    def company_age(self) -> Optional[int]:
        if self.founded_year is None:
            return None
        return datetime.now(timezone.utc).year - self.founded_year
