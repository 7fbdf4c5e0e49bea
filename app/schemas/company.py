"""Company request/response schemas (camelCase on the wire)."""
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional, get_args
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from app.schemas.common import CAMEL_CONFIG


Industry = Literal[
    "Technology",
    "Healthcare",
    "Finance",
    "Education",
    "Manufacturing",
    "Retail",
    "Real Estate",
    "Transportation",
    "Entertainment",
    "Food & Beverage",
    "Energy",
    "Consulting",
    "Other",
]
CompanySize = Literal[
    "Startup (1-10)",
    "Small (11-50)",
    "Medium (51-200)",
    "Large (201-1000)",
    "Enterprise (1000+)",
]
Currency = Literal["USD", "EUR", "INR", "GBP", "CAD", "AUD"]

INDUSTRIES = get_args(Industry)
SIZES = get_args(CompanySize)
CURRENCIES = get_args(Currency)

DEFAULT_COUNTRY = "India"
DEFAULT_CURRENCY = "USD"
NAME_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500
LOCATION_MAX_LENGTH = 255
WEBSITE_MAX_LENGTH = 2000
EMAIL_MAX_LENGTH = 320
MIN_FOUNDED_YEAR = 1800
# employees column is a 32-bit integer
MAX_EMPLOYEES = 2_147_483_647

WEBSITE_RE = re.compile(r"^(https?://)?([\da-z.-]+)\.([a-z.]{2,6})([/\w .-]*)/?$", re.IGNORECASE)
EMAIL_RE = re.compile(r"^\w+(?:[.-]\w+)*@\w+(?:[.-]\w+)*\.\w{2,}$")
PHONE_RE = re.compile(r"^\+?[0-9]{7,15}$")
SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class LocationIn(BaseModel):
    """location on create/update; a missing country defaults to India."""

    model_config = {"str_strip_whitespace": True}

    city: str = Field(..., min_length=1, max_length=LOCATION_MAX_LENGTH)
    state: str = Field(..., min_length=1, max_length=LOCATION_MAX_LENGTH)
    country: str = Field(DEFAULT_COUNTRY, max_length=LOCATION_MAX_LENGTH)

    @field_validator("country", mode="before")
    @classmethod
    def default_country(cls, v: Any) -> Any:
        return DEFAULT_COUNTRY if _is_blank(v) else v


class RevenueIn(BaseModel):
    model_config = {"str_strip_whitespace": True}

    amount: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    currency: Currency = DEFAULT_CURRENCY

    @field_validator("amount", mode="before")
    @classmethod
    def blank_amount(cls, v: Any) -> Any:
        return None if _is_blank(v) else v

    @field_validator("currency", mode="before")
    @classmethod
    def default_currency(cls, v: Any) -> Any:
        return DEFAULT_CURRENCY if _is_blank(v) else v


class CompanyCreate(BaseModel):
    """
    Request body for POST /api/companies (and each item of /bulk).
    Normalizes on the way in: trimmed strings, capitalized name, https:// website
    prefix, lower-cased email, blank optional values -> null.
    """

    model_config = {**CAMEL_CONFIG, "str_strip_whitespace": True}

    name: str = Field(..., min_length=1, max_length=NAME_MAX_LENGTH)
    industry: Industry
    size: CompanySize
    location: LocationIn = Field(default_factory=dict, validate_default=True)
    founded_year: Optional[int] = Field(None, ge=MIN_FOUNDED_YEAR)
    website: Optional[str] = Field(None, max_length=WEBSITE_MAX_LENGTH)
    email: Optional[str] = Field(None, max_length=EMAIL_MAX_LENGTH)
    phone: Optional[str] = None
    description: Optional[str] = Field(None, max_length=DESCRIPTION_MAX_LENGTH)
    employees: Optional[int] = Field(None, ge=1, le=MAX_EMPLOYEES)
    revenue: RevenueIn = Field(default_factory=RevenueIn)
    tags: List[str] = Field(default_factory=list)
    is_active: bool = True

    @field_validator("location", "revenue", mode="before")
    @classmethod
    def null_object(cls, v: Any) -> Any:
        return {} if v is None else v

    @field_validator(
        "founded_year", "website", "email", "phone", "description", "employees", mode="before"
    )
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        return None if _is_blank(v) else v

    @field_validator("tags", mode="before")
    @classmethod
    def null_tags(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("name")
    @classmethod
    def capitalize_name(cls, v: str) -> str:
        return v[0].upper() + v[1:] if v else v

    @field_validator("founded_year")
    @classmethod
    def not_in_future(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v > datetime.now(timezone.utc).year:
            raise ValueError("Founded year cannot be in the future")
        return v

    @field_validator("website")
    @classmethod
    def website_url(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        if not WEBSITE_RE.match(v):
            raise ValueError("Please enter a valid website URL")
        return v if SCHEME_RE.match(v) else "https://" + v

    @field_validator("email")
    @classmethod
    def email_address(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.lower()
        if not EMAIL_RE.match(v):
            raise ValueError("Please enter a valid email address")
        return v

    @field_validator("phone")
    @classmethod
    def phone_number(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not PHONE_RE.match(v):
            raise ValueError("Please enter a valid phone number")
        return v

    @field_validator("tags")
    @classmethod
    def drop_blank_tags(cls, v: List[str]) -> List[str]:
        return [t.strip() for t in v if t.strip()]


class CompanyUpdate(CompanyCreate):
    """
    Request body for PUT /api/companies/{id}: every field optional, only the keys sent
    are applied. Defaults are not validated, so an explicit null on a required field
    is still rejected.
    """

    name: str = Field(None, min_length=1, max_length=NAME_MAX_LENGTH)
    industry: Industry = None
    size: CompanySize = None
    location: LocationIn = None
    revenue: RevenueIn = None
    tags: List[str] = None
    is_active: bool = None


class LocationOut(BaseModel):
    city: str
    state: str
    country: str


class RevenueOut(BaseModel):
    amount: Optional[float] = None
    currency: str = "USD"


class CompanyOut(BaseModel):
    """One company as returned by the API, including derived fields."""

    model_config = CAMEL_CONFIG

    id: UUID
    name: str
    industry: str
    size: str
    location: LocationOut
    founded_year: Optional[int] = None
    website: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    description: Optional[str] = None
    employees: Optional[int] = None
    revenue: RevenueOut
    tags: List[str] = Field(default_factory=list)
    is_active: bool
    created_at: datetime
    updated_at: datetime
    full_location: str
    company_age: Optional[int] = None


class PaginationOut(BaseModel):
    model_config = CAMEL_CONFIG

    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int
    has_next_page: bool
    has_prev_page: bool


class CompanyListResponse(BaseModel):
    """Response for GET /api/companies."""

    success: bool = True
    data: List[CompanyOut]
    pagination: PaginationOut


class CompanyResponse(BaseModel):
    """Response for GET /api/companies/{id}."""

    success: bool = True
    data: CompanyOut


class CompanyMutationResponse(BaseModel):
    """Response for POST / PUT /api/companies."""

    success: bool = True
    message: str
    data: CompanyOut


class CompanyBulkResponse(BaseModel):
    """Response for POST /api/companies/bulk (only the created records)."""

    success: bool = True
    message: str
    data: List[CompanyOut]


class StatsBucket(BaseModel):
    """One group of a distribution: {"_id": value, "count": n}."""

    model_config = {"populate_by_name": True}

    id: Optional[str] = Field(None, alias="_id")
    count: int


class CompanyStatsOut(BaseModel):
    model_config = CAMEL_CONFIG

    total_companies: int
    industry_distribution: List[StatsBucket]
    size_distribution: List[StatsBucket]
    location_distribution: List[StatsBucket]


class CompanyStatsResponse(BaseModel):
    """Response for GET /api/companies/stats."""

    success: bool = True
    data: CompanyStatsOut


# Example body for the OpenAPI docs.
COMPANY_EXAMPLE: Dict[str, Any] = {
    "name": "acme",
    "industry": "Technology",
    "size": "Startup (1-10)",
    "location": {"city": "Pune", "state": "Maharashtra"},
    "foundedYear": 2015,
    "website": "acme.io",
    "email": "Hello@Acme.io",
    "tags": ["saas", "b2b"],
}
