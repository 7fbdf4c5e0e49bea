"""
Company record validation: CompanyCreate / CompanyUpdate (pydantic) do the checking and
normalization; this module turns their errors into one (field, message) pair per field.

create: required fields must be present. update (partial=True): only present keys are
checked and returned; an explicit null/"" on a required field is still a violation.
"""
from typing import Any, Dict, Iterable, List, Mapping, Union

from pydantic import ValidationError

from app.exceptions import CompanyValidationError, FieldError
from app.schemas.company import (
    CURRENCIES,
    MIN_FOUNDED_YEAR,
    CompanyCreate,
    CompanyUpdate,
)

BODY_MESSAGE = "Company data must be a JSON object"

LABELS = {
    "name": "Company name",
    "industry": "Industry",
    "size": "Company size",
    "location": "Location",
    "location.city": "City",
    "location.state": "State",
    "location.country": "Country",
    "foundedYear": "Founded year",
    "website": "Website",
    "email": "Email",
    "phone": "Phone",
    "description": "Description",
    "employees": "Employee count",
    "revenue": "Revenue",
    "revenue.amount": "Revenue amount",
    "revenue.currency": "Currency",
    "tags": "Tags",
    "isActive": "isActive",
}
REQUIRED_MESSAGES = {
    "name": "Company name is required",
    "industry": "Industry is required",
    "size": "Company size is required",
    "location.city": "City is required",
    "location.state": "State is required",
}
# (field, pydantic error type) -> message
MESSAGES = {
    ("industry", "literal_error"): "Please select a valid industry",
    ("size", "literal_error"): "Please select a valid company size",
    ("revenue.currency", "literal_error"): f"Currency must be one of {', '.join(CURRENCIES)}",
    ("foundedYear", "greater_than_equal"): f"Founded year cannot be before {MIN_FOUNDED_YEAR}",
    ("revenue.amount", "greater_than_equal"): "Revenue cannot be negative",
    ("employees", "greater_than_equal"): "Employee count must be at least 1",
    ("employees", "less_than_equal"): "Employee count is too large",
    ("isActive", "bool_parsing"): "isActive must be true or false",
    ("isActive", "bool_type"): "isActive must be true or false",
}
INTEGER_ERRORS = frozenset({"int_type", "int_parsing", "int_from_float", "int_parsing_size"})
NUMBER_ERRORS = frozenset({"float_type", "float_parsing"})
OBJECT_ERRORS = frozenset({"model_type", "model_attributes_type", "dict_type"})


def _field_path(loc: Iterable[Union[str, int]]) -> str:
    """('location', 'city') -> 'location.city'; list indexes are dropped."""
    parts = [str(part) for part in loc if isinstance(part, str)]
    if parts and parts[0] == "body":
        parts = parts[1:]
    return ".".join(parts) or "body"


def _message(field: str, err: Mapping[str, Any]) -> str:
    kind = err["type"]
    ctx = err.get("ctx") or {}
    label = LABELS.get(field, field)
    if field == "body":
        return BODY_MESSAGE
    if kind == "value_error":
        return str(ctx.get("error", err["msg"]))
    value = err.get("input")
    if field in REQUIRED_MESSAGES and (
        kind == "missing" or value is None or (isinstance(value, str) and not value.strip())
    ):
        return REQUIRED_MESSAGES[field]
    if (field, kind) in MESSAGES:
        return MESSAGES[(field, kind)]
    if field == "tags":
        return "Tags must be a list of text values"
    if kind == "string_too_long":
        return f"{label} cannot exceed {ctx['max_length']} characters"
    if kind == "string_type":
        return f"{label} must be text"
    if kind in INTEGER_ERRORS:
        return f"{label} must be a whole number"
    if kind in NUMBER_ERRORS:
        return f"{label} must be a number"
    if kind == "finite_number":
        return f"{label} must be a finite number"
    if kind == "greater_than_equal":
        return f"{label} cannot be less than {ctx['ge']}"
    if kind == "less_than_equal":
        return f"{label} cannot be greater than {ctx['le']}"
    if kind in OBJECT_ERRORS:
        return f"{label} must be an object"
    return f"{label}: {err['msg']}"


def field_errors(errors: Iterable[Mapping[str, Any]]) -> List[FieldError]:
    """pydantic error dicts -> FieldErrors, first message per field, in schema order."""
    out: Dict[str, FieldError] = {}
    for err in errors:
        field = _field_path(err.get("loc", ()))
        if field not in out:
            out[field] = FieldError(field, _message(field, err))
    return list(out.values())


def parse_company(data: Any, *, partial: bool = False) -> CompanyCreate:
    """Validate a raw JSON body into CompanyCreate (or CompanyUpdate when partial)."""
    if not isinstance(data, Mapping):
        raise CompanyValidationError([FieldError("body", BODY_MESSAGE)])
    model = CompanyUpdate if partial else CompanyCreate
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise CompanyValidationError(field_errors(e.errors())) from e


def company_fields(company: CompanyCreate) -> Dict[str, Any]:
    """Validated body -> API-shaped dict (camelCase); an update keeps only the keys sent."""
    data = company.model_dump(by_alias=True)
    if isinstance(company, CompanyUpdate):
        sent = {
            CompanyUpdate.model_fields[name].alias or name
            for name in company.model_fields_set
        }
        data = {key: value for key, value in data.items() if key in sent}
    return data


def validate_company(data: Any, *, partial: bool = False) -> List[FieldError]:
    """Return the (field, message) pairs violated by data; empty list when valid."""
    try:
        parse_company(data, partial=partial)
    except CompanyValidationError as e:
        return e.errors
    return []


def clean_company(data: Any, *, partial: bool = False) -> Dict[str, Any]:
    """
    Validate and normalize a candidate record.
    partial=False: full record, defaults applied (country, currency, tags, isActive).
    partial=True: only keys present in data are returned.
    """
    return company_fields(parse_company(data, partial=partial))
