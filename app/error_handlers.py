"""Exception -> JSON envelope mapping ({"success": false, "message", "errors"?, "error"?})."""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import get_settings
from app.exceptions import (
    CompanyNotFoundError,
    CompanyStoreError,
    CompanyValidationError,
    InvalidCompanyIdError,
)
from app.logging_config import get_logger
from app.services.company_validation import field_errors

logger = get_logger(__name__)


def _error(status_code: int, message: str, **extra) -> JSONResponse:
    content = {"success": False, "message": message}
    content.update({k: v for k, v in extra.items() if v is not None})
    return JSONResponse(status_code=status_code, content=content)


def _detail(exc: BaseException) -> str:
    """Error text for the client; generic in production."""
    if get_settings().is_production:
        return "Internal Server Error"
    return str(exc)


async def company_validation_handler(request: Request, exc: CompanyValidationError) -> JSONResponse:
    logger.info("request.validation_failed", path=request.url.path, errors=exc.messages)
    return _error(400, exc.message, errors=exc.messages)


async def company_not_found_handler(request: Request, exc: CompanyNotFoundError) -> JSONResponse:
    return _error(404, "Company not found")


async def invalid_company_id_handler(request: Request, exc: InvalidCompanyIdError) -> JSONResponse:
    return _error(400, "Invalid company ID")


async def company_store_handler(request: Request, exc: CompanyStoreError) -> JSONResponse:
    cause = exc.__cause__ or exc
    logger.error("store.error", path=request.url.path, operation=str(exc), error=str(cause))
    return _error(500, str(exc), error=_detail(cause))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Bad bodies get the company field messages; bad query params one message per location."""
    body_errors, other_errors = [], []
    for err in exc.errors():
        in_body = tuple(err.get("loc", ()))[:1] == ("body",)
        (body_errors if in_body else other_errors).append(err)
    errors = [fe.message for fe in field_errors(body_errors)]
    for err in other_errors:
        loc = ".".join(str(part) for part in err.get("loc", ()))
        errors.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    logger.info("request.validation_failed", path=request.url.path, errors=errors)
    return _error(400, "Validation error", errors=errors)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        return _error(404, "Route not found")
    return _error(exc.status_code, str(exc.detail))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("unhandled_exception", path=request.url.path, error=str(exc), exc_info=exc)
    return _error(500, "Something went wrong!", error=_detail(exc))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CompanyValidationError, company_validation_handler)
    app.add_exception_handler(CompanyNotFoundError, company_not_found_handler)
    app.add_exception_handler(InvalidCompanyIdError, invalid_company_id_handler)
    app.add_exception_handler(CompanyStoreError, company_store_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
