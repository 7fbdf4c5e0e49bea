"""FastAPI application entrypoint."""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app import __version__
from app.config import get_settings
from app.db import init_db
from app.error_handlers import register_exception_handlers
from app.logging_config import configure_logging, get_logger
from app.middleware.correlation_id import CorrelationIdMiddleware
from app.middleware.rate_limit import RateLimitMiddleware
from app.routers import api_health_router, companies_router

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown: logging, optional table creation."""
    configure_logging()
    settings = get_settings()
    if settings.auto_create_tables:
        await init_db()
        logger.info("db.tables_created")
    logger.info("app_started", version=__version__, env=settings.app_env)
    yield
    logger.info("app_shutdown")


app = FastAPI(
    title="Company Directory API",
    version=__version__,
    lifespan=lifespan,
)
app.add_middleware(RateLimitMiddleware)
app.add_middleware(CorrelationIdMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
register_exception_handlers(app)

app.include_router(api_health_router)
app.include_router(companies_router)


@app.get("/")
def root() -> dict:
    """Root endpoint: app name, version and entry points."""
    return {
        "message": "Company Management API",
        "version": __version__,
        "endpoints": {
            "companies": "/api/companies",
            "health": "/api/health",
        },
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=get_settings().app_env == "local")
