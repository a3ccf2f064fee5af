"""
Main FastAPI application.
"""

from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.openapi.docs import get_redoc_html
from fastapi.middleware.cors import CORSMiddleware

from .core.config import APP_VERSION, settings
from .core.di.container import Container
from .core.utils import get_logger
from .core.observability import setup_observability
from .core.api.exception_handlers import setup_exception_handlers
from .modules.billing.api import router as billing_router
from .modules.companies.api import router as companies_router
from .modules.reports.api import router as reports_router

logger = get_logger(__name__)

# Initialize DI Container
container = Container()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    """
    logger.info("Starting Stock Analysis AI API", backend=settings.database.backend)
    logger.info(f"API running on {settings.api.host}:{settings.api.port}")

    yield

    logger.info("Shutting down Stock Analysis AI API")
    if settings.database.backend == "postgres":
        container.core.postgres_db().close()


is_production = settings.api.environment == "production"

app = FastAPI(
    title="Stock Analysis AI API",
    description="AI-generated stock research reports with a metered free plan and a Pro upgrade",
    version=APP_VERSION,
    lifespan=lifespan,
    debug=settings.api.debug,
    docs_url=None if is_production else "/docs",
    redoc_url=None,  # Disable default Redoc to use custom CDN
    openapi_url=None if is_production else "/openapi.json",
)

setup_observability(app)

setup_exception_handlers(app)

# Attach container to app
app.container = container

# The web client is the only browser origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if not is_production else [settings.api.site_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(billing_router.router)
app.include_router(reports_router.router)
app.include_router(companies_router.router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {"name": "Stock Analysis AI API", "version": APP_VERSION, "status": "running"}


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "stock-analysis-api"}


if not is_production:
    @app.get("/redoc", include_in_schema=False)
    async def redoc_html():
        """Redoc documentation."""
        return get_redoc_html(
            openapi_url=app.openapi_url,
            title=app.title + " - ReDoc",
            redoc_js_url="https://unpkg.com/redoc@latest/bundles/redoc.standalone.js",
        )


if __name__ == "__main__":
    load_dotenv()
    import uvicorn

    uvicorn.run(
        "src.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.debug,
    )
