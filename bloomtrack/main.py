"""
FastAPI application entry point.
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from bloomtrack.config import settings
from bloomtrack.middleware.error_handler import ErrorHandlerMiddleware
from bloomtrack.api.v1.routers import entries, forecasts, locations
from bloomtrack.api.v1.routers import settings as settings_router

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

# Rate limiter
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[f"{settings.rate_limit_requests}/minute"],
    enabled=settings.rate_limit_enabled,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events using the modern FastAPI pattern.
    """
    # Startup
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Log level: {settings.log_level}")
    logger.info(f"Data directory: {settings.data_dir}")
    logger.info(f"Forecast config: default_maturity={settings.default_maturity_period_days}d, "
                f"upcoming_window={settings.dashboard_upcoming_window_days}d, "
                f"ready_today_includes_depleted={settings.ready_today_includes_depleted}")
    logger.info(f"Rate limit: {settings.rate_limit_requests} requests/minute")

    yield

    # Shutdown
    logger.info("Shutdown complete")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    Bloom-to-harvest tracking API for dragon-fruit farms

    Record flower blooms, abortions and harvests against the farm's fixed
    layout of greenhouse poles, trellis sections and double poles, and get
    harvest forecasts and abortion analytics derived from the full history.

    ## Features

    - **Yield Ledger**: Outstanding fruit per bloom (bloomed - aborted - harvested, never negative)
    - **Harvest Forecasts**: Expected harvest date per bloom, ready-today / overdue / upcoming
    - **Abortion Analytics**: Abortion rate by location and by variety
    - **Dashboard**: Day-scoped counters for today's activity
    - **Location Catalog**: All 392 greenhouse, trellis and double-pole locations

    All day-scoped endpoints accept an optional `today` query parameter.
    """,
    debug=settings.debug,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# Add rate limiter to app state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

# Add CORS middleware with configurable origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add global error handling middleware
app.add_middleware(ErrorHandlerMiddleware)

# Include routers
app.include_router(entries.router, prefix="/api/v1")
app.include_router(forecasts.router, prefix="/api/v1")
app.include_router(locations.router, prefix="/api/v1")
app.include_router(settings_router.router, prefix="/api/v1")


@app.get("/", tags=["health"])
async def root():
    """
    Root endpoint for health check.

    Returns:
        Status message
    """
    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.app_version,
    }


@app.get("/health", tags=["health"])
async def health_check():
    """
    Health check endpoint.

    Returns:
        Health status
    """
    return {
        "status": "healthy",
        "service": settings.app_name,
    }
