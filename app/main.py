"""FastAPI application entry point for ContentCraft."""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import get_settings
from app.middleware.error_handler import ErrorHandlerMiddleware
from app.models.plan import build_plan_catalog
from app.utils.logger import configure_logging, get_logger

logger = get_logger(__name__)

# Get settings
settings = get_settings()

# Configure logging
configure_logging(debug=settings.debug)

# Headers browser clients send to the API and checkout endpoint
CORS_ALLOWED_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application startup and shutdown events."""
    from app.dependencies import get_identity_provider

    logger.info(f"Starting {settings.app_name} API v{settings.api_version}")
    logger.info(f"Running in {settings.environment} mode")
    logger.info(f"Identity provider: {settings.resolved_identity_provider()}")
    logger.info(f"Generation quota: {settings.generation_quota_limit} ({settings.quota_store} store)")
    catalog = build_plan_catalog(settings.stripe_pro_price_id, settings.stripe_enterprise_price_id)
    logger.info(f"Plans: {', '.join(plan.id for plan in catalog)}")

    yield

    await get_identity_provider(settings).aclose()
    logger.info(f"Shutting down {settings.app_name} API")


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="AI content generation API with subscription gating",
    version=settings.api_version,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# ── Middleware (order matters: last-added = outermost = first to run) ──

# 1. Error handler added first → innermost layer
app.add_middleware(ErrorHandlerMiddleware)

# 2. CORS added last → outermost layer (processes OPTIONS preflight first)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,       # Cannot use credentials with allow_origins=["*"]
    allow_methods=["*"],
    allow_headers=CORS_ALLOWED_HEADERS,
)

# Include API routers
from app.api.checkout import router as checkout_router  # noqa: E402
from app.api.v1.router import router as v1_router  # noqa: E402

app.include_router(v1_router)
app.include_router(checkout_router)


@app.get(
    "/health",
    status_code=status.HTTP_200_OK,
    tags=["Health"],
    summary="Health check endpoint",
)
async def health_check() -> JSONResponse:
    """Health check endpoint for monitoring."""
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={
            "success": True,
            "status": "healthy",
            "service": settings.app_name,
            "version": settings.api_version,
        },
    )


@app.get(
    "/",
    status_code=status.HTTP_200_OK,
    tags=["Root"],
    summary="Welcome endpoint",
)
async def root() -> JSONResponse:
    """Root endpoint with welcome message."""
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={
            "success": True,
            "message": f"Welcome to {settings.app_name}",
            "version": settings.api_version,
            "docs_url": "/docs",
            "redoc_url": "/redoc",
        },
    )


def run() -> None:
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    run()
