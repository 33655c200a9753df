"""FastAPI main application module."""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from ...infrastructure.logging import get_logger, setup_logging_from_env
from ...infrastructure.services import initialize_services, shutdown_services
from .routes import health, checklists, inspections, metrics
from .config import get_settings
from .middleware import RequestResponseLoggingMiddleware


logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management."""
    # Startup
    setup_logging_from_env(get_settings().log_level)
    logger.info("Starting Quality Inspection Checklist API")
    await initialize_services()

    yield

    # Shutdown
    logger.info("Shutting down Quality Inspection Checklist API")
    await shutdown_services()


def add_exception_handlers(app: FastAPI) -> None:
    """Add custom exception handlers to the FastAPI application."""

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        """Handle validation errors from business logic."""
        logger.warning(f"Validation error on {request.url}: {str(exc)}")
        return JSONResponse(
            status_code=400,
            content={
                "detail": str(exc),
                "type": "validation_error"
            }
        )

    @app.exception_handler(LookupError)
    async def lookup_error_handler(request: Request, exc: LookupError):
        """Handle missing inspections and checklist templates."""
        logger.warning(f"Not found on {request.url}: {str(exc)}")
        return JSONResponse(
            status_code=404,
            content={
                "detail": str(exc),
                "type": "not_found"
            }
        )

    @app.exception_handler(RuntimeError)
    async def runtime_error_handler(request: Request, exc: RuntimeError):
        """Handle runtime errors from business logic."""
        logger.error(f"Runtime error on {request.url}: {str(exc)}")
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error occurred",
                "type": "runtime_error"
            }
        )


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Quality Inspection Checklist",
        description="API for recording inspections against checklist templates and deriving their status",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )

    # Add custom exception handlers
    add_exception_handlers(app)

    app.add_middleware(RequestResponseLoggingMiddleware)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=settings.allowed_methods,
        allow_headers=settings.allowed_headers,
    )

    # Include routers
    app.include_router(health.router, tags=["health"])
    app.include_router(
        checklists.router,
        prefix=f"{settings.api_prefix}/checklists",
        tags=["checklists"]
    )
    app.include_router(
        inspections.router,
        prefix=f"{settings.api_prefix}/inspections",
        tags=["inspections"]
    )
    app.include_router(
        metrics.router,
        prefix=f"{settings.api_prefix}/metrics",
        tags=["metrics"]
    )

    return app


# Create app instance
app = create_app()
