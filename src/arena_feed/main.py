"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from arena_feed.app_context import FeedAppContext, set_app_context
from arena_feed.config.settings import get_settings
from arena_feed.config.logging_config import setup_logging
from arena_feed.api.routers import feed_router, accounts_router, events_router
from arena_feed.core.exceptions import AppError


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    setup_logging()
    context = FeedAppContext(get_settings())
    await context.start()
    app.state.feed_context = context
    set_app_context(context)
    yield
    # Shutdown
    set_app_context(None)
    await context.close()


settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    description="Live trading feed reconciliation for the arena dashboard",
    version=settings.app_version,
    lifespan=lifespan,
)

# Include routers
app.include_router(feed_router)
app.include_router(accounts_router)
app.include_router(events_router)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Global handler for application errors."""
    return JSONResponse(
        status_code=400,
        content={"error": exc.code, "message": exc.message},
    )


@app.get("/health")
def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/")
def root() -> dict[str, str]:
    """Root endpoint with API info."""
    return {
        "app": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
    }
