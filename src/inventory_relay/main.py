# src/inventory_relay/main.py
"""Main entry point for the Inventory Relay application."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from inventory_relay.api.errors import setup_exception_handlers
from inventory_relay.api.v1 import backups_router, expiring_router, shares_router
from inventory_relay.core.settings import settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Initialize FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Relay for signed inventory snapshots, expiring share links and encrypted backups",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
    expose_headers=["X-RateLimit-Remaining", "X-RateLimit-Reset"],
)

setup_exception_handlers(app)

# Include API routers
app.include_router(expiring_router, prefix="/api/v1")
app.include_router(shares_router, prefix="/api/v1")
app.include_router(backups_router, prefix="/api/v1")

if settings.legacy_routes_enabled:
    app.include_router(expiring_router, prefix="/api", include_in_schema=False)
    app.include_router(shares_router, prefix="/api", include_in_schema=False)


def configure_logging(level: str | None = None) -> None:
    """Install a single timestamped stream handler on the root logger."""
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    root.setLevel((level or settings.log_level).upper())


@app.on_event("startup")
async def on_startup() -> None:
    configure_logging()
    logging.getLogger(__name__).info(
        "%s %s starting with %s store",
        settings.app_name,
        settings.app_version,
        settings.store_backend,
    )


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "description": "Relay for signed inventory snapshots, expiring share links and encrypted backups",
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("inventory_relay.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
