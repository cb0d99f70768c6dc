"""
FastAPI application entry point.
"""

from fastapi import FastAPI

from plan_relay import __version__
from plan_relay.api import webhooks
from plan_relay.config import settings
from plan_relay.utils.logging import get_logger, setup_logging

# Configure structured logging
setup_logging(settings.log_level)

logger = get_logger(__name__)

# Create FastAPI application
app = FastAPI(
    title="Bamboo Plan Relay",
    description="Triggers Bamboo plans from GitHub pull request webhooks",
    version=__version__
)


@app.get("/health")
async def health_check():
    """Health check endpoint for container orchestration."""
    return {"status": "healthy", "version": __version__}


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Bamboo Plan Relay API",
        "version": __version__,
        "docs": "/docs"
    }


# Include API routers
app.include_router(webhooks.router)

if not settings.webhook_secret:
    logger.warning("No webhook secret configured, every webhook delivery will be rejected")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
