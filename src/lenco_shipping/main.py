"""Lenco Shipping Service - Main Entry Point."""

from lenco_shipping.config.settings import settings
from lenco_shipping.server.app import create_app

# Create FastAPI application
app = create_app(settings)

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "lenco_shipping.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        timeout_graceful_shutdown=30,
        timeout_keep_alive=5,
        access_log=False,  # Structured logging covers requests
    )
