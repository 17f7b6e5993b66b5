"""FastAPI application setup and configuration."""

from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from lenco_shipping.config.settings import Settings, settings
from lenco_shipping.core.errors import ServiceError
from lenco_shipping.core.logger import setup_logger
from lenco_shipping.core.monitoring import init_monitoring
from lenco_shipping.db import get_engine, get_session_factory, init_db
from lenco_shipping.integrations.mail import MailService
from lenco_shipping.integrations.mercury import MercuryClient

logger = setup_logger(__name__)


async def get_db_session(request: Request) -> AsyncIterator[AsyncSession]:
    """Dependency for getting database session."""
    session_factory = getattr(request.app.state, "session_factory", None)
    if session_factory is None:
        raise RuntimeError("Database not initialized")

    async with session_factory() as session:
        yield session


def get_mercury_client(request: Request) -> MercuryClient:
    return request.app.state.mercury_client


def get_mail_service(request: Request) -> MailService:
    return request.app.state.mail_service


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        app_settings: Configuration to use; defaults to the environment-loaded settings
    """
    app_settings = app_settings or settings

    app = FastAPI(
        title="Lenco Shipping Service",
        version="1.0.0",
        description="Receives Lenco payment webhooks, books Mercury shipments and emails customers and staff",
    )

    init_monitoring(app_settings.glitchtip_dsn, app_settings.environment)

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Import router AFTER defining the real dependencies
    from lenco_shipping.server import routes

    app.include_router(routes.router)

    # Override the stub dependencies with the actual providers
    app.dependency_overrides[routes.get_settings_stub] = lambda: app_settings
    app.dependency_overrides[routes.get_db_session_stub] = get_db_session
    app.dependency_overrides[routes.get_mercury_client_stub] = get_mercury_client
    app.dependency_overrides[routes.get_mail_service_stub] = get_mail_service

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
        logger.warning(f"{request.method} {request.url.path} failed: {exc.message} ({exc.status_code})")
        return JSONResponse({"detail": exc.message}, status_code=exc.status_code)

    @app.on_event("startup")
    async def startup_handler():
        """Initialize database and outbound clients on application startup."""
        try:
            logger.info("Initializing database")
            engine = get_engine(app_settings.database_url)
            await init_db(engine)

            app.state.engine = engine
            app.state.session_factory = get_session_factory(engine)
            logger.info("Database initialized successfully")
        except Exception as e:
            logger.error(f"Failed to initialize database: {e}", exc_info=True)
            raise

        app.state.mercury_client = MercuryClient(app_settings)
        app.state.mail_service = MailService(app_settings)
        logger.info("Mercury and mail clients ready")

    @app.on_event("shutdown")
    async def shutdown_handler():
        """Close HTTP clients and database connections."""
        logger.info("Starting graceful shutdown...")

        for name in ("mercury_client", "mail_service"):
            client = getattr(app.state, name, None)
            if client is None:
                continue
            try:
                await client.close()
            except Exception as e:
                logger.error(f"Error closing {name}: {e}")

        engine = getattr(app.state, "engine", None)
        if engine is not None:
            logger.info("Closing database connections...")
            try:
                await engine.dispose()
                logger.info("Database connections closed successfully")
            except Exception as e:
                logger.error(f"Error closing database connections: {e}")

        logger.info("Graceful shutdown completed")

    return app
