"""FastAPI application."""

from contextlib import asynccontextmanager

from dishka import AsyncContainer
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from interspace.config import DEFAULT_JWT_SECRET, Settings
from interspace.interface.api.errors import register_error_handlers
from interspace.interface.api.routes import (
    auth,
    delegations,
    health,
    identity,
    linked_accounts,
    profiles,
)
from interspace.util.di.container import create_container, setup_di
from interspace.util.error import ConfigurationError
from interspace.util.observability import (
    instrument_fastapi,
    instrument_httpx,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await app.state.dishka_container.close()


def create_app(
    settings: Settings | None = None, container: AsyncContainer | None = None
) -> FastAPI:
    """Create FastAPI application.

    Note: Logfire should be configured before calling this function.
    In production, start_app.py handles this.

    Args:
        settings: Application settings, loaded from the environment if omitted
        container: DI container, the production container if omitted

    Raises:
        ConfigurationError: If production runs with the default JWT secret
    """
    settings = settings or Settings()
    if settings.is_production and settings.auth.jwt_secret == DEFAULT_JWT_SECRET:
        raise ConfigurationError("AUTH__JWT_SECRET must be set in production")

    # Instrument httpx for outbound calls to the session wallet and RPC nodes
    instrument_httpx()

    app_instance = FastAPI(
        title="Interspace API",
        description=(
            "Identity graph, EOA to session wallet delegation and "
            "execution routing for Interspace profiles"
        ),
        version="0.1.0",
        lifespan=lifespan,
    )

    instrument_fastapi(app_instance)

    app_instance.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS", "PATCH"],
        allow_headers=[
            "Authorization",
            "Content-Type",
            "Accept",
            "Origin",
            "User-Agent",
            "Cache-Control",
            "X-Requested-With",
        ],
        expose_headers=["Content-Length", "Content-Type"],
        max_age=600,
    )

    setup_di(app_instance, container or create_container())
    register_error_handlers(app_instance)

    app_instance.include_router(health.router)
    app_instance.include_router(auth.router)
    app_instance.include_router(identity.router)
    app_instance.include_router(linked_accounts.router)
    app_instance.include_router(delegations.router)
    app_instance.include_router(profiles.router)

    return app_instance


# Create app instance for uvicorn
# Note: Logfire must be configured before this module is imported
# In production: start_app.py handles this
app = create_app()
