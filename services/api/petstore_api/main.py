"""FastAPI application factory / entrypoint.

This service exposes HTTP endpoints for:
- tech-stack information about the running instance (`/api/infos`)
- listing pets (`/api/pets`)
- health checks (`/health`)

Startup sequence (see `lifespan`):
1. configure logging
2. resolve the database connection (`petstore_common.db.resolve`)
3. build the SQLAlchemy engine and seed the `pets` table
4. start serving requests

The resolved descriptor and engine are stored on `app.state` and handed to
request handlers through dependencies; there is no module-level engine.
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from petstore_common.db import ConnectionDescriptor, resolve
from petstore_common.logging import configure_logging

from .db import build_engine, check_database, make_session_factory
from .routes import router
from .seed import init_database
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, *, descriptor: ConnectionDescriptor | None = None, engine=None):
    """Build the pet store API application.

    Args:
        settings: Service settings; defaults to `get_settings()`.
        descriptor: Pre-resolved connection descriptor. When omitted it is
            resolved from the process environment at startup.
        engine: Pre-built SQLAlchemy engine (tests inject SQLite here). When
            omitted one is built from the descriptor and disposed on shutdown.

    Returns:
        FastAPI: The configured application.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.log_level)
        resolved = descriptor or resolve(use_individual_vars=settings.db_env_fallback)
        owned = engine is None
        db_engine = build_engine(resolved) if owned else engine

        try:
            if settings.seed_database:
                init_database(db_engine)
        except Exception:
            logger.exception("Database initialization failed")
            if owned:
                db_engine.dispose()
            raise

        app.state.settings = settings
        app.state.descriptor = resolved
        app.state.engine = db_engine
        app.state.session_factory = make_session_factory(db_engine)

        logger.info(
            "Pet store API ready: version %s (%s), instance %s, database %s",
            settings.app_version,
            settings.app_color,
            settings.instance_uuid,
            resolved.driver_kind.display_name,
        )
        try:
            yield
        finally:
            if owned:
                logger.info("Closing database connections")
                db_engine.dispose()

    app = FastAPI(title="Pet Store API", version=settings.app_version, lifespan=lifespan)

    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.include_router(router)

    @app.get("/health", response_class=PlainTextResponse)
    def health(request: Request):
        """Health check endpoint.

        Probes the database with `SELECT 1`. Used by container orchestrators
        and the platform router to decide whether this instance can serve.

        Returns:
            PlainTextResponse: `Healthy` (200) or `Unhealthy` (503).
        """
        if check_database(request.app.state.engine):
            return PlainTextResponse("Healthy")
        return PlainTextResponse("Unhealthy", status_code=503)

    return app
