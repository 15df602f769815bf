import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from meeting_scheduler.api.errors import error_response
from meeting_scheduler.api.schema import create_graphql_router
from meeting_scheduler.core import config
from meeting_scheduler.core.db import Database
from meeting_scheduler.core.errors import AppError
from meeting_scheduler.core.middleware import RequestContextMiddleware, SecurityHeadersMiddleware

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(database: Database = None) -> FastAPI:
    """Build the API. Pass ``database`` to run against an isolated store (tests)."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        db = database or Database(config.DATABASE_URL)
        db.create_all()
        app.state.db = db
        logger.info("✅ Database ready")
        yield
        # an injected database belongs to whoever passed it in
        if database is None:
            db.close()
        logger.info("👋 Shutting down")

    app = FastAPI(title="Meeting Scheduler API", lifespan=lifespan)

    # --- CORS ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    if config.SECURITY_HEADERS_ENABLED:
        app.add_middleware(SecurityHeadersMiddleware)
    # outermost, so every response carries the request id
    app.add_middleware(RequestContextMiddleware)

    # --- Errors ---
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        return error_response(request, exc)

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        return error_response(request, exc)

    # --- Routers ---
    app.include_router(create_graphql_router(), prefix="/graphql", tags=["GraphQL"])

    @app.get("/")
    def health():
        return {"status": "ok", "service": "meeting-scheduler-server"}

    return app


app = create_app()
