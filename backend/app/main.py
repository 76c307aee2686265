"""Chirp API — FastAPI application bootstrap.

Invariants:
    - Bootstrap order: database connect (scheduled), root route, auth + body-parsing
      pipeline, GraphQL at /graphql, users at /api/users, tweets at /api/tweets
    - The database connect is fire-and-forget: serving never waits on it
    - Settings, database manager, and auth strategy live on app.state (no module globals)
    - Global error handlers map ChirpError → structured JSON responses

Design Decisions:
    - create_app() factory with injectable routers: tests mount stub route groups
    - Lifespan over @app.on_event: schedules the connect task, disposes the engine on exit
    - Middleware passed as an ordered list to the constructor, not add_middleware calls
"""

import asyncio
import logging
from contextlib import asynccontextmanager, suppress

from fastapi import APIRouter, FastAPI
from fastapi.responses import PlainTextResponse

from app.api.error_handlers import register_error_handlers
from app.api.middleware import build_middleware
from app.api.routes import health, tweets, users
from app.api.routes.graphql_endpoint import build_graphql_router
from app.config import Settings, get_settings
from app.infrastructure.auth import register_strategy
from app.infrastructure.database import DatabaseSessionManager
from app.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)

GRAPHQL_PATH = "/graphql"
USERS_PREFIX = "/api/users"
TWEETS_PREFIX = "/api/tweets"
HEALTH_PREFIX = "/api/health"
GREETING = "Hello World"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings: Settings = app.state.settings
    setup_logging(settings.log_level, settings.log_format)
    database: DatabaseSessionManager = app.state.database
    # outcome only logged and recorded on database.state
    app.state.database_connect = asyncio.create_task(database.connect())
    logger.info("Chirp API started")
    yield
    logger.info("Chirp API shutting down")
    connect_task: asyncio.Task = app.state.database_connect
    if not connect_task.done():
        connect_task.cancel()
        with suppress(asyncio.CancelledError):
            await connect_task
    await database.dispose()


async def hello() -> str:
    return GREETING


def create_app(
    settings: Settings | None = None,
    *,
    users_router: APIRouter | None = None,
    tweets_router: APIRouter | None = None,
) -> FastAPI:
    """Build the application with its pipeline and route groups."""
    settings = settings or get_settings()
    app = FastAPI(
        title="Chirp API", version="1.0.0", lifespan=lifespan,
        middleware=build_middleware(settings),
    )
    app.state.settings = settings
    app.state.database = DatabaseSessionManager(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        create_schema=settings.database_create_schema,
    )

    app.add_api_route(
        "/", hello, methods=["GET", "HEAD"], response_class=PlainTextResponse,
        include_in_schema=False,
    )
    register_strategy(app, settings)

    # Routes: explicit registration at fixed prefixes
    app.include_router(
        build_graphql_router(settings.graphiql), prefix=GRAPHQL_PATH,
    )
    app.include_router(users_router or users.router, prefix=USERS_PREFIX)
    app.include_router(tweets_router or tweets.router, prefix=TWEETS_PREFIX)
    app.include_router(health.router, prefix=HEALTH_PREFIX)

    register_error_handlers(app)
    return app


app = create_app()
