"""Escala de Oficiais HTTP server.

Serves the JSON API consumed by the schedule grid page.

Run locally::

    uv run escala-server

Or with uvicorn::

    uv run uvicorn escala.web.server:create_app --factory --host 0.0.0.0 --port 8080
"""

import logging
from contextlib import asynccontextmanager

from starlette.applications import Starlette
from starlette.routing import Route

from escala.board.errors import BoardError
from escala.board.service import ScheduleBoard
from escala.core.config import Settings, load_settings
from escala.web.routes import get_state, health, post_ciente, post_update

logger = logging.getLogger(__name__)


def configure_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app(settings: Settings | None = None, board: ScheduleBoard | None = None) -> Starlette:
    """Build the ASGI app.

    Args:
        settings: Configuration; loaded from the environment when omitted
        board: Pre-built board (tests); built from ``settings`` when omitted
    """
    settings = settings or (board.settings if board else load_settings())
    board = board or ScheduleBoard(settings)

    @asynccontextmanager
    async def lifespan(app: Starlette):
        # Create the document on startup so an empty volume is usable right away
        try:
            created = board.store.ensure_initialized()
        except BoardError as e:
            logger.error("Could not initialize %s: %s", board.store.path, e.details)
        else:
            if created:
                logger.info("Created %s", board.store.path)
        yield

    routes = [
        Route("/api/health", health, methods=["GET"]),
        Route("/api/state", get_state, methods=["GET"]),
        Route("/api/update", post_update, methods=["POST"]),
        Route("/api/ciente", post_ciente, methods=["POST"]),
    ]
    app = Starlette(routes=routes, lifespan=lifespan)
    app.state.board = board
    app.state.settings = settings
    return app


def main() -> None:
    """Run the server with uvicorn."""
    import uvicorn

    configure_logging()
    settings = load_settings()
    app = create_app(settings)

    logger.info(
        "Starting escala server on %s:%d (TZ=%s, data=%s)",
        settings.host,
        settings.port,
        settings.timezone,
        settings.data_file,
    )
    uvicorn.run(app, host=settings.host, port=settings.port, log_level="info")
