"""FastAPI entry point for the opportunity board."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from opportunity_board import __version__
from opportunity_board.config import Settings, settings
from opportunity_board.errors import ValidationError
from opportunity_board.routers import board, ws
from opportunity_board.services.board_service import BoardContext

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
    )


def validation_error_handler(_: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": str(exc)})


def create_app(app_settings: Settings | None = None, context: BoardContext | None = None) -> FastAPI:
    """Build the app around one board context.

    ``context`` is used as-is when given; otherwise one is opened from
    ``app_settings`` at startup and closed at shutdown.
    """
    app_settings = app_settings or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        logger.info("Starting opportunity board (%s storage)", app_settings.storage_backend)
        owned = context is None
        app.state.board = context or BoardContext.from_settings(app_settings).open()

        yield

        # Shutdown
        if owned:
            app.state.board.close()
        logger.info("Opportunity board stopped")

    app = FastAPI(
        title="Opportunity Board",
        description="Kanban tracker for job-application opportunities",
        version=__version__,
        lifespan=lifespan,
    )
    app.add_exception_handler(ValidationError, validation_error_handler)

    # Register routers
    app.include_router(board.router)
    app.include_router(ws.router)

    @app.get("/health")
    async def health(request: Request) -> dict:
        return {
            "status": "ok",
            "storage_backend": app_settings.storage_backend,
            "opportunities": len(request.app.state.board.repository),
        }

    return app


def main() -> None:
    configure_logging(settings.log_level)
    uvicorn.run(create_app(), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
