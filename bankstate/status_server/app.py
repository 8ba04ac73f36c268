"""FastAPI app for GET /state: {"bankOpen": true|false}. Single resource; no docs routes."""

import logging

from fastapi import FastAPI
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from bankstate.status_server.reader import BankStateReader

logger = logging.getLogger(__name__)


class StateJSONResponse(JSONResponse):
    """Compact JSON with explicit utf-8 charset."""

    media_type = "application/json; charset=utf-8"


def create_app(reader: BankStateReader) -> FastAPI:
    """Build FastAPI app serving the reader. The reader is invoked per request (no caching)."""
    app = FastAPI(
        title="Expose Bank State",
        description="Bank open/closed state for local overlays",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    @app.get("/state")
    async def get_state() -> StateJSONResponse:
        """Return {"bankOpen": bool}. The host read runs off the event loop; a build failure returns 500 with the error class."""
        try:
            payload = {"bankOpen": await run_in_threadpool(reader.read_bank_open)}
            return StateJSONResponse(
                status_code=200,
                content=payload,
                headers={"Cache-Control": "no-store"},
            )
        except Exception as e:
            logger.warning("GET /state failed: %s", e)
            return StateJSONResponse(
                status_code=500,
                content={"error": type(e).__name__},
                headers={"Cache-Control": "no-store"},
            )

    return app
