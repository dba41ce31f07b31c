"""HTTP trigger surface for the digest service.

Provides:
- / - health check, no side effects
- /send-now?key=... - run one digest cycle on demand
"""

from __future__ import annotations

import logging
import secrets
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import APIRouter, FastAPI, Query, Request
from fastapi.responses import PlainTextResponse

from affairs_digest import __version__
from affairs_digest.config import Config, get_config

logger = logging.getLogger(__name__)

router = APIRouter()


def key_matches(supplied: Optional[str], expected: Optional[str]) -> bool:
    """Exact comparison of the supplied key against the configured secret.

    An unset secret never matches.
    """
    if not expected or supplied is None:
        return False
    return secrets.compare_digest(supplied.encode("utf-8"), expected.encode("utf-8"))


@router.get("/", response_class=PlainTextResponse)
async def health_check() -> str:
    return "Current Affairs Service is running!"


@router.get("/send-now", response_class=PlainTextResponse)
def send_now(request: Request, key: Optional[str] = Query(default=None)):
    """Run one digest cycle.

    Sync handler: runs in the threadpool so the health route stays
    responsive while a send is in flight.
    """
    config: Config = request.app.state.config

    if not key_matches(key, config.server.trigger_key):
        logger.warning("Rejected /send-now request with invalid key")
        return PlainTextResponse("Unauthorized", status_code=401)

    try:
        sent = request.app.state.dispatcher.run()
    except Exception as e:
        logger.exception("Manual digest send failed")
        return PlainTextResponse(f"Error: {e}", status_code=500)

    if sent:
        return PlainTextResponse("Email sent successfully!")
    return PlainTextResponse("Failed to send email", status_code=500)


def create_app(
    config: Optional[Config] = None,
    dispatcher=None,
    schedule: Optional[bool] = None,
) -> FastAPI:
    """Build the FastAPI app.

    Args:
        config: Configuration, defaults to the global config
        dispatcher: Dispatcher shared by the route and the timer
        schedule: Start the daily timer with the app, defaults to
            config.scheduler.enabled
    """
    config = config or get_config()

    if dispatcher is None:
        from affairs_digest.dispatcher import DigestDispatcher

        dispatcher = DigestDispatcher(config)

    if schedule is None:
        schedule = config.scheduler.enabled

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        scheduler = None
        if schedule:
            from affairs_digest.scheduler import start_scheduler

            scheduler = start_scheduler(config, dispatcher)
            logger.info("Current affairs service started. Email will be sent on schedule.")
        yield
        if scheduler is not None:
            from affairs_digest.scheduler import stop_scheduler

            stop_scheduler(scheduler)

    app = FastAPI(
        title="Current Affairs Digest",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.dispatcher = dispatcher
    app.include_router(router)

    return app
