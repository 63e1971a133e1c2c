import logging
import os

# Log configuration (before other imports)
# ruff: noqa: E402
logging.basicConfig(
    level=os.getenv("TIMEKEEPER_LOG_LEVEL", "INFO").upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    force=True
)

import asyncio  # noqa: E402
from contextlib import asynccontextmanager  # noqa: E402
from typing import Optional  # noqa: E402

from fastapi import FastAPI  # noqa: E402
from timekeeper import __version__  # noqa: E402
from timekeeper.api.base import api_router  # noqa: E402
from timekeeper.config import Settings, get_settings  # noqa: E402
from timekeeper.services.scheduler import AsyncioScheduler  # noqa: E402
from timekeeper.services.timer import TimerController  # noqa: E402
from timekeeper.services.timer.factory import build_controller  # noqa: E402

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    controller: TimerController = app.state.controller
    scheduler = controller.scheduler
    if isinstance(scheduler, AsyncioScheduler):
        scheduler.bind(asyncio.get_running_loop())

    # pick up timers left running by a previous daemon
    controller.rearm()
    controller.reconcile()
    logger.info(f"Timer daemon ready, state file {controller.store.path}")

    yield

    if isinstance(scheduler, AsyncioScheduler):
        scheduler.shutdown()
    logger.info("Timer daemon stopped")


def create_app(settings: Optional[Settings] = None, controller: Optional[TimerController] = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(
        title="Timekeeper API",
        description="Countdown timers and Pomodoro-style sequences",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.controller = controller or build_controller(settings, scheduler=AsyncioScheduler())

    # Include all API routes
    app.include_router(api_router)

    @app.get("/")
    def read_root():
        return {
            "message": "Timekeeper API",
            "docs": "/docs",
            "version": __version__
        }

    return app


app = create_app()
