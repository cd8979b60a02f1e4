# meeting_digest/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from meeting_digest.core import config
from meeting_digest.api.routers.health import router as health_router
from meeting_digest.api.routers.connection import router as connection_router
from meeting_digest.api.routers.digests import router as digests_router
from meeting_digest.api.routers.diagnostics import router as diagnostics_router
from meeting_digest.services.digest_store import DigestStore
from meeting_digest.services.scheduler import DiagnosticsScheduler

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    scheduler: DiagnosticsScheduler = app.state.diagnostics_scheduler
    if config.DIAGNOSTICS_AUTOSTART and config.GOOGLE_API_KEY and not scheduler.is_running:
        logger.info("auto-starting diagnostics timer on server startup")
        scheduler.start(config.GOOGLE_API_KEY)
    try:
        yield
    finally:
        scheduler.stop()


def create_app() -> FastAPI:
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(title="Meeting Digest Server", version="0.1.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # shared, process-lifetime objects; routers reach them through Depends()
    app.state.digest_store = DigestStore()
    app.state.diagnostics_scheduler = DiagnosticsScheduler(interval_hours=config.DIAGNOSTICS_INTERVAL_HOURS)

    # Routers
    app.include_router(health_router)
    app.include_router(connection_router)
    app.include_router(digests_router)
    app.include_router(diagnostics_router)

    return app


app = create_app()


def main() -> None:
    import uvicorn

    uvicorn.run("meeting_digest.main:app", host="0.0.0.0", port=8000)
