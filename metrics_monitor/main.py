import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from .api import health, metrics, reports
from .config import Settings, get_settings
from .services.host_monitor import Sampler
from .services.scheduler import MonitorScheduler

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    monitor: MonitorScheduler = app.state.monitor
    await monitor.warm_up()
    monitor.start()
    logger.info("Server initialized with %d data points", len(monitor.buffer))

    yield

    await monitor.stop()


def create_app(
    settings: Optional[Settings] = None,
    sampler: Optional[Sampler] = None,
) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(title="Host Metrics Monitor", lifespan=lifespan)
    app.state.settings = settings
    app.state.monitor = MonitorScheduler.from_settings(settings, sampler=sampler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info("%s %s", request.method, request.url.path)
        return await call_next(request)

    app.include_router(health.router, prefix="/health", tags=["health"])
    app.include_router(metrics.router, prefix="/api", tags=["metrics"])
    app.include_router(reports.router, prefix="/api/reports", tags=["reports"])

    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    uvicorn.run(app, host=settings.host, port=settings.port)
