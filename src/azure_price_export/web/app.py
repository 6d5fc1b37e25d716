"""FastAPI application factory.

Export routes live under ``/api/azure``, estimate routes under
``/api/azure/estimate``. When scheduling is enabled the periodic
raw export runs on a background thread for the lifetime of the app.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from .. import __version__
from ..config import AppConfig
from ..scheduler import build_scheduler
from ..services import Services, build_services
from .routes import estimate, prices

log = logging.getLogger(__name__)

API_PREFIX = "/api/azure"
ESTIMATE_PREFIX = API_PREFIX + "/estimate"


def create_app(config: Optional[AppConfig] = None, services: Optional[Services] = None) -> FastAPI:
    if services is None:
        services = build_services(config or AppConfig.from_env())
    config = services.config

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        scheduler = None
        if config.schedule.enabled:
            scheduler = build_scheduler(services.pipeline, config.schedule.interval_seconds)
            scheduler.start()
        try:
            yield
        finally:
            if scheduler is not None:
                scheduler.shutdown(wait=False)

    app = FastAPI(
        title="Azure Retail Price Export",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.services = services
    app.include_router(estimate.router, prefix=ESTIMATE_PREFIX)
    app.include_router(prices.router, prefix=API_PREFIX)
    return app
