from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.app.config import get_settings
from src.app.dependencies import get_intent_oracle, get_roster_refresher
from src.app.routes import router
from src.utils.logging import configure_logging

settings = get_settings()
configure_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # The oracle registers as a cache listener, so it must exist before the first load.
    get_intent_oracle()
    refresher = get_roster_refresher()
    refresher.refresh_once()
    if settings.roster_refresh_enabled:
        refresher.start()
    try:
        yield
    finally:
        refresher.stop()


app = FastAPI(title=settings.app_name, debug=settings.debug, lifespan=lifespan)
if settings.allowed_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )
app.include_router(router)
