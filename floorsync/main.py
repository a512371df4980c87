import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from . import state
from .config import settings
from .routes.floor_api import router as floor_router
from .websockets.hub_ws import router as hub_ws_router

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    state.reset(settings)
    logger.info("Floor hub ready: %d tables available", len(state.tables))
    yield


app = FastAPI(
    title="FloorSync (Real-Time Table & Order Synchronization Hub)",
    lifespan=lifespan,
)

# Routers
app.include_router(floor_router)

# WebSocket routers
app.include_router(hub_ws_router)
