"""
FastAPI application entrypoint for target-image matching.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from api import routes

logging.basicConfig(level=logging.DEBUG)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"[api] catalog={routes.settings.EXPERIENCES_PATH} experiences={len(routes.store)}")
    yield


app = FastAPI(
    title="AR Marker Match API",
    description="Score uploaded photos against AR experience marker images and look up experiences by id.",
    version="1.0.0",
    lifespan=lifespan,
)
app.include_router(routes.router)


@app.get("/health")
def health() -> dict:
    """
    Liveness plus the size of the loaded experience catalog.
    """
    return {"status": "ok", "experiences": len(routes.store)}
