"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from optimizer import __version__
from optimizer.api.routes import SAVINGS_HEADERS, router
from optimizer.config import CORS_ORIGINS, QUALITY_FLOOR, QUALITY_STEP, logger as config_logger

logging.getLogger("uvicorn").setLevel(logging.INFO)


@asynccontextmanager
async def lifespan(app: FastAPI):
    config_logger.info("Optimizer API started (quality step=%s, floor=%s)", QUALITY_STEP, QUALITY_FLOOR)
    yield
    config_logger.info("Optimizer API shutting down")


app = FastAPI(
    title="Image Optimizer API",
    description="Re-encode image batches to WebP/JPEG/PNG/AVIF under a target size.",
    version=__version__,
    lifespan=lifespan,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS if CORS_ORIGINS else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=SAVINGS_HEADERS,
)
app.include_router(router)


if __name__ == "__main__":
    import uvicorn
    from optimizer.config import HOST, PORT
    uvicorn.run("optimizer.main:app", host=HOST, port=PORT, reload=True)
