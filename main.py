"""FastAPI app entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import router
from api.schemas import HealthOut
from config import get_model_tag, settings

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        "Starting Workspace Chat API (multi_user_mode=%s, provider=%s, model=%s)",
        settings.multi_user_mode,
        settings.llm_provider,
        get_model_tag(),
    )
    yield
    logger.info("Shutting down Workspace Chat API...")


app = FastAPI(
    title="Workspace Chat API",
    description="Streaming workspace and thread chat sessions",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(router)


@app.get("/health", response_model=HealthOut)
async def health_check() -> HealthOut:
    return HealthOut()
