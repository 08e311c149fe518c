# app.py
# AstroAI backend: NASA proxy routes, the daily Mars image and Gemini chat.

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__, config
from .ai_routes import router as ai_router
from .nasa_routes import router as nasa_router
from .upstream import create_http_client

logger = logging.getLogger("astroai")


# -----------------------------------------------------------------------------
# Lifespan & app setup
# -----------------------------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.http_client = create_http_client()
    logger.info(
        f"[STARTUP] HTTP client ready. Timeout={config.HTTP_TIMEOUT_SECONDS}s; "
        f"Gemini {'configured' if config.GEMINI_API_KEY else 'not configured'}"
    )

    yield

    await app.state.http_client.aclose()
    logger.info("[SHUTDOWN] HTTP client closed.")


app = FastAPI(
    title="AstroAI API",
    description="NASA imagery and data proxy with a daily Mars image and an AI space assistant.",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(nasa_router)
app.include_router(ai_router)


@app.get("/api/health", tags=["Ops"], summary="Simple health check.")
async def health():
    return {"status": "ok", "service": "astroai-backend"}


if __name__ == "__main__":
    uvicorn.run("astroai.app:app", host="0.0.0.0", port=config.PORT)
