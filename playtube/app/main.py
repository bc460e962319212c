# playtube/app/main.py
from __future__ import annotations
import logging
import sys
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from playtube.app.config import settings
from playtube.app.errors import register_exception_handlers
from playtube.app.routers.auth import router as auth_router
from playtube.app.routers.videos import router as videos_router

# Plain stdout logging, fine for dev and containers
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

app = FastAPI(title="PlayTube API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.FRONTEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(auth_router, prefix=settings.API_PREFIX)
app.include_router(videos_router, prefix=settings.API_PREFIX)


@app.on_event("startup")
async def startup() -> None:
    Path(settings.TEMP_UPLOAD_DIR).mkdir(parents=True, exist_ok=True)


@app.get("/health")
def health():
    return {"ok": True}
