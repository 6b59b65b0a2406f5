from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from importlib.metadata import version as pkg_version

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from manavault.api import decks_router, health_router, mana_router
from manavault.config import settings
from manavault.db.database import init_db


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    await init_db()
    yield


app = FastAPI(
    title=settings.app_name,
    version=pkg_version("manavault"),
    lifespan=lifespan,
)

app.include_router(decks_router)
app.include_router(health_router)
app.include_router(mana_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=False,
    # Verbs used by the deck (PUT/GET/DELETE) and mana (POST/GET) routers
    allow_methods=["GET", "PUT", "POST", "DELETE"],
    allow_headers=["*"],
)
