from manavault.api.decks import router as decks_router
from manavault.api.health import router as health_router
from manavault.api.mana import router as mana_router

__all__ = [
    "decks_router",
    "health_router",
    "mana_router",
]
