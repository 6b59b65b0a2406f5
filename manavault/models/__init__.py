from manavault.models.deck import VaultDeck
from manavault.models.mana import (
    COLOR_SYMBOLS,
    Color,
    ColorRequirement,
    DeckCardEntry,
    DeckManaAnalysis,
    InvalidArgumentError,
    ManaHealthScore,
    ManaStatus,
)

__all__ = [
    "COLOR_SYMBOLS",
    "Color",
    "ColorRequirement",
    "DeckCardEntry",
    "DeckManaAnalysis",
    "InvalidArgumentError",
    "ManaHealthScore",
    "ManaStatus",
    "VaultDeck",
]
