from manavault.services.mana_analysis import (
    DeckAnalysisResult,
    analysis_to_payload,
    get_deck_mana_analysis,
)

__all__ = [
    "DeckAnalysisResult",
    "analysis_to_payload",
    "get_deck_mana_analysis",
]
