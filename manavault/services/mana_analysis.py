"""
Deck mana analysis service.

Cache-aside wrapper around the analysis engine: loads a stored deck,
returns the cached analysis when the deck's card list is unchanged, and
recomputes and stores it otherwise.
"""

import logging
from dataclasses import asdict, dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from manavault.analysis.mana import analyze
from manavault.config import settings
from manavault.db.operations import (
    card_list_hash,
    deck_to_entries,
    get_cached_analysis,
    get_deck,
    store_cached_analysis,
)
from manavault.models.mana import DeckManaAnalysis

logger = logging.getLogger(__name__)


def _json_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (frozenset, set)):
        return sorted(value)
    if isinstance(value, (list, tuple)):
        return [_json_value(v) for v in value]
    if isinstance(value, dict):
        return {k: _json_value(v) for k, v in value.items()}
    return value


def analysis_to_payload(analysis: DeckManaAnalysis) -> dict[str, Any]:
    """Convert an analysis to a JSON-safe dict (enums become their values)."""
    return {key: _json_value(value) for key, value in asdict(analysis).items()}


@dataclass
class DeckAnalysisResult:
    """
    Analysis payload for a stored deck plus deck metadata.

    Attributes:
        deck_id: Deck identifier
        deck_name: Deck name
        commanders: Commander names
        color_identity: Commander color identity
        analysis: JSON-safe analysis payload (see analysis_to_payload)
        cached: True if served from the cache
        analyzed_at: When the payload was computed (None if never stored)
    """

    deck_id: str
    deck_name: str
    commanders: list[str]
    color_identity: list[str]
    analysis: dict[str, Any]
    cached: bool
    analyzed_at: datetime | None = None


async def get_deck_mana_analysis(
    session: AsyncSession,
    deck_id: str,
    deck_size: int | None = None,
    starting_hand_size: int | None = None,
    on_play: bool = True,
    use_cache: bool | None = None,
    force_refresh: bool = False,
) -> DeckAnalysisResult | None:
    """
    Get the mana analysis for a stored deck.

    Args:
        session: Database session
        deck_id: Deck to analyze
        deck_size: Library size (defaults to settings)
        starting_hand_size: Opening hand size (defaults to settings)
        on_play: Whether the draw model is on the play
        use_cache: Read and write the cache (defaults to settings)
        force_refresh: Recompute even if the cached analysis is current

    Returns:
        DeckAnalysisResult, or None if the deck does not exist

    Raises:
        InvalidArgumentError: If the parameters are invalid
    """
    db_deck = await get_deck(session, deck_id)
    if db_deck is None:
        return None

    if deck_size is None:
        deck_size = settings.default_deck_size
    if starting_hand_size is None:
        starting_hand_size = settings.default_starting_hand_size
    if use_cache is None:
        use_cache = settings.analysis_cache_enabled

    entries = deck_to_entries(db_deck)
    card_hash = card_list_hash(
        entries,
        deck_size=deck_size,
        starting_hand_size=starting_hand_size,
        on_play=on_play,
    )

    def result(payload: dict[str, Any], cached: bool, at: datetime | None) -> DeckAnalysisResult:
        return DeckAnalysisResult(
            deck_id=db_deck.deck_id,
            deck_name=db_deck.name,
            commanders=list(db_deck.commanders or []),
            color_identity=list(db_deck.color_identity or []),
            analysis=payload,
            cached=cached,
            analyzed_at=at,
        )

    if use_cache and not force_refresh:
        cache_row = await get_cached_analysis(session, deck_id)
        if cache_row is not None and cache_row.card_list_hash == card_hash:
            logger.debug("Serving cached mana analysis for deck %s", deck_id)
            return result(cache_row.analysis, True, cache_row.analyzed_at)

    analysis = analyze(
        entries,
        deck_size=deck_size,
        starting_hand_size=starting_hand_size,
        on_play=on_play,
    )
    payload = analysis_to_payload(analysis)

    if not use_cache:
        return result(payload, False, None)

    stored = await store_cached_analysis(session, deck_id, card_hash, payload)
    logger.info(
        "Analyzed deck %s: grade %s (%d colors)",
        deck_id,
        analysis.health_score.grade,
        len(analysis.color_requirements),
    )
    return result(payload, False, stored.analyzed_at)
