"""
Batch job to populate the mana analysis cache.

Analyzes a page of stored decks and writes any analysis whose cached copy
is missing or stale. Can be run as a standalone script or called from a
scheduler.
"""

import argparse
import asyncio
import logging
from dataclasses import dataclass, field

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from manavault.config import DEFAULT_ANALYSIS_BATCH_SIZE, MAX_ANALYSIS_BATCH_SIZE
from manavault.db.database import async_session_factory, session_scope
from manavault.db.operations import count_decks, list_deck_ids
from manavault.models.mana import InvalidArgumentError
from manavault.services.mana_analysis import get_deck_mana_analysis

logger = logging.getLogger(__name__)


@dataclass
class BatchResult:
    """Outcome of one cache population batch."""

    analyzed: int = 0
    cached: int = 0
    failed: list[str] = field(default_factory=list)

    @property
    def processed(self) -> int:
        return self.analyzed + self.cached + len(self.failed)


async def populate_analysis_cache(
    batch_size: int = DEFAULT_ANALYSIS_BATCH_SIZE,
    offset_start: int = 0,
    session_factory: async_sessionmaker[AsyncSession] | None = None,
) -> BatchResult:
    """
    Analyze a page of decks and refresh their cached analyses.

    Each deck runs in its own transaction so one failure does not
    discard the rest of the batch.

    Args:
        batch_size: Decks to process (capped at MAX_ANALYSIS_BATCH_SIZE)
        offset_start: Index of the first deck, in insertion order
        session_factory: Session factory (defaults to the application's)

    Returns:
        BatchResult with counts of fresh, already-cached and failed decks
    """
    factory = session_factory or async_session_factory
    batch_size = max(1, min(batch_size, MAX_ANALYSIS_BATCH_SIZE))

    async with session_scope(factory) as session:
        total_decks = await count_decks(session)
        deck_ids = await list_deck_ids(session, limit=batch_size, offset=offset_start)

    logger.info(
        "Populating mana analysis cache for %d of %d stored decks (offset %d)",
        len(deck_ids),
        total_decks,
        offset_start,
    )

    result = BatchResult()
    for deck_id in deck_ids:
        try:
            async with session_scope(factory) as session:
                analysis = await get_deck_mana_analysis(session, deck_id, use_cache=True)
        except (SQLAlchemyError, InvalidArgumentError) as e:
            logger.error("Failed to analyze deck %s: %s", deck_id, e)
            result.failed.append(deck_id)
            continue

        if analysis is None:
            # Deleted between listing and analysis
            logger.warning("Deck %s disappeared during batch", deck_id)
            result.failed.append(deck_id)
        elif analysis.cached:
            result.cached += 1
        else:
            result.analyzed += 1

    logger.info(
        "Cache population complete: %d analyzed, %d already cached, %d failed",
        result.analyzed,
        result.cached,
        len(result.failed),
    )
    return result


def main() -> None:
    """CLI entry point for populating the analysis cache."""
    parser = argparse.ArgumentParser(description="Populate the deck mana analysis cache")
    parser.add_argument("--batch-size", type=int, default=DEFAULT_ANALYSIS_BATCH_SIZE)
    parser.add_argument("--offset", type=int, default=0)
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    asyncio.run(populate_analysis_cache(batch_size=args.batch_size, offset_start=args.offset))


if __name__ == "__main__":
    main()
