"""
Database CRUD operations.

Provides async functions for storing decks, reading them back as analysis
input, and reading/writing the mana analysis cache.
"""

import hashlib
import json
from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from manavault.models.db import DeckCardDB, DeckDB, ManaAnalysisCacheDB
from manavault.models.deck import VaultDeck
from manavault.models.mana import DeckCardEntry

# --- Deck Operations ---


async def get_deck(session: AsyncSession, deck_id: str) -> DeckDB | None:
    """
    Get a deck with its cards by deck_id.

    Returns None if no deck exists with this id.
    """
    result = await session.execute(
        select(DeckDB).where(DeckDB.deck_id == deck_id).options(selectinload(DeckDB.cards))
    )
    return result.scalar_one_or_none()


async def upsert_deck(session: AsyncSession, deck: VaultDeck) -> DeckDB:
    """
    Insert or replace a deck and its mainboard.

    Existing card rows are replaced and any cached analysis is dropped.
    """
    existing = await get_deck(session, deck.deck_id)

    if existing is None:
        # Initialize the collection so it is never lazy loaded
        existing = DeckDB(deck_id=deck.deck_id, name=deck.name, cards=[])
        session.add(existing)
    else:
        # Flush orphan deletes before inserting rows with the same names
        existing.cards.clear()
        await session.flush()

    existing.name = deck.name
    existing.commanders = list(deck.commanders)
    existing.color_identity = list(deck.color_identity)

    for card in deck.cards:
        existing.cards.append(
            DeckCardDB(
                card_name=card.name,
                quantity=card.quantity,
                mana_cost=card.mana_cost,
                is_land=card.is_land,
                produces_mana=sorted(card.produces_mana),
                enters_untapped=card.enters_untapped,
            )
        )

    await invalidate_cached_analysis(session, deck.deck_id)
    await session.flush()
    return existing


async def delete_deck(session: AsyncSession, deck_id: str) -> bool:
    """
    Delete a deck and its cached analysis.

    Returns True if deleted, False if not found.
    """
    deck = await get_deck(session, deck_id)
    if not deck:
        return False

    await invalidate_cached_analysis(session, deck_id)
    await session.delete(deck)
    return True


async def list_deck_ids(session: AsyncSession, limit: int = 50, offset: int = 0) -> list[str]:
    """Get a page of deck ids in insertion order."""
    result = await session.execute(
        select(DeckDB.deck_id).order_by(DeckDB.id).limit(limit).offset(offset)
    )
    return list(result.scalars().all())


async def count_decks(session: AsyncSession) -> int:
    """Total number of stored decks."""
    result = await session.execute(select(func.count()).select_from(DeckDB))
    return int(result.scalar_one())


def deck_to_entries(db_deck: DeckDB) -> list[DeckCardEntry]:
    """Convert stored card rows to analysis input."""
    return [
        DeckCardEntry(
            name=card.card_name,
            mana_cost=card.mana_cost,
            produces_mana=frozenset(card.produces_mana or ()),
            quantity=card.quantity,
            enters_untapped=card.enters_untapped,
            is_land=card.is_land,
        )
        for card in db_deck.cards
    ]


def deck_to_model(db_deck: DeckDB) -> VaultDeck:
    """Convert a database deck to a domain model."""
    return VaultDeck(
        deck_id=db_deck.deck_id,
        name=db_deck.name,
        commanders=list(db_deck.commanders or []),
        color_identity=list(db_deck.color_identity or []),
        cards=deck_to_entries(db_deck),
    )


def card_list_hash(cards: Sequence[DeckCardEntry], **params: Any) -> str:
    """
    Stable hash of a card list and the analysis parameters.

    Order of cards does not matter; any change to a card's analysis
    inputs changes the hash.
    """
    rows = sorted(
        [
            card.name,
            card.quantity,
            card.mana_cost or "",
            card.is_land,
            sorted(card.produces_mana),
            card.enters_untapped,
        ]
        for card in cards
    )
    payload = json.dumps({"cards": rows, "params": params}, sort_keys=True)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


# --- Analysis Cache Operations ---


async def get_cached_analysis(session: AsyncSession, deck_id: str) -> ManaAnalysisCacheDB | None:
    """Get the cached analysis row for a deck, if any."""
    result = await session.execute(
        select(ManaAnalysisCacheDB).where(ManaAnalysisCacheDB.deck_id == deck_id)
    )
    return result.scalar_one_or_none()


async def store_cached_analysis(
    session: AsyncSession,
    deck_id: str,
    card_hash: str,
    analysis: dict[str, Any],
) -> ManaAnalysisCacheDB:
    """Insert or replace the cached analysis for a deck."""
    now = datetime.now(UTC)
    existing = await get_cached_analysis(session, deck_id)

    if existing:
        existing.card_list_hash = card_hash
        existing.analysis = analysis
        existing.analyzed_at = now
        await session.flush()
        return existing

    cached = ManaAnalysisCacheDB(
        deck_id=deck_id,
        card_list_hash=card_hash,
        analysis=analysis,
        analyzed_at=now,
    )
    session.add(cached)
    await session.flush()
    return cached


async def invalidate_cached_analysis(session: AsyncSession, deck_id: str) -> int:
    """
    Drop the cached analysis for a deck.

    Returns the number of deleted records.
    """
    result = await session.execute(
        delete(ManaAnalysisCacheDB).where(ManaAnalysisCacheDB.deck_id == deck_id)
    )
    # rowcount is available on DELETE results; type stubs incomplete for async
    return int(result.rowcount)  # type: ignore[attr-defined]
