from manavault.db.database import get_session, init_db
from manavault.db.operations import (
    card_list_hash,
    count_decks,
    deck_to_entries,
    deck_to_model,
    delete_deck,
    get_cached_analysis,
    get_deck,
    invalidate_cached_analysis,
    list_deck_ids,
    store_cached_analysis,
    upsert_deck,
)

__all__ = [
    "card_list_hash",
    "count_decks",
    "deck_to_entries",
    "deck_to_model",
    "delete_deck",
    "get_cached_analysis",
    "get_deck",
    "get_session",
    "init_db",
    "invalidate_cached_analysis",
    "list_deck_ids",
    "store_cached_analysis",
    "upsert_deck",
]
