"""Tests for database CRUD operations."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

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
from manavault.models.db import Base
from manavault.models.deck import VaultDeck
from manavault.models.mana import DeckCardEntry


@pytest.fixture
async def async_engine():
    """Create an in-memory SQLite engine for testing."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def session(async_engine) -> AsyncSession:
    """Provide a database session for tests."""
    async_session = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)
    async with async_session() as session:
        yield session


@pytest.fixture
def selesnya_deck() -> VaultDeck:
    return VaultDeck(
        deck_id="trostani-tokens",
        name="Trostani Tokens",
        commanders=["Trostani, Selesnya's Voice"],
        color_identity=["G", "W"],
        cards=[
            DeckCardEntry(name="Forest", produces_mana={"G"}, quantity=15, is_land=True),
            DeckCardEntry(name="Plains", produces_mana={"W"}, quantity=15, is_land=True),
            DeckCardEntry(
                name="Scattered Groves",
                produces_mana={"G", "W"},
                enters_untapped=False,
                is_land=True,
            ),
            DeckCardEntry(name="Avenger of Zendikar", mana_cost="{5}{G}{G}"),
            DeckCardEntry(name="Anointed Procession", mana_cost="{3}{W}"),
        ],
    )


class TestDeckOperations:
    async def test_upsert_creates_deck(self, session: AsyncSession, selesnya_deck: VaultDeck) -> None:
        """Saving a new deck stores every card row."""
        db_deck = await upsert_deck(session, selesnya_deck)
        await session.commit()

        assert db_deck.id is not None
        assert db_deck.name == "Trostani Tokens"
        assert len(db_deck.cards) == 5

    async def test_get_deck(self, session: AsyncSession, selesnya_deck: VaultDeck) -> None:
        await upsert_deck(session, selesnya_deck)
        await session.commit()

        db_deck = await get_deck(session, "trostani-tokens")

        assert db_deck is not None
        assert db_deck.commanders == ["Trostani, Selesnya's Voice"]
        assert db_deck.color_identity == ["G", "W"]

    async def test_get_deck_not_found(self, session: AsyncSession) -> None:
        assert await get_deck(session, "missing") is None

    async def test_upsert_replaces_cards(
        self, session: AsyncSession, selesnya_deck: VaultDeck
    ) -> None:
        """Saving an existing deck replaces its mainboard."""
        await upsert_deck(session, selesnya_deck)
        await session.commit()

        updated = VaultDeck(
            deck_id="trostani-tokens",
            name="Trostani Tokens v2",
            commanders=["Trostani, Selesnya's Voice"],
            color_identity=["G", "W"],
            cards=[
                DeckCardEntry(name="Forest", produces_mana={"G"}, quantity=20, is_land=True),
                DeckCardEntry(name="Craterhoof Behemoth", mana_cost="{5}{G}{G}{G}"),
            ],
        )
        await upsert_deck(session, updated)
        await session.commit()

        db_deck = await get_deck(session, "trostani-tokens")
        assert db_deck is not None
        assert db_deck.name == "Trostani Tokens v2"
        assert sorted(c.card_name for c in db_deck.cards) == ["Craterhoof Behemoth", "Forest"]
        assert await count_decks(session) == 1

    async def test_delete_deck(self, session: AsyncSession, selesnya_deck: VaultDeck) -> None:
        await upsert_deck(session, selesnya_deck)
        await session.commit()

        assert await delete_deck(session, "trostani-tokens") is True
        await session.commit()

        assert await get_deck(session, "trostani-tokens") is None

    async def test_delete_missing_deck(self, session: AsyncSession) -> None:
        assert await delete_deck(session, "missing") is False

    async def test_list_deck_ids_pages(self, session: AsyncSession) -> None:
        """Deck ids come back in insertion order."""
        for i in range(5):
            await upsert_deck(session, VaultDeck(deck_id=f"deck-{i}", name=f"Deck {i}"))
        await session.commit()

        assert await list_deck_ids(session, limit=2) == ["deck-0", "deck-1"]
        assert await list_deck_ids(session, limit=2, offset=4) == ["deck-4"]
        assert await count_decks(session) == 5


class TestConversions:
    async def test_round_trip_entries(
        self, session: AsyncSession, selesnya_deck: VaultDeck
    ) -> None:
        """Stored rows convert back to the same analysis input."""
        db_deck = await upsert_deck(session, selesnya_deck)
        await session.commit()

        entries = deck_to_entries(db_deck)

        assert sorted(entries, key=lambda e: e.name) == sorted(
            selesnya_deck.cards, key=lambda e: e.name
        )

    async def test_deck_to_model(self, session: AsyncSession, selesnya_deck: VaultDeck) -> None:
        db_deck = await upsert_deck(session, selesnya_deck)
        await session.commit()

        model = deck_to_model(db_deck)

        assert model.deck_id == "trostani-tokens"
        assert model.maindeck_count() == 33
        assert model.land_count() == 31


class TestCardListHash:
    def test_order_independent(self, selesnya_deck: VaultDeck) -> None:
        reversed_cards = list(reversed(selesnya_deck.cards))

        assert card_list_hash(selesnya_deck.cards) == card_list_hash(reversed_cards)

    def test_quantity_changes_hash(self, selesnya_deck: VaultDeck) -> None:
        changed = [
            DeckCardEntry(name="Forest", produces_mana={"G"}, quantity=16, is_land=True),
            *selesnya_deck.cards[1:],
        ]

        assert card_list_hash(selesnya_deck.cards) != card_list_hash(changed)

    def test_params_change_hash(self, selesnya_deck: VaultDeck) -> None:
        assert card_list_hash(selesnya_deck.cards, deck_size=99) != card_list_hash(
            selesnya_deck.cards, deck_size=60
        )


class TestAnalysisCache:
    async def test_store_and_get(self, session: AsyncSession) -> None:
        await store_cached_analysis(session, "deck-1", "abc123", {"total_cards": 99})
        await session.commit()

        cached = await get_cached_analysis(session, "deck-1")

        assert cached is not None
        assert cached.card_list_hash == "abc123"
        assert cached.analysis == {"total_cards": 99}
        assert cached.analyzed_at is not None

    async def test_store_replaces(self, session: AsyncSession) -> None:
        """Only one cached analysis is kept per deck."""
        await store_cached_analysis(session, "deck-1", "old", {"total_cards": 98})
        await store_cached_analysis(session, "deck-1", "new", {"total_cards": 99})
        await session.commit()

        cached = await get_cached_analysis(session, "deck-1")

        assert cached is not None
        assert cached.card_list_hash == "new"
        assert cached.analysis == {"total_cards": 99}

    async def test_invalidate(self, session: AsyncSession) -> None:
        await store_cached_analysis(session, "deck-1", "abc123", {})
        await session.commit()

        assert await invalidate_cached_analysis(session, "deck-1") == 1
        assert await invalidate_cached_analysis(session, "deck-1") == 0
        assert await get_cached_analysis(session, "deck-1") is None

    async def test_upsert_deck_invalidates_cache(
        self, session: AsyncSession, selesnya_deck: VaultDeck
    ) -> None:
        """Changing a deck drops its cached analysis."""
        await upsert_deck(session, selesnya_deck)
        await store_cached_analysis(session, "trostani-tokens", "abc123", {})
        await session.commit()

        await upsert_deck(session, selesnya_deck)
        await session.commit()

        assert await get_cached_analysis(session, "trostani-tokens") is None
