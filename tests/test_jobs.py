"""Tests for scheduled jobs."""

from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from manavault.db.operations import get_cached_analysis, upsert_deck
from manavault.jobs.populate_analysis_cache import BatchResult, populate_analysis_cache
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
def session_factory(async_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def seeded_decks(
    session_factory: async_sessionmaker[AsyncSession], mono_green_deck: list[DeckCardEntry]
) -> list[str]:
    deck_ids = ["deck-a", "deck-b", "deck-c"]
    async with session_factory() as session:
        for deck_id in deck_ids:
            await upsert_deck(
                session, VaultDeck(deck_id=deck_id, name=deck_id, cards=mono_green_deck)
            )
        await session.commit()
    return deck_ids


class TestBatchResult:
    def test_processed(self) -> None:
        result = BatchResult(analyzed=2, cached=1, failed=["x"])

        assert result.processed == 4


class TestPopulateAnalysisCache:
    async def test_analyzes_every_deck(
        self, session_factory: async_sessionmaker[AsyncSession], seeded_decks: list[str]
    ) -> None:
        result = await populate_analysis_cache(session_factory=session_factory)

        assert result.analyzed == 3
        assert result.cached == 0
        assert result.failed == []

        async with session_factory() as session:
            for deck_id in seeded_decks:
                assert await get_cached_analysis(session, deck_id) is not None

    async def test_second_run_hits_cache(
        self, session_factory: async_sessionmaker[AsyncSession], seeded_decks: list[str]
    ) -> None:
        await populate_analysis_cache(session_factory=session_factory)

        result = await populate_analysis_cache(session_factory=session_factory)

        assert result.analyzed == 0
        assert result.cached == 3

    async def test_batch_window(
        self, session_factory: async_sessionmaker[AsyncSession], seeded_decks: list[str]
    ) -> None:
        result = await populate_analysis_cache(
            batch_size=1, offset_start=1, session_factory=session_factory
        )

        assert result.processed == 1
        async with session_factory() as session:
            assert await get_cached_analysis(session, "deck-a") is None
            assert await get_cached_analysis(session, "deck-b") is not None

    async def test_logs_batch_against_total(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        seeded_decks: list[str],
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        with caplog.at_level("INFO", logger="manavault.jobs.populate_analysis_cache"):
            await populate_analysis_cache(batch_size=2, session_factory=session_factory)

        assert "for 2 of 3 stored decks" in caplog.text

    async def test_empty_database(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        result = await populate_analysis_cache(session_factory=session_factory)

        assert result.processed == 0

    async def test_database_error_recorded(
        self, session_factory: async_sessionmaker[AsyncSession], seeded_decks: list[str]
    ) -> None:
        """A failing deck is recorded and the batch continues."""
        with patch(
            "manavault.jobs.populate_analysis_cache.get_deck_mana_analysis",
            new_callable=AsyncMock,
            side_effect=OperationalError("SELECT", {}, Exception("database is locked")),
        ):
            result = await populate_analysis_cache(session_factory=session_factory)

        assert result.failed == seeded_decks
        assert result.analyzed == 0

    async def test_missing_deck_recorded(
        self, session_factory: async_sessionmaker[AsyncSession], seeded_decks: list[str]
    ) -> None:
        with patch(
            "manavault.jobs.populate_analysis_cache.get_deck_mana_analysis",
            new_callable=AsyncMock,
            return_value=None,
        ):
            result = await populate_analysis_cache(session_factory=session_factory)

        assert result.failed == seeded_decks
