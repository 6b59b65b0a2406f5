"""
SQLAlchemy ORM models for persistent storage.

Decks and their mainboard rows mirror DeckCardEntry; analysis results are
cached as JSON keyed by deck and card-list hash.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class DeckDB(Base):
    """
    A Commander deck stored in the vault.

    Each deck owns its mainboard card rows.
    """

    __tablename__ = "decks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    deck_id: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    name: Mapped[str] = mapped_column(String(255))
    commanders: Mapped[list[str]] = mapped_column(JSON, default=list)
    color_identity: Mapped[list[str]] = mapped_column(JSON, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    cards: Mapped[list["DeckCardDB"]] = relationship(
        back_populates="deck", cascade="all, delete-orphan", order_by="DeckCardDB.id"
    )

    def __repr__(self) -> str:
        return f"<DeckDB(deck_id={self.deck_id}, name={self.name})>"


class DeckCardDB(Base):
    """
    One distinct mainboard card in a deck.

    Mana source columns are filled in by the classifier when the deck is saved.
    """

    __tablename__ = "deck_cards"
    __table_args__ = (UniqueConstraint("deck_pk", "card_name", name="uq_deck_card"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    deck_pk: Mapped[int] = mapped_column(
        Integer, ForeignKey("decks.id", ondelete="CASCADE"), index=True
    )
    card_name: Mapped[str] = mapped_column(String(255))
    quantity: Mapped[int] = mapped_column(Integer, default=1)
    mana_cost: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_land: Mapped[bool] = mapped_column(Boolean, default=False)
    produces_mana: Mapped[list[str]] = mapped_column(JSON, default=list)
    enters_untapped: Mapped[bool] = mapped_column(Boolean, default=True)

    deck: Mapped["DeckDB"] = relationship(back_populates="cards")

    def __repr__(self) -> str:
        return f"<DeckCardDB(card={self.card_name}, qty={self.quantity})>"


class ManaAnalysisCacheDB(Base):
    """
    Cached mana analysis for a deck.

    Valid only while `card_list_hash` matches the deck's current cards.
    """

    __tablename__ = "deck_mana_analysis_cache"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    deck_id: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    card_list_hash: Mapped[str] = mapped_column(String(64))
    analysis: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)
    # Set by the writer so it is available without a refresh
    analyzed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    def __repr__(self) -> str:
        return f"<ManaAnalysisCacheDB(deck_id={self.deck_id}, hash={self.card_list_hash[:8]})>"
