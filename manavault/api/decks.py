"""
Deck API endpoints.

Store, fetch and delete vault decks. Saving a deck replaces its mainboard
and invalidates its cached mana analysis.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from manavault.api.mana import DeckCardRequest
from manavault.db import delete_deck, deck_to_model, get_deck, upsert_deck
from manavault.db.database import get_session
from manavault.models.deck import VaultDeck

router = APIRouter(prefix="/decks", tags=["decks"])


class DeckUpsertRequest(BaseModel):
    """Request to create or replace a deck."""

    name: str = Field(min_length=1)
    commanders: list[str] = Field(default_factory=list)
    color_identity: list[str] = Field(default_factory=list)
    cards: list[DeckCardRequest] = Field(default_factory=list)


class DeckCardResponse(BaseModel):
    """A stored mainboard card."""

    name: str
    quantity: int
    mana_cost: str | None = None
    is_land: bool
    produces_mana: list[str] = Field(default_factory=list)
    enters_untapped: bool


class DeckResponse(BaseModel):
    """Response model for a single deck."""

    deck_id: str
    name: str
    commanders: list[str] = Field(default_factory=list)
    color_identity: list[str] = Field(default_factory=list)
    total_cards: int
    total_lands: int
    cards: list[DeckCardResponse] = Field(default_factory=list)


def _deck_response(deck: VaultDeck) -> DeckResponse:
    return DeckResponse(
        deck_id=deck.deck_id,
        name=deck.name,
        commanders=deck.commanders,
        color_identity=deck.color_identity,
        total_cards=deck.maindeck_count(),
        total_lands=deck.land_count(),
        cards=[
            DeckCardResponse(
                name=card.name,
                quantity=card.quantity,
                mana_cost=card.mana_cost,
                is_land=card.is_land,
                produces_mana=sorted(card.produces_mana),
                enters_untapped=card.enters_untapped,
            )
            for card in deck.cards
        ],
    )


@router.put("/{deck_id}", response_model=DeckResponse)
async def put_deck(
    deck_id: str,
    request: DeckUpsertRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> DeckResponse:
    """
    Create or replace a deck.

    Duplicate card names are merged by summing quantities.
    """
    merged: dict[str, DeckCardRequest] = {}
    for card in request.cards:
        if card.name in merged:
            existing = merged[card.name]
            merged[card.name] = existing.model_copy(
                update={"quantity": existing.quantity + card.quantity}
            )
        else:
            merged[card.name] = card

    deck = VaultDeck(
        deck_id=deck_id,
        name=request.name,
        commanders=request.commanders,
        color_identity=[c.upper() for c in request.color_identity],
        cards=[card.to_entry() for card in merged.values()],
    )
    await upsert_deck(session, deck)
    return _deck_response(deck)


@router.get("/{deck_id}", response_model=DeckResponse)
async def get_deck_by_id(
    deck_id: str,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> DeckResponse:
    """Get a stored deck and its mainboard."""
    db_deck = await get_deck(session, deck_id)
    if db_deck is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Deck '{deck_id}' not found",
        )
    return _deck_response(deck_to_model(db_deck))


@router.delete("/{deck_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_deck(
    deck_id: str,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> Response:
    """Delete a deck and its cached analysis."""
    deleted = await delete_deck(session, deck_id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Deck '{deck_id}' not found",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
