"""
Mana analysis API endpoints.

Stateless analysis of a posted card list, and cached analysis of decks
stored in the vault.
"""

from datetime import datetime
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from manavault.analysis.mana import analyze
from manavault.config import settings
from manavault.db.database import get_session
from manavault.models.mana import DeckCardEntry, InvalidArgumentError
from manavault.parsers.mana_sources import entry_from_scryfall
from manavault.services.mana_analysis import analysis_to_payload, get_deck_mana_analysis

router = APIRouter(prefix="/mana", tags=["mana"])


class DeckCardRequest(BaseModel):
    """
    One mainboard card.

    Mana source fields may be given explicitly. When `produces_mana` is
    omitted, the card is classified from its Scryfall fields
    (`type_line`, `oracle_text`, `produced_mana`).
    """

    name: str = Field(min_length=1)
    quantity: int = Field(default=1, ge=1)
    mana_cost: str | None = None
    produces_mana: list[str] | None = None
    enters_untapped: bool | None = None
    is_land: bool | None = None
    type_line: str | None = None
    oracle_text: str | None = None
    produced_mana: list[str] | None = None

    def to_entry(self) -> DeckCardEntry:
        """Build analysis input, classifying the card where fields are missing."""
        classified = entry_from_scryfall(
            {
                "name": self.name,
                "mana_cost": self.mana_cost,
                "type_line": self.type_line,
                "oracle_text": self.oracle_text,
                "produced_mana": self.produced_mana,
            },
            quantity=self.quantity,
        )
        return DeckCardEntry(
            name=self.name,
            mana_cost=self.mana_cost,
            produces_mana=(
                frozenset(self.produces_mana)
                if self.produces_mana is not None
                else classified.produces_mana
            ),
            quantity=self.quantity,
            enters_untapped=(
                self.enters_untapped
                if self.enters_untapped is not None
                else classified.enters_untapped
            ),
            is_land=self.is_land if self.is_land is not None else classified.is_land,
        )


class AnalyzeRequest(BaseModel):
    """Request to analyze a card list."""

    cards: list[DeckCardRequest] = Field(default_factory=list)
    deck_size: int | None = Field(default=None, ge=1)
    starting_hand_size: int | None = Field(default=None, ge=0)
    on_play: bool = True


class ColorRequirementResponse(BaseModel):
    """Availability of one color."""

    color: str
    pips_required: float
    sources_in_deck: int
    effective_sources: int
    land_sources: int
    nonland_sources: int
    cards_needing_color: int
    prob_turn_1: float = Field(ge=0.0, le=1.0)
    prob_turn_3: float = Field(ge=0.0, le=1.0)
    prob_turn_5: float = Field(ge=0.0, le=1.0)
    threshold: float
    recommended_sources: int
    source_delta: int
    status: str
    recommendation: str


class ManaHealthScoreResponse(BaseModel):
    """Aggregate mana base health."""

    overall_score: float = Field(ge=0.0, le=100.0)
    grade: str
    colors_optimal: int
    colors_adequate: int
    colors_insufficient: int
    total_lands: int
    unique_mana_sources: int
    total_color_pips: float
    fixing_lands: int
    recommendations: list[str] = Field(default_factory=list)


class ManaAnalysisResponse(BaseModel):
    """Response model for a card list analysis."""

    total_cards: int
    mana_analysis: list[ColorRequirementResponse]
    health_score: ManaHealthScoreResponse
    diagnostics: list[str] = Field(default_factory=list)


class DeckManaAnalysisResponse(ManaAnalysisResponse):
    """Response model for a stored deck's analysis."""

    deck_id: str
    deck_name: str
    commanders: list[str] = Field(default_factory=list)
    color_identity: list[str] = Field(default_factory=list)
    cached: bool = False
    analyzed_at: datetime | None = None


def _analysis_fields(payload: dict[str, Any]) -> dict[str, Any]:
    return {
        "total_cards": payload["total_cards"],
        "mana_analysis": payload["color_requirements"],
        "health_score": payload["health_score"],
        "diagnostics": payload.get("diagnostics", []),
    }


@router.post("/analyze", response_model=ManaAnalysisResponse)
async def analyze_cards(request: AnalyzeRequest) -> ManaAnalysisResponse:
    """
    Analyze a posted card list.

    Nothing is stored. Unparseable mana costs are reported in `diagnostics`.
    """
    entries = [card.to_entry() for card in request.cards]
    try:
        analysis = analyze(
            entries,
            deck_size=request.deck_size or settings.default_deck_size,
            starting_hand_size=(
                request.starting_hand_size
                if request.starting_hand_size is not None
                else settings.default_starting_hand_size
            ),
            on_play=request.on_play,
        )
    except InvalidArgumentError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    return ManaAnalysisResponse(**_analysis_fields(analysis_to_payload(analysis)))


@router.get("/decks/{deck_id}", response_model=DeckManaAnalysisResponse)
async def get_deck_analysis(
    deck_id: str,
    session: Annotated[AsyncSession, Depends(get_session)],
    deck_size: Annotated[int | None, Query(ge=1)] = None,
    starting_hand_size: Annotated[int | None, Query(ge=0)] = None,
    on_play: bool = True,
    refresh: bool = False,
) -> DeckManaAnalysisResponse:
    """
    Get the mana analysis for a stored deck.

    Served from the cache while the deck's cards are unchanged.
    `refresh=true` recomputes the analysis and replaces the cached copy.
    """
    try:
        result = await get_deck_mana_analysis(
            session,
            deck_id,
            deck_size=deck_size,
            starting_hand_size=starting_hand_size,
            on_play=on_play,
            force_refresh=refresh,
        )
    except InvalidArgumentError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    if result is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Deck '{deck_id}' not found",
        )

    return DeckManaAnalysisResponse(
        deck_id=result.deck_id,
        deck_name=result.deck_name,
        commanders=result.commanders,
        color_identity=result.color_identity,
        cached=result.cached,
        analyzed_at=result.analyzed_at,
        **_analysis_fields(result.analysis),
    )
