"""
Mana base analysis models.

Value objects produced by a single analysis call. Nothing here has identity
beyond the call that built it; recomputing from the same card list yields
equal objects.
"""

from dataclasses import dataclass, field
from enum import Enum


class Color(str, Enum):
    """The five colors of Magic, in WUBRG order."""

    WHITE = "W"
    BLUE = "U"
    BLACK = "B"
    RED = "R"
    GREEN = "G"

    @property
    def display_name(self) -> str:
        return _COLOR_NAMES[self]


_COLOR_NAMES = {
    Color.WHITE: "White",
    Color.BLUE: "Blue",
    Color.BLACK: "Black",
    Color.RED: "Red",
    Color.GREEN: "Green",
}

COLOR_SYMBOLS = frozenset(c.value for c in Color)


class ManaStatus(str, Enum):
    """How well a color's turn-3 availability meets its target."""

    OPTIMAL = "✅ Optimal"
    ADEQUATE = "⚠️ Adequate"
    INSUFFICIENT = "❌ Insufficient"


@dataclass(frozen=True, slots=True)
class DeckCardEntry:
    """
    One distinct card in a deck's mainboard.

    Attributes:
        name: Card name
        mana_cost: Scryfall-style cost string (e.g. "{2}{G}{G}"), None for lands
        produces_mana: Color symbols this card can produce (empty if none)
        quantity: Number of copies (1 for nonbasic cards in Commander)
        enters_untapped: False for sources that enter the battlefield tapped
        is_land: True for land cards (excluded from pip counting)
    """

    name: str
    mana_cost: str | None = None
    produces_mana: frozenset[str] = field(default_factory=frozenset)
    quantity: int = 1
    enters_untapped: bool = True
    is_land: bool = False

    def __post_init__(self) -> None:
        # Accept any iterable of symbols; store as a normalized frozenset
        object.__setattr__(
            self, "produces_mana", frozenset(s.upper() for s in self.produces_mana)
        )

    @property
    def is_mana_source(self) -> bool:
        return bool(self.produces_mana & COLOR_SYMBOLS)


@dataclass(frozen=True, slots=True)
class ColorRequirement:
    """
    Analysis of one color the deck's spells ask for.

    Probabilities are fractions in [0, 1] of having seen at least one
    source of this color by the given turn.
    """

    color: Color
    pips_required: float
    sources_in_deck: int
    effective_sources: int
    land_sources: int
    nonland_sources: int
    cards_needing_color: int
    prob_turn_1: float
    prob_turn_3: float
    prob_turn_5: float
    threshold: float
    recommended_sources: int
    source_delta: int
    status: ManaStatus
    recommendation: str


@dataclass(frozen=True, slots=True)
class ManaHealthScore:
    """Aggregate mana base health derived from the per-color results."""

    overall_score: float
    grade: str
    colors_optimal: int
    colors_adequate: int
    colors_insufficient: int
    total_lands: int
    unique_mana_sources: int
    total_color_pips: float
    fixing_lands: int
    recommendations: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class DeckManaAnalysis:
    """Complete result of analyzing one deck's mana base."""

    color_requirements: tuple[ColorRequirement, ...]
    health_score: ManaHealthScore
    total_cards: int = 0
    diagnostics: tuple[str, ...] = ()

    def get_color(self, color: Color | str) -> ColorRequirement | None:
        """Find the analysis for a color, or None if it was not analyzed."""
        symbol = Color(color)
        return next((r for r in self.color_requirements if r.color == symbol), None)

    @property
    def analyzed_colors(self) -> list[Color]:
        return [r.color for r in self.color_requirements]


class InvalidArgumentError(ValueError):
    """
    Raised when analysis is called with arguments no real deck can have.

    This signals a programming error upstream (negative quantities,
    non-positive deck sizes), not bad deck data.
    """

    def __init__(self, argument: str, value: object, reason: str):
        self.argument = argument
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {argument}={value!r}: {reason}")
