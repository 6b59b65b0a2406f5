"""
Mana availability analysis.

Computes, for each color a deck's spells require, the probability of having
seen at least one source of that color by turns 1, 3 and 5, and rolls the
per-color results into a graded health score.

The model is closed-form hypergeometric. Sources that enter tapped are
discounted by a fixed weight on the early checkpoints; draw order is not
simulated.
"""

import logging
import math
from collections.abc import Sequence

from manavault.analysis.hypergeometric import cards_seen, prob_at_least_one
from manavault.analysis.mana_cost import count_pips
from manavault.models.mana import (
    Color,
    ColorRequirement,
    DeckCardEntry,
    DeckManaAnalysis,
    InvalidArgumentError,
    ManaHealthScore,
    ManaStatus,
)

logger = logging.getLogger(__name__)

DEFAULT_DECK_SIZE = 99
DEFAULT_STARTING_HAND_SIZE = 7

CHECKPOINT_TURNS = (1, 3, 5)

# Weight of a tapped source on turns 1 and 3 (roughly a one-turn delay)
TAPPED_SOURCE_WEIGHT = 0.65

HEAVY_PIPS = 8
MODERATE_PIPS = 3
HEAVY_THRESHOLD = 0.90
MODERATE_THRESHOLD = 0.75
SPLASH_THRESHOLD = 0.60
ADEQUATE_MARGIN = 0.10

# (lower bound, grade), checked top-down; each band is half-open [bound, next)
GRADE_TABLE: tuple[tuple[float, str], ...] = (
    (97.0, "A+"),
    (93.0, "A"),
    (90.0, "A-"),
    (87.0, "B+"),
    (83.0, "B"),
    (80.0, "B-"),
    (77.0, "C+"),
    (73.0, "C"),
    (70.0, "C-"),
    (60.0, "D"),
)

NO_DATA_RECOMMENDATION = "No cards to analyze. Add a decklist to see mana base recommendations."
NO_COLOR_RECOMMENDATION = "This deck has no colored mana requirements."
BALANCED_RECOMMENDATION = "Mana base meets the turn-3 target for every color."


def grade_for_score(score: float) -> str:
    """Map an overall score in [0, 100] to a letter grade."""
    for lower_bound, grade in GRADE_TABLE:
        if score >= lower_bound:
            return grade
    return "F"


def threshold_for_pips(pips: float) -> float:
    """Turn-3 probability target for a color with this many pips."""
    if pips >= HEAVY_PIPS:
        return HEAVY_THRESHOLD
    if pips >= MODERATE_PIPS:
        return MODERATE_THRESHOLD
    return SPLASH_THRESHOLD


def classify_status(probability: float, threshold: float) -> ManaStatus:
    """Compare a turn-3 probability against its target."""
    if probability >= threshold:
        return ManaStatus.OPTIMAL
    if probability >= threshold - ADEQUATE_MARGIN:
        return ManaStatus.ADEQUATE
    return ManaStatus.INSUFFICIENT


def additional_sources_needed(
    deck_size: int,
    sources: int,
    draws: int,
    threshold: float,
) -> int:
    """
    Estimate how many more sources reach the threshold.

    The marginal gain of one more source (finite difference at K + 1)
    converts the probability shortfall into a source count.
    """
    current = prob_at_least_one(deck_size, sources, draws)
    shortfall = threshold - current
    if shortfall <= 0:
        return 0

    gain = prob_at_least_one(deck_size, sources + 1, draws) - current
    if gain <= 0:
        return 0
    return math.ceil(shortfall / gain)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _validate(cards: Sequence[DeckCardEntry], deck_size: int, starting_hand_size: int) -> None:
    if deck_size <= 0:
        raise InvalidArgumentError("deck_size", deck_size, "must be positive")
    if starting_hand_size < 0:
        raise InvalidArgumentError("starting_hand_size", starting_hand_size, "must not be negative")
    for card in cards:
        if card.quantity < 1:
            raise InvalidArgumentError(
                "quantity", card.quantity, f"card '{card.name}' must have at least one copy"
            )


def _empty_analysis(
    score: float,
    recommendation: str,
    total_cards: int = 0,
    total_lands: int = 0,
    unique_sources: int = 0,
    diagnostics: Sequence[str] = (),
) -> DeckManaAnalysis:
    """Result for decks with no colors to analyze."""
    return DeckManaAnalysis(
        color_requirements=(),
        health_score=ManaHealthScore(
            overall_score=score,
            grade=grade_for_score(score),
            colors_optimal=0,
            colors_adequate=0,
            colors_insufficient=0,
            total_lands=total_lands,
            unique_mana_sources=unique_sources,
            total_color_pips=0.0,
            fixing_lands=0,
            recommendations=(recommendation,),
        ),
        total_cards=total_cards,
        diagnostics=tuple(diagnostics),
    )


def _recommendation_text(
    color: Color, status: ManaStatus, sources: int, needed: int, threshold: float
) -> str:
    target = f"{threshold:.0%} turn-3 target"
    if status == ManaStatus.OPTIMAL:
        return f"{sources} {color.display_name} sources meet the {target}."
    plural = "source" if needed == 1 else "sources"
    if status == ManaStatus.ADEQUATE:
        return f"Consider adding {needed} more {color.display_name} {plural} to reach the {target}."
    return f"Add {needed} more {color.display_name} {plural} to reach the {target}."


def analyze(
    cards: Sequence[DeckCardEntry],
    deck_size: int = DEFAULT_DECK_SIZE,
    starting_hand_size: int = DEFAULT_STARTING_HAND_SIZE,
    on_play: bool = True,
) -> DeckManaAnalysis:
    """
    Analyze a deck's mana base.

    Args:
        cards: Full mainboard (lands and spells together)
        deck_size: Library size N used by the draw model
        starting_hand_size: Opening hand size
        on_play: False adds the turn-1 draw

    Returns:
        DeckManaAnalysis with per-color results and a health score

    Raises:
        InvalidArgumentError: For non-positive deck size, negative hand size
            or card quantities below one
    """
    _validate(cards, deck_size, starting_hand_size)

    if not cards:
        return _empty_analysis(0.0, NO_DATA_RECOMMENDATION)

    total_cards = sum(card.quantity for card in cards)

    diagnostics: list[str] = []
    pips: dict[Color, float] = dict.fromkeys(Color, 0.0)
    cards_needing: dict[Color, int] = dict.fromkeys(Color, 0)

    for card in cards:
        if card.is_land:
            continue
        card_pips, error = count_pips(card.mana_cost)
        if error is not None:
            logger.warning("Skipping mana cost of %s: %s", card.name, error)
            diagnostics.append(f"{card.name}: {error}")
            continue
        for symbol, weight in card_pips.items():
            color = Color(symbol)
            pips[color] += weight * card.quantity
            cards_needing[color] += card.quantity

    analyzed = [color for color in Color if pips[color] > 0]
    analyzed_symbols = {color.value for color in analyzed}

    total_lands = sum(card.quantity for card in cards if card.is_land)
    sources = [card for card in cards if card.is_mana_source]
    fixing_lands = sum(
        card.quantity for card in sources if len(card.produces_mana & analyzed_symbols) >= 2
    )

    if not analyzed:
        # Nothing colored to cast, so no color can be short
        return _empty_analysis(
            100.0,
            NO_COLOR_RECOMMENDATION,
            total_cards=total_cards,
            total_lands=total_lands,
            unique_sources=len(sources),
            diagnostics=diagnostics,
        )

    draws = {
        turn: min(cards_seen(turn, starting_hand_size, on_play), deck_size)
        for turn in CHECKPOINT_TURNS
    }

    requirements: list[ColorRequirement] = []
    for color in analyzed:
        producers = [card for card in sources if color.value in card.produces_mana]
        raw_sources = sum(card.quantity for card in producers)
        land_sources = sum(card.quantity for card in producers if card.is_land)
        weighted = sum(
            card.quantity * (1.0 if card.enters_untapped else TAPPED_SOURCE_WEIGHT)
            for card in producers
        )
        effective = min(_round_half_up(weighted), deck_size)

        prob_turn_1 = prob_at_least_one(deck_size, effective, draws[1])
        prob_turn_3 = prob_at_least_one(deck_size, effective, draws[3])
        # Tapped sources have caught up by turn 5
        prob_turn_5 = prob_at_least_one(deck_size, raw_sources, draws[5])

        threshold = threshold_for_pips(pips[color])
        status = classify_status(prob_turn_3, threshold)
        needed = (
            0
            if status == ManaStatus.OPTIMAL
            else additional_sources_needed(deck_size, effective, draws[3], threshold)
        )

        requirements.append(
            ColorRequirement(
                color=color,
                pips_required=pips[color],
                sources_in_deck=raw_sources,
                effective_sources=effective,
                land_sources=land_sources,
                nonland_sources=raw_sources - land_sources,
                cards_needing_color=cards_needing[color],
                prob_turn_1=prob_turn_1,
                prob_turn_3=prob_turn_3,
                prob_turn_5=prob_turn_5,
                threshold=threshold,
                recommended_sources=raw_sources + needed,
                source_delta=-needed,
                status=status,
                recommendation=_recommendation_text(color, status, raw_sources, needed, threshold),
            )
        )

    health = _health_score(requirements, total_lands, len(sources), fixing_lands)
    return DeckManaAnalysis(
        color_requirements=tuple(requirements),
        health_score=health,
        total_cards=total_cards,
        diagnostics=tuple(diagnostics),
    )


def _health_score(
    requirements: list[ColorRequirement],
    total_lands: int,
    unique_sources: int,
    fixing_lands: int,
) -> ManaHealthScore:
    """Pip-weighted aggregate of the per-color results."""
    total_pips = sum(r.pips_required for r in requirements)
    weighted = sum(
        r.pips_required * min(100.0, 100.0 * r.prob_turn_3 / r.threshold) for r in requirements
    )
    # Clamped: float error in the weighted mean must not push it past 100
    score = min(100.0, weighted / total_pips)

    by_status = {status: [r for r in requirements if r.status == status] for status in ManaStatus}

    recommendations = [
        r.recommendation
        for status in (ManaStatus.INSUFFICIENT, ManaStatus.ADEQUATE)
        for r in by_status[status]
    ]
    if len(requirements) >= 2 and fixing_lands == 0:
        recommendations.append(
            "No sources produce more than one of this deck's colors. "
            "Dual lands or mana rocks that tap for several colors improve consistency."
        )
    if not recommendations:
        recommendations.append(BALANCED_RECOMMENDATION)

    return ManaHealthScore(
        overall_score=score,
        grade=grade_for_score(score),
        colors_optimal=len(by_status[ManaStatus.OPTIMAL]),
        colors_adequate=len(by_status[ManaStatus.ADEQUATE]),
        colors_insufficient=len(by_status[ManaStatus.INSUFFICIENT]),
        total_lands=total_lands,
        unique_mana_sources=unique_sources,
        total_color_pips=total_pips,
        fixing_lands=fixing_lands,
        recommendations=tuple(recommendations),
    )
