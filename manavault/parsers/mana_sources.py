"""
Mana source classification.

Derives what a card contributes to a mana base from Scryfall card data:
whether it is a land, which colors it can produce, and whether it enters
the battlefield tapped.

Card data follows Scryfall's card object:
https://scryfall.com/docs/api/cards
"""

import re
from typing import Any

from manavault.models.mana import COLOR_SYMBOLS, DeckCardEntry

BASIC_LAND_TYPES = {
    "Plains": "W",
    "Island": "U",
    "Swamp": "B",
    "Mountain": "R",
    "Forest": "G",
}

# Only permanents stay on the battlefield to produce mana every turn
NON_PERMANENT_TYPES = ("Instant", "Sorcery")

# The whole "Add ..." sentence; every mana symbol in it is a produced color
ADD_MANA_PATTERN = re.compile(r"\badd\b([^.]*)", re.IGNORECASE)
SYMBOL_PATTERN = re.compile(r"\{([^}]+)\}")
ANY_COLOR_PATTERN = re.compile(r"\badd\s+[^.]*\bmana of any (?:one )?(?:color|type)\b", re.IGNORECASE)
ENTERS_TAPPED_PATTERN = re.compile(
    r"enters(?: the battlefield)? tapped(?P<unless>\s+unless)?", re.IGNORECASE
)


def is_land(type_line: str | None) -> bool:
    """Check whether a card's front face is a land."""
    if not type_line:
        return False
    front = type_line.split("//")[0]
    return "Land" in front.split("—")[0]


def _front_face(card: dict[str, Any]) -> dict[str, Any]:
    faces = card.get("card_faces")
    if faces and "oracle_text" not in card:
        return dict(faces[0])
    return card


def _oracle_text(card: dict[str, Any]) -> str:
    return str(_front_face(card).get("oracle_text") or "")


def _type_line(card: dict[str, Any]) -> str:
    return str(card.get("type_line") or _front_face(card).get("type_line") or "")


def colors_from_text(oracle_text: str) -> frozenset[str]:
    """Colors named by "Add {X}" clauses in rules text."""
    if ANY_COLOR_PATTERN.search(oracle_text):
        return frozenset(COLOR_SYMBOLS)

    colors: set[str] = set()
    for match in ADD_MANA_PATTERN.finditer(oracle_text):
        for symbol in SYMBOL_PATTERN.findall(match.group(1)):
            for part in symbol.upper().split("/"):
                if part in COLOR_SYMBOLS:
                    colors.add(part)
    return frozenset(colors)


def colors_from_land_types(type_line: str) -> frozenset[str]:
    """Colors granted by basic land types (e.g. "Land — Forest Island")."""
    if "—" not in type_line:
        return frozenset()
    subtypes = type_line.split("—", 1)[1].split()
    return frozenset(BASIC_LAND_TYPES[t] for t in subtypes if t in BASIC_LAND_TYPES)


def produced_colors(card: dict[str, Any]) -> frozenset[str]:
    """
    Colors a card can produce as a permanent.

    Uses Scryfall's `produced_mana` when present; otherwise reads the
    rules text and basic land types. Instants and sorceries never count.
    """
    type_line = _type_line(card)
    front_types = type_line.split("//")[0]
    if any(t in front_types for t in NON_PERMANENT_TYPES):
        return frozenset()

    produced = card.get("produced_mana")
    if produced is not None:
        return frozenset(s.upper() for s in produced if s.upper() in COLOR_SYMBOLS)

    return colors_from_text(_oracle_text(card)) | colors_from_land_types(type_line)


def enters_tapped(oracle_text: str | None) -> bool:
    """
    Check whether a card always enters tapped.

    Conditional clauses ("enters tapped unless you control...") count as
    untapped.
    """
    if not oracle_text:
        return False
    match = ENTERS_TAPPED_PATTERN.search(oracle_text)
    return match is not None and match.group("unless") is None


def entry_from_scryfall(card: dict[str, Any], quantity: int = 1) -> DeckCardEntry:
    """
    Build a DeckCardEntry from a Scryfall card object.

    Args:
        card: Scryfall card JSON
        quantity: Copies in the deck

    Returns:
        DeckCardEntry ready for analysis
    """
    type_line = _type_line(card)
    produces = produced_colors(card)
    return DeckCardEntry(
        name=str(card.get("name", "")),
        mana_cost=card.get("mana_cost") or _front_face(card).get("mana_cost") or None,
        produces_mana=produces,
        quantity=quantity,
        enters_untapped=not (produces and enters_tapped(_oracle_text(card))),
        is_land=is_land(type_line),
    )
