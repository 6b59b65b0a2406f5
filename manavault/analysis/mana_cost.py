"""
Mana cost parsing.

Reads Scryfall-style cost strings and counts colored pips per color.

Symbol rules:
- {W} {U} {B} {R} {G}: one pip of that color
- {2} {X} {Y} {Z} {C} {S}: generic, variable, colorless or snow; no pips
- Hybrid {W/U}, {2/W}, {C/W}: split evenly across the two halves;
  three-way symbols such as {W/U/B} do not exist and are rejected
- Phyrexian {W/P}: one full pip (normally paid with mana)
- Hybrid Phyrexian {W/U/P}: split like hybrid
- Split cards "{1}{G} // {3}{U}": every face is counted
"""

import re

from manavault.models.mana import COLOR_SYMBOLS

SYMBOL_PATTERN = re.compile(r"\{([^{}]*)\}")
FACE_SEPARATOR = "//"

# Symbols that are legal on their own but carry no colored pips
_NON_COLORED = frozenset({"C", "S", "X", "Y", "Z"})


class ManaCostParseError(ValueError):
    """Raised when a mana cost contains a symbol outside the grammar."""

    def __init__(self, cost: str, symbol: str):
        self.cost = cost
        self.symbol = symbol
        super().__init__(f"Unparseable mana symbol {symbol!r} in cost {cost!r}")


def _is_generic(part: str) -> bool:
    return part.isdigit() or part in _NON_COLORED


def _symbol_pips(symbol: str, cost: str) -> dict[str, float]:
    """Colored pip weights contributed by one symbol (without braces)."""
    parts = [p.strip().upper() for p in symbol.split("/")]
    if not parts or any(not p for p in parts):
        raise ManaCostParseError(cost, symbol)

    # Phyrexian marker applies to the whole symbol, never on its own
    phyrexian = parts[-1] == "P" and len(parts) > 1
    if phyrexian:
        parts = parts[:-1]

    # Hybrid symbols have exactly two halves
    if len(parts) > 2:
        raise ManaCostParseError(cost, symbol)

    for part in parts:
        if part not in COLOR_SYMBOLS and not _is_generic(part):
            raise ManaCostParseError(cost, symbol)

    colored = [p for p in parts if p in COLOR_SYMBOLS]
    if phyrexian and not colored:
        raise ManaCostParseError(cost, symbol)

    share = 1.0 / len(parts)
    pips: dict[str, float] = {}
    for part in colored:
        pips[part] = pips.get(part, 0.0) + share
    return pips


def parse_mana_cost(cost: str | None) -> dict[str, float]:
    """
    Count colored pips in a mana cost.

    Args:
        cost: Cost string such as "{2}{G}{G}"; None or "" means no cost

    Returns:
        Mapping of color symbol to pip weight (only colors that appear)

    Raises:
        ManaCostParseError: If any symbol is unknown or text sits outside braces
    """
    if not cost or not cost.strip():
        return {}

    pips: dict[str, float] = {}
    for face in cost.split(FACE_SEPARATOR):
        face = face.strip()
        # Anything left after removing well-formed symbols is stray text
        leftover = SYMBOL_PATTERN.sub("", face).strip()
        if leftover:
            raise ManaCostParseError(cost, leftover)

        for symbol in SYMBOL_PATTERN.findall(face):
            for color, weight in _symbol_pips(symbol, cost).items():
                pips[color] = pips.get(color, 0.0) + weight
    return pips


def count_pips(cost: str | None) -> tuple[dict[str, float], str | None]:
    """
    Parse a cost without raising.

    Returns:
        Tuple of (pips, error) where error is a message for malformed costs
        and pips is empty in that case.
    """
    try:
        return parse_mana_cost(cost), None
    except ManaCostParseError as e:
        return {}, str(e)
