from manavault.parsers.mana_sources import (
    colors_from_land_types,
    colors_from_text,
    enters_tapped,
    entry_from_scryfall,
    is_land,
    produced_colors,
)

__all__ = [
    "colors_from_land_types",
    "colors_from_text",
    "enters_tapped",
    "entry_from_scryfall",
    "is_land",
    "produced_colors",
]
