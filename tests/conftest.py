import pytest

from manavault.models.mana import DeckCardEntry


@pytest.fixture
def green_spells() -> list[DeckCardEntry]:
    """Nonland green cards totaling 14 green pips, none of which make mana."""
    return [
        DeckCardEntry(name="Craterhoof Behemoth", mana_cost="{5}{G}{G}{G}"),
        DeckCardEntry(name="Hornet Queen", mana_cost="{4}{G}{G}{G}"),
        DeckCardEntry(name="Eternal Witness", mana_cost="{1}{G}{G}"),
        DeckCardEntry(name="Avenger of Zendikar", mana_cost="{5}{G}{G}"),
        DeckCardEntry(name="Beast Within", mana_cost="{2}{G}"),
        DeckCardEntry(name="Cultivate", mana_cost="{2}{G}"),
        DeckCardEntry(name="Regrowth", mana_cost="{1}{G}"),
        DeckCardEntry(name="Rampant Growth", mana_cost="{1}{G}"),
        DeckCardEntry(name="Sol Ring", mana_cost="{1}", produces_mana=frozenset({"C"})),
    ]


@pytest.fixture
def mono_green_deck(green_spells: list[DeckCardEntry]) -> list[DeckCardEntry]:
    """40 Forests plus 14 green pips of spells."""
    forest = DeckCardEntry(
        name="Forest", produces_mana=frozenset({"G"}), quantity=40, is_land=True
    )
    return [forest, *green_spells]
