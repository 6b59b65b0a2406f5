from dataclasses import dataclass, field

from manavault.models.mana import DeckCardEntry


@dataclass
class VaultDeck:
    """
    A Commander deck stored in the vault.

    Attributes:
        deck_id: Stable external identifier (e.g. a Moxfield id or UUID)
        name: Deck name
        commanders: Commander card names
        color_identity: Commander color identity symbols (WUBRG order)
        cards: Mainboard entries, one per distinct card
    """

    deck_id: str
    name: str
    commanders: list[str] = field(default_factory=list)
    color_identity: list[str] = field(default_factory=list)
    cards: list[DeckCardEntry] = field(default_factory=list)

    def maindeck_count(self) -> int:
        """Total cards in the mainboard."""
        return sum(card.quantity for card in self.cards)

    def land_count(self) -> int:
        """Total land cards in the mainboard."""
        return sum(card.quantity for card in self.cards if card.is_land)
