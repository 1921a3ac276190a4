"""
Card models.

Cards are built once from the remote feed and never modified afterwards.
All sequence fields are tuples so a Card can be shared freely between
threads and catalog generations.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Ruling:
    """A dated rules clarification for a card."""

    date: str
    text: str


@dataclass(frozen=True, slots=True)
class FormatLegality:
    """Legality of a card in one format (e.g., "Modern", "Banned")."""

    format: str
    legality: str


@dataclass(frozen=True, slots=True)
class Card:
    """
    A single Magic card as published in the card feed.

    Attributes:
        name: Unique display name (e.g., "Shock", "Beck")
        names: Component names of a multi-faced card, empty otherwise
            (e.g., ("Beck", "Call"))
        mana_cost: Mana cost string (e.g., "{1}{R}")
        cmc: Converted mana cost
        colors: Full color names (e.g., ("White", "Blue"))
        color_identity: Color identity letters (e.g., ("W", "U"))
        type_line: Full type line (e.g., "Legendary Creature — Human Wizard")
        supertypes: Parsed supertypes (e.g., ("Legendary",))
        types: Parsed card types (e.g., ("Creature",))
        subtypes: Parsed subtypes (e.g., ("Human", "Wizard"))
        rarity: Rarity name
        text: Rules text
        flavor: Flavor text
        power: Power, kept as a string ("*" and "1+*" exist)
        toughness: Toughness, kept as a string
        printings: Set codes the card has been printed in
        legalities: Per-format legality
        rulings: Rules clarifications
    """

    name: str
    names: tuple[str, ...] = ()
    mana_cost: str = ""
    cmc: float = 0.0
    colors: tuple[str, ...] = ()
    color_identity: tuple[str, ...] = ()
    type_line: str = ""
    supertypes: tuple[str, ...] = ()
    types: tuple[str, ...] = ()
    subtypes: tuple[str, ...] = ()
    rarity: str = ""
    text: str = ""
    flavor: str = ""
    power: str = ""
    toughness: str = ""
    printings: tuple[str, ...] = ()
    legalities: tuple[FormatLegality, ...] = ()
    rulings: tuple[Ruling, ...] = ()

    @property
    def is_multicolored(self) -> bool:
        """True if the card has more than one color."""
        return len(self.colors) > 1

    @property
    def is_multifaced(self) -> bool:
        """True if the card is one face of a split, flip or double-faced card."""
        return len(self.names) > 0
