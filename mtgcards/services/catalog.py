"""
Card catalog.

A Catalog is one immutable snapshot of the card feed, indexed by exact name
and by normalized name. Refreshes never modify a Catalog; they build a new
one, so a reader holding a reference always sees a consistent view.

NORMALIZED INDEX:
- Every card's name, with "Æ" spelled "Ae" and "’" replaced by "'", case-folded
- For multi-faced cards, the component names joined by " & ", " / " and " // "
- On collisions the card that comes later in feed order wins
"""

from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

from mtgcards.models.card import Card
from mtgcards.services.query import parse_query

MULTIFACE_SEPARATORS = (" & ", " / ", " // ")

_CHARACTER_SUBSTITUTIONS = (
    ("Æ", "Ae"),
    ("’", "'"),
)


def normalize_card_name(name: str) -> str:
    """
    Normalize a card name for lookup.

    Example: "Æther Vial" -> "aether vial", "Gideon’s Reproach" -> "gideon's reproach"
    """
    for old, new in _CHARACTER_SUBSTITUTIONS:
        name = name.replace(old, new)
    return name.casefold()


def _build_normalized_index(cards: Mapping[str, Card]) -> dict[str, Card]:
    index: dict[str, Card] = {}
    for card in cards.values():
        if card.is_multifaced:
            for separator in MULTIFACE_SEPARATORS:
                index[separator.join(card.names).casefold()] = card
        index[normalize_card_name(card.name)] = card
    return index


class Catalog:
    """
    Immutable snapshot of all known cards.

    Attributes:
        cards: Read-only mapping of exact card name to Card
    """

    __slots__ = ("cards", "_normalized")

    def __init__(self, cards: Mapping[str, Card]):
        self.cards: Mapping[str, Card] = MappingProxyType(dict(cards))
        self._normalized = _build_normalized_index(self.cards)

    @classmethod
    def from_cards(cls, cards: Iterable[Card]) -> "Catalog":
        """Build a catalog keyed by each card's name."""
        return cls({card.name: card for card in cards})

    @classmethod
    def empty(cls) -> "Catalog":
        return cls({})

    def __len__(self) -> int:
        return len(self.cards)

    def __contains__(self, name: object) -> bool:
        return name in self.cards

    def __iter__(self) -> Iterator[str]:
        return iter(self.cards)

    def __repr__(self) -> str:
        return f"<Catalog cards={len(self.cards)}>"

    def get(self, name: str) -> Card | None:
        """Look up a card by its exact name."""
        return self.cards.get(name)

    def lookup_normalized(self, name: str) -> Card | None:
        """
        Look up a card ignoring case and punctuation variants.

        "Beck // Call", "beck & CALL" and "Beck / Call" all find the same card.

        Returns:
            The card, or None if no card normalizes to this name.
        """
        return self._normalized.get(normalize_card_name(name))

    def query(self, text: str) -> list[Card]:
        """
        Find cards matching a query string.

        See mtgcards.services.query for the query syntax. Results follow
        catalog order and contain each card name at most once.
        """
        query = parse_query(text)
        matches: list[Card] = []
        seen: set[str] = set()
        for card in self.cards.values():
            if card.name in seen:
                continue
            if query.matches(card):
                matches.append(card)
                seen.add(card.name)
        return matches
