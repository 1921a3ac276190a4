"""
Card query language.

Parses compact, whitespace-separated queries into predicate groups:

- "o:<text>"    -> rules text contains <text>
- "t:<text>"    -> type line contains <text>
- "c:<letters>" -> card has each color (w, u, b, r, g, or m for multicolored)
- "c!<letters>" -> card has none of the colors
- anything else -> card name contains the token

All matching is case-insensitive and every predicate must hold. Parsing is
lenient: unknown color letters are dropped and unrecognized tokens are
treated as name fragments, so no query is ever rejected.

Examples:
    >>> parse_query("c:wu t:instant").colors
    [ColorFilter(letter='w', negated=False), ColorFilter(letter='u', negated=False)]
"""

import logging
from dataclasses import dataclass, field

from mtgcards.models.card import Card

logger = logging.getLogger(__name__)

MULTICOLORED = "m"

VALID_COLOR_LETTERS = frozenset({"w", "u", "b", "r", "g", MULTICOLORED})

SHORT_COLORS = {
    "White": "w",
    "Blue": "u",
    "Black": "b",
    "Red": "r",
    "Green": "g",
}


def short_color(color: str) -> str:
    """
    Map a full color name to its one-letter form.

    Returns:
        "w", "u", "b", "r" or "g"; empty string for anything else.
    """
    return SHORT_COLORS.get(color, "")


@dataclass(frozen=True, slots=True)
class ColorFilter:
    """One color predicate: a color letter, optionally negated."""

    letter: str
    negated: bool = False

    def __str__(self) -> str:
        return f"!{self.letter}" if self.negated else self.letter


@dataclass
class Query:
    """
    A parsed card query.

    Each list is one predicate group. Name, rule and type fragments are
    stored lowercased.
    """

    name: list[str] = field(default_factory=list)
    rule: list[str] = field(default_factory=list)
    type: list[str] = field(default_factory=list)
    colors: list[ColorFilter] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """True if the query has no predicates and matches every card."""
        return not (self.name or self.rule or self.type or self.colors)

    def matches(self, card: Card) -> bool:
        """Check whether a card satisfies every predicate group."""
        card_name = card.name.lower()
        for fragment in self.name:
            if fragment not in card_name:
                logger.debug("name %r rejects %s", fragment, card.name)
                return False

        card_text = card.text.lower()
        for fragment in self.rule:
            if fragment not in card_text:
                logger.debug("rule %r rejects %s", fragment, card.name)
                return False

        card_type = card.type_line.lower()
        for fragment in self.type:
            if fragment not in card_type:
                logger.debug("type %r rejects %s", fragment, card.name)
                return False

        for color in self.colors:
            if not _matches_color(card, color):
                logger.debug("color %r rejects %s", str(color), card.name)
                return False

        return True


def _matches_color(card: Card, color: ColorFilter) -> bool:
    # A negated filter only ever excludes; it never admits a card by itself.
    if color.letter == MULTICOLORED:
        has_color = card.is_multicolored
    else:
        has_color = any(short_color(c) == color.letter for c in card.colors)
    return has_color != color.negated


def _color_filters(letters: str, negated: bool) -> list[ColorFilter]:
    return [
        ColorFilter(letter=letter, negated=negated)
        for letter in letters
        if letter in VALID_COLOR_LETTERS
    ]


def parse_query(text: str) -> Query:
    """
    Parse a query string.

    Args:
        text: Raw query, e.g. "c!r t:creature o:flying angel"

    Returns:
        Parsed Query. An empty or blank string yields an empty Query.
    """
    query = Query()
    for token in text.lower().split():
        if token.startswith("o:"):
            query.rule.append(token[2:])
        elif token.startswith("t:"):
            query.type.append(token[2:])
        elif token.startswith("c:"):
            query.colors.extend(_color_filters(token[2:], negated=False))
        elif token.startswith("c!"):
            query.colors.extend(_color_filters(token[2:], negated=True))
        else:
            query.name.append(token)
    return query
