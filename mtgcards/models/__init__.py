from mtgcards.models.card import Card, FormatLegality, Ruling
from mtgcards.models.failure import FailureKind, KnownError

__all__ = [
    "Card",
    "FailureKind",
    "FormatLegality",
    "KnownError",
    "Ruling",
]
