"""
Self-refreshing Magic: The Gathering card catalog.

    store = new_store()
    catalog = store.cards()
    catalog.query("c:r t:instant")
    catalog.lookup_normalized("beck & call")
"""

from mtgcards.models import Card, FormatLegality, Ruling
from mtgcards.services import CardStore, Catalog, StoreClosedError, new_store

__all__ = [
    "Card",
    "CardStore",
    "Catalog",
    "FormatLegality",
    "Ruling",
    "StoreClosedError",
    "new_store",
]
