"""
mtgcards services.

Catalog snapshots, the query language and the self-refreshing store.
"""

from mtgcards.services.card_store import (
    CardStore,
    CatalogFetchError,
    CatalogNotReadyError,
    CatalogReadError,
    CatalogStatusError,
    CatalogTransportError,
    StoreAlreadyStartedError,
    StoreClosedError,
    new_store,
)
from mtgcards.services.catalog import Catalog, normalize_card_name
from mtgcards.services.locks import ReadWriteLock
from mtgcards.services.query import ColorFilter, Query, parse_query, short_color

__all__ = [
    "CardStore",
    "Catalog",
    "CatalogFetchError",
    "CatalogNotReadyError",
    "CatalogReadError",
    "CatalogStatusError",
    "CatalogTransportError",
    "ColorFilter",
    "Query",
    "ReadWriteLock",
    "StoreAlreadyStartedError",
    "StoreClosedError",
    "new_store",
    "normalize_card_name",
    "parse_query",
    "short_color",
]
