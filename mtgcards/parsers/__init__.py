from mtgcards.parsers.mtgjson import (
    CardRecord,
    CatalogDecodeError,
    decode_card_feed,
)

__all__ = [
    "CardRecord",
    "CatalogDecodeError",
    "decode_card_feed",
]
