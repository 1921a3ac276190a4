"""
mtgjson card feed decoder.

Validates the AllCards feed payload (a JSON object mapping card name to card
object) and converts each entry to an immutable Card.

Feed format: https://mtgjson.com/
"""

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, TypeAdapter, ValidationError

from mtgcards.models.card import Card, FormatLegality, Ruling
from mtgcards.models.failure import FailureKind, KnownError


class CatalogDecodeError(KnownError):
    """Raised when a card feed payload cannot be decoded."""

    def __init__(self, detail: str):
        super().__init__(
            kind=FailureKind.MALFORMED_PAYLOAD,
            message="Could not decode card feed",
            detail=detail,
        )


class RulingRecord(BaseModel):
    """A ruling as it appears in the feed."""

    date: str | None = None
    text: str | None = None


class LegalityRecord(BaseModel):
    """A format legality entry as it appears in the feed."""

    format: str | None = None
    legality: str | None = None


class CardRecord(BaseModel):
    """
    Wire shape of one card in the feed.

    Every field is optional and explicit nulls are accepted; unknown keys
    are ignored so that feed additions do not break decoding.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str | None = None
    names: list[str] | None = None
    mana_cost: str | None = Field(default=None, alias="manaCost")
    # Numeric only; a quoted "3" is a malformed feed
    cmc: StrictFloat | None = None
    colors: list[str] | None = None
    color_identity: list[str] | None = Field(default=None, alias="colorIdentity")
    type_line: str | None = Field(default=None, alias="type")
    supertypes: list[str] | None = None
    types: list[str] | None = None
    subtypes: list[str] | None = None
    rarity: str | None = None
    text: str | None = None
    flavor: str | None = None
    power: str | None = None
    toughness: str | None = None
    printings: list[str] | None = None
    legalities: list[LegalityRecord] | None = None
    rulings: list[RulingRecord] | None = None

    def to_card(self, fallback_name: str) -> Card:
        """
        Convert to a Card.

        Args:
            fallback_name: Name to use when the record carries none
                (the feed key the record was stored under)
        """
        return Card(
            name=self.name or fallback_name,
            names=tuple(self.names or ()),
            mana_cost=self.mana_cost or "",
            cmc=self.cmc or 0.0,
            colors=tuple(self.colors or ()),
            color_identity=tuple(self.color_identity or ()),
            type_line=self.type_line or "",
            supertypes=tuple(self.supertypes or ()),
            types=tuple(self.types or ()),
            subtypes=tuple(self.subtypes or ()),
            rarity=self.rarity or "",
            text=self.text or "",
            flavor=self.flavor or "",
            power=self.power or "",
            toughness=self.toughness or "",
            printings=tuple(self.printings or ()),
            legalities=tuple(
                FormatLegality(format=entry.format or "", legality=entry.legality or "")
                for entry in self.legalities or ()
            ),
            rulings=tuple(
                Ruling(date=entry.date or "", text=entry.text or "")
                for entry in self.rulings or ()
            ),
        )


_FEED_ADAPTER = TypeAdapter(dict[str, CardRecord])


def decode_card_feed(payload: bytes | str) -> dict[str, Card]:
    """
    Decode an AllCards feed payload.

    Args:
        payload: Raw JSON body of the feed

    Returns:
        Dict mapping feed key (the exact card name) to Card, in feed order.

    Raises:
        CatalogDecodeError: If the payload is not valid JSON or does not
            have the expected shape
    """
    try:
        records = _FEED_ADAPTER.validate_json(payload)
    except ValidationError as e:
        raise CatalogDecodeError(
            f"{e.error_count()} validation error(s), first: {e.errors()[0]['msg']}"
        ) from e

    return {key: record.to_card(key) for key, record in records.items()}
