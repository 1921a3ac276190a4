import json
from typing import Any

import pytest

from mtgcards.models.card import FormatLegality, Ruling
from mtgcards.models.failure import FailureKind
from mtgcards.parsers.mtgjson import CatalogDecodeError, decode_card_feed


class TestDecodeCardFeed:
    def test_keys_follow_feed(self, sample_feed_bytes: bytes, sample_feed: dict[str, Any]) -> None:
        """Every feed entry is decoded, in feed order."""
        cards = decode_card_feed(sample_feed_bytes)

        assert list(cards) == list(sample_feed)

    def test_maps_feed_fields(self, sample_feed_bytes: bytes) -> None:
        """camelCase feed keys map to card attributes."""
        shock = decode_card_feed(sample_feed_bytes)["Shock"]

        assert shock.name == "Shock"
        assert shock.mana_cost == "{R}"
        assert shock.cmc == 1.0
        assert shock.colors == ("Red",)
        assert shock.color_identity == ("R",)
        assert shock.type_line == "Instant"
        assert shock.types == ("Instant",)
        assert shock.rarity == "Common"
        assert shock.printings == ("STH", "M19", "DOM")
        assert shock.legalities[0] == FormatLegality(format="Modern", legality="Legal")
        assert shock.rulings == (Ruling(date="2018-04-27", text="Shock can target a planeswalker."),)

    def test_creature_fields(self, sample_feed_bytes: bytes) -> None:
        angel = decode_card_feed(sample_feed_bytes)["Serra Angel"]

        assert angel.type_line == "Creature — Angel"
        assert angel.subtypes == ("Angel",)
        assert angel.power == "4"
        assert angel.toughness == "4"
        assert angel.flavor.startswith("Her sword")

    def test_multiface_names(self, sample_feed_bytes: bytes) -> None:
        cards = decode_card_feed(sample_feed_bytes)

        assert cards["Beck"].names == ("Beck", "Call")
        assert cards["Call"].names == ("Beck", "Call")

    def test_missing_fields_default(self) -> None:
        """Absent fields become empty values."""
        card = decode_card_feed(b'{"Sol Ring": {"name": "Sol Ring"}}')["Sol Ring"]

        assert card.colors == ()
        assert card.mana_cost == ""
        assert card.legalities == ()

    def test_null_fields_default(self) -> None:
        """Explicit nulls are treated like absent fields."""
        payload = json.dumps({"Sol Ring": {"name": "Sol Ring", "colors": None, "text": None}})

        card = decode_card_feed(payload)["Sol Ring"]

        assert card.colors == ()
        assert card.text == ""

    def test_name_falls_back_to_key(self) -> None:
        card = decode_card_feed(b'{"Shock": {"type": "Instant"}}')["Shock"]

        assert card.name == "Shock"

    def test_unknown_keys_ignored(self) -> None:
        payload = json.dumps({"Shock": {"name": "Shock", "foreignData": [], "uuid": "abc"}})

        assert decode_card_feed(payload)["Shock"].name == "Shock"

    def test_empty_feed(self) -> None:
        assert decode_card_feed(b"{}") == {}


class TestDecodeErrors:
    def test_invalid_json(self) -> None:
        with pytest.raises(CatalogDecodeError) as exc_info:
            decode_card_feed(b"<html>Service Unavailable</html>")

        assert exc_info.value.kind == FailureKind.MALFORMED_PAYLOAD

    def test_truncated_json(self, sample_feed_bytes: bytes) -> None:
        with pytest.raises(CatalogDecodeError):
            decode_card_feed(sample_feed_bytes[:200])

    def test_wrong_top_level_shape(self) -> None:
        """A list of cards is not an AllCards payload."""
        with pytest.raises(CatalogDecodeError):
            decode_card_feed(b'[{"name": "Shock"}]')

    def test_wrong_field_type(self) -> None:
        with pytest.raises(CatalogDecodeError):
            decode_card_feed(b'{"Shock": {"name": "Shock", "colors": "Red"}}')

    def test_string_cmc_rejected(self) -> None:
        """Converted mana cost must be a JSON number, not a numeric string."""
        with pytest.raises(CatalogDecodeError):
            decode_card_feed(b'{"Shock": {"name": "Shock", "cmc": "1"}}')

    def test_integer_cmc_accepted(self) -> None:
        card = decode_card_feed(b'{"Shock": {"name": "Shock", "cmc": 1}}')["Shock"]

        assert card.cmc == 1.0
