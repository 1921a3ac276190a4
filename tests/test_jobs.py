"""Tests for the search job."""

from unittest.mock import patch

import httpx
import pytest
import respx

from mtgcards.config import Settings
from mtgcards.jobs.search_cards import main, run_search
from mtgcards.services.catalog import Catalog

FEED_URL = "https://cards.example.test/json/AllCards-x.json"


class TestRunSearch:
    def test_query_sorted(self, sample_catalog: Catalog) -> None:
        assert run_search(sample_catalog, "c:w t:instant") == [
            "Azorius Charm",
            "Gideon’s Reproach",
            "Lightning Helix",
        ]

    def test_lookup(self, sample_catalog: Catalog) -> None:
        assert run_search(sample_catalog, "aether vial", lookup=True) == ["Æther Vial"]

    def test_lookup_missing(self, sample_catalog: Catalog) -> None:
        assert run_search(sample_catalog, "Black Lotus", lookup=True) == []


class TestMain:
    @respx.mock
    def test_prints_matches(
        self,
        feed_settings: Settings,
        sample_feed_bytes: bytes,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        respx.get(FEED_URL).mock(
            return_value=httpx.Response(200, content=sample_feed_bytes, headers={"ETag": '"v1"'})
        )

        with patch("mtgcards.jobs.search_cards.settings", feed_settings):
            status = main(["t:sorcery", "c:m"])

        assert status == 0
        assert capsys.readouterr().out.splitlines() == ["Beck", "Call"]

    @respx.mock
    def test_no_matches(self, feed_settings: Settings, sample_feed_bytes: bytes) -> None:
        respx.get(FEED_URL).mock(
            return_value=httpx.Response(200, content=sample_feed_bytes, headers={"ETag": '"v1"'})
        )

        with patch("mtgcards.jobs.search_cards.settings", feed_settings):
            assert main(["black", "lotus"]) == 1

    @respx.mock
    def test_feed_unavailable(self, feed_settings: Settings) -> None:
        respx.get(FEED_URL).mock(return_value=httpx.Response(503))

        with patch("mtgcards.jobs.search_cards.settings", feed_settings):
            assert main(["shock", "--timeout", "0.2"]) == 1
