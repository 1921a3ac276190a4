import json
from pathlib import Path
from typing import Any

import pytest

from mtgcards.config import Settings
from mtgcards.parsers.mtgjson import decode_card_feed
from mtgcards.services.catalog import Catalog

FEED_URL = "https://cards.example.test/json/AllCards-x.json"


@pytest.fixture
def sample_feed_path() -> Path:
    return Path(__file__).parent / "fixtures" / "mtgjson_sample.json"


@pytest.fixture
def sample_feed_bytes(sample_feed_path: Path) -> bytes:
    """Raw AllCards payload with eleven cards, including a split card."""
    return sample_feed_path.read_bytes()


@pytest.fixture
def sample_feed(sample_feed_bytes: bytes) -> dict[str, Any]:
    data: dict[str, Any] = json.loads(sample_feed_bytes)
    return data


@pytest.fixture
def sample_catalog(sample_feed_bytes: bytes) -> Catalog:
    return Catalog(decode_card_feed(sample_feed_bytes))


@pytest.fixture
def feed_settings() -> Settings:
    """Settings pointing the store at a mocked feed URL."""
    return Settings(
        catalog_url=FEED_URL,
        user_agent="mtgcards-tests/1.0",
        refresh_interval_seconds=0,
        request_timeout_seconds=5,
    )
