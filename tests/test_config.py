import pytest

from mtgcards.config import Settings


class TestSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("MTGCARDS_CATALOG_URL", raising=False)
        monkeypatch.delenv("MTGCARDS_REFRESH_INTERVAL_SECONDS", raising=False)

        settings = Settings(_env_file=None)  # type: ignore[call-arg]

        assert settings.catalog_url == "https://mtgjson.com/json/AllCards-x.json"
        assert settings.refresh_interval_seconds == 3600
        assert settings.log_body_limit == 1000

    def test_environment_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MTGCARDS_CATALOG_URL", "https://mirror.example.test/AllCards.json")
        monkeypatch.setenv("MTGCARDS_REFRESH_INTERVAL_SECONDS", "0")
        monkeypatch.setenv("MTGCARDS_USER_AGENT", "my-bot/2.0")

        settings = Settings(_env_file=None)  # type: ignore[call-arg]

        assert settings.catalog_url == "https://mirror.example.test/AllCards.json"
        assert settings.refresh_interval_seconds == 0
        assert settings.user_agent == "my-bot/2.0"
