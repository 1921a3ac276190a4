from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Card store settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="MTGCARDS_")

    catalog_url: str = "https://mtgjson.com/json/AllCards-x.json"

    user_agent: str = "mtgcards/1.0"

    # 0 disables periodic refresh after the initial attempt
    refresh_interval_seconds: float = 3600.0

    # The full catalog is tens of megabytes
    request_timeout_seconds: float = 300.0

    # Bytes of a rejected response body included in log messages
    log_body_limit: int = 1000


settings = Settings()
