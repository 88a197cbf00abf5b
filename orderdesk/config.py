from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    telegram_bot_token: str = ""
    telegram_bot_username: str = Field(
        default="",
        validation_alias=AliasChoices(
            "telegram_bot_username",
            "next_public_telegram_bot_username",
        ),
    )
    # CSV of numeric ids: "111,222"
    telegram_admin_ids: str = ""
    telegram_admin_id: str = ""
    telegram_api_base: str = "https://api.telegram.org"
    telegram_timeout_seconds: float = 30.0

    currency_suffix: str = "₸"
    order_start_prefix: str = "order_"
    admin_session_ttl_seconds: Optional[float] = None

    log_level: str = "INFO"

    @property
    def admin_ids(self) -> frozenset[str]:
        raw = self.telegram_admin_ids or self.telegram_admin_id
        return frozenset(part.strip() for part in raw.split(",") if part.strip())

    @property
    def bot_handle(self) -> str:
        return self.telegram_bot_username.strip().lstrip("@")


@lru_cache
def get_settings() -> Settings:
    return Settings()
