from __future__ import annotations

from decimal import Decimal
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False)

    currency_places: int = Field(2, alias="CURRENCY_PLACES", ge=0)
    conservation_tolerance: Decimal = Field(Decimal("0.01"), alias="CONSERVATION_TOLERANCE", ge=0)
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    @property
    def quantum(self) -> Decimal:
        return Decimal(10) ** -self.currency_places


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
