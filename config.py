from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings


# ===== КОНФИГУРАЦИЯ =====
class Settings(BaseSettings):
    DB_URL: str = "sqlite+aiosqlite:///cards.db"
    DEFAULT_SET: str = "КОВ"
    BOOSTER_PRESET: str = "standard"
    BONUS_SET_CHANCE: Optional[float] = None  # None — шанс из пресета
    ENFORCE_RARITY: bool = True
    RANDOM_SEED: Optional[int] = None
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"


@lru_cache
def get_settings() -> Settings:
    return Settings()


def rules_overrides(settings: Settings) -> dict:
    """Переопределения пресета бустера из настроек"""
    overrides = {"enforce_rarity": settings.ENFORCE_RARITY}
    if settings.BONUS_SET_CHANCE is not None:
        overrides["bonus_set_chance"] = settings.BONUS_SET_CHANCE
    return overrides
