from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="RECEITAS_", env_file=".env", extra="ignore")

    database_url: str = "sqlite:///./receitas.db"
    bcrypt_rounds: int = 10
    default_page_size: int = 5
    max_page_size: int = 100
    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8000


@lru_cache
def get_settings() -> Settings:
    return Settings()
