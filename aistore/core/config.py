from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CATALOG_PATH = Path(__file__).resolve().parent.parent / "data" / "products.json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_NAME: str = "AI Store Search API"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Catalog settings
    CATALOG_PATH: str = str(DEFAULT_CATALOG_PATH)
    CATEGORIES: list[str] = ["footwear", "electronics", "clothing"]

    # OpenAI settings (search falls back to "no filters" when the key is missing)
    OPENAI_API_KEY: str | None = None
    OPENAI_BASE_URL: str | None = None  # OpenAI-compatible endpoint, e.g. a local Ollama server
    QUERY_INTERPRETER_MODEL: str = "gpt-3.5-turbo"
    QUERY_INTERPRETER_MAX_TOKENS: int = 150
    QUERY_INTERPRETER_TIMEOUT: float = 10.0  # seconds


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
