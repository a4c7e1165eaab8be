"""Application settings"""
from functools import lru_cache
from typing import List, Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # OpenAI
    openai_api_key: str = ""
    openai_model: str = "gpt-4o"
    itinerary_temperature: float = 0.7
    chat_temperature: float = 0.8
    analysis_temperature: float = 0.7

    # Image enrichment
    image_model: str = "dall-e-3"
    image_size: str = "1024x1024"
    image_quality: str = "standard"
    image_enrichment_enabled: bool = True
    max_activity_images: int = 2
    max_image_attempts: int = 4

    # Chat routing
    routing_policy: Literal["keywords", "analysis"] = "keywords"
    conversation_keywords: str = "family,budget,weeks"

    # App Settings
    debug: bool = True
    log_level: str = "DEBUG"
    app_env: str = "development"

    # Logging
    log_format: Literal["auto", "console", "json"] = "auto"
    library_loggers: str = "langchain,langchain_core,langchain_openai,openai"
    quiet_loggers: str = "httpx,httpcore,uvicorn.access"

    # CORS
    cors_origins: str = "http://localhost:5173,http://localhost:3000"

    @property
    def cors_origins_list(self) -> List[str]:
        return _split_csv(self.cors_origins)

    @property
    def conversation_keywords_list(self) -> List[str]:
        return [kw.lower() for kw in _split_csv(self.conversation_keywords)]

    @property
    def library_loggers_list(self) -> List[str]:
        return _split_csv(self.library_loggers)

    @property
    def quiet_loggers_list(self) -> List[str]:
        return _split_csv(self.quiet_loggers)


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@lru_cache()
def get_settings() -> Settings:
    """Return the cached settings singleton"""
    return Settings()
