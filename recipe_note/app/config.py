from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from recipe_note.services.gemini_client import DEFAULT_MODEL

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8-sig",
        case_sensitive=False,
        extra="ignore",
    )

    GEMINI_API_KEY: str = ""
    GEMINI_MODEL: str = ""
    RECIPES_FILE: Path = Path("data/recipes.json")
    CONFIG_FILE: Path = Path("data/config.json")
    CAPTION_LANGUAGES: list[str] = Field(default_factory=lambda: ["ja"])
    STORAGE_BACKEND: Literal["file", "memory", "supabase"] = "file"
    SUPABASE_URL: Optional[str] = None
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = None
    LOG_LEVEL: str = "INFO"
    FRONTEND_CORS_ORIGINS: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://localhost:5173"],
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()


class ExtractorConfig(BaseModel):
    """The persisted ``{"apiKey": ..., "model": ...}`` settings file."""

    model_config = ConfigDict(populate_by_name=True)

    api_key: str = Field(default="", alias="apiKey")
    model: str = Field(default=DEFAULT_MODEL)

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key.strip())


def load_extractor_config(path: Path) -> ExtractorConfig:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return ExtractorConfig()
    except (OSError, json.JSONDecodeError) as error:
        logger.warning("Ignoring unreadable config file %s: %s", path, error)
        return ExtractorConfig()

    try:
        return ExtractorConfig.model_validate(raw)
    except ValidationError as error:
        logger.warning("Ignoring invalid config file %s: %s", path, error)
        return ExtractorConfig()


def save_extractor_config(config: ExtractorConfig, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(config.model_dump(by_alias=True), indent=2, ensure_ascii=False),
        encoding="utf-8",
    )


def resolve_extractor_config(settings: Settings) -> ExtractorConfig:
    """Config file values, overridden by non-empty environment settings."""
    config = load_extractor_config(settings.CONFIG_FILE)
    return ExtractorConfig(
        api_key=settings.GEMINI_API_KEY or config.api_key,
        model=settings.GEMINI_MODEL or config.model or DEFAULT_MODEL,
    )
