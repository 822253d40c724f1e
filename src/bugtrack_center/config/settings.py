from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Annotated, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..core.logging import resolve_level

DEFAULT_LOGO_URL = (
    "https://raw.githubusercontent.com/AndromebitLab/CreativeImagination_WPF_Edition/"
    "refs/heads/main/CreativeImagination%20Logo.png"
)


class AppSettings(BaseSettings):
    """應用程式環境設定。"""

    db_url: str = Field("sqlite:///./bugtrack.db", alias="DB_URL")
    session_file: Path = Field(Path(".bugtrack_session.json"), alias="SESSION_FILE")

    default_logo_url: str = Field(DEFAULT_LOGO_URL, alias="DEFAULT_LOGO_URL")
    default_emphasis_color: str = Field("#6366f1", alias="DEFAULT_EMPHASIS_COLOR")

    max_video_size_mb: Annotated[int, Field(ge=1)] = Field(20, alias="MAX_VIDEO_SIZE_MB")
    bcrypt_rounds: Annotated[int, Field(ge=4, le=31)] = Field(12, alias="BCRYPT_ROUNDS")
    seed_versions_raw: str = Field(
        "1.0,1.0.1,1.0.2,1.1,1.1.1,1.2,1.2.1,1.2.2,1.2.3,1.2.4,1.2.5",
        alias="SEED_VERSIONS",
    )

    log_level: str = Field("INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=(".env",),
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def seed_versions(self) -> List[str]:
        return [item.strip() for item in self.seed_versions_raw.split(",") if item.strip()]

    @property
    def log_level_value(self) -> int:
        return resolve_level(self.log_level)

    @field_validator("default_emphasis_color")
    @classmethod
    def _normalize_color(cls, value: str) -> str:
        return value.strip().lower()


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """載入並快取設定。"""

    return AppSettings()
