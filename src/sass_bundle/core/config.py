from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

LogFormat = Literal["json", "console"]

DEFAULT_BUNDLE_NAME = "bundle.css"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SASS_BUNDLE_",
        env_file=".env",
        extra="ignore",
    )

    log_level: str = Field(default="INFO")
    log_format: LogFormat = Field(default="console")

    # Front-end defaults; the task factory itself never reads these.
    bundle_name: str = Field(default=DEFAULT_BUNDLE_NAME, min_length=1)
    minified: bool = Field(default=True)
    events_path: Path | None = Field(default=None)


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    return Settings()
