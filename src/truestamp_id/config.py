"""Environment-driven configuration using pydantic-settings."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class IdSettings(BaseSettings):
    """Codec tuning. All values can be overridden via env vars prefixed ``TRUESTAMP_ID_``.

    Keys are deliberately absent: they are passed explicitly on every call and
    never read from the environment by this package.
    """

    model_config = SettingsConfigDict(
        env_prefix="TRUESTAMP_ID_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- compact format ---
    compression_level: int = Field(9, ge=0, le=9)
    include_prefix: bool = True
    max_decompressed_size: int = Field(1024, ge=64)

    # --- encode post-condition ---
    self_check: bool = True
