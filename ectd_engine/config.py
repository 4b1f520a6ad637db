from __future__ import annotations

import tempfile
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="")

    SERVICE_NAME: str = "ectd-engine"
    LOG_LEVEL: str = "INFO"

    # Output
    ECTD_OUTPUT_DIR: str = "output"
    ECTD_GENERATE_PLACEHOLDERS: bool = True

    # Staging pool used by the HTTP surface
    ECTD_STAGING_DIR: str = str(Path(tempfile.gettempdir()) / "ectd-staging")
    ECTD_STAGING_MAX_AGE_HOURS: float = 1.0

    # Hashing
    ECTD_HASH_WORKERS: int = 4
    ECTD_HASH_CHUNK_SIZE: int = 65536  # 64 KiB

    # Logging
    ECTD_LOG_REDACT_CONTACTS: bool = True

    def staging_path(self) -> Path:
        return Path(self.ECTD_STAGING_DIR)

    def output_path(self) -> Path:
        return Path(self.ECTD_OUTPUT_DIR)


def get_settings() -> Settings:
    return Settings()
