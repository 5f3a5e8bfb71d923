"""Core configuration settings for X-Ray Core.

@public

Settings are loaded from environment variables with .env file support via
pydantic-settings.

Environment variables:
    XRAY_DIR: Root directory for persisted traces (default ``.xray``)
    XRAY_STORAGE: Storage backend, ``local`` or ``memory`` (default ``local``)

Example:
    >>> from xray_core.settings import settings
    >>> print(settings.xray_dir)

Note:
    Settings are loaded once at module import and frozen. Create a new
    Settings instance to pick up changed environment variables.
"""

from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration for trace persistence.

    @public

    Attributes:
        xray_dir: Root directory of the local trace store. Traces are written
                  to ``{xray_dir}/traces/{id}.json``.

        xray_storage: Which backend ``create_trace_store()`` builds. ``memory``
                      keeps traces in-process only.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    xray_dir: Path = Path(".xray")
    xray_storage: Literal["local", "memory"] = "local"


settings = Settings()
