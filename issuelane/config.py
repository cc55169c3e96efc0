"""
Application Configuration.

Pydantic Settings model for the IssueLane desktop client.
All configuration is loaded from environment variables and .env files.
Inject an AppConfig instance via dependency injection where needed.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings
from pydantic import Field, SecretStr, model_validator


class AppConfig(BaseSettings):
    """Central configuration loaded from environment variables and defaults."""

    # --- Supabase ---
    SUPABASE_URL: str = ""
    SUPABASE_ANON_KEY: SecretStr = SecretStr("")

    # --- Storage (ticket attachments) ---
    STORAGE_BUCKET: str = "attachments"
    ATTACHMENT_FOLDER: str = "tickets"
    MAX_ATTACHMENT_BYTES: int = 10 * 1024 * 1024  # 10 MB

    # --- Ticket creation ---
    # Assignee written on every new ticket until assignment lands server-side.
    PLACEHOLDER_ASSIGNEE_ID: int = 1

    # --- Local state ---
    LOCAL_DB_PATH: Path = Path("issuelane_local.db")
    REMEMBER_ME_DAYS: int = 30

    # --- List screens ---
    DEFAULT_PAGE_SIZE: int = 5
    PAGE_SIZE_OPTIONS: list[int] = Field(default_factory=lambda: [5, 10, 20, 50])

    # --- Logging ---
    LOG_FILE: str = "issuelane.log"
    LOG_MAX_BYTES: int = 5_242_880  # 5 MB
    LOG_BACKUP_COUNT: int = 3

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @model_validator(mode="after")
    def _warn_missing_env(self) -> "AppConfig":
        """Emit a startup warning when critical configuration is empty.

        Pydantic silently falls back to defaults when ``.env`` is missing.
        This validator logs a warning so operators know the app is running
        with placeholder values.
        """
        _log = logging.getLogger("issuelane.config")

        if not Path(".env").exists():
            _log.warning(
                "No .env file found — all configuration loaded from "
                "environment variables or defaults."
            )

        if not self.SUPABASE_URL:
            _log.warning(
                "SUPABASE_URL is empty — sign-in and ticket screens "
                "will report the backend as unavailable."
            )

        return self

    @model_validator(mode="after")
    def _check_page_sizes(self) -> "AppConfig":
        """Keep ``DEFAULT_PAGE_SIZE`` among the selectable page sizes."""
        if any(size < 1 for size in self.PAGE_SIZE_OPTIONS):
            raise ValueError("PAGE_SIZE_OPTIONS must contain positive integers")
        if self.DEFAULT_PAGE_SIZE not in self.PAGE_SIZE_OPTIONS:
            self.PAGE_SIZE_OPTIONS = sorted(
                {*self.PAGE_SIZE_OPTIONS, self.DEFAULT_PAGE_SIZE}
            )
        return self


# ---------------------------------------------------------------------------
# Module-level singleton factory
# ---------------------------------------------------------------------------

_config_instance: Optional[AppConfig] = None
_config_lock: threading.Lock = threading.Lock()


def get_config() -> AppConfig:
    """Return a cached ``AppConfig`` singleton.

    On first call, creates an ``AppConfig`` instance (reading from ``.env``).
    Subsequent calls return the same instance.  Uses a check-lock-check
    pattern to avoid the lock overhead on the fast path while remaining
    thread-safe during first initialisation.
    """
    global _config_instance
    if _config_instance is None:
        with _config_lock:
            if _config_instance is None:
                _config_instance = AppConfig()
    return _config_instance
