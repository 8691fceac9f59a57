"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from environment
variables.  Defaults are provided for all fields so the application
starts without any configuration; a deployment overrides them via the
environment.  ``Settings.from_env`` re-reads the environment, which
tests use after patching variables.
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


def _env_list(name: str) -> List[str]:
    raw = os.getenv(name, "")
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Greeting Card API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = _env_bool("DEBUG")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    # Optional path of a log file in addition to the console output.
    log_file: Optional[str] = os.getenv("LOG_FILE") or None

    # ``sqlite`` persists greetings in ``database_url``; ``memory`` keeps
    # them in process memory and loses them on restart (demo mode).
    storage_backend: str = os.getenv("STORAGE_BACKEND", "sqlite")

    # Path of the SQLite database file.  Relative paths are resolved
    # against the project root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "greetings.db")

    # When set, shareable links are built from this base URL instead of
    # the Host / X-Forwarded-* headers of the incoming request.
    public_base_url: Optional[str] = os.getenv("PUBLIC_BASE_URL") or None

    id_length: int = int(os.getenv("ID_LENGTH", "8"))
    # Number of identifiers tried before an insert is reported as failed.
    id_max_attempts: int = int(os.getenv("ID_MAX_ATTEMPTS", "3"))

    cors_origins: List[str] = field(default_factory=lambda: _env_list("CORS_ORIGINS"))

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8000"))

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the current environment.

        Dataclass defaults are computed once at import time, so this
        method reads every variable again.
        """
        return cls(
            project_name=os.getenv("PROJECT_NAME", "Greeting Card API"),
            api_version=os.getenv("API_VERSION", "1.0.0"),
            debug=_env_bool("DEBUG"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_file=os.getenv("LOG_FILE") or None,
            storage_backend=os.getenv("STORAGE_BACKEND", "sqlite"),
            database_url=os.getenv("DATABASE_URL", "greetings.db"),
            public_base_url=os.getenv("PUBLIC_BASE_URL") or None,
            id_length=int(os.getenv("ID_LENGTH", "8")),
            id_max_attempts=int(os.getenv("ID_MAX_ATTEMPTS", "3")),
            cors_origins=_env_list("CORS_ORIGINS"),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8000")),
        )


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables should
# be set before importing this module.
settings = Settings()
