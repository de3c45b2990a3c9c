"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so that
the application starts locally without any configuration; in a
deployment you should at least override ``SECRET_KEY``.
"""

import os
from dataclasses import dataclass
from typing import List, Optional


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Todo API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: Optional[str] = os.getenv("LOG_FILE") or None

    # Secret used to sign auth tokens.  Rotating it invalidates every
    # token stored in the users table.
    secret_key: str = os.getenv("SECRET_KEY", "change_me")

    # PBKDF2 iteration count for new password hashes.  Existing hashes
    # carry their own count and keep verifying after this changes.
    password_hash_iterations: int = int(os.getenv("PASSWORD_HASH_ITERATIONS", "100000"))

    # Path to the SQLite database file.  Relative paths are resolved
    # against the current working directory; ``:memory:`` keeps the
    # store in process for the lifetime of the application.
    database_url: str = os.getenv("DATABASE_URL", "todo_app.db")

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3000"))

    # Comma‑separated list of browser origins allowed to call the API.
    # When empty any origin is accepted but credentials are not.
    cors_origins: str = os.getenv("CORS_ALLOW_ORIGINS", "")

    @property
    def cors_allow_origins(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables
# should be set before importing this module.
settings = Settings()
