"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for every field except
the token signing key, which must be supplied through
``JWT_PRIVATE_KEY`` before the application starts serving requests.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Movie Rental API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    api_prefix: str = os.getenv("API_PREFIX", "/api")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    # Optional path of a log file in addition to the console handler.
    log_file: str = os.getenv("LOG_FILE", "")

    # Key used to sign and verify ``x-auth-token`` credentials.  There is
    # deliberately no default: ``main`` refuses to start without it.
    jwt_private_key: str = os.getenv("JWT_PRIVATE_KEY", "")
    algorithm: str = os.getenv("ALGORITHM", "HS256")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))

    # Path to the SQLite database.  Relative paths are resolved against
    # the project root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "movie_rental.db")
    # Busy timeout applied to every SQLite connection, in seconds.
    db_timeout_seconds: float = float(os.getenv("DB_TIMEOUT_SECONDS", "5"))

    # Upper bound for ``numberInStock`` on movies.
    max_number_in_stock: int = int(os.getenv("MAX_NUMBER_IN_STOCK", "255"))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables
# should be set before importing this module.
settings = Settings()
