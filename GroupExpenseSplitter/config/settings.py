"""
Application settings read from environment variables.

Variables:
    SPLITTER_LOG_LEVEL: logging level of the API process (default: INFO)
    SPLITTER_HOST: bind host for uvicorn (default: 127.0.0.1)
    SPLITTER_PORT: bind port for uvicorn (default: 8000)
    SPLITTER_MONTHLY_WINDOW: months returned by monthly analytics (default: 6)
"""

import os
from functools import lru_cache


class Settings:
    """Resolved configuration values."""

    def __init__(
        self,
        log_level: str = "INFO",
        host: str = "127.0.0.1",
        port: int = 8000,
        monthly_window: int = 6
    ):
        self.log_level = log_level
        self.host = host
        self.port = port
        self.monthly_window = monthly_window

    def __repr__(self) -> str:
        return (
            f"Settings(log_level='{self.log_level}', host='{self.host}', "
            f"port={self.port}, monthly_window={self.monthly_window})"
        )


def _read_int(environ, name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got: {raw}")


def load_settings(environ=None) -> Settings:
    """
    Build Settings from an environment mapping.

    Args:
        environ: Mapping to read from (default: os.environ).

    Raises:
        ValueError: If an integer variable can't be parsed.
    """
    if environ is None:
        environ = os.environ

    return Settings(
        log_level=environ.get("SPLITTER_LOG_LEVEL", "INFO").upper(),
        host=environ.get("SPLITTER_HOST", "127.0.0.1"),
        port=_read_int(environ, "SPLITTER_PORT", 8000),
        monthly_window=_read_int(environ, "SPLITTER_MONTHLY_WINDOW", 6)
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings, loaded once from os.environ."""
    return load_settings()
