"""
Runtime configuration.

Values come from the process environment (a local .env file is loaded first).
Environment variables:
  - API_KEY: Coda API token (required)
  - CODA_API_BASE: API base URL
  - CODA_HTTP_TIMEOUT: HTTP timeout in seconds
  - CODA_EXPORT_POLL_INTERVAL: Seconds to wait between export status checks
  - CODA_EXPORT_MAX_ATTEMPTS: Number of export status checks before giving up
  - LOG_LEVEL: Logging level name
  - MCP_HTTP_HOST / MCP_HTTP_PORT: Bind address of the HTTP transport
"""

import functools
import logging
import math
import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

CODA_API_BASE = "https://coda.io/apis/v1"

# Export polling bounds
POLL_INTERVAL_SECONDS = 5.0
MAX_POLL_ATTEMPTS = 5

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class ConfigError(Exception):
    """Raised when required configuration is missing or malformed."""
    pass


def _read_number(name: str, default, cast=float):
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}")


def _read_seconds(name: str, default: float) -> float:
    value = _read_number(name, default)
    # rejects 0 (busy polling), negatives, inf and nan
    if not math.isfinite(value) or value <= 0:
        raise ConfigError(f"{name} must be a finite number of seconds greater than 0")
    return value


@dataclass(frozen=True)
class Settings:
    """Settings for the Coda client and the MCP transports."""
    api_key: str
    api_base: str = CODA_API_BASE
    http_timeout: float = 30.0
    poll_interval: float = POLL_INTERVAL_SECONDS
    max_poll_attempts: int = MAX_POLL_ATTEMPTS
    log_level: str = "INFO"
    http_host: str = "0.0.0.0"
    http_port: int = 8000

    @classmethod
    def from_env(cls) -> "Settings":
        api_key = os.getenv("API_KEY", "")
        if not api_key:
            raise ConfigError("API_KEY environment variable is not set")

        max_attempts = _read_number("CODA_EXPORT_MAX_ATTEMPTS", MAX_POLL_ATTEMPTS, int)
        if max_attempts < 1:
            raise ConfigError("CODA_EXPORT_MAX_ATTEMPTS must be at least 1")

        return cls(
            api_key=api_key,
            api_base=os.getenv("CODA_API_BASE", CODA_API_BASE).rstrip("/"),
            http_timeout=_read_seconds("CODA_HTTP_TIMEOUT", 30.0),
            poll_interval=_read_seconds("CODA_EXPORT_POLL_INTERVAL", POLL_INTERVAL_SECONDS),
            max_poll_attempts=max_attempts,
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            http_host=os.getenv("MCP_HTTP_HOST", "0.0.0.0"),
            http_port=_read_number("MCP_HTTP_PORT", 8000, int),
        )


@functools.lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings once per process."""
    return Settings.from_env()


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging. Handlers write to stderr, never stdout."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
