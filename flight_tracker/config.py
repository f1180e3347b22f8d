"""
Configuration management for Flight Tracker.

Loads settings from environment variables with sensible defaults.
All configuration is centralized here to avoid magic strings scattered
throughout the codebase.
"""

import os
from dataclasses import dataclass
from typing import Optional, Tuple

from dotenv import load_dotenv

load_dotenv()


def _parse_origins(value: str) -> Tuple[str, ...]:
    """Parse comma-separated origin list, dropping blanks."""
    if not value:
        return ()
    return tuple(part.strip() for part in value.split(',') if part.strip())


def _parse_optional_float(value: Optional[str]) -> Optional[float]:
    """Parse a float, or None if empty/invalid."""
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        return None


@dataclass(frozen=True)
class DatabaseConfig:
    """Database configuration."""
    url: Optional[str] = os.getenv('DATABASE_URL') or None

    # Pool sizing only; the pool is not a correctness mechanism
    pool_size: int = int(os.getenv('DB_POOL_SIZE', '10'))
    idle_timeout: int = int(os.getenv('DB_IDLE_TIMEOUT', '20'))
    connect_timeout: int = int(os.getenv('DB_CONNECT_TIMEOUT', '10'))

    @property
    def is_configured(self) -> bool:
        return bool(self.url)

    @property
    def is_sqlite(self) -> bool:
        return bool(self.url) and self.url.startswith('sqlite')


@dataclass(frozen=True)
class ServerConfig:
    """HTTP server settings."""
    port: int = int(os.getenv('PORT', '5000'))
    client_origins: Tuple[str, ...] = _parse_origins(os.getenv('CLIENT_URL', ''))
    environment: str = os.getenv('APP_ENV', 'development').lower()
    static_dir: str = os.getenv('STATIC_DIR', os.path.join('frontend', 'dist'))

    @property
    def is_development(self) -> bool:
        return self.environment == 'development'

    @property
    def is_production(self) -> bool:
        return self.environment == 'production'


@dataclass(frozen=True)
class ClientConfig:
    """Settings for the API client and polling board."""
    api_url: str = os.getenv('API_URL', 'http://localhost:5000')
    poll_interval: int = int(os.getenv('POLL_INTERVAL_SECONDS', '30'))
    # None = wait indefinitely, matching a plain fetch
    timeout: Optional[float] = _parse_optional_float(os.getenv('API_TIMEOUT_SECONDS'))


@dataclass(frozen=True)
class AppConfig:
    """Main application configuration."""
    database: DatabaseConfig
    server: ServerConfig
    client: ClientConfig

    # Flask settings
    secret_key: str
    debug: bool


def load_config() -> AppConfig:
    """Load all configuration."""
    return AppConfig(
        database=DatabaseConfig(),
        server=ServerConfig(),
        client=ClientConfig(),
        secret_key=os.getenv('SECRET_KEY', 'dev-key-change-in-prod'),
        debug=os.getenv('FLASK_DEBUG', '0') == '1',
    )


# Singleton instance
config = load_config()
