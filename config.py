"""Configuration management with environment variable support."""

import logging
import os
import secrets
import sys
from dataclasses import dataclass, field


def _parse_cors_origins() -> list[str]:
    """Parse CORS_ORIGINS environment variable."""
    origins = os.getenv("CORS_ORIGINS", "http://localhost:8000")
    return [o.strip() for o in origins.split(",") if o.strip()]


def _parse_seed() -> int | None:
    """Parse HIGHLOW_SEED; unset or empty means a fresh random shuffle each game."""
    seed = os.getenv("HIGHLOW_SEED", "").strip()
    return int(seed) if seed else None


@dataclass(frozen=True)
class CORSConfig:
    """CORS configuration."""

    allowed_origins: list[str] = field(default_factory=_parse_cors_origins)
    allow_credentials: bool = True
    allow_methods: list[str] = field(default_factory=lambda: ["*"])
    allow_headers: list[str] = field(default_factory=lambda: ["*"])


@dataclass(frozen=True)
class RateLimitConfig:
    """Rate limiting configuration."""

    enabled: bool = field(
        default_factory=lambda: os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
    )
    requests_per_minute: int = field(
        default_factory=lambda: int(os.getenv("RATE_LIMIT_RPM", "60"))
    )


@dataclass(frozen=True)
class SecurityConfig:
    """Security configuration."""

    secret_key: str = field(
        default_factory=lambda: os.getenv("SECRET_KEY", secrets.token_urlsafe(32))
    )


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""

    level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    format: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    datefmt: str = "%H:%M:%S"


@dataclass(frozen=True)
class GameConfig:
    """
    Default game configuration.

    The confidence thresholds grade a probability for display:
    >= high is HIGH, >= medium is MEDIUM, >= low is LOW, anything else VERY_LOW.
    """

    seed: int | None = field(default_factory=_parse_seed)
    confidence_high: float = 0.6
    confidence_medium: float = 0.35
    confidence_low: float = 0.2

    def __post_init__(self) -> None:
        """Validate threshold ordering."""
        if not 0.0 <= self.confidence_low <= self.confidence_medium <= self.confidence_high <= 1.0:
            raise ValueError("Confidence thresholds must satisfy 0 <= low <= medium <= high <= 1")


@dataclass(frozen=True)
class AppConfig:
    """Application configuration."""

    debug: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")
    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))
    session_ttl: int = 3600  # Session timeout in seconds

    game: GameConfig = field(default_factory=GameConfig)
    cors: CORSConfig = field(default_factory=CORSConfig)
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    security: SecurityConfig = field(default_factory=SecurityConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def setup_logging(settings: LoggingConfig | None = None) -> None:
    """
    Configure root logging for the application.

    Args:
        settings: Logging settings (defaults to the global config)
    """
    settings = settings or config.logging
    logging.basicConfig(
        level=getattr(logging, settings.level.upper(), logging.INFO),
        format=settings.format,
        datefmt=settings.datefmt,
        stream=sys.stdout,
    )


# Global configuration instance
config = AppConfig()
