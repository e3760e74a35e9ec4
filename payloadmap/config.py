"""Payload engine configuration."""
import os
from dataclasses import dataclass
from typing import Optional


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class JsonConfig:
    """JSON encoder defaults used by ``to_json``."""

    max_depth: int = 512
    ensure_ascii: bool = True

    @classmethod
    def from_env(cls) -> "JsonConfig":
        """Load config from environment variables."""
        return cls(
            max_depth=int(os.getenv("PAYLOAD_JSON_MAX_DEPTH", "512")),
            ensure_ascii=_env_flag("PAYLOAD_JSON_ENSURE_ASCII", True),
        )


@dataclass
class AppConfig:
    """Application configuration."""

    log_level: str = "WARNING"
    json: Optional[JsonConfig] = None

    def __post_init__(self):
        """Fill in defaults."""
        if self.json is None:
            self.json = JsonConfig.from_env()

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Load config from environment variables."""
        return cls(
            log_level=os.getenv("PAYLOAD_LOG_LEVEL", "WARNING").upper(),
            json=JsonConfig.from_env(),
        )


# Global instance
app_config = AppConfig.from_env()
