"""
Centralized configuration for the Wolf tracker server.

Configuration is loaded from (in order of precedence):
1. Environment variables
2. .env file (if exists)
3. Default values

Usage:
    from config import config
    print(config.PORT)
    print(config.game_defaults.max_players)
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

env_path = Path(__file__).parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)


def get_env(key: str, default: str = "") -> str:
    """Get environment variable with default."""
    return os.environ.get(key, default)


def get_env_bool(key: str, default: bool = False) -> bool:
    """Get boolean environment variable."""
    val = os.environ.get(key, "").lower()
    if val in ("true", "1", "yes", "on"):
        return True
    if val in ("false", "0", "no", "off"):
        return False
    return default


def get_env_int(key: str, default: int = 0) -> int:
    """Get integer environment variable."""
    try:
        return int(os.environ.get(key, str(default)))
    except ValueError:
        return default


@dataclass
class GameDefaults:
    """Roster limits for the setup screen."""
    min_players: int = 3
    max_players: int = 5
    default_fields: int = 4  # minimum plus one convenience slot


@dataclass
class ServerConfig:
    """Server configuration."""
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "development"

    # Storage
    STORAGE_BACKEND: str = "sqlite"  # "sqlite", "redis", or "memory"
    SQLITE_PATH: str = "wolf.db"
    REDIS_URL: str = "redis://localhost:6379"

    # Slot keys (versioned by name)
    STATE_KEY: str = "wolf-simple-v05"
    THEME_KEY: str = "wolf-theme"

    game_defaults: GameDefaults = field(default_factory=GameDefaults)

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """Load configuration from environment variables."""
        return cls(
            HOST=get_env("HOST", "0.0.0.0"),
            PORT=get_env_int("PORT", 8000),
            DEBUG=get_env_bool("DEBUG", False),
            LOG_LEVEL=get_env("LOG_LEVEL", "INFO"),
            ENVIRONMENT=get_env("ENVIRONMENT", "development"),
            STORAGE_BACKEND=get_env("STORAGE_BACKEND", "sqlite").lower(),
            SQLITE_PATH=get_env("SQLITE_PATH", "wolf.db"),
            REDIS_URL=get_env("REDIS_URL", "redis://localhost:6379"),
            STATE_KEY=get_env("STATE_KEY", "wolf-simple-v05"),
            THEME_KEY=get_env("THEME_KEY", "wolf-theme"),
            game_defaults=GameDefaults(
                min_players=get_env_int("MIN_PLAYERS", 3),
                max_players=get_env_int("MAX_PLAYERS", 5),
                default_fields=get_env_int("DEFAULT_FIELDS", 4),
            ),
        )


# Global config instance - loaded once at module import
config = ServerConfig.from_env()


def reload_config() -> ServerConfig:
    """Reload configuration from environment (useful for testing)."""
    global config
    config = ServerConfig.from_env()
    return config
