"""
Configuration management for Jotter.

Uses XDG base directories:
- Config: ~/.config/jotter/config.toml
- Data: ~/jotter/ (notes database and widget state)
"""

from pathlib import Path
from typing import Any
import logging
import os

# XDG defaults
DEFAULT_CONFIG_HOME = Path.home() / ".config"
DEFAULT_DATA_HOME = Path.home() / "jotter"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_config_dir() -> Path:
    """Get the config directory (XDG_CONFIG_HOME/jotter)."""
    base = Path(os.environ.get("XDG_CONFIG_HOME", DEFAULT_CONFIG_HOME))
    return base / "jotter"


def get_jotter_home() -> Path:
    """Get the jotter data directory (~/jotter or JOTTER_HOME)."""
    if env_home := os.environ.get("JOTTER_HOME"):
        return Path(env_home)
    return DEFAULT_DATA_HOME


def get_config_path() -> Path:
    """Get the path to config.toml."""
    return get_config_dir() / "config.toml"


def get_db_path(config: dict[str, Any] | None = None) -> Path:
    """Get the path to the notes database (<db_name>.db)."""
    config = config or load_config()
    return get_jotter_home() / f"{config['storage']['db_name']}.db"


def get_state_path() -> Path:
    """Get the path to state.db (login flag, draft, sort preference)."""
    return get_jotter_home() / "state.db"


def ensure_dirs() -> None:
    """Ensure all required directories exist."""
    get_config_dir().mkdir(parents=True, exist_ok=True)
    get_jotter_home().mkdir(parents=True, exist_ok=True)


def load_config() -> dict[str, Any]:
    """
    Load configuration from config.toml.

    Returns default config if file doesn't exist. Sections present in the
    file are merged over the defaults key by key.
    """
    config = get_default_config()
    config_path = get_config_path()

    if not config_path.exists():
        return config

    # Lazy import tomli only when needed
    import tomli

    with open(config_path, "rb") as f:
        user_config = tomli.load(f)

    for section, values in user_config.items():
        if isinstance(values, dict) and isinstance(config.get(section), dict):
            config[section].update(values)
        else:
            config[section] = values

    return config


def get_default_config() -> dict[str, Any]:
    """Return default configuration."""
    return {
        "jotter": {
            "home": str(get_jotter_home()),
        },
        "storage": {
            "db_name": "NotesAppDB",
            "db_version": 1,
        },
        "session": {
            "login_ttl_days": 30,
        },
        "drafts": {
            "debounce_seconds": 0.3,  # Quiet period before a draft is written
        },
        "logging": {
            "level": "WARNING",
        },
    }


def configure_logging(config: dict[str, Any] | None = None) -> None:
    """Configure root logging from JOTTER_LOG_LEVEL or the [logging] section."""
    config = config or load_config()
    level_name = os.environ.get("JOTTER_LOG_LEVEL") or config["logging"]["level"]
    level = logging.getLevelName(str(level_name).upper())
    if not isinstance(level, int):
        level = logging.WARNING

    logging.basicConfig(format=LOG_FORMAT, level=level)
