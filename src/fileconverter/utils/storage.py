"""Config storage as JSON in the user's home directory."""

import json
import logging

from pydantic import ValidationError

from fileconverter.models.config import CONFIG_DIR, CONFIG_FILE, AppConfig

logger = logging.getLogger(__name__)


def load_config() -> AppConfig:
    """Load config from disk, falling back to defaults if missing or invalid."""
    if not CONFIG_FILE.exists():
        return AppConfig()

    try:
        raw = json.loads(CONFIG_FILE.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Failed to read config file: %s", e)
        return AppConfig()

    try:
        return AppConfig(**raw)
    except (TypeError, ValidationError) as e:
        logger.warning("Invalid config file %s, using defaults: %s", CONFIG_FILE, e)
        return AppConfig()


def save_config(config: AppConfig) -> None:
    """Save config to disk."""
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    CONFIG_FILE.write_text(json.dumps(config.model_dump(), indent=2, ensure_ascii=False), encoding="utf-8")
    logger.info("Config saved to %s", CONFIG_FILE)
