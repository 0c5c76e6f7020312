"""Configuration loader."""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import ValidationError

from .models import ConfigModel, FeedConfig

logger = logging.getLogger(__name__)

CONFIG_PATH_ENV = "NEWSFOUND_CONFIG"


def default_config_path() -> Path:
    """Config path from the environment, else the per-user default."""
    env_path = os.environ.get(CONFIG_PATH_ENV)
    if env_path:
        return Path(env_path).expanduser()
    return Path.home() / ".config" / "newsfound" / "config.yaml"


class Config:
    """Configuration manager."""

    def __init__(self, config_path: Optional[Path] = None) -> None:
        """Initialize config manager."""
        if config_path is None:
            config_path = default_config_path()
        self.config_path = config_path
        self._config: Optional[ConfigModel] = None

    @property
    def config(self) -> ConfigModel:
        """Get loaded config, falling back to defaults when no file exists."""
        if self._config is None:
            if self.config_path.exists():
                self._config = load_config(self.config_path)
            else:
                logger.debug("No config file at %s, using defaults", self.config_path)
                self._config = ConfigModel()
        return self._config

    @property
    def feeds_path(self) -> Path:
        """Feeds file lives beside the config file."""
        return self.config_path.parent / "feeds.yaml"

    @property
    def environment(self) -> str:
        """Deployment environment tag."""
        return _from_env(self.config.environment_env) or self.config.environment

    def get_db_config(self) -> Dict[str, Any]:
        """Get database configuration dict."""
        db_config = self.config.database.model_dump()

        url = _from_env(db_config.get("url_env"))
        if url:
            db_config["url"] = url

        return db_config

    def get_ollama_config(self) -> Dict[str, Any]:
        """Get inference configuration dict."""
        ollama_config = self.config.ollama.model_dump()

        host = _from_env(ollama_config.get("host_env"))
        if host:
            ollama_config["host"] = host

        model = _from_env(ollama_config.get("model_env"))
        if model:
            ollama_config["model"] = model

        num_ctx = _from_env(ollama_config.get("num_ctx_env"))
        if num_ctx:
            try:
                ollama_config["num_ctx"] = int(num_ctx)
            except ValueError:
                raise ValueError(
                    f"{ollama_config['num_ctx_env']} must be an integer, got {num_ctx!r}"
                )

        return ollama_config

    def get_feeds(self) -> List[FeedConfig]:
        """Enabled feeds from feeds.yaml."""
        return [f for f in load_feeds(self.feeds_path) if f.enabled]


def _from_env(name: Optional[str]) -> Optional[str]:
    if not name:
        return None
    return os.environ.get(name) or None


def load_config(config_path: Path) -> ConfigModel:
    """Load configuration from YAML file."""
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with open(config_path) as f:
            config_data = yaml.safe_load(f)

        if config_data is None:
            config_data = {}

        return ConfigModel(**config_data)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in config file: {e}")
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}")


def load_feeds(feeds_path: Path) -> List[FeedConfig]:
    """Load feeds from YAML file."""
    if not feeds_path.exists():
        raise FileNotFoundError(f"Feeds file not found: {feeds_path}")

    try:
        with open(feeds_path) as f:
            feeds_data = yaml.safe_load(f)

        if feeds_data is None or "feeds" not in feeds_data:
            return []

        feeds = []
        for feed_data in feeds_data["feeds"]:
            try:
                feeds.append(FeedConfig(**feed_data))
            except ValidationError as e:
                logger.warning("Skipping invalid feed %s: %s", feed_data.get("url", "unknown"), e)

        return feeds
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in feeds file: {e}")


def save_config(config: ConfigModel, config_path: Path) -> None:
    """Save configuration to YAML file."""
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w") as f:
        yaml.dump(config.model_dump(), f, default_flow_style=False, sort_keys=False)


def save_feeds(feeds: List[FeedConfig], feeds_path: Path) -> None:
    """Save feeds to YAML file."""
    feeds_path.parent.mkdir(parents=True, exist_ok=True)

    feeds_data = {"feeds": [f.model_dump() for f in feeds]}

    with open(feeds_path, "w") as f:
        yaml.dump(feeds_data, f, default_flow_style=False, sort_keys=False)
