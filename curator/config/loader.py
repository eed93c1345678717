"""Configuration loader."""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import ValidationError
from rich.console import Console

from ..errors import ConfigurationError
from .models import ConfigModel, SourceConfig

console = Console()

DEFAULT_CONFIG_DIR = Path.home() / ".config" / "curator"


class Config:
    """Configuration manager."""

    def __init__(self, config_path: Optional[Path] = None) -> None:
        """Initialize config manager."""
        if config_path is None:
            env_path = os.environ.get("CURATOR_CONFIG")
            config_path = Path(env_path) if env_path else DEFAULT_CONFIG_DIR / "config.yaml"
        self.config_path = config_path
        self._config: Optional[ConfigModel] = None

    @classmethod
    def from_model(cls, model: ConfigModel, config_path: Optional[Path] = None) -> "Config":
        """Wrap an already-built config model (tests, embedding)."""
        config = cls(config_path or Path(model.workspace_root).expanduser() / "config.yaml")
        config._config = model
        return config

    @property
    def config(self) -> ConfigModel:
        """Get loaded config."""
        if self._config is None:
            self._config = load_config(self.config_path)
        return self._config

    @property
    def sources_path(self) -> Path:
        """Path of the sources file next to the config."""
        return self.config_path.parent / "sources.yaml"

    @property
    def workspace_root(self) -> Path:
        """Get workspace root path."""
        path = Path(self.config.workspace_root).expanduser()
        path.mkdir(parents=True, exist_ok=True)
        return path

    @property
    def ledger_path(self) -> Path:
        """Get dedup ledger file path."""
        return self.workspace_root / self.config.ledger.filename

    def get_content_dir(self, channel: str) -> Path:
        """Get artifact directory for a channel (blog or social)."""
        content_dir = self.workspace_root / "content" / channel
        content_dir.mkdir(parents=True, exist_ok=True)
        return content_dir

    def get_llm_config(self) -> Dict[str, Any]:
        """Get LLM configuration dict."""
        llm_config = self.config.llm.model_dump()

        # Handle API key from environment if specified
        if llm_config.get("api_key_env"):
            api_key = os.environ.get(llm_config["api_key_env"])
            if api_key:
                llm_config["api_key"] = api_key

        return llm_config


def load_config(config_path: Path) -> ConfigModel:
    """Load configuration from YAML file."""
    if not config_path.exists():
        raise ConfigurationError(f"Config file not found: {config_path}")

    try:
        with open(config_path) as f:
            config_data = yaml.safe_load(f)

        if config_data is None:
            config_data = {}

        return ConfigModel(**config_data)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in config file: {e}")
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def load_sources(sources_path: Path) -> List[SourceConfig]:
    """Load sources from YAML file."""
    if not sources_path.exists():
        raise FileNotFoundError(f"Sources file not found: {sources_path}")

    try:
        with open(sources_path) as f:
            sources_data = yaml.safe_load(f)

        if sources_data is None or "sources" not in sources_data:
            return []

        sources = []
        for source_data in sources_data["sources"]:
            try:
                sources.append(SourceConfig(**source_data))
            except ValidationError as e:
                console.print(
                    f"[yellow]Skipping invalid source {source_data.get('name', 'unknown')}: {e}[/yellow]"
                )

        return sources
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in sources file: {e}")


def save_config(config: ConfigModel, config_path: Path) -> None:
    """Save configuration to YAML file."""
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w") as f:
        yaml.dump(config.model_dump(), f, default_flow_style=False, sort_keys=False)


def save_sources(sources: List[SourceConfig], sources_path: Path) -> None:
    """Save sources to YAML file."""
    sources_path.parent.mkdir(parents=True, exist_ok=True)

    sources_data = {"sources": [s.model_dump() for s in sources]}

    with open(sources_path, "w") as f:
        yaml.dump(sources_data, f, default_flow_style=False, sort_keys=False)
