"""Configuration management for the content curator."""

from .loader import Config, load_config, load_sources, save_config, save_sources
from .models import (
    ConfigModel,
    LedgerConfig,
    LLMConfig,
    RunDefaults,
    SourceConfig,
    ValidationConfig,
    ValidationRules,
    VoiceConfig,
)

__all__ = [
    "Config",
    "ConfigModel",
    "LedgerConfig",
    "LLMConfig",
    "RunDefaults",
    "SourceConfig",
    "ValidationConfig",
    "ValidationRules",
    "VoiceConfig",
    "load_config",
    "load_sources",
    "save_config",
    "save_sources",
]
