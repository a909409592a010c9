"""Configuration management for visualcodex."""

from .manager import ConfigManager, ConfigSnapshot, create_config_manager
from .templates import CONFIG_TEMPLATE, SYSTEM_PROMPT_TEMPLATE, FOLLOW_UP_PROMPT_TEMPLATE

__all__ = [
    "ConfigManager",
    "ConfigSnapshot",
    "create_config_manager",
    "CONFIG_TEMPLATE",
    "SYSTEM_PROMPT_TEMPLATE",
    "FOLLOW_UP_PROMPT_TEMPLATE",
]
