"""Configuration manager for visualcodex."""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional
from pathlib import Path
import os
import shutil
import tempfile

import yaml

from ..constants import (
    CONFIG_DIR, CONFIG_FILE, API_KEY_ENV_VAR, PREFERRED_PROVIDER, APPROVAL_MODES,
    DEFAULT_ENDPOINT, DEFAULT_MODEL, DEFAULT_APPROVAL_MODE, DEFAULT_TEMPERATURE,
    DEFAULT_MAX_TOKENS, DEFAULT_REQUEST_TIMEOUT, DEFAULT_ENABLE_DEBUG
)
from ..errors import ConfigurationError
from ..models import AutonomyLevel
from ..utils.helpers import ensure_directory_exists, mask_secret
from ..utils.logging import logger
from .templates import CONFIG_TEMPLATE


@dataclass(frozen=True)
class ConfigSnapshot:
    """Read-only view of the settings, taken once at the start of a turn."""
    api_providers: Dict[str, str] = field(default_factory=dict)
    default_model: str = DEFAULT_MODEL
    approval_mode: AutonomyLevel = AutonomyLevel.SUGGEST
    endpoint: str = DEFAULT_ENDPOINT
    temperature: float = DEFAULT_TEMPERATURE
    max_tokens: int = DEFAULT_MAX_TOKENS
    request_timeout: int = DEFAULT_REQUEST_TIMEOUT
    system_prompt: Optional[str] = None
    env_api_key: str = ""

    def get_credential(self, provider_name: str = PREFERRED_PROVIDER) -> str:
        """Resolve the API key for a turn.

        The named provider's key wins, then the first configured key, then the
        environment fallback. Returns an empty string when nothing is set.
        """
        if self.api_providers.get(provider_name):
            return self.api_providers[provider_name]
        for key in self.api_providers.values():
            if key:
                return key
        return self.env_api_key or ""

    def get_default_model(self) -> str:
        return self.default_model


class ConfigManager:
    """Manages configuration loading, validation, and persistence for visualcodex."""

    def __init__(self, config_dir: Optional[Path] = None,
                 environ: Optional[Mapping[str, str]] = None):
        """Initialize the configuration manager.

        Args:
            config_dir: Custom configuration directory path
            environ: Environment to read the credential fallback from (os.environ if None)
        """
        self.config_dir = Path(config_dir) if config_dir else CONFIG_DIR
        self.config_file = self.config_dir / CONFIG_FILE.name
        self.environ = environ if environ is not None else os.environ

        self._config: Optional[Dict[str, Any]] = None
        self._overrides: Dict[str, Any] = {}

    def initialize(self) -> None:
        """Create the config template if needed and load the settings."""
        self._perform_initial_setup()
        self._config = self._load_config()

    def _perform_initial_setup(self) -> None:
        """Creates the config directory and a commented template if missing."""
        if self.config_file.exists():
            return
        try:
            ensure_directory_exists(self.config_dir)
            self.config_file.write_text(CONFIG_TEMPLATE.format(
                default_model=DEFAULT_MODEL,
                approval_mode=DEFAULT_APPROVAL_MODE,
                endpoint=DEFAULT_ENDPOINT,
                temperature=DEFAULT_TEMPERATURE,
                max_tokens=DEFAULT_MAX_TOKENS,
                request_timeout=DEFAULT_REQUEST_TIMEOUT,
            ), encoding="utf-8")
            logger.system(f"Configuration template generated: {self.config_file}")
            logger.system("Add an API key under 'api_providers' or set OPENAI_API_KEY.")
        except OSError as e:
            # Defaults still apply; the template is a convenience
            logger.warning(f"Could not create configuration template in {self.config_dir}: {e}")

    def _read_raw_config(self) -> Dict[str, Any]:
        if not self.config_file.exists():
            return {}
        try:
            with open(self.config_file, 'r', encoding="utf-8") as f:
                config_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Error parsing YAML file {self.config_file}: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Could not read {self.config_file}: {e}") from e

        if config_data is None:
            return {}
        if not isinstance(config_data, dict):
            raise ConfigurationError(f"{self.config_file} is not a valid YAML dictionary.")
        return config_data

    def _load_config(self) -> Dict[str, Any]:
        """Load and validate the configuration file."""
        config_data = self._read_raw_config()

        providers = config_data.get("api_providers") or {}
        if not isinstance(providers, dict):
            logger.warning(f"'api_providers' in {self.config_file} is not a map. No API keys loaded.")
            providers = {}
        config_data["api_providers"] = {str(k): str(v) for k, v in providers.items() if v}

        model = config_data.get("default_model", DEFAULT_MODEL)
        if not isinstance(model, str) or not model.strip():
            logger.warning(f"default_model in {self.config_file} must be a string. Defaulting to {DEFAULT_MODEL}.")
            model = DEFAULT_MODEL
        config_data["default_model"] = model.strip()

        mode = config_data.get("approval_mode", DEFAULT_APPROVAL_MODE)
        try:
            config_data["approval_mode"] = AutonomyLevel.parse(mode).value
        except ValueError:
            raise ConfigurationError(
                f"approval_mode in {self.config_file} must be one of {APPROVAL_MODES}, got '{mode}'."
            )

        endpoint = config_data.get("endpoint", DEFAULT_ENDPOINT)
        if not isinstance(endpoint, str) or not endpoint.strip():
            logger.warning(f"endpoint in {self.config_file} must be a URL string. Using the default.")
            endpoint = DEFAULT_ENDPOINT
        config_data["endpoint"] = endpoint.strip()

        temperature = config_data.get("temperature", DEFAULT_TEMPERATURE)
        if isinstance(temperature, bool) or not isinstance(temperature, (int, float)) or temperature < 0:
            logger.warning(f"temperature in {self.config_file} must be a non-negative number. Defaulting to {DEFAULT_TEMPERATURE}.")
            temperature = DEFAULT_TEMPERATURE
        config_data["temperature"] = float(temperature)

        for key, default in (("max_tokens", DEFAULT_MAX_TOKENS), ("request_timeout", DEFAULT_REQUEST_TIMEOUT)):
            value = config_data.get(key, default)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                logger.warning(f"{key} in {self.config_file} must be a positive integer. Defaulting to {default}.")
                value = default
            config_data[key] = value

        enable_debug = config_data.get("enable_debug", DEFAULT_ENABLE_DEBUG)
        if not isinstance(enable_debug, bool):
            logger.warning(f"enable_debug in {self.config_file} must be true/false. Defaulting to false.")
            enable_debug = DEFAULT_ENABLE_DEBUG
        config_data["enable_debug"] = enable_debug

        system_prompt = config_data.get("system_prompt")
        if system_prompt is not None and not isinstance(system_prompt, str):
            logger.warning(f"system_prompt in {self.config_file} must be a string. Using the built-in prompt.")
            system_prompt = None
        config_data["system_prompt"] = system_prompt or None

        logger.debug(f"Configuration loaded from {self.config_file}")
        return config_data

    @property
    def config(self) -> Dict[str, Any]:
        """Get the current configuration, overrides applied."""
        if self._config is None:
            raise RuntimeError("Configuration not loaded. Call initialize() first.")
        merged = self._config.copy()
        merged.update(self._overrides)
        return merged

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value."""
        return self.config.get(key, default)

    def apply_overrides(self, **values: Any) -> None:
        """Override settings for this process only; nothing is written to disk."""
        for key, value in values.items():
            if value is not None:
                self._overrides[key] = value

    def snapshot(self) -> ConfigSnapshot:
        """Take the immutable settings view used by one turn."""
        config = self.config
        return ConfigSnapshot(
            api_providers=dict(config["api_providers"]),
            default_model=config["default_model"],
            approval_mode=AutonomyLevel.parse(config["approval_mode"]),
            endpoint=config["endpoint"],
            temperature=config["temperature"],
            max_tokens=config["max_tokens"],
            request_timeout=config["request_timeout"],
            system_prompt=config["system_prompt"],
            env_api_key=self.environ.get(API_KEY_ENV_VAR, ""),
        )

    def reload(self) -> None:
        """Reload the configuration from disk."""
        self._config = self._load_config()

    def get_api_providers(self) -> Dict[str, str]:
        return dict(self.get("api_providers", {}))

    def set_api_provider(self, provider: str, api_key: str) -> None:
        """Store an API key for a provider."""
        providers = self._read_raw_config().get("api_providers") or {}
        if not isinstance(providers, dict):
            providers = {}
        providers[provider] = api_key
        self.set("api_providers", providers)
        logger.system(f"API key for '{provider}' saved ({mask_secret(api_key)}).")

    def get_approval_mode(self) -> AutonomyLevel:
        return AutonomyLevel.parse(self.get("approval_mode", DEFAULT_APPROVAL_MODE))

    def set_approval_mode(self, mode) -> None:
        """Persist the default autonomy level."""
        self.set("approval_mode", AutonomyLevel.parse(mode).value)

    def set(self, key: str, value: Any) -> None:
        """Persist one setting and reload."""
        current_config = self._read_raw_config()
        current_config[key] = value
        self._save_config(current_config)
        self.reload()

    def _save_config(self, config_data: Dict[str, Any]) -> None:
        """Write the settings through a temporary file so a failed write leaves the old file intact."""
        temp_name = None
        try:
            ensure_directory_exists(self.config_dir)
            with tempfile.NamedTemporaryFile('w', delete=False,
                                             dir=self.config_dir,
                                             suffix='.yaml', encoding='utf-8') as tmp_f:
                yaml.safe_dump(config_data, tmp_f, sort_keys=False, indent=2, default_flow_style=False)
                temp_name = tmp_f.name

            with open(temp_name, 'r', encoding='utf-8') as f:
                yaml.safe_load(f)

            shutil.move(temp_name, str(self.config_file))
            logger.debug(f"Configuration saved to {self.config_file}")
        except (OSError, yaml.YAMLError) as e:
            if temp_name and Path(temp_name).exists():
                Path(temp_name).unlink()
            raise ConfigurationError(f"Error updating {self.config_file}: {e}") from e

    def get_config_summary(self) -> Dict[str, Any]:
        """Effective settings for display, with API keys masked."""
        config = self.config
        snapshot = self.snapshot()
        return {
            "config_file": str(self.config_file),
            "default_model": config["default_model"],
            "approval_mode": config["approval_mode"],
            "endpoint": config["endpoint"],
            "temperature": config["temperature"],
            "max_tokens": config["max_tokens"],
            "request_timeout": config["request_timeout"],
            "enable_debug": config["enable_debug"],
            "api_providers": {name: mask_secret(key) for name, key in config["api_providers"].items()},
            "credential": mask_secret(snapshot.get_credential()),
        }


def create_config_manager(config_dir: Optional[Path] = None,
                          environ: Optional[Mapping[str, str]] = None) -> ConfigManager:
    """Create and initialize a configuration manager.

    Args:
        config_dir: Custom configuration directory path
        environ: Environment mapping for the credential fallback

    Returns:
        Initialized ConfigManager instance

    Raises:
        ConfigurationError: The settings file exists but is invalid
    """
    manager = ConfigManager(config_dir, environ)
    manager.initialize()
    return manager
