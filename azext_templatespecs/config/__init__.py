"""User configuration for template spec completion."""

import copy
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from knack.util import CLIError

logger = logging.getLogger(__name__)

_MAX_TIMEOUT_SECONDS = 60

_BOOLEAN_KEYS = frozenset(
    {
        "completion.strict_mode",
        "completion.case_sensitive",
    }
)

_PARAMETER_NAME_KEYS = frozenset(
    {
        "completion.built_in_flag_name",
        "completion.resource_group_parameter_name",
        "completion.name_parameter_name",
    }
)

# Environment variables that override the file, checked on every load.
ENV_OVERRIDES = {
    "AZURE_TEMPLATESPECS_STRICT_MODE": "completion.strict_mode",
    "AZURE_TEMPLATESPECS_TIMEOUT": "completion.timeout_seconds",
}

DEFAULT_CONFIG = {
    "completion": {
        "timeout_seconds": 3,
        "strict_mode": False,
        "case_sensitive": False,
        "built_in_flag_name": "built_in",
        "resource_group_parameter_name": "resource_group_name",
        "name_parameter_name": "name",
    },
}


def _get_config_dir() -> Path:
    """Return the Azure CLI config directory (``AZURE_CONFIG_DIR`` or ``~/.azure``)."""
    return Path(os.environ.get("AZURE_CONFIG_DIR") or Path.home() / ".azure")


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ("1", "true", "yes", "on"):
        return True
    if text in ("0", "false", "no", "off", ""):
        return False
    raise CLIError(f"Expected a boolean value, got '{value}'.")


@dataclass(frozen=True)
class CompletionSettings:
    """Resolved settings consumed by completers and commands."""

    timeout_seconds: float = 3
    strict_mode: bool = False
    case_sensitive: bool = False
    built_in_flag_name: str = "built_in"
    resource_group_parameter_name: str = "resource_group_name"
    name_parameter_name: str = "name"


class TemplateSpecsConfig:
    """Manages ``templatespecs.yaml`` in the Azure CLI config directory.

    Provides dot-notation get/set over the nested config.  Values are
    merged over ``DEFAULT_CONFIG`` on load, so a missing or partial
    file is never an error.
    """

    CONFIG_FILENAME = "templatespecs.yaml"

    def __init__(self, config_dir: str | None = None):
        self.config_dir = Path(config_dir) if config_dir else _get_config_dir()
        self.config_path = self.config_dir / self.CONFIG_FILENAME
        self._config: dict = copy.deepcopy(DEFAULT_CONFIG)

    # ------------------------------------------------------------------ #
    #  Persistence                                                        #
    # ------------------------------------------------------------------ #

    def load(self, apply_env: bool = True) -> dict:
        """Load the file (if any) over the defaults.

        Environment overrides are applied unless *apply_env* is false,
        which callers that save the config back use.
        """
        self._config = copy.deepcopy(DEFAULT_CONFIG)

        if self.config_path.exists():
            try:
                with open(self.config_path, "r", encoding="utf-8") as f:
                    data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise CLIError(f"Could not parse {self.config_path}: {e}") from e
            if not isinstance(data, dict):
                raise CLIError(f"Expected a mapping at the top of {self.config_path}.")
            self._merge(self._config, data)

        for env_var, key in ENV_OVERRIDES.items():
            raw = os.environ.get(env_var) if apply_env else None
            if raw is not None:
                logger.debug("Config override from %s", env_var)
                self._set_nested(self._config, key, self.coerce_value(key, raw))

        return self._config

    def save(self):
        """Persist the current configuration."""
        self.config_dir.mkdir(parents=True, exist_ok=True)
        with open(self.config_path, "w", encoding="utf-8") as f:
            yaml.safe_dump(self._config, f, default_flow_style=False, sort_keys=False)
        logger.debug("Configuration saved to %s", self.config_path)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a config value by dot-separated key, e.g. ``completion.strict_mode``."""
        current = self._config
        for part in key.split("."):
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default
        return current

    def set(self, key: str, value: Any):
        """Validate, set and persist a value by dot-separated key."""
        value = self.coerce_value(key, value)
        self._set_nested(self._config, key, value)
        self.save()

    def to_dict(self) -> dict:
        return copy.deepcopy(self._config)

    def to_settings(self) -> CompletionSettings:
        """Resolve the loaded config into :class:`CompletionSettings`."""
        section = self.get("completion") or {}
        defaults = DEFAULT_CONFIG["completion"]
        resolved = {
            name: self.coerce_value(f"completion.{name}", section.get(name, default))
            for name, default in defaults.items()
        }
        return CompletionSettings(**resolved)

    # ------------------------------------------------------------------ #
    #  Validation                                                         #
    # ------------------------------------------------------------------ #

    @staticmethod
    def coerce_value(key: str, value: Any) -> Any:
        """Validate *value* for *key* and return it in its stored type."""
        if key == "completion.timeout_seconds":
            try:
                seconds = float(value)
            except (TypeError, ValueError) as e:
                raise CLIError(f"Invalid completion timeout: '{value}'. Expected a number of seconds.") from e
            if seconds <= 0 or seconds > _MAX_TIMEOUT_SECONDS:
                raise CLIError(
                    f"Completion timeout must be greater than 0 and at most {_MAX_TIMEOUT_SECONDS} seconds."
                )
            return seconds

        if key in _BOOLEAN_KEYS:
            return _parse_bool(value)

        if key in _PARAMETER_NAME_KEYS:
            name = str(value).strip()
            if not name.isidentifier():
                raise CLIError(f"'{value}' is not a valid parameter name for {key}.")
            return name

        raise CLIError(f"Unknown configuration key: '{key}'.")

    @staticmethod
    def _merge(base: dict, overlay: dict):
        for key, value in overlay.items():
            if isinstance(value, dict) and isinstance(base.get(key), dict):
                TemplateSpecsConfig._merge(base[key], value)
            else:
                base[key] = value

    @staticmethod
    def _set_nested(target: dict, key: str, value: Any):
        parts = key.split(".")
        current = target
        for part in parts[:-1]:
            if part not in current or not isinstance(current[part], dict):
                current[part] = {}
            current = current[part]
        current[parts[-1]] = value


def load_settings(config_dir: str | None = None) -> CompletionSettings:
    """Load ``templatespecs.yaml`` and return resolved settings."""
    config = TemplateSpecsConfig(config_dir)
    config.load()
    return config.to_settings()
