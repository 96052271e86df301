# src/cro_auditor/utils/config_manager.py
import copy
import json
import logging
from typing import Any, Dict, Optional

from cro_auditor.utils.path_utils import PathUtils

logger = logging.getLogger(__name__)

# Compiled-in defaults; settings.json is merged on top of these.
DEFAULT_SETTINGS: Dict[str, Any] = {
    "debug": {"level": "INFO", "silenced_loggers": {"PIL": "WARNING"}},
    "viewport": {"width": 1920, "height": 1080},
    "cta": {
        "min_text_length": 2,
        "max_text_length": 150,
        "max_second_pass_length": 200,
        "long_text_length": 80,
        "truncate_length": 100,
    },
    "social_proof": {"min_additional_text_length": 30, "max_text_length": 300},
    "whitespace": {
        "grid_columns": 3,
        "grid_rows": 4,
        "pixel_threshold": 240,
        "adaptive_threshold": False,
        "edge_aware": False,
    },
    "batch": {"workers": 4},
}

_TRUE_STRINGS = ("1", "true", "yes", "on")


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Returns a copy of `base` with `override` merged in, section by section."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _cast_like(reference: Any, value: Any) -> Any:
    if isinstance(reference, bool):
        return value.strip().lower() in _TRUE_STRINGS if isinstance(value, str) else bool(value)
    if isinstance(reference, (int, float)) and isinstance(value, str):
        return type(reference)(float(value)) if isinstance(reference, int) else float(value)
    return value


class ConfigManager:
    """
    Singleton holding the auditor settings: the compiled-in defaults overlaid
    with settings.json, plus any in-memory overrides (CLI flags, tests).
    """
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(ConfigManager, cls).__new__(cls)
            cls._instance._config = {}
            cls._instance.reset()
        return cls._instance

    def get_all(self) -> Dict[str, Any]:
        return self._config

    def get_nested(self, key_path: str, default: Optional[Any] = None) -> Any:
        """e.g. get_nested('whitespace.pixel_threshold', 240)"""
        value: Any = self._config
        for key in key_path.split('.'):
            if not isinstance(value, dict):
                return default
            value = value.get(key)
        return default if value is None else value

    def set_nested(self, key_path: str, value: Any) -> bool:
        """
        Sets an in-memory value, creating intermediate sections. Strings are cast
        to the type of the value they replace, so CLI input keeps the shipped type.
        """
        *sections, leaf = key_path.split('.')
        target = self._config
        for key in sections:
            target = target.setdefault(key, {})
            if not isinstance(target, dict):
                logger.error("Cannot set '%s': '%s' is not a section.", key_path, key)
                return False

        current = target.get(leaf)
        if current is not None:
            try:
                value = _cast_like(current, value)
            except ValueError:
                logger.warning("Could not cast '%s' for '%s' to %s; storing as given.",
                               value, key_path, type(current).__name__)

        target[leaf] = value
        logger.debug("Configuration updated: %s = %r", key_path, value)
        return True

    def reset(self):
        """Reloads the defaults and settings.json, discarding in-memory overrides."""
        config_path = PathUtils.get_settings_file()
        if not config_path.exists():
            logger.warning("settings.json not found at %s. Using built-in defaults.", config_path)
            self._config = copy.deepcopy(DEFAULT_SETTINGS)
            return
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                loaded = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Failed to load %s: %s. Using built-in defaults.", config_path, e)
            self._config = copy.deepcopy(DEFAULT_SETTINGS)
            return
        if not isinstance(loaded, dict):
            logger.error("%s must contain a JSON object. Using built-in defaults.", config_path)
            loaded = {}
        self._config = deep_merge(DEFAULT_SETTINGS, loaded)


config_manager = ConfigManager()
