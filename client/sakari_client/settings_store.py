"""
Settings Store

Persistent key-value settings for the Sakari CLI, kept as a JSON document in
the user's config directory. Only explicit overrides are written to disk;
reads fall back to defaults derived from the environment.
"""

import os
import json
import logging
from typing import Any, Dict, Optional

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

APP_NAME = "sakari-cli"
CONFIG_FILENAME = "config.json"
DEFAULT_BASE_URL = "https://api.sakari.io/v1"

# Settings key -> environment variable supplying its default
ENV_VARS = {
    'clientId': 'SAKARI_CLIENT_ID',
    'clientSecret': 'SAKARI_CLIENT_SECRET',
    'accountId': 'SAKARI_ACCOUNT_ID',
    'baseUrl': 'SAKARI_BASE_URL',
}


def get_default_config_dir() -> str:
    """Get the default configuration directory following XDG standards"""
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config_home:
        return os.path.join(xdg_config_home, APP_NAME)

    home = os.environ.get("HOME")
    if home:
        return os.path.join(home, ".config", APP_NAME)

    return os.path.join(os.getcwd(), ".config", APP_NAME)


def get_default_config_path() -> str:
    config_path = os.environ.get("SAKARI_CONFIG")
    if config_path:
        return config_path
    return os.path.join(get_default_config_dir(), CONFIG_FILENAME)


def default_settings() -> Dict[str, str]:
    """
    Compute the default value of every known setting.

    The environment is read on every call so that changes made after the
    store was opened are still observed.
    """
    defaults = {key: os.environ.get(env_var) or '' for key, env_var in ENV_VARS.items()}
    if not defaults['baseUrl']:
        defaults['baseUrl'] = DEFAULT_BASE_URL
    return defaults


class SettingsStore:
    """Durable JSON-backed settings with environment-derived defaults"""

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = config_path or get_default_config_path()
        self._overrides: Dict[str, Any] = {}
        self._load()

    def _load(self):
        """Load overrides from the settings file, if it exists"""
        if not os.path.exists(self.config_path):
            logger.debug(f"No settings file at {self.config_path}, using defaults")
            return

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise ConfigurationError(f"Could not read settings file {self.config_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Settings file {self.config_path} must contain a JSON object")

        self._overrides = data
        logger.debug(f"Loaded {len(data)} settings from {self.config_path}")

    def _save(self):
        """Write overrides to disk, replacing the previous file atomically"""
        config_dir = os.path.dirname(self.config_path)
        tmp_path = self.config_path + ".tmp"
        try:
            if config_dir:
                os.makedirs(config_dir, exist_ok=True)

            fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(self._overrides, f, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.config_path)
        except OSError as e:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise ConfigurationError(f"Could not write settings file {self.config_path}: {e}") from e

    def get(self, key: str) -> Any:
        """Return the stored value for key, or its default if never set"""
        if key in self._overrides:
            return self._overrides[key]
        return default_settings().get(key)

    def set(self, key: str, value: Any) -> None:
        self._overrides[key] = value
        self._save()
        logger.debug(f"Stored setting '{key}'")

    def list_all(self) -> Dict[str, Any]:
        """Return every known key and every stored key with its current value"""
        values = default_settings()
        values.update(self._overrides)
        return values

    def delete(self, key: str) -> None:
        """Remove an override so that key reverts to its default"""
        if key in self._overrides:
            del self._overrides[key]
            self._save()
            logger.debug(f"Deleted setting '{key}'")

    def clear(self) -> None:
        self._overrides = {}
        self._save()
        logger.debug("Cleared all settings")
