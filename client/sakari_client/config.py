"""
Credential resolution

Each setting has a single resolver with a fixed precedence:
stored value, then environment variable, then a hardcoded default.
"""

import os
from typing import Optional

from .errors import ConfigurationError
from .settings_store import DEFAULT_BASE_URL, ENV_VARS, SettingsStore

CREDENTIALS_URL = "https://hub.sakari.io/"


def _resolve(store: SettingsStore, key: str, default: Optional[str] = None) -> Optional[str]:
    stored = store.get(key)
    if stored:
        return stored
    return os.environ.get(ENV_VARS[key]) or default


def _missing_credential(label: str, key: str, placeholder: str) -> ConfigurationError:
    return ConfigurationError(
        f"{label} not configured. Set it with: sakari config set {key} <{placeholder}>\n"
        f"Or set {ENV_VARS[key]} environment variable.\n"
        f"Get your credentials at: {CREDENTIALS_URL}"
    )


def resolve_client_id(store: SettingsStore) -> str:
    """
    Resolve the API client ID.

    Raises:
        ConfigurationError: if neither the store nor the environment has one
    """
    client_id = _resolve(store, 'clientId')
    if not client_id:
        raise _missing_credential("Client ID", 'clientId', 'your-client-id')
    return client_id


def resolve_client_secret(store: SettingsStore) -> str:
    """
    Resolve the API client secret.

    Raises:
        ConfigurationError: if neither the store nor the environment has one
    """
    client_secret = _resolve(store, 'clientSecret')
    if not client_secret:
        raise _missing_credential("Client secret", 'clientSecret', 'your-client-secret')
    return client_secret


def resolve_account_id(store: SettingsStore) -> str:
    """Resolve the account ID; an empty string when none is configured"""
    return _resolve(store, 'accountId', '')


def resolve_base_url(store: SettingsStore) -> str:
    return _resolve(store, 'baseUrl', DEFAULT_BASE_URL)
