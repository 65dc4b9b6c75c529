"""
Sakari Client

A Python client library and CLI for the Sakari SMS API with Basic authentication.
"""

__version__ = "0.1.0"

from .api import ApiClient, RequestDescriptor
from .config import resolve_account_id, resolve_base_url, resolve_client_id, resolve_client_secret
from .errors import ConfigurationError, RequestError, Result, SakariError
from .settings_store import SettingsStore

__all__ = [
    'ApiClient',
    'RequestDescriptor',
    'SettingsStore',
    'resolve_client_id',
    'resolve_client_secret',
    'resolve_account_id',
    'resolve_base_url',
    'SakariError',
    'ConfigurationError',
    'RequestError',
    'Result',
]
