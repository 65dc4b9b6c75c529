"""
Sakari API Client Module

This module builds authenticated HTTP requests against the Sakari REST API
and normalizes their responses and failures.
"""

import base64
import json
import logging
import time
import urllib.parse
from typing import Any, Dict, Optional

import requests

from .config import resolve_base_url, resolve_client_id, resolve_client_secret
from .errors import RequestError, Result, SakariError
from .settings_store import SettingsStore

logger = logging.getLogger(__name__)

# Seconds, for the whole exchange including the body
REQUEST_TIMEOUT = 30

# Bytes per body read; small so the deadline is checked as data arrives
READ_CHUNK_SIZE = 1

METHODS = ('GET', 'POST', 'PUT', 'DELETE')


class RequestDescriptor:
    """Description of one outgoing API call"""

    def __init__(self, method: str, path: str, params: Optional[Dict[str, Any]] = None,
                 body: Any = None):
        method = method.upper()
        if method not in METHODS:
            raise ValueError(f"Unsupported HTTP method: {method}")
        self.method = method
        self.path = path
        self.params = params or {}
        self.body = body

    def __repr__(self):
        return f"RequestDescriptor({self.method} {self.path})"


def basic_auth_token(client_id: str, client_secret: str) -> str:
    """Base64 encoding of "<client_id>:<client_secret>" """
    credentials = f"{client_id}:{client_secret}".encode('utf-8')
    return base64.b64encode(credentials).decode('ascii')


def build_url(base_url: str, path: str) -> str:
    """Join the base URL and a request path with exactly one slash"""
    if urllib.parse.urlparse(path).scheme:
        return path
    if not path:
        return base_url
    return base_url.rstrip('/') + '/' + path.lstrip('/')


def parse_body(content: bytes, encoding: Optional[str] = None) -> Any:
    """Decode a response body as JSON, falling back to the raw text"""
    if not content:
        return ''
    try:
        return json.loads(content)
    except ValueError:
        return content.decode(encoding or 'utf-8', errors='replace')


def _error_detail(body: Any) -> Optional[str]:
    if isinstance(body, dict):
        detail = body.get('error') or body.get('message')
        if isinstance(detail, dict):
            detail = detail.get('message') or detail.get('description')
        if detail:
            return str(detail)
    return None


class ApiClient:
    """Client for the Sakari API, reading credentials from a SettingsStore"""

    def __init__(self, store: SettingsStore, timeout: float = REQUEST_TIMEOUT):
        self.store = store
        self.timeout = timeout

    def build_headers(self) -> Dict[str, str]:
        """Headers sent with every request; raises ConfigurationError without credentials"""
        client_id = resolve_client_id(self.store)
        client_secret = resolve_client_secret(self.store)
        return {
            'Authorization': f"Basic {basic_auth_token(client_id, client_secret)}",
            'Content-Type': 'application/json',
            'Accept': 'application/json',
        }

    def prepare(self, descriptor: RequestDescriptor) -> requests.PreparedRequest:
        """Turn a descriptor into a prepared request without sending it"""
        headers = self.build_headers()
        url = build_url(resolve_base_url(self.store), descriptor.path)

        kwargs = {}
        if descriptor.method == 'GET':
            kwargs['params'] = descriptor.params
        elif descriptor.method in ('POST', 'PUT'):
            kwargs['json'] = descriptor.body if descriptor.body is not None else {}

        request = requests.Request(descriptor.method, url, headers=headers, **kwargs)
        return request.prepare()

    def send(self, descriptor: RequestDescriptor) -> Any:
        """
        Issue the request described by descriptor.

        Args:
            descriptor: The call to make

        Returns:
            The parsed JSON response body, or the raw text if it is not JSON

        Raises:
            ConfigurationError: if the client ID or secret is not configured
            RequestError: on timeout, transport failure or a non-2xx status
        """
        try:
            prepared = self.prepare(descriptor)
        except requests.exceptions.RequestException as e:
            # Malformed base URL or path, e.g. no scheme
            raise RequestError(f"Request failed: {e}") from e
        logger.debug(f"{prepared.method} {prepared.url}")

        deadline = time.monotonic() + self.timeout

        # A fresh session per call, so nothing is shared between requests
        with requests.Session() as session:
            settings = session.merge_environment_settings(prepared.url, {}, True, None, None)
            try:
                response = session.send(prepared, timeout=self.timeout, **settings)
            except requests.exceptions.Timeout as e:
                raise self._timed_out(prepared, e) from e
            except requests.exceptions.RequestException as e:
                logger.debug(f"{prepared.method} {prepared.url} failed: {e}")
                raise RequestError(f"Request failed: {e}") from e

            try:
                content = self._read_body(response, deadline)
            except requests.exceptions.RequestException as e:
                # A stalled read ends in a socket timeout, which is past the deadline
                if isinstance(e, requests.exceptions.Timeout) or time.monotonic() >= deadline:
                    raise self._timed_out(prepared, e) from e
                logger.debug(f"{prepared.method} {prepared.url} failed: {e}")
                raise RequestError(f"Request failed: {e}") from e
            finally:
                response.close()

        if content is None:
            raise self._timed_out(prepared, None)

        logger.debug(f"{prepared.method} {prepared.url} -> {response.status_code}")
        body = parse_body(content, response.encoding)

        if not 200 <= response.status_code < 300:
            message = f"Request failed with status code {response.status_code}"
            detail = _error_detail(body)
            if detail:
                message = f"{message}: {detail}"
            raise RequestError(message, status_code=response.status_code, body=body)

        return body

    @staticmethod
    def _read_body(response: requests.Response, deadline: float) -> Optional[bytes]:
        """Read the streamed body, or return None once the deadline has passed"""
        chunks = []
        for chunk in response.iter_content(chunk_size=READ_CHUNK_SIZE):
            if time.monotonic() >= deadline:
                return None
            chunks.append(chunk)
        if time.monotonic() >= deadline:
            return None
        return b''.join(chunks)

    def _timed_out(self, prepared: requests.PreparedRequest, error: Optional[Exception]) -> RequestError:
        logger.debug(f"{prepared.method} {prepared.url} timed out: {error}")
        return RequestError(f"Request timed out after {self.timeout:g}s", timeout=True)

    def attempt(self, descriptor: RequestDescriptor) -> Result:
        """Like send, but returns a Result instead of raising SakariError"""
        try:
            return Result(value=self.send(descriptor))
        except SakariError as e:
            return Result(error=e)

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.send(RequestDescriptor('GET', path, params=params))

    def post(self, path: str, body: Any = None) -> Any:
        return self.send(RequestDescriptor('POST', path, body=body))

    def put(self, path: str, body: Any = None) -> Any:
        return self.send(RequestDescriptor('PUT', path, body=body))

    def delete(self, path: str) -> Any:
        return self.send(RequestDescriptor('DELETE', path))
