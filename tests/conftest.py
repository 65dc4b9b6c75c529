import json

import pytest
import requests

from sakari_client.settings_store import ENV_VARS, SettingsStore


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Keep the developer's own Sakari settings out of every test"""
    for env_var in ENV_VARS.values():
        monkeypatch.delenv(env_var, raising=False)
    for env_var in ("SAKARI_CONFIG", "LOG_LEVEL", "LOG_FILE"):
        monkeypatch.delenv(env_var, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))


@pytest.fixture
def config_path(tmp_path):
    return str(tmp_path / "sakari" / "config.json")


@pytest.fixture
def store(config_path):
    return SettingsStore(config_path)


@pytest.fixture
def credentials(store):
    store.set("clientId", "abc")
    store.set("clientSecret", "xyz")
    store.set("accountId", "acc-1")
    return store


def make_response(status_code=200, body=None, text=None):
    """Build a requests.Response as the transport would return it"""
    response = requests.Response()
    response.status_code = status_code
    response.encoding = "utf-8"
    # Body already in memory, as if the stream had been read
    response._content_consumed = True
    if body is not None:
        response._content = json.dumps(body).encode("utf-8")
        response.headers["Content-Type"] = "application/json"
    elif text is not None:
        response._content = text.encode("utf-8")
        response.headers["Content-Type"] = "text/plain"
    else:
        response._content = b""
    return response
