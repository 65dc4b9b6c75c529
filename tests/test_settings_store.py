import json
import os
import stat
import sys

import pytest

from sakari_client.errors import ConfigurationError
from sakari_client.settings_store import DEFAULT_BASE_URL, SettingsStore, get_default_config_path


def test_defaults_without_environment(store):
    assert store.get("clientId") == ""
    assert store.get("clientSecret") == ""
    assert store.get("accountId") == ""
    assert store.get("baseUrl") == DEFAULT_BASE_URL
    assert store.get("somethingElse") is None


def test_defaults_come_from_environment(store, monkeypatch):
    monkeypatch.setenv("SAKARI_CLIENT_ID", "env-id")
    monkeypatch.setenv("SAKARI_CLIENT_SECRET", "env-secret")
    monkeypatch.setenv("SAKARI_ACCOUNT_ID", "env-account")
    monkeypatch.setenv("SAKARI_BASE_URL", "https://sandbox.example.com/v1")

    assert store.get("clientId") == "env-id"
    assert store.get("clientSecret") == "env-secret"
    assert store.get("accountId") == "env-account"
    assert store.get("baseUrl") == "https://sandbox.example.com/v1"


def test_set_survives_reopen(store, config_path):
    store.set("clientId", "abc")
    store.set("custom", "anything goes")

    reopened = SettingsStore(config_path)
    assert reopened.get("clientId") == "abc"
    assert reopened.get("custom") == "anything goes"

    with open(config_path) as f:
        assert json.load(f) == {"clientId": "abc", "custom": "anything goes"}


def test_stored_value_beats_environment(store, monkeypatch):
    monkeypatch.setenv("SAKARI_ACCOUNT_ID", "env-account")
    store.set("accountId", "stored-account")
    assert store.get("accountId") == "stored-account"


def test_delete_reverts_single_key(store, config_path, monkeypatch):
    monkeypatch.setenv("SAKARI_CLIENT_ID", "env-id")
    store.set("clientId", "abc")
    store.set("accountId", "acc-1")

    store.delete("clientId")

    assert store.get("clientId") == "env-id"
    assert store.get("accountId") == "acc-1"
    assert SettingsStore(config_path).get("clientId") == "env-id"


def test_delete_missing_key_is_noop(store, config_path):
    store.delete("neverSet")
    assert not os.path.exists(config_path)


def test_clear_reverts_everything(store, config_path):
    store.set("clientId", "abc")
    store.set("baseUrl", "http://localhost:8080")
    store.set("custom", "x")

    store.clear()

    assert store.get("clientId") == ""
    assert store.get("baseUrl") == DEFAULT_BASE_URL
    assert store.get("custom") is None
    assert SettingsStore(config_path).list_all() == {
        "clientId": "",
        "clientSecret": "",
        "accountId": "",
        "baseUrl": DEFAULT_BASE_URL,
    }


def test_list_all_merges_defaults_and_overrides(store):
    store.set("accountId", "acc-1")
    store.set("custom", "x")

    values = store.list_all()
    assert values["accountId"] == "acc-1"
    assert values["custom"] == "x"
    assert values["baseUrl"] == DEFAULT_BASE_URL


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions only")
def test_settings_file_is_private(store, config_path):
    store.set("clientSecret", "xyz")
    assert stat.S_IMODE(os.stat(config_path).st_mode) == 0o600


def test_invalid_settings_file(config_path):
    os.makedirs(os.path.dirname(config_path))
    with open(config_path, "w") as f:
        f.write("[1, 2, 3]")

    with pytest.raises(ConfigurationError):
        SettingsStore(config_path)


def test_default_config_path(monkeypatch, tmp_path):
    assert get_default_config_path() == str(tmp_path / "xdg" / "sakari-cli" / "config.json")

    monkeypatch.setenv("SAKARI_CONFIG", "/tmp/elsewhere.json")
    assert get_default_config_path() == "/tmp/elsewhere.json"


def test_unwritable_settings_location(tmp_path):
    # A regular file where the config directory should be
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("")
    store = SettingsStore(str(blocker / "config.json"))

    assert store.get("clientId") == ""
    with pytest.raises(ConfigurationError, match="Could not write settings file"):
        store.set("clientId", "abc")
