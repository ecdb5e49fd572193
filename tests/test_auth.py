"""Tests for account management without real Google credentials."""
from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

import auth
from docs_errors import AuthError, NotFound

runner = CliRunner()


@pytest.fixture
def store(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> auth.AccountStore:
    temp_store = auth.AccountStore(tmp_path)
    monkeypatch.setattr(auth, "store", temp_store)
    monkeypatch.delenv("GSUITE_ACTIVE_ACCOUNT", raising=False)
    return temp_store


def add_account(store: auth.AccountStore, email: str) -> None:
    path = store.token_file(email)
    path.parent.mkdir(parents=True)
    path.write_text("{}")


def test_status_without_accounts(store):
    result = runner.invoke(auth.app, ["status", "--json"])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {
        "accounts": [],
        "active": None,
        "config_dir": str(store.root),
        "client_configured": False,
    }


def test_emails_only_counts_accounts_with_tokens(store):
    add_account(store, "b@example.com")
    add_account(store, "a@example.com")
    (store.accounts_dir / "half@example.com").mkdir()
    assert store.emails() == ["a@example.com", "b@example.com"]


def test_env_overrides_active_account(store, monkeypatch: pytest.MonkeyPatch):
    store.activate("file@example.com")
    assert store.active() == "file@example.com"
    monkeypatch.setenv("GSUITE_ACTIVE_ACCOUNT", "env@example.com")
    assert store.active() == "env@example.com"


def test_switch_to_unknown_account(store):
    result = runner.invoke(auth.app, ["switch", "nobody@example.com", "--json"])
    assert result.exit_code == 1
    assert json.loads(result.stdout)["code"] == "not_found"


def test_switch(store):
    add_account(store, "a@example.com")
    result = runner.invoke(auth.app, ["switch", "a@example.com", "--json"])
    assert result.exit_code == 0
    assert store.active() == "a@example.com"


def test_removing_active_account_activates_another(store):
    add_account(store, "a@example.com")
    add_account(store, "b@example.com")
    store.activate("a@example.com")

    result = runner.invoke(auth.app, ["remove", "a@example.com", "--force", "--json"])

    assert result.exit_code == 0
    assert store.emails() == ["b@example.com"]
    assert json.loads(result.stdout)["active"] == "b@example.com"


def test_forget_unknown_account(store):
    with pytest.raises(NotFound):
        store.forget("nobody@example.com")


def test_credentials_need_an_account(store):
    with pytest.raises(AuthError, match="no active account"):
        auth.get_credentials()


def test_credentials_need_a_token(store):
    with pytest.raises(AuthError, match="no credentials for a@example.com"):
        auth.get_credentials("a@example.com")
