"""Command line tests using click's CliRunner with an injected store."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from cfgstore.cli import cli, render_table


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def invoke(runner, store):
    """Invoke the CLI against the test store."""

    def _invoke(*args: str, input: str | None = None):
        return runner.invoke(cli, list(args), obj=store, input=input)

    return _invoke


def test_addcfg_creates_typed_setting(invoke, store):
    result = invoke("addcfg", "mail.port", "25", "--type", "integer", "--category", "mail")

    assert result.exit_code == 0, result.output
    assert "Created mail.port = 25 (integer)" in result.output
    assert store.get("mail.port") == 25
    assert store.get_setting("mail.port").category == "mail"


def test_addcfg_refuses_existing_key(invoke, store):
    store.set("mail.port", "25", setting_type="integer")

    result = invoke("addcfg", "mail.port", "587")

    assert result.exit_code == 1
    assert "Setting already exists" in result.output
    assert store.get("mail.port") == 25


def test_addcfg_rejects_unknown_type(invoke):
    result = invoke("addcfg", "k", "v", "--type", "float")
    assert result.exit_code == 2
    assert "Invalid value" in result.output


def test_shcfg_single_key(invoke, store):
    store.set("mail.tls", "yes", setting_type="boolean")

    result = invoke("shcfg", "mail.tls")

    assert result.exit_code == 0
    assert result.output.strip() == "true"


def test_shcfg_missing_key_fails(invoke):
    result = invoke("shcfg", "nope")
    assert result.exit_code == 1
    assert "Setting not found: nope" in result.output


def test_shcfg_missing_key_with_default(invoke):
    result = invoke("shcfg", "nope", "--default", "fallback")
    assert result.exit_code == 0
    assert result.output.strip() == "fallback"


def test_shcfg_single_key_json(invoke, store):
    store.set("app.features", '{"cms": true}', setting_type="json")
    result = invoke("shcfg", "app.features", "--json")
    assert json.loads(result.output) == {"cms": True}


def test_shcfg_lists_table(invoke, seed_settings):
    result = invoke("shcfg")

    assert result.exit_code == 0
    lines = result.output.strip().splitlines()
    assert lines[0].split() == ["KEY", "VALUE", "TYPE", "CATEGORY"]
    assert len(lines) == 2 + len(seed_settings)
    assert any(line.startswith("app.features") and "Uncategorized" in line for line in lines)


def test_shcfg_filters_by_category_and_type(invoke, seed_settings):
    result = invoke("shcfg", "--category", "mail", "--json")
    assert json.loads(result.output) == {"mail.driver": "smtp", "mail.port": 25, "mail.tls": True}

    result = invoke("shcfg", "--type", "integer", "--json")
    assert json.loads(result.output) == {"dns.ttl": 3600, "mail.port": 25}


def test_shcfg_lists_categories(invoke, seed_settings):
    result = invoke("shcfg", "--categories")
    assert result.output.split() == ["dns", "mail"]


def test_shcfg_empty_store(invoke):
    result = invoke("shcfg")
    assert result.exit_code == 0
    assert "No settings found" in result.output


def test_chcfg_recoerces_through_stored_type(invoke, store):
    store.set("mail.port", "25", setting_type="integer", category="mail")

    result = invoke("chcfg", "mail.port", "not-a-number")

    assert result.exit_code == 0
    assert "Updated mail.port = 0 (integer)" in result.output
    setting = store.get_setting("mail.port")
    assert setting.typed_value == 0
    assert setting.category == "mail"


def test_chcfg_missing_key_fails(invoke, store):
    result = invoke("chcfg", "ghost", "1")
    assert result.exit_code == 1
    assert "Setting not found" in result.output
    assert store.has("ghost") is False


def test_delcfg_force(invoke, store):
    store.set("temp", "1")
    result = invoke("delcfg", "temp", "--force")
    assert result.exit_code == 0
    assert "Deleted temp" in result.output
    assert store.has("temp") is False


def test_delcfg_confirmation_declined(invoke, store):
    store.set("temp", "1")
    result = invoke("delcfg", "temp", input="n\n")
    assert result.exit_code == 0
    assert "Deletion cancelled" in result.output
    assert store.has("temp") is True


def test_delcfg_confirmation_accepted(invoke, store):
    store.set("temp", "1")
    result = invoke("delcfg", "temp", input="y\n")
    assert result.exit_code == 0
    assert store.has("temp") is False


def test_delcfg_missing_key_fails(invoke):
    result = invoke("delcfg", "ghost", "--force")
    assert result.exit_code == 1
    assert "Setting not found" in result.output


def test_strict_mode_error_exit(runner, strict_store):
    strict_store.set("port", "25", setting_type="integer")
    result = runner.invoke(cli, ["chcfg", "port", "abc"], obj=strict_store)
    assert result.exit_code == 1
    assert "Error: Cannot decode 'abc' as integer" in result.output


def test_cli_bootstraps_store_from_environment(runner, tmp_path, monkeypatch):
    """Without an injected store the group builds one from BaseConfig."""
    monkeypatch.setenv("CFGSTORE_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("CFGSTORE_DATABASE_URL", raising=False)

    added = runner.invoke(cli, ["addcfg", "dns.ttl", "300", "--type", "integer"])
    assert added.exit_code == 0, added.output

    shown = runner.invoke(cli, ["shcfg", "dns.ttl"])
    assert shown.exit_code == 0
    assert shown.output.strip().endswith("300")
    assert (tmp_path / "cfgstore.db").exists()
    assert (tmp_path / "logs" / "cfgstore.log").exists()


def test_render_table_truncates_long_values(store):
    setting = store.set("long", "x" * 80)
    table = render_table([setting])
    assert "x" * 47 + "..." in table
    assert "x" * 48 not in table


def test_addcfg_rejects_overlong_description(invoke, store):
    result = invoke("addcfg", "k", "v", "--description", "d" * 501)

    assert result.exit_code == 1
    assert "Error: Description must be at most 500 characters" in result.output
    assert store.has("k") is False


def test_chcfg_with_deeply_nested_json_stores_null(invoke, store):
    store.set("app.features", "{}", setting_type="json")

    result = invoke("chcfg", "app.features", "[" * 100000 + "]" * 100000)

    assert result.exit_code == 0, result.output
    assert "Updated app.features = null (json)" in result.output
    assert result.exception is None
