"""Command line for the settings store.

Follows the add / show / change / delete command pattern:

    cfgstore addcfg mail.port 25 --type integer --category mail
    cfgstore shcfg mail.port
    cfgstore chcfg mail.port 2525
    cfgstore delcfg mail.port --force
"""

from __future__ import annotations

import functools
import json
from typing import Any, Callable, NoReturn, Optional

import click

from .config import BaseConfig
from .domain.setting_types import SettingType
from .errors import SettingExistsError, SettingNotFoundError, SettingsError
from .infra.database import bootstrap_database
from .infra.repositories.settings import SQLModelSettingsRepository
from .logging_config import get_logger, setup_logging
from .models.setting import Setting
from .services.settings_store import SettingsStore

logger = get_logger("cli")

VALUE_WIDTH = 50
TYPE_CHOICE = click.Choice([t.value for t in SettingType], case_sensitive=False)


def build_store(config: BaseConfig) -> SettingsStore:
    """Bootstrap the database described by ``config`` and wrap it in a store."""

    _, session_factory = bootstrap_database(config)
    repository = SQLModelSettingsRepository(session_factory)
    return SettingsStore(repository, strict=config.STRICT_DECODE)


def _fail(message: str) -> NoReturn:
    click.secho(message, fg="red", err=True)
    raise click.exceptions.Exit(1)


def handles_store_errors(func: Callable[..., Any]) -> Callable[..., Any]:
    """Render store errors as messages with exit code 1."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except (SettingsError, ValueError) as exc:
            logger.debug("Command failed", exc_info=True)
            _fail(f"Error: {exc}")

    return wrapper


def _truncate(text: str, width: int = VALUE_WIDTH) -> str:
    return text if len(text) <= width else text[: width - 3] + "..."


def render_table(settings: list[Setting]) -> str:
    """Render settings as an aligned plain-text table."""

    headers = ("KEY", "VALUE", "TYPE", "CATEGORY")
    rows = [
        (s.key, _truncate(s.display_value), s.type, s.category or "Uncategorized")
        for s in settings
    ]
    widths = [max(len(row[i]) for row in [headers, *rows]) for i in range(len(headers))]
    lines = ["  ".join(cell.ljust(widths[i]) for i, cell in enumerate(row)).rstrip() for row in [headers, *rows]]
    lines.insert(1, "  ".join("-" * w for w in widths))
    return "\n".join(lines)


@click.group(help="Typed configuration settings manager")
@click.option("--debug", is_flag=True, default=False, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, debug: bool) -> None:
    """Build the settings store unless the caller injected one."""

    if isinstance(ctx.obj, SettingsStore):
        return
    config = BaseConfig()
    setup_logging(config, debug=debug)
    ctx.obj = build_store(config)


@cli.command("addcfg")
@click.argument("key")
@click.argument("value")
@click.option("--type", "setting_type", type=TYPE_CHOICE, default="string", show_default=True, help="Value type")
@click.option("--category", default=None, help="Optional category label (e.g. mail, dns)")
@click.option("--description", default=None, help="Optional description")
@click.pass_obj
@handles_store_errors
def addcfg(
    store: SettingsStore,
    key: str,
    value: str,
    setting_type: str,
    category: Optional[str],
    description: Optional[str],
) -> None:
    """Create a new setting."""

    if store.has(key):
        raise SettingExistsError(key)
    setting = store.set(key, value, category=category, setting_type=setting_type, description=description)
    click.echo(f"Created {setting.key} = {setting.display_value} ({setting.type})")


@cli.command("shcfg")
@click.argument("key", required=False)
@click.option("--category", default=None, help="Only list settings in this category")
@click.option("--type", "setting_type", type=TYPE_CHOICE, default=None, help="Only list settings of this type")
@click.option("--default", "default", default=None, help="Value printed when KEY is not set")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print JSON instead of text")
@click.option("--categories", "list_categories", is_flag=True, default=False, help="List category names")
@click.pass_obj
@handles_store_errors
def shcfg(
    store: SettingsStore,
    key: Optional[str],
    category: Optional[str],
    setting_type: Optional[str],
    default: Optional[str],
    as_json: bool,
    list_categories: bool,
) -> None:
    """Show one setting, or list settings."""

    if list_categories:
        names = store.categories()
        if as_json:
            click.echo(json.dumps(names))
        else:
            for name in names:
                click.echo(name)
        return

    if key is not None:
        setting = store.get_setting(key)
        if setting is None:
            if default is None:
                raise SettingNotFoundError(key)
            click.echo(default)
            return
        if as_json:
            click.echo(json.dumps(setting.typed_value))
        else:
            click.echo(setting.display_value)
        return

    if category is not None:
        settings = store.settings(category=category, setting_type=setting_type)
    else:
        settings = store.settings(setting_type=setting_type)

    if as_json:
        click.echo(json.dumps({s.key: s.typed_value for s in settings}, indent=2))
        return
    if not settings:
        click.echo("No settings found")
        return
    click.echo(render_table(settings))


@cli.command("chcfg")
@click.argument("key")
@click.argument("value")
@click.option("--description", default=None, help="Replace the description")
@click.pass_obj
@handles_store_errors
def chcfg(store: SettingsStore, key: str, value: str, description: Optional[str]) -> None:
    """Change the value of an existing setting."""

    if not store.has(key):
        raise SettingNotFoundError(key)
    setting = store.set(key, value, description=description)
    click.echo(f"Updated {setting.key} = {setting.display_value} ({setting.type})")


@cli.command("delcfg")
@click.argument("key")
@click.option("--force", is_flag=True, default=False, help="Skip confirmation prompt")
@click.pass_obj
@handles_store_errors
def delcfg(store: SettingsStore, key: str, force: bool) -> None:
    """Delete a setting."""

    setting = store.get_setting(key)
    if setting is None:
        raise SettingNotFoundError(key)

    if not force:
        click.echo(f"About to delete {setting.key} = {_truncate(setting.display_value)}")
        if not click.confirm("Permanently delete this setting?", default=False):
            click.echo("Deletion cancelled")
            return

    store.forget(key)
    click.echo(f"Deleted {setting.key}")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
