"""
CLI: ``spineconf`` — inspect assembled configuration.

Commands:

* ``spineconf show``: print the merged configuration (before validation).
* ``spineconf resources``: list the resource names searched, in load order.

Extra tokens are passed through as assembly args, so overrides work as they
do for an application::

    spineconf show -p app --profile web -- --load prod.yaml web/port=8081
"""

from __future__ import annotations

import json
from pathlib import Path

import typer
import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .assembly import AssemblyOptions, merge_configuration
from .errors import ConfigError
from .locators import SearchPathLocator
from .logging import configure_logging
from .parsers import DEFAULT_EXTENSIONS
from .resources import DEFAULT_VARIANTS, enumerate_resources
from .settings import get_settings

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    name="spineconf",
    help="spineconf — layered configuration assembly.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

_PASS_THROUGH = {"allow_extra_args": True, "ignore_unknown_options": True}


def _version_callback(value: bool) -> None:
    if value:
        from importlib.metadata import PackageNotFoundError
        from importlib.metadata import version as pkg_version

        try:
            v = pkg_version("spineconf")
        except PackageNotFoundError:
            v = "unknown"
        typer.echo(f"spineconf {v}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """spineconf CLI — inspect layered configuration."""
    settings = get_settings()
    configure_logging(level=settings.log_level, json_format=settings.log_format == "json")


def _parse_properties(values: list[str]) -> dict[str, str]:
    properties: dict[str, str] = {}
    for item in values:
        name, sep, value = item.partition("=")
        if not sep or not name:
            raise typer.BadParameter(f"expected NAME=VALUE, got {item!r}", param_hint="--property")
        properties[name] = value
    return properties


def _variants(values: list[str]) -> list[str | None]:
    return list(values) if values else list(DEFAULT_VARIANTS)


def _search_path(values: list[Path]) -> list[str]:
    return [str(p) for p in values] if values else get_settings().search_path


@app.command("show", context_settings=_PASS_THROUGH)
def show_config(
    ctx: typer.Context,
    prefix: str = typer.Option(..., "--prefix", "-p", help="Resource name prefix"),
    profile: list[str] = typer.Option([], "--profile", help="Profile to load (repeatable)"),
    variant: list[str] = typer.Option([], "--variant", help="Variant to search (repeatable)"),
    search_path: list[Path] = typer.Option([], "--search-path", "-s", help="Resource directory (repeatable)"),
    prop: list[str] = typer.Option([], "--property", "-D", help="Explicit property NAME=VALUE"),
    format: str = typer.Option("json", "--format", "-f", help="Output format: json, yaml"),
) -> None:
    """Show the merged configuration."""
    options = AssemblyOptions(
        prefix=prefix,
        profiles=profile,
        variants=_variants(variant),
        args=list(ctx.args),
        properties=_parse_properties(prop),
        locator=SearchPathLocator(_search_path(search_path)),
    )
    try:
        config = merge_configuration(options)
    except ConfigError as e:
        err_console.print(f"[red]Configuration Error:[/red] {escape(e.message)}")
        raise typer.Exit(1) from e

    if format == "yaml":
        console.print(
            yaml.safe_dump(config, default_flow_style=False, sort_keys=False),
            end="",
            markup=False,
            highlight=False,
        )
    else:
        console.print_json(json.dumps(config, default=str))


@app.command("resources")
def list_resources(
    prefix: str = typer.Option(..., "--prefix", "-p", help="Resource name prefix"),
    profile: list[str] = typer.Option([], "--profile", help="Profile to load (repeatable)"),
    variant: list[str] = typer.Option([], "--variant", help="Variant to search (repeatable)"),
    search_path: list[Path] = typer.Option([], "--search-path", "-s", help="Resource directory (repeatable)"),
) -> None:
    """List the resource names searched, in load order."""
    locator = SearchPathLocator(_search_path(search_path))

    table = Table()
    table.add_column("Profile")
    table.add_column("Variant")
    table.add_column("Resource")
    table.add_column("Sources", justify="right")
    for entry in enumerate_resources(prefix, profile, _variants(variant), DEFAULT_EXTENSIONS):
        found = len(locator.locate(entry.path))
        style = "green" if found else "dim"
        table.add_row(
            entry.profile or "-",
            entry.variant or "-",
            f"[{style}]{entry.path}[/{style}]",
            str(found),
        )
    console.print(table)
