# SPDX-License-Identifier: AGPL-3.0-or-later
"""Implementation of a command line to inspect and modify the engine
preferences.  To get an overview of available commands::

    $ python -m searchengines --help

Examples::

    $ python -m searchengines list
    $ python -m searchengines default DuckDuckGo
    $ python -m searchengines disable Twitter
    $ python -m searchengines order DuckDuckGo Google Bing ...

The preferences are read from and written to the store configured in the
settings (``preferences:``).
"""

from __future__ import annotations

import sys
import typing

import typer
from typing_extensions import Annotated

from searchengines import get_setting
from searchengines.exceptions import SearchEnginesException
from searchengines.enginelib import Catalog
from searchengines.prefs import get_store
from searchengines.registry import EngineRegistry

CLI = typer.Typer()


def get_registry() -> EngineRegistry:
    """Registry build from the configured store and catalog."""
    return EngineRegistry(get_store(), Catalog.from_settings())


def _fail(exc: Exception) -> typing.NoReturn:
    print(f"ERROR: {exc}", file=sys.stderr)
    raise typer.Exit(1)


def _open_registry() -> EngineRegistry:
    # a corrupt store or a bad catalog in the settings
    try:
        return get_registry()
    except (SearchEnginesException, ValueError) as exc:
        _fail(exc)


def _print_engines(registry: EngineRegistry):
    for eng in registry.get_ordered_engines():
        flags = "*" if registry.is_engine_default(eng) else " "
        state = "on " if registry.is_engine_enabled(eng) else "off"
        print(f"{flags} [{state}] {eng.short_name}")


@CLI.command("list")
def list_engines():
    """List the engines in the order of the preferences (``*`` marks the
    default engine)."""
    _print_engines(_open_registry())


@CLI.command("enabled")
def enabled_engines():
    """List the enabled engines."""
    for eng in _open_registry().get_enabled_engines():
        print(eng.short_name)


@CLI.command("default")
def default_engine(
    short_name: Annotated[str, typer.Argument(help="short name of the new default engine")] = "",
):
    """Print the default engine or set a new default engine."""
    registry = _open_registry()
    if short_name:
        try:
            registry.set_default_engine(short_name)
        except SearchEnginesException as exc:
            _fail(exc)
    print(registry.get_default_engine().short_name)


@CLI.command("enable")
def enable_engine(short_name: Annotated[str, typer.Argument(help="short name of the engine")]):
    """Enable an engine."""
    registry = _open_registry()
    try:
        registry.enable_engine(short_name)
    except SearchEnginesException as exc:
        _fail(exc)
    _print_engines(registry)


@CLI.command("disable")
def disable_engine(short_name: Annotated[str, typer.Argument(help="short name of the engine")]):
    """Disable an engine (the default engine can't be disabled)."""
    registry = _open_registry()
    try:
        registry.disable_engine(short_name)
    except SearchEnginesException as exc:
        _fail(exc)
    if registry.is_engine_default(short_name):
        print(f"WARNING: {short_name} is the default engine and can't be disabled", file=sys.stderr)
    _print_engines(registry)


@CLI.command("order")
def order_engines(
    short_names: Annotated[list[str], typer.Argument(help="short names of all engines in the new order")],
):
    """Set the order of the engines, the first engine is the new default."""
    registry = _open_registry()
    try:
        registry.set_ordered_engines(short_names)
    except SearchEnginesException as exc:
        _fail(exc)
    _print_engines(registry)


@CLI.command("run")
def run(
    host: Annotated[str, typer.Option(help="bind address")] = "",
    port: Annotated[int, typer.Option(help="port")] = 0,
):
    """Start the JSON API (:py:obj:`searchengines.webapp`)."""
    # pylint: disable=import-outside-toplevel
    from searchengines.webapp import create_app

    app = create_app(_open_registry())
    app.run(
        host=host or get_setting("server.bind_address"),
        port=port or get_setting("server.port"),
        debug=get_setting("general.debug"),
    )
