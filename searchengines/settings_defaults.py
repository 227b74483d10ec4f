# SPDX-License-Identifier: AGPL-3.0-or-later
"""Schema of the settings, the defaults of the settings are the defaults of the
:py:obj:`msgspec.Struct` types in this module."""
# pylint: disable=too-few-public-methods

from __future__ import annotations

__all__ = ["Settings", "apply_schema", "PrefsBackendType"]

import typing

import msgspec

from searchengines.exceptions import SearchEnginesSettingsException

PrefsBackendType = typing.Literal["sqlite", "memory"]
PREFS_BACKENDS: tuple[PrefsBackendType, ...] = typing.get_args(PrefsBackendType)


class General(msgspec.Struct, kw_only=True, forbid_unknown_fields=True):
    debug: bool = False


class Search(msgspec.Struct, kw_only=True, forbid_unknown_fields=True):

    default_engine: str = ""
    """Short name of the engine that is placed first on a first start."""

    show_suggestions: bool = True
    """Default of the *show search suggestions* preference."""


class Preferences(msgspec.Struct, kw_only=True, forbid_unknown_fields=True):

    backend: PrefsBackendType = "sqlite"
    """Implementation of the preference store (:py:obj:`searchengines.prefs.get_store`)."""

    path: str = ""
    """Location of the SQLite DB, if unset the DB is created in the cache folder
    of the user."""


class Server(msgspec.Struct, kw_only=True, forbid_unknown_fields=True):
    bind_address: str = "127.0.0.1"
    port: int = 8889


class Settings(msgspec.Struct, kw_only=True, forbid_unknown_fields=True):
    """Type definition of the settings (``settings.yml``)."""

    general: General = msgspec.field(default_factory=General)
    search: Search = msgspec.field(default_factory=Search)
    preferences: Preferences = msgspec.field(default_factory=Preferences)
    server: Server = msgspec.field(default_factory=Server)

    engines: list[dict[str, typing.Any]] = []
    """List of engine settings, validated later when the catalog is build
    (:py:obj:`searchengines.enginelib.EngineMap`)."""


def apply_schema(cfg: dict) -> dict:
    """Validates ``cfg`` against the :py:obj:`Settings` schema and returns a new
    settings dictionary where missing values are set to their defaults."""
    try:
        typed = msgspec.convert(cfg, type=Settings)
    except msgspec.ValidationError as exc:
        raise SearchEnginesSettingsException(exc, "settings") from exc
    return msgspec.to_builtins(typed)
