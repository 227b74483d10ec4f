# SPDX-License-Identifier: AGPL-3.0-or-later
"""Manage the engine catalog in a map that maps from engine's short name to the
:py:obj:`Engine` instance."""

from __future__ import annotations

__all__ = ["EngineMap", "Catalog"]

import collections
import logging

import msgspec

from searchengines import logger as log, get_setting
from .engine import Engine

log: logging.Logger = log.getChild("engine_map")


class EngineMap(collections.UserDict[str, Engine]):
    """A python dictionary to map :class:`Engine` by engine's ``short_name``.
    The insertion order is the order of the catalog."""

    def __init__(self, engine_list: list[dict]):
        """Initialize by ``engine_list`` a python list of ``engine_settings``
        (a python dict with the settings of the engine)."""

        super().__init__()
        self.shortcuts: dict[str, str] = {}

        for engine_settings in engine_list:

            try:
                eng = Engine.from_engine_settings(engine_settings)

            except (ValueError, TypeError) as exc:
                log.exception(exc)
                log.error(
                    "EngineMap: '%s' due to above exception engine_settings are ignored/skipped ..",
                    engine_settings.get("short_name", "<missing 'short_name'>"),
                )
                continue

            self.register_engine(eng)

    def register_engine(self, eng: Engine):

        # exists a engine with identical name?
        if self.get(eng.short_name, msgspec.UNSET) != msgspec.UNSET:
            raise ValueError(f"Engine config error: ambiguous name: {eng.short_name}")
        self[eng.short_name] = eng

        if not eng.shortcut:
            return

        # exists an engine with identical shortcut?
        if eng.shortcut in self.shortcuts:
            raise ValueError(f"Engine {eng.short_name} config error, ambiguous shortcut: {eng.shortcut}")
        self.shortcuts[eng.shortcut] = eng.short_name


class Catalog:
    """The fixed catalog of the engines and the engine that is the default on a
    first start.  The catalog is read-only input of the
    :py:obj:`searchengines.registry.EngineRegistry`."""

    def __init__(self, engine_map: EngineMap, default_engine: str):

        if not engine_map:
            raise ValueError("Engine config error: the catalog does not contain any engine")
        if default_engine not in engine_map:
            raise ValueError(f"Engine config error: default engine {default_engine!r} is not in the catalog")

        self.engine_map = engine_map
        self.default_engine = default_engine

    @classmethod
    def from_settings(cls) -> Catalog:
        """Build the catalog from ``settings:engines`` and
        ``settings:search.default_engine``."""
        engine_map = EngineMap(get_setting("engines"))
        return cls(engine_map, get_setting("search.default_engine"))

    @property
    def engines(self) -> list[Engine]:
        """Engines in the order of the catalog."""
        return list(self.engine_map.values())

    @property
    def short_names(self) -> list[str]:
        return list(self.engine_map.keys())

    def __len__(self):
        return len(self.engine_map)

    def __contains__(self, short_name: str):
        return short_name in self.engine_map

    def __getitem__(self, short_name: str) -> Engine:
        return self.engine_map[short_name]
