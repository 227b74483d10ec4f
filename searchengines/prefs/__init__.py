# SPDX-License-Identifier: AGPL-3.0-or-later
"""Implementation of the preference store, the key/value backend in which the
engine registry persists its state.

A store implements the two primitives :py:obj:`PreferenceStore.get_value` and
:py:obj:`PreferenceStore.set_value`, the typed accessors (string, list of
strings, set of strings, bool) are implemented in the base class and are stored
as JSON strings:

.. code:: python

   store = MemoryPreferenceStore()
   store.set_string_list("search.orderedEngineNames", ["Google", "Bing"])
   store.get_string_list("search.orderedEngineNames")  # --> ['Google', 'Bing']

The store to use is configured in the settings:

.. code:: yaml

   preferences:
     backend: sqlite
     path: ""

"""
from __future__ import annotations

__all__ = [
    "PreferenceStore",
    "MemoryPreferenceStore",
    "SQLitePreferenceStore",
    "get_store",
]

import os
import pathlib

from searchengines import get_setting
from .store import PreferenceStore
from .memory import MemoryPreferenceStore
from .sqlite import SQLitePreferenceStore


def get_default_db_url() -> str:
    """The default location of the SQLite DB is in the cache folder of the
    user: ``${XDG_CACHE_HOME}/searchengines/prefs.db``."""
    cache_home = os.environ.get("XDG_CACHE_HOME") or str(pathlib.Path.home() / ".cache")
    return str(pathlib.Path(cache_home) / "searchengines" / "prefs.db")


def get_store() -> PreferenceStore:
    """Returns a new instance of the preference store configured in the
    settings (``preferences.backend``)."""

    backend = get_setting("preferences.backend")
    if backend == "memory":
        return MemoryPreferenceStore()
    if backend == "sqlite":
        return SQLitePreferenceStore(get_setting("preferences.path") or get_default_db_url())
    raise ValueError(f"unknown backend of the preference store: {backend}")
