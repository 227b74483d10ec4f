# SPDX-License-Identifier: AGPL-3.0-or-later
"""Implementation of the :py:obj:`EngineRegistry`, the registry of the search
engines and their preferences.

The registry manages the order of the engines, the default engine and the
engines that are enabled.  The default engine is not stored separately, it is
*always* the first engine in the order:

.. code:: python

   registry = EngineRegistry(store, Catalog.from_settings())
   registry.set_default_engine("DuckDuckGo")
   registry.get_ordered_engines()[0].short_name  # --> 'DuckDuckGo'

Every modification is written to the :py:obj:`PreferenceStore
<searchengines.prefs.PreferenceStore>` before the method returns, a new registry
instance build from the same store has the same state.

The persisted state are two values in the store:

``search.orderedEngineNames``
  List of the short names of the engines in the order of the user.

``search.disabledEngineNames``
  Set of the short names of the disabled engines.  The disabled engines are
  stored (not the enabled engines) so that engines added to the catalog are
  enabled from the start.
"""

from __future__ import annotations

__all__ = ["EngineRegistry"]

import collections
import threading
import typing

from searchengines import logger, get_setting
from searchengines.exceptions import InvalidOrderError, UnknownEngineError, PersistenceError
from searchengines.enginelib import Engine, Catalog

if typing.TYPE_CHECKING:
    from searchengines.prefs import PreferenceStore

log = logger.getChild("registry")

ORDERED_ENGINE_NAMES = "search.orderedEngineNames"
DISABLED_ENGINE_NAMES = "search.disabledEngineNames"
SHOW_SEARCH_SUGGESTIONS = "search.suggestions.show"
SHOW_SEARCH_SUGGESTIONS_OPT_IN = "search.suggestions.showOptIn"

EngineRef = Engine | str
"""An engine is referenced by its :py:obj:`Engine` record or by its short name."""


class EngineRegistry:
    """Registry of the engines from a :py:obj:`Catalog`, the state is persisted
    in ``store``.  Mutations are serialized by a lock, queries return copies of
    the state."""

    def __init__(self, store: PreferenceStore, catalog: Catalog):
        self.store = store
        self.catalog = catalog
        self._lock = threading.RLock()

        self._order: list[str] = self._load_order()
        self._enabled: set[str] = self._load_enabled()

        log.debug("registry initialized, default engine: %s", self._order[0])

    def _load_order(self) -> list[str]:
        names = self.store.get_string_list(ORDERED_ENGINE_NAMES)

        if names is None:
            # first start: the catalog order with the default engine in front
            default = self.catalog.default_engine
            return [default] + [name for name in self.catalog.short_names if name != default]

        # engines that are no longer in the catalog are dropped, new engines of
        # the catalog are appended
        order = [name for name in dict.fromkeys(names) if name in self.catalog]
        dropped = set(names) - set(order)
        if dropped:
            log.warning("engines %s are not in the catalog, ignored", ", ".join(sorted(dropped)))
        order += [name for name in self.catalog.short_names if name not in order]
        return order

    def _load_enabled(self) -> set[str]:
        disabled = self.store.get_string_set(DISABLED_ENGINE_NAMES) or set()
        enabled = set(self.catalog.short_names) - disabled

        # the default engine can't be disabled
        if self._order[0] not in enabled:
            log.warning("default engine %s is marked as disabled, enable it", self._order[0])
            enabled.add(self._order[0])
        return enabled

    def _short_name(self, engine: EngineRef) -> str:
        short_name = engine if isinstance(engine, str) else engine.short_name
        if short_name not in self.catalog:
            raise UnknownEngineError(short_name)
        return short_name

    # persistence ..

    def _persist_order(self):
        try:
            self.store.set_string_list(ORDERED_ENGINE_NAMES, self._order)
        except PersistenceError as exc:
            log.error("can't persist the order of the engines: %s", exc)
            raise

    def _persist_disabled(self):
        disabled = set(self.catalog.short_names) - self._enabled
        try:
            self.store.set_string_set(DISABLED_ENGINE_NAMES, disabled)
        except PersistenceError as exc:
            log.error("can't persist the disabled engines: %s", exc)
            raise

    def _enable_default(self, short_name: str) -> bool:
        """Enable the engine that is moved in front of the order, returns
        ``True`` if the engine was disabled before."""
        if short_name in self._enabled:
            return False
        self._enabled.add(short_name)
        return True

    # queries ..

    def get_engine(self, short_name: str) -> Engine:
        """Returns the engine with the ``short_name``."""
        return self.catalog[self._short_name(short_name)]

    def get_ordered_engines(self) -> list[Engine]:
        """All engines of the catalog in the order of the user."""
        order = self._order[:]
        return [self.catalog[name] for name in order]

    def get_default_engine(self) -> Engine:
        return self.catalog[self._order[0]]

    def is_engine_default(self, engine: EngineRef) -> bool:
        return self._short_name(engine) == self._order[0]

    def is_engine_enabled(self, engine: EngineRef) -> bool:
        return self._short_name(engine) in self._enabled

    def get_enabled_engines(self) -> list[Engine]:
        """The enabled engines in the order of the user, these are the engines a
        user can pick from."""
        with self._lock:
            order, enabled = self._order[:], set(self._enabled)
        return [self.catalog[name] for name in order if name in enabled]

    def get_quick_search_engines(self) -> list[Engine]:
        """The enabled engines without the default engine, these are the
        engines offered as alternatives to the default engine."""
        return self.get_enabled_engines()[1:]

    # mutations ..

    def set_ordered_engines(self, engines: typing.Sequence[EngineRef]):
        """Set the order of the engines.  ``engines`` must be a permutation of
        all engines in the catalog, otherwise a :py:obj:`InvalidOrderError` is
        raised.

        The first engine becomes the default engine and is enabled."""

        names = [e if isinstance(e, str) else e.short_name for e in engines]
        known = set(self.catalog.short_names)
        unknown = set(names) - known
        missing = known - set(names)
        duplicate = {name for name, count in collections.Counter(names).items() if count > 1}

        if unknown or missing or duplicate:
            log.warning("reject order of engines %s", names)
            raise InvalidOrderError(missing=missing, duplicate=duplicate, unknown=unknown)

        with self._lock:
            # the new default is enabled before it becomes visible in the order
            enabled_changed = self._enable_default(names[0])
            self._order = names
            log.debug("new order of engines: %s", self._order)
            self._persist_order()
            if enabled_changed:
                self._persist_disabled()

    def set_default_engine(self, engine: EngineRef):
        """Move ``engine`` in front of the order (the order of the other engines
        is kept) and enable the engine."""

        short_name = self._short_name(engine)
        with self._lock:
            enabled_changed = self._enable_default(short_name)
            # unlocked readers see the old or the new order, never a list in between
            self._order = [short_name] + [name for name in self._order if name != short_name]
            log.debug("new default engine: %s", short_name)
            self._persist_order()
            if enabled_changed:
                self._persist_disabled()

    def enable_engine(self, engine: EngineRef):
        short_name = self._short_name(engine)
        with self._lock:
            self._enabled.add(short_name)
            log.debug("enable engine: %s", short_name)
            self._persist_disabled()

    def disable_engine(self, engine: EngineRef):
        """Disable the ``engine``.  The default engine can't be disabled, a
        request to disable the default engine is ignored."""

        short_name = self._short_name(engine)
        with self._lock:
            if short_name == self._order[0]:
                log.debug("ignore request to disable the default engine: %s", short_name)
                return
            self._enabled.discard(short_name)
            log.debug("disable engine: %s", short_name)
            self._persist_disabled()

    # further preferences of the search ..

    @property
    def show_search_suggestions(self) -> bool:
        """Show search suggestions of the default engine (the default is from
        ``search.show_suggestions``)."""
        value = self.store.get_bool(SHOW_SEARCH_SUGGESTIONS)
        if value is None:
            return get_setting("search.show_suggestions", True)
        return value

    @show_search_suggestions.setter
    def show_search_suggestions(self, value: bool):
        self.store.set_bool(SHOW_SEARCH_SUGGESTIONS, value)

    @property
    def show_search_suggestions_opt_in(self) -> bool:
        """``True`` as long as the user has not been asked to opt-in to search
        suggestions."""
        value = self.store.get_bool(SHOW_SEARCH_SUGGESTIONS_OPT_IN)
        if value is None:
            return True
        return value

    @show_search_suggestions_opt_in.setter
    def show_search_suggestions_opt_in(self, value: bool):
        self.store.set_bool(SHOW_SEARCH_SUGGESTIONS_OPT_IN, value)
