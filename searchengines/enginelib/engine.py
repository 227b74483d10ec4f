# SPDX-License-Identifier: AGPL-3.0-or-later
"""Implementation of the :py:obj:`Engine` record."""

from __future__ import annotations

__all__ = ["Engine"]

from typing import Any
from urllib.parse import quote_plus

import msgspec

SEARCH_TERMS = "{searchTerms}"
"""Placeholder of the search term in the URL templates of an engine."""


class Engine(msgspec.Struct, kw_only=True, frozen=True):
    """Record of a search engine from the catalog.  Engines are immutable once
    they are loaded, the :py:obj:`Engine.short_name` is the identity of the
    engine."""

    short_name: str
    """Unique name of the engine, used as key of the engine in the preferences.
    The name must remain stable across versions, otherwise user customizations
    of the engine (order, enabled) are lost."""

    search_url: str
    """URL template of the search, the query replaces ``{searchTerms}``."""

    suggest_url: str = ""
    """URL template to query suggestions, empty when the engine does not offer
    suggestions."""

    description: str = ""

    shortcut: str = ""
    """Code used to select the engine in a query (``!foo``)."""

    @staticmethod
    def from_engine_settings(engine_settings: dict[str, Any]) -> Engine:
        """Factory to build a :py:obj:`Engine` instance from ``engine_settings``
        (an item of ``settings:engines``).  A :py:obj:`ValueError` is raised if
        the settings are not valid."""

        if not engine_settings.get("short_name"):
            raise ValueError(f"engine_settings: the mandatory field 'short_name' is missing! {engine_settings}")

        search_url = engine_settings.get("search_url")
        if not search_url or SEARCH_TERMS not in search_url:
            raise ValueError(
                f"engine {engine_settings['short_name']}: search_url needs a {SEARCH_TERMS} placeholder: {search_url}"
            )

        suggest_url = engine_settings.get("suggest_url")
        if suggest_url and SEARCH_TERMS not in suggest_url:
            raise ValueError(
                f"engine {engine_settings['short_name']}: suggest_url needs a {SEARCH_TERMS} placeholder: {suggest_url}"
            )

        try:
            return msgspec.convert(engine_settings, type=Engine)
        except msgspec.ValidationError as exc:
            raise ValueError(f"engine {engine_settings['short_name']}: {exc}") from exc

    def search_url_for(self, query: str) -> str:
        """URL of the search for ``query``."""
        return self.search_url.replace(SEARCH_TERMS, quote_plus(query))

    def suggest_url_for(self, query: str) -> str | None:
        if not self.suggest_url:
            return None
        return self.suggest_url.replace(SEARCH_TERMS, quote_plus(query))
