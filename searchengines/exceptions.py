# SPDX-License-Identifier: AGPL-3.0-or-later
"""Exception types raised by the engine registry."""

from __future__ import annotations

import typing


class SearchEnginesException(Exception):
    """Base exception."""


class SearchEnginesSettingsException(SearchEnginesException):
    """Error while loading the settings"""

    def __init__(self, message: str | Exception, filename: str | None):
        super().__init__(message)
        self.message = message
        self.filename = filename

    def __str__(self):
        return f"{self.filename}: {self.message}"


class UnknownEngineError(SearchEnginesException):
    """The engine (its short name) is not in the catalog of the registry."""

    def __init__(self, short_name: str):
        super().__init__(f"unknown engine: {short_name}")
        self.short_name = short_name


class InvalidOrderError(SearchEnginesException):
    """The new order of the engines is not a permutation of all engines in the
    catalog.  No state has been changed when this exception is raised."""

    def __init__(
        self,
        missing: typing.Iterable[str] = (),
        duplicate: typing.Iterable[str] = (),
        unknown: typing.Iterable[str] = (),
    ):
        self.missing = sorted(missing)
        self.duplicate = sorted(duplicate)
        self.unknown = sorted(unknown)

        msg = []
        if self.missing:
            msg.append(f"missing: {', '.join(self.missing)}")
        if self.duplicate:
            msg.append(f"duplicate: {', '.join(self.duplicate)}")
        if self.unknown:
            msg.append(f"unknown: {', '.join(self.unknown)}")
        super().__init__("invalid order of engines (" + "; ".join(msg) + ")")


class PersistenceError(SearchEnginesException):
    """The preference store can't be read or written.

    The in-memory state of the registry is not rolled back, memory and store may
    disagree: build a new registry from the store to reconcile.
    """

    def __init__(self, message: str, key: str | None = None):
        super().__init__(message)
        self.message = message
        self.key = key

    def __str__(self):
        if self.key:
            return f"{self.message} (key: {self.key})"
        return self.message
