# SPDX-License-Identifier: AGPL-3.0-or-later
"""Abstract base class of the preference stores."""

from __future__ import annotations

__all__ = ["PreferenceStore"]

import abc
import typing

import msgspec

from searchengines import logger
from searchengines.exceptions import PersistenceError

log = logger.getChild("prefs")

T = typing.TypeVar("T")


class PreferenceStore(abc.ABC):
    """Key/value store of the preferences.  The values are strings, a single
    :py:obj:`PreferenceStore.set_value` has to be atomic.

    Errors of the backend are raised as
    :py:obj:`searchengines.exceptions.PersistenceError`.
    """

    @abc.abstractmethod
    def get_value(self, key: str) -> str | None:
        """Returns the string stored under ``key`` or ``None`` when there is no
        value for ``key``."""

    @abc.abstractmethod
    def set_value(self, key: str, value: str) -> None:
        """Stores the string ``value`` under ``key``."""

    @abc.abstractmethod
    def delete(self, key: str) -> None:
        """Removes ``key`` from the store, does nothing if there is no such key."""

    # typed accessors ..

    def _get(self, key: str, type_: type[T]) -> T | None:
        value = self.get_value(key)
        if value is None:
            return None
        try:
            return msgspec.json.decode(value, type=type_)
        except (msgspec.DecodeError, msgspec.ValidationError) as exc:
            log.error("can't decode value of %s: %s", key, exc)
            raise PersistenceError(f"corrupt value: {exc}", key=key) from exc

    def _set(self, key: str, value: typing.Any) -> None:
        self.set_value(key, msgspec.json.encode(value).decode("utf-8"))

    def get_string(self, key: str) -> str | None:
        return self._get(key, str)

    def set_string(self, key: str, value: str) -> None:
        self._set(key, value)

    def get_string_list(self, key: str) -> list[str] | None:
        return self._get(key, list[str])

    def set_string_list(self, key: str, value: typing.Iterable[str]) -> None:
        self._set(key, list(value))

    def get_string_set(self, key: str) -> set[str] | None:
        return self._get(key, set[str])

    def set_string_set(self, key: str, value: typing.Iterable[str]) -> None:
        # sorted, the JSON representation of a set should not depend on the
        # hash seed of the process
        self._set(key, sorted(set(value)))

    def get_bool(self, key: str) -> bool | None:
        return self._get(key, bool)

    def set_bool(self, key: str, value: bool) -> None:
        self._set(key, bool(value))
