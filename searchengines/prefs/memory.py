# SPDX-License-Identifier: AGPL-3.0-or-later
"""Preference store that holds the values in memory."""

from __future__ import annotations

__all__ = ["MemoryPreferenceStore"]

from .store import PreferenceStore


class MemoryPreferenceStore(PreferenceStore):
    """The values are lost when the process ends, the store is used in the tests
    and when an application wants to manage the persistence of the values by
    itself (see :py:obj:`MemoryPreferenceStore.data`)."""

    def __init__(self, data: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(data or {})

    def get_value(self, key: str) -> str | None:
        return self.data.get(key)

    def set_value(self, key: str, value: str) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)
