# SPDX-License-Identifier: AGPL-3.0-or-later
# pylint: disable=missing-module-docstring

import os
import unittest
from pathlib import Path

os.environ['SEARCHENGINES_SETTINGS_PATH'] = str(Path(__file__).parent / 'unit' / 'settings' / 'test_settings.yml')
os.environ.pop('SEARCHENGINES_DEBUG', None)

import searchengines  # pylint: disable=wrong-import-position
from searchengines.enginelib import Catalog, EngineMap  # pylint: disable=wrong-import-position
from searchengines.prefs import MemoryPreferenceStore  # pylint: disable=wrong-import-position
from searchengines.registry import EngineRegistry  # pylint: disable=wrong-import-position

searchengines.init_settings()


class SearchEnginesTestCase(unittest.TestCase):
    """Base test case for non-robot tests."""

    def setattr4test(self, obj, attr, value):
        """setattr(obj, attr, value) but reset to the previous value in the
        cleanup."""
        previous_value = getattr(obj, attr)

        def cleanup_patch():
            setattr(obj, attr, previous_value)

        self.addCleanup(cleanup_patch)
        setattr(obj, attr, value)

    def setUp(self):
        self.store = MemoryPreferenceStore()

    @staticmethod
    def build_catalog(*short_names: str, default: str | None = None) -> Catalog:
        """Catalog with engines named by ``short_names``, the first engine is the
        default if ``default`` is not set."""
        engine_list = [
            {'short_name': name, 'search_url': f'https://{name.lower()}.example.org/?q={{searchTerms}}'}
            for name in short_names
        ]
        return Catalog(EngineMap(engine_list), default or short_names[0])

    def build_registry(self, catalog: Catalog | None = None) -> EngineRegistry:
        """Registry on the store of the test (:py:obj:`SearchEnginesTestCase.store`),
        by default with the catalog from the settings."""
        return EngineRegistry(self.store, catalog or Catalog.from_settings())
