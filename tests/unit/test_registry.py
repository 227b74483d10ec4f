# SPDX-License-Identifier: AGPL-3.0-or-later
# pylint: disable=missing-module-docstring,disable=missing-class-docstring,invalid-name

import sys
import threading

from parameterized import parameterized

from searchengines.exceptions import InvalidOrderError, UnknownEngineError, PersistenceError
from searchengines.prefs import MemoryPreferenceStore
from searchengines.registry import (
    EngineRegistry,
    ORDERED_ENGINE_NAMES,
    DISABLED_ENGINE_NAMES,
)

from tests import SearchEnginesTestCase

EXPECTED_ENGINE_NAMES = ["Amazon.com", "Bing", "DuckDuckGo", "Google", "Twitter", "Wikipedia", "Yahoo"]
DEFAULT_ENGINE_NAME = "Yahoo"


class FailingStore(MemoryPreferenceStore):
    """Store that can be read but not be written."""

    def set_value(self, key, value):
        raise PersistenceError("store is read-only", key=key)


class TestEngineRegistry(SearchEnginesTestCase):

    def test_includes_expected_engines(self):
        engines = self.build_registry().get_ordered_engines()
        self.assertEqual(len(engines), len(EXPECTED_ENGINE_NAMES))
        self.assertEqual({e.short_name for e in engines}, set(EXPECTED_ENGINE_NAMES))

    def test_default_engine_on_startup(self):
        registry = self.build_registry()
        self.assertEqual(registry.get_default_engine().short_name, DEFAULT_ENGINE_NAME)
        self.assertEqual(registry.get_ordered_engines()[0].short_name, DEFAULT_ENGINE_NAME)
        # catalog order of the other engines is kept
        self.assertEqual(
            [e.short_name for e in registry.get_ordered_engines()[1:]],
            [name for name in EXPECTED_ENGINE_NAMES if name != DEFAULT_ENGINE_NAME],
        )
        # all engines are enabled on startup
        self.assertEqual(len(registry.get_enabled_engines()), len(EXPECTED_ENGINE_NAMES))

    def test_startup_does_not_write(self):
        self.build_registry()
        self.assertEqual(self.store.data, {})

    def test_default_engine(self):
        registry = self.build_registry()
        engine_set = registry.get_ordered_engines()

        registry.set_default_engine(engine_set[0])
        self.assertTrue(registry.is_engine_default(engine_set[0]))
        self.assertFalse(registry.is_engine_default(engine_set[1]))
        self.assertEqual(registry.get_ordered_engines()[0].short_name, engine_set[0].short_name)

        registry.set_default_engine(engine_set[1])
        self.assertFalse(registry.is_engine_default(engine_set[0]))
        self.assertTrue(registry.is_engine_default(engine_set[1]))
        self.assertEqual(registry.get_ordered_engines()[0].short_name, engine_set[1].short_name)
        for other in engine_set[2:]:
            self.assertFalse(registry.is_engine_default(other))

        # the default engine has been persisted
        registry2 = self.build_registry()
        self.assertTrue(registry2.is_engine_default(engine_set[1]))
        self.assertEqual(registry2.get_default_engine(), engine_set[1])

    def test_set_default_keeps_order_of_others(self):
        registry = self.build_registry()
        engine_set = registry.get_ordered_engines()

        registry.set_default_engine(engine_set[3])
        self.assertEqual(
            registry.get_ordered_engines(),
            [engine_set[3]] + engine_set[:3] + engine_set[4:],
        )

    def test_ordered_engines(self):
        registry = self.build_registry()
        engine_set = registry.get_ordered_engines()

        new_order = [engine_set[2], engine_set[1], engine_set[0]] + engine_set[3:]
        registry.set_ordered_engines(new_order)
        self.assertEqual(registry.get_ordered_engines(), new_order)
        self.assertTrue(registry.is_engine_default(engine_set[2]))

        # the ordering has been persisted
        registry2 = self.build_registry()
        self.assertEqual(registry2.get_ordered_engines(), new_order)

    def test_ordered_engines_by_short_name(self):
        registry = self.build_registry()
        names = list(reversed(EXPECTED_ENGINE_NAMES))
        registry.set_ordered_engines(names)
        self.assertEqual([e.short_name for e in registry.get_ordered_engines()], names)
        self.assertEqual(self.store.get_string_list(ORDERED_ENGINE_NAMES), names)

    @parameterized.expand(
        [
            ("missing", EXPECTED_ENGINE_NAMES[:-1], {"missing": ["Yahoo"]}),
            ("duplicate", EXPECTED_ENGINE_NAMES + ["Bing"], {"duplicate": ["Bing"]}),
            ("unknown", EXPECTED_ENGINE_NAMES + ["Lycos"], {"unknown": ["Lycos"]}),
            ("replaced", EXPECTED_ENGINE_NAMES[:-1] + ["Lycos"], {"missing": ["Yahoo"], "unknown": ["Lycos"]}),
            ("empty", [], {"missing": sorted(EXPECTED_ENGINE_NAMES)}),
        ]
    )
    def test_invalid_order(self, _name, names, expected):
        registry = self.build_registry()
        before = registry.get_ordered_engines()

        with self.assertRaises(InvalidOrderError) as ctx:
            registry.set_ordered_engines(names)

        self.assertEqual(ctx.exception.missing, expected.get("missing", []))
        self.assertEqual(ctx.exception.duplicate, expected.get("duplicate", []))
        self.assertEqual(ctx.exception.unknown, expected.get("unknown", []))

        # state is unchanged and nothing has been written
        self.assertEqual(registry.get_ordered_engines(), before)
        self.assertEqual(self.store.data, {})

    def test_enabled_engines(self):
        registry = self.build_registry()
        engine_set = registry.get_ordered_engines()

        # you can't disable the default engine
        registry.set_default_engine(engine_set[1])
        registry.disable_engine(engine_set[1])
        self.assertTrue(registry.is_engine_enabled(engine_set[1]))

        # enable and disable work
        registry.enable_engine(engine_set[0])
        self.assertTrue(registry.is_engine_enabled(engine_set[0]))
        self.assertEqual(1, registry.get_enabled_engines().count(engine_set[0]))

        registry.disable_engine(engine_set[0])
        self.assertFalse(registry.is_engine_enabled(engine_set[0]))
        self.assertNotIn(engine_set[0], registry.get_enabled_engines())

        # setting the default engine enables it
        registry.set_default_engine(engine_set[0])
        self.assertTrue(registry.is_engine_enabled(engine_set[0]))
        self.assertTrue(registry.is_engine_enabled(engine_set[1]))

        # setting the order may change the default engine, which enables it
        registry.disable_engine(engine_set[2])
        registry.set_ordered_engines([engine_set[2], engine_set[1], engine_set[0]] + engine_set[3:])
        self.assertTrue(registry.is_engine_default(engine_set[2]))
        self.assertTrue(registry.is_engine_enabled(engine_set[2]))

        # the enabling is persisted
        registry.enable_engine(engine_set[2])
        registry.disable_engine(engine_set[1])
        registry.enable_engine(engine_set[0])

        registry2 = self.build_registry()
        self.assertTrue(registry2.is_engine_enabled(engine_set[2]))
        self.assertFalse(registry2.is_engine_enabled(engine_set[1]))
        self.assertTrue(registry2.is_engine_enabled(engine_set[0]))

    def test_enable_by_order_is_persisted(self):
        registry = self.build_registry()
        engine_set = registry.get_ordered_engines()

        registry.disable_engine(engine_set[3])
        self.assertEqual(self.store.get_string_set(DISABLED_ENGINE_NAMES), {engine_set[3].short_name})

        registry.set_ordered_engines([engine_set[3]] + engine_set[:3] + engine_set[4:])
        self.assertEqual(self.store.get_string_set(DISABLED_ENGINE_NAMES), set())
        self.assertTrue(self.build_registry().is_engine_enabled(engine_set[3]))

    def test_enabled_engines_keep_order(self):
        registry = self.build_registry()
        engine_set = registry.get_ordered_engines()

        registry.disable_engine(engine_set[2])
        registry.disable_engine(engine_set[4])
        self.assertEqual(
            registry.get_enabled_engines(),
            [e for i, e in enumerate(engine_set) if i not in (2, 4)],
        )

    def test_quick_search_engines(self):
        registry = self.build_registry()
        engine_set = registry.get_ordered_engines()

        registry.disable_engine(engine_set[1])
        quick = registry.get_quick_search_engines()
        self.assertNotIn(engine_set[0], quick)
        self.assertNotIn(engine_set[1], quick)
        self.assertEqual(quick, engine_set[2:])

    def test_unknown_engine(self):
        registry = self.build_registry()
        for method in (
            registry.set_default_engine,
            registry.enable_engine,
            registry.disable_engine,
            registry.is_engine_enabled,
            registry.is_engine_default,
            registry.get_engine,
        ):
            with self.assertRaises(UnknownEngineError) as ctx:
                method("Lycos")
            self.assertEqual(ctx.exception.short_name, "Lycos")

        unknown = self.build_catalog("Lycos").engines[0]
        with self.assertRaises(UnknownEngineError):
            registry.set_default_engine(unknown)

        self.assertEqual(self.store.data, {})

    def test_engine_identity_is_short_name(self):
        registry = self.build_registry()
        self.assertEqual(registry.get_engine("Bing").short_name, "Bing")
        self.assertTrue(registry.is_engine_default(DEFAULT_ENGINE_NAME))


class TestEngineRegistryCatalogChanges(SearchEnginesTestCase):

    def test_removed_and_added_engines(self):
        self.store.set_string_list(ORDERED_ENGINE_NAMES, ["engine3", "gone", "engine1"])
        catalog = self.build_catalog("engine0", "engine1", "engine2", "engine3")

        registry = self.build_registry(catalog)
        self.assertEqual(
            [e.short_name for e in registry.get_ordered_engines()],
            ["engine3", "engine1", "engine0", "engine2"],
        )
        self.assertTrue(registry.is_engine_default("engine3"))

    def test_duplicates_in_persisted_order(self):
        self.store.set_string_list(ORDERED_ENGINE_NAMES, ["engine1", "engine1", "engine0"])
        registry = self.build_registry(self.build_catalog("engine0", "engine1"))
        self.assertEqual([e.short_name for e in registry.get_ordered_engines()], ["engine1", "engine0"])

    def test_new_engines_are_enabled(self):
        self.store.set_string_set(DISABLED_ENGINE_NAMES, {"engine1", "gone"})
        registry = self.build_registry(self.build_catalog("engine0", "engine1", "engine2"))
        self.assertFalse(registry.is_engine_enabled("engine1"))
        self.assertTrue(registry.is_engine_enabled("engine2"))

    def test_disabled_default_is_enabled(self):
        self.store.set_string_list(ORDERED_ENGINE_NAMES, ["engine1", "engine0"])
        self.store.set_string_set(DISABLED_ENGINE_NAMES, {"engine1"})
        registry = self.build_registry(self.build_catalog("engine0", "engine1"))
        self.assertTrue(registry.is_engine_default("engine1"))
        self.assertTrue(registry.is_engine_enabled("engine1"))

    def test_configured_default(self):
        catalog = self.build_catalog("engine0", "engine1", "engine2", default="engine2")
        registry = self.build_registry(catalog)
        self.assertEqual(
            [e.short_name for e in registry.get_ordered_engines()],
            ["engine2", "engine0", "engine1"],
        )

    def test_registries_share_store(self):
        catalog = self.build_catalog("engine0", "engine1", "engine2")
        registry1 = self.build_registry(catalog)
        registry1.set_default_engine("engine2")
        registry1.disable_engine("engine1")

        registry2 = self.build_registry(catalog)
        self.assertEqual(registry2.get_default_engine().short_name, "engine2")
        self.assertEqual([e.short_name for e in registry2.get_enabled_engines()], ["engine2", "engine0"])

    def test_isolated_stores(self):
        catalog = self.build_catalog("engine0", "engine1")
        registry1 = EngineRegistry(MemoryPreferenceStore(), catalog)
        registry2 = EngineRegistry(MemoryPreferenceStore(), catalog)
        registry1.set_default_engine("engine1")
        self.assertEqual(registry2.get_default_engine().short_name, "engine0")


class TestEngineRegistryPersistence(SearchEnginesTestCase):

    def test_corrupt_store(self):
        self.store.set_value(ORDERED_ENGINE_NAMES, "[not JSON")
        with self.assertRaises(PersistenceError):
            self.build_registry()

    def test_wrong_type_in_store(self):
        self.store.set_value(DISABLED_ENGINE_NAMES, '{"Bing": true}')
        with self.assertRaises(PersistenceError):
            self.build_registry()

    def test_failing_store(self):
        registry = EngineRegistry(FailingStore(), self.build_catalog("engine0", "engine1"))

        with self.assertLogs('searchengines.registry', level='ERROR'):
            with self.assertRaises(PersistenceError):
                registry.set_default_engine("engine1")

        # the in-memory state is not rolled back
        self.assertTrue(registry.is_engine_default("engine1"))

        with self.assertRaises(PersistenceError):
            registry.disable_engine("engine0")

    def test_disable_default_does_not_write(self):
        registry = EngineRegistry(FailingStore(), self.build_catalog("engine0", "engine1"))
        # no-op, nothing to persist
        registry.disable_engine("engine0")
        self.assertTrue(registry.is_engine_enabled("engine0"))


class TestEngineRegistrySuggestions(SearchEnginesTestCase):

    def test_show_search_suggestions(self):
        registry = self.build_registry()
        self.assertTrue(registry.show_search_suggestions)
        self.assertTrue(registry.show_search_suggestions_opt_in)

        registry.show_search_suggestions = False
        registry.show_search_suggestions_opt_in = False

        registry2 = self.build_registry()
        self.assertFalse(registry2.show_search_suggestions)
        self.assertFalse(registry2.show_search_suggestions_opt_in)


class TestEngineRegistryThreads(SearchEnginesTestCase):

    def test_concurrent_mutations(self):
        registry = self.build_registry()
        names = [e.short_name for e in registry.get_ordered_engines()]

        def worker(offset):
            for i in range(50):
                name = names[(i + offset) % len(names)]
                registry.set_default_engine(name)
                registry.disable_engine(names[(i + offset + 1) % len(names)])
                registry.enable_engine(names[(i + offset + 2) % len(names)])

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        ordered = [e.short_name for e in registry.get_ordered_engines()]
        self.assertEqual(sorted(ordered), sorted(names))
        self.assertTrue(registry.is_engine_enabled(ordered[0]))

        # memory and store agree
        registry2 = self.build_registry()
        self.assertEqual(registry2.get_ordered_engines(), registry.get_ordered_engines())
        self.assertEqual(registry2.get_enabled_engines(), registry.get_enabled_engines())

    def test_readers_see_complete_order(self):
        previous_interval = sys.getswitchinterval()
        self.addCleanup(sys.setswitchinterval, previous_interval)
        sys.setswitchinterval(1e-6)

        registry = self.build_registry()
        engine_set = registry.get_ordered_engines()
        registry.disable_engine(engine_set[1])
        stop = threading.Event()

        def writer():
            i = 0
            while not stop.is_set():
                registry.set_default_engine(engine_set[i % len(engine_set)])
                registry.set_ordered_engines(list(reversed(registry.get_ordered_engines())))
                i += 1

        thread = threading.Thread(target=writer)
        thread.start()
        incomplete = []
        disabled_default = []
        try:
            for _ in range(2000):
                snapshot = registry.get_ordered_engines()
                if len(snapshot) != len(engine_set):
                    incomplete.append(len(snapshot))
                if not registry.is_engine_enabled(registry.get_default_engine()):
                    disabled_default.append(registry.get_default_engine().short_name)
        finally:
            stop.set()
            thread.join()

        self.assertEqual(incomplete, [])
        self.assertEqual(disabled_default, [])
