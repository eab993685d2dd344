"""Tests for versioned settings snapshots."""

import json

import pytest

from blockforge.domain.exceptions import VersionInvalidOperation, VersionNotFound
from blockforge.versioning.store import (
    MemoryOptionRepository,
    VersioningStore,
    get_option,
    option_base,
)


class Clock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def options():
    return MemoryOptionRepository()


def save_at(store, timestamp, values, author="admin"):
    store.clock = Clock(timestamp)
    return store.save(values, author)


class TestRecords:
    def test_record_names(self, options):
        store = VersioningStore(options, "de_DE")
        save_at(store, 100, {"a": 1})

        assert set(options.records) == {
            "webtero-theme-options_de_DE_100",
            "webtero-theme-options_de_DE_versions",
            "webtero-theme-options_de_DE_active",
        }
        assert json.loads(options.records["webtero-theme-options_de_DE_100"]) == {"a": 1}
        assert options.records["webtero-theme-options_de_DE_active"] == 100

    def test_global_instance_base(self):
        assert option_base("") == "webtero-theme-options"


class TestSave:
    def test_save_moves_pointer(self, options):
        store = VersioningStore(options)
        snapshot = save_at(store, 100, {"color": "#fff"}, author="Alice")

        assert snapshot.timestamp == 100
        assert snapshot.user == "Alice"
        assert store.active_timestamp() == 100

        save_at(store, 200, {"color": "#000"})
        assert store.active_timestamp() == 200
        assert store.get_active_value() == {"color": "#000"}

    def test_same_second_is_rejected(self, options):
        store = VersioningStore(options)
        save_at(store, 100, {"color": "#fff"})

        with pytest.raises(VersionInvalidOperation) as exc:
            save_at(store, 100, {"color": "#000"})

        assert exc.value.reason == VersionInvalidOperation.DUPLICATE
        assert store.get_active_value() == {"color": "#fff"}

    def test_versions_newest_first(self, options):
        store = VersioningStore(options)
        save_at(store, 100, {}, author="a")
        save_at(store, 300, {}, author="b")
        save_at(store, 200, {}, author="c")

        versions = store.versions()
        assert [v.timestamp for v in versions] == [300, 200, 100]
        assert [v.active for v in versions] == [False, True, False]
        assert versions[1].user == "c"
        assert versions[1].date == "1970-01-01 00:03:20"

    def test_empty_store(self, options):
        store = VersioningStore(options)
        assert store.get_active_value() == {}
        assert store.active_timestamp() is None
        assert store.versions() == []


class TestRestore:
    def test_restore_only_moves_pointer(self, options):
        store = VersioningStore(options)
        save_at(store, 100, {"color": "#fff"})
        save_at(store, 200, {"color": "#000"})
        before = {k: v for k, v in options.records.items() if not k.endswith("_active")}

        store.restore(100)

        after = {k: v for k, v in options.records.items() if not k.endswith("_active")}
        assert after == before
        assert store.active_timestamp() == 100
        assert store.get_active_value() == {"color": "#fff"}

    def test_restore_unknown(self, options):
        store = VersioningStore(options)
        save_at(store, 100, {})

        with pytest.raises(VersionNotFound):
            store.restore(999)
        assert store.active_timestamp() == 100


class TestDelete:
    def test_delete_rules(self, options):
        store = VersioningStore(options)
        save_at(store, 100, {"v": 1})
        save_at(store, 200, {"v": 2})
        store.restore(100)

        with pytest.raises(VersionInvalidOperation) as active:
            store.delete(100)
        assert active.value.reason == VersionInvalidOperation.ACTIVE

        store.delete(200)
        assert store.timestamps() == [100]
        assert "webtero-theme-options_200" not in options.records

        with pytest.raises(VersionInvalidOperation) as sole:
            store.delete(100)
        assert sole.value.reason == VersionInvalidOperation.SOLE
        assert store.timestamps() == [100]

    def test_delete_unknown(self, options):
        store = VersioningStore(options)
        save_at(store, 100, {})
        save_at(store, 200, {})

        with pytest.raises(VersionNotFound):
            store.delete(150)

    def test_prune_keeps_active(self, options):
        store = VersioningStore(options)
        for ts in (100, 200, 300):
            save_at(store, ts, {"v": ts})
        store.restore(200)

        assert store.prune_all_but_active() == [100, 300]
        assert store.timestamps() == [200]
        assert store.get_active_value() == {"v": 200}

    def test_prune_without_versions(self, options):
        assert VersioningStore(options).prune_all_but_active() == []


class TestCorruptState:
    def test_dangling_pointer_uses_newest(self, options, caplog):
        store = VersioningStore(options)
        save_at(store, 100, {"v": 1})
        save_at(store, 200, {"v": 2})
        options.records["webtero-theme-options_active"] = 999

        assert store.active_timestamp() == 200
        assert store.get_active_value() == {"v": 2}
        assert "missing snapshot" in caplog.text

    def test_missing_pointer_uses_newest(self, options):
        store = VersioningStore(options)
        save_at(store, 100, {"v": 1})
        save_at(store, 200, {"v": 2})
        del options.records["webtero-theme-options_active"]

        assert store.active_timestamp() == 200

    def test_unreadable_snapshot_is_empty(self, options):
        store = VersioningStore(options)
        save_at(store, 100, {"v": 1})
        options.records["webtero-theme-options_100"] = "{broken"

        assert store.get_active_value() == {}


class TestGetOption:
    def test_reads_active_or_given_version(self, options):
        store = VersioningStore(options, "de_DE")
        save_at(store, 100, {"logo": 5})
        save_at(store, 200, {"logo": 9})

        assert get_option(options, "logo", "de_DE") == 9
        assert get_option(options, "logo", "de_DE", version=100) == 5

    def test_default_for_missing_key_or_version(self, options):
        store = VersioningStore(options)
        save_at(store, 100, {"logo": 5})

        assert get_option(options, "missing", default="x") == "x"
        assert get_option(options, "logo", version=50, default="x") == "x"
        assert get_option(options, "logo", "fr_FR", default="x") == "x"
