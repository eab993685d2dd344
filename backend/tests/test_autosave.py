"""Tests for debounced auto-save."""

from blockforge.editor.autosave import (
    PENDING_LABEL,
    SAVED_LABEL,
    AutosaveCoordinator,
    AutosaveStatus,
)
from blockforge.editor.store import ValueStore
from blockforge.schema.field import parse_fields

FIELDS = parse_fields([
    {"id": "title", "type": "text", "default": ""},
    {"id": "subtitle", "type": "text", "default": ""},
])


def make_coordinator(scheduler, store=None):
    store = store or ValueStore(FIELDS)
    commits = []
    store.subscribe(lambda new, old: commits.append(dict(new)))
    coordinator = AutosaveCoordinator(
        store,
        scheduler,
        debounce=0.5,
        saved_display=2.0,
        clock=lambda: "2024-01-01T00:00:00+00:00",
    )
    return coordinator, store, commits


class TestCoalescing:
    def test_rapid_changes_make_one_commit(self, scheduler):
        coordinator, store, commits = make_coordinator(scheduler)
        inputs = {}
        coordinator.observe("title", lambda: inputs["title"])
        coordinator.observe("subtitle", lambda: inputs["subtitle"])

        for i in range(10):
            inputs["title"] = f"Title {i}"
            inputs["subtitle"] = f"Sub {i}"
            coordinator.notify_change("title")
            scheduler.advance(0.1)

        assert commits == []
        assert coordinator.has_pending_flush

        scheduler.advance(0.5)

        assert len(commits) == 1
        assert coordinator.commits == 1
        assert commits[0] == {
            "title": "Title 9",
            "subtitle": "Sub 9",
            "timestamp": "2024-01-01T00:00:00+00:00",
        }
        assert not coordinator.has_pending_flush

    def test_values_are_read_at_flush_time(self, scheduler):
        coordinator, store, _ = make_coordinator(scheduler)
        inputs = {"title": "typed"}
        coordinator.observe("title", lambda: inputs["title"])

        coordinator.notify_change("title")
        inputs["title"] = "typed later"
        scheduler.advance(0.5)

        assert store.get("title") == "typed later"

    def test_separate_windows_commit_separately(self, scheduler):
        coordinator, _, commits = make_coordinator(scheduler)
        coordinator.observe("title", lambda: "x")

        coordinator.notify_change("title")
        scheduler.advance(1)
        coordinator.notify_change("title")
        scheduler.advance(1)

        assert len(commits) == 2

    def test_only_one_timer_is_live(self, scheduler):
        coordinator, _, _ = make_coordinator(scheduler)
        for _ in range(5):
            coordinator.notify_change("title")
        assert len(scheduler.pending) == 1


class TestStatus:
    def test_pending_then_saved_then_cleared(self, scheduler):
        coordinator, _, _ = make_coordinator(scheduler)
        coordinator.observe("title", lambda: "x")
        assert coordinator.label == ""

        coordinator.notify_change("title")
        assert coordinator.status is AutosaveStatus.PENDING
        assert coordinator.label == PENDING_LABEL

        scheduler.advance(0.5)
        assert coordinator.status is AutosaveStatus.SAVED
        assert coordinator.label == SAVED_LABEL

        scheduler.advance(1.5)
        assert coordinator.status is AutosaveStatus.SAVED
        scheduler.advance(0.5)
        assert coordinator.status is AutosaveStatus.IDLE

    def test_new_change_cancels_saved_display(self, scheduler):
        coordinator, _, _ = make_coordinator(scheduler)
        coordinator.observe("title", lambda: "x")
        coordinator.notify_change("title")
        scheduler.advance(0.5)

        coordinator.notify_change("title")
        scheduler.advance(0.2)
        assert coordinator.status is AutosaveStatus.PENDING


class TestFailures:
    def test_unreadable_field_is_skipped(self, scheduler, caplog):
        coordinator, store, commits = make_coordinator(scheduler)

        def removed():
            raise LookupError("input left the form")

        coordinator.observe("title", lambda: "kept")
        coordinator.observe("subtitle", removed)
        coordinator.notify_change("title")
        scheduler.advance(0.5)

        assert len(commits) == 1
        assert store.get("title") == "kept"
        assert "subtitle" not in store.values
        assert coordinator.skipped == ["subtitle"]
        assert "could not read field subtitle" in caplog.text

    def test_close_drops_pending_flush(self, scheduler):
        coordinator, _, commits = make_coordinator(scheduler)
        coordinator.observe("title", lambda: "x")
        coordinator.notify_change("title")

        coordinator.close()
        scheduler.advance(5)
        coordinator.notify_change("title")
        scheduler.advance(5)

        assert commits == []
        assert scheduler.pending == []
