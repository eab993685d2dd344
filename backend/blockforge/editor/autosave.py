"""
Auto-save coordinator.

Fields marked as auto-saving register a reader with the coordinator. Every
change notification shows the pending indicator and restarts one debounce
timer; when the timer fires the coordinator reads every observed field at
that moment and commits them together through ``ValueStore.set``.
"""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Protocol

from blockforge.editor.store import ValueStore

logger = logging.getLogger(__name__)

TIMESTAMP_KEY = "timestamp"

PENDING_LABEL = "Saving…"
SAVED_LABEL = "✓ Saved"


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class LoopScheduler:
    """Schedules callbacks on the running asyncio event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def call_later(self, delay, callback):
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay, callback)


class AutosaveStatus(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    SAVED = "saved"


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class AutosaveCoordinator:
    def __init__(
        self,
        store: ValueStore,
        scheduler: Scheduler,
        *,
        debounce: float = 0.5,
        saved_display: float = 2.0,
        clock: Callable[[], str] = utc_timestamp,
    ):
        self.store = store
        self.scheduler = scheduler
        self.debounce = debounce
        self.saved_display = saved_display
        self.clock = clock

        self.status = AutosaveStatus.IDLE
        self.commits = 0
        self.skipped: List[str] = []

        self._readers: Dict[str, Callable[[], Any]] = {}
        self._flush_timer: Optional[TimerHandle] = None
        self._clear_timer: Optional[TimerHandle] = None
        self._closed = False

    @property
    def label(self) -> str:
        if self.status is AutosaveStatus.PENDING:
            return PENDING_LABEL
        if self.status is AutosaveStatus.SAVED:
            return SAVED_LABEL
        return ""

    @property
    def has_pending_flush(self) -> bool:
        return self._flush_timer is not None

    def observe(self, field_id: str, reader: Callable[[], Any]) -> None:
        self._readers[field_id] = reader

    def unobserve(self, field_id: str) -> None:
        self._readers.pop(field_id, None)

    def notify_change(self, field_id: Optional[str] = None) -> None:
        if self._closed:
            return

        self.status = AutosaveStatus.PENDING
        self._cancel(self._clear_timer)
        self._clear_timer = None

        # One timer per instance: every change restarts the window
        self._cancel(self._flush_timer)
        self._flush_timer = self.scheduler.call_later(self.debounce, self.flush)

    def flush(self) -> Dict[str, Any]:
        self._flush_timer = None
        if self._closed:
            return {}

        payload: Dict[str, Any] = {}
        skipped = []
        for field_id, reader in list(self._readers.items()):
            try:
                payload[field_id] = reader()
            except Exception:
                logger.warning(
                    "Auto-save could not read field %s; skipping it",
                    field_id,
                    exc_info=True,
                )
                skipped.append(field_id)

        payload[TIMESTAMP_KEY] = self.clock()
        self.skipped = skipped
        self.store.set(payload)
        self.commits += 1

        self.status = AutosaveStatus.SAVED
        self._clear_timer = self.scheduler.call_later(self.saved_display, self._clear_status)
        return payload

    def close(self) -> None:
        """Cancel outstanding timers. Pending edits are dropped."""
        self._closed = True
        self._cancel(self._flush_timer)
        self._cancel(self._clear_timer)
        self._flush_timer = self._clear_timer = None
        self._readers.clear()

    def _clear_status(self):
        self._clear_timer = None
        if self.status is AutosaveStatus.SAVED:
            self.status = AutosaveStatus.IDLE

    @staticmethod
    def _cancel(handle):
        if handle is not None:
            handle.cancel()
