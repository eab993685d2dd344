"""
Versioned settings snapshots.

Each settings instance owns three kinds of option records:

    <base>_<timestamp>   one JSON-encoded value map per snapshot
    <base>_versions      {timestamp: {timestamp, date, user}}
    <base>_active        timestamp of the live snapshot

Snapshots are written once and never edited. Saving creates a snapshot and
moves the pointer to it; restoring only moves the pointer.
"""
from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol

from blockforge.domain.lifecycle.versioning import (
    assert_version_deletable,
    assert_version_exists,
    assert_version_new,
)

logger = logging.getLogger(__name__)

OPTION_BASE = "webtero-theme-options"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class OptionRepository(Protocol):
    def get(self, name: str, default: Any = None) -> Any: ...

    def update(self, name: str, value: Any) -> None: ...

    def delete(self, name: str) -> None: ...


class MemoryOptionRepository:
    """Dict-backed option records, used by previews and tests."""

    def __init__(self, records: Optional[Dict[str, Any]] = None):
        self.records: Dict[str, Any] = dict(records or {})

    def get(self, name, default=None):
        return self.records.get(name, default)

    def update(self, name, value):
        self.records[name] = value

    def delete(self, name):
        self.records.pop(name, None)


def option_base(instance: str = "") -> str:
    return f"{OPTION_BASE}_{instance}" if instance else OPTION_BASE


@dataclass(frozen=True)
class VersionMeta:
    timestamp: int
    date: str
    user: str
    active: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "date": self.date,
            "user": self.user,
            "active": self.active,
        }


@dataclass(frozen=True)
class Snapshot:
    timestamp: int
    values: Dict[str, Any]
    date: str
    user: str


class VersioningStore:
    def __init__(
        self,
        options: OptionRepository,
        instance: str = "",
        *,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.options = options
        self.instance = instance
        self.clock = clock or time.time
        self.base = option_base(instance)

    # ------------------------------------------------------------------
    # Record names
    # ------------------------------------------------------------------
    def snapshot_key(self, timestamp: int) -> str:
        return f"{self.base}_{timestamp}"

    @property
    def versions_key(self) -> str:
        return f"{self.base}_versions"

    @property
    def active_key(self) -> str:
        return f"{self.base}_active"

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def _version_records(self) -> Dict[int, Dict[str, Any]]:
        raw = self.options.get(self.versions_key) or {}
        records = {}
        for key, meta in raw.items():
            try:
                records[int(key)] = dict(meta or {})
            except (TypeError, ValueError):
                logger.warning("Ignoring invalid version key %r in %s", key, self.versions_key)
        return records

    def timestamps(self) -> List[int]:
        return sorted(self._version_records())

    def active_timestamp(self) -> Optional[int]:
        """Pointer value, or the newest snapshot when the pointer is missing or dangling."""
        records = self._version_records()
        if not records:
            return None

        pointer = self.options.get(self.active_key)
        try:
            pointer = int(pointer) if pointer is not None else None
        except (TypeError, ValueError):
            pointer = None

        if pointer in records:
            return pointer

        if pointer is not None:
            logger.warning(
                "Active pointer %s of %s references a missing snapshot; using newest",
                pointer,
                self.base,
            )
        return max(records)

    def versions(self) -> List[VersionMeta]:
        """Snapshot metadata, newest first."""
        active = self.active_timestamp()
        records = self._version_records()
        return [
            VersionMeta(
                timestamp=ts,
                date=str(records[ts].get("date", "")),
                user=str(records[ts].get("user", "")),
                active=ts == active,
            )
            for ts in sorted(records, reverse=True)
        ]

    def get_snapshot(self, timestamp: int) -> Dict[str, Any]:
        raw = self.options.get(self.snapshot_key(timestamp))
        if raw is None:
            return {}
        if isinstance(raw, Mapping):
            return dict(raw)

        try:
            values = json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("Snapshot %s is not valid JSON", self.snapshot_key(timestamp))
            return {}
        return values if isinstance(values, dict) else {}

    def get_active_value(self) -> Dict[str, Any]:
        active = self.active_timestamp()
        if active is None:
            return {}
        return self.get_snapshot(active)

    def get_option(self, key: str, default: Any = None, version: Optional[int] = None) -> Any:
        timestamp = self.active_timestamp() if version is None else int(version)
        if timestamp is None or timestamp not in self._version_records():
            return default
        return self.get_snapshot(timestamp).get(key, default)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    def save(self, values: Mapping[str, Any], author: str = "") -> Snapshot:
        timestamp = int(self.clock())
        records = self._version_records()
        assert_version_new(timestamp=timestamp, timestamps=records.keys())

        date = datetime.fromtimestamp(timestamp, timezone.utc).strftime(DATE_FORMAT)
        payload = dict(values)

        self.options.update(self.snapshot_key(timestamp), json.dumps(payload))
        records[timestamp] = {"timestamp": timestamp, "date": date, "user": author}
        self._write_records(records)
        self.options.update(self.active_key, timestamp)

        logger.info("Saved settings version %s for %s", timestamp, self.base)
        return Snapshot(timestamp=timestamp, values=payload, date=date, user=author)

    def restore(self, timestamp: int) -> None:
        timestamp = int(timestamp)
        assert_version_exists(timestamp=timestamp, timestamps=self._version_records().keys())

        self.options.update(self.active_key, timestamp)
        logger.info("Restored settings version %s for %s", timestamp, self.base)

    def delete(self, timestamp: int) -> None:
        timestamp = int(timestamp)
        records = self._version_records()
        assert_version_deletable(
            timestamp=timestamp,
            active=self.active_timestamp(),
            timestamps=records.keys(),
        )

        del records[timestamp]
        self._write_records(records)
        self.options.delete(self.snapshot_key(timestamp))
        logger.info("Deleted settings version %s for %s", timestamp, self.base)

    def prune_all_but_active(self) -> List[int]:
        active = self.active_timestamp()
        if active is None:
            return []

        records = self._version_records()
        removed = sorted(ts for ts in records if ts != active)
        for ts in removed:
            self.options.delete(self.snapshot_key(ts))

        self._write_records({active: records[active]})
        # Pin the pointer in case it was dangling
        self.options.update(self.active_key, active)

        logger.info("Pruned %d settings versions for %s", len(removed), self.base)
        return removed

    def _write_records(self, records):
        self.options.update(
            self.versions_key,
            {str(ts): records[ts] for ts in sorted(records)},
        )


def get_option(
    options: OptionRepository,
    key: str,
    instance: str = "",
    version: Optional[int] = None,
    default: Any = None,
) -> Any:
    """Read one key from a settings instance without holding a store."""
    return VersioningStore(options, instance).get_option(key, default, version)
