"""
Repeater engine.

Manages the ordered rows of one repeater field. Rows are read from the value
store at call time and every mutation goes back through ``ValueStore.set``,
so row order seen by renderers is always the committed one.
"""
from __future__ import annotations

import copy
import logging
import uuid
from typing import Any, Callable, Dict, List, Optional, Set

from blockforge.domain.exceptions import RepeaterBoundsViolation
from blockforge.editor.store import ValueStore
from blockforge.schema.field import ALLOWED_WIDTHS, FieldSchema, FieldType

logger = logging.getLogger(__name__)

ROW_ID_KEY = "_rowId"
ROW_WIDTH_KEY = "_width"
ENGINE_KEYS = frozenset({ROW_ID_KEY, ROW_WIDTH_KEY})

BEFORE = "before"
AFTER = "after"
UP = "up"
DOWN = "down"


def new_row_id() -> str:
    return f"row_{uuid.uuid4().hex[:16]}"


class RepeaterEngine:
    def __init__(
        self,
        field: FieldSchema,
        store: ValueStore,
        *,
        id_factory: Callable[[], str] = new_row_id,
    ):
        if field.type != FieldType.REPEATER.value:
            raise ValueError(f"Field '{field.id}' is not a repeater")

        self.field = field
        self.store = store
        self._id_factory = id_factory
        self._collapsed: Set[int] = set()
        self.pending_removal: Optional[int] = None
        self.hint: Optional[str] = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    @property
    def min_rows(self) -> int:
        return int(self.field.min or 0)

    @property
    def max_rows(self) -> Optional[int]:
        return int(self.field.max) if self.field.max is not None else None

    @property
    def rows(self) -> List[Dict[str, Any]]:
        value = self.store.get(self.field.id)
        if not isinstance(value, list):
            return []
        return [dict(row) if isinstance(row, dict) else {} for row in value]

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def can_add(self) -> bool:
        return self.max_rows is None or self.row_count < self.max_rows

    @property
    def can_remove(self) -> bool:
        return self.row_count > self.min_rows

    @property
    def counter(self) -> str:
        if self.max_rows is None:
            return str(self.row_count)
        return f"{self.row_count}/{self.max_rows}"

    def is_collapsed(self, index: int) -> bool:
        return index in self._collapsed

    @property
    def collapsed(self) -> frozenset:
        return frozenset(self._collapsed)

    # ------------------------------------------------------------------
    # Row operations
    # ------------------------------------------------------------------
    def new_row(self) -> Dict[str, Any]:
        row = {sub.id: sub.initial_value() for sub in self.field.fields}
        row[ROW_WIDTH_KEY] = 100
        row[ROW_ID_KEY] = self._id_factory()
        return row

    def ensure_row_ids(self) -> bool:
        """Give legacy rows an identifier. Returns True when rows were rewritten."""
        rows = self.rows
        changed = False
        for row in rows:
            if not row.get(ROW_ID_KEY):
                row[ROW_ID_KEY] = self._id_factory()
                changed = True

        if changed:
            self._commit(rows)
        return changed

    def add_row(self) -> bool:
        rows = self.rows
        try:
            self._guard_max(rows)
        except RepeaterBoundsViolation as exc:
            return self._reject(exc)

        rows.append(self.new_row())
        self._commit(rows)
        return True

    def insert_row(self, index: int, position: str = AFTER) -> bool:
        if position not in (BEFORE, AFTER):
            raise ValueError(f"Unknown insert position: {position}")

        rows = self.rows
        if not 0 <= index < len(rows):
            return False
        try:
            self._guard_max(rows)
        except RepeaterBoundsViolation as exc:
            return self._reject(exc)

        insert_at = index if position == BEFORE else index + 1
        rows.insert(insert_at, self.new_row())
        self._commit(rows)
        return True

    def request_remove(self, index: int) -> bool:
        """First step of an interactive delete; confirm_remove() applies it."""
        if not 0 <= index < self.row_count or not self.can_remove:
            return False
        self.pending_removal = index
        return True

    def confirm_remove(self) -> bool:
        index, self.pending_removal = self.pending_removal, None
        if index is None:
            return False
        return self.remove_row(index)

    def cancel_remove(self) -> None:
        self.pending_removal = None

    def remove_row(self, index: int) -> bool:
        rows = self.rows
        if not 0 <= index < len(rows):
            return False
        if len(rows) <= self.min_rows:
            return self._reject(RepeaterBoundsViolation(
                f"'{self.field.id}' needs at least {self.min_rows} rows"
            ))

        del rows[index]
        self._commit(rows)
        return True

    def move_row(self, index: int, direction: str) -> bool:
        if direction not in (UP, DOWN):
            raise ValueError(f"Unknown direction: {direction}")

        rows = self.rows
        target = index - 1 if direction == UP else index + 1
        if not 0 <= index < len(rows) or not 0 <= target < len(rows):
            return False

        rows[index], rows[target] = rows[target], rows[index]
        self._commit(rows)
        return True

    def update_row_field(self, index: int, sub_field_id: str, value: Any) -> bool:
        rows = self.rows
        if not 0 <= index < len(rows):
            return False

        rows[index] = {**rows[index], sub_field_id: copy.deepcopy(value)}
        self._commit(rows)
        return True

    def update_row_width(self, index: int, width: int) -> bool:
        if width not in ALLOWED_WIDTHS:
            raise ValueError(f"Row width must be one of {ALLOWED_WIDTHS}")

        rows = self.rows
        if not 0 <= index < len(rows):
            return False

        rows[index] = {**rows[index], ROW_WIDTH_KEY: width}
        self._commit(rows)
        return True

    def toggle_collapse(self, index: int) -> bool:
        if index in self._collapsed:
            self._collapsed.discard(index)
            return False
        self._collapsed.add(index)
        return True

    # ------------------------------------------------------------------
    def _guard_max(self, rows):
        if self.max_rows is not None and len(rows) >= self.max_rows:
            raise RepeaterBoundsViolation(
                f"'{self.field.id}' allows at most {self.max_rows} rows"
            )

    def _reject(self, exc: RepeaterBoundsViolation) -> bool:
        self.hint = str(exc)
        logger.debug("Rejected repeater operation: %s", exc)
        return False

    def _commit(self, rows):
        self.hint = None
        self.store.set({self.field.id: rows})
