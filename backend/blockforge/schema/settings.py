"""
Settings pages.

Each settings instance (the global one, ``""``, plus one per configured
locale or custom id) has a tabbed field layout. Tabs keep authoring order.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

from blockforge.domain.exceptions import SchemaUnavailable
from blockforge.domain.invariants.schema import assert_unique_ids
from blockforge.schema.field import FieldSchema, find_field, parse_fields


@dataclass(frozen=True)
class SettingsTab:
    id: str
    label: str
    fields: Tuple[FieldSchema, ...] = ()

    def metaboxes(self) -> List[Tuple[str, List[FieldSchema]]]:
        """Fields grouped by their ``metabox`` key, in first-seen order."""
        groups: Dict[str, List[FieldSchema]] = {}
        for schema in self.fields:
            groups.setdefault(schema.metabox, []).append(schema)
        return list(groups.items())


@dataclass(frozen=True)
class SettingsPage:
    instance: str
    label: str
    kind: str = "global"
    tabs: Tuple[SettingsTab, ...] = ()

    @property
    def default_tab(self) -> Optional[str]:
        return self.tabs[0].id if self.tabs else None

    def tab(self, tab_id: str) -> Optional[SettingsTab]:
        for tab in self.tabs:
            if tab.id == tab_id:
                return tab
        return None

    def fields(self) -> Iterator[FieldSchema]:
        for tab in self.tabs:
            yield from tab.fields

    def field(self, field_id: str) -> Optional[FieldSchema]:
        return find_field(tuple(self.fields()), field_id)

    def field_type(self, field_id: str) -> Optional[str]:
        """Type of a top-level field or of a repeater sub-field."""
        schema = self.field(field_id)
        if schema is not None:
            return schema.type

        for parent in self.fields():
            sub = parent.sub_field(field_id)
            if sub is not None:
                return sub.type
        return None

    def defaults(self) -> Dict[str, Any]:
        return {schema.id: schema.initial_value() for schema in self.fields()}

    @classmethod
    def from_layout(
        cls,
        instance: str,
        label: str,
        layout: Mapping[str, Mapping[str, Any]],
        kind: str = "global",
    ) -> "SettingsPage":
        tabs = tuple(
            SettingsTab(
                id=tab_id,
                label=str(config.get("label") or tab_id),
                fields=parse_fields(config.get("fields") or ()),
            )
            for tab_id, config in layout.items()
        )
        page = cls(instance=instance, label=label, kind=kind, tabs=tabs)

        # Ids share one value map across tabs
        assert_unique_ids(tuple(page.fields()), scope=f"settings '{instance or 'global'}'")
        return page


class SettingsRegistry:
    def __init__(self, pages: Iterable[SettingsPage] = ()):
        self._pages: Dict[str, SettingsPage] = {}
        for page in pages:
            self.register(page)

    def register(self, page: SettingsPage) -> None:
        self._pages.setdefault(page.instance, page)

    def get(self, instance: str) -> SettingsPage:
        page = self._pages.get(instance)
        if page is None:
            raise SchemaUnavailable(f"Settings instance not found: {instance or 'global'}")
        return page

    def instances(self) -> List[str]:
        return list(self._pages)

    def all(self) -> Sequence[SettingsPage]:
        return list(self._pages.values())
