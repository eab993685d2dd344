"""
Settings page markup.

One form per settings instance: a header with the active version's date and
the save button, a tab bar, one metabox table per field group, and the
version history underneath.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional, Sequence

from markupsafe import Markup

from blockforge.rendering.assets import AssetKind, AssetView
from blockforge.rendering.hosts import HostContext, html_attrs
from blockforge.rendering.renderer import FieldRenderer
from blockforge.schema.settings import SettingsPage, SettingsTab
from blockforge.versioning.store import DATE_FORMAT, VersionMeta

NO_VERSION_LABEL = "No version"


def metabox_title(metabox: str) -> Optional[str]:
    if metabox == "default":
        return None
    title = metabox.replace("_", " ")
    return title[:1].upper() + title[1:]


def version_date(timestamp: Optional[int]) -> str:
    if timestamp is None:
        return NO_VERSION_LABEL
    return datetime.fromtimestamp(timestamp, timezone.utc).strftime(DATE_FORMAT)


class SettingsPageView:
    def __init__(
        self,
        page: SettingsPage,
        values: Mapping[str, Any],
        versions: Sequence[VersionMeta] = (),
        *,
        current_tab: Optional[str] = None,
        assets: Optional[Callable[[AssetKind, int], AssetView]] = None,
    ):
        self.page = page
        self.values = values
        self.versions = list(versions)
        self.current_tab = current_tab if current_tab and page.tab(current_tab) else page.default_tab
        self.renderer = FieldRenderer(assets=assets) if assets else FieldRenderer()

    @property
    def active(self) -> Optional[VersionMeta]:
        for meta in self.versions:
            if meta.active:
                return meta
        return None

    def render(self) -> Markup:
        return Markup(
            '<div class="wrap webtero-theme-options">'
            "<h1>{title}</h1>"
            '<form method="post" action="" id="webtero-options-form">'
            '<input type="hidden" name="webtero_action" value="save_options">'
            "<input{instance}>"
            "<input{tab}>"
            "{header}"
            '<div class="webtero-tabs-wrapper">{nav}{tabs}</div>'
            "</form>"
            "{versions}"
            "</div>"
        ).format(
            title=self.page.label,
            instance=html_attrs({"type": "hidden", "name": "webtero_instance", "value": self.page.instance}),
            tab=html_attrs({
                "type": "hidden",
                "name": "webtero_current_tab",
                "id": "webtero-current-tab",
                "value": self.current_tab or "",
            }),
            header=self.render_header(),
            nav=self.render_nav(),
            tabs=Markup("").join(self.render_tab(tab) for tab in self.page.tabs),
            versions=self.render_version_manager(),
        )

    def render_header(self) -> Markup:
        active = self.active
        return Markup(
            '<div class="webtero-header">'
            '<div class="webtero-versions">'
            "<label>Current Version:</label>"
            '<span class="webtero-version-info">{}</span>'
            "</div>"
            '<button type="submit" name="submit" class="button button-primary">Save Changes</button>'
            "</div>"
        ).format(version_date(active.timestamp) if active else NO_VERSION_LABEL)

    def render_nav(self) -> Markup:
        links = Markup("").join(
            Markup('<a href="#" data-tab="{}" class="nav-tab{}">{}</a>').format(
                tab.id,
                " nav-tab-active" if tab.id == self.current_tab else "",
                tab.label or tab.id,
            )
            for tab in self.page.tabs
        )
        return Markup('<nav class="nav-tab-wrapper">{}</nav>').format(links)

    def render_tab(self, tab: SettingsTab) -> Markup:
        boxes = []
        for metabox, fields in tab.metaboxes():
            title = metabox_title(metabox)
            heading = Markup('<h2 class="hndle"><span>{}</span></h2>').format(title) if title else Markup("")
            rows = Markup("").join(
                self.renderer.render(schema, self.values.get(schema.id), HostContext.SETTINGS).html
                for schema in fields
            )
            boxes.append(
                Markup(
                    '<div class="postbox" data-metabox="{}">{}'
                    '<div class="inside"><table class="form-table">{}</table></div>'
                    "</div>"
                ).format(metabox, heading, rows)
            )

        return Markup(
            '<div class="webtero-tab-content" data-tab-content="{}"{}>'
            '<div class="metabox-holder">{}</div>'
            "</div>"
        ).format(
            tab.id,
            Markup("") if tab.id == self.current_tab else Markup(' style="display:none;"'),
            Markup("").join(boxes),
        )

    def render_version_manager(self) -> Markup:
        if not self.versions:
            return Markup("")

        clear = Markup("")
        if len(self.versions) > 1:
            clear = Markup(
                '<div class="webtero-clear-history">'
                '<button type="button" class="button button-secondary" data-action="prune">'
                "Clear Version History</button>"
                '<span class="description">Delete all saved versions except the currently active one.</span>'
                "</div>"
            )

        rows = []
        for meta in self.versions:
            marker = Markup(' <span class="dashicons dashicons-yes-alt"></span>') if meta.active else Markup("")
            disabled = Markup(" disabled") if meta.active else Markup("")
            rows.append(
                Markup(
                    '<tr data-version="{ts}"{cls}>'
                    "<td>{date}{marker}</td>"
                    "<td>{user}</td>"
                    "<td>"
                    '<button type="button" class="button" data-action="restore" data-version="{ts}"{disabled}>Restore</button> '
                    '<button type="button" class="button button-link-delete" data-action="delete" data-version="{ts}"{disabled}>Delete</button>'
                    "</td>"
                    "</tr>"
                ).format(
                    ts=meta.timestamp,
                    cls=Markup(' class="is-active"') if meta.active else Markup(""),
                    date=meta.date or version_date(meta.timestamp),
                    marker=marker,
                    user=meta.user,
                    disabled=disabled,
                )
            )

        return Markup(
            '<div class="postbox webtero-version-manager">'
            '<h2 class="hndle"><span>Version History</span></h2>'
            '<div class="inside">{}'
            '<table class="widefat">'
            "<thead><tr><th>Date</th><th>User</th><th>Actions</th></tr></thead>"
            "<tbody>{}</tbody>"
            "</table>"
            "</div>"
            "</div>"
        ).format(clear, Markup("").join(rows))
