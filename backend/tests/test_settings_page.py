"""Tests for the settings page markup."""

import pytest

from blockforge.rendering.settings_page import NO_VERSION_LABEL, SettingsPageView, metabox_title
from blockforge.schema.settings import SettingsPage
from blockforge.schema.theme_options import GLOBAL_LAYOUT, LANGUAGE_LAYOUT
from blockforge.versioning.store import VersionMeta


@pytest.fixture
def page():
    return SettingsPage.from_layout("", "General Options", GLOBAL_LAYOUT)


def versions(*timestamps, active):
    return [
        VersionMeta(timestamp=ts, date=f"date-{ts}", user="Admin", active=ts == active)
        for ts in sorted(timestamps, reverse=True)
    ]


class TestTabs:
    def test_first_tab_is_default(self, page):
        html = SettingsPageView(page, {}).render()

        assert 'data-tab="colors" class="nav-tab nav-tab-active"' in html
        assert 'data-tab-content="colors">' in html
        assert 'data-tab-content="header" style="display:none;"' in html

    def test_requested_tab(self, page):
        html = SettingsPageView(page, {}, current_tab="buttons").render()

        assert 'data-tab="buttons" class="nav-tab nav-tab-active"' in html
        assert 'value="buttons"' in html
        assert 'data-tab-content="colors" style="display:none;"' in html

    def test_unknown_tab_falls_back(self, page):
        assert SettingsPageView(page, {}, current_tab="nope").current_tab == "colors"

    def test_metabox_groups(self, page):
        html = SettingsPageView(page, {}, current_tab="header").render()

        assert 'data-metabox="custom_colors"' in html
        assert "<span>Custom colors</span>" in html
        assert metabox_title("default") is None

    def test_stored_values_and_defaults(self, page):
        html = SettingsPageView(page, {"primary_color": "#123456"}).render()

        assert 'value="#123456"' in html
        assert 'value="#1d2327"' in html

    def test_language_page(self):
        page = SettingsPage.from_layout("de_DE", "de_DE", LANGUAGE_LAYOUT, kind="language")
        html = SettingsPageView(page, {"logo": 42}).render()

        assert 'name="webtero_instance" value="de_DE"' in html
        assert "#42 (unresolved)" in html


class TestVersionHistory:
    def test_no_versions(self, page):
        html = SettingsPageView(page, {}).render()

        assert NO_VERSION_LABEL in html
        assert "Version History" not in html

    def test_single_version_cannot_be_cleared(self, page):
        html = SettingsPageView(page, {}, versions(100, active=100)).render()

        assert "Version History" in html
        assert "Clear Version History" not in html
        assert "1970-01-01 00:01:40" in html

    def test_active_row_is_marked(self, page):
        html = SettingsPageView(page, {}, versions(100, 200, active=100)).render()

        assert "Clear Version History" in html
        assert '<tr data-version="100" class="is-active">' in html
        assert '<tr data-version="200">' in html
        assert 'data-action="delete" data-version="100" disabled' in html
        assert 'data-action="delete" data-version="200">' in html
        assert html.index('data-version="200"') < html.index('data-version="100"')
