"""
Tests for active-style lookup and the cached CSS payloads.
"""

import pytest
from sqlalchemy.exc import OperationalError

from sitecms.models import SiteSettings
from sitecms.styles import lookup, service


class TestSettingsAccess:

    def test_read_never_creates(self, db):
        assert lookup.get_singleton_settings() is None
        assert SiteSettings.query.count() == 0

    def test_upsert_creates_once(self, db):
        lookup.upsert_singleton_settings(active_theme='a')
        lookup.upsert_singleton_settings(active_button_preset='b')
        db.session.commit()
        assert SiteSettings.query.count() == 1
        settings = lookup.get_singleton_settings()
        assert (settings.active_theme, settings.active_button_preset) == ('a', 'b')


class TestActiveTheme:

    def test_nothing_active(self, db):
        assert lookup.active_theme_css() is None

    def test_classic_kennel_scenario(self, make_theme):
        from sitecms.models import Theme
        make_theme('Older', is_default=True)
        theme = make_theme('Classic Kennel')
        service.apply_theme(theme)

        css = lookup.active_theme_css()
        assert '--primary: 258 90% 66%' in css
        assert '--background: 0 0% 98%' in css
        assert [t.slug for t in Theme.query.filter_by(is_default=True)] == ['classic-kennel']

    def test_deactivated_record_means_none(self, db, make_theme):
        theme = make_theme(is_default=True)
        # Bypass the service to simulate a record edited out of band
        theme.is_active = False
        db.session.commit()
        lookup.invalidate_style_cache()
        assert lookup.resolve_active_theme(lookup.get_singleton_settings()) is None
        assert lookup.active_theme_css() is None

    def test_dangling_slug_means_none(self, db):
        lookup.upsert_singleton_settings(active_theme='gone')
        db.session.commit()
        assert lookup.active_theme_css() is None

    def test_database_error_degrades_to_none(self, make_theme, monkeypatch):
        make_theme(is_default=True)
        lookup.invalidate_style_cache()

        def broken(slug):
            raise OperationalError('SELECT', {}, Exception('connection lost'))
        monkeypatch.setattr(lookup, 'find_theme_by_slug', broken)
        assert lookup.active_theme_css() is None

    def test_database_error_is_not_cached(self, make_theme, monkeypatch):
        make_theme(is_default=True)
        lookup.invalidate_style_cache()

        def broken(slug):
            raise OperationalError('SELECT', {}, Exception('connection lost'))
        monkeypatch.setattr(lookup, 'find_theme_by_slug', broken)
        assert lookup.active_theme_css() is None

        monkeypatch.undo()
        css = lookup.active_theme_css()
        assert css is not None
        assert '--primary: 258 90% 66%' in css

    def test_settings_error_is_not_cached(self, make_preset, monkeypatch):
        make_preset(is_default=True)
        lookup.invalidate_style_cache()

        def broken():
            raise OperationalError('SELECT', {}, Exception('connection lost'))
        monkeypatch.setattr(lookup, 'get_singleton_settings', broken)
        assert lookup.active_button_preset_css() is None

        monkeypatch.undo()
        assert '--button-primary: #0f766e;' in lookup.active_button_preset_css()

    def test_payload_is_cached_until_mutation(self, make_theme, monkeypatch):
        first = make_theme('First', is_default=True)
        css = lookup.active_theme_css()
        assert css

        def fail(theme):
            raise AssertionError('should have been served from cache')
        monkeypatch.setattr(lookup, 'generate_theme_css', fail)
        assert lookup.active_theme_css() == css

        monkeypatch.undo()
        second = make_theme('Second', colors={'primary': '#10b981'})
        service.apply_theme(second)
        assert lookup.active_theme_css() != css
        assert first.is_default is False


class TestActiveButtonPreset:

    def test_nothing_active(self, db):
        assert lookup.active_button_preset_css() is None

    def test_pill_style_scenario(self, make_preset):
        service.apply_button_preset(make_preset())
        assert '--button-border-radius: 9999px;' in lookup.active_button_preset_css()

    def test_cleared(self, make_preset):
        make_preset(is_default=True)
        service.clear_button_preset()
        assert lookup.active_button_preset_css() is None


class TestPresetBySlug:

    def test_unknown_slug(self, db):
        assert lookup.button_preset_css_by_slug('unknown-slug') == (None, None)

    def test_inactive_slug(self, make_preset):
        make_preset(is_active=False)
        assert lookup.button_preset_css_by_slug('pill-style') == (None, None)

    def test_active_slug(self, make_preset):
        make_preset()
        css, summary = lookup.button_preset_css_by_slug('pill-style')
        assert '--button-primary: #0f766e;' in css
        assert summary['slug'] == 'pill-style'
        assert summary['border_radius'] == 'pill'

    def test_database_error(self, db, monkeypatch):
        def broken(slug):
            raise OperationalError('SELECT', {}, Exception('connection lost'))
        monkeypatch.setattr(lookup, 'find_active_button_preset_by_slug', broken)
        assert lookup.button_preset_css_by_slug('pill-style') == (None, None)
