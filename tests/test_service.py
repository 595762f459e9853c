"""
Tests for theme and button preset mutations and their invariants.
"""

import pytest

from sitecms.models import Theme, ButtonPreset, SiteSettings
from sitecms.styles import service
from sitecms.styles.errors import InvariantViolation, InvalidColor


def _defaults(model):
    return model.query.filter_by(is_default=True).all()


class TestThemes:

    def test_create_generates_slug_and_fills_defaults(self, make_theme):
        theme = make_theme()
        assert theme.slug == 'classic-kennel'
        assert theme.colors['primary'] == '#8b5cf6'
        assert theme.colors['border'] == '#e5e7eb'
        assert theme.is_active is True
        assert theme.is_default is False

    def test_create_uses_configured_radius(self, app, make_theme):
        app.config['DEFAULT_BORDER_RADIUS'] = '1rem'
        theme = make_theme()
        assert theme.styles['border_radius'] == '1rem'
        assert theme.styles['button_style'] == 'rounded'

    def test_explicit_radius_wins(self, app, make_theme):
        app.config['DEFAULT_BORDER_RADIUS'] = '1rem'
        theme = make_theme(styles={'border_radius': '0.25rem'})
        assert theme.styles['border_radius'] == '0.25rem'

    def test_create_normalizes_colours(self, make_theme):
        theme = make_theme(colors={'primary': '8B5CF6'})
        assert theme.colors['primary'] == '#8b5cf6'

    def test_create_rejects_malformed_colour(self, db, make_theme):
        with pytest.raises(InvalidColor):
            make_theme(colors={'primary': 'violet'})
        assert Theme.query.count() == 0

    def test_create_rejects_duplicate_slug(self, make_theme):
        make_theme()
        with pytest.raises(InvariantViolation):
            make_theme()

    def test_create_requires_name(self, db):
        with pytest.raises(ValueError):
            service.create_theme({'name': '  '})

    def test_create_as_default_applies(self, make_theme):
        theme = make_theme(is_default=True)
        assert theme.is_default is True
        assert SiteSettings.get(create=False).active_theme == theme.slug

    def test_apply_sequence_leaves_one_default(self, make_theme):
        a = make_theme('Theme A')
        b = make_theme('Theme B')
        c = make_theme('Theme C')
        for theme in (a, b, c, a, b):
            service.apply_theme(theme)
            defaults = _defaults(Theme)
            assert defaults == [theme]
            assert SiteSettings.get(create=False).active_theme == theme.slug

    def test_apply_echoes_theme_settings(self, make_theme):
        theme = make_theme(styles={'button_style': 'square', 'navbar_style': 'sticky'})
        service.apply_theme(theme)
        settings = SiteSettings.get(create=False)
        assert settings.primary_color == '#8b5cf6'
        assert settings.button_style == 'square'
        assert settings.navbar_style == 'sticky'

    def test_apply_inactive_is_rejected(self, make_theme):
        current = make_theme('Current', is_default=True)
        hidden = make_theme('Hidden', is_active=False)
        with pytest.raises(InvariantViolation):
            service.apply_theme(hidden)
        assert _defaults(Theme) == [current]
        assert SiteSettings.get(create=False).active_theme == current.slug

    def test_delete_default_is_rejected(self, make_theme):
        theme = make_theme(is_default=True)
        with pytest.raises(InvariantViolation) as excinfo:
            service.delete_theme(theme)
        assert 'default' in excinfo.value.reason
        assert Theme.query.count() == 1

    def test_delete_non_default_succeeds(self, make_theme):
        make_theme('Keep', is_default=True)
        other = make_theme('Other')
        service.delete_theme(other)
        assert Theme.query.filter_by(slug='other').first() is None

    def test_update_reports_active_style(self, make_theme):
        active = make_theme('Active', is_default=True)
        idle = make_theme('Idle')
        _, is_active_style = service.update_theme(active, {'description': 'x'})
        assert is_active_style is True
        _, is_active_style = service.update_theme(idle, {'description': 'x'})
        assert is_active_style is False

    def test_update_default_keeps_settings_in_sync(self, make_theme):
        theme = make_theme(is_default=True)
        service.update_theme(theme, {'slug': 'renamed', 'colors': {'primary': '#10b981'}})
        settings = SiteSettings.get(create=False)
        assert settings.active_theme == 'renamed'
        assert settings.primary_color == '#10b981'

    def test_deactivate_default_is_rejected(self, make_theme):
        theme = make_theme(is_default=True)
        with pytest.raises(InvariantViolation):
            service.update_theme(theme, {'is_active': False})
        assert Theme.query.filter_by(id=theme.id).one().is_active is True

    def test_failed_update_leaves_no_partial_state(self, make_theme):
        theme = make_theme()
        with pytest.raises(InvalidColor):
            service.update_theme(theme, {'description': 'changed', 'colors': {'primary': 'nope'}})
        theme = Theme.query.filter_by(id=theme.id).one()
        assert theme.description == ''
        assert theme.colors['primary'] == '#8b5cf6'

    def test_update_can_make_default(self, make_theme):
        first = make_theme('First', is_default=True)
        second = make_theme('Second')
        service.update_theme(second, {'is_default': True})
        assert _defaults(Theme) == [second]
        assert first.is_default is False


class TestButtonPresets:

    def test_sequential_apply(self, make_preset):
        x = make_preset('Preset X')
        y = make_preset('Preset Y')
        service.apply_button_preset(x)
        service.apply_button_preset(y)
        assert SiteSettings.get(create=False).active_button_preset == y.slug
        assert x.is_default is False
        assert _defaults(ButtonPreset) == [y]

    def test_apply_leaves_theme_echo_alone(self, make_theme, make_preset):
        make_theme(is_default=True, styles={'button_style': 'square'})
        service.apply_button_preset(make_preset())
        assert SiteSettings.get(create=False).button_style == 'square'

    def test_apply_inactive_is_rejected(self, make_preset):
        preset = make_preset(is_active=False)
        with pytest.raises(InvariantViolation):
            service.apply_button_preset(preset)
        assert _defaults(ButtonPreset) == []

    def test_invalid_border_radius(self, make_preset):
        with pytest.raises(ValueError):
            make_preset(border_radius='blob')

    def test_delete_default_is_rejected(self, make_preset):
        preset = make_preset(is_default=True)
        with pytest.raises(InvariantViolation):
            service.delete_button_preset(preset)
        assert ButtonPreset.query.count() == 1

    def test_delete_non_default_succeeds(self, make_preset):
        make_preset('Live', is_default=True)
        spare = make_preset('Spare')
        service.delete_button_preset(spare)
        assert ButtonPreset.query.filter_by(slug='spare').first() is None

    def test_clear(self, make_preset):
        make_preset(is_default=True)
        service.clear_button_preset()
        assert _defaults(ButtonPreset) == []
        assert SiteSettings.get(create=False).active_button_preset is None

    def test_update_active_preset(self, make_preset):
        preset = make_preset(is_default=True)
        preset, is_active_style = service.update_button_preset(preset, {
            'slug': 'pill-two',
            'colors': {'primary': '#111111'},
        })
        assert is_active_style is True
        assert preset.colors['primary'] == '#111111'
        assert preset.colors['primary_hover'] == '#115e59'
        assert SiteSettings.get(create=False).active_button_preset == 'pill-two'

    def test_deactivate_active_preset_is_rejected(self, make_preset):
        preset = make_preset(is_default=True)
        with pytest.raises(InvariantViolation):
            service.update_button_preset(preset, {'is_active': False})

    def test_sizes_are_merged(self, make_preset):
        preset = make_preset(sizes={'lg': {'height': '3.5rem'}})
        assert preset.sizes['lg'] == {'height': '3.5rem', 'padding_x': '2rem', 'font_size': '1rem'}
        assert preset.sizes['sm']['height'] == '2.25rem'
