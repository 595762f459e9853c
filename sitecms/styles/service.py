"""
Theme and button preset mutations.

Every public function here runs as one transaction: either all rows change
and the session commits, or nothing is written. Applying a record is the
only path that moves the settings pointers, and it flips the ``is_default``
flags in the same commit, so no reader can observe two defaults or settings
pointing at a non-default record.
"""
import logging
from contextlib import contextmanager

from flask import current_app

from sitecms import db
from sitecms.models import Theme, ButtonPreset, SiteSettings, generate_slug
from sitecms.styles.defaults import (
    DEFAULT_THEME_COLORS, DEFAULT_TYPOGRAPHY, DEFAULT_THEME_STYLES,
    DEFAULT_PRESET_COLORS, DEFAULT_PRESET_SIZES, merged,
)
from sitecms.styles.errors import InvariantViolation
from sitecms.styles.lookup import upsert_singleton_settings, invalidate_style_cache
from sitecms.styles.signals import active_style_saved

logger = logging.getLogger(__name__)

THEME_FIELDS = ('description', 'preview_image', 'custom_css')
PRESET_FIELDS = ('description', 'border_radius')

THEME = 'theme'
BUTTON_PRESET = 'button-preset'


@contextmanager
def _atomic(action):
    try:
        yield
        db.session.commit()
    except (InvariantViolation, ValueError):
        db.session.rollback()
        raise
    except Exception as e:
        db.session.rollback()
        logger.error(f"{action} failed: {e}")
        raise
    invalidate_style_cache()


def _announce(kind):
    """Tell open browsing contexts that the active 'kind' changed."""
    active_style_saved.send(kind)


def _require_name(data):
    name = (data.get('name') or '').strip()
    if not name:
        raise ValueError("Name is required")
    return name


def _ensure_unique_slug(model, slug, exclude_id=None):
    query = model.query.filter(model.slug == slug)
    if exclude_id is not None:
        query = query.filter(model.id != exclude_id)
    if query.first() is not None:
        label = 'theme' if model is Theme else 'button preset'
        raise InvariantViolation(f"A {label} with this slug already exists")


def _make_default(model, record):
    """Clear ``is_default`` on every sibling and set it on ``record``."""
    db.session.flush()
    model.query.filter(model.id != record.id, model.is_default.is_(True)).update(
        {model.is_default: False}, synchronize_session='fetch'
    )
    record.is_default = True


# Themes

def _sync_theme_settings(theme):
    upsert_singleton_settings(
        active_theme=theme.slug,
        primary_color=theme.colors.get('primary'),
        secondary_color=theme.colors.get('secondary'),
        button_style=theme.button_style,
        navbar_style=theme.navbar_style,
    )


def _theme_style_defaults():
    return dict(DEFAULT_THEME_STYLES, border_radius=current_app.config['DEFAULT_BORDER_RADIUS'])


def _apply_theme(theme):
    if not theme.is_active:
        raise InvariantViolation("Cannot apply an inactive theme")
    _make_default(Theme, theme)
    _sync_theme_settings(theme)


def create_theme(data, user=None):
    """Create a theme from an editor payload; missing palette entries use defaults."""
    name = _require_name(data)
    slug = generate_slug(data.get('slug') or name)
    with _atomic(f"Create theme '{slug}'"):
        _ensure_unique_slug(Theme, slug)
        theme = Theme(
            name=name,
            slug=slug,
            description=data.get('description') or '',
            preview_image=data.get('preview_image'),
            colors=merged(DEFAULT_THEME_COLORS, data.get('colors')),
            typography=merged(DEFAULT_TYPOGRAPHY, data.get('typography')),
            styles=merged(_theme_style_defaults(), data.get('styles')),
            custom_css=data.get('custom_css') or None,
            is_active=data.get('is_active', True),
            is_default=False,
            created_by=user,
        )
        db.session.add(theme)
        if data.get('is_default'):
            _apply_theme(theme)
    logger.info(f"Theme '{theme.slug}' created")
    if theme.is_default:
        _announce(THEME)
    return theme


def update_theme(theme, data):
    """
    Update a theme in place.

    Returns ``(theme, is_active_style)``. Saving the active theme announces
    ``active-style-saved`` so open browsing contexts refetch it.
    """
    with _atomic(f"Update theme '{theme.slug}'"):
        if data.get('is_active') is False and theme.is_default:
            raise InvariantViolation("Cannot deactivate the default theme. Apply another theme first.")
        if data.get('is_default') is False and theme.is_default:
            raise InvariantViolation("Cannot unset the default theme. Apply another theme instead.")

        if data.get('slug'):
            slug = generate_slug(data['slug'])
            _ensure_unique_slug(Theme, slug, exclude_id=theme.id)
            theme.slug = slug
        for field in THEME_FIELDS:
            if field in data:
                setattr(theme, field, data[field])
        if 'name' in data:
            theme.name = _require_name(data)
        if 'colors' in data:
            theme.colors = merged(theme.colors, data['colors'])
        if 'typography' in data:
            theme.typography = merged(theme.typography, data['typography'])
        if 'styles' in data:
            theme.styles = merged(theme.styles, data['styles'])
        if 'is_active' in data:
            theme.is_active = bool(data['is_active'])

        if data.get('is_default') and not theme.is_default:
            _apply_theme(theme)
        elif theme.is_default:
            _sync_theme_settings(theme)
    if theme.is_default:
        _announce(THEME)
    return theme, theme.is_default


def apply_theme(theme):
    """Make ``theme`` the site's active theme."""
    with _atomic(f"Apply theme '{theme.slug}'"):
        _apply_theme(theme)
    logger.info(f"Theme '{theme.slug}' applied")
    _announce(THEME)
    return theme


def delete_theme(theme):
    if theme.is_default:
        raise InvariantViolation("Cannot delete the default theme. Set another theme as default first.")
    settings = SiteSettings.get(create=False)
    if settings is not None and settings.active_theme == theme.slug:
        raise InvariantViolation("Cannot delete the active theme. Apply another theme first.")
    slug = theme.slug
    with _atomic(f"Delete theme '{slug}'"):
        db.session.delete(theme)
    logger.info(f"Theme '{slug}' deleted")


# Button presets

def _apply_button_preset(preset):
    if not preset.is_active:
        raise InvariantViolation("Cannot apply an inactive preset")
    _make_default(ButtonPreset, preset)
    upsert_singleton_settings(active_button_preset=preset.slug)


def create_button_preset(data, user=None):
    name = _require_name(data)
    slug = generate_slug(data.get('slug') or name)
    with _atomic(f"Create button preset '{slug}'"):
        _ensure_unique_slug(ButtonPreset, slug)
        preset = ButtonPreset(
            name=name,
            slug=slug,
            description=data.get('description') or '',
            colors=merged(DEFAULT_PRESET_COLORS, data.get('colors')),
            sizes=merged(DEFAULT_PRESET_SIZES, data.get('sizes')),
            border_radius=data.get('border_radius') or 'rounded',
            is_active=data.get('is_active', True),
            is_default=False,
            created_by=user,
        )
        db.session.add(preset)
        if data.get('is_default'):
            _apply_button_preset(preset)
    logger.info(f"Button preset '{preset.slug}' created")
    if preset.is_default:
        _announce(BUTTON_PRESET)
    return preset


def update_button_preset(preset, data):
    """Update a preset; returns ``(preset, is_active_style)``."""
    settings = SiteSettings.get(create=False)
    was_active_style = settings is not None and settings.active_button_preset == preset.slug

    with _atomic(f"Update button preset '{preset.slug}'"):
        if data.get('is_active') is False and (preset.is_default or was_active_style):
            raise InvariantViolation("Cannot deactivate the active preset. Apply or clear another preset first.")
        if data.get('is_default') is False and preset.is_default:
            raise InvariantViolation("Cannot unset the default preset. Apply another preset or clear presets instead.")

        if data.get('slug'):
            slug = generate_slug(data['slug'])
            _ensure_unique_slug(ButtonPreset, slug, exclude_id=preset.id)
            preset.slug = slug
        for field in PRESET_FIELDS:
            if field in data:
                setattr(preset, field, data[field])
        if 'name' in data:
            preset.name = _require_name(data)
        if 'colors' in data:
            preset.colors = merged(preset.colors, data['colors'])
        if 'sizes' in data:
            preset.sizes = merged(preset.sizes, data['sizes'])
        if 'is_active' in data:
            preset.is_active = bool(data['is_active'])

        if data.get('is_default') and not preset.is_default:
            _apply_button_preset(preset)
        elif was_active_style:
            upsert_singleton_settings(active_button_preset=preset.slug)
    is_active_style = was_active_style or preset.is_default
    if is_active_style:
        _announce(BUTTON_PRESET)
    return preset, is_active_style


def apply_button_preset(preset):
    """Make ``preset`` the globally active button preset."""
    with _atomic(f"Apply button preset '{preset.slug}'"):
        _apply_button_preset(preset)
    logger.info(f"Button preset '{preset.slug}' applied")
    _announce(BUTTON_PRESET)
    return preset


def clear_button_preset():
    """Turn global button presets off: no default preset, settings pointer cleared."""
    with _atomic("Clear button preset"):
        ButtonPreset.query.filter(ButtonPreset.is_default.is_(True)).update(
            {ButtonPreset.is_default: False}, synchronize_session='fetch'
        )
        upsert_singleton_settings(active_button_preset=None)
    logger.info("Global button preset cleared")
    _announce(BUTTON_PRESET)


def delete_button_preset(preset):
    if preset.is_default:
        raise InvariantViolation("Cannot delete the default preset. Set another preset as default first.")
    settings = SiteSettings.get(create=False)
    if settings is not None and settings.active_button_preset == preset.slug:
        raise InvariantViolation("Cannot delete the active preset. Apply another preset first.")
    slug = preset.slug
    with _atomic(f"Delete button preset '{slug}'"):
        db.session.delete(preset)
    logger.info(f"Button preset '{slug}' deleted")
