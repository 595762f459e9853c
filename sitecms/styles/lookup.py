"""
Active-style lookup.

Resolves which Theme and ButtonPreset the settings row currently points at
and produces the CSS payloads served by the public style endpoints. Nothing
here raises into callers: a missing, deleted or deactivated record and any
database error all mean "no active style" (None).
"""
import logging
from typing import Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError

from sitecms import db, cache
from sitecms.models import Theme, ButtonPreset, SiteSettings
from sitecms.styles.css import generate_theme_css, generate_button_preset_css

logger = logging.getLogger(__name__)

ACTIVE_THEME_CSS_KEY = 'styles:active-theme-css'
ACTIVE_PRESET_CSS_KEY = 'styles:active-button-preset-css'


def find_theme_by_slug(slug) -> Optional[Theme]:
    if not slug:
        return None
    return Theme.query.filter_by(slug=slug).first()


def find_active_button_preset_by_slug(slug) -> Optional[ButtonPreset]:
    if not slug:
        return None
    return ButtonPreset.query.filter_by(slug=slug, is_active=True).first()


def get_singleton_settings() -> Optional[SiteSettings]:
    """Read-only access: never creates the row."""
    return SiteSettings.get(create=False)


def upsert_singleton_settings(**patch) -> SiteSettings:
    """
    Apply ``patch`` to the settings row, creating it when absent.

    Does not commit; the caller owns the transaction so the settings change
    lands together with the is_default flips.
    """
    settings = SiteSettings.get()
    for key, value in patch.items():
        setattr(settings, key, value)
    return settings


def _active_theme(settings) -> Optional[Theme]:
    if settings is None or not settings.active_theme:
        return None
    theme = find_theme_by_slug(settings.active_theme)
    if theme is None or not theme.is_active:
        return None
    return theme


def _active_button_preset(settings) -> Optional[ButtonPreset]:
    if settings is None or not settings.active_button_preset:
        return None
    return find_active_button_preset_by_slug(settings.active_button_preset)


def resolve_active_theme(settings) -> Optional[Theme]:
    try:
        return _active_theme(settings)
    except SQLAlchemyError as e:
        logger.warning(f"Active theme lookup failed: {e}")
        db.session.rollback()
        return None


def resolve_active_button_preset(settings) -> Optional[ButtonPreset]:
    try:
        return _active_button_preset(settings)
    except SQLAlchemyError as e:
        logger.warning(f"Active button preset lookup failed: {e}")
        db.session.rollback()
        return None


def _render_or_none(generator, record, label):
    try:
        return generator(record)
    except ValueError as e:
        # Stored data predating validation; serve nothing rather than broken CSS
        logger.error(f"Could not generate CSS for {label} '{record.slug}': {e}")
        return None


def _cached_css(key, resolve, generator, label):
    """
    Serve ``key`` from the cache or build and cache it.

    A database error degrades to None for this call only and is never cached,
    so the next request retries the lookup.
    """
    cached = cache.get(key)
    if cached is not None:
        return cached or None

    try:
        record = resolve(get_singleton_settings())
    except SQLAlchemyError as e:
        logger.warning(f"Active {label} lookup failed, serving no CSS: {e}")
        db.session.rollback()
        return None

    css = _render_or_none(generator, record, label) if record else None
    cache.set(key, css or '')
    return css


def active_theme_css() -> Optional[str]:
    """CSS for the active theme, or None. Cached until the next style mutation."""
    return _cached_css(ACTIVE_THEME_CSS_KEY, _active_theme, generate_theme_css, 'theme')


def active_button_preset_css() -> Optional[str]:
    """CSS for the globally active button preset, or None."""
    return _cached_css(ACTIVE_PRESET_CSS_KEY, _active_button_preset, generate_button_preset_css, 'button preset')


def button_preset_css_by_slug(slug) -> Tuple[Optional[str], Optional[dict]]:
    """CSS and summary for an active preset looked up by slug, or ``(None, None)``."""
    try:
        preset = find_active_button_preset_by_slug(slug)
    except SQLAlchemyError as e:
        logger.warning(f"Button preset lookup failed for '{slug}': {e}")
        db.session.rollback()
        return None, None
    if preset is None:
        return None, None
    css = _render_or_none(generate_button_preset_css, preset, 'button preset')
    if css is None:
        return None, None
    return css, preset.summary()


def invalidate_style_cache():
    """Drop cached active CSS payloads after a theme or preset mutation."""
    try:
        cache.delete_many(ACTIVE_THEME_CSS_KEY, ACTIVE_PRESET_CSS_KEY)
    except Exception as e:
        logger.warning(f"Style cache invalidation failed: {e}")
