"""
Browsing contexts and live style propagation.

A BrowsingContext stands for one rendered document: it owns a StyleRegistry,
one StyleChannel per global stylesheet and the buttons mounted in it. When
an admin saves the active theme or preset, the style service sends
``active-style-saved`` and every open context calls ``request_refresh()``.
Each channel refetches its own stylesheet, replaces its slot and announces
``style-applied``; every mounted button then recomputes its style from the
registry right away.

Style sources:
    LocalStyleSource   in-process, reads through sitecms.styles.lookup
    RemoteStyleSource  HTTP, calls the public style endpoints with requests
"""
import logging
from typing import Optional, Tuple
from urllib.parse import quote

import requests
from flask import current_app, has_app_context

from sitecms.styles import lookup
from sitecms.styles.css import scope_preset_css
from sitecms.styles.errors import FetchFailure
from sitecms.styles.injection import StyleRegistry, THEME_SLOT, BUTTON_PRESET_SLOT, instance_slot
from sitecms.styles.precedence import (
    RenderContext, ThemeShape, PresetValues, resolve_button_style,
)
from sitecms.styles.signals import refresh_requested, style_applied, active_style_saved

logger = logging.getLogger(__name__)

THEME_CSS_PATH = '/api/themes/active-css'
BUTTON_PRESET_CSS_PATH = '/api/button-presets/active-css'
BUTTON_PRESET_BY_SLUG_PATH = '/api/button-presets/by-slug/{slug}'
DEFAULT_FETCH_TIMEOUT = 5.0


class LocalStyleSource:
    """Reads active styles straight from the database (server-side rendering)."""

    def fetch_theme_css(self) -> Optional[str]:
        return lookup.active_theme_css()

    def fetch_button_preset_css(self) -> Optional[str]:
        return lookup.active_button_preset_css()

    def fetch_button_preset(self, slug) -> Tuple[Optional[str], Optional[dict]]:
        return lookup.button_preset_css_by_slug(slug)


class RemoteStyleSource:
    """
    Fetches style blobs from a running site's public endpoints.

    Args:
        base_url: Site root, e.g. ``https://example.com``
        session: Optional ``requests.Session`` to reuse connections
        timeout: Per-request timeout in seconds; defaults to the app's
            ``STYLE_FETCH_TIMEOUT``

    Any transport error, timeout or unexpected status raises FetchFailure.
    """

    def __init__(self, base_url, session=None, timeout=None):
        if timeout is None:
            timeout = current_app.config['STYLE_FETCH_TIMEOUT'] if has_app_context() else DEFAULT_FETCH_TIMEOUT
        self.base_url = base_url.rstrip('/')
        self.session = session or requests.Session()
        self.timeout = timeout

    def _get(self, path, allow_missing=False):
        url = f"{self.base_url}{path}"
        try:
            response = self.session.get(url, headers={'Accept': 'application/json'}, timeout=self.timeout)
        except requests.exceptions.Timeout:
            raise FetchFailure(f"Timed out fetching {url}")
        except requests.exceptions.RequestException as e:
            raise FetchFailure(f"Request to {url} failed: {e}")

        if response.status_code == 404 and allow_missing:
            return None
        if response.status_code != 200:
            raise FetchFailure(f"{url} returned {response.status_code}")
        try:
            return response.json()
        except ValueError:
            raise FetchFailure(f"{url} returned invalid JSON")

    def fetch_theme_css(self) -> Optional[str]:
        return (self._get(THEME_CSS_PATH) or {}).get('css')

    def fetch_button_preset_css(self) -> Optional[str]:
        return (self._get(BUTTON_PRESET_CSS_PATH) or {}).get('css')

    def fetch_button_preset(self, slug) -> Tuple[Optional[str], Optional[dict]]:
        data = self._get(BUTTON_PRESET_BY_SLUG_PATH.format(slug=quote(slug, safe='')), allow_missing=True)
        if not data or not data.get('css'):
            return None, None
        return data['css'], data.get('preset')


class StyleChannel:
    """Keeps one registry slot in sync with one style source."""

    def __init__(self, context, slot, fetch):
        self.context = context
        self.slot = slot
        self._fetch = fetch
        refresh_requested.connect(self._on_refresh, sender=context)

    def _on_refresh(self, sender):
        self.refresh()

    def refresh(self):
        """
        Refetch and replace the slot.

        Returns False when the fetch failed; the previous sheet then stays
        in place.
        """
        try:
            css = self._fetch()
        except FetchFailure as e:
            logger.warning(f"Keeping previous '{self.slot}' stylesheet: {e}")
            return False
        self.context.registry.inject(self.slot, css)
        style_applied.send(self.context)
        return True

    def disconnect(self):
        refresh_requested.disconnect(self._on_refresh, sender=self.context)


class LiveButton:
    """A mounted button whose style follows the context's stylesheets."""

    def __init__(self, context, variant='default', size='default', instance_preset=None):
        self.context = context
        self.variant = variant
        self.size = size
        self.instance_preset = instance_preset
        self.style = None
        self.recompute()
        style_applied.connect(self._on_style_applied, sender=context)

    @property
    def preset_slug(self):
        return self.instance_preset.slug if self.instance_preset else None

    def _on_style_applied(self, sender):
        self.recompute()

    def recompute(self):
        variables = self.context.registry.root_variables()
        self.style = resolve_button_style(
            self.variant,
            self.size,
            self.context.render_context,
            theme_shape=ThemeShape.from_variables(variables),
            global_preset=PresetValues.from_variables(variables),
            instance_preset=self.instance_preset,
        )
        return self.style

    def html_attrs(self):
        return self.style.html_attrs()

    def disconnect(self):
        style_applied.disconnect(self._on_style_applied, sender=self.context)

    def __repr__(self):
        return f'<LiveButton {self.variant}/{self.size} tier={self.style.tier}>'


class BrowsingContext:
    """
    One rendered document.

    ``render_context`` is fixed at construction: admin documents never load
    per-instance presets and their buttons ignore the global preset.
    """

    def __init__(self, source, render_context=RenderContext.PUBLIC):
        self.source = source
        self.render_context = render_context
        self.registry = StyleRegistry()
        self.channels = [
            StyleChannel(self, THEME_SLOT, source.fetch_theme_css),
            StyleChannel(self, BUTTON_PRESET_SLOT, source.fetch_button_preset_css),
        ]
        self.buttons = []
        self._instance_presets = {}
        active_style_saved.connect(self._on_active_style_saved)

    def load(self):
        for channel in self.channels:
            channel.refresh()
        return self

    def request_refresh(self):
        """Broadcast ``refresh-request`` to this context's channels only."""
        refresh_requested.send(self)

    def _on_active_style_saved(self, sender):
        logger.debug(f"Active {sender} saved, refreshing {self!r}")
        self.request_refresh()

    def _instance_preset(self, slug):
        if slug in self._instance_presets:
            return self._instance_presets[slug]
        try:
            css, summary = self.source.fetch_button_preset(slug)
        except FetchFailure as e:
            logger.warning(f"Button preset '{slug}' unavailable, using global style: {e}")
            return None
        if not css or not summary:
            logger.info(f"Button preset '{slug}' not found or inactive, using global style")
            return None
        self.registry.inject(instance_slot(slug), scope_preset_css(css, slug))
        preset = PresetValues.from_preset(summary, slug=slug)
        self._instance_presets[slug] = preset
        return preset

    def mount_button(self, variant='default', size='default', preset_slug=None) -> LiveButton:
        instance = None
        if preset_slug and self.render_context is RenderContext.PUBLIC:
            instance = self._instance_preset(preset_slug)
        button = LiveButton(self, variant, size, instance)
        self.buttons.append(button)
        return button

    def unmount_button(self, button):
        if button not in self.buttons:
            return
        self.buttons.remove(button)
        button.disconnect()
        slug = button.preset_slug
        if slug and self.registry.release_instance(slug, self.referenced_slugs()):
            self._instance_presets.pop(slug, None)

    def referenced_slugs(self):
        return {button.preset_slug for button in self.buttons if button.preset_slug}

    def close(self):
        for button in list(self.buttons):
            button.disconnect()
        self.buttons = []
        for channel in self.channels:
            channel.disconnect()
        active_style_saved.disconnect(self._on_active_style_saved)

    def __repr__(self):
        return f'<BrowsingContext {self.render_context.value} {self.registry.keys()}>'
