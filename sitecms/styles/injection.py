"""
Per-document style registry.

Holds the generated stylesheets of one browsing context, one per slot key.
Injection into a slot is exclusive: the previous sheet under that key is
removed first, so a slot never holds two sheets. Sheets are kept in rank
order (theme, global preset, per-instance presets) whatever order they were
injected in, which keeps the preset winning over the theme for any custom
property both declare.
"""
import logging

from markupsafe import Markup, escape

from sitecms.styles.css import parse_root_variables

logger = logging.getLogger(__name__)

THEME_SLOT = 'theme-styles'
BUTTON_PRESET_SLOT = 'button-preset-styles'
INSTANCE_SLOT_PREFIX = 'button-preset-instance-'


def instance_slot(slug):
    return f'{INSTANCE_SLOT_PREFIX}{slug}'


def _rank(key):
    if key == THEME_SLOT:
        return 0
    if key == BUTTON_PRESET_SLOT:
        return 1
    return 2


class StyleRegistry:

    def __init__(self):
        self._sheets = []

    def inject(self, key, css):
        """Replace the sheet under ``key``; empty ``css`` just removes it."""
        self.remove(key)
        if not css:
            return
        rank = _rank(key)
        position = len(self._sheets)
        for index, (existing, _) in enumerate(self._sheets):
            if _rank(existing) > rank:
                position = index
                break
        self._sheets.insert(position, (key, css))
        logger.debug(f"Injected stylesheet '{key}' at position {position}")

    def remove(self, key):
        before = len(self._sheets)
        self._sheets = [(k, css) for k, css in self._sheets if k != key]
        return len(self._sheets) != before

    def get(self, key):
        for k, css in self._sheets:
            if k == key:
                return css
        return None

    def keys(self):
        return [key for key, _ in self._sheets]

    def __contains__(self, key):
        return any(k == key for k, _ in self._sheets)

    def __len__(self):
        return len(self._sheets)

    def release_instance(self, slug, references):
        """
        Drop the per-instance sheet for ``slug`` once nothing references it.

        ``references`` is the collection of preset slugs still used by
        elements in the document.
        """
        if slug in set(references):
            return False
        return self.remove(instance_slot(slug))

    def root_variables(self):
        """Effective ``:root`` custom properties, later sheets winning."""
        variables = {}
        for _, css in self._sheets:
            variables.update(parse_root_variables(css))
        return variables

    def render(self) -> Markup:
        tags = []
        for key, css in self._sheets:
            body = css.replace('</', '<\\/')
            tags.append(f'<style id="{escape(key)}">\n{body}\n</style>')
        return Markup('\n'.join(tags))

    def __repr__(self):
        return f'<StyleRegistry {self.keys()}>'
