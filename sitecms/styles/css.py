"""
Stylesheet generation for themes and button presets.

Both generators are pure: they accept an ORM record or a plain mapping with
the same keys and return CSS text. The output is the public-site boundary
format served by the style endpoints and injected into browsing contexts.
"""
import re
from collections.abc import Mapping

from sitecms.styles.colors import hex_to_hsl, contrast_foreground
from sitecms.styles.defaults import (
    DEFAULT_THEME_COLORS, DEFAULT_THEME_STYLES, DEFAULT_TYPOGRAPHY,
    DEFAULT_PRESET_COLORS, DEFAULT_PRESET_SIZES, BUTTON_SIZES,
)

ADMIN_EXCLUSION = ':not([data-admin-button="true"])'
SCOPED_VARIANTS = ('default', 'secondary')

_COMMENT_PATTERN = re.compile(r'/\*.*?\*/', re.DOTALL)
_ROOT_BLOCK_PATTERN = re.compile(r':root\s*\{([^}]*)\}')
_DECLARATION_PATTERN = re.compile(r'--([A-Za-z0-9_-]+)\s*:\s*([^;]+);')


def record_value(record, name, default=None):
    """Read ``name`` from an ORM record or a mapping; None counts as missing."""
    if isinstance(record, Mapping):
        value = record.get(name, default)
    else:
        value = getattr(record, name, default)
    return default if value is None else value


def border_radius_for(shape, rounded='var(--radius)'):
    """Map a button shape to a concrete border-radius value."""
    if shape == 'square':
        return '0'
    if shape == 'pill':
        return '9999px'
    return rounded


def _theme_variables(colors, styles):
    def color(key):
        return colors.get(key) or DEFAULT_THEME_COLORS[key]

    primary = color('primary')
    secondary = color('secondary')

    variables = [
        ('primary', hex_to_hsl(primary)),
        ('primary-foreground', hex_to_hsl(colors.get('primary_foreground') or contrast_foreground(primary))),
        ('secondary', hex_to_hsl(secondary)),
        ('secondary-foreground', hex_to_hsl(colors.get('secondary_foreground') or contrast_foreground(secondary))),
        ('accent', hex_to_hsl(colors.get('accent') or primary)),
    ]
    for key in ('background', 'foreground', 'muted', 'muted_foreground', 'border',
                'input', 'ring', 'card', 'card_foreground', 'destructive',
                'destructive_foreground'):
        variables.append((key.replace('_', '-'), hex_to_hsl(color(key))))

    variables.append(('radius', styles.get('border_radius') or DEFAULT_THEME_STYLES['border_radius']))
    variables.append(('button-style', styles.get('button_style') or 'rounded'))

    for key in ('success', 'warning'):
        if colors.get(key):
            variables.append((key, hex_to_hsl(colors[key])))
    return variables


def generate_theme_css(theme) -> str:
    """
    Build the site stylesheet for a theme.

    Emits a ``:root`` block with one custom property per palette entry plus
    ``--radius`` and ``--button-style``, the ``.btn-*`` shape utilities and
    font-family rules. The theme's custom CSS is appended last so anything
    it redeclares wins.
    """
    colors = record_value(theme, 'colors', {})
    styles = record_value(theme, 'styles', {})
    typography = record_value(theme, 'typography', {})

    font_family = typography.get('font_family') or DEFAULT_TYPOGRAPHY['font_family']
    heading_font = typography.get('heading_font') or font_family

    lines = [':root {']
    lines.extend(f'  --{name}: {value};' for name, value in _theme_variables(colors, styles))
    lines.append('}')
    lines.extend([
        '',
        '/* Button shape utilities */',
        f'.btn-rounded {{\n  border-radius: {border_radius_for("rounded")};\n}}',
        f'.btn-square {{\n  border-radius: {border_radius_for("square")};\n}}',
        f'.btn-pill {{\n  border-radius: {border_radius_for("pill")};\n}}',
        '',
        f'body {{\n  font-family: {font_family};\n}}',
        '',
        f'h1, h2, h3, h4, h5, h6 {{\n  font-family: {heading_font};\n}}',
    ])

    custom_css = record_value(theme, 'custom_css', '')
    if custom_css:
        lines.extend(['', custom_css])

    return '\n'.join(lines).strip()


def _variant_selector(variant, suffix=''):
    marker = f'[data-button-variant="{variant}"]'
    return ',\n'.join([
        f'button{ADMIN_EXCLUSION}{marker}{suffix}',
        f'a{ADMIN_EXCLUSION} button{ADMIN_EXCLUSION}{marker}{suffix}',
    ])


def generate_button_preset_css(preset) -> str:
    """
    Build the stylesheet for a button preset.

    Every button selector excludes ``[data-admin-button="true"]`` so the
    sheet can be injected globally without restyling admin controls.
    """
    colors = {**DEFAULT_PRESET_COLORS, **{k: v for k, v in record_value(preset, 'colors', {}).items() if v}}
    if not record_value(preset, 'colors', {}).get('text_hover'):
        colors['text_hover'] = colors['text']
    sizes = record_value(preset, 'sizes', {})
    radius = border_radius_for(record_value(preset, 'border_radius', 'rounded'))

    lines = [
        ':root {',
        f'  --button-primary: {colors["primary"]};',
        f'  --button-primary-hover: {colors["primary_hover"]};',
        f'  --button-secondary: {colors["secondary"]};',
        f'  --button-secondary-hover: {colors["secondary_hover"]};',
        f'  --button-text: {colors["text"]};',
        f'  --button-text-hover: {colors["text_hover"]};',
        f'  --button-border-radius: {radius};',
    ]
    for size in BUTTON_SIZES:
        dims = {**DEFAULT_PRESET_SIZES[size], **(sizes.get(size) or {})}
        lines.append(f'  --button-{size}-height: {dims["height"]};')
        lines.append(f'  --button-{size}-padding-x: {dims["padding_x"]};')
        lines.append(f'  --button-{size}-font-size: {dims["font_size"]};')
    lines.append('}')

    hover_colors = {'default': 'primary-hover', 'secondary': 'secondary-hover'}
    for variant in SCOPED_VARIANTS:
        lines.extend([
            '',
            f'{_variant_selector(variant, ":hover")} {{',
            f'  background-color: var(--button-{hover_colors[variant]}) !important;',
            '}',
        ])

    return '\n'.join(lines).strip()


def _css_attr_value(value: str) -> str:
    return value.replace('\\', '\\\\').replace('"', '\\"')


def scope_preset_css(css: str, slug: str) -> str:
    """
    Rewrite a preset stylesheet so it only affects buttons tagged with ``slug``.

    The ``default``/``secondary`` variant selectors and the generic
    ``[data-button-preset]`` marker become slug-qualified. The ``:root``
    variable block is retargeted to the slug selector so the preset's custom
    properties cascade only into its own buttons. Other selectors are left
    as generated.
    """
    qualifier = f'[data-button-preset-slug="{_css_attr_value(slug)}"]'
    scoped = css.replace('[data-button-preset]', qualifier)
    for variant in SCOPED_VARIANTS:
        marker = f'[data-button-variant="{variant}"]'
        scoped = scoped.replace(marker, f'{qualifier}{marker}')
    return _ROOT_BLOCK_PATTERN.sub(lambda m: f'{qualifier} {{{m.group(1)}}}', scoped)


def parse_root_variables(css: str) -> dict:
    """Custom properties declared in ``:root`` blocks of ``css``; later declarations win."""
    variables = {}
    if not css:
        return variables
    for block in _ROOT_BLOCK_PATTERN.findall(_COMMENT_PATTERN.sub('', css)):
        for name, value in _DECLARATION_PATTERN.findall(block):
            variables[name] = value.strip()
    return variables
