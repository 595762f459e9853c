"""
Button style precedence.

A rendered button takes each visual property from the highest tier that
defines it:

    (a) a per-instance preset assigned to that button
    (b) the globally active button preset
    (c) the active theme's button shape
    (d) framework defaults (no inline style)

Admin surfaces only ever see tiers (c) and (d). The rendering context is an
explicit argument; it is never inferred from the request path.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Mapping

from markupsafe import Markup, escape

from sitecms.styles.css import border_radius_for, record_value
from sitecms.styles.defaults import BUTTON_SIZES, DEFAULT_PRESET_COLORS, DEFAULT_PRESET_SIZES, DEFAULT_THEME_STYLES

COLOR_VARIANTS = ('default', 'secondary')
VARIANTS = ('default', 'destructive', 'outline', 'secondary', 'ghost', 'link')
SIZES = BUTTON_SIZES + ('icon',)

TIER_INSTANCE = 'instance'
TIER_GLOBAL = 'global'
TIER_THEME = 'theme'
TIER_DEFAULT = 'default'

DEFAULT_RADIUS = DEFAULT_THEME_STYLES['border_radius']


class RenderContext(Enum):
    ADMIN = 'admin'
    PUBLIC = 'public'


@dataclass(frozen=True)
class ThemeShape:
    """Tier (c): the active theme's button shape and base radius."""
    button_style: str = 'rounded'
    radius: str = DEFAULT_RADIUS

    @classmethod
    def from_theme(cls, theme):
        if theme is None:
            return None
        styles = record_value(theme, 'styles', {})
        return cls(
            button_style=styles.get('button_style') or 'rounded',
            radius=styles.get('border_radius') or DEFAULT_RADIUS,
        )

    @classmethod
    def from_variables(cls, variables):
        if 'button-style' not in variables:
            return None
        return cls(button_style=variables['button-style'], radius=variables.get('radius', DEFAULT_RADIUS))

    @property
    def border_radius(self):
        return border_radius_for(self.button_style, rounded=self.radius)


@dataclass(frozen=True)
class PresetValues:
    """Resolved values of one button preset, independent of where they came from."""
    colors: Mapping[str, str]
    sizes: Mapping[str, Mapping[str, str]]
    border_radius: str
    slug: Optional[str] = None

    @classmethod
    def from_preset(cls, preset, slug=None):
        """Build from a ButtonPreset record or its JSON summary."""
        if preset is None:
            return None
        stored = record_value(preset, 'colors', {})
        colors = {**DEFAULT_PRESET_COLORS, **{k: v for k, v in stored.items() if v}}
        if not stored.get('text_hover'):
            colors['text_hover'] = colors['text']
        sizes = record_value(preset, 'sizes', {})
        return cls(
            colors=colors,
            sizes={size: {**DEFAULT_PRESET_SIZES[size], **(sizes.get(size) or {})} for size in BUTTON_SIZES},
            border_radius=border_radius_for(record_value(preset, 'border_radius', 'rounded')),
            slug=slug or record_value(preset, 'slug'),
        )

    @classmethod
    def from_variables(cls, variables):
        """Build from the ``--button-*`` custom properties of a browsing context."""
        if 'button-primary' not in variables:
            return None
        colors = {
            'primary': variables['button-primary'],
            'primary_hover': variables.get('button-primary-hover'),
            'secondary': variables.get('button-secondary'),
            'secondary_hover': variables.get('button-secondary-hover'),
            'text': variables.get('button-text'),
            'text_hover': variables.get('button-text-hover') or variables.get('button-text'),
        }
        sizes = {
            size: {
                'height': variables.get(f'button-{size}-height'),
                'padding_x': variables.get(f'button-{size}-padding-x'),
                'font_size': variables.get(f'button-{size}-font-size'),
            }
            for size in BUTTON_SIZES
        }
        return cls(colors=colors, sizes=sizes, border_radius=variables.get('button-border-radius', ''))


@dataclass(frozen=True)
class ButtonStyle:
    """Everything a template or live component needs to draw one button."""
    tier: str
    variant: str
    size: str
    style: Mapping[str, str] = field(default_factory=dict)
    hover_background: Optional[str] = None
    hover_color: Optional[str] = None
    classes: tuple = ()
    attributes: Mapping[str, str] = field(default_factory=dict)

    @property
    def is_admin(self):
        return self.attributes.get('data-admin-button') == 'true'

    def style_attr(self) -> str:
        return '; '.join(f'{name}: {value}' for name, value in self.style.items())

    def html_attrs(self) -> Markup:
        parts = [f'class="{escape(" ".join(self.classes))}"']
        parts.extend(f'{name}="{escape(value)}"' for name, value in self.attributes.items())
        if self.style:
            parts.append(f'style="{escape(self.style_attr())}"')
        return Markup(' '.join(parts))


def _preset_properties(preset, variant, size):
    properties = {}
    if preset.border_radius:
        properties['border-radius'] = preset.border_radius
    dimensions = preset.sizes.get(size) if size != 'icon' else None
    if dimensions:
        if dimensions.get('height'):
            properties['height'] = dimensions['height']
        if dimensions.get('padding_x'):
            properties['padding-left'] = dimensions['padding_x']
            properties['padding-right'] = dimensions['padding_x']
        if dimensions.get('font_size'):
            properties['font-size'] = dimensions['font_size']
    if variant in COLOR_VARIANTS:
        background = preset.colors.get('primary' if variant == 'default' else 'secondary')
        if background:
            properties['background-color'] = background
        if preset.colors.get('text'):
            properties['color'] = preset.colors['text']
    return properties


def resolve_button_style(variant='default', size='default', context=RenderContext.PUBLIC, *,
                         theme_shape=None, global_preset=None, instance_preset=None) -> ButtonStyle:
    """
    Resolve the effective style of one button.

    Pure: the same inputs always give the same ButtonStyle. A button with an
    instance preset is tagged with ``data-button-preset-slug`` so the scoped
    preset stylesheet only matches it.
    """
    if variant not in VARIANTS:
        variant = 'default'
    if size not in SIZES:
        size = 'default'

    classes = ['btn', f'btn-variant-{variant}', f'btn-size-{size}']
    attributes = {}
    if variant in COLOR_VARIANTS:
        attributes['data-button-variant'] = variant

    if context is RenderContext.ADMIN:
        attributes['data-admin-button'] = 'true'
        instance_preset = None
        global_preset = None

    tier = TIER_DEFAULT
    style = {}
    if theme_shape is not None:
        tier = TIER_THEME
        classes.append(f'btn-{theme_shape.button_style}')
        style['border-radius'] = theme_shape.border_radius

    preset = instance_preset or global_preset
    hover_background = hover_color = None
    if preset is not None:
        tier = TIER_INSTANCE if instance_preset is not None else TIER_GLOBAL
        style.update(_preset_properties(preset, variant, size))
        if variant in COLOR_VARIANTS:
            hover_background = preset.colors.get('primary_hover' if variant == 'default' else 'secondary_hover')
            hover_color = preset.colors.get('text_hover')
        if instance_preset is not None and instance_preset.slug:
            attributes['data-button-preset'] = instance_preset.slug
            attributes['data-button-preset-slug'] = instance_preset.slug

    return ButtonStyle(
        tier=tier,
        variant=variant,
        size=size,
        style=style,
        hover_background=hover_background,
        hover_color=hover_color,
        classes=tuple(classes),
        attributes=attributes,
    )
