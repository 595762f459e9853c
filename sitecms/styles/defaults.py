"""Built-in palette, typography and size defaults for themes and button presets."""
import copy

BUTTON_SHAPES = ('rounded', 'square', 'pill')
NAVBAR_STYLES = ('default', 'centered', 'minimal', 'sticky')
BUTTON_SIZES = ('sm', 'default', 'lg')

DEFAULT_THEME_COLORS = {
    'primary': '#667eea',
    'secondary': '#764ba2',
    'accent': '#818cf8',
    'background': '#ffffff',
    'foreground': '#1f2937',
    'muted': '#f3f4f6',
    'muted_foreground': '#6b7280',
    'border': '#e5e7eb',
    'input': '#e5e7eb',
    'ring': '#667eea',
    'card': '#ffffff',
    'card_foreground': '#1f2937',
    'destructive': '#ef4444',
    'destructive_foreground': '#ffffff',
    'success': '#10b981',
    'warning': '#f59e0b',
}

# success/warning may be dropped by an editor; everything else is required
OPTIONAL_THEME_COLORS = ('success', 'warning')

DEFAULT_TYPOGRAPHY = {
    'font_family': 'Inter, sans-serif',
    'heading_font': 'Inter, sans-serif',
    'font_size': {
        'base': '16px',
        'sm': '14px',
        'lg': '18px',
        'xl': '20px',
    },
}

DEFAULT_THEME_STYLES = {
    'border_radius': '0.5rem',
    'button_style': 'rounded',
    'navbar_style': 'default',
}

DEFAULT_PRESET_COLORS = {
    'primary': '#667eea',
    'primary_hover': '#5a67d8',
    'secondary': '#764ba2',
    'secondary_hover': '#6b3d8f',
    'text': '#ffffff',
    'text_hover': '#ffffff',
}

DEFAULT_PRESET_SIZES = {
    'sm': {'height': '2.25rem', 'padding_x': '0.75rem', 'font_size': '0.875rem'},
    'default': {'height': '2.5rem', 'padding_x': '1rem', 'font_size': '0.875rem'},
    'lg': {'height': '2.75rem', 'padding_x': '2rem', 'font_size': '1rem'},
}


def merged(defaults, overrides):
    """Deep-merge ``overrides`` onto a copy of ``defaults`` (one level of nesting)."""
    if overrides is not None and not isinstance(overrides, dict):
        raise ValueError("Expected an object")
    result = copy.deepcopy(defaults)
    for key, value in (overrides or {}).items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = {**result[key], **value}
        else:
            result[key] = value
    return result
