from sitecms import db
from slugify import slugify as python_slugify
from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash
from sqlalchemy.orm import validates
from datetime import datetime, timezone

from sitecms.styles.colors import normalize_hex
from sitecms.styles.defaults import (
    BUTTON_SHAPES, NAVBAR_STYLES, BUTTON_SIZES, OPTIONAL_THEME_COLORS,
    DEFAULT_THEME_COLORS, DEFAULT_PRESET_COLORS,
)


def utcnow_naive():
    """Naive UTC timestamp for DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def generate_slug(name):
    """Generate a URL-friendly slug from a string."""
    if not name:
        return ""
    return python_slugify(str(name))


def _validated_colors(colors, required):
    if not isinstance(colors, dict):
        raise ValueError("colors must be an object")
    cleaned = {}
    for key, value in colors.items():
        if value in (None, ''):
            if key in required:
                raise ValueError(f"Colour '{key}' is required")
            continue
        cleaned[key] = normalize_hex(value)
    return cleaned


class User(UserMixin, db.Model):
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(150), nullable=False, unique=True)
    email = db.Column(db.String(150), nullable=False, unique=True)
    password = db.Column(db.String(256), nullable=False)
    is_admin = db.Column(db.Boolean, default=False)
    created_at = db.Column(db.DateTime, default=utcnow_naive)

    def set_password(self, password):
        """Hashes and sets the password."""
        self.password = generate_password_hash(password)

    def check_password(self, password):
        """Verifies the password against the stored hash."""
        return check_password_hash(self.password, password)

    def get_id(self):
        return str(self.id)


class Theme(db.Model):
    """Site-wide colour, typography and shape bundle."""
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    slug = db.Column(db.String(120), nullable=False, unique=True, index=True)
    description = db.Column(db.Text, default='')
    is_active = db.Column(db.Boolean, default=True, nullable=False, index=True)
    is_default = db.Column(db.Boolean, default=False, nullable=False, index=True)
    preview_image = db.Column(db.String(500))

    colors = db.Column(db.JSON, nullable=False)
    typography = db.Column(db.JSON, nullable=False)
    styles = db.Column(db.JSON, nullable=False)
    custom_css = db.Column(db.Text)

    created_by_id = db.Column(db.Integer, db.ForeignKey('user.id', ondelete='SET NULL'), nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow_naive)
    updated_at = db.Column(db.DateTime, default=utcnow_naive, onupdate=utcnow_naive)

    created_by = db.relationship('User')

    @validates('slug')
    def validate_slug(self, key, slug):
        slug = (slug or '').strip().lower()
        if not slug:
            raise ValueError("Theme slug is required")
        return slug

    @validates('colors')
    def validate_colors(self, key, colors):
        required = set(DEFAULT_THEME_COLORS) - set(OPTIONAL_THEME_COLORS)
        return _validated_colors(colors, required)

    @validates('styles')
    def validate_styles(self, key, styles):
        if styles.get('button_style') not in BUTTON_SHAPES:
            raise ValueError(f"button_style must be one of {', '.join(BUTTON_SHAPES)}")
        if styles.get('navbar_style') not in NAVBAR_STYLES:
            raise ValueError(f"navbar_style must be one of {', '.join(NAVBAR_STYLES)}")
        if not styles.get('border_radius'):
            raise ValueError("border_radius is required")
        return styles

    @property
    def button_style(self):
        return (self.styles or {}).get('button_style', 'rounded')

    @property
    def navbar_style(self):
        return (self.styles or {}).get('navbar_style', 'default')

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'slug': self.slug,
            'description': self.description or '',
            'is_active': self.is_active,
            'is_default': self.is_default,
            'preview_image': self.preview_image,
            'colors': self.colors,
            'typography': self.typography,
            'styles': self.styles,
            'custom_css': self.custom_css,
            'created_by': self.created_by.username if self.created_by else None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f'<Theme {self.slug}>'


class ButtonPreset(db.Model):
    """Button colours, sizes and shape, applied independently of the theme."""
    __tablename__ = 'button_preset'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    slug = db.Column(db.String(120), nullable=False, unique=True, index=True)
    description = db.Column(db.Text, default='')
    is_active = db.Column(db.Boolean, default=True, nullable=False, index=True)
    is_default = db.Column(db.Boolean, default=False, nullable=False, index=True)

    colors = db.Column(db.JSON, nullable=False)
    sizes = db.Column(db.JSON, nullable=False)
    border_radius = db.Column(db.String(20), nullable=False, default='rounded')

    created_by_id = db.Column(db.Integer, db.ForeignKey('user.id', ondelete='SET NULL'), nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow_naive)
    updated_at = db.Column(db.DateTime, default=utcnow_naive, onupdate=utcnow_naive)

    created_by = db.relationship('User')

    @validates('slug')
    def validate_slug(self, key, slug):
        slug = (slug or '').strip().lower()
        if not slug:
            raise ValueError("Button preset slug is required")
        return slug

    @validates('colors')
    def validate_colors(self, key, colors):
        required = set(DEFAULT_PRESET_COLORS) - {'text_hover'}
        return _validated_colors(colors, required)

    @validates('sizes')
    def validate_sizes(self, key, sizes):
        for size in BUTTON_SIZES:
            dims = sizes.get(size)
            if not isinstance(dims, dict):
                raise ValueError(f"Size '{size}' is required")
            for dimension in ('height', 'padding_x', 'font_size'):
                if not dims.get(dimension):
                    raise ValueError(f"Size '{size}' is missing '{dimension}'")
        return sizes

    @validates('border_radius')
    def validate_border_radius(self, key, border_radius):
        if border_radius not in BUTTON_SHAPES:
            raise ValueError(f"border_radius must be one of {', '.join(BUTTON_SHAPES)}")
        return border_radius

    def summary(self):
        return {
            'name': self.name,
            'slug': self.slug,
            'colors': self.colors,
            'sizes': self.sizes,
            'border_radius': self.border_radius,
        }

    def to_dict(self):
        return {
            'id': self.id,
            'description': self.description or '',
            'is_active': self.is_active,
            'is_default': self.is_default,
            'created_by': self.created_by.username if self.created_by else None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
            **self.summary(),
        }

    def __repr__(self):
        return f'<ButtonPreset {self.slug}>'


class SiteSettings(db.Model):
    """
    Singleton settings row.

    ``active_theme`` and ``active_button_preset`` hold slugs and are written
    only by the apply path in ``sitecms.styles.service``. The button/navbar
    style columns echo the active theme so templates avoid a join.
    """
    __tablename__ = 'site_settings'

    id = db.Column(db.Integer, primary_key=True)
    site_name = db.Column(db.String(200), nullable=False, default='Site CMS')
    active_theme = db.Column(db.String(120))
    active_button_preset = db.Column(db.String(120))
    primary_color = db.Column(db.String(7), default='#667eea')
    secondary_color = db.Column(db.String(7), default='#764ba2')
    button_style = db.Column(db.String(20), default='rounded')
    navbar_style = db.Column(db.String(20), default='default')
    updated_at = db.Column(db.DateTime, default=utcnow_naive, onupdate=utcnow_naive)

    @classmethod
    def get(cls, create=True):
        """Return the settings row, creating it on first access."""
        settings = cls.query.order_by(cls.id).first()
        if settings is None and create:
            settings = cls()
            db.session.add(settings)
            db.session.flush()
        return settings

    def to_dict(self):
        return {
            'site_name': self.site_name,
            'active_theme': self.active_theme,
            'active_button_preset': self.active_button_preset,
            'primary_color': self.primary_color,
            'secondary_color': self.secondary_color,
            'button_style': self.button_style,
            'navbar_style': self.navbar_style,
        }


class Page(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    slug = db.Column(db.String(200), nullable=False, unique=True, index=True)
    title = db.Column(db.String(200), nullable=False)
    blocks = db.Column(db.JSON, nullable=False, default=list)
    is_published = db.Column(db.Boolean, default=False, nullable=False)
    is_home = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow_naive)
    updated_at = db.Column(db.DateTime, default=utcnow_naive, onupdate=utcnow_naive)

    def hero_button_presets(self):
        """Per-instance preset slugs referenced by this page's CTA buttons."""
        return {
            block.get('button_preset')
            for block in (self.blocks or [])
            if block.get('type') == 'hero' and block.get('button_preset')
        }

    def __repr__(self):
        return f'<Page {self.slug}>'
