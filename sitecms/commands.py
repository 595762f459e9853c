import click
from flask import current_app
from flask.cli import with_appcontext

from sitecms import db
from sitecms.models import User, Theme, ButtonPreset, Page
from sitecms.styles import service
from sitecms.styles.context import BrowsingContext, RemoteStyleSource
from sitecms.styles.errors import InvariantViolation
from sitecms.styles.lookup import get_singleton_settings

DEFAULT_SLUG = 'default'


@click.command('seed-styles')
@click.option('--with-home-page', is_flag=True, help='Also create a published home page with a hero block.')
@with_appcontext
def seed_styles(with_home_page):
    """
    Create the built-in theme and button preset.

    The theme is applied when no theme is active. The preset is applied only
    on a site that had no presets at all, so a cleared global preset stays
    cleared when seeding again.
    """
    try:
        theme = Theme.query.filter_by(slug=DEFAULT_SLUG).first()
        if theme is None:
            theme = service.create_theme({'name': 'Default', 'slug': DEFAULT_SLUG,
                                          'description': 'Built-in theme'})
            click.echo(f"Created theme '{theme.slug}'")

        first_preset = ButtonPreset.query.count() == 0
        preset = ButtonPreset.query.filter_by(slug=DEFAULT_SLUG).first()
        if preset is None:
            preset = service.create_button_preset({'name': 'Default', 'slug': DEFAULT_SLUG,
                                                   'description': 'Built-in button preset'})
            click.echo(f"Created button preset '{preset.slug}'")

        settings = get_singleton_settings()
        if settings is None or not settings.active_theme:
            service.apply_theme(theme)
            click.echo(f"Applied theme '{theme.slug}'")
        if first_preset and (settings is None or not settings.active_button_preset):
            service.apply_button_preset(preset)
            click.echo(f"Applied button preset '{preset.slug}'")

        if with_home_page and Page.query.filter_by(is_home=True).first() is None:
            db.session.add(Page(
                slug='home',
                title='Home',
                is_home=True,
                is_published=True,
                blocks=[{
                    'type': 'hero',
                    'title': 'Welcome',
                    'subtitle': 'Edit this page from the admin area.',
                    'cta_text': 'Get in touch',
                    'cta_link': '/contact',
                    'show_cta': True,
                }],
            ))
            db.session.commit()
            click.echo("Created home page")

        click.echo('Styles seeded successfully!')
    except Exception as e:
        db.session.rollback()
        click.echo(f'Error seeding styles: {str(e)}')


@click.command('create-admin')
@click.argument('email')
@click.argument('username')
@click.password_option()
@with_appcontext
def create_admin(email, username, password):
    """Create an admin user."""
    email = email.strip().lower()
    if User.query.filter((User.email == email) | (User.username == username)).first():
        click.echo('A user with this email or username already exists.')
        return
    try:
        user = User(email=email, username=username, is_admin=True)
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
        click.echo(f"Admin '{username}' created")
    except Exception as e:
        db.session.rollback()
        click.echo(f'Error creating admin: {str(e)}')


@click.command('apply-theme')
@click.argument('slug')
@with_appcontext
def apply_theme(slug):
    """Make the theme with SLUG the active theme."""
    theme = Theme.query.filter_by(slug=slug).first()
    if theme is None:
        click.echo(f"No theme with slug '{slug}'")
        return
    try:
        service.apply_theme(theme)
        click.echo(f"Theme '{slug}' applied")
    except InvariantViolation as e:
        click.echo(f'Cannot apply theme: {e.reason}')


@click.command('apply-button-preset')
@click.argument('slug')
@with_appcontext
def apply_button_preset(slug):
    """Make the button preset with SLUG the globally active preset."""
    preset = ButtonPreset.query.filter_by(slug=slug).first()
    if preset is None:
        click.echo(f"No button preset with slug '{slug}'")
        return
    try:
        service.apply_button_preset(preset)
        click.echo(f"Button preset '{slug}' applied")
    except InvariantViolation as e:
        click.echo(f'Cannot apply button preset: {e.reason}')


@click.command('inspect-styles')
@click.option('--base-url', default=None, help='Site to inspect. Defaults to BASE_URL.')
@click.option('--preset', 'preset_slug', default=None, help='Resolve the button with this per-instance preset.')
@click.option('--variant', default='default', help='Button variant to resolve.')
@click.option('--size', default='default', help='Button size to resolve.')
@with_appcontext
def inspect_styles(base_url, preset_slug, variant, size):
    """Load a running site's stylesheets and show how a public button resolves."""
    source = RemoteStyleSource(base_url or current_app.config['BASE_URL'])
    context = BrowsingContext(source).load()
    try:
        if not context.registry.keys():
            click.echo('No stylesheets loaded')
        for slot in context.registry.keys():
            click.echo(f"{slot}: {len(context.registry.get(slot))} bytes")
        button = context.mount_button(variant, size, preset_slug=preset_slug)
        click.echo(f"Button tier: {button.style.tier}")
        click.echo(f"Button classes: {' '.join(button.style.classes)}")
        click.echo(f"Button style: {button.style.style_attr() or '(none)'}")
    finally:
        context.close()


def init_commands(app):
    app.cli.add_command(seed_styles)
    app.cli.add_command(create_admin)
    app.cli.add_command(apply_theme)
    app.cli.add_command(apply_button_preset)
    app.cli.add_command(inspect_styles)
