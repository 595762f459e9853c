# sitecms/admin/routes.py
from flask import render_template, redirect, url_for, flash, current_app, abort
from flask_login import login_required

from sitecms import db
from sitecms.admin import admin_bp
from sitecms.decorators import admin_required
from sitecms.models import Theme, ButtonPreset, Page
from sitecms.public.routes import render_page
from sitecms.rendering import browsing_context, site_name
from sitecms.styles import service
from sitecms.styles.errors import InvariantViolation
from sitecms.styles.lookup import get_singleton_settings
from sitecms.styles.precedence import RenderContext


@admin_bp.route('/')
@login_required
@admin_required
def dashboard():
    """
    Theme and preset overview.

    Rendered in the admin context: every control here keeps the theme's
    button shape and ignores whichever button preset is active.
    """
    themes = Theme.query.order_by(Theme.is_default.desc(), Theme.name).all()
    presets = ButtonPreset.query.order_by(ButtonPreset.is_default.desc(), ButtonPreset.name).all()
    pages = Page.query.order_by(Page.title).all()

    with browsing_context(RenderContext.ADMIN) as context:
        apply_button = context.mount_button('default', 'sm')
        secondary_button = context.mount_button('secondary', 'sm')
        return render_template(
            'admin/dashboard.html',
            themes=themes,
            presets=presets,
            pages=pages,
            settings=get_singleton_settings(),
            styles=context.registry.render(),
            apply_button=apply_button,
            secondary_button=secondary_button,
            site_name=site_name(),
        )


@admin_bp.route('/preview/<slug>')
@login_required
@admin_required
def preview(slug):
    """Live preview of a page as visitors see it, published or not."""
    page = Page.query.filter_by(slug=slug).first()
    if page is None:
        abort(404)
    return render_page(page, preview=True)


def _run(action, success_message):
    try:
        action()
        flash(success_message, 'success')
    except InvariantViolation as e:
        flash(e.reason, 'error')
    except Exception as e:
        current_app.logger.error(f"Admin style action failed: {e}")
        flash('Something went wrong. Please try again.', 'error')
    return redirect(url_for('admin.dashboard'))


@admin_bp.route('/themes/<int:theme_id>/apply', methods=['POST'])
@login_required
@admin_required
def apply_theme(theme_id):
    theme = db.get_or_404(Theme, theme_id)
    return _run(lambda: service.apply_theme(theme), f"Theme '{theme.name}' applied.")


@admin_bp.route('/button-presets/<int:preset_id>/apply', methods=['POST'])
@login_required
@admin_required
def apply_button_preset(preset_id):
    preset = db.get_or_404(ButtonPreset, preset_id)
    return _run(lambda: service.apply_button_preset(preset), f"Button preset '{preset.name}' applied.")


@admin_bp.route('/button-presets/clear', methods=['POST'])
@login_required
@admin_required
def clear_button_preset():
    return _run(service.clear_button_preset, "Global button preset cleared.")
