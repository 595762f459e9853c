from flask import Blueprint, render_template, abort

from sitecms.models import Page
from sitecms.rendering import browsing_context, build_sections, site_name
from sitecms.styles.precedence import RenderContext

public_bp = Blueprint('public', __name__)


def render_page(page, preview=False):
    with browsing_context(RenderContext.PUBLIC) as context:
        sections = build_sections(page, context)
        return render_template(
            'public/page.html',
            page=page,
            sections=sections,
            styles=context.registry.render(),
            site_name=site_name(),
            preview=preview,
        )


@public_bp.route('/')
def index():
    page = Page.query.filter_by(is_home=True, is_published=True).first()
    return render_page(page)


@public_bp.route('/<slug>')
def page(slug):
    page = Page.query.filter_by(slug=slug, is_published=True).first()
    if page is None:
        abort(404)
    return render_page(page)
