"""
Server-side page rendering helpers.

Every HTML view builds a BrowsingContext with an explicit render context,
mounts its buttons, renders, then closes the context so no signal
receivers outlive the request.
"""
from contextlib import contextmanager

from flask import current_app

from sitecms.styles.context import BrowsingContext, LocalStyleSource
from sitecms.styles.lookup import get_singleton_settings
from sitecms.styles.precedence import RenderContext


@contextmanager
def browsing_context(render_context=RenderContext.PUBLIC):
    context = BrowsingContext(LocalStyleSource(), render_context).load()
    try:
        yield context
    finally:
        context.close()


def site_name():
    settings = get_singleton_settings()
    if settings is not None and settings.site_name:
        return settings.site_name
    return current_app.config.get('SITE_NAME', 'Site CMS')


def build_sections(page, context):
    """
    Turn page blocks into template sections.

    Hero blocks with a visible call to action get a mounted LiveButton; its
    ``button_preset`` (if any) is resolved as a per-instance override.
    """
    sections = []
    for block in (page.blocks or []) if page else []:
        section = dict(block)
        if block.get('type') == 'hero' and block.get('show_cta', True) and block.get('cta_text'):
            section['button'] = context.mount_button(
                variant=block.get('cta_variant') or 'default',
                size=block.get('cta_size') or 'lg',
                preset_slug=block.get('button_preset'),
            )
        sections.append(section)
    return sections
