"""Markdown and Jinja2 rendering."""

import os
import logging

import mistune
from jinja2 import Environment, FileSystemLoader, TemplateNotFound, TemplateSyntaxError

from .exceptions import TemplateMissingError

logger = logging.getLogger('Bulletin.render')

PACKAGE_TEMPLATES_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'templates')


def create_markdown_parser():
    """Create a Mistune markdown parser with a custom renderer."""
    class CustomRenderer(mistune.HTMLRenderer):
        def __init__(self):
            super().__init__(escape=False)

        def block_code(self, code, info=None):
            escaped_code = mistune.escape(code)
            if info:
                lang = mistune.escape(info.strip().split(None, 1)[0])
                return f'<pre><code class="language-{lang}">{escaped_code}</code></pre>\n'
            return f'<pre><code>{escaped_code}</code></pre>\n'

    return mistune.create_markdown(
        renderer=CustomRenderer(),
        plugins=['table', 'task_lists', 'strikethrough', 'url']
    )


def resolve_templates_dir(templates_dir):
    """Fall back to the bundled templates when ``templates_dir`` does not exist."""
    if templates_dir and os.path.isdir(templates_dir):
        return templates_dir
    logger.debug(f"Templates directory {templates_dir!r} not found; using bundled templates")
    return PACKAGE_TEMPLATES_DIR


class TemplateRenderer:
    """Renders Markdown bodies and Jinja2 page templates."""

    def __init__(self, templates_dir):
        self.templates_dir = resolve_templates_dir(templates_dir)
        self.env = Environment(loader=FileSystemLoader(self.templates_dir))
        self.markdown_parser = create_markdown_parser()
        self.env.filters['markdown'] = self.markdown_filter

    def markdown_filter(self, text):
        """Convert markdown text to HTML."""
        return self.markdown_parser(text or '')

    def render(self, template_name, **context):
        """Render a Jinja2 template. A missing or broken template is fatal."""
        try:
            template = self.env.get_template(template_name)
        except (TemplateNotFound, TemplateSyntaxError) as e:
            logger.error(f"Template error: {e}")
            raise TemplateMissingError(template_name, str(e)) from e
        return template.render(**context)
