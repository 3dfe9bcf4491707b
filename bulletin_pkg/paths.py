"""
Output path and href helpers.

Every href stored on a post is canonical, i.e. relative to the site root.
Pages that render from a nested directory rewrite those hrefs with
``resolve_href`` using the depth of their own output path.
"""

import re
import hashlib

TAGS_DIR = 'tags'
PAGES_DIR = 'page'
POSTS_DIR = 'posts'


def slugify(text):
    """Lowercase ``text`` and collapse non-alphanumeric runs into single hyphens."""
    return re.sub(r'[^a-z0-9]+', '-', str(text).lower()).strip('-')


def tag_slug(tag):
    """File-system safe name for a tag page."""
    return slugify(tag)


def short_hash(text, length=6):
    return hashlib.md5(str(text).encode('utf-8')).hexdigest()[:length]


def output_depth(output_path):
    """Number of directories between the site root and ``output_path``."""
    parts = [part for part in output_path.replace('\\', '/').split('/') if part and part != '.']
    return max(0, len(parts) - 1)


def base_path(depth):
    """Relative prefix leading from a page at ``depth`` back to the site root."""
    if depth < 0:
        raise ValueError(f"Depth must be non-negative, got {depth}")
    return '../' * depth


def resolve_href(from_depth, canonical_href):
    """Rewrite a site-root-relative href for a page rendered at ``from_depth``."""
    if '://' in canonical_href or canonical_href.startswith(('/', '#', 'mailto:')):
        return canonical_href
    return base_path(from_depth) + canonical_href


def post_href(slug, directory):
    if directory == 'posts':
        return f"{POSTS_DIR}/{slug}.html"
    return f"{slug}.html"


def index_page_path(page_number):
    if page_number <= 1:
        return 'index.html'
    return f"{PAGES_DIR}/{page_number}.html"


def tag_page_path(slug):
    return f"{TAGS_DIR}/{slug}.html"


def join_url(base, path):
    base = base.rstrip('/')
    path = path.lstrip('/')
    if not path:
        return base
    return f"{base}/{path}"
