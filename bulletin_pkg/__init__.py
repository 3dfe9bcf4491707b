"""
Bulletin - a static site generator for blogs.

Bulletin takes posts written in Markdown with YAML front matter and uses Jinja2
templates to generate static HTML pages. It produces paginated index pages,
per-tag listings, related-post links, an XML sitemap and an RSS feed.
"""

__version__ = "1.0.0"

from .content import Corpus, Post, load_corpus
from .core import SiteBuilder
from .settings import BulletinSettings, SiteConfig

__all__ = ['Corpus', 'Post', 'load_corpus', 'SiteBuilder', 'BulletinSettings', 'SiteConfig']
