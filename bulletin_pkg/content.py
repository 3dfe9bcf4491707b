"""
Content discovery and the post model.

Content lives in two places: Markdown files directly under the content
directory ("root" posts, rendered at ``<slug>.html``) and files under its
``posts`` subdirectory (rendered at ``posts/<slug>.html``).
"""

import os
import re
import logging
from datetime import datetime, date, timezone

import yaml

from .paths import post_href
from .storage import LocalStorage

logger = logging.getLogger('Bulletin.content')

CONTENT_EXTENSION = '.md'

FRONT_MATTER_RE = re.compile(r'\A---[ \t]*\r?\n(?:(.*?)\r?\n)?---[ \t]*(?:\r?\n|\Z)', re.S)

DATE_FORMATS = ['%Y-%m-%dT%H:%M:%S', '%Y-%m-%d', '%b %d, %Y', '%B %d, %Y', '%a %b %d %Y']


class ContentFile:
    """A source file found by the scanner."""

    def __init__(self, file_name, full_path, directory):
        self.file_name = file_name
        self.full_path = full_path
        self.directory = directory

    @property
    def slug(self):
        return os.path.splitext(self.file_name)[0]

    def __eq__(self, other):
        if not isinstance(other, ContentFile):
            return NotImplemented
        return (self.file_name, self.full_path, self.directory) == \
            (other.file_name, other.full_path, other.directory)

    def __repr__(self):
        return f"ContentFile({self.file_name!r}, {self.full_path!r}, {self.directory!r})"


class Post:
    """A normalized content file."""

    def __init__(self, slug, directory, title, date, published, author, category,
                 description, tags, body, source_path=None):
        self.slug = slug
        self.directory = directory
        self.href = post_href(slug, directory)
        self.title = title
        self.date = date
        self.published = published
        self.author = author
        self.category = category
        self.description = description
        self.tags = tuple(tags)
        self.body = body
        self.source_path = source_path

    @property
    def sort_date(self):
        """Date used for ordering; unparseable dates order as the oldest."""
        return self.published or datetime.min

    def to_dict(self, href=None):
        """Template-facing view of the post, optionally with a rewritten href."""
        return {
            'title': self.title,
            'date': self.date,
            'author': self.author,
            'category': self.category,
            'description': self.description,
            'tags': list(self.tags),
            'slug': self.slug,
            'directory': self.directory,
            'href': self.href if href is None else href,
        }

    def __repr__(self):
        return f"Post({self.slug!r}, directory={self.directory!r}, date={self.date!r})"


class Corpus:
    """Immutable snapshot of every post loaded for one build."""

    def __init__(self, posts, scan_order=None):
        self.posts = tuple(posts)
        self.scan_order = tuple(scan_order if scan_order is not None else posts)

    def __iter__(self):
        return iter(self.posts)

    def __len__(self):
        return len(self.posts)

    def __getitem__(self, index):
        return self.posts[index]


def _list_markdown(storage, directory, label):
    try:
        names = storage.list_dir(directory)
    except (FileNotFoundError, NotADirectoryError, PermissionError, OSError) as e:
        logger.info(f"{label.capitalize()} directory not found or unreadable: {directory} ({e})")
        return []
    files = []
    for name in names:
        if not name.endswith(CONTENT_EXTENSION):
            continue
        full_path = os.path.join(directory, name)
        if storage.is_file(full_path):
            files.append(ContentFile(name, full_path, label))
    return files


def discover_content_files(content_dir, posts_dir='posts', storage=None):
    """
    Find every Markdown file under ``content_dir`` and ``content_dir/posts_dir``.

    When both locations define the same slug the ``posts`` file replaces the
    root one, keeping the root entry's position.
    """
    storage = storage or LocalStorage()
    found = _list_markdown(storage, content_dir, 'root')
    found += _list_markdown(storage, os.path.join(content_dir, posts_dir), 'posts')

    by_slug = {}
    for content_file in found:
        existing = by_slug.get(content_file.slug)
        if existing is None:
            by_slug[content_file.slug] = content_file
        elif existing.directory == 'root' and content_file.directory == 'posts':
            logger.debug(f"'{content_file.full_path}' overrides '{existing.full_path}'")
            by_slug[content_file.slug] = content_file
    return list(by_slug.values())


def parse_front_matter(text, source=None):
    """Split ``text`` into a metadata dictionary and the Markdown body."""
    if text.startswith('\ufeff'):
        text = text[1:]
    stripped = text.lstrip('\r\n')
    match = FRONT_MATTER_RE.match(stripped)
    if not match:
        return {}, text

    try:
        metadata = yaml.safe_load(match.group(1) or '')
    except yaml.YAMLError as e:
        logger.error(f"Invalid YAML front matter in {source or '<string>'}: {e}")
        metadata = {}
    if metadata is None:
        metadata = {}
    elif not isinstance(metadata, dict):
        logger.error(f"Front matter in {source or '<string>'} is not a mapping; ignoring it")
        metadata = {}
    return metadata, stripped[match.end():].strip()


def _naive_utc(value):
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def parse_date(value):
    """Parse a front matter date. Returns ``None`` when the value is not a date.

    Aware values are converted to UTC and returned naive.
    """
    if isinstance(value, datetime):
        return _naive_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        value = value.strip()
        try:
            return _naive_utc(datetime.fromisoformat(value.replace('Z', '+00:00')))
        except ValueError:
            pass
        for fmt in DATE_FORMATS:
            try:
                return datetime.strptime(value, fmt)
            except ValueError:
                continue
    return None


def _text(value, default):
    if value is None or value == '':
        return default
    return str(value)


def _tags(value):
    if not isinstance(value, (list, tuple)):
        return []
    return [str(tag) for tag in value if tag is not None and str(tag) != '']


def build_post(content_file, text, config=None, today=None):
    """Turn one content file into a ``Post``, filling in defaults for absent fields."""
    metadata, body = parse_front_matter(text, content_file.full_path)
    slug = content_file.slug

    raw_date = metadata.get('date')
    if raw_date is None or raw_date == '':
        raw_date = (today or date.today()).isoformat()
    if isinstance(raw_date, (datetime, date)):
        display_date = raw_date.isoformat()
    else:
        display_date = str(raw_date)
    published = parse_date(raw_date)
    if published is None:
        logger.warning(f"Unparseable date {display_date!r} in {content_file.full_path}; ordering it last")

    return Post(
        slug=slug,
        directory=content_file.directory,
        title=_text(metadata.get('title'), slug),
        date=display_date,
        published=published,
        author=_text(metadata.get('author'), getattr(config, 'default_author', 'Staff Writer')),
        category=_text(metadata.get('category'), getattr(config, 'default_category', 'General')),
        description=_text(metadata.get('description'),
                          getattr(config, 'default_description', 'Latest news and updates')),
        tags=_tags(metadata.get('tags')),
        body=body,
        source_path=content_file.full_path,
    )


def sort_posts(posts):
    """Newest first; equal dates fall back to slug order."""
    by_slug = sorted(posts, key=lambda p: p.slug)
    return sorted(by_slug, key=lambda p: p.sort_date, reverse=True)


def load_corpus(config, storage=None, today=None):
    """Scan, read and normalize all content into one ``Corpus`` snapshot."""
    storage = storage or LocalStorage()
    content_files = discover_content_files(config.content_dir, config.posts_dir, storage)

    scanned = []
    for content_file in content_files:
        try:
            text = storage.read_text(content_file.full_path)
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read content file {content_file.full_path}: {e}")
            continue
        scanned.append(build_post(content_file, text, config, today=today))

    logger.debug(f"Loaded {len(scanned)} posts from {config.content_dir}")
    return Corpus(sort_posts(scanned), scan_order=scanned)
