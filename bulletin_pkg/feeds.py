"""Sitemap and RSS projections of the corpus."""

from datetime import timezone
from email.utils import formatdate, format_datetime
from xml.sax.saxutils import escape

from .content import sort_posts
from .paths import join_url

SITEMAP_NAMESPACE = 'http://www.sitemaps.org/schemas/sitemap/0.9'

XML_ENTITIES = {'"': '&quot;', "'": '&apos;'}


def escape_xml(text):
    """Escape the five reserved XML characters."""
    return escape(str(text), XML_ENTITIES)


def rfc822_date(value):
    """Format a naive (UTC) datetime for RSS."""
    return format_datetime(value.replace(tzinfo=timezone.utc))


def sitemap_urls(corpus, site_url):
    """Home page followed by every post, in scan order."""
    urls = [join_url(site_url, 'index.html')]
    for post in corpus.scan_order:
        urls.append(join_url(site_url, post.href))
    return urls


def render_sitemap(urls):
    entries = '\n'.join(
        f"    <url>\n        <loc>{escape_xml(url)}</loc>\n    </url>" for url in urls
    )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<urlset xmlns="{SITEMAP_NAMESPACE}">\n'
        f"{entries}\n"
        '</urlset>\n'
    )


def feed_items(corpus, site_url, limit=None, build_date=None):
    """
    Feed entries, newest first.

    Posts whose date could not be parsed are listed last and share the oldest
    valid date in the feed, so ``pubDate`` never increases down the list. With
    no dated post at all the build time is used.
    """
    posts = sort_posts(corpus.posts)
    if limit:
        posts = posts[:limit]

    dated = [post.published for post in posts if post.published is not None]
    if dated:
        fallback = rfc822_date(min(dated))
    elif build_date is not None:
        fallback = rfc822_date(build_date)
    else:
        fallback = formatdate(usegmt=True)

    items = []
    for post in posts:
        items.append({
            'title': post.title,
            'description': post.description,
            'link': join_url(site_url, post.href),
            'pub_date': rfc822_date(post.published) if post.published is not None else fallback,
        })
    return items


def render_feed(items, site_name, site_description, site_url, build_date=None):
    last_build = rfc822_date(build_date) if build_date is not None else formatdate(usegmt=True)
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<rss version="2.0">',
        '    <channel>',
        f"        <title>{escape_xml(site_name)}</title>",
        f"        <link>{escape_xml(site_url)}</link>",
        f"        <description>{escape_xml(site_description)}</description>",
        f"        <lastBuildDate>{last_build}</lastBuildDate>",
    ]
    for item in items:
        link = escape_xml(item['link'])
        lines.extend([
            '        <item>',
            f"            <title>{escape_xml(item['title'])}</title>",
            f"            <link>{link}</link>",
            f"            <description>{escape_xml(item['description'])}</description>",
            f"            <pubDate>{item['pub_date']}</pubDate>",
            f"            <guid>{link}</guid>",
            '        </item>',
        ])
    lines.extend(['    </channel>', '</rss>'])
    return '\n'.join(lines) + '\n'
