"""Group posts by tag for the per-tag listing pages."""

import logging

from .content import sort_posts
from .paths import output_depth, resolve_href, short_hash, tag_page_path, tag_slug

logger = logging.getLogger('Bulletin.tags')


class TagGroup:
    """All posts carrying one tag."""

    def __init__(self, tag, slug, posts):
        self.tag = tag
        self.slug = slug
        self.output_path = tag_page_path(slug)
        self.posts = posts

    def post_dicts(self):
        """Posts with hrefs rewritten relative to the tag page."""
        depth = output_depth(self.output_path)
        return [post.to_dict(href=resolve_href(depth, post.href)) for post in self.posts]

    def __repr__(self):
        return f"TagGroup({self.tag!r}, slug={self.slug!r}, {len(self.posts)} posts)"


def assign_tag_slugs(tags):
    """
    Map each tag to a unique file name slug.

    The first tag producing a slug keeps it; later tags producing the same slug
    get a hash suffix so their pages do not overwrite each other.
    """
    assigned = {}
    taken = {}
    for tag in tags:
        slug = tag_slug(tag)
        if not slug:
            slug = f"tag-{short_hash(tag)}"
        if slug in taken and taken[slug] != tag:
            disambiguated = f"{slug}-{short_hash(tag)}"
            counter = 2
            while disambiguated in taken:
                disambiguated = f"{slug}-{short_hash(tag)}-{counter}"
                counter += 1
            logger.warning(
                f"Tag {tag!r} collides with {taken[slug]!r} on slug '{slug}'; using '{disambiguated}'"
            )
            slug = disambiguated
        taken[slug] = tag
        assigned[tag] = slug
    return assigned


def build_tag_index(posts):
    """Group ``posts`` by tag. Tags are case-sensitive and kept in first-seen order."""
    grouped = {}
    for post in posts:
        for tag in dict.fromkeys(post.tags):
            grouped.setdefault(tag, []).append(post)

    slugs = assign_tag_slugs(grouped)
    return [TagGroup(tag, slugs[tag], sort_posts(tag_posts)) for tag, tag_posts in grouped.items()]
