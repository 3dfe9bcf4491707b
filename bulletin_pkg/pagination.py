"""Split the post listing into index pages."""

import math

from .paths import base_path, index_page_path, output_depth, resolve_href


class Page:
    """One index page and everything its template needs."""

    def __init__(self, number, total_pages, output_path, posts, prev_page, next_page, page_numbers):
        self.number = number
        self.total_pages = total_pages
        self.output_path = output_path
        self.depth = output_depth(output_path)
        self.base_path = base_path(self.depth)
        self.posts = posts
        self.prev_page = prev_page
        self.next_page = next_page
        self.page_numbers = page_numbers

    def __repr__(self):
        return f"Page({self.number}/{self.total_pages}, {self.output_path!r}, {len(self.posts)} posts)"


def total_pages_for(count, page_size):
    if page_size < 1:
        raise ValueError(f"Page size must be at least 1, got {page_size}")
    return max(1, math.ceil(count / page_size))


def page_href(target, from_depth):
    """Href of index page ``target`` as seen from a page at ``from_depth``."""
    return resolve_href(from_depth, index_page_path(target))


def get_pagination_links(current_page, total_pages):
    """
    Returns a list of page numbers (or ellipses) to display in pagination.
    Always shows page 1 and total_pages.
    Shows two pages before and after the current page.
    Inserts '...' when there is a gap.
    """
    delta = 2
    links = [1]

    start = max(current_page - delta, 2)
    end = min(current_page + delta, total_pages - 1)

    if start > 2:
        links.append('...')

    links.extend(range(start, end + 1))

    if end < total_pages - 1:
        links.append('...')

    if total_pages > 1:
        links.append(total_pages)

    return links


def plan_pages(posts, page_size):
    """
    Split ``posts`` (already ordered) into pages of ``page_size``.

    Page 1 is ``index.html``; later pages are ``page/<n>.html``. Post hrefs and
    navigation links are rewritten relative to each page's own location.
    """
    posts = list(posts)
    total = total_pages_for(len(posts), page_size)
    pages = []

    for number in range(1, total + 1):
        output_path = index_page_path(number)
        depth = output_depth(output_path)
        start = (number - 1) * page_size
        page_posts = [
            post.to_dict(href=resolve_href(depth, post.href))
            for post in posts[start:start + page_size]
        ]

        prev_page = page_href(number - 1, depth) if number > 1 else None
        next_page = page_href(number + 1, depth) if number < total else None

        page_numbers = []
        for link in get_pagination_links(number, total):
            if link == '...':
                page_numbers.append({'number': None, 'label': '...', 'href': None, 'is_current': False})
            else:
                page_numbers.append({
                    'number': link,
                    'label': str(link),
                    'href': page_href(link, depth),
                    'is_current': link == number,
                })

        pages.append(Page(number, total, output_path, page_posts, prev_page, next_page, page_numbers))

    return pages
