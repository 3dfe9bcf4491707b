import os
import time
import logging
from datetime import datetime
from concurrent.futures import ThreadPoolExecutor

from .content import load_corpus
from .feeds import feed_items, render_feed, render_sitemap, sitemap_urls
from .pagination import plan_pages
from .paths import PAGES_DIR, POSTS_DIR, TAGS_DIR, base_path, output_depth, resolve_href
from .related import build_tag_lookup, related_posts
from .render import TemplateRenderer
from .storage import LocalStorage
from .tags import build_tag_index

# Generated directories removed before every build; anything else in the
# output directory (compiled assets, CNAME, ...) is left alone.
GENERATED_DIRS = [POSTS_DIR, PAGES_DIR, TAGS_DIR]
GENERATED_EXTENSIONS = ('.html', '.xml')


class InfoFilter(logging.Filter):
    """Filter to allow only selected INFO messages to be shown in the console."""
    def filter(self, record):
        if record.levelno >= logging.WARNING:
            return True
        allowed_messages = [
            "Starting site build",
            "Cleaned previous output",
            "Generated post pages:",
            "Generated index pages:",
            "Generated tag pages:",
            "Generating XML sitemap",
            "Generating RSS feed",
            "Building 404 page",
            "Site build completed in",
        ]
        return any(msg in record.getMessage() for msg in allowed_messages)


def setup_logging(log_dir=None, verbose=False):
    """Set up console (and optionally file) logging for the ``Bulletin`` logger tree."""
    logger = logging.getLogger('Bulletin')
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    if not logger.handlers:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
        if not verbose:
            console_handler.addFilter(InfoFilter())
        console_handler.setFormatter(logging.Formatter('%(message)s'))
        logger.addHandler(console_handler)

        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
            log_filename = datetime.now().strftime('bulletin_%Y-%m-%d_%H-%M-%S.log')
            file_handler = logging.FileHandler(os.path.join(log_dir, log_filename))
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(
                logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
            )
            logger.addHandler(file_handler)
            logger.setLevel(logging.DEBUG)

    return logger


class BuildReport:
    """Counts of what a build produced."""

    def __init__(self):
        self.posts_generated = 0
        self.index_pages_generated = 0
        self.tag_pages_generated = 0
        self.written = []
        self.elapsed = 0.0

    def __repr__(self):
        return (f"BuildReport(posts={self.posts_generated}, index_pages={self.index_pages_generated}, "
                f"tag_pages={self.tag_pages_generated}, files={len(self.written)})")


class SiteBuilder:
    """
    Runs the full build for one ``SiteConfig``.

    The builder only holds its configuration and collaborators; the corpus is
    loaded once per ``build()`` call and passed explicitly to every stage.
    """

    def __init__(self, config, storage=None, renderer=None, build_date=None):
        self.config = config
        self.storage = storage or LocalStorage()
        self.renderer = renderer or TemplateRenderer(config.templates_dir)
        self.build_date = build_date
        self.logger = logging.getLogger('Bulletin')

    def _output(self, relative_path):
        return os.path.join(self.config.output_dir, *relative_path.split('/'))

    def _write(self, relative_path, content, report):
        self.storage.write_text(self._output(relative_path), content)
        report.written.append(relative_path)
        self.logger.debug(f"Generated: {relative_path}")

    def _site_context(self, depth):
        return {
            'base_path': base_path(depth),
            'site_url': self.config.site_url,
            'site_name': self.config.site_name,
            'site_description': self.config.site_description,
        }

    def clean_outputs(self):
        """Remove generated HTML and XML, preserving everything else."""
        output_dir = self.config.output_dir
        self.storage.ensure_dir(output_dir)
        for name in self.storage.list_dir(output_dir):
            path = os.path.join(output_dir, name)
            if name.endswith(GENERATED_EXTENSIONS) and self.storage.is_file(path):
                self.storage.remove_file(path)
        for directory in GENERATED_DIRS:
            self.storage.remove_tree(os.path.join(output_dir, directory))
        self.logger.info("Cleaned previous output")

    def build_post_pages(self, corpus, tag_groups, report):
        tag_lookup = build_tag_lookup(corpus)

        def render_post(post):
            depth = output_depth(post.href)
            related = related_posts(post, corpus, self.config.related_count, tag_lookup=tag_lookup)
            related_data = [
                {
                    'title': rp.title,
                    'date': rp.date,
                    'description': rp.description,
                    'href': resolve_href(depth, rp.href),
                }
                for rp in related
            ]
            html = self.renderer.render(
                'post.html',
                title=post.title,
                date=post.date,
                author=post.author,
                category=post.category,
                content=self.renderer.markdown_filter(post.body),
                description=post.description,
                tags=list(post.tags),
                tag_links=self._tag_links(tag_groups, depth),
                slug=post.slug,
                related_posts=related_data,
                **self._site_context(depth)
            )
            return post.href, html

        posts = list(corpus)
        if self.config.workers > 1 and len(posts) > 1:
            with ThreadPoolExecutor(max_workers=min(self.config.workers, len(posts))) as executor:
                rendered = list(executor.map(render_post, posts))
        else:
            rendered = [render_post(post) for post in posts]

        for href, html in rendered:
            self._write(href, html, report)
            report.posts_generated += 1
        self.logger.info(f"Generated post pages: {report.posts_generated}")

    def _tag_links(self, tag_groups, depth):
        return {group.tag: resolve_href(depth, group.output_path) for group in tag_groups}

    def build_index_pages(self, corpus, report):
        all_posts = [post.to_dict() for post in corpus]
        for page in plan_pages(corpus, self.config.posts_per_page):
            html = self.renderer.render(
                'index.html',
                posts=page.posts,
                all_posts=all_posts,
                title=self.config.site_name,
                description=self.config.site_description,
                current_page=page.number,
                total_pages=page.total_pages,
                prev_page=page.prev_page,
                next_page=page.next_page,
                page_numbers=page.page_numbers,
                **self._site_context(page.depth)
            )
            self._write(page.output_path, html, report)
            report.index_pages_generated += 1
        self.logger.info(f"Generated index pages: {report.index_pages_generated}")

    def build_tag_pages(self, tag_groups, report):
        for group in tag_groups:
            html = self.renderer.render(
                'tag.html',
                tag=group.tag,
                posts=group.post_dicts(),
                title=f'Posts tagged "{group.tag}"',
                description=f"All posts tagged with {group.tag}",
                **self._site_context(output_depth(group.output_path))
            )
            self._write(group.output_path, html, report)
            report.tag_pages_generated += 1
        self.logger.info(f"Generated tag pages: {report.tag_pages_generated}")

    def build_sitemap(self, corpus, report):
        self._write('sitemap.xml', render_sitemap(sitemap_urls(corpus, self.config.site_url)), report)
        self.logger.info("Generating XML sitemap")

    def build_feed(self, corpus, report):
        items = feed_items(corpus, self.config.site_url, self.config.feed_limit, self.build_date)
        feed = render_feed(
            items,
            self.config.site_name,
            self.config.site_description,
            self.config.site_url,
            build_date=self.build_date,
        )
        self._write('feed.xml', feed, report)
        self.logger.info("Generating RSS feed")

    def build_404_page(self, report):
        html = self.renderer.render(
            '404.html',
            title='404 - Page Not Found',
            description=f"Page not found - {self.config.site_name}",
            **self._site_context(0)
        )
        self._write('404.html', html, report)
        self.logger.info("Building 404 page")

    def build(self):
        """Main build process. Raises ``BuildError`` on the first fatal problem."""
        started = time.time()
        report = BuildReport()
        self.logger.info("Starting site build...")

        self.clean_outputs()
        corpus = load_corpus(self.config, self.storage)
        if not len(corpus):
            self.logger.warning("No markdown files found to process.")
        tag_groups = build_tag_index(corpus)

        self.build_post_pages(corpus, tag_groups, report)
        self.build_index_pages(corpus, report)
        self.build_tag_pages(tag_groups, report)
        self.build_sitemap(corpus, report)
        self.build_feed(corpus, report)
        self.build_404_page(report)

        report.elapsed = time.time() - started
        self.logger.info(f"Site build completed in {report.elapsed:.6f} seconds.")
        return report
