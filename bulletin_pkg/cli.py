#!/usr/bin/env python3
"""
Command-line interface for Bulletin - static blog generator.
"""

import sys
import argparse
from typing import List, Optional

from . import __version__
from .core import SiteBuilder, setup_logging
from .exceptions import BuildError
from .scaffold import NewPostOptions, create_starter_structure, new_post
from .settings import BulletinSettings, SiteConfig


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='bulletin', description='Bulletin - Static Blog Generator')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    subparsers = parser.add_subparsers(dest='command')

    build = subparsers.add_parser('build', help='Build the static site')
    build.add_argument('--output', type=str, help='Output directory for generated site')
    build.add_argument('--content', type=str, help='Content directory containing markdown files')
    build.add_argument('--templates', type=str, help='Templates directory')
    build.add_argument('--site-url', type=str, help='Site URL for the feed and sitemap')
    build.add_argument('--site-name', type=str, help='Site name for the feed')
    build.add_argument('--site-description', type=str, help='Site description for the feed')
    build.add_argument('--posts-per-page', type=int, help='Number of posts per index page')
    build.add_argument('--workers', type=int, help='Threads used to render post pages')
    build.add_argument('--log-dir', type=str, help='Directory for detailed build logs')
    build.add_argument('--verbose', action='store_true', help='Show every log message')

    post = subparsers.add_parser('new-post', help='Create a new blog post')
    post.add_argument('title', nargs='+', help='Post title')
    target = post.add_mutually_exclusive_group()
    target.add_argument('-p', '--posts', dest='posts', action='store_true', default=True,
                        help='Create post in content/posts/ (default)')
    target.add_argument('--no-posts', dest='posts', action='store_false',
                        help='Create post in content/ (root)')
    post.add_argument('--content', type=str, help='Content directory')

    init = subparsers.add_parser('init', help='Create a sample configuration and starter templates')
    init.add_argument('format', nargs='?', choices=['yml', 'yaml', 'json'], default='yml')

    return parser


def run_build(args, settings_loader) -> int:
    args_dict = {
        'output': args.output,
        'content': args.content,
        'templates': args.templates,
        'site_url': args.site_url,
        'site_name': args.site_name,
        'site_description': args.site_description,
        'posts_per_page': args.posts_per_page,
        'workers': args.workers,
        'log_dir': args.log_dir,
    }
    final_settings = settings_loader.merge_with_args(args_dict)
    setup_logging(final_settings.get('log_dir'), verbose=args.verbose)

    try:
        config = SiteConfig.from_settings(final_settings)
        report = SiteBuilder(config).build()
    except (BuildError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Built {report.posts_generated} posts, {report.index_pages_generated} index pages "
          f"and {report.tag_pages_generated} tag pages into {config.output_dir}/")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == 'init':
        settings_loader = BulletinSettings()
        config_path = settings_loader.create_sample_config(args.format)
        if config_path:
            print(f"Created sample configuration file: {config_path}")
        print("\nCreating starter project structure...")
        create_starter_structure()
        return 0

    settings_loader = BulletinSettings()
    settings = settings_loader.load_settings()

    if args.command == 'new-post':
        content_dir = args.content or settings['content']
        new_post(' '.join(args.title), content_dir, NewPostOptions(
            posts_dir=args.posts,
            author=settings['default_author'],
            category=settings['default_category'],
        ), posts_subdir=settings['posts_dir'])
        return 0

    if args.command is None:
        args = parser.parse_args(['build'])
    return run_build(args, settings_loader)


if __name__ == '__main__':
    sys.exit(main())
