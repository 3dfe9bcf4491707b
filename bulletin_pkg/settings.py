#!/usr/bin/env python3
"""
Settings loader for the Bulletin blog generator.
Supports configuration from bulletin.yml, bulletin.yaml, bulletin.json or a
legacy site.config.json file.
"""

import os
import re
import json
import yaml
from typing import Dict, Any, Optional

from .exceptions import ConfigError


class BulletinSettings:
    """Load and manage Bulletin configuration settings."""

    # Default configuration
    DEFAULT_SETTINGS = {
        'output': 'output',
        'content': 'content',
        'posts_dir': 'posts',
        'templates': 'templates',
        'site_url': 'https://example.com',
        'site_name': 'Bulletin',
        'site_description': 'Latest news and updates',
        'posts_per_page': 6,
        'related_count': 3,
        'feed_limit': None,
        'workers': 1,
        'default_author': 'Staff Writer',
        'default_category': 'General',
        'default_description': 'Latest news and updates',
        'log_dir': None,
    }

    # Config file names to look for (in order of preference)
    CONFIG_FILES = ['bulletin.yml', 'bulletin.yaml', 'bulletin.json', 'site.config.json']

    def __init__(self, config_dir: str = None):
        """
        Initialize settings loader.

        Args:
            config_dir: Directory to look for config files. Defaults to current directory.
        """
        self.config_dir = config_dir or os.getcwd()
        self.settings = self.DEFAULT_SETTINGS.copy()
        self.config_file_path = None

    def load_settings(self) -> Dict[str, Any]:
        """
        Load settings from configuration file if it exists.

        Returns:
            Dictionary of configuration settings
        """
        config_file = self._find_config_file()

        if config_file:
            self.config_file_path = config_file
            try:
                loaded_settings = self._load_config_file(config_file)
                if loaded_settings:
                    self.settings.update(normalize_keys(loaded_settings))
                    print(f"Loaded configuration from: {os.path.relpath(config_file)}")
            except (ValueError, OSError) as e:
                print(f"Warning: Failed to load config file {config_file}: {e}")

        return self.settings.copy()

    def _find_config_file(self) -> Optional[str]:
        for filename in self.CONFIG_FILES:
            config_path = os.path.join(self.config_dir, filename)
            if os.path.exists(config_path):
                return config_path
        return None

    def _load_config_file(self, config_path: str) -> Dict[str, Any]:
        """
        Load configuration from a file.

        Args:
            config_path: Path to the configuration file

        Returns:
            Dictionary of configuration settings
        """
        file_ext = os.path.splitext(config_path)[1].lower()
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                if file_ext in ['.yml', '.yaml']:
                    data = yaml.safe_load(f) or {}
                elif file_ext == '.json':
                    data = json.load(f) or {}
                else:
                    raise ValueError(f"Unsupported config file format: {file_ext}")
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in configuration file {config_path}: {e}")
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in configuration file {config_path}: {e}")
        except PermissionError:
            raise PermissionError(f"Permission denied reading configuration file: {config_path}")

        if not isinstance(data, dict):
            raise ValueError(f"Configuration file must contain a mapping: {config_path}")
        return data

    def create_sample_config(self, file_format: str = 'yml') -> Optional[str]:
        """
        Create a sample configuration file.

        Args:
            file_format: Format for config file ('yml', 'yaml', or 'json')

        Returns:
            Path to created sample config file, or None when one already exists
        """
        sample_config = {
            'site_url': 'https://example.com',
            'site_name': 'My Blog',
            'site_description': 'Latest news and updates',
            'output': 'output',
            'content': 'content',
            'templates': 'templates',
            'posts_per_page': 6,
            'related_count': 3,
        }

        filename = f'bulletin.{file_format}'
        config_path = os.path.join(self.config_dir, filename)

        if os.path.exists(config_path):
            print(f"Configuration file already exists: {filename}")
            return None

        try:
            with open(config_path, 'w', encoding='utf-8') as f:
                if file_format in ['yml', 'yaml']:
                    f.write("# Bulletin Configuration File\n\n")
                    f.write("# Site information\n")
                    yaml.safe_dump(
                        {k: sample_config[k] for k in ('site_url', 'site_name', 'site_description')},
                        f, sort_keys=False
                    )
                    f.write("\n# Build settings\n")
                    yaml.safe_dump(
                        {k: sample_config[k] for k in ('output', 'content', 'templates')},
                        f, sort_keys=False
                    )
                    f.write("\n# Listing settings\n")
                    yaml.safe_dump(
                        {k: sample_config[k] for k in ('posts_per_page', 'related_count')},
                        f, sort_keys=False
                    )
                elif file_format == 'json':
                    json.dump(sample_config, f, indent=2)
                else:
                    raise ValueError(f"Unsupported config file format: {file_format}")
        except PermissionError:
            raise PermissionError(f"Permission denied creating configuration file: {config_path}")

        return config_path

    def merge_with_args(self, args_dict: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge configuration settings with command-line arguments.
        Command-line arguments take precedence over config file settings.
        """
        merged = self.settings.copy()
        for key, value in args_dict.items():
            if value is not None:
                merged[key] = value
        return merged


def normalize_keys(data: Dict[str, Any]) -> Dict[str, Any]:
    """Convert camelCase keys (``siteUrl``) to snake_case (``site_url``)."""
    return {re.sub(r'(?<!^)(?=[A-Z])', '_', str(key)).lower(): value for key, value in data.items()}


def _as_int(value, name, minimum):
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"'{name}' must be an integer, got {value!r}")
    return max(minimum, number)


class SiteConfig:
    """Validated configuration for a single build."""

    def __init__(self, content_dir='content', posts_dir='posts', templates_dir='templates',
                 output_dir='output', site_url='https://example.com', site_name='Bulletin',
                 site_description='Latest news and updates', posts_per_page=6, related_count=3,
                 feed_limit=None, workers=1, default_author='Staff Writer',
                 default_category='General', default_description='Latest news and updates'):
        self.content_dir = content_dir
        self.posts_dir = posts_dir
        self.templates_dir = templates_dir
        self.output_dir = output_dir
        self.site_url = (site_url or '').rstrip('/')
        self.site_name = site_name or 'Bulletin'
        self.site_description = site_description or ''
        self.posts_per_page = _as_int(posts_per_page, 'posts_per_page', 1)
        self.related_count = _as_int(related_count, 'related_count', 0)
        self.feed_limit = None if feed_limit in (None, 0) else _as_int(feed_limit, 'feed_limit', 1)
        self.workers = _as_int(workers, 'workers', 1)
        self.default_author = default_author
        self.default_category = default_category
        self.default_description = default_description

    @property
    def posts_source_dir(self):
        return os.path.join(self.content_dir, self.posts_dir)

    @classmethod
    def from_settings(cls, settings: Dict[str, Any]) -> 'SiteConfig':
        """Build a config from a merged settings dictionary."""
        def expand(path):
            return os.path.expanduser(path) if isinstance(path, str) and path.startswith('~/') else path

        defaults = BulletinSettings.DEFAULT_SETTINGS
        return cls(
            content_dir=expand(settings.get('content', defaults['content'])),
            posts_dir=settings.get('posts_dir', defaults['posts_dir']),
            templates_dir=expand(settings.get('templates', defaults['templates'])),
            output_dir=expand(settings.get('output', defaults['output'])),
            site_url=settings.get('site_url', defaults['site_url']),
            site_name=settings.get('site_name', defaults['site_name']),
            site_description=settings.get('site_description', defaults['site_description']),
            posts_per_page=settings.get('posts_per_page', defaults['posts_per_page']),
            related_count=settings.get('related_count', defaults['related_count']),
            feed_limit=settings.get('feed_limit', defaults['feed_limit']),
            workers=settings.get('workers', defaults['workers']),
            default_author=settings.get('default_author', defaults['default_author']),
            default_category=settings.get('default_category', defaults['default_category']),
            default_description=settings.get('default_description', defaults['default_description']),
        )
