"""Tests for configuration loading."""

import json
import os

import pytest
import yaml

from bulletin_pkg.exceptions import ConfigError
from bulletin_pkg.settings import BulletinSettings, SiteConfig, normalize_keys


class TestBulletinSettings:
    """Test cases for BulletinSettings."""

    def test_defaults_without_config_file(self, temp_dir):
        settings = BulletinSettings(temp_dir).load_settings()
        assert settings == BulletinSettings.DEFAULT_SETTINGS

    def test_loads_yaml(self, temp_dir):
        with open(os.path.join(temp_dir, 'bulletin.yml'), 'w', encoding='utf-8') as f:
            yaml.safe_dump({'site_name': 'Outbreak News', 'posts_per_page': 10}, f)

        settings = BulletinSettings(temp_dir).load_settings()
        assert settings['site_name'] == 'Outbreak News'
        assert settings['posts_per_page'] == 10
        assert settings['output'] == 'output'

    def test_loads_legacy_site_config_json(self, temp_dir):
        with open(os.path.join(temp_dir, 'site.config.json'), 'w', encoding='utf-8') as f:
            json.dump({'siteUrl': 'https://id-blog.example/', 'siteName': 'ID Blog'}, f)

        loader = BulletinSettings(temp_dir)
        settings = loader.load_settings()

        assert settings['site_url'] == 'https://id-blog.example/'
        assert settings['site_name'] == 'ID Blog'
        assert loader.config_file_path.endswith('site.config.json')

    def test_yaml_preferred_over_json(self, temp_dir):
        with open(os.path.join(temp_dir, 'bulletin.yml'), 'w', encoding='utf-8') as f:
            f.write('site_name: From YAML\n')
        with open(os.path.join(temp_dir, 'bulletin.json'), 'w', encoding='utf-8') as f:
            f.write('{"site_name": "From JSON"}')

        assert BulletinSettings(temp_dir).load_settings()['site_name'] == 'From YAML'

    def test_invalid_config_falls_back_to_defaults(self, temp_dir, capsys):
        with open(os.path.join(temp_dir, 'bulletin.json'), 'w', encoding='utf-8') as f:
            f.write('{not json')

        settings = BulletinSettings(temp_dir).load_settings()

        assert settings == BulletinSettings.DEFAULT_SETTINGS
        assert 'Warning: Failed to load config file' in capsys.readouterr().out

    def test_non_mapping_config_is_rejected(self, temp_dir, capsys):
        with open(os.path.join(temp_dir, 'bulletin.yml'), 'w', encoding='utf-8') as f:
            f.write('- just\n- a list\n')

        assert BulletinSettings(temp_dir).load_settings() == BulletinSettings.DEFAULT_SETTINGS
        assert 'must contain a mapping' in capsys.readouterr().out

    def test_merge_with_args_ignores_none(self, temp_dir):
        loader = BulletinSettings(temp_dir)
        loader.load_settings()
        merged = loader.merge_with_args({'output': 'docs', 'site_url': None})

        assert merged['output'] == 'docs'
        assert merged['site_url'] == BulletinSettings.DEFAULT_SETTINGS['site_url']

    @pytest.mark.parametrize('file_format', ['yml', 'json'])
    def test_create_sample_config_round_trips(self, temp_dir, file_format):
        loader = BulletinSettings(temp_dir)
        path = loader.create_sample_config(file_format)

        assert os.path.basename(path) == f'bulletin.{file_format}'
        settings = BulletinSettings(temp_dir).load_settings()
        assert settings['site_name'] == 'My Blog'
        assert settings['posts_per_page'] == 6

    def test_create_sample_config_keeps_existing_file(self, temp_dir, capsys):
        config_path = os.path.join(temp_dir, 'bulletin.yml')
        with open(config_path, 'w', encoding='utf-8') as f:
            f.write('site_name: Mine\n')

        assert BulletinSettings(temp_dir).create_sample_config('yml') is None
        assert 'Configuration file already exists: bulletin.yml' in capsys.readouterr().out
        with open(config_path, encoding='utf-8') as f:
            assert f.read() == 'site_name: Mine\n'


class TestSiteConfig:
    """Test cases for SiteConfig validation."""

    def test_site_url_trailing_slash_removed(self):
        assert SiteConfig(site_url='https://example.com/').site_url == 'https://example.com'

    def test_posts_per_page_minimum(self):
        assert SiteConfig(posts_per_page=0).posts_per_page == 1

    def test_non_numeric_value_rejected(self):
        with pytest.raises(ConfigError, match='posts_per_page'):
            SiteConfig(posts_per_page='many')

    def test_feed_limit_zero_means_unlimited(self):
        assert SiteConfig(feed_limit=0).feed_limit is None

    def test_from_settings(self):
        settings = dict(BulletinSettings.DEFAULT_SETTINGS, output='docs', site_url='https://x.org/',
                        posts_per_page='3')
        config = SiteConfig.from_settings(settings)

        assert config.output_dir == 'docs'
        assert config.site_url == 'https://x.org'
        assert config.posts_per_page == 3
        assert config.posts_source_dir == os.path.join('content', 'posts')

    def test_from_settings_expands_home(self):
        config = SiteConfig.from_settings({'output': '~/site'})
        assert config.output_dir == os.path.expanduser('~/site')


def test_normalize_keys():
    assert normalize_keys({'siteUrl': 1, 'postsPerPage': 2, 'site_name': 3}) == {
        'site_url': 1, 'posts_per_page': 2, 'site_name': 3,
    }
