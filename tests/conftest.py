"""Test configuration and fixtures for Bulletin tests."""

import pytest
import tempfile
import shutil
from datetime import date, datetime
from pathlib import Path

from bulletin_pkg.content import Post, parse_date
from bulletin_pkg.settings import SiteConfig


def _make_post(slug, tags=(), date_value='2024-01-01', directory='posts', title=None, **extra):
    """Build a Post directly, bypassing the file system."""
    return Post(
        slug=slug,
        directory=directory,
        title=title or slug.replace('-', ' ').title(),
        date=date_value,
        published=parse_date(date_value),
        author=extra.get('author', 'Staff Writer'),
        category=extra.get('category', 'General'),
        description=extra.get('description', f'About {slug}'),
        tags=list(tags),
        body=extra.get('body', f'# {slug}\n\nBody text.'),
    )


@pytest.fixture
def make_post():
    """Factory for in-memory posts."""
    return _make_post


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp_dir = tempfile.mkdtemp()
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def mock_content_dir(temp_dir):
    """Create a content directory with root posts, nested posts and one slug clash."""
    content_dir = Path(temp_dir) / 'content'
    posts_dir = content_dir / 'posts'
    posts_dir.mkdir(parents=True)

    (content_dir / 'about-us.md').write_text("""---
title: About Us
date: 2023-06-01
tags: [site]
---

# About

Who we are.
""", encoding='utf-8')

    # same slug as posts/measles-outbreak.md, must be dropped
    (content_dir / 'measles-outbreak.md').write_text("""---
title: Old Measles Draft
date: 2020-01-01
---

Draft.
""", encoding='utf-8')

    (content_dir / 'notes.txt').write_text('not content', encoding='utf-8')

    (posts_dir / 'measles-outbreak.md').write_text("""---
title: Measles Outbreak
date: 2024-02-01
author: Dr. Rivera
category: Breaking News
description: Cases rising in three states
tags: [measles, vaccines]
---

# Measles Outbreak

Cases are rising.
""", encoding='utf-8')

    (posts_dir / 'vaccine-update.md').write_text("""---
title: Vaccine Update
date: 2024-01-15
tags: [vaccines]
---

Updated guidance.
""", encoding='utf-8')

    (posts_dir / 'no-front-matter.md').write_text("Just a body.\n", encoding='utf-8')

    return str(content_dir)


@pytest.fixture
def mock_templates_dir(temp_dir):
    """Create a minimal templates directory."""
    templates_dir = Path(temp_dir) / 'templates'
    templates_dir.mkdir()

    (templates_dir / 'base.html').write_text("""<!DOCTYPE html>
<html>
<head>
    <title>{{ title }}</title>
</head>
<body data-base="{{ base_path }}">
    {% block content %}{% endblock %}
</body>
</html>""", encoding='utf-8')

    (templates_dir / 'post.html').write_text("""{% extends "base.html" %}
{% block content %}
<article>
    <h1>{{ title }}</h1>
    <div>{{ content }}</div>
    {% for related in related_posts %}<a class="related" href="{{ related.href }}">{{ related.title }}</a>{% endfor %}
</article>
{% endblock %}""", encoding='utf-8')

    (templates_dir / 'index.html').write_text("""{% extends "base.html" %}
{% block content %}
{% for post in posts %}<a class="post" href="{{ post.href }}">{{ post.title }}</a>
{% endfor %}
<span class="page">{{ current_page }}/{{ total_pages }}</span>
{% if prev_page %}<a class="prev" href="{{ prev_page }}">prev</a>{% endif %}
{% if next_page %}<a class="next" href="{{ next_page }}">next</a>{% endif %}
{% endblock %}""", encoding='utf-8')

    (templates_dir / 'tag.html').write_text("""{% extends "base.html" %}
{% block content %}
<h1>{{ tag }}</h1>
{% for post in posts %}<a class="post" href="{{ post.href }}">{{ post.title }}</a>
{% endfor %}
{% endblock %}""", encoding='utf-8')

    (templates_dir / '404.html').write_text("""{% extends "base.html" %}
{% block content %}<p>Not found</p>{% endblock %}""", encoding='utf-8')

    return str(templates_dir)


@pytest.fixture
def mock_output_dir(temp_dir):
    """Create a mock output directory."""
    output_dir = Path(temp_dir) / 'output'
    output_dir.mkdir()
    return str(output_dir)


@pytest.fixture
def site_config(mock_content_dir, mock_templates_dir, mock_output_dir):
    """A SiteConfig pointing at the mock directories."""
    return SiteConfig(
        content_dir=mock_content_dir,
        templates_dir=mock_templates_dir,
        output_dir=mock_output_dir,
        site_url='https://news.example.org/',
        site_name='Outbreak News',
        site_description='Infectious disease news & analysis',
    )


@pytest.fixture
def fixed_today():
    return date(2024, 3, 1)


@pytest.fixture
def build_date():
    return datetime(2024, 3, 1, 12, 0, 0)
