"""Creation of new content files and starter project files."""

import os
import shutil
from datetime import date

import yaml

from .paths import slugify
from .render import PACKAGE_TEMPLATES_DIR

POST_BODY_TEMPLATE = """# {title}

Write your post here...

## Key Points

- Important point 1
- Important point 2
- Important point 3

## Background

Provide context and background information...

## Current Status

Describe where things stand today...

## References

- Add your sources here
"""


class NewPostOptions:
    """Options for ``new_post``; ``posts_dir`` selects ``content/posts/`` over ``content/``."""

    def __init__(self, posts_dir=True, author='Staff Writer', category='General', tags=None):
        self.posts_dir = bool(posts_dir)
        self.author = author
        self.category = category
        self.tags = list(tags) if tags is not None else ['news']


def render_new_post(title, options, today=None):
    metadata = {
        'title': title,
        'date': (today or date.today()).isoformat(),
        'author': options.author,
        'category': options.category,
        'description': f"Latest updates on {title}",
        'tags': options.tags,
    }
    front_matter = yaml.safe_dump(metadata, sort_keys=False, allow_unicode=True, default_flow_style=None)
    return f"---\n{front_matter}---\n\n" + POST_BODY_TEMPLATE.format(title=title)


def new_post(title, content_dir, options=None, posts_subdir='posts', today=None):
    """
    Scaffold a new Markdown post named after ``title``.

    Returns the created file path, or ``None`` when nothing was written
    (empty title or the file already exists).
    """
    options = options or NewPostOptions()
    title = (title or '').strip()
    slug = slugify(title)
    if not slug:
        print("Please provide a post title")
        print('Usage: bulletin new-post "Your Post Title" [--posts | --no-posts]')
        return None

    output_dir = os.path.join(content_dir, posts_subdir) if options.posts_dir else content_dir
    os.makedirs(output_dir, exist_ok=True)

    file_name = f"{slug}.md"
    file_path = os.path.join(output_dir, file_name)
    if os.path.exists(file_path):
        print(f"File already exists: {file_name}")
        print(f"Location: {file_path}")
        return None

    with open(file_path, 'w', encoding='utf-8') as f:
        f.write(render_new_post(title, options, today=today))

    print(f"Created new post: {file_name}")
    print(f"Location: {file_path}")
    return file_path


def create_starter_structure(project_dir=None, templates_dir='templates', content_dir='content',
                             posts_subdir='posts'):
    """Copy the bundled templates and create the content directories."""
    project_dir = project_dir or os.getcwd()

    for directory in [templates_dir, os.path.join(content_dir, posts_subdir)]:
        dir_path = os.path.join(project_dir, directory)
        if os.path.exists(dir_path):
            print(f"Directory already exists: {directory}")
        else:
            os.makedirs(dir_path, exist_ok=True)
            print(f"Created directory: {directory}")

    for template_file in sorted(os.listdir(PACKAGE_TEMPLATES_DIR)):
        if not template_file.endswith('.html'):
            continue
        dest_file = os.path.join(project_dir, templates_dir, template_file)
        if os.path.exists(dest_file):
            print(f"Template already exists: {templates_dir}/{template_file}")
        else:
            shutil.copy2(os.path.join(PACKAGE_TEMPLATES_DIR, template_file), dest_file)
            print(f"Created template: {templates_dir}/{template_file}")
