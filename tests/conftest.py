from pathlib import Path

import pytest

from windvane.config import SitePaths

BASE_TEMPLATE = (
    "<html><head><title>{{ site_title }}</title>"
    '<meta name="description" content="{{ site_description }}"></head>'
    "<body>{% block content %}{% endblock %}</body></html>\n"
)
PAGE_TEMPLATE = '{% extends "index.html" %}{% block content %}{{ content }}{% endblock %}'
POST_TEMPLATE = (
    '{% extends "index.html" %}{% block content %}'
    "<h1>{{ current_post.title }}</h1>"
    "<time>{{ current_post.formatted_date }}</time>"
    "{{ current_post.final_html }}"
    "<ul>{% for post in posts %}"
    '<li><a href="/{{ post.rel_link }}">{{ post.title }}</a></li>'
    "{% endfor %}</ul>"
    "{% endblock %}"
)


def create_project(root: Path) -> SitePaths:
    paths = SitePaths.from_root(root)
    paths.posts_dir.mkdir(parents=True)
    paths.templates_dir.mkdir()
    (paths.static_dir / "css").mkdir(parents=True)

    paths.config_path.write_text(
        "site_title: Test Site\nsite_description: Just testing\n", encoding="utf-8"
    )
    (paths.templates_dir / "index.html").write_text(BASE_TEMPLATE, encoding="utf-8")
    (paths.templates_dir / "page.html").write_text(PAGE_TEMPLATE, encoding="utf-8")
    (paths.templates_dir / "post.html").write_text(POST_TEMPLATE, encoding="utf-8")
    (paths.static_dir / "css" / "main.css").write_text("body { color: red; }", encoding="utf-8")
    return paths


@pytest.fixture
def project(tmp_path) -> SitePaths:
    return create_project(tmp_path)


@pytest.fixture
def write_post(project):
    def _write(name: str, title: str, date: str, body: str = "Body text.") -> Path:
        path = project.posts_dir / name
        path.write_text(
            f"###\ntitle: {title}\ndate: {date}\n###\n{body}\n", encoding="utf-8"
        )
        return path

    return _write
