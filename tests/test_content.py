from datetime import datetime, timezone
from pathlib import Path

import pytest
from markupsafe import Markup

from windvane.content import (
    ContentFile,
    ContentKind,
    HTMLPage,
    discover_post_files,
    discover_root_files,
    list_content_files,
    load_html_page,
    load_markdown_page,
    page_slug,
    sort_posts,
)
from windvane.errors import SiteIOError


def test_list_content_files_sorted_with_destinations(project):
    for name in ["b.md", "a.md", "c.md", "skip.txt"]:
        (project.content_dir / name).write_text("x", encoding="utf-8")
    (project.content_dir / "dir.md").mkdir()

    files = list_content_files(project.content_dir, "md", project)
    assert [f.filename for f in files] == ["a", "b", "c"]
    assert files[0].source == project.content_dir / "a.md"
    assert files[0].destination == Path("a.html")
    assert all(f.kind is ContentKind.MARKDOWN for f in files)


def test_post_files_go_under_posts(project):
    (project.posts_dir / "first.post.md").write_text("x", encoding="utf-8")
    files = list_content_files(project.posts_dir, "md", project)
    assert files == [
        ContentFile(
            source=project.posts_dir / "first.post.md",
            destination=Path("posts/first.html"),
            filename="first",
            kind=ContentKind.MARKDOWN,
        )
    ]


def test_list_content_files_rejects_other_directories(project):
    with pytest.raises(ValueError):
        list_content_files(project.templates_dir, "html", project)


def test_discover_root_files_orders_by_kind(project):
    (project.content_dir / "zeta.md").write_text("x", encoding="utf-8")
    (project.content_dir / "alpha.html").write_text("<p>x</p>", encoding="utf-8")
    (project.content_dir / "long.markdown").write_text("x", encoding="utf-8")
    (project.posts_dir / "ignored.md").write_text("x", encoding="utf-8")

    files = discover_root_files(project)
    assert [(f.filename, f.kind) for f in files] == [
        ("zeta", ContentKind.MARKDOWN),
        ("long", ContentKind.MARKDOWN),
        ("alpha", ContentKind.HTML),
    ]


def test_load_markdown_post_uses_title_slug(project, write_post):
    write_post("2024-intro.md", "Hello There, World", "01 Jun 24 00:00 UTC", body="| a | b |\n|---|---|\n| 1 | 2 |")
    (content_file,) = discover_post_files(project)

    post = load_markdown_page(content_file, post=True)
    assert post.slug == "hello-there-world"
    assert post.destination == Path("posts/hello-there-world.html")
    assert post.rel_link == "posts/hello-there-world.html"
    assert post.filename == "2024-intro"
    assert post.date == datetime(2024, 6, 1, tzinfo=timezone.utc)
    assert post.kind == "md"
    assert isinstance(post.final_html, Markup)
    assert "<table>" in post.final_html
    assert post.raw_markdown.startswith("| a | b |")


def test_load_markdown_root_page_keeps_discovered_destination(project):
    (project.content_dir / "about.md").write_text(
        "###\ntitle: About Me\n###\n# Hi\n\nSee https://example.com\n", encoding="utf-8"
    )
    (content_file,) = discover_root_files(project)
    page = load_markdown_page(content_file)
    assert page.destination == Path("about.html")
    assert page.slug == "about-me"
    assert '<a href="https://example.com">' in page.html
    assert "<h1>Hi</h1>" in page.html


def test_untitled_post_falls_back_to_filename(project):
    (project.posts_dir / "My_Notes.md").write_text("no header", encoding="utf-8")
    (content_file,) = discover_post_files(project)
    post = load_markdown_page(content_file, post=True)
    assert post.title == ""
    assert post.slug == "my-notes"
    assert post.destination == Path("posts/my-notes.html")


def test_page_slug_fallbacks():
    assert page_slug("Title", "file") == "title"
    assert page_slug("", "Some File") == "some-file"
    assert page_slug("???", "日本") == "日本"


def test_load_html_page_passes_through(project):
    (project.content_dir / "raw.html").write_text("<p>{{ not a template }}</p>", encoding="utf-8")
    (content_file,) = discover_root_files(project)
    page = load_html_page(content_file)
    assert isinstance(page, HTMLPage)
    assert page.kind == "html"
    assert page.title == ""
    assert page.final_html == Markup("<p>{{ not a template }}</p>")
    assert page.destination == Path("raw.html")


def test_unreadable_file_is_io_error(project):
    missing = ContentFile(
        source=project.content_dir / "gone.md",
        destination=Path("gone.html"),
        filename="gone",
        kind=ContentKind.MARKDOWN,
    )
    with pytest.raises(SiteIOError):
        load_markdown_page(missing)


def test_sort_posts_newest_first_and_stable(project, write_post):
    write_post("a.md", "Middle", "01 Jan 23 00:00 UTC")
    write_post("b.md", "Newest", "01 Jun 24 00:00 UTC")
    write_post("c.md", "Oldest", "31 Dec 22 00:00 UTC")
    write_post("d.md", "Tie One", "01 Jan 23 00:00 UTC")
    (project.posts_dir / "e.md").write_text("###\ntitle: Undated\n###\n", encoding="utf-8")

    posts = sort_posts([load_markdown_page(f, post=True) for f in discover_post_files(project)])
    assert [p.title for p in posts] == ["Newest", "Middle", "Tie One", "Oldest", "Undated"]
