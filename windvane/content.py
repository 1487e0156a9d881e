"""Content discovery and page modeling for Windvane.

This module finds content files on disk, computes where each one is written,
and turns them into page values ready for templating.

Key classes:
- ContentFile: A discovered source file and its destination.
- MarkdownPage: A markdown page or post with front matter and rendered HTML.
- HTMLPage: A raw HTML page passed through verbatim.

Page is the closed union of MarkdownPage and HTMLPage. Code that renders a
page handles both variants explicitly.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Union

from markupsafe import Markup

from .config import SitePaths
from .errors import SiteIOError
from .frontmatter import PageMetadata, parse_front_matter
from .renderers import render_markdown
from .utils import base_filename, format_ansic, slugify

logger = logging.getLogger(__name__)

POSTS_DIRNAME = "posts"

MARKDOWN_EXTENSIONS = ("md", "markdown")
HTML_EXTENSION = "html"


class ContentKind(Enum):
    MARKDOWN = "md"
    HTML = "html"


@dataclass(frozen=True)
class ContentFile:
    """A content file found on disk.

    Attributes:
        source: Path to the source file.
        destination: Output path relative to the output directory.
        filename: Source file name up to its first dot.
        kind: Whether the file is markdown or raw HTML.
    """

    source: Path
    destination: Path
    filename: str
    kind: ContentKind


@dataclass(frozen=True)
class MarkdownPage:
    """A markdown page or post.

    Attributes:
        metadata: Values from the front matter block.
        slug: URL slug derived from the title.
        filename: Source file name up to its first dot.
        raw_markdown: Markdown body without the header.
        html: Rendered body.
        destination: Output path relative to the output directory.
        rel_link: Site-relative link to the rendered post.
    """

    metadata: PageMetadata
    slug: str
    filename: str
    raw_markdown: str
    html: Markup
    destination: Path
    rel_link: str

    @property
    def kind(self) -> str:
        return ContentKind.MARKDOWN.value

    @property
    def final_html(self) -> Markup:
        return self.html

    @property
    def title(self) -> str:
        return self.metadata.title

    @property
    def date(self) -> datetime:
        return self.metadata.date

    @property
    def category(self) -> str:
        return self.metadata.category

    @property
    def formatted_date(self) -> str:
        return format_ansic(self.metadata.date)


@dataclass(frozen=True)
class HTMLPage:
    """A raw HTML page, written out inside the page layout unchanged.

    Attributes:
        raw_html: File content.
        filename: Source file name up to its first dot.
        destination: Output path relative to the output directory.
    """

    raw_html: str
    filename: str
    destination: Path

    @property
    def kind(self) -> str:
        return ContentKind.HTML.value

    @property
    def final_html(self) -> Markup:
        return Markup(self.raw_html)

    @property
    def title(self) -> str:
        return ""


Page = Union[MarkdownPage, HTMLPage]


def is_markdown(extension: str) -> bool:
    return extension.lower() in MARKDOWN_EXTENSIONS


def list_content_files(directory: Path, extension: str, paths: SitePaths) -> list[ContentFile]:
    """List content files with the given extension in a directory.

    Only the directory itself is searched. Files are returned sorted by name
    so builds are reproducible.

    Args:
        directory: Either the content directory or the posts directory.
        extension: Extension without the dot, e.g. ``md``.
        paths: Project layout.

    Returns:
        List of ContentFile records.

    Raises:
        ValueError: If directory is neither the content nor the posts directory.
    """
    if directory == paths.content_dir:
        prefix = Path()
    elif directory == paths.posts_dir:
        prefix = Path(POSTS_DIRNAME)
    else:
        raise ValueError(f"Not a content directory: {directory}")

    kind = ContentKind.MARKDOWN if is_markdown(extension) else ContentKind.HTML
    files: list[ContentFile] = []
    for path in sorted(directory.glob(f"*.{extension}"), key=lambda p: p.name):
        if not path.is_file():
            continue
        name = base_filename(path)
        files.append(
            ContentFile(
                source=path,
                destination=prefix / f"{name}.html",
                filename=name,
                kind=kind,
            )
        )
    return files


def discover_root_files(paths: SitePaths) -> list[ContentFile]:
    """Root markdown files (``.md`` then ``.markdown``) followed by root HTML files."""
    files: list[ContentFile] = []
    for extension in MARKDOWN_EXTENSIONS:
        files.extend(list_content_files(paths.content_dir, extension, paths))
    files.extend(list_content_files(paths.content_dir, HTML_EXTENSION, paths))
    return files


def discover_post_files(paths: SitePaths) -> list[ContentFile]:
    files: list[ContentFile] = []
    for extension in MARKDOWN_EXTENSIONS:
        files.extend(list_content_files(paths.posts_dir, extension, paths))
    return files


def read_source(path: Path) -> str:
    """Read a content file as UTF-8 text.

    Raises:
        SiteIOError: If the file cannot be read or decoded.
    """
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SiteIOError(f"There was an error reading the file: {exc}", path, exc) from exc


def load_markdown_page(
    content_file: ContentFile,
    post: bool = False,
    render: Callable[[str], str] = render_markdown,
) -> MarkdownPage:
    """Build a MarkdownPage from a markdown source file.

    Posts are written to ``posts/<slug>.html``; root pages keep the
    destination computed at discovery.

    Args:
        content_file: Discovered markdown file.
        post: Whether the file is a post.
        render: Markdown to HTML function.

    Returns:
        MarkdownPage with its body rendered.
    """
    logger.info("Parsing %s", content_file.filename)
    raw = read_source(content_file.source)
    metadata, body = parse_front_matter(raw, content_file.source)

    slug = page_slug(metadata.title, content_file.filename)
    if post:
        destination = Path(POSTS_DIRNAME) / f"{slug}.html"
    else:
        destination = content_file.destination
    rel_link = destination.as_posix()

    return MarkdownPage(
        metadata=metadata,
        slug=slug,
        filename=content_file.filename,
        raw_markdown=body,
        html=Markup(render(body)),
        destination=destination,
        rel_link=rel_link,
    )


def load_html_page(content_file: ContentFile) -> HTMLPage:
    return HTMLPage(
        raw_html=read_source(content_file.source),
        filename=content_file.filename,
        destination=content_file.destination,
    )


def page_slug(title: str, filename: str) -> str:
    """Slug for a page: from the title, else from the file name."""
    return slugify(title) or slugify(filename) or filename


def sort_posts(posts: list[MarkdownPage]) -> list[MarkdownPage]:
    """Sort posts newest first. Posts with the same date keep their order."""
    return sorted(posts, key=lambda p: p.date, reverse=True)
