"""Site building functionality for Windvane.

This module contains the core logic for building a static site from source files.
It validates the project, loads configuration and templates, processes content,
renders templates, writes output files and copies static assets.

Every step raises a WindvaneError on failure and stops the build. Whether that
ends the program is up to the caller.

Key functions:
- build_site: Main function to build the entire site.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from .config import SitePaths, check_directories, load_config
from .content import (
    POSTS_DIRNAME,
    ContentKind,
    HTMLPage,
    MarkdownPage,
    Page,
    discover_post_files,
    discover_root_files,
    load_html_page,
    load_markdown_page,
    sort_posts,
)
from .errors import SiteIOError, SlugCollisionError
from .templates import BuildContext, TemplateComposer, TemplateSet
from .utils import copy_tree, ensure_clean_dir

logger = logging.getLogger(__name__)

STATIC_DIRNAME = "static"


@dataclass
class BuildResult:
    """Result of a site build operation.

    Attributes:
        output_dir: Directory where the site was built.
        pages: Root pages written.
        posts: Posts written, newest first.
    """

    output_dir: Path
    pages: list[Page] = field(default_factory=list)
    posts: list[MarkdownPage] = field(default_factory=list)

    @property
    def file_count(self) -> int:
        return len(self.pages) + len(self.posts)


def build_site(paths: SitePaths, output_dir: Path | None = None) -> BuildResult:
    """Build the entire static site.

    Args:
        paths: Project layout.
        output_dir: Optional directory to write the build into instead of
            paths.output_dir.

    Returns:
        BuildResult describing what was written.
    """
    destination = output_dir or paths.output_dir

    check_directories(paths)
    config = load_config(paths.config_path)
    logger.info("Caching templates")
    composer = TemplateComposer(TemplateSet.load(paths.templates_dir))

    logger.info("Making public directory")
    make_output_dir(destination)

    logger.info("Collecting content")
    root_files = discover_root_files(paths)
    post_files = discover_post_files(paths)
    logger.info("Found %d files", len(root_files) + len(post_files))

    logger.info("Parsing posts")
    posts = sort_posts([load_markdown_page(f, post=True) for f in post_files])

    pages: list[Page] = []
    for content_file in root_files:
        if content_file.kind is ContentKind.MARKDOWN:
            pages.append(load_markdown_page(content_file))
        else:
            pages.append(load_html_page(content_file))
    _check_collisions(pages, posts, paths)

    context = BuildContext(config=config, posts=tuple(posts))

    logger.info("Generating site")
    for page in pages:
        _write_output(destination, page.destination, composer.render_page(page, context))
    for post in posts:
        rendered = composer.render_post(context.with_current(post))
        _write_output(destination, post.destination, rendered)

    copy_static(paths.static_dir, destination / STATIC_DIRNAME)
    logger.info("Done!")
    return BuildResult(output_dir=destination, pages=pages, posts=posts)


def make_output_dir(output_dir: Path) -> None:
    """Remove the output tree and recreate it with an empty posts directory."""
    try:
        ensure_clean_dir(output_dir)
        (output_dir / POSTS_DIRNAME).mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise SiteIOError(f"Could not recreate output directory: {exc}", output_dir, exc) from exc


def copy_static(static_dir: Path, dest: Path) -> None:
    """Copy the static asset tree verbatim into the output."""
    if not static_dir.is_dir():
        logger.info("No static directory at %s; skipping assets", static_dir)
        return
    logger.info("Copying static assets")
    try:
        copy_tree(static_dir, dest)
    except OSError as exc:
        raise SiteIOError(f"Could not copy static assets: {exc}", static_dir, exc) from exc


def _write_output(output_dir: Path, relative: Path, rendered: str) -> None:
    target = output_dir / relative
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "w", encoding="utf-8") as f:
            f.write(rendered)
    except OSError as exc:
        raise SiteIOError(f"Could not write output: {exc}", target, exc) from exc


def _source_name(page: Page) -> str:
    if isinstance(page, MarkdownPage):
        return f"{page.filename} ({page.title or 'untitled'})"
    if isinstance(page, HTMLPage):
        return page.filename
    raise TypeError(f"Unsupported page type: {type(page).__name__}")


def _check_collisions(pages: list[Page], posts: list[MarkdownPage], paths: SitePaths) -> None:
    """Reject two content files that would be written to the same output file."""
    seen: dict[Path, Page] = {}
    for page in [*pages, *posts]:
        previous = seen.get(page.destination)
        if previous is not None:
            raise SlugCollisionError(
                f"{_source_name(previous)} and {_source_name(page)} both resolve to "
                f"{page.destination.as_posix()}",
                paths.output_dir / page.destination,
            )
        seen[page.destination] = page
