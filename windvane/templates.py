"""Template rendering for Windvane.

This module uses Jinja2 to compose output files from three fragments in the
templates directory:

- index.html: the base layout.
- page.html: partial for root pages, extends the base layout.
- post.html: partial for posts, extends the base layout.

Key classes:
- TemplateSet: The three fragments, read once per build.
- BuildContext: Site values available to every template.
- TemplateComposer: Compiles the fragments and renders pages and posts.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import jinja2
from jinja2 import DictLoader, Environment, StrictUndefined, select_autoescape
from markupsafe import Markup

from .config import SiteConfig
from .content import HTMLPage, MarkdownPage, Page
from .errors import SiteIOError, TemplateError

BASE_TEMPLATE = "index.html"
PAGE_TEMPLATE = "page.html"
POST_TEMPLATE = "post.html"

TEMPLATE_NAMES = (BASE_TEMPLATE, PAGE_TEMPLATE, POST_TEMPLATE)


@dataclass(frozen=True)
class TemplateSet:
    """Source text of the three template fragments.

    Attributes:
        base: Base layout.
        page: Page partial.
        post: Post partial.
    """

    base: str
    page: str
    post: str

    @classmethod
    def load(cls, templates_dir: Path) -> TemplateSet:
        """Read the fragments from a templates directory.

        Raises:
            SiteIOError: If a fragment is missing or unreadable.
        """
        sources = {}
        for name in TEMPLATE_NAMES:
            path = templates_dir / name
            try:
                sources[name] = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                raise SiteIOError(f"Could not read template: {exc}", path, exc) from exc
        return cls(
            base=sources[BASE_TEMPLATE],
            page=sources[PAGE_TEMPLATE],
            post=sources[POST_TEMPLATE],
        )

    def as_mapping(self) -> dict[str, str]:
        return {
            BASE_TEMPLATE: self.base,
            PAGE_TEMPLATE: self.page,
            POST_TEMPLATE: self.post,
        }


@dataclass(frozen=True)
class BuildContext:
    """Site values handed to templates.

    Attributes:
        config: Site configuration.
        posts: All posts, newest first.
        current_post: The post being rendered, set only while rendering posts.
    """

    config: SiteConfig
    posts: tuple[MarkdownPage, ...] = ()
    current_post: MarkdownPage | None = None

    def with_current(self, post: MarkdownPage) -> BuildContext:
        return dataclasses.replace(self, current_post=post)

    def template_vars(self) -> dict[str, Any]:
        return {
            "site": self.config,
            "site_title": self.config.site_title,
            "site_description": self.config.site_description,
            "posts": self.posts,
            "current_post": self.current_post,
        }


class TemplateComposer:
    """Renders pages and posts through the page and post partials.

    Both partials are compiled when the composer is created, so a template
    with a syntax error fails before anything is written.

    Attributes:
        env: Jinja2 environment over the cached fragments.
    """

    def __init__(self, templates: TemplateSet):
        """Compile the template fragments.

        Args:
            templates: Fragments read from the templates directory.

        Raises:
            TemplateError: If any fragment fails to parse.
        """
        self.env = Environment(
            loader=DictLoader(templates.as_mapping()),
            autoescape=select_autoescape(["html"]),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
        )
        try:
            self._base = self.env.get_template(BASE_TEMPLATE)
            self._page = self.env.get_template(PAGE_TEMPLATE)
            self._post = self.env.get_template(POST_TEMPLATE)
        except jinja2.TemplateSyntaxError as exc:
            raise TemplateError(
                f"Template syntax error on line {exc.lineno}: {exc.message}",
                Path(exc.name) if exc.name else None,
                exc,
            ) from exc
        except jinja2.TemplateError as exc:
            raise TemplateError(f"Could not load templates: {exc}", None, exc) from exc

    def render_page(self, page: Page, context: BuildContext) -> str:
        """Render a root page with the page partial.

        The page's HTML is available to the template as ``content`` and the
        page itself as ``page``.

        Args:
            page: Markdown or HTML page.
            context: Site context.

        Returns:
            Final HTML for the page.
        """
        if isinstance(page, MarkdownPage):
            content = page.html
        elif isinstance(page, HTMLPage):
            content = Markup(page.raw_html)
        else:
            raise TypeError(f"Unsupported page type: {type(page).__name__}")
        return self._execute(
            self._page,
            page.destination,
            content=content,
            page=page,
            **context.template_vars(),
        )

    def render_post(self, context: BuildContext) -> str:
        """Render the context's current post with the post partial.

        Args:
            context: Site context with current_post set.

        Returns:
            Final HTML for the post.
        """
        post = context.current_post
        if post is None:
            raise ValueError("render_post needs a context with current_post set")
        return self._execute(
            self._post,
            post.destination,
            content=post.final_html,
            page=post,
            **context.template_vars(),
        )

    def _execute(self, template: jinja2.Template, destination: Path, **variables: Any) -> str:
        try:
            return template.render(**variables)
        except jinja2.UndefinedError as exc:
            raise TemplateError(f"Undefined variable: {exc}", destination, exc) from exc
        except Exception as exc:
            raise TemplateError(
                f"{type(exc).__name__}: {exc}", destination, exc
            ) from exc
