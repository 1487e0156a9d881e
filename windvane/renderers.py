"""Markdown rendering for Windvane.

Markdown is converted with mistune using a fixed "common" feature set:
tables, fenced code blocks, autolinks and strikethrough. Raw HTML in the
source is passed through untouched.
"""

from __future__ import annotations

import mistune

COMMON_PLUGINS = ["table", "url", "strikethrough"]

_markdown = mistune.create_markdown(escape=False, plugins=COMMON_PLUGINS)


def render_markdown(text: str) -> str:
    """Render Markdown content to HTML.

    Args:
        text: Markdown source, without front matter.

    Returns:
        Rendered HTML.
    """
    return _markdown(text)
