"""Utility functions for Windvane.

Key functions:
    slugify: Convert a title to a URL slug.
    base_filename: Name of a file up to its first dot.
    format_ansic: Format a datetime the way ``date`` on Unix does.
    ensure_clean_dir: Ensure a directory exists and is empty.
    copy_tree: Copy a directory tree verbatim.
"""

from __future__ import annotations

import re
import shutil
import unicodedata
from datetime import datetime
from pathlib import Path

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


def slugify(text: str) -> str:
    """Convert text to a lowercase, hyphenated ASCII slug.

    Accented letters are decomposed and reduced to their ASCII base; every run
    of other characters becomes a single hyphen.

    Args:
        text: Title or filename text.

    Returns:
        URL-friendly slug, empty when nothing usable remains.

    Examples:
        >>> slugify("Hello, World!")
        'hello-world'

        >>> slugify("Crème Brûlée")
        'creme-brulee'
    """
    normalized = unicodedata.normalize("NFKD", text)
    ascii_text = normalized.encode("ascii", "ignore").decode("ascii")
    return _NON_ALNUM_RE.sub("-", ascii_text.lower()).strip("-")


def base_filename(path: Path) -> str:
    """Return the file name up to its first dot.

    Examples:
        >>> base_filename(Path("content/about.md"))
        'about'
    """
    return path.name.split(".", 1)[0]


def format_ansic(value: datetime) -> str:
    """Format a datetime as ``Mon Jan  2 15:04:05 2006``."""
    return f"{value:%a %b} {value.day:2d} {value:%H:%M:%S} {value.year:04d}"


def ensure_clean_dir(path: Path) -> None:
    """Ensure a directory exists and is empty.

    If the directory exists, removes it with all of its contents, then
    creates it again.

    Args:
        path: Directory path to clean or create.
    """
    if path.exists():
        shutil.rmtree(path)
    path.mkdir(parents=True, exist_ok=True)


def copy_tree(source: Path, dest: Path) -> None:
    """Copy every file and directory under source into dest.

    Existing files in dest are overwritten.

    Args:
        source: Directory to copy from.
        dest: Directory to copy into; created if missing.
    """
    shutil.copytree(source, dest, dirs_exist_ok=True)
