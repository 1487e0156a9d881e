"""Front matter parsing for Windvane.

A content file may start with a header block delimited by two ``###`` lines::

    ###
    title: this is a post title
    date: 20 Mar 15 15:35 PDT
    category: computers
    ###

Every line between the markers is a ``key: value`` pair. Only ``title``,
``date`` and ``category`` are used; other keys are ignored.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from pathlib import Path

from .errors import ParseError

MARKER = "###"

# Posts without a date sort after every dated post.
DEFAULT_DATE = datetime.min.replace(tzinfo=timezone.utc)

_ZONE_RE = re.compile(r"^(?:[A-Za-z]+|[+-]\d{4})$")


@dataclass(frozen=True)
class PageMetadata:
    """Values read from a front matter block.

    Attributes:
        title: Page title.
        date: Publication date, timezone aware.
        category: Free-form category name.
    """

    title: str = ""
    date: datetime = DEFAULT_DATE
    category: str = ""


def parse_date(value: str, source: Path | None = None) -> datetime:
    """Parse an RFC 822 style date such as ``02 Jan 06 15:04 MST``.

    Weekday prefixes, seconds, four digit years and numeric offsets are
    accepted as well. The zone is required; an abbreviation that is not
    recognised is read as UTC.

    Args:
        value: Date text from the header.
        source: File the value came from, for error messages.

    Returns:
        Timezone-aware datetime.

    Raises:
        ParseError: If the value is not a date or has no zone.
    """
    tokens = value.split()
    if not tokens or not _ZONE_RE.match(tokens[-1]):
        raise ParseError(f"Malformed date string: missing zone in {value!r}", source)
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError) as exc:
        raise ParseError(f"Malformed date string: can't parse date {value!r}", source, exc) from exc
    if parsed is None:
        raise ParseError(f"Malformed date string: can't parse date {value!r}", source)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_front_matter(text: str, source: Path | None = None) -> tuple[PageMetadata, str]:
    """Split raw content into metadata and body.

    Args:
        text: Raw file content.
        source: File the content came from, for error messages.

    Returns:
        Tuple of (metadata, body). Without a header the metadata holds the
        defaults and the body is the input unchanged.

    Raises:
        ParseError: If the header is never closed, a header line is not a
            ``key: value`` pair, or the date cannot be parsed.
    """
    lines = text.split("\n")
    if not _is_marker(lines[0]):
        return PageMetadata(), text

    fields: dict[str, str] = {}
    for index, line in enumerate(lines[1:], start=1):
        if _is_marker(line):
            body = "\n".join(lines[index + 1 :])
            return _build_metadata(fields, source), body
        key, sep, value = line.partition(":")
        if not sep:
            raise ParseError(
                f"Malformed header line {index + 1}: expected 'key: value', got {line!r}",
                source,
            )
        fields[key.strip()] = value.strip()

    raise ParseError("Possible malformed header. Reached end of input.", source)


def _is_marker(line: str) -> bool:
    return line.rstrip("\r") == MARKER


def _build_metadata(fields: dict[str, str], source: Path | None) -> PageMetadata:
    date = DEFAULT_DATE
    if "date" in fields:
        date = parse_date(fields["date"], source)
    return PageMetadata(
        title=fields.get("title", ""),
        date=date,
        category=fields.get("category", ""),
    )
