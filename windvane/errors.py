"""Error taxonomy for Windvane.

Every failure the pipeline can report derives from WindvaneError. The
pipeline only raises; the caller decides what a failure means. The CLI aborts
a one-shot build, the dev server logs the error and keeps serving.
"""

from __future__ import annotations

from pathlib import Path


class WindvaneError(Exception):
    """Base error with optional file context.

    Attributes:
        message: Human-readable error message.
        source_path: Path to the file that caused the error, when known.
        original_error: The underlying exception, when there is one.
    """

    def __init__(
        self,
        message: str,
        source_path: Path | None = None,
        original_error: Exception | None = None,
    ):
        self.message = message
        self.source_path = source_path
        self.original_error = original_error
        if source_path is not None:
            super().__init__(f"{source_path}: {message}")
        else:
            super().__init__(message)


class ConfigError(WindvaneError):
    """Site configuration is missing or cannot be parsed."""


class DirectoryError(WindvaneError):
    """A required source directory does not exist."""


class ParseError(WindvaneError):
    """Malformed front matter or an unparseable date."""


class SlugCollisionError(ParseError):
    """Two content files resolve to the same output file."""


class TemplateError(WindvaneError):
    """A template failed to parse or to render."""


class SiteIOError(WindvaneError):
    """Reading, writing or copying a file failed."""


class WatchError(WindvaneError):
    """Filesystem watching could not be set up."""
