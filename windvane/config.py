"""Project paths and site configuration for Windvane.

SitePaths is built once at program entry and handed to every component that
needs to touch the filesystem. SiteConfig holds the site-wide values read from
windvane.yaml.

Key functions:
- load_config: Loads site configuration from windvane.yaml.
- check_directories: Verifies the required source directories exist.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigError, DirectoryError

CONFIG_FILENAME = "windvane.yaml"

DEFAULT_SITE_TITLE = "Windvane Site"
DEFAULT_SITE_DESCRIPTION = "This is a static site generated with Windvane."


@dataclass(frozen=True)
class SitePaths:
    """Filesystem layout of a Windvane project.

    Attributes:
        root: Project root directory.
        content_dir: Root-level markdown and HTML pages.
        posts_dir: Post markdown files.
        templates_dir: Base layout, page partial and post partial.
        static_dir: Assets copied verbatim into the output.
        output_dir: Generated site, rebuilt from scratch on every run.
        config_path: Site configuration file.
    """

    root: Path
    content_dir: Path
    posts_dir: Path
    templates_dir: Path
    static_dir: Path
    output_dir: Path
    config_path: Path

    @classmethod
    def from_root(cls, root: Path) -> SitePaths:
        root = Path(root).resolve()
        content_dir = root / "content"
        return cls(
            root=root,
            content_dir=content_dir,
            posts_dir=content_dir / "posts",
            templates_dir=root / "templates",
            static_dir=root / "static",
            output_dir=root / "public",
            config_path=root / CONFIG_FILENAME,
        )

    @property
    def required_dirs(self) -> tuple[Path, ...]:
        return (self.content_dir, self.posts_dir, self.templates_dir)


@dataclass(frozen=True)
class SiteConfig:
    """Site-wide values available to every template.

    Attributes:
        site_title: Title of the site.
        site_description: Short description of the site.
    """

    site_title: str = DEFAULT_SITE_TITLE
    site_description: str = DEFAULT_SITE_DESCRIPTION


def load_config(config_path: Path) -> SiteConfig:
    """Load site configuration from a YAML file.

    Args:
        config_path: Path to windvane.yaml.

    Returns:
        SiteConfig with defaults applied for missing or empty fields.

    Raises:
        ConfigError: If the file is missing, unreadable or not a YAML mapping.
    """
    if not config_path.is_file():
        raise ConfigError(
            f"You need to create a `{CONFIG_FILENAME}` in the directory you'd like "
            "to serve as your site.",
            config_path,
        )
    try:
        with open(config_path, encoding="utf-8") as f:
            loaded = yaml.safe_load(f)
    except OSError as exc:
        raise ConfigError(f"Could not read configuration: {exc}", config_path, exc) from exc
    except yaml.YAMLError as exc:
        raise ConfigError(
            f"There was a problem parsing the configuration: {exc}", config_path, exc
        ) from exc

    if loaded is None:
        loaded = {}
    if not isinstance(loaded, dict):
        raise ConfigError("Configuration must be a mapping of keys to values", config_path)

    return SiteConfig(
        site_title=_string_value(loaded, "site_title") or DEFAULT_SITE_TITLE,
        site_description=_string_value(loaded, "site_description")
        or DEFAULT_SITE_DESCRIPTION,
    )


def _string_value(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    return str(value)


def check_directories(paths: SitePaths) -> None:
    """Ensure every required source directory exists.

    Args:
        paths: Project layout.

    Raises:
        DirectoryError: For the first required directory that is missing.
    """
    for directory in paths.required_dirs:
        if not directory.is_dir():
            raise DirectoryError(
                "Directory does not exist. It must exist to continue generating a site.",
                directory,
            )
