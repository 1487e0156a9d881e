"""Windvane static site generator.

This package turns a directory of Markdown and HTML content into a static site
using Jinja2 templates. It can also watch the sources and rebuild on change
while serving the output over HTTP.

The main entry point is the CLI module, which provides commands for generating
the site once and for running the development server.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
