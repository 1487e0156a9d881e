"""Command-line interface for Windvane.

This module defines the CLI commands using Click framework.

Commands:
- generate: Build the site into public/.
- serve: Build, then watch for changes and serve the output over HTTP.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click

from . import __version__
from .config import SitePaths
from .errors import WindvaneError
from .server import DEFAULT_BIND


@click.group()
@click.version_option(version=__version__, prog_name="windvane")
@click.option(
    "--root",
    type=click.Path(file_okay=False, path_type=Path),
    default=".",
    show_default=True,
    help="Project directory containing content/, templates/ and windvane.yaml",
)
@click.option("-v", "--verbose", is_flag=True, help="Log debug output")
@click.pass_context
def cli(ctx: click.Context, root: Path, verbose: bool):
    """Windvane static site generator."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(message)s",
    )
    ctx.obj = SitePaths.from_root(root)


@cli.command()
@click.pass_obj
def generate(paths: SitePaths):
    """Build the site into public/."""
    from .build import build_site

    try:
        result = build_site(paths)
    except WindvaneError as exc:
        _report_failure(exc, paths)
        raise SystemExit(1) from None
    click.echo(f"Built {result.file_count} files into {result.output_dir}")


@cli.command()
@click.option(
    "--bind",
    default=DEFAULT_BIND,
    show_default=True,
    help="Address to serve on, as HOST:PORT",
)
@click.pass_obj
def serve(paths: SitePaths, bind: str):
    """Build the site, then rebuild on change while serving it."""
    from .server import DevServer

    try:
        server = DevServer(paths, bind=bind)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--bind") from exc
    try:
        server.start()
    except WindvaneError as exc:
        _report_failure(exc, paths)
        raise SystemExit(1) from None


def _report_failure(exc: WindvaneError, paths: SitePaths) -> None:
    """Print a build error in a readable form."""
    click.echo(click.style("Build failed:", fg="red", bold=True), err=True)
    if exc.source_path is not None:
        try:
            shown = exc.source_path.relative_to(paths.root)
        except ValueError:
            shown = exc.source_path
        click.echo(click.style(f"  File: {shown}", fg="yellow"), err=True)
    click.echo(click.style(f"  Error: {type(exc).__name__}: {exc.message}", fg="white"), err=True)


def main():
    """Entry point for the CLI application."""
    cli()
