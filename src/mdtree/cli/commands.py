"""CLI command implementations"""

from pathlib import Path
from typing import Annotated, Optional

import typer

from mdtree.config import Settings, load_config
from mdtree.core.blog import BlogReader
from mdtree.core.build import build
from mdtree.core.errors import ConfigurationError
from mdtree.core.models import dump_json


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))


def _reader(settings: Settings) -> BlogReader:
    try:
        return BlogReader.from_settings(settings, Path.cwd())
    except ConfigurationError as e:
        _fail(str(e))


def build_cmd(
    source: Annotated[Optional[str], typer.Option("--source-dir", help="Source directory")] = None,
    out: Annotated[Optional[str], typer.Option("--output-dir", help="Output directory inside public/")] = None,
    prefix: Annotated[Optional[str], typer.Option("--prefix", help="Index file name prefix")] = None,
    route_base: Annotated[Optional[str], typer.Option("--route-base", help="URL prefix for served output")] = None,
    clean: Annotated[Optional[bool], typer.Option("--clean/--no-clean", help="Delete output dir first")] = None,
    ):
    """Mirror the source tree into the output dir and write the index envelope."""
    settings = _settings(overrides={
        "source_dir": source, "output_dir": out, "prefix": prefix,
        "route_base": route_base, "clean_output": clean,
    })
    try:
        result = build(settings, Path.cwd())
    except ConfigurationError as e:
        _fail(str(e))

    for warning in result.warnings:
        typer.echo(f"  warning: {warning}", err=True)
    typer.echo(
        f"Build complete - "
        f"{result.markdown_count} markdown, "
        f"{result.file_count} files, "
        f"{len(result.warnings)} warnings"
    )
    typer.echo(f"Index written to {result.index_path}")


def list_cmd():
    """List blog post summaries, newest first."""
    summaries = _reader(_settings()).list_summaries()
    if not summaries:
        typer.echo("No blog posts found.")
        return
    for s in summaries:
        typer.echo(f"{s.date or '-':<25} {s.slug:<30} {s.title}")


def show_cmd(
    slug: Annotated[str, typer.Argument(help="Blog post slug")],
    ):
    """Print one blog post as JSON."""
    post = _reader(_settings()).read_one(slug)
    if post is None:
        typer.echo(f"Blog post not found: {slug}", err=True)
        raise typer.Exit(1)
    typer.echo(dump_json(post))


def routes_cmd():
    """Print blog routes for static generation."""
    for route in _reader(_settings()).list_routes():
        typer.echo(route.url_path)
