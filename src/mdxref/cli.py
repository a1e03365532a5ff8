"""CLI entry point for mdxref."""

from __future__ import annotations

import asyncio
import logging
import sys

import click

from mdxref import __version__


@click.group()
@click.version_option(version=__version__, prog_name="mdxref")
def main() -> None:
    """mdxref: cross-reference resolver for converted Markdown batches."""
    pass


@main.command()
@click.argument("manifest")
@click.option(
    "-c",
    "--config",
    "config_path",
    default=None,
    help="Path to config file (default: ~/.mdxref/config.yaml)",
)
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    help="Enable verbose (DEBUG) logging and list example issues",
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Resolve links without writing any file",
)
def resolve(manifest: str, config_path: str | None, verbose: bool, dry_run: bool) -> None:
    """Rewrite site links in every document of a converted batch."""
    from mdxref.adapters.manifest import load_manifest
    from mdxref.config import load_config
    from mdxref.container import Container
    from mdxref.report import render_summary
    from mdxref.runner import run_resolution

    try:
        config = load_config(config_path)
    except Exception as e:
        click.echo(f"Error loading config: {e}", err=True)
        sys.exit(1)

    _setup_logging(verbose, config.log_level)

    try:
        batch = load_manifest(manifest)
    except Exception as e:
        click.echo(f"Error loading manifest: {e}", err=True)
        sys.exit(1)

    container = Container.create_default(config, batch)
    summary = asyncio.run(run_resolution(container, dry_run=dry_run))

    for line in render_summary(summary, container.tracker.link_issues, verbose=verbose):
        click.echo(line)


@main.command()
@click.argument("search")
@click.argument("candidates", nargs=-1, required=True)
@click.option(
    "--max-step",
    type=click.IntRange(1, 12),
    default=None,
    help="Last matching strategy to try (1 = exact only)",
)
def match(search: str, candidates: tuple[str, ...], max_step: int | None) -> None:
    """Show which candidate anchor SEARCH matches, and why."""
    from mdxref.anchors.matcher import explain_match

    result = explain_match(search, list(candidates), max_step)
    if result is None:
        click.echo("No match")
        sys.exit(1)

    found, strategy = result
    click.echo(f"{found.anchor} (step {found.step}: {strategy})")


@main.command()
@click.argument("text")
def anchor(text: str) -> None:
    """Print the anchor generated for a heading TEXT and its variants."""
    from mdxref.anchors.generator import anchor_variants, generate_anchor

    slug = generate_anchor(text)
    if not slug:
        click.echo("(empty anchor)")
        return

    variants = anchor_variants(slug)
    click.echo(slug)
    for variant in variants[1:]:
        click.echo(f"  variant: {variant}")


def _setup_logging(verbose: bool, level: str = "INFO") -> None:
    """Configure logging for a CLI run."""
    resolved = logging.DEBUG if verbose else getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=resolved,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
    )
