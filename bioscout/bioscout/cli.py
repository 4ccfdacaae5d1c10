"""CLI entry point for bioscout."""

from __future__ import annotations

import asyncio
import logging
import sys
from dataclasses import replace

import click

from bioscout.config import Config
from bioscout.models import DiscoveryOptions
from bioscout.orchestrator import DiscoveryOrchestrator, HandleResolutionError


def _parse_overrides(values: tuple[str, ...]) -> dict[str, str]:
    overrides: dict[str, str] = {}
    for value in values:
        platform, sep, handle = value.partition("=")
        if not sep or not platform.strip():
            raise click.BadParameter(f"expected platform=handle, got {value!r}", param_hint="--handle")
        overrides[platform.strip().lower()] = handle
    return overrides


@click.command()
@click.argument("query")
@click.option("--platform", "-p", multiple=True, help="Platform to search (repeatable; default: all)")
@click.option("--handle", "-H", multiple=True, help="Per-platform handle override, e.g. tiktok=someone")
@click.option("--timeout", type=float, default=None, help="Per-platform timeout in seconds")
@click.option("--deadline", type=float, default=None, help="Overall run deadline in seconds")
@click.option("--no-expand", is_flag=True, help="Skip redirect expansion of links")
@click.option("--output", "-o", default=None, help="Write the full profile as JSON to this path")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(
    query: str,
    platform: tuple[str, ...],
    handle: tuple[str, ...],
    timeout: float | None,
    deadline: float | None,
    no_expand: bool,
    output: str | None,
    verbose: bool,
) -> None:
    """bioscout — discover a creator's links and commercial profile."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = Config.from_env()
    if no_expand:
        config = replace(config, expand_links=False)

    options = DiscoveryOptions(
        platforms=[p.lower() for p in platform] or None,
        per_platform_timeout=timeout,
        handle_overrides=_parse_overrides(handle),
        run_deadline=deadline,
    )

    orchestrator = DiscoveryOrchestrator(config=config)
    targets = options.platforms or orchestrator.registry.platforms()
    click.echo(f"bioscout v0.1.0 — searching {len(targets)} platform(s) for {query}...\n")

    try:
        profile = asyncio.run(orchestrator.discover(query, options))
    except HandleResolutionError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    from bioscout.output import render_summary, write_profile

    for line in render_summary(profile):
        click.echo(line)

    if output:
        path = write_profile(profile, output)
        click.echo(f"\n✓ Written to {path}")


if __name__ == "__main__":
    main()
