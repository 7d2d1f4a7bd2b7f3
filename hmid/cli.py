"""CLI entry point for the hypermedia id codec."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from hmid.ids import (
    UNSET,
    create_hm_id,
    hm_id_with_version,
    id_to_url,
    normalize_hm_id,
    unpack_hm_id,
)
from hmid.models.config import CodecConfig
from hmid.models.entity import CollapsedBlockRange, EntityType, ExpandedBlockRange
from hmid.variants import parse_variants_query

console = Console()
logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def load_config(path: str) -> CodecConfig:
    try:
        return CodecConfig.load(path)
    except FileNotFoundError:
        logger.debug("No config at %s, using defaults", path)
        return CodecConfig()
    except ValidationError as e:
        console.print(f"[red]Invalid config {path}:[/red] {e}")
        sys.exit(1)


def parse_range(value: Optional[str]) -> Optional[CollapsedBlockRange]:
    """Read a ``start:end`` option value."""
    if not value:
        return None
    start, sep, end = value.partition(":")
    if not sep or not start.isdigit() or not end.isdigit():
        raise click.BadParameter(f"expected START:END, got '{value}'", param_hint="--range")
    return CollapsedBlockRange(start=int(start), end=int(end))


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option("--config", "-c", default="hmid-config.json", help="Config file path")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config: str) -> None:
    """Hypermedia id codec: unpack, build and convert hm:// ids"""
    setup_logging(verbose)
    ctx.obj = load_config(config)


@cli.command()
@click.argument("hypermedia_id")
@click.option("--json", "as_json", is_flag=True, help="Print the record as JSON")
def unpack(hypermedia_id: str, as_json: bool) -> None:
    """Decode an hm:// id or gateway url."""
    unpacked = unpack_hm_id(hypermedia_id)
    if unpacked is None:
        console.print(f"[red]Not a hypermedia id: {hypermedia_id}[/red]")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(unpacked.model_dump(mode="json"), indent=2))
        return

    table = Table(title=unpacked.type.label)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    for field, value in unpacked.model_dump(mode="json").items():
        if value is None:
            continue
        table.add_row(field, json.dumps(value) if isinstance(value, (list, dict)) else str(value))
    console.print(table)


@cli.command()
@click.argument("entity_type", type=click.Choice([t.value for t in EntityType]))
@click.argument("eid")
@click.option("--version", "version", help="Pin a content version")
@click.option("--block-ref", "-b", help="8-character block id")
@click.option("--range", "block_range", help="Collapsed block range START:END")
@click.option("--expanded", is_flag=True, help="Reference the expanded block")
@click.option("--path", "group_path_name", help="Group path name")
@click.option("--variant", "variants", multiple=True, help="Variant token, e.g. a/<author>")
@click.option("--latest", is_flag=True, help="Always resolve to the newest version")
def create(
    entity_type: str,
    eid: str,
    version: Optional[str],
    block_ref: Optional[str],
    block_range: Optional[str],
    expanded: bool,
    group_path_name: Optional[str],
    variants: tuple[str, ...],
    latest: bool,
) -> None:
    """Build an hm:// id."""
    if block_range and expanded:
        raise click.UsageError("--range and --expanded are mutually exclusive")
    if (block_range or expanded) and not block_ref:
        raise click.UsageError("--range and --expanded need --block-ref")
    range_value = ExpandedBlockRange() if expanded else parse_range(block_range)
    click.echo(create_hm_id(
        entity_type,
        eid,
        version=version,
        block_ref=block_ref,
        block_range=range_value,
        group_path_name=group_path_name,
        variants=parse_variants_query(list(variants)),
        latest=latest,
    ))


@cli.command("web-url")
@click.argument("hypermedia_id")
@click.option("--host", help="Host to use instead of the configured gateway")
@click.option("--relative", is_flag=True, help="Produce a host-relative path")
@click.pass_obj
def web_url(cfg: CodecConfig, hypermedia_id: str, host: Optional[str], relative: bool) -> None:
    """Convert an id to its public web url."""
    hostname = None if relative else (host or UNSET)
    url = id_to_url(hypermedia_id, hostname, gateway_url=cfg.gateway_url)
    if url is None:
        console.print(f"[red]Not a hypermedia id: {hypermedia_id}[/red]")
        sys.exit(1)
    click.echo(url)


@cli.command()
@click.argument("url")
@click.pass_obj
def normalize(cfg: CodecConfig, url: str) -> None:
    """Turn a gateway url into an hm:// id."""
    normalized = normalize_hm_id(url, cfg.gateway_url)
    if normalized is None:
        console.print(f"[yellow]Not a link under {cfg.gateway_url}: {url}[/yellow]")
        sys.exit(1)
    click.echo(normalized)


@cli.command("with-version")
@click.argument("hypermedia_id")
@click.argument("version")
@click.option("--block-ref", "-b", help="8-character block id")
def with_version(hypermedia_id: str, version: str, block_ref: Optional[str]) -> None:
    """Re-encode an id pinned to VERSION."""
    result = hm_id_with_version(hypermedia_id, version, block_ref)
    if result is None:
        console.print(f"[red]Not a hypermedia id: {hypermedia_id}[/red]")
        sys.exit(1)
    click.echo(result)


@cli.command()
@click.option("--gateway-url", "-g", prompt="Gateway URL", default="https://hyper.media",
              help="Public web gateway")
@click.option("--config", "-c", default="hmid-config.json", help="Config file path")
def init(gateway_url: str, config: str) -> None:
    """Create a default configuration file."""
    config_path = Path(config)
    if config_path.exists():
        if not click.confirm(f"{config_path} already exists. Overwrite?"):
            return

    try:
        cfg = CodecConfig(gateway_url=gateway_url)
    except ValidationError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    cfg.save(config_path)
    console.print(f"[green]Created {config_path}[/green]")


if __name__ == "__main__":
    cli()
