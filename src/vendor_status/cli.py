"""
Vendor Status CLI

Command-line interface for normalizing saved status documents and checking
live vendor status sources.
"""

import asyncio
import json
import sys
from pathlib import Path
from typing import Optional

import click
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from vendor_status.core.config import get_settings
from vendor_status.core.exceptions import ConfigurationError
from vendor_status.core.logging import get_logger, setup_logging
from vendor_status.models.source_config import parse_source_config
from vendor_status.services.normalization_service import StatusNormalizationService
from vendor_status.services.source_checker import SourceChecker, summarize
from vendor_status.sources import DEFAULT_SOURCES, SourceDefinition, find_source, load_sources

logger = get_logger(__name__)
console = Console()


def _configured_sources(sources_file: Optional[Path]) -> list[SourceDefinition]:
    if sources_file is not None:
        return load_sources(sources_file)
    return list(DEFAULT_SOURCES)


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Logging level (logs go to stderr); defaults to the configured level",
)
@click.option(
    "--sources-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON file with source definitions (defaults to the built-in sources)",
)
@click.pass_context
def cli(ctx, log_level, sources_file):
    """Vendor status normalization tools"""
    ctx.ensure_object(dict)

    try:
        settings = get_settings()
    except ConfigurationError as e:
        raise click.ClickException(str(e))

    setup_logging(
        level=log_level or settings.logging.level,
        log_file=settings.logging.log_file,
        structured=settings.logging.structured,
    )

    ctx.obj["settings"] = settings
    ctx.obj["sources_file"] = sources_file or settings.sources_file


def _load_sources(ctx) -> list[SourceDefinition]:
    try:
        return _configured_sources(ctx.obj["sources_file"])
    except ConfigurationError as e:
        raise click.ClickException(str(e))


@cli.command()
@click.argument("document", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--source", "-s", "source_name", help="Name of a configured source")
@click.option(
    "--config",
    "-c",
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON file holding a single source configuration",
)
@click.pass_context
def normalize(ctx, document, source_name, config_file):
    """Normalize a saved status DOCUMENT and print the report as JSON"""
    if bool(source_name) == bool(config_file):
        raise click.UsageError("Pass exactly one of --source or --config")

    if config_file is not None:
        try:
            config = parse_source_config(json.loads(config_file.read_text(encoding="utf-8")))
        except (json.JSONDecodeError, ValidationError) as e:
            raise click.ClickException(f"Invalid configuration in {config_file}: {e}")
    else:
        source = find_source(source_name, _load_sources(ctx))
        if source is None:
            raise click.ClickException(f"Unknown source: {source_name}")
        config = source.config

    logger.debug("Normalizing document", path=str(document), source=config.name)
    service = StatusNormalizationService(ctx.obj["settings"].engine)
    report = service.normalize(document.read_text(encoding="utf-8"), config)

    click.echo(json.dumps(report.to_wire(), indent=2))


def _display_results(results) -> None:
    """Print check results as a table."""
    table = Table(title="Vendor Status Check")
    table.add_column("Source", style="cyan", no_wrap=True)
    table.add_column("Status", no_wrap=True)
    table.add_column("HTTP", justify="right")
    table.add_column("Response Time", justify="right")
    table.add_column("Details", style="dim")

    for result in results:
        if result.is_error:
            status_text = "[red]❌ ISSUES[/red]"
        else:
            status_text = "[green]✅ HEALTHY[/green]"

        response_time = (
            f"{result.response_time_ms:.0f}ms" if result.response_time_ms is not None else "N/A"
        )
        table.add_row(
            result.name,
            status_text,
            str(result.status_code) if result.status_code is not None else "-",
            response_time,
            result.error_message or "OK",
        )

    console.print(table)


@cli.command()
@click.option("--source", "-s", "source_names", multiple=True, help="Only check these sources")
@click.option("--json", "as_json", is_flag=True, help="Print results as JSON")
@click.pass_context
def check(ctx, source_names, as_json):
    """Fetch configured sources and report their health"""
    sources = _load_sources(ctx)
    if source_names:
        selected = []
        for name in source_names:
            source = find_source(name, sources)
            if source is None:
                raise click.ClickException(f"Unknown source: {name}")
            selected.append(source)
        sources = selected

    settings = ctx.obj["settings"]

    async def run_checks():
        service = StatusNormalizationService(settings.engine)
        async with SourceChecker(settings.fetch, service) as checker:
            return await checker.check_all(sources)

    results = asyncio.run(run_checks())
    summary = summarize(results)

    if as_json:
        payload = {
            "summary": summary.to_dict(),
            "results": [result.to_dict() for result in results],
        }
        click.echo(json.dumps(payload, indent=2))
    else:
        _display_results(results)
        console.print(
            f"\n📊 [bold]{summary.healthy_sources}/{summary.total_sources}[/bold] sources healthy"
        )

    if summary.error_sources:
        sys.exit(1)


@cli.command(name="sources")
@click.pass_context
def list_sources(ctx):
    """List configured sources"""
    table = Table(title="Configured Sources")
    table.add_column("Source", style="cyan", no_wrap=True)
    table.add_column("Format", no_wrap=True)
    table.add_column("URL", style="dim", overflow="fold")

    for source in _load_sources(ctx):
        table.add_row(source.name, source.config.source_format.value, source.url)

    console.print(table)


if __name__ == "__main__":
    cli()
