"""CLI entry point for package-curator."""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from typing import Any, Optional

import click
from rich.console import Console
from rich.markup import escape

from package_curator import __version__
from package_curator.config import CuratorConfig, load_config
from package_curator.constants import EXIT_ERROR, EXIT_SUCCESS, LOGGER_NAME
from package_curator.exceptions import ConfigurationError, PackageCuratorError
from package_curator.models.query import ListQueryParameters
from package_curator.output.query_json import QueryJsonFormatter
from package_curator.output.terminal import TerminalFormatter
from package_curator.processing.query import build_filters, parse_order_field
from package_curator.service import PackageService
from package_curator.sources.snapshot import SnapshotDataSource

# Module-level console for consistent output
_console = Console()
# Separate console for error output (writes to stderr)
_error_console = Console(stderr=True)

logger = logging.getLogger(__name__)


def _query_options(command: Callable[..., Any]) -> Callable[..., Any]:
    """Add the options shared by all query commands."""
    options = [
        click.option(
            "--snapshot",
            "-s",
            "snapshot_path",
            type=click.Path(exists=True, dir_okay=False),
            default=None,
            help="Snapshot file with the analysis runs to query.",
        ),
        click.option(
            "--run",
            "-r",
            "run_ids",
            type=int,
            multiple=True,
            help="Analysis run id to include (repeatable, default: all runs).",
        ),
        click.option(
            "--format",
            "output_format",
            type=click.Choice(["terminal", "json"], case_sensitive=False),
            default="terminal",
            help="Output format (default: terminal).",
        ),
        click.option(
            "--config",
            "-c",
            "config_path",
            type=click.Path(exists=True, dir_okay=False),
            default=None,
            help="Path to configuration file.",
        ),
        click.option(
            "--verbose",
            "-v",
            "verbose_flag",
            is_flag=True,
            default=False,
            help="Show details and debug logging.",
        ),
    ]
    for option in reversed(options):
        command = option(command)
    return command


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """Package Curator - Query curated packages of analysis runs.

    Applies package curations to the packages detected by analysis runs
    and lists, counts and aggregates the result.

    \b
    Examples:
        package-curator list --snapshot runs.yaml
        package-curator list -s runs.yaml --run 1 --run 2 --sort purl:desc
        package-curator list -s runs.yaml --filter identifier:ilike:com.example
        package-curator count -s runs.yaml
        package-curator ecosystems -s runs.yaml --format json
        package-curator licenses -s runs.yaml
    """
    pass


@main.command(name="list")
@_query_options
@click.option(
    "--sort",
    "sort_values",
    multiple=True,
    help="Sort key like 'purl:desc' (repeatable, first has priority).",
)
@click.option(
    "--filter",
    "filter_values",
    multiple=True,
    help="Filter like 'identifier:ilike:com.example' or "
    "'processedDeclaredLicense:in:MIT,Apache-2.0' (repeatable).",
)
@click.option(
    "--limit",
    type=click.IntRange(min=0),
    default=None,
    help="Maximum number of packages to show (default: all).",
)
@click.option(
    "--offset",
    type=click.IntRange(min=0),
    default=0,
    help="Number of packages to skip (default: 0).",
)
def list_packages(
    snapshot_path: str | None,
    run_ids: tuple[int, ...],
    output_format: str,
    config_path: str | None,
    verbose_flag: bool,
    sort_values: tuple[str, ...],
    filter_values: tuple[str, ...],
    limit: Optional[int],
    offset: int,
) -> None:
    """List curated packages of analysis runs.

    Packages found in several runs are listed once, using the curations
    and dependency paths of the lowest run id.

    \b
    Fields: identifier, purl, processedDeclaredLicense
    Operators: ilike, in, not_in, eq
    """
    format_value = output_format.lower()

    try:
        config = load_config(config_path)
        _setup_logging(verbose_flag, config)

        parameters = ListQueryParameters(
            sort_fields=[
                parse_order_field(option)
                for option in (sort_values or config.default_sort or [])
            ],
            limit=limit if limit is not None else config.default_limit,
            offset=offset,
        )
        filters = build_filters(filter_values)

        service, ids = _open_service(snapshot_path, run_ids, config)
        result = service.list_for_run_ids(ids, parameters, filters)

        if format_value == "json":
            click.echo(QueryJsonFormatter().format_package_list(result))
        else:
            TerminalFormatter(console=_console, verbose=verbose_flag).format_package_list(
                result
            )
        sys.exit(EXIT_SUCCESS)

    except PackageCuratorError as e:
        _display_error(e, format_value)
        sys.exit(EXIT_ERROR)


@main.command()
@_query_options
def count(
    snapshot_path: str | None,
    run_ids: tuple[int, ...],
    output_format: str,
    config_path: str | None,
    verbose_flag: bool,
) -> None:
    """Count distinct packages of analysis runs."""
    format_value = output_format.lower()

    try:
        config = load_config(config_path)
        _setup_logging(verbose_flag, config)
        service, ids = _open_service(snapshot_path, run_ids, config)

        total = service.count_for_run_ids(ids)

        if format_value == "json":
            click.echo(QueryJsonFormatter().format_count(total))
        else:
            TerminalFormatter(console=_console).format_count(total)
        sys.exit(EXIT_SUCCESS)

    except PackageCuratorError as e:
        _display_error(e, format_value)
        sys.exit(EXIT_ERROR)


@main.command()
@_query_options
def ecosystems(
    snapshot_path: str | None,
    run_ids: tuple[int, ...],
    output_format: str,
    config_path: str | None,
    verbose_flag: bool,
) -> None:
    """Count distinct packages of analysis runs per ecosystem."""
    format_value = output_format.lower()

    try:
        config = load_config(config_path)
        _setup_logging(verbose_flag, config)
        service, ids = _open_service(snapshot_path, run_ids, config)

        stats = service.count_ecosystems_for_run_ids(ids)

        if format_value == "json":
            click.echo(QueryJsonFormatter().format_ecosystems(stats))
        else:
            TerminalFormatter(console=_console).format_ecosystems(stats)
        sys.exit(EXIT_SUCCESS)

    except PackageCuratorError as e:
        _display_error(e, format_value)
        sys.exit(EXIT_ERROR)


@main.command()
@_query_options
def licenses(
    snapshot_path: str | None,
    run_ids: tuple[int, ...],
    output_format: str,
    config_path: str | None,
    verbose_flag: bool,
) -> None:
    """List distinct processed declared licenses of analysis runs."""
    format_value = output_format.lower()

    try:
        config = load_config(config_path)
        _setup_logging(verbose_flag, config)
        service, ids = _open_service(snapshot_path, run_ids, config)

        found = service.get_processed_declared_licenses(ids)

        if format_value == "json":
            click.echo(QueryJsonFormatter().format_licenses(found))
        else:
            TerminalFormatter(console=_console).format_licenses(found)
        sys.exit(EXIT_SUCCESS)

    except PackageCuratorError as e:
        _display_error(e, format_value)
        sys.exit(EXIT_ERROR)


def _setup_logging(verbose: bool, config: CuratorConfig) -> None:
    """Configure the package logger from the verbosity flag and config.

    Args:
        verbose: Whether debug logging was requested.
        config: Loaded configuration with the default log level.
    """
    logging.basicConfig(format="%(levelname)s: %(message)s")
    level = logging.DEBUG if verbose else getattr(logging, config.log_level)
    logging.getLogger(LOGGER_NAME).setLevel(level)


def _open_service(
    snapshot_path: str | None,
    run_ids: tuple[int, ...],
    config: CuratorConfig,
) -> tuple[PackageService, list[int]]:
    """Create the package service for a snapshot and resolve the run ids.

    Args:
        snapshot_path: Snapshot given on the command line, if any.
        run_ids: Run ids given on the command line.
        config: Loaded configuration.

    Returns:
        Tuple of the service and the run ids to query. Without explicit
        run ids all runs of the snapshot are queried.

    Raises:
        ConfigurationError: If no snapshot was given.
        DataSourceError: If the snapshot cannot be loaded.
    """
    path = snapshot_path or config.snapshot
    if path is None:
        raise ConfigurationError(
            "No snapshot file given. Use --snapshot or set 'snapshot' in the "
            "configuration file."
        )

    source = SnapshotDataSource(path)
    ids = list(run_ids) if run_ids else source.run_ids
    logger.debug("Querying run(s) %s of %s", ids, path)
    return PackageService(source), ids


def _display_error(error: PackageCuratorError, format_type: str) -> None:
    """Display error message to user.

    All errors are written to stderr.

    Args:
        error: The exception that occurred.
        format_type: Output format type for styling.
    """
    error_type = type(error).__name__
    message = f"Error: {error_type}: {error}"

    if format_type == "terminal":
        _error_console.print(f"[red bold]{escape(message)}[/red bold]")
    else:
        click.echo(message, err=True)


if __name__ == "__main__":
    main()
