"""Terminal output formatter using Rich."""
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from package_curator.models.query import ListQueryResult
from package_curator.models.run import EcosystemStats, PackageRunData


class TerminalFormatter:
    """Format query results for terminal display using Rich."""

    def __init__(self, console: Optional[Console] = None, verbose: bool = False) -> None:
        """Initialize the formatter with a Rich console.

        Args:
            console: Optional Rich Console instance. If not provided,
                a new Console will be created.
            verbose: Whether to show dependency paths and curation comments.
        """
        self._console = console if console is not None else Console()
        self._verbose = verbose

    def format_package_list(self, result: ListQueryResult[PackageRunData]) -> None:
        """Display a page of packages as a Rich table.

        Args:
            result: The page to display.
        """
        if result.total_count == 0:
            self._console.print("[yellow]No packages found[/yellow]")
            return

        table = Table(title="Packages")
        table.add_column("Package", style="cyan", no_wrap=True)
        table.add_column("Declared License", style="green")
        table.add_column("Concluded License", style="magenta")
        table.add_column("Run", justify="right")
        table.add_column("Curations", justify="right")
        table.add_column("Paths", justify="right")

        for entry in result.data:
            license_display = (
                escape(entry.package.processed_declared_license.spdx_expression)
                or "[yellow]None[/yellow]"
            )
            table.add_row(
                escape(entry.package.identifier.display),
                license_display,
                escape(entry.concluded_license or ""),
                str(entry.run_id),
                str(len(entry.curations)),
                str(len(entry.shortest_dependency_paths)),
            )

        self._console.print(table)

        if self._verbose:
            self._print_details(result.data)

        first = result.params.offset + 1 if result.data else 0
        last = result.params.offset + len(result.data)
        self._console.print(
            f"\n[bold]Showing:[/bold] {first}-{last} of {result.total_count} packages"
        )

    def _print_details(self, entries: list[PackageRunData]) -> None:
        """Print dependency paths and curation comments of each package.

        Args:
            entries: Packages of the current page.
        """
        for entry in entries:
            if not entry.shortest_dependency_paths and not entry.curations:
                continue
            name = escape(entry.package.identifier.display)
            self._console.print(f"\n[bold cyan]{name}[/bold cyan]")
            for dependency_path in entry.shortest_dependency_paths:
                steps = [dependency_path.project_identifier.display]
                steps.extend(identifier.display for identifier in dependency_path.path)
                steps.append(entry.package.identifier.display)
                self._console.print(
                    f"  [dim]{escape(dependency_path.scope)}:[/dim] " + escape(" → ".join(steps))
                )
            for curation in entry.curations:
                comment = curation.comment or "no comment"
                self._console.print(f"  [blue]\\[curation][/blue] {escape(comment)}")

    def format_count(self, count: int) -> None:
        """Display the number of distinct packages."""
        self._console.print(f"[bold]Distinct packages:[/bold] {count}")

    def format_ecosystems(self, ecosystems: list[EcosystemStats]) -> None:
        """Display package counts per ecosystem as a Rich table.

        Args:
            ecosystems: Ecosystem statistics sorted by name.
        """
        if not ecosystems:
            self._console.print("[yellow]No packages found[/yellow]")
            return

        table = Table(title="Ecosystems")
        table.add_column("Ecosystem", style="cyan")
        table.add_column("Packages", justify="right")
        for stats in ecosystems:
            table.add_row(escape(stats.name), str(stats.count))
        self._console.print(table)

    def format_licenses(self, licenses: list[str]) -> None:
        """Display distinct processed declared licenses.

        Args:
            licenses: Sorted SPDX expressions.
        """
        if not licenses:
            self._console.print("[yellow]No licenses found[/yellow]")
            return

        title = "Processed Declared Licenses"
        # Rich wraps a title to the table width
        table = Table(title=title, min_width=len(title) + 4)
        table.add_column("License", style="green")
        for license_expression in licenses:
            table.add_row(escape(license_expression) or "[yellow]None[/yellow]")
        self._console.print(table)
