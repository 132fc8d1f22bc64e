"""JSON output formatter for query results."""
import json
from datetime import datetime, timezone
from typing import Any

from package_curator import __version__
from package_curator.models.query import ListQueryResult
from package_curator.models.run import EcosystemStats, PackageRunData


class QueryJsonFormatter:
    """Format query results as JSON output.

    Provides a structured representation of query results for
    programmatic processing.
    """

    def format_package_list(self, result: ListQueryResult[PackageRunData]) -> str:
        """Format a page of packages as JSON string.

        Args:
            result: The page to format.

        Returns:
            JSON string with metadata, pagination and packages.
        """
        output = {
            "metadata": self._build_metadata(),
            "pagination": {
                "limit": result.params.limit,
                "offset": result.params.offset,
                "sort": [
                    {"field": order.name.value, "direction": order.direction.value}
                    for order in result.params.sort_fields
                ],
                "total_count": result.total_count,
            },
            "data": [entry.model_dump(mode="json") for entry in result.data],
        }
        return json.dumps(output, indent=2)

    def format_count(self, count: int) -> str:
        """Format the number of distinct packages as JSON string."""
        return json.dumps({"metadata": self._build_metadata(), "count": count}, indent=2)

    def format_ecosystems(self, ecosystems: list[EcosystemStats]) -> str:
        """Format ecosystem statistics as JSON string.

        Args:
            ecosystems: Ecosystem statistics sorted by name.

        Returns:
            JSON string with one object per ecosystem.
        """
        output = {
            "metadata": self._build_metadata(),
            "ecosystems": [stats.model_dump(mode="json") for stats in ecosystems],
        }
        return json.dumps(output, indent=2)

    def format_licenses(self, licenses: list[str]) -> str:
        """Format distinct processed declared licenses as JSON string."""
        output = {"metadata": self._build_metadata(), "licenses": licenses}
        return json.dumps(output, indent=2)

    def _build_metadata(self) -> dict[str, Any]:
        """Build metadata section.

        Returns:
            Dictionary with generation time and tool version.
        """
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
        return {
            "generated_at": timestamp,
            "tool_version": __version__,
        }
