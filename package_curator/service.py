"""Package service combining run data, curations and queries.

All blocking work happens in the data source. Merging, querying and
aggregating are pure functions of the data returned for one call.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Optional

from package_curator.models.curation import PackageCuration
from package_curator.models.package import RunDependencyPath, RunPackage
from package_curator.models.query import (
    ListQueryParameters,
    ListQueryResult,
    PackageFilters,
)
from package_curator.models.run import EcosystemStats, PackageRunData
from package_curator.processing.aggregation import (
    count_by_ecosystem,
    count_distinct,
    distinct_processed_licenses,
)
from package_curator.processing.curations import CurationIndex, apply_curations
from package_curator.processing.paths import DependencyPathIndex
from package_curator.processing.query import query_packages
from package_curator.sources.base import PackageDataSource

logger = logging.getLogger(__name__)


def build_package_run_data(
    packages: Iterable[RunPackage],
    dependency_paths: Iterable[RunDependencyPath],
    curations: Mapping[int, list[PackageCuration]],
) -> list[PackageRunData]:
    """Merge raw packages with their run's curations and dependency paths.

    Args:
        packages: Packages bound to their runs.
        dependency_paths: Shortest paths bound to their runs.
        curations: Resolved curations per run id, in provider order.

    Returns:
        One PackageRunData per input package, in input order.
    """
    paths_by_run: dict[int, list[RunDependencyPath]] = {}
    for path in dependency_paths:
        paths_by_run.setdefault(path.run_id, []).append(path)

    path_indexes: dict[int, DependencyPathIndex] = {}
    curation_indexes: dict[int, CurationIndex] = {}
    result: list[PackageRunData] = []

    for run_package in packages:
        run_id = run_package.run_id
        if run_id not in path_indexes:
            path_indexes[run_id] = DependencyPathIndex(paths_by_run.get(run_id, []))
            curation_indexes[run_id] = CurationIndex(curations.get(run_id, []))

        identifier = run_package.package.identifier
        curated = apply_curations(
            run_package.package, curation_indexes[run_id].applicable(identifier)
        )
        result.append(
            PackageRunData(
                package=curated.package,
                pkg_id=run_package.pkg_id,
                run_id=run_id,
                shortest_dependency_paths=path_indexes[run_id].get(identifier),
                concluded_license=curated.concluded_license,
                curations=curated.curations,
            )
        )

    return result


class PackageService:
    """Queries over the packages of analysis runs.

    Every call reads a fresh snapshot from the data source, so curation
    changes between calls are picked up. Empty run id sets give empty
    results without accessing the data source.
    """

    def __init__(self, source: PackageDataSource) -> None:
        """Initialize the service.

        Args:
            source: Supplier of packages, dependency paths and curations.
        """
        self._source = source

    def merge_run_data(self, run_ids: Iterable[int]) -> list[PackageRunData]:
        """Build the curated, path-annotated packages of the given runs.

        Args:
            run_ids: Analysis run ids.

        Returns:
            One entry per package occurrence, not deduplicated across runs.
        """
        ids = sorted(set(run_ids))
        if not ids:
            return []

        packages = self._source.fetch_packages(ids)
        paths = self._source.fetch_dependency_paths(ids)
        curations = {run_id: self._source.fetch_resolved_curations(run_id) for run_id in ids}

        logger.debug(
            "Merging %d package(s), %d path(s) and %d curation(s) of run(s) %s",
            len(packages),
            len(paths),
            sum(len(c) for c in curations.values()),
            ids,
        )
        return build_package_run_data(packages, paths, curations)

    def list_for_run_ids(
        self,
        run_ids: Iterable[int],
        parameters: Optional[ListQueryParameters] = None,
        filters: Optional[PackageFilters] = None,
    ) -> ListQueryResult[PackageRunData]:
        """List the curated packages of the given runs.

        A package found in several runs is listed once, with the data of
        the lowest run id containing it.

        Args:
            run_ids: Analysis run ids.
            parameters: Sort and pagination options.
            filters: Filters to apply.

        Returns:
            The requested page and the total number of matches.

        Raises:
            InvalidQueryError: If a filter or the pagination is invalid.
        """
        return query_packages(self.merge_run_data(run_ids), parameters, filters)

    def count_for_run_ids(self, run_ids: Iterable[int]) -> int:
        """Count the distinct packages of the given runs."""
        ids = sorted(set(run_ids))
        if not ids:
            return 0
        return count_distinct(self._source.fetch_packages(ids))

    def count_ecosystems_for_run_ids(self, run_ids: Iterable[int]) -> list[EcosystemStats]:
        """Count the distinct packages of the given runs per ecosystem.

        Args:
            run_ids: Analysis run ids.

        Returns:
            EcosystemStats sorted by ecosystem name.
        """
        ids = sorted(set(run_ids))
        if not ids:
            return []
        return count_by_ecosystem(self._source.fetch_packages(ids))

    def get_processed_declared_licenses(self, run_ids: Iterable[int]) -> list[str]:
        """Get the distinct processed declared licenses of the given runs.

        Licenses are taken from the curated packages.

        Args:
            run_ids: Analysis run ids.

        Returns:
            Sorted distinct SPDX expressions.
        """
        return distinct_processed_licenses(self.merge_run_data(run_ids))
