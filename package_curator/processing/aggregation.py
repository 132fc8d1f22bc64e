"""Aggregations over the packages of one or more runs.

Every aggregation counts a package identifier once, no matter how many of
the given runs contain it.
"""
from __future__ import annotations

from collections import Counter
from collections.abc import Iterable

from package_curator.models.identifier import Identifier
from package_curator.models.package import RunPackage
from package_curator.models.run import EcosystemStats, PackageRunData


def distinct_identifiers(packages: Iterable[RunPackage]) -> set[Identifier]:
    """Collect the distinct identifiers of run packages."""
    return {run_package.package.identifier for run_package in packages}


def count_distinct(packages: Iterable[RunPackage]) -> int:
    """Count distinct packages across runs.

    Args:
        packages: Packages of one or more runs.

    Returns:
        Number of distinct package identifiers.
    """
    return len(distinct_identifiers(packages))


def count_by_ecosystem(packages: Iterable[RunPackage]) -> list[EcosystemStats]:
    """Count distinct packages per package manager type.

    Args:
        packages: Packages of one or more runs.

    Returns:
        List of EcosystemStats sorted by ecosystem name.
    """
    counts = Counter(identifier.type for identifier in distinct_identifiers(packages))
    return [
        EcosystemStats(name=name, count=count) for name, count in sorted(counts.items())
    ]


def distinct_processed_licenses(entries: Iterable[PackageRunData]) -> list[str]:
    """Collect the distinct processed declared licenses of curated packages.

    Args:
        entries: Merged package data of one or more runs.

    Returns:
        Sorted list of distinct SPDX expressions.
    """
    return sorted(
        {entry.package.processed_declared_license.spdx_expression for entry in entries}
    )
