"""Tests for aggregations over run packages."""

from package_curator.models.identifier import Identifier
from package_curator.models.package import Package, ProcessedDeclaredLicense, RunPackage
from package_curator.models.run import EcosystemStats, PackageRunData
from package_curator.processing.aggregation import (
    count_by_ecosystem,
    count_distinct,
    distinct_processed_licenses,
)


def _run_package(run_id: int, pkg_id: int, coordinates: str) -> RunPackage:
    return RunPackage(
        run_id=run_id,
        pkg_id=pkg_id,
        package=Package(identifier=Identifier.from_coordinates(coordinates)),
    )


def _two_runs() -> list[RunPackage]:
    return [
        _run_package(1, 1, "Maven:com.example:example:1.0"),
        _run_package(1, 2, "NPM:com.example:example2:1.0"),
        _run_package(1, 3, "Maven:com.example:example3:1.0"),
        _run_package(2, 4, "Maven:com.example:example4:1.0"),
        _run_package(2, 5, "NPM:com.example:example2:1.0"),
        _run_package(2, 6, "Maven:com.example:example3:1.0"),
    ]


class TestCountDistinct:
    """Tests for count_distinct function."""

    def test_shared_packages_counted_once(self) -> None:
        """Test that packages present in both runs count once."""
        assert count_distinct(_two_runs()) == 4

    def test_single_run(self) -> None:
        """Test counting the packages of one run."""
        assert count_distinct([p for p in _two_runs() if p.run_id == 1]) == 3

    def test_no_packages(self) -> None:
        """Test that no packages count as zero."""
        assert count_distinct([]) == 0


class TestCountByEcosystem:
    """Tests for count_by_ecosystem function."""

    def test_counts_per_type(self) -> None:
        """Test that distinct packages are counted per type."""
        assert count_by_ecosystem(_two_runs()) == [
            EcosystemStats(name="Maven", count=3),
            EcosystemStats(name="NPM", count=1),
        ]

    def test_sum_equals_distinct_count(self) -> None:
        """Test that ecosystem counts add up to the distinct count."""
        packages = _two_runs()

        total = sum(stats.count for stats in count_by_ecosystem(packages))

        assert total == count_distinct(packages)

    def test_sorted_by_name(self) -> None:
        """Test that ecosystems are sorted by name."""
        packages = [
            _run_package(1, 1, "PyPI::requests:2.31.0"),
            _run_package(1, 2, "Gradle::project:1.0"),
            _run_package(1, 3, "NPM::which:2.0.2"),
        ]

        assert [s.name for s in count_by_ecosystem(packages)] == ["Gradle", "NPM", "PyPI"]

    def test_no_packages(self) -> None:
        """Test that no packages give no ecosystems."""
        assert count_by_ecosystem([]) == []


class TestDistinctProcessedLicenses:
    """Tests for distinct_processed_licenses function."""

    def test_sorted_and_distinct(self) -> None:
        """Test that licenses are deduplicated and sorted."""
        entries = [
            PackageRunData(
                package=Package(
                    identifier=Identifier.from_coordinates(f"NPM::pkg{i}:1.0"),
                    processed_declared_license=ProcessedDeclaredLicense(
                        spdx_expression=expression
                    ),
                ),
                pkg_id=i,
                run_id=1,
            )
            for i, expression in enumerate(["MIT", "Apache-2.0", "MIT", ""])
        ]

        assert distinct_processed_licenses(entries) == ["", "Apache-2.0", "MIT"]
