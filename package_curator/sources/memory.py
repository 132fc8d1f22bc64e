"""In-memory data source."""
from __future__ import annotations

from collections.abc import Collection, Iterable

from package_curator.models.curation import PackageCuration
from package_curator.models.package import RunDependencyPath, RunPackage
from package_curator.sources.base import PackageDataSource


class InMemoryDataSource(PackageDataSource):
    """Data source holding run data in memory.

    Used when embedding the engine with data that was loaded elsewhere,
    and as the backing store of the snapshot file source.
    """

    def __init__(
        self,
        packages: Iterable[RunPackage] = (),
        dependency_paths: Iterable[RunDependencyPath] = (),
        curations: dict[int, list[PackageCuration]] | None = None,
    ) -> None:
        self._packages = list(packages)
        self._dependency_paths = list(dependency_paths)
        self._curations = {
            run_id: list(run_curations)
            for run_id, run_curations in (curations or {}).items()
        }

    @property
    def run_ids(self) -> list[int]:
        """Sorted ids of all runs with packages, paths or curations."""
        ids = {pkg.run_id for pkg in self._packages}
        ids.update(path.run_id for path in self._dependency_paths)
        ids.update(self._curations)
        return sorted(ids)

    def fetch_packages(self, run_ids: Collection[int]) -> list[RunPackage]:
        wanted = set(run_ids)
        return [pkg for pkg in self._packages if pkg.run_id in wanted]

    def fetch_dependency_paths(self, run_ids: Collection[int]) -> list[RunDependencyPath]:
        wanted = set(run_ids)
        return [path for path in self._dependency_paths if path.run_id in wanted]

    def fetch_resolved_curations(self, run_id: int) -> list[PackageCuration]:
        return list(self._curations.get(run_id, []))
