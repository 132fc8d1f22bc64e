"""Base data source interface."""

from abc import ABC, abstractmethod
from collections.abc import Collection

from package_curator.models.curation import PackageCuration
from package_curator.models.package import RunDependencyPath, RunPackage


class PackageDataSource(ABC):
    """Abstract base class for suppliers of analysis run data.

    A data source returns a consistent snapshot per call. Errors such as
    timeouts or connectivity problems propagate to the caller unchanged.
    """

    @abstractmethod
    def fetch_packages(self, run_ids: Collection[int]) -> list[RunPackage]:
        """Fetch the packages detected by the given runs.

        Args:
            run_ids: Analysis run ids. Unknown ids contribute nothing.

        Returns:
            Packages bound to the run they were detected in.
        """

    @abstractmethod
    def fetch_dependency_paths(self, run_ids: Collection[int]) -> list[RunDependencyPath]:
        """Fetch the shortest dependency paths computed by the given runs.

        Args:
            run_ids: Analysis run ids. Unknown ids contribute nothing.

        Returns:
            Paths bound to their run and terminal package.
        """

    @abstractmethod
    def fetch_resolved_curations(self, run_id: int) -> list[PackageCuration]:
        """Fetch the resolved curations of a run.

        Args:
            run_id: Analysis run id.

        Returns:
            Curations ordered by provider precedence, empty for unknown runs.
        """
