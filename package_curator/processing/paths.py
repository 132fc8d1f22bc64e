"""Shortest dependency path lookup."""
from __future__ import annotations

from collections.abc import Iterable

from package_curator.models.identifier import Identifier
from package_curator.models.package import RunDependencyPath, ShortestDependencyPath


def index_dependency_paths(
    paths: Iterable[RunDependencyPath],
) -> dict[Identifier, list[ShortestDependencyPath]]:
    """Group shortest dependency paths by the package terminating them.

    Args:
        paths: Paths bound to their terminal package.

    Returns:
        Dict mapping package identifier to its paths in input order.
    """
    result: dict[Identifier, list[ShortestDependencyPath]] = {}
    for entry in paths:
        result.setdefault(entry.package, []).append(entry.path)
    return result


class DependencyPathIndex:
    """Lookup of the shortest dependency paths of packages in one run."""

    def __init__(self, paths: Iterable[RunDependencyPath] = ()) -> None:
        self._paths = index_dependency_paths(paths)

    def get(self, identifier: Identifier) -> list[ShortestDependencyPath]:
        """Get the shortest paths leading to a package.

        Args:
            identifier: Identifier of the package.

        Returns:
            One path per project and scope reaching the package, or an
            empty list if the package has no paths.
        """
        return list(self._paths.get(identifier, []))

    def __len__(self) -> int:
        return len(self._paths)
