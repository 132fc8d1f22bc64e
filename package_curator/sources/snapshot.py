"""Snapshot file data source.

A snapshot is a YAML (or JSON) document describing analysis runs:

    runs:
      - id: 1
        packages:
          - identifier: "Maven:com.example:example:1.0"
            declared_licenses: ["Apache-2.0"]
        shortest_dependency_paths:
          - package: "Maven:com.example:example:1.0"
            project_identifier: "Gradle::project:1.0"
            scope: compileClasspath
        curations:
          - id: "Maven:com.example:example:1.0"
            data:
              concluded_license: Apache-2.0
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from package_curator.config.loader import load_yaml_document
from package_curator.exceptions import DataSourceError
from package_curator.models.curation import PackageCuration
from package_curator.models.identifier import Identifier
from package_curator.models.package import (
    Package,
    RunDependencyPath,
    RunPackage,
    ShortestDependencyPath,
)
from package_curator.processing.licenses import process_declared_licenses
from package_curator.sources.memory import InMemoryDataSource

logger = logging.getLogger(__name__)


class SnapshotPackage(Package):
    """A package entry of a snapshot run, optionally with its internal key."""

    id: Optional[int] = Field(default=None, description="Internal package key")


class SnapshotPath(ShortestDependencyPath):
    """A shortest dependency path entry of a snapshot run."""

    package: Identifier = Field(description="Package terminating the path")


class SnapshotRun(BaseModel):
    """An analysis run of a snapshot."""

    model_config = {"extra": "forbid"}

    id: int = Field(description="Analysis run id")
    packages: list[SnapshotPackage] = Field(default_factory=list)
    shortest_dependency_paths: list[SnapshotPath] = Field(default_factory=list)
    curations: list[PackageCuration] = Field(
        default_factory=list,
        description="Resolved curations in provider precedence order",
    )


class Snapshot(BaseModel):
    """Root of a snapshot document."""

    model_config = {"extra": "forbid"}

    runs: list[SnapshotRun] = Field(default_factory=list)


def load_snapshot_file(path: Path) -> Snapshot:
    """Load and validate a snapshot file.

    Args:
        path: Path to a YAML or JSON snapshot.

    Returns:
        Validated Snapshot. An empty file gives a snapshot without runs.

    Raises:
        DataSourceError: If the file cannot be read, is not valid YAML,
            fails validation or contains a run id twice.
    """
    snapshot = load_yaml_document(path, Snapshot, DataSourceError, "snapshot")
    if snapshot is None:
        return Snapshot()

    seen: set[int] = set()
    for run in snapshot.runs:
        if run.id in seen:
            raise DataSourceError(f"Invalid snapshot in '{path}': duplicate run id {run.id}")
        seen.add(run.id)

    return snapshot


def _to_package(entry: SnapshotPackage) -> Package:
    package = Package(**{name: getattr(entry, name) for name in Package.model_fields})
    if "processed_declared_license" not in entry.model_fields_set:
        package.processed_declared_license = process_declared_licenses(
            package.declared_licenses
        )
    return package


class SnapshotDataSource(InMemoryDataSource):
    """Data source reading analysis runs from a snapshot file.

    The file is read once when the source is created.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        snapshot = load_snapshot_file(self.path)

        packages: list[RunPackage] = []
        paths: list[RunDependencyPath] = []
        curations: dict[int, list[PackageCuration]] = {}
        next_pkg_id = 1

        for run in snapshot.runs:
            known: set[Identifier] = set()
            for entry in run.packages:
                pkg_id = entry.id if entry.id is not None else next_pkg_id
                next_pkg_id = max(next_pkg_id, pkg_id) + 1
                package = _to_package(entry)
                known.add(package.identifier)
                packages.append(RunPackage(run_id=run.id, pkg_id=pkg_id, package=package))

            for path_entry in run.shortest_dependency_paths:
                if path_entry.package not in known:
                    logger.warning(
                        "Run %d has a dependency path to unknown package %s",
                        run.id,
                        path_entry.package.display,
                    )
                paths.append(
                    RunDependencyPath(
                        run_id=run.id,
                        package=path_entry.package,
                        path=ShortestDependencyPath(
                            project_identifier=path_entry.project_identifier,
                            scope=path_entry.scope,
                            path=path_entry.path,
                        ),
                    )
                )

            curations[run.id] = run.curations

        logger.debug(
            "Loaded %d run(s) with %d package(s) from %s",
            len(snapshot.runs),
            len(packages),
            self.path,
        )
        super().__init__(packages, paths, curations)
