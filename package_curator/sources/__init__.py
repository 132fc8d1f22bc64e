"""Suppliers of analysis run data for package-curator."""

from package_curator.sources.base import PackageDataSource
from package_curator.sources.memory import InMemoryDataSource
from package_curator.sources.snapshot import SnapshotDataSource, load_snapshot_file

__all__ = [
    "InMemoryDataSource",
    "PackageDataSource",
    "SnapshotDataSource",
    "load_snapshot_file",
]
