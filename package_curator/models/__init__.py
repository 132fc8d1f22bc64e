"""Pydantic data models for package-curator."""

from package_curator.models.curation import PackageCuration, PackageCurationData
from package_curator.models.identifier import Identifier
from package_curator.models.package import (
    Package,
    ProcessedDeclaredLicense,
    RemoteArtifact,
    RunDependencyPath,
    RunPackage,
    ShortestDependencyPath,
    VcsInfo,
)
from package_curator.models.query import (
    ComparisonOperator,
    FilterOperatorAndValue,
    ListQueryParameters,
    ListQueryResult,
    OrderDirection,
    OrderField,
    PackageField,
    PackageFilters,
)
from package_curator.models.run import EcosystemStats, PackageRunData

__all__ = [
    "ComparisonOperator",
    "EcosystemStats",
    "FilterOperatorAndValue",
    "Identifier",
    "ListQueryParameters",
    "ListQueryResult",
    "OrderDirection",
    "OrderField",
    "Package",
    "PackageCuration",
    "PackageCurationData",
    "PackageField",
    "PackageFilters",
    "PackageRunData",
    "ProcessedDeclaredLicense",
    "RemoteArtifact",
    "RunDependencyPath",
    "RunPackage",
    "ShortestDependencyPath",
    "VcsInfo",
]
