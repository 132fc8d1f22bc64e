"""Models for packages merged with run specific data."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from package_curator.models.curation import PackageCurationData
from package_curator.models.package import Package, ShortestDependencyPath


class PackageRunData(BaseModel):
    """A curated package together with data specific to an analysis run.

    Derived per query and never stored.
    """

    model_config = {"extra": "forbid"}

    package: Package = Field(description="The package with curations applied")
    pkg_id: int = Field(description="Internal key of the package in its run")
    run_id: int = Field(description="Analysis run this view was built from")
    shortest_dependency_paths: list[ShortestDependencyPath] = Field(
        default_factory=list,
        description="Shortest paths from each project to the package",
    )
    concluded_license: Optional[str] = Field(
        default=None,
        description="Concluded license set by the last curation that set one",
    )
    curations: list[PackageCurationData] = Field(
        default_factory=list,
        description="Curation payloads applied to the package, in order",
    )


class EcosystemStats(BaseModel):
    """Number of distinct packages of one package manager type."""

    model_config = {"extra": "forbid"}

    name: str = Field(description="Package manager type")
    count: int = Field(ge=0, description="Number of distinct packages")
