"""Package-related Pydantic models."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, computed_field, field_serializer

from package_curator.models.identifier import Identifier


class RemoteArtifact(BaseModel):
    """A remote binary or source artifact of a package."""

    model_config = {"extra": "forbid"}

    url: str = Field(description="Download URL of the artifact")
    hash_value: str = Field(default="", description="Hash of the artifact")
    hash_algorithm: str = Field(default="", description="Hash algorithm, e.g. SHA-1")


class VcsInfo(BaseModel):
    """Version control information of a package."""

    model_config = {"extra": "forbid"}

    type: str = Field(default="", description="VCS type, e.g. Git")
    url: str = Field(default="", description="Repository URL")
    revision: str = Field(default="", description="Revision or tag")
    path: str = Field(default="", description="Path inside the repository")


class ProcessedDeclaredLicense(BaseModel):
    """Result of mapping a package's declared licenses to SPDX.

    unmapped_licenses is always the declared licenses minus the keys of
    mapped_licenses.
    """

    model_config = {"extra": "forbid"}

    spdx_expression: str = Field(
        default="",
        description="AND-conjunction of mapped and unmapped licenses",
    )
    mapped_licenses: dict[str, str] = Field(
        default_factory=dict,
        description="Declared license to SPDX expression mapping that was used",
    )
    unmapped_licenses: set[str] = Field(
        default_factory=set,
        description="Declared licenses not covered by the mapping",
    )

    @field_serializer("unmapped_licenses", when_used="json")
    def _serialize_unmapped(self, value: set[str]) -> list[str]:
        return sorted(value)


class Package(BaseModel):
    """A package detected by an analysis run."""

    model_config = {"extra": "forbid"}

    identifier: Identifier = Field(description="Package identifier")
    cpe: Optional[str] = Field(default=None, description="Common Platform Enumeration")
    authors: set[str] = Field(default_factory=set, description="Package authors")
    declared_licenses: set[str] = Field(
        default_factory=set,
        description="Licenses as declared in the package metadata",
    )
    processed_declared_license: ProcessedDeclaredLicense = Field(
        default_factory=ProcessedDeclaredLicense,
        description="Declared licenses mapped to SPDX",
    )
    description: str = Field(default="", description="Package description")
    homepage_url: str = Field(default="", description="Homepage URL")
    binary_artifact: Optional[RemoteArtifact] = Field(
        default=None, description="Binary artifact"
    )
    source_artifact: Optional[RemoteArtifact] = Field(
        default=None, description="Source artifact"
    )
    vcs: Optional[VcsInfo] = Field(default=None, description="VCS information")
    is_metadata_only: bool = Field(
        default=False, description="True if the package has no artifacts"
    )
    is_modified: bool = Field(
        default=False, description="True if the package was modified"
    )

    @field_serializer("authors", "declared_licenses", when_used="json")
    def _serialize_sorted(self, value: set[str]) -> list[str]:
        """Dump sets sorted so serialized output is stable."""
        return sorted(value)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def purl(self) -> str:
        """Package URL derived from the identifier."""
        return self.identifier.purl


class ShortestDependencyPath(BaseModel):
    """The shortest path from a project to a package within one scope.

    The package itself is the implied terminus of the path and is not
    contained in it.
    """

    model_config = {"extra": "forbid"}

    project_identifier: Identifier = Field(description="Project the path starts at")
    scope: str = Field(description="Dependency scope, e.g. compileClasspath")
    path: list[Identifier] = Field(
        default_factory=list,
        description="Intermediate identifiers from the project to the package",
    )


class RunPackage(BaseModel):
    """A package as stored for a specific analysis run."""

    model_config = {"extra": "forbid"}

    run_id: int = Field(description="Analysis run the package belongs to")
    pkg_id: int = Field(description="Internal key of the package in the run")
    package: Package = Field(description="The raw package")


class RunDependencyPath(BaseModel):
    """A shortest dependency path as stored for a specific analysis run."""

    model_config = {"extra": "forbid"}

    run_id: int = Field(description="Analysis run the path belongs to")
    package: Identifier = Field(description="Package terminating the path")
    path: ShortestDependencyPath = Field(description="The dependency path")
