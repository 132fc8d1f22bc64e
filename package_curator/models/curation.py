"""Package curation models.

Curations are partial updates of a package. Every payload field is optional:
a field that was never given is absent and leaves the package untouched,
while a field given explicitly, even as null, is present and overwrites.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_serializer

from package_curator.models.identifier import Identifier
from package_curator.models.package import RemoteArtifact, VcsInfo


class PackageCurationData(BaseModel):
    """Payload of a package curation."""

    model_config = {"extra": "forbid"}

    comment: Optional[str] = Field(default=None, description="Reason for the curation")
    concluded_license: Optional[str] = Field(
        default=None, description="Concluded SPDX license expression"
    )
    authors: Optional[set[str]] = Field(
        default=None, description="Replacement author set"
    )
    description: Optional[str] = Field(default=None, description="Package description")
    homepage_url: Optional[str] = Field(default=None, description="Homepage URL")
    cpe: Optional[str] = Field(default=None, description="Common Platform Enumeration")
    binary_artifact: Optional[RemoteArtifact] = Field(
        default=None, description="Binary artifact"
    )
    source_artifact: Optional[RemoteArtifact] = Field(
        default=None, description="Source artifact"
    )
    vcs: Optional[VcsInfo] = Field(default=None, description="VCS information")
    is_metadata_only: Optional[bool] = Field(
        default=None, description="Whether the package has no artifacts"
    )
    is_modified: Optional[bool] = Field(
        default=None, description="Whether the package was modified"
    )
    declared_license_mapping: Optional[dict[str, str]] = Field(
        default=None,
        description="Additional declared license to SPDX expression mappings",
    )

    @field_serializer("authors", when_used="json")
    def _serialize_authors(self, value: Optional[set[str]]) -> Optional[list[str]]:
        return None if value is None else sorted(value)

    def is_present(self, field_name: str) -> bool:
        """Check whether a field was given explicitly in this curation.

        Args:
            field_name: Name of a payload field.

        Returns:
            True if the field was set, even if it was set to None.
        """
        return field_name in self.model_fields_set


class PackageCuration(BaseModel):
    """A curation targeting packages with a given identifier."""

    model_config = {"extra": "forbid"}

    id: Identifier = Field(description="Identifier of the curated package")
    data: PackageCurationData = Field(description="Curation payload")

    def is_applicable(self, identifier: Identifier) -> bool:
        """Check if this curation applies to a package.

        The type is compared case-insensitively, namespace and name exactly.
        A curation with a blank version applies to all versions.

        Args:
            identifier: Identifier of the package.

        Returns:
            True if the curation targets the package.
        """
        return (
            self.id.type.lower() == identifier.type.lower()
            and self.id.namespace == identifier.namespace
            and self.id.name == identifier.name
            and (not self.id.version.strip() or self.id.version == identifier.version)
        )
