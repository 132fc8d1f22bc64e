"""Package identifier model.

An identifier is the (type, namespace, name, version) tuple that defines
package identity within and across analysis runs.
"""

from __future__ import annotations

from functools import total_ordering
from typing import Any

from pydantic import BaseModel, Field, model_validator


@total_ordering
class Identifier(BaseModel):
    """Unique identifier of a package or project.

    Identifiers are immutable and hashable so they can key lookup tables.
    Ordering is lexicographic and case-sensitive over type, namespace,
    name and version.
    """

    model_config = {"extra": "forbid", "frozen": True}

    type: str = Field(description="Package manager type, e.g. Maven or NPM")
    namespace: str = Field(default="", description="Namespace, may be empty")
    name: str = Field(description="Package name")
    version: str = Field(default="", description="Package version")

    @model_validator(mode="before")
    @classmethod
    def _parse_coordinates(cls, data: Any) -> Any:
        """Accept "type:namespace:name:version" strings wherever an Identifier is expected."""
        if isinstance(data, str):
            return _split_coordinates(data)
        return data

    @classmethod
    def from_coordinates(cls, coordinates: str) -> "Identifier":
        """Parse an identifier from its colon-separated coordinates.

        Args:
            coordinates: String like "Maven:com.example:example:1.0".

        Returns:
            The parsed Identifier.

        Raises:
            ValueError: If the string does not have four segments.
        """
        return cls(**_split_coordinates(coordinates))

    @property
    def sort_key(self) -> tuple[str, str, str, str]:
        """Tuple defining the natural order of identifiers."""
        return (self.type, self.namespace, self.name, self.version)

    @property
    def coordinates(self) -> str:
        """Colon-separated form, e.g. "Maven:com.example:example:1.0"."""
        return ":".join(self.sort_key)

    @property
    def purl(self) -> str:
        """Package URL, e.g. "pkg:Maven/com.example/example@1.0"."""
        if self.namespace:
            return f"pkg:{self.type}/{self.namespace}/{self.name}@{self.version}"
        return f"pkg:{self.type}/{self.name}@{self.version}"

    @property
    def display(self) -> str:
        """Human readable form, e.g. "Maven:com.example/example@1.0".

        The namespace segment is left out when the namespace is empty.
        """
        if self.namespace:
            return f"{self.type}:{self.namespace}/{self.name}@{self.version}"
        return f"{self.type}:{self.name}@{self.version}"

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Identifier):
            return NotImplemented
        return self.sort_key < other.sort_key

    def __str__(self) -> str:
        return self.display


def _split_coordinates(coordinates: str) -> dict[str, str]:
    parts = coordinates.split(":", 3)
    if len(parts) != 4:
        raise ValueError(
            f"Invalid identifier coordinates '{coordinates}': "
            "expected 'type:namespace:name:version'"
        )
    type_, namespace, name, version = (part.strip() for part in parts)
    return {"type": type_, "namespace": namespace, "name": name, "version": version}
