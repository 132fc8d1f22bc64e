"""Curation merging for packages.

Curations are applied in the order they were resolved by their provider.
Each curation is a partial update: fields present in the payload overwrite
the running result, absent fields keep the previous value.
"""
from __future__ import annotations

import copy
import logging
from collections.abc import Iterable
from typing import Any, NamedTuple, Optional

from package_curator.models.curation import PackageCuration, PackageCurationData
from package_curator.models.identifier import Identifier
from package_curator.models.package import Package
from package_curator.processing.licenses import process_declared_licenses

logger = logging.getLogger(__name__)

# Payload fields that overwrite the package field of the same name, with the
# value to use when a curation explicitly sets them to null.
_PACKAGE_FIELDS: dict[str, Any] = {
    "authors": set(),
    "description": "",
    "homepage_url": "",
    "cpe": None,
    "binary_artifact": None,
    "source_artifact": None,
    "vcs": None,
    "is_metadata_only": False,
    "is_modified": False,
}


class CurationResult(NamedTuple):
    """Result of applying curations to a package.

    Attributes:
        package: The package with curations applied.
        concluded_license: Concluded license of the last curation setting one.
        curations: Payloads of all applied curations, in application order.
    """

    package: Package
    concluded_license: Optional[str]
    curations: list[PackageCurationData]


class CurationIndex:
    """Lookup of the curations applicable to a package.

    Curations are grouped by type, namespace and name so matching a package
    does not scan every curation. Provider order is preserved.
    """

    def __init__(self, curations: Iterable[PackageCuration]) -> None:
        self._groups: dict[tuple[str, str, str], list[PackageCuration]] = {}
        for curation in curations:
            key = (curation.id.type.lower(), curation.id.namespace, curation.id.name)
            self._groups.setdefault(key, []).append(curation)

    def applicable(self, identifier: Identifier) -> list[PackageCuration]:
        """Get the curations that apply to an identifier.

        Args:
            identifier: Identifier of the package.

        Returns:
            Applicable curations in provider order, empty if none match.
        """
        key = (identifier.type.lower(), identifier.namespace, identifier.name)
        return [c for c in self._groups.get(key, []) if c.is_applicable(identifier)]


def resolve_applicable_curations(
    identifier: Identifier,
    curations: Iterable[PackageCuration],
) -> list[PackageCuration]:
    """Select the curations that apply to a package, keeping their order.

    Args:
        identifier: Identifier of the package.
        curations: Resolved curations, ordered by provider precedence.

    Returns:
        List of matching curations.
    """
    return [curation for curation in curations if curation.is_applicable(identifier)]


def apply_curations(
    package: Package,
    curations: Iterable[PackageCuration],
) -> CurationResult:
    """Apply an ordered list of curations to a package.

    Fields present in a curation overwrite the running result, authors are
    replaced rather than merged. Declared license mappings accumulate on
    top of the package's own mapped licenses and can only add or override
    entries. After all curations the declared licenses are processed once
    with the accumulated mapping, also when no curation applies.

    Args:
        package: The raw package.
        curations: Curations matching the package, in application order.

    Returns:
        CurationResult with the curated package, the concluded license and
        the applied payloads.
    """
    updates: dict[str, Any] = {}
    mapping = dict(package.processed_declared_license.mapped_licenses)
    concluded_license: Optional[str] = None
    applied: list[PackageCurationData] = []

    for curation in curations:
        data = curation.data
        applied.append(data)

        for field_name, cleared in _PACKAGE_FIELDS.items():
            if data.is_present(field_name):
                value = getattr(data, field_name)
                updates[field_name] = copy.deepcopy(cleared if value is None else value)

        if data.is_present("concluded_license"):
            concluded_license = data.concluded_license

        if data.declared_license_mapping:
            mapping.update(data.declared_license_mapping)

    updates["processed_declared_license"] = process_declared_licenses(
        package.declared_licenses, mapping
    )

    if applied:
        logger.debug(
            "Applied %d curation(s) to %s", len(applied), package.identifier.display
        )

    return CurationResult(
        package=package.model_copy(update=updates, deep=True),
        concluded_license=concluded_license,
        curations=applied,
    )
