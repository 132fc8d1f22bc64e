"""Declared license processing.

Maps a package's declared licenses to a single SPDX expression using a
declared-license-to-SPDX mapping. Uses the license-expression library for
SPDX parsing and normalization.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Optional

from license_expression import ExpressionError, get_spdx_licensing

from package_curator.constants import LICENSE_REF_PREFIX
from package_curator.models.package import ProcessedDeclaredLicense

# Initialize SPDX licensing for parsing
_licensing = get_spdx_licensing()

# References that are valid SPDX even though they are not listed license keys
_REFERENCE_PATTERN = re.compile(
    r"(DocumentRef-[A-Za-z0-9.\-]+:)?LicenseRef-[A-Za-z0-9.\-]+"
)
_INVALID_REF_CHARS = re.compile(r"[^A-Za-z0-9.\-]+")


def normalize_license(license_str: str) -> Optional[str]:
    """Normalize a license string to its canonical SPDX rendering.

    Args:
        license_str: A license identifier or expression.

    Returns:
        The rendered SPDX expression, or None if the string contains
        anything other than known SPDX keys and license references.
    """
    value = license_str.strip()
    if not value:
        return None

    if _REFERENCE_PATTERN.fullmatch(value):
        return value

    try:
        parsed = _licensing.parse(value)
    except ExpressionError:
        return None
    if parsed is None:
        return None

    unknown = [
        key
        for key in _licensing.unknown_license_keys(parsed)
        if not _REFERENCE_PATTERN.fullmatch(key)
    ]
    if unknown:
        return None

    return str(parsed.render())


def to_license_ref(license_str: str) -> str:
    """Wrap an arbitrary license string as a LicenseRef.

    Args:
        license_str: A license string that is not valid SPDX.

    Returns:
        A LicenseRef identifier, e.g. "LicenseRef-Apache-License-2.0".
    """
    sanitized = _INVALID_REF_CHARS.sub("-", license_str.strip()).strip("-")
    return f"{LICENSE_REF_PREFIX}{sanitized or 'unknown'}"


def _to_term(license_str: str) -> str:
    return normalize_license(license_str) or to_license_ref(license_str)


def _conjoin(terms: Iterable[str]) -> str:
    ordered = sorted(set(terms))
    if len(ordered) <= 1:
        return "".join(ordered)
    return " AND ".join(f"({term})" if " OR " in term else term for term in ordered)


def process_declared_licenses(
    declared_licenses: Iterable[str],
    mapping: Optional[Mapping[str, str]] = None,
) -> ProcessedDeclaredLicense:
    """Process declared licenses into a single SPDX expression.

    Each declared license is replaced by its mapped value if the mapping
    contains it. Mapped values and remaining declared licenses are
    normalized, deduplicated, sorted and conjoined with AND, so the result
    does not depend on the iteration order of the inputs. Licenses that are
    not valid SPDX are kept as LicenseRefs, never dropped.

    Args:
        declared_licenses: Licenses as declared by the package.
        mapping: Declared license to SPDX expression mapping. Entries for
            licenses that are not declared are ignored.

    Returns:
        ProcessedDeclaredLicense with expression, used mappings and
        unmapped licenses. Empty input gives an empty result.
    """
    declared = set(declared_licenses)
    mapping = mapping or {}

    mapped = {key: value for key, value in mapping.items() if key in declared}
    unmapped = declared - mapped.keys()

    terms = [_to_term(value) for value in mapped.values()]
    terms.extend(_to_term(license_str) for license_str in unmapped)

    return ProcessedDeclaredLicense(
        spdx_expression=_conjoin(terms),
        mapped_licenses=dict(sorted(mapped.items())),
        unmapped_licenses=unmapped,
    )
