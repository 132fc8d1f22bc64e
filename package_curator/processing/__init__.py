"""Curation, dependency path and query processing for package-curator."""
from package_curator.processing.aggregation import (
    count_by_ecosystem,
    count_distinct,
    distinct_processed_licenses,
)
from package_curator.processing.curations import (
    CurationIndex,
    CurationResult,
    apply_curations,
    resolve_applicable_curations,
)
from package_curator.processing.licenses import (
    normalize_license,
    process_declared_licenses,
)
from package_curator.processing.paths import DependencyPathIndex, index_dependency_paths
from package_curator.processing.query import (
    build_filters,
    deduplicate_by_identifier,
    parse_filter,
    parse_order_field,
    query_packages,
)

__all__ = [
    "CurationIndex",
    "CurationResult",
    "DependencyPathIndex",
    "apply_curations",
    "build_filters",
    "count_by_ecosystem",
    "count_distinct",
    "deduplicate_by_identifier",
    "distinct_processed_licenses",
    "index_dependency_paths",
    "normalize_license",
    "parse_filter",
    "parse_order_field",
    "process_declared_licenses",
    "query_packages",
    "resolve_applicable_curations",
]
