"""Filtering, sorting and pagination of merged package data.

Sort and filter fields are enum tags resolved through lookup tables, so an
unknown field name is rejected when a query is parsed rather than when it
is evaluated.
"""
from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from typing import Any, Callable, Optional

from package_curator.exceptions import InvalidQueryError
from package_curator.models.identifier import Identifier
from package_curator.models.query import (
    SET_OPERATORS,
    ComparisonOperator,
    FilterOperatorAndValue,
    ListQueryParameters,
    ListQueryResult,
    OrderDirection,
    OrderField,
    PackageField,
    PackageFilters,
)
from package_curator.models.run import PackageRunData

logger = logging.getLogger(__name__)

Predicate = Callable[[PackageRunData], bool]

_SORT_KEYS: dict[PackageField, Callable[[PackageRunData], Any]] = {
    PackageField.IDENTIFIER: lambda entry: entry.package.identifier.sort_key,
    # Purls compare by segment, so "example@1.0" sorts before "example2@1.0"
    PackageField.PURL: lambda entry: entry.package.identifier.sort_key,
    PackageField.PROCESSED_DECLARED_LICENSE: (
        lambda entry: entry.package.processed_declared_license.spdx_expression
    ),
}

_FILTER_VALUES: dict[PackageField, Callable[[PackageRunData], str]] = {
    PackageField.IDENTIFIER: lambda entry: entry.package.identifier.display,
    PackageField.PURL: lambda entry: entry.package.purl,
    PackageField.PROCESSED_DECLARED_LICENSE: (
        lambda entry: entry.package.processed_declared_license.spdx_expression
    ),
}

# Fields compared case-insensitively by every operator
_CASE_INSENSITIVE_FIELDS = frozenset({PackageField.IDENTIFIER, PackageField.PURL})

_FIELD_NAMES: dict[str, PackageField] = {
    **{field.value.lower(): field for field in PackageField},
    "processed_declared_license": PackageField.PROCESSED_DECLARED_LICENSE,
}

_DIRECTION_NAMES: dict[str, OrderDirection] = {
    "asc": OrderDirection.ASCENDING,
    "ascending": OrderDirection.ASCENDING,
    "desc": OrderDirection.DESCENDING,
    "descending": OrderDirection.DESCENDING,
}

_OPERATOR_NAMES: dict[str, ComparisonOperator] = {
    **{operator.value: operator for operator in ComparisonOperator},
    "like": ComparisonOperator.ILIKE,
    "equals": ComparisonOperator.EQUALS,
    "not-in": ComparisonOperator.NOT_IN,
}


def parse_field(name: str) -> PackageField:
    """Resolve a field name to its tag.

    Args:
        name: Field name, e.g. "purl" or "processedDeclaredLicense".

    Returns:
        The matching PackageField.

    Raises:
        InvalidQueryError: If the field is not sortable or filterable.
    """
    field = _FIELD_NAMES.get(name.strip().lower())
    if field is None:
        supported = ", ".join(f.value for f in PackageField)
        raise InvalidQueryError(f"Unknown field '{name}', expected one of: {supported}")
    return field


def parse_order_field(option: str) -> OrderField:
    """Parse a sort key like "purl" or "purl:desc".

    Args:
        option: Field name, optionally followed by ":asc" or ":desc".

    Returns:
        The parsed OrderField.

    Raises:
        InvalidQueryError: If field or direction is unknown.
    """
    name, _, direction_name = option.partition(":")
    direction = OrderDirection.ASCENDING
    if direction_name:
        found = _DIRECTION_NAMES.get(direction_name.strip().lower())
        if found is None:
            raise InvalidQueryError(
                f"Unknown sort direction '{direction_name}' in '{option}'"
            )
        direction = found
    return OrderField(name=parse_field(name), direction=direction)


def parse_filter(option: str) -> tuple[PackageField, FilterOperatorAndValue]:
    """Parse a filter like "identifier:ilike:com.example" or "purl:in:a,b".

    The value is everything after the second colon, so it may contain
    colons itself. Values of IN and NOT_IN are split on commas. ILIKE
    values match as substrings, with "%" for any run of characters and
    "_" for a single character.

    Args:
        option: Filter in the form "field:operator:value".

    Returns:
        Tuple of the field and the operator with its value.

    Raises:
        InvalidQueryError: If the filter is malformed.
    """
    parts = option.split(":", 2)
    if len(parts) != 3:
        raise InvalidQueryError(
            f"Invalid filter '{option}': expected 'field:operator:value'"
        )
    name, operator_name, raw_value = parts

    field = parse_field(name)
    operator = _OPERATOR_NAMES.get(operator_name.strip().lower())
    if operator is None:
        supported = ", ".join(op.value for op in ComparisonOperator)
        raise InvalidQueryError(
            f"Unknown filter operator '{operator_name}', expected one of: {supported}"
        )

    value: Any = raw_value
    if operator in SET_OPERATORS:
        value = {item.strip() for item in raw_value.split(",") if item.strip()}
    return field, FilterOperatorAndValue(operator=operator, value=value)


def build_filters(options: Iterable[str]) -> PackageFilters:
    """Build package filters from filter strings.

    Args:
        options: Filters in the form "field:operator:value".

    Returns:
        PackageFilters with one filter per field.

    Raises:
        InvalidQueryError: If a filter is malformed or a field is repeated.
    """
    values: dict[str, FilterOperatorAndValue] = {}
    for option in options:
        field, filter_value = parse_filter(option)
        key = _filter_attribute(field)
        if key in values:
            raise InvalidQueryError(f"Field '{field.value}' is filtered more than once")
        values[key] = filter_value
    return PackageFilters(**values)


def _filter_attribute(field: PackageField) -> str:
    if field is PackageField.PROCESSED_DECLARED_LICENSE:
        return "processed_declared_license"
    return field.value


def _normalize_filter_value(field: PackageField, value: str) -> str:
    # "NPM:/which" means an empty namespace, which the display form leaves out
    if field is PackageField.IDENTIFIER:
        value = value.replace(":/", ":")
    if field in _CASE_INSENSITIVE_FIELDS:
        value = value.lower()
    return value


_ILIKE_WILDCARDS = {"%": ".*", "_": "."}


def _ilike_pattern(value: str) -> re.Pattern[str]:
    parts = re.split(r"([%_])", value)
    regex = "".join(_ILIKE_WILDCARDS.get(part) or re.escape(part) for part in parts)
    return re.compile(regex, re.IGNORECASE | re.DOTALL)


def build_predicate(field: PackageField, filter_value: FilterOperatorAndValue) -> Predicate:
    """Build a predicate testing one field of merged package data.

    Args:
        field: Field to test.
        filter_value: Operator and value to test against.

    Returns:
        Function returning True for matching entries.

    Raises:
        InvalidQueryError: If the value type does not fit the operator.
    """
    extract = _FILTER_VALUES[field]
    operator = filter_value.operator
    value = filter_value.value
    fold: Callable[[str], str] = str.lower if field in _CASE_INSENSITIVE_FIELDS else str

    if operator in SET_OPERATORS:
        if isinstance(value, str):
            raise InvalidQueryError(
                f"Operator '{operator.value}' on '{field.value}' requires a set of values"
            )
        values = {_normalize_filter_value(field, item) for item in value}
        if operator is ComparisonOperator.IN:
            return lambda entry: fold(extract(entry)) in values
        return lambda entry: fold(extract(entry)) not in values

    if not isinstance(value, str):
        raise InvalidQueryError(
            f"Operator '{operator.value}' on '{field.value}' requires a single value"
        )
    normalized = _normalize_filter_value(field, value)

    if operator is ComparisonOperator.EQUALS:
        return lambda entry: fold(extract(entry)) == normalized

    pattern = _ilike_pattern(normalized)
    return lambda entry: pattern.search(extract(entry)) is not None


def filter_entries(
    entries: Iterable[PackageRunData],
    filters: Optional[PackageFilters] = None,
) -> list[PackageRunData]:
    """Keep the entries matching all given filters.

    Args:
        entries: Merged package data.
        filters: Filters to apply, None for no filtering.

    Returns:
        Matching entries in input order.
    """
    if filters is None:
        return list(entries)
    predicates = [build_predicate(field, value) for field, value in filters.active_filters()]
    return [entry for entry in entries if all(p(entry) for p in predicates)]


def sort_entries(
    entries: Iterable[PackageRunData],
    sort_fields: Iterable[OrderField] = (),
) -> list[PackageRunData]:
    """Sort entries by the given keys in priority order.

    Entries that compare equal on all keys are ordered by identifier.

    Args:
        entries: Merged package data.
        sort_fields: Sort keys, the first one has the highest priority.

    Returns:
        New sorted list.
    """
    result = sorted(entries, key=lambda entry: entry.package.identifier.sort_key)
    # Stable sorts applied from the least to the most significant key
    for order in reversed(list(sort_fields)):
        result.sort(
            key=_SORT_KEYS[order.name],
            reverse=order.direction is OrderDirection.DESCENDING,
        )
    return result


def paginate(
    entries: list[PackageRunData],
    limit: Optional[int] = None,
    offset: int = 0,
) -> list[PackageRunData]:
    """Cut a page out of sorted entries.

    Args:
        entries: Sorted entries.
        limit: Maximum page size, None for all entries from offset.
        offset: Number of entries to skip.

    Returns:
        The page.

    Raises:
        InvalidQueryError: If limit or offset is negative.
    """
    if offset < 0:
        raise InvalidQueryError(f"Offset must not be negative, got {offset}")
    if limit is not None and limit < 0:
        raise InvalidQueryError(f"Limit must not be negative, got {limit}")
    if limit is None:
        return entries[offset:]
    return entries[offset : offset + limit]


def deduplicate_by_identifier(entries: Iterable[PackageRunData]) -> list[PackageRunData]:
    """Keep one entry per package identifier.

    When an identifier occurs in several runs, the entry of the lowest run
    id is kept, together with that run's curations and dependency paths.

    Args:
        entries: Merged package data of one or more runs.

    Returns:
        One entry per identifier, in order of first occurrence.
    """
    chosen: dict[Identifier, PackageRunData] = {}
    for entry in entries:
        identifier = entry.package.identifier
        current = chosen.get(identifier)
        if current is None or (entry.run_id, entry.pkg_id) < (current.run_id, current.pkg_id):
            chosen[identifier] = entry
    return list(chosen.values())


def query_packages(
    entries: Iterable[PackageRunData],
    parameters: Optional[ListQueryParameters] = None,
    filters: Optional[PackageFilters] = None,
) -> ListQueryResult[PackageRunData]:
    """Filter, sort and paginate merged package data.

    Entries are deduplicated by identifier first, so total_count counts
    each package once even if it occurs in several runs.

    Args:
        entries: Merged package data of one or more runs.
        parameters: Sort and pagination options.
        filters: Filters to apply.

    Returns:
        ListQueryResult with the requested page and the number of matches
        before pagination.

    Raises:
        InvalidQueryError: If a filter or the pagination is invalid.
    """
    parameters = parameters or ListQueryParameters()

    candidates = deduplicate_by_identifier(entries)
    matches = sort_entries(filter_entries(candidates, filters), parameters.sort_fields)
    page = paginate(matches, parameters.limit, parameters.offset)

    logger.debug(
        "Query matched %d of %d package(s), returning %d",
        len(matches),
        len(candidates),
        len(page),
    )

    return ListQueryResult[PackageRunData](
        data=page, params=parameters, total_count=len(matches)
    )
