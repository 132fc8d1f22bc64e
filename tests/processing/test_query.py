"""Tests for filtering, sorting and pagination of package data."""

import pytest

from package_curator.exceptions import InvalidQueryError
from package_curator.models.identifier import Identifier
from package_curator.models.package import Package, ProcessedDeclaredLicense
from package_curator.models.query import (
    ComparisonOperator,
    FilterOperatorAndValue,
    ListQueryParameters,
    OrderDirection,
    OrderField,
    PackageField,
    PackageFilters,
)
from package_curator.models.run import PackageRunData
from package_curator.processing.query import (
    build_filters,
    build_predicate,
    deduplicate_by_identifier,
    filter_entries,
    paginate,
    parse_filter,
    parse_order_field,
    query_packages,
    sort_entries,
)


def _entry(
    coordinates: str, license_expression: str = "", run_id: int = 1, pkg_id: int = 1
) -> PackageRunData:
    package = Package(
        identifier=Identifier.from_coordinates(coordinates),
        processed_declared_license=ProcessedDeclaredLicense(
            spdx_expression=license_expression
        ),
    )
    return PackageRunData(package=package, pkg_id=pkg_id, run_id=run_id)


@pytest.fixture
def entries() -> list[PackageRunData]:
    """Provide packages of one run in no particular order."""
    return [
        _entry("NPM::which:2.0.2", "MIT", pkg_id=2),
        _entry("PyPI::requests:2.31.0", "", pkg_id=4),
        _entry("Maven:org.apache.logging.log4j:log4j-core:2.14.0", "Apache-2.0", pkg_id=3),
        _entry("Maven:com.example:example:1.0", "Apache-2.0", pkg_id=1),
    ]


def _names(entries: list[PackageRunData]) -> list[str]:
    return [entry.package.identifier.name for entry in entries]


def _filters(field: PackageField, operator: ComparisonOperator, value: object) -> PackageFilters:
    attribute = {
        PackageField.IDENTIFIER: "identifier",
        PackageField.PURL: "purl",
        PackageField.PROCESSED_DECLARED_LICENSE: "processed_declared_license",
    }[field]
    return PackageFilters(
        **{attribute: FilterOperatorAndValue(operator=operator, value=value)}
    )


class TestParseOrderField:
    """Tests for parse_order_field function."""

    def test_field_only_is_ascending(self) -> None:
        """Test that a field without direction sorts ascending."""
        order = parse_order_field("processedDeclaredLicense")

        assert order == OrderField(
            name=PackageField.PROCESSED_DECLARED_LICENSE,
            direction=OrderDirection.ASCENDING,
        )

    def test_field_with_direction(self) -> None:
        """Test parsing a descending sort key."""
        order = parse_order_field("purl:desc")

        assert order.name == PackageField.PURL
        assert order.direction == OrderDirection.DESCENDING

    def test_field_name_is_case_insensitive(self) -> None:
        """Test that field names are matched case-insensitively."""
        assert parse_order_field("IDENTIFIER").name == PackageField.IDENTIFIER

    def test_unknown_field_raises(self) -> None:
        """Test that unknown fields are rejected."""
        with pytest.raises(InvalidQueryError, match="Unknown field 'homepage'"):
            parse_order_field("homepage")

    def test_unknown_direction_raises(self) -> None:
        """Test that unknown directions are rejected."""
        with pytest.raises(InvalidQueryError, match="Unknown sort direction"):
            parse_order_field("purl:up")


class TestParseFilter:
    """Tests for parse_filter and build_filters functions."""

    def test_value_may_contain_colons(self) -> None:
        """Test that everything after the operator is the value."""
        field, value = parse_filter("identifier:ilike:Maven:com.example")

        assert field == PackageField.IDENTIFIER
        assert value.operator == ComparisonOperator.ILIKE
        assert value.value == "Maven:com.example"

    def test_set_operator_splits_values(self) -> None:
        """Test that IN values are split on commas."""
        field, value = parse_filter("processedDeclaredLicense:in:MIT, Apache-2.0")

        assert field == PackageField.PROCESSED_DECLARED_LICENSE
        assert value.operator == ComparisonOperator.IN
        assert value.value == {"MIT", "Apache-2.0"}

    def test_operator_alias(self) -> None:
        """Test that operator aliases are accepted."""
        _, value = parse_filter("purl:not-in:pkg:NPM/which@2.0.2")

        assert value.operator == ComparisonOperator.NOT_IN
        assert value.value == {"pkg:NPM/which@2.0.2"}

    def test_missing_value_raises(self) -> None:
        """Test that a filter without value is rejected."""
        with pytest.raises(InvalidQueryError, match="Invalid filter"):
            parse_filter("purl:ilike")

    def test_unknown_operator_raises(self) -> None:
        """Test that unknown operators are rejected."""
        with pytest.raises(InvalidQueryError, match="Unknown filter operator"):
            parse_filter("purl:contains:npm")

    def test_build_filters(self) -> None:
        """Test building filters for several fields."""
        filters = build_filters(
            ["identifier:ilike:example", "processed_declared_license:eq:MIT"]
        )

        assert filters.identifier is not None
        assert filters.processed_declared_license is not None
        assert filters.processed_declared_license.operator == ComparisonOperator.EQUALS
        assert filters.purl is None

    def test_build_filters_rejects_repeated_field(self) -> None:
        """Test that a field may be filtered only once."""
        with pytest.raises(InvalidQueryError, match="more than once"):
            build_filters(["purl:ilike:npm", "purl:ilike:maven"])


class TestFilterEntries:
    """Tests for filter_entries function."""

    def test_no_filters_keeps_all(self, entries: list[PackageRunData]) -> None:
        """Test that no filters keep every entry."""
        assert filter_entries(entries, None) == entries
        assert filter_entries(entries, PackageFilters()) == entries

    def test_identifier_ilike_substring(self, entries: list[PackageRunData]) -> None:
        """Test case-insensitive substring match on the identifier."""
        filters = _filters(PackageField.IDENTIFIER, ComparisonOperator.ILIKE, "COM.EXAMPLE")

        assert _names(filter_entries(entries, filters)) == ["example"]

    def test_identifier_ilike_empty_namespace(self, entries: list[PackageRunData]) -> None:
        """Test that ":/" matches a package without namespace."""
        filters = _filters(PackageField.IDENTIFIER, ComparisonOperator.ILIKE, "npm:/which")

        assert _names(filter_entries(entries, filters)) == ["which"]

    def test_ilike_wildcard(self, entries: list[PackageRunData]) -> None:
        """Test that % matches any sequence of characters."""
        filters = _filters(PackageField.IDENTIFIER, ComparisonOperator.ILIKE, "log4j%2.14")

        assert _names(filter_entries(entries, filters)) == ["log4j-core"]

    def test_ilike_single_character_wildcard(self, entries: list[PackageRunData]) -> None:
        """Test that _ matches exactly one character."""
        one = _filters(PackageField.IDENTIFIER, ComparisonOperator.ILIKE, "log4j_core")
        two = _filters(PackageField.IDENTIFIER, ComparisonOperator.ILIKE, "log4_core")

        assert _names(filter_entries(entries, one)) == ["log4j-core"]
        assert _names(filter_entries(entries, two)) == []

    def test_ilike_escapes_regex_characters(self, entries: list[PackageRunData]) -> None:
        """Test that regex characters in the value are literal."""
        filters = _filters(PackageField.PURL, ComparisonOperator.ILIKE, "example@1.")

        assert _names(filter_entries(entries, filters)) == ["example"]

    def test_license_ilike_is_case_insensitive(self, entries: list[PackageRunData]) -> None:
        """Test that ILIKE on licenses ignores case."""
        filters = _filters(
            PackageField.PROCESSED_DECLARED_LICENSE, ComparisonOperator.ILIKE, "apache"
        )

        assert _names(filter_entries(entries, filters)) == ["log4j-core", "example"]

    def test_license_in(self, entries: list[PackageRunData]) -> None:
        """Test IN on the processed license."""
        filters = _filters(
            PackageField.PROCESSED_DECLARED_LICENSE,
            ComparisonOperator.IN,
            {"MIT", "Apache-2.0"},
        )

        assert _names(filter_entries(entries, filters)) == ["which", "log4j-core", "example"]

    def test_license_not_in(self, entries: list[PackageRunData]) -> None:
        """Test NOT_IN on the processed license."""
        filters = _filters(
            PackageField.PROCESSED_DECLARED_LICENSE, ComparisonOperator.NOT_IN, {"MIT"}
        )

        assert _names(filter_entries(entries, filters)) == [
            "requests",
            "log4j-core",
            "example",
        ]

    def test_license_equals_is_case_sensitive(self, entries: list[PackageRunData]) -> None:
        """Test that EQUALS on licenses compares exactly."""
        filters = _filters(
            PackageField.PROCESSED_DECLARED_LICENSE, ComparisonOperator.EQUALS, "mit"
        )

        assert filter_entries(entries, filters) == []

    def test_purl_in_is_case_insensitive(self, entries: list[PackageRunData]) -> None:
        """Test that IN on purls ignores case."""
        filters = _filters(
            PackageField.PURL, ComparisonOperator.IN, {"PKG:NPM/WHICH@2.0.2"}
        )

        assert _names(filter_entries(entries, filters)) == ["which"]

    def test_filters_are_conjoined(self, entries: list[PackageRunData]) -> None:
        """Test that all filters must match."""
        filters = PackageFilters(
            identifier=FilterOperatorAndValue(
                operator=ComparisonOperator.ILIKE, value="maven"
            ),
            processed_declared_license=FilterOperatorAndValue(
                operator=ComparisonOperator.EQUALS, value="Apache-2.0"
            ),
            purl=FilterOperatorAndValue(operator=ComparisonOperator.ILIKE, value="log4j"),
        )

        assert _names(filter_entries(entries, filters)) == ["log4j-core"]

    def test_set_operator_requires_set(self) -> None:
        """Test that IN with a single string value is rejected."""
        with pytest.raises(InvalidQueryError, match="requires a set"):
            build_predicate(
                PackageField.PURL,
                FilterOperatorAndValue(operator=ComparisonOperator.IN, value="pkg:NPM"),
            )

    def test_single_operator_requires_string(self) -> None:
        """Test that ILIKE with a set value is rejected."""
        with pytest.raises(InvalidQueryError, match="requires a single value"):
            build_predicate(
                PackageField.PURL,
                FilterOperatorAndValue(operator=ComparisonOperator.ILIKE, value={"a"}),
            )


class TestSortEntries:
    """Tests for sort_entries function."""

    def test_default_order_is_identifier(self, entries: list[PackageRunData]) -> None:
        """Test that entries without sort keys are ordered by identifier."""
        assert _names(sort_entries(entries)) == [
            "example",
            "log4j-core",
            "which",
            "requests",
        ]

    def test_purl_ascending(self, entries: list[PackageRunData]) -> None:
        """Test sorting by purl."""
        result = sort_entries(entries, [OrderField(name=PackageField.PURL)])

        assert [e.package.purl for e in result] == [
            "pkg:Maven/com.example/example@1.0",
            "pkg:Maven/org.apache.logging.log4j/log4j-core@2.14.0",
            "pkg:NPM/which@2.0.2",
            "pkg:PyPI/requests@2.31.0",
        ]

    def test_purl_compares_segments(self) -> None:
        """Test that a shorter name sorts before names it is a prefix of."""
        entries = [
            _entry("Maven:com.example:example2:1.0", pkg_id=2),
            _entry("Maven:com.example:example:1.0", pkg_id=1),
            _entry("Maven:com.example:example3:1.0", pkg_id=3),
        ]
        order = OrderField(name=PackageField.PURL, direction=OrderDirection.DESCENDING)

        assert _names(sort_entries(entries, [order])) == ["example3", "example2", "example"]

    def test_identifier_descending(self, entries: list[PackageRunData]) -> None:
        """Test sorting by identifier in descending order."""
        order = OrderField(name=PackageField.IDENTIFIER, direction=OrderDirection.DESCENDING)

        assert _names(sort_entries(entries, [order])) == [
            "requests",
            "which",
            "log4j-core",
            "example",
        ]

    def test_multiple_keys_by_priority(self, entries: list[PackageRunData]) -> None:
        """Test that later keys break ties of earlier keys."""
        sort_fields = [
            OrderField(
                name=PackageField.PROCESSED_DECLARED_LICENSE,
                direction=OrderDirection.DESCENDING,
            ),
            OrderField(name=PackageField.PURL, direction=OrderDirection.DESCENDING),
        ]

        assert _names(sort_entries(entries, sort_fields)) == [
            "which",
            "log4j-core",
            "example",
            "requests",
        ]

    def test_input_not_modified(self, entries: list[PackageRunData]) -> None:
        """Test that sorting returns a new list."""
        original = list(entries)

        sort_entries(entries, [OrderField(name=PackageField.PURL)])

        assert entries == original


class TestPaginate:
    """Tests for paginate function."""

    def test_limit_and_offset(self) -> None:
        """Test cutting a page out of the entries."""
        items = [_entry(f"NPM::pkg{i}:1.0", pkg_id=i) for i in range(5)]

        assert paginate(items, limit=2, offset=1) == items[1:3]

    def test_no_limit_returns_rest(self) -> None:
        """Test that no limit returns all entries after the offset."""
        items = [_entry(f"NPM::pkg{i}:1.0", pkg_id=i) for i in range(5)]

        assert paginate(items, offset=3) == items[3:]

    def test_offset_beyond_end_is_empty(self) -> None:
        """Test that an offset past the last entry gives an empty page."""
        items = [_entry("NPM::which:2.0.2")]

        assert paginate(items, limit=10, offset=5) == []

    def test_zero_limit_is_empty(self) -> None:
        """Test that a limit of zero gives an empty page."""
        assert paginate([_entry("NPM::which:2.0.2")], limit=0) == []

    def test_negative_offset_raises(self) -> None:
        """Test that a negative offset is rejected."""
        with pytest.raises(InvalidQueryError, match="Offset"):
            paginate([], offset=-1)

    def test_negative_limit_raises(self) -> None:
        """Test that a negative limit is rejected."""
        with pytest.raises(InvalidQueryError, match="Limit"):
            paginate([], limit=-1)


class TestDeduplicateByIdentifier:
    """Tests for deduplicate_by_identifier function."""

    def test_lowest_run_id_wins(self) -> None:
        """Test that the entry of the lowest run is kept."""
        later = _entry("Maven:com.example:example:1.0", run_id=2, pkg_id=20)
        earlier = _entry("Maven:com.example:example:1.0", run_id=1, pkg_id=10)

        result = deduplicate_by_identifier([later, earlier])

        assert result == [earlier]

    def test_distinct_identifiers_kept(self) -> None:
        """Test that different packages are all kept."""
        first = _entry("Maven:com.example:example:1.0", run_id=1)
        second = _entry("Maven:com.example:example:2.0", run_id=2)

        assert deduplicate_by_identifier([first, second]) == [first, second]


class TestQueryPackages:
    """Tests for query_packages function."""

    def test_total_count_before_pagination(self, entries: list[PackageRunData]) -> None:
        """Test that total_count counts all matches, not the page."""
        params = ListQueryParameters(limit=2, offset=1)

        result = query_packages(entries, params)

        assert result.total_count == 4
        assert _names(result.data) == ["log4j-core", "which"]
        assert result.params == params

    def test_filter_then_paginate(self, entries: list[PackageRunData]) -> None:
        """Test that filtering happens before pagination."""
        params = ListQueryParameters(
            sort_fields=[OrderField(name=PackageField.PURL, direction=OrderDirection.DESCENDING)],
            limit=1,
        )
        filters = _filters(PackageField.IDENTIFIER, ComparisonOperator.ILIKE, "maven")

        result = query_packages(entries, params, filters)

        assert result.total_count == 2
        assert _names(result.data) == ["log4j-core"]

    def test_duplicates_counted_once(self, entries: list[PackageRunData]) -> None:
        """Test that a package of several runs is listed once."""
        duplicate = _entry("NPM::which:2.0.2", "MIT", run_id=2, pkg_id=22)

        result = query_packages(entries + [duplicate])

        assert result.total_count == 4
        assert [e.run_id for e in result.data] == [1, 1, 1, 1]

    def test_empty_input(self) -> None:
        """Test querying no entries."""
        result = query_packages([])

        assert result.data == []
        assert result.total_count == 0
