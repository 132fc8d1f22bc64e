"""Query parameter models for listing packages."""

from __future__ import annotations

from enum import Enum
from typing import Generic, Optional, TypeVar, Union

from pydantic import BaseModel, Field

T = TypeVar("T")


class PackageField(Enum):
    """Fields packages can be sorted and filtered by."""

    IDENTIFIER = "identifier"
    PURL = "purl"
    PROCESSED_DECLARED_LICENSE = "processedDeclaredLicense"


class OrderDirection(Enum):
    """Sort direction."""

    ASCENDING = "asc"
    DESCENDING = "desc"


class ComparisonOperator(Enum):
    """Operators supported by package filters."""

    ILIKE = "ilike"
    IN = "in"
    NOT_IN = "not_in"
    EQUALS = "eq"


# Operators that compare against a set of values rather than a single string
SET_OPERATORS = frozenset({ComparisonOperator.IN, ComparisonOperator.NOT_IN})


class OrderField(BaseModel):
    """A sort key with its direction."""

    model_config = {"extra": "forbid", "frozen": True}

    name: PackageField = Field(description="Field to sort by")
    direction: OrderDirection = Field(
        default=OrderDirection.ASCENDING, description="Sort direction"
    )


class FilterOperatorAndValue(BaseModel):
    """A filter operator together with the value to compare against."""

    model_config = {"extra": "forbid"}

    operator: ComparisonOperator = Field(description="Comparison operator")
    value: Union[str, set[str]] = Field(
        description="Pattern or value for ILIKE/EQUALS, set of values for IN/NOT_IN"
    )


class PackageFilters(BaseModel):
    """Filters to apply when listing packages. All given filters must match."""

    model_config = {"extra": "forbid"}

    identifier: Optional[FilterOperatorAndValue] = Field(
        default=None, description="Filter on the identifier display string"
    )
    purl: Optional[FilterOperatorAndValue] = Field(
        default=None, description="Filter on the package URL"
    )
    processed_declared_license: Optional[FilterOperatorAndValue] = Field(
        default=None, description="Filter on the processed SPDX expression"
    )

    def active_filters(self) -> list[tuple[PackageField, FilterOperatorAndValue]]:
        """Get the filters that were set, tagged with their field.

        Returns:
            List of (field, filter) pairs in a fixed field order.
        """
        candidates = [
            (PackageField.IDENTIFIER, self.identifier),
            (PackageField.PURL, self.purl),
            (PackageField.PROCESSED_DECLARED_LICENSE, self.processed_declared_license),
        ]
        return [(field, value) for field, value in candidates if value is not None]


class ListQueryParameters(BaseModel):
    """Sorting and pagination options for a list query."""

    model_config = {"extra": "forbid"}

    sort_fields: list[OrderField] = Field(
        default_factory=list, description="Sort keys in priority order"
    )
    limit: Optional[int] = Field(
        default=None, description="Maximum number of results, None for all"
    )
    offset: int = Field(default=0, description="Number of results to skip")


class ListQueryResult(BaseModel, Generic[T]):
    """A page of results with the total number of matches."""

    model_config = {"extra": "forbid"}

    data: list[T] = Field(default_factory=list, description="Results of this page")
    params: ListQueryParameters = Field(
        default_factory=ListQueryParameters,
        description="Parameters the page was produced with",
    )
    total_count: int = Field(
        default=0, ge=0, description="Number of matches before pagination"
    )
