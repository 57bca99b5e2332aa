"""
Domain models for the user search demo.

Defines the indexed user record, the generation windows it is drawn from, and
the request/response contracts exchanged with the search index. Facet specs
validate their own shape so that a malformed request cannot be built.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, Field, model_validator


def _as_datetime(value: date) -> datetime:
    return datetime.combine(value, time.min)


class UserRecord(BaseModel):
    """
    Representation of a single synthetic user as stored in the index.
    """

    id: int = Field(..., ge=0, description="Unique identifier (offset + position).")
    first_name: str = Field(..., min_length=1, description="Given name.")
    last_name: str = Field(..., min_length=1, description="Family name.")
    gender: str = Field(..., min_length=1, description="Gender label from the declared set.")
    birth_date: date = Field(..., description="Calendar date of birth.")
    age: int = Field(..., ge=0, description="Full years elapsed since birth_date.")
    created_at: date = Field(..., description="Account creation date.")
    last_online_at: date = Field(..., description="Last activity date.")

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "arbitrary_types_allowed": False,
    }

    @model_validator(mode="after")
    def _check_activity_order(self) -> "UserRecord":
        if self.last_online_at <= self.created_at:
            raise ValueError("last_online_at must be after created_at")
        return self

    def to_document(self) -> Dict[str, Any]:
        """Render the record with the field names used by the index schema."""
        return {
            "id": self.id,
            "firstname": self.first_name,
            "lastname": self.last_name,
            "gender": self.gender,
            "birthdate": _as_datetime(self.birth_date),
            "age": self.age,
            "created_at": _as_datetime(self.created_at),
            "last_online_at": _as_datetime(self.last_online_at),
        }


class DateWindow(BaseModel):
    """Inclusive calendar window ``[start, end]`` used for random date draws."""

    start: date
    end: date

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_order(self) -> "DateWindow":
        if self.start > self.end:
            raise ValueError(f"window start {self.start} is after end {self.end}")
        return self

    def ends_before(self, other: "DateWindow") -> bool:
        return self.end < other.start


class FieldType(str, Enum):
    """Declared value type of a projected field."""

    NUMERIC = "numeric"
    TEXT = "text"

    def accepts(self, value: Any) -> bool:
        if self is FieldType.NUMERIC:
            # bool is an int subclass but never a valid numeric projection
            return isinstance(value, (int, float)) and not isinstance(value, bool)
        return isinstance(value, str)


class ProjectedField(BaseModel):
    """One stored field returned per hit, with its display label and type."""

    name: str = Field(..., min_length=1)
    label: str = Field(..., min_length=1)
    value_type: FieldType

    model_config = {"frozen": True}


class NumericBucket(BaseModel):
    """
    Labeled half-open range ``[lower, upper)``.

    ``None`` stands for negative infinity as a lower bound and positive infinity
    as an upper bound.
    """

    label: str = Field(..., min_length=1)
    lower: Optional[float] = None
    upper: Optional[float] = None

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_bounds(self) -> "NumericBucket":
        if self.lower is not None and self.upper is not None and self.lower >= self.upper:
            raise ValueError(f"bucket '{self.label}' has lower >= upper")
        return self


class TermsFacet(BaseModel):
    """Categorical facet: the ``size`` most frequent values of ``field``."""

    kind: Literal["terms"] = "terms"
    name: str = Field(..., min_length=1)
    field: str = Field(..., min_length=1)
    size: int = Field(..., gt=0)

    model_config = {"frozen": True}


class NumericRangeFacet(BaseModel):
    """
    Numeric-range facet over ``field``.

    Buckets must be ordered, contiguous and open at both extremes so that every
    real number falls in exactly one bucket.
    """

    kind: Literal["numeric_range"] = "numeric_range"
    name: str = Field(..., min_length=1)
    field: str = Field(..., min_length=1)
    buckets: Tuple[NumericBucket, ...] = Field(..., min_length=1)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_partition(self) -> "NumericRangeFacet":
        labels = [bucket.label for bucket in self.buckets]
        if len(set(labels)) != len(labels):
            raise ValueError(f"facet '{self.name}' has duplicate bucket labels")
        if self.buckets[0].lower is not None:
            raise ValueError(f"facet '{self.name}' first bucket must be unbounded below")
        if self.buckets[-1].upper is not None:
            raise ValueError(f"facet '{self.name}' last bucket must be unbounded above")
        for current, following in zip(self.buckets, self.buckets[1:]):
            if current.upper is None or current.upper != following.lower:
                raise ValueError(
                    f"facet '{self.name}' buckets '{current.label}' and "
                    f"'{following.label}' are not contiguous"
                )
        return self

    @property
    def labels(self) -> List[str]:
        return [bucket.label for bucket in self.buckets]


FacetSpec = Annotated[Union[TermsFacet, NumericRangeFacet], Field(discriminator="kind")]


class SearchRequest(BaseModel):
    """
    Bounded search request: query string, pagination window, projection and facets.
    """

    query: str
    offset: int = Field(0, ge=0)
    size: int = Field(..., gt=0)
    projection: Tuple[ProjectedField, ...] = Field(..., min_length=1)
    facets: Tuple[FacetSpec, ...] = ()

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_unique_names(self) -> "SearchRequest":
        facet_names = [facet.name for facet in self.facets]
        if len(set(facet_names)) != len(facet_names):
            raise ValueError("facet names must be unique within a request")
        field_names = self.field_names
        if len(set(field_names)) != len(field_names):
            raise ValueError("projected field names must be unique within a request")
        return self

    @property
    def field_names(self) -> List[str]:
        return [projected.name for projected in self.projection]

    @property
    def facet_names(self) -> List[str]:
        return [facet.name for facet in self.facets]


@dataclass(frozen=True)
class FacetResult:
    """Counts per bucket for one facet, in presentation order."""

    name: str
    buckets: Tuple[Tuple[str, int], ...]


@dataclass
class SearchResult:
    """Page of hits plus facet aggregates; lives only for rendering."""

    hits: List[Dict[str, Any]]
    total: int = 0
    facets: Dict[str, FacetResult] = field(default_factory=dict)


__all__ = [
    "UserRecord",
    "DateWindow",
    "FieldType",
    "ProjectedField",
    "NumericBucket",
    "TermsFacet",
    "NumericRangeFacet",
    "FacetSpec",
    "SearchRequest",
    "FacetResult",
    "SearchResult",
]
