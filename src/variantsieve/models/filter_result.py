"""Filter outcome models.

Every filter emits exactly one ``FilterResult`` per variant it evaluates.
The status is authoritative: consumers never derive pass/fail from the score,
and a failing result may carry an informative non-zero score.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class FilterType(str, Enum):
    """Identifies which filter produced a result."""

    QUALITY_FILTER = "Quality"
    INTERVAL_FILTER = "Interval"
    BED_FILTER = "Gene panel target"
    VARIANT_EFFECT_FILTER = "Target"
    FREQUENCY_FILTER = "Frequency"
    KNOWN_VARIANT_FILTER = "Known variant"
    PATHOGENICITY_FILTER = "Pathogenicity"
    COMBINED_FAILURE_FILTER = "Combined failure"


class FilterResultStatus(str, Enum):
    """Outcome of a single filter."""

    PASS = "PASS"
    FAIL = "FAIL"


class FilterStatus(str, Enum):
    """Where a variant stands with respect to filtering."""

    UNFILTERED = "UNFILTERED"
    PASSED = "PASSED"
    FAILED = "FAILED"


_TYPE_ORDER = {filter_type: index for index, filter_type in enumerate(FilterType)}
_STATUS_ORDER = {FilterResultStatus.PASS: 0, FilterResultStatus.FAIL: 1}


class FilterResult(BaseModel):
    """Immutable outcome of one filter applied to one variant."""

    model_config = ConfigDict(frozen=True)

    filter_type: FilterType
    status: FilterResultStatus
    score: float = Field(..., description="Filter score, typically in [0, 1]")

    @classmethod
    def passed(cls, filter_type: FilterType, score: float = 1.0) -> "FilterResult":
        return cls(filter_type=filter_type, status=FilterResultStatus.PASS, score=score)

    @classmethod
    def failed(cls, filter_type: FilterType, score: float = 0.0) -> "FilterResult":
        return cls(filter_type=filter_type, status=FilterResultStatus.FAIL, score=score)

    @property
    def passed_filter(self) -> bool:
        return self.status == FilterResultStatus.PASS

    def sort_key(self) -> tuple[int, int, float]:
        return (_TYPE_ORDER[self.filter_type], _STATUS_ORDER[self.status], self.score)

    def __lt__(self, other: "FilterResult") -> bool:
        if not isinstance(other, FilterResult):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def __str__(self) -> str:
        return f"{self.filter_type.value}: {self.status.value} ({self.score:.3f})"
