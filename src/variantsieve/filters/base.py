"""Base class for variant filters."""

from abc import ABC, abstractmethod

from variantsieve.models.filter_result import FilterResult, FilterType
from variantsieve.models.variant import VariantEvaluation


class VariantFilter(ABC):
    """A single filter step.

    Subclasses set ``filter_type`` and implement ``evaluate``, which must
    return exactly one result of that type and must not depend on anything but
    the variant (including the results already attached to it).
    """

    filter_type: FilterType

    @abstractmethod
    def evaluate(self, variant: VariantEvaluation) -> FilterResult:
        """Judge ``variant`` and return this filter's result."""

    def _pass(self, score: float = 1.0) -> FilterResult:
        return FilterResult.passed(self.filter_type, score)

    def _fail(self, score: float = 0.0) -> FilterResult:
        return FilterResult.failed(self.filter_type, score)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
