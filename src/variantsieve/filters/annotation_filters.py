"""Filters on annotation data: frequency, pathogenicity and combinations of earlier results."""

from typing import Iterable

from variantsieve.constants import DEFAULT_MAX_FREQUENCY, DEFAULT_PATHOGENICITY_THRESHOLD
from variantsieve.filters.base import VariantFilter
from variantsieve.models.effect import default_pathogenicity
from variantsieve.models.filter_result import FilterResult, FilterType
from variantsieve.models.variant import VariantEvaluation


class FrequencyFilter(VariantFilter):
    """Removes variants more common than ``max_frequency`` percent in any population.

    The score is the rarity score of the variant whether it passes or not.
    """

    filter_type = FilterType.FREQUENCY_FILTER

    def __init__(self, max_frequency: float = DEFAULT_MAX_FREQUENCY):
        if not 0 <= max_frequency <= 100:
            raise ValueError(f"max_frequency must be a percentage (0-100), got {max_frequency}")
        self.max_frequency = max_frequency

    def evaluate(self, variant: VariantEvaluation) -> FilterResult:
        frequency_data = variant.frequency_data
        score = frequency_data.frequency_score
        if frequency_data.max_frequency <= self.max_frequency:
            return self._pass(score)
        return self._fail(score)

    def __repr__(self) -> str:
        return f"FrequencyFilter(max_frequency={self.max_frequency})"


class KnownVariantFilter(VariantFilter):
    """Removes variants already seen in any population database."""

    filter_type = FilterType.KNOWN_VARIANT_FILTER

    def evaluate(self, variant: VariantEvaluation) -> FilterResult:
        if variant.frequency_data.has_known_frequency:
            return self._fail()
        return self._pass()


class PathogenicityFilter(VariantFilter):
    """Scores predicted pathogenicity and, unless told to keep them, removes benign-looking variants.

    The score is the best of the normalised predictor scores and the default
    for the variant's effect. ClinVar (likely) pathogenic variants always pass.
    """

    filter_type = FilterType.PATHOGENICITY_FILTER

    def __init__(
        self,
        keep_non_pathogenic: bool = False,
        threshold: float = DEFAULT_PATHOGENICITY_THRESHOLD,
    ):
        self.keep_non_pathogenic = keep_non_pathogenic
        self.threshold = threshold

    def score(self, variant: VariantEvaluation) -> float:
        return max(
            variant.pathogenicity_data.score,
            default_pathogenicity(variant.variant_effect),
        )

    def evaluate(self, variant: VariantEvaluation) -> FilterResult:
        score = self.score(variant)
        clinvar_data = variant.pathogenicity_data.clinvar_data
        if self.keep_non_pathogenic or score >= self.threshold:
            return self._pass(score)
        if clinvar_data is not None and clinvar_data.is_pathogenic_or_likely_pathogenic():
            return self._pass(score)
        return self._fail(score)

    def __repr__(self) -> str:
        return (
            f"PathogenicityFilter(keep_non_pathogenic={self.keep_non_pathogenic}, "
            f"threshold={self.threshold})"
        )


class JointFailureFilter(VariantFilter):
    """Fails a variant only when every one of the listed earlier filters failed it.

    Filters that have not run yet count as not failed. Must be placed after
    the filters it combines.
    """

    filter_type = FilterType.COMBINED_FAILURE_FILTER

    def __init__(self, filter_types: Iterable[FilterType]):
        self.filter_types = frozenset(filter_types)
        if len(self.filter_types) < 2:
            raise ValueError("JointFailureFilter needs at least two filter types")
        if self.filter_type in self.filter_types:
            raise ValueError("JointFailureFilter cannot combine its own results")

    def evaluate(self, variant: VariantEvaluation) -> FilterResult:
        failed = variant.failed_filter_types & self.filter_types
        score = len(failed) / len(self.filter_types)
        if failed == self.filter_types:
            return self._fail(score)
        return self._pass(score)

    def __repr__(self) -> str:
        names = ", ".join(sorted(filter_type.name for filter_type in self.filter_types))
        return f"JointFailureFilter({names})"
