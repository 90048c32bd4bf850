"""Variant filters and the runner that applies them."""

from variantsieve.filters.annotation_filters import (
    FrequencyFilter,
    JointFailureFilter,
    KnownVariantFilter,
    PathogenicityFilter,
)
from variantsieve.filters.base import VariantFilter
from variantsieve.filters.runner import FilterRunMode, FilterRunner
from variantsieve.filters.variant_filters import (
    GeneTargetFilter,
    IntervalFilter,
    QualityFilter,
    VariantEffectFilter,
)

__all__ = [
    "VariantFilter",
    "QualityFilter",
    "IntervalFilter",
    "GeneTargetFilter",
    "VariantEffectFilter",
    "FrequencyFilter",
    "KnownVariantFilter",
    "PathogenicityFilter",
    "JointFailureFilter",
    "FilterRunner",
    "FilterRunMode",
]
