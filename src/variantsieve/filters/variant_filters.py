"""Filters on the variant call itself: quality, position, gene and effect."""

from typing import Iterable

from variantsieve.constants import DEFAULT_MIN_QUALITY
from variantsieve.filters.base import VariantFilter
from variantsieve.models.effect import DEFAULT_OFF_TARGET_EFFECTS, VariantEffect
from variantsieve.models.filter_result import FilterResult, FilterType
from variantsieve.models.variant import VariantEvaluation, normalize_chromosome


class QualityFilter(VariantFilter):
    """Removes calls below a minimum phred-scaled quality."""

    filter_type = FilterType.QUALITY_FILTER

    def __init__(self, min_quality: float = DEFAULT_MIN_QUALITY):
        if min_quality < 0:
            raise ValueError(f"min_quality must be non-negative, got {min_quality}")
        self.min_quality = min_quality

    def evaluate(self, variant: VariantEvaluation) -> FilterResult:
        if variant.quality >= self.min_quality:
            return self._pass()
        return self._fail()

    def __repr__(self) -> str:
        return f"QualityFilter(min_quality={self.min_quality})"


class IntervalFilter(VariantFilter):
    """Keeps variants overlapping a single closed chromosomal interval."""

    filter_type = FilterType.INTERVAL_FILTER

    def __init__(self, chromosome: str | int, start: int, end: int):
        if start < 1 or end < start:
            raise ValueError(f"Invalid interval {chromosome}:{start}-{end}")
        self.chromosome = normalize_chromosome(chromosome)
        self.start = start
        self.end = end

    def evaluate(self, variant: VariantEvaluation) -> FilterResult:
        key = variant.key
        if key.chromosome == self.chromosome and key.position <= self.end and key.end >= self.start:
            return self._pass()
        return self._fail()

    def __repr__(self) -> str:
        return f"IntervalFilter({self.chromosome}:{self.start}-{self.end})"


class GeneTargetFilter(VariantFilter):
    """Keeps variants assigned to one of a panel of target genes."""

    filter_type = FilterType.BED_FILTER

    def __init__(self, genes: Iterable[str]):
        self.genes = frozenset(gene.strip().upper() for gene in genes)
        if not self.genes:
            raise ValueError("GeneTargetFilter needs at least one gene")

    def evaluate(self, variant: VariantEvaluation) -> FilterResult:
        if variant.gene_symbol and variant.gene_symbol.upper() in self.genes:
            return self._pass()
        return self._fail()

    def __repr__(self) -> str:
        return f"GeneTargetFilter({len(self.genes)} genes)"


class VariantEffectFilter(VariantFilter):
    """Removes variants whose predicted effect is off-target (e.g. synonymous, intronic)."""

    filter_type = FilterType.VARIANT_EFFECT_FILTER

    def __init__(self, off_target_effects: Iterable[VariantEffect] = DEFAULT_OFF_TARGET_EFFECTS):
        self.off_target_effects = frozenset(off_target_effects)

    def evaluate(self, variant: VariantEvaluation) -> FilterResult:
        if variant.variant_effect in self.off_target_effects:
            return self._fail()
        return self._pass()
