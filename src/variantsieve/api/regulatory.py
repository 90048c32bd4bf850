"""Regulatory feature classification.

The data service defers to an ``EffectClassifier`` for a variant's regulatory
status; only one source contributes it, so no merging happens.
"""

import csv
import logging
from pathlib import Path
from typing import Iterable, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, model_validator

from variantsieve.models.effect import VariantEffect
from variantsieve.models.variant import GenomicKey, normalize_chromosome

logger = logging.getLogger(__name__)


@runtime_checkable
class EffectClassifier(Protocol):
    """Resolves the regulatory/functional effect of an allele."""

    def classify(self, key: GenomicKey) -> VariantEffect:
        ...


class RegulatoryRegion(BaseModel):
    """A regulatory feature such as an enhancer or promoter (1-based, closed)."""

    model_config = ConfigDict(frozen=True)

    chromosome: str
    start: int = Field(..., ge=1)
    end: int = Field(..., ge=1)
    feature_type: str = "regulatory_region"

    @model_validator(mode="after")
    def check_bounds(self) -> "RegulatoryRegion":
        if self.end < self.start:
            raise ValueError(f"Region end {self.end} is before start {self.start}")
        return self

    def overlaps(self, key: GenomicKey) -> bool:
        return (
            key.chromosome == normalize_chromosome(self.chromosome)
            and key.position <= self.end
            and key.end >= self.start
        )


class RegulatoryRegionClassifier:
    """Classifies alleles inside a known regulatory region as REGULATORY_REGION_VARIANT.

    Everything else gets ``default_effect``. Regions are bucketed per
    chromosome; the classifier is read-only after construction.
    """

    def __init__(
        self,
        regions: Iterable[RegulatoryRegion] = (),
        default_effect: VariantEffect = VariantEffect.SEQUENCE_VARIANT,
    ):
        self.default_effect = default_effect
        by_chromosome: dict[str, list[RegulatoryRegion]] = {}
        for region in regions:
            chromosome = normalize_chromosome(region.chromosome)
            by_chromosome.setdefault(chromosome, []).append(region)
        self._regions = {
            chromosome: tuple(sorted(items, key=lambda r: r.start))
            for chromosome, items in by_chromosome.items()
        }

    @classmethod
    def from_bed(cls, path: str | Path, **kwargs) -> "RegulatoryRegionClassifier":
        """Load regions from a BED file (0-based half-open starts are converted)."""
        path = Path(path)
        regions = []
        with open(path, "r", newline="") as f:
            reader = csv.reader(f, delimiter="\t")
            for row in reader:
                if not row or row[0].startswith(("#", "track", "browser")):
                    continue
                feature_type = row[3] if len(row) > 3 else "regulatory_region"
                regions.append(
                    RegulatoryRegion(
                        chromosome=row[0],
                        start=int(row[1]) + 1,
                        end=int(row[2]),
                        feature_type=feature_type,
                    )
                )
        logger.info(f"Loaded {len(regions)} regulatory regions from {path}")
        return cls(regions, **kwargs)

    def classify(self, key: GenomicKey) -> VariantEffect:
        for region in self._regions.get(key.chromosome, ()):
            if region.start > key.end:
                break
            if region.overlaps(key):
                return VariantEffect.REGULATORY_REGION_VARIANT
        return self.default_effect
