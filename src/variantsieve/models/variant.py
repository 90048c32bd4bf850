"""Variant identity and evaluation models."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from variantsieve.exceptions import FilterMisuseError
from variantsieve.models.effect import VariantEffect
from variantsieve.models.filter_result import FilterResult, FilterStatus, FilterType
from variantsieve.models.frequency import FrequencyData
from variantsieve.models.pathogenicity import PathogenicityData


def normalize_chromosome(value: str | int) -> str:
    """Strip any "chr" prefix and upper-case; "M" becomes "MT"."""
    chromosome = str(value).strip()
    if chromosome.lower().startswith("chr"):
        chromosome = chromosome[3:]
    chromosome = chromosome.upper()
    if chromosome == "M":
        chromosome = "MT"
    if not chromosome:
        raise ValueError("Chromosome must not be empty")
    return chromosome


class GenomicKey(BaseModel):
    """Chromosome, 1-based position, reference and alternate allele.

    Used as the lookup key into the annotation store.
    """

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "chromosome": "1",
                "position": 12345,
                "ref": "A",
                "alt": "T",
            }
        },
    )

    chromosome: str = Field(..., description="Chromosome name without 'chr' prefix (e.g., 1, X, MT)")
    position: int = Field(..., ge=1, description="1-based position of the first reference base")
    ref: str = Field(..., min_length=1, description="Reference allele")
    alt: str = Field(..., min_length=1, description="Alternate allele")

    @field_validator("chromosome", mode="before")
    @classmethod
    def validate_chromosome(cls, v: str | int) -> str:
        return normalize_chromosome(v)

    @field_validator("ref", "alt")
    @classmethod
    def normalize_allele(cls, v: str) -> str:
        return v.strip().upper()

    @classmethod
    def of(cls, chromosome: str | int, position: int, ref: str, alt: str) -> "GenomicKey":
        return cls(chromosome=chromosome, position=position, ref=ref, alt=alt)

    @classmethod
    def parse(cls, text: str) -> "GenomicKey":
        """Parse ``chrom-pos-ref-alt`` (``:`` separators are accepted too)."""
        parts = text.strip().replace(":", "-").split("-")
        if len(parts) != 4:
            raise ValueError(f"Expected chrom-pos-ref-alt, got '{text}'")
        chromosome, position, ref, alt = parts
        try:
            pos = int(position)
        except ValueError:
            raise ValueError(f"Position must be an integer, got '{position}'")
        return cls(chromosome=chromosome, position=pos, ref=ref, alt=alt)

    @property
    def end(self) -> int:
        """Last reference base covered by the allele."""
        return self.position + len(self.ref) - 1

    def __str__(self) -> str:
        return f"{self.chromosome}-{self.position}-{self.ref}-{self.alt}"


class VariantEvaluation(BaseModel):
    """Immutable snapshot of a variant, its annotations and its filter results.

    Annotations and filter results are attached by building a new snapshot
    (``with_annotations`` / ``with_filter_result``), never by mutation.
    """

    model_config = ConfigDict(frozen=True)

    key: GenomicKey
    gene_symbol: str | None = Field(None, description="Gene symbol the variant is assigned to")
    quality: float = Field(0.0, ge=0.0, description="Phred-scaled call quality (VCF QUAL)")
    variant_effect: VariantEffect = Field(
        VariantEffect.SEQUENCE_VARIANT, description="Most severe predicted consequence"
    )
    frequency_data: FrequencyData = Field(default_factory=FrequencyData.empty)
    pathogenicity_data: PathogenicityData = Field(default_factory=PathogenicityData.empty)
    filter_results: tuple[FilterResult, ...] = ()

    @field_validator("filter_results")
    @classmethod
    def one_result_per_filter_type(cls, v: tuple[FilterResult, ...]) -> tuple[FilterResult, ...]:
        seen: set[FilterType] = set()
        for result in v:
            if result.filter_type in seen:
                raise ValueError(f"More than one result for filter type {result.filter_type.name}")
            seen.add(result.filter_type)
        return v

    def with_annotations(
        self,
        frequency_data: FrequencyData | None = None,
        pathogenicity_data: PathogenicityData | None = None,
        variant_effect: VariantEffect | None = None,
    ) -> "VariantEvaluation":
        """Return a copy carrying the given annotations; omitted ones are kept."""
        update = {}
        if frequency_data is not None:
            update["frequency_data"] = frequency_data
        if pathogenicity_data is not None:
            update["pathogenicity_data"] = pathogenicity_data
        if variant_effect is not None:
            update["variant_effect"] = variant_effect
        return self.model_copy(update=update)

    def with_filter_result(self, result: FilterResult) -> "VariantEvaluation":
        """Return a copy with ``result`` appended.

        Raises:
            FilterMisuseError: If a result of the same filter type is already attached
        """
        if self.result_for(result.filter_type) is not None:
            raise FilterMisuseError(
                f"Variant {self.key} already has a {result.filter_type.name} result"
            )
        return self.model_copy(update={"filter_results": self.filter_results + (result,)})

    def replacing_filter_result(self, result: FilterResult) -> "VariantEvaluation":
        """Return a copy where ``result`` takes the place of any earlier result of its type."""
        if self.result_for(result.filter_type) is None:
            return self.with_filter_result(result)
        results = tuple(
            result if existing.filter_type == result.filter_type else existing
            for existing in self.filter_results
        )
        return self.model_copy(update={"filter_results": results})

    def result_for(self, filter_type: FilterType) -> FilterResult | None:
        for result in self.filter_results:
            if result.filter_type == filter_type:
                return result
        return None

    def status_for(self, filter_type: FilterType) -> FilterStatus:
        result = self.result_for(filter_type)
        if result is None:
            return FilterStatus.UNFILTERED
        return FilterStatus.PASSED if result.passed_filter else FilterStatus.FAILED

    def passed_filter(self, filter_type: FilterType) -> bool:
        return self.status_for(filter_type) == FilterStatus.PASSED

    @property
    def filter_status(self) -> FilterStatus:
        """UNFILTERED with no results, FAILED if any filter failed, otherwise PASSED."""
        if not self.filter_results:
            return FilterStatus.UNFILTERED
        if any(not result.passed_filter for result in self.filter_results):
            return FilterStatus.FAILED
        return FilterStatus.PASSED

    @property
    def passed_filters(self) -> bool:
        return self.filter_status == FilterStatus.PASSED

    @property
    def failed_filter_types(self) -> frozenset[FilterType]:
        return frozenset(r.filter_type for r in self.filter_results if not r.passed_filter)
