"""Population frequency models."""

import math
from enum import Enum
from typing import Iterable

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FrequencySource(str, Enum):
    """Population databases a frequency can come from."""

    THOUSAND_GENOMES = "1000Genomes"
    TOPMED = "TOPMed"
    UK10K = "UK10K"

    ESP_AFRICAN_AMERICAN = "ESP AA"
    ESP_EUROPEAN_AMERICAN = "ESP EA"
    ESP_ALL = "ESP All"

    EXAC_AFRICAN_INC_AFRICAN_AMERICAN = "ExAC AFR"
    EXAC_AMERICAN = "ExAC AMR"
    EXAC_EAST_ASIAN = "ExAC EAS"
    EXAC_FINNISH = "ExAC FIN"
    EXAC_NON_FINNISH_EUROPEAN = "ExAC NFE"
    EXAC_OTHER = "ExAC OTH"
    EXAC_SOUTH_ASIAN = "ExAC SAS"

    GNOMAD_E_AFR = "gnomAD_E_AFR"
    GNOMAD_E_AMR = "gnomAD_E_AMR"
    GNOMAD_E_ASJ = "gnomAD_E_ASJ"
    GNOMAD_E_EAS = "gnomAD_E_EAS"
    GNOMAD_E_FIN = "gnomAD_E_FIN"
    GNOMAD_E_NFE = "gnomAD_E_NFE"
    GNOMAD_E_OTH = "gnomAD_E_OTH"
    GNOMAD_E_SAS = "gnomAD_E_SAS"

    GNOMAD_G_AFR = "gnomAD_G_AFR"
    GNOMAD_G_AMR = "gnomAD_G_AMR"
    GNOMAD_G_ASJ = "gnomAD_G_ASJ"
    GNOMAD_G_EAS = "gnomAD_G_EAS"
    GNOMAD_G_FIN = "gnomAD_G_FIN"
    GNOMAD_G_NFE = "gnomAD_G_NFE"
    GNOMAD_G_OTH = "gnomAD_G_OTH"
    GNOMAD_G_SAS = "gnomAD_G_SAS"

    # In-house frequencies; the public store never carries these
    LOCAL = "Local"


_SOURCE_ORDER = {source: index for index, source in enumerate(FrequencySource)}


class Frequency(BaseModel):
    """Frequency of an allele in one population, as a percentage (0-100)."""

    model_config = ConfigDict(frozen=True)

    source: FrequencySource
    frequency: float = Field(..., ge=0.0, description="Allele frequency as a percentage")
    ac: int | None = Field(None, ge=0, description="Allele count")
    an: int | None = Field(None, ge=0, description="Allele number")
    hom: int | None = Field(None, ge=0, description="Homozygote count")

    @classmethod
    def of(cls, source: FrequencySource, frequency: float) -> "Frequency":
        return cls(source=source, frequency=frequency)

    @classmethod
    def from_counts(
        cls, source: FrequencySource, ac: int, an: int, hom: int | None = None
    ) -> "Frequency":
        """Derive the percentage frequency from allele counts."""
        frequency = 100.0 * ac / an if an else 0.0
        return cls(source=source, frequency=frequency, ac=ac, an=an, hom=hom)

    def has_counts(self) -> bool:
        return self.ac is not None and self.an is not None


class FrequencyData(BaseModel):
    """All known population frequencies for a single allele.

    Records are unique per source (the last one given wins) and held in
    source declaration order, so two instances built from the same records
    in any order compare equal.
    """

    model_config = ConfigDict(frozen=True)

    frequencies: tuple[Frequency, ...] = ()

    @field_validator("frequencies")
    @classmethod
    def _unique_sorted(cls, value: tuple[Frequency, ...]) -> tuple[Frequency, ...]:
        by_source = {frequency.source: frequency for frequency in value}
        return tuple(sorted(by_source.values(), key=lambda f: _SOURCE_ORDER[f.source]))

    @classmethod
    def of(cls, *frequencies: Frequency) -> "FrequencyData":
        return cls(frequencies=frequencies)

    @classmethod
    def empty(cls) -> "FrequencyData":
        return _EMPTY

    @property
    def is_empty(self) -> bool:
        return not self.frequencies

    @property
    def has_known_frequency(self) -> bool:
        return bool(self.frequencies)

    @property
    def sources(self) -> frozenset[FrequencySource]:
        return frozenset(frequency.source for frequency in self.frequencies)

    def get_frequency_for_source(self, source: FrequencySource) -> Frequency | None:
        for frequency in self.frequencies:
            if frequency.source == source:
                return frequency
        return None

    def has_source(self, source: FrequencySource) -> bool:
        return self.get_frequency_for_source(source) is not None

    @property
    def max_frequency(self) -> float:
        """Highest percentage frequency over all sources, 0 when none are known."""
        return max((frequency.frequency for frequency in self.frequencies), default=0.0)

    @property
    def frequency_score(self) -> float:
        """Rarity score in [0, 1].

        Unknown or zero frequencies score 1, anything above 2% scores 0 and the
        range between decays exponentially.
        """
        max_freq = self.max_frequency
        if max_freq <= 0:
            return 1.0
        if max_freq > 2:
            return 0.0
        return max(0.0, 1.13533 - (0.13533 * math.exp(max_freq)))

    def filtered(self, sources: Iterable[FrequencySource]) -> "FrequencyData":
        """Keep only the records whose source was requested."""
        wanted = set(sources)
        kept = tuple(frequency for frequency in self.frequencies if frequency.source in wanted)
        if len(kept) == len(self.frequencies):
            return self
        return FrequencyData(frequencies=kept)


_EMPTY = FrequencyData()
