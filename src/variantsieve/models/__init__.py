"""Data models for variantsieve."""

from variantsieve.models.effect import VariantEffect
from variantsieve.models.filter_result import (
    FilterResult,
    FilterResultStatus,
    FilterStatus,
    FilterType,
)
from variantsieve.models.frequency import Frequency, FrequencyData, FrequencySource
from variantsieve.models.pathogenicity import (
    ClinSig,
    ClinVarData,
    PathogenicityData,
    PathogenicityScore,
    PathogenicitySource,
)
from variantsieve.models.variant import GenomicKey, VariantEvaluation

__all__ = [
    "GenomicKey",
    "VariantEvaluation",
    "VariantEffect",
    "Frequency",
    "FrequencyData",
    "FrequencySource",
    "PathogenicityScore",
    "PathogenicityData",
    "PathogenicitySource",
    "ClinSig",
    "ClinVarData",
    "FilterType",
    "FilterResult",
    "FilterResultStatus",
    "FilterStatus",
]
