"""Centralized constants and mappings for variantsieve.

This module consolidates the wire-format contract of the allele store:
- Property names for population frequency sources
- Property names for pathogenicity predictors
- The boundary rescale table for predictor scores
- Filter defaults

Centralizing these makes maintenance easier and keeps the adaptor's mapping
tables exhaustive over the source enums.
"""

from typing import Callable

from variantsieve.models.frequency import FrequencySource
from variantsieve.models.pathogenicity import PathogenicitySource

# =============================================================================
# FREQUENCY SOURCE KEYS
# =============================================================================
# Maps store property names to population frequency sources.
# Values in the store are percentages.

FREQUENCY_SOURCE_KEYS: dict[str, FrequencySource] = {
    "KG": FrequencySource.THOUSAND_GENOMES,
    "TOPMED": FrequencySource.TOPMED,
    "UK10K": FrequencySource.UK10K,

    "ESP_AA": FrequencySource.ESP_AFRICAN_AMERICAN,
    "ESP_EA": FrequencySource.ESP_EUROPEAN_AMERICAN,
    "ESP_ALL": FrequencySource.ESP_ALL,

    "EXAC_AFR": FrequencySource.EXAC_AFRICAN_INC_AFRICAN_AMERICAN,
    "EXAC_AMR": FrequencySource.EXAC_AMERICAN,
    "EXAC_EAS": FrequencySource.EXAC_EAST_ASIAN,
    "EXAC_FIN": FrequencySource.EXAC_FINNISH,
    "EXAC_NFE": FrequencySource.EXAC_NON_FINNISH_EUROPEAN,
    "EXAC_OTH": FrequencySource.EXAC_OTHER,
    "EXAC_SAS": FrequencySource.EXAC_SOUTH_ASIAN,

    "GNOMAD_E_AFR": FrequencySource.GNOMAD_E_AFR,
    "GNOMAD_E_AMR": FrequencySource.GNOMAD_E_AMR,
    "GNOMAD_E_ASJ": FrequencySource.GNOMAD_E_ASJ,
    "GNOMAD_E_EAS": FrequencySource.GNOMAD_E_EAS,
    "GNOMAD_E_FIN": FrequencySource.GNOMAD_E_FIN,
    "GNOMAD_E_NFE": FrequencySource.GNOMAD_E_NFE,
    "GNOMAD_E_OTH": FrequencySource.GNOMAD_E_OTH,
    "GNOMAD_E_SAS": FrequencySource.GNOMAD_E_SAS,

    "GNOMAD_G_AFR": FrequencySource.GNOMAD_G_AFR,
    "GNOMAD_G_AMR": FrequencySource.GNOMAD_G_AMR,
    "GNOMAD_G_ASJ": FrequencySource.GNOMAD_G_ASJ,
    "GNOMAD_G_EAS": FrequencySource.GNOMAD_G_EAS,
    "GNOMAD_G_FIN": FrequencySource.GNOMAD_G_FIN,
    "GNOMAD_G_NFE": FrequencySource.GNOMAD_G_NFE,
    "GNOMAD_G_OTH": FrequencySource.GNOMAD_G_OTH,
    "GNOMAD_G_SAS": FrequencySource.GNOMAD_G_SAS,
}


# =============================================================================
# PATHOGENICITY SOURCE KEYS
# =============================================================================
# Maps store property names to pathogenicity predictors

PATHOGENICITY_SOURCE_KEYS: dict[str, PathogenicitySource] = {
    "SIFT": PathogenicitySource.SIFT,
    "POLYPHEN": PathogenicitySource.POLYPHEN,
    "MUT_TASTER": PathogenicitySource.MUTATION_TASTER,
    "CADD": PathogenicitySource.CADD,
    "REMM": PathogenicitySource.REMM,
    "REVEL": PathogenicitySource.REVEL,
    "MCAP": PathogenicitySource.M_CAP,
    "MPC": PathogenicitySource.MPC,
    "MVP": PathogenicitySource.MVP,
    "PRIMATE_AI": PathogenicitySource.PRIMATE_AI,
    "SPLICE_AI": PathogenicitySource.SPLICE_AI,
    "ALPHA_MISSENSE": PathogenicitySource.ALPHA_MISSENSE,
}

# Property name of the structured ClinVar block
CLINVAR_KEY = "CLINVAR"


# =============================================================================
# SCORE RESCALING
# =============================================================================
# Conversions from the store's representation to the internal score range,
# applied by the adaptor only. Every predictor the store currently carries is
# stored on the scale PathogenicityScore expects, so the table is empty;
# add an entry only once a source's store encoding is confirmed to differ.

PATHOGENICITY_RESCALE: dict[PathogenicitySource, Callable[[float], float]] = {}


# =============================================================================
# FILTER DEFAULTS
# =============================================================================

DEFAULT_MAX_FREQUENCY: float = 2.0  # percent
DEFAULT_PATHOGENICITY_THRESHOLD: float = 0.5
DEFAULT_MIN_QUALITY: float = 0.0
