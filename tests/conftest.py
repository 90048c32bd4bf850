"""Pytest configuration and fixtures."""

import pytest


@pytest.fixture
def sample_key():
    """A missense SNV key."""
    from variantsieve.models.variant import GenomicKey

    return GenomicKey(chromosome="1", position=12345, ref="A", alt="T")


@pytest.fixture
def sample_clinvar_block():
    """ClinVar block with conflicting interpretations, as stored."""
    return {
        "alleleId": "12345",
        "primaryInterpretation": "CONFLICTING_PATHOGENICITY_INTERPRETATIONS",
        "secondaryInterpretations": [
            "PATHOGENIC_OR_LIKELY_PATHOGENIC",
            "UNCERTAIN_SIGNIFICANCE",
            "BENIGN_OR_LIKELY_BENIGN",
            "BENIGN",
        ],
        "includedAlleles": {"54321": "ASSOCIATION"},
        "reviewStatus": "conflicting evidence",
    }


@pytest.fixture
def sample_raw_record(sample_clinvar_block):
    """Raw store record mixing frequencies, predictor scores, ClinVar and an unknown key."""
    return {
        "KG": 0.7,
        "TOPMED": 0.05,
        "GNOMAD_E_NFE": {"ac": 5, "an": 1000, "hom": 0},
        "SIFT": 0.2,
        "POLYPHEN": 0.9,
        "REVEL": 0.6,
        "CLINVAR": sample_clinvar_block,
        "SOME_FUTURE_SOURCE": 0.3,
    }


@pytest.fixture
def sample_store(sample_key, sample_raw_record):
    """In-memory store holding the sample record."""
    from variantsieve.api.store import InMemoryAlleleStore

    return InMemoryAlleleStore({sample_key: sample_raw_record})


@pytest.fixture
def sample_service(sample_store):
    """Data service over the sample store."""
    from variantsieve.service import VariantDataService

    return VariantDataService(sample_store)


@pytest.fixture
def sample_variant(sample_key):
    """Unannotated missense variant in BRCA2."""
    from variantsieve.models.effect import VariantEffect
    from variantsieve.models.variant import VariantEvaluation

    return VariantEvaluation(
        key=sample_key,
        gene_symbol="BRCA2",
        quality=60.0,
        variant_effect=VariantEffect.MISSENSE_VARIANT,
    )
