"""Functional effect classifications (Sequence Ontology terms)."""

from enum import Enum


class VariantEffect(str, Enum):
    """Predicted functional consequence of a variant, most severe first."""

    TRANSCRIPT_ABLATION = "transcript_ablation"
    SPLICE_ACCEPTOR_VARIANT = "splice_acceptor_variant"
    SPLICE_DONOR_VARIANT = "splice_donor_variant"
    STOP_GAINED = "stop_gained"
    FRAMESHIFT_VARIANT = "frameshift_variant"
    STOP_LOST = "stop_lost"
    START_LOST = "start_lost"
    INFRAME_INSERTION = "inframe_insertion"
    INFRAME_DELETION = "inframe_deletion"
    MISSENSE_VARIANT = "missense_variant"
    SPLICE_REGION_VARIANT = "splice_region_variant"
    SYNONYMOUS_VARIANT = "synonymous_variant"
    FIVE_PRIME_UTR_EXON_VARIANT = "5_prime_UTR_exon_variant"
    THREE_PRIME_UTR_EXON_VARIANT = "3_prime_UTR_exon_variant"
    NON_CODING_TRANSCRIPT_EXON_VARIANT = "non_coding_transcript_exon_variant"
    INTRON_VARIANT = "intron_variant"
    UPSTREAM_GENE_VARIANT = "upstream_gene_variant"
    DOWNSTREAM_GENE_VARIANT = "downstream_gene_variant"
    REGULATORY_REGION_VARIANT = "regulatory_region_variant"
    INTERGENIC_VARIANT = "intergenic_variant"
    SEQUENCE_VARIANT = "sequence_variant"


# Fallback pathogenicity for effects where predictors rarely have a score
EFFECT_PATHOGENICITY_DEFAULTS: dict[VariantEffect, float] = {
    VariantEffect.TRANSCRIPT_ABLATION: 1.0,
    VariantEffect.STOP_GAINED: 1.0,
    VariantEffect.FRAMESHIFT_VARIANT: 0.95,
    VariantEffect.START_LOST: 0.95,
    VariantEffect.STOP_LOST: 0.9,
    VariantEffect.SPLICE_ACCEPTOR_VARIANT: 0.9,
    VariantEffect.SPLICE_DONOR_VARIANT: 0.9,
    VariantEffect.INFRAME_INSERTION: 0.85,
    VariantEffect.INFRAME_DELETION: 0.85,
    VariantEffect.SPLICE_REGION_VARIANT: 0.8,
    VariantEffect.MISSENSE_VARIANT: 0.6,
    VariantEffect.SYNONYMOUS_VARIANT: 0.1,
}

# Effects whose regulatory status is worth resolving separately
NON_GENIC_EFFECTS: frozenset[VariantEffect] = frozenset({
    VariantEffect.INTERGENIC_VARIANT,
    VariantEffect.UPSTREAM_GENE_VARIANT,
    VariantEffect.DOWNSTREAM_GENE_VARIANT,
})

DEFAULT_OFF_TARGET_EFFECTS: frozenset[VariantEffect] = frozenset({
    VariantEffect.SYNONYMOUS_VARIANT,
    VariantEffect.INTRON_VARIANT,
    VariantEffect.UPSTREAM_GENE_VARIANT,
    VariantEffect.DOWNSTREAM_GENE_VARIANT,
    VariantEffect.INTERGENIC_VARIANT,
    VariantEffect.NON_CODING_TRANSCRIPT_EXON_VARIANT,
})


def default_pathogenicity(effect: VariantEffect | None) -> float:
    """Effect-based pathogenicity used when no predictor does better."""
    if effect is None:
        return 0.0
    return EFFECT_PATHOGENICITY_DEFAULTS.get(effect, 0.0)
