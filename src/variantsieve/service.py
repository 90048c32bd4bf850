"""Variant data service: lookup façade over the allele store.

ARCHITECTURE:
    GenomicKey → AlleleStore.lookup → AlleleAdaptor → source-subset filter → FrequencyData / PathogenicityData

Key Design:
- A store miss is a normal outcome and yields empty aggregates
- Decode the whole record first, then keep only the requested sources, so a
  malformed value is reported even when its source was not requested
- Regulatory effect is passed through from the classifier unchanged
- Stateless per call with no caching; concurrency is bounded by the caller
  (``annotate_all`` runs blocking lookups in threads under a semaphore)
"""

import asyncio
import logging
from collections.abc import Iterable, Sequence

from variantsieve.api.adaptor import AlleleAdaptor
from variantsieve.api.regulatory import EffectClassifier, RegulatoryRegionClassifier
from variantsieve.api.store import AlleleStore
from variantsieve.exceptions import DecodeError, VariantSieveError
from variantsieve.models.effect import NON_GENIC_EFFECTS, VariantEffect
from variantsieve.models.frequency import FrequencyData, FrequencySource
from variantsieve.models.pathogenicity import PathogenicityData, PathogenicitySource
from variantsieve.models.variant import GenomicKey, VariantEvaluation
from variantsieve.utils.logging_config import get_logger

logger = logging.getLogger(__name__)


class VariantDataService:
    """Retrieves frequency, pathogenicity and regulatory data for variants."""

    def __init__(
        self,
        store: AlleleStore,
        classifier: EffectClassifier | None = None,
        adaptor: AlleleAdaptor | None = None,
        enable_logging: bool = False,
    ) -> None:
        """Initialize the service.

        Args:
            store: Read-only allele store shared by all lookups
            classifier: Regulatory feature classifier; one with no regions is used if omitted
            adaptor: Raw record decoder
            enable_logging: Record skipped malformed records in the filter decision log
        """
        self.store = store
        self.classifier = classifier if classifier is not None else RegulatoryRegionClassifier()
        self.adaptor = adaptor if adaptor is not None else AlleleAdaptor()
        self.decision_logger = get_logger() if enable_logging else None

    def get_frequency_data(
        self, key: GenomicKey, sources: Iterable[FrequencySource]
    ) -> FrequencyData:
        """Frequencies for ``key`` restricted to ``sources``.

        Raises:
            DecodeError: If any frequency value in the stored record is malformed
        """
        raw = self.store.lookup(key)
        if raw is None:
            logger.debug(f"No allele record for {key}")
            return FrequencyData.empty()
        return self.adaptor.decode_frequency(raw).filtered(sources)

    def get_pathogenicity_data(
        self, key: GenomicKey, sources: Iterable[PathogenicitySource]
    ) -> PathogenicityData:
        """Predictor scores for ``key`` restricted to ``sources``, plus any ClinVar record.

        Raises:
            DecodeError: If any score or the ClinVar block in the stored record is malformed
        """
        raw = self.store.lookup(key)
        if raw is None:
            logger.debug(f"No allele record for {key}")
            return PathogenicityData.empty()
        return self.adaptor.decode_pathogenicity(raw).filtered(sources)

    def get_regulatory_effect(self, key: GenomicKey) -> VariantEffect:
        return self.classifier.classify(key)

    def annotate(
        self,
        variant: VariantEvaluation,
        frequency_sources: Iterable[FrequencySource],
        pathogenicity_sources: Iterable[PathogenicitySource],
    ) -> VariantEvaluation:
        """Return a copy of ``variant`` carrying its annotation data.

        The store is queried once. Non-genic variants (intergenic, upstream,
        downstream) falling in a regulatory region are re-classified as
        REGULATORY_REGION_VARIANT.

        Raises:
            DecodeError: If the stored record is malformed
        """
        raw = self.store.lookup(variant.key)
        if raw is None:
            frequency_data = FrequencyData.empty()
            pathogenicity_data = PathogenicityData.empty()
        else:
            frequency_data, pathogenicity_data = self.adaptor.decode(raw)
            frequency_data = frequency_data.filtered(frequency_sources)
            pathogenicity_data = pathogenicity_data.filtered(pathogenicity_sources)

        variant_effect = None
        if variant.variant_effect in NON_GENIC_EFFECTS:
            regulatory_effect = self.get_regulatory_effect(variant.key)
            if regulatory_effect == VariantEffect.REGULATORY_REGION_VARIANT:
                variant_effect = regulatory_effect

        return variant.with_annotations(
            frequency_data=frequency_data,
            pathogenicity_data=pathogenicity_data,
            variant_effect=variant_effect,
        )

    async def annotate_all(
        self,
        variants: Sequence[VariantEvaluation],
        frequency_sources: Iterable[FrequencySource],
        pathogenicity_sources: Iterable[PathogenicitySource],
        max_concurrent: int = 8,
        skip_errors: bool = False,
    ) -> list[VariantEvaluation]:
        """Annotate many variants, running store lookups in worker threads.

        Args:
            variants: Variants to annotate
            frequency_sources: Frequency sources to keep
            pathogenicity_sources: Predictor sources to keep
            max_concurrent: Maximum lookups in flight
            skip_errors: Log and drop variants that fail instead of raising

        Returns:
            Annotated variants in input order (minus skipped ones)

        Raises:
            VariantSieveError: The first failure, when ``skip_errors`` is False
        """
        frequency_sources = frozenset(frequency_sources)
        pathogenicity_sources = frozenset(pathogenicity_sources)
        semaphore = asyncio.Semaphore(max_concurrent)

        async def annotate_with_semaphore(variant: VariantEvaluation) -> VariantEvaluation:
            async with semaphore:
                return await asyncio.to_thread(
                    self.annotate, variant, frequency_sources, pathogenicity_sources
                )

        logger.info(f"Annotating {len(variants)} variants (max {max_concurrent} concurrent lookups)")
        tasks = [annotate_with_semaphore(variant) for variant in variants]
        results = await asyncio.gather(*tasks, return_exceptions=True)

        annotated = []
        for variant, result in zip(variants, results):
            if isinstance(result, BaseException):
                if skip_errors and isinstance(result, VariantSieveError):
                    logger.warning(f"Skipping {variant.key}: {result}")
                    if self.decision_logger and isinstance(result, DecodeError):
                        self.decision_logger.log_decode_error(variant.key, result)
                    continue
                raise result
            annotated.append(result)

        logger.info(f"Annotated {len(annotated)}/{len(variants)} variants")
        return annotated
