"""Applies an ordered list of filters to variants.

ARCHITECTURE:
    VariantEvaluation → filter 1 → filter 2 → ... → VariantEvaluation with FilterResults

Key Design:
- Filters run in the order given; each sees the results of the ones before it
- Short-circuiting is a run mode, not a property of any filter
- At most one result per filter type: a result left by an earlier run is
  replaced, a second result within the same run is a FilterMisuseError
- Variants are independent, so batches run concurrently
"""

import asyncio
import logging
from collections.abc import Sequence
from enum import Enum

from variantsieve.exceptions import FilterMisuseError, VariantSieveError
from variantsieve.filters.base import VariantFilter
from variantsieve.models.filter_result import FilterType
from variantsieve.models.variant import VariantEvaluation
from variantsieve.utils.logging_config import get_logger

logger = logging.getLogger(__name__)


class FilterRunMode(str, Enum):
    """How many filters a variant goes through."""

    FULL = "full"  # every filter runs on every variant
    PASS_ONLY = "pass-only"  # stop at the first failure


class FilterRunner:
    """Runs a fixed sequence of filters over variants."""

    def __init__(
        self,
        filters: Sequence[VariantFilter],
        run_mode: FilterRunMode = FilterRunMode.FULL,
        enable_logging: bool = False,
    ) -> None:
        """Initialize the runner.

        Args:
            filters: Filters in the order they should run
            run_mode: FULL or PASS_ONLY (short-circuit after the first failure)
            enable_logging: Write per-variant decisions to the filter decision log

        Raises:
            FilterMisuseError: If two filters share a filter type
        """
        seen: set[FilterType] = set()
        for variant_filter in filters:
            if variant_filter.filter_type in seen:
                raise FilterMisuseError(
                    f"Filter type {variant_filter.filter_type.name} appears more than once in the pipeline"
                )
            seen.add(variant_filter.filter_type)
        self.filters = tuple(filters)
        self.run_mode = run_mode
        self.decision_logger = get_logger() if enable_logging else None

    def run(self, variant: VariantEvaluation) -> VariantEvaluation:
        """Filter one variant.

        Returns:
            A new snapshot with this run's results attached

        Raises:
            FilterMisuseError: If a filter records a second result for a type in this run
        """
        recorded: set[FilterType] = set()
        failed_in_run = False

        for variant_filter in self.filters:
            if failed_in_run and self.run_mode == FilterRunMode.PASS_ONLY:
                break

            result = variant_filter.evaluate(variant)
            if result.filter_type in recorded:
                raise FilterMisuseError(
                    f"{variant_filter!r} recorded a second {result.filter_type.name} result "
                    f"for {variant.key}"
                )
            recorded.add(result.filter_type)
            variant = variant.replacing_filter_result(result)

            if not result.passed_filter:
                failed_in_run = True

        if self.decision_logger:
            self.decision_logger.log_filter_decision(variant)

        return variant

    def run_all(
        self, variants: Sequence[VariantEvaluation], skip_errors: bool = False
    ) -> list[VariantEvaluation]:
        """Filter variants one after another, keeping input order."""
        filtered = []
        for variant in variants:
            try:
                filtered.append(self.run(variant))
            except VariantSieveError as e:
                if not skip_errors:
                    raise
                logger.warning(f"Skipping {variant.key}: {e}")
        self._log_summary(filtered)
        return filtered

    async def run_all_async(
        self,
        variants: Sequence[VariantEvaluation],
        max_concurrent: int = 8,
        skip_errors: bool = False,
    ) -> list[VariantEvaluation]:
        """Filter variants concurrently in worker threads, keeping input order."""
        semaphore = asyncio.Semaphore(max_concurrent)

        async def run_with_semaphore(variant: VariantEvaluation) -> VariantEvaluation:
            async with semaphore:
                return await asyncio.to_thread(self.run, variant)

        tasks = [run_with_semaphore(variant) for variant in variants]
        results = await asyncio.gather(*tasks, return_exceptions=True)

        filtered = []
        for variant, result in zip(variants, results):
            if isinstance(result, BaseException):
                if skip_errors and isinstance(result, VariantSieveError):
                    logger.warning(f"Skipping {variant.key}: {result}")
                    continue
                raise result
            filtered.append(result)
        self._log_summary(filtered)
        return filtered

    def _log_summary(self, variants: Sequence[VariantEvaluation]) -> None:
        passed = sum(1 for variant in variants if variant.passed_filters)
        logger.info(f"Filtering complete: {passed}/{len(variants)} variants passed all filters")
