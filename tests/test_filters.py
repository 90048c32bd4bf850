"""Tests for variant filters and the filter runner."""

import pytest

from variantsieve.exceptions import FilterMisuseError
from variantsieve.filters import (
    FilterRunMode,
    FilterRunner,
    FrequencyFilter,
    GeneTargetFilter,
    IntervalFilter,
    JointFailureFilter,
    KnownVariantFilter,
    PathogenicityFilter,
    QualityFilter,
    VariantEffectFilter,
    VariantFilter,
)
from variantsieve.models.effect import VariantEffect
from variantsieve.models.filter_result import FilterResult, FilterStatus, FilterType
from variantsieve.models.frequency import Frequency, FrequencyData, FrequencySource
from variantsieve.models.pathogenicity import (
    ClinSig,
    ClinVarData,
    PathogenicityData,
    PathogenicityScore,
    PathogenicitySource,
)
from variantsieve.models.variant import GenomicKey, VariantEvaluation


def _with_frequency(variant: VariantEvaluation, value: float) -> VariantEvaluation:
    return variant.with_annotations(
        frequency_data=FrequencyData.of(Frequency.of(FrequencySource.GNOMAD_G_NFE, value))
    )


def _with_scores(variant: VariantEvaluation, *scores, clinvar_data=None) -> VariantEvaluation:
    return variant.with_annotations(
        pathogenicity_data=PathogenicityData.of(*scores, clinvar_data=clinvar_data)
    )


class TestQualityFilter:
    """Tests for QualityFilter."""

    def test_pass_and_fail(self, sample_variant):
        """Test the quality threshold is inclusive."""
        assert QualityFilter(60.0).evaluate(sample_variant).passed_filter
        assert not QualityFilter(60.1).evaluate(sample_variant).passed_filter

    def test_negative_threshold(self):
        """Test a negative threshold is rejected."""
        with pytest.raises(ValueError):
            QualityFilter(-1)


class TestIntervalFilter:
    """Tests for IntervalFilter."""

    def test_inside_and_outside(self, sample_variant):
        """Test overlap with the interval."""
        assert IntervalFilter("chr1", 12000, 12345).evaluate(sample_variant).passed_filter
        assert not IntervalFilter("1", 12346, 13000).evaluate(sample_variant).passed_filter
        assert not IntervalFilter("2", 12000, 13000).evaluate(sample_variant).passed_filter

    def test_invalid_interval(self):
        """Test an interval ending before it starts is rejected."""
        with pytest.raises(ValueError):
            IntervalFilter("1", 200, 100)


class TestGeneTargetFilter:
    """Tests for GeneTargetFilter."""

    def test_gene_panel(self, sample_variant):
        """Test gene matching is case-insensitive."""
        result = GeneTargetFilter(["brca1", "BRCA2"]).evaluate(sample_variant)
        assert result.filter_type == FilterType.BED_FILTER
        assert result.passed_filter
        assert not GeneTargetFilter(["TP53"]).evaluate(sample_variant).passed_filter

    def test_no_gene(self, sample_key):
        """Test variants without a gene fail."""
        variant = VariantEvaluation(key=sample_key)
        assert not GeneTargetFilter(["TP53"]).evaluate(variant).passed_filter

    def test_empty_panel(self):
        """Test an empty panel is rejected."""
        with pytest.raises(ValueError):
            GeneTargetFilter([])


class TestVariantEffectFilter:
    """Tests for VariantEffectFilter."""

    def test_default_off_target(self, sample_variant):
        """Test missense passes and synonymous fails."""
        variant_filter = VariantEffectFilter()
        assert variant_filter.evaluate(sample_variant).passed_filter

        synonymous = sample_variant.with_annotations(variant_effect=VariantEffect.SYNONYMOUS_VARIANT)
        assert not variant_filter.evaluate(synonymous).passed_filter

    def test_custom_off_target(self, sample_variant):
        """Test a custom set of off-target effects."""
        result = VariantEffectFilter({VariantEffect.MISSENSE_VARIANT}).evaluate(sample_variant)
        assert not result.passed_filter


class TestFrequencyFilter:
    """Tests for FrequencyFilter."""

    def test_unknown_frequency_passes(self, sample_variant):
        """Test variants missing from every database pass with full score."""
        result = FrequencyFilter().evaluate(sample_variant)
        assert result.passed_filter
        assert result.score == 1.0

    def test_rare_variant_passes(self, sample_variant):
        """Test variants below the threshold pass."""
        result = FrequencyFilter(2.0).evaluate(_with_frequency(sample_variant, 0.5))
        assert result.passed_filter
        assert 0.0 < result.score < 1.0

    def test_threshold_is_inclusive(self, sample_variant):
        """Test a variant exactly at the threshold passes."""
        assert FrequencyFilter(1.0).evaluate(_with_frequency(sample_variant, 1.0)).passed_filter

    def test_common_variant_fails_with_score(self, sample_variant):
        """Test a failing result still carries the rarity score."""
        variant = _with_frequency(sample_variant, 1.5)
        result = FrequencyFilter(1.0).evaluate(variant)

        assert not result.passed_filter
        assert result.score == pytest.approx(variant.frequency_data.frequency_score)
        assert result.score > 0.0

    def test_max_frequency_range(self):
        """Test the threshold must be a percentage."""
        with pytest.raises(ValueError):
            FrequencyFilter(101.0)
        with pytest.raises(ValueError):
            FrequencyFilter(-0.1)


class TestKnownVariantFilter:
    """Tests for KnownVariantFilter."""

    def test_novel_and_known(self, sample_variant):
        """Test any known frequency fails the variant."""
        assert KnownVariantFilter().evaluate(sample_variant).passed_filter
        assert not KnownVariantFilter().evaluate(_with_frequency(sample_variant, 0.0)).passed_filter


class TestPathogenicityFilter:
    """Tests for PathogenicityFilter."""

    def test_predictor_score(self, sample_variant):
        """Test a damaging predictor score passes."""
        variant = _with_scores(sample_variant, PathogenicityScore.of(PathogenicitySource.REVEL, 0.9))
        result = PathogenicityFilter().evaluate(variant)
        assert result.passed_filter
        assert result.score == pytest.approx(0.9)

    def test_effect_default_used(self, sample_variant):
        """Test the effect default applies when predictors score lower."""
        variant = _with_scores(sample_variant, PathogenicityScore.of(PathogenicitySource.REVEL, 0.1))
        result = PathogenicityFilter().evaluate(variant)
        assert result.score == pytest.approx(0.6)
        assert result.passed_filter

    def test_benign_fails(self, sample_key):
        """Test a low-scoring synonymous variant fails."""
        variant = VariantEvaluation(key=sample_key, variant_effect=VariantEffect.SYNONYMOUS_VARIANT)
        result = PathogenicityFilter().evaluate(variant)
        assert not result.passed_filter
        assert result.score == pytest.approx(0.1)

    def test_keep_non_pathogenic(self, sample_key):
        """Test benign variants pass when kept, with the same score."""
        variant = VariantEvaluation(key=sample_key, variant_effect=VariantEffect.SYNONYMOUS_VARIANT)
        result = PathogenicityFilter(keep_non_pathogenic=True).evaluate(variant)
        assert result.passed_filter
        assert result.score == pytest.approx(0.1)

    def test_clinvar_pathogenic_passes(self, sample_key):
        """Test ClinVar pathogenic variants pass regardless of score."""
        variant = _with_scores(
            VariantEvaluation(key=sample_key, variant_effect=VariantEffect.INTRON_VARIANT),
            clinvar_data=ClinVarData(allele_id="1", primary_interpretation=ClinSig.LIKELY_PATHOGENIC),
        )
        assert PathogenicityFilter().evaluate(variant).passed_filter


class TestJointFailureFilter:
    """Tests for JointFailureFilter."""

    def test_fails_only_when_all_failed(self, sample_variant):
        """Test the combination fails only when every listed filter failed."""
        joint = JointFailureFilter([FilterType.FREQUENCY_FILTER, FilterType.PATHOGENICITY_FILTER])

        one_failed = sample_variant.with_filter_result(FilterResult.failed(FilterType.FREQUENCY_FILTER))
        result = joint.evaluate(one_failed)
        assert result.passed_filter
        assert result.score == 0.5

        both_failed = one_failed.with_filter_result(FilterResult.failed(FilterType.PATHOGENICITY_FILTER))
        result = joint.evaluate(both_failed)
        assert not result.passed_filter
        assert result.score == 1.0

    def test_invalid_combinations(self):
        """Test fewer than two types or its own type are rejected."""
        with pytest.raises(ValueError):
            JointFailureFilter([FilterType.FREQUENCY_FILTER])
        with pytest.raises(ValueError):
            JointFailureFilter([FilterType.FREQUENCY_FILTER, FilterType.COMBINED_FAILURE_FILTER])


class _DoubleResultFilter(VariantFilter):
    """Emits a quality result while claiming to be an interval filter."""

    filter_type = FilterType.INTERVAL_FILTER

    def evaluate(self, variant):
        return FilterResult.passed(FilterType.QUALITY_FILTER)


class TestFilterRunner:
    """Tests for FilterRunner."""

    def test_full_mode_runs_every_filter(self, sample_variant):
        """Test every filter records a result in FULL mode."""
        runner = FilterRunner([GeneTargetFilter(["TP53"]), FrequencyFilter(), PathogenicityFilter()])

        result = runner.run(sample_variant)

        assert [r.filter_type for r in result.filter_results] == [
            FilterType.BED_FILTER,
            FilterType.FREQUENCY_FILTER,
            FilterType.PATHOGENICITY_FILTER,
        ]
        assert result.filter_status == FilterStatus.FAILED
        assert result.failed_filter_types == {FilterType.BED_FILTER}

    def test_pass_only_stops_at_first_failure(self, sample_variant):
        """Test PASS_ONLY mode skips filters after a failure."""
        runner = FilterRunner(
            [GeneTargetFilter(["TP53"]), FrequencyFilter(), PathogenicityFilter()],
            run_mode=FilterRunMode.PASS_ONLY,
        )

        result = runner.run(sample_variant)

        assert [r.filter_type for r in result.filter_results] == [FilterType.BED_FILTER]
        assert result.status_for(FilterType.FREQUENCY_FILTER) == FilterStatus.UNFILTERED

    def test_passing_variant(self, sample_variant):
        """Test a variant passing every filter."""
        runner = FilterRunner([QualityFilter(20), VariantEffectFilter(), FrequencyFilter()])
        result = runner.run(sample_variant)
        assert result.passed_filters
        assert sample_variant.filter_status == FilterStatus.UNFILTERED

    def test_duplicate_filter_types_rejected(self):
        """Test two filters of one type cannot share a pipeline."""
        with pytest.raises(FilterMisuseError):
            FilterRunner([FrequencyFilter(1.0), FrequencyFilter(2.0)])

    def test_second_result_in_run_rejected(self, sample_variant):
        """Test a second result of one type within a run raises."""
        runner = FilterRunner([QualityFilter(), _DoubleResultFilter()])
        with pytest.raises(FilterMisuseError):
            runner.run(sample_variant)

    def test_rerun_replaces_results(self, sample_variant):
        """Test results from an earlier run are replaced, not duplicated."""
        strict = FilterRunner([FrequencyFilter(0.1)])
        lenient = FilterRunner([FrequencyFilter(5.0)])
        variant = _with_frequency(sample_variant, 1.0)

        failed = strict.run(variant)
        passed = lenient.run(failed)

        assert not failed.passed_filters
        assert len(passed.filter_results) == 1
        assert passed.passed_filters

    def test_pass_only_ignores_earlier_failures(self, sample_variant):
        """Test short-circuiting only considers failures from the current run."""
        earlier = sample_variant.with_filter_result(FilterResult.failed(FilterType.QUALITY_FILTER))
        runner = FilterRunner([FrequencyFilter(), PathogenicityFilter()], run_mode=FilterRunMode.PASS_ONLY)

        result = runner.run(earlier)

        assert result.passed_filter(FilterType.FREQUENCY_FILTER)
        assert result.passed_filter(FilterType.PATHOGENICITY_FILTER)
        assert result.filter_status == FilterStatus.FAILED

    def test_joint_failure_in_pipeline(self, sample_key):
        """Test a joint filter sees the results of filters before it."""
        variant = VariantEvaluation(key=sample_key, variant_effect=VariantEffect.SYNONYMOUS_VARIANT)
        variant = _with_frequency(variant, 5.0)
        runner = FilterRunner([
            FrequencyFilter(),
            PathogenicityFilter(),
            JointFailureFilter([FilterType.FREQUENCY_FILTER, FilterType.PATHOGENICITY_FILTER]),
        ])

        result = runner.run(variant)

        assert not result.passed_filter(FilterType.COMBINED_FAILURE_FILTER)

    def test_run_all(self, sample_variant):
        """Test batch filtering keeps order."""
        other = VariantEvaluation(key=GenomicKey.of("17", 7577120, "C", "T"), gene_symbol="TP53")
        runner = FilterRunner([GeneTargetFilter(["TP53"])])

        results = runner.run_all([sample_variant, other])

        assert [r.passed_filters for r in results] == [False, True]

    def test_run_all_skip_errors(self, sample_variant):
        """Test misbehaving filters can be skipped per variant."""
        runner = FilterRunner([QualityFilter(), _DoubleResultFilter()])
        assert runner.run_all([sample_variant], skip_errors=True) == []
        with pytest.raises(FilterMisuseError):
            runner.run_all([sample_variant])

    @pytest.mark.asyncio
    async def test_run_all_async(self, sample_variant):
        """Test concurrent filtering keeps input order."""
        other = VariantEvaluation(key=GenomicKey.of("17", 7577120, "C", "T"), gene_symbol="TP53")
        runner = FilterRunner([GeneTargetFilter(["BRCA2"])])

        results = await runner.run_all_async([other, sample_variant, other], max_concurrent=2)

        assert [r.gene_symbol for r in results] == ["TP53", "BRCA2", "TP53"]
        assert [r.passed_filters for r in results] == [False, True, False]

    def test_decision_logging(self, sample_variant, tmp_path):
        """Test the runner writes decisions to the decision log."""
        from variantsieve.utils.logging_config import get_logger, reset_logger

        reset_logger()
        decision_logger = get_logger(log_dir=tmp_path)
        try:
            runner = FilterRunner([FrequencyFilter()], enable_logging=True)
            assert runner.decision_logger is decision_logger
            runner.run(sample_variant)

            lines = decision_logger.log_file.read_text().splitlines()
            assert len(lines) == 1
            assert '"filter_decision"' in lines[0]
        finally:
            reset_logger()
