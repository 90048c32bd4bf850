"""Adaptor from raw allele store records to annotation models.

ARCHITECTURE:
    Raw record (property name → value) → AlleleAdaptor → FrequencyData + PathogenicityData

Converts the opaque property bag the store returns for one allele into the
typed aggregates used by the rest of the pipeline.

Key Design:
- Pure functions: no I/O, the input mapping is never mutated
- Mapping tables live in constants; unknown property names are ignored
- Every malformed key is collected and reported in one DecodeError,
  which also carries the aggregate decoded from the well-formed keys
- A default (unset) ClinVar block decodes to no ClinVar record at all
"""

import math
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from variantsieve.api.allele_models import RawClinVar, RawFrequencyCounts
from variantsieve.constants import (
    CLINVAR_KEY,
    FREQUENCY_SOURCE_KEYS,
    PATHOGENICITY_RESCALE,
    PATHOGENICITY_SOURCE_KEYS,
)
from variantsieve.exceptions import DecodeError, FieldError
from variantsieve.models.frequency import Frequency, FrequencyData
from variantsieve.models.pathogenicity import (
    ClinVarData,
    PathogenicityData,
    PathogenicityScore,
)

RawAnnotationRecord = Mapping[str, Any]


def _as_number(key: str, value: Any, errors: list[FieldError]) -> float | None:
    """Return ``value`` as a finite float, recording a FieldError otherwise."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        errors.append(FieldError(key, "number", value))
        return None
    number = float(value)
    if not math.isfinite(number):
        errors.append(FieldError(key, "finite number", value))
        return None
    return number


def _validation_reason(error: ValidationError) -> tuple[str, str]:
    """First failing location and message from a pydantic error."""
    first = error.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return location, first.get("msg", str(error))


class AlleleAdaptor:
    """Decodes raw allele store records.

    Stateless; a single instance can be shared between threads.
    """

    def decode_frequency(self, raw: RawAnnotationRecord) -> FrequencyData:
        """Decode population frequencies.

        Args:
            raw: Property bag for one allele

        Returns:
            FrequencyData, empty when no frequency key is present

        Raises:
            DecodeError: If any frequency value is malformed
        """
        errors: list[FieldError] = []
        frequencies = self._frequencies(raw, errors)
        data = FrequencyData(frequencies=tuple(frequencies))
        if errors:
            raise DecodeError(errors, partial=data)
        return data

    def decode_pathogenicity(self, raw: RawAnnotationRecord) -> PathogenicityData:
        """Decode predictor scores and the ClinVar block.

        Args:
            raw: Property bag for one allele

        Returns:
            PathogenicityData, empty when no predictor or ClinVar key is present

        Raises:
            DecodeError: If any score or the ClinVar block is malformed
        """
        errors: list[FieldError] = []
        scores = self._scores(raw, errors)
        clinvar_data = self._clinvar(raw, errors)
        data = PathogenicityData(scores=tuple(scores), clinvar_data=clinvar_data)
        if errors:
            raise DecodeError(errors, partial=data)
        return data

    def decode(self, raw: RawAnnotationRecord) -> tuple[FrequencyData, PathogenicityData]:
        """Decode both aggregates, reporting errors from either side together."""
        errors: list[FieldError] = []
        frequency_data = FrequencyData(frequencies=tuple(self._frequencies(raw, errors)))
        pathogenicity_data = PathogenicityData(
            scores=tuple(self._scores(raw, errors)),
            clinvar_data=self._clinvar(raw, errors),
        )
        if errors:
            raise DecodeError(errors, partial=(frequency_data, pathogenicity_data))
        return frequency_data, pathogenicity_data

    def _frequencies(self, raw: RawAnnotationRecord, errors: list[FieldError]) -> list[Frequency]:
        frequencies: list[Frequency] = []
        for key, value in raw.items():
            source = FREQUENCY_SOURCE_KEYS.get(key)
            if source is None or value is None:
                continue

            if isinstance(value, Mapping):
                try:
                    counts = RawFrequencyCounts.model_validate(value)
                except ValidationError as e:
                    location, message = _validation_reason(e)
                    errors.append(FieldError(f"{key}.{location}", "allele counts", value, message))
                    continue
                frequencies.append(
                    Frequency.from_counts(source, counts.ac, counts.an, counts.hom)
                )
                continue

            number = _as_number(key, value, errors)
            if number is None:
                continue
            if number < 0:
                errors.append(FieldError(key, "non-negative frequency", value))
                continue
            frequencies.append(Frequency.of(source, number))
        return frequencies

    def _scores(self, raw: RawAnnotationRecord, errors: list[FieldError]) -> list[PathogenicityScore]:
        scores: list[PathogenicityScore] = []
        for key, value in raw.items():
            source = PATHOGENICITY_SOURCE_KEYS.get(key)
            if source is None or value is None:
                continue
            number = _as_number(key, value, errors)
            if number is None:
                continue
            rescale = PATHOGENICITY_RESCALE.get(source)
            if rescale is not None:
                number = rescale(number)
            scores.append(PathogenicityScore.of(source, number))
        return scores

    def _clinvar(self, raw: RawAnnotationRecord, errors: list[FieldError]) -> ClinVarData | None:
        block = raw.get(CLINVAR_KEY)
        if block is None:
            return None
        if not isinstance(block, Mapping):
            errors.append(FieldError(CLINVAR_KEY, "ClinVar block", block))
            return None

        try:
            clinvar = RawClinVar.model_validate(dict(block))
        except ValidationError as e:
            location, message = _validation_reason(e)
            errors.append(
                FieldError(f"{CLINVAR_KEY}.{location}", "ClinVar block", block, message)
            )
            return None

        if clinvar.is_default():
            return None

        return ClinVarData(
            allele_id=clinvar.allele_id,
            primary_interpretation=clinvar.primary_interpretation,
            secondary_interpretations=frozenset(clinvar.secondary_interpretations),
            included_alleles=dict(clinvar.included_alleles),
            review_status=clinvar.review_status,
        )


_default_adaptor = AlleleAdaptor()


def decode_frequency(raw: RawAnnotationRecord) -> FrequencyData:
    """Module-level shortcut for ``AlleleAdaptor().decode_frequency``."""
    return _default_adaptor.decode_frequency(raw)


def decode_pathogenicity(raw: RawAnnotationRecord) -> PathogenicityData:
    """Module-level shortcut for ``AlleleAdaptor().decode_pathogenicity``."""
    return _default_adaptor.decode_pathogenicity(raw)
