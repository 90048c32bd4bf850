"""Pathogenicity prediction and ClinVar models."""

from enum import Enum
from collections.abc import Mapping
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


class PathogenicitySource(str, Enum):
    """Computational predictors whose scores the store carries."""

    SIFT = "SIFT"
    POLYPHEN = "PolyPhen"
    MUTATION_TASTER = "MutationTaster"
    CADD = "CADD"
    REMM = "REMM"
    REVEL = "REVEL"
    M_CAP = "M-CAP"
    MPC = "MPC"
    MVP = "MVP"
    PRIMATE_AI = "PrimateAI"
    SPLICE_AI = "SpliceAI"
    ALPHA_MISSENSE = "AlphaMissense"

    # Scores held outside the store (e.g. user supplied); no wire key maps here
    TEST = "Test"


_SOURCE_ORDER = {source: index for index, source in enumerate(PathogenicitySource)}


class PathogenicityScore(BaseModel):
    """Score from a single predictor, as held by the store."""

    model_config = ConfigDict(frozen=True)

    source: PathogenicitySource
    score: float = Field(..., description="Raw predictor score")

    @classmethod
    def of(cls, source: PathogenicitySource, score: float) -> "PathogenicityScore":
        return cls(source=source, score=score)

    @property
    def pathogenicity(self) -> float:
        """Score on a 0-1 scale where higher means more damaging."""
        if self.source == PathogenicitySource.SIFT:
            # SIFT scores are low for damaging variants
            value = 1.0 - self.score
        elif self.source == PathogenicitySource.CADD and self.score > 1.0:
            # phred-scaled
            value = 1.0 - 10 ** (-self.score / 10)
        else:
            value = self.score
        return min(1.0, max(0.0, value))


class ClinSig(str, Enum):
    """ClinVar clinical significance categories."""

    BENIGN = "BENIGN"
    BENIGN_OR_LIKELY_BENIGN = "BENIGN_OR_LIKELY_BENIGN"
    LIKELY_BENIGN = "LIKELY_BENIGN"
    UNCERTAIN_SIGNIFICANCE = "UNCERTAIN_SIGNIFICANCE"
    LIKELY_PATHOGENIC = "LIKELY_PATHOGENIC"
    PATHOGENIC_OR_LIKELY_PATHOGENIC = "PATHOGENIC_OR_LIKELY_PATHOGENIC"
    PATHOGENIC = "PATHOGENIC"
    CONFLICTING_PATHOGENICITY_INTERPRETATIONS = "CONFLICTING_PATHOGENICITY_INTERPRETATIONS"
    AFFECTS = "AFFECTS"
    ASSOCIATION = "ASSOCIATION"
    DRUG_RESPONSE = "DRUG_RESPONSE"
    NOT_PROVIDED = "NOT_PROVIDED"
    OTHER = "OTHER"
    PROTECTIVE = "PROTECTIVE"
    RISK_FACTOR = "RISK_FACTOR"


_CLINSIG_ORDER = {clinsig: index for index, clinsig in enumerate(ClinSig)}

PATHOGENIC_CLIN_SIGS: frozenset[ClinSig] = frozenset({
    ClinSig.PATHOGENIC,
    ClinSig.PATHOGENIC_OR_LIKELY_PATHOGENIC,
    ClinSig.LIKELY_PATHOGENIC,
})


class ClinVarData(BaseModel):
    """Curated ClinVar record for an allele.

    A record built with no arguments is a present-but-blank record; absence
    of ClinVar data is modelled as ``PathogenicityData.clinvar_data is None``.
    """

    model_config = ConfigDict(frozen=True)

    allele_id: str = ""
    primary_interpretation: ClinSig = ClinSig.NOT_PROVIDED
    secondary_interpretations: frozenset[ClinSig] = frozenset()
    included_alleles: tuple[tuple[str, ClinSig], ...] = ()
    review_status: str = ""

    @field_validator("included_alleles", mode="before")
    @classmethod
    def accept_mapping(cls, v: Any) -> Any:
        if isinstance(v, Mapping):
            return tuple(v.items())
        return v

    @field_validator("included_alleles")
    @classmethod
    def sort_included_alleles(
        cls, v: tuple[tuple[str, ClinSig], ...]
    ) -> tuple[tuple[str, ClinSig], ...]:
        # One pair per allele id, sorted by id
        return tuple(sorted(dict(v).items()))

    @field_serializer("secondary_interpretations")
    def serialize_secondary(self, v: frozenset[ClinSig]) -> list[str]:
        return [clinsig.value for clinsig in sorted(v, key=_CLINSIG_ORDER.__getitem__)]

    @field_serializer("included_alleles")
    def serialize_included(self, v: tuple[tuple[str, ClinSig], ...]) -> dict[str, str]:
        return {allele_id: clinsig.value for allele_id, clinsig in v}

    def included_allele(self, allele_id: str) -> ClinSig | None:
        return dict(self.included_alleles).get(allele_id)

    @property
    def is_empty(self) -> bool:
        return self == _BLANK_CLINVAR

    def is_pathogenic_or_likely_pathogenic(self) -> bool:
        return self.primary_interpretation in PATHOGENIC_CLIN_SIGS

    def star_rating(self) -> int:
        """ClinVar review stars (0-4) derived from the review status text."""
        status = self.review_status.lower()
        if "practice guideline" in status:
            return 4
        if "expert panel" in status:
            return 3
        if "multiple submitters" in status and "no conflicts" in status:
            return 2
        if "single submitter" in status or "conflicting" in status:
            return 1
        return 0


_BLANK_CLINVAR = ClinVarData()


class PathogenicityData(BaseModel):
    """Predictor scores and optional ClinVar record for a single allele."""

    model_config = ConfigDict(frozen=True)

    scores: tuple[PathogenicityScore, ...] = ()
    clinvar_data: ClinVarData | None = None

    @field_validator("scores")
    @classmethod
    def _unique_sorted(cls, value: tuple[PathogenicityScore, ...]) -> tuple[PathogenicityScore, ...]:
        by_source = {score.source: score for score in value}
        return tuple(sorted(by_source.values(), key=lambda s: _SOURCE_ORDER[s.source]))

    @classmethod
    def of(
        cls, *scores: PathogenicityScore | ClinVarData, clinvar_data: ClinVarData | None = None
    ) -> "PathogenicityData":
        """Build from scores, optionally with a ClinVar record in any position."""
        predicted = []
        for item in scores:
            if isinstance(item, ClinVarData):
                clinvar_data = item
            else:
                predicted.append(item)
        return cls(scores=tuple(predicted), clinvar_data=clinvar_data)

    @classmethod
    def empty(cls) -> "PathogenicityData":
        return _EMPTY

    @property
    def is_empty(self) -> bool:
        return not self.scores and self.clinvar_data is None

    @property
    def has_predicted_score(self) -> bool:
        return bool(self.scores)

    @property
    def has_clinvar_data(self) -> bool:
        return self.clinvar_data is not None

    @property
    def sources(self) -> frozenset[PathogenicitySource]:
        return frozenset(score.source for score in self.scores)

    def get_predicted_score(self, source: PathogenicitySource) -> PathogenicityScore | None:
        for score in self.scores:
            if score.source == source:
                return score
        return None

    def has_source(self, source: PathogenicitySource) -> bool:
        return self.get_predicted_score(source) is not None

    @property
    def most_pathogenic_score(self) -> PathogenicityScore | None:
        if not self.scores:
            return None
        return max(self.scores, key=lambda score: score.pathogenicity)

    @property
    def score(self) -> float:
        """Highest normalised predictor score, 0 when no predictor has scored the allele."""
        most_pathogenic = self.most_pathogenic_score
        return most_pathogenic.pathogenicity if most_pathogenic else 0.0

    def filtered(self, sources: Iterable[PathogenicitySource]) -> "PathogenicityData":
        """Keep only the requested predictor scores. The ClinVar record is always kept."""
        wanted = set(sources)
        kept = tuple(score for score in self.scores if score.source in wanted)
        if len(kept) == len(self.scores):
            return self
        return PathogenicityData(scores=kept, clinvar_data=self.clinvar_data)


_EMPTY = PathogenicityData()
