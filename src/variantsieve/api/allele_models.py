"""Pydantic models for structured blocks in raw allele store records.

A raw record is a plain mapping of property name to value. Most values are
numbers; the structured ones are parsed with these models.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from variantsieve.models.pathogenicity import ClinSig


class RawClinVar(BaseModel):
    """ClinVar block as stored (camelCase names, snake_case accepted)."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    allele_id: str = Field("", alias="alleleId")
    primary_interpretation: ClinSig = Field(ClinSig.NOT_PROVIDED, alias="primaryInterpretation")
    secondary_interpretations: list[ClinSig] = Field(
        default_factory=list, alias="secondaryInterpretations"
    )
    included_alleles: dict[str, ClinSig] = Field(default_factory=dict, alias="includedAlleles")
    review_status: str = Field("", alias="reviewStatus")

    @field_validator("allele_id", mode="before")
    @classmethod
    def coerce_allele_id(cls, v: str | int | None) -> str:
        # Older dumps store the id as a number
        if v is None:
            return ""
        if isinstance(v, bool):
            raise ValueError("alleleId must be a string")
        return str(v)

    @field_validator("review_status", mode="before")
    @classmethod
    def coerce_review_status(cls, v: str | None) -> str:
        return "" if v is None else v

    def is_default(self) -> bool:
        """True when every field holds its unset value."""
        return self == RawClinVar()


class RawFrequencyCounts(BaseModel):
    """Allele counts stored in place of a bare frequency value."""

    model_config = ConfigDict(extra="ignore")

    ac: int = Field(..., ge=0, description="Allele count")
    an: int = Field(..., ge=0, description="Allele number")
    hom: int | None = Field(None, ge=0, description="Homozygote count")

    @field_validator("an")
    @classmethod
    def an_covers_ac(cls, v: int, info) -> int:
        ac = info.data.get("ac")
        if ac is not None and v < ac:
            raise ValueError(f"an ({v}) must not be smaller than ac ({ac})")
        return v
