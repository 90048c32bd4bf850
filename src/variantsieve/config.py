"""Analysis settings.

Settings come from a JSON file, from ``VARIANTSIEVE_*`` environment
variables (a ``.env`` file is honoured), or from CLI options layered on top.
"""

import json
import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from variantsieve.constants import (
    DEFAULT_MAX_FREQUENCY,
    DEFAULT_MIN_QUALITY,
    DEFAULT_PATHOGENICITY_THRESHOLD,
    FREQUENCY_SOURCE_KEYS,
)
from variantsieve.filters import (
    FilterRunMode,
    FrequencyFilter,
    GeneTargetFilter,
    PathogenicityFilter,
    QualityFilter,
    VariantEffectFilter,
    VariantFilter,
)
from variantsieve.models.frequency import FrequencySource
from variantsieve.models.pathogenicity import PathogenicitySource

logger = logging.getLogger(__name__)

ENV_PREFIX = "VARIANTSIEVE_"


def _all_frequency_sources() -> list[FrequencySource]:
    return list(dict.fromkeys(FREQUENCY_SOURCE_KEYS.values()))


def _default_pathogenicity_sources() -> list[PathogenicitySource]:
    return [
        PathogenicitySource.POLYPHEN,
        PathogenicitySource.MUTATION_TASTER,
        PathogenicitySource.SIFT,
        PathogenicitySource.REVEL,
        PathogenicitySource.MVP,
    ]


class AnalysisSettings(BaseModel):
    """Which sources to annotate with and how strictly to filter."""

    frequency_sources: list[FrequencySource] = Field(
        default_factory=_all_frequency_sources, description="Population databases to consult"
    )
    pathogenicity_sources: list[PathogenicitySource] = Field(
        default_factory=_default_pathogenicity_sources, description="Predictors to consult"
    )
    max_frequency: float = Field(
        DEFAULT_MAX_FREQUENCY, ge=0.0, le=100.0, description="Maximum allele frequency (%)"
    )
    min_quality: float = Field(DEFAULT_MIN_QUALITY, ge=0.0, description="Minimum call quality")
    keep_non_pathogenic: bool = Field(False, description="Keep variants predicted benign")
    pathogenicity_threshold: float = Field(DEFAULT_PATHOGENICITY_THRESHOLD, ge=0.0, le=1.0)
    remove_off_target: bool = Field(True, description="Remove synonymous/intronic/intergenic variants")
    genes: list[str] = Field(default_factory=list, description="Target gene panel (empty = all genes)")
    run_mode: FilterRunMode = FilterRunMode.FULL
    max_concurrent: int = Field(8, ge=1, description="Maximum concurrent store lookups")
    store_url: str | None = Field(None, description="Base URL of a remote allele store")
    store_timeout: float = Field(30.0, gt=0.0, description="Remote store timeout in seconds")

    @field_validator("frequency_sources", "pathogenicity_sources")
    @classmethod
    def drop_duplicate_sources(cls, v: list) -> list:
        return list(dict.fromkeys(v))

    @classmethod
    def from_json(cls, path: str | Path) -> "AnalysisSettings":
        """Load settings from a JSON file.

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the JSON is invalid
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Settings file not found: {path}")

        try:
            with open(path, "r") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in settings file: {str(e)}")

        logger.info(f"Loaded analysis settings from {path}")
        return cls.model_validate(_resolve_source_names(data))

    @classmethod
    def from_env(cls) -> "AnalysisSettings":
        """Build settings from ``VARIANTSIEVE_*`` environment variables."""
        load_dotenv()
        data = {}
        for name in cls.model_fields:
            value = os.getenv(f"{ENV_PREFIX}{name.upper()}")
            if value is not None:
                data[name] = value
        if "genes" in data:
            data["genes"] = [gene.strip() for gene in data["genes"].split(",") if gene.strip()]
        return cls.model_validate(_resolve_source_names(data))

    def build_filters(self) -> list[VariantFilter]:
        """Filters implied by these settings, in the standard order."""
        filters: list[VariantFilter] = []
        if self.min_quality > 0:
            filters.append(QualityFilter(self.min_quality))
        if self.genes:
            filters.append(GeneTargetFilter(self.genes))
        if self.remove_off_target:
            filters.append(VariantEffectFilter())
        filters.append(FrequencyFilter(self.max_frequency))
        filters.append(
            PathogenicityFilter(
                keep_non_pathogenic=self.keep_non_pathogenic,
                threshold=self.pathogenicity_threshold,
            )
        )
        return filters


def _resolve_source_names(data: dict) -> dict:
    """Translate enum member names in the source lists into enum values."""
    resolved = dict(data)
    for field_name, enum_type in (
        ("frequency_sources", FrequencySource),
        ("pathogenicity_sources", PathogenicitySource),
    ):
        items = resolved.get(field_name)
        if isinstance(items, str):
            items = [item.strip() for item in items.split(",") if item.strip()]
        if isinstance(items, list):
            resolved[field_name] = [
                enum_type[item] if isinstance(item, str) and item in enum_type.__members__ else item
                for item in items
            ]
    return resolved
