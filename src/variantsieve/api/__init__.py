"""Clients and adaptors for external annotation data."""

from variantsieve.api.adaptor import AlleleAdaptor, decode_frequency, decode_pathogenicity
from variantsieve.api.regulatory import (
    EffectClassifier,
    RegulatoryRegion,
    RegulatoryRegionClassifier,
)
from variantsieve.api.store import AlleleStore, HttpAlleleStore, InMemoryAlleleStore

__all__ = [
    "AlleleAdaptor",
    "decode_frequency",
    "decode_pathogenicity",
    "AlleleStore",
    "InMemoryAlleleStore",
    "HttpAlleleStore",
    "EffectClassifier",
    "RegulatoryRegion",
    "RegulatoryRegionClassifier",
]
