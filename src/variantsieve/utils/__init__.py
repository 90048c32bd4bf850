"""Utility functions."""

from variantsieve.utils.logging_config import (
    FilterDecisionLogger,
    get_logger,
    reset_logger,
)

__all__ = [
    'FilterDecisionLogger',
    'get_logger',
    'reset_logger',
]
