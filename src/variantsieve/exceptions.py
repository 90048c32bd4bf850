"""Exception types raised by variantsieve.

Store misses and unmapped sources are not errors and never show up here:
they decode to empty or partial annotation data.
"""

from typing import Any


class VariantSieveError(Exception):
    """Base class for all variantsieve errors."""

    pass


class FieldError:
    """A single malformed key in a raw annotation record."""

    def __init__(self, key: str, expected: str, actual: Any, reason: str | None = None):
        self.key = key
        self.expected = expected
        self.actual = actual
        self.reason = reason

    def __repr__(self) -> str:
        return f"FieldError(key={self.key!r}, expected={self.expected!r}, actual={self.actual!r})"

    def __str__(self) -> str:
        message = f"{self.key}: expected {self.expected}, got {type(self.actual).__name__} {self.actual!r}"
        if self.reason:
            message += f" ({self.reason})"
        return message


class DecodeError(VariantSieveError):
    """Raised when a raw annotation record holds malformed values.

    All offending keys are reported together. ``partial`` holds whatever was
    decoded from the well-formed keys of the same record.
    """

    def __init__(self, errors: list[FieldError], partial: Any = None):
        self.errors = list(errors)
        self.partial = partial
        details = "; ".join(str(error) for error in self.errors)
        super().__init__(f"Failed to decode {len(self.errors)} field(s): {details}")

    @property
    def keys(self) -> list[str]:
        """Source-name keys that failed to decode."""
        return [error.key for error in self.errors]


class FilterMisuseError(VariantSieveError):
    """Raised when a filter type would be recorded twice for a variant in one run."""

    pass


class AlleleStoreError(VariantSieveError):
    """Raised when a remote allele store cannot be reached."""

    pass
