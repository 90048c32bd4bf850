"""variantsieve: variant annotation aggregation and filtering."""

__version__ = "0.1.0"
