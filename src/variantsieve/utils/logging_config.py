"""Logging configuration for variantsieve filter decisions.

Provides structured logging of per-variant filter outcomes for auditing and debugging.
"""

import json
import logging
import threading
from datetime import datetime
from pathlib import Path

from variantsieve.exceptions import DecodeError
from variantsieve.models.variant import GenomicKey, VariantEvaluation


class FilterDecisionLogger:
    """Logger for filter decisions with structured output."""

    def __init__(self, log_dir: Path | None = None, enable_file_logging: bool = True):
        """Initialize the filter decision logger.

        Args:
            log_dir: Directory for log files. Defaults to ./logs
            enable_file_logging: Whether to write logs to files
        """
        self.logger = logging.getLogger("variantsieve.decisions")
        self.logger.setLevel(logging.INFO)

        # Remove existing handlers to avoid duplicates
        self.logger.handlers.clear()

        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.INFO)
        console_formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        console_handler.setFormatter(console_formatter)
        self.logger.addHandler(console_handler)

        # Runner threads share the JSON stream
        self._lock = threading.Lock()

        self.file_handler = None
        if enable_file_logging:
            if log_dir is None:
                log_dir = Path("./logs")
            log_dir.mkdir(parents=True, exist_ok=True)

            timestamp = datetime.now().strftime("%Y%m%d")
            log_file = log_dir / f"filter_decisions_{timestamp}.jsonl"

            # Only DEBUG records reach the file; JSON entries are written directly
            self.file_handler = logging.FileHandler(log_file)
            self.file_handler.setLevel(logging.DEBUG)
            self.file_handler.setFormatter(logging.Formatter('%(message)s'))
            self.file_handler.addFilter(lambda record: record.levelno == logging.DEBUG)
            self.logger.addHandler(self.file_handler)

            self.log_file = log_file
            self.logger.info(f"Filter decision logging enabled: {log_file}")
        else:
            self.log_file = None

    def _write_entry(self, log_entry: dict) -> None:
        if not self.file_handler:
            return
        with self._lock:
            self.file_handler.stream.write(json.dumps(log_entry) + '\n')
            self.file_handler.flush()

    def log_filter_decision(self, variant: VariantEvaluation) -> None:
        """Log the filter results attached to a variant."""
        log_entry = {
            "timestamp": datetime.now().isoformat(),
            "event_type": "filter_decision",
            "variant": str(variant.key),
            "gene": variant.gene_symbol,
            "status": variant.filter_status.value,
            "results": [
                {
                    "filter_type": result.filter_type.name,
                    "status": result.status.value,
                    "score": result.score,
                }
                for result in variant.filter_results
            ],
        }

        failed = sorted(filter_type.name for filter_type in variant.failed_filter_types)
        self.logger.info(
            f"Filter Decision: {variant.key} ({variant.gene_symbol or 'no gene'}) → "
            f"{variant.filter_status.value}"
            + (f" (failed: {', '.join(failed)})" if failed else "")
        )

        self._write_entry(log_entry)

    def log_decode_error(self, key: GenomicKey, error: DecodeError) -> None:
        """Log a malformed store record."""
        log_entry = {
            "timestamp": datetime.now().isoformat(),
            "event_type": "decode_error",
            "variant": str(key),
            "error": {
                "type": type(error).__name__,
                "keys": error.keys,
                "message": str(error),
            },
        }

        self.logger.error(f"Decode Error: {key} - {error}")

        self._write_entry(log_entry)


# Global logger instance
_global_logger: FilterDecisionLogger | None = None


def get_logger(log_dir: Path | None = None, enable_file_logging: bool = True) -> FilterDecisionLogger:
    """Get or create the global filter decision logger."""
    global _global_logger

    if _global_logger is None:
        _global_logger = FilterDecisionLogger(log_dir=log_dir, enable_file_logging=enable_file_logging)

    return _global_logger


def reset_logger() -> None:
    """Reset the global logger (mainly for testing)."""
    global _global_logger
    _global_logger = None
