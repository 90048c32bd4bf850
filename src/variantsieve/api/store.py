"""Allele store lookups.

ARCHITECTURE:
    GenomicKey → AlleleStore.lookup → raw record | None

The store is the long-lived, shared, read-only source of raw annotation
records. A miss is signalled by ``None``, never by an exception.

Key Design:
- ``AlleleStore`` protocol so the data service accepts any keyed backend
- In-memory store, loadable from a JSON dump, for tests and small panels
- HTTP store with connection pooling (httpx.Client) and retry with
  exponential backoff (tenacity); only transport failures raise
"""

import json
import logging
import threading
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any, Protocol, runtime_checkable

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from variantsieve.exceptions import AlleleStoreError
from variantsieve.models.variant import GenomicKey

logger = logging.getLogger(__name__)


@runtime_checkable
class AlleleStore(Protocol):
    """Keyed, read-only source of raw allele records.

    Implementations must tolerate concurrent ``lookup`` calls from several
    threads without external locking.
    """

    def lookup(self, key: GenomicKey) -> Mapping[str, Any] | None:
        ...


class InMemoryAlleleStore:
    """Allele store held in a dictionary.

    The records are frozen at construction so concurrent readers never see a
    partially updated store.
    """

    def __init__(self, records: Mapping[GenomicKey, Mapping[str, Any]] | None = None):
        self._records: Mapping[GenomicKey, Mapping[str, Any]] = MappingProxyType(
            {key: MappingProxyType(dict(record)) for key, record in (records or {}).items()}
        )

    @classmethod
    def from_json(cls, path: str | Path) -> "InMemoryAlleleStore":
        """Load a store dumped as ``{"chrom-pos-ref-alt": {property: value}}``.

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the JSON or one of its keys is invalid
        """
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"Allele store file not found: {path}")

        logger.info(f"Loading allele store from {path}")

        try:
            with open(path, "r") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in allele store file: {str(e)}")

        if not isinstance(data, dict):
            raise ValueError("Allele store file must hold a JSON object")

        records = {GenomicKey.parse(key): record for key, record in data.items()}
        logger.info(f"Loaded {len(records)} allele records")
        return cls(records)

    def lookup(self, key: GenomicKey) -> Mapping[str, Any] | None:
        return self._records.get(key)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, key: object) -> bool:
        return key in self._records


class HttpAlleleStore:
    """Client for a REST allele store.

    Fetches ``GET {base_url}/alleles/{chrom-pos-ref-alt}``; a 404 is a miss.
    ``httpx.Client`` is thread-safe, so one instance can serve a worker pool.
    """

    DEFAULT_TIMEOUT = 30.0

    def __init__(self, base_url: str, timeout: float = DEFAULT_TIMEOUT) -> None:
        """Initialize the store client.

        Args:
            base_url: Root URL of the allele service
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client: httpx.Client | None = None
        self._client_lock = threading.Lock()

    def __enter__(self) -> "HttpAlleleStore":
        self._get_client()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def _get_client(self) -> httpx.Client:
        """Get or create the HTTP client; lookups from worker threads share one."""
        with self._client_lock:
            if self._client is None:
                self._client = httpx.Client(timeout=self.timeout)
            return self._client

    @retry(
        retry=retry_if_exception_type((httpx.TransportError, httpx.TimeoutException)),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def _fetch(self, key: GenomicKey) -> httpx.Response:
        client = self._get_client()
        return client.get(f"{self.base_url}/alleles/{key}")

    def lookup(self, key: GenomicKey) -> Mapping[str, Any] | None:
        """Fetch the raw record for ``key``.

        Returns:
            The record, or None when the store has no entry for the allele

        Raises:
            AlleleStoreError: If the store cannot be reached or answers with an error
        """
        try:
            response = self._fetch(key)
        except httpx.HTTPError as e:
            raise AlleleStoreError(f"Allele store request failed for {key}: {e}") from e

        if response.status_code == 404:
            logger.debug(f"No allele record for {key}")
            return None

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise AlleleStoreError(f"Allele store returned {response.status_code} for {key}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise AlleleStoreError(f"Allele store returned invalid JSON for {key}") from e

        if data is None:
            return None
        if not isinstance(data, dict):
            raise AlleleStoreError(f"Allele store returned a non-object record for {key}")
        return data

    def close(self) -> None:
        """Close the HTTP client."""
        with self._client_lock:
            if self._client:
                self._client.close()
                self._client = None
