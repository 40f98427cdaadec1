"""
Authority alias metadata

Fetches the instance discovery document that lists, for every cloud, the
hostnames serving the same logical authority, and caches it.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import httpx

from tenant_issuer.constants import (
    AZURE_AD_ISSUER_METADATA_URL,
    DEFAULT_HTTP_TIMEOUT,
    DEFAULT_METADATA_CACHE_TTL,
)
from tenant_issuer.errors import ConfigurationError, MetadataFetchError

logger = logging.getLogger(__name__)


@dataclass
class MetadataGroup:
    """One set of mutually aliased hostnames, as published centrally."""
    aliases: List[str] = field(default_factory=list)
    preferred_network: Optional[str] = None
    preferred_cache: Optional[str] = None

    def contains(self, host: str) -> bool:
        host = host.lower()
        return any(alias.lower() == host for alias in self.aliases)


@dataclass
class IssuerMetadata:
    metadata: List[MetadataGroup] = field(default_factory=list)
    tenant_discovery_endpoint: Optional[str] = None
    api_version: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "IssuerMetadata":
        """
        Build from the discovery document:
        {"tenant_discovery_endpoint": ..., "api-version": "1.1",
         "metadata": [{"preferred_network": ..., "preferred_cache": ..., "aliases": [...]}]}
        """
        if not isinstance(data, dict):
            raise ValueError("metadata document must be a JSON object")

        entries = data.get("metadata") or []
        if not isinstance(entries, list):
            raise ValueError("'metadata' must be a list")

        groups = []
        for entry in entries:
            aliases = entry.get("aliases") or []
            if not isinstance(aliases, list):
                raise ValueError("'aliases' must be a list")
            groups.append(MetadataGroup(
                # null or non-string entries are not hostnames
                aliases=[alias for alias in aliases if isinstance(alias, str) and alias],
                preferred_network=entry.get("preferred_network"),
                preferred_cache=entry.get("preferred_cache"),
            ))

        return cls(
            metadata=groups,
            tenant_discovery_endpoint=data.get("tenant_discovery_endpoint"),
            api_version=data.get("api-version"),
        )


class IssuerMetadataManager:
    """
    Fetches the alias metadata document and caches it.
    Default cache: 24 hours, the publication interval of the document.

    Any object exposing get_metadata() -> IssuerMetadata can stand in for
    this class as the registry's metadata source.
    """

    def __init__(
        self,
        metadata_url: str = AZURE_AD_ISSUER_METADATA_URL,
        cache_ttl: int = DEFAULT_METADATA_CACHE_TTL,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
        client: Optional[httpx.Client] = None
    ):
        if not metadata_url:
            raise ConfigurationError("metadata_url is required")
        if cache_ttl <= 0:
            raise ConfigurationError("cache_ttl must be positive")
        if timeout <= 0:
            raise ConfigurationError("timeout must be positive")

        self.metadata_url = metadata_url
        self.cache_ttl = cache_ttl
        self.timeout = timeout
        self._client = client

        # (metadata, timestamp)
        self._cache: Optional[Tuple[IssuerMetadata, float]] = None
        self._lock = threading.Lock()

    def get_metadata(self) -> IssuerMetadata:
        """Return the cached document, fetching it when missing or expired"""
        with self._lock:
            cached = self._cache
        if cached is not None:
            metadata, timestamp = cached
            if time.time() - timestamp < self.cache_ttl:
                logger.debug("Issuer metadata cache hit")
                return metadata

        metadata = self._fetch()
        with self._lock:
            self._cache = (metadata, time.time())
        return metadata

    def _fetch(self) -> IssuerMetadata:
        try:
            if self._client is not None:
                response = self._client.get(self.metadata_url, timeout=self.timeout)
            else:
                with httpx.Client() as client:
                    response = client.get(self.metadata_url, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise MetadataFetchError(
                f"Failed to fetch issuer metadata from '{self.metadata_url}': {e}",
                metadata_url=self.metadata_url
            ) from e

        try:
            metadata = IssuerMetadata.from_dict(data)
        except (ValueError, AttributeError) as e:
            raise MetadataFetchError(
                f"Invalid issuer metadata from '{self.metadata_url}': {e}",
                metadata_url=self.metadata_url
            ) from e

        logger.info(
            "Fetched issuer metadata from %s (%d alias groups)",
            self.metadata_url, len(metadata.metadata)
        )
        return metadata

    def clear_cache(self) -> None:
        with self._lock:
            self._cache = None
