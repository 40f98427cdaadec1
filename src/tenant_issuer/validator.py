"""
Issuer Validator - Core Implementation

Validates the issuer of tokens from multi-tenant authorities whose issuers
are templated by tenant ID and served from several aliased hostnames.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple
from urllib.parse import SplitResult

from tenant_issuer.constants import (
    DEFAULT_REFRESH_INTERVAL,
    FALLBACK_AUTHORITY,
    TENANT_ID_PLACEHOLDER,
    V2_SUFFIX,
)
from tenant_issuer.errors import (
    ConfigurationError,
    InvalidArgumentError,
    IssuerValidationError,
    MetadataFetchError,
    TenantIdNotPresentError,
)
from tenant_issuer.metadata import IssuerMetadataManager
from tenant_issuer.tokens import get_tenant_id
from tenant_issuer.uris import (
    parse_absolute_uri,
    uri_authority,
    uri_local_path,
    uri_segments,
)

logger = logging.getLogger(__name__)


@dataclass
class ValidationParameters:
    """
    Acceptable issuers for a token.

    Templates may contain '{tenantid}', which is replaced with the token's
    tenant ID before matching, e.g. "https://login.microsoftonline.com/{tenantid}/v2.0".
    """
    valid_issuer: Optional[str] = None
    valid_issuers: Optional[List[str]] = None


class IssuerValidator:
    """
    Validates token issuers against issuer templates for one authority.

    An issuer is accepted when it and the tenant-substituted template are both
    served from one of the authority's aliases and both carry the tenant ID
    in their path. Accepts v1, v2 and B2C (tfp) issuer shapes.
    """

    def __init__(self, aliases: Iterable[str]):
        self._aliases = frozenset(alias.lower() for alias in aliases if alias)

    @property
    def aliases(self) -> frozenset:
        return self._aliases

    def validate(self, actual_issuer: str, token: Any, validation_parameters: ValidationParameters) -> str:
        """
        Check the token's issuer against the acceptable issuer templates.
        Returns the issuer if valid, raises IssuerValidationError otherwise.

        valid_issuers are tried first, in order, then valid_issuer.
        """
        if not actual_issuer:
            raise InvalidArgumentError("actual_issuer is required")
        if token is None:
            raise InvalidArgumentError("token is required")
        if validation_parameters is None:
            raise InvalidArgumentError("validation_parameters is required")

        tenant_id = get_tenant_id(token)
        if not tenant_id or not tenant_id.strip():
            logger.warning("Tenant ID claim not present in token issued by '%s'", actual_issuer)
            raise TenantIdNotPresentError(
                "Tenant ID claim not present in the token", issuer=actual_issuer
            )

        for template in validation_parameters.valid_issuers or []:
            if self.is_valid_issuer(template, tenant_id, actual_issuer):
                return actual_issuer

        if self.is_valid_issuer(validation_parameters.valid_issuer, tenant_id, actual_issuer):
            return actual_issuer

        logger.warning("Issuer '%s' does not match any valid issuer", actual_issuer)
        raise IssuerValidationError(
            f"Issuer '{actual_issuer}' does not match any of the valid issuers",
            issuer=actual_issuer
        )

    def is_valid_issuer(self, template: Optional[str], tenant_id: str, actual_issuer: str) -> bool:
        """True if actual_issuer matches the template for this tenant. Never raises."""
        if not template:
            return False

        template_uri = parse_absolute_uri(template.replace(TENANT_ID_PLACEHOLDER, tenant_id))
        issuer_uri = parse_absolute_uri(actual_issuer)
        if template_uri is None or issuer_uri is None:
            return False

        matched = (
            uri_authority(template_uri) in self._aliases
            and uri_authority(issuer_uri) in self._aliases
            and _has_tenant_in_path(tenant_id, template_uri)
            and _has_tenant_in_path(tenant_id, issuer_uri)
        )
        if not matched:
            logger.debug("Issuer '%s' does not match template '%s'", actual_issuer, template)
        return matched


def _has_tenant_in_path(tenant_id: str, uri: SplitResult) -> bool:
    # {tid}, {tid}/v2.0 or tfp/{tid}/...
    local_path = uri_local_path(uri).strip("/")
    if local_path == tenant_id or local_path == f"{tenant_id}/{V2_SUFFIX}":
        return True
    segments = uri_segments(uri)
    return len(segments) > 2 and segments[2].rstrip("/") == tenant_id


class IssuerValidatorRegistry:
    """
    One IssuerValidator per authority host, shared by every validation in
    the process that owns the registry.

    Aliases are resolved from the metadata source on first use of a host and
    again once the entry is older than refresh_interval.
    """

    def __init__(
        self,
        metadata_source: Optional[Any] = None,
        refresh_interval: int = DEFAULT_REFRESH_INTERVAL,
        fallback_authority: str = FALLBACK_AUTHORITY
    ):
        if refresh_interval <= 0:
            raise ConfigurationError("refresh_interval must be positive")
        fallback_uri = parse_absolute_uri(fallback_authority)
        if fallback_uri is None:
            raise ConfigurationError(f"fallback_authority '{fallback_authority}' is not an absolute URI")

        self.metadata_source = metadata_source if metadata_source is not None else IssuerMetadataManager()
        self.refresh_interval = refresh_interval
        self._fallback_host = uri_authority(fallback_uri)

        # Cache: {host: (validator, timestamp)}
        self._validators: Dict[str, Tuple[IssuerValidator, float]] = {}
        self._lock = threading.Lock()

    def get_validator(self, authority: str) -> IssuerValidator:
        """
        Get the validator for an authority, e.g. https://login.microsoftonline.com/common.
        A malformed authority falls back to the default authority host.
        """
        if not authority:
            raise InvalidArgumentError("authority is required")

        host = self._authority_host(authority)

        with self._lock:
            cached = self._validators.get(host)
        if cached is not None:
            validator, timestamp = cached
            if time.time() - timestamp < self.refresh_interval:
                logger.debug("Issuer validator cache hit for %s", host)
                return validator

        # Fetched outside the lock; a concurrent miss on the same host may
        # build an equivalent validator, last write wins.
        try:
            aliases = self._resolve_aliases(host)
        except MetadataFetchError as e:
            if cached is None:
                raise
            # Keep serving the stale entry; its timestamp is left as is so the next call retries
            logger.warning("Refreshing issuer aliases for %s failed, keeping cached validator: %s", host, e)
            return cached[0]

        validator = IssuerValidator(aliases)
        with self._lock:
            self._validators[host] = (validator, time.time())

        logger.info("Built issuer validator for %s with %d aliases", host, len(validator.aliases))
        return validator

    def validate(
        self,
        authority: str,
        actual_issuer: str,
        token: Any,
        validation_parameters: ValidationParameters
    ) -> str:
        """Shortcut for get_validator(authority).validate(...)"""
        return self.get_validator(authority).validate(actual_issuer, token, validation_parameters)

    def clear(self) -> None:
        with self._lock:
            self._validators.clear()

    def _authority_host(self, authority: str) -> str:
        uri = parse_absolute_uri(authority)
        if uri is None:
            logger.warning(
                "Authority '%s' is not an absolute URI, using %s", authority, self._fallback_host
            )
            return self._fallback_host
        return uri_authority(uri)

    def _resolve_aliases(self, host: str) -> List[str]:
        metadata = self.metadata_source.get_metadata()

        aliases: List[str] = []
        seen = set()
        for group in metadata.metadata:
            if not group.contains(host):
                continue
            for alias in group.aliases:
                if alias.lower() not in seen:
                    seen.add(alias.lower())
                    aliases.append(alias)

        # Custom domains (e.g. B2C) are not always published yet: the host aliases itself
        if host not in seen:
            aliases.append(host)
        return aliases
