"""
Tenant Issuer Validator

Validates token issuers for multi-tenant identity providers with
tenant-templated issuers and aliased authority hostnames.
"""

from tenant_issuer.validator import IssuerValidator, IssuerValidatorRegistry, ValidationParameters
from tenant_issuer.metadata import IssuerMetadata, IssuerMetadataManager, MetadataGroup
from tenant_issuer.tokens import SecurityToken, get_tenant_id, get_tenant_id_from_issuer
from tenant_issuer.errors import (
    IssuerError,
    InvalidArgumentError,
    ConfigurationError,
    IssuerValidationError,
    TenantIdNotPresentError,
    MetadataFetchError,
    TokenValidationError
)

__version__ = "0.1.0"

__all__ = [
    "IssuerValidator",
    "IssuerValidatorRegistry",
    "ValidationParameters",
    "IssuerMetadata",
    "IssuerMetadataManager",
    "MetadataGroup",
    "SecurityToken",
    "get_tenant_id",
    "get_tenant_id_from_issuer",
    "IssuerError",
    "InvalidArgumentError",
    "ConfigurationError",
    "IssuerValidationError",
    "TenantIdNotPresentError",
    "MetadataFetchError",
    "TokenValidationError"
]
