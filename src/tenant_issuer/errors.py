"""
Issuer validation error classes
"""


class IssuerError(Exception):
    """Base exception for all issuer validation errors"""
    pass


class InvalidArgumentError(IssuerError, ValueError):
    """
    Raised when a caller passes a missing or empty required argument
    (authority, issuer, token or validation parameters)
    """
    pass


class ConfigurationError(IssuerError):
    """
    Raised when a validator, registry or metadata manager is constructed
    with invalid settings
    """
    pass


class IssuerValidationError(IssuerError):
    """
    Raised when the token issuer does not match any acceptable issuer template
    """
    def __init__(self, message: str, issuer: str = None):
        super().__init__(message)
        self.issuer = issuer


class TenantIdNotPresentError(IssuerValidationError):
    """
    Raised when no tenant ID can be found in the token, neither in the
    'tid' claim nor in the shape of the issuer
    """
    pass


class MetadataFetchError(IssuerError):
    """
    Raised when the authority alias metadata cannot be fetched or parsed
    """
    def __init__(self, message: str, metadata_url: str = None):
        super().__init__(message)
        self.metadata_url = metadata_url


class TokenValidationError(IssuerError):
    """
    Raised when an encoded token cannot be decoded into claims
    """
    pass
