"""
Well-known values shared by the issuer validator modules.
"""

# Instance discovery document listing the alias groups of every Azure AD cloud
AZURE_AD_ISSUER_METADATA_URL = (
    "https://login.microsoftonline.com/common/discovery/instance"
    "?authorization_endpoint=https://login.microsoftonline.com/common/oauth2/v2.0/authorize"
    "&api-version=1.1"
)

# Used when the configured authority is not an absolute URI
FALLBACK_AUTHORITY = "https://login.microsoftonline.com/"

TENANT_ID_PLACEHOLDER = "{tenantid}"

# Claim names
TID_CLAIM = "tid"
ISS_CLAIM = "iss"

# Policy-framework marker in B2C issuers: {domain}/tfp/{tid}/{userFlow}/v2.0/
TFP_MARKER = "tfp"

V2_SUFFIX = "v2.0"

# The discovery document is refreshed once a day
DEFAULT_METADATA_CACHE_TTL = 24 * 60 * 60
DEFAULT_REFRESH_INTERVAL = 24 * 60 * 60

DEFAULT_HTTP_TIMEOUT = 10.0
