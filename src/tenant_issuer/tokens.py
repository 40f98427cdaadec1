"""
Token model and tenant ID extraction.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from jose import jwt
from jose.exceptions import JWTError

from tenant_issuer.constants import ISS_CLAIM, TFP_MARKER, TID_CLAIM
from tenant_issuer.errors import TokenValidationError
from tenant_issuer.uris import parse_absolute_uri, uri_segments

logger = logging.getLogger(__name__)


@dataclass
class SecurityToken:
    """
    Read-only view of a received token: its issuer and its claims.
    Signature and lifetime are checked elsewhere.
    """
    issuer: str
    claims: Dict[str, Any] = field(default_factory=dict)

    def get_claim(self, name: str) -> Optional[Any]:
        return self.claims.get(name)

    @classmethod
    def from_jwt(cls, token: str) -> "SecurityToken":
        """Read the claims of an encoded JWT without verifying it"""
        try:
            claims = jwt.get_unverified_claims(token)
        except JWTError as e:
            raise TokenValidationError(f"Failed to decode token: {e}") from e

        issuer = claims.get(ISS_CLAIM) or ""
        return cls(issuer=str(issuer), claims=claims)


def get_tenant_id(token: Any) -> str:
    """
    Tenant ID of a token: the 'tid' claim when present, otherwise whatever the
    issuer shape gives. Returns "" when neither works.

    Only SecurityToken instances are understood.
    """
    if not isinstance(token, SecurityToken):
        return ""

    tenant_id = token.get_claim(TID_CLAIM)
    if tenant_id is not None:
        return str(tenant_id)

    # B2C tokens don't carry 'tid' by default
    return get_tenant_id_from_issuer(token.issuer)


def get_tenant_id_from_issuer(issuer: Optional[str]) -> str:
    """
    The issuer carries the tenant ID in its path. Known shapes:
    - {domain}/{tid}/v2.0
    - {domain}/{tid}/v2.0/
    - {domain}/tfp/{tid}/{userFlow}/v2.0/
    """
    uri = parse_absolute_uri(issuer)
    if uri is None:
        return ""

    segments = uri_segments(uri)

    if len(segments) == 3:
        return segments[1].rstrip("/")

    if len(segments) == 5 and segments[1].rstrip("/") == TFP_MARKER:
        return segments[2].rstrip("/")

    logger.debug("No tenant ID in issuer path (%d segments)", len(segments))
    return ""
