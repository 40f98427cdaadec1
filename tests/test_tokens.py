"""
Tests for SecurityToken and tenant ID extraction.
"""

import pytest
from jose import jwt

from conftest import OTHER_TENANT_ID, TENANT_ID
from tenant_issuer import (
    SecurityToken,
    TokenValidationError,
    get_tenant_id,
    get_tenant_id_from_issuer,
)


def test_tid_claim_is_used():
    token = SecurityToken(
        issuer="https://login.example.com/whatever/v2.0",
        claims={"tid": TENANT_ID},
    )
    assert get_tenant_id(token) == TENANT_ID


def test_tid_claim_wins_over_issuer():
    token = SecurityToken(
        issuer=f"https://login.example.com/{OTHER_TENANT_ID}/v2.0",
        claims={"tid": TENANT_ID},
    )
    assert get_tenant_id(token) == TENANT_ID


def test_non_string_tid_claim_is_converted():
    token = SecurityToken(issuer="https://login.example.com/x/v2.0", claims={"tid": 42})
    assert get_tenant_id(token) == "42"


def test_null_tid_claim_falls_back_to_issuer():
    token = SecurityToken(
        issuer=f"https://login.example.com/{OTHER_TENANT_ID}/v2.0",
        claims={"tid": None},
    )
    assert get_tenant_id(token) == OTHER_TENANT_ID


def test_unknown_token_type():
    assert get_tenant_id({"tid": TENANT_ID}) == ""
    assert get_tenant_id(None) == ""


@pytest.mark.parametrize("issuer,expected", [
    (f"https://login.example.com/{OTHER_TENANT_ID}/v2.0", OTHER_TENANT_ID),
    (f"https://login.example.com/{OTHER_TENANT_ID}/v2.0/", OTHER_TENANT_ID),
    (f"https://login.example.com/tfp/{TENANT_ID}/b2c_1_signin/v2.0/", TENANT_ID),
    (f"https://login.example.com/{TENANT_ID}/", ""),
    (f"https://login.example.com/other/{TENANT_ID}/b2c_1_signin/v2.0/", ""),
    (f"https://login.example.com/tfp/{TENANT_ID}/b2c_1_signin/v2.0/extra", ""),
    ("https://login.example.com", ""),
    ("not a uri", ""),
    ("", ""),
    (None, ""),
])
def test_tenant_id_from_issuer(issuer, expected):
    assert get_tenant_id_from_issuer(issuer) == expected


def test_from_jwt_reads_unverified_claims():
    issuer = f"https://login.example.com/{TENANT_ID}/v2.0"
    encoded = jwt.encode({"iss": issuer, "tid": TENANT_ID, "sub": "user"}, "secret", algorithm="HS256")

    token = SecurityToken.from_jwt(encoded)

    assert token.issuer == issuer
    assert token.get_claim("sub") == "user"
    assert get_tenant_id(token) == TENANT_ID


def test_from_jwt_without_issuer():
    encoded = jwt.encode({"sub": "user"}, "secret", algorithm="HS256")
    assert SecurityToken.from_jwt(encoded).issuer == ""


def test_from_jwt_rejects_garbage():
    with pytest.raises(TokenValidationError):
        SecurityToken.from_jwt("not.a.jwt")
