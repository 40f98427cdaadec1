"""
Shared fixtures for the issuer validator tests.
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from tenant_issuer import IssuerMetadata, IssuerValidatorRegistry, MetadataGroup


TENANT_ID = "11111111-1111-1111-1111-111111111111"
OTHER_TENANT_ID = "22222222-2222-2222-2222-222222222222"

AUTHORITY = "https://login.example.com/common"


class FakeMetadataSource:
    """Metadata source that counts fetches"""

    def __init__(self, groups=None, error=None):
        self.groups = groups if groups is not None else []
        self.error = error
        self.calls = 0

    def get_metadata(self) -> IssuerMetadata:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return IssuerMetadata(metadata=self.groups)


@pytest.fixture
def metadata_source():
    return FakeMetadataSource(groups=[
        MetadataGroup(
            aliases=["login.example.com", "login.alt-example.com"],
            preferred_network="login.example.com",
            preferred_cache="login.alt-example.com",
        ),
        MetadataGroup(aliases=["login.sovereign.example.cn"]),
    ])


@pytest.fixture
def registry(metadata_source):
    return IssuerValidatorRegistry(metadata_source=metadata_source)
