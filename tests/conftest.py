"""Pytest configuration and shared fixtures."""

import pytest

from rolefit.core.rbac.catalog import RoleCatalog
from rolefit.core.rbac.matcher import WildcardMatcher

from tests.factories import create_role


@pytest.fixture
def matcher():
    """A fresh wildcard matcher with an empty cache."""
    return WildcardMatcher()


@pytest.fixture
def sample_roles():
    """A small catalog shaped like a cloud provider's built-in roles."""
    return [
        create_role(
            "Owner",
            role_id="owner",
            actions=["*"],
        ),
        create_role(
            "Contributor",
            role_id="contributor",
            actions=["*"],
            not_actions=[
                "Provider.Authorization/*/Delete",
                "Provider.Authorization/*/Write",
            ],
        ),
        create_role(
            "Reader",
            role_id="reader",
            actions=["*/read"],
        ),
        create_role(
            "Storage Account Contributor",
            role_id="storage-contributor",
            actions=[
                "Provider.Storage/storageAccounts/*",
                "Provider.Insights/alertRules/*",
            ],
        ),
        create_role(
            "Storage Blob Data Reader",
            role_id="blob-reader",
            actions=["Provider.Storage/storageAccounts/blobServices/containers/read"],
            data_actions=[
                "Provider.Storage/storageAccounts/blobServices/containers/blobs/read"
            ],
        ),
        create_role(
            "Storage Account Key Operator",
            role_id="key-operator",
            actions=[
                "Provider.Storage/storageAccounts/listkeys/action",
                "Provider.Storage/storageAccounts/regeneratekey/action",
            ],
        ),
    ]


@pytest.fixture
def sample_config():
    """Sample configuration dictionary."""
    return {
        "directory": {
            "progress_interval": 500,
            "merge_provider_operations": True,
        },
        "search": {
            "default_limit": 25,
            "max_results": 10,
        },
        "privileged_roles": ["Owner", "Contributor"],
        "logging": {
            "level": "DEBUG",
            "log_dir": "/tmp/rolefit-logs",
        },
    }


@pytest.fixture
def sample_catalog(sample_roles):
    return RoleCatalog(sample_roles, version="test")
