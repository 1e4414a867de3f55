"""
Pytest configuration and fixtures for symmetric key encryption tests.
"""

from __future__ import annotations

import secrets
from typing import Dict

import pytest

from symmetric_encryption import KeyRegistry, SymmetricKeyEncryption

KEY_GROUP = "user-emails"
OTHER_KEY_GROUP = "session-tokens"


@pytest.fixture
def keys() -> Dict[str, Dict[str, str]]:
    """Two keys in the main group, one key only present in another group."""
    return {
        KEY_GROUP: {
            "1": secrets.token_hex(32),
            "2": secrets.token_hex(32),
        },
        OTHER_KEY_GROUP: {
            "b-only": secrets.token_hex(32),
        },
    }


@pytest.fixture
def active_key_ids() -> Dict[str, str]:
    return {KEY_GROUP: "2", OTHER_KEY_GROUP: "b-only"}


@pytest.fixture
def registry(keys, active_key_ids) -> KeyRegistry:
    """Create a registry with key "2" active in the main group."""
    return KeyRegistry(keys, active_key_ids)


@pytest.fixture
def cipher(registry: KeyRegistry) -> SymmetricKeyEncryption:
    """Create a cipher bound to the main key group."""
    return SymmetricKeyEncryption(KEY_GROUP, registry)
