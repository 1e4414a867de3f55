"""
Symmetric Key Encryption Library

Symmetric encryption of byte strings with key rotation: keys are organised in
named key groups, each group has one active key for new encryptions, and every
key still present in the group can decrypt what it encrypted.

Quick Start
-----------
```python
from symmetric_encryption import SymmetricKeyEncryption

keys = {
    "user-emails": {
        "1": "0f1e2d3c4b5a69788796a5b4c3d2e1f00f1e2d3c4b5a69788796a5b4c3d2e1f0",
        "2": "a0b1c2d3e4f5061728394a5b6c7d8e9fa0b1c2d3e4f5061728394a5b6c7d8e9f",
    },
}
active_key_ids = {"user-emails": "2"}

cipher = SymmetricKeyEncryption.from_config("user-emails", keys, active_key_ids)

envelope = cipher.encrypt(b"alice@example.com")   # "$2$<payload>"
plaintext = cipher.decrypt(envelope)

# Lazy rotation: refresh data encrypted with an older key
if cipher.needs_re_encrypt(envelope):
    envelope = cipher.encrypt(cipher.decrypt(envelope))
```

Key Features
------------
- **AES-256-GCM**: Authenticated encryption from the `cryptography` package
- **Key Groups**: One cipher per use-case, keys never cross groups
- **Key Rotation**: Switch the active key id, old keys keep decrypting
- **Text Envelopes**: `$<key id>$<payload>`, safe for text columns
- **Memory Security**: Redacted key repr, best-effort key zeroization
"""

import logging

__version__ = "0.1.0"

# =============================================================================
# Crypto Exports
# =============================================================================

from .crypto import (
    AES_256_KEY_SIZE,
    NONCE_SIZE,
    TAG_SIZE,
    AesGcmCipher,
    EncryptedData,
    SecureKey,
)

# =============================================================================
# Error Exports
# =============================================================================

from .errors import (
    AuthenticationError,
    ConfigError,
    CryptoError,
    EncryptionError,
    InvalidEnvelopeFormatError,
    UnknownKeyIdError,
)

# =============================================================================
# Envelope Exports (Primary API)
# =============================================================================

from .cipher import SymmetricKeyEncryption
from .config import load_registry
from .envelope import KEY_CIPHERTEXT_SEPARATOR, Envelope
from .registry import KeyRegistry

logging.getLogger(__name__).addHandler(logging.NullHandler())

# =============================================================================
# Public API
# =============================================================================

__all__ = [
    # Version
    "__version__",
    # Crypto
    "AES_256_KEY_SIZE",
    "NONCE_SIZE",
    "TAG_SIZE",
    "AesGcmCipher",
    "EncryptedData",
    "SecureKey",
    # Errors
    "EncryptionError",
    "UnknownKeyIdError",
    "InvalidEnvelopeFormatError",
    "CryptoError",
    "AuthenticationError",
    "ConfigError",
    # Envelope (Primary API)
    "SymmetricKeyEncryption",
    "KeyRegistry",
    "Envelope",
    "KEY_CIPHERTEXT_SEPARATOR",
    "load_registry",
]
