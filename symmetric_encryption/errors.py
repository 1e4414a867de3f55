"""
Exception classes for symmetric key encryption.

Every failure raised by this package derives from EncryptionError so callers
can catch the whole family, while the subclasses let them tell apart
"needs provisioning" (UnknownKeyIdError), "corrupted data"
(InvalidEnvelopeFormatError) and "tampering" (AuthenticationError).

Messages never contain key material or plaintext.
"""

from __future__ import annotations


class EncryptionError(Exception):
    """Base exception for all symmetric encryption operations."""

    pass


class UnknownKeyIdError(EncryptionError, LookupError):
    """Key id not present in the registry for the bound key group."""

    def __init__(self, key_group: str, key_id: str) -> None:
        super().__init__(f"Unknown encryption key id {key_id!r} in key group {key_group!r}")
        self.key_group = key_group
        self.key_id = key_id


class InvalidEnvelopeFormatError(EncryptionError, ValueError):
    """Envelope text is not in the "$<keyId>$<payload>" format."""

    pass


class CryptoError(EncryptionError):
    """Cryptographic primitive was misused (invalid key or nonce size)."""

    pass


class AuthenticationError(CryptoError):
    """Integrity verification failed: tampered data, wrong key or corruption."""

    pass


class ConfigError(EncryptionError):
    """Configuration error (missing active key id, undecodable key hex)."""

    pass
