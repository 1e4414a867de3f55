"""
Cryptographic primitives for AES-256-GCM encryption of envelope payloads.

This module provides:
- SecureKey: Secure key wrapper with redacted repr and best-effort zeroization
- EncryptedData: AEAD blob with nonce and ciphertext, and its text encoding
- AesGcmCipher: AES-256-GCM seal/open operations
"""

from __future__ import annotations

import base64
import binascii
import secrets
from dataclasses import dataclass
from typing import Optional

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .errors import AuthenticationError, CryptoError, InvalidEnvelopeFormatError

# Cryptographic constants
AES_256_KEY_SIZE: int = 32  # 256 bits
NONCE_SIZE: int = 12  # 96 bits (standard for AES-GCM)
TAG_SIZE: int = 16  # 128 bits (authentication tag)


class SecureKey:
    """
    Key material handed out by the registry for one seal or open call.

    The bytes live in a bytearray so they can be overwritten once the
    wrapper is collected. CPython gives no timing guarantee for that, and
    copies made by as_bytes() are not covered.
    """

    __slots__ = ("_bytes",)

    def __init__(self, key_bytes: bytes | bytearray) -> None:
        if not isinstance(key_bytes, (bytes, bytearray)):
            raise CryptoError("Key must be bytes or bytearray")
        self._bytes = bytearray(key_bytes)

    @classmethod
    def from_hex(cls, key_hex: str) -> SecureKey:
        """
        Decode key material as stored in configuration.

        Raises:
            ValueError: If the text is not valid hex. The message never
                echoes the input.
        """
        try:
            return cls(bytes.fromhex(key_hex))
        except (TypeError, ValueError):
            raise ValueError("Key material is not valid hex") from None

    def as_bytes(self) -> bytes:
        return bytes(self._bytes)

    def __len__(self) -> int:
        return len(self._bytes)

    def __repr__(self) -> str:
        # Keys end up in tracebacks and debugger output through repr().
        return "SecureKey([REDACTED])"

    def __del__(self) -> None:
        if hasattr(self, "_bytes"):
            for i in range(len(self._bytes)):
                self._bytes[i] = 0


@dataclass(frozen=True)
class EncryptedData:
    """
    Encrypted data container with nonce and ciphertext.

    The ciphertext includes the 16-byte authentication tag appended by AESGCM.
    """

    nonce: bytes  # 12 bytes
    ciphertext: bytes  # Ciphertext + 16-byte auth tag

    def to_aead_blob(self) -> bytes:
        """Convert to AEAD blob format: nonce || ciphertext || tag."""
        return self.nonce + self.ciphertext

    @classmethod
    def from_aead_blob(cls, blob: bytes) -> EncryptedData:
        """
        Parse from AEAD blob format: nonce || ciphertext || tag.

        Raises:
            AuthenticationError: If the blob is too small to hold a nonce and
                a tag, which can only mean truncation or corruption.
        """
        min_size = NONCE_SIZE + TAG_SIZE
        if len(blob) < min_size:
            raise AuthenticationError(
                f"AEAD blob too small: expected at least {min_size} bytes, got {len(blob)}"
            )
        return cls(nonce=blob[:NONCE_SIZE], ciphertext=blob[NONCE_SIZE:])

    def to_base64(self) -> str:
        """Encode as URL-safe base64 (never contains the envelope separator)."""
        return base64.urlsafe_b64encode(self.to_aead_blob()).decode("ascii")

    @classmethod
    def from_base64(cls, encoded: str) -> EncryptedData:
        """
        Decode from URL-safe base64 string.

        Raises:
            InvalidEnvelopeFormatError: If the text is not valid base64
            AuthenticationError: If the text is not the canonical encoding of
                its bytes, or the decoded blob is truncated
        """
        try:
            decoded = base64.urlsafe_b64decode(encoded.encode("ascii"))
        except (binascii.Error, UnicodeEncodeError, ValueError):
            raise InvalidEnvelopeFormatError("Envelope payload is not valid base64") from None

        # The decoder drops unused low bits of the last character, so several
        # texts map to one blob. Only the encoding we produce is accepted.
        if base64.urlsafe_b64encode(decoded).decode("ascii") != encoded:
            raise AuthenticationError("Envelope payload is not canonically encoded")

        return cls.from_aead_blob(decoded)


class AesGcmCipher:
    """
    AES-256-GCM authenticated encryption.

    Provides static seal/open operations with optional Additional
    Authenticated Data (AAD) for binding.
    """

    @staticmethod
    def seal(
        key: SecureKey,
        plaintext: bytes,
        aad: Optional[bytes] = None,
    ) -> EncryptedData:
        """
        Encrypt plaintext with AES-256-GCM under a fresh random nonce.

        Args:
            key: 32-byte encryption key
            plaintext: Data to encrypt
            aad: Optional Additional Authenticated Data for binding

        Returns:
            EncryptedData with nonce and ciphertext (includes auth tag)

        Raises:
            CryptoError: If key size is invalid or encryption fails
        """
        if len(key) != AES_256_KEY_SIZE:
            raise CryptoError(
                f"Invalid key size: expected {AES_256_KEY_SIZE}, got {len(key)}"
            )

        nonce = secrets.token_bytes(NONCE_SIZE)
        aesgcm = AESGCM(key.as_bytes())

        try:
            ciphertext = aesgcm.encrypt(nonce, bytes(plaintext), aad)
        except OverflowError:
            raise CryptoError("Encryption error: data too large") from None

        return EncryptedData(nonce=nonce, ciphertext=ciphertext)

    @staticmethod
    def open(
        key: SecureKey,
        encrypted: EncryptedData,
        aad: Optional[bytes] = None,
    ) -> bytes:
        """
        Decrypt and verify ciphertext with AES-256-GCM.

        Args:
            key: 32-byte decryption key
            encrypted: EncryptedData with nonce and ciphertext
            aad: Optional Additional Authenticated Data (must match seal)

        Returns:
            Decrypted plaintext bytes

        Raises:
            CryptoError: If key or nonce size is invalid
            AuthenticationError: If the tag does not verify
        """
        if len(key) != AES_256_KEY_SIZE:
            raise CryptoError(
                f"Invalid key size: expected {AES_256_KEY_SIZE}, got {len(key)}"
            )

        if len(encrypted.nonce) != NONCE_SIZE:
            raise CryptoError(
                f"Invalid nonce size: expected {NONCE_SIZE}, got {len(encrypted.nonce)}"
            )

        aesgcm = AESGCM(key.as_bytes())

        try:
            return aesgcm.decrypt(encrypted.nonce, encrypted.ciphertext, aad)
        except InvalidTag:
            # Generic error to prevent oracle attacks
            raise AuthenticationError("Decryption failed") from None
