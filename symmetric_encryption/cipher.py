"""
Symmetric key encryption bound to one key group.

This module provides:
- SymmetricKeyEncryption: encrypt / decrypt / needs_re_encrypt over envelopes

Rotation strategy:
1. Add the new key to the group and redeploy (old key still active)
2. Switch the group's active key id to the new key
3. Lazy rotation: when needs_re_encrypt() reports an old key id, the caller
   decrypts, encrypts again and stores the new envelope
4. Remove the old key once no stored envelope references it
"""

from __future__ import annotations

import logging
from typing import Mapping

from .crypto import AesGcmCipher, SecureKey
from .envelope import Envelope, check_key_id
from .errors import AuthenticationError, UnknownKeyIdError
from .registry import KeyRegistry

logger = logging.getLogger(__name__)


class SymmetricKeyEncryption:
    """
    Envelope encryption with key rotation for a single key group.

    New data is always encrypted with the group's active key; any key still
    present in the group can decrypt. Instances hold no mutable state and
    are safe to share between threads.
    """

    def __init__(self, key_group: str, registry: KeyRegistry) -> None:
        """
        Initialize the cipher.

        Args:
            key_group: Key group this instance encrypts and decrypts for
            registry: Key registry holding the group's keys
        """
        self._key_group = key_group
        self._registry = registry

    @classmethod
    def from_config(
        cls,
        key_group: str,
        keys: Mapping[str, Mapping[str, str]],
        active_key_ids: Mapping[str, str],
    ) -> SymmetricKeyEncryption:
        """
        Build a cipher straight from configuration mappings.

        Args:
            key_group: Key group to bind to
            keys: key group -> key id -> hex-encoded key
            active_key_ids: key group -> active key id
        """
        return cls(key_group, KeyRegistry(keys, active_key_ids))

    @property
    def key_group(self) -> str:
        """Key group this instance is bound to."""
        return self._key_group

    @property
    def registry(self) -> KeyRegistry:
        """Key registry backing this instance."""
        return self._registry

    @property
    def active_key_id(self) -> str:
        """Key id new encryptions are made with."""
        return self._registry.get_active_key_id(self._key_group)

    def encrypt(self, data: bytes) -> str:
        """
        Encrypt data with the active key of the bound group.

        Args:
            data: Plaintext bytes (any content, may be empty)

        Returns:
            Envelope text "$<key id>$<payload>"

        Raises:
            TypeError: If data is not bytes
            ConfigError: If the group has no active key id
            UnknownKeyIdError: If the active key id has no key
            InvalidEnvelopeFormatError: If the active key id cannot be written
                into an envelope (empty, or contains the separator)
        """
        if not isinstance(data, (bytes, bytearray)):
            raise TypeError(f"Data must be bytes, got {type(data).__name__}")

        key_id = self.active_key_id
        check_key_id(key_id)
        key = self._get_key(key_id)
        encrypted = AesGcmCipher.seal(key, bytes(data), self._aad(key_id))

        logger.debug("Encrypted data with key %r in key group %r", key_id, self._key_group)
        return Envelope.seal(key_id, encrypted).to_text()

    def decrypt(self, data: str) -> bytes:
        """
        Decrypt an envelope with whichever key of the group produced it.

        Args:
            data: Envelope text

        Returns:
            Plaintext bytes

        Raises:
            InvalidEnvelopeFormatError: If data is not an envelope
            UnknownKeyIdError: If the envelope's key is not in the group
            AuthenticationError: If the payload was tampered with or corrupted
        """
        envelope = Envelope.from_text(data)
        key = self._get_key(envelope.key_id)

        try:
            encrypted = envelope.encrypted_data()
            plaintext = AesGcmCipher.open(key, encrypted, self._aad(envelope.key_id))
        except AuthenticationError:
            logger.warning(
                "Authentication failed for data encrypted with key %r in key group %r",
                envelope.key_id,
                self._key_group,
            )
            raise

        logger.debug("Decrypted data with key %r in key group %r", envelope.key_id, self._key_group)
        return plaintext

    def needs_re_encrypt(self, data: str) -> bool:
        """
        Check whether an envelope was made with a key other than the active one.

        Raises:
            InvalidEnvelopeFormatError: If data is not an envelope
        """
        return self.key_id_of(data) != self.active_key_id

    def key_id_of(self, data: str) -> str:
        """
        Get the key id an envelope was encrypted with.

        Raises:
            InvalidEnvelopeFormatError: If data is not an envelope
        """
        return Envelope.from_text(data).key_id

    def _get_key(self, key_id: str) -> SecureKey:
        """Internal: look up a key in the bound group."""
        try:
            return self._registry.get_key(self._key_group, key_id)
        except UnknownKeyIdError:
            logger.warning("Unknown key %r in key group %r", key_id, self._key_group)
            raise

    @staticmethod
    def _aad(key_id: str) -> bytes:
        """Internal: associated data binding the key id to the ciphertext."""
        return key_id.encode("utf-8")

    def __repr__(self) -> str:
        return f"SymmetricKeyEncryption(key_group={self._key_group!r})"
