"""
Envelope wire format.

An envelope binds a key id to an encrypted payload in a single text value
that can be stored in a plain text column:

    $<key id>$<payload>

The leading field is always empty. The payload is the URL-safe base64
encoding of the AEAD blob (nonce || ciphertext || tag), so it never
contains the "$" separator.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .crypto import EncryptedData
from .errors import InvalidEnvelopeFormatError

KEY_CIPHERTEXT_SEPARATOR: str = "$"

_PAYLOAD_RE = re.compile(r"[A-Za-z0-9_-]+={0,2}")


@dataclass(frozen=True)
class Envelope:
    """Parsed envelope: key id and the still-encoded payload."""

    key_id: str
    payload: str

    @classmethod
    def seal(cls, key_id: str, encrypted: EncryptedData) -> Envelope:
        """Build an envelope for freshly encrypted data."""
        return cls(key_id=key_id, payload=encrypted.to_base64())

    @classmethod
    def from_text(cls, text: str) -> Envelope:
        """
        Parse envelope text.

        Only the first two separators delimit fields; the payload is then
        validated against the base64 alphabet, so a "$" anywhere after the
        key id is still a format error.

        Raises:
            InvalidEnvelopeFormatError: If the text is not an envelope
        """
        if not isinstance(text, str):
            raise InvalidEnvelopeFormatError(
                f"Envelope must be str, got {type(text).__name__}"
            )

        parts = text.split(KEY_CIPHERTEXT_SEPARATOR, 2)
        if len(parts) != 3:
            raise InvalidEnvelopeFormatError(
                "Envelope must have an empty leading field, a key id and a payload"
            )

        marker, key_id, payload = parts
        if marker:
            raise InvalidEnvelopeFormatError("Envelope must start with the separator")
        check_key_id(key_id)
        if not _PAYLOAD_RE.fullmatch(payload):
            raise InvalidEnvelopeFormatError("Envelope payload is not valid base64")

        return cls(key_id=key_id, payload=payload)

    def encrypted_data(self) -> EncryptedData:
        """
        Decode the payload into an AEAD blob.

        Raises:
            InvalidEnvelopeFormatError: If the payload padding is invalid
            AuthenticationError: If the payload is not canonically encoded
                or the blob is truncated
        """
        return EncryptedData.from_base64(self.payload)

    def to_text(self) -> str:
        """
        Serialize to "$<key id>$<payload>".

        Raises:
            InvalidEnvelopeFormatError: If the key id is empty or contains
                the separator
        """
        check_key_id(self.key_id)
        return KEY_CIPHERTEXT_SEPARATOR + self.key_id + KEY_CIPHERTEXT_SEPARATOR + self.payload


def check_key_id(key_id: str) -> None:
    """
    Make sure a key id can be written into and read back from an envelope.

    Raises:
        InvalidEnvelopeFormatError: If the key id is empty or contains the separator
    """
    if not key_id:
        raise InvalidEnvelopeFormatError("Envelope key id must not be empty")
    if KEY_CIPHERTEXT_SEPARATOR in key_id:
        raise InvalidEnvelopeFormatError(
            f"Envelope key id must not contain {KEY_CIPHERTEXT_SEPARATOR!r}"
        )
