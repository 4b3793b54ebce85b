"""
NostrSigner: BIP-340 signing, ECDH and sealed messages for a Nostr identity.

Provides:
- Schnorr signing and static verification (bytes or hex)
- NIP-01 event creation (text notes, metadata)
- ECDH shared secret against an x-only counterparty key
- Versioned encrypt/decrypt on top of the shared secret

Usage:
    signer = NostrSigner.from_master_key(master_key)
    event = signer.create_text_note("hello")
    assert event.verify()

    payload = signer.encrypt(bob_pubkey, "secret")
    bob.decrypt(signer.public_key, payload)  # "secret"
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import json
import logging
import os
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Iterable

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import ChaCha20Poly1305

from wallet_core.core.errors import (
    AuthenticationFailed,
    InvalidFormat,
    InvalidLength,
    KeyMaterialZeroized,
    UnsupportedVersion,
)
from wallet_core.core.models import (
    KIND_METADATA,
    KIND_TEXT_NOTE,
    IdentityProfile,
    NostrEvent,
)
from wallet_core.crypto import bech32, schnorr
from wallet_core.crypto.secp256k1 import (
    bytes_from_int,
    is_infinity,
    lift_x_bytes,
    scalar_from_private_key,
)
from wallet_core.identity.mobi import Mobi

if TYPE_CHECKING:
    from wallet_core.core.master_key import MasterKey

logger = logging.getLogger("wallet_core.signer")

KEY_LENGTH = 32

# ==============================================================================
# Sealed message envelope
# ==============================================================================

SEALED_VERSION = 0x02
NONCE_LENGTH = 12
TAG_LENGTH = 16
MIN_SEALED_LENGTH = 1 + NONCE_LENGTH + TAG_LENGTH


@dataclass(frozen=True)
class SealedMessage:
    """
    Wire form: version(1) || nonce(12) || ciphertext || tag(16), base64 encoded.

    The version byte is also the AEAD associated data.
    """
    version: int
    nonce: bytes
    ciphertext: bytes
    tag: bytes

    def to_bytes(self) -> bytes:
        return bytes([self.version]) + self.nonce + self.ciphertext + self.tag

    def to_base64(self) -> str:
        return base64.b64encode(self.to_bytes()).decode("ascii")

    @classmethod
    def from_base64(cls, payload: str) -> SealedMessage:
        """
        Parse a base64 payload.

        Raises:
            InvalidFormat:      if the payload is not base64
            InvalidLength:      if it is shorter than version + nonce + tag
            UnsupportedVersion: if the version byte is not 0x02
        """
        try:
            data = base64.b64decode(payload, validate=True)
        except (ValueError, binascii.Error) as e:
            raise InvalidFormat("Sealed message is not valid base64") from e
        if len(data) < MIN_SEALED_LENGTH:
            raise InvalidLength("sealed message", MIN_SEALED_LENGTH, len(data))
        if data[0] != SEALED_VERSION:
            raise UnsupportedVersion(data[0])
        return cls(
            version=data[0],
            nonce=data[1:1 + NONCE_LENGTH],
            ciphertext=data[1 + NONCE_LENGTH:-TAG_LENGTH],
            tag=data[-TAG_LENGTH:],
        )


def _key_bytes(value: bytes | str, what: str) -> bytes:
    """Accept a 32-byte key as raw bytes or 64 hex characters."""
    if isinstance(value, str):
        return schnorr.hex_to_bytes(value, what, KEY_LENGTH)
    if len(value) != KEY_LENGTH:
        raise InvalidLength(what, KEY_LENGTH, len(value))
    return bytes(value)


# ==============================================================================
# NostrSigner
# ==============================================================================


class NostrSigner:
    """Schnorr identity built from a 32-byte secp256k1 private key."""

    def __init__(self, private_key: bytes) -> None:
        scalar_from_private_key(private_key)
        self._private_key = bytearray(private_key)
        self._public_key = schnorr.public_key_of(bytes(private_key))
        self._zeroized = False

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_master_key(cls, master_key: MasterKey) -> NostrSigner:
        return cls(master_key.nostr_private_key)

    @classmethod
    def from_private_key(cls, private_key: bytes) -> NostrSigner:
        """
        Raises:
            InvalidLength: if not 32 bytes
            ValueError:    if the scalar is 0 or >= N
        """
        return cls(bytes(private_key))

    @classmethod
    def from_private_key_hex(cls, private_key_hex: str) -> NostrSigner:
        return cls(schnorr.hex_to_bytes(private_key_hex, "private key", KEY_LENGTH))

    @classmethod
    def from_nsec(cls, nsec: str) -> NostrSigner:
        """
        Raises:
            InvalidFormat: on a bad checksum or non-nsec HRP
        """
        return cls(bech32.decode_nsec(nsec))

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    def _secret(self) -> bytes:
        if self._zeroized:
            logger.warning("Private key requested from a zeroized signer")
            raise KeyMaterialZeroized("Signer has been zeroized")
        return bytes(self._private_key)

    @property
    def public_key(self) -> bytes:
        return self._public_key

    @property
    def public_key_hex(self) -> str:
        return self._public_key.hex()

    @property
    def private_key(self) -> bytes:
        return self._secret()

    @property
    def private_key_hex(self) -> str:
        return self._secret().hex()

    @property
    def npub(self) -> str:
        return bech32.encode_npub(self._public_key)

    @property
    def nsec(self) -> str:
        return bech32.encode_nsec(self._secret())

    @property
    def mobi(self) -> Mobi:
        return Mobi.from_bytes(self._public_key)

    def identity_profile(self) -> IdentityProfile:
        mobi = self.mobi
        return IdentityProfile(
            npub=self.npub,
            public_key_hex=self.public_key_hex,
            mobi=mobi.display,
            mobi_formatted=mobi.format_display(),
            mobi_full=mobi.full,
            fingerprint=self.public_key_hex[:8],
        )

    # ------------------------------------------------------------------
    # Signing
    # ------------------------------------------------------------------

    def sign(self, message_hash: bytes) -> bytes:
        """
        BIP-340 signature over a 32-byte hash with fresh aux randomness.

        Raises:
            InvalidLength: if message_hash is not 32 bytes
        """
        if len(message_hash) != 32:
            raise InvalidLength("message hash", 32, len(message_hash))
        return schnorr.sign(self._secret(), bytes(message_hash), os.urandom(32))

    def sign_hex(self, message_hash_hex: str) -> str:
        return self.sign(schnorr.hex_to_bytes(message_hash_hex, "message hash", 32)).hex()

    @staticmethod
    def verify(
        public_key: bytes | str,
        message_hash: bytes | str,
        signature: bytes | str,
    ) -> bool:
        """
        Verify a BIP-340 signature. Each argument may be bytes or hex.

        Returns False for any invalid signature; raises InvalidLength only
        for wrongly sized inputs.
        """
        try:
            pk = _key_bytes(public_key, "public key")
            msg = _key_bytes(message_hash, "message hash")
            if isinstance(signature, str):
                sig = schnorr.hex_to_bytes(signature, "signature", schnorr.SIGNATURE_LENGTH)
            else:
                sig = bytes(signature)
        except InvalidFormat:
            return False
        return schnorr.verify(pk, msg, sig)

    # ------------------------------------------------------------------
    # Nostr events
    # ------------------------------------------------------------------

    def create_event(
        self,
        kind: int,
        content: str,
        tags: Iterable[Iterable[str]] = (),
        created_at: int | None = None,
    ) -> NostrEvent:
        """Build and sign a NIP-01 event."""
        if created_at is None:
            created_at = int(time.time())
        tag_list = [[str(item) for item in tag] for tag in tags]
        pubkey = self.public_key_hex
        event_id = NostrEvent.compute_id(pubkey, created_at, kind, tag_list, content)
        sig = self.sign(bytes.fromhex(event_id))
        logger.debug("Signed kind %d event %s", kind, event_id[:16])
        return NostrEvent(
            id=event_id,
            pubkey=pubkey,
            created_at=created_at,
            kind=kind,
            tags=tag_list,
            content=content,
            sig=sig.hex(),
        )

    def create_text_note(self, content: str, tags: Iterable[Iterable[str]] = ()) -> NostrEvent:
        return self.create_event(KIND_TEXT_NOTE, content, tags=tags)

    def create_metadata(
        self,
        name: str | None = None,
        about: str | None = None,
        picture: str | None = None,
        nip05: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> NostrEvent:
        """Kind 0 event whose content is the JSON profile metadata."""
        metadata: dict[str, Any] = {}
        if name is not None:
            metadata["name"] = name
        if about is not None:
            metadata["about"] = about
        if picture is not None:
            metadata["picture"] = picture
        if nip05 is not None:
            metadata["nip05"] = nip05
        if extra:
            metadata.update(extra)
        return self.create_event(KIND_METADATA, json.dumps(metadata, separators=(",", ":")))

    # ------------------------------------------------------------------
    # ECDH and encryption
    # ------------------------------------------------------------------

    def derive_shared_secret(self, other_public_key: bytes | str) -> bytes:
        """
        x-coordinate of d·P, where P is the even-y lift of the other key.

        Raises:
            InvalidLength:    if the other key is not 32 bytes / 64 hex chars
            InvalidPublicKey: if it is not a curve x-coordinate
        """
        point = lift_x_bytes(_key_bytes(other_public_key, "public key"))
        d = scalar_from_private_key(self._secret())
        shared = d * point
        if is_infinity(shared):
            raise ValueError("ECDH produced the point at infinity")
        return bytes_from_int(shared.x())

    def _message_key(self, other_public_key: bytes | str) -> bytes:
        return hashlib.sha256(self.derive_shared_secret(other_public_key)).digest()

    def encrypt(self, recipient_public_key: bytes | str, plaintext: str | bytes) -> str:
        """Seal plaintext for the recipient; returns a base64 SealedMessage."""
        if isinstance(plaintext, str):
            plaintext = plaintext.encode("utf-8")
        key = self._message_key(recipient_public_key)
        nonce = os.urandom(NONCE_LENGTH)
        aad = bytes([SEALED_VERSION])
        sealed = ChaCha20Poly1305(key).encrypt(nonce, bytes(plaintext), aad)
        return SealedMessage(
            version=SEALED_VERSION,
            nonce=nonce,
            ciphertext=sealed[:-TAG_LENGTH],
            tag=sealed[-TAG_LENGTH:],
        ).to_base64()

    def decrypt_bytes(self, sender_public_key: bytes | str, payload: str) -> bytes:
        """
        Open a SealedMessage from `sender_public_key`.

        Raises:
            InvalidFormat:        bad base64
            InvalidLength:        payload shorter than 29 bytes
            UnsupportedVersion:   unknown version tag
            AuthenticationFailed: wrong key or tampered payload
        """
        message = SealedMessage.from_base64(payload)
        key = self._message_key(sender_public_key)
        try:
            return ChaCha20Poly1305(key).decrypt(
                message.nonce, message.ciphertext + message.tag, bytes([message.version])
            )
        except InvalidTag as e:
            raise AuthenticationFailed("Sealed message failed authentication") from e

    def decrypt(self, sender_public_key: bytes | str, payload: str) -> str:
        """decrypt_bytes() decoded as UTF-8."""
        plaintext = self.decrypt_bytes(sender_public_key, payload)
        try:
            return plaintext.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidFormat("Decrypted message is not UTF-8") from e

    # ------------------------------------------------------------------
    # Security
    # ------------------------------------------------------------------

    def zeroize(self) -> None:
        """Overwrite the private key buffer. Signing and ECDH raise afterwards."""
        for i in range(len(self._private_key)):
            self._private_key[i] = 0
        self._zeroized = True

    def __repr__(self) -> str:
        return f"NostrSigner(npub={self.npub})"
