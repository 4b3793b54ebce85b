"""
Core data models for derived identities.

KeyPair is a plain frozen dataclass (it carries secret bytes and never goes
over the wire); IdentityProfile and NostrEvent are pydantic models meant to
be serialized and shared.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from wallet_core.core.errors import InvalidLength
from wallet_core.crypto import schnorr

# NIP-01 event kinds
KIND_METADATA = 0
KIND_TEXT_NOTE = 1


@dataclass(frozen=True)
class KeyPair:
    """
    A secp256k1 keypair.

    public_key is either 32 bytes (BIP-340 x-only) or 33 bytes (compressed).
    """
    private_key: bytes
    public_key: bytes

    def __post_init__(self) -> None:
        if len(self.private_key) != 32:
            raise InvalidLength("private key", 32, len(self.private_key))
        if len(self.public_key) not in (32, 33):
            raise InvalidLength("public key", "32 or 33", len(self.public_key))

    @property
    def private_key_hex(self) -> str:
        return self.private_key.hex()

    @property
    def public_key_hex(self) -> str:
        return self.public_key.hex()

    def __repr__(self) -> str:
        return f"KeyPair(public_key={self.public_key.hex()})"


class IdentityProfile(BaseModel):
    """Shareable identity summary. Never contains secrets."""
    model_config = ConfigDict(frozen=True)

    npub: str
    public_key_hex: str
    mobi: str  # 12-digit display form
    mobi_formatted: str  # e.g. "879-044-656-584"
    mobi_full: str  # 21 digits
    fingerprint: str  # first 8 hex chars of the public key


class NostrEvent(BaseModel):
    """A signed NIP-01 event."""
    model_config = ConfigDict(frozen=True)

    id: str
    pubkey: str
    created_at: int
    kind: int
    tags: list[list[str]] = Field(default_factory=list)
    content: str
    sig: str

    @staticmethod
    def serialize(
        pubkey: str,
        created_at: int,
        kind: int,
        tags: list[list[str]],
        content: str,
    ) -> bytes:
        """NIP-01 canonical serialization: compact JSON of [0,pubkey,created_at,kind,tags,content]."""
        payload = [0, pubkey, created_at, kind, tags, content]
        return json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode("utf-8")

    @classmethod
    def compute_id(
        cls,
        pubkey: str,
        created_at: int,
        kind: int,
        tags: list[list[str]],
        content: str,
    ) -> str:
        """Event id: hex SHA-256 of the canonical serialization."""
        return hashlib.sha256(cls.serialize(pubkey, created_at, kind, tags, content)).hexdigest()

    def verify(self) -> bool:
        """Recompute the id and check the Schnorr signature over it."""
        expected = self.compute_id(self.pubkey, self.created_at, self.kind, self.tags, self.content)
        if expected != self.id:
            return False
        try:
            return schnorr.verify_hex(self.pubkey, self.id, self.sig)
        except InvalidLength:
            return False

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump()
