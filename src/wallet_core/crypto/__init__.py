"""
wallet_core.crypto — Cryptographic primitives behind the identity keys.

Provides:
- secp256k1 helpers (lift_x, tagged hash, point encode/decode)
- BIP-340 Schnorr sign/verify
- NIP-19 bech32 npub/nsec encoding
- Curve25519 clamping and WireGuard keypairs
- Vault primitive (Argon2id + XChaCha20-Poly1305)
"""

from wallet_core.crypto.bech32 import decode_npub, decode_nsec, encode_npub, encode_nsec
from wallet_core.crypto.curve25519 import CurveKeyPair, clamp_scalar, generate_preshared_key
from wallet_core.crypto.schnorr import public_key_of, sign, verify
from wallet_core.crypto.secp256k1 import decode_point, encode_point, lift_x, tagged_hash
from wallet_core.crypto.vault import derive_key, seal, unseal

__all__ = [
    # secp256k1
    "decode_point",
    "encode_point",
    "lift_x",
    "tagged_hash",
    # Schnorr (BIP-340)
    "public_key_of",
    "sign",
    "verify",
    # Bech32 (NIP-19)
    "decode_npub",
    "decode_nsec",
    "encode_npub",
    "encode_nsec",
    # Curve25519
    "CurveKeyPair",
    "clamp_scalar",
    "generate_preshared_key",
    # Vault
    "derive_key",
    "seal",
    "unseal",
]
