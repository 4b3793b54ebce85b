"""
BIP-340 Schnorr signatures over secp256k1.

Provides:
- public_key_of / public_key_of_hex: x-only public key of a private key
- sign / sign_hex: 64-byte signature with caller-supplied aux randomness
- verify / verify_hex: pure verification, never raises for bad signatures

The byte-level functions take `bytes`; the *_hex variants accept and return
lower-case hex strings.

References:
    [BIP340] https://github.com/bitcoin/bips/blob/master/bip-0340.mediawiki
"""

from __future__ import annotations

import binascii
import re

from wallet_core.core.errors import InvalidFormat, InvalidLength
from wallet_core.crypto.secp256k1 import (
    SECP256K1_N,
    SECP256K1_P,
    bytes_from_int,
    has_even_y,
    int_from_bytes,
    is_infinity,
    lift_x,
    point_mul,
    scalar_from_private_key,
    tagged_hash,
    xonly_bytes,
    xor_bytes,
)

SIGNATURE_LENGTH = 64

_HEX_RE = re.compile(r"[0-9a-fA-F]*")


def _require(what: str, value: bytes, length: int) -> None:
    if len(value) != length:
        raise InvalidLength(what, length, len(value))


def hex_to_bytes(value: str, what: str, length: int) -> bytes:
    """
    Decode a fixed-size hex string.

    Raises:
        InvalidLength: if the string is not 2*length characters
        InvalidFormat: if it contains non-hex characters
    """
    if len(value) != 2 * length:
        raise InvalidLength(what, 2 * length, len(value), unit="hex characters")
    # bytes.fromhex skips whitespace between byte pairs
    if not _HEX_RE.fullmatch(value):
        raise InvalidFormat(f"{what} is not valid hex")
    try:
        return bytes.fromhex(value)
    except (ValueError, binascii.Error) as e:
        raise InvalidFormat(f"{what} is not valid hex") from e


# ==============================================================================
# Byte-level API
# ==============================================================================


def public_key_of(private_key: bytes) -> bytes:
    """
    32-byte x-only public key for a private key.

    Raises:
        InvalidLength: if private_key is not 32 bytes
        ValueError:    if the scalar is 0 or >= N
    """
    d = scalar_from_private_key(private_key)
    return xonly_bytes(point_mul(d))


def sign(private_key: bytes, message_hash: bytes, aux_rand: bytes) -> bytes:
    """
    Produce a BIP-340 signature.

    Args:
        private_key:  32-byte secret key
        message_hash: 32-byte message (normally a hash)
        aux_rand:     32 bytes of auxiliary randomness

    Returns:
        64-byte signature R.x || s
    """
    _require("message hash", message_hash, 32)
    _require("aux randomness", aux_rand, 32)
    d0 = scalar_from_private_key(private_key)

    P = point_mul(d0)
    d = d0 if has_even_y(P) else SECP256K1_N - d0
    px = xonly_bytes(P)

    t = xor_bytes(bytes_from_int(d), tagged_hash("BIP0340/aux", aux_rand))
    k0 = int_from_bytes(tagged_hash("BIP0340/nonce", t + px + message_hash)) % SECP256K1_N
    if k0 == 0:
        raise RuntimeError("Nonce derivation produced zero; retry with different aux")

    R = point_mul(k0)
    k = k0 if has_even_y(R) else SECP256K1_N - k0
    rx = xonly_bytes(R)

    e = int_from_bytes(tagged_hash("BIP0340/challenge", rx + px + message_hash)) % SECP256K1_N
    sig = rx + bytes_from_int((k + e * d) % SECP256K1_N)

    # self-check before releasing the signature
    if not verify(px, message_hash, sig):
        raise RuntimeError("Produced signature does not verify")
    return sig


def verify(public_key: bytes, message_hash: bytes, signature: bytes) -> bool:
    """
    Verify a BIP-340 signature.

    Returns False for every cryptographically invalid combination; only
    wrongly sized inputs raise.

    Raises:
        InvalidLength: if public_key/message_hash are not 32 bytes or the
                       signature is not 64 bytes
    """
    _require("public key", public_key, 32)
    _require("message hash", message_hash, 32)
    _require("signature", signature, SIGNATURE_LENGTH)

    P = lift_x(int_from_bytes(public_key))
    if P is None:
        return False
    r = int_from_bytes(signature[:32])
    s = int_from_bytes(signature[32:])
    if r >= SECP256K1_P or s >= SECP256K1_N:
        return False

    e = int_from_bytes(tagged_hash("BIP0340/challenge", signature[:32] + public_key + message_hash)) % SECP256K1_N
    R = point_mul(s) + (SECP256K1_N - e) * P
    if is_infinity(R):
        return False
    if not has_even_y(R):
        return False
    return R.x() == r


# ==============================================================================
# Hex API
# ==============================================================================


def public_key_of_hex(private_key_hex: str) -> str:
    return public_key_of(hex_to_bytes(private_key_hex, "private key", 32)).hex()


def sign_hex(private_key_hex: str, message_hash_hex: str, aux_hex: str) -> str:
    return sign(
        hex_to_bytes(private_key_hex, "private key", 32),
        hex_to_bytes(message_hash_hex, "message hash", 32),
        hex_to_bytes(aux_hex, "aux randomness", 32),
    ).hex()


def verify_hex(public_key_hex: str, message_hash_hex: str, signature_hex: str) -> bool:
    """Hex form of verify(). Non-hex input is treated as an invalid signature."""
    try:
        public_key = hex_to_bytes(public_key_hex, "public key", 32)
        message_hash = hex_to_bytes(message_hash_hex, "message hash", 32)
        signature = hex_to_bytes(signature_hex, "signature", SIGNATURE_LENGTH)
    except InvalidFormat:
        return False
    return verify(public_key, message_hash, signature)
