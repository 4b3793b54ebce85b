"""
secp256k1 helpers shared by the Schnorr signer and ECDH.

Provides:
- Curve constants and the ecdsa generator point
- lift_x: rebuild the even-y point from an x-only public key (BIP-340)
- Compressed point encode/decode
- BIP-340 tagged hashing and integer/bytes conversions

Point arithmetic itself is delegated to the ecdsa library.

References:
    [BIP340] P. Wuille, J. Nick, T. Ruffing, "Schnorr Signatures for secp256k1".
    [SEC1]   SEC 1: Elliptic Curve Cryptography, §2.3.4 (point decompression).
"""

from __future__ import annotations

import hashlib
from functools import lru_cache

import ecdsa
import ecdsa.ellipticcurve as ec

from wallet_core.core.errors import InvalidLength, InvalidPublicKey

# ==============================================================================
# secp256k1 curve constants
# ==============================================================================

# Field prime
SECP256K1_P = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEFFFFFC2F

# Group order
SECP256K1_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141

_CURVE = ecdsa.SECP256k1.curve
_GENERATOR = ecdsa.SECP256k1.generator


# ==============================================================================
# Conversions
# ==============================================================================


def int_from_bytes(b: bytes) -> int:
    return int.from_bytes(b, "big")


def bytes_from_int(x: int) -> bytes:
    return x.to_bytes(32, "big")


def xor_bytes(a: bytes, b: bytes) -> bytes:
    return bytes(x ^ y for x, y in zip(a, b))


@lru_cache(maxsize=8)
def _tag_prefix(tag: str) -> bytes:
    tag_hash = hashlib.sha256(tag.encode()).digest()
    return tag_hash + tag_hash


def tagged_hash(tag: str, msg: bytes) -> bytes:
    """BIP-340 tagged hash: SHA256(SHA256(tag) || SHA256(tag) || msg)."""
    return hashlib.sha256(_tag_prefix(tag) + msg).digest()


# ==============================================================================
# Points
# ==============================================================================


def point_mul(k: int) -> ec.PointJacobi:
    """k·G over secp256k1."""
    return k * _GENERATOR


def is_infinity(pt: ec.AbstractPoint) -> bool:
    return pt == ec.INFINITY


def has_even_y(pt: ec.AbstractPoint) -> bool:
    return pt.y() % 2 == 0


def lift_x(x: int) -> ec.PointJacobi | None:
    """
    Return the point with x-coordinate `x` and even y, or None.

    Solves y² = x³ + 7 (mod p). Since p ≡ 3 (mod 4) the square root is
    c^((p+1)/4); the candidate is checked because not every x is on the curve.
    """
    if x >= SECP256K1_P:
        return None
    y_sq = (pow(x, 3, SECP256K1_P) + 7) % SECP256K1_P
    y = pow(y_sq, (SECP256K1_P + 1) // 4, SECP256K1_P)
    if (y * y) % SECP256K1_P != y_sq:
        return None
    if y % 2 != 0:
        y = SECP256K1_P - y
    return ec.PointJacobi(_CURVE, x, y, 1)


def lift_x_bytes(xonly: bytes) -> ec.PointJacobi:
    """
    Decode a 32-byte x-only public key to its even-y curve point.

    Raises:
        InvalidLength:    if xonly is not 32 bytes
        InvalidPublicKey: if no curve point has this x-coordinate
    """
    if len(xonly) != 32:
        raise InvalidLength("x-only public key", 32, len(xonly))
    pt = lift_x(int_from_bytes(xonly))
    if pt is None:
        raise InvalidPublicKey(f"x-coordinate {xonly.hex()} is not on secp256k1")
    return pt


def xonly_bytes(pt: ec.AbstractPoint) -> bytes:
    """32-byte x-coordinate of a point."""
    if is_infinity(pt):
        raise ValueError("Cannot encode the point at infinity")
    return bytes_from_int(pt.x())


def encode_point(pt: ec.AbstractPoint) -> bytes:
    """33-byte compressed SEC1 encoding."""
    if is_infinity(pt):
        raise ValueError("Cannot encode the point at infinity")
    prefix = b"\x02" if has_even_y(pt) else b"\x03"
    return prefix + bytes_from_int(pt.x())


def decode_point(raw: bytes) -> ec.PointJacobi:
    """
    Decode a 33-byte compressed secp256k1 point.

    Raises:
        InvalidLength:    if raw is not 33 bytes
        InvalidPublicKey: on a bad prefix or an x not on the curve
    """
    if len(raw) != 33:
        raise InvalidLength("compressed point", 33, len(raw))
    prefix = raw[0]
    if prefix not in (0x02, 0x03):
        raise InvalidPublicKey(f"Invalid prefix byte: 0x{prefix:02x}")
    pt = lift_x(int_from_bytes(raw[1:]))
    if pt is None:
        raise InvalidPublicKey(f"x-coordinate {raw[1:].hex()} is not on secp256k1")
    if prefix == 0x03:
        pt = -pt
    return pt


def scalar_from_private_key(private_key: bytes) -> int:
    """
    Interpret 32 bytes as a secret scalar in [1, n-1].

    Raises:
        InvalidLength: if not 32 bytes
        ValueError:    if the scalar is zero or not below the group order
    """
    if len(private_key) != 32:
        raise InvalidLength("private key", 32, len(private_key))
    d = int_from_bytes(private_key)
    if not 1 <= d < SECP256K1_N:
        raise ValueError("Private key scalar must be in [1, N-1]")
    return d
