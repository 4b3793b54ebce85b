"""
Bech32 identity strings (NIP-19 npub/nsec).

Checksum and base32 regrouping come from the `bech32` package (the BIP-173
reference code); this module only fixes the HRPs and payload size.
"""

from __future__ import annotations

from bech32 import bech32_decode, bech32_encode, convertbits

from wallet_core.core.errors import InvalidFormat, InvalidLength

HRP_NPUB = "npub"
HRP_NSEC = "nsec"

KEY_LENGTH = 32


def encode(hrp: str, data: bytes) -> str:
    """Encode raw bytes under `hrp`."""
    words = convertbits(list(data), 8, 5, True)
    if words is None:
        raise InvalidFormat("Could not regroup data into 5-bit words")
    return bech32_encode(hrp, words)


def decode(hrp: str, text: str) -> bytes:
    """
    Decode a bech32 string and check its HRP.

    Raises:
        InvalidFormat: on a bad checksum, bad characters or a different HRP
    """
    got_hrp, words = bech32_decode(text.strip())
    if got_hrp is None or words is None:
        raise InvalidFormat("Invalid bech32 string")
    if got_hrp != hrp:
        raise InvalidFormat(f"Expected HRP {hrp!r}, got {got_hrp!r}")
    data = convertbits(words, 5, 8, False)
    if data is None:
        raise InvalidFormat("Invalid bech32 padding")
    return bytes(data)


def _decode_key(hrp: str, text: str) -> bytes:
    data = decode(hrp, text)
    if len(data) != KEY_LENGTH:
        raise InvalidLength(f"{hrp} payload", KEY_LENGTH, len(data))
    return data


def encode_npub(public_key: bytes) -> str:
    if len(public_key) != KEY_LENGTH:
        raise InvalidLength("public key", KEY_LENGTH, len(public_key))
    return encode(HRP_NPUB, public_key)


def encode_nsec(private_key: bytes) -> str:
    if len(private_key) != KEY_LENGTH:
        raise InvalidLength("private key", KEY_LENGTH, len(private_key))
    return encode(HRP_NSEC, private_key)


def decode_npub(npub: str) -> bytes:
    """npub1... -> 32-byte x-only public key."""
    return _decode_key(HRP_NPUB, npub)


def decode_nsec(nsec: str) -> bytes:
    """nsec1... -> 32-byte private key."""
    return _decode_key(HRP_NSEC, nsec)
