"""
Unit tests for wallet_core.crypto.bech32 — NIP-19 npub/nsec.
"""

import pytest

from wallet_core.core.errors import InvalidFormat, InvalidLength
from wallet_core.crypto.bech32 import (
    decode,
    decode_npub,
    decode_nsec,
    encode,
    encode_npub,
    encode_nsec,
)

PUBKEY = "17162c921dc4d2518f9a101db33695df1afb56ab82f5ff3e5da6eec3ca5cd917"
NPUB = "npub1zutzeysacnf9rru6zqwmxd54mud0k44tst6l70ja5mhv8jjumytsd2x7nu"
PRIVKEY = "7f7ff03d123792d6ac594bfa67bf6d0c0ab55b6b1fdb6249303fe861f1ccba9a"
NSEC = "nsec10allq0gjx7fddtzef0ax00mdps9t2kmtrldkyjfs8l5xruwvh2dq0lhhkp"


class TestNip19:
    """NIP-06 published bech32 strings."""

    def test_encode_npub(self):
        """Public key encodes to the published npub."""
        assert encode_npub(bytes.fromhex(PUBKEY)) == NPUB

    def test_encode_nsec(self):
        """Private key encodes to the published nsec."""
        assert encode_nsec(bytes.fromhex(PRIVKEY)) == NSEC

    def test_decode_npub(self):
        """npub decodes to the public key."""
        assert decode_npub(NPUB).hex() == PUBKEY

    def test_decode_nsec(self):
        """nsec decodes to the private key."""
        assert decode_nsec(NSEC).hex() == PRIVKEY

    def test_decode_upper_case(self):
        """All-upper-case strings decode."""
        assert decode_npub(NPUB.upper()).hex() == PUBKEY


class TestErrors:
    """Bad checksums, wrong HRPs and wrong payload sizes."""

    def test_wrong_hrp(self):
        """An npub is not accepted as an nsec."""
        with pytest.raises(InvalidFormat, match="HRP"):
            decode_nsec(NPUB)

    def test_bad_checksum(self):
        """A changed last character breaks the checksum."""
        corrupted = NPUB[:-1] + ("q" if NPUB[-1] != "q" else "p")
        with pytest.raises(InvalidFormat):
            decode_npub(corrupted)

    def test_mixed_case(self):
        """Mixed case is rejected."""
        with pytest.raises(InvalidFormat):
            decode_npub(NPUB[:10] + NPUB[10:].upper())

    def test_wrong_payload_length(self):
        """A 20-byte payload is not a public key."""
        short = encode("npub", bytes(20))
        with pytest.raises(InvalidLength):
            decode_npub(short)

    def test_encode_wrong_length(self):
        """Only 32-byte keys encode as npub."""
        with pytest.raises(InvalidLength):
            encode_npub(bytes(33))

    def test_generic_roundtrip(self):
        """Arbitrary HRP and payload round-trip."""
        assert decode("note", encode("note", b"\x01\x02\x03")) == b"\x01\x02\x03"
