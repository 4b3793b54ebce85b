"""
Unit tests for wallet_core.crypto.schnorr — BIP-340 signatures.

Uses the published BIP-340 test vectors. Pure math, no network.
"""

import os

import pytest

from wallet_core.core.errors import InvalidFormat, InvalidLength
from wallet_core.crypto.schnorr import (
    hex_to_bytes,
    public_key_of,
    public_key_of_hex,
    sign,
    sign_hex,
    verify,
    verify_hex,
)
from wallet_core.crypto.secp256k1 import (
    SECP256K1_N,
    SECP256K1_P,
    decode_point,
    encode_point,
    lift_x,
    point_mul,
    tagged_hash,
)

# ==============================================================================
# BIP-340 vectors
# ==============================================================================

V0_SK = "0000000000000000000000000000000000000000000000000000000000000003"
V0_PK = "f9308a019258c31049344f85f89d5229b531c845836f99b08601f113bce036f9"
V0_AUX = "00" * 32
V0_MSG = "00" * 32
V0_SIG = (
    "e907831f80848d1069a5371b402410364bdf1c5f8307b0084c55f1ce2dca8215"
    "25f66a4a85ea8b71e482a74f382d2ce5ebeee8fdb2172f477df4900d310536c0"
)

V1_SK = "b7e151628aed2a6abf7158809cf4f3c762e7160f38b4da56a784d9045190cfef"
V1_PK = "dff1d77f2a671c5f36183726db2341be58feae1da2deced843240f7b502ba659"
V1_AUX = "00" * 31 + "01"
V1_MSG = "243f6a8885a308d313198a2e03707344a4093822299f31d0082efa98ec4e6c89"
V1_SIG = (
    "6896bd60eeae296db48a229ff71dfe071bde413e6d43f917dc8dcf8c78de3341"
    "8906d11ac976abccb20b091292bff4ea897efcb639ea871cfa95f6de339e4b0a"
)

# BIP-340 vector 5: public key not on the curve
V5_PK = "eefdea4cdb677750a420fee807eacf21eb9898ae79b9768766e4faa04a2d4a34"
V5_MSG = V1_MSG
V5_SIG = (
    "6cff5c3ba86c69ea4b7376f31a9bcb4f74c1976089b2d9963da2e5543e177769"
    "69e89b4c5564d00349106b8497785dd7d1d713a8ae82b32fa79d5f7fc407d39b"
)


def _flip(data: bytes, bit: int) -> bytes:
    out = bytearray(data)
    out[bit // 8] ^= 1 << (bit % 8)
    return bytes(out)


# ==============================================================================
# Published vectors
# ==============================================================================


class TestVectors:
    """Signing with fixed aux must reproduce the published signatures."""

    def test_vector0_public_key(self):
        """Vector 0 x-only public key."""
        assert public_key_of_hex(V0_SK) == V0_PK

    def test_vector0_signature(self):
        """Vector 0 signature with zero aux."""
        assert sign_hex(V0_SK, V0_MSG, V0_AUX) == V0_SIG

    def test_vector0_verifies(self):
        """Vector 0 signature verifies."""
        assert verify_hex(V0_PK, V0_MSG, V0_SIG) is True

    def test_vector1_public_key(self):
        """Vector 1 x-only public key."""
        assert public_key_of_hex(V1_SK) == V1_PK

    def test_vector1_signature(self):
        """Vector 1 signature."""
        assert sign_hex(V1_SK, V1_MSG, V1_AUX) == V1_SIG

    def test_vector1_verifies(self):
        """Vector 1 signature verifies."""
        assert verify_hex(V1_PK, V1_MSG, V1_SIG) is True

    def test_hex_input_case_insensitive(self):
        """Upper-case hex verifies the same."""
        assert verify_hex(V1_PK.upper(), V1_MSG.upper(), V1_SIG.upper()) is True

    def test_public_key_not_on_curve(self):
        """Vector 5: x has no curve point, so verification is False rather than an error."""
        assert verify_hex(V5_PK, V5_MSG, V5_SIG) is False


# ==============================================================================
# Soundness
# ==============================================================================


class TestSoundness:
    """Any single-bit change invalidates a signature."""

    @pytest.fixture(scope="class")
    def signed(self):
        sk = bytes.fromhex(V1_SK)
        msg = bytes.fromhex(V1_MSG)
        return public_key_of(sk), msg, sign(sk, msg, os.urandom(32))

    def test_fresh_signature_verifies(self, signed):
        """A signature over random aux verifies."""
        pk, msg, sig = signed
        assert verify(pk, msg, sig)

    @pytest.mark.parametrize("bit", [0, 7, 63, 128, 200, 255])
    def test_flip_public_key_bit(self, signed, bit):
        """Flipping a public key bit fails verification."""
        pk, msg, sig = signed
        assert verify(_flip(pk, bit), msg, sig) is False

    @pytest.mark.parametrize("bit", [0, 31, 100, 170, 255])
    def test_flip_message_bit(self, signed, bit):
        """Flipping a message bit fails verification."""
        pk, msg, sig = signed
        assert verify(pk, _flip(msg, bit), sig) is False

    @pytest.mark.parametrize("bit", [0, 9, 255, 256, 300, 511])
    def test_flip_signature_bit(self, signed, bit):
        """Flipping a signature bit fails verification."""
        pk, msg, sig = signed
        assert verify(pk, msg, _flip(sig, bit)) is False

    def test_random_aux_gives_distinct_valid_signatures(self):
        """Different aux, different signatures, both valid."""
        sk = bytes.fromhex(V0_SK)
        msg = os.urandom(32)
        s1 = sign(sk, msg, os.urandom(32))
        s2 = sign(sk, msg, os.urandom(32))
        assert s1 != s2
        pk = public_key_of(sk)
        assert verify(pk, msg, s1) and verify(pk, msg, s2)

    def test_r_not_below_p_rejected(self):
        """r >= p is rejected."""
        pk = bytes.fromhex(V1_PK)
        msg = bytes.fromhex(V1_MSG)
        sig = SECP256K1_P.to_bytes(32, "big") + bytes.fromhex(V1_SIG)[32:]
        assert verify(pk, msg, sig) is False

    def test_s_not_below_n_rejected(self):
        """s >= n is rejected."""
        pk = bytes.fromhex(V1_PK)
        msg = bytes.fromhex(V1_MSG)
        sig = bytes.fromhex(V1_SIG)[:32] + SECP256K1_N.to_bytes(32, "big")
        assert verify(pk, msg, sig) is False


# ==============================================================================
# Input validation
# ==============================================================================


class TestInputValidation:
    """Wrong sizes raise; wrong content returns False."""

    def test_short_signature_raises(self):
        """63-byte signature raises InvalidLength."""
        with pytest.raises(InvalidLength):
            verify(bytes.fromhex(V0_PK), bytes(32), bytes(63))

    def test_short_public_key_raises(self):
        """31-byte public key raises InvalidLength."""
        with pytest.raises(InvalidLength):
            verify(bytes(31), bytes(32), bytes(64))

    def test_short_message_raises_on_sign(self):
        """Signing needs a 32-byte message hash."""
        with pytest.raises(InvalidLength):
            sign(bytes.fromhex(V0_SK), bytes(31), bytes(32))

    def test_zero_private_key_rejected(self):
        """Zero is not a valid scalar."""
        with pytest.raises(ValueError):
            public_key_of(bytes(32))

    def test_private_key_at_order_rejected(self):
        """n is not a valid scalar."""
        with pytest.raises(ValueError):
            public_key_of(SECP256K1_N.to_bytes(32, "big"))

    def test_non_hex_verify_is_false(self):
        """verify_hex returns False for non-hex input."""
        assert verify_hex("zz" * 32, V0_MSG, V0_SIG) is False

    def test_non_hex_sign_raises(self):
        """sign_hex raises InvalidFormat for non-hex input."""
        with pytest.raises(InvalidFormat):
            sign_hex("zz" * 32, V0_MSG, V0_AUX)

    def test_wrong_hex_length_raises(self):
        """Short hex raises InvalidLength in hex characters."""
        with pytest.raises(InvalidLength, match="hex characters"):
            public_key_of_hex("03")


# ==============================================================================
# secp256k1 helpers
# ==============================================================================


class TestSecp256k1Helpers:
    """lift_x, point codec and tagged hashing."""

    def test_lift_x_even_y(self):
        """lift_x picks the even-y point."""
        pt = lift_x(int(V0_PK, 16))
        assert pt is not None
        assert pt.y() % 2 == 0

    def test_lift_x_not_on_curve(self):
        """x without a curve point gives None."""
        assert lift_x(int(V5_PK, 16)) is None

    def test_lift_x_rejects_field_overflow(self):
        """x >= p gives None."""
        assert lift_x(SECP256K1_P) is None

    def test_point_codec_roundtrip(self):
        """Compressed encoding decodes to the same point."""
        pt = point_mul(7)
        assert decode_point(encode_point(pt)) == pt

    def test_decode_point_bad_prefix(self):
        """Prefixes other than 02 and 03 are rejected."""
        with pytest.raises(ValueError, match="prefix"):
            decode_point(b"\x05" + bytes(32))

    def test_tagged_hash_differs_by_tag(self):
        """Tags separate hash domains."""
        assert tagged_hash("BIP0340/aux", b"x") != tagged_hash("BIP0340/nonce", b"x")


class TestHexDecoding:
    """Fixed-size hex helper."""

    def test_whitespace_between_pairs_rejected(self):
        """bytes.fromhex would drop the spaces and return 31 bytes."""
        with pytest.raises(InvalidFormat):
            hex_to_bytes(V0_SK[:30] + "  " + V0_SK[32:], "private key", 32)

    def test_trailing_newline_rejected(self):
        """A newline in place of the last digit is not hex."""
        with pytest.raises(InvalidFormat):
            hex_to_bytes(V0_SK[:63] + "\n", "private key", 32)

    def test_valid_hex(self):
        """Mixed-case hex decodes."""
        assert hex_to_bytes(V1_PK.upper(), "public key", 32) == bytes.fromhex(V1_PK)
