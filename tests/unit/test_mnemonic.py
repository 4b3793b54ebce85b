"""
Unit tests for the BIP-39 and BIP-32 capability wrappers and configuration.
"""

import pytest

from wallet_core.core import mnemonic
from wallet_core.core.config import IdentityConfig, VaultParams, get_network
from wallet_core.core.errors import InvalidLength, InvalidMnemonic
from wallet_core.core.hd import derive_from_seed, derive_path

ABANDON = "abandon " * 11 + "about"
ABANDON_SEED = (
    "5eb00bbddcf069084889a8ab9155568165f5c453ccb85e70811aaed6f6da5fc1"
    "9a5ac40b389cd370d086206dec8aa6c43daea6690f20ad3d8d48b2d2ce9e38e4"
)
ABANDON_SEED_TREZOR = (
    "c55257c360c07c72029aebc1b53c05ed0362ada38ead3e3e9efa3708e5349553"
    "1f09a6987599d18264c1e1c92f2cf141630c7a3c4ab7c81b2f001698e7463b04"
)


# ==============================================================================
# Mnemonic
# ==============================================================================


class TestMnemonic:
    """Normalization, validation and seed stretching."""

    def test_normalize(self):
        """Lower-cases and collapses whitespace."""
        assert mnemonic.normalize("  Abandon \t ABOUT\n") == "abandon about"

    def test_validate(self):
        """Valid phrases pass in any case."""
        assert mnemonic.validate(ABANDON)
        assert mnemonic.validate(ABANDON.upper())

    def test_validate_bad_checksum(self):
        """A bad checksum fails."""
        assert not mnemonic.validate("abandon " * 12)

    def test_validate_empty(self):
        """Blank input fails."""
        assert not mnemonic.validate("   ")

    def test_seed_vector(self):
        """BIP-39 seed without passphrase."""
        assert mnemonic.to_seed(ABANDON).hex() == ABANDON_SEED

    def test_seed_vector_passphrase(self):
        """BIP-39 seed with the TREZOR passphrase."""
        assert mnemonic.to_seed(ABANDON, passphrase="TREZOR").hex() == ABANDON_SEED_TREZOR

    def test_to_seed_invalid(self):
        """to_seed refuses an invalid phrase."""
        with pytest.raises(InvalidMnemonic):
            mnemonic.to_seed("abandon " * 12)

    @pytest.mark.parametrize("strength,words", [(128, 12), (256, 24)])
    def test_generate(self, strength, words):
        """Generated phrases have the right length and validate."""
        phrase = mnemonic.generate(strength)
        assert len(phrase.split(" ")) == words
        assert mnemonic.validate(phrase)

    def test_generate_bad_strength(self):
        """Only 128 and 256 bits are supported."""
        with pytest.raises(ValueError):
            mnemonic.generate(192)


# ==============================================================================
# HD derivation
# ==============================================================================


class TestHD:
    """bip32 wrapper."""

    @pytest.fixture(scope="class")
    def root(self):
        return derive_from_seed(bytes.fromhex(ABANDON_SEED))

    def test_child_key_shapes(self, root):
        """Leaf keys are 32 and 33 bytes with an xpub."""
        child = derive_path(root, "m/44'/1237'/0'/0/0")
        assert len(child.private_key_bytes) == 32
        assert len(child.public_key_bytes) == 33
        assert child.to_extended_public_key().startswith("xpub")

    def test_node_walk_matches_full_path(self, root):
        """Walking via the account node equals the full path."""
        account = root.derive_node("m/84'/0'/0'")
        assert account.derive("m/0/7").public_key_bytes == root.derive("m/84'/0'/0'/0/7").public_key_bytes

    def test_testnet_prefix(self):
        """Testnet roots serialize as tpub."""
        root = derive_from_seed(bytes.fromhex(ABANDON_SEED), network="testnet")
        assert root.to_extended_public_key().startswith("tpub")

    def test_seed_too_short(self):
        """Seeds under 16 bytes are rejected."""
        with pytest.raises(InvalidLength):
            derive_from_seed(bytes(8))

    def test_child_repr_hides_private_key(self, root):
        """ChildKey repr never shows the private key."""
        child = root.derive("m/0")
        assert child.private_key_bytes.hex() not in repr(child)


# ==============================================================================
# Configuration
# ==============================================================================


class TestConfig:
    """Dataclass validation."""

    def test_networks(self):
        """BIP-84 account paths per network."""
        assert get_network("mainnet").account_path == "m/84'/0'/0'"
        assert get_network("testnet").account_path == "m/84'/1'/0'"

    def test_unknown_network(self):
        """Unknown network names raise."""
        with pytest.raises(ValueError):
            get_network("signet")

    def test_identity_config_validates_network(self):
        """IdentityConfig rejects unknown networks."""
        with pytest.raises(ValueError):
            IdentityConfig(network="regtest")

    def test_identity_config_validates_strength(self):
        """IdentityConfig rejects unsupported strengths."""
        with pytest.raises(ValueError):
            IdentityConfig(strength=160)

    def test_vault_params_memory_floor(self):
        """Memory must cover 8 KiB per lane."""
        with pytest.raises(ValueError):
            VaultParams(memory_cost_kib=16, lanes=4)

    def test_vault_params_key_length(self):
        """Only 32-byte keys are allowed."""
        with pytest.raises(ValueError):
            VaultParams(key_length=16)
