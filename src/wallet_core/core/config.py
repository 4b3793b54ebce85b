"""
Configuration for key derivation and the vault primitive.

Derivation paths are protocol constants and never change at runtime.
Tunable knobs (network, mnemonic language, Argon2id costs) live in
dataclasses validated on construction.
"""

from __future__ import annotations

from dataclasses import dataclass, field

# ==============================================================================
# Derivation paths
# ==============================================================================

# BIP-84 (native SegWit) account paths
PATH_BIP84_MAINNET = "m/84'/0'/0'"
PATH_BIP84_TESTNET = "m/84'/1'/0'"

# NIP-06 Nostr identity key
PATH_NIP06 = "m/44'/1237'/0'/0/0"

# WireGuard key, not a registered coin type
PATH_WIREGUARD = "m/44'/9999'/0'/0/0"

# BIP-32 branches under the account node
RECEIVE_BRANCH = 0
CHANGE_BRANCH = 1

# Largest non-hardened child index
MAX_CHILD_INDEX = 2**31 - 1


@dataclass(frozen=True)
class NetworkParams:
    """Per-network derivation parameters."""
    name: str
    bip32_network: str  # key into embit.networks.NETWORKS
    account_path: str


NETWORKS: dict[str, NetworkParams] = {
    "mainnet": NetworkParams("mainnet", "main", PATH_BIP84_MAINNET),
    "testnet": NetworkParams("testnet", "test", PATH_BIP84_TESTNET),
}


def get_network(name: str) -> NetworkParams:
    """
    Look up derivation parameters for a network name.

    Raises:
        ValueError: if the network is not 'mainnet' or 'testnet'
    """
    try:
        return NETWORKS[name]
    except KeyError:
        raise ValueError(
            f"Unknown network {name!r}; expected one of {sorted(NETWORKS)}"
        ) from None


# ==============================================================================
# Mnemonic
# ==============================================================================

# Entropy bits -> word count
MNEMONIC_STRENGTHS: dict[int, int] = {128: 12, 256: 24}

DEFAULT_STRENGTH = 256
DEFAULT_LANGUAGE = "english"


# ==============================================================================
# Vault (Argon2id + XChaCha20-Poly1305)
# ==============================================================================


@dataclass(frozen=True)
class VaultParams:
    """
    Argon2id cost parameters for passphrase stretching.

    Args:
        memory_cost_kib: memory in KiB (65536 = 64 MiB)
        iterations:      number of passes
        lanes:           degree of parallelism
        key_length:      derived key size in bytes
        salt_length:     required salt size in bytes
    """
    memory_cost_kib: int = 65536
    iterations: int = 3
    lanes: int = 4
    key_length: int = 32
    salt_length: int = 16

    def __post_init__(self) -> None:
        if self.lanes < 1:
            raise ValueError(f"lanes must be >= 1, got {self.lanes}")
        if self.iterations < 1:
            raise ValueError(f"iterations must be >= 1, got {self.iterations}")
        # Argon2 requires at least 8 KiB per lane
        if self.memory_cost_kib < 8 * self.lanes:
            raise ValueError(
                f"memory_cost_kib must be >= {8 * self.lanes} for {self.lanes} lanes, "
                f"got {self.memory_cost_kib}"
            )
        if self.key_length != 32:
            raise ValueError(f"key_length must be 32, got {self.key_length}")
        if self.salt_length < 8:
            raise ValueError(f"salt_length must be >= 8, got {self.salt_length}")


DEFAULT_VAULT_PARAMS = VaultParams()


# ==============================================================================
# IdentityConfig
# ==============================================================================


@dataclass
class IdentityConfig:
    """
    Defaults applied when building a MasterKey.

    Args:
        network:   'mainnet' or 'testnet' (selects the BIP-84 account path)
        language:  BIP-39 wordlist language
        strength:  entropy bits for freshly generated mnemonics (128 or 256)
        vault:     Argon2id costs for the vault primitive
    """
    network: str = "mainnet"
    language: str = DEFAULT_LANGUAGE
    strength: int = DEFAULT_STRENGTH
    vault: VaultParams = field(default_factory=VaultParams)

    def __post_init__(self) -> None:
        get_network(self.network)
        if self.strength not in MNEMONIC_STRENGTHS:
            raise ValueError(
                f"strength must be one of {sorted(MNEMONIC_STRENGTHS)}, got {self.strength}"
            )

    @property
    def network_params(self) -> NetworkParams:
        return get_network(self.network)
