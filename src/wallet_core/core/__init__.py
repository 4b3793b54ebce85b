"""core module init"""
from wallet_core.core.config import (
    DEFAULT_VAULT_PARAMS,
    NETWORKS,
    PATH_BIP84_MAINNET,
    PATH_BIP84_TESTNET,
    PATH_NIP06,
    PATH_WIREGUARD,
    IdentityConfig,
    VaultParams,
    get_network,
)
from wallet_core.core.errors import (
    AuthenticationFailed,
    DerivationExhausted,
    IdentityError,
    InvalidFormat,
    InvalidLength,
    InvalidMnemonic,
    InvalidPublicKey,
    KeyMaterialZeroized,
    UnsupportedVersion,
)
from wallet_core.core.hd import ChildKey, HDNode, derive_from_seed, derive_path
from wallet_core.core.models import IdentityProfile, KeyPair, NostrEvent
from wallet_core.core.master_key import MasterKey

__all__ = [
    "AuthenticationFailed",
    "ChildKey",
    "DEFAULT_VAULT_PARAMS",
    "DerivationExhausted",
    "HDNode",
    "IdentityConfig",
    "IdentityError",
    "IdentityProfile",
    "InvalidFormat",
    "InvalidLength",
    "InvalidMnemonic",
    "InvalidPublicKey",
    "KeyMaterialZeroized",
    "KeyPair",
    "MasterKey",
    "NETWORKS",
    "NostrEvent",
    "PATH_BIP84_MAINNET",
    "PATH_BIP84_TESTNET",
    "PATH_NIP06",
    "PATH_WIREGUARD",
    "UnsupportedVersion",
    "VaultParams",
    "derive_from_seed",
    "derive_path",
    "get_network",
]
