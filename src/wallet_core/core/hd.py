"""
BIP-32 hierarchical deterministic derivation capability.

Wraps embit's HDKey. Callers only ever see HDNode (a root or account node
they can walk further) and ChildKey (a leaf with raw key bytes). Paths use
"m/..." notation relative to the node they are applied to; hardened steps
may be written with ' or h.
"""

from __future__ import annotations

from dataclasses import dataclass

from embit import bip32
from embit.networks import NETWORKS as EMBIT_NETWORKS

from wallet_core.core.config import get_network
from wallet_core.core.errors import InvalidLength


@dataclass(frozen=True)
class ChildKey:
    """A derived BIP-32 node reduced to what the identity core needs."""
    path: str
    private_key_bytes: bytes
    public_key_bytes: bytes  # 33-byte compressed secp256k1
    _extended_public_key: str

    def to_extended_public_key(self) -> str:
        """Base58check xpub/tpub of this node."""
        return self._extended_public_key

    def __repr__(self) -> str:
        return f"ChildKey(path={self.path!r}, public_key={self.public_key_bytes.hex()})"


class HDNode:
    """
    A walkable BIP-32 node.

    Usage:
        root = derive_from_seed(seed, network="mainnet")
        account = root.derive_node("m/84'/0'/0'")
        leaf = account.derive("m/0/5")
    """

    def __init__(self, key: bip32.HDKey) -> None:
        self._key = key

    def derive(self, path: str) -> ChildKey:
        """Derive a leaf key at `path` relative to this node."""
        child = self._key.derive(path)
        return ChildKey(
            path=path,
            private_key_bytes=bytes(child.key.serialize()),
            public_key_bytes=bytes(child.key.get_public_key().sec()),
            _extended_public_key=child.to_public().to_base58(),
        )

    def derive_node(self, path: str) -> HDNode:
        """Derive a child node at `path` that can itself be walked further."""
        return HDNode(self._key.derive(path))

    def to_extended_public_key(self) -> str:
        return self._key.to_public().to_base58()

    def __repr__(self) -> str:
        return "HDNode(<private>)"


def derive_from_seed(seed: bytes, network: str = "mainnet") -> HDNode:
    """
    Build the BIP-32 root node from a BIP-39 seed.

    Raises:
        InvalidLength: if the seed is not 16..64 bytes
        ValueError:    for an unknown network
    """
    if not 16 <= len(seed) <= 64:
        raise InvalidLength("BIP-32 seed", 64, len(seed))
    params = get_network(network)
    version = EMBIT_NETWORKS[params.bip32_network]["xprv"]
    return HDNode(bip32.HDKey.from_seed(bytes(seed), version=version))


def derive_path(node: HDNode, path: str) -> ChildKey:
    """Walk `path` from `node` and return the leaf key."""
    return node.derive(path)
