"""
MasterKey: every identity key derived from one BIP-39 mnemonic.

Derives:
- Bitcoin account keys (BIP-84, m/84'/0'/0' or m/84'/1'/0')
- Nostr identity key (NIP-06, m/44'/1237'/0'/0/0)
- WireGuard Curve25519 key (m/44'/9999'/0'/0/0, RFC 7748 clamped)
- Mobi identifier (from the Nostr public key)

All derivations are deterministic: the same mnemonic, passphrase and network
always yield the same keys. Derived values are computed on first access and
memoized; zeroize() wipes the seed and the memo and makes the instance
permanently unusable for key material.

Usage:
    mk = MasterKey.from_mnemonic("leader monkey parrot ...")
    print(mk.npub)
    print(mk.mobi_display)      # 879-044-656-584
    print(mk.bitcoin_xpub)
    mk.zeroize()
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Callable, TypeVar

from wallet_core.core import mnemonic as bip39
from wallet_core.core.config import (
    CHANGE_BRANCH,
    MAX_CHILD_INDEX,
    PATH_NIP06,
    PATH_WIREGUARD,
    RECEIVE_BRANCH,
    IdentityConfig,
    NetworkParams,
    get_network,
)
from wallet_core.core.errors import KeyMaterialZeroized
from wallet_core.core.hd import ChildKey, HDNode, derive_from_seed
from wallet_core.core.models import IdentityProfile, KeyPair
from wallet_core.crypto import bech32
from wallet_core.crypto.curve25519 import CurveKeyPair, clamp_scalar
from wallet_core.identity.mobi import Mobi

logger = logging.getLogger("wallet_core.master_key")

T = TypeVar("T")


class MasterKey:
    """
    All keys derived from one seed.

    Construct with from_mnemonic() or generate(); the constructor itself
    takes an already-stretched 64-byte seed.
    """

    def __init__(
        self,
        seed: bytes,
        network: str | None = None,
        mnemonic: str | None = None,
        config: IdentityConfig | None = None,
    ) -> None:
        config = config or IdentityConfig()
        # an explicit network overrides the one in config
        if network is not None and network != config.network:
            config = dataclasses.replace(config, network=network)
        self._config = config
        self._network: NetworkParams = config.network_params
        self._root: HDNode | None = derive_from_seed(bytes(seed), network=self._network.name)
        self._seed = bytearray(seed)
        self._mnemonic = mnemonic
        self._cache: dict[str, Any] = {}
        self._zeroized = False

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_mnemonic(
        cls,
        phrase: str,
        network: str | None = None,
        passphrase: str = "",
        config: IdentityConfig | None = None,
    ) -> MasterKey:
        """
        Build a MasterKey from a BIP-39 phrase.

        Args:
            phrase:     12 or 24 words; case and whitespace are normalized
            network:    'mainnet' (default) or 'testnet'; overrides config.network
            passphrase: optional BIP-39 passphrase ("25th word")
            config:     IdentityConfig with network and language defaults

        Raises:
            InvalidMnemonic: if the normalized phrase fails validation
            ValueError:      for an unknown network
        """
        config = config or IdentityConfig()
        network = network or config.network
        get_network(network)

        normalized = bip39.normalize(phrase)
        seed = bip39.to_seed(normalized, passphrase=passphrase, language=config.language)
        logger.debug("Built MasterKey (%s, %d words)", network, len(normalized.split(" ")))
        return cls(seed, network=network, mnemonic=normalized, config=config)

    @classmethod
    def generate(
        cls,
        strength: int | None = None,
        network: str | None = None,
        config: IdentityConfig | None = None,
    ) -> MasterKey:
        """
        Generate a fresh mnemonic and build a MasterKey from it.

        Args:
            strength: 128 (12 words) or 256 (24 words, default)

        Raises:
            ValueError: for any other strength
        """
        config = config or IdentityConfig()
        phrase = bip39.generate(strength or config.strength, language=config.language)
        return cls.from_mnemonic(phrase, network=network, config=config)

    # ------------------------------------------------------------------
    # Memo
    # ------------------------------------------------------------------

    def _ensure_live(self) -> None:
        if self._zeroized:
            logger.warning("Key material requested from a zeroized MasterKey")
            raise KeyMaterialZeroized("MasterKey has been zeroized")

    def _memo(self, name: str, compute: Callable[[], T]) -> T:
        self._ensure_live()
        cached = self._cache.get(name)
        if cached is not None:
            return cached
        value = compute()
        # zeroize() may have run while computing
        self._ensure_live()
        return self._cache.setdefault(name, value)

    def _root_node(self) -> HDNode:
        root = self._root
        if root is None:
            raise KeyMaterialZeroized("MasterKey has been zeroized")
        return root

    def _derive(self, path: str) -> ChildKey:
        child = self._root_node().derive(path)
        logger.debug("Derived key at %s", path)
        return child

    # ------------------------------------------------------------------
    # General
    # ------------------------------------------------------------------

    @property
    def network(self) -> str:
        return self._network.name

    @property
    def config(self) -> IdentityConfig:
        return self._config

    @property
    def is_zeroized(self) -> bool:
        return self._zeroized

    @property
    def mnemonic(self) -> str:
        """The normalized phrase, for backup right after generate()."""
        self._ensure_live()
        if self._mnemonic is None:
            raise ValueError("MasterKey was built from a raw seed; no mnemonic available")
        return self._mnemonic

    # ------------------------------------------------------------------
    # Nostr keys (NIP-06)
    # ------------------------------------------------------------------

    @property
    def nostr_keypair(self) -> KeyPair:
        """Nostr keypair with the 32-byte x-only public key."""
        def compute() -> KeyPair:
            child = self._derive(PATH_NIP06)
            # compressed 02|03 || x; x-only drops the parity byte
            return KeyPair(child.private_key_bytes, child.public_key_bytes[1:])
        return self._memo("nostr", compute)

    @property
    def nostr_private_key(self) -> bytes:
        return self.nostr_keypair.private_key

    @property
    def nostr_private_key_hex(self) -> str:
        return self.nostr_keypair.private_key.hex()

    @property
    def nostr_public_key(self) -> bytes:
        return self.nostr_keypair.public_key

    @property
    def nostr_public_key_hex(self) -> str:
        return self.nostr_keypair.public_key.hex()

    @property
    def npub(self) -> str:
        return bech32.encode_npub(self.nostr_public_key)

    @property
    def nsec(self) -> str:
        return bech32.encode_nsec(self.nostr_private_key)

    # ------------------------------------------------------------------
    # Bitcoin keys (BIP-84)
    # ------------------------------------------------------------------

    def _bitcoin_account(self) -> HDNode:
        def compute() -> HDNode:
            logger.debug("Derived Bitcoin account at %s", self._network.account_path)
            return self._root_node().derive_node(self._network.account_path)
        return self._memo("bitcoin_account", compute)

    @property
    def bitcoin_xpub(self) -> str:
        """Account-level extended public key (xpub on mainnet, tpub on testnet)."""
        return self._memo("bitcoin_xpub", lambda: self._bitcoin_account().to_extended_public_key())

    def _branch_key(self, branch: int, index: int) -> KeyPair:
        if isinstance(index, bool) or not isinstance(index, int):
            raise ValueError(f"index must be an int, got {type(index).__name__}")
        if not 0 <= index <= MAX_CHILD_INDEX:
            raise ValueError(f"index must be in [0, 2**31), got {index}")
        child = self._bitcoin_account().derive(f"m/{branch}/{index}")
        self._ensure_live()
        return KeyPair(child.private_key_bytes, child.public_key_bytes)

    def derive_receive_key(self, index: int) -> KeyPair:
        """Receive key at <account>/0/index, with a 33-byte compressed public key."""
        return self._branch_key(RECEIVE_BRANCH, index)

    def derive_change_key(self, index: int) -> KeyPair:
        """Change key at <account>/1/index, with a 33-byte compressed public key."""
        return self._branch_key(CHANGE_BRANCH, index)

    # ------------------------------------------------------------------
    # VPN keys (WireGuard)
    # ------------------------------------------------------------------

    @property
    def vpn_private_key(self) -> bytes:
        """Clamped 32-byte Curve25519 private key."""
        return self._memo("vpn", lambda: clamp_scalar(self._derive(PATH_WIREGUARD).private_key_bytes))

    @property
    def vpn_private_key_base64(self) -> str:
        return self.vpn_keypair().private_key_base64

    def vpn_keypair(self) -> CurveKeyPair:
        """A fresh CurveKeyPair on every call; the caller may zeroize it."""
        return CurveKeyPair.from_derived(self.vpn_private_key)

    # ------------------------------------------------------------------
    # Mobi
    # ------------------------------------------------------------------

    @property
    def mobi(self) -> Mobi:
        return self._memo("mobi", lambda: Mobi.from_bytes(self.nostr_public_key))

    @property
    def mobi_display(self) -> str:
        """Display form with hyphens, e.g. 879-044-656-584."""
        return self.mobi.format_display()

    @property
    def mobi_full(self) -> str:
        return self.mobi.full

    # ------------------------------------------------------------------
    # Seed access
    # ------------------------------------------------------------------

    @property
    def seed(self) -> bytes:
        """
        Copy of the 64-byte seed. All zeros after zeroize().

        This is the master secret; prefer derived keys.
        """
        return bytes(self._seed)

    @property
    def seed_key(self) -> bytes:
        """First 32 bytes of the seed, for symmetric use."""
        self._ensure_live()
        return bytes(self._seed[:32])

    # ------------------------------------------------------------------
    # Profile
    # ------------------------------------------------------------------

    def identity_profile(self) -> IdentityProfile:
        mobi = self.mobi
        public_key_hex = self.nostr_public_key_hex
        return IdentityProfile(
            npub=self.npub,
            public_key_hex=public_key_hex,
            mobi=mobi.display,
            mobi_formatted=mobi.format_display(),
            mobi_full=mobi.full,
            fingerprint=public_key_hex[:8],
        )

    # ------------------------------------------------------------------
    # Security
    # ------------------------------------------------------------------

    def zeroize(self) -> None:
        """
        Wipe the seed, drop the HD root and every memoized value.

        Irrevocable. Afterwards every key accessor raises KeyMaterialZeroized;
        `seed` stays readable and returns zeros. Calling twice is a no-op.
        """
        if self._zeroized:
            return
        self._zeroized = True
        for i in range(len(self._seed)):
            self._seed[i] = 0
        self._root = None
        self._mnemonic = None
        self._cache.clear()
        logger.debug("MasterKey zeroized")

    def __repr__(self) -> str:
        if self._zeroized:
            return f"MasterKey(network={self.network!r}, zeroized)"
        return f"MasterKey(network={self.network!r})"
