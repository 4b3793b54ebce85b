"""
wallet-core: deterministic identity keys from one BIP-39 mnemonic.

Usage:
    from wallet_core import MasterKey, NostrSigner, Mobi
    from wallet_core.crypto import CurveKeyPair
"""

from wallet_core.core.config import IdentityConfig
from wallet_core.core.master_key import MasterKey
from wallet_core.core.models import IdentityProfile, KeyPair, NostrEvent
from wallet_core.identity.mobi import Mobi
from wallet_core.identity.signer import NostrSigner

__version__ = "0.1.0"
__all__ = [
    "MasterKey",
    "NostrSigner",
    "Mobi",
    "IdentityConfig",
    "IdentityProfile",
    "KeyPair",
    "NostrEvent",
]
