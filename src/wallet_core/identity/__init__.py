"""identity module init"""
from wallet_core.identity.mobi import Mobi, derive_full
from wallet_core.identity.signer import NostrSigner, SealedMessage

__all__ = [
    "Mobi",
    "NostrSigner",
    "SealedMessage",
    "derive_full",
]
