"""
BIP-39 mnemonic capability.

Thin wrapper over the `mnemonic` package (Trezor's reference implementation).
The wordlist and checksum algorithm are not reimplemented here; this module
only pins down normalization so that phrases differing in case or
whitespace stretch to the same seed.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache

from mnemonic import Mnemonic

from wallet_core.core.config import DEFAULT_LANGUAGE, MNEMONIC_STRENGTHS
from wallet_core.core.errors import InvalidMnemonic

logger = logging.getLogger("wallet_core.mnemonic")

SEED_LENGTH = 64

_WHITESPACE = re.compile(r"\s+")


@lru_cache(maxsize=None)
def _wordlist(language: str) -> Mnemonic:
    return Mnemonic(language)


def normalize(phrase: str) -> str:
    """Lower-case, trim and collapse internal whitespace runs to one space."""
    return _WHITESPACE.sub(" ", phrase.strip().lower())


def validate(phrase: str, language: str = DEFAULT_LANGUAGE) -> bool:
    """
    Check a phrase against the wordlist and checksum.

    Never raises for bad input; unknown words simply make it invalid.
    """
    normalized = normalize(phrase)
    if not normalized:
        return False
    try:
        return bool(_wordlist(language).check(normalized))
    except (ValueError, LookupError):
        return False


def to_seed(phrase: str, passphrase: str = "", language: str = DEFAULT_LANGUAGE) -> bytes:
    """
    Stretch a mnemonic into the 64-byte BIP-39 seed (PBKDF2-HMAC-SHA512, 2048 rounds).

    Raises:
        InvalidMnemonic: if the normalized phrase fails validation
    """
    normalized = normalize(phrase)
    if not validate(normalized, language):
        raise InvalidMnemonic("Invalid BIP-39 mnemonic")
    seed = Mnemonic.to_seed(normalized, passphrase=passphrase)
    if len(seed) != SEED_LENGTH:
        # the reference implementation always yields 64 bytes
        raise InvalidMnemonic(f"Seed stretching produced {len(seed)} bytes")
    return bytes(seed)


def generate(strength: int = 256, language: str = DEFAULT_LANGUAGE) -> str:
    """
    Generate a fresh mnemonic from the OS CSPRNG.

    Args:
        strength: entropy bits, 128 (12 words) or 256 (24 words)

    Raises:
        ValueError: for any other strength
    """
    if strength not in MNEMONIC_STRENGTHS:
        raise ValueError(
            f"strength must be one of {sorted(MNEMONIC_STRENGTHS)}, got {strength}"
        )
    phrase = _wordlist(language).generate(strength=strength)
    logger.debug("Generated %d-word mnemonic", MNEMONIC_STRENGTHS[strength])
    return normalize(phrase)
