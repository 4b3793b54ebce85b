"""
Error taxonomy for the identity core.

Every failure path raises exactly one of these. Value-shaped errors also
subclass ValueError so callers that only know the builtin still catch them.
"""

from __future__ import annotations


class IdentityError(Exception):
    """Base class for all wallet_core errors."""
    pass


class InvalidMnemonic(IdentityError, ValueError):
    """Raised when a mnemonic fails the BIP-39 wordlist or checksum check."""
    pass


class InvalidLength(IdentityError, ValueError):
    """Raised when a byte or hex buffer does not match its fixed protocol size."""

    def __init__(self, what: str, expected: int | str, got: int, unit: str = "bytes") -> None:
        self.what = what
        self.expected = expected
        self.got = got
        super().__init__(f"{what} must be {expected} {unit}, got {got}")


class InvalidFormat(IdentityError, ValueError):
    """Raised when text input contains disallowed characters or structure."""
    pass


class InvalidPublicKey(IdentityError, ValueError):
    """Raised when an x-only public key does not correspond to a curve point."""
    pass


class UnsupportedVersion(IdentityError):
    """Raised when a sealed message carries an unknown version tag."""

    def __init__(self, version: int) -> None:
        self.version = version
        super().__init__(f"Unsupported encryption version: {version}")


class DerivationExhausted(IdentityError, RuntimeError):
    """Raised when Mobi rejection sampling runs out of rounds."""
    pass


class AuthenticationFailed(IdentityError):
    """Raised when an AEAD tag does not verify (wrong key or tampered data)."""
    pass


class KeyMaterialZeroized(IdentityError, RuntimeError):
    """Raised when key material is requested from a zeroized MasterKey."""
    pass
