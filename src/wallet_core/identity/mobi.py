"""
Mobi: a 21-digit numeric identifier derived from an x-only public key.

Derivation is SHA-256 rejection sampling:

    round 0:       h = SHA256(pubkey)
    round r >= 1:  h = SHA256(pubkey || r)      (r as a single byte)

The first 9 bytes of h, read big-endian, give a 72-bit integer. The first
round whose integer is below 10**21 is accepted and written as 21 zero-padded
decimal digits. Acceptance per round is 10**21 / 2**72 (about 0.21), so 256
rounds leave a vanishing failure probability.

Shorter views (display/extended/long) are always prefixes of the full form.

Usage:
    mobi = Mobi.from_hex("17162c921dc4d2518f9a101db33695df1afb56ab82f5ff3e5da6eec3ca5cd917")
    print(mobi)                 # 879-044-656-584
    print(mobi.format_full())   # 879-044-656-584-686-196-443
"""

from __future__ import annotations

import hashlib
import logging
import re
from dataclasses import dataclass

from wallet_core.core.errors import DerivationExhausted, InvalidFormat, InvalidLength

logger = logging.getLogger("wallet_core.mobi")

PUBKEY_LENGTH = 32
PUBKEY_HEX_LENGTH = 64

FULL_LENGTH = 21
DISPLAY_LENGTH = 12
EXTENDED_LENGTH = 15
LONG_LENGTH = 18
VALID_LENGTHS = frozenset({DISPLAY_LENGTH, EXTENDED_LENGTH, LONG_LENGTH, FULL_LENGTH})

MAX_ROUNDS = 256
SAMPLE_BYTES = 9
UPPER_BOUND = 10**FULL_LENGTH

# Loops longer than this are logged; expected length is under 5 rounds
_SLOW_ROUNDS = 32

_SEPARATORS = frozenset(" -.()")
_HEX_RE = re.compile(r"[0-9a-fA-F]+")


def derive_full(pubkey: bytes, max_rounds: int = MAX_ROUNDS) -> str:
    """
    Run the rejection-sampling loop and return the 21-digit full form.

    Args:
        pubkey:     32-byte x-only public key
        max_rounds: rounds to try, round 0 included (at most 256)

    Raises:
        InvalidLength:       if pubkey is not 32 bytes
        DerivationExhausted: if no round is accepted
    """
    if len(pubkey) != PUBKEY_LENGTH:
        raise InvalidLength("public key", PUBKEY_LENGTH, len(pubkey))
    if not 1 <= max_rounds <= MAX_ROUNDS:
        raise ValueError(f"max_rounds must be in [1, {MAX_ROUNDS}], got {max_rounds}")

    pubkey = bytes(pubkey)
    for r in range(max_rounds):
        data = pubkey if r == 0 else pubkey + bytes([r])
        digest = hashlib.sha256(data).digest()
        value = int.from_bytes(digest[:SAMPLE_BYTES], "big")
        if value < UPPER_BOUND:
            if r >= _SLOW_ROUNDS:
                logger.warning("Mobi derivation needed %d rounds", r + 1)
            return str(value).zfill(FULL_LENGTH)

    raise DerivationExhausted(f"No Mobi candidate accepted within {max_rounds} rounds")


def _group(digits: str) -> str:
    return "-".join(digits[i:i + 3] for i in range(0, len(digits), 3))


@dataclass(frozen=True, eq=False)
class Mobi:
    """
    A derived or parsed Mobi.

    Equality and hashing use `full` only.
    """
    full: str
    display: str
    extended: str
    long: str

    def __post_init__(self) -> None:
        if len(self.full) != FULL_LENGTH or not self.full.isascii() or not self.full.isdigit():
            raise InvalidFormat(f"full must be {FULL_LENGTH} ASCII digits")
        if (
            self.display != self.full[:DISPLAY_LENGTH]
            or self.extended != self.full[:EXTENDED_LENGTH]
            or self.long != self.full[:LONG_LENGTH]
        ):
            raise InvalidFormat("Mobi views must be prefixes of the full form")

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_full(cls, full: str) -> Mobi:
        return cls(
            full=full,
            display=full[:DISPLAY_LENGTH],
            extended=full[:EXTENDED_LENGTH],
            long=full[:LONG_LENGTH],
        )

    @classmethod
    def from_bytes(cls, pubkey: bytes) -> Mobi:
        """
        Derive from a 32-byte x-only public key.

        Raises:
            InvalidLength:       if pubkey is not 32 bytes
            DerivationExhausted: if rejection sampling fails
        """
        return cls.from_full(derive_full(pubkey))

    @classmethod
    def from_hex(cls, pubkey_hex: str) -> Mobi:
        """
        Derive from a 64-character hex public key.

        Raises:
            InvalidLength: if not 64 characters
            InvalidFormat: if not hex
        """
        if len(pubkey_hex) != PUBKEY_HEX_LENGTH:
            raise InvalidLength("hex public key", PUBKEY_HEX_LENGTH, len(pubkey_hex), unit="characters")
        if not _HEX_RE.fullmatch(pubkey_hex):
            raise InvalidFormat("Public key is not valid hex")
        return cls.from_bytes(bytes.fromhex(pubkey_hex))

    @classmethod
    def parse(cls, text: str) -> Mobi:
        """
        Parse any accepted textual form.

        Shorter forms are right-padded with zeros to 21 digits, so
        parse("123456789012") == parse("123456789012000000000").

        Raises:
            InvalidFormat: if normalize() rejects the input
        """
        normalized = cls.normalize(text)
        if normalized is None:
            raise InvalidFormat(f"Invalid mobi format: {text!r}")
        return cls.from_full(normalized.ljust(FULL_LENGTH, "0"))

    @classmethod
    def try_parse(cls, text: str) -> Mobi | None:
        normalized = cls.normalize(text)
        if normalized is None:
            return None
        return cls.from_full(normalized.ljust(FULL_LENGTH, "0"))

    # ------------------------------------------------------------------
    # Static utilities
    # ------------------------------------------------------------------

    @staticmethod
    def normalize(text: str) -> str | None:
        """
        Strip separators (space - . ( )) and return the digits.

        Returns None on any other character or a digit count outside
        {12, 15, 18, 21}.
        """
        digits = []
        for c in text:
            if "0" <= c <= "9":
                digits.append(c)
            elif c in _SEPARATORS:
                continue
            else:
                return None
        if len(digits) not in VALID_LENGTHS:
            return None
        return "".join(digits)

    @classmethod
    def validate(cls, text: str) -> bool:
        return cls.normalize(text) is not None

    # ------------------------------------------------------------------
    # Formatting
    # ------------------------------------------------------------------

    def format_display(self) -> str:
        """XXX-XXX-XXX-XXX"""
        return _group(self.display)

    def format_extended(self) -> str:
        """XXX-XXX-XXX-XXX-XXX"""
        return _group(self.extended)

    def format_full(self) -> str:
        """XXX-XXX-XXX-XXX-XXX-XXX-XXX"""
        return _group(self.full)

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------

    def display_matches(self, other: str) -> bool:
        """Compare the first 12 digits of `other` with the display form."""
        normalized = self.normalize(other)
        if normalized is None:
            return False
        return normalized[:DISPLAY_LENGTH] == self.display

    def full_matches(self, other: Mobi) -> bool:
        return self.full == other.full

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Mobi):
            return NotImplemented
        return self.full == other.full

    def __hash__(self) -> int:
        return hash(self.full)

    def __str__(self) -> str:
        return self.format_display()
