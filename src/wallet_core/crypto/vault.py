"""
Vault primitive: passphrase KDF plus authenticated encryption.

This is the contract the encrypted-store collaborator builds on:

- derive_key: Argon2id (v1.3) passphrase -> 32-byte key
- seal:       XChaCha20-Poly1305, output nonce(24) || ciphertext || tag(16)
- unseal:     inverse of seal; tampering raises AuthenticationFailed
- random_bytes / zeroize helpers

Argon2id comes from argon2-cffi, XChaCha20-Poly1305 from PyNaCl (libsodium).
"""

from __future__ import annotations

import logging
import os

from argon2.low_level import Type as Argon2Type
from argon2.low_level import hash_secret_raw
from nacl.bindings import (
    crypto_aead_xchacha20poly1305_ietf_ABYTES,
    crypto_aead_xchacha20poly1305_ietf_decrypt,
    crypto_aead_xchacha20poly1305_ietf_encrypt,
    crypto_aead_xchacha20poly1305_ietf_NPUBBYTES,
)
from nacl.exceptions import CryptoError

from wallet_core.core.config import DEFAULT_VAULT_PARAMS, VaultParams
from wallet_core.core.errors import AuthenticationFailed, InvalidLength

logger = logging.getLogger("wallet_core.vault")

KEY_SIZE = 32
NONCE_SIZE = crypto_aead_xchacha20poly1305_ietf_NPUBBYTES  # 24
TAG_SIZE = crypto_aead_xchacha20poly1305_ietf_ABYTES  # 16


def derive_key(
    passphrase: str | bytes,
    salt: bytes,
    params: VaultParams = DEFAULT_VAULT_PARAMS,
) -> bytes:
    """
    Stretch a passphrase into a 32-byte vault key with Argon2id.

    Args:
        passphrase: user secret, str (UTF-8 encoded) or bytes
        salt:       random salt, params.salt_length bytes (16 by default)
        params:     Argon2id costs

    Raises:
        ValueError:    on an empty passphrase
        InvalidLength: if the salt has the wrong size
    """
    if isinstance(passphrase, str):
        passphrase = passphrase.encode("utf-8")
    if not passphrase:
        raise ValueError("passphrase must not be empty")
    if len(salt) != params.salt_length:
        raise InvalidLength("salt", params.salt_length, len(salt))

    logger.debug(
        "Deriving vault key (m=%d KiB, t=%d, p=%d)",
        params.memory_cost_kib, params.iterations, params.lanes,
    )
    return hash_secret_raw(
        secret=bytes(passphrase),
        salt=bytes(salt),
        time_cost=params.iterations,
        memory_cost=params.memory_cost_kib,
        parallelism=params.lanes,
        hash_len=params.key_length,
        type=Argon2Type.ID,
    )


def seal(key: bytes, plaintext: bytes) -> bytes:
    """
    Encrypt with XChaCha20-Poly1305 under a fresh random nonce.

    Returns:
        nonce(24) || ciphertext || tag(16)

    Raises:
        InvalidLength: if key is not 32 bytes
    """
    if len(key) != KEY_SIZE:
        raise InvalidLength("vault key", KEY_SIZE, len(key))
    nonce = random_bytes(NONCE_SIZE)
    ciphertext = crypto_aead_xchacha20poly1305_ietf_encrypt(bytes(plaintext), None, nonce, bytes(key))
    return nonce + ciphertext


def unseal(key: bytes, blob: bytes) -> bytes:
    """
    Decrypt a blob produced by seal().

    Raises:
        InvalidLength:        if key is not 32 bytes or blob is shorter than nonce + tag
        AuthenticationFailed: on a wrong key or any modification of the blob
    """
    if len(key) != KEY_SIZE:
        raise InvalidLength("vault key", KEY_SIZE, len(key))
    if len(blob) < NONCE_SIZE + TAG_SIZE:
        raise InvalidLength("sealed blob", NONCE_SIZE + TAG_SIZE, len(blob))
    nonce, ciphertext = bytes(blob[:NONCE_SIZE]), bytes(blob[NONCE_SIZE:])
    try:
        return crypto_aead_xchacha20poly1305_ietf_decrypt(ciphertext, None, nonce, bytes(key))
    except CryptoError as e:
        raise AuthenticationFailed("Vault blob failed authentication") from e


def random_bytes(length: int) -> bytes:
    """Bytes from the OS CSPRNG."""
    if length < 0:
        raise ValueError("Length must be non-negative")
    return os.urandom(length)


def zeroize(buffer: bytearray) -> None:
    """Overwrite a bytearray with zeros in place."""
    for i in range(len(buffer)):
        buffer[i] = 0
