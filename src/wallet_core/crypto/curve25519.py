"""
Curve25519 keys for WireGuard.

Provides:
- clamp_scalar: RFC 7748 scalar clamping
- CurveKeyPair: clamped private key plus X25519 public key, zeroizable
- WireGuard config section rendering
- generate_preshared_key

X25519 base-point multiplication is done by the cryptography library.
"""

from __future__ import annotations

import base64
import binascii
import logging
import os

from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric.x25519 import X25519PrivateKey
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from wallet_core.core.errors import InvalidFormat, InvalidLength

logger = logging.getLogger("wallet_core.curve25519")

KEY_LENGTH = 32
HKDF_INFO = b"wireguard-key"
DEFAULT_ALLOWED_IPS = "0.0.0.0/0, ::/0"


def clamp_scalar(raw: bytes) -> bytes:
    """
    Clamp 32 bytes into a valid X25519 scalar (RFC 7748 §5).

    Clears bits 0-2 of byte 0, clears bit 7 of byte 31 and sets bit 6 of byte 31.

    Raises:
        InvalidLength: if raw is not 32 bytes
    """
    if len(raw) != KEY_LENGTH:
        raise InvalidLength("Curve25519 scalar", KEY_LENGTH, len(raw))
    k = bytearray(raw)
    k[0] &= 248
    k[31] &= 127
    k[31] |= 64
    return bytes(k)


def _x25519_public(private_key: bytes) -> bytes:
    sk = X25519PrivateKey.from_private_bytes(private_key)
    return sk.public_key().public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw,
    )


class CurveKeyPair:
    """
    Clamped X25519 keypair used as a WireGuard identity.

    Usage:
        kp = CurveKeyPair.from_derived(raw32)
        print(kp.public_key_base64)
        print(kp.wireguard_config(server_public_key="...", server_endpoint="vpn:51820"))
        kp.zeroize()
    """

    def __init__(self, private_key: bytes, public_key: bytes) -> None:
        if len(private_key) != KEY_LENGTH:
            raise InvalidLength("private key", KEY_LENGTH, len(private_key))
        if len(public_key) != KEY_LENGTH:
            raise InvalidLength("public key", KEY_LENGTH, len(public_key))
        self._private_key = bytearray(private_key)
        self._public_key = bytearray(public_key)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_derived(cls, raw: bytes) -> CurveKeyPair:
        """Clamp 32 bytes of derived key material and compute the public key."""
        private_key = clamp_scalar(raw)
        return cls(private_key, _x25519_public(private_key))

    @classmethod
    def from_seed(cls, seed: bytes) -> CurveKeyPair:
        """
        Derive a keypair from arbitrary seed bytes.

        HKDF-SHA256 with an empty salt and info b"wireguard-key" stretches the
        seed to 32 bytes, which are then clamped.
        """
        if not seed:
            raise ValueError("seed must not be empty")
        hkdf = HKDF(
            algorithm=hashes.SHA256(),
            length=KEY_LENGTH,
            salt=None,
            info=HKDF_INFO,
        )
        return cls.from_derived(hkdf.derive(bytes(seed)))

    @classmethod
    def from_private_key_base64(cls, private_key_b64: str) -> CurveKeyPair:
        """
        Load a WireGuard base64 private key.

        The key is used as given; WireGuard keys are already clamped.

        Raises:
            InvalidFormat: if the string is not base64
            InvalidLength: if it does not decode to 32 bytes
        """
        try:
            private_key = base64.b64decode(private_key_b64.strip(), validate=True)
        except (ValueError, binascii.Error) as e:
            raise InvalidFormat("Private key is not valid base64") from e
        if len(private_key) != KEY_LENGTH:
            raise InvalidLength("private key", KEY_LENGTH, len(private_key))
        return cls(private_key, _x25519_public(private_key))

    # ------------------------------------------------------------------
    # Key formats
    # ------------------------------------------------------------------

    @property
    def private_key(self) -> bytes:
        return bytes(self._private_key)

    @property
    def public_key(self) -> bytes:
        return bytes(self._public_key)

    @property
    def private_key_base64(self) -> str:
        return base64.b64encode(self._private_key).decode("ascii")

    @property
    def public_key_base64(self) -> str:
        return base64.b64encode(self._public_key).decode("ascii")

    @property
    def private_key_hex(self) -> str:
        return self._private_key.hex()

    @property
    def public_key_hex(self) -> str:
        return self._public_key.hex()

    # ------------------------------------------------------------------
    # Config rendering
    # ------------------------------------------------------------------

    def interface_config(
        self,
        address: str | None = None,
        dns: str | None = None,
        listen_port: int | None = None,
    ) -> str:
        """
        Render the [Interface] section.

        Args:
            address:     client address, e.g. "10.0.0.2/32"
            dns:         DNS servers, e.g. "1.1.1.1, 8.8.8.8"
            listen_port: UDP listen port
        """
        lines = ["[Interface]", f"PrivateKey = {self.private_key_base64}"]
        if address is not None:
            lines.append(f"Address = {address}")
        if dns is not None:
            lines.append(f"DNS = {dns}")
        if listen_port is not None:
            lines.append(f"ListenPort = {listen_port}")
        return "\n".join(lines)

    @staticmethod
    def peer_config(
        server_public_key: str,
        server_endpoint: str,
        allowed_ips: str = DEFAULT_ALLOWED_IPS,
        persistent_keepalive: int | None = None,
        preshared_key: str | None = None,
    ) -> str:
        """Render the [Peer] section for the server side."""
        lines = [
            "[Peer]",
            f"PublicKey = {server_public_key}",
            f"Endpoint = {server_endpoint}",
            f"AllowedIPs = {allowed_ips}",
        ]
        if preshared_key is not None:
            lines.append(f"PresharedKey = {preshared_key}")
        if persistent_keepalive is not None:
            lines.append(f"PersistentKeepalive = {persistent_keepalive}")
        return "\n".join(lines)

    def wireguard_config(
        self,
        server_public_key: str,
        server_endpoint: str,
        client_address: str | None = None,
        dns: str | None = None,
        allowed_ips: str = DEFAULT_ALLOWED_IPS,
        persistent_keepalive: int | None = None,
        preshared_key: str | None = None,
    ) -> str:
        """Render a complete wg-quick config: [Interface], blank line, [Peer]."""
        interface = self.interface_config(address=client_address, dns=dns)
        peer = self.peer_config(
            server_public_key=server_public_key,
            server_endpoint=server_endpoint,
            allowed_ips=allowed_ips,
            persistent_keepalive=persistent_keepalive,
            preshared_key=preshared_key,
        )
        return f"{interface}\n\n{peer}"

    # ------------------------------------------------------------------
    # Security
    # ------------------------------------------------------------------

    def zeroize(self) -> None:
        """Overwrite both keys with zeros."""
        for buf in (self._private_key, self._public_key):
            for i in range(len(buf)):
                buf[i] = 0
        logger.debug("Curve25519 keypair zeroized")

    def __repr__(self) -> str:
        return f"CurveKeyPair(public_key={self.public_key_base64})"


def generate_preshared_key() -> str:
    """32 random bytes, base64, for the optional WireGuard PresharedKey."""
    return base64.b64encode(os.urandom(KEY_LENGTH)).decode("ascii")
