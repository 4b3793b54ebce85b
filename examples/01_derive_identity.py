#!/usr/bin/env python3
"""
Example 01: Derive a full identity from a mnemonic.

Prints the Nostr keys, Mobi, Bitcoin account xpub and WireGuard public key
derived from one BIP-39 phrase. Nothing touches the network.

Usage:
    python examples/01_derive_identity.py
    python examples/01_derive_identity.py "leader monkey parrot ring guide accident before fence cannon height naive bean"
"""

import sys

from wallet_core import MasterKey

# The well-known all-"abandon" test phrase; never use it for real funds
DEFAULT_MNEMONIC = "abandon abandon abandon abandon abandon abandon abandon abandon abandon abandon abandon about"
phrase = sys.argv[1] if len(sys.argv) > 1 else DEFAULT_MNEMONIC

mk = MasterKey.from_mnemonic(phrase)

print("=== Nostr (NIP-06) ===")
print(f"npub:       {mk.npub}")
print(f"public hex: {mk.nostr_public_key_hex}")

print("\n=== Mobi ===")
print(f"display:    {mk.mobi_display}")
print(f"extended:   {mk.mobi.format_extended()}")
print(f"full:       {mk.mobi.format_full()}")

print("\n=== Bitcoin (BIP-84) ===")
print(f"xpub:       {mk.bitcoin_xpub}")
print(f"receive/0:  {mk.derive_receive_key(0).public_key_hex}")

print("\n=== WireGuard ===")
vpn = mk.vpn_keypair()
print(f"public key: {vpn.public_key_base64}")

print("\n=== Shareable profile ===")
print(mk.identity_profile().model_dump_json(indent=2))

vpn.zeroize()
mk.zeroize()
