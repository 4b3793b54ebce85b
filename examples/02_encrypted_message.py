#!/usr/bin/env python3
"""
Example 02: Alice sends Bob an encrypted, signed note.

Both identities are generated fresh. Alice seals a message to Bob's x-only
public key (ECDH + ChaCha20-Poly1305) and signs a Nostr text note; Bob
verifies the note and opens the message.

Usage:
    python examples/02_encrypted_message.py
"""

from wallet_core import MasterKey, NostrSigner

alice = NostrSigner.from_master_key(MasterKey.generate())
bob = NostrSigner.from_master_key(MasterKey.generate())

print(f"Alice: {alice.npub}  ({alice.mobi})")
print(f"Bob:   {bob.npub}  ({bob.mobi})")

# Alice -> Bob
payload = alice.encrypt(bob.public_key, "Meet at the usual place at noon.")
note = alice.create_text_note("Sent Bob a sealed message", tags=[["p", bob.public_key_hex]])

print(f"\nSealed payload: {payload}")
print(f"Note id:        {note.id}")

# Bob's side
assert note.verify(), "note signature should verify"
print(f"\nBob reads:      {bob.decrypt(alice.public_key, payload)}")

alice.zeroize()
bob.zeroize()
