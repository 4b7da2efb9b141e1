#!/usr/bin/env python3
"""
Simple Signing Example
======================

Signs a couple of benchmark records both ways, with keys kept in a
temporary directory so the second run loads what the first one generated.

Usage:
    python simple_signing_demo.py
"""

import tempfile
from pathlib import Path

from sporesign import KeySigner, SignatureFieldCollisionError


def main():
    """Demonstrate key load-or-generate and both signing strategies."""

    print("=== Simple Signing Demo ===\n")

    with tempfile.TemporaryDirectory() as tmp:
        public_path = Path(tmp) / "public.der"
        private_path = Path(tmp) / "private.der"

        # First run: no key files yet
        print("🔑 FIRST RUN:")
        signer = KeySigner(public_path, private_path)
        origin = signer.load_keys()
        print(f"✅ Keys {origin.value}, fingerprint {signer.get_key_info()['fingerprint']}")
        print(f"   {public_path.name}: {public_path.stat().st_size} bytes")
        print(f"   {private_path.name}: {private_path.stat().st_size} bytes")

        # Second run: the same files are loaded
        print("\n🔑 SECOND RUN:")
        signer = KeySigner(public_path, private_path)
        origin = signer.load_keys()
        print(f"✅ Keys {origin.value}, fingerprint {signer.get_key_info()['fingerprint']}")

        # Whole-record signature
        print("\n📝 RECORD SIGNATURE:")
        record = signer.sign_record({"name": b"alice", "age": b"30"})
        print(f"✅ Fields: {list(record)}")
        print(f"   sign: {record['sign'][:16].hex()}... ({len(record['sign'])} bytes)")

        # Per-field signatures
        print("\n📝 FIELD SIGNATURES:")
        record = signer.sign_fields({"name": b"alice", "age": b"30"})
        for name, value in record.items():
            print(f"✅ {name}: {len(value)} bytes")

        # A record that already uses the signature field name
        print("\n⚠️  FIELD COLLISION:")
        try:
            signer.sign_record({"sign": b"user data"})
        except SignatureFieldCollisionError as e:
            print(f"❌ Rejected: {e}")


if __name__ == "__main__":
    main()
