#!/usr/bin/env python3
"""
Signing Benchmark
=================

Benchmark the overhead of record and field signing on YCSB-style records.

Measures:
  - sign_record / sign_fields cost at the default RSA-1024/SHA-1 setting
  - Impact of the number of fields per record
  - Impact of key size (1024 vs 2048) on per-record cost
  - Key load vs key generation cost
"""

import logging
import os
import statistics
import tempfile
import time

from sporesign import KeySigner, create_key_signer

logging.getLogger("sporesign").setLevel(logging.ERROR)


# ── Helpers ──────────────────────────────────────────────────────────────────


def time_op(func, iterations: int = 100) -> float:
    """Return average ms per call."""
    for _ in range(min(5, iterations)):
        func()
    start = time.perf_counter()
    for _ in range(iterations):
        func()
    return ((time.perf_counter() - start) / iterations) * 1000


def make_record(field_count: int = 10, field_length: int = 100) -> dict:
    """A record shaped like the YCSB core workload: field0..fieldN of random bytes."""
    return {f"field{i}": os.urandom(field_length) for i in range(field_count)}


# ── Benchmarks ───────────────────────────────────────────────────────────────


def benchmark_record_vs_fields():
    """Compare whole-record and per-field signing on the default record shape."""
    print("\n🔐 sign_record vs sign_fields (10 fields x 100 bytes)")
    print("-" * 60)

    signer = create_key_signer()

    record_t = time_op(lambda: signer.sign_record(make_record()), iterations=500)
    fields_t = time_op(lambda: signer.sign_fields(make_record()), iterations=200)

    print(f"  sign_record:      {record_t:8.3f} ms")
    print(f"  sign_fields:      {fields_t:8.3f} ms")
    print(f"  Signature length: {signer.signature_length} bytes")


def benchmark_field_count_impact():
    """Measure how the number of fields affects both strategies."""
    print("\n📊 Field Count Impact")
    print("-" * 60)

    signer = create_key_signer()

    print(f"  {'Fields':>8} {'Record ms':>10} {'Fields ms':>10}")
    print("  " + "-" * 30)

    for n in [1, 5, 10, 20]:
        record_t = time_op(lambda: signer.sign_record(make_record(n)), iterations=200)
        fields_t = time_op(lambda: signer.sign_fields(make_record(n)), iterations=50)
        print(f"  {n:>8} {record_t:10.3f} {fields_t:10.3f}")


def benchmark_key_size_impact():
    """Per-record cost for each supported configuration."""
    print("\n📈 Key Size Impact")
    print("-" * 60)

    for key_size, hash_algorithm in [(1024, "sha1"), (2048, "sha256")]:
        signer = create_key_signer(key_size=key_size, hash_algorithm=hash_algorithm)
        record_t = time_op(lambda: signer.sign_record(make_record()), iterations=200)
        print(f"  RSA-{key_size}/{hash_algorithm:<6} sign_record: {record_t:8.3f} ms")


def benchmark_load_vs_generate():
    """Key generation on first run vs loading on later runs."""
    print("\n🔑 Key Load vs Generate")
    print("-" * 60)

    generate_times = []
    load_times = []
    for _ in range(5):
        with tempfile.TemporaryDirectory() as tmp:
            public_path = os.path.join(tmp, "public.der")
            private_path = os.path.join(tmp, "private.der")

            start = time.perf_counter()
            KeySigner(public_path, private_path).load_keys()
            generate_times.append((time.perf_counter() - start) * 1000)

            start = time.perf_counter()
            KeySigner(public_path, private_path).load_keys()
            load_times.append((time.perf_counter() - start) * 1000)

    print(f"  generate: {statistics.mean(generate_times):8.2f} ms")
    print(f"  load:     {statistics.mean(load_times):8.2f} ms")


# ── Main ─────────────────────────────────────────────────────────────────────


def main():
    print("🔐 Signing Benchmark")
    print("=" * 60)

    try:
        benchmark_record_vs_fields()
        benchmark_field_count_impact()
        benchmark_key_size_impact()
        benchmark_load_vs_generate()

        print()
        print("🎯 Interpretation Guide")
        print("=" * 60)
        print("• sign_record costs one RSA operation per record")
        print("• sign_fields costs one RSA operation per field, so it scales linearly")
        print("• Doubling the key size roughly multiplies signing cost by 6-8x")
        print()
        print("✅ Benchmark complete!")

    except KeyboardInterrupt:
        print("\n⚠️  Benchmark interrupted by user")


if __name__ == "__main__":
    main()
