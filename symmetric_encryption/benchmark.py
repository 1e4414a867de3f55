"""
Symmetric Key Encryption Benchmark CLI.

Usage:
    symmetric-encryption-benchmark [KEY_GROUP]

Or run directly:
    python -m symmetric_encryption.benchmark

Keys are read from SYMMETRIC_ENCRYPTION_KEYS / SYMMETRIC_ENCRYPTION_ACTIVE_KEY_IDS
(environment or .env file). The group needs at least two keys for the rotation
demos. Without configuration, two throwaway keys are generated.
"""

from __future__ import annotations

import secrets
import sys
import time
from pathlib import Path
from typing import List, Optional

from symmetric_encryption.cipher import SymmetricKeyEncryption
from symmetric_encryption.config import load_registry
from symmetric_encryption.errors import ConfigError, EncryptionError
from symmetric_encryption.registry import KeyRegistry

DEFAULT_KEY_GROUP = "benchmark"


def _demo_registry(key_group: str) -> KeyRegistry:
    keys = {key_group: {"1": secrets.token_hex(32), "2": secrets.token_hex(32)}}
    return KeyRegistry(keys, {key_group: "1"})


def _rate(count: int, duration: float) -> str:
    return f"{count / duration:.2f}" if duration > 0 else "inf"


def run_benchmark(key_group: Optional[str] = None) -> None:
    """Run the symmetric key encryption benchmark."""
    print("=== Symmetric Key Encryption Benchmark ===\n")

    env_file = Path(".env")
    try:
        registry = load_registry(env_file if env_file.is_file() else None)
        key_group = key_group or registry.groups[0]
        print(f"[STARTUP] Loaded keys for group {key_group!r} from configuration")
    except (ConfigError, IndexError):
        key_group = key_group or DEFAULT_KEY_GROUP
        registry = _demo_registry(key_group)
        print(f"[STARTUP] No key configuration, generated demo keys for group {key_group!r}")

    key_ids = registry.key_ids(key_group)
    if len(key_ids) < 2:
        print(f"ERROR: key group {key_group!r} needs at least two keys")
        sys.exit(1)

    try:
        user_input = input("Enter number of records to test (default: 1000): ").strip()
        test_quantity = int(user_input) if user_input else 1000
    except (ValueError, EOFError):
        test_quantity = 1000
    print(f"Testing with {test_quantity} records\n")

    old_key_id = registry.get_active_key_id(key_group)
    new_key_id = next(key_id for key_id in key_ids if key_id != old_key_id)
    cipher = SymmetricKeyEncryption(key_group, registry)

    print("=" * 70)
    print("                    BENCHMARK START")
    print("=" * 70 + "\n")

    # ========================================================================
    # Demo 1: Encrypt records with the active key
    # ========================================================================
    print("+" + "-" * 68 + "+")
    print(f"|  Demo 1: Encrypt {test_quantity} Records" + " " * (42 - len(str(test_quantity))) + "|")
    print("+" + "-" * 68 + "+")

    plaintexts = [f"user-{i}@example.com".encode() for i in range(test_quantity)]

    demo1_start = time.perf_counter()
    envelopes: List[str] = [cipher.encrypt(plaintext) for plaintext in plaintexts]
    demo1_duration = time.perf_counter() - demo1_start

    print(f"[OK] Encrypted {test_quantity} records with key {old_key_id!r}")
    print(f"[PERF] Time: {demo1_duration * 1000:.3f}ms | Rate: {_rate(test_quantity, demo1_duration)} ops/sec\n")

    # ========================================================================
    # Demo 2: Decrypt records
    # ========================================================================
    print("+" + "-" * 68 + "+")
    print("|  Demo 2: Decryption Benchmark                                     |")
    print("+" + "-" * 68 + "+")

    demo2_start = time.perf_counter()
    decrypted = [cipher.decrypt(envelope) for envelope in envelopes]
    demo2_duration = time.perf_counter() - demo2_start

    if decrypted != plaintexts:
        print("[ERROR] Decrypted data does not match")
        sys.exit(1)

    print("[OK] All records decrypted successfully")
    print(f"[PERF] Time: {demo2_duration * 1000:.3f}ms | Rate: {_rate(test_quantity, demo2_duration)} ops/sec\n")

    # ========================================================================
    # Demo 3: Rotate active key, detect stale envelopes
    # ========================================================================
    print("+" + "-" * 68 + "+")
    print(f"|  Demo 3: Rotation Check (active key {old_key_id!r} -> {new_key_id!r})")
    print("+" + "-" * 68 + "+")

    rotated = SymmetricKeyEncryption(key_group, registry.with_active_key_id(key_group, new_key_id))

    demo3_start = time.perf_counter()
    stale = [envelope for envelope in envelopes if rotated.needs_re_encrypt(envelope)]
    demo3_duration = time.perf_counter() - demo3_start

    print(f"[OK] {len(stale)}/{test_quantity} records need re-encryption")
    print(f"[PERF] Time: {demo3_duration * 1000:.3f}ms | Rate: {_rate(test_quantity, demo3_duration)} ops/sec\n")

    # ========================================================================
    # Demo 4: Lazy re-encryption
    # ========================================================================
    print("+" + "-" * 68 + "+")
    print("|  Demo 4: Lazy Re-encryption                                       |")
    print("+" + "-" * 68 + "+")

    demo4_start = time.perf_counter()
    refreshed = [rotated.encrypt(rotated.decrypt(envelope)) for envelope in stale]
    demo4_duration = time.perf_counter() - demo4_start

    remaining = sum(1 for envelope in refreshed if rotated.needs_re_encrypt(envelope))
    print(f"[OK] Re-encrypted {len(refreshed)} records, {remaining} still stale")
    print(f"[PERF] Time: {demo4_duration * 1000:.3f}ms | Rate: {_rate(len(refreshed), demo4_duration)} ops/sec\n")

    # ========================================================================
    # Demo 5: Old key still decrypts
    # ========================================================================
    print("+" + "-" * 68 + "+")
    print("|  Demo 5: Backward Compatibility Test                              |")
    print("+" + "-" * 68 + "+")

    try:
        rotated.decrypt(envelopes[0])
        print(f"[OK] Old key {old_key_id!r} can still decrypt records\n")
    except (EncryptionError, IndexError) as e:
        print(f"[ERROR] Backward compatibility check failed: {e}\n")

    # ========================================================================
    # Summary
    # ========================================================================
    print("=" * 70)
    print("                    BENCHMARK SUMMARY")
    print("=" * 70 + "\n")

    print("+- Performance Summary ----------------------------------------------+")
    print("|                                                                    |")

    enc_rate = _rate(test_quantity, demo1_duration)
    print(f"|  Encryption:        {enc_rate} ops/sec" + " " * (39 - len(enc_rate)) + "|")

    dec_rate = _rate(test_quantity, demo2_duration)
    print(f"|  Decryption:        {dec_rate} ops/sec" + " " * (39 - len(dec_rate)) + "|")

    chk_rate = _rate(test_quantity, demo3_duration)
    print(f"|  Rotation check:    {chk_rate} ops/sec" + " " * (39 - len(chk_rate)) + "|")

    print("|                                                                    |")
    print("+--------------------------------------------------------------------+")

    print("\nTest Configuration:")
    print(f"  - Total records tested: {test_quantity}")
    print(f"  - Key group: {key_group}")
    print("  - Crypto: AES-256-GCM with AEAD (key id bound as AAD)")
    print("  - Envelope: $<key id>$<base64url payload>")

    print("\n" + "=" * 70)
    print("                    BENCHMARK COMPLETE")
    print("=" * 70 + "\n")


def main() -> None:
    """CLI entry point for symmetric-encryption-benchmark command."""
    run_benchmark(sys.argv[1] if len(sys.argv) > 1 else None)


if __name__ == "__main__":
    main()
