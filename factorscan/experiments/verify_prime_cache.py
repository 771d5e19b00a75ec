#!/usr/bin/env python3
"""
Verify the incremental prime cache against an independent sieve.

Compares:
1. Cached primes vs the numpy Sieve of Eratosthenes
2. Each cached prime re-checked with a disposable cache (never against itself)
3. Factorizations: product, ordering and primality of every factor

Run at a small limit first; check 2 costs one fresh cache per prime.
"""

import sys
import time
from math import prod
from pathlib import Path

import numpy as np

# Add repo root to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from factorscan.primes import PrimeCache, append_next_prime, is_prime, prime_flags_upto, primes_upto
from factorscan.factorization import prime_factors


def build_cache(limit: int, dtype=np.uint64) -> PrimeCache:
    """Grow a cache until it holds every prime <= limit."""
    known_primes = PrimeCache(dtype)
    while known_primes.last is None or known_primes.last < limit:
        append_next_prime(known_primes)
    return known_primes


def verify_against_sieve(limit: int, verbose: bool = True) -> bool:
    """Verify the cached primes up to limit match the reference sieve."""
    if verbose:
        print(f"\n=== Cache vs sieve up to {limit:,} ===")

    t0 = time.time()
    known_primes = build_cache(limit)
    t_cache = time.time() - t0

    t0 = time.time()
    reference = primes_upto(limit)
    t_sieve = time.time() - t0

    cached = known_primes.as_array()
    cached = cached[cached <= limit]

    if verbose:
        print(f"  Cache: {t_cache:.2f}s, {len(cached):,} primes")
        print(f"  Sieve: {t_sieve:.2f}s, {len(reference):,} primes")

    ok = len(cached) == len(reference) and np.array_equal(cached, reference)
    if verbose:
        if ok:
            print(f"  ✓ All {len(reference):,} primes match!")
        else:
            mismatch = np.setxor1d(cached, reference)
            print(f"  ✗ {len(mismatch):,} mismatches, first: {mismatch[:10]}")
    return ok


def verify_disposable(limit: int, verbose: bool = True) -> bool:
    """Re-check every cached prime <= limit with a fresh cache per prime."""
    if verbose:
        print(f"\n=== Disposable-cache primality up to {limit:,} ===")

    known_primes = build_cache(limit)
    errors = 0
    for p in known_primes:
        if p > limit:
            break
        # Don't re-use the cache to check its own values
        if not is_prime(p):
            errors += 1
            if errors <= 10:
                print(f"  MISMATCH: {p} cached but is_prime says composite")

    if verbose:
        if errors == 0:
            print(f"  ✓ All cached primes confirmed!")
        else:
            print(f"  ✗ {errors:,} errors")
    return errors == 0


def verify_factorizations(limit: int, verbose: bool = True) -> bool:
    """Check prime_factors(n) for every n in [2, limit] with one shared cache."""
    if verbose:
        print(f"\n=== Factorizations up to {limit:,} ===")

    flags = prime_flags_upto(limit)
    known_primes = PrimeCache()
    errors = 0
    for n in range(2, limit + 1):
        factors = prime_factors(n, known_primes)
        ok = (prod(factors) == n
              and factors == sorted(factors)
              and all(flags[f] for f in factors))
        if not ok:
            errors += 1
            if errors <= 10:
                print(f"  MISMATCH: prime_factors({n}) = {factors}")

    if verbose:
        if errors == 0:
            print(f"  ✓ All {limit - 1:,} factorizations check out!")
        else:
            print(f"  ✗ {errors:,} errors")
    return errors == 0


if __name__ == '__main__':
    import argparse

    parser = argparse.ArgumentParser(description='Verify prime cache correctness')
    parser.add_argument('--limit', type=float, default=1e4, help='Upper bound (default: 1e4)')
    args = parser.parse_args()

    limit = int(args.limit)

    print(f"Prime Cache Verification")
    print(f"limit = {limit:,}")
    print("=" * 50)

    sieve_ok = verify_against_sieve(limit)
    disposable_ok = verify_disposable(limit)
    factor_ok = verify_factorizations(limit)

    print("\n" + "=" * 50)
    if sieve_ok and disposable_ok and factor_ok:
        print("✓ All verifications passed!")
    else:
        print("✗ Some verifications failed!")
        sys.exit(1)
