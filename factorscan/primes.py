"""
Prime generation utilities.

Responsibility: the incremental prime cache and the queries answered from it.
No factorization, no formatting.

Every query takes an optional ``known_primes`` cache. Passing one cache through
many calls means each prime is discovered once. Omitting it creates a
disposable cache that is thrown away when the call returns, so every call
rediscovers the primes it needs from 2 upwards. That is fine for a one-off
check and pathological inside a loop.
"""

from bisect import bisect_left
from operator import index as as_integer
from typing import Iterator, List, Optional

import numpy as np


class PrimeCache:
    """
    Ordered, gap-free, append-only sequence of primes 2, 3, 5, ...

    Parameters
    ----------
    dtype : numpy unsigned integer type
        Fixed integer width for every value that passes through the cache.
        Values (and intermediate squares) beyond ``np.iinfo(dtype).max`` raise
        OverflowError instead of wrapping.
    """

    def __init__(self, dtype=np.uint64):
        dtype = np.dtype(dtype)
        if dtype.kind != 'u':
            raise ValueError(f"PrimeCache needs an unsigned integer dtype, got {dtype}")
        self.dtype = dtype
        self.max_value = int(np.iinfo(dtype).max)
        self._primes: List[int] = []
        self._members = set()

    def __len__(self) -> int:
        return len(self._primes)

    def __getitem__(self, i: int) -> int:
        return self._primes[i]

    def __iter__(self) -> Iterator[int]:
        return iter(self._primes)

    def __contains__(self, value) -> bool:
        return value in self._members

    def __repr__(self) -> str:
        last = self._primes[-1] if self._primes else None
        return f"PrimeCache(dtype={self.dtype.name}, count={len(self)}, last={last})"

    @property
    def last(self) -> Optional[int]:
        """Largest prime discovered so far, or None when empty."""
        return self._primes[-1] if self._primes else None

    def coerce(self, value) -> int:
        """Convert value to a plain int that fits this cache's unsigned width."""
        value = as_integer(value)
        if value < 0:
            raise ValueError(f"{value} is negative; only unsigned values are supported")
        if value > self.max_value:
            raise OverflowError(f"{value} does not fit in {self.dtype.name}")
        return value

    def square(self, p: int) -> int:
        """Return p*p, raising OverflowError if it leaves the integer width."""
        sq = p * p
        if sq > self.max_value:
            raise OverflowError(f"{p}^2 does not fit in {self.dtype.name}")
        return sq

    def append(self, prime: int) -> None:
        # Callers guarantee ordering; only append_next_prime calls this
        self._primes.append(prime)
        self._members.add(prime)

    def index(self, prime: int) -> int:
        """Position of the first cached prime >= prime (bisection)."""
        return bisect_left(self._primes, prime)

    def as_array(self) -> np.ndarray:
        """Return the cached primes as a numpy array of the cache's dtype."""
        return np.array(self._primes, dtype=self.dtype)


def append_next_prime(known_primes: PrimeCache) -> int:
    """
    Append the next prime after the last cached one and return it.

    Only odd candidates are tried: 2 and 3 are seeded directly, after which
    each candidate is trial-divided by cached primes until either one divides
    it (composite, try candidate + 2) or the candidate is below p^2 (prime).
    """
    if len(known_primes) == 0:
        known_primes.append(2)
        return 2
    if len(known_primes) == 1:
        known_primes.append(3)
        return 3

    candidate = known_primes.coerce(known_primes.last + 2)
    while True:
        for p in known_primes:
            # Prime: no prime up to its square root divides it
            if candidate < known_primes.square(p):
                known_primes.append(candidate)
                return candidate
            # Composite: divisible by a prime
            if candidate % p == 0:
                candidate = known_primes.coerce(candidate + 2)
                break


def prime_at_index(index: int, known_primes: Optional[PrimeCache] = None) -> int:
    """
    Return the prime at 0-based ``index`` (index 0 is 2).

    Parameters
    ----------
    index : int
        Position in the prime sequence.
    known_primes : PrimeCache, optional
        Cache to read and extend. A disposable cache is used if omitted.

    Returns
    -------
    int
        The prime at that position.
    """
    if known_primes is None:
        known_primes = PrimeCache()
    index = as_integer(index)
    if index < 0:
        raise ValueError(f"prime index must be non-negative, got {index}")

    while len(known_primes) <= index:
        append_next_prime(known_primes)
    return known_primes[index]


def index_of_prime(prime: int, known_primes: Optional[PrimeCache] = None) -> int:
    """
    Return the 0-based position of ``prime`` in the prime sequence.

    ``prime`` must actually be prime. This is asserted; under ``python -O``
    the assertion is stripped and the result for a non-prime is undefined.

    Parameters
    ----------
    prime : int
        A prime number.
    known_primes : PrimeCache, optional
        Cache to read and extend. A disposable cache is used if omitted.

    Returns
    -------
    int
        Position such that ``prime_at_index(result) == prime``.
    """
    if known_primes is None:
        known_primes = PrimeCache()
    prime = known_primes.coerce(prime)

    while len(known_primes) == 0 or known_primes.last < prime:
        append_next_prime(known_primes)

    # Fails for a composite, or for 0 or 1
    assert prime in known_primes, f"{prime} is not prime"
    return known_primes.index(prime)


def next_prime(prime: int, known_primes: Optional[PrimeCache] = None) -> int:
    """Return the smallest prime strictly greater than ``prime`` (which must be prime)."""
    if known_primes is None:
        known_primes = PrimeCache()
    i = index_of_prime(prime, known_primes)
    return prime_at_index(i + 1, known_primes)


def is_prime(candidate: int, known_primes: Optional[PrimeCache] = None) -> bool:
    """
    Test ``candidate`` for primality by trial division with cached primes.

    Cheaper than ``index_of_prime`` for a single check: the cache only grows
    up to the square root of the candidate, not to the candidate itself.
    0 and 1 are not prime.

    Parameters
    ----------
    candidate : int
        Value to test.
    known_primes : PrimeCache, optional
        Cache to read and extend. A disposable cache is used if omitted.

    Returns
    -------
    bool
        True iff candidate is prime.
    """
    if known_primes is None:
        known_primes = PrimeCache()
    candidate = known_primes.coerce(candidate)

    # Short-circuit known primes
    if candidate in known_primes:
        return True
    if candidate < 2:
        return False

    i = 0
    divisor = prime_at_index(i, known_primes)
    while candidate >= known_primes.square(divisor):
        if candidate % divisor == 0:
            return False
        i += 1
        divisor = prime_at_index(i, known_primes)
    return True


def prime_flags_upto(N: int) -> np.ndarray:
    """
    Return boolean array where flags[i] is True iff i is prime.

    Sieve of Eratosthenes. Independent of PrimeCache; used to check it.

    Parameters
    ----------
    N : int
        Upper bound (inclusive).

    Returns
    -------
    np.ndarray
        Boolean array of length N+1.
    """
    flags = np.ones(N + 1, dtype=bool)
    flags[:2] = False
    for p in range(2, int(N**0.5) + 1):
        if flags[p]:
            flags[p*p::p] = False
    return flags


def primes_upto(N: int) -> np.ndarray:
    """Return array of all primes <= N (reference sieve)."""
    return np.nonzero(prime_flags_upto(N))[0]
