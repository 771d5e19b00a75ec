"""
Factorization utilities.

Responsibility: factor lists, cleanly separated.
This file must not know about descriptions or scans.
"""

from itertools import groupby
from typing import List, Optional, Tuple

from .primes import PrimeCache, prime_at_index


def prime_factors(n: int, known_primes: Optional[PrimeCache] = None) -> List[int]:
    """
    Factor n into its non-decreasing list of prime factors.

    Trial division by successive cached primes, growing the cache on demand.
    Division stops once the residual is below divisor^2; a residual left over
    at that point is itself prime and becomes the final factor.

    Parameters
    ----------
    n : int
        Integer to factor.
    known_primes : PrimeCache, optional
        Cache to read and extend. A disposable cache is used if omitted, which
        rediscovers every prime up to sqrt(n) on each call.

    Returns
    -------
    list
        Prime factors with multiplicity, product equal to n.
        0 and 1 have no prime factorization and return [n].
    """
    if known_primes is None:
        known_primes = PrimeCache()
    n = known_primes.coerce(n)

    if n == 0 or n == 1:
        return [n]
    # Short-circuit known primes
    if n in known_primes:
        return [n]

    residual = n
    factors = []

    i = 0
    divisor = prime_at_index(i, known_primes)
    while residual >= known_primes.square(divisor):
        while residual % divisor == 0:
            residual //= divisor
            factors.append(divisor)
        i += 1
        divisor = prime_at_index(i, known_primes)

    if residual > 1:
        factors.append(residual)
    return factors


def factor_powers(factors: List[int]) -> List[Tuple[int, int]]:
    """
    Group a non-decreasing factor list into (prime, exponent) pairs.

    Parameters
    ----------
    factors : list
        Output of prime_factors.

    Returns
    -------
    list
        [(p, k), ...] in order of first appearance.
    """
    return [(p, len(list(run))) for p, run in groupby(factors)]


def omega(factors: List[int]) -> int:
    """
    Count distinct prime factors (little omega).

    [0] and [1] are not factorizations and count as 0.
    """
    if factors in ([0], [1]):
        return 0
    return len(factor_powers(factors))


def Omega(factors: List[int]) -> int:
    """Count prime factors with multiplicity (big Omega). 0 for [0] and [1]."""
    if factors in ([0], [1]):
        return 0
    return len(factors)
