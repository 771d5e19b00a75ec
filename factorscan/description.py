"""
Factor descriptions.

Responsibility: rendering factor lists as text. No factoring here.
"""

from typing import List

from .factorization import factor_powers

SEPARATOR = ' * '


def prime_factor_description(factors: List[int]) -> str:
    """
    Render a factor list in "p^a * q^b" form.

    Consecutive equal factors collapse to one power token; an exponent of 1
    is omitted.

    Parameters
    ----------
    factors : list
        Non-decreasing factor list, as returned by prime_factors.

    Returns
    -------
    str
        e.g. [2, 2, 2, 3, 3, 5] -> "2^3 * 3^2 * 5". Empty list -> "".
    """
    tokens = []
    for p, k in factor_powers(factors):
        tokens.append(f"{p}^{k}" if k > 1 else str(p))
    return SEPARATOR.join(tokens)
