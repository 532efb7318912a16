"""
Primality predicate used to forbid pyramid cells.

Trial division by 6k ± 1 up to sqrt(n).  Pure function, no caching.
"""

from __future__ import annotations


def is_prime(n: int) -> bool:
    """Return True iff *n* is prime.

    Parameters
    ----------
    n : int
        Any integer.  Values <= 1 (including negatives) are never prime.

    Returns
    -------
    bool
    """
    if n <= 1:
        return False
    if n <= 3:
        return True
    if n % 2 == 0 or n % 3 == 0:
        return False

    i = 5
    while i * i <= n:
        if n % i == 0 or n % (i + 2) == 0:
            return False
        i += 6
    return True
