"""
Longest-description scan.

Responsibility: walking an integer range, factoring every value with one shared
prime cache, and keeping the value whose description is longest so far.
"""

from typing import Callable, Iterator, List, NamedTuple, Optional

import pandas as pd

from .primes import PrimeCache
from .factorization import prime_factors, omega, Omega
from .description import prime_factor_description


class ScanRecord(NamedTuple):
    """A value whose description beat every earlier value in the scan."""
    n: int
    factors: List[int]
    description: str

    @property
    def length(self) -> int:
        return len(self.description)


def format_record(record: ScanRecord) -> str:
    """Render a record as "<description> = <n>"."""
    return f"{record.description} = {record.n}"


def iter_longest_descriptions(bound: int, start: int = 2,
                              known_primes: Optional[PrimeCache] = None) -> Iterator[ScanRecord]:
    """
    Yield a record each time a strictly longer description is found.

    Values are scanned in increasing order over [start, bound]. All of them
    are factored against the same cache, so no prime is discovered twice.

    Parameters
    ----------
    bound : int
        Upper end of the range (inclusive).
    start : int
        Lower end of the range (inclusive, default 2).
    known_primes : PrimeCache, optional
        Cache shared by the whole scan. A fresh one is created if omitted;
        it still lives for the whole scan.

    Yields
    ------
    ScanRecord
        Records in discovery order; the last one is the longest.
    """
    if known_primes is None:
        known_primes = PrimeCache()
    start = known_primes.coerce(start)
    bound = known_primes.coerce(bound)

    best_length = 0
    for n in range(start, bound + 1):
        factors = prime_factors(n, known_primes)
        description = prime_factor_description(factors)
        if len(description) > best_length:
            best_length = len(description)
            yield ScanRecord(n, factors, description)


def longest_description_scan(bound: int, start: int = 2,
                             known_primes: Optional[PrimeCache] = None,
                             report: Optional[Callable[[ScanRecord], None]] = None) -> List[ScanRecord]:
    """
    Run a full scan and return every record found.

    Parameters
    ----------
    bound : int
        Upper end of the range (inclusive).
    start : int
        Lower end of the range (inclusive, default 2).
    known_primes : PrimeCache, optional
        Cache shared by the whole scan.
    report : callable, optional
        Called with each record as soon as it is found.

    Returns
    -------
    list
        Records in discovery order. Empty if the range is empty.
    """
    records = []
    for record in iter_longest_descriptions(bound, start, known_primes):
        if report is not None:
            report(record)
        records.append(record)
    return records


def records_to_frame(records: List[ScanRecord]) -> pd.DataFrame:
    """
    Tabulate scan records.

    Returns
    -------
    pd.DataFrame
        Columns: n, description, length, num_factors, num_distinct.
    """
    rows = []
    for record in records:
        rows.append({
            'n': record.n,
            'description': record.description,
            'length': record.length,
            'num_factors': Omega(record.factors),
            'num_distinct': omega(record.factors)
        })
    return pd.DataFrame(rows, columns=['n', 'description', 'length',
                                       'num_factors', 'num_distinct'])
