#!/usr/bin/env python3
"""
Find the integer with the longest prime-power description.

Scans [start, bound], printing "<description> = <n>" every time a longer
description is found. The last line printed is the answer.

Usage:
    python run_scan.py
    python run_scan.py --bound 1e8
    python run_scan.py --config config/custom.yaml --csv --plot
"""

import argparse
import time
from decimal import Decimal, InvalidOperation
from pathlib import Path

import numpy as np
import yaml

from factorscan.primes import PrimeCache
from factorscan.scan import longest_description_scan, format_record, records_to_frame

DTYPES = {
    'uint8': np.uint8,
    'uint16': np.uint16,
    'uint32': np.uint32,
    'uint64': np.uint64,
}


def parse_count(value) -> int:
    """
    Read a range endpoint given as an int, an integral float, or a string.

    Strings may be plain integers ("100000", read exactly) or scientific
    notation ("1e8", as PyYAML leaves it). Fractional values raise ValueError.
    """
    if isinstance(value, bool):
        raise ValueError(f"{value!r} is not a count")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"{value!r} is not a whole number")
        return int(value)

    text = str(value).strip()
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = Decimal(text)
    except InvalidOperation:
        raise ValueError(f"{value!r} is not a number") from None
    if not number.is_finite() or number != number.to_integral_value():
        raise ValueError(f"{value!r} is not a whole number")
    return int(number)


def load_config(path, overrides: dict) -> dict:
    """Read the YAML config and apply command-line overrides that were given."""
    with open(path) as f:
        config = yaml.safe_load(f) or {}

    for key, value in overrides.items():
        if value is not None:
            config[key] = value

    config['bound'] = parse_count(config.get('bound', 100000))
    config['start'] = parse_count(config.get('start', 2))
    config.setdefault('dtype', 'uint64')
    config.setdefault('output_dir', 'data/results')
    config.setdefault('save_csv', False)
    config.setdefault('save_plot', False)

    if config['dtype'] not in DTYPES:
        raise ValueError(f"Unknown dtype {config['dtype']!r}, expected one of {sorted(DTYPES)}")
    return config


def print_record(record):
    print(format_record(record), flush=True)


def main():
    parser = argparse.ArgumentParser(description='Find the longest prime factor description')
    parser.add_argument('--config', type=str, default='config/default.yaml',
                        help='Path to config file')
    parser.add_argument('--bound', type=parse_count, default=None,
                        help='Inclusive upper end of the scan (e.g. 1e5)')
    parser.add_argument('--start', type=parse_count, default=None,
                        help='Inclusive lower end of the scan')
    parser.add_argument('--dtype', type=str, default=None, choices=sorted(DTYPES),
                        help='Integer width of the prime cache')
    parser.add_argument('--csv', dest='save_csv', action='store_true', default=None,
                        help='Save records.csv to output_dir')
    parser.add_argument('--plot', dest='save_plot', action='store_true', default=None,
                        help='Save a record length figure to output_dir')
    parser.add_argument('--verbose', action='store_true',
                        help='Print configuration and timing')
    args = parser.parse_args()

    config = load_config(args.config, {
        'bound': args.bound,
        'start': args.start,
        'dtype': args.dtype,
        'save_csv': args.save_csv,
        'save_plot': args.save_plot,
    })

    if args.verbose:
        print("=" * 60)
        print("Longest Prime Factor Description")
        print("=" * 60)
        print(f"  range = [{config['start']:,}, {config['bound']:,}]")
        print(f"  dtype = {config['dtype']}")
        print()

    known_primes = PrimeCache(DTYPES[config['dtype']])
    start = time.time()
    records = longest_description_scan(config['bound'], config['start'],
                                       known_primes, report=print_record)
    elapsed = time.time() - start

    if config['save_csv'] or config['save_plot']:
        output_dir = Path(config['output_dir'])
        output_dir.mkdir(parents=True, exist_ok=True)
        df = records_to_frame(records)

        if config['save_csv']:
            df.to_csv(output_dir / 'records.csv', index=False)

        if config['save_plot'] and len(df) > 0:
            from factorscan.plotting import plot_record_lengths

            figures_dir = output_dir / 'figures'
            figures_dir.mkdir(exist_ok=True)
            plot_record_lengths(df, figures_dir / 'record_lengths.png')

    if args.verbose:
        print()
        print("=" * 60)
        print(f"Records: {len(records)}")
        print(f"Primes cached: {len(known_primes):,} (largest {known_primes.last})")
        print(f"Total runtime: {elapsed:.1f}s")


if __name__ == '__main__':
    main()
