"""
Tests for the longest-description scan and its reporting.
"""

import sys

import matplotlib
matplotlib.use('Agg')

import numpy as np
import pandas as pd
import pytest

from factorscan.primes import PrimeCache
from factorscan.factorization import prime_factors
from factorscan.description import prime_factor_description
from factorscan.scan import (
    ScanRecord,
    iter_longest_descriptions,
    longest_description_scan,
    format_record,
    records_to_frame,
)
from factorscan.plotting import plot_record_lengths

from run_scan import load_config, parse_count, main


# Record holders for [2, 60]: "2", "2^2", "2 * 3", "2^2 * 3", "2 * 3 * 5", "2^2 * 3 * 5"
SMALL_RECORDS = [2, 4, 6, 12, 30, 60]


class TestScanSmallRange:
    """Record sequence over a range small enough to check by hand."""

    def test_record_holders(self):
        records = longest_description_scan(60)
        assert [r.n for r in records] == SMALL_RECORDS

    def test_record_descriptions(self):
        records = longest_description_scan(60)
        assert records[-1].description == "2^2 * 3 * 5"
        assert records[-1].factors == [2, 2, 3, 5]
        assert records[-1].length == 11

    def test_lengths_strictly_increase(self):
        records = longest_description_scan(5000)
        lengths = [r.length for r in records]
        assert all(a < b for a, b in zip(lengths, lengths[1:]))
        values = [r.n for r in records]
        assert values == sorted(values)

    def test_report_called_per_record(self):
        seen = []
        records = longest_description_scan(60, report=seen.append)
        assert seen == records

    def test_generator_matches_list(self):
        assert list(iter_longest_descriptions(1000)) == longest_description_scan(1000)

    def test_custom_start(self):
        records = longest_description_scan(60, start=31)
        assert records[0].n == 31
        assert records[-1].n == 60

    def test_empty_range(self):
        assert longest_description_scan(1, start=2) == []

    def test_shared_cache_is_used(self):
        known_primes = PrimeCache()
        longest_description_scan(10000, known_primes=known_primes)
        # Only primes up to sqrt(10000) plus short-circuit hits are needed
        assert 0 < len(known_primes) < 100
        assert known_primes.last >= 97

    def test_bound_too_wide_overflows(self):
        with pytest.raises(OverflowError):
            longest_description_scan(70000, known_primes=PrimeCache(np.uint16))


class TestScanFullRange:
    """Scan of [2, 100000]."""

    def test_final_record_is_longest(self):
        records = longest_description_scan(100000)
        assert len(records) > 0

        known_primes = PrimeCache()
        longest = max(len(prime_factor_description(prime_factors(n, known_primes)))
                      for n in range(2, 100001))
        assert records[-1].length == longest


class TestReporting:
    """Output formatting, tables and figures."""

    def test_format_record(self):
        record = ScanRecord(360, [2, 2, 2, 3, 3, 5], "2^3 * 3^2 * 5")
        assert format_record(record) == "2^3 * 3^2 * 5 = 360"

    def test_records_to_frame(self):
        df = records_to_frame(longest_description_scan(60))
        assert list(df.columns) == ['n', 'description', 'length', 'num_factors', 'num_distinct']
        assert df['n'].tolist() == SMALL_RECORDS
        last = df.iloc[-1]
        assert last['length'] == 11
        assert last['num_factors'] == 4
        assert last['num_distinct'] == 3

    def test_records_to_frame_empty(self):
        df = records_to_frame([])
        assert len(df) == 0
        assert 'description' in df.columns

    def test_plot_record_at_zero(self, tmp_path):
        """A scan starting at 0 puts a record at n=0 on the x axis."""
        df = records_to_frame(longest_description_scan(100, start=0))
        assert df['n'].iloc[0] == 0
        output = tmp_path / 'record_lengths.png'
        plot_record_lengths(df, output)
        assert output.exists()

    def test_plot_record_lengths(self, tmp_path):
        df = records_to_frame(longest_description_scan(1000))
        output = tmp_path / 'record_lengths.png'
        fig = plot_record_lengths(df, output)
        assert output.exists()
        assert len(fig.axes) == 2


class TestConfig:
    """YAML config and command-line overrides."""

    def test_defaults_applied(self, tmp_path):
        path = tmp_path / 'config.yaml'
        path.write_text("bound: 500\n")
        config = load_config(path, {})
        assert config['bound'] == 500
        assert config['start'] == 2
        assert config['dtype'] == 'uint64'
        assert config['save_csv'] is False

    def test_overrides_win(self, tmp_path):
        path = tmp_path / 'config.yaml'
        path.write_text("bound: 500\ndtype: uint32\n")
        config = load_config(path, {'bound': 1e3, 'dtype': None, 'save_csv': True})
        assert config['bound'] == 1000
        assert config['dtype'] == 'uint32'
        assert config['save_csv'] is True

    def test_unknown_dtype(self, tmp_path):
        path = tmp_path / 'config.yaml'
        path.write_text("dtype: int64\n")
        with pytest.raises(ValueError):
            load_config(path, {})

    def test_scientific_bound_in_yaml(self, tmp_path):
        """PyYAML reads 1e5 (no dot) as a string."""
        path = tmp_path / 'config.yaml'
        path.write_text("bound: 1e5\nstart: 1e1\n")
        config = load_config(path, {})
        assert config['bound'] == 100000
        assert config['start'] == 10

    def test_fractional_bound_rejected(self, tmp_path):
        path = tmp_path / 'config.yaml'
        path.write_text("bound: 100\nstart: 2.5\n")
        with pytest.raises(ValueError):
            load_config(path, {})


class TestParseCount:
    """Range endpoints from YAML or the command line."""

    def test_int_and_integral_float(self):
        assert parse_count(100000) == 100000
        assert parse_count(1e5) == 100000

    def test_strings(self):
        assert parse_count('100000') == 100000
        assert parse_count('1e8') == 100000000
        assert parse_count('2.5e3') == 2500

    def test_large_integer_string_is_exact(self):
        assert parse_count(str(2**60 + 1)) == 2**60 + 1
        assert parse_count('1e20') == 10**20

    def test_fractions_rejected(self):
        for value in (2.5, '2.5', '1e-1'):
            with pytest.raises(ValueError):
                parse_count(value)

    def test_garbage_rejected(self):
        for value in ('abc', 'inf', 'nan', True):
            with pytest.raises(ValueError):
                parse_count(value)


SMALL_RECORD_LINES = [
    '2 = 2',
    '2^2 = 4',
    '2 * 3 = 6',
    '2^2 * 3 = 12',
    '2 * 3 * 5 = 30',
    '2^2 * 3 * 5 = 60',
]


class TestMain:
    """The run_scan.py entry point: stdout lines and optional outputs."""

    def write_config(self, tmp_path, bound=60):
        path = tmp_path / 'config.yaml'
        path.write_text(f"bound: {bound}\noutput_dir: {tmp_path / 'results'}\n")
        return path

    def run(self, monkeypatch, *argv):
        monkeypatch.setattr(sys, 'argv', ['run_scan.py', *argv])
        main()

    def test_stdout_is_record_lines_only(self, tmp_path, monkeypatch, capsys):
        config = self.write_config(tmp_path)
        self.run(monkeypatch, '--config', str(config))
        out = capsys.readouterr().out
        assert out.splitlines() == SMALL_RECORD_LINES
        assert not (tmp_path / 'results').exists()

    def test_bound_override(self, tmp_path, monkeypatch, capsys):
        config = self.write_config(tmp_path, bound=1000)
        self.run(monkeypatch, '--config', str(config), '--bound', '60')
        assert capsys.readouterr().out.splitlines() == SMALL_RECORD_LINES

    def test_scientific_start_override(self, tmp_path, monkeypatch, capsys):
        config = self.write_config(tmp_path)
        self.run(monkeypatch, '--config', str(config), '--start', '3e1')
        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == '2 * 3 * 5 = 30'
        assert lines[-1] == '2^2 * 3 * 5 = 60'

    def test_verbose_adds_summary(self, tmp_path, monkeypatch, capsys):
        config = self.write_config(tmp_path)
        self.run(monkeypatch, '--config', str(config), '--verbose')
        out = capsys.readouterr().out
        assert 'Total runtime' in out
        for line in SMALL_RECORD_LINES:
            assert line in out.splitlines()

    def test_csv_written(self, tmp_path, monkeypatch, capsys):
        config = self.write_config(tmp_path)
        self.run(monkeypatch, '--config', str(config), '--csv')
        assert capsys.readouterr().out.splitlines() == SMALL_RECORD_LINES

        df = pd.read_csv(tmp_path / 'results' / 'records.csv')
        assert df['n'].tolist() == SMALL_RECORDS
        assert df['description'].iloc[-1] == '2^2 * 3 * 5'

    def test_plot_written(self, tmp_path, monkeypatch, capsys):
        config = self.write_config(tmp_path)
        self.run(monkeypatch, '--config', str(config), '--plot')
        assert capsys.readouterr().out.splitlines() == SMALL_RECORD_LINES
        assert (tmp_path / 'results' / 'figures' / 'record_lengths.png').exists()
        assert not (tmp_path / 'results' / 'records.csv').exists()
