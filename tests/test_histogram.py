"""
Tests for data_ops.histogram: binning against explicit edges.

Run with: python -m pytest tests/test_histogram.py -v
"""

import numpy as np
import pytest

from data_ops.histogram import BinSet, OverflowPolicy, bin_counts

EDGES = [0, 1, 2, 3]
SAMPLES = [0.5, 1.5, 2.5, -1, 5]


class TestOverflowPolicies:
    def test_clamp_folds_out_of_range_samples(self):
        counts = bin_counts(EDGES, SAMPLES, OverflowPolicy.CLAMP)
        assert counts.tolist() == [2, 1, 1, 1]

    def test_strict_drops_out_of_range_samples(self):
        counts = bin_counts(EDGES, SAMPLES, OverflowPolicy.STRICT)
        assert counts.tolist() == [1, 1, 1, 0]

    def test_clamp_is_default(self):
        assert bin_counts(EDGES, SAMPLES).tolist() == [2, 1, 1, 1]

    @pytest.mark.parametrize("overflow, expected", [
        (True, [2, 1, 1, 1]),
        (False, [1, 1, 1, 0]),
        ("clamp", [2, 1, 1, 1]),
        ("STRICT", [1, 1, 1, 0]),
    ])
    def test_policy_coercion(self, overflow, expected):
        assert bin_counts(EDGES, SAMPLES, overflow).tolist() == expected

    def test_unknown_policy_rejected(self):
        with pytest.raises(ValueError):
            bin_counts(EDGES, SAMPLES, "wrap")


class TestBoundaries:
    def test_edge_value_belongs_to_upper_bin(self):
        counts = bin_counts(EDGES, [1.0, 2.0], OverflowPolicy.STRICT)
        assert counts.tolist() == [0, 1, 1, 0]

    def test_last_edge_excluded_under_strict(self):
        assert bin_counts(EDGES, [3.0], OverflowPolicy.STRICT).tolist() == [0, 0, 0, 0]

    def test_last_edge_clamped_to_last_bin(self):
        assert bin_counts(EDGES, [3.0], OverflowPolicy.CLAMP).tolist() == [0, 0, 0, 1]

    def test_first_edge_counted_once(self):
        assert bin_counts(EDGES, [0.0], OverflowPolicy.CLAMP).tolist() == [1, 0, 0, 0]

    def test_zero_sample_is_data_not_terminator(self):
        counts = bin_counts(EDGES, [0.5, 0.0, 1.5, 2.5], OverflowPolicy.STRICT)
        assert counts.tolist() == [2, 1, 1, 0]

    def test_more_samples_than_bins(self):
        samples = np.linspace(0, 2.99, 300)
        counts = bin_counts(EDGES, samples, OverflowPolicy.STRICT)
        assert counts.sum() == 300
        assert counts[-1] == 0

    def test_nan_samples_ignored(self):
        counts = bin_counts(EDGES, [np.nan, 0.5, np.nan], OverflowPolicy.CLAMP)
        assert counts.tolist() == [1, 0, 0, 0]


class TestDegenerateInput:
    def test_empty_edges(self):
        counts = bin_counts([], SAMPLES)
        assert counts.size == 0

    def test_missing_samples_gives_zero_counts(self):
        assert bin_counts(EDGES, None).tolist() == [0, 0, 0, 0]

    def test_empty_samples(self):
        assert bin_counts(EDGES, []).tolist() == [0, 0, 0, 0]

    def test_single_edge(self):
        assert bin_counts([1.0], [0, 1, 2], OverflowPolicy.CLAMP).tolist() == [3]
        assert bin_counts([1.0], [0, 1, 2], OverflowPolicy.STRICT).tolist() == [0]

    def test_descending_edges_rejected(self):
        with pytest.raises(ValueError):
            bin_counts([3, 2, 1], [1.5])

    def test_counts_are_recomputed_each_call(self):
        first = bin_counts(EDGES, SAMPLES)
        second = bin_counts(EDGES, SAMPLES)
        assert first.tolist() == second.tolist()
        assert first is not second


class TestBinSet:
    def test_from_samples(self):
        bins = BinSet.from_samples(EDGES, SAMPLES, OverflowPolicy.STRICT)
        assert len(bins) == 4
        assert bins.edges.tolist() == [0.0, 1.0, 2.0, 3.0]
        assert bins.counts.tolist() == [1, 1, 1, 0]
        assert bins.total == 3
