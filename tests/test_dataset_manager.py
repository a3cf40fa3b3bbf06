"""Tests for the synthetic and static datasets behind each stage."""

from __future__ import annotations

import random
import unittest

from model_lab.dataset_manager import (
    build_decomposition_series,
    build_default_datasets,
    build_evaluation_series,
    build_ingest_series,
    build_stationarity_results,
)
from model_lab.schemas import ModelFamily


class TestSyntheticSeries(unittest.TestCase):
    def test_ingest_series_shape_and_bounds(self):
        series = build_ingest_series(30, random.Random(1))
        self.assertEqual([point.day for point in series], list(range(1, 31)))
        for point in series:
            # base +/- amplitude +/- half the noise width
            self.assertTrue(60 <= point.bookings <= 100)
            self.assertTrue(92.5 <= point.revenue <= 147.5)

    def test_decomposition_series(self):
        series = build_decomposition_series(24, random.Random(1))
        self.assertEqual(series[0].trend, 100)
        self.assertEqual(series[-1].trend, 146)
        self.assertAlmostEqual(series[0].seasonal, 0.0)
        self.assertAlmostEqual(series[3].seasonal, 10.0)
        self.assertTrue(all(-4 <= point.residual <= 4 for point in series))

    def test_evaluation_series_is_deterministic(self):
        self.assertEqual(build_evaluation_series(18), build_evaluation_series(18))
        self.assertEqual(build_evaluation_series(18)[0].actual, 110)

    def test_same_seed_same_datasets(self):
        self.assertEqual(build_default_datasets(seed=3), build_default_datasets(seed=3))

    def test_different_seeds_differ(self):
        self.assertNotEqual(build_default_datasets(seed=3).ingest, build_default_datasets(seed=4).ingest)


class TestStaticData(unittest.TestCase):
    def setUp(self):
        self.datasets = build_default_datasets(seed=0)

    def test_candidates(self):
        names = [candidate.name for candidate in self.datasets.candidates]
        self.assertEqual(names, [ModelFamily.ARIMA, ModelFamily.SARIMA, ModelFamily.SARIMAX])

    def test_correlation_matrix(self):
        matrix = self.datasets.correlations
        self.assertEqual(matrix.coefficient("Rainfall", "Booking Date"), -0.65)
        self.assertEqual(matrix.coefficient("Holiday", "Holiday"), 1.0)

    def test_stationarity_results(self):
        original, differenced = build_stationarity_results()
        self.assertFalse(original.is_stationary)
        self.assertTrue(differenced.is_stationary)
        self.assertEqual(differenced.differencing_order, 1)
        self.assertLess(differenced.p_value, 0.05)


if __name__ == "__main__":
    unittest.main()
