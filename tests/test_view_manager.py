"""Tests for the per-step view dispatch table."""

from __future__ import annotations

import unittest
from unittest.mock import patch

from model_lab.custom_exceptions import InvalidStepIndexError
from model_lab.dataset_manager import build_default_datasets
from model_lab.schemas import CorrelationBand, ModelCandidate, ModelFamily, Step
from model_lab.settings import settings
from model_lab.statistics_manager import build_model_comparison, compute_summary
from model_lab.view_manager import STEP_VIEWS, build_view


class TestStepViews(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.datasets = build_default_datasets(seed=42)

    def _view(self, step, model=ModelFamily.SARIMAX):
        return build_view(step, self.datasets, model)

    def test_every_step_has_a_builder(self):
        self.assertEqual(set(STEP_VIEWS), set(Step))
        for step in Step:
            with self.subTest(step=step):
                self.assertEqual(self._view(step).step, step)

    def test_unknown_step_rejected(self):
        for bad in (0, 7, "ingest"):
            with self.subTest(step=bad):
                with self.assertRaises(InvalidStepIndexError):
                    self._view(bad)

    def test_ingest_view(self):
        view = self._view(Step.INGEST)
        self.assertEqual(view.observation_count, 30)
        self.assertEqual(view.summary, compute_summary(self.datasets.ingest, "bookings"))
        self.assertIn("30 observation points", view.insight)
        self.assertIn(str(view.summary.std_dev), view.insight)

    def test_correlations_view(self):
        view = self._view(Step.CORRELATIONS)
        self.assertEqual(len(view.cells), 9)
        self.assertEqual(len(view.legend), 4)
        self.assertEqual(view.strongest_pair.band, CorrelationBand.STRONG_NEGATIVE)

    def test_stationarity_view(self):
        view = self._view(Step.STATIONARITY)
        self.assertEqual(view.integration_order, 1)
        self.assertEqual(len(view.differenced), len(self.datasets.decomposition) - 1)
        self.assertTrue(all(value == 2.0 for value in view.differenced))
        self.assertIn("stationary", view.insight)

    def test_decomposition_view(self):
        view = self._view(Step.DECOMPOSITION)
        self.assertEqual(set(view.components), {"trend", "seasonal", "residual"})
        self.assertEqual(view.components["trend"].min, 100)
        self.assertEqual(view.components["trend"].max, 146)
        self.assertEqual([tab.key for tab in view.analysis], ["trend", "seasonality", "residuals"])

    def test_training_view(self):
        view = self._view(Step.TRAINING, ModelFamily.ARIMA)
        self.assertEqual(view.best_model, ModelFamily.SARIMAX)
        self.assertEqual(view.selected_model, ModelFamily.ARIMA)
        self.assertEqual(len(view.comparison), 3)
        self.assertIn("95.8% accuracy", view.insight)

    def test_evaluation_view(self):
        view = self._view(Step.EVALUATION)
        self.assertEqual(view.selected.name, ModelFamily.SARIMAX)
        self.assertEqual(view.accuracy, 95.8)
        self.assertEqual(len(view.series), 18)
        self.assertEqual(sum(bucket.count for bucket in view.residual_histogram), 48)

    def test_evaluation_accuracy_follows_display_precision(self):
        datasets = self.datasets.model_copy(
            update={"candidates": (ModelCandidate(
                name=ModelFamily.SARIMAX, order_label="SARIMAX", aic=1142.1, wmape=4.234,
                r2=0.89, rmse=142.5, mae=118.3, training_time_seconds=3.5,
            ),)}
        )
        for decimals, expected in ((1, 95.8), (2, 95.77)):
            with self.subTest(decimals=decimals):
                with patch.object(settings, "display_decimals", decimals):
                    view = build_view(Step.EVALUATION, datasets, ModelFamily.SARIMAX)
                    row = build_model_comparison(datasets.candidates, baseline=ModelFamily.SARIMAX)[0]
                self.assertEqual(view.accuracy, expected)
                self.assertEqual(view.accuracy, row.accuracy)


if __name__ == "__main__":
    unittest.main()
